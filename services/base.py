from typing import Iterable, Optional

from bson import ObjectId

from database import Database
from errors import BadRequest, INVALID_ID


def validate_object_id(_id: str) -> str:
    if not ObjectId.is_valid(_id) or len(str(_id)) != 24:
        raise BadRequest(INVALID_ID)
    return _id


def public_doc(doc: Optional[dict], fields: Iterable[str]) -> Optional[dict]:
    """Project a stored document onto its API shape (``_id`` exposed as ``id``)."""
    if doc is None:
        return None
    out = {"id": str(doc["_id"])}
    for field in fields:
        out[field] = doc.get(field)
    out["createdAt"] = doc.get("createdAt")
    out["updatedAt"] = doc.get("updatedAt")
    return out


class Service:
    collection = ""

    def __init__(self, db: Database):
        self.db = db
