"""
Database Helper Functions

MongoDB access shared by every service. A Database instance is created once
at startup and handed to the services; nothing here holds business logic.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Union, Optional, Dict, Any, List

import pymongo
from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo import MongoClient, ReturnDocument

from config import Settings

TRANSACTION_TIMEOUT_SECONDS = 30

UNIQUE_FIELDS = (
    ("order", "orderNumber"),
    ("user", "email"),
    ("category", "name"),
)


def _to_dict(data: Union[BaseModel, dict]) -> dict:
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True)
    return dict(data)


def _session_opts(session) -> dict:
    return {"session": session} if session is not None else {}


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class Database:
    def __init__(self, client: MongoClient, name: str, use_transactions: bool = True):
        self.client = client
        self.db = client[name]
        self.use_transactions = use_transactions

    def __getitem__(self, collection_name: str):
        return self.db[collection_name]

    def ping(self) -> List[str]:
        return self.db.list_collection_names()

    @contextmanager
    def transaction(self, timeout: float = TRANSACTION_TIMEOUT_SECONDS):
        """Run the enclosed writes atomically; yields the session to pass along.

        Standalone servers cannot run multi-document transactions, so with
        use_transactions off the block runs unsessioned and yields None.
        """
        with pymongo.timeout(timeout):
            if not self.use_transactions:
                yield None
                return
            with self.client.start_session() as session:
                with session.start_transaction():
                    yield session

    # CRUD helpers

    def create_document(self, collection_name: str, data: Union[BaseModel, dict], session=None) -> str:
        payload = _to_dict(data)
        now = now_utc()
        payload["createdAt"] = now
        payload["updatedAt"] = now
        result = self.db[collection_name].insert_one(payload, **_session_opts(session))
        return str(result.inserted_id)

    def get_documents(
        self,
        collection_name: str,
        filter_dict: Optional[dict] = None,
        limit: Optional[int] = None,
        sort: Optional[list] = None,
        skip: Optional[int] = None,
    ) -> List[dict]:
        cursor = self.db[collection_name].find(filter_dict or {})
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(int(skip))
        if limit:
            cursor = cursor.limit(int(limit))
        return [serialize_doc(doc) for doc in cursor]

    def get_document(self, collection_name: str, filter_dict: dict, sort: Optional[list] = None) -> Optional[dict]:
        docs = self.get_documents(collection_name, filter_dict, limit=1, sort=sort)
        return docs[0] if docs else None

    def get_document_by_id(self, collection_name: str, _id: str) -> Optional[dict]:
        oid = to_object_id(_id)
        if oid is None:
            return None
        doc = self.db[collection_name].find_one({"_id": oid})
        return serialize_doc(doc) if doc else None

    def count_documents(self, collection_name: str, filter_dict: Optional[dict] = None) -> int:
        return self.db[collection_name].count_documents(filter_dict or {})

    def update_document(self, collection_name: str, _id: str, update_data: Dict[str, Any], session=None) -> bool:
        update = {"$set": _to_dict(update_data)}
        update["$set"]["updatedAt"] = now_utc()
        result = self.db[collection_name].update_one(
            {"_id": ObjectId(_id)}, update, **_session_opts(session)
        )
        return result.matched_count > 0

    def update_documents(self, collection_name: str, filter_dict: dict, update_data: Dict[str, Any], session=None) -> int:
        update = {"$set": dict(update_data, updatedAt=now_utc())}
        result = self.db[collection_name].update_many(filter_dict, update, **_session_opts(session))
        return result.modified_count

    def increment_fields(self, collection_name: str, filter_dict: dict, amounts: Dict[str, int], session=None) -> bool:
        result = self.db[collection_name].update_one(
            filter_dict,
            {"$inc": amounts, "$set": {"updatedAt": now_utc()}},
            **_session_opts(session),
        )
        return result.matched_count > 0

    def delete_document(self, collection_name: str, _id: str) -> bool:
        result = self.db[collection_name].delete_one({"_id": ObjectId(_id)})
        return result.deleted_count > 0

    def ensure_indexes(self) -> None:
        for collection_name, field in UNIQUE_FIELDS:
            self.db[collection_name].create_index(field, unique=True)

    def next_sequence(self, key: str) -> int:
        """Atomically bump and return the counter stored under ``key``."""
        doc = self.db["counter"].find_one_and_update(
            {"_id": key},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(doc["seq"])


def connect(settings: Settings) -> Database:
    client = MongoClient(settings.database_url, tz_aware=True)
    return Database(client, settings.database_name, use_transactions=settings.mongo_transactions)


# Utility

def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    if not doc:
        return None
    d = dict(doc)
    if "_id" in d:
        d["_id"] = str(d["_id"])  # convert ObjectId to string
    return d
