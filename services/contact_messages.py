from typing import List, Optional

from errors import NotFound
from schemas import ContactMessage, ContactMessageCreate, ContactMessageUpdate
from services.base import Service, public_doc, validate_object_id

MESSAGE_FIELDS = ("name", "email", "phone", "message", "isRead", "isReplied", "notes")
NOT_FOUND = "الرسالة غير موجودة"


class ContactMessageService(Service):
    collection = "contactmessage"

    def create(self, payload: ContactMessageCreate) -> dict:
        message_id = self.db.create_document(self.collection, ContactMessage(**payload.model_dump()))
        return self.format(self.db.get_document_by_id(self.collection, message_id))

    def find_all(self, is_read: Optional[bool] = None, is_replied: Optional[bool] = None) -> List[dict]:
        filter_q = {}
        if is_read is not None:
            filter_q["isRead"] = is_read
        if is_replied is not None:
            filter_q["isReplied"] = is_replied
        messages = self.db.get_documents(self.collection, filter_q, sort=[("createdAt", -1), ("_id", -1)])
        return [self.format(m) for m in messages]

    def find_one(self, message_id: str) -> dict:
        return self.format(self._get(message_id))

    def update(self, message_id: str, payload: ContactMessageUpdate) -> dict:
        return self._set(message_id, payload.model_dump(by_alias=True, exclude_unset=True))

    def mark_as_read(self, message_id: str) -> dict:
        return self._set(message_id, {"isRead": True})

    def mark_as_replied(self, message_id: str) -> dict:
        return self._set(message_id, {"isReplied": True})

    def remove(self, message_id: str) -> dict:
        self._get(message_id)
        self.db.delete_document(self.collection, message_id)
        return {"message": "تم حذف الرسالة بنجاح"}

    def stats(self) -> dict:
        count = self.db.count_documents
        return {
            "total": count(self.collection),
            "unread": count(self.collection, {"isRead": False}),
            "read": count(self.collection, {"isRead": True}),
            "replied": count(self.collection, {"isReplied": True}),
        }

    def _set(self, message_id: str, data: dict) -> dict:
        self._get(message_id)
        self.db.update_document(self.collection, message_id, data)
        return self.format(self.db.get_document_by_id(self.collection, message_id))

    def _get(self, message_id: str) -> dict:
        validate_object_id(message_id)
        message = self.db.get_document_by_id(self.collection, message_id)
        if message is None:
            raise NotFound(NOT_FOUND)
        return message

    @staticmethod
    def format(message: dict) -> dict:
        return public_doc(message, MESSAGE_FIELDS)
