import logging
from datetime import timedelta
from typing import Optional

from database import to_object_id
from errors import BadRequest, NotFound, Unauthorized
from schemas import LoginRequest, RegisterRequest, Role, User
from security import create_access_token, get_password_hash, verify_password
from services.base import Service, public_doc

logger = logging.getLogger(__name__)

USER_FIELDS = ("email", "name", "phone", "role", "avatar", "isActive")
INVALID_CREDENTIALS = "البريد الإلكتروني أو كلمة المرور غير صحيحة"


class AuthService(Service):
    collection = "user"

    def __init__(self, db, jwt_secret: str, token_lifetime: timedelta):
        super().__init__(db)
        self.jwt_secret = jwt_secret
        self.token_lifetime = token_lifetime

    def register(self, payload: RegisterRequest) -> dict:
        """Create the single administrator account; later attempts are refused."""
        if self.db.count_documents(self.collection, {"role": Role.ADMIN.value}) > 0:
            raise BadRequest("لا يمكن إنشاء أكثر من مدير واحد للنظام")
        if self.db.get_document(self.collection, {"email": payload.email}):
            raise BadRequest("البريد الإلكتروني مستخدم بالفعل")

        user = User(
            email=payload.email,
            name=payload.name,
            phone=payload.phone,
            password=get_password_hash(payload.password),
            role=Role.ADMIN,
        )
        user_id = self.db.create_document(self.collection, user)
        logger.info("Registered administrator %s", payload.email)
        return {
            "message": "تم إنشاء مدير النظام بنجاح",
            "user": self.format_user(self.db.get_document_by_id(self.collection, user_id)),
            "token": self.generate_token(user_id, payload.email),
        }

    def login(self, payload: LoginRequest) -> dict:
        user = self.db.get_document(self.collection, {"email": payload.email})
        if not user or not verify_password(payload.password, user["password"]):
            raise Unauthorized(INVALID_CREDENTIALS)
        if not user.get("isActive", False):
            raise Unauthorized("الحساب غير نشط، يرجى التواصل مع الإدارة")
        return {
            "message": "تم تسجيل الدخول بنجاح",
            "user": self.format_user(user),
            "token": self.generate_token(user["_id"], user["email"]),
        }

    def find_user(self, user_id: str) -> Optional[dict]:
        if to_object_id(user_id) is None:
            return None
        return self.db.get_document_by_id(self.collection, user_id)

    def get_profile(self, user_id: str) -> dict:
        user = self.find_user(user_id)
        if user is None:
            raise NotFound("المستخدم غير موجود")
        return self.format_user(user)

    def generate_token(self, user_id: str, email: str) -> dict:
        return {"access_token": create_access_token(user_id, email, self.jwt_secret, self.token_lifetime)}

    @staticmethod
    def format_user(user: dict) -> dict:
        return public_doc(user, USER_FIELDS)
