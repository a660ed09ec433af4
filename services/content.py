"""
Site content records (homepage, about-us, contact info).

Each content type keeps many records but serves one: the record flagged
``isActive``. Creating or activating a record deactivates the others in the
same transaction.
"""

import logging
from typing import List, Optional, Tuple

from database import to_object_id
from errors import NotFound
from images import ImageUploadError, ImageUploader, is_base64_image
from schemas import (
    AboutUsContent,
    CamelModel,
    ContactInfo,
    HomepageContent,
)
from services.base import Service, public_doc, validate_object_id

logger = logging.getLogger(__name__)


class ActiveContentService(Service):
    model = CamelModel
    folder = "general"
    image_fields: Tuple[str, ...] = ()
    fields: Tuple[str, ...] = ()
    not_found = "المحتوى غير موجود"
    no_active = "لا يوجد محتوى نشط"
    # When set, a failed upload drops the field instead of failing the request.
    tolerate_upload_errors = False

    def __init__(self, db, uploader: ImageUploader):
        super().__init__(db)
        self.uploader = uploader

    def create(self, payload: CamelModel) -> dict:
        data = self.prepare_images(payload.model_dump(by_alias=True, exclude_none=True))
        document = self.model(**data)
        with self.db.transaction() as session:
            self.db.update_documents(self.collection, {"isActive": True}, {"isActive": False}, session=session)
            content_id = self.db.create_document(self.collection, document, session=session)
        logger.info("Activated new %s record %s", self.collection, content_id)
        return self.format(self.db.get_document_by_id(self.collection, content_id))

    def update(self, content_id: str, payload: CamelModel) -> dict:
        self._get(content_id)
        data = self.prepare_images(payload.model_dump(by_alias=True, exclude_unset=True))
        data.pop("isActive", None)
        self.db.update_document(self.collection, content_id, data)
        return self.format(self.db.get_document_by_id(self.collection, content_id))

    def get_active(self) -> dict:
        content = self.find_active()
        if content is None:
            raise NotFound(self.no_active)
        return self.format(content)

    def find_active(self) -> Optional[dict]:
        return self.db.get_document(self.collection, {"isActive": True}, sort=[("createdAt", -1), ("_id", -1)])

    def find_one(self, content_id: str) -> dict:
        return self.format(self._get(content_id))

    def list_all(self) -> List[dict]:
        return [self.format(c) for c in self.db.get_documents(self.collection, sort=[("createdAt", -1), ("_id", -1)])]

    def remove(self, content_id: str) -> dict:
        self._get(content_id)
        self.db.delete_document(self.collection, content_id)
        return {"message": "تم حذف المحتوى بنجاح"}

    def toggle_active(self, content_id: str) -> dict:
        content = self._get(content_id)
        activate = not content.get("isActive", False)
        with self.db.transaction() as session:
            if activate:
                self.db.update_documents(
                    self.collection,
                    {"isActive": True, "_id": {"$ne": to_object_id(content_id)}},
                    {"isActive": False},
                    session=session,
                )
            self.db.update_document(self.collection, content_id, {"isActive": activate}, session=session)
        logger.info("%s record %s active=%s", self.collection, content_id, activate)
        return self.format(self.db.get_document_by_id(self.collection, content_id))

    def prepare_images(self, data: dict) -> dict:
        """Replace base64 image fields with hosted URLs."""
        for field in self.image_fields:
            value = data.get(field)
            if not is_base64_image(value):
                continue
            try:
                data[field] = self.uploader.upload(value, self.folder)
            except ImageUploadError as e:
                if not self.tolerate_upload_errors:
                    raise
                logger.warning("Failed to upload %s, dropping it: %s", field, e)
                del data[field]
        return data

    def _get(self, content_id: str) -> dict:
        validate_object_id(content_id)
        content = self.db.get_document_by_id(self.collection, content_id)
        if content is None:
            raise NotFound(self.not_found)
        return content

    def format(self, content: dict) -> dict:
        return public_doc(content, self.fields + ("isActive",))


class ContactInfoService(ActiveContentService):
    collection = "contactinfo"
    model = ContactInfo
    folder = "contact"
    image_fields = ("heroImage",)
    fields = (
        "heroTitle", "heroDescription", "heroImage", "address", "email", "phone",
        "socialMedia", "latitude", "longitude",
    )
    not_found = "المعلومات غير موجودة"
    no_active = "لا توجد معلومات اتصال نشطة"


class AboutUsService(ActiveContentService):
    collection = "aboutuscontent"
    model = AboutUsContent
    folder = "about-us"
    image_fields = ("heroImage", "visionImage", "missionImage")
    fields = (
        "heroTitle", "heroDescription", "heroImage",
        "visionTitle", "visionDescription", "visionImage",
        "missionTitle", "missionDescription", "missionImage",
        "valuesTitle", "values",
    )

    def prepare_images(self, data: dict) -> dict:
        data = super().prepare_images(data)
        if data.get("values"):
            data["values"] = [
                dict(value, image=self.uploader.upload_if_base64(value.get("image"), "about-us/values", f"value-{index}"))
                for index, value in enumerate(data["values"], start=1)
            ]
        return data


DEFAULT_HOMEPAGE_CONTENT = {
    "heroTitle": "صياد السمك يقدم لك أجود المأكولات البحرية الطازجة من البحر إلى مائدتك",
    "heroDescription": (
        "أفضل المأكولات البحرية بجودة عالية ونضارة لا مثيل لها – سمك طازج، جمبري، كابوريا، "
        "منتجات مُعدّة للطهي والمزيد بأسعار تنافسية وخدمة توصيل سريعة."
    ),
    "heroButtonText1": "عرض المنتجات",
    "heroButtonText2": "اطلب بالجملة",
    "heroButtonLink1": "/products",
    "heroButtonLink2": "/products?type=WHOLESALE",
    "sectionTwoTitle": "الأصناف الشائعة",
    "sectionTwoDescription": "المفضلة لدى عملائنا",
    "sectionThreeTitle": "المنتجات المميزة",
    "sectionFourTitle": "نوفر جميع المنتجات اللازمة بأفضل جودة للمطاعم و الفنادق لطلبات الجملة",
    "sectionFourDescription": "زود مطعمك أفضل و أجود المنتجات البحرية الطازجة الآن",
    "sectionFourButtonText": "اطلب الآن",
    "sectionFourButtonLink": "/products?type=WHOLESALE",
}


class HomepageContentService(ActiveContentService):
    collection = "homepagecontent"
    model = HomepageContent
    folder = "homepage"
    image_fields = ("heroBackgroundImage1", "heroBackgroundImage2", "sectionFourImage")
    fields = (
        "heroTitle", "heroDescription",
        "heroButtonText1", "heroButtonText2", "heroButtonLink1", "heroButtonLink2",
        "heroBackgroundImage1", "heroBackgroundImage2",
        "sectionTwoTitle", "sectionTwoDescription", "sectionThreeTitle",
        "sectionFourTitle", "sectionFourDescription", "sectionFourButtonText",
        "sectionFourButtonLink", "sectionFourImage",
    )
    tolerate_upload_errors = True

    def get_active(self) -> dict:
        """Active homepage content, seeding the default copy on first use."""
        content = self.find_active()
        if content is None:
            logger.info("No homepage content found, creating default content")
            content_id = self.db.create_document(self.collection, HomepageContent(**DEFAULT_HOMEPAGE_CONTENT))
            content = self.db.get_document_by_id(self.collection, content_id)
        return self.format(content)
