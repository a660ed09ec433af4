import logging

from errors import BadRequest, NotFound
from images import ImageUploader
from schemas import Category, CategoryIn, CategoryUpdate
from services.base import Service, public_doc, validate_object_id

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = ("name", "nameAr", "description", "descriptionAr", "image", "isActive", "sortOrder")
NOT_FOUND = "الفئة غير موجودة"
DUPLICATE_NAME = "الفئة موجودة بالفعل بنفس الاسم"


class CategoryService(Service):
    collection = "category"

    def __init__(self, db, uploader: ImageUploader):
        super().__init__(db)
        self.uploader = uploader

    def create(self, payload: CategoryIn) -> dict:
        if self.db.get_document(self.collection, {"name": payload.name}):
            raise BadRequest(DUPLICATE_NAME)

        data = payload.model_dump(exclude_none=True)
        data["image"] = self.uploader.upload_if_base64(payload.image, "categories")
        category_id = self.db.create_document(self.collection, Category(**data))
        return self.format(self.db.get_document_by_id(self.collection, category_id))

    def find_all(self, include_inactive: bool = False) -> list:
        categories = self.db.get_documents(
            self.collection,
            {} if include_inactive else {"isActive": True},
            sort=[("sortOrder", 1), ("createdAt", -1)],
        )
        return [self.format(c, products_count=self._products_count(c["_id"])) for c in categories]

    def find_one(self, category_id: str) -> dict:
        category = self._get(category_id)
        return self.format(category, products_count=self._products_count(category_id))

    def update(self, category_id: str, payload: CategoryUpdate) -> dict:
        self._get(category_id)

        if payload.name is not None:
            duplicate = self.db.get_document(self.collection, {"name": payload.name})
            if duplicate and duplicate["_id"] != category_id:
                raise BadRequest(DUPLICATE_NAME)

        data = payload.model_dump(by_alias=True, exclude_unset=True)
        if data.get("name", "") is None:
            del data["name"]
        if "image" in data:
            data["image"] = self.uploader.upload_if_base64(data["image"], "categories")
        self.db.update_document(self.collection, category_id, data)
        return self.format(self.db.get_document_by_id(self.collection, category_id))

    def remove(self, category_id: str) -> dict:
        self._get(category_id)
        count = self._products_count(category_id)
        if count > 0:
            raise BadRequest(f"لا يمكن حذف الفئة لأنها تحتوي على {count} منتج")
        self.db.delete_document(self.collection, category_id)
        logger.info("Deleted category %s", category_id)
        return {"message": "تم حذف الفئة بنجاح"}

    def toggle_active(self, category_id: str) -> dict:
        category = self._get(category_id)
        self.db.update_document(self.collection, category_id, {"isActive": not category.get("isActive", True)})
        return self.format(self.db.get_document_by_id(self.collection, category_id))

    def stats(self) -> dict:
        return {
            "total": self.db.count_documents(self.collection),
            "active": self.db.count_documents(self.collection, {"isActive": True}),
            "inactive": self.db.count_documents(self.collection, {"isActive": False}),
        }

    def exists(self, category_id: str) -> bool:
        return self.db.get_document_by_id(self.collection, category_id) is not None

    def summaries(self, category_ids) -> dict:
        """Map category id -> ``{id, name, nameAr}`` for embedding in product responses."""
        out = {}
        for category_id in set(category_ids):
            category = self.db.get_document_by_id(self.collection, category_id)
            if category:
                out[category_id] = {"id": category["_id"], "name": category.get("name"), "nameAr": category.get("nameAr")}
        return out

    def _get(self, category_id: str) -> dict:
        validate_object_id(category_id)
        category = self.db.get_document_by_id(self.collection, category_id)
        if category is None:
            raise NotFound(NOT_FOUND)
        return category

    def _products_count(self, category_id: str) -> int:
        return self.db.count_documents("product", {"categoryId": category_id})

    @staticmethod
    def format(category: dict, products_count=None) -> dict:
        out = public_doc(category, CATEGORY_FIELDS)
        if products_count is not None:
            out["productsCount"] = products_count
        return out
