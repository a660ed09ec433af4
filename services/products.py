import logging
import math
import re
from typing import List, Optional

from database import to_object_id
from errors import BadRequest, NotFound
from images import ImageUploader, is_base64_image
from schemas import Product, ProductCreate, ProductType, ProductUpdate, Review, ReviewCreate
from services.base import Service, public_doc, validate_object_id
from services.categories import CategoryService

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = (
    "name", "nameAr", "descriptionAr", "categoryId", "type",
    "price", "originalPrice", "discount", "wholesalePrice", "minWholesaleQty",
    "weight", "unit", "origin", "stock", "isAvailable",
    "isFeatured", "isBestSeller", "isNewArrival", "mainImage", "images",
    "metaTitle", "metaDescription", "metaKeywords",
    "views", "salesCount", "averageRating", "totalReviews",
)
REVIEW_FIELDS = ("productId", "rating", "comment", "isApproved")

SORT_OPTIONS = {
    "price_asc": [("price", 1)],
    "price_desc": [("price", -1)],
    "name_asc": [("name", 1)],
    "name_desc": [("name", -1)],
    "newest": [("createdAt", -1)],
    "oldest": [("createdAt", 1)],
    "popular": [("views", -1)],
    "rating": [("averageRating", -1)],
    "createdAt_desc": [("createdAt", -1)],
}

PRODUCT_NOT_FOUND = "المنتج غير موجود"
CATEGORY_NOT_FOUND = "الفئة غير موجودة"
REVIEW_NOT_FOUND = "التقييم غير موجود"
WHOLESALE_TYPES = (ProductType.WHOLESALE.value, ProductType.BOTH.value)


def validate_wholesale_pricing(
    product_type: Optional[str],
    price: Optional[float],
    wholesale_price: Optional[float],
    min_wholesale_qty: Optional[int],
) -> None:
    """Cross-field rules for wholesale pricing; raises BadRequest on the first violation."""
    if product_type in WHOLESALE_TYPES:
        if wholesale_price is None:
            raise BadRequest("يجب تحديد سعر الجملة عند اختيار نوع جملة")
        if min_wholesale_qty is None:
            raise BadRequest("يجب تحديد الحد الأدنى لكمية الجملة عند اختيار نوع جملة")
    if wholesale_price is not None and price is not None and wholesale_price >= price:
        raise BadRequest("سعر الجملة يجب أن يكون أقل من سعر القطاعي")
    if min_wholesale_qty is not None and min_wholesale_qty < 1:
        raise BadRequest("الحد الأدنى لكمية الجملة يجب أن يكون 1 على الأقل")


class ProductService(Service):
    collection = "product"

    def __init__(self, db, uploader: ImageUploader, categories: CategoryService):
        super().__init__(db)
        self.uploader = uploader
        self.categories = categories

    # Catalog

    def create(self, payload: ProductCreate) -> dict:
        validate_object_id(payload.category_id)
        if not self.categories.exists(payload.category_id):
            raise NotFound(CATEGORY_NOT_FOUND)
        validate_wholesale_pricing(payload.type, payload.price, payload.wholesale_price, payload.min_wholesale_qty)

        data = payload.model_dump(exclude_none=True)
        data["main_image"] = self.uploader.upload_if_base64(
            payload.main_image, "products", f"product_{payload.name_ar}_main"
        )
        data["images"] = self._upload_images(payload.images or [], payload.name_ar)

        product_id = self.db.create_document(self.collection, Product(**data))
        logger.info("Created product %s (%s)", product_id, payload.name_ar)
        return self.format(self.db.get_document_by_id(self.collection, product_id))

    def find_all(
        self,
        category_id: Optional[str] = None,
        product_type: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        is_featured: Optional[bool] = None,
        is_best_seller: Optional[bool] = None,
        is_new_arrival: Optional[bool] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        page: int = 1,
        limit: int = 12,
    ) -> dict:
        filter_q = {"isAvailable": True}
        if category_id:
            filter_q["categoryId"] = category_id
        if product_type:
            filter_q["type"] = product_type
        if min_price is not None or max_price is not None:
            price_filter = {}
            if min_price is not None:
                price_filter["$gte"] = min_price
            if max_price is not None:
                price_filter["$lte"] = max_price
            filter_q["price"] = price_filter
        for field, value in (("isFeatured", is_featured), ("isBestSeller", is_best_seller), ("isNewArrival", is_new_arrival)):
            if value is not None:
                filter_q[field] = value
        if search:
            pattern = re.escape(search)
            filter_q["$or"] = [
                {"name": {"$regex": pattern, "$options": "i"}},
                {"nameAr": {"$regex": pattern, "$options": "i"}},
                {"descriptionAr": {"$regex": pattern, "$options": "i"}},
            ]

        page = max(page, 1)
        limit = max(limit, 1)
        products = self.db.get_documents(
            self.collection,
            filter_q,
            sort=SORT_OPTIONS.get(sort_by or "", SORT_OPTIONS["createdAt_desc"]),
            skip=(page - 1) * limit,
            limit=limit,
        )
        total = self.db.count_documents(self.collection, filter_q)
        total_pages = math.ceil(total / limit)
        return {
            "data": self.format_many(products),
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": total_pages,
                "hasMore": page < total_pages,
            },
        }

    def find_one(self, product_id: str) -> dict:
        product = self._get(product_id)
        self._increment_views(product_id)
        return self._detail(product)

    def find_by_slug(self, slug: str) -> dict:
        product = self.db.get_document(self.collection, {"nameAr": slug})
        if product is None:
            raise NotFound(PRODUCT_NOT_FOUND)
        self._increment_views(product["_id"])
        return self._detail(product)

    def related(self, product_id: str, limit: int = 4) -> List[dict]:
        product = self._get(product_id)
        related = self.db.get_documents(
            self.collection,
            {"categoryId": product["categoryId"], "_id": {"$ne": to_object_id(product_id)}, "isAvailable": True},
            sort=[("views", -1)],
            limit=limit,
        )
        return self.format_many(related)

    def update(self, product_id: str, payload: ProductUpdate) -> dict:
        existing = self._get(product_id)
        if payload.category_id:
            validate_object_id(payload.category_id)
            if not self.categories.exists(payload.category_id):
                raise NotFound(CATEGORY_NOT_FOUND)

        data = payload.model_dump(by_alias=True, exclude_unset=True)
        merged = dict(existing, **data)
        validate_wholesale_pricing(
            merged.get("type"), merged.get("price"), merged.get("wholesalePrice"), merged.get("minWholesaleQty")
        )

        name_ar = data.get("nameAr") or existing["nameAr"]
        if "mainImage" in data:
            data["mainImage"] = self.uploader.upload_if_base64(
                data["mainImage"], "products", f"product_{name_ar}_main"
            )
        if data.get("images"):
            data["images"] = self._upload_images(data["images"], name_ar)

        self.db.update_document(self.collection, product_id, data)
        return self.format(self.db.get_document_by_id(self.collection, product_id))

    def remove(self, product_id: str) -> dict:
        self._get(product_id)
        if self.db.count_documents("orderitem", {"productId": product_id}) > 0:
            raise BadRequest("لا يمكن حذف المنتج لأنه مرتبط بطلبات موجودة")
        self.db.delete_document(self.collection, product_id)
        self.db["review"].delete_many({"productId": product_id})
        logger.info("Deleted product %s", product_id)
        return {"message": "تم حذف المنتج بنجاح"}

    def update_stock(self, product_id: str, stock: int) -> dict:
        self._get(product_id)
        self.db.update_document(self.collection, product_id, {"stock": stock, "isAvailable": stock > 0})
        return {
            "message": "تم تحديث المخزون بنجاح",
            "data": self.format(self.db.get_document_by_id(self.collection, product_id)),
        }

    def statistics(self) -> dict:
        count = self.db.count_documents
        views = list(self.db[self.collection].aggregate(
            [{"$group": {"_id": None, "views": {"$sum": "$views"}}}]
        ))
        return {
            "total": count(self.collection),
            "available": count(self.collection, {"isAvailable": True}),
            "outOfStock": count(self.collection, {"stock": 0}),
            "featured": count(self.collection, {"isFeatured": True}),
            "bestSeller": count(self.collection, {"isBestSeller": True}),
            "newArrival": count(self.collection, {"isNewArrival": True}),
            "totalViews": views[0]["views"] if views else 0,
            "byType": {
                "retail": count(self.collection, {"type": ProductType.RETAIL.value}),
                "wholesale": count(self.collection, {"type": ProductType.WHOLESALE.value}),
                "both": count(self.collection, {"type": ProductType.BOTH.value}),
            },
        }

    # Reviews

    def create_review(self, product_id: str, payload: ReviewCreate) -> dict:
        self._get(product_id)
        review = Review(product_id=product_id, rating=payload.rating, comment=payload.comment, is_approved=True)
        review_id = self.db.create_document("review", review)
        self.refresh_rating(product_id)
        return self.format_review(self.db.get_document_by_id("review", review_id))

    def list_reviews(self, product_id: str) -> List[dict]:
        validate_object_id(product_id)
        reviews = self.db.get_documents(
            "review", {"productId": product_id, "isApproved": True}, sort=[("createdAt", -1)]
        )
        return [self.format_review(r) for r in reviews]

    def approve_review(self, review_id: str, is_approved: bool) -> dict:
        review = self._get_review(review_id)
        self.db.update_document("review", review_id, {"isApproved": is_approved})
        self.refresh_rating(review["productId"])
        return self.format_review(self.db.get_document_by_id("review", review_id))

    def delete_review(self, review_id: str) -> dict:
        review = self._get_review(review_id)
        self.db.delete_document("review", review_id)
        self.refresh_rating(review["productId"])
        return {"message": "تم حذف التقييم بنجاح"}

    def refresh_rating(self, product_id: str) -> None:
        """Recompute averageRating/totalReviews from the approved reviews."""
        ratings = [r["rating"] for r in self.db.get_documents("review", {"productId": product_id, "isApproved": True})]
        total = len(ratings)
        average = math.floor(sum(ratings) / total * 10 + 0.5) / 10 if total else 0.0
        self.db.update_document(self.collection, product_id, {"averageRating": average, "totalReviews": total})

    # Helpers

    def _get(self, product_id: str) -> dict:
        validate_object_id(product_id)
        product = self.db.get_document_by_id(self.collection, product_id)
        if product is None:
            raise NotFound(PRODUCT_NOT_FOUND)
        return product

    def _get_review(self, review_id: str) -> dict:
        validate_object_id(review_id)
        review = self.db.get_document_by_id("review", review_id)
        if review is None:
            raise NotFound(REVIEW_NOT_FOUND)
        return review

    def _increment_views(self, product_id: str) -> None:
        self.db.increment_fields(self.collection, {"_id": to_object_id(product_id)}, {"views": 1})

    def _upload_images(self, images: List[str], name_ar: str) -> List[str]:
        return [
            self.uploader.upload(image, "products", f"product_{name_ar}_{index}") if is_base64_image(image) else image
            for index, image in enumerate(images, start=1)
        ]

    def _detail(self, product: dict) -> dict:
        out = self.format(product, self.categories.summaries([product["categoryId"]]))
        out["reviews"] = self.list_reviews(product["_id"])
        return out

    def format_many(self, products: List[dict]) -> List[dict]:
        categories = self.categories.summaries(p["categoryId"] for p in products)
        return [self.format(p, categories) for p in products]

    def format(self, product: dict, categories: Optional[dict] = None) -> dict:
        if categories is None:
            categories = self.categories.summaries([product["categoryId"]])
        out = public_doc(product, PRODUCT_FIELDS)
        out["category"] = categories.get(product["categoryId"])
        return out

    @staticmethod
    def format_review(review: dict) -> dict:
        return public_doc(review, REVIEW_FIELDS)
