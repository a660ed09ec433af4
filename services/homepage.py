from typing import List, Optional

from services.base import Service

CARD_FIELDS = (
    "nameAr", "descriptionAr", "price", "originalPrice", "discount",
    "mainImage", "weight", "unit",
)

SECTION_SORT = {
    "price": "price",
    "salesCount": "salesCount",
    "name": "nameAr",
    "createdAt": "createdAt",
}


class HomepageSectionsService(Service):
    """Product and category feeds for the storefront homepage."""

    def featured_products(self, **query) -> List[dict]:
        sort_field = SECTION_SORT.get(query.get("sort_by") or "", "createdAt")
        direction = 1 if query.get("sort_order") == "asc" else -1
        return self._products({"isFeatured": True}, [(sort_field, direction)], **query)

    def best_sellers(self, **query) -> List[dict]:
        return self._products({"isBestSeller": True}, [("salesCount", -1)], extra_fields=("salesCount",), **query)

    def new_arrivals(self, **query) -> List[dict]:
        return self._products({"isNewArrival": True}, [("createdAt", -1)], **query)

    def categories(self, limit: Optional[int] = None, include_inactive: bool = False) -> List[dict]:
        categories = self.db.get_documents(
            "category", {} if include_inactive else {"isActive": True}, sort=[("sortOrder", 1)], limit=limit
        )
        return [
            {
                "id": c["_id"],
                "nameAr": c.get("nameAr"),
                "image": c.get("image"),
                "descriptionAr": c.get("descriptionAr"),
                "sortOrder": c.get("sortOrder"),
            }
            for c in categories
        ]

    def all_data(self) -> dict:
        return {
            "featuredProducts": self.featured_products(),
            "bestSellers": self.best_sellers(),
            "categories": self.categories(),
        }

    def _products(
        self,
        filter_q: dict,
        sort: list,
        extra_fields=(),
        limit: Optional[int] = None,
        page: Optional[int] = None,
        category_id: Optional[str] = None,
        **_,
    ) -> List[dict]:
        limit = limit or 8
        page = page or 1
        filter_q = dict(filter_q, isAvailable=True)
        if category_id:
            filter_q["categoryId"] = category_id
        products = self.db.get_documents("product", filter_q, sort=sort, skip=(page - 1) * limit, limit=limit)

        category_names = {}
        for category_id in {p["categoryId"] for p in products}:
            category = self.db.get_document_by_id("category", category_id)
            category_names[category_id] = category.get("nameAr") if category else None

        cards = []
        for product in products:
            card = {"id": product["_id"]}
            for field in CARD_FIELDS + tuple(extra_fields):
                card[field] = product.get(field)
            card["category"] = {"nameAr": category_names.get(product["categoryId"])}
            cards.append(card)
        return cards
