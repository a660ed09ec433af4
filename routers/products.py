from typing import Optional

from fastapi import APIRouter, Depends, Query

from routers.deps import get_services, ok
from schemas import ProductCreate, ProductType, ProductUpdate, ReviewApproval, ReviewCreate, StockUpdate
from security import get_current_admin
from services import Services

router = APIRouter()
admin_only = [Depends(get_current_admin)]


@router.get("")
def list_products(
    category_id: Optional[str] = Query(None, alias="categoryId"),
    product_type: Optional[ProductType] = Query(None, alias="type"),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    is_featured: Optional[bool] = Query(None, alias="isFeatured"),
    is_best_seller: Optional[bool] = Query(None, alias="isBestSeller"),
    is_new_arrival: Optional[bool] = Query(None, alias="isNewArrival"),
    search: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    services: Services = Depends(get_services),
):
    result = services.products.find_all(
        category_id=category_id,
        product_type=product_type.value if product_type else None,
        min_price=min_price,
        max_price=max_price,
        is_featured=is_featured,
        is_best_seller=is_best_seller,
        is_new_arrival=is_new_arrival,
        search=search,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )
    return ok(**result)


@router.get("/slug/{slug}")
def get_product_by_slug(slug: str, services: Services = Depends(get_services)):
    return ok(services.products.find_by_slug(slug))


@router.get("/related/{product_id}")
def related_products(product_id: str, limit: int = Query(4, ge=1, le=50), services: Services = Depends(get_services)):
    return ok(services.products.related(product_id, limit))


@router.get("/stats/overview", dependencies=admin_only)
def product_stats(services: Services = Depends(get_services)):
    return ok(services.products.statistics())


@router.get("/{product_id}")
def get_product(product_id: str, services: Services = Depends(get_services)):
    return ok(services.products.find_one(product_id))


# Reviews

@router.get("/{product_id}/reviews")
def list_reviews(product_id: str, services: Services = Depends(get_services)):
    return ok(services.products.list_reviews(product_id))


@router.post("/{product_id}/reviews", status_code=201)
def create_review(product_id: str, payload: ReviewCreate, services: Services = Depends(get_services)):
    return ok(services.products.create_review(product_id, payload))


@router.patch("/reviews/{review_id}/approve", dependencies=admin_only)
def approve_review(review_id: str, payload: ReviewApproval, services: Services = Depends(get_services)):
    return ok(services.products.approve_review(review_id, payload.is_approved))


@router.delete("/reviews/{review_id}", dependencies=admin_only)
def delete_review(review_id: str, services: Services = Depends(get_services)):
    return ok(**services.products.delete_review(review_id))


# Admin catalog management

@router.post("", status_code=201, dependencies=admin_only)
def create_product(payload: ProductCreate, services: Services = Depends(get_services)):
    return ok(services.products.create(payload))


@router.put("/{product_id}", dependencies=admin_only)
def update_product(product_id: str, payload: ProductUpdate, services: Services = Depends(get_services)):
    return ok(services.products.update(product_id, payload))


@router.delete("/{product_id}", dependencies=admin_only)
def delete_product(product_id: str, services: Services = Depends(get_services)):
    return ok(**services.products.remove(product_id))


@router.patch("/{product_id}/stock", dependencies=admin_only)
def update_stock(product_id: str, payload: StockUpdate, services: Services = Depends(get_services)):
    return ok(**services.products.update_stock(product_id, payload.stock))
