from typing import Optional

from fastapi import APIRouter, Depends, Query

from routers.deps import get_services, ok
from schemas import HomepageContentIn
from security import get_current_admin
from services import Services

router = APIRouter()
admin_only = [Depends(get_current_admin)]


def section_query(
    limit: Optional[int] = Query(None, ge=1, le=100),
    page: Optional[int] = Query(None, ge=1),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
) -> dict:
    return {"limit": limit, "page": page, "category_id": category_id, "sort_by": sort_by, "sort_order": sort_order}


def listing(items: list) -> dict:
    return ok(items, count=len(items))


@router.get("/all-data")
@router.get("/data")
def homepage_data(services: Services = Depends(get_services)):
    return ok(services.homepage.all_data())


@router.get("/featured-products")
def featured_products(query: dict = Depends(section_query), services: Services = Depends(get_services)):
    return listing(services.homepage.featured_products(**query))


@router.get("/best-sellers")
def best_sellers(query: dict = Depends(section_query), services: Services = Depends(get_services)):
    return listing(services.homepage.best_sellers(**query))


@router.get("/new-arrivals")
def new_arrivals(query: dict = Depends(section_query), services: Services = Depends(get_services)):
    return listing(services.homepage.new_arrivals(**query))


@router.get("/categories")
def homepage_categories(
    limit: Optional[int] = Query(None, ge=1),
    include_inactive: bool = Query(False, alias="includeInactive"),
    services: Services = Depends(get_services),
):
    return listing(services.homepage.categories(limit=limit, include_inactive=include_inactive))


@router.get("/content")
def homepage_content(services: Services = Depends(get_services)):
    return ok(services.homepage_content.get_active())


@router.get("/content/all", dependencies=admin_only)
def list_homepage_content(services: Services = Depends(get_services)):
    return ok(services.homepage_content.list_all())


@router.post("/content", status_code=201, dependencies=admin_only)
def create_homepage_content(payload: HomepageContentIn, services: Services = Depends(get_services)):
    return ok(services.homepage_content.create(payload), message="Homepage content created successfully")


@router.put("/content/{content_id}", dependencies=admin_only)
@router.put("/content/{content_id}/with-images", dependencies=admin_only)
def update_homepage_content(content_id: str, payload: HomepageContentIn, services: Services = Depends(get_services)):
    return ok(services.homepage_content.update(content_id, payload), message="Homepage content updated successfully")
