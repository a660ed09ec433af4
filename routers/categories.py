from fastapi import APIRouter, Depends, Query

from routers.deps import get_services, ok
from schemas import CategoryIn, CategoryUpdate
from security import get_current_admin
from services import Services

router = APIRouter()
admin_only = [Depends(get_current_admin)]


@router.get("")
def list_categories(
    include_inactive: bool = Query(False, alias="includeInactive"),
    services: Services = Depends(get_services),
):
    return ok(services.categories.find_all(include_inactive))


@router.get("/stats/overview", dependencies=admin_only)
def category_stats(services: Services = Depends(get_services)):
    return ok(services.categories.stats())


@router.get("/{category_id}")
def get_category(category_id: str, services: Services = Depends(get_services)):
    return ok(services.categories.find_one(category_id))


@router.post("", status_code=201, dependencies=admin_only)
def create_category(payload: CategoryIn, services: Services = Depends(get_services)):
    return ok(services.categories.create(payload))


@router.put("/{category_id}", dependencies=admin_only)
def update_category(category_id: str, payload: CategoryUpdate, services: Services = Depends(get_services)):
    return ok(services.categories.update(category_id, payload))


@router.delete("/{category_id}", dependencies=admin_only)
def delete_category(category_id: str, services: Services = Depends(get_services)):
    return ok(**services.categories.remove(category_id))


@router.patch("/{category_id}/toggle-active", dependencies=admin_only)
def toggle_category(category_id: str, services: Services = Depends(get_services)):
    return ok(services.categories.toggle_active(category_id))
