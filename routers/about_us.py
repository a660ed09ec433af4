from fastapi import APIRouter, Depends

from routers.deps import get_services, ok
from schemas import AboutUsIn
from security import get_current_admin
from services import Services

router = APIRouter()
admin_only = [Depends(get_current_admin)]


@router.get("/active")
def active_about_us(services: Services = Depends(get_services)):
    return ok(services.about_us.get_active())


@router.post("", status_code=201, dependencies=admin_only)
def create_about_us(payload: AboutUsIn, services: Services = Depends(get_services)):
    return ok(services.about_us.create(payload))


@router.get("", dependencies=admin_only)
def list_about_us(services: Services = Depends(get_services)):
    return ok(services.about_us.list_all())


@router.get("/{content_id}", dependencies=admin_only)
def get_about_us(content_id: str, services: Services = Depends(get_services)):
    return ok(services.about_us.find_one(content_id))


@router.patch("/{content_id}", dependencies=admin_only)
def update_about_us(content_id: str, payload: AboutUsIn, services: Services = Depends(get_services)):
    return ok(services.about_us.update(content_id, payload))


@router.delete("/{content_id}", dependencies=admin_only)
def delete_about_us(content_id: str, services: Services = Depends(get_services)):
    return ok(**services.about_us.remove(content_id))


@router.patch("/{content_id}/toggle-active", dependencies=admin_only)
def toggle_about_us(content_id: str, services: Services = Depends(get_services)):
    return ok(services.about_us.toggle_active(content_id))
