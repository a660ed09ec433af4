from fastapi import APIRouter, Depends

from routers.deps import get_services, ok
from schemas import ContactInfoIn
from security import get_current_admin
from services import Services

router = APIRouter()
admin_only = [Depends(get_current_admin)]


@router.get("/active")
def active_contact_info(services: Services = Depends(get_services)):
    return ok(services.contact_info.get_active())


@router.post("", status_code=201, dependencies=admin_only)
def create_contact_info(payload: ContactInfoIn, services: Services = Depends(get_services)):
    return ok(services.contact_info.create(payload))


@router.get("", dependencies=admin_only)
def list_contact_info(services: Services = Depends(get_services)):
    return ok(services.contact_info.list_all())


@router.get("/{content_id}", dependencies=admin_only)
def get_contact_info(content_id: str, services: Services = Depends(get_services)):
    return ok(services.contact_info.find_one(content_id))


@router.patch("/{content_id}", dependencies=admin_only)
def update_contact_info(content_id: str, payload: ContactInfoIn, services: Services = Depends(get_services)):
    return ok(services.contact_info.update(content_id, payload))


@router.patch("/{content_id}/toggle-active", dependencies=admin_only)
def toggle_contact_info(content_id: str, services: Services = Depends(get_services)):
    return ok(services.contact_info.toggle_active(content_id))
