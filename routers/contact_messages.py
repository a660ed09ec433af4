from typing import Optional

from fastapi import APIRouter, Depends, Query

from routers.deps import get_services, ok
from schemas import ContactMessageCreate, ContactMessageUpdate
from security import get_current_admin
from services import Services

router = APIRouter()
admin_only = [Depends(get_current_admin)]


@router.post("", status_code=201)
def submit_message(payload: ContactMessageCreate, services: Services = Depends(get_services)):
    return ok(services.contact_messages.create(payload), message="تم إرسال الرسالة بنجاح")


@router.get("", dependencies=admin_only)
def list_messages(
    is_read: Optional[bool] = Query(None, alias="isRead"),
    is_replied: Optional[bool] = Query(None, alias="isReplied"),
    services: Services = Depends(get_services),
):
    return ok(services.contact_messages.find_all(is_read=is_read, is_replied=is_replied))


@router.get("/stats/overview", dependencies=admin_only)
def message_stats(services: Services = Depends(get_services)):
    return ok(services.contact_messages.stats())


@router.get("/{message_id}", dependencies=admin_only)
def get_message(message_id: str, services: Services = Depends(get_services)):
    return ok(services.contact_messages.find_one(message_id))


@router.put("/{message_id}", dependencies=admin_only)
def update_message(message_id: str, payload: ContactMessageUpdate, services: Services = Depends(get_services)):
    return ok(services.contact_messages.update(message_id, payload))


@router.patch("/{message_id}/mark-read", dependencies=admin_only)
def mark_read(message_id: str, services: Services = Depends(get_services)):
    return ok(services.contact_messages.mark_as_read(message_id))


@router.patch("/{message_id}/mark-replied", dependencies=admin_only)
def mark_replied(message_id: str, services: Services = Depends(get_services)):
    return ok(services.contact_messages.mark_as_replied(message_id))


@router.delete("/{message_id}", dependencies=admin_only)
def delete_message(message_id: str, services: Services = Depends(get_services)):
    return ok(**services.contact_messages.remove(message_id))
