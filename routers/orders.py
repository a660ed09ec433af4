from fastapi import APIRouter, Depends

from routers.deps import get_services, ok
from schemas import OrderCreate, OrderStatus, OrderStatusUpdate, PaymentStatusUpdate
from security import get_current_admin
from services import Services

router = APIRouter()
admin_only = [Depends(get_current_admin)]


@router.get("/number/{order_number}")
def get_order_by_number(order_number: str, services: Services = Depends(get_services)):
    return ok(services.orders.get_order_by_number(order_number))


@router.get("", dependencies=admin_only)
def list_orders(services: Services = Depends(get_services)):
    return ok(services.orders.list_orders())


@router.get("/status/{status}", dependencies=admin_only)
def list_orders_by_status(status: OrderStatus, services: Services = Depends(get_services)):
    return ok(services.orders.list_orders_by_status(status.value))


@router.get("/{order_id}", dependencies=admin_only)
def get_order(order_id: str, services: Services = Depends(get_services)):
    return ok(services.orders.get_order(order_id))


@router.post("", status_code=201)
def create_order(payload: OrderCreate, services: Services = Depends(get_services)):
    return ok(services.orders.create_order(payload))


# The dashboard client sends PUT, other clients PATCH.
@router.api_route("/{order_id}/status", methods=["PATCH", "PUT"], dependencies=admin_only)
def update_order_status(order_id: str, payload: OrderStatusUpdate, services: Services = Depends(get_services)):
    return ok(services.orders.update_status(order_id, payload))


@router.api_route("/{order_id}/payment-status", methods=["PATCH", "PUT"], dependencies=admin_only)
def update_payment_status(order_id: str, payload: PaymentStatusUpdate, services: Services = Depends(get_services)):
    return ok(services.orders.update_payment_status(order_id, payload))
