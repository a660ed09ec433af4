"""
Order placement and fulfilment.

Placing an order prices every line from the stored product, snapshots the
product onto its order item and moves stock/salesCount, all inside one
transaction. Status and payment status are two independent fields changed
by administrators; cancelling gives the stock back.
"""

import logging
from collections import OrderedDict
from datetime import datetime
from typing import Dict, List, Optional, Set

from database import now_utc, to_object_id
from errors import BadRequest, NotFound
from schemas import (
    Order,
    OrderCreate,
    OrderItem,
    OrderStatus,
    OrderStatusUpdate,
    PaymentStatus,
    PaymentStatusUpdate,
)
from services.base import Service, validate_object_id

logger = logging.getLogger(__name__)

ORDER_NOT_FOUND = "الطلب غير موجود"
PRODUCT_NOT_FOUND = "المنتج غير موجود"

# Only enforced when the service runs with strict_transitions enabled.
ORDER_STATUS_TRANSITIONS: Dict[str, Set[str]] = {
    OrderStatus.PENDING.value: {OrderStatus.CONFIRMED.value, OrderStatus.PREPARING.value, OrderStatus.CANCELLED.value},
    OrderStatus.CONFIRMED.value: {OrderStatus.PREPARING.value, OrderStatus.OUT_FOR_DELIVERY.value, OrderStatus.CANCELLED.value},
    OrderStatus.PREPARING.value: {OrderStatus.OUT_FOR_DELIVERY.value, OrderStatus.CANCELLED.value},
    OrderStatus.OUT_FOR_DELIVERY.value: {OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value, OrderStatus.RETURNED.value},
    OrderStatus.DELIVERED.value: {OrderStatus.RETURNED.value},
    OrderStatus.CANCELLED.value: set(),
    OrderStatus.RETURNED.value: set(),
}

PAYMENT_STATUS_TRANSITIONS: Dict[str, Set[str]] = {
    PaymentStatus.PENDING.value: {PaymentStatus.PAID.value, PaymentStatus.FAILED.value},
    PaymentStatus.FAILED.value: {PaymentStatus.PENDING.value, PaymentStatus.PAID.value},
    PaymentStatus.PAID.value: {PaymentStatus.REFUNDED.value},
    PaymentStatus.REFUNDED.value: set(),
}

ADDRESS_FIELDS = (
    ("fullName", "customerName"),
    ("phone", "customerPhone"),
    ("governorate", "governorate"),
    ("city", "city"),
    ("district", "district"),
    ("street", "street"),
    ("buildingNo", "buildingNo"),
    ("floor", "floor"),
    ("apartment", "apartment"),
    ("landmark", "landmark"),
)
ORDER_FIELDS = (
    "orderNumber", "subtotal", "discount", "deliveryFee", "tax", "total",
    "status", "paymentStatus", "paymentMethod", "deliveryDate", "deliveryTime",
    "customerNotes", "adminNotes", "cancelReason", "cancelledAt",
)
ITEM_FIELDS = ("productId", "productName", "productImage", "quantity", "price", "total")


def _money(value: float) -> float:
    return round(value, 2)


class OrderService(Service):
    collection = "order"
    items_collection = "orderitem"

    def __init__(self, db, strict_transitions: bool = False):
        super().__init__(db)
        self.strict_transitions = strict_transitions

    def create_order(self, payload: OrderCreate) -> dict:
        requested: "OrderedDict[str, int]" = OrderedDict()
        for item in payload.items:
            requested[item.product_id] = requested.get(item.product_id, 0) + item.quantity

        # Resolve every product before writing anything so a bad line aborts the whole order.
        products = {product_id: self._find_product(product_id) for product_id in requested}
        for product_id, quantity in requested.items():
            product = products[product_id]
            if quantity > product.get("stock", 0):
                raise BadRequest(f"الكمية المطلوبة من {product.get('nameAr')} غير متوفرة في المخزون")

        lines = [(products[item.product_id], item.quantity) for item in payload.items]
        subtotal = _money(sum(product["price"] * quantity for product, quantity in lines))
        total = _money(subtotal - payload.discount + payload.delivery_fee + payload.tax)
        if total < 0:
            raise BadRequest("قيمة الخصم أكبر من إجمالي الطلب")

        address = payload.address
        order = Order(
            order_number=self.generate_order_number(),
            subtotal=subtotal,
            discount=payload.discount,
            delivery_fee=payload.delivery_fee,
            tax=payload.tax,
            total=total,
            payment_method=payload.payment_method,
            delivery_date=payload.delivery_date,
            delivery_time=payload.delivery_time,
            customer_notes=payload.customer_notes,
            customer_name=address.full_name,
            customer_phone=address.phone,
            governorate=address.governorate,
            city=address.city,
            district=address.district,
            street=address.street,
            building_no=address.building_no,
            floor=address.floor,
            apartment=address.apartment,
            landmark=address.landmark,
        )

        with self.db.transaction() as session:
            order_id = self.db.create_document(self.collection, order, session=session)
            for product, quantity in lines:
                item = OrderItem(
                    order_id=order_id,
                    product_id=product["_id"],
                    product_name=product["nameAr"],
                    product_image=product.get("mainImage"),
                    price=product["price"],
                    quantity=quantity,
                    total=_money(product["price"] * quantity),
                )
                self.db.create_document(self.items_collection, item, session=session)
                moved = self.db.increment_fields(
                    "product",
                    {"_id": to_object_id(product["_id"]), "stock": {"$gte": quantity}},
                    {"stock": -quantity, "salesCount": quantity},
                    session=session,
                )
                if not moved:
                    raise BadRequest(f"الكمية المطلوبة من {product['nameAr']} غير متوفرة في المخزون")

        logger.info("Order %s created with %d item(s), total %.2f", order.order_number, len(lines), total)
        return self.get_order(order_id)

    def generate_order_number(self, today: Optional[datetime] = None) -> str:
        """``ORD`` + local date + a 4-digit sequence drawn from an atomic per-day counter."""
        day = (today or datetime.now()).strftime("%Y%m%d")
        sequence = self.db.next_sequence(f"order:{day}")
        return f"ORD{day}{sequence:04d}"

    def list_orders(self) -> List[dict]:
        return self._format_many(self.db.get_documents(self.collection, sort=[("createdAt", -1), ("_id", -1)]))

    def list_orders_by_status(self, status: str) -> List[dict]:
        return self._format_many(
            self.db.get_documents(self.collection, {"status": status}, sort=[("createdAt", -1), ("_id", -1)])
        )

    def get_order(self, order_id: str) -> dict:
        return self.format(self._get(order_id))

    def get_order_by_number(self, order_number: str) -> dict:
        order = self.db.get_document(self.collection, {"orderNumber": order_number})
        if order is None:
            raise NotFound(ORDER_NOT_FOUND)
        return self.format(order)

    def update_status(self, order_id: str, payload: OrderStatusUpdate) -> dict:
        order = self._get(order_id)
        new_status = payload.status
        if self.strict_transitions:
            self._check_transition(ORDER_STATUS_TRANSITIONS, order["status"], new_status)

        update = {"status": new_status}
        if payload.admin_notes:
            update["adminNotes"] = payload.admin_notes

        with self.db.transaction() as session:
            if new_status == OrderStatus.CANCELLED.value and order["status"] != OrderStatus.CANCELLED.value:
                update["cancelReason"] = payload.cancel_reason
                update["cancelledAt"] = now_utc()
                for item in self._items(order_id):
                    self.db.increment_fields(
                        "product",
                        {"_id": to_object_id(item["productId"])},
                        {"stock": item["quantity"], "salesCount": -item["quantity"]},
                        session=session,
                    )
            self.db.update_document(self.collection, order_id, update, session=session)

        logger.info("Order %s status %s -> %s", order["orderNumber"], order["status"], new_status)
        return self.get_order(order_id)

    def update_payment_status(self, order_id: str, payload: PaymentStatusUpdate) -> dict:
        order = self._get(order_id)
        if self.strict_transitions:
            self._check_transition(PAYMENT_STATUS_TRANSITIONS, order["paymentStatus"], payload.payment_status)
        self.db.update_document(self.collection, order_id, {"paymentStatus": payload.payment_status})
        logger.info(
            "Order %s payment %s -> %s", order["orderNumber"], order["paymentStatus"], payload.payment_status
        )
        return self.get_order(order_id)

    @staticmethod
    def _check_transition(table: Dict[str, Set[str]], current: str, new: str) -> None:
        if new not in table.get(current, set()):
            raise BadRequest(f"لا يمكن تغيير الحالة من {current} إلى {new}")

    def _find_product(self, product_id: str) -> dict:
        product = self.db.get_document_by_id("product", product_id)
        if product is None:
            raise NotFound(PRODUCT_NOT_FOUND)
        return product

    def _get(self, order_id: str) -> dict:
        validate_object_id(order_id)
        order = self.db.get_document_by_id(self.collection, order_id)
        if order is None:
            raise NotFound(ORDER_NOT_FOUND)
        return order

    def _items(self, order_id: str) -> List[dict]:
        return self.db.get_documents(self.items_collection, {"orderId": order_id}, sort=[("createdAt", 1), ("_id", 1)])

    def _format_many(self, orders: List[dict]) -> List[dict]:
        return [self.format(order) for order in orders]

    def format(self, order: dict, items: Optional[List[dict]] = None) -> dict:
        if items is None:
            items = self._items(order["_id"])
        out = {"id": order["_id"]}
        out["items"] = [dict({"id": item["_id"]}, **{f: item.get(f) for f in ITEM_FIELDS}) for item in items]
        for field in ORDER_FIELDS:
            out[field] = order.get(field)
        out["address"] = {public: order.get(stored) for public, stored in ADDRESS_FIELDS}
        out["createdAt"] = order.get("createdAt")
        out["updatedAt"] = order.get("updatedAt")
        return out
