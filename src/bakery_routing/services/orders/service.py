"""Order intake and lifecycle transitions."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from ...config import settings
from ...data.store import InMemoryStore, get_store
from ...errors import InvalidStatusTransition
from ...models.domain import Order, OrderItem
from ...schemas.orders import (
    BulkOrderResult,
    BulkOrderStatusUpdate,
    BulkOrderUpdateResponse,
    OrderCreateRequest,
    OrderCreatedResponse,
    OrderModel,
    OrderStatusUpdate,
)
from ..locations.service import refresh_location_stats
from ..outputs.formatter import decision_to_model, order_to_model
from ..routing.service import route_order

logger = logging.getLogger(__name__)

VALID_TRANSITIONS: dict[str, tuple[str, ...]] = {
    "pending": ("confirmed", "cancelled"),
    "confirmed": ("preparing", "cancelled"),
    "preparing": ("ready", "cancelled"),
    "ready": ("out-for-delivery", "delivered", "cancelled"),
    "out-for-delivery": ("delivered", "cancelled"),
    "delivered": (),
    "cancelled": (),
}
TERMINAL_STATUSES = frozenset({"delivered", "cancelled"})


def list_orders(
    *,
    location_id: Optional[str] = None,
    status: Optional[str] = None,
    order_type: Optional[str] = None,
    search: Optional[str] = None,
    store: Optional[InMemoryStore] = None,
) -> list[OrderModel]:
    store = store or get_store()
    orders = store.get_orders_by_location(location_id) if location_id else store.get_orders()
    if status:
        orders = [order for order in orders if order.status == status]
    if order_type:
        orders = [order for order in orders if order.type == order_type]
    if search:
        needle = search.lower()
        orders = [
            order
            for order in orders
            if needle in order.customer_name.lower()
            or needle in (order.customer_phone or "")
            or needle in order.id
        ]
    orders.sort(key=lambda order: order.created_at or datetime.min.replace(tzinfo=timezone.utc), reverse=True)
    return [order_to_model(order) for order in orders]


def get_order(order_id: str, store: Optional[InMemoryStore] = None) -> OrderModel:
    store = store or get_store()
    return order_to_model(store.require_order(order_id))


def create_order(payload: OrderCreateRequest, store: Optional[InMemoryStore] = None) -> OrderCreatedResponse:
    """Create an order, routing it to a location when the customer did not pick one."""

    store = store or get_store()
    items = [
        OrderItem(
            id=str(uuid.uuid4()),
            name=item.name,
            quantity=item.quantity,
            price=item.price,
            category=item.category,
            special_requests=item.special_requests,
        )
        for item in payload.items
    ]
    order = Order(
        id=str(uuid.uuid4()),
        type=payload.type,
        status="pending",
        customer_name=payload.customer_name,
        location_id=payload.location_id,
        delivery_address=payload.delivery_address,
        items=items,
        customer_phone=payload.customer_phone,
        customer_email=payload.customer_email,
        special_instructions=payload.special_instructions,
    )

    decision = None
    if order.location_id is None:
        decision = route_order(order, store)
        order.location_id = decision.location_id
    location = store.require_location(order.location_id)

    total = sum(item.price * item.quantity for item in items)
    if order.type == "delivery":
        zones = store.get_delivery_zones(location.id)
        total += zones[0].delivery_fee if zones else settings.default_delivery_fee
    order.total = round(total, 2)

    order.created_at = datetime.now(timezone.utc)
    prep_minutes = location.stats.avg_prep_time or settings.default_prep_minutes
    order.estimated_ready_time = order.created_at + timedelta(minutes=prep_minutes)

    with store.transaction():
        store.create_order(order)
        refresh_location_stats(store, order.location_id)
    logger.info(f"Order created: {order.id} at {order.location_id} (total={order.total:.2f}, type={order.type})")
    return OrderCreatedResponse(
        order=order_to_model(order),
        routing=decision_to_model(decision) if decision else None,
    )


def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    store: Optional[InMemoryStore] = None,
) -> OrderModel:
    """Move an order along its lifecycle.

    Drivers are only claimed when a delivery order goes out for delivery:
    the requested driver if one is given, else the first available one.
    Reaching a terminal status frees the assigned driver.
    """

    store = store or get_store()
    with store.transaction():
        order = store.require_order(order_id)
        if payload.status not in VALID_TRANSITIONS.get(order.status, ()):
            raise InvalidStatusTransition(order.status, payload.status)

        changes: dict = {"status": payload.status}
        if payload.estimated_ready_time:
            changes["estimated_ready_time"] = payload.estimated_ready_time

        claims_driver = payload.status == "out-for-delivery" and order.type == "delivery"
        driver_id = payload.assigned_driver_id
        if driver_id and driver_id != order.assigned_driver_id:
            if not claims_driver:
                raise ValueError("A driver can only be assigned when a delivery order goes out for delivery")
            store.claim_driver(driver_id, [order_id])
            changes["assigned_driver_id"] = driver_id
        elif claims_driver and not order.assigned_driver_id:
            available = store.get_available_drivers()
            if available:
                store.claim_driver(available[0].id, [order_id])
                changes["assigned_driver_id"] = available[0].id
            else:
                logger.warning(f"Order {order_id} is out for delivery with no available driver")

        updated = store.update_order(order_id, **changes)
        if payload.status in TERMINAL_STATUSES and updated.assigned_driver_id:
            if store.get_driver(updated.assigned_driver_id) is not None:
                store.release_order(
                    updated.assigned_driver_id,
                    order_id,
                    delivered=payload.status == "delivered",
                )
        _refresh_stats(store, updated.location_id)

    logger.info(f"Order {order_id} status updated: {order.status} -> {payload.status}")
    return order_to_model(updated)


def delete_order(order_id: str, store: Optional[InMemoryStore] = None) -> None:
    store = store or get_store()
    with store.transaction():
        order = store.require_order(order_id)
        if order.status == "delivered":
            raise ValueError("Cannot delete a delivered order")
        if order.assigned_driver_id and store.get_driver(order.assigned_driver_id) is not None:
            store.release_order(order.assigned_driver_id, order_id)
        store.delete_order(order_id)
        _refresh_stats(store, order.location_id)
    logger.info(f"Order deleted: {order_id}")


def bulk_update_status(payload: BulkOrderStatusUpdate, store: Optional[InMemoryStore] = None) -> BulkOrderUpdateResponse:
    """Apply one status change to many orders; each order succeeds or fails on its own."""

    store = store or get_store()
    update = OrderStatusUpdate(status=payload.status, estimated_ready_time=payload.estimated_ready_time)
    results: list[BulkOrderResult] = []
    for order_id in payload.order_ids:
        try:
            order = update_order_status(order_id, update, store)
        except (LookupError, ValueError) as exc:
            results.append(BulkOrderResult(order_id=order_id, success=False, error=str(exc)))
            continue
        results.append(BulkOrderResult(order_id=order_id, success=True, order=order))

    successful = sum(1 for result in results if result.success)
    logger.info(f"Bulk order update to {payload.status}: {successful} of {len(results)} succeeded")
    return BulkOrderUpdateResponse(
        results=results,
        total=len(results),
        successful=successful,
        failed=len(results) - successful,
    )


def _refresh_stats(store: InMemoryStore, location_id: Optional[str]) -> None:
    if location_id and store.get_location(location_id) is not None:
        refresh_location_stats(store, location_id)
