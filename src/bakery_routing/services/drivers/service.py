"""Driver status, position and order assignment."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from ...data.store import InMemoryStore, get_store
from ...errors import DriverUnavailable
from ...models.domain import GeoPoint
from ...schemas.drivers import (
    DriverLocationUpdate,
    DriverModel,
    DriverOrderRequest,
    DriverOrderResponse,
    DriverPerformanceModel,
    DriverPerformanceResponse,
    DriverPerformanceSummary,
    DriverStatusUpdate,
)
from ...schemas.orders import OrderModel
from ..locations.service import refresh_location_stats
from ..outputs.formatter import driver_to_model, order_to_model

logger = logging.getLogger(__name__)


def list_drivers(
    *,
    status: Optional[str] = None,
    available_only: bool = False,
    store: Optional[InMemoryStore] = None,
) -> list[DriverModel]:
    store = store or get_store()
    drivers = store.get_drivers()
    if status:
        drivers = [driver for driver in drivers if driver.status == status]
    if available_only:
        drivers = [driver for driver in drivers if driver.status == "available"]
    drivers.sort(key=lambda driver: driver.status != "available")
    return [driver_to_model(driver) for driver in drivers]


def get_driver(driver_id: str, store: Optional[InMemoryStore] = None) -> DriverModel:
    store = store or get_store()
    return driver_to_model(store.require_driver(driver_id))


def update_driver_status(
    driver_id: str,
    payload: DriverStatusUpdate,
    store: Optional[InMemoryStore] = None,
) -> DriverModel:
    """Change a driver's status.

    Going offline unlinks every assigned order. A driver still holding orders
    cannot be made available, so it cannot be claimed a second time.
    """

    store = store or get_store()
    with store.transaction():
        driver = store.require_driver(driver_id)
        if payload.status == "available" and driver.assigned_orders:
            raise ValueError(
                f"Driver '{driver_id}' still has {len(driver.assigned_orders)} assigned orders; "
                "complete or reassign them first"
            )
        changes: dict = {"status": payload.status}
        if payload.status == "offline":
            for order_id in driver.assigned_orders:
                if store.get_order(order_id) is not None:
                    store.update_order(order_id, assigned_driver_id=None)
            changes["assigned_orders"] = []
        updated = store.update_driver(driver_id, **changes)

    logger.info(f"Driver {driver_id} status updated: {driver.status} -> {payload.status}")
    return driver_to_model(updated)


def update_driver_location(
    driver_id: str,
    payload: DriverLocationUpdate,
    store: Optional[InMemoryStore] = None,
) -> DriverModel:
    store = store or get_store()
    updated = store.update_driver(driver_id, current_location=GeoPoint(lat=payload.lat, lng=payload.lng))
    logger.debug(f"Driver {driver_id} location updated: ({payload.lat}, {payload.lng})")
    return driver_to_model(updated)


def assign_order(
    driver_id: str,
    payload: DriverOrderRequest,
    store: Optional[InMemoryStore] = None,
) -> DriverOrderResponse:
    """Hand a ready delivery order to an available driver."""

    store = store or get_store()
    with store.transaction():
        driver = store.require_driver(driver_id)
        order = store.require_order(payload.order_id)
        if driver.status != "available":
            raise DriverUnavailable(driver_id, driver.status)
        if order.status != "ready":
            raise ValueError("Order is not ready for delivery")
        if order.type != "delivery":
            raise ValueError("Order is not a delivery order")

        claimed = store.claim_driver(driver_id, [order.id])
        updated_order = store.update_order(order.id, assigned_driver_id=driver_id, status="out-for-delivery")

    logger.info(f"Order {order.id} assigned to driver {driver_id}")
    return DriverOrderResponse(driver=driver_to_model(claimed), order=order_to_model(updated_order))


def complete_order(
    driver_id: str,
    payload: DriverOrderRequest,
    store: Optional[InMemoryStore] = None,
) -> DriverOrderResponse:
    store = store or get_store()
    with store.transaction():
        store.require_driver(driver_id)
        order = store.require_order(payload.order_id)
        if order.assigned_driver_id != driver_id:
            raise ValueError("Order is not assigned to this driver")
        if order.status != "out-for-delivery":
            raise ValueError("Order is not out for delivery")

        updated_order = store.update_order(order.id, status="delivered")
        released = store.release_order(driver_id, order.id, delivered=True)
        if order.location_id and store.get_location(order.location_id) is not None:
            refresh_location_stats(store, order.location_id)

    logger.info(f"Order {order.id} completed by driver {driver_id} (total deliveries: {released.total_deliveries})")
    return DriverOrderResponse(driver=driver_to_model(released), order=order_to_model(updated_order))


def driver_orders(
    driver_id: str,
    *,
    status: Optional[str] = None,
    store: Optional[InMemoryStore] = None,
) -> list[OrderModel]:
    store = store or get_store()
    store.require_driver(driver_id)
    orders = store.get_orders_by_driver(driver_id)
    if status:
        orders = [order for order in orders if order.status == status]
    return [order_to_model(order) for order in orders]


def driver_performance(
    store: Optional[InMemoryStore] = None,
    *,
    now: Optional[datetime] = None,
) -> DriverPerformanceResponse:
    """Per-driver delivery counts for today plus a fleet summary, busiest drivers first."""

    store = store or get_store()
    now = now or datetime.now(timezone.utc)
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    snapshot = store.snapshot()

    delivered_today: dict[str, int] = {}
    for order in snapshot.orders:
        if order.status != "delivered" or order.assigned_driver_id is None:
            continue
        if order.created_at is None or order.created_at < start_of_day:
            continue
        delivered_today[order.assigned_driver_id] = delivered_today.get(order.assigned_driver_id, 0) + 1

    rows = [
        DriverPerformanceModel(
            id=driver.id,
            name=driver.name,
            status=driver.status,
            rating=driver.rating,
            total_deliveries=driver.total_deliveries,
            today_deliveries=delivered_today.get(driver.id, 0),
            current_orders=len(driver.assigned_orders),
            vehicle_type=driver.vehicle_type,
        )
        for driver in snapshot.drivers
    ]
    rows.sort(key=lambda row: row.today_deliveries, reverse=True)

    ratings = [driver.rating for driver in snapshot.drivers if driver.rating is not None]
    summary = DriverPerformanceSummary(
        total_drivers=len(rows),
        available_drivers=sum(1 for row in rows if row.status == "available"),
        busy_drivers=sum(1 for row in rows if row.status == "busy"),
        offline_drivers=sum(1 for row in rows if row.status == "offline"),
        total_deliveries_today=sum(row.today_deliveries for row in rows),
        average_rating=round(sum(ratings) / len(ratings), 2) if ratings else 0.0,
    )
    return DriverPerformanceResponse(drivers=rows, summary=summary)
