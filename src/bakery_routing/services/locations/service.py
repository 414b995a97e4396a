"""Location lookups, operational status updates and order-driven kitchen stats."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional, Sequence

from ...data.store import InMemoryStore, get_store
from ...models.domain import Location, Order
from ...schemas.locations import LocationModel, LocationStatsReport, LocationUpdateRequest
from ..outputs.formatter import location_to_model

logger = logging.getLogger(__name__)

ACTIVE_ORDER_STATUSES = frozenset({"pending", "confirmed", "preparing", "ready", "out-for-delivery"})

# (most active orders, load), checked in order; anything busier is "high".
KITCHEN_LOAD_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (3, "low"),
    (8, "medium"),
)
DEFAULT_PEAK_HOUR = 12


def kitchen_load_for(active_orders: int) -> str:
    for ceiling, load in KITCHEN_LOAD_THRESHOLDS:
        if active_orders <= ceiling:
            return load
    return "high"


def _orders_today(orders: Sequence[Order], now: datetime) -> list[Order]:
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return [order for order in orders if order.created_at is not None and order.created_at >= start_of_day]


def refresh_location_stats(
    store: InMemoryStore,
    location_id: str,
    *,
    now: Optional[datetime] = None,
) -> Location:
    """Recompute a location's order-driven stats from its current orders.

    Active orders, today's order count and revenue, and the kitchen load are
    derived. The average prep time is left as is.
    """

    now = now or datetime.now(timezone.utc)
    with store.transaction():
        location = store.require_location(location_id)
        orders = store.get_orders_by_location(location_id)
        active = sum(1 for order in orders if order.status in ACTIVE_ORDER_STATUSES)
        today = _orders_today(orders, now)
        stats = replace(
            location.stats,
            kitchen_load=kitchen_load_for(active),
            active_orders=active,
            today_orders=len(today),
            today_revenue=round(sum(order.total for order in today), 2),
        )
        updated = store.update_location(location_id, stats=stats)

    if updated.stats.kitchen_load != location.stats.kitchen_load:
        logger.info(
            f"Location {location_id} kitchen load {location.stats.kitchen_load} -> "
            f"{updated.stats.kitchen_load} ({active} active orders)"
        )
    return updated


def list_locations(store: Optional[InMemoryStore] = None) -> list[LocationModel]:
    store = store or get_store()
    return [location_to_model(location) for location in store.get_locations()]


def get_location(location_id: str, store: Optional[InMemoryStore] = None) -> LocationModel:
    store = store or get_store()
    return location_to_model(store.require_location(location_id))


def location_stats(
    location_id: str,
    store: Optional[InMemoryStore] = None,
    *,
    now: Optional[datetime] = None,
) -> LocationStatsReport:
    """Fresh operational report for one location, computed from its orders. Does not write."""

    store = store or get_store()
    now = now or datetime.now(timezone.utc)
    location = store.require_location(location_id)
    orders = store.get_orders_by_location(location_id)
    active = [order for order in orders if order.status in ACTIVE_ORDER_STATUSES]
    today = _orders_today(orders, now)
    completed_today = [order for order in today if order.status == "delivered"]
    revenue = round(sum(order.total for order in today), 2)

    prep_minutes = [
        max(0.0, (order.estimated_ready_time - order.created_at).total_seconds() / 60)
        for order in completed_today
        if order.estimated_ready_time is not None
    ]
    avg_prep_time = round(sum(prep_minutes) / len(prep_minutes)) if prep_minutes else location.stats.avg_prep_time

    hours = Counter(order.created_at.hour for order in orders if order.created_at is not None)
    # lowest hour wins ties
    peak_hour = max(sorted(hours), key=hours.__getitem__) if hours else DEFAULT_PEAK_HOUR

    return LocationStatsReport(
        location_id=location_id,
        today_orders=len(today),
        today_revenue=revenue,
        active_orders=len(active),
        completed_today=len(completed_today),
        avg_prep_time=avg_prep_time,
        kitchen_load=kitchen_load_for(len(active)),
        avg_order_value=round(revenue / len(today), 2) if today else 0.0,
        peak_hour=peak_hour,
        status_breakdown=dict(Counter(order.status for order in active)),
    )


def update_location(
    location_id: str,
    payload: LocationUpdateRequest,
    store: Optional[InMemoryStore] = None,
) -> LocationModel:
    """Update the status and/or kitchen load the routing engine scores against.

    A manual kitchen load holds until the location's next order change.
    """

    store = store or get_store()
    with store.transaction():
        location = store.require_location(location_id)
        changes: dict = {}
        if payload.status is not None:
            changes["status"] = payload.status
        if payload.kitchen_load is not None:
            changes["stats"] = replace(location.stats, kitchen_load=payload.kitchen_load)
        updated = store.update_location(location_id, **changes)

    logger.info(
        f"Location {location_id} updated: status={updated.status}, kitchen_load={updated.stats.kitchen_load}"
    )
    return location_to_model(updated)
