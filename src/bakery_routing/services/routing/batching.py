"""Grouping of ready delivery orders into driver-sized batches."""

from __future__ import annotations

import logging
import uuid
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import Driver, Order
from ..coverage.resolver import resolve_neighborhood
from ..coverage.table import CoverageTable, load_coverage_table
from .models import BatchingResult, DeliveryBatch, RouteStop

logger = logging.getLogger(__name__)


def is_batchable(order: Order, location_id: str) -> bool:
    """Ready delivery orders at ``location_id`` that have no driver yet."""

    return (
        order.location_id == location_id
        and order.type == "delivery"
        and order.status == "ready"
        and not order.assigned_driver_id
    )


def group_orders_by_proximity(
    orders: Sequence[Order],
    *,
    max_batch_size: int,
    table: CoverageTable,
) -> list[list[Order]]:
    """Greedily group orders that resolve to the same neighborhood.

    Each unprocessed order seeds a group, then one pass over the remaining
    orders pulls in same-neighborhood orders until the group is full. Orders
    without an address always end up alone.
    """

    if max_batch_size < 1:
        raise ValueError("max_batch_size must be >= 1")

    neighborhoods = {
        order.id: resolve_neighborhood(order.delivery_address, table) if order.delivery_address else None
        for order in orders
    }
    processed: set[str] = set()
    groups: list[list[Order]] = []
    for index, seed in enumerate(orders):
        if seed.id in processed:
            continue
        group = [seed]
        processed.add(seed.id)
        seed_neighborhood = neighborhoods[seed.id]
        if seed_neighborhood is not None:
            for candidate in orders[index + 1 :]:
                if len(group) >= max_batch_size:
                    break
                if candidate.id in processed:
                    continue
                if neighborhoods[candidate.id] == seed_neighborhood:
                    group.append(candidate)
                    processed.add(candidate.id)
        groups.append(group)
    return groups


def estimate_batch_minutes(
    order_count: int,
    *,
    base_minutes: Optional[float] = None,
    minutes_per_stop: Optional[float] = None,
    travel_minutes_per_stop: Optional[float] = None,
) -> float:
    """Base time plus per-stop handling plus inter-stop travel."""

    base = settings.batch_base_minutes if base_minutes is None else base_minutes
    per_stop = settings.batch_minutes_per_stop if minutes_per_stop is None else minutes_per_stop
    travel = settings.batch_travel_minutes_per_stop if travel_minutes_per_stop is None else travel_minutes_per_stop
    return base + order_count * per_stop + order_count * travel


def estimate_batch_distance(order_count: int, *, miles_per_order: Optional[float] = None) -> float:
    per_order = settings.batch_miles_per_order if miles_per_order is None else miles_per_order
    return order_count * per_order


def sequence_stops(group: Sequence[Order]) -> list[RouteStop]:
    """Stops in group order, numbered from 1."""

    return [
        RouteStop(order_id=order.id, address=order.delivery_address or "", sequence=position)
        for position, order in enumerate(group, start=1)
    ]


def batch_deliveries(
    location_id: str,
    orders: Sequence[Order],
    drivers: Sequence[Driver],
    *,
    table: Optional[CoverageTable] = None,
    max_batch_size: Optional[int] = None,
) -> BatchingResult:
    """Propose driver batches for the ready, unassigned delivery orders at a location.

    Groups are paired with available drivers by position. Groups beyond the
    number of available drivers get no batch; their orders are reported in
    ``unserved_order_ids``. Nothing in ``orders`` or ``drivers`` is modified.
    """

    if table is None:
        table = load_coverage_table()
    size = max_batch_size if max_batch_size is not None else settings.max_batch_size

    eligible = [order for order in orders if is_batchable(order, location_id)]
    if not eligible:
        return BatchingResult(location_id=location_id, batches=[], eligible_orders=0, group_count=0)

    available = [driver for driver in drivers if driver.status == "available"]
    groups = group_orders_by_proximity(eligible, max_batch_size=size, table=table)

    batch_prefix = uuid.uuid4().hex[:8]
    batches: list[DeliveryBatch] = []
    unserved: list[str] = []
    for index, group in enumerate(groups):
        if index >= len(available):
            unserved.extend(order.id for order in group)
            continue
        batches.append(
            DeliveryBatch(
                id=f"batch-{batch_prefix}-{index}",
                driver_id=available[index].id,
                location_id=location_id,
                order_ids=[order.id for order in group],
                estimated_minutes=estimate_batch_minutes(len(group)),
                total_distance_miles=estimate_batch_distance(len(group)),
                route=sequence_stops(group),
            )
        )

    result = BatchingResult(
        location_id=location_id,
        batches=batches,
        eligible_orders=len(eligible),
        group_count=len(groups),
        unserved_order_ids=unserved,
    )
    logger.info(
        f"Delivery batches created for {location_id}: {len(batches)} batches for {len(eligible)} orders",
        extra={"location_id": location_id, "batch_count": len(batches), "total_orders": len(eligible)},
    )
    if result.is_partial:
        logger.warning(
            f"{result.dropped_groups} delivery groups at {location_id} have no available driver "
            f"({result.pending_orders} orders pending)"
        )
    return result
