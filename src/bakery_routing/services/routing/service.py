"""Routing orchestration service.

Reads consistent snapshots from the store, runs the pure routing engine on
them, and applies batch assignments back to the store one batch at a time.
"""

from __future__ import annotations

import logging
from typing import Optional

from ...data.store import InMemoryStore, get_store
from ...models.domain import Order
from ...schemas.routing import (
    AddressRequest,
    CoverageRowModel,
    NeighborhoodResponse,
    RecommendationResponse,
    RoutingDecisionModel,
    RoutingRequest,
)
from ..coverage.resolver import extended_coverage, recommend_location, resolve_neighborhood
from ..coverage.table import load_coverage_table
from ..outputs.formatter import decision_to_model
from .batching import batch_deliveries, is_batchable
from .models import BatchingResult, DeliveryBatch, DispatchResult, RoutingDecision, SkippedBatch
from .selector import decide_location

logger = logging.getLogger(__name__)


def route_order(order: Order, store: Optional[InMemoryStore] = None) -> RoutingDecision:
    """Choose a location for ``order`` from the current store state. Does not write."""

    store = store or get_store()
    snapshot = store.snapshot()
    return decide_location(order, snapshot.locations, snapshot.drivers)


def recommend_for_address(address: str, store: Optional[InMemoryStore] = None) -> str:
    store = store or get_store()
    return recommend_location(address, store.get_locations())


def plan_batches(location_id: str, store: Optional[InMemoryStore] = None) -> BatchingResult:
    """Preview delivery batches for a location without assigning anything."""

    store = store or get_store()
    store.require_location(location_id)
    snapshot = store.snapshot()
    return batch_deliveries(location_id, snapshot.orders_for_location(location_id), snapshot.drivers)


def _apply_batch(store: InMemoryStore, batch: DeliveryBatch) -> None:
    with store.transaction():
        for order_id in batch.order_ids:
            order = store.require_order(order_id)
            if not is_batchable(order, batch.location_id):
                raise ValueError(f"Order {order_id} is no longer ready for dispatch (status: {order.status}).")
        store.claim_driver(batch.driver_id, batch.order_ids)
        for order_id in batch.order_ids:
            store.update_order(order_id, assigned_driver_id=batch.driver_id, status="out-for-delivery")


def dispatch_batches(location_id: str, store: Optional[InMemoryStore] = None) -> DispatchResult:
    """Plan batches for a location and assign each one to its driver.

    Each batch is applied under the store lock: the orders are re-checked and
    the driver is claimed with a compare-and-swap on its status. A batch whose
    driver or orders changed since planning is skipped and left untouched.
    """

    store = store or get_store()
    plan = plan_batches(location_id, store)
    result = DispatchResult(plan=plan)
    for batch in plan.batches:
        try:
            _apply_batch(store, batch)
        except (ValueError, LookupError) as exc:
            # DriverUnavailable, an order that changed state, or an order removed since planning
            logger.warning(f"Skipping {batch.id}: {exc}")
            result.skipped.append(SkippedBatch(batch_id=batch.id, driver_id=batch.driver_id, reason=str(exc)))
            continue
        result.dispatched.append(batch)

    logger.info(
        f"Dispatched {len(result.dispatched)} of {len(plan.batches)} batches for {location_id} "
        f"({len(result.skipped)} skipped, {plan.pending_orders} orders without a driver)"
    )
    return result


def select_for_request(payload: RoutingRequest, store: Optional[InMemoryStore] = None) -> RoutingDecisionModel:
    """Score an ad-hoc order description against the current locations."""

    order = Order(
        id=payload.order_id or "adhoc",
        type=payload.type,
        status="pending",
        customer_name="",
        location_id=payload.location_id,
        delivery_address=payload.delivery_address,
    )
    return decision_to_model(route_order(order, store))


def recommend_for_request(payload: AddressRequest, store: Optional[InMemoryStore] = None) -> RecommendationResponse:
    return RecommendationResponse(
        address=payload.address,
        neighborhood=resolve_neighborhood(payload.address),
        location_id=recommend_for_address(payload.address, store),
    )


def neighborhood_for_request(payload: AddressRequest) -> NeighborhoodResponse:
    table = load_coverage_table()
    neighborhood = resolve_neighborhood(payload.address, table)
    return NeighborhoodResponse(
        address=payload.address,
        neighborhood=neighborhood,
        primary=list(table.primary_locations(neighborhood)),
        extended=list(extended_coverage(payload.address, table)),
    )


def coverage_rows() -> list[CoverageRowModel]:
    return [
        CoverageRowModel(name=row.name, primary=list(row.primary), extended=list(row.extended))
        for row in load_coverage_table()
    ]
