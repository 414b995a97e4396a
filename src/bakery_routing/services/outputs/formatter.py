"""Conversions from domain records and engine results to API schemas and CSV."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict

from ...models.domain import DeliveryZone, Driver, Location, Order
from ...schemas.drivers import DriverModel
from ...schemas.locations import LocationModel
from ...schemas.orders import OrderModel
from ...schemas.routing import (
    BatchingResponse,
    DeliveryBatchModel,
    DispatchResponse,
    RouteStopModel,
    RoutingDecisionModel,
    RoutingScoreModel,
    ScoreFactorsModel,
    SkippedBatchModel,
)
from ...schemas.zones import DeliveryZoneModel
from ..routing.models import BatchingResult, DeliveryBatch, DispatchResult, RoutingDecision, RoutingScore


def order_to_model(order: Order) -> OrderModel:
    return OrderModel.model_validate(asdict(order))


def driver_to_model(driver: Driver) -> DriverModel:
    return DriverModel.model_validate(asdict(driver))


def location_to_model(location: Location) -> LocationModel:
    return LocationModel.model_validate(asdict(location))


def zone_to_model(zone: DeliveryZone) -> DeliveryZoneModel:
    return DeliveryZoneModel.model_validate(asdict(zone))


def _score_to_model(score: RoutingScore) -> RoutingScoreModel:
    return RoutingScoreModel(
        location_id=score.location_id,
        score=score.score,
        factors=ScoreFactorsModel(**score.factors.as_dict()),
    )


def decision_to_model(decision: RoutingDecision) -> RoutingDecisionModel:
    return RoutingDecisionModel(
        order_id=decision.order_id,
        selected_location=decision.location_id,
        score=decision.selected.score,
        factors=ScoreFactorsModel(**decision.selected.factors.as_dict()),
        candidates=[_score_to_model(score) for score in decision.candidates],
    )


def batch_to_model(batch: DeliveryBatch) -> DeliveryBatchModel:
    return DeliveryBatchModel(
        id=batch.id,
        driver_id=batch.driver_id,
        location_id=batch.location_id,
        order_ids=list(batch.order_ids),
        estimated_minutes=batch.estimated_minutes,
        total_distance_miles=batch.total_distance_miles,
        route=[RouteStopModel(**asdict(stop)) for stop in batch.route],
    )


def batching_result_to_model(result: BatchingResult) -> BatchingResponse:
    return BatchingResponse(
        location_id=result.location_id,
        batches=[batch_to_model(batch) for batch in result.batches],
        eligible_orders=result.eligible_orders,
        group_count=result.group_count,
        dropped_groups=result.dropped_groups,
        served_orders=result.served_orders,
        pending_orders=result.pending_orders,
        unserved_order_ids=list(result.unserved_order_ids),
        is_partial=result.is_partial,
    )


def dispatch_result_to_model(result: DispatchResult) -> DispatchResponse:
    return DispatchResponse(
        plan=batching_result_to_model(result.plan),
        dispatched=[batch_to_model(batch) for batch in result.dispatched],
        skipped=[SkippedBatchModel(**asdict(skipped)) for skipped in result.skipped],
    )


def batching_result_to_csv(result: BatchingResult) -> str:
    """One row per stop, the layout drivers get as a printed dispatch sheet."""

    buffer = io.StringIO()
    fieldnames = [
        "batch_id",
        "driver_id",
        "sequence",
        "order_id",
        "address",
        "estimated_minutes",
        "total_distance_miles",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for batch in result.batches:
        for stop in batch.route:
            writer.writerow(
                {
                    "batch_id": batch.id,
                    "driver_id": batch.driver_id,
                    "sequence": stop.sequence,
                    "order_id": stop.order_id,
                    "address": stop.address,
                    "estimated_minutes": batch.estimated_minutes,
                    "total_distance_miles": batch.total_distance_miles,
                }
            )
    return buffer.getvalue()
