"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(slots=True, frozen=True)
class ScoreFactors:
    distance: float
    capacity: float
    availability: float
    driver_availability: float

    def as_dict(self) -> dict[str, float]:
        return {
            "distance": self.distance,
            "capacity": self.capacity,
            "availability": self.availability,
            "driver_availability": self.driver_availability,
        }


@dataclass(slots=True, frozen=True)
class RoutingScore:
    location_id: str
    score: float
    factors: ScoreFactors


@dataclass(slots=True, frozen=True)
class RoutingDecision:
    """Outcome of routing one order: the winner plus every candidate in input order."""

    order_id: Optional[str]
    selected: RoutingScore
    candidates: List[RoutingScore]

    @property
    def location_id(self) -> str:
        return self.selected.location_id


@dataclass(slots=True)
class RouteStop:
    order_id: str
    address: str
    sequence: int


@dataclass(slots=True)
class DeliveryBatch:
    id: str
    driver_id: str
    location_id: str
    order_ids: List[str]
    estimated_minutes: float
    total_distance_miles: float
    route: List[RouteStop]

    @property
    def order_count(self) -> int:
        return len(self.order_ids)

    @property
    def stop_positions(self) -> dict[str, int]:
        return {stop.order_id: stop.sequence for stop in self.route}


@dataclass(slots=True)
class BatchingResult:
    """Batches proposed for one location plus the orders left without a driver."""

    location_id: str
    batches: List[DeliveryBatch]
    eligible_orders: int
    group_count: int
    unserved_order_ids: List[str] = field(default_factory=list)

    @property
    def dropped_groups(self) -> int:
        return self.group_count - len(self.batches)

    @property
    def served_orders(self) -> int:
        return sum(batch.order_count for batch in self.batches)

    @property
    def pending_orders(self) -> int:
        return len(self.unserved_order_ids)

    @property
    def is_partial(self) -> bool:
        return self.dropped_groups > 0


@dataclass(slots=True)
class SkippedBatch:
    batch_id: str
    driver_id: str
    reason: str


@dataclass(slots=True)
class DispatchResult:
    """Batches that were applied to the store, and the ones that lost a race."""

    plan: BatchingResult
    dispatched: List[DeliveryBatch] = field(default_factory=list)
    skipped: List[SkippedBatch] = field(default_factory=list)
