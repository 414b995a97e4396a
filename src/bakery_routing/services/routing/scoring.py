"""Sub-factor scores and weighting used to rank candidate locations for an order.

Every sub-score is on a 0-100 scale. The composite is a weighted sum whose
weights add up to 1.0, so it stays on the same scale.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import Driver, Location, Order
from ..coverage.resolver import extended_coverage, resolve_neighborhood
from ..coverage.table import CoverageTable
from ..geospatial import approximate_distance, haversine_miles
from .models import ScoreFactors

PRIMARY_COVERAGE_SCORE = 100.0
EXTENDED_COVERAGE_SCORE = 70.0
REQUESTED_LOCATION_SCORE = 100.0
OTHER_LOCATION_SCORE = 50.0
MISSING_ADDRESS_SCORE = 50.0
UNKNOWN_STATE_SCORE = 50.0

# (upper bound, score) pairs, checked in order; anything further scores FAR_SCORE.
DISTANCE_BREAKPOINTS: tuple[tuple[float, float], ...] = (
    (2.0, 90.0),
    (4.0, 70.0),
    (6.0, 50.0),
    (8.0, 30.0),
)
FAR_SCORE = 10.0

CAPACITY_SCORES = {"low": 100.0, "medium": 60.0, "high": 20.0}
AVAILABILITY_SCORES = {"open": 100.0, "busy": 40.0, "closed": 0.0}

# (minimum nearby drivers, score), checked in order.
DRIVER_COUNT_SCORES: tuple[tuple[int, float], ...] = (
    (3, 100.0),
    (2, 70.0),
    (1, 40.0),
)
NO_DRIVER_SCORE = 10.0


@dataclass(slots=True, frozen=True)
class RoutingWeights:
    distance: float = 0.40
    capacity: float = 0.25
    availability: float = 0.20
    driver_availability: float = 0.15

    def __post_init__(self) -> None:
        values = (self.distance, self.capacity, self.availability, self.driver_availability)
        if any(value < 0 for value in values):
            raise ValueError("Routing weights must be non-negative.")
        if abs(sum(values) - 1.0) > 1e-6:
            raise ValueError(f"Routing weights must sum to 1.0 (got {sum(values):.4f}).")

    @classmethod
    def from_settings(cls) -> "RoutingWeights":
        return cls(
            distance=settings.weight_distance,
            capacity=settings.weight_capacity,
            availability=settings.weight_availability,
            driver_availability=settings.weight_driver_availability,
        )


def score_from_distance(distance: float) -> float:
    for upper_bound, score in DISTANCE_BREAKPOINTS:
        if distance < upper_bound:
            return score
    return FAR_SCORE


def distance_score(
    order: Order,
    location: Location,
    table: CoverageTable,
    *,
    street_number_scale: float = 1.0,
) -> float:
    """Score how well placed ``location`` is to fulfil ``order``.

    Non-delivery orders prefer the location the customer picked. Delivery
    orders score by neighborhood coverage first and fall back to the
    street-number approximation against the location's address.
    """

    if order.type != "delivery":
        return REQUESTED_LOCATION_SCORE if order.location_id == location.id else OTHER_LOCATION_SCORE
    if not order.delivery_address:
        return MISSING_ADDRESS_SCORE

    neighborhood = resolve_neighborhood(order.delivery_address, table)
    if location.id in table.primary_locations(neighborhood):
        return PRIMARY_COVERAGE_SCORE
    if location.id in extended_coverage(order.delivery_address, table):
        return EXTENDED_COVERAGE_SCORE

    distance = approximate_distance(order.delivery_address, location.address, scale=street_number_scale)
    return score_from_distance(distance)


def capacity_score(location: Location) -> float:
    return CAPACITY_SCORES.get(location.stats.kitchen_load, UNKNOWN_STATE_SCORE)


def availability_score(location: Location) -> float:
    return AVAILABILITY_SCORES.get(location.status, UNKNOWN_STATE_SCORE)


def count_nearby_drivers(location: Location, drivers: Sequence[Driver], *, radius_miles: float) -> int:
    """Count available drivers whose last known position is within ``radius_miles`` of the location."""

    if location.coordinates is None:
        return 0
    origin = location.coordinates
    count = 0
    for driver in drivers:
        if driver.status != "available" or driver.current_location is None:
            continue
        position = driver.current_location
        if haversine_miles(position.lat, position.lng, origin.lat, origin.lng) < radius_miles:
            count += 1
    return count


def driver_availability_score(location: Location, drivers: Sequence[Driver], *, radius_miles: float) -> float:
    nearby = count_nearby_drivers(location, drivers, radius_miles=radius_miles)
    for minimum, score in DRIVER_COUNT_SCORES:
        if nearby >= minimum:
            return score
    return NO_DRIVER_SCORE


def composite_score(factors: ScoreFactors, weights: RoutingWeights) -> float:
    total = (
        factors.distance * weights.distance
        + factors.capacity * weights.capacity
        + factors.availability * weights.availability
        + factors.driver_availability * weights.driver_availability
    )
    # float products like 0.15 * 100 can land a hair outside the scale
    return min(100.0, max(0.0, round(total, 6)))


def score_factors(
    order: Order,
    location: Location,
    drivers: Sequence[Driver],
    table: CoverageTable,
    *,
    radius_miles: Optional[float] = None,
    street_number_scale: Optional[float] = None,
) -> ScoreFactors:
    radius = radius_miles if radius_miles is not None else settings.driver_proximity_miles
    scale = street_number_scale if street_number_scale is not None else settings.street_number_scale
    return ScoreFactors(
        distance=distance_score(order, location, table, street_number_scale=scale),
        capacity=capacity_score(location),
        availability=availability_score(location),
        driver_availability=driver_availability_score(location, drivers, radius_miles=radius),
    )
