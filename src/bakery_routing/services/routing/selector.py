"""Best-fit location selection for incoming orders."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ...errors import NoLocationsAvailable
from ...models.domain import Driver, Location, Order
from ..coverage.table import CoverageTable, load_coverage_table
from .models import RoutingDecision, RoutingScore
from .scoring import RoutingWeights, composite_score, score_factors

logger = logging.getLogger(__name__)


def score_locations(
    order: Order,
    locations: Sequence[Location],
    drivers: Sequence[Driver],
    *,
    table: Optional[CoverageTable] = None,
    weights: Optional[RoutingWeights] = None,
    radius_miles: Optional[float] = None,
    street_number_scale: Optional[float] = None,
) -> list[RoutingScore]:
    """Score every candidate location for ``order``, preserving input order."""

    if table is None:
        table = load_coverage_table()
    weights = weights or RoutingWeights.from_settings()
    scores: list[RoutingScore] = []
    for location in locations:
        factors = score_factors(
            order,
            location,
            drivers,
            table,
            radius_miles=radius_miles,
            street_number_scale=street_number_scale,
        )
        scores.append(
            RoutingScore(
                location_id=location.id,
                score=composite_score(factors, weights),
                factors=factors,
            )
        )
    return scores


def decide_location(
    order: Order,
    locations: Sequence[Location],
    drivers: Sequence[Driver],
    **options,
) -> RoutingDecision:
    """Score all candidates and pick the highest composite.

    Ties go to the candidate that appears first in ``locations``.
    """

    scores = score_locations(order, locations, drivers, **options)
    if not scores:
        raise NoLocationsAvailable(order.id)

    # max() keeps the first maximal element
    best = max(scores, key=lambda item: item.score)
    logger.info(
        f"Order {order.id} routed to {best.location_id} "
        f"(score={best.score:.2f}, factors={best.factors.as_dict()})",
        extra={
            "routing_decision": {
                "order_id": order.id,
                "selected_location": best.location_id,
                "score": best.score,
                "factors": best.factors.as_dict(),
            }
        },
    )
    return RoutingDecision(order_id=order.id, selected=best, candidates=scores)


def select_location(
    order: Order,
    locations: Sequence[Location],
    drivers: Sequence[Driver],
    **options,
) -> str:
    """Return the id of the best-fit location for ``order``.

    Raises NoLocationsAvailable when ``locations`` is empty.
    """

    return decide_location(order, locations, drivers, **options).location_id
