"""Address to neighborhood resolution and coverage-based location recommendation."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import Location
from .table import CoverageTable, load_coverage_table

logger = logging.getLogger(__name__)

UNKNOWN_NEIGHBORHOOD = "Unknown"

# Checked in order after the table scan. Matching is case-sensitive.
BOROUGH_FALLBACKS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("Brooklyn",), "Brooklyn Heights"),
    (("Upper East", "UES"), "Upper East Side"),
    (("Midtown", "Times Square"), "Midtown West"),
)

KITCHEN_LOAD_RANK = {"low": 0, "medium": 1, "high": 2}


def resolve_neighborhood(address: Optional[str], table: Optional[CoverageTable] = None) -> str:
    """Map a free-form address to a neighborhood name from the coverage table.

    The first table row with primary coverage whose name appears in the
    address (case-insensitive) wins. Otherwise borough keywords pick a
    representative neighborhood, and ``"Unknown"`` is returned when nothing
    matches.
    """

    if not address:
        return UNKNOWN_NEIGHBORHOOD
    if table is None:
        table = load_coverage_table()
    lowered = address.lower()
    for row in table:
        # extended-only areas must not shadow the borough fallbacks
        if row.primary and row.name.lower() in lowered:
            return row.name
    for keywords, neighborhood in BOROUGH_FALLBACKS:
        if any(keyword in address for keyword in keywords):
            return neighborhood
    return UNKNOWN_NEIGHBORHOOD


def recommend_location(
    address: Optional[str],
    locations: Sequence[Location],
    table: Optional[CoverageTable] = None,
    *,
    fallback_location_id: Optional[str] = None,
) -> str:
    """Pick the covering location with the lightest kitchen load for ``address``.

    Only primary coverage counts. Ties keep table order. Returns the fallback
    location when nothing known covers the neighborhood.
    """

    if table is None:
        table = load_coverage_table()
    fallback = fallback_location_id or settings.fallback_location_id
    neighborhood = resolve_neighborhood(address, table)
    by_id = {location.id: location for location in locations}
    candidates = [by_id[location_id] for location_id in table.primary_locations(neighborhood) if location_id in by_id]
    if not candidates:
        logger.debug(f"No coverage for neighborhood '{neighborhood}', falling back to {fallback}")
        return fallback

    candidates.sort(key=lambda location: KITCHEN_LOAD_RANK.get(location.stats.kitchen_load, len(KITCHEN_LOAD_RANK)))
    return candidates[0].id


def extended_coverage(address: Optional[str], table: Optional[CoverageTable] = None) -> tuple[str, ...]:
    """Locations that reach ``address`` through extended coverage.

    Combines the extended list of the resolved neighborhood with every
    extended-only area named in the address.
    """

    if not address:
        return ()
    if table is None:
        table = load_coverage_table()
    found = list(table.extended_locations(resolve_neighborhood(address, table)))
    lowered = address.lower()
    for row in table:
        if row.primary or row.name.lower() not in lowered:
            continue
        found.extend(location_id for location_id in row.extended if location_id not in found)
    return tuple(found)
