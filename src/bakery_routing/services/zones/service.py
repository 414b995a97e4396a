"""Delivery zone coverage and address eligibility checks."""

from __future__ import annotations

import logging
from typing import Optional

from ...data.store import InMemoryStore, get_store
from ...errors import EntityNotFound
from ...models.domain import DeliveryZone
from ...schemas.zones import (
    AddressCheckRequest,
    AddressCheckResponse,
    DeliveryOption,
    DeliveryZoneModel,
    ZoneCoverageResponse,
    ZoneSummaryModel,
)
from ..coverage.resolver import extended_coverage, recommend_location, resolve_neighborhood
from ..coverage.table import load_coverage_table
from ..geospatial import point_in_polygon
from ..outputs.formatter import zone_to_model

logger = logging.getLogger(__name__)


def list_zones(
    *,
    location_id: Optional[str] = None,
    active: Optional[bool] = None,
    store: Optional[InMemoryStore] = None,
) -> list[DeliveryZoneModel]:
    store = store or get_store()
    zones = store.get_delivery_zones(location_id)
    if active is not None:
        zones = [zone for zone in zones if zone.active == active]
    return [zone_to_model(zone) for zone in zones]


def get_zone(zone_id: str, store: Optional[InMemoryStore] = None) -> DeliveryZoneModel:
    store = store or get_store()
    zone = store.get_delivery_zone(zone_id)
    if zone is None:
        raise EntityNotFound("delivery zone", zone_id)
    return zone_to_model(zone)


def toggle_zone(zone_id: str, store: Optional[InMemoryStore] = None) -> DeliveryZoneModel:
    store = store or get_store()
    with store.transaction():
        zone = store.get_delivery_zone(zone_id)
        if zone is None:
            raise EntityNotFound("delivery zone", zone_id)
        updated = store.update_delivery_zone(zone_id, active=not zone.active)
    logger.info(f"Delivery zone {zone_id} {'activated' if updated.active else 'deactivated'}")
    return zone_to_model(updated)


def location_coverage(location_id: str, store: Optional[InMemoryStore] = None) -> ZoneCoverageResponse:
    store = store or get_store()
    store.require_location(location_id)
    zones = store.get_delivery_zones(location_id)
    active = [zone for zone in zones if zone.active]
    fees = [zone.delivery_fee for zone in active]
    return ZoneCoverageResponse(
        location_id=location_id,
        total_zones=len(zones),
        active_zones=len(active),
        min_delivery_fee=min(fees) if fees else 0.0,
        max_delivery_fee=max(fees) if fees else 0.0,
        avg_estimated_minutes=round(sum(zone.estimated_minutes for zone in active) / len(active)) if active else 0,
        zones=[
            ZoneSummaryModel(
                id=zone.id,
                name=zone.name,
                delivery_fee=zone.delivery_fee,
                estimated_minutes=zone.estimated_minutes,
            )
            for zone in active
        ],
    )


def _option(zone: DeliveryZone) -> DeliveryOption:
    return DeliveryOption(
        zone_id=zone.id,
        zone=zone.name,
        delivery_fee=zone.delivery_fee,
        estimated_minutes=zone.estimated_minutes,
    )


def check_address(payload: AddressCheckRequest, store: Optional[InMemoryStore] = None) -> AddressCheckResponse:
    """Decide whether a location delivers to an address.

    With coordinates, the address must fall inside one of the location's
    active zone polygons. Without them, the address's neighborhood must be in
    the location's primary or extended coverage.
    """

    store = store or get_store()
    store.require_location(payload.location_id)
    zones = [zone for zone in store.get_delivery_zones(payload.location_id) if zone.active]
    table = load_coverage_table()
    neighborhood = resolve_neighborhood(payload.address, table)

    if payload.lat is not None and payload.lng is not None:
        matching = [zone for zone in zones if point_in_polygon(payload.lat, payload.lng, zone.coordinates)]
    elif payload.location_id in (*table.primary_locations(neighborhood), *extended_coverage(payload.address, table)):
        matching = zones
    else:
        matching = []

    if not matching:
        alternatives = []
        recommended = recommend_location(payload.address, store.get_locations(), table)
        if recommended != payload.location_id:
            location = store.get_location(recommended)
            alternatives.append(f"Order from our {location.name if location else recommended} location")
        alternatives.extend(["Try a different address in the same area", "Check if pickup is available"])
        return AddressCheckResponse(
            available=False,
            neighborhood=neighborhood,
            message="Delivery not available to this address",
            alternatives=alternatives,
        )

    options = [_option(zone) for zone in matching]
    best = min(options, key=lambda option: (option.delivery_fee, option.estimated_minutes))
    return AddressCheckResponse(available=True, neighborhood=neighborhood, best_option=best, options=options)
