"""Delivery zone endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, status

from ...schemas.zones import AddressCheckRequest, AddressCheckResponse, DeliveryZoneModel, ZoneCoverageResponse
from ...services.zones.service import check_address, get_zone, list_zones, location_coverage, toggle_zone
from ..errors import to_http_exception

router = APIRouter(prefix="/delivery-zones", tags=["delivery-zones"])


@router.get("", response_model=list[DeliveryZoneModel], status_code=status.HTTP_200_OK)
def zones(
    location_id: Optional[str] = Query(default=None, description="Filter zones by location"),
    active: Optional[bool] = Query(default=None, description="Filter by active flag"),
) -> list[DeliveryZoneModel]:
    return list_zones(location_id=location_id, active=active)


@router.post("/check-address", response_model=AddressCheckResponse, status_code=status.HTTP_200_OK)
def check(payload: AddressCheckRequest) -> AddressCheckResponse:
    """Check whether a location delivers to an address."""
    try:
        return check_address(payload)
    except LookupError as exc:
        raise to_http_exception(exc) from exc


@router.get("/location/{location_id}/coverage", response_model=ZoneCoverageResponse, status_code=status.HTTP_200_OK)
def coverage(location_id: str) -> ZoneCoverageResponse:
    try:
        return location_coverage(location_id)
    except LookupError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{zone_id}", response_model=DeliveryZoneModel, status_code=status.HTTP_200_OK)
def zone(zone_id: str) -> DeliveryZoneModel:
    try:
        return get_zone(zone_id)
    except LookupError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{zone_id}/toggle", response_model=DeliveryZoneModel, status_code=status.HTTP_200_OK)
def toggle(zone_id: str) -> DeliveryZoneModel:
    try:
        return toggle_zone(zone_id)
    except LookupError as exc:
        raise to_http_exception(exc) from exc
