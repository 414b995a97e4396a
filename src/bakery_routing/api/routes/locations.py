"""Location endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.locations import LocationModel, LocationStatsReport, LocationUpdateRequest
from ...services.locations.service import get_location, list_locations, location_stats, update_location
from ..errors import to_http_exception

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("", response_model=list[LocationModel], status_code=status.HTTP_200_OK)
def locations() -> list[LocationModel]:
    return list_locations()


@router.get("/{location_id}", response_model=LocationModel, status_code=status.HTTP_200_OK)
def location(location_id: str) -> LocationModel:
    try:
        return get_location(location_id)
    except LookupError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{location_id}/stats", response_model=LocationStatsReport, status_code=status.HTTP_200_OK)
def stats(location_id: str) -> LocationStatsReport:
    """Active orders, today's volume and kitchen load computed from current orders."""
    try:
        return location_stats(location_id)
    except LookupError as exc:
        raise to_http_exception(exc) from exc


@router.patch("/{location_id}", response_model=LocationModel, status_code=status.HTTP_200_OK)
def patch_location(location_id: str, payload: LocationUpdateRequest) -> LocationModel:
    """Update a location's status and/or kitchen load."""
    try:
        return update_location(location_id, payload)
    except (LookupError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logging.exception(f"Error updating location {location_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update location: {str(exc)}",
        ) from exc
