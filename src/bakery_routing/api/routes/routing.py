"""Routing engine endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.routing import (
    AddressRequest,
    CoverageRowModel,
    NeighborhoodResponse,
    RecommendationResponse,
    RoutingDecisionModel,
    RoutingRequest,
)
from ...services.routing.service import (
    coverage_rows,
    neighborhood_for_request,
    recommend_for_request,
    select_for_request,
)
from ..errors import to_http_exception

router = APIRouter(prefix="/routing", tags=["routing"])


@router.post("/select", response_model=RoutingDecisionModel, status_code=status.HTTP_200_OK)
def select(payload: RoutingRequest) -> RoutingDecisionModel:
    """Score every location for an order and return the best fit with all candidate scores."""
    try:
        return select_for_request(payload)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logging.exception(f"Error selecting location: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to select location: {str(exc)}",
        ) from exc


@router.post("/recommend", response_model=RecommendationResponse, status_code=status.HTTP_200_OK)
def recommend(payload: AddressRequest) -> RecommendationResponse:
    return recommend_for_request(payload)


@router.post("/neighborhood", response_model=NeighborhoodResponse, status_code=status.HTTP_200_OK)
def neighborhood(payload: AddressRequest) -> NeighborhoodResponse:
    return neighborhood_for_request(payload)


@router.get("/coverage", response_model=list[CoverageRowModel], status_code=status.HTTP_200_OK)
def coverage() -> list[CoverageRowModel]:
    return coverage_rows()
