"""Delivery batching endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Path, status
from fastapi.responses import Response

from ...schemas.routing import BatchingResponse, DispatchResponse
from ...services.outputs.formatter import (
    batching_result_to_csv,
    batching_result_to_model,
    dispatch_result_to_model,
)
from ...services.routing.service import dispatch_batches, plan_batches
from ..errors import to_http_exception

router = APIRouter(prefix="/delivery", tags=["delivery"])


@router.get("/{location_id}/batches", response_model=BatchingResponse, status_code=status.HTTP_200_OK)
def preview_batches(location_id: str = Path(..., description="Location whose ready orders to batch")) -> BatchingResponse:
    """Preview delivery batches without assigning any driver."""
    try:
        return batching_result_to_model(plan_batches(location_id))
    except LookupError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{location_id}/batches.csv", status_code=status.HTTP_200_OK)
def download_batches(location_id: str = Path(..., description="Location whose ready orders to batch")) -> Response:
    try:
        result = plan_batches(location_id)
    except LookupError as exc:
        raise to_http_exception(exc) from exc
    return Response(
        content=batching_result_to_csv(result),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{location_id}_batches.csv"'},
    )


@router.post("/{location_id}/dispatch", response_model=DispatchResponse, status_code=status.HTTP_200_OK)
def dispatch(location_id: str = Path(..., description="Location whose batches to dispatch")) -> DispatchResponse:
    """Plan batches and hand each one to its driver.

    Batches whose driver was claimed elsewhere in the meantime are reported
    under ``skipped``.
    """
    try:
        return dispatch_result_to_model(dispatch_batches(location_id))
    except LookupError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logging.exception(f"Error dispatching batches for {location_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to dispatch batches: {str(exc)}",
        ) from exc
