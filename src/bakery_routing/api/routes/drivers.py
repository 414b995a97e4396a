"""Driver endpoints."""

from __future__ import annotations

import logging
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query, status

from ...schemas.drivers import (
    DriverLocationUpdate,
    DriverModel,
    DriverOrderRequest,
    DriverOrderResponse,
    DriverPerformanceResponse,
    DriverStatusUpdate,
)
from ...schemas.orders import OrderModel
from ...services.drivers.service import (
    assign_order,
    complete_order,
    driver_orders,
    driver_performance,
    get_driver,
    list_drivers,
    update_driver_location,
    update_driver_status,
)
from ..errors import to_http_exception

router = APIRouter(prefix="/drivers", tags=["drivers"])


@router.get("", response_model=list[DriverModel], status_code=status.HTTP_200_OK)
def drivers(
    driver_status: Optional[Literal["available", "busy", "offline"]] = Query(default=None, alias="status"),
    available: bool = Query(default=False, description="Only return available drivers"),
) -> list[DriverModel]:
    return list_drivers(status=driver_status, available_only=available)


@router.get("/stats/performance", response_model=DriverPerformanceResponse, status_code=status.HTTP_200_OK)
def performance() -> DriverPerformanceResponse:
    """Today's deliveries per driver and a fleet summary."""
    return driver_performance()


@router.get("/{driver_id}", response_model=DriverModel, status_code=status.HTTP_200_OK)
def driver(driver_id: str) -> DriverModel:
    try:
        return get_driver(driver_id)
    except LookupError as exc:
        raise to_http_exception(exc) from exc


@router.put("/{driver_id}/status", response_model=DriverModel, status_code=status.HTTP_200_OK)
def update_status(driver_id: str, payload: DriverStatusUpdate) -> DriverModel:
    try:
        return update_driver_status(driver_id, payload)
    except (LookupError, ValueError) as exc:
        raise to_http_exception(exc) from exc


@router.put("/{driver_id}/location", response_model=DriverModel, status_code=status.HTTP_200_OK)
def update_location(driver_id: str, payload: DriverLocationUpdate) -> DriverModel:
    try:
        return update_driver_location(driver_id, payload)
    except LookupError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{driver_id}/assign-order", response_model=DriverOrderResponse, status_code=status.HTTP_200_OK)
def assign(driver_id: str, payload: DriverOrderRequest) -> DriverOrderResponse:
    """Assign a ready delivery order to an available driver."""
    try:
        return assign_order(driver_id, payload)
    except (LookupError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logging.exception(f"Error assigning order to driver {driver_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to assign order: {str(exc)}",
        ) from exc


@router.post("/{driver_id}/complete-order", response_model=DriverOrderResponse, status_code=status.HTTP_200_OK)
def complete(driver_id: str, payload: DriverOrderRequest) -> DriverOrderResponse:
    try:
        return complete_order(driver_id, payload)
    except (LookupError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logging.exception(f"Error completing order for driver {driver_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to complete order: {str(exc)}",
        ) from exc


@router.get("/{driver_id}/orders", response_model=list[OrderModel], status_code=status.HTTP_200_OK)
def orders(
    driver_id: str,
    order_status: Optional[str] = Query(default=None, alias="status"),
) -> list[OrderModel]:
    try:
        return driver_orders(driver_id, status=order_status)
    except LookupError as exc:
        raise to_http_exception(exc) from exc
