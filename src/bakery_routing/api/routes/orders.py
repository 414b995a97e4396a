"""Order endpoints."""

from __future__ import annotations

import logging
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from ...schemas.orders import (
    BulkOrderStatusUpdate,
    BulkOrderUpdateResponse,
    OrderCreateRequest,
    OrderCreatedResponse,
    OrderModel,
    OrderStatusUpdate,
)
from ...services.orders.service import (
    bulk_update_status,
    create_order,
    delete_order,
    get_order,
    list_orders,
    update_order_status,
)
from ..errors import to_http_exception

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=list[OrderModel], status_code=status.HTTP_200_OK)
def orders(
    location_id: Optional[str] = Query(default=None, description="Filter orders by location"),
    order_status: Optional[str] = Query(default=None, alias="status", description="Filter orders by status"),
    order_type: Optional[Literal["pickup", "delivery", "dine-in"]] = Query(default=None, alias="type"),
    search: Optional[str] = Query(default=None, description="Match customer name, phone or order id"),
) -> list[OrderModel]:
    return list_orders(location_id=location_id, status=order_status, order_type=order_type, search=search)


@router.get("/{order_id}", response_model=OrderModel, status_code=status.HTTP_200_OK)
def order(order_id: str) -> OrderModel:
    try:
        return get_order(order_id)
    except LookupError as exc:
        raise to_http_exception(exc) from exc


@router.post("", response_model=OrderCreatedResponse, status_code=status.HTTP_201_CREATED)
def create(payload: OrderCreateRequest) -> OrderCreatedResponse:
    """Create an order. Without a location_id the routing engine picks the location."""
    try:
        return create_order(payload)
    except (LookupError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logging.exception(f"Error creating order: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create order: {str(exc)}",
        ) from exc


@router.put("/{order_id}/status", response_model=OrderModel, status_code=status.HTTP_200_OK)
def update_status(order_id: str, payload: OrderStatusUpdate) -> OrderModel:
    try:
        return update_order_status(order_id, payload)
    except (LookupError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logging.exception(f"Error updating order {order_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update order: {str(exc)}",
        ) from exc


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete(order_id: str) -> Response:
    try:
        delete_order(order_id)
    except (LookupError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/bulk-update", response_model=BulkOrderUpdateResponse, status_code=status.HTTP_200_OK)
def bulk_update(payload: BulkOrderStatusUpdate) -> BulkOrderUpdateResponse:
    """Move several orders to the same status. Per-order failures are reported, not raised."""
    try:
        return bulk_update_status(payload)
    except Exception as exc:
        logging.exception(f"Error in bulk order update: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update orders: {str(exc)}",
        ) from exc
