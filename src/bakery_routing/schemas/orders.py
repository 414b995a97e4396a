"""Order request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from .routing import RoutingDecisionModel

OrderTypeField = Literal["pickup", "delivery", "dine-in"]
OrderStatusField = Literal[
    "pending",
    "confirmed",
    "preparing",
    "ready",
    "out-for-delivery",
    "delivered",
    "cancelled",
]


class OrderItemInput(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)
    category: Optional[str] = None
    special_requests: Optional[str] = None


class OrderCreateRequest(BaseModel):
    customer_name: str = Field(..., min_length=1)
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    type: OrderTypeField
    items: List[OrderItemInput] = Field(..., min_length=1)
    location_id: Optional[str] = Field(
        default=None,
        description="Location picked by the customer. Left empty, the routing engine chooses one.",
    )
    delivery_address: Optional[str] = None
    special_instructions: Optional[str] = None

    @model_validator(mode="after")
    def _require_delivery_address(self) -> "OrderCreateRequest":
        if self.type == "delivery" and not (self.delivery_address or "").strip():
            raise ValueError("delivery_address is required for delivery orders")
        return self


class OrderItemModel(BaseModel):
    id: str
    name: str
    quantity: int
    price: float
    category: Optional[str] = None
    special_requests: Optional[str] = None


class OrderModel(BaseModel):
    id: str
    type: OrderTypeField
    status: OrderStatusField
    customer_name: str
    location_id: Optional[str] = None
    delivery_address: Optional[str] = None
    assigned_driver_id: Optional[str] = None
    items: List[OrderItemModel] = Field(default_factory=list)
    total: float
    created_at: Optional[datetime] = None
    estimated_ready_time: Optional[datetime] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    special_instructions: Optional[str] = None
    payment_status: str


class OrderCreatedResponse(BaseModel):
    order: OrderModel
    routing: Optional[RoutingDecisionModel] = Field(
        default=None,
        description="Scores behind the chosen location when the engine picked it.",
    )


class OrderStatusUpdate(BaseModel):
    status: OrderStatusField
    assigned_driver_id: Optional[str] = None
    estimated_ready_time: Optional[datetime] = None


class BulkOrderStatusUpdate(BaseModel):
    order_ids: List[str] = Field(..., min_length=1)
    status: OrderStatusField
    estimated_ready_time: Optional[datetime] = None


class BulkOrderResult(BaseModel):
    order_id: str
    success: bool
    order: Optional[OrderModel] = None
    error: Optional[str] = None


class BulkOrderUpdateResponse(BaseModel):
    results: List[BulkOrderResult]
    total: int
    successful: int
    failed: int
