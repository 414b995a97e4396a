"""Routing and delivery batching request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator


class ScoreFactorsModel(BaseModel):
    distance: float
    capacity: float
    availability: float
    driver_availability: float


class RoutingScoreModel(BaseModel):
    location_id: str
    score: float
    factors: ScoreFactorsModel


class RoutingDecisionModel(BaseModel):
    order_id: Optional[str] = None
    selected_location: str
    score: float
    factors: ScoreFactorsModel
    candidates: List[RoutingScoreModel]


class RoutingRequest(BaseModel):
    """Ad-hoc order description to score against the current locations."""

    order_id: Optional[str] = None
    type: Literal["pickup", "delivery", "dine-in"]
    location_id: Optional[str] = Field(default=None, description="Location the customer asked for, if any.")
    delivery_address: Optional[str] = None

    @model_validator(mode="after")
    def _require_delivery_address(self) -> "RoutingRequest":
        if self.type == "delivery" and not (self.delivery_address or "").strip():
            raise ValueError("delivery_address is required for delivery orders")
        return self


class AddressRequest(BaseModel):
    address: str = Field(..., min_length=1)


class RecommendationResponse(BaseModel):
    address: str
    neighborhood: str
    location_id: str


class NeighborhoodResponse(BaseModel):
    address: str
    neighborhood: str
    primary: List[str]
    extended: List[str]


class CoverageRowModel(BaseModel):
    name: str
    primary: List[str]
    extended: List[str]


class RouteStopModel(BaseModel):
    order_id: str
    address: str
    sequence: int


class DeliveryBatchModel(BaseModel):
    id: str
    driver_id: str
    location_id: str
    order_ids: List[str]
    estimated_minutes: float
    total_distance_miles: float
    route: List[RouteStopModel]


class BatchingResponse(BaseModel):
    location_id: str
    batches: List[DeliveryBatchModel]
    eligible_orders: int
    group_count: int
    dropped_groups: int
    served_orders: int
    pending_orders: int
    unserved_order_ids: List[str]
    is_partial: bool


class SkippedBatchModel(BaseModel):
    batch_id: str
    driver_id: str
    reason: str


class DispatchResponse(BaseModel):
    plan: BatchingResponse
    dispatched: List[DeliveryBatchModel]
    skipped: List[SkippedBatchModel]
