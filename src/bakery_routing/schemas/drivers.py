"""Driver schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .locations import GeoPointModel
from .orders import OrderModel


class DriverModel(BaseModel):
    id: str
    name: str
    status: Literal["available", "busy", "offline"]
    current_location: Optional[GeoPointModel] = None
    assigned_orders: List[str] = Field(default_factory=list)
    phone: Optional[str] = None
    email: Optional[str] = None
    rating: Optional[float] = None
    total_deliveries: int = 0
    vehicle_type: Optional[str] = None


class DriverStatusUpdate(BaseModel):
    status: Literal["available", "busy", "offline"]


class DriverLocationUpdate(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class DriverOrderRequest(BaseModel):
    order_id: str = Field(..., min_length=1)


class DriverOrderResponse(BaseModel):
    driver: DriverModel
    order: OrderModel


class DriverPerformanceModel(BaseModel):
    id: str
    name: str
    status: Literal["available", "busy", "offline"]
    rating: Optional[float] = None
    total_deliveries: int
    today_deliveries: int
    current_orders: int
    vehicle_type: Optional[str] = None


class DriverPerformanceSummary(BaseModel):
    total_drivers: int
    available_drivers: int
    busy_drivers: int
    offline_drivers: int
    total_deliveries_today: int
    average_rating: float


class DriverPerformanceResponse(BaseModel):
    drivers: List[DriverPerformanceModel]
    summary: DriverPerformanceSummary
