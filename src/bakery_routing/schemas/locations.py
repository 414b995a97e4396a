"""Location schemas."""

from __future__ import annotations

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field, model_validator


class GeoPointModel(BaseModel):
    lat: float
    lng: float


class LocationStatsModel(BaseModel):
    kitchen_load: Literal["low", "medium", "high"]
    today_orders: int = 0
    today_revenue: float = 0.0
    active_orders: int = 0
    avg_prep_time: Optional[int] = None


class LocationModel(BaseModel):
    id: str
    name: str
    address: str
    status: Literal["open", "busy", "closed"]
    stats: LocationStatsModel
    coordinates: Optional[GeoPointModel] = None
    phone: Optional[str] = None
    opens_at: Optional[str] = None
    closes_at: Optional[str] = None


class LocationUpdateRequest(BaseModel):
    status: Optional[Literal["open", "busy", "closed"]] = None
    kitchen_load: Optional[Literal["low", "medium", "high"]] = None

    @model_validator(mode="after")
    def _require_change(self) -> "LocationUpdateRequest":
        if self.status is None and self.kitchen_load is None:
            raise ValueError("Provide status and/or kitchen_load")
        return self


class LocationStatsReport(BaseModel):
    location_id: str
    today_orders: int
    today_revenue: float
    active_orders: int
    completed_today: int
    avg_prep_time: Optional[int] = None
    kitchen_load: Literal["low", "medium", "high"]
    avg_order_value: float
    peak_hour: int = Field(..., ge=0, le=23)
    status_breakdown: Dict[str, int]
