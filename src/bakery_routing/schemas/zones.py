"""Delivery zone schemas."""

from __future__ import annotations

from typing import List, Optional, Sequence

from pydantic import BaseModel, Field, model_validator


class DeliveryZoneModel(BaseModel):
    id: str
    name: str
    location_id: str
    coordinates: Sequence[tuple[float, float]]
    delivery_fee: float
    estimated_minutes: int
    active: bool


class ZoneSummaryModel(BaseModel):
    id: str
    name: str
    delivery_fee: float
    estimated_minutes: int


class ZoneCoverageResponse(BaseModel):
    location_id: str
    total_zones: int
    active_zones: int
    min_delivery_fee: float
    max_delivery_fee: float
    avg_estimated_minutes: int
    zones: List[ZoneSummaryModel]


class AddressCheckRequest(BaseModel):
    address: str = Field(..., min_length=1)
    location_id: str = Field(..., min_length=1)
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)

    @model_validator(mode="after")
    def _coordinates_together(self) -> "AddressCheckRequest":
        if (self.lat is None) != (self.lng is None):
            raise ValueError("lat and lng must be provided together")
        return self


class DeliveryOption(BaseModel):
    zone_id: str
    zone: str
    delivery_fee: float
    estimated_minutes: int


class AddressCheckResponse(BaseModel):
    available: bool
    neighborhood: str
    message: Optional[str] = None
    best_option: Optional[DeliveryOption] = None
    options: List[DeliveryOption] = Field(default_factory=list)
    alternatives: List[str] = Field(default_factory=list)
