"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="BAKERY_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Bakery Order Routing API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level for the service.")
    coverage_file: Optional[Path] = Field(
        default=None,
        description="JSON file with the ordered neighborhood coverage table. Built-in table when unset.",
    )
    seed_demo_data: bool = Field(default=True, description="Load demo locations, drivers and zones at startup.")

    # Location scoring
    weight_distance: float = Field(default=0.40, ge=0.0, le=1.0)
    weight_capacity: float = Field(default=0.25, ge=0.0, le=1.0)
    weight_availability: float = Field(default=0.20, ge=0.0, le=1.0)
    weight_driver_availability: float = Field(default=0.15, ge=0.0, le=1.0)
    driver_proximity_miles: float = Field(
        default=3.0,
        gt=0.0,
        description="Radius around a location within which an available driver counts as nearby.",
    )
    street_number_scale: float = Field(
        default=1.0,
        gt=0.0,
        description="Divisor applied to the street-number difference before distance breakpoints.",
    )
    fallback_location_id: str = Field(
        default="times-square",
        description="Location recommended when no neighborhood coverage matches an address.",
    )

    # Delivery batching
    max_batch_size: int = Field(default=4, ge=1)
    batch_base_minutes: float = Field(default=10.0, ge=0.0)
    batch_minutes_per_stop: float = Field(default=5.0, ge=0.0)
    batch_travel_minutes_per_stop: float = Field(default=3.0, ge=0.0)
    batch_miles_per_order: float = Field(default=1.5, ge=0.0)

    # Order intake
    default_delivery_fee: float = Field(default=3.00, ge=0.0)
    default_prep_minutes: int = Field(default=15, ge=0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("coverage_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Optional[Path]:
        if value in (None, ""):
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @model_validator(mode="after")
    def _check_weights(self) -> "Settings":
        total = (
            self.weight_distance
            + self.weight_capacity
            + self.weight_availability
            + self.weight_driver_availability
        )
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Scoring weights must sum to 1.0 (got {total:.4f}).")
        return self


settings = Settings()
