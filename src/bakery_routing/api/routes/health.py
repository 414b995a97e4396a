"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...data.store import get_store
from ...services.coverage.table import load_coverage_table

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/routing", status_code=status.HTTP_200_OK)
def health_routing() -> dict:
    """Report what the routing engine currently has to work with."""
    try:
        table = load_coverage_table()
    except (OSError, ValueError) as exc:
        return {"service": "routing", "healthy": False, "error": str(exc)}
    snapshot = get_store().snapshot()
    return {
        "service": "routing",
        "healthy": bool(snapshot.locations),
        "neighborhoods": len(table),
        "locations": len(snapshot.locations),
        "available_drivers": sum(1 for driver in snapshot.drivers if driver.status == "available"),
    }
