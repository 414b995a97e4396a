"""Domain errors raised by the store, the routing engine and the services."""

from __future__ import annotations


class RoutingError(ValueError):
    """Base class for routing and dispatch failures."""


class NoLocationsAvailable(RoutingError):
    """Raised when a routing decision is requested with no candidate locations."""

    def __init__(self, order_id: str | None = None) -> None:
        target = f" for order '{order_id}'" if order_id else ""
        super().__init__(f"No candidate locations available{target}.")
        self.order_id = order_id


class DriverUnavailable(RoutingError):
    """Raised when a driver can no longer be claimed (already busy or offline)."""

    def __init__(self, driver_id: str, status: str | None = None) -> None:
        detail = f" (status: {status})" if status else ""
        super().__init__(f"Driver '{driver_id}' is not available{detail}.")
        self.driver_id = driver_id
        self.status = status


class InvalidStatusTransition(ValueError):
    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f"Cannot change status from {current} to {requested}")
        self.current = current
        self.requested = requested


class EntityNotFound(LookupError):
    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind.capitalize()} '{entity_id}' not found")
        self.kind = kind
        self.entity_id = entity_id
