"""Route group exports."""

from . import delivery, drivers, health, locations, orders, routing, zones

__all__ = ["delivery", "drivers", "health", "locations", "orders", "routing", "zones"]
