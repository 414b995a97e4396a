"""In-memory registry of locations, drivers, orders and delivery zones.

Every mutation swaps in a new record built with ``dataclasses.replace`` while
holding the store lock, so records handed out by the read accessors are never
modified underneath a caller. Driver assignment goes through ``claim_driver``,
which checks and flips the driver status in one locked step.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Iterator, Optional

from ..config import settings
from ..errors import DriverUnavailable, EntityNotFound
from ..models.domain import DeliveryZone, Driver, Location, Order
from .seed import demo_delivery_zones, demo_drivers, demo_locations

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class StoreSnapshot:
    """Consistent read of the store taken under a single lock acquisition."""

    locations: tuple[Location, ...]
    drivers: tuple[Driver, ...]
    orders: tuple[Order, ...]

    def orders_for_location(self, location_id: str) -> list[Order]:
        return [order for order in self.orders if order.location_id == location_id]


class InMemoryStore:
    """Map-backed store standing in for the application's repositories."""

    def __init__(self, *, seed: bool = True) -> None:
        self._lock = threading.RLock()
        self._locations: dict[str, Location] = {}
        self._drivers: dict[str, Driver] = {}
        self._orders: dict[str, Order] = {}
        self._zones: dict[str, DeliveryZone] = {}
        if seed:
            self._seed()

    def _seed(self) -> None:
        for location in demo_locations():
            self._locations[location.id] = location
        for driver in demo_drivers():
            self._drivers[driver.id] = driver
        for zone in demo_delivery_zones():
            self._zones[zone.id] = zone

    def reset(self, *, seed: bool = True) -> None:
        with self._lock:
            self._locations.clear()
            self._drivers.clear()
            self._orders.clear()
            self._zones.clear()
            if seed:
                self._seed()

    @contextmanager
    def transaction(self) -> Iterator["InMemoryStore"]:
        """Hold the store lock across several reads and writes."""
        with self._lock:
            yield self

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                locations=tuple(self._locations.values()),
                drivers=tuple(self._drivers.values()),
                orders=tuple(self._orders.values()),
            )

    # Locations

    def add_location(self, location: Location) -> Location:
        with self._lock:
            self._locations[location.id] = location
            return location

    def get_locations(self) -> list[Location]:
        with self._lock:
            return list(self._locations.values())

    def get_location(self, location_id: str) -> Optional[Location]:
        with self._lock:
            return self._locations.get(location_id)

    def require_location(self, location_id: str) -> Location:
        location = self.get_location(location_id)
        if location is None:
            raise EntityNotFound("location", location_id)
        return location

    def update_location(self, location_id: str, **changes: Any) -> Location:
        with self._lock:
            updated = replace(self.require_location(location_id), **changes)
            self._locations[location_id] = updated
            return updated

    # Drivers

    def add_driver(self, driver: Driver) -> Driver:
        with self._lock:
            self._drivers[driver.id] = driver
            return driver

    def get_drivers(self) -> list[Driver]:
        with self._lock:
            return list(self._drivers.values())

    def get_available_drivers(self) -> list[Driver]:
        with self._lock:
            return [driver for driver in self._drivers.values() if driver.status == "available"]

    def get_driver(self, driver_id: str) -> Optional[Driver]:
        with self._lock:
            return self._drivers.get(driver_id)

    def require_driver(self, driver_id: str) -> Driver:
        driver = self.get_driver(driver_id)
        if driver is None:
            raise EntityNotFound("driver", driver_id)
        return driver

    def update_driver(self, driver_id: str, **changes: Any) -> Driver:
        with self._lock:
            updated = replace(self.require_driver(driver_id), **changes)
            self._drivers[driver_id] = updated
            return updated

    def claim_driver(self, driver_id: str, order_ids: list[str]) -> Driver:
        """Mark an available driver busy with ``order_ids``.

        Raises DriverUnavailable when the driver is no longer available or still
        holds orders, so two concurrent dispatches cannot both take the same driver.
        """
        with self._lock:
            driver = self.require_driver(driver_id)
            if driver.status != "available":
                raise DriverUnavailable(driver_id, driver.status)
            if driver.assigned_orders:
                raise DriverUnavailable(driver_id, f"holding {len(driver.assigned_orders)} orders")
            claimed = replace(
                driver,
                status="busy",
                assigned_orders=[*driver.assigned_orders, *order_ids],
            )
            self._drivers[driver_id] = claimed
            logger.debug(f"Driver {driver_id} claimed for orders {order_ids}")
            return claimed

    def release_order(self, driver_id: str, order_id: str, *, delivered: bool = False) -> Driver:
        """Drop ``order_id`` from a driver; the driver becomes available once empty."""
        with self._lock:
            driver = self.require_driver(driver_id)
            remaining = [oid for oid in driver.assigned_orders if oid != order_id]
            status = driver.status
            if driver.status != "offline":
                status = "available" if not remaining else "busy"
            released = replace(
                driver,
                status=status,
                assigned_orders=remaining,
                total_deliveries=driver.total_deliveries + (1 if delivered else 0),
            )
            self._drivers[driver_id] = released
            return released

    # Orders

    def get_orders(self) -> list[Order]:
        with self._lock:
            return list(self._orders.values())

    def get_order(self, order_id: str) -> Optional[Order]:
        with self._lock:
            return self._orders.get(order_id)

    def require_order(self, order_id: str) -> Order:
        order = self.get_order(order_id)
        if order is None:
            raise EntityNotFound("order", order_id)
        return order

    def get_orders_by_location(self, location_id: str) -> list[Order]:
        with self._lock:
            return [order for order in self._orders.values() if order.location_id == location_id]

    def get_orders_by_driver(self, driver_id: str) -> list[Order]:
        with self._lock:
            return [order for order in self._orders.values() if order.assigned_driver_id == driver_id]

    def create_order(self, order: Order) -> Order:
        with self._lock:
            self._orders[order.id] = order
            return order

    def update_order(self, order_id: str, **changes: Any) -> Order:
        with self._lock:
            updated = replace(self.require_order(order_id), **changes)
            self._orders[order_id] = updated
            return updated

    def delete_order(self, order_id: str) -> bool:
        with self._lock:
            return self._orders.pop(order_id, None) is not None

    # Delivery zones

    def add_delivery_zone(self, zone: DeliveryZone) -> DeliveryZone:
        with self._lock:
            self._zones[zone.id] = zone
            return zone

    def get_delivery_zones(self, location_id: Optional[str] = None) -> list[DeliveryZone]:
        with self._lock:
            zones = list(self._zones.values())
        if location_id is not None:
            zones = [zone for zone in zones if zone.location_id == location_id]
        return zones

    def get_delivery_zone(self, zone_id: str) -> Optional[DeliveryZone]:
        with self._lock:
            return self._zones.get(zone_id)

    def update_delivery_zone(self, zone_id: str, **changes: Any) -> DeliveryZone:
        with self._lock:
            zone = self._zones.get(zone_id)
            if zone is None:
                raise EntityNotFound("delivery zone", zone_id)
            updated = replace(zone, **changes)
            self._zones[zone_id] = updated
            return updated


_store: InMemoryStore | None = None


def get_store() -> InMemoryStore:
    """Return the process-wide store, creating it on first use."""
    global _store
    if _store is None:
        _store = InMemoryStore(seed=settings.seed_demo_data)
    return _store


def reset_store(*, seed: bool = True) -> InMemoryStore:
    global _store
    _store = InMemoryStore(seed=seed)
    return _store
