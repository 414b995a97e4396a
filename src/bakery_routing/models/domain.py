"""Domain models for bakery locations, drivers and orders."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional

LocationStatus = Literal["open", "busy", "closed"]
KitchenLoad = Literal["low", "medium", "high"]
DriverStatus = Literal["available", "busy", "offline"]
OrderType = Literal["pickup", "delivery", "dine-in"]
OrderStatus = Literal[
    "pending",
    "confirmed",
    "preparing",
    "ready",
    "out-for-delivery",
    "delivered",
    "cancelled",
]
PaymentStatus = Literal["pending", "paid", "refunded"]


@dataclass(slots=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(slots=True)
class LocationStats:
    """Operational snapshot of a location's kitchen."""

    kitchen_load: KitchenLoad
    today_orders: int = 0
    today_revenue: float = 0.0
    active_orders: int = 0
    avg_prep_time: Optional[int] = None


@dataclass(slots=True)
class Location:
    """A bakery location that can prepare and dispatch orders."""

    id: str
    name: str
    address: str
    status: LocationStatus
    stats: LocationStats
    coordinates: Optional[GeoPoint] = None
    phone: Optional[str] = None
    opens_at: Optional[str] = None
    closes_at: Optional[str] = None


@dataclass(slots=True)
class Driver:
    """A delivery driver with last known position and current workload."""

    id: str
    name: str
    status: DriverStatus
    current_location: Optional[GeoPoint] = None
    assigned_orders: list[str] = field(default_factory=list)
    phone: Optional[str] = None
    email: Optional[str] = None
    rating: Optional[float] = None
    total_deliveries: int = 0
    vehicle_type: Optional[str] = None


@dataclass(slots=True)
class OrderItem:
    id: str
    name: str
    quantity: int
    price: float
    category: Optional[str] = None
    special_requests: Optional[str] = None


@dataclass(slots=True)
class Order:
    """A customer order. ``location_id`` is None until the order is routed."""

    id: str
    type: OrderType
    status: OrderStatus
    customer_name: str
    location_id: Optional[str] = None
    delivery_address: Optional[str] = None
    assigned_driver_id: Optional[str] = None
    items: list[OrderItem] = field(default_factory=list)
    total: float = 0.0
    created_at: Optional[datetime] = None
    estimated_ready_time: Optional[datetime] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    special_instructions: Optional[str] = None
    payment_status: PaymentStatus = "pending"


@dataclass(slots=True)
class DeliveryZone:
    """Delivery polygon served by one location. Coordinates are (lat, lng) pairs."""

    id: str
    name: str
    location_id: str
    coordinates: list[tuple[float, float]]
    delivery_fee: float
    estimated_minutes: int
    active: bool = True
