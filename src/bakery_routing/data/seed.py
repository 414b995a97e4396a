"""Demo data loaded into the in-memory store at startup."""

from __future__ import annotations

from ..models.domain import DeliveryZone, Driver, GeoPoint, Location, LocationStats

LOCATION_COORDINATES: dict[str, GeoPoint] = {
    "brooklyn": GeoPoint(lat=40.6962, lng=-73.9901),
    "ues": GeoPoint(lat=40.7614, lng=-73.9776),
    "times-square": GeoPoint(lat=40.7589, lng=-73.9851),
}


def demo_locations() -> list[Location]:
    return [
        Location(
            id="brooklyn",
            name="Brooklyn Heights",
            address="123 Montague Street, Brooklyn Heights, NY 11201",
            status="open",
            stats=LocationStats(
                kitchen_load="medium",
                today_orders=45,
                today_revenue=1250.50,
                active_orders=8,
                avg_prep_time=12,
            ),
            coordinates=LOCATION_COORDINATES["brooklyn"],
            phone="+1 (718) 555-0123",
            opens_at="06:00",
            closes_at="20:00",
        ),
        Location(
            id="ues",
            name="Upper East Side",
            address="789 Madison Avenue, New York, NY 10075",
            status="open",
            stats=LocationStats(
                kitchen_load="low",
                today_orders=32,
                today_revenue=890.25,
                active_orders=5,
                avg_prep_time=10,
            ),
            coordinates=LOCATION_COORDINATES["ues"],
            phone="+1 (212) 555-0456",
            opens_at="07:00",
            closes_at="19:00",
        ),
        Location(
            id="times-square",
            name="Times Square",
            address="456 Broadway, New York, NY 10018",
            status="busy",
            stats=LocationStats(
                kitchen_load="high",
                today_orders=67,
                today_revenue=1850.75,
                active_orders=12,
                avg_prep_time=18,
            ),
            coordinates=LOCATION_COORDINATES["times-square"],
            phone="+1 (212) 555-0789",
            opens_at="06:30",
            closes_at="21:00",
        ),
    ]


def demo_drivers() -> list[Driver]:
    return [
        Driver(
            id="driver-1",
            name="Carlos Santos",
            status="available",
            current_location=GeoPoint(lat=40.6962, lng=-73.9901),
            phone="+1 (555) 0101",
            email="carlos@miasbakery.com",
            rating=4.8,
            total_deliveries=1250,
            vehicle_type="bike",
        ),
        Driver(
            id="driver-2",
            name="Maria Garcia",
            status="busy",
            current_location=GeoPoint(lat=40.7614, lng=-73.9776),
            phone="+1 (555) 0102",
            email="maria@miasbakery.com",
            rating=4.9,
            total_deliveries=890,
            vehicle_type="scooter",
        ),
        Driver(
            id="driver-3",
            name="James Wilson",
            status="available",
            current_location=GeoPoint(lat=40.7589, lng=-73.9851),
            phone="+1 (555) 0103",
            email="james@miasbakery.com",
            rating=4.7,
            total_deliveries=650,
            vehicle_type="car",
        ),
    ]


def demo_delivery_zones() -> list[DeliveryZone]:
    return [
        DeliveryZone(
            id="zone-brooklyn-1",
            name="Brooklyn Heights & DUMBO",
            location_id="brooklyn",
            coordinates=[
                (40.6962, -73.9901),
                (40.7040, -73.9901),
                (40.7040, -73.9830),
                (40.6962, -73.9830),
            ],
            delivery_fee=2.50,
            estimated_minutes=25,
        ),
        DeliveryZone(
            id="zone-ues-1",
            name="Upper East Side Central",
            location_id="ues",
            coordinates=[
                (40.7614, -73.9776),
                (40.7714, -73.9776),
                (40.7714, -73.9676),
                (40.7614, -73.9676),
            ],
            delivery_fee=3.00,
            estimated_minutes=30,
        ),
        DeliveryZone(
            id="zone-ts-1",
            name="Midtown West",
            location_id="times-square",
            coordinates=[
                (40.7549, -73.9897),
                (40.7649, -73.9897),
                (40.7649, -73.9797),
                (40.7549, -73.9797),
            ],
            delivery_fee=3.50,
            estimated_minutes=35,
        ),
    ]
