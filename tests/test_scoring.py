import pytest

from bakery_routing.models.domain import Driver, GeoPoint, Location, LocationStats, Order
from bakery_routing.services.coverage import DEFAULT_COVERAGE
from bakery_routing.services.geospatial import approximate_distance, haversine_miles, street_number
from bakery_routing.services.routing.models import ScoreFactors
from bakery_routing.services.routing.scoring import (
    RoutingWeights,
    availability_score,
    capacity_score,
    composite_score,
    count_nearby_drivers,
    distance_score,
    driver_availability_score,
    score_from_distance,
)

ORIGIN = GeoPoint(lat=40.7589, lng=-73.9851)


def _location(location_id: str = "times-square", *, status: str = "open", load: str = "low", address: str = "456 Broadway") -> Location:
    return Location(
        id=location_id,
        name=location_id,
        address=address,
        status=status,
        stats=LocationStats(kitchen_load=load),
        coordinates=ORIGIN,
    )


def _driver(driver_id: str, lat: float, lng: float, status: str = "available") -> Driver:
    return Driver(id=driver_id, name=driver_id, status=status, current_location=GeoPoint(lat=lat, lng=lng))


def _delivery(address: str | None) -> Order:
    return Order(id="o1", type="delivery", status="pending", customer_name="C", delivery_address=address)


def test_score_from_distance_breakpoints():
    assert score_from_distance(0) == 90
    assert score_from_distance(1.99) == 90
    assert score_from_distance(2) == 70
    assert score_from_distance(5.5) == 50
    assert score_from_distance(7.99) == 30
    assert score_from_distance(8) == 10
    assert score_from_distance(380) == 10


def test_distance_score_for_non_delivery_prefers_requested_location():
    order = Order(id="o1", type="pickup", status="pending", customer_name="C", location_id="ues")
    assert distance_score(order, _location("ues"), DEFAULT_COVERAGE) == 100
    assert distance_score(order, _location("brooklyn"), DEFAULT_COVERAGE) == 50


def test_distance_score_uses_primary_then_extended_coverage():
    assert distance_score(_delivery("9 Smith St, Cobble Hill"), _location("brooklyn"), DEFAULT_COVERAGE) == 100
    assert distance_score(_delivery("88 Bedford Ave, Williamsburg"), _location("brooklyn"), DEFAULT_COVERAGE) == 70


def test_distance_score_borough_beats_extended_only_area():
    order = _delivery("88 Bedford Ave, Williamsburg, Brooklyn")
    assert distance_score(order, _location("brooklyn"), DEFAULT_COVERAGE) == 100


def test_distance_score_falls_back_to_street_numbers():
    order = _delivery("120 Main St, Park Slope")
    assert distance_score(order, _location("far", address="500 Main"), DEFAULT_COVERAGE) == 10
    assert distance_score(order, _location("near", address="121 Main"), DEFAULT_COVERAGE) == 90
    assert (
        distance_score(order, _location("far", address="500 Main"), DEFAULT_COVERAGE, street_number_scale=100)
        == 70
    )


def test_distance_score_without_address_is_neutral():
    assert distance_score(_delivery(None), _location(), DEFAULT_COVERAGE) == 50


def test_capacity_and_availability_scores():
    assert capacity_score(_location(load="low")) == 100
    assert capacity_score(_location(load="medium")) == 60
    assert capacity_score(_location(load="high")) == 20
    assert capacity_score(_location(load="overloaded")) == 50
    assert availability_score(_location(status="open")) == 100
    assert availability_score(_location(status="busy")) == 40
    assert availability_score(_location(status="closed")) == 0
    assert availability_score(_location(status="renovating")) == 50


def test_count_nearby_drivers_only_counts_available_drivers_inside_radius():
    drivers = [
        _driver("d1", ORIGIN.lat, ORIGIN.lng),
        _driver("d2", ORIGIN.lat + 0.01, ORIGIN.lng),
        _driver("d3", ORIGIN.lat, ORIGIN.lng, status="busy"),
        _driver("d4", 40.6962, -73.9901),
        Driver(id="d5", name="d5", status="available"),
    ]
    assert count_nearby_drivers(_location(), drivers, radius_miles=3.0) == 2


def test_count_nearby_drivers_radius_is_strict():
    driver = _driver("d1", ORIGIN.lat + 0.02, ORIGIN.lng)
    distance = haversine_miles(driver.current_location.lat, driver.current_location.lng, ORIGIN.lat, ORIGIN.lng)
    assert count_nearby_drivers(_location(), [driver], radius_miles=distance) == 0
    assert count_nearby_drivers(_location(), [driver], radius_miles=distance + 1e-6) == 1


def test_count_nearby_drivers_without_location_coordinates():
    location = _location()
    location.coordinates = None
    assert count_nearby_drivers(location, [_driver("d1", ORIGIN.lat, ORIGIN.lng)], radius_miles=3.0) == 0


@pytest.mark.parametrize("count, expected", [(0, 10), (1, 40), (2, 70), (3, 100), (5, 100)])
def test_driver_availability_score(count, expected):
    drivers = [_driver(f"d{index}", ORIGIN.lat, ORIGIN.lng) for index in range(count)]
    assert driver_availability_score(_location(), drivers, radius_miles=3.0) == expected


def test_composite_score_is_weighted_and_bounded():
    weights = RoutingWeights()
    assert composite_score(ScoreFactors(100, 100, 100, 100), weights) == 100.0
    assert composite_score(ScoreFactors(0, 0, 0, 0), weights) == 0.0
    assert composite_score(ScoreFactors(100, 100, 100, 10), weights) == pytest.approx(86.5)


def test_routing_weights_must_sum_to_one():
    with pytest.raises(ValueError):
        RoutingWeights(distance=0.5, capacity=0.5, availability=0.5, driver_availability=0.5)
    with pytest.raises(ValueError):
        RoutingWeights(distance=1.2, capacity=-0.2, availability=0.0, driver_availability=0.0)


def test_street_number_helpers():
    assert street_number("120 Main St") == 120
    assert street_number("Apt 4B, 77 Court St") == 4
    assert street_number("Main St") == 0
    assert approximate_distance("120 Main", "500 Main") == 380
    assert approximate_distance("120 Main", "500 Main", scale=100) == pytest.approx(3.8)
    with pytest.raises(ValueError):
        approximate_distance("1", "2", scale=0)


def test_haversine_miles_between_seed_locations():
    assert haversine_miles(40.6962, -73.9901, 40.6962, -73.9901) == 0
    assert haversine_miles(40.6962, -73.9901, 40.7589, -73.9851) == pytest.approx(4.34, abs=0.05)
