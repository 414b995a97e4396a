import logging

import pytest

from bakery_routing.errors import NoLocationsAvailable
from bakery_routing.models.domain import Driver, GeoPoint, Location, LocationStats, Order
from bakery_routing.services.coverage import load_coverage_table
from bakery_routing.services.routing.scoring import RoutingWeights
from bakery_routing.services.routing.selector import decide_location, score_locations, select_location


def _location(location_id: str, *, status: str, load: str, address: str, coordinates: GeoPoint | None = None) -> Location:
    return Location(
        id=location_id,
        name=location_id,
        address=address,
        status=status,
        stats=LocationStats(kitchen_load=load),
        coordinates=coordinates,
    )


@pytest.fixture(autouse=True)
def clear_coverage_cache():
    load_coverage_table.cache_clear()
    yield
    load_coverage_table.cache_clear()


@pytest.fixture
def park_slope_candidates() -> list[Location]:
    # "brooklyn" covers Park Slope, "times-square" does not
    return [
        _location("brooklyn", status="open", load="low", address="100 Main"),
        _location("times-square", status="busy", load="high", address="500 Main"),
    ]


def test_delivery_order_goes_to_covering_location(park_slope_candidates):
    order = Order(
        id="o1",
        type="delivery",
        status="pending",
        customer_name="Ana",
        delivery_address="120 Main St, Park Slope",
    )

    decision = decide_location(order, park_slope_candidates, [])

    assert decision.location_id == "brooklyn"
    winner, loser = decision.candidates
    assert winner.factors.as_dict() == {
        "distance": 100,
        "capacity": 100,
        "availability": 100,
        "driver_availability": 10,
    }
    assert loser.factors.distance == 10
    assert loser.factors.capacity == 20
    assert loser.factors.availability == 40
    assert winner.score == pytest.approx(86.5)
    assert loser.score == pytest.approx(18.5)


def test_select_location_is_idempotent(park_slope_candidates):
    order = Order(id="o1", type="delivery", status="pending", customer_name="Ana", delivery_address="120 Main St")
    drivers = [Driver(id="d1", name="d1", status="available", current_location=GeoPoint(40.7, -73.99))]

    first = select_location(order, park_slope_candidates, drivers)
    assert all(select_location(order, park_slope_candidates, drivers) == first for _ in range(5))


def test_ties_go_to_first_candidate():
    locations = [
        _location("b", status="open", load="medium", address="1 Main"),
        _location("a", status="open", load="medium", address="1 Main"),
    ]
    order = Order(id="o1", type="pickup", status="pending", customer_name="Ana")

    assert select_location(order, locations, []) == "b"
    assert select_location(order, list(reversed(locations)), []) == "a"


def test_empty_candidate_list_raises():
    order = Order(id="o1", type="pickup", status="pending", customer_name="Ana")
    with pytest.raises(NoLocationsAvailable) as excinfo:
        select_location(order, [], [])
    assert "o1" in str(excinfo.value)
    assert isinstance(excinfo.value, ValueError)


def test_scores_stay_in_range_for_every_candidate(park_slope_candidates):
    closed = _location("ues", status="closed", load="high", address="9999 Lexington")
    order = Order(id="o1", type="delivery", status="pending", customer_name="Ana", delivery_address="1 Nowhere Rd")

    scores = score_locations(order, [*park_slope_candidates, closed], [])

    assert [score.location_id for score in scores] == ["brooklyn", "times-square", "ues"]
    assert all(0 <= score.score <= 100 for score in scores)


def test_custom_weights_change_the_winner(park_slope_candidates):
    # the covering location is closed but the other one is open
    park_slope_candidates[0].status = "closed"
    park_slope_candidates[1].status = "open"
    order = Order(id="o1", type="delivery", status="pending", customer_name="Ana", delivery_address="120 Main St, Park Slope")
    availability_only = RoutingWeights(distance=0.0, capacity=0.0, availability=1.0, driver_availability=0.0)

    assert select_location(order, park_slope_candidates, []) == "brooklyn"
    assert select_location(order, park_slope_candidates, [], weights=availability_only) == "times-square"


def test_decision_is_logged_with_factors(park_slope_candidates, caplog):
    order = Order(id="o1", type="delivery", status="pending", customer_name="Ana", delivery_address="120 Main St, Park Slope")

    with caplog.at_level(logging.INFO, logger="bakery_routing.services.routing.selector"):
        decide_location(order, park_slope_candidates, [])

    record = next(record for record in caplog.records if hasattr(record, "routing_decision"))
    assert record.routing_decision["selected_location"] == "brooklyn"
    assert record.routing_decision["factors"]["distance"] == 100
