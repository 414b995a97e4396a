import pytest

from bakery_routing.models.domain import Driver, Order
from bakery_routing.services.coverage import load_coverage_table
from bakery_routing.services.routing.batching import (
    batch_deliveries,
    estimate_batch_distance,
    estimate_batch_minutes,
    group_orders_by_proximity,
)

COBBLE_HILL = "200 Court St, Cobble Hill, Brooklyn"
YORKVILLE = "400 E 85th St, Yorkville, New York"
CHELSEA = "250 W 23rd St, Chelsea, New York"


def _ready(order_id: str, address: str | None, *, location_id: str = "brooklyn", **overrides) -> Order:
    values = dict(
        id=order_id,
        type="delivery",
        status="ready",
        customer_name=f"Customer {order_id}",
        location_id=location_id,
        delivery_address=address,
    )
    values.update(overrides)
    return Order(**values)


def _drivers(count: int) -> list[Driver]:
    return [Driver(id=f"driver-{index}", name=f"Driver {index}", status="available") for index in range(1, count + 1)]


@pytest.fixture(autouse=True)
def clear_coverage_cache():
    load_coverage_table.cache_clear()
    yield
    load_coverage_table.cache_clear()


def test_orders_are_grouped_by_neighborhood():
    orders = [
        _ready("o1", COBBLE_HILL),
        _ready("o2", YORKVILLE),
        _ready("o3", COBBLE_HILL),
        _ready("o4", YORKVILLE),
        _ready("o5", COBBLE_HILL),
    ]

    result = batch_deliveries("brooklyn", orders, _drivers(2))

    assert len(result.batches) == 2
    assert [batch.order_ids for batch in result.batches] == [["o1", "o3", "o5"], ["o2", "o4"]]
    assert [batch.order_count for batch in result.batches] == [3, 2]
    assert [batch.total_distance_miles for batch in result.batches] == [4.5, 3.0]
    assert [batch.estimated_minutes for batch in result.batches] == [34, 26]
    assert [batch.driver_id for batch in result.batches] == ["driver-1", "driver-2"]
    assert not result.is_partial
    assert result.served_orders == 5


def test_groups_beyond_available_drivers_are_reported():
    orders = [_ready("o1", COBBLE_HILL), _ready("o2", YORKVILLE), _ready("o3", CHELSEA)]
    drivers = [Driver(id="busy", name="Busy", status="busy"), *_drivers(1)]

    result = batch_deliveries("brooklyn", orders, drivers)

    assert len(result.batches) == 1
    assert result.batches[0].driver_id == "driver-1"
    assert result.batches[0].order_ids == ["o1"]
    assert result.group_count == 3
    assert result.dropped_groups == 2
    assert result.unserved_order_ids == ["o2", "o3"]
    assert result.pending_orders == 2
    assert result.is_partial
    assert all(order.status == "ready" and order.assigned_driver_id is None for order in orders)


def test_batches_never_exceed_max_size():
    orders = [_ready(f"o{index}", COBBLE_HILL) for index in range(1, 7)]

    result = batch_deliveries("brooklyn", orders, _drivers(3))

    assert [batch.order_count for batch in result.batches] == [4, 2]
    assert [len(batch.route) for batch in result.batches] == [4, 2]

    smaller = batch_deliveries("brooklyn", orders, _drivers(3), max_batch_size=2)
    assert [batch.order_count for batch in smaller.batches] == [2, 2, 2]


def test_only_ready_unassigned_delivery_orders_for_the_location_are_batched():
    orders = [
        _ready("keep", COBBLE_HILL),
        _ready("pickup", COBBLE_HILL, type="pickup"),
        _ready("preparing", COBBLE_HILL, status="preparing"),
        _ready("assigned", COBBLE_HILL, assigned_driver_id="driver-9"),
        _ready("elsewhere", COBBLE_HILL, location_id="ues"),
    ]

    result = batch_deliveries("brooklyn", orders, _drivers(2))

    assert result.eligible_orders == 1
    assert [batch.order_ids for batch in result.batches] == [["keep"]]


def test_orders_without_address_are_batched_alone():
    orders = [_ready("o1", None), _ready("o2", None), _ready("o3", COBBLE_HILL)]

    groups = group_orders_by_proximity(orders, max_batch_size=4, table=load_coverage_table())

    assert [[order.id for order in group] for group in groups] == [["o1"], ["o2"], ["o3"]]


def test_route_stops_follow_group_order():
    orders = [_ready("o1", COBBLE_HILL), _ready("o2", COBBLE_HILL)]

    batch = batch_deliveries("brooklyn", orders, _drivers(1)).batches[0]

    assert [(stop.order_id, stop.sequence) for stop in batch.route] == [("o1", 1), ("o2", 2)]
    assert batch.stop_positions == {"o1": 1, "o2": 2}
    assert batch.route[0].address == COBBLE_HILL


def test_batch_ids_are_unique():
    orders = [_ready("o1", COBBLE_HILL), _ready("o2", YORKVILLE)]

    first = batch_deliveries("brooklyn", orders, _drivers(2))
    second = batch_deliveries("brooklyn", orders, _drivers(2))

    ids = [batch.id for batch in first.batches + second.batches]
    assert len(set(ids)) == 4
    assert all(batch_id.startswith("batch-") for batch_id in ids)


def test_nothing_to_batch():
    result = batch_deliveries("brooklyn", [], _drivers(2))
    assert result.batches == []
    assert not result.is_partial

    no_drivers = batch_deliveries("brooklyn", [_ready("o1", COBBLE_HILL)], [])
    assert no_drivers.batches == []
    assert no_drivers.unserved_order_ids == ["o1"]


def test_estimates():
    assert estimate_batch_minutes(1) == 18
    assert estimate_batch_minutes(4) == 42
    assert estimate_batch_minutes(2, base_minutes=0, minutes_per_stop=1, travel_minutes_per_stop=1) == 4
    assert estimate_batch_distance(4) == 6.0
    assert estimate_batch_distance(2, miles_per_order=2.0) == 4.0


def test_invalid_batch_size():
    with pytest.raises(ValueError):
        group_orders_by_proximity([_ready("o1", COBBLE_HILL)], max_batch_size=0, table=load_coverage_table())
