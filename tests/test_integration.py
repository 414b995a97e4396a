import pytest
from fastapi.testclient import TestClient

from bakery_routing.data.store import get_store, reset_store
from bakery_routing.main import create_app
from bakery_routing.models.domain import Order
from bakery_routing.services.coverage import load_coverage_table

COBBLE_HILL = "200 Court St, Cobble Hill, Brooklyn"
YORKVILLE = "400 E 85th St, Yorkville, New York"


def _order_payload(**overrides) -> dict:
    payload = {
        "customer_name": "Ana Lopez",
        "type": "delivery",
        "delivery_address": "1 York Ave, Yorkville",
        "items": [{"name": "Sourdough", "quantity": 1, "price": 8.0}],
    }
    payload.update(overrides)
    return payload


def _ready(order_id: str, address: str) -> Order:
    return Order(
        id=order_id,
        type="delivery",
        status="ready",
        customer_name=f"Customer {order_id}",
        location_id="brooklyn",
        delivery_address=address,
    )


@pytest.fixture(autouse=True)
def fresh_state():
    load_coverage_table.cache_clear()
    reset_store()
    yield
    load_coverage_table.cache_clear()
    reset_store()


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "running"
    assert client.get("/api/health").json() == {"status": "ok"}

    routing_health = client.get("/api/health/routing").json()
    assert routing_health["healthy"] is True
    assert routing_health["locations"] == 3
    assert routing_health["available_drivers"] == 2


def test_locations_endpoints(client):
    listing = client.get("/api/locations")
    assert [item["id"] for item in listing.json()] == ["brooklyn", "ues", "times-square"]

    assert client.get("/api/locations/queens").status_code == 404

    response = client.patch("/api/locations/ues", json={"status": "closed"})
    assert response.status_code == 200
    assert response.json()["status"] == "closed"
    assert client.patch("/api/locations/ues", json={}).status_code == 422


def test_create_order_routes_and_returns_scores(client):
    response = client.post("/api/orders", json=_order_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["order"]["location_id"] == "ues"
    assert body["order"]["total"] == pytest.approx(11.0)
    assert body["routing"]["selected_location"] == "ues"
    assert body["routing"]["factors"]["distance"] == 100
    assert {candidate["location_id"] for candidate in body["routing"]["candidates"]} == {"brooklyn", "ues", "times-square"}

    order_id = body["order"]["id"]
    assert client.get(f"/api/orders/{order_id}").json()["customer_name"] == "Ana Lopez"
    assert [order["id"] for order in client.get("/api/orders", params={"location_id": "ues"}).json()] == [order_id]


def test_create_order_validation(client):
    assert client.post("/api/orders", json=_order_payload(delivery_address=None)).status_code == 422
    assert client.post("/api/orders", json=_order_payload(items=[])).status_code == 422
    assert client.post("/api/orders", json=_order_payload(location_id="queens")).status_code == 404


def test_order_lifecycle_over_api(client):
    order_id = client.post("/api/orders", json=_order_payload()).json()["order"]["id"]

    for status in ("confirmed", "preparing", "ready", "out-for-delivery"):
        response = client.put(f"/api/orders/{order_id}/status", json={"status": status})
        assert response.status_code == 200, response.text
    assert response.json()["assigned_driver_id"] == "driver-1"

    invalid = client.put(f"/api/orders/{order_id}/status", json={"status": "pending"})
    assert invalid.status_code == 400
    assert "Cannot change status" in invalid.json()["detail"]

    assert client.put(f"/api/orders/{order_id}/status", json={"status": "delivered"}).status_code == 200
    assert client.get("/api/drivers/driver-1").json()["status"] == "available"
    assert client.delete(f"/api/orders/{order_id}").status_code == 400
    assert client.delete("/api/orders/missing").status_code == 404


def test_driver_endpoints(client):
    get_store().create_order(_ready("o1", COBBLE_HILL))

    busy = client.post("/api/drivers/driver-2/assign-order", json={"order_id": "o1"})
    assert busy.status_code == 409

    assigned = client.post("/api/drivers/driver-1/assign-order", json={"order_id": "o1"})
    assert assigned.status_code == 200
    assert assigned.json()["order"]["status"] == "out-for-delivery"
    assert [order["id"] for order in client.get("/api/drivers/driver-1/orders").json()] == ["o1"]

    completed = client.post("/api/drivers/driver-1/complete-order", json={"order_id": "o1"})
    assert completed.json()["driver"]["total_deliveries"] == 1251

    moved = client.put("/api/drivers/driver-2/location", json={"lat": 40.7, "lng": -73.99})
    assert moved.json()["current_location"] == {"lat": 40.7, "lng": -73.99}
    assert client.put("/api/drivers/driver-2/location", json={"lat": 140, "lng": 0}).status_code == 422

    assert client.put("/api/drivers/driver-3/status", json={"status": "offline"}).json()["status"] == "offline"
    assert [driver["id"] for driver in client.get("/api/drivers", params={"available": True}).json()] == ["driver-1"]
    assert client.get("/api/drivers/driver-404").status_code == 404


def test_routing_endpoints(client):
    selected = client.post(
        "/api/routing/select",
        json={"type": "delivery", "delivery_address": "120 Court St, Cobble Hill"},
    )
    assert selected.status_code == 200
    assert selected.json()["selected_location"] == "brooklyn"
    assert client.post("/api/routing/select", json={"type": "delivery"}).status_code == 422

    recommended = client.post("/api/routing/recommend", json={"address": "300 E 50th St, Midtown East"})
    assert recommended.json() == {
        "address": "300 E 50th St, Midtown East",
        "neighborhood": "Midtown East",
        "location_id": "ues",
    }

    neighborhood = client.post("/api/routing/neighborhood", json={"address": "88 Bedford Ave, Williamsburg"})
    assert neighborhood.json()["extended"] == ["brooklyn"]

    coverage = client.get("/api/routing/coverage").json()
    assert coverage[0] == {"name": "Cobble Hill", "primary": ["brooklyn"], "extended": []}


def test_delivery_batches_preview_csv_and_dispatch(client):
    store = get_store()
    for order in (_ready("o1", COBBLE_HILL), _ready("o2", YORKVILLE), _ready("o3", COBBLE_HILL)):
        store.create_order(order)

    preview = client.get("/api/delivery/brooklyn/batches").json()
    assert [batch["order_ids"] for batch in preview["batches"]] == [["o1", "o3"], ["o2"]]
    assert preview["is_partial"] is False
    assert store.get_order("o1").status == "ready"

    sheet = client.get("/api/delivery/brooklyn/batches.csv")
    assert sheet.status_code == 200
    assert sheet.headers["content-type"].startswith("text/csv")
    lines = sheet.text.strip().splitlines()
    assert lines[0] == "batch_id,driver_id,sequence,order_id,address,estimated_minutes,total_distance_miles"
    assert len(lines) == 4

    dispatched = client.post("/api/delivery/brooklyn/dispatch").json()
    assert len(dispatched["dispatched"]) == 2
    assert dispatched["skipped"] == []
    assert store.get_order("o2").assigned_driver_id == "driver-3"

    assert client.get("/api/delivery/queens/batches").status_code == 404
    assert client.post("/api/delivery/queens/dispatch").status_code == 404


def test_delivery_zone_endpoints(client):
    zones = client.get("/api/delivery-zones", params={"location_id": "brooklyn"}).json()
    assert [zone["id"] for zone in zones] == ["zone-brooklyn-1"]

    coverage = client.get("/api/delivery-zones/location/times-square/coverage").json()
    assert coverage["max_delivery_fee"] == 3.50

    check = client.post(
        "/api/delivery-zones/check-address",
        json={"address": "1500 Broadway", "location_id": "times-square", "lat": 40.7589, "lng": -73.9851},
    )
    assert check.json()["available"] is True

    toggled = client.post("/api/delivery-zones/zone-ts-1/toggle").json()
    assert toggled["active"] is False
    assert client.get("/api/delivery-zones/zone-404").status_code == 404


def test_borough_address_in_extended_only_area_routes_to_borough(client):
    address = "88 Bedford Ave, Williamsburg, Brooklyn"

    selected = client.post("/api/routing/select", json={"type": "delivery", "delivery_address": address}).json()
    brooklyn = next(candidate for candidate in selected["candidates"] if candidate["location_id"] == "brooklyn")
    assert brooklyn["factors"]["distance"] == 100

    recommended = client.post("/api/routing/recommend", json={"address": address}).json()
    assert recommended["neighborhood"] == "Brooklyn Heights"
    assert recommended["location_id"] == "brooklyn"


def test_location_stats_follow_orders(client):
    for _ in range(12):
        payload = _order_payload(type="pickup", delivery_address=None, location_id="ues")
        assert client.post("/api/orders", json=payload).status_code == 201

    assert client.get("/api/locations/ues").json()["stats"]["kitchen_load"] == "high"

    stats = client.get("/api/locations/ues/stats")
    assert stats.status_code == 200
    body = stats.json()
    assert body["active_orders"] == 12
    assert body["today_orders"] == 12
    assert body["kitchen_load"] == "high"
    assert body["status_breakdown"] == {"pending": 12}
    assert client.get("/api/locations/queens/stats").status_code == 404


def test_bulk_order_update(client):
    payload = _order_payload(type="pickup", delivery_address=None, location_id="ues")
    order_ids = [client.post("/api/orders", json=payload).json()["order"]["id"] for _ in range(2)]

    response = client.post("/api/orders/bulk-update", json={"order_ids": [*order_ids, "missing"], "status": "confirmed"})

    assert response.status_code == 200
    body = response.json()
    assert (body["total"], body["successful"], body["failed"]) == (3, 2, 1)
    assert client.get(f"/api/orders/{order_ids[0]}").json()["status"] == "confirmed"
    assert client.post("/api/orders/bulk-update", json={"order_ids": [], "status": "confirmed"}).status_code == 422


def test_driver_cannot_be_double_booked(client):
    get_store().create_order(_ready("o1", COBBLE_HILL))
    client.post("/api/drivers/driver-1/assign-order", json={"order_id": "o1"})

    conflict = client.put("/api/drivers/driver-1/status", json={"status": "available"})
    assert conflict.status_code == 400
    assert "still has 1 assigned orders" in conflict.json()["detail"]
    assert client.get("/api/drivers/driver-1").json()["assigned_orders"] == ["o1"]

    assert client.put("/api/drivers/driver-2/status", json={"status": "available"}).json()["assigned_orders"] == []


def test_driver_performance_endpoint(client):
    response = client.get("/api/drivers/stats/performance")

    assert response.status_code == 200
    body = response.json()
    assert [row["id"] for row in body["drivers"]] == ["driver-1", "driver-2", "driver-3"]
    assert body["summary"]["total_drivers"] == 3
    assert body["summary"]["busy_drivers"] == 1
    assert body["summary"]["total_deliveries_today"] == 0
