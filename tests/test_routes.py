import pytest
from fastapi.testclient import TestClient

from fixtures import CREATE_BOOKING, ENDPOINT, JWT_KEY, PICKUPS, PRODUCTS, SESSIONS, TOKEN, FakeSession
from main import app
from routers.plugin import get_plugin
from services.plugin import Plugin

AVAILABILITY_PAYLOAD = {
    "productIds": ["120"],
    "optionIds": ["default"],
    "units": [[{"unitId": "adults", "quantity": 2}]],
    "startDate": "2026-03-15",
    "endDate": "2026-03-16",
}


@pytest.fixture
def session():
    return (
        FakeSession()
        .add("GET", f"{ENDPOINT}/products", PRODUCTS)
        .add("GET", f"{ENDPOINT}/availability", SESSIONS, params={"productCode": "120"})
        .add("GET", f"{ENDPOINT}/products/120/pickups", PICKUPS)
        .add("POST", f"{ENDPOINT}/bookings", CREATE_BOOKING)
    )


@pytest.fixture
def client(session):
    plugin = Plugin(endpoint=ENDPOINT, jwt_key=JWT_KEY, session=session)
    app.dependency_overrides[get_plugin] = lambda: plugin
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert "message" in client.get("/").json()
    assert "/products/search" in client.get("/routes").json()


def test_token_template_is_serializable(client):
    body = client.get("/token-template").json()
    assert body["apiKey"]["regExp"] == "^[a-fA-F0-9]+$"
    assert body["resellerId"]["type"] == "text"


def test_validate_token(client):
    resp = client.post("/validate-token", json={"token": TOKEN})
    assert resp.status_code == 200
    assert resp.json() == {"valid": True}


def test_products_search(client):
    resp = client.post("/products/search", json={"token": TOKEN, "payload": {}, "projection": {"product": ["productId"]}})
    assert resp.status_code == 200
    assert resp.json() == {"products": [{"productId": "120"}, {"productId": "121"}]}


def test_projection_error_is_400(client):
    resp = client.post("/products/search", json={"token": TOKEN, "payload": {}, "projection": {"product": ["nope"]}})
    assert resp.status_code == 400
    assert "Cannot query field" in resp.json()["detail"]


def test_availability_then_booking(client):
    resp = client.post("/availability/search", json={"token": TOKEN, "payload": AVAILABILITY_PAYLOAD})
    assert resp.status_code == 200
    key = resp.json()["availability"][0][0]["key"]

    resp = client.post("/bookings", json={
        "token": TOKEN,
        "payload": {"availabilityKey": key, "holder": {"name": "John", "surname": "Doe"}},
    })
    assert resp.status_code == 200
    assert resp.json()["booking"]["bookingId"] == "REZDY-12345"


def test_missing_surname_is_400_without_upstream_call(client, session):
    resp = client.post("/bookings", json={"token": TOKEN, "payload": {"availabilityKey": "k", "holder": {"name": "John"}}})
    assert resp.status_code == 400
    assert "surname is required" in resp.json()["detail"]
    assert session.calls == []


def test_invalid_booking_id_is_400(client):
    resp = client.post("/bookings/cancel", json={"token": TOKEN, "payload": {}})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid booking id"


def test_quote_search(client):
    resp = client.post("/quotes/search", json={"token": TOKEN, "payload": {}})
    assert resp.json() == {"quote": []}


def test_routes_lists_included_router_paths(client):
    response = client.get("/routes")
    assert response.status_code == 200
    paths = response.json()
    assert "/health" in paths
    assert "/bookings/search" in paths
    assert all(isinstance(p, str) for p in paths)
