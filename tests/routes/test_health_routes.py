"""Service info, health and table listing."""

from unittest.mock import MagicMock

from booking_api.api.dependencies import get_database
from booking_api.database import Database


def test_api_info(client):
    response = client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Booking API is running"
    assert body["endpoints"]["bookings"] == "/bookings"


def test_health_ok(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["database"] == "connected"
    assert body["timestamp"].endswith("Z")


def test_health_degraded_when_database_down(app, client):
    broken = MagicMock(spec=Database)
    broken.ping.return_value = False
    app.dependency_overrides[get_database] = lambda: broken

    response = client.get("/health")

    assert response.status_code == 503
    body = response.json()
    assert body["success"] is False
    assert body["status"] == "degraded"
    assert body["database"] == "unavailable"


def test_tables(client):
    response = client.get("/tables")

    assert response.status_code == 200
    tables = response.json()["tables"]
    for name in ("users", "locations", "services", "availability", "bookings"):
        assert name in tables
