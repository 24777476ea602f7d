"""Integration tests for presence and driver dashboard endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from courier_dispatch.infrastructure.security import create_actor_token
from main import create_app


def _headers(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_actor_token(user.id, user.role)}"}


@pytest.fixture()
def client():
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def test_force_offline_round_trip(client: TestClient, directory) -> None:
    driver_id = directory.driver_a.id
    driver_headers = _headers(directory.driver_a)
    admin_headers = _headers(directory.admin)

    online = client.put(f"/drivers/{driver_id}/status", json={"status": "online"}, headers=driver_headers)
    assert online.status_code == 200
    assert online.json()["online"] is True

    forced = client.post(
        f"/drivers/{driver_id}/force-offline",
        json={"reason": "Document check"},
        headers=admin_headers,
    )
    assert forced.status_code == 200
    assert forced.json()["force_offline"] is True
    assert forced.json()["offline_reason"] == "Document check"

    blocked = client.put(f"/drivers/{driver_id}/status", json={"status": "online"}, headers=driver_headers)
    assert blocked.status_code == 423
    assert "Document check" in blocked.json()["detail"]
    assert client.post(f"/drivers/{driver_id}/heartbeat", headers=driver_headers).status_code == 423

    allowed = client.post(f"/drivers/{driver_id}/allow-online", headers=admin_headers)
    assert allowed.status_code == 200
    assert allowed.json()["online"] is False

    back = client.put(f"/drivers/{driver_id}/status", json={"status": "online"}, headers=driver_headers)
    assert back.status_code == 200
    assert back.json()["available"] is True


def test_presence_endpoints_enforce_roles(client: TestClient, directory) -> None:
    driver_headers = _headers(directory.driver_a)

    assert client.get("/drivers/available", headers=driver_headers).status_code == 403
    assert (
        client.post(f"/drivers/{directory.driver_b.id}/force-offline", headers=driver_headers).status_code
        == 403
    )
    assert (
        client.put(
            f"/drivers/{directory.driver_b.id}/status",
            json={"status": "online"},
            headers=driver_headers,
        ).status_code
        == 403
    )
    unknown = client.post("/drivers/999/heartbeat", headers=_headers(directory.admin))
    assert unknown.status_code == 404


def test_available_drivers_and_overview(client: TestClient, directory) -> None:
    client.post(f"/drivers/{directory.driver_a.id}/heartbeat", headers=_headers(directory.driver_a))
    client.put(
        f"/drivers/{directory.driver_b.id}/status",
        json={"status": "offline"},
        headers=_headers(directory.driver_b),
    )

    admin_headers = _headers(directory.admin)
    available = client.get("/drivers/available", headers=admin_headers)
    assert available.json() == {"driver_ids": [directory.driver_a.id], "count": 1}

    overview = client.get("/drivers/overview", headers=admin_headers)
    assert overview.status_code == 200
    assert overview.json() == {
        "registered_drivers": 4,
        "online": 1,
        "available": 1,
        "forced_offline": 0,
    }

    presence = client.get(f"/drivers/{directory.driver_a.id}/presence", headers=_headers(directory.driver_a))
    assert presence.status_code == 200
    assert presence.json()["available"] is True


def test_driver_stats_endpoint(client: TestClient, directory) -> None:
    response = client.get(
        f"/drivers/{directory.driver_a.id}/stats", headers=_headers(directory.driver_a)
    )
    assert response.status_code == 200
    body = response.json()
    assert body["driver_id"] == directory.driver_a.id
    assert body["total_orders"] == 0
    assert body["total_earnings"] == "0"
