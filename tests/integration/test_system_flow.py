"""Integration tests for health endpoints."""

from fastapi.testclient import TestClient


def test_health(anon_client: TestClient):
    response = anon_client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["checks"]["database"] == "connected"
    assert data["checks"]["ai"] == "configured"
    assert data["checks"]["live_streams"] == 0


def test_healthz(anon_client: TestClient):
    assert anon_client.get("/api/healthz").json() == {"status": "healthy"}
