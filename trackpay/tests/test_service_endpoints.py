"""
Tests for root, health, app-config and error envelopes.
"""

import pytest
from trackpay.app.main import app
from trackpay.app.db.session import get_database


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OK"
    assert data["version"]


@pytest.mark.asyncio
async def test_health_connected(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"
    assert data["uptime"] >= 0
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_health_reports_database_outage(client):
    class BrokenDatabase:
        async def ping(self):
            raise ConnectionError("connection refused")

    original = app.dependency_overrides[get_database]
    app.dependency_overrides[get_database] = lambda: BrokenDatabase()
    try:
        response = await client.get("/api/health")
    finally:
        app.dependency_overrides[get_database] = original

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["database"] == "disconnected"


@pytest.mark.asyncio
async def test_app_config_is_public(client):
    response = await client.get("/api/app-config")
    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"latestVersion", "forceUpdate", "updateUrl", "message"}


@pytest.mark.asyncio
async def test_unknown_route_returns_json_404(client):
    response = await client.get("/api/does-not-exist")
    assert response.status_code == 404
    data = response.json()
    assert data["message"] == "Route not found"
    assert data["details"]["path"] == "/api/does-not-exist"


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.get("/", headers={"X-Correlation-ID": "req-123"})
    assert response.headers["X-Correlation-ID"] == "req-123"
    assert "X-Process-Time" in response.headers
