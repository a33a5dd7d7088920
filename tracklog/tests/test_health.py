"""
Health, root and request logging tests.
"""

import logging
import pytest


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["app_name"] == "Tracklog"


@pytest.mark.asyncio
async def test_root_points_to_api(client):
    response = await client.get("/")
    assert response.json()["api"] == "/api"


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert float(response.headers["X-Process-Time"]) >= 0


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/api/nothing-here")
    assert response.status_code == 404
    data = response.json()
    assert data["error"] is True
    assert data["error_code"] == "ERR_NOT_FOUND"


@pytest.mark.asyncio
async def test_request_log_has_route_and_user(client, alice, headers_for, caplog):
    caplog.set_level(logging.INFO, logger="tracklog.requests")
    response = await client.get(f"/api/users/{alice.id}/tracks", headers=headers_for(alice))
    assert response.status_code == 200

    record = [r for r in caplog.records if r.name == "tracklog.requests"][-1]
    assert record.route == "/api/users/{user_id}/tracks"
    assert record.user_id == alice.id
    assert record.status_code == 200


@pytest.mark.asyncio
async def test_request_log_anonymous(client, caplog):
    caplog.set_level(logging.INFO, logger="tracklog.requests")
    await client.get("/api/nothing-here")

    record = [r for r in caplog.records if r.name == "tracklog.requests"][-1]
    assert record.route == "/api/nothing-here"
    assert record.user_id is None
    assert record.levelname == "WARNING"
