"""Tests for health endpoints."""

import pytest
from skyquery.schemas.ephemeris import Body


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "skyquery-api"}


@pytest.mark.asyncio
async def test_ready_when_ephemeris_answers(client):
    resp = await client.get("/health/ready")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ready"}


@pytest.mark.asyncio
async def test_not_ready_when_ephemeris_fails(client, oracle):
    oracle.failing.add(Body.SUN)
    resp = await client.get("/health/ready")
    assert resp.status_code == 503
    assert resp.json()["status"] == "not_ready"
