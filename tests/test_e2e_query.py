"""End-to-end: free text to an event timestamp (with mocked LLM)."""

import pytest


@pytest.mark.asyncio
async def test_parsed_query_feeds_find_event(live_client):
    parsed = await live_client.post("/v1/parse-query", json={"text": "next new moon in Pisces"})
    assert parsed.status_code == 200

    found = await live_client.post("/v1/find-event", json=parsed.json())
    assert found.status_code == 200
    assert found.json() == {"timestamp": "2026-03-18T22:59:58.878Z"}


@pytest.mark.asyncio
async def test_found_instant_satisfies_query(live_client):
    resp = await live_client.post(
        "/v1/find-event",
        json={
            "constraints": [{"kind": "in_sign", "planet": "Sun", "sign": "Pisces"}],
            "direction": "future",
            "startTime": "2026-01-01T00:00:00Z",
        },
    )
    assert resp.status_code == 200
    timestamp = resp.json()["timestamp"]
    assert timestamp == "2026-02-18T22:59:58.878Z"

    sun = await live_client.post("/v1/planet-longitude", json={"planet": "Sun", "timestamp": timestamp})
    assert 330.0 <= sun.json()["longitude"] < 360.0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "planet,expected",
    [("Sun", 354.89925250456406), ("Moon", 32.37196281582297), ("Mars", 336.50740201678616)],
)
async def test_planet_longitude_reference_chart(live_client, planet, expected):
    resp = await live_client.post("/v1/planet-longitude", json={"planet": planet, "timestamp": "1994-03-15T17:17:00Z"})
    assert resp.status_code == 200
    assert resp.json()["longitude"] == pytest.approx(expected, abs=0.01)
