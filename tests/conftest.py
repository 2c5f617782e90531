"""Integration test configuration."""

import json

import httpx
import pytest
from api.dependencies import QUERY_PARSER_SLOT, get_llm_client
from api.main import create_app
from httpx import ASGITransport, AsyncClient
from skyquery.services.llm_client import LLMClient, LLMSlotConfig


class _NullRedis:
    async def incr(self, key):
        return 1

    async def expire(self, key, seconds):
        pass

    async def aclose(self):
        pass


@pytest.fixture
def sample_llm_reply():
    """What a model answers for "next new moon in Pisces after New Year 2026"."""
    return {
        "constraints": [
            {"kind": "aspect", "planetA": "Sun", "planetB": "Moon", "aspect": "conjunction", "orb": 2.0},
            {"kind": "in_sign", "planet": "Sun", "sign": "Pisces"},
        ],
        "direction": "future",
        "startTime": "2026-01-01T00:00:00Z",
    }


@pytest.fixture
async def live_client(sample_llm_reply):
    """App with the real ephemeris and a canned LLM."""

    def handler(request: httpx.Request) -> httpx.Response:
        content = json.dumps(sample_llm_reply)
        return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})

    llm_client = LLMClient(transport=httpx.MockTransport(handler))
    llm_client.configure_slot(
        LLMSlotConfig(
            slot=QUERY_PARSER_SLOT,
            provider_name="test",
            api_endpoint="https://llm.test/v1",
            model_id="test-model",
            api_key="test-key",
        )
    )
    app = create_app()
    app.state._rate_limit_redis = _NullRedis()
    app.dependency_overrides[get_llm_client] = lambda: llm_client
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    await llm_client.close()
