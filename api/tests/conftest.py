"""API test configuration."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

import httpx
import pytest
from api.dependencies import QUERY_PARSER_SLOT, get_llm_client, get_oracle, get_solver_config
from api.main import create_app
from ephemeris.calculator import OracleError
from httpx import ASGITransport, AsyncClient
from skyquery.schemas.ephemeris import Body
from skyquery.services.llm_client import LLMClient, LLMSlotConfig
from solver.config import SolverConfig

EPOCH_2026 = datetime(2026, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)


class FakeOracle:
    """Sun moves one degree a day from 0 at 2026-01-01; every other body sits
    at a fixed longitude. Bodies listed in ``failing`` raise."""

    def __init__(self) -> None:
        self.fixed = {body: (i * 20.0) % 360.0 for i, body in enumerate(Body)}
        self.failing: set[Body] = set()
        self.calls = 0

    async def longitude(self, body: Body, instant: datetime) -> float:
        self.calls += 1
        if body in self.failing:
            raise OracleError(body, instant, "SwissEph file 'seas_18.se1' not found")
        if body is Body.SUN:
            return ((instant - EPOCH_2026) // _ONE_MS / 86_400_000) % 360.0
        return self.fixed[body]


class FakeRedis:
    """Counter-only stand-in for the rate limiter's redis client."""

    def __init__(self) -> None:
        self.counts: dict[str, int] = {}
        self.expiries: dict[str, int] = {}

    async def incr(self, key: str) -> int:
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key: str, seconds: int) -> None:
        self.expiries[key] = seconds

    async def aclose(self) -> None:
        pass


class FakeLLM:
    """Queues chat-completion replies and records the requests it saw."""

    def __init__(self) -> None:
        self.replies: list[httpx.Response] = []
        self.requests: list[dict] = []

    def reply(self, content: object, status_code: int = 200) -> None:
        if status_code != 200:
            self.replies.append(httpx.Response(status_code, json={"error": {"message": str(content)}}))
            return
        text = content if isinstance(content, str) else json.dumps(content)
        self.replies.append(
            httpx.Response(200, json={"choices": [{"message": {"content": text}}], "usage": {"total_tokens": 1}})
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if not self.replies:
            return httpx.Response(500, json={"error": {"message": "no reply queued"}})
        return self.replies.pop(0)


@pytest.fixture
def oracle():
    return FakeOracle()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def app(oracle, fake_redis, fake_llm):
    a = create_app()
    a.state._rate_limit_redis = fake_redis
    llm_client = LLMClient(transport=httpx.MockTransport(fake_llm.handler))
    llm_client.configure_slot(
        LLMSlotConfig(
            slot=QUERY_PARSER_SLOT,
            provider_name="test",
            api_endpoint="https://llm.test/v1",
            model_id="test-model",
            api_key="test-key",
        )
    )
    a.dependency_overrides[get_oracle] = lambda: oracle
    a.dependency_overrides[get_solver_config] = lambda: SolverConfig(max_coarse_steps=400)
    a.dependency_overrides[get_llm_client] = lambda: llm_client
    return a


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
