"""FastAPI dependency injection."""

from __future__ import annotations

from functools import lru_cache

from ephemeris.calculator import LongitudeOracle, SwissEphemeris
from fastapi import HTTPException, status
from skyquery.config import get_settings
from skyquery.services.llm_client import LLMClient, LLMSlotConfig
from solver.config import SolverConfig

QUERY_PARSER_SLOT = "query_parser"

_llm_client: LLMClient | None = None


@lru_cache(maxsize=1)
def get_ephemeris() -> SwissEphemeris:
    """Process-wide Swiss Ephemeris oracle."""
    return SwissEphemeris(get_settings().swisseph_ephe_path)


def get_oracle() -> LongitudeOracle:
    return get_ephemeris()


def get_solver_config() -> SolverConfig:
    return SolverConfig.from_settings(get_settings())


def get_llm_client() -> LLMClient:
    """LLM client configured for query parsing; 503 when no API key is set."""
    global _llm_client
    settings = get_settings()
    if not settings.llm_api_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Query parsing is not configured",
        )
    if _llm_client is None:
        client = LLMClient(timeout=settings.llm_timeout_seconds)
        client.configure_slot(
            LLMSlotConfig(
                slot=QUERY_PARSER_SLOT,
                provider_name="openai-compatible",
                api_endpoint=settings.llm_api_endpoint,
                model_id=settings.llm_model_id,
                api_key=settings.llm_api_key,
                temperature=settings.llm_temperature,
            )
        )
        _llm_client = client
    return _llm_client


async def close_llm_client() -> None:
    global _llm_client
    if _llm_client is not None:
        await _llm_client.close()
        _llm_client = None
