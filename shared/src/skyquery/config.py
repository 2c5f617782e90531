"""Application configuration from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Ephemeris
    swisseph_ephe_path: str = Field(default="", alias="SWISSEPH_EPHE_PATH")

    # Solver
    solver_coarse_step_seconds: int = Field(default=86400, gt=0, alias="SOLVER_COARSE_STEP_SECONDS")
    solver_fine_window_seconds: int = Field(default=3600, gt=0, alias="SOLVER_FINE_WINDOW_SECONDS")
    solver_precision_ms: int = Field(default=1000, gt=0, alias="SOLVER_PRECISION_MS")
    solver_max_coarse_steps: int = Field(default=3650, gt=0, alias="SOLVER_MAX_COARSE_STEPS")
    solver_max_bisection_steps: int = Field(default=100, gt=0, alias="SOLVER_MAX_BISECTION_STEPS")

    # Query parsing (OpenAI-compatible chat completions)
    llm_api_endpoint: str = Field(default="https://api.groq.com/openai/v1", alias="LLM_API_ENDPOINT")
    llm_api_key: str = Field(default="", alias="LLM_API_KEY")
    llm_model_id: str = Field(default="llama-3.3-70b-versatile", alias="LLM_MODEL_ID")
    llm_temperature: float = Field(default=0.0, alias="LLM_TEMPERATURE")
    llm_timeout_seconds: float = Field(default=60.0, alias="LLM_TIMEOUT_SECONDS")

    # Redis
    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")

    # Rate limiting
    parse_query_rate_limit_max: int = Field(default=10, alias="PARSE_QUERY_RATE_LIMIT_MAX")
    parse_query_rate_limit_window_seconds: int = Field(
        default=60, gt=0, alias="PARSE_QUERY_RATE_LIMIT_WINDOW_SECONDS"
    )

    # Site
    cors_origins: list[str] = Field(default_factory=lambda: ["*"], alias="CORS_ORIGINS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reset_settings_cache() -> None:
    """Clear cached settings (useful in tests)."""
    get_settings.cache_clear()
