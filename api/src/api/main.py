"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from skyquery.config import get_settings
from solver.validation import describe_validation_error

from api.dependencies import close_llm_client
from api.middleware.rate_limit import RateLimitMiddleware
from api.routers import find_event, health, parse_query, sky

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    try:
        yield
    finally:
        redis_client = getattr(app.state, "_rate_limit_redis", None)
        if redis_client is not None:
            await redis_client.aclose()
        await close_llm_client()


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed input is a 400, as for every other bad-request path.
    detail = describe_validation_error(exc)
    logger.info("Rejected %s %s: %s", request.method, request.url.path, detail)
    return JSONResponse(status_code=400, content={"detail": detail})


def _warn_missing_configuration() -> None:
    settings = get_settings()
    if not settings.llm_api_key:
        logger.warning("LLM_API_KEY is not set; /v1/parse-query will be unavailable")
    if not settings.swisseph_ephe_path:
        logger.warning("SWISSEPH_EPHE_PATH is not set; asteroid positions will be unavailable")


def create_app() -> FastAPI:
    app = FastAPI(title="Skyquery API", version="0.1.0", lifespan=lifespan)
    settings = get_settings()
    _warn_missing_configuration()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RateLimitMiddleware)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.include_router(health.router, tags=["health"])
    app.include_router(find_event.router, prefix="/v1", tags=["search"])
    app.include_router(sky.router, prefix="/v1", tags=["ephemeris"])
    app.include_router(parse_query.router, prefix="/v1", tags=["parse"])
    return app


app = create_app()
