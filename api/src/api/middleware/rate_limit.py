"""Rate limiting middleware for the LLM-backed endpoints."""

from __future__ import annotations

import logging
import time
from ipaddress import IPv4Address, IPv6Address, ip_address, ip_network

from fastapi import Request, Response
from skyquery.config import get_settings
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

_TRUSTED_PROXY_NETWORKS = (
    ip_network("127.0.0.0/8"),
    ip_network("10.0.0.0/8"),
    ip_network("172.16.0.0/12"),
    ip_network("192.168.0.0/16"),
    ip_network("::1/128"),
    ip_network("fc00::/7"),
)

# path -> key prefix; only POSTs are counted
_LIMITED_PATHS: dict[str, str] = {
    "/v1/parse-query": "parse-query",
}


def _parse_ip(value: str) -> IPv4Address | IPv6Address | None:
    try:
        return ip_address(value.strip())
    except ValueError:
        return None


def _is_trusted_proxy_host(host: str) -> bool:
    # Starlette's TestClient reports this literal host
    if host == "testclient":
        return True
    addr = _parse_ip(host) if host else None
    return addr is not None and any(addr in net for net in _TRUSTED_PROXY_NETWORKS)


def _extract_forwarded_client_ip(x_forwarded_for: str) -> str | None:
    """Nearest hop in ``X-Forwarded-For`` that is not one of our proxies.

    Entries are read right to left; only the right-most ones come from
    trusted infrastructure. Falls back to the right-most valid
    address when every hop is private.
    """
    hops = [str(addr) for addr in map(_parse_ip, reversed(x_forwarded_for.split(","))) if addr is not None]
    for hop in hops:
        if not _is_trusted_proxy_host(hop):
            return hop
    return hops[0] if hops else None


def _resolve_client_ip(request: Request) -> str:
    remote_host = request.client.host if request.client else "unknown"
    if not _is_trusted_proxy_host(remote_host):
        return remote_host
    return _extract_forwarded_client_ip(request.headers.get("x-forwarded-for", "")) or remote_host


def rate_limit_key(prefix: str, client_ip: str, window_seconds: int, now: float | None = None) -> str:
    window = int((time.time() if now is None else now) // window_seconds)
    return f"ratelimit:{prefix}:{client_ip}:{window}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def _get_redis_client(self, request: Request):
        redis_client = getattr(request.app.state, "_rate_limit_redis", None)
        if redis_client is None:
            import redis.asyncio as aioredis

            settings = get_settings()
            redis_client = aioredis.from_url(settings.redis_url)
            request.app.state._rate_limit_redis = redis_client
        return redis_client

    async def dispatch(self, request: Request, call_next):
        prefix = _LIMITED_PATHS.get(request.url.path)
        if prefix is None or request.method != "POST":
            return await call_next(request)
        settings = get_settings()
        limit = settings.parse_query_rate_limit_max
        window = settings.parse_query_rate_limit_window_seconds
        if limit <= 0 or window <= 0:
            return await call_next(request)

        client_ip = _resolve_client_ip(request)
        try:
            r = await self._get_redis_client(request)
            key = rate_limit_key(prefix, client_ip, window)
            count = await r.incr(key)
            if count == 1:
                await r.expire(key, window)
            if count > limit:
                logger.info("Rate limit exceeded for %s on %s", client_ip, request.url.path)
                return Response(
                    content='{"detail":"Too many requests. Please try again later."}',
                    status_code=429,
                    media_type="application/json",
                    headers={"Retry-After": str(window)},
                )
        except Exception as e:
            logger.warning("Rate limit check failed: %s", e)
        return await call_next(request)
