"""
Per-IP rate limiting.

Two fixed-window budgets: general API calls per minute, and LLM-backed
calls (bulk generate, replace, the generator endpoint) per hour. A
generation call is counted against the hourly budget only.
"""

import time
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from mathsheet.config import get_settings

GENERATION_SUFFIXES = ("/generate", "/replace")
TOO_MANY_REQUESTS = "요청이 너무 많습니다. 잠시 후 다시 시도해주세요."


def _get_client_ip(request: Request) -> str:
    """Client IP from X-Forwarded-For or the direct peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def is_generation_request(request: Request) -> bool:
    """True for POSTs that end up calling the LLM."""
    if request.method != "POST":
        return False
    path = (request.url.path or "").rstrip("/")
    prefix = get_settings().api_v1_prefix
    return path == f"{prefix}/generator" or path.endswith(GENERATION_SUFFIXES)


class InMemoryRateLimitStore:
    """Fixed-window counters. Key -> (count, window_start, window_seconds)."""

    def __init__(self):
        self._data: Dict[str, Tuple[int, float, int]] = {}

    def check_and_incr(
        self,
        scope: str,
        identifier: str,
        limit: int,
        window_seconds: int,
    ) -> bool:
        """True if under limit (and counted). False if over limit (not counted)."""
        key = f"{scope}:{identifier}"
        now = time.monotonic()
        entry = self._data.get(key)
        if entry is None or now - entry[1] >= entry[2]:
            self._data[key] = (1, now, window_seconds)
            return True
        count, start, window = entry
        if count >= limit:
            return False
        self._data[key] = (count + 1, start, window)
        return True

    def cleanup_old(self) -> None:
        """Drop entries whose window has closed."""
        now = time.monotonic()
        expired = [k for k, (_, start, window) in self._data.items() if now - start >= window]
        for k in expired:
            del self._data[k]


_store: Optional[InMemoryRateLimitStore] = None


def get_store() -> InMemoryRateLimitStore:
    global _store
    if _store is None:
        _store = InMemoryRateLimitStore()
    return _store


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Apply the per-IP budgets to everything under the API prefix."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        settings = get_settings()
        if not settings.rate_limit_enabled:
            return await call_next(request)
        if not (request.url.path or "").startswith(settings.api_v1_prefix):
            return await call_next(request)

        store = get_store()
        store.cleanup_old()

        if is_generation_request(request):
            scope, limit, window = "generation", settings.rate_limit_generation_per_hour, 3600
        else:
            scope, limit, window = "api", settings.rate_limit_api_per_minute, 60

        if not store.check_and_incr(scope, _get_client_ip(request), limit, window):
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": TOO_MANY_REQUESTS},
            )
        return await call_next(request)
