from __future__ import annotations

from typing import Callable

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from careerpilot.core.config import settings


def client_address(request: Request) -> str:
    """Rate-limit key: first X-Forwarded-For hop when behind a proxy, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded.split(",", 1)[0].strip()
    return first_hop or get_remote_address(request)


limiter = Limiter(key_func=client_address, enabled=settings.rate_limit_enabled)


def rate_limit(limit: str | None = None) -> Callable:
    """Apply ``limit`` (default ``RATE_LIMIT``) per client; no-op when rate limiting is off."""
    if settings.rate_limit_enabled:
        return limiter.limit(limit or settings.rate_limit)

    def decorator(func):
        return func

    return decorator
