"""
Rate Limiting Service

Per-client request limits with slowapi, applied to every route by
SlowAPIMiddleware. All GraphQL operations share the /graphql route, so
the limit also caps login attempts (password guessing).

Settings:
- RATE_LIMIT_ENABLED: switch the limiter off (tests, local runs)
- RATE_LIMIT_DEFAULT: limit string such as "100/minute"
- RATE_LIMIT_STORAGE_URI: limits storage, "memory://" or "redis://host:6379"
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from library_api.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

RETRY_AFTER_SECONDS = 60


def get_client_ip(request: Request) -> str:
    """
    Key requests by client address.

    Behind a proxy the first X-Forwarded-For entry (or X-Real-IP) is the
    client; otherwise the socket peer is.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def create_limiter() -> Limiter:
    """Build the limiter from settings."""
    limiter = Limiter(
        key_func=get_client_ip,
        default_limits=[settings.rate_limit_default],
        storage_uri=settings.rate_limit_storage_uri,
        strategy="fixed-window",
        enabled=settings.rate_limit_enabled,
    )

    if settings.rate_limit_enabled:
        logger.info(f"Rate limiting at {settings.rate_limit_default} per client")
    else:
        logger.info("Rate limiting disabled")

    return limiter


limiter = create_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Answer 429 with the exceeded limit and a Retry-After hint."""
    limit = str(exc.detail)
    logger.warning(f"Rate limit {limit} exceeded by {get_client_ip(request)}")

    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "message": "Too many requests. Please slow down.",
            "detail": limit,
        },
        headers={
            "Retry-After": str(RETRY_AFTER_SECONDS),
            "X-RateLimit-Limit": limit,
        },
    )
