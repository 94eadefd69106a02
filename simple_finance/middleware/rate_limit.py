# simple_finance/middleware/rate_limit.py
"""
Rate limiting using slowapi.

Limits are keyed by client IP and kept in memory (single instance).
The values live in simple_finance/services/constants.py:

    RATE_LIMIT_DEFAULT  every endpoint without its own limit
    RATE_LIMIT_QUOTES   live quote lookups (protects the Yahoo quota)
    RATE_LIMIT_CRON     snapshot trigger

Usage:
    from simple_finance.middleware.rate_limit import limiter, RATE_LIMIT_QUOTES

    @router.get("/quotes/{symbol}")
    @limiter.limit(RATE_LIMIT_QUOTES)
    def get_quote(request: Request, symbol: str):
        ...
"""

import logging

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from simple_finance.schemas.errors import ErrorDetail
from simple_finance.services.constants import (
    RATE_LIMIT_CRON,
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_QUOTES,
)

logger = logging.getLogger(__name__)

# Seconds a client is told to wait after hitting a limit
DEFAULT_RETRY_AFTER = 60


# =============================================================================
# LIMITER INSTANCE
# =============================================================================

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[RATE_LIMIT_DEFAULT],
)


# =============================================================================
# RATE LIMIT EXCEEDED HANDLER
# =============================================================================

async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """
    Return 429 in the common ErrorDetail shape with a Retry-After header.
    """
    limit_info = str(exc.detail) if exc.detail else "Rate limit exceeded"
    logger.warning(f"Rate limit exceeded for {get_remote_address(request)}: {limit_info}")

    return JSONResponse(
        status_code=429,
        content=ErrorDetail(
            error="RateLimitError",
            message=f"Too many requests. {limit_info}",
            details={"retry_after": DEFAULT_RETRY_AFTER},
        ).model_dump(),
        headers={"Retry-After": str(DEFAULT_RETRY_AFTER)},
    )


__all__ = [
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_QUOTES",
    "RATE_LIMIT_CRON",
]
