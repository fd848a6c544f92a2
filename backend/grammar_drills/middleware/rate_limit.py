"""
Rate Limiting Middleware

Per-client rate limits using SlowAPI. Limiter state lives in the limiter's
storage backend (in-memory by default, with per-window expiry), not in
module globals of the application.

Usage:
    from grammar_drills.middleware.rate_limit import limiter, get_rate_limit
    from grammar_drills.enums import RateLimitType

    @router.post("/exercises")
    @limiter.limit(get_rate_limit(RateLimitType.LLM_HEAVY))
    async def get_exercises(request: Request, ...):
        ...

Rate limit categories (from settings):
- DEFAULT: General API endpoints
- LLM_HEAVY: Exercise delivery, which may trigger generation
- AUTH: Auth status checks
- ADMIN: Topic and prompt version editing
"""

import logging

from fastapi import FastAPI, Request
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from grammar_drills.config import settings
from grammar_drills.enums import RateLimitType

logger = logging.getLogger(__name__)


def get_client_identifier(request: Request) -> str:
    """
    Get client identifier for rate limiting.

    Uses the first address in X-Forwarded-For when behind a proxy,
    otherwise the direct client address.

    Args:
        request: FastAPI request object

    Returns:
        Client IP address or identifier
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    enabled=settings.RATE_LIMIT_ENABLED,
)


def setup_rate_limiting(app: FastAPI, enabled: bool = True) -> None:
    """
    Configure rate limiting on the FastAPI app.

    Args:
        app: FastAPI application instance
        enabled: Whether to enable rate limiting
    """
    if not enabled:
        limiter.enabled = False
        logger.info("Rate limiting disabled")
        return

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    logger.info("Rate limiting enabled")


def get_rate_limit(rate_limit_type: RateLimitType) -> str:
    """
    Get rate limit string for an endpoint type.

    Args:
        rate_limit_type: RateLimitType enum value

    Returns:
        Rate limit string (e.g., "20/minute")
    """
    return settings.get_rate_limit(rate_limit_type)
