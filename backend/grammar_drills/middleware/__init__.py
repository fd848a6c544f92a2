"""
Middleware Package

Provides FastAPI middleware and the service exception taxonomy:
- Rate limiting (SlowAPI)
- Error handling (structured JSON errors)
"""

from grammar_drills.middleware.error_handling import (
    AuthorizationError,
    ErrorHandlingMiddleware,
    GenerationError,
    LLMError,
    NotFoundError,
    ServiceError,
    ValidationError,
    setup_error_handling,
)
from grammar_drills.middleware.rate_limit import get_rate_limit, limiter, setup_rate_limiting

__all__ = [
    "setup_rate_limiting",
    "limiter",
    "get_rate_limit",
    "setup_error_handling",
    "ErrorHandlingMiddleware",
    "ServiceError",
    "LLMError",
    "GenerationError",
    "ValidationError",
    "NotFoundError",
    "AuthorizationError",
]
