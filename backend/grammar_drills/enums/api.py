"""
API-related enums.

Defines enums for rate limiting and other API concerns.
"""

from enum import Enum


class RateLimitType(str, Enum):
    """
    Rate limit categories for different endpoint types.

    Each category has a corresponding rate limit configured in settings.
    Usage:
        from grammar_drills.enums import RateLimitType
        from grammar_drills.config import settings

        limit = settings.get_rate_limit(RateLimitType.LLM_HEAVY)
    """

    # General API endpoints
    DEFAULT = "default"

    # Endpoints that may call LLMs (exercise delivery)
    LLM_HEAVY = "llm_heavy"

    # Auth status checks
    AUTH = "auth"

    # Topic and version editing
    ADMIN = "admin"
