"""
Enums Package

Centralized enum definitions shared across routers, services and config.

Usage:
    from grammar_drills.enums import LLMOperation, RateLimitType
"""

from grammar_drills.enums.api import RateLimitType
from grammar_drills.enums.llm import LLMOperation

__all__ = [
    "LLMOperation",
    "RateLimitType",
]
