"""
Pydantic models for user stats, settings and auth status.
"""

from typing import Optional

from pydantic import Field

from grammar_drills.models.base import StrictRequest, StrictResponse


class UserStatsUpdate(StrictRequest):
    """Cumulative totals reported by the client."""

    total_exercises: int = Field(0, ge=0)
    total_mistakes: int = Field(0, ge=0)
    total_hints: int = Field(0, ge=0)
    total_time: int = Field(0, ge=0)


class UserStatsResponse(StrictResponse):
    """Stored totals for the current user."""

    total_exercises: int = 0
    total_mistakes: int = 0
    total_hints: int = 0
    total_time: int = 0
    last_topic_id: Optional[str] = None


class UserSettingsUpdate(StrictRequest):
    """Preferences persisted between visits."""

    last_topic_id: Optional[str] = None


class AuthStatusResponse(StrictResponse):
    logged_in: bool
    user_id: Optional[str] = None


class AdminStatusResponse(StrictResponse):
    is_admin: bool
