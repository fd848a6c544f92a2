"""
Pydantic API models.

These are request/response schemas only. Database rows live in
grammar_drills/db/models.py.
"""

from grammar_drills.models.base import StrictRequest, StrictResponse
from grammar_drills.models.exercises import ExerciseBatchRequest, ExerciseBatchResponse
from grammar_drills.models.topics import (
    PromptVersionResponse,
    TopicCreate,
    TopicResponse,
    TopicUpdate,
)
from grammar_drills.models.users import (
    AdminStatusResponse,
    AuthStatusResponse,
    UserSettingsUpdate,
    UserStatsResponse,
    UserStatsUpdate,
)

__all__ = [
    "StrictRequest",
    "StrictResponse",
    "ExerciseBatchRequest",
    "ExerciseBatchResponse",
    "TopicCreate",
    "TopicUpdate",
    "TopicResponse",
    "PromptVersionResponse",
    "UserStatsUpdate",
    "UserStatsResponse",
    "UserSettingsUpdate",
    "AuthStatusResponse",
    "AdminStatusResponse",
]
