"""
Immutable records handed out by the content store.

The exercise service and the scheduling functions work on these instead of
ORM rows, so they never touch a database session directly and can be tested
without one.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class TopicRecord:
    id: str
    name: str
    prompt: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class PromptVersionRecord:
    id: str
    topic_id: str
    prompt: str
    version: int
    created_at: datetime


@dataclass(frozen=True)
class ExerciseRecord:
    """
    A cached exercise.

    Attributes:
        id: Exercise id
        topic_id: Topic the exercise belongs to
        prompt_hash: Hash of the prompt that generated it
        payload: Opaque exercise content, passed through to clients
        created_at: Generation timestamp (UTC)
    """

    id: str
    topic_id: str
    prompt_hash: str
    payload: dict[str, Any] = field(compare=False)
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ViewRecord:
    """
    Serving history of one exercise for one user.

    `id` is None for views that have not been stored yet.
    """

    user_id: str
    exercise_id: str
    last_viewed: datetime
    repetition_counter: int
    id: Optional[str] = None


@dataclass(frozen=True)
class UserStatsRecord:
    user_id: str
    total_exercises: int = 0
    total_mistakes: int = 0
    total_hints: int = 0
    total_time: int = 0
    last_topic_id: Optional[str] = None
