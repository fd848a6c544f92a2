"""
SQLAlchemy Database Models for Grammar Drills

Tables:
- topics: Grammar topics with the prompt used to generate their exercises
- prompt_versions: Immutable history of a topic's prompt (sliding window)
- exercises: Generated exercises, keyed by topic and the hash of the prompt
  that produced them
- user_exercise_views: Per-user serving history that drives review scheduling
- user_stats: Per-user practice totals and preferences

ARCHITECTURE NOTE:
    This file contains SQLALCHEMY models for database persistence.
    Services never hand these rows to callers; the content store converts
    them into immutable records (grammar_drills/services/content_store.py).
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from grammar_drills.db.base import Base


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ===========================================
# Topics & Prompt History
# ===========================================


class Topic(Base):
    """
    A grammar topic that exercises are generated for.

    Attributes:
        id: UUID primary key.
        name: Display name shown in the topic picker.
        prompt: Instructions sent to the LLM to generate exercises. Its hash
            keys the exercise cache, so editing it invalidates cached items.
        created_at: Creation timestamp.
        updated_at: Last edit timestamp.
    """

    __tablename__ = "topics"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200))
    prompt: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now
    )


class PromptVersion(Base):
    """
    Snapshot of a topic prompt, written on every topic create/update.

    Attributes:
        id: UUID primary key.
        topic_id: Owning topic.
        prompt: Prompt text at the time of the snapshot.
        version: Per-topic sequence number starting at 1.
        created_at: Snapshot timestamp.
    """

    __tablename__ = "prompt_versions"
    __table_args__ = (
        UniqueConstraint("topic_id", "version", name="uq_prompt_versions_topic_version"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    topic_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("topics.id", ondelete="CASCADE"), index=True
    )
    prompt: Mapped[str] = mapped_column(Text)
    version: Mapped[int] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )


# ===========================================
# Exercise Cache
# ===========================================


class Exercise(Base):
    """
    A generated exercise.

    The payload is opaque to the server: it is stored as serialized JSON and
    passed through to clients unchanged.

    Attributes:
        id: UUID primary key.
        topic_id: Topic the exercise was generated for.
        prompt_hash: SHA-256 hex digest of the topic prompt at generation time.
        exercise_json: Serialized exercise payload.
        created_at: Generation timestamp.
    """

    __tablename__ = "exercises"
    __table_args__ = (
        Index("ix_exercises_topic_prompt_hash", "topic_id", "prompt_hash"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    topic_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("topics.id", ondelete="CASCADE")
    )
    prompt_hash: Mapped[str] = mapped_column(String(64))
    exercise_json: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )


class UserExerciseView(Base):
    """
    How often and when a user was last served an exercise.

    Attributes:
        id: UUID primary key.
        user_id: External user identifier.
        exercise_id: Served exercise.
        last_viewed: When the exercise was last served to this user.
        repetition_counter: Number of times it has been served to this user.
    """

    __tablename__ = "user_exercise_views"
    __table_args__ = (
        UniqueConstraint("user_id", "exercise_id", name="uq_user_exercise_views_user_exercise"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    exercise_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("exercises.id", ondelete="CASCADE")
    )
    last_viewed: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    repetition_counter: Mapped[int] = mapped_column(Integer, default=0)


# ===========================================
# User Progress
# ===========================================


class UserStats(Base):
    """
    Cumulative practice totals reported by the client.

    Attributes:
        id: UUID primary key.
        user_id: External user identifier (unique).
        total_exercises: Exercises completed.
        total_mistakes: Wrong answers submitted.
        total_hints: Hints requested.
        total_time: Practice time in seconds.
        last_topic_id: Topic the user practised last, restored on next visit.
    """

    __tablename__ = "user_stats"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(255), unique=True)
    total_exercises: Mapped[int] = mapped_column(Integer, default=0)
    total_mistakes: Mapped[int] = mapped_column(Integer, default=0)
    total_hints: Mapped[int] = mapped_column(Integer, default=0)
    total_time: Mapped[int] = mapped_column(Integer, default=0)
    last_topic_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
