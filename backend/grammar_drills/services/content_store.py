"""
Content Store

Durable storage for topics, prompt versions, cached exercises, per-user view
history and user stats. All reads return immutable records
(grammar_drills/services/records.py); every write operation commits its own
transaction and rolls back on failure.

Usage:
    from grammar_drills.services.content_store import ContentStore

    store = ContentStore(db)

    topic = await store.get_topic(topic_id)
    exercises = await store.list_exercises(topic.id, prompt_hash)
    views = await store.get_user_views(user_id)
"""

import json
import logging
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from grammar_drills.config import settings
from grammar_drills.db.models import (
    Exercise,
    PromptVersion,
    Topic,
    UserExerciseView,
    UserStats,
)
from grammar_drills.middleware.error_handling import NotFoundError, ValidationError
from grammar_drills.services.records import (
    ExerciseRecord,
    PromptVersionRecord,
    TopicRecord,
    UserStatsRecord,
    ViewRecord,
)

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite drops the offset)."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _topic_record(row: Topic) -> TopicRecord:
    return TopicRecord(
        id=row.id,
        name=row.name,
        prompt=row.prompt,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def _version_record(row: PromptVersion) -> PromptVersionRecord:
    return PromptVersionRecord(
        id=row.id,
        topic_id=row.topic_id,
        prompt=row.prompt,
        version=row.version,
        created_at=as_utc(row.created_at),
    )


def _view_record(row: UserExerciseView) -> ViewRecord:
    return ViewRecord(
        id=row.id,
        user_id=row.user_id,
        exercise_id=row.exercise_id,
        last_viewed=as_utc(row.last_viewed),
        repetition_counter=row.repetition_counter,
    )


def _stats_record(row: UserStats) -> UserStatsRecord:
    return UserStatsRecord(
        user_id=row.user_id,
        total_exercises=row.total_exercises or 0,
        total_mistakes=row.total_mistakes or 0,
        total_hints=row.total_hints or 0,
        total_time=row.total_time or 0,
        last_topic_id=row.last_topic_id,
    )


class ContentStore:
    """
    Repository over a single AsyncSession.

    Topic edits are serialized per topic: the topic row is locked (SELECT ...
    FOR UPDATE) before the next version number is computed, and the new
    version, pruning of old versions and the topic update commit together.
    """

    def __init__(self, db: AsyncSession, version_retention: Optional[int] = None):
        """
        Initialize the store.

        Args:
            db: Async database session
            version_retention: Prompt versions kept per topic
                (default: settings.PROMPT_VERSION_RETENTION)
        """
        self.db = db
        self.version_retention = (
            version_retention
            if version_retention is not None
            else settings.PROMPT_VERSION_RETENTION
        )

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------

    async def list_topics(self) -> list[TopicRecord]:
        result = await self.db.execute(
            select(Topic).order_by(Topic.created_at, Topic.name)
        )
        return [_topic_record(row) for row in result.scalars().all()]

    async def count_topics(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Topic))
        return result.scalar_one()

    async def get_topic(self, topic_id: str) -> TopicRecord:
        """
        Get a topic by id.

        Raises:
            NotFoundError: If the topic does not exist
        """
        row = await self.db.get(Topic, topic_id)
        if row is None:
            raise NotFoundError(f"Topic not found: {topic_id}")
        return _topic_record(row)

    async def create_topic(self, name: str, prompt: str) -> TopicRecord:
        """Create a topic together with its first prompt version."""
        now = _utc_now()
        row = Topic(
            id=str(uuid.uuid4()),
            name=name,
            prompt=prompt,
            created_at=now,
            updated_at=now,
        )
        record = _topic_record(row)
        try:
            # Topic row must exist before its versions (no ORM relationship)
            self.db.add(row)
            await self.db.flush()
            self.db.add(
                PromptVersion(
                    id=str(uuid.uuid4()),
                    topic_id=row.id,
                    prompt=prompt,
                    version=1,
                    created_at=now,
                )
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Created topic '{name}' ({row.id})")
        return record

    async def update_topic(
        self,
        topic_id: str,
        prompt: str,
        name: Optional[str] = None,
    ) -> TopicRecord:
        """
        Update a topic and append a new prompt version.

        Version numbering continues from the highest stored version, and
        versions beyond the retention window are deleted oldest first. All of
        it commits as one transaction.

        Args:
            topic_id: Topic to update
            prompt: New prompt text
            name: New display name; empty keeps the current name

        Raises:
            NotFoundError: If the topic does not exist
        """
        try:
            result = await self.db.execute(
                select(Topic).where(Topic.id == topic_id).with_for_update()
            )
            row = result.scalar_one_or_none()
            if row is None:
                raise NotFoundError(f"Topic not found: {topic_id}")

            last_version = await self.db.scalar(
                select(func.max(PromptVersion.version)).where(
                    PromptVersion.topic_id == topic_id
                )
            )
            next_version = (last_version or 0) + 1
            now = _utc_now()

            self.db.add(
                PromptVersion(
                    id=str(uuid.uuid4()),
                    topic_id=topic_id,
                    prompt=prompt,
                    version=next_version,
                    created_at=now,
                )
            )
            await self.db.flush()
            pruned = await self._prune_versions(topic_id)

            if name:
                row.name = name
            row.prompt = prompt
            row.updated_at = now
            record = _topic_record(row)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            f"Updated topic {topic_id} to prompt version {next_version}"
            + (f" (pruned {pruned} old versions)" if pruned else "")
        )
        return record

    async def _prune_versions(self, topic_id: str) -> int:
        result = await self.db.execute(
            select(PromptVersion.id)
            .where(PromptVersion.topic_id == topic_id)
            .order_by(PromptVersion.version.desc())
            .offset(self.version_retention)
        )
        stale_ids = list(result.scalars().all())
        if stale_ids:
            await self.db.execute(
                delete(PromptVersion).where(PromptVersion.id.in_(stale_ids))
            )
        return len(stale_ids)

    async def delete_topic(self, topic_id: str) -> None:
        """
        Delete a topic with its versions, exercises and their view history.

        Raises:
            NotFoundError: If the topic does not exist
        """
        row = await self.db.get(Topic, topic_id)
        if row is None:
            raise NotFoundError(f"Topic not found: {topic_id}")

        exercise_ids = select(Exercise.id).where(Exercise.topic_id == topic_id)
        try:
            await self.db.execute(
                delete(UserExerciseView).where(
                    UserExerciseView.exercise_id.in_(exercise_ids)
                )
            )
            await self.db.execute(delete(Exercise).where(Exercise.topic_id == topic_id))
            await self.db.execute(
                delete(PromptVersion).where(PromptVersion.topic_id == topic_id)
            )
            await self.db.delete(row)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Deleted topic {topic_id}")

    # ------------------------------------------------------------------
    # Prompt versions
    # ------------------------------------------------------------------

    async def list_versions(self, topic_id: str) -> list[PromptVersionRecord]:
        """Prompt versions of a topic, oldest first."""
        result = await self.db.execute(
            select(PromptVersion)
            .where(PromptVersion.topic_id == topic_id)
            .order_by(PromptVersion.version)
        )
        return [_version_record(row) for row in result.scalars().all()]

    async def get_version(self, version_id: str) -> PromptVersionRecord:
        row = await self.db.get(PromptVersion, version_id)
        if row is None:
            raise NotFoundError(f"Prompt version not found: {version_id}")
        return _version_record(row)

    async def restore_version(self, topic_id: str, version_id: str) -> TopicRecord:
        """
        Make an old prompt version current again.

        Restoring appends a new version carrying the old prompt; history is
        never rewritten.

        Raises:
            NotFoundError: If the version or topic does not exist
            ValidationError: If the version belongs to another topic
        """
        version = await self.get_version(version_id)
        if version.topic_id != topic_id:
            raise ValidationError(
                f"Prompt version {version_id} does not belong to topic {topic_id}"
            )
        return await self.update_topic(topic_id, prompt=version.prompt)

    # ------------------------------------------------------------------
    # Exercises
    # ------------------------------------------------------------------

    async def create_exercise(
        self,
        topic_id: str,
        prompt_hash: str,
        payload: dict[str, Any],
    ) -> ExerciseRecord:
        """
        Store one generated exercise.

        Commits immediately so a failure only loses this exercise.
        """
        row = Exercise(
            id=str(uuid.uuid4()),
            topic_id=topic_id,
            prompt_hash=prompt_hash,
            exercise_json=json.dumps(payload, ensure_ascii=False),
            created_at=_utc_now(),
        )
        self.db.add(row)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return ExerciseRecord(
            id=row.id,
            topic_id=topic_id,
            prompt_hash=prompt_hash,
            payload=payload,
            created_at=as_utc(row.created_at),
        )

    async def list_exercises(self, topic_id: str, prompt_hash: str) -> list[ExerciseRecord]:
        """All cached exercises of a topic generated from the given prompt hash."""
        result = await self.db.execute(
            select(Exercise)
            .where(Exercise.topic_id == topic_id, Exercise.prompt_hash == prompt_hash)
            .order_by(Exercise.created_at)
        )

        records = []
        for row in result.scalars().all():
            try:
                payload = json.loads(row.exercise_json)
            except json.JSONDecodeError:
                logger.warning(f"Skipping exercise {row.id} with unreadable payload")
                continue
            records.append(
                ExerciseRecord(
                    id=row.id,
                    topic_id=row.topic_id,
                    prompt_hash=row.prompt_hash,
                    payload=payload,
                    created_at=as_utc(row.created_at),
                )
            )
        return records

    # ------------------------------------------------------------------
    # View history
    # ------------------------------------------------------------------

    async def get_user_views(self, user_id: str) -> dict[str, ViewRecord]:
        """All view records of a user, keyed by exercise id."""
        result = await self.db.execute(
            select(UserExerciseView).where(UserExerciseView.user_id == user_id)
        )
        return {row.exercise_id: _view_record(row) for row in result.scalars().all()}

    async def upsert_views(self, views: Sequence[ViewRecord]) -> None:
        """
        Insert or update view records keyed on (user_id, exercise_id).

        All records are written in one transaction.
        """
        if not views:
            return

        user_ids = {view.user_id for view in views}
        exercise_ids = {view.exercise_id for view in views}
        result = await self.db.execute(
            select(UserExerciseView).where(
                UserExerciseView.user_id.in_(user_ids),
                UserExerciseView.exercise_id.in_(exercise_ids),
            )
        )
        existing = {(row.user_id, row.exercise_id): row for row in result.scalars().all()}

        for view in views:
            row = existing.get((view.user_id, view.exercise_id))
            if row is None:
                self.db.add(
                    UserExerciseView(
                        id=view.id or str(uuid.uuid4()),
                        user_id=view.user_id,
                        exercise_id=view.exercise_id,
                        last_viewed=view.last_viewed,
                        repetition_counter=view.repetition_counter,
                    )
                )
            else:
                row.last_viewed = view.last_viewed
                row.repetition_counter = view.repetition_counter

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    # ------------------------------------------------------------------
    # User stats
    # ------------------------------------------------------------------

    async def _get_stats_row(self, user_id: str) -> Optional[UserStats]:
        result = await self.db.execute(
            select(UserStats).where(UserStats.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_user_stats(self, user_id: str) -> UserStatsRecord:
        """Stats of a user; zeroed when nothing was recorded yet."""
        row = await self._get_stats_row(user_id)
        if row is None:
            return UserStatsRecord(user_id=user_id)
        return _stats_record(row)

    async def update_user_stats(
        self,
        user_id: str,
        total_exercises: int,
        total_mistakes: int,
        total_hints: int,
        total_time: int,
    ) -> UserStatsRecord:
        """Replace the stored totals of a user."""
        row = await self._get_stats_row(user_id)
        if row is None:
            row = UserStats(id=str(uuid.uuid4()), user_id=user_id)
            self.db.add(row)

        row.total_exercises = total_exercises
        row.total_mistakes = total_mistakes
        row.total_hints = total_hints
        row.total_time = total_time
        record = _stats_record(row)

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return record

    async def update_user_settings(
        self, user_id: str, last_topic_id: Optional[str]
    ) -> UserStatsRecord:
        """Remember the topic a user practised last."""
        row = await self._get_stats_row(user_id)
        if row is None:
            row = UserStats(
                id=str(uuid.uuid4()),
                user_id=user_id,
                total_exercises=0,
                total_mistakes=0,
                total_hints=0,
                total_time=0,
            )
            self.db.add(row)

        row.last_topic_id = last_topic_id
        record = _stats_record(row)

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return record
