"""
Exercise Batch Service

Decides, for a topic and an optional user, which cached exercises to serve
and whether the cache needs to be filled first.

Flow:
    1. Load the topic and hash its current prompt. Only exercises stored
       under that hash are candidates; exercises from older prompts are
       never served again.
    2. Anonymous users get a random sample of the candidates. They never
       trigger generation.
    3. Identified users only get exercises that are due (see srs.py).
    4. If fewer than a full batch is due, generate more and re-filter.
    5. Sample up to a full batch from the due exercises.
    6. Record the serving in the user's view history. Failures here are
       logged and never fail the request.

The service keeps no state between calls. Two concurrent requests for the
same under-filled topic may both generate; the extra exercises simply stay
in the cache.

Usage:
    service = ExerciseBatchService(
        store=ContentStore(db),
        cache_filler=ExerciseCacheFiller(store, content_client, refiner),
    )
    batch = await service.get_exercise_batch(topic_id, user_id=user_id)
"""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from grammar_drills.config import settings
from grammar_drills.services.content_store import ContentStore
from grammar_drills.services.exercises import srs
from grammar_drills.services.exercises.cache_fill import ExerciseCacheFiller
from grammar_drills.services.records import ExerciseRecord
from grammar_drills.utils.hash_utils import calculate_prompt_hash

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ExerciseBatch:
    """
    Exercises served for one request.

    Attributes:
        topic_id: Requested topic
        prompt_hash: Hash of the topic prompt the exercises belong to
        exercises: Served exercises
        generated_count: Exercises generated during this request
        refined_prompt: Refined prompt used for generation, if any
        personalized: Whether due-date filtering was applied
    """

    topic_id: str
    prompt_hash: str
    exercises: list[ExerciseRecord] = field(default_factory=list)
    generated_count: int = 0
    refined_prompt: Optional[str] = None
    personalized: bool = False

    @property
    def payloads(self) -> list[dict[str, Any]]:
        return [exercise.payload for exercise in self.exercises]


class ExerciseBatchService:
    """Serves exercise batches from the cache, filling it when needed."""

    def __init__(
        self,
        store: ContentStore,
        cache_filler: ExerciseCacheFiller,
        batch_size: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the service.

        Args:
            store: Content store for topics, exercises and view history
            cache_filler: Generates and stores new exercises
            batch_size: Exercises per batch (default: settings.EXERCISE_BATCH_SIZE)
            clock: Returns the current UTC time
            rng: Random source for sampling
        """
        self.store = store
        self.cache_filler = cache_filler
        self.batch_size = (
            batch_size if batch_size is not None else settings.EXERCISE_BATCH_SIZE
        )
        self.clock = clock or _utc_now
        self.rng = rng or random.Random()

    async def get_exercise_batch(
        self,
        topic_id: str,
        user_id: Optional[str] = None,
    ) -> ExerciseBatch:
        """
        Get a batch of exercises for a topic.

        Args:
            topic_id: Topic to serve
            user_id: Identified user, None for anonymous requests

        Returns:
            ExerciseBatch with up to batch_size exercises

        Raises:
            NotFoundError: If the topic does not exist
            GenerationError: If the cache had to be filled and generation failed
        """
        topic = await self.store.get_topic(topic_id)
        prompt_hash = calculate_prompt_hash(topic.prompt)
        cached = await self.store.list_exercises(topic.id, prompt_hash)

        if not user_id:
            return ExerciseBatch(
                topic_id=topic.id,
                prompt_hash=prompt_hash,
                exercises=srs.select_batch(cached, self.batch_size, self.rng),
            )

        views = await self.store.get_user_views(user_id)
        now = self.clock()
        eligible = srs.filter_eligible(cached, views, now)

        batch = ExerciseBatch(topic_id=topic.id, prompt_hash=prompt_hash, personalized=True)

        if len(eligible) < self.batch_size:
            logger.info(
                f"Only {len(eligible)} of {len(cached)} cached exercises due for "
                f"user {user_id} on topic {topic.id}, generating more"
            )
            fill = await self.cache_filler.fill(topic, prompt_hash)
            batch.generated_count = len(fill.exercises)
            if fill.refined:
                batch.refined_prompt = fill.prompt
            cached = cached + fill.exercises
            eligible = srs.filter_eligible(cached, views, now)

        batch.exercises = srs.select_batch(eligible, self.batch_size, self.rng)
        await self._record_views(user_id, batch.exercises, views, now)
        return batch

    async def _record_views(
        self,
        user_id: str,
        exercises: list[ExerciseRecord],
        views: dict,
        now: datetime,
    ) -> None:
        if not exercises:
            return
        try:
            await self.store.upsert_views(srs.advance_views(user_id, exercises, views, now))
        except Exception as e:
            logger.warning(
                f"Failed to update view history for user {user_id} "
                f"({len(exercises)} exercises): {e}"
            )
