"""
Exercise Cache Fill

Generates new exercises for a topic and stores them under the hash of the
topic's current prompt. The stored prompt is hashed even when a refined
prompt was used for generation, so refinement never splits the cache.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from grammar_drills.services.content_store import ContentStore
from grammar_drills.services.exercises.content_client import ExerciseContentClient
from grammar_drills.services.exercises.prompt_refiner import PromptRefiner
from grammar_drills.services.records import ExerciseRecord, TopicRecord
from grammar_drills.utils.hash_utils import short_hash

logger = logging.getLogger(__name__)


@dataclass
class CacheFillResult:
    """
    Outcome of one cache fill.

    Attributes:
        exercises: Exercises that were stored
        requested: Exercises the model returned
        prompt: Prompt that was sent to the model
        refined: Whether `prompt` is a refined rewrite
    """

    exercises: list[ExerciseRecord] = field(default_factory=list)
    requested: int = 0
    prompt: str = ""
    refined: bool = False

    @property
    def skipped(self) -> int:
        return self.requested - len(self.exercises)


class ExerciseCacheFiller:
    """Refine, generate, persist."""

    def __init__(
        self,
        store: ContentStore,
        content_client: ExerciseContentClient,
        refiner: Optional[PromptRefiner] = None,
    ):
        self.store = store
        self.content_client = content_client
        self.refiner = refiner

    async def fill(self, topic: TopicRecord, prompt_hash: str) -> CacheFillResult:
        """
        Generate and store new exercises for a topic.

        Exercises that fail to persist are logged and skipped.

        Args:
            topic: Topic to generate for
            prompt_hash: Hash of the topic's current prompt

        Returns:
            CacheFillResult with the stored exercises

        Raises:
            GenerationError: If the generation call fails as a whole
        """
        start_time = time.perf_counter()

        prompt, refined = topic.prompt, False
        if self.refiner is not None:
            refinement = await self.refiner.refine(topic.prompt)
            prompt, refined = refinement.text, refinement.refined

        payloads = await self.content_client.generate_exercises(prompt)

        result = CacheFillResult(requested=len(payloads), prompt=prompt, refined=refined)
        for payload in payloads:
            try:
                record = await self.store.create_exercise(topic.id, prompt_hash, payload)
            except SQLAlchemyError as e:
                logger.warning(f"Failed to cache exercise for topic {topic.id}: {e}")
                continue
            result.exercises.append(record)

        elapsed_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(
            f"Cache fill for topic '{topic.name}' [{short_hash(prompt_hash)}]: "
            f"stored {len(result.exercises)}/{result.requested} exercises "
            f"in {elapsed_ms}ms (refined={refined})"
        )
        return result
