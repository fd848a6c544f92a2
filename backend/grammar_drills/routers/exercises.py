"""
Exercises API Router

Endpoints:
- POST /api/exercises - Get a batch of exercises for a topic

Anonymous callers get a random sample of the cached exercises. Logged-in
callers get exercises that are due for review, and may trigger generation
when too few are due.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from grammar_drills.dependencies import get_content_store, get_optional_user_id
from grammar_drills.enums import RateLimitType
from grammar_drills.middleware.rate_limit import get_rate_limit, limiter
from grammar_drills.models.exercises import ExerciseBatchRequest, ExerciseBatchResponse
from grammar_drills.services.content_store import ContentStore
from grammar_drills.services.exercises import (
    ExerciseBatchService,
    ExerciseCacheFiller,
    ExerciseContentClient,
    PromptRefiner,
)
from grammar_drills.services.llm import get_llm_client

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/exercises", tags=["exercises"])


# ===========================================
# Dependency Injection
# ===========================================


def get_exercise_content_client() -> ExerciseContentClient:
    """Get the content client for exercise generation."""
    return ExerciseContentClient(get_llm_client())


def get_prompt_refiner() -> PromptRefiner:
    """Get the prompt refiner."""
    return PromptRefiner(get_llm_client())


async def get_exercise_batch_service(
    store: ContentStore = Depends(get_content_store),
    content_client: ExerciseContentClient = Depends(get_exercise_content_client),
    refiner: PromptRefiner = Depends(get_prompt_refiner),
) -> ExerciseBatchService:
    """Get the exercise batch service for this request."""
    return ExerciseBatchService(
        store=store,
        cache_filler=ExerciseCacheFiller(store, content_client, refiner),
    )


# ===========================================
# Endpoints
# ===========================================


@router.post("", response_model=ExerciseBatchResponse)
@limiter.limit(get_rate_limit(RateLimitType.LLM_HEAVY))
async def get_exercises(
    request: Request,
    body: ExerciseBatchRequest,
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: ExerciseBatchService = Depends(get_exercise_batch_service),
):
    """
    Get up to one batch of exercises for a topic.

    Errors:
    - 404 if the topic does not exist
    - 502 if exercises had to be generated and generation failed
    """
    batch = await service.get_exercise_batch(body.topic_id, user_id=user_id)

    if batch.refined_prompt:
        logger.debug(
            f"Generated with refined prompt for topic {batch.topic_id}: {batch.refined_prompt}"
        )

    return ExerciseBatchResponse(
        exercises=batch.payloads,
        count=len(batch.exercises),
        generated_count=batch.generated_count,
        refined_prompt=batch.refined_prompt,
    )
