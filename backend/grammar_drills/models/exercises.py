"""
Pydantic models for exercise delivery.

Exercise payloads are opaque JSON objects produced by the LLM and are
passed through without a schema.
"""

from typing import Any, Optional

from pydantic import Field

from grammar_drills.models.base import StrictRequest, StrictResponse


class ExerciseBatchRequest(StrictRequest):
    """Request body for fetching a batch of exercises."""

    topic_id: str = Field(..., min_length=1)


class ExerciseBatchResponse(StrictResponse):
    """
    A batch of exercises for one topic.

    refined_prompt is set when exercises were generated from a refined
    rewrite of the topic prompt during this request.
    """

    exercises: list[dict[str, Any]]
    count: int
    generated_count: int = 0
    refined_prompt: Optional[str] = None
