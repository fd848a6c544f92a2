"""
Pydantic models for topics and prompt versions.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from grammar_drills.models.base import StrictRequest, StrictResponse


class TopicCreate(StrictRequest):
    """Request body for creating a topic."""

    name: str = Field(..., min_length=1, max_length=200)
    prompt: str = Field(..., min_length=1)


class TopicUpdate(StrictRequest):
    """
    Request body for updating a topic.

    The prompt is always required. An empty or missing name keeps the
    current one.
    """

    name: Optional[str] = Field(None, max_length=200)
    prompt: str = Field(..., min_length=1)


class TopicResponse(StrictResponse):
    """A topic as returned by the API."""

    id: str
    name: str
    prompt: str
    created_at: datetime
    updated_at: datetime


class PromptVersionResponse(StrictResponse):
    """A stored prompt version."""

    id: str
    topic_id: str
    prompt: str
    version: int
    created_at: datetime
