"""
Prompt Versions API Router

Endpoints:
- GET /api/versions/{topic_id} - List the retained prompt versions of a topic
- POST /api/versions/{topic_id}/restore/{version_id} - Restore a version (admin)
"""

import logging

from fastapi import APIRouter, Depends, Request

from grammar_drills.dependencies import RequireAdmin, get_content_store
from grammar_drills.enums import RateLimitType
from grammar_drills.middleware.rate_limit import get_rate_limit, limiter
from grammar_drills.models.topics import PromptVersionResponse, TopicResponse
from grammar_drills.services.content_store import ContentStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/versions", tags=["versions"])


@router.get("/{topic_id}", response_model=list[PromptVersionResponse])
async def list_versions(topic_id: str, store: ContentStore = Depends(get_content_store)):
    """Prompt versions of a topic, oldest first."""
    await store.get_topic(topic_id)
    return await store.list_versions(topic_id)


@router.post("/{topic_id}/restore/{version_id}", response_model=TopicResponse)
@limiter.limit(get_rate_limit(RateLimitType.ADMIN))
async def restore_version(
    request: Request,
    topic_id: str,
    version_id: str,
    admin_id: str = RequireAdmin,
    store: ContentStore = Depends(get_content_store),
):
    """
    Make an old prompt the current one.

    The restored prompt is appended as a new version.
    """
    topic = await store.restore_version(topic_id, version_id)
    logger.info(f"Topic {topic_id} restored to version {version_id} by {admin_id}")
    return topic
