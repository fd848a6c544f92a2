"""
Topics API Router

Endpoints:
- GET /api/topics - List topics
- GET /api/topics/{id} - Get a topic
- POST /api/topics - Create a topic (admin)
- PUT /api/topics/{id} - Update a topic, appending a prompt version (admin)
- DELETE /api/topics/{id} - Delete a topic and its exercises (admin)
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from grammar_drills.dependencies import RequireAdmin, get_content_store
from grammar_drills.enums import RateLimitType
from grammar_drills.middleware.rate_limit import get_rate_limit, limiter
from grammar_drills.models.topics import TopicCreate, TopicResponse, TopicUpdate
from grammar_drills.services.content_store import ContentStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/topics", tags=["topics"])


@router.get("", response_model=list[TopicResponse])
async def list_topics(store: ContentStore = Depends(get_content_store)):
    """List all topics, oldest first."""
    return await store.list_topics()


@router.get("/{topic_id}", response_model=TopicResponse)
async def get_topic(topic_id: str, store: ContentStore = Depends(get_content_store)):
    return await store.get_topic(topic_id)


@router.post("", response_model=TopicResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(get_rate_limit(RateLimitType.ADMIN))
async def create_topic(
    request: Request,
    body: TopicCreate,
    admin_id: str = RequireAdmin,
    store: ContentStore = Depends(get_content_store),
):
    """Create a topic. Its prompt becomes version 1."""
    topic = await store.create_topic(body.name, body.prompt)
    logger.info(f"Topic {topic.id} created by {admin_id}")
    return topic


@router.put("/{topic_id}", response_model=TopicResponse)
@limiter.limit(get_rate_limit(RateLimitType.ADMIN))
async def update_topic(
    request: Request,
    topic_id: str,
    body: TopicUpdate,
    admin_id: str = RequireAdmin,
    store: ContentStore = Depends(get_content_store),
):
    """
    Update a topic.

    Every update appends a prompt version. Changing the prompt also retires
    the exercises cached for the previous prompt.
    """
    topic = await store.update_topic(topic_id, prompt=body.prompt, name=body.name)
    logger.info(f"Topic {topic_id} updated by {admin_id}")
    return topic


@router.delete("/{topic_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(get_rate_limit(RateLimitType.ADMIN))
async def delete_topic(
    request: Request,
    topic_id: str,
    admin_id: str = RequireAdmin,
    store: ContentStore = Depends(get_content_store),
):
    await store.delete_topic(topic_id)
    logger.info(f"Topic {topic_id} deleted by {admin_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
