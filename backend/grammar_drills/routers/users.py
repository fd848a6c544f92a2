"""
User API Router

Endpoints:
- GET /api/user/stats - Practice totals of the current user
- POST /api/user/stats - Store practice totals
- POST /api/user/settings - Store preferences (last practised topic)
- GET /api/auth/status - Whether the request carries a user identity
- GET /api/auth/is_admin - Whether the current user is an admin
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from grammar_drills.dependencies import (
    AdminAuthorizer,
    RequireUser,
    get_admin_authorizer,
    get_content_store,
    get_optional_user_id,
)
from grammar_drills.enums import RateLimitType
from grammar_drills.middleware.rate_limit import get_rate_limit, limiter
from grammar_drills.models.users import (
    AdminStatusResponse,
    AuthStatusResponse,
    UserSettingsUpdate,
    UserStatsResponse,
    UserStatsUpdate,
)
from grammar_drills.services.content_store import ContentStore

router = APIRouter(prefix="/api/user", tags=["user"])
auth_router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/stats", response_model=UserStatsResponse)
async def get_user_stats(
    user_id: str = RequireUser,
    store: ContentStore = Depends(get_content_store),
):
    return await store.get_user_stats(user_id)


@router.post("/stats", response_model=UserStatsResponse)
async def update_user_stats(
    body: UserStatsUpdate,
    user_id: str = RequireUser,
    store: ContentStore = Depends(get_content_store),
):
    """Replace the stored totals with the client's cumulative values."""
    return await store.update_user_stats(
        user_id,
        total_exercises=body.total_exercises,
        total_mistakes=body.total_mistakes,
        total_hints=body.total_hints,
        total_time=body.total_time,
    )


@router.post("/settings", response_model=UserStatsResponse)
async def update_user_settings(
    body: UserSettingsUpdate,
    user_id: str = RequireUser,
    store: ContentStore = Depends(get_content_store),
):
    return await store.update_user_settings(user_id, body.last_topic_id)


@auth_router.get("/status", response_model=AuthStatusResponse, response_model_exclude_none=True)
@limiter.limit(get_rate_limit(RateLimitType.AUTH))
async def auth_status(
    request: Request,
    user_id: Optional[str] = Depends(get_optional_user_id),
):
    return AuthStatusResponse(logged_in=user_id is not None, user_id=user_id)


@auth_router.get("/is_admin", response_model=AdminStatusResponse)
@limiter.limit(get_rate_limit(RateLimitType.AUTH))
async def is_admin(
    request: Request,
    user_id: Optional[str] = Depends(get_optional_user_id),
    authorizer: AdminAuthorizer = Depends(get_admin_authorizer),
):
    return AdminStatusResponse(is_admin=authorizer.is_admin(user_id))
