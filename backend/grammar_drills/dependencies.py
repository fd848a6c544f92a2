"""
FastAPI Dependencies

Common dependencies for user identity, admin authorization and the content
store.

User identity is taken from the user id cookie set by the login flow. The
admin capability is provided by AdminAuthorizer, which handlers receive via
Depends(require_admin) and tests replace via app.dependency_overrides.
"""

from collections.abc import Iterable
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from grammar_drills.config import settings
from grammar_drills.db.base import get_db
from grammar_drills.middleware.error_handling import AuthorizationError
from grammar_drills.services.content_store import ContentStore


async def get_optional_user_id(request: Request) -> Optional[str]:
    """User id from the identity cookie, None for anonymous requests."""
    user_id = request.cookies.get(settings.USER_COOKIE_NAME, "").strip()
    return user_id or None


async def require_user_id(
    user_id: Optional[str] = Depends(get_optional_user_id),
) -> str:
    """
    Require an identified user.

    Raises:
        HTTPException: 401 if no user id cookie is present
    """
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not logged in",
        )
    return user_id


class AdminAuthorizer:
    """
    Decides whether a user holds the admin role.

    Admins are configured by user id (settings.ADMIN_USER_IDS).
    """

    def __init__(self, admin_user_ids: Iterable[str]):
        self.admin_user_ids = frozenset(uid for uid in admin_user_ids if uid)

    @property
    def configured(self) -> bool:
        return bool(self.admin_user_ids)

    def is_admin(self, user_id: Optional[str]) -> bool:
        return bool(user_id) and user_id in self.admin_user_ids


def get_admin_authorizer() -> AdminAuthorizer:
    """Authorizer built from settings."""
    return AdminAuthorizer(settings.ADMIN_USER_IDS)


async def require_admin(
    user_id: Optional[str] = Depends(get_optional_user_id),
    authorizer: AdminAuthorizer = Depends(get_admin_authorizer),
) -> str:
    """
    Require the admin capability.

    Returns:
        str: The admin's user id

    Raises:
        AuthorizationError: 403 if admin features are not configured or the
            user is not an admin
        HTTPException: 401 if no user is logged in
    """
    if not authorizer.configured:
        raise AuthorizationError("Admin features are not configured")

    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not logged in",
        )

    if not authorizer.is_admin(user_id):
        raise AuthorizationError("Admin access required")

    return user_id


async def get_content_store(db: AsyncSession = Depends(get_db)) -> ContentStore:
    """Content store bound to the request's database session."""
    return ContentStore(db)


# Dependencies that can be used in routers
RequireAdmin = Depends(require_admin)
RequireUser = Depends(require_user_id)
