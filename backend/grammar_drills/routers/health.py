"""
Health Check Endpoints

Provides health check endpoints for monitoring and orchestration.

Endpoints:
- GET /health - Plain-text liveness check
- GET /api/health - Basic health check
- GET /api/health/ready - Readiness probe (database connectivity)
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from grammar_drills.config import settings
from grammar_drills.db.base import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])
liveness_router = APIRouter(tags=["health"])


@liveness_router.get("/health", response_class=PlainTextResponse)
async def liveness():
    return "OK"


@router.get("")
async def health_check():
    """
    Basic health check.

    Returns a simple status response indicating the API is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
    }


@router.get("/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """
    Readiness probe for orchestration systems.

    Reports ready only if the database answers.
    """
    try:
        await db.execute(text("SELECT 1"))
        return {"ready": True}
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        return {"ready": False, "error": str(e)}
