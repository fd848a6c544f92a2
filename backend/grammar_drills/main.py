"""
Grammar Drills API

FastAPI application serving grammar exercises with per-user review
scheduling and on-demand generation.

Startup:
    1. Configure logging
    2. Create missing tables (use Alembic migrations in production)
    3. Seed the default topics into an empty database

Run:
    uvicorn grammar_drills.main:app --reload --app-dir backend
"""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from grammar_drills.config import settings
from grammar_drills.db.base import async_session_maker, engine, init_db
from grammar_drills.middleware import setup_error_handling, setup_rate_limiting
from grammar_drills.routers import exercises, health, topics, users, versions
from grammar_drills.services.content_store import ContentStore
from grammar_drills.services.topic_seed import load_default_topics, seed_default_topics
from grammar_drills.utils.log_setup import setup_logging

# Provider keys for LiteLLM are read from the process environment
load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.DEBUG)
    logger.info(f"Starting {settings.APP_NAME}")

    await init_db()

    if settings.SEED_DEFAULT_TOPICS:
        async with async_session_maker() as session:
            await seed_default_topics(ContentStore(session), load_default_topics())

    yield

    await engine.dispose()
    logger.info(f"{settings.APP_NAME} stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application with middleware and routers."""
    app = FastAPI(title=f"{settings.APP_NAME} API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_rate_limiting(app, enabled=settings.RATE_LIMIT_ENABLED)
    setup_error_handling(app, debug=settings.DEBUG)

    app.include_router(health.liveness_router)
    app.include_router(health.router)
    app.include_router(exercises.router)
    app.include_router(topics.router)
    app.include_router(versions.router)
    app.include_router(users.router)
    app.include_router(users.auth_router)

    return app


app = create_app()
