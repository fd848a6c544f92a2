"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across the test suite.

Test environment variables are set at import time, before any
grammar_drills module is imported, because settings and the database engine
are created on import.
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

# Add the backend directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Use litellm's bundled model cost map instead of a network fetch at import
# time (the fetch can deadlock litellm's import when offline)
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

# Forcefully set test environment variables (override .env values)
os.environ.update(
    {
        "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
        "DEBUG": "false",
        "RATE_LIMIT_ENABLED": "false",
        "SEED_DEFAULT_TOPICS": "false",
        "PROMPT_REFINEMENT_ENABLED": "false",
        "ADMIN_USER_IDS": "[]",
        "OPENAI_API_KEY": "test-api-key",
    }
)

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402

from grammar_drills.db.base import create_engine_for_url, init_db  # noqa: E402
from grammar_drills.services.content_store import ContentStore  # noqa: E402


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory SQLite database with all tables created."""
    engine = create_engine_for_url("sqlite+aiosqlite:///:memory:")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine: AsyncEngine) -> async_sessionmaker:
    """Session factory bound to the test database."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def store(db_session: AsyncSession) -> ContentStore:
    """Content store over the test session."""
    return ContentStore(db_session, version_retention=10)


# ============================================================================
# Time & LLM Fixtures
# ============================================================================


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_llm_client() -> MagicMock:
    """
    Create a mock LLM client.

    complete() returns (content, usage) like LLMClient.complete().
    """
    client = MagicMock()
    client.complete = AsyncMock(return_value=({"exercises": []}, MagicMock()))
    return client
