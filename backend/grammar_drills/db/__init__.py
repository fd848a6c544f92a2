"""Database package."""

from grammar_drills.db.base import (
    Base,
    async_session_maker,
    create_engine_for_url,
    engine,
    get_db,
    init_db,
)

__all__ = [
    "engine",
    "async_session_maker",
    "Base",
    "create_engine_for_url",
    "get_db",
    "init_db",
]
