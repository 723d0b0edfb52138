"""Database module."""

from edusync.db.database import (
    async_session_maker,
    build_store_url,
    create_session_maker,
    create_store_engine,
    engine,
    get_db,
    init_db,
    session_maker_for,
)

__all__ = [
    "async_session_maker",
    "build_store_url",
    "create_session_maker",
    "create_store_engine",
    "engine",
    "get_db",
    "init_db",
    "session_maker_for",
]
