"""Core application modules."""

from blogcore.db.database import (
    SessionMaker,
    async_session_maker,
    build_engine,
    build_session_maker,
    close_db,
    create_tables,
    engine,
    init_db,
    transaction,
)

__all__ = [
    "SessionMaker",
    "async_session_maker",
    "build_engine",
    "build_session_maker",
    "close_db",
    "create_tables",
    "engine",
    "init_db",
    "transaction",
]
