"""Database engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import getLogger
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from blogcore.configs import pool_kwargs, settings
from blogcore.errors.base import BaseAppError
from blogcore.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))

type SessionMaker = async_sessionmaker[SQLModelAsyncSession]


def _configure_engine_events(engine: AsyncEngine) -> None:
    """Configure connection pool events for monitoring."""

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("New database connection established")

    @event.listens_for(engine.sync_engine, "checkout")
    def on_checkout(
        dbapi_connection: object,
        connection_record: object,
        connection_proxy: object,
    ) -> None:
        logger.debug("Connection checked out from pool")


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ships with foreign keys off; turn them on for every new connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection: Any, connection_record: object) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine with pooling suited to the database URL.

    Args:
        database_url: SQLAlchemy database URL
        echo: Whether to log emitted SQL

    Returns:
        AsyncEngine: Configured engine
    """
    engine = create_async_engine(database_url, echo=echo, **pool_kwargs(database_url))
    if engine.dialect.name == "sqlite":
        _enable_sqlite_foreign_keys(engine)
    if settings.DEBUG:
        _configure_engine_events(engine)
    return engine


def build_session_maker(engine: AsyncEngine) -> SessionMaker:
    """Create the session factory used by every repository."""
    return async_sessionmaker(
        engine,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine: AsyncEngine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

async_session_maker: SessionMaker = build_session_maker(engine)


@asynccontextmanager
async def transaction(
    session_maker: SessionMaker = async_session_maker,
) -> AsyncGenerator[AsyncSession]:
    """
    Context manager for explicit transaction management.

    Every repository mutation runs inside one of these, so the whole change
    is committed before the caller regains control, or not at all.

    Args:
        session_maker: Session factory to open the session from

    Yields:
        AsyncSession: Database session within a transaction

    Example:
        ```python
        async with transaction() as session:
            session.add(UserDB(username="test", ...))
            # Commits on successful exit, rolls back on exception
        ```
    """
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except BaseAppError:
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            logger.exception("Transaction error")
            raise


async def create_tables(target: AsyncEngine = engine) -> None:
    """Create every table registered on the SQLModel metadata."""
    async with target.begin() as conn:
        # Import all models to ensure they are registered
        from blogcore.models import (  # noqa: F401, PLC0415
            AutosaveConfigDB,
            BlogDB,
            SessionStateDB,
            UserDB,
        )

        await conn.run_sync(SQLModel.metadata.create_all)


async def init_db() -> None:
    """
    Initialize database tables.

    This function should be called on application startup.
    """
    await create_tables(engine)
    logger.info("Database initialized successfully!")


async def close_db() -> None:
    """
    Close database connections.

    This function should be called on application shutdown
    to properly close all database connections.
    """
    await engine.dispose()
    logger.info("Database connections closed")
