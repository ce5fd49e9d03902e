"""User repository for database operations."""

from typing import Any, cast
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import ColumnElement

from blogcore.db import SessionMaker, transaction
from blogcore.errors.database import DatabaseError, DuplicateEntryError
from blogcore.models.user import UserDB


def _where(condition: object) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], condition)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository:
    """
    Repository for User database operations.

    Users are never hard-deleted. Every mutating call commits its own
    transaction unless the caller passes an open ``session``, in which case
    the caller owns the commit.
    """

    def __init__(self, session_maker: SessionMaker) -> None:
        """
        Initialize repository with a session factory.

        Args:
            session_maker: Factory for async database sessions
        """
        self._session_maker = session_maker

    async def add(self, db_user: UserDB, session: AsyncSession | None = None) -> UserDB:
        """
        Insert a new user.

        Args:
            db_user: Fully populated user row (password already hashed)
            session: Optional open session to join instead of committing

        Returns:
            UserDB: Inserted user

        Raises:
            DuplicateEntryError: If the email or api key is taken
            DatabaseError: For other integrity errors
        """
        db_user.email = normalize_email(db_user.email)
        if session is not None:
            return await self._insert(session, db_user)
        async with transaction(self._session_maker) as tx:
            return await self._insert(tx, db_user)

    async def _insert(self, session: AsyncSession, db_user: UserDB) -> UserDB:
        existing = await session.execute(
            select(UserDB.id).where(_where(UserDB.email == db_user.email)),
        )
        if existing.first() is not None:
            raise DuplicateEntryError(detail=f"Email '{db_user.email}' already exists")
        try:
            session.add(db_user)
            await session.flush()
        except IntegrityError as e:
            error_msg = str(e.orig) if e.orig else str(e)
            if "email" in error_msg.lower():
                raise DuplicateEntryError(
                    detail=f"Email '{db_user.email}' already exists",
                ) from e
            if "api_key" in error_msg.lower():
                raise DuplicateEntryError(detail="API key already assigned") from e
            raise DatabaseError(detail=f"Database integrity error: {error_msg}") from e
        return db_user

    async def get_by_id(self, user_id: UUID) -> UserDB | None:
        """
        Get user by ID.

        Args:
            user_id: User UUID

        Returns:
            UserDB | None: User if found, None otherwise
        """
        async with self._session_maker() as session:
            return await session.get(UserDB, user_id)

    async def get_by_email(self, email: str) -> UserDB | None:
        """
        Get user by email, case-insensitively.

        Args:
            email: Email to search for

        Returns:
            UserDB | None: User if found, None otherwise
        """
        async with self._session_maker() as session:
            result = await session.execute(
                select(UserDB).where(_where(UserDB.email == normalize_email(email))),
            )
            return result.scalar_one_or_none()

    async def get_by_api_key(self, api_key: str) -> UserDB | None:
        """
        Get the user holding an exact API key.

        Args:
            api_key: Key to match

        Returns:
            UserDB | None: Key holder if any
        """
        async with self._session_maker() as session:
            result = await session.execute(
                select(UserDB).where(_where(UserDB.api_key == api_key)),
            )
            return result.scalar_one_or_none()

    async def get_all(self) -> list[UserDB]:
        """Get every user, oldest first."""
        async with self._session_maker() as session:
            result = await session.execute(select(UserDB).order_by(UserDB.created_at))
            return list(result.scalars().all())

    async def count(self, session: AsyncSession | None = None) -> int:
        """Count users, optionally inside the caller's transaction."""
        stmt = select(func.count()).select_from(UserDB)
        if session is not None:
            return await session.scalar(stmt) or 0
        async with self._session_maker() as own:
            return await own.scalar(stmt) or 0

    async def update_fields(self, user_id: UUID, **changes: Any) -> UserDB | None:
        """
        Set columns on a user.

        Args:
            user_id: User UUID
            **changes: Column names and their new values

        Returns:
            UserDB | None: Updated user, None if not found

        Raises:
            DuplicateEntryError: If a unique column collides
        """
        async with transaction(self._session_maker) as session:
            db_user = await session.get(UserDB, user_id)
            if db_user is None:
                return None
            for key, value in changes.items():
                setattr(db_user, key, value)
            session.add(db_user)
            try:
                await session.flush()
            except IntegrityError as e:
                raise DuplicateEntryError(detail="Value already in use") from e
            return db_user

    async def increment_request_count(self, user_id: UUID) -> int | None:
        """
        Atomically add one to a user's request counter.

        Args:
            user_id: User UUID

        Returns:
            int | None: New counter value, None if the user is gone
        """
        async with transaction(self._session_maker) as session:
            result = await session.execute(
                update(UserDB)
                .where(_where(UserDB.id == user_id))
                .values(request_count=UserDB.request_count + 1)
                .returning(UserDB.request_count),
            )
            return result.scalar_one_or_none()
