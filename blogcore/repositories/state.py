"""Repository for the singleton state rows (active session, autosave config)."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from blogcore.db import SessionMaker, transaction
from blogcore.models.state import SINGLETON_ID, AutosaveConfigDB, SessionStateDB


class StateRepository:
    """Reads and replaces the one-row tables that hold process-wide state."""

    def __init__(self, session_maker: SessionMaker) -> None:
        self._session_maker = session_maker

    async def get_session_user_id(self) -> UUID | None:
        """Return the persisted active user's ID, if a session is open."""
        async with self._session_maker() as session:
            row = await session.get(SessionStateDB, SINGLETON_ID)
            return row.user_id if row else None

    async def set_session_user(
        self,
        user_id: UUID | None,
        session: AsyncSession | None = None,
    ) -> None:
        """
        Persist the active user, or clear it with ``None``.

        Args:
            user_id: User to mark active
            session: Optional open session to join instead of committing
        """
        if session is not None:
            await self._upsert_session(session, user_id)
            return
        async with transaction(self._session_maker) as tx:
            await self._upsert_session(tx, user_id)

    @staticmethod
    async def _upsert_session(session: AsyncSession, user_id: UUID | None) -> None:
        row = await session.get(SessionStateDB, SINGLETON_ID)
        if row is None:
            row = SessionStateDB(id=SINGLETON_ID)
        row.user_id = user_id
        session.add(row)
        await session.flush()

    async def get_autosave_config(self) -> AutosaveConfigDB | None:
        """Return the stored autosave preference, if one was ever saved."""
        async with self._session_maker() as session:
            return await session.get(AutosaveConfigDB, SINGLETON_ID)

    async def save_autosave_config(
        self,
        *,
        enabled: bool,
        interval_seconds: int,
        session: AsyncSession | None = None,
    ) -> AutosaveConfigDB:
        """
        Replace the stored autosave preference.

        Args:
            enabled: Whether autosave runs
            interval_seconds: Seconds between autosave ticks
            session: Optional open session to join instead of committing

        Returns:
            AutosaveConfigDB: Stored row
        """
        if session is not None:
            return await self._upsert_autosave(session, enabled, interval_seconds)
        async with transaction(self._session_maker) as tx:
            return await self._upsert_autosave(tx, enabled, interval_seconds)

    @staticmethod
    async def _upsert_autosave(
        session: AsyncSession,
        enabled: bool,  # noqa: FBT001
        interval_seconds: int,
    ) -> AutosaveConfigDB:
        row = await session.get(AutosaveConfigDB, SINGLETON_ID)
        if row is None:
            row = AutosaveConfigDB(id=SINGLETON_ID)
        row.enabled = enabled
        row.interval_seconds = interval_seconds
        session.add(row)
        await session.flush()
        return row
