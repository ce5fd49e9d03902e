"""Singleton state rows: the active session and the autosave preference."""

from typing import cast
from uuid import UUID

from sqlalchemy import Uuid
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel

SINGLETON_ID = 1


class SessionStateDB(SQLModel, table=True):
    """The currently active user, if any. Always row ``SINGLETON_ID``."""

    __tablename__ = cast("declared_attr[str]", "session")

    id: int = Field(default=SINGLETON_ID, primary_key=True)
    user_id: UUID | None = Field(
        default=None,
        sa_column=Column("user_id", Uuid(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
    )


class AutosaveConfigDB(SQLModel, table=True):
    """Stored autosave preference. Always row ``SINGLETON_ID``."""

    __tablename__ = cast("declared_attr[str]", "autosave_config")

    id: int = Field(default=SINGLETON_ID, primary_key=True)
    enabled: bool = Field(default=True, nullable=False)
    interval_seconds: int = Field(default=30, nullable=False)
