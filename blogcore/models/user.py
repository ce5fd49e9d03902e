"""User database model using SQLModel."""

from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from blogcore.configs import SCHEMA_VERSION
from blogcore.db.types import UTCDateTime
from blogcore.utils.helpers import utc_now


class UserDB(SQLModel, table=True):
    """
    User database model.

    Owned by the Identity Store. Users are never hard-deleted; they are
    mutated by role toggles, api key (re)generation and request counting.
    """

    __tablename__ = cast("declared_attr[str]", "users")

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="User ID",
    )

    username: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Display username",
    )
    email: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True),
        description="Email address (unique)",
    )
    password_hash: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Hashed password",
    )
    avatar: str | None = Field(
        default=None,
        sa_column=Column(String(500)),
        description="Avatar image URL",
    )

    role: str = Field(
        default="user",
        sa_column=Column(String(20), nullable=False, server_default="user", index=True),
        description="User role (admin, user)",
    )

    api_key: str | None = Field(
        default=None,
        sa_column=Column(String(64), unique=True, nullable=True, index=True),
        description="Public feed API key (one per user)",
    )
    request_count: int = Field(
        default=0,
        nullable=False,
        description="Number of accepted public feed requests",
    )

    schema_version: int = Field(default=SCHEMA_VERSION, nullable=False)
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UTCDateTime(), nullable=False),
        description="Creation timestamp",
    )
