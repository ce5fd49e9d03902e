"""Blog database model using SQLModel."""

from datetime import datetime
from typing import Any, cast
from uuid import UUID, uuid4

from sqlalchemy import JSON, Index, Uuid
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String

from blogcore.configs import SCHEMA_VERSION
from blogcore.db.types import UTCDateTime
from blogcore.utils.helpers import utc_now


class BlogDB(SQLModel, table=True):
    """
    Blog database model.

    ``owner_id`` is fixed at creation; every owner-scoped query filters on
    it. ``content`` holds the serialized content blocks in document order.
    """

    __tablename__ = cast("declared_attr[str]", "blogs")

    __table_args__ = (
        Index("ix_blogs_owner_updated", "owner_id", "updated_at"),
        Index("ix_blogs_status", "status"),
    )

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Blog ID",
    )

    owner_id: UUID = Field(
        sa_column=Column(
            "owner_id",
            Uuid(),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Owner ID (foreign key to users.id)",
    )

    # Required fields
    author_name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Author display name",
    )
    title: str = Field(
        sa_column=Column(String(200), nullable=False),
        description="Blog title",
    )
    slug: str = Field(
        sa_column=Column(String(200), nullable=False, index=True),
        description="URL-friendly slug",
    )
    status: str = Field(
        default="draft",
        sa_column=Column(String(20), nullable=False),
        description="Blog status (draft, published)",
    )

    # Optional fields
    author_image: str | None = Field(default=None, sa_column=Column(String(500)))
    cover_image: str | None = Field(default=None, sa_column=Column(String(500)))
    sub_title: str | None = Field(default=None, sa_column=Column(String(300)))
    priority: int | None = Field(default=None)

    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Blog tags (unique, insertion ordered)",
    )
    content: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Serialized content blocks",
    )

    schema_version: int = Field(default=SCHEMA_VERSION, nullable=False)

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UTCDateTime(), nullable=False),
        description="Creation timestamp",
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UTCDateTime(), nullable=False, index=True),
        description="Last update timestamp",
    )
