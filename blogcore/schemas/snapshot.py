"""
Versioned snapshot schemas.

``SnapshotUser``/``SnapshotBlog`` describe records at ``SCHEMA_VERSION``.
Records without a ``schema_version`` are the legacy browser-storage layout
and are migrated before validation (``migrate_blog`` here; legacy users carry
a plaintext password, which the snapshot service hashes).
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator

from blogcore.configs import SCHEMA_VERSION
from blogcore.schemas.blog import BlogContent, BlogStatus, unique_tags
from blogcore.schemas.user import UserRole


class SnapshotUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: UUID
    username: str = Field(min_length=1)
    email: EmailStr
    password_hash: str = Field(
        min_length=1,
        validation_alias=AliasChoices("password_hash", "passwordHash"),
        serialization_alias="passwordHash",
    )
    avatar: str | None = None
    role: UserRole = "user"
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("api_key", "apiKey"),
        serialization_alias="apiKey",
    )
    request_count: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("request_count", "requestCount"),
        serialization_alias="requestCount",
    )
    schema_version: int = Field(
        default=SCHEMA_VERSION,
        validation_alias=AliasChoices("schema_version", "schemaVersion"),
        serialization_alias="schemaVersion",
    )


class SnapshotBlog(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: UUID
    owner_id: UUID
    author_name: str = Field(min_length=1)
    author_image: str | None = None
    slug: str = Field(min_length=1)
    cover_image: str | None = None
    title: str = Field(min_length=1)
    sub_title: str | None = None
    tags: list[str] = Field(default_factory=list)
    content: BlogContent = Field(default_factory=list)
    priority: int | None = None
    status: BlogStatus = "draft"
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )
    updated_at: datetime = Field(
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        serialization_alias="updatedAt",
    )
    schema_version: int = Field(
        default=SCHEMA_VERSION,
        validation_alias=AliasChoices("schema_version", "schemaVersion"),
        serialization_alias="schemaVersion",
    )

    @field_validator("tags", mode="before")
    @classmethod
    def dedupe_tags(cls, value: Any) -> Any:
        return unique_tags(value)

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class SnapshotAutosave(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = True
    interval_seconds: int = Field(
        default=30,
        gt=0,
        validation_alias=AliasChoices("interval_seconds", "intervalSeconds"),
        serialization_alias="intervalSeconds",
    )


class QuarantinedRecord(BaseModel):
    """A record that was left out of an import, with the reason why."""

    collection: str
    index: int
    reason: str
    record: Any


class ImportReport(BaseModel):
    users_imported: int = 0
    blogs_imported: int = 0
    session_restored: bool = False
    autosave_restored: bool = False
    quarantined: list[QuarantinedRecord] = Field(default_factory=list)


def is_legacy(record: dict[str, Any]) -> bool:
    return "schema_version" not in record and "schemaVersion" not in record


def migrate_blog(record: dict[str, Any]) -> dict[str, Any]:
    """Legacy blogs call the owner ``user_id`` and flag publication with a boolean."""
    migrated = dict(record)
    if "owner_id" not in migrated and "user_id" in migrated:
        migrated["owner_id"] = migrated.pop("user_id")
    if "status" not in migrated and "published" in migrated:
        migrated["status"] = "published" if migrated.pop("published") else "draft"
    migrated["schema_version"] = SCHEMA_VERSION
    return migrated
