"""
Blog schemas for the Blog Core application.

Request and response models for blog documents. Required-field checks
(``title``, ``slug``, ``author_name``) are deliberately left to the
repository so a save with missing fields is rejected as a whole.
"""

from datetime import datetime
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from blogcore.configs.settings import MAX_SLUG_LENGTH, MAX_TAGS_COUNT, MAX_TITLE_LENGTH
from blogcore.schemas.content import ContentBlock, parse_content
from blogcore.utils.helpers import slugify

type BlogStatus = Literal["draft", "published"]

BlogContent = Annotated[list[ContentBlock], BeforeValidator(parse_content)]

REQUIRED_FIELDS: tuple[str, ...] = ("title", "slug", "author_name")


def unique_tags(value: Any) -> Any:
    """Strip tags and drop blanks and repeats, keeping first-seen order."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple, set, frozenset)):
        return value
    seen: dict[str, None] = {}
    for tag in value:
        if isinstance(tag, str) and (cleaned := tag.strip()):
            seen.setdefault(cleaned, None)
    return list(seen)


class BlogFields(BaseModel):
    """Editable blog fields shared by create and update payloads."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(default=None, max_length=MAX_TITLE_LENGTH)
    slug: str | None = Field(default=None, max_length=MAX_SLUG_LENGTH)
    author_name: str | None = Field(default=None, max_length=100)
    author_image: str | None = None
    cover_image: str | None = None
    sub_title: str | None = Field(default=None, max_length=300)
    tags: list[str] | None = Field(default=None, max_length=MAX_TAGS_COUNT)
    content: BlogContent | None = None
    priority: int | None = None
    status: BlogStatus | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def dedupe_tags(cls, value: Any) -> Any:
        return unique_tags(value)

    @field_validator("title", "slug", "author_name", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class BlogCreate(BlogFields):
    """Blog creation payload; slug is derived from the title when omitted."""

    tags: list[str] | None = Field(default_factory=list, max_length=MAX_TAGS_COUNT)
    content: BlogContent | None = Field(default_factory=list)
    status: BlogStatus | None = "draft"

    @model_validator(mode="after")
    def generate_slug_from_title(self) -> "BlogCreate":
        if not self.slug and self.title:
            self.slug = slugify(self.title) or None
        return self


class BlogUpdate(BlogFields):
    """Partial blog update; only explicitly set fields are applied."""


class BlogResponse(BaseModel):
    """Blog document as returned to callers."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    owner_id: UUID
    author_name: str
    author_image: str | None = None
    slug: str
    cover_image: str | None = None
    title: str
    sub_title: str | None = None
    tags: list[str] = Field(default_factory=list)
    content: BlogContent = Field(default_factory=list)
    priority: int | None = None
    status: BlogStatus
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )
    updated_at: datetime = Field(
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        serialization_alias="updatedAt",
    )


class BlogStats(BaseModel):
    """Dashboard counters for one owner."""

    total: int
    published: int
    drafts: int
    latest: list[BlogResponse]
