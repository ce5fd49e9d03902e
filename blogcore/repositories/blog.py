"""Blog repository for database operations."""

from collections.abc import Mapping
from logging import getLogger
from typing import Any, cast
from uuid import UUID

from sqlalchemy import desc, func, select
from sqlalchemy.sql.expression import ColumnElement

from blogcore.configs import LATEST_BLOGS_COUNT
from blogcore.db import SessionMaker, transaction
from blogcore.errors import PreconditionError, ValidationError
from blogcore.models import BlogDB, UserDB
from blogcore.schemas.blog import REQUIRED_FIELDS, BlogCreate, BlogUpdate
from blogcore.schemas.content import dump_content
from blogcore.utils.helpers import file_logger, utc_now

logger = file_logger(getLogger(__name__))

FIELD_LABELS = {"title": "Title", "slug": "Slug", "author_name": "Author name"}


def ensure_required_fields(values: Mapping[str, Any]) -> None:
    """
    Reject a save that lacks any required field.

    Args:
        values: Field values as they would be persisted

    Raises:
        ValidationError: Naming the first missing field in ``detail`` and
            every missing field in ``errors``
    """
    missing = [name for name in REQUIRED_FIELDS if not values.get(name)]
    if missing:
        raise ValidationError(
            detail=f"{FIELD_LABELS[missing[0]]} is required",
            errors=[{"field": name, "message": "Field required"} for name in missing],
        )


def _where(*conditions: object) -> list[ColumnElement[bool]]:
    return [cast(ColumnElement[bool], condition) for condition in conditions]


class BlogRepository:
    """
    Repository for Blog database operations.

    Every read and write is scoped by ``(id, owner_id)`` except
    ``list_published``, which feeds the public gateway and deliberately
    spans all owners. Each mutating call commits its own transaction
    before returning.
    """

    def __init__(self, session_maker: SessionMaker) -> None:
        """
        Initialize repository with a session factory.

        Args:
            session_maker: Factory for async database sessions
        """
        self._session_maker = session_maker

    async def create(self, owner_id: UUID | None, fields: BlogCreate) -> BlogDB:
        """
        Create a new blog owned by ``owner_id``.

        Args:
            owner_id: Active owner's user ID
            fields: Blog creation payload

        Returns:
            BlogDB: Created blog with ``created_at == updated_at``

        Raises:
            PreconditionError: If there is no owner or the owner does not exist
            ValidationError: If title, slug or author name is missing
        """
        if not owner_id:
            raise PreconditionError("Cannot create a blog without an active owner")

        values = fields.model_dump(exclude={"content"})
        ensure_required_fields(values)

        now = utc_now()
        db_blog = BlogDB(
            owner_id=owner_id,
            author_name=values["author_name"],
            author_image=values["author_image"],
            title=values["title"],
            slug=values["slug"],
            sub_title=values["sub_title"],
            cover_image=values["cover_image"],
            tags=values["tags"] or [],
            content=dump_content(fields.content or []),
            priority=values["priority"],
            status=values["status"] or "draft",
            created_at=now,
            updated_at=now,
        )

        async with transaction(self._session_maker) as session:
            if await session.get(UserDB, owner_id) is None:
                raise PreconditionError(f"Owner {owner_id} does not exist")
            session.add(db_blog)
            await session.flush()

        logger.info(f"Blog {db_blog.id} created by {owner_id}")
        return db_blog

    async def get(self, blog_id: UUID, owner_id: UUID | None) -> BlogDB | None:
        """
        Get a blog by ID within the owner's scope.

        Args:
            blog_id: Blog UUID
            owner_id: Requesting owner's user ID

        Returns:
            BlogDB | None: Blog if it exists and is owned by ``owner_id``
        """
        if not owner_id:
            return None
        async with self._session_maker() as session:
            result = await session.execute(
                select(BlogDB).where(*_where(BlogDB.id == blog_id, BlogDB.owner_id == owner_id)),
            )
            return result.scalar_one_or_none()

    async def update(
        self,
        blog_id: UUID,
        owner_id: UUID | None,
        patch: BlogUpdate,
    ) -> BlogDB | None:
        """
        Apply a partial update to an owned blog.

        Args:
            blog_id: Blog UUID
            owner_id: Requesting owner's user ID
            patch: Fields to change; unset fields are left alone

        Returns:
            BlogDB | None: Updated blog, or None if absent or not owned

        Raises:
            PreconditionError: If there is no owner
            ValidationError: If the patch blanks a required field
        """
        if not owner_id:
            raise PreconditionError("Cannot update a blog without an active owner")

        changes = patch.model_dump(exclude_unset=True, exclude={"content"})
        if "content" in patch.model_fields_set:
            changes["content"] = dump_content(patch.content or [])
        if "tags" in changes and changes["tags"] is None:
            changes["tags"] = []
        if changes.get("status", "") is None:
            del changes["status"]

        async with transaction(self._session_maker) as session:
            result = await session.execute(
                select(BlogDB).where(*_where(BlogDB.id == blog_id, BlogDB.owner_id == owner_id)),
            )
            db_blog = result.scalar_one_or_none()
            if db_blog is None:
                return None

            for key, value in changes.items():
                setattr(db_blog, key, value)
            ensure_required_fields({name: getattr(db_blog, name) for name in REQUIRED_FIELDS})

            # Never move backwards, even if the wall clock does
            db_blog.updated_at = max(utc_now(), db_blog.updated_at)
            session.add(db_blog)
            await session.flush()

        return db_blog

    async def delete(self, blog_id: UUID, owner_id: UUID | None) -> bool:
        """
        Delete an owned blog.

        Args:
            blog_id: Blog UUID
            owner_id: Requesting owner's user ID

        Returns:
            bool: True if a blog was deleted, False if absent or not owned

        Raises:
            PreconditionError: If there is no owner
        """
        if not owner_id:
            raise PreconditionError("Cannot delete a blog without an active owner")

        async with transaction(self._session_maker) as session:
            result = await session.execute(
                select(BlogDB).where(*_where(BlogDB.id == blog_id, BlogDB.owner_id == owner_id)),
            )
            db_blog = result.scalar_one_or_none()
            if db_blog is None:
                return False
            await session.delete(db_blog)

        logger.info(f"Blog {blog_id} deleted by {owner_id}")
        return True

    async def list_by_owner(self, owner_id: UUID | None) -> list[BlogDB]:
        """
        Get every blog owned by ``owner_id``, in no particular order.

        Args:
            owner_id: Requesting owner's user ID

        Returns:
            list[BlogDB]: The owner's blogs, empty without an owner
        """
        if not owner_id:
            return []
        async with self._session_maker() as session:
            result = await session.execute(
                select(BlogDB).where(*_where(BlogDB.owner_id == owner_id)),
            )
            return list(result.scalars().all())

    async def list_published(self) -> list[BlogDB]:
        """
        Get every published blog across all owners.

        Returns:
            list[BlogDB]: Published blogs, most recently updated first
        """
        async with self._session_maker() as session:
            result = await session.execute(
                select(BlogDB)
                .where(*_where(BlogDB.status == "published"))
                .order_by(desc(cast(ColumnElement, BlogDB.updated_at))),
            )
            return list(result.scalars().all())

    async def stats(self, owner_id: UUID | None) -> tuple[int, int, list[BlogDB]]:
        """
        Count an owner's blogs and fetch the most recently updated ones.

        Args:
            owner_id: Requesting owner's user ID

        Returns:
            tuple[int, int, list[BlogDB]]: Total count, published count and
            the latest ``LATEST_BLOGS_COUNT`` blogs by ``updated_at``
        """
        if not owner_id:
            return 0, 0, []
        async with self._session_maker() as session:
            owned = _where(BlogDB.owner_id == owner_id)
            total = await session.scalar(select(func.count()).select_from(BlogDB).where(*owned))
            published = await session.scalar(
                select(func.count())
                .select_from(BlogDB)
                .where(*owned, *_where(BlogDB.status == "published")),
            )
            latest = await session.execute(
                select(BlogDB)
                .where(*owned)
                .order_by(desc(cast(ColumnElement, BlogDB.updated_at)))
                .limit(LATEST_BLOGS_COUNT),
            )
            return total or 0, published or 0, list(latest.scalars().all())
