"""
Snapshot export and import.

A snapshot is the whole persisted state in one JSON document:
``{"version", "users", "blogs", "session", "autosaveConfig"}``.

Import validates every record against the versioned schemas, migrating the
legacy browser-storage layout first. Records that cannot be accepted are
quarantined in the returned report instead of failing the whole import; the
accepted remainder is written in a single transaction.
"""

from logging import getLogger
from typing import Any
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blogcore.configs import SCHEMA_VERSION
from blogcore.db import SessionMaker, transaction
from blogcore.errors import SnapshotError
from blogcore.managers import hash_password
from blogcore.models import BlogDB, UserDB
from blogcore.models.state import SINGLETON_ID, AutosaveConfigDB, SessionStateDB
from blogcore.repositories import StateRepository
from blogcore.repositories.user import normalize_email
from blogcore.schemas.content import dump_content
from blogcore.schemas.snapshot import (
    ImportReport,
    QuarantinedRecord,
    SnapshotAutosave,
    SnapshotBlog,
    SnapshotUser,
    is_legacy,
    migrate_blog,
)
from blogcore.services.identity import default_avatar
from blogcore.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))


def _describe(error: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc']) or 'record'}: {item['msg']}"
        for item in error.errors()
    )


SECRET_FIELDS = frozenset({"password", "passwordHash", "password_hash", "apiKey", "api_key"})


def _without_secrets(record: Any) -> Any:
    if isinstance(record, dict):
        return {key: value for key, value in record.items() if key not in SECRET_FIELDS}
    return record


def _session_user_id(value: Any) -> Any:
    """Accept ``{"userId"}``, ``{"user": {...}}`` or a bare legacy user object."""
    if not isinstance(value, dict):
        return None
    for key in ("userId", "user_id", "id"):
        if value.get(key):
            return value[key]
    user = value.get("user")
    return user.get("id") if isinstance(user, dict) else None


class _ImportRun:
    """State of one import: known identities and the report being built."""

    def __init__(self, session: AsyncSession, existing_users: list[UserDB]) -> None:
        self.session = session
        self.report = ImportReport()
        self.users_by_id: dict[UUID, UserDB] = {user.id: user for user in existing_users}
        self.email_owner: dict[str, UUID] = {user.email: user.id for user in existing_users}
        self.key_owner: dict[str, UUID] = {
            user.api_key: user.id for user in existing_users if user.api_key
        }

    def quarantine(self, collection: str, index: int, reason: str, record: Any) -> None:
        logger.warning(f"Snapshot {collection}[{index}] quarantined: {reason}")
        self.report.quarantined.append(
            QuarantinedRecord(
                collection=collection,
                index=index,
                reason=reason,
                record=_without_secrets(record),
            ),
        )


class SnapshotService:
    """Dump and restore the whole persisted state."""

    def __init__(self, session_maker: SessionMaker, state: StateRepository | None = None) -> None:
        self._session_maker = session_maker
        self._state = state or StateRepository(session_maker)

    async def export(self) -> dict[str, Any]:
        """
        Dump every user, blog and singleton row.

        Returns:
            dict[str, Any]: JSON-ready snapshot document
        """
        async with self._session_maker() as session:
            users = (await session.execute(select(UserDB))).scalars().all()
            blogs = (await session.execute(select(BlogDB))).scalars().all()
            state = await session.get(SessionStateDB, SINGLETON_ID)
            autosave = await session.get(AutosaveConfigDB, SINGLETON_ID)

        return {
            "version": SCHEMA_VERSION,
            "users": [
                SnapshotUser.model_validate(user, from_attributes=True).model_dump(
                    mode="json",
                    by_alias=True,
                )
                for user in users
            ],
            "blogs": [
                SnapshotBlog.model_validate(blog, from_attributes=True).model_dump(
                    mode="json",
                    by_alias=True,
                )
                for blog in blogs
            ],
            "session": {"userId": str(state.user_id)} if state and state.user_id else None,
            "autosaveConfig": SnapshotAutosave.model_validate(
                autosave or AutosaveConfigDB(),
                from_attributes=True,
            ).model_dump(by_alias=True),
        }

    async def import_(self, payload: Any) -> ImportReport:
        """
        Restore a snapshot on top of the current state.

        Records are upserted by id. A record is quarantined when it fails
        validation, when its email or API key belongs to a different user,
        or when it is a blog whose owner is unknown.

        Args:
            payload: Parsed snapshot document

        Returns:
            ImportReport: Counts of restored records and the quarantined ones

        Raises:
            SnapshotError: If the payload is not a snapshot document at all
        """
        if not isinstance(payload, dict):
            raise SnapshotError("Snapshot must be a JSON object")
        users, blogs = payload.get("users", []), payload.get("blogs", [])
        if not isinstance(users, list) or not isinstance(blogs, list):
            raise SnapshotError("Snapshot users and blogs must be lists")

        version = payload.get("version")
        if isinstance(version, int) and version > SCHEMA_VERSION:
            raise SnapshotError(f"Unsupported snapshot version {version}")

        async with transaction(self._session_maker) as session:
            existing = (await session.execute(select(UserDB))).scalars().all()
            run = _ImportRun(session, list(existing))
            for index, record in enumerate(users):
                await self._import_user(run, index, record)
            for index, record in enumerate(blogs):
                await self._import_blog(run, index, record)
            await self._import_session(run, payload.get("session"))
            await self._import_autosave(run, payload.get("autosaveConfig"))

        report = run.report
        logger.info(
            f"Snapshot imported: {report.users_imported} users, {report.blogs_imported} blogs, "
            f"{len(report.quarantined)} quarantined",
        )
        return report

    async def _import_user(self, run: _ImportRun, index: int, record: Any) -> None:
        if not isinstance(record, dict):
            run.quarantine("users", index, "Record is not an object", record)
            return

        candidate = dict(record)
        if is_legacy(candidate):
            password = candidate.pop("password", None)
            if password and not (candidate.get("passwordHash") or candidate.get("password_hash")):
                candidate["password_hash"] = await hash_password(str(password))
            candidate.setdefault("avatar", default_avatar(str(candidate.get("username", ""))))
            candidate["schema_version"] = SCHEMA_VERSION

        try:
            user = SnapshotUser.model_validate(candidate)
        except PydanticValidationError as e:
            run.quarantine("users", index, _describe(e), record)
            return

        email = normalize_email(str(user.email))
        if run.email_owner.get(email, user.id) != user.id:
            run.quarantine("users", index, f"Email '{email}' belongs to another user", record)
            return
        if user.api_key and run.key_owner.get(user.api_key, user.id) != user.id:
            run.quarantine("users", index, "API key belongs to another user", record)
            return

        stored = run.users_by_id.get(user.id)
        if stored is not None:
            run.email_owner.pop(stored.email, None)
            if stored.api_key:
                run.key_owner.pop(stored.api_key, None)

        merged = await run.session.merge(
            UserDB(
                id=user.id,
                username=user.username,
                email=email,
                password_hash=user.password_hash,
                avatar=user.avatar,
                role=user.role,
                api_key=user.api_key,
                request_count=user.request_count,
                schema_version=SCHEMA_VERSION,
                **({"created_at": stored.created_at} if stored else {}),
            ),
        )
        await run.session.flush()

        run.users_by_id[user.id] = merged
        run.email_owner[email] = user.id
        if user.api_key:
            run.key_owner[user.api_key] = user.id
        run.report.users_imported += 1

    async def _import_blog(self, run: _ImportRun, index: int, record: Any) -> None:
        if not isinstance(record, dict):
            run.quarantine("blogs", index, "Record is not an object", record)
            return

        candidate = migrate_blog(record) if is_legacy(record) else dict(record)
        owner = self._owner_of(run, candidate)
        if owner is None:
            run.quarantine("blogs", index, "Owner does not exist", record)
            return
        if not candidate.get("author_name") and not candidate.get("authorName"):
            candidate["author_name"] = owner.username

        try:
            blog = SnapshotBlog.model_validate(candidate)
        except PydanticValidationError as e:
            run.quarantine("blogs", index, _describe(e), record)
            return

        stored = await run.session.get(BlogDB, blog.id)
        if stored is not None and stored.owner_id != blog.owner_id:
            run.quarantine("blogs", index, "Blog id belongs to another owner", record)
            return

        await run.session.merge(
            BlogDB(
                id=blog.id,
                owner_id=blog.owner_id,
                author_name=blog.author_name,
                author_image=blog.author_image,
                title=blog.title,
                slug=blog.slug,
                sub_title=blog.sub_title,
                cover_image=blog.cover_image,
                tags=blog.tags,
                content=dump_content(blog.content),
                priority=blog.priority,
                status=blog.status,
                schema_version=SCHEMA_VERSION,
                created_at=blog.created_at,
                updated_at=max(blog.updated_at, blog.created_at),
            ),
        )
        await run.session.flush()
        run.report.blogs_imported += 1

    @staticmethod
    def _owner_of(run: _ImportRun, candidate: dict[str, Any]) -> UserDB | None:
        raw = candidate.get("owner_id", candidate.get("ownerId"))
        try:
            owner_id = raw if isinstance(raw, UUID) else UUID(str(raw))
        except ValueError:
            return None
        candidate["owner_id"] = owner_id
        candidate.pop("ownerId", None)
        return run.users_by_id.get(owner_id)

    async def _import_session(self, run: _ImportRun, value: Any) -> None:
        if value is None:
            return
        raw = _session_user_id(value)
        try:
            user_id = UUID(str(raw))
        except ValueError:
            run.quarantine("session", 0, "Session does not name a user", value)
            return
        if user_id not in run.users_by_id:
            run.quarantine("session", 0, "Session user does not exist", value)
            return
        await self._state.set_session_user(user_id, run.session)
        run.report.session_restored = True

    async def _import_autosave(self, run: _ImportRun, value: Any) -> None:
        if value is None:
            return
        try:
            config = SnapshotAutosave.model_validate(value)
        except PydanticValidationError as e:
            run.quarantine("autosaveConfig", 0, _describe(e), value)
            return
        await self._state.save_autosave_config(
            enabled=config.enabled,
            interval_seconds=config.interval_seconds,
            session=run.session,
        )
        run.report.autosave_restored = True
