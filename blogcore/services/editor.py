"""
Editor sessions.

An editor session is the server-side half of an open blog editor: it holds
the draft, knows whether it is creating a new blog or editing an existing
one, and owns that document's autosave scheduler. The registry keeps every
open session and pushes autosave preference changes into them.
"""

from asyncio import sleep as asyncio_sleep
from logging import getLogger
from typing import Any, Literal
from uuid import UUID, uuid4

from blogcore.errors import ValidationError
from blogcore.models import BlogDB, UserDB
from blogcore.repositories import BlogRepository
from blogcore.schemas.autosave import AutosaveConfig, EditorState, SaveResult
from blogcore.schemas.blog import BlogCreate, BlogFields, BlogResponse, BlogStatus, BlogUpdate
from blogcore.services.autosave import AutosaveScheduler, SleepFn
from blogcore.utils.helpers import file_logger, slugify

logger = file_logger(getLogger(__name__))

DRAFT_FIELDS: tuple[str, ...] = tuple(BlogFields.model_fields)

TITLE_REQUIRED = "Title is required"
SLUG_REQUIRED = "Slug is required"
BLOG_NOT_FOUND = "Blog not found"


def draft_from_blog(blog: BlogDB) -> dict[str, Any]:
    """Copy a stored blog's editable fields into a fresh draft."""
    return {name: getattr(blog, name) for name in DRAFT_FIELDS}


class EditorSession:
    """One open editor, in create mode until its first successful save."""

    def __init__(
        self,
        session_id: UUID,
        owner_id: UUID,
        blogs: BlogRepository,
        config: AutosaveConfig,
        *,
        draft: dict[str, Any],
        blog_id: UUID | None = None,
        sleep: SleepFn = asyncio_sleep,
    ) -> None:
        self.session_id = session_id
        self.owner_id = owner_id
        self.blog_id = blog_id
        self.draft = draft
        self._blogs = blogs
        # Editing an existing blog never rewrites its slug from the title
        self._slug_locked = blog_id is not None
        self.autosave = AutosaveScheduler(blogs.update, config, sleep=sleep)
        if blog_id is not None:
            self.autosave.enter_edit(blog_id, owner_id, self.patch())

    @property
    def mode(self) -> Literal["create", "edit"]:
        return "create" if self.blog_id is None else "edit"

    @property
    def dirty(self) -> bool:
        return self.autosave.dirty

    def patch(self) -> BlogUpdate:
        """The whole draft as an update payload."""
        return BlogUpdate.model_validate(self.draft)

    def edit(self, changes: BlogUpdate) -> None:
        """
        Merge field edits into the draft and mark it dirty.

        In create mode a new title re-derives the slug, unless the slug was
        set by hand.
        """
        values = changes.model_dump(mode="json", exclude_unset=True)
        if self.mode == "create" and "slug" in values:
            self._slug_locked = bool(values["slug"])
        self.draft.update(values)
        if self.mode == "create" and "title" in values and not self._slug_locked:
            self.draft["slug"] = slugify(self.draft.get("title") or "") or None
        self.autosave.mark_dirty(self.patch())

    async def save(self, status: BlogStatus | None = None) -> SaveResult:
        """
        Explicitly save the draft, optionally switching its status.

        The first save of a new document creates it and switches the session
        to edit mode, which arms autosave.

        Args:
            status: ``draft`` or ``published``; keeps the draft's status if None

        Returns:
            SaveResult: The stored blog, or the reason the save was refused
        """
        if status is not None:
            self.draft["status"] = status
        if not self.draft.get("title"):
            return SaveResult(success=False, error=TITLE_REQUIRED)
        if not self.draft.get("slug"):
            return SaveResult(success=False, error=SLUG_REQUIRED)

        version = self.autosave.version
        try:
            if self.blog_id is None:
                blog = await self._blogs.create(self.owner_id, BlogCreate.model_validate(self.draft))
                self.blog_id = blog.id
                self._slug_locked = True
                self.autosave.enter_edit(blog.id, self.owner_id, self.patch())
                logger.info(f"Editor {self.session_id} created blog {blog.id}")
            else:
                updated = await self._blogs.update(self.blog_id, self.owner_id, self.patch())
                if updated is None:
                    self.autosave.leave_edit()
                    return SaveResult(success=False, error=BLOG_NOT_FOUND)
                blog = updated
        except ValidationError as e:
            return SaveResult(success=False, error=e.detail)

        self.autosave.mark_clean(version)
        return SaveResult(success=True, blog=BlogResponse.model_validate(blog))

    def apply_config(self, config: AutosaveConfig) -> None:
        self.autosave.configure(config)

    async def close(self) -> None:
        await self.autosave.close()

    def state(self) -> EditorState:
        return EditorState(
            session_id=self.session_id,
            blog_id=self.blog_id,
            mode=self.mode,
            dirty=self.dirty,
            autosave_state=self.autosave.state,
            autosave=self.autosave.config,
            last_saved_at=self.autosave.last_saved_at,
            draft=BlogUpdate.model_validate(self.draft).model_dump(mode="json"),
        )


class EditorRegistry:
    """
    All open editor sessions, keyed by session id.

    Sessions are only visible to the owner who opened them.
    """

    def __init__(
        self,
        blogs: BlogRepository,
        config: AutosaveConfig,
        *,
        sleep: SleepFn = asyncio_sleep,
    ) -> None:
        self._blogs = blogs
        self._config = config
        self._sleep = sleep
        self._sessions: dict[UUID, EditorSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    @property
    def config(self) -> AutosaveConfig:
        return self._config

    async def open(self, owner: UserDB, blog_id: UUID | None = None) -> EditorSession | None:
        """
        Open an editor.

        Args:
            owner: Active user
            blog_id: Blog to edit; omit to start a new one

        Returns:
            EditorSession | None: The new session, None if the blog is not
            the owner's
        """
        if blog_id is not None:
            blog = await self._blogs.get(blog_id, owner.id)
            if blog is None:
                return None
            draft = draft_from_blog(blog)
        else:
            draft = BlogUpdate(author_name=owner.username, author_image=owner.avatar).model_dump(
                mode="json",
            )
            draft["status"] = "draft"

        session = EditorSession(
            uuid4(),
            owner.id,
            self._blogs,
            self._config,
            draft=draft,
            blog_id=blog_id,
            sleep=self._sleep,
        )
        self._sessions[session.session_id] = session
        logger.info(f"Editor {session.session_id} opened in {session.mode} mode by {owner.id}")
        return session

    def get(self, session_id: UUID, owner_id: UUID) -> EditorSession | None:
        session = self._sessions.get(session_id)
        if session is None or session.owner_id != owner_id:
            return None
        return session

    async def close(self, session_id: UUID, owner_id: UUID) -> bool:
        """Close one session and tear down its timer."""
        session = self.get(session_id, owner_id)
        if session is None:
            return False
        del self._sessions[session_id]
        await session.close()
        return True

    async def close_owner(self, owner_id: UUID) -> int:
        """Close every session opened by ``owner_id``; used on logout."""
        closing = [sid for sid, s in self._sessions.items() if s.owner_id == owner_id]
        for session_id in closing:
            await self._sessions.pop(session_id).close()
        return len(closing)

    async def close_all(self) -> None:
        sessions, self._sessions = list(self._sessions.values()), {}
        for session in sessions:
            await session.close()
        if sessions:
            logger.info(f"Closed {len(sessions)} editor session(s)")

    def apply_config(self, config: AutosaveConfig) -> None:
        """Use ``config`` for new sessions and push it into every open one."""
        self._config = config
        for session in self._sessions.values():
            session.apply_config(config)
