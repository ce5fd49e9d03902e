# tests/services/test_editor.py
"""Tests for blogcore/services/editor.py module."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from blogcore.models import BlogDB, UserDB
from blogcore.schemas import AutosaveConfig, BlogCreate, BlogUpdate
from blogcore.services import ServiceContainer

if TYPE_CHECKING:
    from conftest import ManualSleep


async def stored_blog(services: ServiceContainer, owner: UserDB, title: str = "Stored") -> BlogDB:
    return await services.blogs.create(owner.id, BlogCreate(title=title, author_name=owner.username))


class TestCreateMode:
    """Editing a document that does not exist yet."""

    @pytest.mark.asyncio
    async def test_open_new_document(self, services: ServiceContainer, owner: UserDB) -> None:
        session = await services.editors.open(owner)

        assert session is not None
        assert session.mode == "create"
        assert session.draft["author_name"] == "ada"
        assert session.draft["status"] == "draft"
        assert session.autosave.state == "idle"
        assert len(services.editors) == 1

    @pytest.mark.asyncio
    async def test_title_derives_slug_until_slug_is_set(
        self,
        services: ServiceContainer,
        owner: UserDB,
    ) -> None:
        session = await services.editors.open(owner)
        assert session is not None

        session.edit(BlogUpdate(title="My First Post"))
        assert session.draft["slug"] == "my-first-post"
        assert session.dirty is True

        session.edit(BlogUpdate(slug="hand-made"))
        session.edit(BlogUpdate(title="Renamed"))
        assert session.draft["slug"] == "hand-made"

    @pytest.mark.asyncio
    async def test_save_requires_title(self, services: ServiceContainer, owner: UserDB) -> None:
        session = await services.editors.open(owner)
        assert session is not None

        result = await session.save()

        assert result.success is False
        assert result.error == "Title is required"
        assert await services.blogs.list_by_owner(owner.id) == []

    @pytest.mark.asyncio
    async def test_first_save_creates_and_arms_autosave(
        self,
        services: ServiceContainer,
        owner: UserDB,
        manual_sleep: ManualSleep,
    ) -> None:
        session = await services.editors.open(owner)
        assert session is not None
        session.edit(BlogUpdate(title="Hello", content=[{"type": "paragraph", "data": {"text": "x"}}]))

        result = await session.save("published")

        assert result.success is True
        assert result.blog is not None
        assert result.blog.status == "published"
        assert result.blog.slug == "hello"
        assert session.mode == "edit"
        assert session.blog_id == result.blog.id
        assert session.dirty is False
        await manual_sleep.wait_parked()
        assert session.autosave.state == "armed"

    @pytest.mark.asyncio
    async def test_create_mode_never_autosaves(
        self,
        services: ServiceContainer,
        owner: UserDB,
        manual_sleep: ManualSleep,
    ) -> None:
        session = await services.editors.open(owner)
        assert session is not None
        session.edit(BlogUpdate(title="Unsaved"))

        assert manual_sleep.calls == []
        assert await services.blogs.list_by_owner(owner.id) == []


class TestEditMode:
    """Editing an existing document."""

    @pytest.mark.asyncio
    async def test_open_other_owners_blog(
        self,
        services: ServiceContainer,
        owner: UserDB,
        other_owner: UserDB,
    ) -> None:
        blog = await stored_blog(services, owner)

        assert await services.editors.open(other_owner, blog.id) is None
        assert await services.editors.open(owner, uuid4()) is None

    @pytest.mark.asyncio
    async def test_autosave_writes_draft(
        self,
        services: ServiceContainer,
        owner: UserDB,
        manual_sleep: ManualSleep,
    ) -> None:
        blog = await stored_blog(services, owner)
        session = await services.editors.open(owner, blog.id)
        assert session is not None
        assert session.mode == "edit"

        session.edit(BlogUpdate(title="Autosaved title"))
        await manual_sleep.fire()

        stored = await services.blogs.get(blog.id, owner.id)
        assert stored is not None
        assert stored.title == "Autosaved title"
        # Edit mode keeps the existing slug
        assert stored.slug == "stored"
        assert session.dirty is False
        assert session.autosave.last_saved_at is not None

    @pytest.mark.asyncio
    async def test_save_after_delete_reports_not_found(
        self,
        services: ServiceContainer,
        owner: UserDB,
    ) -> None:
        blog = await stored_blog(services, owner)
        session = await services.editors.open(owner, blog.id)
        assert session is not None

        await services.blogs.delete(blog.id, owner.id)
        result = await session.save()

        assert result.success is False
        assert result.error == "Blog not found"
        assert session.autosave.state == "idle"

    @pytest.mark.asyncio
    async def test_save_with_blank_author_is_refused(
        self,
        services: ServiceContainer,
        owner: UserDB,
    ) -> None:
        blog = await stored_blog(services, owner)
        session = await services.editors.open(owner, blog.id)
        assert session is not None
        session.edit(BlogUpdate(author_name=""))

        result = await session.save()

        assert result.success is False
        assert result.error == "Author name is required"
        assert session.dirty is True


class TestRegistry:
    """Tests for EditorRegistry bookkeeping."""

    @pytest.mark.asyncio
    async def test_sessions_are_owner_scoped(
        self,
        services: ServiceContainer,
        owner: UserDB,
        other_owner: UserDB,
    ) -> None:
        session = await services.editors.open(owner)
        assert session is not None

        assert services.editors.get(session.session_id, owner.id) is session
        assert services.editors.get(session.session_id, other_owner.id) is None
        assert await services.editors.close(session.session_id, other_owner.id) is False
        assert await services.editors.close(session.session_id, owner.id) is True
        assert len(services.editors) == 0

    @pytest.mark.asyncio
    async def test_close_owner(
        self,
        services: ServiceContainer,
        owner: UserDB,
        other_owner: UserDB,
    ) -> None:
        await services.editors.open(owner)
        await services.editors.open(owner)
        await services.editors.open(other_owner)

        assert await services.editors.close_owner(owner.id) == 2
        assert len(services.editors) == 1

    @pytest.mark.asyncio
    async def test_config_pushed_to_open_sessions(
        self,
        services: ServiceContainer,
        owner: UserDB,
        manual_sleep: ManualSleep,
    ) -> None:
        blog = await stored_blog(services, owner)
        session = await services.editors.open(owner, blog.id)
        assert session is not None
        await manual_sleep.wait_parked()

        disabled = AutosaveConfig(enabled=False, interval_seconds=30)
        await services.save_autosave_config(disabled)

        assert services.editors.config == disabled
        assert session.autosave.config == disabled
        assert session.autosave.state == "idle"
        assert (await services.load_autosave_config()) == disabled

    @pytest.mark.asyncio
    async def test_state_view(self, services: ServiceContainer, owner: UserDB) -> None:
        session = await services.editors.open(owner)
        assert session is not None
        session.edit(BlogUpdate(title="View"))

        state = session.state()

        assert state.mode == "create"
        assert state.blog_id is None
        assert state.dirty is True
        assert state.autosave_state == "idle"
        assert state.draft["title"] == "View"
        assert state.draft["slug"] == "view"
