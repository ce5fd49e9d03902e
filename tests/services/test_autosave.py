# tests/services/test_autosave.py
"""Tests for blogcore/services/autosave.py module."""

from __future__ import annotations

from asyncio import sleep
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from blogcore.errors import ValidationError
from blogcore.schemas import AutosaveConfig, BlogUpdate
from blogcore.services import AutosaveScheduler

if TYPE_CHECKING:
    from conftest import ManualSleep

FIXED_NOW = datetime(2025, 1, 1, tzinfo=UTC)


@pytest.fixture
def save() -> AsyncMock:
    """Repository update stand-in that always finds the blog."""
    return AsyncMock(return_value=MagicMock())


@pytest.fixture
def scheduler(save: AsyncMock, manual_sleep: ManualSleep) -> AutosaveScheduler:
    return AutosaveScheduler(
        save,
        AutosaveConfig(enabled=True, interval_seconds=30),
        sleep=manual_sleep,
        clock=lambda: FIXED_NOW,
    )


async def settle() -> None:
    """Let pending tasks run to their next suspension point."""
    for _ in range(5):
        await sleep(0)


class TestArming:
    """Tests for entering and leaving edit mode."""

    def test_starts_idle(self, scheduler: AutosaveScheduler) -> None:
        assert scheduler.state == "idle"
        assert scheduler.dirty is False

    @pytest.mark.asyncio
    async def test_enter_edit_arms(
        self,
        scheduler: AutosaveScheduler,
        manual_sleep: ManualSleep,
    ) -> None:
        scheduler.enter_edit(uuid4(), uuid4())
        await manual_sleep.wait_parked()

        assert scheduler.state == "armed"
        assert manual_sleep.calls == [30]
        await scheduler.close()

    @pytest.mark.asyncio
    async def test_disabled_config_never_arms(
        self,
        save: AsyncMock,
        manual_sleep: ManualSleep,
    ) -> None:
        scheduler = AutosaveScheduler(
            save,
            AutosaveConfig(enabled=False, interval_seconds=30),
            sleep=manual_sleep,
        )
        scheduler.enter_edit(uuid4(), uuid4())
        await settle()

        assert scheduler.state == "idle"
        assert manual_sleep.calls == []

    @pytest.mark.asyncio
    async def test_leave_edit_tears_down(
        self,
        scheduler: AutosaveScheduler,
        save: AsyncMock,
        manual_sleep: ManualSleep,
    ) -> None:
        scheduler.enter_edit(uuid4(), uuid4())
        await manual_sleep.wait_parked()
        scheduler.mark_dirty(BlogUpdate(title="x"))

        scheduler.leave_edit()
        await settle()

        assert scheduler.state == "idle"
        assert manual_sleep.pending == 0
        save.assert_not_awaited()


class TestTicks:
    """Tests for timer-driven saving."""

    @pytest.mark.asyncio
    async def test_clean_tick_does_not_save(
        self,
        scheduler: AutosaveScheduler,
        save: AsyncMock,
        manual_sleep: ManualSleep,
    ) -> None:
        scheduler.enter_edit(uuid4(), uuid4())
        await manual_sleep.fire()

        save.assert_not_awaited()
        await scheduler.close()

    @pytest.mark.asyncio
    async def test_dirty_tick_saves_and_cleans(
        self,
        scheduler: AutosaveScheduler,
        save: AsyncMock,
        manual_sleep: ManualSleep,
    ) -> None:
        blog_id, owner_id = uuid4(), uuid4()
        draft = BlogUpdate(title="Draft")
        scheduler.enter_edit(blog_id, owner_id)
        scheduler.mark_dirty(draft)

        await manual_sleep.fire()

        save.assert_awaited_once_with(blog_id, owner_id, draft)
        assert scheduler.dirty is False
        assert scheduler.last_saved_at == FIXED_NOW
        assert scheduler.state == "armed"
        await scheduler.close()

    @pytest.mark.asyncio
    async def test_edits_do_not_reset_timer(
        self,
        scheduler: AutosaveScheduler,
        manual_sleep: ManualSleep,
    ) -> None:
        scheduler.enter_edit(uuid4(), uuid4())
        await manual_sleep.wait_parked()

        for index in range(3):
            scheduler.mark_dirty(BlogUpdate(title=f"v{index}"))
        await settle()

        assert manual_sleep.calls == [30]
        await scheduler.close()

    @pytest.mark.asyncio
    async def test_failed_save_keeps_dirty(
        self,
        scheduler: AutosaveScheduler,
        save: AsyncMock,
        manual_sleep: ManualSleep,
    ) -> None:
        save.side_effect = [
            ValidationError(detail="Title is required"),
            OperationalError("UPDATE", {}, Exception("locked")),
            MagicMock(),
        ]
        scheduler.enter_edit(uuid4(), uuid4())
        scheduler.mark_dirty(BlogUpdate(title=""))

        await manual_sleep.fire()
        assert scheduler.dirty is True
        await manual_sleep.fire()
        assert scheduler.dirty is True
        await manual_sleep.fire()
        assert scheduler.dirty is False
        assert save.await_count == 3
        await scheduler.close()

    @pytest.mark.asyncio
    async def test_missing_blog_stops_autosave(
        self,
        scheduler: AutosaveScheduler,
        save: AsyncMock,
        manual_sleep: ManualSleep,
    ) -> None:
        save.return_value = None
        scheduler.enter_edit(uuid4(), uuid4())
        scheduler.mark_dirty(BlogUpdate(title="x"))

        await manual_sleep.fire(wait=False)
        await settle()

        assert scheduler.state == "idle"
        assert scheduler.blog_id is None
        assert manual_sleep.pending == 0

    @pytest.mark.asyncio
    async def test_unexpected_error_releases_timer(
        self,
        scheduler: AutosaveScheduler,
        save: AsyncMock,
        manual_sleep: ManualSleep,
    ) -> None:
        """A crashed timer reports idle and can be armed again."""
        save.side_effect = RuntimeError("boom")
        blog_id = uuid4()
        scheduler.enter_edit(blog_id, uuid4())
        scheduler.mark_dirty(BlogUpdate(title="x"))

        await manual_sleep.fire(wait=False)
        await settle()

        assert scheduler.state == "idle"
        assert scheduler.blog_id == blog_id
        assert scheduler.dirty is True

        save.side_effect = None
        scheduler.configure(AutosaveConfig(enabled=True, interval_seconds=30))
        await manual_sleep.wait_parked()
        assert scheduler.state == "armed"

        await manual_sleep.fire()
        assert scheduler.dirty is False
        await scheduler.close()

    @pytest.mark.asyncio
    async def test_tick_without_document(self, scheduler: AutosaveScheduler, save: AsyncMock) -> None:
        """Create mode has nothing to autosave."""
        scheduler.mark_dirty(BlogUpdate(title="new"))

        assert await scheduler.tick() is False
        save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_edit_during_save_stays_dirty(
        self,
        scheduler: AutosaveScheduler,
        save: AsyncMock,
    ) -> None:
        async def slow_save(*args: object) -> MagicMock:
            scheduler.mark_dirty(BlogUpdate(title="newer"))
            return MagicMock()

        save.side_effect = slow_save
        scheduler.blog_id, scheduler.owner_id = uuid4(), uuid4()
        scheduler.mark_dirty(BlogUpdate(title="old"))

        assert await scheduler.tick() is True
        assert scheduler.dirty is True


class TestConfigure:
    """Tests for live preference changes."""

    @pytest.mark.asyncio
    async def test_disable_tears_down(
        self,
        scheduler: AutosaveScheduler,
        manual_sleep: ManualSleep,
    ) -> None:
        scheduler.enter_edit(uuid4(), uuid4())
        await manual_sleep.wait_parked()

        scheduler.configure(AutosaveConfig(enabled=False, interval_seconds=30))
        await settle()

        assert scheduler.state == "idle"
        assert manual_sleep.pending == 0

    @pytest.mark.asyncio
    async def test_new_interval_rearms(
        self,
        scheduler: AutosaveScheduler,
        manual_sleep: ManualSleep,
    ) -> None:
        scheduler.enter_edit(uuid4(), uuid4())
        await manual_sleep.wait_parked()

        scheduler.configure(AutosaveConfig(enabled=True, interval_seconds=60))
        await settle()

        assert scheduler.state == "armed"
        assert manual_sleep.calls == [30, 60]
        assert manual_sleep.pending == 1
        await scheduler.close()

    @pytest.mark.asyncio
    async def test_enable_arms_open_document(
        self,
        save: AsyncMock,
        manual_sleep: ManualSleep,
    ) -> None:
        scheduler = AutosaveScheduler(
            save,
            AutosaveConfig(enabled=False, interval_seconds=15),
            sleep=manual_sleep,
        )
        scheduler.enter_edit(uuid4(), uuid4())

        scheduler.configure(AutosaveConfig(enabled=True, interval_seconds=15))
        await manual_sleep.wait_parked()

        assert scheduler.state == "armed"
        assert manual_sleep.calls == [15]
        await scheduler.close()

    def test_configure_without_document_only_stores(self, scheduler: AutosaveScheduler) -> None:
        config = AutosaveConfig(enabled=True, interval_seconds=120)
        scheduler.configure(config)

        assert scheduler.config == config
        assert scheduler.state == "idle"
