"""
Autosave scheduler.

One scheduler belongs to one editor session. While the session edits an
existing blog and autosave is enabled, a background task wakes every
``interval_seconds`` and, if the draft changed since the last save, writes it
through the blog repository. Edits never reset the timer.

The timer is an asyncio task. Every teardown bumps a generation counter that
the loop re-checks after each sleep, so a tick can never run after the
scheduler was disarmed, even if cancellation lands late.
"""

from asyncio import CancelledError, Task, create_task, current_task
from asyncio import sleep as asyncio_sleep
from collections.abc import Awaitable, Callable
from contextlib import suppress
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from blogcore.errors import BaseAppError
from blogcore.models import BlogDB
from blogcore.monitoring import get_logger
from blogcore.schemas.autosave import AutosaveConfig, AutosaveStateName
from blogcore.schemas.blog import BlogUpdate
from blogcore.utils.helpers import utc_now

logger = get_logger(__name__)

type SaveFn = Callable[[UUID, UUID | None, BlogUpdate], Awaitable[BlogDB | None]]
type SleepFn = Callable[[float], Awaitable[None]]


class AutosaveScheduler:
    """
    Timer-driven dirty flushing for one document.

    States: ``idle`` (no timer), ``armed`` (timer waiting) and ``saving``
    (a tick is writing). Create mode, meaning no blog id yet, stays idle.
    """

    def __init__(
        self,
        save: SaveFn,
        config: AutosaveConfig,
        *,
        sleep: SleepFn = asyncio_sleep,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            save: Repository update, called as ``save(blog_id, owner_id, draft)``
            config: Initial autosave preference
            sleep: Awaitable delay used between ticks
            clock: Source of ``last_saved_at`` timestamps
        """
        self._save = save
        self._config = config
        self._sleep = sleep
        self._clock = clock

        self._task: Task[None] | None = None
        self._generation = 0
        self._saving = False
        self._version = 0
        self._draft = BlogUpdate()

        self.blog_id: UUID | None = None
        self.owner_id: UUID | None = None
        self.dirty = False
        self.last_saved_at: datetime | None = None

    @property
    def config(self) -> AutosaveConfig:
        return self._config

    @property
    def version(self) -> int:
        """Edit counter, bumped by every ``mark_dirty``."""
        return self._version

    @property
    def state(self) -> AutosaveStateName:
        if self._task is None:
            return "idle"
        return "saving" if self._saving else "armed"

    def enter_edit(
        self,
        blog_id: UUID,
        owner_id: UUID,
        draft: BlogUpdate | None = None,
    ) -> None:
        """
        Start tracking an existing blog and arm the timer if enabled.

        Args:
            blog_id: Document being edited
            owner_id: Its owner, used to scope every save
            draft: Current draft; starts clean
        """
        self.blog_id = blog_id
        self.owner_id = owner_id
        if draft is not None:
            self._draft = draft
        self.dirty = False
        self._arm()

    def leave_edit(self) -> None:
        """Stop tracking the document and tear the timer down immediately."""
        self._disarm()
        self.blog_id = None
        self.owner_id = None

    def mark_dirty(self, draft: BlogUpdate | None = None) -> None:
        """Record an edit; the running timer keeps its schedule."""
        if draft is not None:
            self._draft = draft
        self.dirty = True
        self._version += 1

    def mark_clean(self, version: int | None = None) -> None:
        """
        Record that the draft was saved by other means.

        Passing the ``version`` read before that save keeps the draft dirty if
        an edit arrived in between.
        """
        if version is None or version == self._version:
            self.dirty = False
        self.last_saved_at = self._clock()

    def configure(self, config: AutosaveConfig) -> None:
        """
        Apply a new preference.

        Disabling tears the timer down. A new interval re-arms it, and enabling
        arms it when a document is being edited.
        """
        previous, self._config = self._config, config
        if self.blog_id is None:
            return
        if not config.enabled:
            self._disarm()
        elif self._task is None or previous.interval_seconds != config.interval_seconds:
            self._arm()

    async def tick(self) -> bool:
        """
        Run one timer tick.

        Returns:
            bool: True if the draft was written, False if there was nothing
            to do or the write failed
        """
        if not self.dirty or self.blog_id is None:
            return False

        blog_id = self.blog_id
        version = self._version
        self._saving = True
        try:
            saved = await self._save(blog_id, self.owner_id, self._draft)
        except (BaseAppError, SQLAlchemyError):
            logger.exception("Autosave failed, will retry on next tick", blog_id=str(blog_id))
            return False
        finally:
            self._saving = False

        if saved is None:
            logger.warning("Autosave target no longer exists", blog_id=str(blog_id))
            self.leave_edit()
            return False

        # An edit that landed while saving keeps the draft dirty
        if version == self._version:
            self.dirty = False
        self.last_saved_at = self._clock()
        logger.info("Autosaved", blog_id=str(blog_id))
        return True

    async def close(self) -> None:
        """Tear down and wait for the timer task to finish."""
        task = self._task
        self.leave_edit()
        if task is not None and task is not current_task():
            with suppress(CancelledError):
                await task

    def _arm(self) -> None:
        self._disarm()
        if not self._config.enabled or self.blog_id is None:
            return
        task = create_task(self._run(self._generation))
        task.add_done_callback(self._on_timer_done)
        self._task = task
        logger.debug(
            "Autosave armed",
            blog_id=str(self.blog_id),
            interval_seconds=self._config.interval_seconds,
        )

    def _disarm(self) -> None:
        self._generation += 1
        task, self._task = self._task, None
        # A tick that is mid-write finishes, then sees the new generation and exits
        if task is not None and not task.done() and not self._saving and task is not current_task():
            task.cancel()

    def _on_timer_done(self, task: Task[None]) -> None:
        # A timer killed by an unexpected error must not keep reporting "armed"
        if self._task is task:
            self._task = None
        if task.cancelled() or (exc := task.exception()) is None:
            return
        logger.error(
            "Autosave timer stopped",
            blog_id=str(self.blog_id),
            exc_info=(type(exc), exc, exc.__traceback__),
        )

    async def _run(self, generation: int) -> None:
        while generation == self._generation:
            await self._sleep(self._config.interval_seconds)
            if generation != self._generation:
                return
            await self.tick()
