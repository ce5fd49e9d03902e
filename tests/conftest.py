# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Settings are read once at import time, so the environment must be ready
# before anything from blogcore is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_TO_FILE"] = "false"
os.environ["PASSWORD_SECURITY_LEVEL"] = "low"
os.environ["ENVIRONMENT"] = "testing"
os.environ["BOOTSTRAP_DEFAULT_ADMIN"] = "false"
os.environ["AUTOSAVE_ENABLED"] = "true"
os.environ["AUTOSAVE_INTERVAL_SECONDS"] = "30"

from asyncio import Event, Future, get_running_loop, wait_for  # noqa: E402
from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine  # noqa: E402

from blogcore import app  # noqa: E402
from blogcore.db import SessionMaker, build_engine, build_session_maker, create_tables  # noqa: E402
from blogcore.models import UserDB  # noqa: E402
from blogcore.repositories import BlogRepository, UserRepository  # noqa: E402
from blogcore.services import ServiceContainer, build_services  # noqa: E402


class ManualSleep:
    """
    Stand-in for ``asyncio.sleep`` that only wakes when the test says so.

    Autosave timers park on it; ``fire`` releases every parked timer and
    waits until the timer has finished its tick and parked again.
    """

    def __init__(self) -> None:
        self.calls: list[float] = []
        self._waiters: list[Future[None]] = []
        self._parked = Event()

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        future: Future[None] = get_running_loop().create_future()
        self._waiters.append(future)
        self._parked.set()
        await future

    @property
    def pending(self) -> int:
        return sum(not waiter.done() for waiter in self._waiters)

    async def wait_parked(self, timeout: float = 2.0) -> None:
        await wait_for(self._parked.wait(), timeout)

    async def fire(self, *, wait: bool = True) -> None:
        await self.wait_parked()
        self._parked.clear()
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(None)
        if wait:
            await self.wait_parked()


@pytest.fixture
def manual_sleep() -> ManualSleep:
    """Controllable autosave timer."""
    return ManualSleep()


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database per test."""
    test_engine = build_engine("sqlite+aiosqlite://")
    await create_tables(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> SessionMaker:
    return build_session_maker(engine)


@pytest.fixture
def user_repo(session_maker: SessionMaker) -> UserRepository:
    return UserRepository(session_maker)


@pytest.fixture
def blog_repo(session_maker: SessionMaker) -> BlogRepository:
    return BlogRepository(session_maker)


@pytest.fixture
async def owner(user_repo: UserRepository) -> UserDB:
    """A stored user to own blogs."""
    return await user_repo.add(
        UserDB(username="ada", email="ada@example.com", password_hash="not-a-real-hash"),
    )


@pytest.fixture
async def other_owner(user_repo: UserRepository) -> UserDB:
    """A second stored user, for cross-owner checks."""
    return await user_repo.add(
        UserDB(username="grace", email="grace@example.com", password_hash="not-a-real-hash"),
    )


@pytest.fixture
async def services(
    session_maker: SessionMaker,
    manual_sleep: ManualSleep,
) -> AsyncGenerator[ServiceContainer]:
    """Service graph on the test database, with a manual autosave timer."""
    container = build_services(session_maker, sleep=manual_sleep)
    yield container
    await container.editors.close_all()


@pytest.fixture
async def client(services: ServiceContainer) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing."""
    app.state.services = services
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    del app.state.services
