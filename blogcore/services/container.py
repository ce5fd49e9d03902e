"""Wiring of the services the routes depend on."""

from asyncio import sleep as asyncio_sleep
from dataclasses import dataclass

from blogcore.configs import settings
from blogcore.db import SessionMaker
from blogcore.repositories import BlogRepository, StateRepository, UserRepository
from blogcore.schemas.autosave import AutosaveConfig
from blogcore.services.autosave import SleepFn
from blogcore.services.editor import EditorRegistry
from blogcore.services.gateway import ApiGateway
from blogcore.services.identity import IdentityStore
from blogcore.services.snapshot import SnapshotService


@dataclass
class ServiceContainer:
    """Everything one application instance shares across requests."""

    session_maker: SessionMaker
    blogs: BlogRepository
    state: StateRepository
    identity: IdentityStore
    editors: EditorRegistry
    gateway: ApiGateway
    snapshots: SnapshotService

    async def load_autosave_config(self) -> AutosaveConfig:
        """Read the stored preference, falling back to settings, and apply it."""
        stored = await self.state.get_autosave_config()
        config = (
            AutosaveConfig.model_validate(stored)
            if stored is not None
            else AutosaveConfig(
                enabled=settings.AUTOSAVE_ENABLED,
                interval_seconds=settings.AUTOSAVE_INTERVAL_SECONDS,
            )
        )
        self.editors.apply_config(config)
        return config

    async def save_autosave_config(self, config: AutosaveConfig) -> AutosaveConfig:
        """Persist a new preference and push it into every open editor."""
        await self.state.save_autosave_config(
            enabled=config.enabled,
            interval_seconds=config.interval_seconds,
        )
        self.editors.apply_config(config)
        return config


def build_services(session_maker: SessionMaker, *, sleep: SleepFn = asyncio_sleep) -> ServiceContainer:
    """
    Build the service graph on one session factory.

    Args:
        session_maker: Factory every repository opens sessions from
        sleep: Delay used by autosave timers

    Returns:
        ServiceContainer: Ready-to-use services
    """
    blogs = BlogRepository(session_maker)
    users = UserRepository(session_maker)
    state = StateRepository(session_maker)
    identity = IdentityStore(session_maker, users, state)
    editors = EditorRegistry(
        blogs,
        AutosaveConfig(
            enabled=settings.AUTOSAVE_ENABLED,
            interval_seconds=settings.AUTOSAVE_INTERVAL_SECONDS,
        ),
        sleep=sleep,
    )
    return ServiceContainer(
        session_maker=session_maker,
        blogs=blogs,
        state=state,
        identity=identity,
        editors=editors,
        gateway=ApiGateway(identity, blogs),
        snapshots=SnapshotService(session_maker, state),
    )
