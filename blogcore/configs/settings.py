"""Application settings and configuration constants.

This module contains application settings, constants, and configuration
values for the Blog Core backend application.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from pydantic import SecretStr
from pydantic_settings.main import BaseSettings, SettingsConfigDict

ENV_FILE = Path(__file__).parent.parent.parent / ".env"

# --- Constants ---
MAX_TITLE_LENGTH = 200
MAX_SLUG_LENGTH = 200
MAX_TAGS_COUNT = 20
LATEST_BLOGS_COUNT = 5

# Autosave interval presets offered to editors (seconds)
AUTOSAVE_PRESETS: tuple[int, ...] = (15, 30, 60, 120, 300)

# Persisted record schema version
SCHEMA_VERSION = 1

# Response constants
API_KEY_REQUIRED = "API key is required"
INVALID_API_KEY = "Invalid API key"
NO_ACTIVE_SESSION = "No active session"


class Settings(BaseSettings):
    """Application settings with validation and default values."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DEBUG: bool = False

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True
    LOG_FILE: str = "logs/blogcore.log"
    PRODUCTION_FRONTEND_URL: str | None = None

    # Database Configuration
    DATABASE_URL: str = "sqlite+aiosqlite:///./blogcore.db"
    DATABASE_ECHO: bool = False
    POOL_SIZE: int = 5
    MAX_OVERFLOW: int = 10
    POOL_TIMEOUT: int = 30  # seconds
    POOL_RECYCLE: int = 1800  # seconds

    # Password hashing cost
    PASSWORD_SECURITY_LEVEL: Literal["low", "medium", "high"] = "medium"

    # Autosave defaults (used until an editor stores its own preference)
    AUTOSAVE_ENABLED: bool = True
    AUTOSAVE_INTERVAL_SECONDS: int = 30

    # First-run bootstrap
    BOOTSTRAP_DEFAULT_ADMIN: bool = True
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_EMAIL: str = "admin@example.com"
    DEFAULT_ADMIN_PASSWORD: SecretStr = SecretStr("admin123")


settings = Settings()


@dataclass(frozen=True)
class Argon2Config:
    """Argon2id cost parameters for one security level."""

    memory_cost: int  # KiB
    time_cost: int
    parallelism: int


CONFIG_MAP: dict[str, Argon2Config] = {
    "low": Argon2Config(memory_cost=8 * 1024, time_cost=1, parallelism=1),
    "medium": Argon2Config(memory_cost=64 * 1024, time_cost=2, parallelism=2),
    "high": Argon2Config(memory_cost=512 * 1024, time_cost=3, parallelism=4),
}


def pool_kwargs(database_url: str) -> dict[str, Any]:
    """
    Return engine pooling arguments suitable for the database URL.

    In-memory SQLite needs a single shared connection, so it gets a
    ``StaticPool`` instead of the sized queue pool used everywhere else.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        dict[str, Any]: Keyword arguments for ``create_async_engine``
    """
    if database_url.startswith("sqlite") and (
        ":memory:" in database_url or database_url.rstrip("/").endswith("sqlite+aiosqlite:")
    ):
        from sqlalchemy.pool import StaticPool  # noqa: PLC0415

        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}

    return {
        "pool_size": settings.POOL_SIZE,
        "max_overflow": settings.MAX_OVERFLOW,
        "pool_timeout": settings.POOL_TIMEOUT,
        "pool_recycle": settings.POOL_RECYCLE,
        "pool_pre_ping": True,
    }
