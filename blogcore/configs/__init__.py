from blogcore.configs.settings import (
    API_KEY_REQUIRED,
    AUTOSAVE_PRESETS,
    CONFIG_MAP,
    INVALID_API_KEY,
    LATEST_BLOGS_COUNT,
    NO_ACTIVE_SESSION,
    SCHEMA_VERSION,
    Settings,
    pool_kwargs,
    settings,
)

__all__ = [
    "API_KEY_REQUIRED",
    "AUTOSAVE_PRESETS",
    "CONFIG_MAP",
    "INVALID_API_KEY",
    "LATEST_BLOGS_COUNT",
    "NO_ACTIVE_SESSION",
    "SCHEMA_VERSION",
    "Settings",
    "pool_kwargs",
    "settings",
]
