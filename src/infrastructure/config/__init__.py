"""Configuration: settings and database sessions."""

from src.infrastructure.config.async_database import (
    AsyncDatabase,
    async_db,
)
from src.infrastructure.config.settings import (
    ENV_FILE_PATH,
    Settings,
    find_env_file,
    get_settings,
    reload_settings,
    settings,
)


__all__ = [
    # Settings
    "Settings",
    "settings",
    "get_settings",
    "reload_settings",
    "find_env_file",
    "ENV_FILE_PATH",
    # Async database
    "AsyncDatabase",
    "async_db",
]
