"""Async database engine and session management."""

import asyncio

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.infrastructure.config.settings import get_settings


def to_async_url(database_url: str) -> str:
    """Switch a plain postgresql:// URL to the asyncpg driver."""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return database_url


class AsyncDatabase:
    """Async database manager.

    Engines are cached per event loop: each ``asyncio.run`` of a CLI command
    gets its own engine, and an engine is never used from a loop other than
    the one that created it.
    """

    def __init__(self, database_url: str | None = None):
        self._async_url = to_async_url(
            database_url or get_settings().get_database_url()
        )
        self._engines: dict[int, AsyncEngine] = {}
        self._session_makers: dict[int, async_sessionmaker[AsyncSession]] = {}

    def _get_engine_and_session_maker(
        self,
    ) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
        try:
            loop_id = id(asyncio.get_running_loop())
        except RuntimeError:
            # No running loop
            loop_id = 0

        if loop_id not in self._engines:
            engine = create_async_engine(self._async_url, echo=False)
            self._engines[loop_id] = engine
            self._session_makers[loop_id] = async_sessionmaker(
                engine, class_=AsyncSession, expire_on_commit=False
            )

        return self._engines[loop_id], self._session_makers[loop_id]

    @property
    def async_session_maker(self) -> async_sessionmaker[AsyncSession]:
        _, session_maker = self._get_engine_and_session_maker()
        return session_maker


async_db = AsyncDatabase()
