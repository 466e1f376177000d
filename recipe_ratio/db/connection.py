from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from recipe_ratio.db.models import Base
from recipe_ratio.settings import get_settings

logger = logging.getLogger(__name__)


def get_database_url() -> str:
    """Return the aiosqlite database URL configured for the local store.

    Accessing the value through one helper keeps URL normalisation in
    :class:`recipe_ratio.settings.AppSettings` and gives every caller the same
    error message when the configuration points at an unsupported engine.
    """

    return get_settings().resolved_database_url


def database_file_path(url: str | None = None) -> Path | None:
    """Return the on-disk SQLite file for ``url`` or ``None`` for memory DBs."""

    database = make_url(url or get_database_url()).database
    if not database or database == ":memory:":
        return None
    return Path(database)


def _ensure_parent_directory(url: str) -> None:
    path = database_file_path(url)
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)


def create_engine(url: str | None = None) -> AsyncEngine:
    """Create the async SQLAlchemy engine backing the local store."""

    resolved_url = url or get_database_url()
    _ensure_parent_directory(resolved_url)
    return create_async_engine(resolved_url, future=True, echo=False)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def init_models(engine: AsyncEngine) -> None:
    """Create the ``favorites`` and ``custom_ingredients`` tables when missing."""

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    logger.info("Local store schema is ready")


# Global engine/session instances shared by the API and CLI entry points
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Get or create the global engine instance."""
    global _engine
    if _engine is None:
        _engine = create_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Lazily create a session factory bound to the shared engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = create_session_factory(get_engine())
    return _session_factory


async def dispose_engine() -> None:
    """Dispose the shared engine so file handles are released on shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
