"""Shared fixtures backed by a file-based SQLite store per test."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from recipe_ratio.cache import local_cache_clear_all
from recipe_ratio.db.connection import create_engine, create_session_factory, init_models
from recipe_ratio.db.store import PersistentStore
from recipe_ratio.services.favorites import FavoritesPersistence
from recipe_ratio.services.ingredients import (
    CustomIngredientsPersistence,
    CustomIngredientsService,
)


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'store' / 'recipe_ratio.db'}"


@pytest_asyncio.fixture
async def engine(database_url: str) -> AsyncIterator[AsyncEngine]:
    """Provide an engine with freshly created tables."""
    engine = create_engine(database_url)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
def store(session_factory: async_sessionmaker[AsyncSession]) -> PersistentStore:
    return PersistentStore(session_factory)


@pytest.fixture
def favorites_persistence(store: PersistentStore) -> FavoritesPersistence:
    return FavoritesPersistence(store)


@pytest.fixture
def ingredients_service(store: PersistentStore) -> CustomIngredientsService:
    return CustomIngredientsService(CustomIngredientsPersistence(store))


@pytest_asyncio.fixture
async def clean_local_cache() -> AsyncIterator[None]:
    await local_cache_clear_all()
    yield
    await local_cache_clear_all()
