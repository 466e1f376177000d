"""Tests for the transactional store wrapper over the local SQLite file."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from recipe_ratio.db.connection import create_engine, create_session_factory
from recipe_ratio.db.models import CustomIngredientRow, FavoriteRecipe
from recipe_ratio.db.store import PersistentStore
from recipe_ratio.errors import StoreReadError, StoreWriteError
from tests.support import BASE_TIME


@pytest.mark.asyncio
async def test_insert_then_read_one_round_trips(store: PersistentStore) -> None:
    await store.insert(
        FavoriteRecipe(recipe_id=3, name="Soup", date_favorited=BASE_TIME)
    )

    row = await store.read_one(FavoriteRecipe, FavoriteRecipe.recipe_id == 3)

    assert row is not None
    assert row.name == "Soup"
    assert await store.read_one(FavoriteRecipe, FavoriteRecipe.recipe_id == 4) is None


@pytest.mark.asyncio
async def test_insert_populates_autoincrement_identifier(store: PersistentStore) -> None:
    first = await store.insert(
        CustomIngredientRow(recipe_id=1, name="Salt", quantity=1, unit="tsp")
    )
    second = await store.insert(
        CustomIngredientRow(recipe_id=1, name="Oil", quantity=2, unit="tbsp")
    )

    assert first.id is not None
    assert second.id > first.id


@pytest.mark.asyncio
async def test_deleted_identifiers_are_not_reused(store: PersistentStore) -> None:
    row = await store.insert(
        CustomIngredientRow(recipe_id=1, name="Salt", quantity=1, unit="tsp")
    )
    await store.delete(CustomIngredientRow, CustomIngredientRow.id == row.id)

    replacement = await store.insert(
        CustomIngredientRow(recipe_id=1, name="Pepper", quantity=1, unit="tsp")
    )

    assert replacement.id > row.id


@pytest.mark.asyncio
async def test_duplicate_primary_key_raises_write_error(store: PersistentStore) -> None:
    await store.insert(FavoriteRecipe(recipe_id=5, name="Stew", date_favorited=BASE_TIME))

    with pytest.raises(StoreWriteError) as excinfo:
        await store.insert(
            FavoriteRecipe(recipe_id=5, name="Stew again", date_favorited=BASE_TIME)
        )

    assert excinfo.value.table == "favorites"
    rows = await store.read_all(FavoriteRecipe)
    assert [row.name for row in rows] == ["Stew"]


@pytest.mark.asyncio
async def test_read_range_applies_order_limit_and_offset(store: PersistentStore) -> None:
    for recipe_id in range(1, 6):
        await store.insert(
            FavoriteRecipe(recipe_id=recipe_id, name=f"R{recipe_id}", date_favorited=BASE_TIME)
        )

    rows = await store.read_range(
        FavoriteRecipe,
        order_by=(FavoriteRecipe.recipe_id.desc(),),
        limit=2,
        offset=1,
    )

    assert [row.recipe_id for row in rows] == [4, 3]


@pytest.mark.asyncio
async def test_delete_reports_rowcount(store: PersistentStore) -> None:
    await store.insert(FavoriteRecipe(recipe_id=8, name="Tart", date_favorited=BASE_TIME))

    assert await store.delete(FavoriteRecipe, FavoriteRecipe.recipe_id == 8) == 1
    assert await store.delete(FavoriteRecipe, FavoriteRecipe.recipe_id == 8) == 0


@pytest.mark.asyncio
async def test_missing_tables_surface_as_read_error(database_url: str) -> None:
    """A store whose schema was never created reports typed read failures."""
    engine = create_engine(database_url)
    factory: async_sessionmaker[AsyncSession] = create_session_factory(engine)
    bare_store = PersistentStore(factory)
    try:
        with pytest.raises(StoreReadError) as excinfo:
            await bare_store.read_all(FavoriteRecipe)
    finally:
        await engine.dispose()

    assert excinfo.value.operation == "read_all"
