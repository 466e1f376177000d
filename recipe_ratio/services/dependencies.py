"""FastAPI dependency wiring for the cache-layer services.

Routers only ever receive services; the :class:`PersistentStore` handle stays
inside this module.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends

from recipe_ratio.cache import CacheClient, SnapshotCache, get_cache_client
from recipe_ratio.db.connection import get_session_factory
from recipe_ratio.db.store import PersistentStore
from recipe_ratio.services.favorites import FavoriteController, FavoritesPersistence
from recipe_ratio.services.ingredients import (
    CustomIngredientsPersistence,
    CustomIngredientsService,
)
from recipe_ratio.services.recipe_session import RecipeSession
from recipe_ratio.services.remote import RecipeClient
from recipe_ratio.settings import AppSettings, get_settings


def get_store() -> PersistentStore:
    return PersistentStore(get_session_factory())


def get_favorites_persistence(
    store: PersistentStore = Depends(get_store),
) -> FavoritesPersistence:
    return FavoritesPersistence(store)


def get_custom_ingredients_service(
    store: PersistentStore = Depends(get_store),
) -> CustomIngredientsService:
    return CustomIngredientsService(CustomIngredientsPersistence(store))


async def get_recipe_client(
    cache_client: CacheClient = Depends(get_cache_client),
    settings: AppSettings = Depends(get_settings),
) -> AsyncIterator[RecipeClient]:
    """Yield a catalog client for the request and close it afterwards."""

    client = RecipeClient(
        base_url=settings.recipe_api_base_url,
        timeout_seconds=settings.recipe_api_timeout_seconds,
        cache=SnapshotCache(cache_client, ttl_seconds=settings.snapshot_cache_ttl_seconds),
    )
    try:
        yield client
    finally:
        await client.aclose()


def get_recipe_session(
    favorites: FavoritesPersistence = Depends(get_favorites_persistence),
    ingredients: CustomIngredientsService = Depends(get_custom_ingredients_service),
    client: RecipeClient = Depends(get_recipe_client),
    settings: AppSettings = Depends(get_settings),
) -> RecipeSession:
    return RecipeSession(
        favorites=FavoriteController(favorites),
        ingredients=ingredients,
        client=client,
        decimal_places=settings.quantity_decimal_places,
    )


__all__ = [
    "get_custom_ingredients_service",
    "get_favorites_persistence",
    "get_recipe_client",
    "get_recipe_session",
    "get_store",
]
