"""Store-oriented helpers for the ``favorites`` table."""

from __future__ import annotations

import logging
from datetime import datetime

from recipe_ratio.db.models import FavoriteRecipe, as_utc, utcnow
from recipe_ratio.db.store import PersistentStore
from recipe_ratio.schemas.favorites import FavoriteRecord
from recipe_ratio.schemas.recipe import RecipeSnapshot

logger = logging.getLogger(__name__)

# Most-recently favorited first; ``recipe_id`` breaks ties so batches are stable.
FAVORITES_ORDER = (FavoriteRecipe.date_favorited.desc(), FavoriteRecipe.recipe_id.desc())


class FavoritesPersistence:
    """Encapsulates the store operations required by the favorites domain."""

    def __init__(self, store: PersistentStore) -> None:
        self._store = store

    async def list_page(self, *, limit: int, offset: int) -> list[FavoriteRecord]:
        """Return one batch of favorites, newest first."""

        rows = await self._store.read_range(
            FavoriteRecipe, order_by=FAVORITES_ORDER, limit=limit, offset=offset
        )
        return [FavoriteRecord.model_validate(row) for row in rows]

    async def get(self, recipe_id: int) -> FavoriteRecord | None:
        """Return the favorite row for ``recipe_id`` when present."""

        row = await self._store.read_one(
            FavoriteRecipe, FavoriteRecipe.recipe_id == recipe_id
        )
        if row is None:
            return None
        return FavoriteRecord.model_validate(row)

    async def add(
        self,
        *,
        recipe_id: int,
        name: str,
        description: str | None,
        cover_image: str | None,
        date_favorited: datetime | None = None,
    ) -> FavoriteRecord:
        """Persist a favorite unless one already exists for the recipe.

        The existing row wins, so repeating the call never creates a second
        favorite nor moves the original timestamp.  ``date_favorited`` is
        stored in UTC whatever offset it carries.
        """

        existing = await self.get(recipe_id)
        if existing is not None:
            logger.debug("Recipe %s is already favorited; keeping existing row", recipe_id)
            return existing

        row = FavoriteRecipe(
            recipe_id=recipe_id,
            name=name,
            description=description,
            cover_image=cover_image,
            date_favorited=as_utc(date_favorited or utcnow()),
        )
        await self._store.insert(row)
        logger.info("Added recipe %s to favorites", recipe_id)
        return FavoriteRecord.model_validate(row)

    async def add_snapshot(
        self, snapshot: RecipeSnapshot, *, date_favorited: datetime | None = None
    ) -> FavoriteRecord:
        if not snapshot.has_identifier:
            raise ValueError("Cannot favorite a recipe snapshot without an identifier")
        return await self.add(
            recipe_id=snapshot.id,
            name=snapshot.name,
            description=snapshot.description,
            cover_image=snapshot.cover_image,
            date_favorited=date_favorited,
        )

    async def remove(self, recipe_id: int) -> bool:
        """Delete the favorite row; return ``False`` when nothing was stored."""

        removed = await self._store.delete(
            FavoriteRecipe, FavoriteRecipe.recipe_id == recipe_id
        )
        if removed:
            logger.info("Removed recipe %s from favorites", recipe_id)
        return bool(removed)
