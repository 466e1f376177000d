"""Per-recipe working state composed from the cache-layer components.

A :class:`RecipeSession` is what a recipe screen binds to: it obtains the
remote snapshot, feeds it to :class:`FavoriteController` and the ingredient
merger, and derives checklist and scaled-quantity state from the merged list.
The session defines no implicit triggers; the presentation layer calls
:meth:`load` (or :meth:`refresh_ingredients`) whenever it becomes visible.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from recipe_ratio.errors import RemoteFetchError, StoreError
from recipe_ratio.schemas.ingredients import (
    CustomIngredient,
    CustomIngredientCreate,
    MergedIngredient,
    ScaledIngredient,
)
from recipe_ratio.schemas.recipe import RecipeSnapshot
from recipe_ratio.services.checklist import ChecklistState
from recipe_ratio.services.favorites import FavoriteController, Notifier
from recipe_ratio.services.ingredients import CustomIngredientsService, merge_ingredients
from recipe_ratio.services.quantity import (
    DEFAULT_DECIMAL_PLACES,
    ServingsCounter,
    display_quantity,
    scale_quantity,
)
from recipe_ratio.services.remote import RecipeClient

logger = logging.getLogger(__name__)

CHECK_ALL_MESSAGE = "Check all ingredients to proceed."


class RecipeSession:
    def __init__(
        self,
        *,
        favorites: FavoriteController,
        ingredients: CustomIngredientsService,
        client: RecipeClient | None = None,
        notify: Notifier | None = None,
        decimal_places: int = DEFAULT_DECIMAL_PLACES,
    ) -> None:
        self.favorites = favorites
        self.checklist = ChecklistState()
        self.servings = ServingsCounter()
        self._ingredients = ingredients
        self._client = client
        self._notify = notify
        self._decimal_places = decimal_places

        self.snapshot: RecipeSnapshot | None = None
        self.merged: list[MergedIngredient] = []
        self.fetch_error: RemoteFetchError | None = None
        self.error: str | None = None
        self.is_loading = False

    @property
    def recipe_id(self) -> int | None:
        if self.snapshot is None or not self.snapshot.has_identifier:
            return None
        return self.snapshot.id

    async def load(self, recipe_id: int, *, refresh: bool = False) -> RecipeSnapshot | None:
        """Fetch the snapshot for ``recipe_id`` and bind it.

        A fetch failure is kept on ``fetch_error`` (retry by calling ``load``
        again) and leaves any previously bound snapshot in place.
        """

        if self._client is None:
            raise RuntimeError("RecipeSession.load requires a RecipeClient")

        self.is_loading = True
        self.fetch_error = None
        try:
            snapshot = await self._client.fetch_recipe(recipe_id, refresh=refresh)
        except RemoteFetchError as exc:
            logger.warning("Could not load recipe %s: %s", recipe_id, exc)
            self.fetch_error = exc
            return None
        finally:
            self.is_loading = False

        await self.bind_snapshot(snapshot)
        return snapshot

    async def bind_snapshot(self, snapshot: RecipeSnapshot | None) -> None:
        self.snapshot = snapshot
        await self.favorites.bind(snapshot)
        await self.refresh_ingredients()

    async def refresh_ingredients(self) -> None:
        """Rebuild the merged list from the snapshot and the store's custom rows."""

        snapshot = self.snapshot
        if snapshot is None:
            self.merged = []
            return

        custom_rows: list[CustomIngredient] = []
        if snapshot.has_identifier:
            try:
                custom_rows = await self._ingredients.fetch_custom_ingredients(snapshot.id)
            except StoreError as exc:
                self._fail("Failed to load custom ingredients", exc)
                custom_rows = []

        if snapshot is not self.snapshot:
            # Another recipe was bound while the custom rows were loading.
            return
        self.merged = merge_ingredients(snapshot, custom_rows)

    async def add_custom_ingredient(
        self, data: CustomIngredientCreate | Mapping[str, Any]
    ) -> CustomIngredient | None:
        """Persist a custom ingredient; invalid input raises ``ValidationFailure``."""

        try:
            ingredient = await self._ingredients.insert_custom_ingredient(
                self.recipe_id, data, refresh=self.refresh_ingredients
            )
        except StoreError as exc:
            self._fail("Failed to save ingredient", exc)
            return None
        self.error = None
        self._emit("Ingredient saved")
        return ingredient

    async def delete_custom_ingredient(self, ingredient_id: int) -> bool:
        name = next(
            (
                item.name
                for item in self.merged
                if item.is_custom and item.source_id == ingredient_id
            ),
            None,
        )
        try:
            await self._ingredients.delete_custom_ingredient(
                ingredient_id, refresh=self.refresh_ingredients, recipe_id=self.recipe_id
            )
        except StoreError as exc:
            self._fail("Failed to delete ingredient", exc)
            return False
        self.error = None
        if name is not None:
            self._emit(f"{name} deleted")
        return True

    def toggle_checked(self, position: int) -> bool:
        return self.checklist.toggle(position)

    def set_servings(self, raw: str) -> bool:
        """Apply a servings input; rejected input keeps the last valid quantities."""

        return self.servings.validate_and_set(raw)

    def can_start_cooking(self, *, gating_enabled: bool) -> bool:
        allowed = self.checklist.all_checked(self.merged, gating_enabled=gating_enabled)
        if not allowed:
            self._emit(CHECK_ALL_MESSAGE)
        return allowed

    def scaled_ingredients(self) -> list[ScaledIngredient]:
        servings = self.servings.servings
        return [
            ScaledIngredient(
                position=position,
                key=item.key,
                source_id=item.source_id,
                is_custom=item.is_custom,
                name=item.name,
                quantity=scale_quantity(item.quantity, servings),
                display_quantity=display_quantity(
                    item.quantity, servings, self._decimal_places
                ),
                unit=item.unit,
                checked=self.checklist.is_checked(position),
            )
            for position, item in enumerate(self.merged)
        ]

    def _fail(self, message: str, exc: Exception) -> None:
        logger.error("%s: %s", message, exc)
        self.error = f"{message}:\n\n{exc}"
        self._emit(message)

    def _emit(self, message: str) -> None:
        if self._notify is not None:
            self._notify(message)
