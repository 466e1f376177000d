"""Durable mutations of user-authored ingredients.

Mutations never patch an in-memory list.  After the store confirms a write the
caller-supplied refresh coroutine runs, so the merged list is always rebuilt
from what the store actually holds.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pydantic import ValidationError

from recipe_ratio.errors import ValidationFailure
from recipe_ratio.schemas.ingredients import CustomIngredient, CustomIngredientCreate
from recipe_ratio.services.ingredients.persistence import CustomIngredientsPersistence

logger = logging.getLogger(__name__)

RefreshCallback = Callable[[], Awaitable[None]]


def build_custom_ingredient(
    data: CustomIngredientCreate | Mapping[str, Any],
) -> CustomIngredientCreate:
    """Validate raw form data, raising :class:`ValidationFailure` on rejection."""

    if isinstance(data, CustomIngredientCreate):
        return data
    try:
        return CustomIngredientCreate.model_validate(dict(data))
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ValidationFailure(
            f"Invalid ingredient {field}: {first['msg']}",
            field=field,
            value=first.get("input"),
        ) from exc


class CustomIngredientsService:
    def __init__(self, persistence: CustomIngredientsPersistence) -> None:
        self._persistence = persistence

    async def fetch_custom_ingredients(self, recipe_id: int) -> list[CustomIngredient]:
        if not recipe_id:
            return []
        return await self._persistence.list_for_recipe(recipe_id)

    async def insert_custom_ingredient(
        self,
        recipe_id: int | None,
        data: CustomIngredientCreate | Mapping[str, Any],
        refresh: RefreshCallback | None = None,
    ) -> CustomIngredient:
        """Persist a custom ingredient for ``recipe_id`` then run ``refresh``."""

        if not recipe_id:
            raise ValidationFailure(
                "A recipe identifier is required", field="recipe_id", value=recipe_id
            )
        payload = build_custom_ingredient(data)

        ingredient = await self._persistence.insert(recipe_id, payload)
        logger.info(
            "Saved custom ingredient %s (%s) for recipe %s",
            ingredient.id,
            ingredient.name,
            recipe_id,
        )
        if refresh is not None:
            await refresh()
        return ingredient

    async def delete_custom_ingredient(
        self,
        ingredient_id: int,
        refresh: RefreshCallback | None = None,
        *,
        recipe_id: int | None = None,
    ) -> bool:
        """Delete by identifier then run ``refresh``; unknown ids are not an error.

        ``recipe_id`` optionally scopes the delete to one recipe's rows.
        """

        removed = await self._persistence.delete(ingredient_id, recipe_id=recipe_id)
        if removed:
            logger.info("Deleted custom ingredient %s", ingredient_id)
        else:
            logger.debug("Custom ingredient %s was already absent", ingredient_id)
        if refresh is not None:
            await refresh()
        return bool(removed)
