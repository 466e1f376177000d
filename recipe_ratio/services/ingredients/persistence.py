"""Store-oriented helpers for the ``custom_ingredients`` table."""

from __future__ import annotations

from recipe_ratio.db.models import CustomIngredientRow
from recipe_ratio.db.store import PersistentStore
from recipe_ratio.schemas.ingredients import CustomIngredient, CustomIngredientCreate


class CustomIngredientsPersistence:
    def __init__(self, store: PersistentStore) -> None:
        self._store = store

    async def list_for_recipe(self, recipe_id: int) -> list[CustomIngredient]:
        """Return every custom row for ``recipe_id`` in insertion order."""

        rows = await self._store.read_all(
            CustomIngredientRow,
            CustomIngredientRow.recipe_id == recipe_id,
            order_by=(CustomIngredientRow.id,),
        )
        return [CustomIngredient.model_validate(row) for row in rows]

    async def insert(
        self, recipe_id: int, payload: CustomIngredientCreate
    ) -> CustomIngredient:
        row = CustomIngredientRow(
            recipe_id=recipe_id,
            name=payload.name,
            quantity=payload.quantity,
            unit=payload.unit,
        )
        await self._store.insert(row)
        return CustomIngredient.model_validate(row)

    async def delete(self, ingredient_id: int, *, recipe_id: int | None = None) -> int:
        criteria = [CustomIngredientRow.id == ingredient_id]
        if recipe_id is not None:
            criteria.append(CustomIngredientRow.recipe_id == recipe_id)
        return await self._store.delete(CustomIngredientRow, *criteria)
