"""Combine a snapshot's base ingredients with locally stored custom ones."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from recipe_ratio.schemas.ingredients import CustomIngredient, MergedIngredient
from recipe_ratio.schemas.recipe import RecipeSnapshot

logger = logging.getLogger(__name__)


def merge_ingredients(
    snapshot: RecipeSnapshot | None,
    custom_rows: Iterable[CustomIngredient],
) -> list[MergedIngredient]:
    """Return base ingredients (by snapshot position) followed by custom rows.

    The store does not enforce the custom rows' recipe foreign key, so rows
    belonging to another recipe are dropped here.  Each group keeps its input
    order, making the result deterministic for the same snapshot and rows.
    """

    if snapshot is None:
        return []

    merged = [
        MergedIngredient(
            source_id=position,
            is_custom=False,
            name=ingredient.name,
            quantity=ingredient.quantity,
            unit=ingredient.unit,
        )
        for position, ingredient in enumerate(snapshot.ingredients)
    ]

    seen_ids: set[int] = set()
    for row in custom_rows:
        if row.recipe_id != snapshot.id:
            logger.warning(
                "Ignoring custom ingredient %s owned by recipe %s while merging recipe %s",
                row.id,
                row.recipe_id,
                snapshot.id,
            )
            continue
        if row.id in seen_ids:
            raise ValueError(f"Duplicate custom ingredient id {row.id}")
        seen_ids.add(row.id)
        merged.append(
            MergedIngredient(
                source_id=row.id,
                is_custom=True,
                name=row.name,
                quantity=row.quantity,
                unit=row.unit,
            )
        )
    return merged
