"""Tests for merging snapshot ingredients with custom rows."""

from __future__ import annotations

import pytest

from recipe_ratio.schemas.ingredients import CustomIngredient
from recipe_ratio.services.ingredients import merge_ingredients
from tests.support import make_snapshot


def _custom(ingredient_id: int, recipe_id: int = 7, name: str = "Salt") -> CustomIngredient:
    return CustomIngredient(id=ingredient_id, recipe_id=recipe_id, name=name, quantity=1, unit="tsp")


def test_base_ingredients_precede_custom_rows() -> None:
    merged = merge_ingredients(make_snapshot(), [_custom(4, name="Salt"), _custom(9, name="Sugar")])

    assert [item.name for item in merged] == ["Flour", "Egg", "Salt", "Sugar"]
    assert [item.is_custom for item in merged] == [False, False, True, True]
    assert [item.source_id for item in merged] == [0, 1, 4, 9]


def test_keys_distinguish_overlapping_identifiers() -> None:
    merged = merge_ingredients(make_snapshot(), [_custom(0), _custom(1)])

    keys = [item.key for item in merged]
    assert keys == ["base:0", "base:1", "custom:0", "custom:1"]
    assert len(set(keys)) == len(keys)


def test_missing_snapshot_yields_empty_list() -> None:
    assert merge_ingredients(None, [_custom(1)]) == []


def test_snapshot_without_ingredients_lists_only_custom_rows() -> None:
    merged = merge_ingredients(make_snapshot(ingredients=()), [_custom(3)])

    assert [item.key for item in merged] == ["custom:3"]


def test_rows_for_other_recipes_are_ignored() -> None:
    merged = merge_ingredients(make_snapshot(recipe_id=7), [_custom(1, recipe_id=8)])

    assert all(not item.is_custom for item in merged)


def test_duplicate_custom_identifiers_are_rejected() -> None:
    with pytest.raises(ValueError):
        merge_ingredients(make_snapshot(), [_custom(2), _custom(2)])


def test_merge_is_deterministic() -> None:
    rows = [_custom(5), _custom(6, name="Pepper")]

    assert merge_ingredients(make_snapshot(), rows) == merge_ingredients(make_snapshot(), rows)
