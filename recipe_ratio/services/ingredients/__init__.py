"""Custom ingredient persistence, mutation, and merging helpers."""

from .merger import merge_ingredients
from .persistence import CustomIngredientsPersistence
from .service import CustomIngredientsService, RefreshCallback, build_custom_ingredient

__all__ = [
    "CustomIngredientsPersistence",
    "CustomIngredientsService",
    "RefreshCallback",
    "build_custom_ingredient",
    "merge_ingredients",
]
