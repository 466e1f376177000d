"""Pydantic schemas shared by the services and the HTTP surface."""

from recipe_ratio.schemas.favorites import (  # noqa: F401
    FavoriteCreate,
    FavoriteRecord,
    FavoritesPage,
    FavoriteStatusResponse,
)
from recipe_ratio.schemas.ingredients import (  # noqa: F401
    CustomIngredient,
    CustomIngredientCreate,
    MergedIngredient,
    RecipeIngredientsResponse,
    ScaledIngredient,
)
from recipe_ratio.schemas.recipe import Ingredient, RecipeSnapshot  # noqa: F401
