"""FastAPI router for a recipe's merged and scaled ingredient list."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query, Response, status

from recipe_ratio.errors import ValidationFailure
from recipe_ratio.schemas.ingredients import (
    CustomIngredient,
    CustomIngredientCreate,
    RecipeIngredientsResponse,
)
from recipe_ratio.services.dependencies import (
    get_custom_ingredients_service,
    get_recipe_session,
)
from recipe_ratio.services.ingredients import CustomIngredientsService
from recipe_ratio.services.recipe_session import RecipeSession
from recipe_ratio.settings import AppSettings, get_settings

router = APIRouter()


@router.get("/{recipe_id}/ingredients", response_model=RecipeIngredientsResponse)
async def get_recipe_ingredients(
    recipe_id: int = Path(..., ge=1),
    servings: str = Query("1", description="Whole number of servings to scale to."),
    refresh: bool = Query(False, description="Bypass the cached recipe snapshot."),
    checked: list[int] = Query(
        [], description="Positions in the merged list the user has checked off."
    ),
    session: RecipeSession = Depends(get_recipe_session),
    settings: AppSettings = Depends(get_settings),
) -> RecipeIngredientsResponse:
    """Merge base and custom ingredients and scale them to ``servings``."""

    if not session.set_servings(servings):
        raise ValidationFailure(
            session.servings.error or "Invalid servings", field="servings", value=servings
        )

    snapshot = await session.load(recipe_id, refresh=refresh)
    if snapshot is None:
        raise session.fetch_error

    for position in sorted(set(checked)):
        if not 0 <= position < len(session.merged):
            raise ValidationFailure(
                f"Checked position {position} is outside the ingredient list",
                field="checked",
                value=position,
            )
        session.toggle_checked(position)

    favorites = session.favorites
    return RecipeIngredientsResponse(
        recipe_id=recipe_id,
        name=snapshot.name,
        servings=session.servings.servings,
        is_favorite=None if favorites.is_error else favorites.is_favorite,
        date_favorited=favorites.date_favorited,
        checklist_enabled=settings.checklist_enabled,
        can_start_cooking=session.can_start_cooking(
            gating_enabled=settings.checklist_enabled
        ),
        ingredients=session.scaled_ingredients(),
    )


@router.get("/{recipe_id}/custom-ingredients", response_model=list[CustomIngredient])
async def list_custom_ingredients(
    recipe_id: int = Path(..., ge=1),
    service: CustomIngredientsService = Depends(get_custom_ingredients_service),
) -> list[CustomIngredient]:
    return await service.fetch_custom_ingredients(recipe_id)


@router.post(
    "/{recipe_id}/custom-ingredients",
    response_model=CustomIngredient,
    status_code=status.HTTP_201_CREATED,
)
async def add_custom_ingredient(
    payload: CustomIngredientCreate,
    recipe_id: int = Path(..., ge=1),
    service: CustomIngredientsService = Depends(get_custom_ingredients_service),
) -> CustomIngredient:
    return await service.insert_custom_ingredient(recipe_id, payload)


@router.delete(
    "/{recipe_id}/custom-ingredients/{ingredient_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_custom_ingredient(
    recipe_id: int = Path(..., ge=1),
    ingredient_id: int = Path(..., ge=1),
    service: CustomIngredientsService = Depends(get_custom_ingredients_service),
) -> Response:
    """Delete a custom ingredient; unknown identifiers are accepted silently."""

    await service.delete_custom_ingredient(ingredient_id, recipe_id=recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
