"""FastAPI router exposing the locally stored favorites list."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query, Response, status

from recipe_ratio.schemas.favorites import (
    FavoriteCreate,
    FavoriteRecord,
    FavoritesPage,
    FavoriteStatusResponse,
)
from recipe_ratio.services.dependencies import get_favorites_persistence
from recipe_ratio.services.favorites import FavoritesPersistence
from recipe_ratio.settings import DEFAULT_FAVORITES_BATCH_SIZE

router = APIRouter()


@router.get("", response_model=FavoritesPage)
async def list_favorites(
    limit: int = Query(DEFAULT_FAVORITES_BATCH_SIZE, ge=1, le=100),
    offset: int = Query(0, ge=0),
    persistence: FavoritesPersistence = Depends(get_favorites_persistence),
) -> FavoritesPage:
    """Return one batch of favorites, most recently favorited first."""

    items = await persistence.list_page(limit=limit, offset=offset)
    return FavoritesPage(
        items=items,
        offset=offset,
        next_offset=offset + len(items),
        has_more=len(items) == limit,
    )


@router.get("/{recipe_id}", response_model=FavoriteStatusResponse)
async def get_favorite_status(
    recipe_id: int = Path(..., ge=1),
    persistence: FavoritesPersistence = Depends(get_favorites_persistence),
) -> FavoriteStatusResponse:
    record = await persistence.get(recipe_id)
    return FavoriteStatusResponse(
        recipe_id=recipe_id,
        is_favorite=record is not None,
        date_favorited=record.date_favorited if record else None,
    )


@router.put("/{recipe_id}", response_model=FavoriteRecord)
async def add_favorite(
    payload: FavoriteCreate,
    recipe_id: int = Path(..., ge=1),
    persistence: FavoritesPersistence = Depends(get_favorites_persistence),
) -> FavoriteRecord:
    """Favorite a recipe. Repeating the call returns the existing record."""

    return await persistence.add(
        recipe_id=recipe_id,
        name=payload.name,
        description=payload.description,
        cover_image=payload.cover_image,
    )


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(
    recipe_id: int = Path(..., ge=1),
    persistence: FavoritesPersistence = Depends(get_favorites_persistence),
) -> Response:
    """Unfavorite a recipe; unknown recipes are accepted silently."""

    await persistence.remove(recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
