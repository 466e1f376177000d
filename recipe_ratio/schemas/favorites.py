"""Pydantic schemas for locally persisted favorites."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from recipe_ratio.db.models import as_utc


class FavoriteRecord(BaseModel):
    """Read model for a ``favorites`` row."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    recipe_id: int = Field(..., gt=0)
    name: str
    description: str | None = None
    cover_image: str | None = None
    date_favorited: datetime

    @field_validator("date_favorited")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return as_utc(value)


class FavoriteCreate(BaseModel):
    """Recipe details supplied when a recipe is favorited over HTTP."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2048)
    cover_image: str | None = Field(None, max_length=1024)


class FavoriteStatusResponse(BaseModel):
    """Answer to "is this recipe favorited?"."""

    recipe_id: int
    is_favorite: bool
    date_favorited: datetime | None = None


class FavoritesPage(BaseModel):
    """One pagination batch of the favorites list."""

    items: list[FavoriteRecord]
    offset: int = Field(..., ge=0)
    next_offset: int = Field(..., ge=0)
    has_more: bool
