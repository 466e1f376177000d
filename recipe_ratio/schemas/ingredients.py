"""Schemas for user-authored ingredients and the merged ingredient list."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class CustomIngredientCreate(BaseModel):
    """Form payload for a custom ingredient, quantities given per single serving."""

    name: str = Field(..., max_length=255)
    quantity: float = Field(..., gt=0, allow_inf_nan=False)
    unit: str = Field(..., max_length=64)

    @field_validator("name", "unit")
    @classmethod
    def _strip_required_text(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("must not be blank once whitespace is removed")
        return cleaned


class CustomIngredient(BaseModel):
    """Read model for a ``custom_ingredients`` row."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    recipe_id: int
    name: str
    quantity: float
    unit: str


class MergedIngredient(BaseModel):
    """Entry of the merged list used for display, checklisting, and scaling.

    ``source_id`` is the position within the snapshot for base ingredients and
    the store-assigned id for custom ones.  The two ranges overlap, so ``key``
    (prefixed by origin) is the identifier that is unique within a merged list.
    """

    model_config = ConfigDict(frozen=True)

    source_id: int
    is_custom: bool
    name: str
    quantity: float
    unit: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def key(self) -> str:
        origin = "custom" if self.is_custom else "base"
        return f"{origin}:{self.source_id}"


class ScaledIngredient(BaseModel):
    """Merged ingredient rendered for the current serving count."""

    position: int = Field(..., ge=0)
    key: str
    source_id: int
    is_custom: bool
    name: str
    quantity: float
    display_quantity: str
    unit: str
    checked: bool = False


class RecipeIngredientsResponse(BaseModel):
    """Working ingredient list of a recipe screen."""

    recipe_id: int
    name: str
    servings: int
    is_favorite: bool | None = Field(
        None, description="``None`` when the favorite status could not be read."
    )
    date_favorited: datetime | None = None
    checklist_enabled: bool
    can_start_cooking: bool = Field(
        ..., description="Whether every ingredient is checked, or gating is disabled."
    )
    ingredients: list[ScaledIngredient]
