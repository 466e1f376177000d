"""Pydantic models describing recipe snapshots handed over by the remote catalog."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Ingredient(BaseModel):
    """Base ingredient quantity for a single serving."""

    model_config = ConfigDict(frozen=True)

    name: str
    quantity: float = Field(..., description="Unscaled quantity for one serving.")
    unit: str = Field("", description="Free-text measurement unit.")


class RecipeSnapshot(BaseModel):
    """Immutable, point-in-time recipe record fetched from the catalog."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | None = Field(
        None, description="Catalog identifier. ``None`` or ``0`` means unidentified."
    )
    name: str
    description: str | None = None
    cover_image: str | None = None
    ingredients: tuple[Ingredient, ...] = Field(default_factory=tuple)
    date_created: datetime | None = None

    @property
    def has_identifier(self) -> bool:
        return bool(self.id)
