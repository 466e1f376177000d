"""SQLAlchemy ORM models for the locally persisted favorites and ingredients.

Both tables live entirely on the device.  ``favorites`` mirrors the subset of a
remote recipe snapshot required to render the favorites list offline, while
``custom_ingredients`` holds user-authored additions that survive refetches of
the recipe they belong to.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow():
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # Naive values are taken as UTC; SQLite returns every stored timestamp naive.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
    pass


class FavoriteRecipe(Base):
    """A recipe the user bookmarked, keyed by its remote identifier."""

    __tablename__ = "favorites"
    __table_args__ = (
        Index("ix_favorites_date_favorited", "date_favorited", "recipe_id"),
    )

    recipe_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
        doc=(
            "Identifier assigned by the remote catalog.  Using it as the"
            " primary key caps every recipe at a single favorite row."
        ),
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    cover_image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    date_favorited: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )


class CustomIngredientRow(Base):
    """User-authored ingredient attached to a remote recipe."""

    __tablename__ = "custom_ingredients"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc=(
            "SQLite AUTOINCREMENT guarantees an issued identifier is never"
            " handed out again, even after the row is deleted."
        ),
    )
    recipe_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(64), nullable=False)


__all__ = ["Base", "CustomIngredientRow", "FavoriteRecipe", "as_utc", "utcnow"]
