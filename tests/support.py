"""Test doubles shared across the store, service, and API suites."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any

from recipe_ratio.db.store import PersistentStore
from recipe_ratio.errors import StoreReadError, StoreWriteError
from recipe_ratio.schemas.favorites import FavoriteRecord
from recipe_ratio.schemas.recipe import Ingredient, RecipeSnapshot
from recipe_ratio.services.favorites import FavoritesPersistence

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_snapshot(recipe_id: int | None = 7, name: str = "Pancakes", **overrides: Any) -> RecipeSnapshot:
    """Build a snapshot with two base ingredients unless overridden."""

    values: dict[str, Any] = {
        "id": recipe_id,
        "name": name,
        "description": f"{name} description",
        "cover_image": f"https://img.example/{recipe_id}.jpg",
        "ingredients": (
            Ingredient(name="Flour", quantity=1.5, unit="cup"),
            Ingredient(name="Egg", quantity=2, unit=""),
        ),
    }
    values.update(overrides)
    return RecipeSnapshot(**values)


async def seed_favorites(persistence: FavoritesPersistence, count: int) -> None:
    """Insert ``count`` favorites; recipe ``count`` ends up the newest."""

    for recipe_id in range(1, count + 1):
        await persistence.add(
            recipe_id=recipe_id,
            name=f"Recipe {recipe_id}",
            description=None,
            cover_image=None,
            date_favorited=BASE_TIME + timedelta(minutes=recipe_id),
        )


class FailingStore(PersistentStore):
    """Store whose reads and/or writes always fail."""

    def __init__(self, *, fail_reads: bool = True, fail_writes: bool = True) -> None:
        super().__init__(session_factory=None)  # type: ignore[arg-type]
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    async def read_range(self, model, *, order_by, limit, offset):
        if self.fail_reads:
            raise StoreReadError("read_range", model.__tablename__, "disk I/O error")
        return []

    async def read_one(self, model, *criteria):
        if self.fail_reads:
            raise StoreReadError("read_one", model.__tablename__, "disk I/O error")
        return None

    async def read_all(self, model, *criteria, order_by=()):
        if self.fail_reads:
            raise StoreReadError("read_all", model.__tablename__, "disk I/O error")
        return []

    async def insert(self, record):
        if self.fail_writes:
            raise StoreWriteError("insert", record.__tablename__, "database is locked")
        return record

    async def delete(self, model, *criteria):
        if self.fail_writes:
            raise StoreWriteError("delete", model.__tablename__, "database is locked")
        return 0


class GatedFavoritesPersistence:
    """Delegates to real persistence but holds each page read until released."""

    def __init__(self, inner: FavoritesPersistence) -> None:
        self._inner = inner
        self.gate = asyncio.Event()
        self.started = asyncio.Event()
        self.calls: list[tuple[int, int]] = []

    async def list_page(self, *, limit: int, offset: int) -> list[FavoriteRecord]:
        self.calls.append((limit, offset))
        self.started.set()
        await self.gate.wait()
        return await self._inner.list_page(limit=limit, offset=offset)


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)
