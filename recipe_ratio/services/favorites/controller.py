"""Favorite status reconciliation for the recipe currently on screen.

The controller keeps a derived view (``status``/``date_favorited``) of the
``favorites`` row for the bound recipe snapshot.  That view only changes after
the store confirms an outcome: there is no optimistic flip that would need to be
rolled back.  Results belonging to a recipe that is no longer bound are
discarded (last identifier wins), and a status read that was overtaken by a
newer check or a confirmed write is dropped so it cannot overwrite fresher
state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from enum import Enum

from recipe_ratio.errors import StoreReadError, StoreWriteError
from recipe_ratio.schemas.recipe import RecipeSnapshot
from recipe_ratio.services.favorites.persistence import FavoritesPersistence

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


class FavoriteStatus(str, Enum):
    UNKNOWN = "unknown"
    CHECKING = "checking"
    FAVORITED = "favorited"
    NOT_FAVORITED = "not_favorited"
    ERROR = "error"


class FavoriteController:
    """Answer "is this recipe favorited?" and perform add/remove against the store."""

    def __init__(
        self,
        persistence: FavoritesPersistence,
        *,
        notify: Notifier | None = None,
    ) -> None:
        self._persistence = persistence
        self._notify = notify
        self._snapshot: RecipeSnapshot | None = None
        self._active_id: int | None = None
        # Bumped by every check and confirmed write; a read that started under
        # an older generation is superseded.
        self._generation = 0

        self.status = FavoriteStatus.UNKNOWN
        self.date_favorited: datetime | None = None
        self.error: str | None = None

    @property
    def snapshot(self) -> RecipeSnapshot | None:
        return self._snapshot

    @property
    def is_favorite(self) -> bool:
        return self.status is FavoriteStatus.FAVORITED

    @property
    def is_loading(self) -> bool:
        return self.status is FavoriteStatus.CHECKING

    @property
    def is_error(self) -> bool:
        return self.error is not None

    async def bind(self, snapshot: RecipeSnapshot | None) -> None:
        """Attach ``snapshot`` and re-check status when its identifier changed."""

        new_id = snapshot.id if snapshot is not None and snapshot.has_identifier else None
        needs_check = new_id != self._active_id or self.status in (
            FavoriteStatus.UNKNOWN,
            FavoriteStatus.ERROR,
        )
        self._snapshot = snapshot
        if needs_check:
            await self.check_status(new_id)

    async def check_status(self, recipe_id: int | None = None) -> None:
        """Read the favorite row for ``recipe_id`` and publish the result."""

        self._active_id = recipe_id or None
        self._generation += 1
        generation = self._generation
        self.error = None
        if not recipe_id:
            self._publish(FavoriteStatus.NOT_FAVORITED, None)
            return

        self.status = FavoriteStatus.CHECKING
        try:
            record = await self._persistence.get(recipe_id)
        except StoreReadError as exc:
            if self._is_superseded(recipe_id, generation):
                return
            logger.error("Error checking favorite status for recipe %s: %s", recipe_id, exc)
            self.status = FavoriteStatus.ERROR
            self.error = f"Failed to check favorite status:\n\n{exc}"
            self._emit("Error checking favorite status")
            return

        if self._is_superseded(recipe_id, generation):
            logger.debug("Discarding superseded favorite status for recipe %s", recipe_id)
            return
        if record is None:
            self._publish(FavoriteStatus.NOT_FAVORITED, None)
        else:
            self._publish(FavoriteStatus.FAVORITED, record.date_favorited)

    async def add(self) -> None:
        """Favorite the bound snapshot; state flips only after a confirmed write."""

        snapshot = self._snapshot
        if snapshot is None or not snapshot.has_identifier:
            return

        recipe_id = snapshot.id
        try:
            record = await self._persistence.add_snapshot(snapshot)
        except (StoreReadError, StoreWriteError) as exc:
            logger.error("Error saving recipe %s to favorites: %s", recipe_id, exc)
            if not self._is_stale(recipe_id):
                self.error = f'FAILED TO SAVE "{snapshot.name}" TO FAVORITES:\n\n{exc}'
            self._emit("Failed to save favorite")
            return

        self._generation += 1
        self._emit(f"Added '{snapshot.name}' to Favorites")
        if not self._is_stale(recipe_id):
            self.error = None
            self._publish(FavoriteStatus.FAVORITED, record.date_favorited)

    async def remove(self) -> None:
        """Unfavorite the bound snapshot. Removing a missing row is a no-op."""

        snapshot = self._snapshot
        if snapshot is None or not snapshot.has_identifier:
            return

        recipe_id = snapshot.id
        try:
            await self._persistence.remove(recipe_id)
        except StoreWriteError as exc:
            logger.error("Error removing recipe %s from favorites: %s", recipe_id, exc)
            if not self._is_stale(recipe_id):
                self.error = "Failed to remove favorite"
            self._emit("Error removing from favorites")
            return

        self._generation += 1
        self._emit(f"Removed '{snapshot.name}' from Favorites")
        if not self._is_stale(recipe_id):
            self.error = None
            self._publish(FavoriteStatus.NOT_FAVORITED, None)

    async def toggle(self) -> None:
        if self.is_favorite:
            await self.remove()
        else:
            await self.add()

    def _is_stale(self, recipe_id: int | None) -> bool:
        return recipe_id != self._active_id

    def _is_superseded(self, recipe_id: int | None, generation: int) -> bool:
        return generation != self._generation or self._is_stale(recipe_id)

    def _publish(self, status: FavoriteStatus, date_favorited: datetime | None) -> None:
        self.status = status
        self.date_favorited = date_favorited

    def _emit(self, message: str) -> None:
        if self._notify is not None:
            self._notify(message)
