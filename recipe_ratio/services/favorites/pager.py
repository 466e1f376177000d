"""Cursor-based incremental loader over the ``favorites`` table."""

from __future__ import annotations

import asyncio
import logging

from recipe_ratio.errors import StoreReadError
from recipe_ratio.schemas.favorites import FavoriteRecord
from recipe_ratio.services.favorites.persistence import FavoritesPersistence
from recipe_ratio.settings import DEFAULT_FAVORITES_BATCH_SIZE

logger = logging.getLogger(__name__)


class FavoritesPager:
    """Monotonically growing, newest-first view of the favorites list.

    ``reset`` and ``load_more`` share one lock, so at most one batch read is in
    flight and cursor updates never interleave.  A ``load_more`` arriving while
    a read is pending is dropped; a ``reset`` waits for it and then starts over.

    Each ``load_more`` after the first batch starts one row early and re-reads
    the last item already held.  If that anchor row moved, rows were inserted
    or deleted ahead of the cursor and the pager is marked stale; nothing is
    skipped either way and ``refresh`` realigns it.
    """

    def __init__(
        self,
        persistence: FavoritesPersistence,
        *,
        batch_size: int = DEFAULT_FAVORITES_BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._persistence = persistence
        self._batch_size = batch_size
        self._lock = asyncio.Lock()

        self.items: list[FavoriteRecord] = []
        self.cursor = 0
        self.has_more = True
        self.is_loading = False
        self.is_fetching_next_page = False
        self.is_stale = False
        self.error: StoreReadError | None = None

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    async def reset(self) -> None:
        """Discard accumulated results and read the first batch again."""

        async with self._lock:
            self.is_loading = True
            self.error = None
            self.items = []
            self.cursor = 0
            self.has_more = True
            self.is_stale = False
            try:
                rows = await self._persistence.list_page(limit=self._batch_size, offset=0)
            except StoreReadError as exc:
                logger.warning("Favorites reset failed: %s", exc)
                self.error = exc
                return
            finally:
                self.is_loading = False

            self.items = list(rows)
            self._advance(len(rows))

    async def refresh(self) -> None:
        """Alias for :meth:`reset` bound to manual refresh and re-focus."""

        await self.reset()

    async def load_more(self) -> None:
        """Append the next batch unless exhausted or a read is already pending."""

        if self._lock.locked():
            logger.debug("Dropping load_more while a favorites read is in flight")
            return
        if not self.has_more:
            return

        async with self._lock:
            self.is_fetching_next_page = True
            self.error = None
            anchored = bool(self.cursor and self.items)
            offset = self.cursor - 1 if anchored else self.cursor
            limit = self._batch_size + 1 if anchored else self._batch_size
            try:
                rows = await self._persistence.list_page(limit=limit, offset=offset)
            except StoreReadError as exc:
                logger.warning("Loading favorites at offset %s failed: %s", self.cursor, exc)
                self.error = exc
                return
            finally:
                self.is_fetching_next_page = False

            body = rows
            shifted = False
            if anchored:
                if rows and rows[0].recipe_id == self.items[-1].recipe_id:
                    body = rows[1:]
                else:
                    shifted = True

            seen = {item.recipe_id for item in self.items}
            fresh = [row for row in body if row.recipe_id not in seen]
            if shifted or len(fresh) != len(body):
                # Rows moved under the cursor since the previous batch.
                self.is_stale = True
                logger.warning(
                    "Stale favorites cursor at offset %s: skipped %s duplicate row(s)",
                    self.cursor,
                    len(body) - len(fresh),
                )
            self.items.extend(fresh)
            self._advance(max(len(rows) - 1, 0) if anchored else len(rows))

    def _advance(self, returned: int) -> None:
        self.cursor += returned
        self.has_more = returned == self._batch_size
