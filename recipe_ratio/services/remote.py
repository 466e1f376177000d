"""HTTP client for the remote recipe catalog.

The catalog answers ``GET recipe/{id}`` with ``{"recipe": [ {...} ]}``.  Any
failure (transport error, non-2xx status, malformed payload) is reported as
:class:`RemoteFetchError`; exceeding the fixed timeout is the distinguished
:class:`RemoteTimeoutError`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from recipe_ratio.cache import SnapshotCache
from recipe_ratio.errors import RemoteFetchError, RemoteTimeoutError
from recipe_ratio.schemas.recipe import RecipeSnapshot
from recipe_ratio.settings import (
    DEFAULT_RECIPE_API_BASE_URL,
    DEFAULT_RECIPE_API_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


class RecipeClient:
    """Fetch recipe snapshots, consulting :class:`SnapshotCache` first."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_RECIPE_API_BASE_URL,
        timeout_seconds: float = DEFAULT_RECIPE_API_TIMEOUT_SECONDS,
        cache: SnapshotCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._cache = cache
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    async def __aenter__(self) -> RecipeClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def fetch_recipe(self, recipe_id: int, *, refresh: bool = False) -> RecipeSnapshot:
        """Return the snapshot for ``recipe_id``.

        ``refresh`` skips the cached copy (pull-to-refresh) and overwrites it
        with the freshly fetched snapshot.
        """

        if self._cache is not None and not refresh:
            cached = await self._cache.read(recipe_id)
            if cached is not None:
                logger.debug("Snapshot cache hit for recipe %s", recipe_id)
                return cached

        payload = await self._get_json(f"recipe/{recipe_id}", recipe_id)
        snapshot = self._parse_snapshot(payload, recipe_id)

        if self._cache is not None:
            await self._cache.write(snapshot)
        return snapshot

    async def _get_json(self, path: str, recipe_id: int) -> Any:
        try:
            response = await self._http.get(path)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("Recipe %s request timed out: %s", recipe_id, exc)
            raise RemoteTimeoutError(recipe_id, self._timeout_seconds) from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Recipe %s request failed with status %s",
                recipe_id,
                exc.response.status_code,
            )
            raise RemoteFetchError(
                recipe_id, f"HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Recipe %s request failed: %s", recipe_id, exc)
            raise RemoteFetchError(recipe_id, str(exc) or type(exc).__name__) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise RemoteFetchError(recipe_id, "Response body is not valid JSON") from exc

    @staticmethod
    def _parse_snapshot(payload: Any, recipe_id: int) -> RecipeSnapshot:
        try:
            record = payload["recipe"][0]
        except (KeyError, IndexError, TypeError) as exc:
            raise RemoteFetchError(recipe_id, "Recipe not present in response") from exc

        try:
            return RecipeSnapshot.model_validate(record)
        except ValidationError as exc:
            raise RemoteFetchError(
                recipe_id, f"Malformed recipe payload ({exc.error_count()} error(s))"
            ) from exc
