"""FastAPI client fixtures wired to the per-test store and a fake catalog."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from recipe_ratio.db.store import PersistentStore
from recipe_ratio.main import app
from recipe_ratio.services.dependencies import get_recipe_client, get_store
from recipe_ratio.services.remote import RecipeClient

CatalogHandler = Callable[[httpx.Request], httpx.Response]


class FakeCatalog:
    """Serves ``{"recipe": [...]}`` payloads for registered recipe ids."""

    def __init__(self) -> None:
        self.recipes: dict[int, dict[str, object]] = {}
        self.status_code: int | None = None
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.error is not None:
            raise self.error
        if self.status_code is not None:
            return httpx.Response(self.status_code)
        recipe_id = int(request.url.path.rsplit("/", 1)[-1])
        recipe = self.recipes.get(recipe_id)
        return httpx.Response(200, json={"recipe": [recipe] if recipe else []})


@pytest.fixture
def catalog() -> FakeCatalog:
    catalog = FakeCatalog()
    catalog.recipes[7] = {
        "id": 7,
        "name": "Pancakes",
        "ingredients": [
            {"name": "Flour", "quantity": 1.5, "unit": "cup"},
            {"name": "Egg", "quantity": 2, "unit": ""},
        ],
    }
    return catalog


@pytest_asyncio.fixture
async def api_client(store: PersistentStore, catalog: FakeCatalog) -> AsyncIterator[AsyncClient]:
    """Create an ``AsyncClient`` wired up with deterministic dependency overrides."""

    def _override_store() -> PersistentStore:
        return store

    async def _override_recipe_client() -> AsyncIterator[RecipeClient]:
        client = RecipeClient(
            base_url="https://recipes.example/", transport=httpx.MockTransport(catalog)
        )
        try:
            yield client
        finally:
            await client.aclose()

    app.dependency_overrides.clear()
    app.dependency_overrides[get_store] = _override_store
    app.dependency_overrides[get_recipe_client] = _override_recipe_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client

    app.dependency_overrides.clear()
