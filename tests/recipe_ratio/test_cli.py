"""Tests for the ``recipe-ratio`` maintenance commands."""

from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path

import pytest
from click.testing import CliRunner

from recipe_ratio.cli import main
from recipe_ratio.db.connection import create_engine, create_session_factory
from recipe_ratio.db.store import PersistentStore
from recipe_ratio.services.favorites import FavoritesPersistence
from tests.support import seed_favorites


@pytest.fixture
def cli_database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    url = f"sqlite+aiosqlite:///{tmp_path / 'cli' / 'recipe_ratio.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    return url


async def _seed(url: str, count: int) -> None:
    engine = create_engine(url)
    try:
        await seed_favorites(FavoritesPersistence(PersistentStore(create_session_factory(engine))), count)
    finally:
        await engine.dispose()


def test_init_db_creates_store(cli_database: str, tmp_path: Path) -> None:
    result = CliRunner().invoke(main, ["init-db"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "cli" / "recipe_ratio.db").exists()


def test_favorites_on_empty_store(cli_database: str) -> None:
    result = CliRunner().invoke(main, ["favorites"])

    assert result.exit_code == 0, result.output
    assert "No favorites saved yet." in result.output


def test_favorites_lists_newest_first_with_limit(cli_database: str) -> None:
    runner = CliRunner()
    runner.invoke(main, ["init-db"])
    asyncio.run(_seed(cli_database, 12))

    result = runner.invoke(main, ["favorites", "--limit", "3"])

    assert result.exit_code == 0, result.output
    assert "Recipe 12" in result.output
    assert "Recipe 10" in result.output
    assert "Recipe 9" not in result.output


def test_export_db_writes_timestamped_copy(cli_database: str, tmp_path: Path) -> None:
    runner = CliRunner()
    runner.invoke(main, ["init-db"])
    destination = tmp_path / "exports"

    result = runner.invoke(main, ["export-db", "--dest", str(destination)])

    assert result.exit_code == 0, result.output
    exported = list(destination.glob("recipe_ratio_*.db"))
    assert len(exported) == 1
    datetime.strptime(exported[0].name, "recipe_ratio_%m%d%y_%H%M%S.db")


def test_export_db_without_store_fails(cli_database: str, tmp_path: Path) -> None:
    result = CliRunner().invoke(main, ["export-db", "--dest", str(tmp_path / "out")])

    assert result.exit_code != 0
    assert "Database file not found" in result.output
