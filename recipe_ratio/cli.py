"""
Command line entry point for maintaining the local Recipe Ratio store.

Usage:
    recipe-ratio init-db
    recipe-ratio export-db --dest ./backups
    recipe-ratio favorites --limit 25
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from recipe_ratio.db.connection import (
    dispose_engine,
    get_engine,
    get_session_factory,
    init_models,
)
from recipe_ratio.db.export import export_database
from recipe_ratio.db.store import PersistentStore
from recipe_ratio.errors import StoreError
from recipe_ratio.schemas.favorites import FavoriteRecord
from recipe_ratio.services.favorites import FavoritesPager, FavoritesPersistence
from recipe_ratio.settings import get_settings

console = Console()
logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", is_flag=True, help="Log at DEBUG level.")
def main(verbose: bool) -> None:
    """Maintain the local favorites and custom-ingredients store."""
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level_numeric,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@main.command("init-db")
def init_db() -> None:
    """Create the favorites and custom_ingredients tables."""
    asyncio.run(_init_db_async())
    console.print(
        f"[green]✅ Local store ready:[/green] {get_settings().resolved_database_url}"
    )


async def _init_db_async() -> None:
    try:
        await init_models(get_engine())
    finally:
        await dispose_engine()


@main.command("export-db")
@click.option(
    "--dest",
    "destination",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory receiving the timestamped copy.",
)
def export_db(destination: Path) -> None:
    """Copy the local store to recipe_ratio_<MMDDYY>_<HHMMSS>.db."""
    try:
        target = export_database(destination)
    except (FileNotFoundError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc
    console.print(f"[green]✅ Exported database to[/green] {target}")


@main.command("favorites")
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many favorites (default: list all).",
)
def list_favorites(limit: int | None) -> None:
    """Print favorites newest first, reading them in batches."""
    try:
        records = asyncio.run(_collect_favorites(limit))
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc

    if not records:
        console.print("[yellow]No favorites saved yet.[/yellow]")
        return

    table = Table("Recipe ID", "Name", "Favorited (UTC)", title="Favorites")
    for record in records:
        table.add_row(
            str(record.recipe_id),
            record.name,
            record.date_favorited.strftime("%Y-%m-%d %H:%M:%S"),
        )
    console.print(table)


async def _collect_favorites(limit: int | None) -> list[FavoriteRecord]:
    settings = get_settings()
    try:
        await init_models(get_engine())
        pager = FavoritesPager(
            FavoritesPersistence(PersistentStore(get_session_factory())),
            batch_size=settings.favorites_batch_size,
        )
        await pager.reset()
        while pager.error is None and pager.has_more:
            if limit is not None and len(pager.items) >= limit:
                break
            await pager.load_more()
        if pager.error is not None:
            raise pager.error
        items = pager.items
    finally:
        await dispose_engine()

    logger.debug("Read %s favorites in batches of %s", len(items), pager.batch_size)
    return items if limit is None else items[:limit]


if __name__ == "__main__":
    main()
