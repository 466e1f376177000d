"""Snapshot the local SQLite store into a timestamped file for sharing or backup."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from datetime import datetime
from pathlib import Path

from recipe_ratio.db.connection import database_file_path

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "recipe_ratio"


def export_file_name(now: datetime | None = None) -> str:
    """Return ``recipe_ratio_<MMDDYY>_<HHMMSS>.db`` for ``now``."""

    now = now or datetime.now()
    return f"{EXPORT_PREFIX}_{now:%m%d%y}_{now:%H%M%S}.db"


def export_database(
    destination: Path,
    *,
    database_url: str | None = None,
    now: datetime | None = None,
) -> Path:
    """Write a consistent snapshot of the configured database into ``destination``.

    The copy goes through the SQLite online backup API rather than a file copy.

    Raises ``FileNotFoundError`` when the store has not been created yet and
    ``ValueError`` for in-memory databases, which have nothing to copy.
    """

    source = database_file_path(database_url)
    if source is None:
        raise ValueError("In-memory databases cannot be exported")
    if not source.exists():
        raise FileNotFoundError(f"Database file not found: {source}")

    destination.mkdir(parents=True, exist_ok=True)
    target = destination / export_file_name(now)
    with closing(sqlite3.connect(source)) as src, closing(sqlite3.connect(target)) as dst:
        src.backup(dst)
    logger.info("Exported %s to %s", source, target)
    return target
