"""Centralized configuration management for the Recipe Ratio cache layer."""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables defined in a local .env file before instantiating the
# settings singleton so every consumer of :mod:`recipe_ratio.settings` observes
# the same values regardless of import order.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_SQLITE_DATABASE_URL = "sqlite+aiosqlite:///./data/recipe_ratio.db"
SQLITE_ASYNC_PREFIX = "sqlite+aiosqlite://"
SQLITE_SYNC_PREFIX = "sqlite://"
DEFAULT_RECIPE_API_BASE_URL = "http://localhost:8080/"
DEFAULT_RECIPE_API_TIMEOUT_SECONDS = 5.0
DEFAULT_FAVORITES_BATCH_SIZE = 10
DEFAULT_SNAPSHOT_CACHE_TTL_SECONDS = 300
DEFAULT_REDIS_URL = "redis://localhost:6379/0"
DEFAULT_LOG_LEVEL = "INFO"


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Core components never read this object themselves.  The API and CLI layers
    resolve it once and hand the relevant values (batch size, gating flag,
    decimal places) to the services as explicit arguments.
    """

    _explicit_redis_url: bool = PrivateAttr(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    def __init__(self, **values: object) -> None:
        """Capture explicit overrides prior to delegating to ``BaseSettings``."""

        normalized_keys = {str(key).lower() for key in values}
        super().__init__(**values)
        self._explicit_redis_url = "redis_url" in normalized_keys
        redis_env = os.getenv("REDIS_URL")
        if redis_env is not None and redis_env.strip():
            self._explicit_redis_url = True

    database_url: str = Field(
        default=DEFAULT_SQLITE_DATABASE_URL,
        alias="DATABASE_URL",
        description=(
            "SQLAlchemy URL of the local store. Plain ``sqlite://`` URLs are"
            " upgraded to the aiosqlite driver at runtime."
        ),
    )
    recipe_api_base_url: str = Field(
        default=DEFAULT_RECIPE_API_BASE_URL,
        alias="RECIPE_API_BASE_URL",
        description="Base URL of the remote recipe catalog.",
    )
    recipe_api_timeout_seconds: float = Field(
        default=DEFAULT_RECIPE_API_TIMEOUT_SECONDS,
        alias="RECIPE_API_TIMEOUT_SECONDS",
        gt=0,
        description="Fixed timeout applied to every remote recipe fetch.",
    )
    favorites_batch_size: int = Field(
        default=DEFAULT_FAVORITES_BATCH_SIZE,
        alias="FAVORITES_BATCH_SIZE",
        ge=1,
        description="Number of favorites rows read per pagination batch.",
    )
    checklist_enabled: bool = Field(
        default=True,
        alias="CHECKLIST_ENABLED",
        description=(
            "When enabled every ingredient must be checked before the"
            " directions can be opened."
        ),
    )
    quantity_decimal_places: int = Field(
        default=2,
        alias="QUANTITY_DECIMAL_PLACES",
        ge=0,
        le=6,
        description="Maximum decimal places rendered for scaled quantities.",
    )
    snapshot_cache_ttl_seconds: int = Field(
        default=DEFAULT_SNAPSHOT_CACHE_TTL_SECONDS,
        alias="SNAPSHOT_CACHE_TTL_SECONDS",
        ge=0,
        description="Freshness window for cached remote recipe snapshots.",
    )
    redis_url: str = Field(
        default=DEFAULT_REDIS_URL,
        alias="REDIS_URL",
        description=(
            "Redis connection string used for the snapshot cache. When the"
            " server is unreachable an in-process cache is used instead."
        ),
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="LOG_LEVEL",
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )

    @field_validator("recipe_api_base_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        """Relative request paths only resolve correctly against a trailing slash."""

        value = value.strip()
        if not value.endswith("/"):
            value = f"{value}/"
        return value

    @property
    def resolved_database_url(self) -> str:
        """Return the async-compatible database URL."""

        url = self.database_url.strip()
        if not url:
            return DEFAULT_SQLITE_DATABASE_URL

        if url.startswith(SQLITE_ASYNC_PREFIX):
            return url

        if url.startswith(SQLITE_SYNC_PREFIX):
            return url.replace(SQLITE_SYNC_PREFIX, SQLITE_ASYNC_PREFIX, 1)

        raise RuntimeError(
            f"Expected an SQLite connection string for the local store, received: {url}"
        )

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset optional configuration."""

        warnings: list[str] = []

        if not self._explicit_redis_url and self.redis_url == DEFAULT_REDIS_URL:
            warnings.append(
                "REDIS_URL is not set - snapshot caching will use the in-memory "
                "fallback when no local Redis server is running"
            )

        if self.recipe_api_base_url == DEFAULT_RECIPE_API_BASE_URL:
            warnings.append(
                "RECIPE_API_BASE_URL is not set - recipe snapshots are fetched "
                "from localhost"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()
