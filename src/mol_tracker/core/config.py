"""Configuration management for the MOL Campaign Tracker.

Settings are loaded with pydantic-settings from environment variables and an
optional ``.env`` file. Every variable uses the ``MOL_TRACKER_`` prefix.

Example:
    >>> from mol_tracker.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.history.max_size
    50

Environment Variables:
    MOL_TRACKER_CATALOG_SOURCE: Path or http(s) URL of the skill catalog
    MOL_TRACKER_DATABASE_PATH: SQLite file holding the current character and slots
    MOL_TRACKER_EXPORT_PATH: Directory receiving exported character files
    MOL_TRACKER_HISTORY_MAX_SIZE: Undo snapshots kept
    MOL_TRACKER_AUTOSAVE_INTERVAL_SECONDS: Seconds between periodic saves
    MOL_TRACKER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    MOL_TRACKER_JSON_LOGS: Render log events as JSON lines
    MOL_TRACKER_DEBUG: Force DEBUG logging
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mol_tracker.core.constants import DEFAULT_HISTORY_SIZE, MAX_SAVED_SLOTS
from mol_tracker.core.exceptions import ConfigurationError


BUNDLED_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "catalog.json"


class CatalogSettings(BaseSettings):
    """Where the skill/spell reference dataset comes from.

    Attributes:
        source: Filesystem path or http(s) URL of the catalog JSON.
        timeout_seconds: Request timeout when the source is a URL.
        max_retries: Attempts made against a URL before falling back.
    """

    model_config = SettingsConfigDict(
        env_prefix="MOL_TRACKER_CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    source: str = Field(
        default=str(BUNDLED_CATALOG_PATH),
        description="Catalog file path or URL",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Catalog fetch timeout",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Catalog fetch attempts",
    )


class StorageSettings(BaseSettings):
    """Durable storage locations and limits.

    Attributes:
        database_path: SQLite file holding the current character and named slots.
        export_path: Directory that receives exported character files.
        max_saved_slots: Named slots kept before the oldest is evicted.
    """

    model_config = SettingsConfigDict(
        env_prefix="MOL_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/mol_tracker.db"),
        description="Path to SQLite database",
    )
    export_path: Path = Field(
        default=Path("data/exports"),
        description="Directory for exported character files",
    )
    max_saved_slots: int = Field(
        default=MAX_SAVED_SLOTS,
        ge=1,
        le=100,
        description="Named save slots kept",
    )

    @field_validator("export_path", mode="after")
    @classmethod
    def ensure_directory_exists(cls, value: Path) -> Path:
        """Create the export directory if it is missing."""
        value.mkdir(parents=True, exist_ok=True)
        return value


class HistorySettings(BaseSettings):
    """Undo history configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MOL_TRACKER_HISTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_size: int = Field(
        default=DEFAULT_HISTORY_SIZE,
        ge=1,
        le=1000,
        description="Undo snapshots kept",
    )


class AutoSaveSettings(BaseSettings):
    """Periodic save configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MOL_TRACKER_AUTOSAVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Enable periodic saves")
    interval_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Seconds between periodic saves",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Render logs as JSON lines.
        catalog: Catalog source settings.
        storage: Durable storage settings.
        history: Undo history settings.
        autosave: Periodic save settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="MOL_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="MOL Campaign Tracker",
        description="Application name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON",
    )

    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)
    autosave: AutoSaveSettings = Field(default_factory=AutoSaveSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "BUNDLED_CATALOG_PATH",
    "CatalogSettings",
    "StorageSettings",
    "HistorySettings",
    "AutoSaveSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
