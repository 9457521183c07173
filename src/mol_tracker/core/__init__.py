"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        MolTrackerError: Base exception for all application errors.
        ValidationError: Malformed import or user input.
        StorageFailure: Durable storage or catalog fetch failure.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        configure_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
"""

from __future__ import annotations

from mol_tracker.core.config import (
    AutoSaveSettings,
    CatalogSettings,
    HistorySettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from mol_tracker.core.exceptions import (
    CatalogError,
    ConfigurationError,
    MolTrackerError,
    StorageFailure,
    ValidationError,
)
from mol_tracker.core.logging import (
    configure_from_settings,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "MolTrackerError",
    "ConfigurationError",
    "ValidationError",
    "StorageFailure",
    "CatalogError",
    # Configuration
    "Settings",
    "CatalogSettings",
    "StorageSettings",
    "HistorySettings",
    "AutoSaveSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
]
