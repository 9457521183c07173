"""Custom exception hierarchy for the MOL Campaign Tracker.

All exceptions inherit from MolTrackerError so that the session boundary can
catch a single type and turn it into an OperationResult. Nothing in this
package is fatal: these exceptions are raised by internal helpers (storage,
deserialization, catalog loading) and never escape a public operation.

Example:
    >>> from mol_tracker.core.exceptions import ValidationError
    >>> raise ValidationError("Invalid character file format", field_name="skills")
"""

from __future__ import annotations

from typing import Any


class MolTrackerError(Exception):
    """Base exception for all tracker errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(MolTrackerError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(MolTrackerError):
    """Raised when imported or user-supplied data is malformed.

    A character file missing its ``name`` or ``skills`` field is the
    canonical case: the import is aborted and the live document untouched.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


# =============================================================================
# Storage & Catalog Exceptions
# =============================================================================


class StorageFailure(MolTrackerError):
    """Raised when durable storage cannot be read or written.

    Covers the SQLite gateway, exported files and the catalog fetch.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize storage failure with operation context.

        Args:
            message: Human-readable error description.
            operation: The storage operation that failed (save, load, ...).
            path: File or database path involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if operation:
            combined_details["operation"] = operation
        if path:
            combined_details["path"] = path
        super().__init__(message, details=combined_details)


class CatalogError(StorageFailure):
    """Raised when the skill catalog cannot be fetched or parsed."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, operation="load_catalog", path=source, details=details)


__all__ = [
    "MolTrackerError",
    "ConfigurationError",
    "ValidationError",
    "StorageFailure",
    "CatalogError",
]
