"""Structured logging for the MOL Campaign Tracker.

Every event carries key/value context (skill ids, levels, storage paths)
rather than a pre-formatted string. Interactive runs get the console
renderer; ``MOL_TRACKER_JSON_LOGS`` switches to JSON lines.

Example:
    >>> from mol_tracker.core.logging import configure_from_settings, get_logger
    >>> configure_from_settings()
    >>> get_logger(__name__).info("Skill added", skill="Shaping", level=0)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

from mol_tracker.core.config import Settings, get_settings


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


def _app_stamp(app_name: str) -> Processor:
    def stamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict["app"] = app_name
        return event_dict

    return stamp


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    app_name: str = "mol_tracker",
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Emit JSON lines instead of the console renderer.
        app_name: Value stamped on every event under ``app``.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _app_stamp(app_name),
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=numeric_level,
        stream=sys.stdout,
        force=True,
    )
    # requests/urllib3 only matter for the catalog fetch
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def configure_from_settings(settings: Settings | None = None) -> None:
    """Apply the logging fields of ``settings`` (the cached settings if None).

    Debug mode forces the DEBUG level.
    """
    settings = settings or get_settings()

    configure_logging(
        level="DEBUG" if settings.debug else settings.log_level,
        json_format=settings.json_logs,
        app_name=settings.app_name,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Return a structlog logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
]
