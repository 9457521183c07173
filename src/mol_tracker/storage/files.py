"""Character file export and import."""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path

from mol_tracker.core.constants import EXPORT_FILENAME_SUFFIX
from mol_tracker.core.exceptions import StorageFailure, ValidationError
from mol_tracker.core.logging import get_logger
from mol_tracker.models.character import CharacterDocument
from mol_tracker.storage.serialization import serialize


logger = get_logger(__name__)


def export_filename(character_name: str) -> str:
    """File name for an exported character, e.g. ``sir_aldric_character.json``."""
    return re.sub(r"[^a-z0-9]", "_", character_name, flags=re.IGNORECASE).lower() + EXPORT_FILENAME_SUFFIX


def export_character(
    document: CharacterDocument,
    directory: str | Path,
    *,
    exported_at: datetime | None = None,
) -> Path:
    """Write a character to ``directory`` as versioned JSON.

    Raises:
        ValidationError: The character has no name.
        StorageFailure: The file cannot be written.
    """
    if not document.name or not document.name.strip():
        raise ValidationError(
            "Please enter a character name before saving.",
            field_name="name",
        )

    target = Path(directory) / export_filename(document.name)
    text = serialize(document, timestamp_field="exportedAt", timestamp=exported_at)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise StorageFailure(
            f"Failed to write character file: {exc}",
            operation="export",
            path=str(target),
        ) from exc

    logger.info("Exported character", character=document.name, path=str(target))
    return target


def read_character_file(path: str | Path) -> str:
    """Read a character file's text.

    Raises:
        StorageFailure: The file cannot be read.
    """
    source = Path(path)
    try:
        return source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise StorageFailure(
            f"Failed to read character file: {exc}",
            operation="import",
            path=str(source),
        ) from exc


__all__ = [
    "export_filename",
    "export_character",
    "read_character_file",
]
