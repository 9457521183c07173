"""Storage module for tracker persistence.

Provides:
- JSON serialization of character documents (versioned, camelCase keys)
- SQLite storage for the current character and named save slots
- Character file export and import
"""

from mol_tracker.storage.database import Database, SlotRecord
from mol_tracker.storage.files import export_character, export_filename, read_character_file
from mol_tracker.storage.serialization import (
    deserialize,
    load_document,
    parse_payload,
    serialize,
)

__all__ = [
    "Database",
    "SlotRecord",
    "export_character",
    "export_filename",
    "read_character_file",
    "deserialize",
    "load_document",
    "parse_payload",
    "serialize",
]
