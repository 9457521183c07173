"""MOL Campaign Tracker - character sheet core.

Tracks one player character for a tabletop campaign: attributes, a tree of
learned skills with XP and levels, derived mana, bounded undo, and durable
storage of the current character plus named save slots.

Example:
    >>> from mol_tracker import CharacterSession, configure_from_settings
    >>>
    >>> configure_from_settings()
    >>> session = CharacterSession()
    >>> session.start()
    >>> session.edit_field("name", "Aldric")
    >>> session.add_skill("Swords", "weapon")
    >>> session.mana
    100

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas (character, skills, catalog, results).
    engine: Skill tree rules, browsing, undo history and the session.
    storage: JSON serialization, SQLite slots and file export.
    ingestion: Skill catalog loading.
"""

from __future__ import annotations

# Core
from mol_tracker.core.config import Settings, get_settings
from mol_tracker.core.exceptions import MolTrackerError, StorageFailure, ValidationError
from mol_tracker.core.logging import configure_from_settings, configure_logging, get_logger

# Models
from mol_tracker.models import (
    CharacterDocument,
    ErrorKind,
    OperationResult,
    Skill,
    SkillCatalog,
    SkillType,
)

# Engine
from mol_tracker.engine import CharacterSession, HistoryLog

# Ingestion
from mol_tracker.ingestion import load_bundled_catalog, load_catalog


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "MolTrackerError",
    "StorageFailure",
    "ValidationError",
    "Settings",
    "get_settings",
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    # Models
    "CharacterDocument",
    "ErrorKind",
    "OperationResult",
    "Skill",
    "SkillCatalog",
    "SkillType",
    # Engine
    "CharacterSession",
    "HistoryLog",
    # Ingestion
    "load_catalog",
    "load_bundled_catalog",
]
