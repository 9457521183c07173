"""Application-wide constants for the MOL Campaign Tracker.

Rules constants for experience and mana, plus persistence limits and
format identifiers shared by the storage layer.
"""

from __future__ import annotations

# =============================================================================
# Character Defaults
# =============================================================================

DEFAULT_HEALTH = 100
"""Default current and maximum health; also the fallback for unparsable edits."""

UNNAMED_CHARACTER = "Unnamed Character"
"""Slot name used when saving a character whose name is blank."""

# =============================================================================
# Experience
# =============================================================================

XP_PER_LEVEL_STEP = 100
"""XP threshold multiplier: threshold = max(1, |level| + 1) * 100."""

# =============================================================================
# Mana
# =============================================================================

SHAPING_DOMAIN_NAME = "Shaping"
"""The domain whose level drives the mana pool."""

BASE_MANA = 100
MANA_PER_SHAPING_LEVEL = 50
MANA_PER_NEGATIVE_SHAPING_LEVEL = 25
MIN_MANA = 50

# =============================================================================
# History & Persistence
# =============================================================================

DEFAULT_HISTORY_SIZE = 50
"""Number of undo snapshots kept before the oldest is evicted."""

MAX_SAVED_SLOTS = 10
"""Named save slots kept before the oldest is evicted."""

FORMAT_VERSION = "1.0"
"""Version stamped into serialized character documents."""

EXPORT_FILENAME_SUFFIX = "_character.json"

# =============================================================================
# Browser
# =============================================================================

DESCRIPTION_PREVIEW_LENGTH = 100
"""Characters of description shown in skill browser listings."""

ALL_WEAPONS = "all"
"""applicableWeapons marker for techniques usable with any weapon."""


__all__ = [
    "DEFAULT_HEALTH",
    "UNNAMED_CHARACTER",
    "XP_PER_LEVEL_STEP",
    "SHAPING_DOMAIN_NAME",
    "BASE_MANA",
    "MANA_PER_SHAPING_LEVEL",
    "MANA_PER_NEGATIVE_SHAPING_LEVEL",
    "MIN_MANA",
    "DEFAULT_HISTORY_SIZE",
    "MAX_SAVED_SLOTS",
    "FORMAT_VERSION",
    "EXPORT_FILENAME_SUFFIX",
    "DESCRIPTION_PREVIEW_LENGTH",
    "ALL_WEAPONS",
]
