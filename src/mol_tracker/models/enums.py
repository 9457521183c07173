"""Enumerations shared across the tracker models."""

from __future__ import annotations

from enum import StrEnum


class SkillType(StrEnum):
    """Kind of learned skill.

    Values match the strings stored in character files.
    """

    DOMAIN = "domain"
    """Top-level category that can own spells and techniques."""

    SPELL = "spell"
    WEAPON = "weapon"
    COMBAT = "combat"
    SKILL = "skill"
    """Generic, non-magical skill."""

    ALCHEMY_SKILL = "alchemy-skill"

    @classmethod
    def normalize(cls, value: str) -> str:
        """Map legacy aliases onto a stored value.

        The custom-skill form and older files use ``"non-magical"`` for the
        generic skill type.
        """
        if value == "non-magical":
            return cls.SKILL.value
        return value


class ErrorKind(StrEnum):
    """Failure categories reported by core operations."""

    NOT_FOUND = "not_found"
    DUPLICATE_SKILL = "duplicate_skill"
    VALIDATION_ERROR = "validation_error"
    STORAGE_FAILURE = "storage_failure"
    EMPTY_HISTORY = "empty_history"


__all__ = [
    "SkillType",
    "ErrorKind",
]
