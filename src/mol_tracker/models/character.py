"""The character document: the single mutable source of truth.

A CharacterDocument holds the character's free-form attributes and the flat,
ordered list of learned skills. Skill-tree rules live in
``mol_tracker.engine.skill_tree`` as functions over this document.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from mol_tracker.core.constants import (
    BASE_MANA,
    DEFAULT_HEALTH,
    MANA_PER_NEGATIVE_SHAPING_LEVEL,
    MANA_PER_SHAPING_LEVEL,
    MIN_MANA,
    SHAPING_DOMAIN_NAME,
)
from mol_tracker.core.logging import get_logger
from mol_tracker.models.enums import ErrorKind, SkillType
from mol_tracker.models.results import OperationResult
from mol_tracker.models.skill import Skill


if TYPE_CHECKING:
    from mol_tracker.models.catalog import SkillCatalog


logger = get_logger(__name__)


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

HEALTH_FIELDS = frozenset({"current_health", "max_health"})
TEXT_FIELDS = frozenset({"name", "bloodline", "knowledge"})


def parse_health(value: Any) -> int:
    """Coerce a health input to an integer, falling back to the default.

    The leading integer is used, so ``"12.5"`` gives 12 and ``"42 hp"`` gives
    42. Input with no leading digits gives the default.
    """
    if isinstance(value, bool) or value is None:
        return DEFAULT_HEALTH
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else DEFAULT_HEALTH


class CharacterDocument(BaseModel):
    """A player character sheet.

    Attributes:
        name: Character name.
        current_health: Current health. Not clamped to max_health.
        max_health: Maximum health.
        bloodline: Free-text bloodline.
        knowledge: Free-text notes on what the character knows.
        skills: Learned skills in insertion order.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    name: str = Field(default="")
    current_health: int = Field(default=DEFAULT_HEALTH)
    max_health: int = Field(default=DEFAULT_HEALTH)
    bloodline: str = Field(default="")
    knowledge: str = Field(default="")
    skills: list[Skill] = Field(default_factory=list)

    # =========================================================================
    # Lookups
    # =========================================================================

    def get_skill(self, skill_id: str) -> Skill | None:
        """Get a learned skill by id."""
        return next((s for s in self.skills if s.id == skill_id), None)

    def find_skill(self, name: str, skill_type: SkillType | str) -> Skill | None:
        """Get the first learned skill with the given name and type."""
        return next((s for s in self.skills if s.name == name and s.type == skill_type), None)

    def domains(self) -> list[Skill]:
        return [s for s in self.skills if s.is_domain]

    # =========================================================================
    # Derived values
    # =========================================================================

    def compute_mana(self) -> int:
        """Mana pool derived from the Shaping domain's level.

        Positive levels add 50 per level, negative levels subtract 25 per
        level, and the result never drops below 50.
        """
        shaping = self.find_skill(SHAPING_DOMAIN_NAME, SkillType.DOMAIN)
        shaping_level = shaping.level if shaping else 0

        if shaping_level >= 0:
            mana = BASE_MANA + shaping_level * MANA_PER_SHAPING_LEVEL
        else:
            mana = BASE_MANA + shaping_level * MANA_PER_NEGATIVE_SHAPING_LEVEL

        return max(MIN_MANA, mana)

    @property
    def health_percentage(self) -> float:
        """Current health as a percentage of max; may exceed 100."""
        if self.max_health == 0:
            return 0.0
        return self.current_health / self.max_health * 100

    # =========================================================================
    # Edits
    # =========================================================================

    def apply_field_edit(self, field: str, value: Any) -> OperationResult:
        """Assign a character attribute from raw user input.

        Health fields are parsed to integers (100 when unparsable). Field
        names may be given in either snake_case or the camelCase used by
        character files.

        Args:
            field: Attribute to edit.
            value: Raw input value.

        Returns:
            Result carrying the stored value.
        """
        attr = _FIELD_ALIASES.get(field, field)

        if attr in HEALTH_FIELDS:
            coerced: Any = parse_health(value)
        elif attr in TEXT_FIELDS:
            coerced = "" if value is None else str(value)
        else:
            logger.warning("Rejected edit of unknown field", field=field)
            return OperationResult.fail(
                ErrorKind.VALIDATION_ERROR,
                f"Unknown character field: {field}",
            )

        setattr(self, attr, coerced)
        return OperationResult.ok(f"Updated {attr}", value=coerced)

    def initialize_defaults(self, catalog: SkillCatalog) -> list[Skill]:
        """Grant every free catalog domain and spell not yet learned.

        Idempotent: entries already present are skipped.

        Returns:
            The skills that were added.
        """
        from mol_tracker.engine.skill_tree import initialize_defaults

        return initialize_defaults(self, catalog)

    def snapshot(self) -> CharacterDocument:
        """Return a deep, independent copy."""
        return self.model_copy(deep=True)

    def to_payload(self) -> dict[str, Any]:
        """Dump to the camelCase dictionary used by character files."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


_FIELD_ALIASES = {
    "currentHealth": "current_health",
    "maxHealth": "max_health",
}


__all__ = [
    "CharacterDocument",
    "parse_health",
]
