"""Pydantic V2 schemas for the MOL Campaign Tracker.

Submodules:
    enums: SkillType and ErrorKind
    skill: Learned skills and id generation
    character: The character document (the single source of truth)
    catalog: Read-only skill reference data
    progression: XP thresholds
    results: OperationResult and XPGain outcome objects

Example:
    >>> from mol_tracker.models import CharacterDocument, Skill, SkillType
    >>> doc = CharacterDocument(name="Aldric")
    >>> doc.skills.append(Skill.create("Shaping", SkillType.DOMAIN, magical=True))
    >>> doc.compute_mana()
    100
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from mol_tracker.models.enums import ErrorKind, SkillType

# =============================================================================
# Character
# =============================================================================
from mol_tracker.models.skill import Skill, generate_skill_id
from mol_tracker.models.character import CharacterDocument, parse_health
from mol_tracker.models.progression import get_xp_progress, threshold_for_level

# =============================================================================
# Catalog
# =============================================================================
from mol_tracker.models.catalog import (
    CatalogEntry,
    DomainDef,
    SkillCatalog,
    SkillDef,
    SpellDef,
    TechniqueDef,
    WeaponDef,
)

# =============================================================================
# Results
# =============================================================================
from mol_tracker.models.results import OperationResult, XPGain


__all__ = [
    # Enumerations
    "SkillType",
    "ErrorKind",
    # Character
    "Skill",
    "generate_skill_id",
    "CharacterDocument",
    "parse_health",
    "threshold_for_level",
    "get_xp_progress",
    # Catalog
    "CatalogEntry",
    "DomainDef",
    "SpellDef",
    "WeaponDef",
    "TechniqueDef",
    "SkillDef",
    "SkillCatalog",
    # Results
    "OperationResult",
    "XPGain",
]
