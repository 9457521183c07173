"""Skill catalog reference data.

The catalog is the read-only dataset of everything a character can learn:
domains, spells grouped by domain key, weapon skills, combat techniques and
general skills. It is loaded once at startup (see
``mol_tracker.ingestion.catalog_loader``) and never mutated.

Catalog keys (``"shaping"``, ``"swords"``) are the stable identifiers from the
dataset itself. Name lookups go through indexes built when the catalog is
constructed, so display names are never re-derived into keys.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_camel

from mol_tracker.models.enums import SkillType


class CatalogEntry(BaseModel):
    """Common fields of every catalog definition.

    Wire names are camelCase (``defaultLevel``, ``applicableWeapons``).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    name: str = Field(min_length=1)
    default_level: int = Field(default=0)
    magical: bool = Field(default=False)
    free: bool = Field(default=False, description="Granted to new characters")
    illegal: bool = Field(default=False)
    enhancer: bool = Field(default=False)
    reaction: bool = Field(default=False)
    channeled: bool = Field(default=False)
    negative: bool = Field(default=False)
    description: str = Field(default="")

    # Mechanics
    time: str | None = None
    damage: str | None = None
    range: str | None = None
    applicable_weapons: list[str] | None = None

    @property
    def has_mechanics(self) -> bool:
        return bool(self.time or self.damage or self.range or self.applicable_weapons)


class DomainDef(CatalogEntry):
    """A domain definition. Domains default to magical."""

    magical: bool = Field(default=True)


class SpellDef(CatalogEntry):
    """A spell or alchemy recipe listed under a domain."""

    magical: bool = Field(default=True)


class WeaponDef(CatalogEntry):
    """A weapon proficiency."""


class TechniqueDef(CatalogEntry):
    """A combat technique, optionally restricted to certain weapons."""


class SkillDef(CatalogEntry):
    """A general (usually non-magical) skill."""


class SkillCatalog(BaseModel):
    """The complete reference dataset.

    An empty catalog is valid: browsers render nothing and catalog-backed
    skill additions find no parent domain to materialize.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    domains: dict[str, DomainDef] = Field(default_factory=dict)
    spells: dict[str, list[SpellDef]] = Field(default_factory=dict)
    weapon_skills: dict[str, WeaponDef] = Field(default_factory=dict)
    combat_techniques: dict[str, TechniqueDef] = Field(default_factory=dict)
    general_skills: list[SkillDef] = Field(default_factory=list)

    _domain_keys_by_name: dict[str, str] = PrivateAttr(default_factory=dict)
    _weapons_by_name: dict[str, WeaponDef] = PrivateAttr(default_factory=dict)
    _techniques_by_name: dict[str, TechniqueDef] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        """Build the name indexes once."""
        self._domain_keys_by_name = {d.name: key for key, d in self.domains.items()}
        self._weapons_by_name = {w.name: w for w in self.weapon_skills.values()}
        self._techniques_by_name = {t.name: t for t in self.combat_techniques.values()}

    @classmethod
    def empty(cls) -> SkillCatalog:
        """The fallback catalog used when loading fails."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return not (
            self.domains
            or self.spells
            or self.weapon_skills
            or self.combat_techniques
            or self.general_skills
        )

    def get_domain(self, key: str | None) -> DomainDef | None:
        """Look up a domain by catalog key."""
        if key is None:
            return None
        return self.domains.get(key)

    def find_domain_key(self, name: str) -> str | None:
        """Resolve a domain display name to its catalog key."""
        return self._domain_keys_by_name.get(name)

    def spells_for(self, domain_key: str) -> list[SpellDef]:
        return self.spells.get(domain_key, [])

    def find_spell(self, name: str, domain_key: str | None = None) -> SpellDef | None:
        """Find a spell by name, within one domain or across all of them."""
        if domain_key:
            return next((s for s in self.spells_for(domain_key) if s.name == name), None)
        for spell_list in self.spells.values():
            for spell in spell_list:
                if spell.name == name:
                    return spell
        return None

    def find_entry(
        self,
        name: str,
        skill_type: SkillType | str,
        parent_key: str | None = None,
    ) -> CatalogEntry | None:
        """Find the catalog definition for a skill of the given type.

        Args:
            name: Display name of the skill.
            skill_type: Type of skill to search for.
            parent_key: Domain key for spells; searches every domain if None.

        Returns:
            The matching definition or None.
        """
        if skill_type == SkillType.DOMAIN:
            key = self.find_domain_key(name)
            return self.domains.get(key) if key else None
        if skill_type in (SkillType.SPELL, SkillType.ALCHEMY_SKILL):
            return self.find_spell(name, parent_key)
        if skill_type == SkillType.WEAPON:
            return self._weapons_by_name.get(name)
        if skill_type == SkillType.COMBAT:
            return self._techniques_by_name.get(name)
        if skill_type == SkillType.SKILL:
            return next((s for s in self.general_skills if s.name == name), None)
        return None


__all__ = [
    "CatalogEntry",
    "DomainDef",
    "SpellDef",
    "WeaponDef",
    "TechniqueDef",
    "SkillDef",
    "SkillCatalog",
]
