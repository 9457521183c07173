"""Pydantic V2 schema for a learned skill.

A Skill is one node of a character's skill tree: a domain, a spell or
technique hanging off a domain, or a parentless weapon/general skill.
Relationships are expressed only through ``parent_id``; the tree is rebuilt
from the flat list whenever it is needed.
"""

from __future__ import annotations

import re
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mol_tracker.models.enums import SkillType
from mol_tracker.models.progression import threshold_for_level


def generate_skill_id(name: str, *, custom: bool = False) -> str:
    """Build a readable, unique skill id such as ``fire_bolt_3f9c2a1b7e04``.

    Args:
        name: Display name the id is derived from.
        custom: Mark the id as belonging to a user-defined skill.

    Returns:
        Slugged name followed by a random suffix.
    """
    slug = re.sub(r"\s+", "_", name.strip().lower()) or "skill"
    marker = "_custom" if custom else ""
    return f"{slug}{marker}_{uuid4().hex[:12]}"


class Skill(BaseModel):
    """A learned skill, spell, technique or domain.

    Attributes:
        id: Unique id, generated at creation and stable for the skill's lifetime.
        name: Display name; unique only within its (name, type, parent) triple.
        type: Skill kind.
        level: Signed level; negative levels are allowed.
        xp: Experience towards the next level, reset to 0 on level-up.
        parent_id: Id of the owning domain, or None. Serialized as ``parent``.
        magical: Whether the skill is magical.
        illegal: Flagged as illegal in the setting.
        reaction: Usable as a reaction.
        channeled: Requires channeling.
        negative: Has a negative effect on its user.
        custom: Created by the player rather than taken from the catalog.
        description: Free-text description (custom skills).
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    id: str = Field(min_length=1, description="Unique skill id")
    name: str = Field(description="Display name")
    type: SkillType = Field(description="Skill kind")
    level: int = Field(default=0, description="Signed skill level")
    xp: int = Field(default=0, ge=0, description="XP towards next level")
    parent_id: str | None = Field(default=None, alias="parent", description="Owning domain id")
    magical: bool = Field(default=False)
    illegal: bool = Field(default=False)
    reaction: bool = Field(default=False)
    channeled: bool = Field(default=False)
    negative: bool = Field(default=False)
    custom: bool = Field(default=False)
    description: str | None = Field(default=None)

    @model_validator(mode="before")
    @classmethod
    def fill_missing_id(cls, data: Any) -> Any:
        """Give hand-written file entries without an id a generated one."""
        if isinstance(data, dict) and not data.get("id") and data.get("name"):
            data = dict(data)
            data["id"] = generate_skill_id(str(data["name"]), custom=bool(data.get("custom")))
        return data

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return SkillType.normalize(v)
        return v

    @field_validator("parent_id", mode="before")
    @classmethod
    def empty_parent_is_none(cls, v: Any) -> Any:
        """Browser buttons pass an empty string for "no parent"."""
        if v == "":
            return None
        return v

    @classmethod
    def create(
        cls,
        name: str,
        skill_type: SkillType | str,
        *,
        level: int = 0,
        magical: bool = False,
        parent_id: str | None = None,
        custom: bool = False,
        **flags: Any,
    ) -> Skill:
        """Create a fresh skill with a generated id and zero XP."""
        return cls(
            id=generate_skill_id(name, custom=custom),
            name=name,
            type=skill_type,
            level=level,
            xp=0,
            parent_id=parent_id,
            magical=magical,
            custom=custom,
            **flags,
        )

    @property
    def is_domain(self) -> bool:
        return self.type == SkillType.DOMAIN

    @property
    def xp_to_next_level(self) -> int:
        """XP threshold for the current level."""
        return threshold_for_level(self.level)

    @property
    def progress_percentage(self) -> float:
        """Progress towards the next level as a percentage."""
        return self.xp / self.xp_to_next_level * 100

    def matches(self, name: str, skill_type: str, parent_id: str | None) -> bool:
        """Check whether this skill has exactly the given identity triple."""
        return self.name == name and self.type == skill_type and self.parent_id == parent_id


__all__ = [
    "Skill",
    "generate_skill_id",
]
