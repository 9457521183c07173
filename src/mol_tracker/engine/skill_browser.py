"""Catalog browsing and skill descriptions.

Produces presentation-neutral listings of what a character can learn
(grouped into categories, filtered by a search term and, for combat
techniques, by weapon) and description cards for individual skills. The
presentation layer turns these into widgets; nothing here mutates the
document.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from mol_tracker.core.constants import ALL_WEAPONS, DESCRIPTION_PREVIEW_LENGTH
from mol_tracker.engine.skill_tree import exists, resolve_parent
from mol_tracker.models.catalog import CatalogEntry, SkillCatalog, TechniqueDef
from mol_tracker.models.character import CharacterDocument
from mol_tracker.models.enums import SkillType


NO_DESCRIPTION = "No description available."
CUSTOM_NO_DESCRIPTION = "Custom skill - no description provided."


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class BrowserItem:
    """One learnable entry in a browser category.

    Attributes:
        name: Display name.
        skill_type: Type the skill is learned as.
        parent_key: Catalog domain key for spells, else None.
        default_level: Level the skill starts at.
        magical: Whether the skill is magical.
        badges: Markers such as ILLEGAL, FREE, ENHANCER.
        summary: Description preview.
        learned: Whether the character already has it.
        key: Catalog key of the entry itself, where it has one.
    """

    name: str
    skill_type: SkillType
    parent_key: str | None
    default_level: int
    magical: bool
    badges: list[str] = field(default_factory=list)
    summary: str = ""
    learned: bool = False
    key: str | None = None


@dataclass
class BrowserCategory:
    """A titled group of browser items."""

    title: str
    items: list[BrowserItem] = field(default_factory=list)


@dataclass
class SkillDescription:
    """Description card for a skill.

    Attributes:
        name: Skill name.
        description: Body text.
        tags: Property tags (Custom, Magical, ILLEGAL, Reaction, ...).
        mechanics: (label, value) pairs such as ("Damage", "1d6 fire").
        custom: The text came from a player-defined skill.
        found: A catalog entry or learned skill supplied the data.
    """

    name: str
    description: str
    tags: list[str] = field(default_factory=list)
    mechanics: list[tuple[str, str]] = field(default_factory=list)
    custom: bool = False
    found: bool = True


# =============================================================================
# Helpers
# =============================================================================


def preview(description: str, length: int = DESCRIPTION_PREVIEW_LENGTH) -> str:
    """Truncate a description for listings, adding an ellipsis if cut."""
    if len(description) > length:
        return description[:length] + "..."
    return description


def matches_search(entry: CatalogEntry, term: str) -> bool:
    """Case-insensitive match on name or description; blank terms match all."""
    if not term:
        return True
    needle = term.lower()
    return needle in entry.name.lower() or needle in entry.description.lower()


def _badges(entry: CatalogEntry) -> list[str]:
    badges = []
    if entry.illegal:
        badges.append("ILLEGAL")
    if entry.free:
        badges.append("FREE")
    if entry.enhancer:
        badges.append("ENHANCER")
    return badges


def is_learned(
    document: CharacterDocument,
    catalog: SkillCatalog,
    name: str,
    skill_type: SkillType | str,
    parent_key: str | None = None,
) -> bool:
    """Whether a catalog entry is already learned.

    Spells count as learned under either their learned domain or, for free
    spells granted at creation, the raw catalog domain key.
    """
    if exists(document, name, skill_type, parent_key):
        return True
    resolved = resolve_parent(document, catalog, parent_key)
    return resolved != parent_key and exists(document, name, skill_type, resolved)


def _category(
    title: str,
    entries: Mapping[str, CatalogEntry] | Iterable[CatalogEntry],
    skill_type: SkillType,
    document: CharacterDocument,
    catalog: SkillCatalog,
    search: str,
    parent_key: str | None = None,
) -> BrowserCategory | None:
    if isinstance(entries, Mapping):
        keyed = list(entries.items())
    else:
        keyed = [(None, entry) for entry in entries]

    items = [
        BrowserItem(
            name=entry.name,
            skill_type=skill_type,
            parent_key=parent_key,
            default_level=entry.default_level,
            magical=entry.magical,
            badges=_badges(entry),
            summary=preview(entry.description),
            learned=is_learned(document, catalog, entry.name, skill_type, parent_key),
            key=key,
        )
        for key, entry in keyed
        if matches_search(entry, search)
    ]
    return BrowserCategory(title=title, items=items) if items else None


# =============================================================================
# Browsers
# =============================================================================


def browse_magical(
    document: CharacterDocument,
    catalog: SkillCatalog,
    search: str = "",
) -> list[BrowserCategory]:
    """Domains, then one category of spells per domain key."""
    categories = [
        _category("Magical Domains", catalog.domains, SkillType.DOMAIN, document, catalog, search)
    ]
    for domain_key, spells in catalog.spells.items():
        if not spells:
            continue
        domain = catalog.get_domain(domain_key)
        title = f"{domain.name if domain else domain_key} Spells"
        categories.append(
            _category(title, spells, SkillType.SPELL, document, catalog, search, parent_key=domain_key)
        )
    return [c for c in categories if c is not None]


def filter_combat_techniques(
    catalog: SkillCatalog,
    weapon: str | None = None,
) -> dict[str, TechniqueDef]:
    """Techniques usable with ``weapon``; every technique when weapon is None.

    A technique with no ``applicableWeapons`` list, or one listing ``all``,
    works with any weapon.
    """
    if not weapon:
        return dict(catalog.combat_techniques)
    return {
        key: technique
        for key, technique in catalog.combat_techniques.items()
        if not technique.applicable_weapons
        or weapon in technique.applicable_weapons
        or ALL_WEAPONS in technique.applicable_weapons
    }


def browse_combat(
    document: CharacterDocument,
    catalog: SkillCatalog,
    search: str = "",
    weapon: str | None = None,
) -> list[BrowserCategory]:
    """Weapon proficiencies and the combat techniques for ``weapon``."""
    categories = [
        _category("Weapon Proficiencies", catalog.weapon_skills, SkillType.WEAPON, document, catalog, search),
        _category(
            "Combat Techniques",
            filter_combat_techniques(catalog, weapon),
            SkillType.COMBAT,
            document,
            catalog,
            search,
        ),
    ]
    return [c for c in categories if c is not None]


def browse_general(
    document: CharacterDocument,
    catalog: SkillCatalog,
    search: str = "",
) -> list[BrowserCategory]:
    """General skills."""
    category = _category(
        "General Skills", catalog.general_skills, SkillType.SKILL, document, catalog, search
    )
    return [category] if category else []


# =============================================================================
# Descriptions
# =============================================================================


def _catalog_domain_key(
    document: CharacterDocument,
    catalog: SkillCatalog,
    parent_key: str | None,
) -> str | None:
    """Map a learned domain id back to its catalog key."""
    if not parent_key or catalog.get_domain(parent_key) is not None:
        return parent_key or None
    learned = document.get_skill(parent_key)
    if learned is not None:
        return catalog.find_domain_key(learned.name)
    return None


def _tags(
    *,
    custom: bool,
    magical: bool,
    illegal: bool,
    reaction: bool,
    channeled: bool,
    negative: bool,
) -> list[str]:
    tags = []
    if custom:
        tags.append("Custom")
    if magical and not illegal:
        tags.append("Magical")
    if illegal:
        tags.append("ILLEGAL")
    if reaction:
        tags.append("Reaction")
    if channeled:
        tags.append("Channeled")
    if negative:
        tags.append("Negative")
    return tags


def _mechanics(entry: CatalogEntry) -> list[tuple[str, str]]:
    mechanics = []
    if entry.time:
        mechanics.append(("Time", entry.time))
    if entry.damage:
        mechanics.append(("Damage", entry.damage))
    if entry.range:
        mechanics.append(("Range", entry.range))
    if entry.applicable_weapons:
        mechanics.append(("Weapons", ", ".join(entry.applicable_weapons)))
    return mechanics


def describe_skill(
    document: CharacterDocument,
    catalog: SkillCatalog,
    name: str,
    skill_type: SkillType | str,
    parent_key: str | None = None,
) -> SkillDescription:
    """Build the description card for a skill.

    Looks the skill up in the catalog by type first (spells within their
    domain when ``parent_key`` identifies one, otherwise across all domains),
    then among the character's learned skills, then falls back to a
    placeholder.
    """
    skill_type = SkillType.normalize(str(skill_type))
    entry = catalog.find_entry(name, skill_type, _catalog_domain_key(document, catalog, parent_key))

    if entry is not None:
        return SkillDescription(
            name=entry.name,
            description=entry.description or NO_DESCRIPTION,
            tags=_tags(
                custom=False,
                magical=entry.magical,
                illegal=entry.illegal,
                reaction=entry.reaction,
                channeled=entry.channeled,
                negative=entry.negative,
            ),
            mechanics=_mechanics(entry),
        )

    learned = next((s for s in document.skills if s.name == name), None)
    if learned is not None:
        return SkillDescription(
            name=learned.name,
            description=learned.description or CUSTOM_NO_DESCRIPTION,
            tags=_tags(
                custom=True,
                magical=learned.magical,
                illegal=learned.illegal,
                reaction=learned.reaction,
                channeled=learned.channeled,
                negative=learned.negative,
            ),
            custom=True,
        )

    return SkillDescription(name=name, description=NO_DESCRIPTION, found=False)


__all__ = [
    "BrowserItem",
    "BrowserCategory",
    "SkillDescription",
    "preview",
    "matches_search",
    "is_learned",
    "browse_magical",
    "browse_combat",
    "browse_general",
    "filter_combat_techniques",
    "describe_skill",
]
