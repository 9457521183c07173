"""Skill tree rules over a CharacterDocument.

The skill tree is not a stored structure: it is the flat ``document.skills``
list plus ``parent_id`` links. These functions enforce its invariants:

- No two skills share a (name, type, parent_id) triple. ``exists`` is the
  only duplicate guard and runs before every insertion.
- After any XP award, ``xp < threshold_for_level(level)``. A level-up
  resets XP to 0; the remainder is not carried over, and at most one
  level is gained per award.
- Deleting a skill removes its direct children only. Grandchildren stay
  and become orphaned.
- A parent_id that points nowhere is tolerated and never repaired.

Every mutating function returns an OperationResult instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mol_tracker.core.logging import get_logger
from mol_tracker.models.catalog import SkillCatalog
from mol_tracker.models.character import CharacterDocument
from mol_tracker.models.enums import ErrorKind, SkillType
from mol_tracker.models.progression import threshold_for_level
from mol_tracker.models.results import OperationResult, XPGain
from mol_tracker.models.skill import Skill


logger = get_logger(__name__)

SKILL_TYPE_VALUES = frozenset(t.value for t in SkillType)


# =============================================================================
# Grouping
# =============================================================================


@dataclass
class DomainGroup:
    """A learned domain and the skills whose parent is that domain."""

    skill: Skill
    children: list[Skill] = field(default_factory=list)


@dataclass
class SkillGrouping:
    """Learned skills partitioned for display.

    Attributes:
        domains: Domain id to its group, in document order.
        orphaned: Non-domain skills with no learned parent domain.
    """

    domains: dict[str, DomainGroup] = field(default_factory=dict)
    orphaned: list[Skill] = field(default_factory=list)


def group_by_domain(document: CharacterDocument) -> SkillGrouping:
    """Partition learned skills into domain buckets and an orphaned bucket.

    Two scans: collect every domain by id, then file each non-domain skill
    under its parent domain if that id is a known domain, otherwise under
    orphaned. Document order is kept within each bucket.
    """
    grouping = SkillGrouping()

    for skill in document.skills:
        if skill.is_domain:
            grouping.domains[skill.id] = DomainGroup(skill=skill)

    for skill in document.skills:
        if skill.is_domain:
            continue
        if skill.parent_id is not None and skill.parent_id in grouping.domains:
            grouping.domains[skill.parent_id].children.append(skill)
        else:
            grouping.orphaned.append(skill)

    return grouping


# =============================================================================
# Queries
# =============================================================================


def exists(
    document: CharacterDocument,
    name: str,
    skill_type: SkillType | str,
    parent_id: str | None,
) -> bool:
    """True iff a skill with exactly this (name, type, parent_id) is learned."""
    return any(s.matches(name, skill_type, parent_id) for s in document.skills)


def resolve_parent(
    document: CharacterDocument,
    catalog: SkillCatalog,
    parent_id: str | None,
) -> str | None:
    """Resolve a parent reference without changing the document.

    A learned skill id is returned unchanged. A catalog domain key resolves
    to the id of the learned domain with that catalog name, if any. Anything
    else is returned as given.
    """
    if not parent_id:
        return None
    if document.get_skill(parent_id) is not None:
        return parent_id

    domain_def = catalog.get_domain(parent_id)
    if domain_def is None:
        return parent_id

    learned = next(
        (s for s in document.skills if s.matches(domain_def.name, SkillType.DOMAIN, None)),
        None,
    )
    return learned.id if learned else parent_id


def _materialize_parent(
    document: CharacterDocument,
    catalog: SkillCatalog,
    parent_id: str | None,
) -> str | None:
    """Resolve a parent reference, learning its catalog domain if needed."""
    if not parent_id or document.get_skill(parent_id) is not None:
        return parent_id or None

    resolved = resolve_parent(document, catalog, parent_id)
    if resolved != parent_id:
        return resolved

    domain_def = catalog.get_domain(parent_id)
    if domain_def is None:
        return parent_id

    domain = Skill.create(
        domain_def.name,
        SkillType.DOMAIN,
        level=domain_def.default_level,
        magical=domain_def.magical,
    )
    document.skills.append(domain)
    logger.info("Learned prerequisite domain", domain=domain.name, skill_id=domain.id)
    return domain.id


# =============================================================================
# Mutations
# =============================================================================


def add_skill(
    document: CharacterDocument,
    catalog: SkillCatalog,
    name: str,
    skill_type: SkillType | str,
    default_level: int = 0,
    magical: bool = False,
    parent_id: str | None = None,
) -> OperationResult:
    """Learn a catalog skill.

    If ``parent_id`` is a catalog domain key whose domain is not learned yet,
    that domain is learned first at its catalog defaults. The type alias
    ``"non-magical"`` is normalized to the generic skill type before the
    duplicate check.

    Args:
        document: Character to modify.
        catalog: Reference data used to materialize parent domains.
        name: Skill name.
        skill_type: Skill type.
        default_level: Starting level.
        magical: Whether the skill is magical.
        parent_id: Learned domain id or catalog domain key.

    Returns:
        Result whose value is the new Skill; fails with DUPLICATE_SKILL when
        the triple is already learned.
    """
    final_type = SkillType.normalize(str(skill_type))
    if final_type not in SKILL_TYPE_VALUES:
        return OperationResult.fail(ErrorKind.VALIDATION_ERROR, f"Unknown skill type: {skill_type}")

    resolved_parent = _materialize_parent(document, catalog, parent_id)

    if exists(document, name, final_type, resolved_parent):
        logger.info("Skill already learned", skill=name, type=final_type, parent=resolved_parent)
        return OperationResult.fail(ErrorKind.DUPLICATE_SKILL, f"{name} is already learned")

    skill = Skill.create(
        name,
        final_type,
        level=default_level or 0,
        magical=magical,
        parent_id=resolved_parent,
    )
    document.skills.append(skill)
    logger.info("Skill added", skill=name, type=final_type, skill_id=skill.id, level=skill.level)
    return OperationResult.ok(f"Added skill: {name}", value=skill)


def add_custom_skill(
    document: CharacterDocument,
    name: str,
    skill_type: SkillType | str,
    *,
    description: str = "",
    level: int = 0,
    magical: bool = False,
    illegal: bool = False,
) -> OperationResult:
    """Learn a player-defined skill with no parent.

    Returns:
        Result whose value is the new Skill. Fails with VALIDATION_ERROR for
        a blank name and DUPLICATE_SKILL when (name, type, None) is learned.
    """
    name = name.strip()
    if not name:
        return OperationResult.fail(ErrorKind.VALIDATION_ERROR, "Please enter a skill name.")

    final_type = SkillType.normalize(str(skill_type))
    if final_type not in SKILL_TYPE_VALUES:
        return OperationResult.fail(ErrorKind.VALIDATION_ERROR, f"Unknown skill type: {skill_type}")

    if exists(document, name, final_type, None):
        return OperationResult.fail(
            ErrorKind.DUPLICATE_SKILL,
            "A skill with this name already exists.",
        )

    skill = Skill.create(
        name,
        final_type,
        level=level,
        magical=magical,
        custom=True,
        illegal=illegal,
        description=description.strip(),
    )
    document.skills.append(skill)
    logger.info("Custom skill added", skill=name, type=final_type, skill_id=skill.id)
    return OperationResult.ok(f"Added custom skill: {name}", value=skill)


def delete_skill(document: CharacterDocument, skill_id: str) -> OperationResult:
    """Remove a skill and its direct children.

    Returns:
        Result whose value is the list of removed skills, the target first.
        Fails with NOT_FOUND (and changes nothing) for an unknown id.
    """
    target = document.get_skill(skill_id)
    if target is None:
        return OperationResult.fail(ErrorKind.NOT_FOUND, f"Skill {skill_id} not found")

    children = [s for s in document.skills if s.parent_id == skill_id and s is not target]
    document.skills = [
        s for s in document.skills if s is not target and s.parent_id != skill_id
    ]

    logger.info(
        "Skill deleted",
        skill=target.name,
        skill_id=skill_id,
        cascaded=len(children),
    )
    return OperationResult.ok(f"Deleted skill: {target.name}", value=[target, *children])


def add_xp(document: CharacterDocument, skill_id: str, amount: int) -> OperationResult:
    """Award XP to a skill, levelling it up at most once.

    When the new total reaches the current level's threshold the skill gains
    exactly one level and its XP becomes 0, whatever the overflow.

    Returns:
        Result whose value is an XPGain. Fails with NOT_FOUND for an unknown
        id and VALIDATION_ERROR for a negative amount.
    """
    skill = document.get_skill(skill_id)
    if skill is None:
        return OperationResult.fail(ErrorKind.NOT_FOUND, f"Skill {skill_id} not found")
    if amount < 0:
        return OperationResult.fail(ErrorKind.VALIDATION_ERROR, "XP amount must not be negative")

    new_xp = skill.xp + amount
    leveled_up = new_xp >= threshold_for_level(skill.level)

    if leveled_up:
        skill.level += 1
        skill.xp = 0
        message = f"{skill.name} leveled up to {skill.level}!"
        logger.info("Skill leveled up", skill=skill.name, skill_id=skill_id, level=skill.level)
    else:
        skill.xp = new_xp
        message = f"Added {amount} XP to {skill.name}"

    gain = XPGain(
        skill_id=skill_id,
        amount=amount,
        leveled_up=leveled_up,
        new_level=skill.level,
        new_xp=skill.xp,
    )
    return OperationResult.ok(message, value=gain)


def initialize_defaults(document: CharacterDocument, catalog: SkillCatalog) -> list[Skill]:
    """Grant the catalog's free domains and free spells.

    Free domains are added parentless at their default level. Free spells are
    added with their catalog domain key as parent. A skill already learned
    with the same name and type is skipped wherever it sits in the tree, so
    repeated calls add nothing.

    Returns:
        The skills that were added, in insertion order.
    """
    added: list[Skill] = []

    for domain_def in catalog.domains.values():
        if not domain_def.free:
            continue
        if document.find_skill(domain_def.name, SkillType.DOMAIN) is not None:
            continue
        skill = Skill.create(
            domain_def.name,
            SkillType.DOMAIN,
            level=domain_def.default_level,
            magical=domain_def.magical,
        )
        document.skills.append(skill)
        added.append(skill)

    for domain_key, spells in catalog.spells.items():
        for spell_def in spells:
            if not spell_def.free:
                continue
            if document.find_skill(spell_def.name, SkillType.SPELL) is not None:
                continue
            skill = Skill.create(
                spell_def.name,
                SkillType.SPELL,
                level=spell_def.default_level,
                magical=True,
                parent_id=domain_key,
            )
            document.skills.append(skill)
            added.append(skill)

    if added:
        logger.info("Granted free skills", count=len(added))
    return added


__all__ = [
    "DomainGroup",
    "SkillGrouping",
    "threshold_for_level",
    "exists",
    "resolve_parent",
    "group_by_domain",
    "add_skill",
    "add_custom_skill",
    "delete_skill",
    "add_xp",
    "initialize_defaults",
]
