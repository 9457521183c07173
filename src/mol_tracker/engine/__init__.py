"""Rules engine for the MOL Campaign Tracker.

Submodules:
    skill_tree: Adding, deleting and levelling skills; domain grouping
    skill_browser: Catalog listings and skill descriptions
    history: Bounded undo history of document snapshots
    session: CharacterSession, the record/apply/save control flow

Example:
    >>> from mol_tracker.engine import CharacterSession
    >>>
    >>> session = CharacterSession()
    >>> session.start()
    >>> result = session.add_skill("Fire Bolt", "spell", magical=True, parent_id="elementalism")
    >>> session.undo()
"""

from __future__ import annotations

# =============================================================================
# Skill Tree
# =============================================================================
from mol_tracker.engine.skill_tree import (
    DomainGroup,
    SkillGrouping,
    add_custom_skill,
    add_skill,
    add_xp,
    delete_skill,
    exists,
    group_by_domain,
    initialize_defaults,
    resolve_parent,
)

# =============================================================================
# Browsing
# =============================================================================
from mol_tracker.engine.skill_browser import (
    BrowserCategory,
    BrowserItem,
    SkillDescription,
    browse_combat,
    browse_general,
    browse_magical,
    describe_skill,
    filter_combat_techniques,
)

# =============================================================================
# History & Session
# =============================================================================
from mol_tracker.engine.history import HistoryEntry, HistoryLog
from mol_tracker.engine.session import CharacterSession, StatusMessage


__all__ = [
    # Skill Tree
    "DomainGroup",
    "SkillGrouping",
    "add_skill",
    "add_custom_skill",
    "add_xp",
    "delete_skill",
    "exists",
    "group_by_domain",
    "initialize_defaults",
    "resolve_parent",
    # Browsing
    "BrowserCategory",
    "BrowserItem",
    "SkillDescription",
    "browse_magical",
    "browse_combat",
    "browse_general",
    "describe_skill",
    "filter_combat_techniques",
    # History & Session
    "HistoryEntry",
    "HistoryLog",
    "CharacterSession",
    "StatusMessage",
]
