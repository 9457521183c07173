"""Skill experience progression.

Thresholds are symmetric around level 0: a level -3 skill needs as much XP
as a level 3 skill to advance.
"""

from __future__ import annotations

from mol_tracker.core.constants import XP_PER_LEVEL_STEP


def threshold_for_level(level: int) -> int:
    """XP needed to advance a skill from ``level`` to ``level + 1``."""
    return max(1, abs(level) + 1) * XP_PER_LEVEL_STEP


def get_xp_progress(xp: int, level: int) -> tuple[int, int]:
    """Get (current_xp, xp_needed) for progress bar display."""
    return (xp, threshold_for_level(level))


__all__ = [
    "threshold_for_level",
    "get_xp_progress",
]
