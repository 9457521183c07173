"""Bounded undo history of whole-document snapshots.

Each entry holds a deep copy of the document taken *before* the action it is
named after. Undo pops the newest entry and hands back that snapshot, so one
call reverses exactly one action. There is no redo stack.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime

from mol_tracker.core.constants import DEFAULT_HISTORY_SIZE
from mol_tracker.core.logging import get_logger
from mol_tracker.models.character import CharacterDocument
from mol_tracker.models.enums import ErrorKind
from mol_tracker.models.results import OperationResult


logger = get_logger(__name__)


@dataclass
class HistoryEntry:
    """A recorded action and the document state preceding it.

    Attributes:
        description: Human-readable action, e.g. "Add skill: Fire Bolt".
        snapshot: Independent copy of the document before the action.
        timestamp: When the entry was recorded.
    """

    description: str
    snapshot: CharacterDocument
    timestamp: datetime = field(default_factory=datetime.now)


class HistoryLog:
    """Undo stack capped at ``max_size`` entries; the oldest is evicted first."""

    def __init__(self, max_size: int = DEFAULT_HISTORY_SIZE) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._entries: deque[HistoryEntry] = deque(maxlen=max_size)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[HistoryEntry]:
        """Entries oldest first."""
        return list(self._entries)

    @property
    def can_undo(self) -> bool:
        return bool(self._entries)

    def peek(self) -> HistoryEntry | None:
        """The entry the next undo would restore."""
        return self._entries[-1] if self._entries else None

    @property
    def undo_label(self) -> str:
        """Text for an undo button."""
        entry = self.peek()
        return f"Undo: {entry.description}" if entry else "No actions to undo"

    def record(self, description: str, document: CharacterDocument) -> HistoryEntry:
        """Snapshot ``document`` before an action is applied to it."""
        entry = HistoryEntry(description=description, snapshot=document.snapshot())
        if len(self._entries) == self.max_size:
            logger.debug("History full, evicting oldest", evicted=self._entries[0].description)
        self._entries.append(entry)
        return entry

    def discard_last(self) -> HistoryEntry | None:
        """Drop the newest entry without restoring it.

        Used when the action it was recorded for turned out to be a no-op.
        """
        return self._entries.pop() if self._entries else None

    def undo(self) -> OperationResult:
        """Pop the newest entry.

        Returns:
            Result whose value is the popped HistoryEntry; the caller makes
            ``entry.snapshot`` the live document. Fails with EMPTY_HISTORY
            when nothing is recorded.
        """
        if not self._entries:
            return OperationResult.fail(ErrorKind.EMPTY_HISTORY, "No actions to undo")

        entry = self._entries.pop()
        logger.info("Undo", action=entry.description, remaining=len(self._entries))
        return OperationResult.ok(f"Undid: {entry.description}", value=entry)

    def clear(self) -> None:
        self._entries.clear()


__all__ = [
    "HistoryEntry",
    "HistoryLog",
]
