"""SQLite persistence for the tracker.

Stores:
- The current character, overwritten by every save and auto-save.
- Named save slots: an ordered list keyed by character name, capped at
  ``max_slots`` entries with the oldest evicted first. Saving under an
  existing name overwrites that slot in place.

All sqlite errors surface as StorageFailure.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Generator

from mol_tracker.core.constants import MAX_SAVED_SLOTS, UNNAMED_CHARACTER
from mol_tracker.core.exceptions import StorageFailure
from mol_tracker.core.logging import get_logger
from mol_tracker.models.character import CharacterDocument
from mol_tracker.storage.serialization import load_document, serialize


logger = get_logger(__name__)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class SlotRecord:
    """A named save slot.

    Attributes:
        name: Character name the slot is keyed by.
        data: Serialized character document.
        saved_at: When the slot was last written.
        position: Ordering key; lower is older.
    """

    name: str
    data: str
    saved_at: datetime
    position: int

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> SlotRecord:
        """Create from database row."""
        return cls(
            name=row[0],
            data=row[1],
            saved_at=datetime.fromisoformat(row[2]),
            position=row[3],
        )

    def get_document(self) -> CharacterDocument:
        """Decode the stored character.

        Raises:
            ValidationError: If the stored data is corrupt.
        """
        return load_document(self.data)


# =============================================================================
# Database Class
# =============================================================================


class Database:
    """SQLite store for the current character and named slots."""

    SCHEMA_VERSION = 1

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        max_slots: int = MAX_SAVED_SLOTS,
    ) -> None:
        """Initialize database.

        Args:
            db_path: Path to database file. If None, uses default location.
            max_slots: Named slots kept before the oldest is evicted.

        Raises:
            StorageFailure: If the file cannot be created or initialized.
        """
        self.db_path = Path(db_path) if db_path is not None else self._get_default_path()
        self.max_slots = max_slots

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageFailure(
                f"Cannot create storage directory: {exc}",
                operation="init",
                path=str(self.db_path),
            ) from exc

        self._init_schema()
        logger.info("Database initialized", path=str(self.db_path))

    @staticmethod
    def _get_default_path() -> Path:
        """Get default database path."""
        return Path.home() / ".mol_tracker" / "mol_tracker.db"

    @contextmanager
    def _get_connection(self, operation: str) -> Generator[sqlite3.Connection, None, None]:
        """Yield a connection, committing on success and rolling back on error."""
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as exc:
            raise StorageFailure(str(exc), operation=operation, path=str(self.db_path)) from exc

        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageFailure(str(exc), operation=operation, path=str(self.db_path)) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema."""
        with self._get_connection("init") as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS current_character (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    data TEXT NOT NULL,
                    saved_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS saved_characters (
                    name TEXT PRIMARY KEY,
                    data TEXT NOT NULL,
                    saved_at TEXT NOT NULL,
                    position INTEGER NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_saved_characters_position
                ON saved_characters(position)
            """)

            cursor.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (self.SCHEMA_VERSION,),
            )

    # =========================================================================
    # Current Character
    # =========================================================================

    def save_current(self, document: CharacterDocument) -> datetime:
        """Overwrite the current-character record.

        Returns:
            The save time.
        """
        now = datetime.now()
        data = serialize(document, timestamp_field="lastSaved", timestamp=now)

        with self._get_connection("save_current") as conn:
            conn.execute(
                """
                INSERT INTO current_character (id, data, saved_at) VALUES (1, ?, ?)
                ON CONFLICT(id) DO UPDATE SET data = excluded.data, saved_at = excluded.saved_at
                """,
                (data, now.isoformat()),
            )

        logger.debug("Saved current character", character=document.name)
        return now

    def load_current(self) -> CharacterDocument | None:
        """Load the current character, or None if nothing was saved.

        Raises:
            ValidationError: If the stored record is corrupt.
        """
        with self._get_connection("load_current") as conn:
            row = conn.execute("SELECT data FROM current_character WHERE id = 1").fetchone()

        if row is None:
            return None
        return load_document(row[0])

    # =========================================================================
    # Named Slots
    # =========================================================================

    def save_slot(self, document: CharacterDocument) -> SlotRecord:
        """Save a character under its name.

        An existing slot with the same name is overwritten in place; otherwise
        a new slot is appended and the oldest slots are evicted down to
        ``max_slots``.
        """
        name = document.name or UNNAMED_CHARACTER
        now = datetime.now()
        data = serialize(document)

        with self._get_connection("save_slot") as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT position FROM saved_characters WHERE name = ?", (name,))
            row = cursor.fetchone()

            if row is not None:
                position = row[0]
                cursor.execute(
                    "UPDATE saved_characters SET data = ?, saved_at = ? WHERE name = ?",
                    (data, now.isoformat(), name),
                )
            else:
                cursor.execute("SELECT COALESCE(MAX(position), 0) FROM saved_characters")
                position = cursor.fetchone()[0] + 1
                cursor.execute(
                    "INSERT INTO saved_characters (name, data, saved_at, position) VALUES (?, ?, ?, ?)",
                    (name, data, now.isoformat(), position),
                )

            cursor.execute("SELECT COUNT(*) FROM saved_characters")
            overflow = cursor.fetchone()[0] - self.max_slots
            if overflow > 0:
                cursor.execute(
                    """
                    DELETE FROM saved_characters WHERE name IN (
                        SELECT name FROM saved_characters ORDER BY position ASC LIMIT ?
                    )
                    """,
                    (overflow,),
                )
                logger.info("Evicted oldest saved characters", count=overflow)

        logger.info("Saved character to slot", character=name)
        return SlotRecord(name=name, data=data, saved_at=now, position=position)

    def get_slot(self, name: str) -> SlotRecord | None:
        """Get a slot by character name."""
        with self._get_connection("get_slot") as conn:
            row = conn.execute(
                "SELECT name, data, saved_at, position FROM saved_characters WHERE name = ?",
                (name,),
            ).fetchone()

        return SlotRecord.from_row(tuple(row)) if row else None

    def list_slots(self) -> list[SlotRecord]:
        """All slots, oldest first."""
        with self._get_connection("list_slots") as conn:
            rows = conn.execute(
                "SELECT name, data, saved_at, position FROM saved_characters ORDER BY position ASC"
            ).fetchall()

        return [SlotRecord.from_row(tuple(row)) for row in rows]

    def delete_slot(self, name: str) -> bool:
        """Delete a slot.

        Returns:
            True if deleted, False if not found.
        """
        with self._get_connection("delete_slot") as conn:
            cursor = conn.execute("DELETE FROM saved_characters WHERE name = ?", (name,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("Deleted saved character", character=name)
        return deleted

    def get_slot_count(self) -> int:
        with self._get_connection("count_slots") as conn:
            return conn.execute("SELECT COUNT(*) FROM saved_characters").fetchone()[0]

    def clear_all(self) -> None:
        """Remove the current character and every slot."""
        with self._get_connection("clear_all") as conn:
            conn.execute("DELETE FROM current_character")
            conn.execute("DELETE FROM saved_characters")

        logger.info("Cleared all stored characters")


__all__ = [
    "Database",
    "SlotRecord",
]
