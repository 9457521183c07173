"""Character session orchestration.

A CharacterSession owns the live document together with the catalog, the
undo history and the storage gateway. Every user action goes through it:

1. The document is snapshotted into the history under a description.
2. The action is applied.
3. On success the document is saved as the current character; on failure
   the history entry is dropped again.

Every public method returns an OperationResult; storage and validation
errors are reported, never raised.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from mol_tracker.core.config import Settings, get_settings
from mol_tracker.core.exceptions import StorageFailure, ValidationError
from mol_tracker.core.logging import get_logger
from mol_tracker.engine import skill_browser, skill_tree
from mol_tracker.engine.history import HistoryEntry, HistoryLog
from mol_tracker.engine.skill_tree import SkillGrouping
from mol_tracker.ingestion.catalog_loader import load_catalog
from mol_tracker.models.catalog import SkillCatalog
from mol_tracker.models.character import CharacterDocument
from mol_tracker.models.enums import ErrorKind, SkillType
from mol_tracker.models.results import OperationResult
from mol_tracker.storage.database import Database
from mol_tracker.storage.files import export_character, read_character_file
from mol_tracker.storage.serialization import deserialize


logger = get_logger(__name__)

Mutation = Callable[[CharacterDocument], OperationResult]


@dataclass
class StatusMessage:
    """Last message shown on the status line."""

    text: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.text} ({self.timestamp:%H:%M:%S})"


class CharacterSession:
    """The live character and everything that acts on it.

    Attributes:
        document: The character being edited.
        catalog: Reference data for browsing and adding skills.
        history: Undo snapshots.
        database: Durable storage gateway.
        status: Last status message, if any.
    """

    def __init__(
        self,
        catalog: SkillCatalog | None = None,
        database: Database | None = None,
        *,
        settings: Settings | None = None,
        document: CharacterDocument | None = None,
    ) -> None:
        """Initialize a session.

        Args:
            catalog: Skill catalog. Loaded from the configured source if None.
            database: Storage gateway. Opened at the configured path if None.
            settings: Application settings. Uses the cached settings if None.
            document: Starting document. An empty character if None; call
                ``start`` to restore the stored one instead.

        Raises:
            StorageFailure: If the default database cannot be opened.
        """
        self._settings = settings or get_settings()
        self._catalog = catalog if catalog is not None else load_catalog()
        self._database = database or Database(
            self._settings.storage.database_path,
            max_slots=self._settings.storage.max_saved_slots,
        )
        self._history = HistoryLog(self._settings.history.max_size)
        self._document = document or CharacterDocument()
        self._status: StatusMessage | None = None
        self._last_saved: datetime | None = None
        self._last_autosave: datetime | None = None

        logger.info("CharacterSession initialized", catalog_empty=self._catalog.is_empty)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def document(self) -> CharacterDocument:
        return self._document

    @property
    def catalog(self) -> SkillCatalog:
        return self._catalog

    @property
    def history(self) -> HistoryLog:
        return self._history

    @property
    def database(self) -> Database:
        return self._database

    @property
    def status(self) -> StatusMessage | None:
        return self._status

    @property
    def last_saved(self) -> datetime | None:
        """When the current character was last written to storage."""
        return self._last_saved

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def undo_label(self) -> str:
        return self._history.undo_label

    @property
    def mana(self) -> int:
        """Mana pool derived from the Shaping domain."""
        return self._document.compute_mana()

    @property
    def skill_groups(self) -> SkillGrouping:
        """Learned skills grouped under their domains."""
        return skill_tree.group_by_domain(self._document)

    # =========================================================================
    # Internals
    # =========================================================================

    def _set_status(self, text: str) -> None:
        self._status = StatusMessage(text)

    def _report(self, result: OperationResult) -> OperationResult:
        if result.message:
            self._set_status(result.message)
        return result

    def _persist(self) -> OperationResult:
        """Write the live document as the current character."""
        try:
            self._last_saved = self._database.save_current(self._document)
        except StorageFailure as exc:
            logger.error("Failed to save character", error=exc.message, **exc.details)
            return OperationResult.fail(ErrorKind.STORAGE_FAILURE, f"Save failed: {exc.message}")
        return OperationResult.ok("Character saved")

    def _apply(self, description: str, mutation: Mutation) -> OperationResult:
        """Record, apply and persist one action."""
        self._history.record(description, self._document)
        result = mutation(self._document)

        if not result.success:
            self._history.discard_last()
            logger.debug("Action rejected", action=description, error=result.error)
            return self._report(result)

        return self._settle(result, self._persist())

    def _settle(self, result: OperationResult, saved: OperationResult) -> OperationResult:
        """Report ``result``, or the save failure that followed it."""
        if not saved.success:
            self._set_status(saved.message)
            return result
        return self._report(result)

    def _replace_document(self, description: str, document: CharacterDocument) -> OperationResult:
        self._history.record(description, self._document)
        self._document = document
        return self._persist()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> OperationResult:
        """Restore the stored character, or begin a fresh one with defaults.

        A missing or unreadable stored record starts a fresh character.
        """
        stored: CharacterDocument | None = None
        try:
            stored = self._database.load_current()
        except (StorageFailure, ValidationError) as exc:
            logger.warning("Stored character unavailable, starting fresh", error=exc.message)

        if stored is not None:
            self._document = stored
            logger.info("Restored character", character=stored.name, skills=len(stored.skills))
            return self._report(OperationResult.ok("Character loaded", value=stored))

        self._document = CharacterDocument()
        self._document.initialize_defaults(self._catalog)
        created = OperationResult.ok("New character created", value=self._document)
        return self._settle(created, self._persist())

    def create_new_character(self) -> OperationResult:
        """Replace the live character with an empty one holding the free skills."""

        def reset(document: CharacterDocument) -> OperationResult:
            fresh = CharacterDocument()
            fresh.initialize_defaults(self._catalog)
            self._document = fresh
            return OperationResult.ok("New character created", value=fresh)

        return self._apply("Create new character", reset)

    def save(self) -> OperationResult:
        """Write the live character to storage now."""
        result = self._persist()
        if result.success:
            self._last_autosave = self._last_saved
        return self._report(result)

    def autosave(self, now: datetime | None = None) -> OperationResult | None:
        """Save if auto-save is enabled and the interval has elapsed.

        Args:
            now: Current time, for callers driving their own clock.

        Returns:
            The save result, or None when no save was due.
        """
        autosave = self._settings.autosave
        if not autosave.enabled:
            return None

        now = now or datetime.now()
        if (
            self._last_autosave is not None
            and (now - self._last_autosave).total_seconds() < autosave.interval_seconds
        ):
            return None

        result = self._persist()
        self._last_autosave = now
        if not result.success:
            self._set_status(result.message)
        return result

    # =========================================================================
    # Skill actions
    # =========================================================================

    def add_skill(
        self,
        name: str,
        skill_type: SkillType | str,
        default_level: int = 0,
        magical: bool = False,
        parent_id: str | None = None,
    ) -> OperationResult:
        """Learn a catalog skill; see ``skill_tree.add_skill``."""
        return self._apply(
            f"Add skill: {name}",
            lambda doc: skill_tree.add_skill(
                doc,
                self._catalog,
                name,
                skill_type,
                default_level=default_level,
                magical=magical,
                parent_id=parent_id,
            ),
        )

    def add_custom_skill(
        self,
        name: str,
        skill_type: SkillType | str,
        *,
        description: str = "",
        level: int = 0,
        magical: bool = False,
        illegal: bool = False,
    ) -> OperationResult:
        """Learn a player-defined skill."""
        return self._apply(
            f"Add custom skill: {name.strip()}",
            lambda doc: skill_tree.add_custom_skill(
                doc,
                name,
                skill_type,
                description=description,
                level=level,
                magical=magical,
                illegal=illegal,
            ),
        )

    def delete_skill(self, skill_id: str) -> OperationResult:
        """Remove a skill and its direct children."""
        skill = self._document.get_skill(skill_id)
        if skill is None:
            return OperationResult.fail(ErrorKind.NOT_FOUND, f"Skill {skill_id} not found")
        return self._apply(
            f"Delete skill: {skill.name}",
            lambda doc: skill_tree.delete_skill(doc, skill_id),
        )

    def add_xp(self, skill_id: str, amount: int) -> OperationResult:
        """Award XP to a skill."""
        skill = self._document.get_skill(skill_id)
        if skill is None:
            return OperationResult.fail(ErrorKind.NOT_FOUND, f"Skill {skill_id} not found")
        return self._apply(
            f"Add {amount} XP to {skill.name}",
            lambda doc: skill_tree.add_xp(doc, skill_id, amount),
        )

    def edit_field(self, field_name: str, value: Any) -> OperationResult:
        """Edit a character attribute such as name or current health."""
        return self._apply(
            f"Edit {field_name}",
            lambda doc: doc.apply_field_edit(field_name, value),
        )

    def undo(self) -> OperationResult:
        """Restore the document as it was before the most recent action."""
        result = self._history.undo()
        if not result.success:
            return self._report(result)

        entry: HistoryEntry = result.value
        self._document = entry.snapshot
        return self._settle(result, self._persist())

    # =========================================================================
    # Browsing
    # =========================================================================

    def describe_skill(
        self,
        name: str,
        skill_type: SkillType | str,
        parent_key: str | None = None,
    ) -> OperationResult:
        """Description card for a catalog or learned skill."""
        description = skill_browser.describe_skill(
            self._document, self._catalog, name, skill_type, parent_key
        )
        return OperationResult.ok(description.name, value=description)

    def browse_magical(self, search: str = "") -> OperationResult:
        categories = skill_browser.browse_magical(self._document, self._catalog, search)
        return OperationResult.ok(value=categories)

    def browse_combat(self, search: str = "", weapon: str | None = None) -> OperationResult:
        categories = skill_browser.browse_combat(self._document, self._catalog, search, weapon)
        return OperationResult.ok(value=categories)

    def browse_general(self, search: str = "") -> OperationResult:
        categories = skill_browser.browse_general(self._document, self._catalog, search)
        return OperationResult.ok(value=categories)

    # =========================================================================
    # Files
    # =========================================================================

    def export_to_file(self, directory: str | Path | None = None) -> OperationResult:
        """Save the current character, then write it to ``<directory>/<name>_character.json``.

        Args:
            directory: Target directory; defaults to the configured export path.

        Returns:
            Result whose value is the written Path.
        """
        saved = self._persist()
        target_dir = directory if directory is not None else self._settings.storage.export_path
        try:
            path = export_character(self._document, target_dir)
        except ValidationError as exc:
            return self._report(OperationResult.fail(ErrorKind.VALIDATION_ERROR, exc.message))
        except StorageFailure as exc:
            logger.error("Export failed", error=exc.message, **exc.details)
            return self._report(OperationResult.fail(ErrorKind.STORAGE_FAILURE, exc.message))

        exported = OperationResult.ok(f"Character saved to {path.name}", value=path)
        return self._settle(exported, saved)

    def import_character(self, text: str) -> OperationResult:
        """Load a character from JSON text, merged over the live document.

        A payload without ``name`` or ``skills`` is rejected and the live
        document is left untouched.
        """
        decoded = deserialize(text, base=self._document)
        if not decoded.success:
            return self._report(decoded)

        saved = self._replace_document("Load character from file", decoded.value)
        logger.info("Imported character", character=self._document.name)
        loaded = OperationResult.ok("Character loaded successfully!", value=self._document)
        return self._settle(loaded, saved)

    def import_from_file(self, path: str | Path) -> OperationResult:
        """Read a character file and import it."""
        try:
            text = read_character_file(path)
        except StorageFailure as exc:
            logger.error("Import failed", error=exc.message, **exc.details)
            return self._report(OperationResult.fail(ErrorKind.STORAGE_FAILURE, exc.message))
        return self.import_character(text)

    # =========================================================================
    # Named slots
    # =========================================================================

    def save_to_slot(self) -> OperationResult:
        """Save the character in the slot named after it."""
        try:
            record = self._database.save_slot(self._document)
        except StorageFailure as exc:
            logger.error("Slot save failed", error=exc.message, **exc.details)
            return self._report(OperationResult.fail(ErrorKind.STORAGE_FAILURE, exc.message))
        return self._report(OperationResult.ok(f"Saved {record.name}", value=record))

    def list_slots(self) -> OperationResult:
        """Saved slots, oldest first."""
        try:
            records = self._database.list_slots()
        except StorageFailure as exc:
            return self._report(OperationResult.fail(ErrorKind.STORAGE_FAILURE, exc.message))
        return OperationResult.ok(value=records)

    def load_slot(self, name: str) -> OperationResult:
        """Make a saved slot the live character. Undoable."""
        try:
            record = self._database.get_slot(name)
            if record is None:
                return self._report(
                    OperationResult.fail(ErrorKind.NOT_FOUND, f"No saved character named {name}")
                )
            document = record.get_document()
        except StorageFailure as exc:
            return self._report(OperationResult.fail(ErrorKind.STORAGE_FAILURE, exc.message))
        except ValidationError as exc:
            logger.warning("Saved character is corrupt", character=name, error=exc.message)
            return self._report(OperationResult.fail(ErrorKind.VALIDATION_ERROR, exc.message))

        saved = self._replace_document(f"Load saved character: {name}", document)
        return self._settle(OperationResult.ok(f"Loaded {name}", value=document), saved)

    def delete_slot(self, name: str) -> OperationResult:
        try:
            deleted = self._database.delete_slot(name)
        except StorageFailure as exc:
            return self._report(OperationResult.fail(ErrorKind.STORAGE_FAILURE, exc.message))
        if not deleted:
            return self._report(
                OperationResult.fail(ErrorKind.NOT_FOUND, f"No saved character named {name}")
            )
        return self._report(OperationResult.ok(f"Deleted {name}"))

    def clear_all_data(self) -> OperationResult:
        """Wipe storage and history and start a fresh character."""
        try:
            self._database.clear_all()
        except StorageFailure as exc:
            return self._report(OperationResult.fail(ErrorKind.STORAGE_FAILURE, exc.message))

        self._history.clear()
        self._document = CharacterDocument()
        self._document.initialize_defaults(self._catalog)
        logger.warning("All stored data cleared")
        return self._settle(OperationResult.ok("All data cleared"), self._persist())


__all__ = [
    "CharacterSession",
    "StatusMessage",
]
