"""Integration tests for a full character-building flow.

Drives a session over the bundled catalog the way the sheet does: browse,
learn, train, undo, export and re-import.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mol_tracker.core.config import Settings
from mol_tracker.engine.session import CharacterSession
from mol_tracker.ingestion import load_bundled_catalog
from mol_tracker.models.enums import SkillType
from mol_tracker.storage.database import Database


@pytest.fixture
def bundled_session(settings: Settings, tmp_path: Path) -> CharacterSession:
    """Session over the packaged catalog."""
    session = CharacterSession(
        load_bundled_catalog(),
        Database(tmp_path / "flow.db"),
        settings=settings,
    )
    session.start()
    return session


class TestCharacterFlow:
    """End-to-end character building."""

    def test_build_train_and_export(self, bundled_session: CharacterSession, tmp_path: Path) -> None:
        session = bundled_session
        session.edit_field("name", "Sir Aldric")
        session.edit_field("max_health", "120")

        # Learn a spell from the browser; its domain comes along
        spells = next(
            c for c in session.browse_magical().value if c.title == "Elementalism Spells"
        )
        fire = next(i for i in spells.items if i.name == "Fire Bolt")
        assert not fire.learned
        assert session.add_skill(
            fire.name, fire.skill_type, fire.default_level, fire.magical, fire.parent_key
        ).success

        groups = session.skill_groups
        elementalism = session.document.find_skill("Elementalism", SkillType.DOMAIN)
        assert [s.name for s in groups.domains[elementalism.id].children] == ["Fire Bolt"]

        # Train Shaping twice: two level-ups, mana grows
        shaping = session.document.find_skill("Shaping", SkillType.DOMAIN)
        session.add_xp(shaping.id, 100)
        session.add_xp(shaping.id, 250)
        assert session.mana == 200

        # Weapon and matching technique
        session.add_skill("Swords", SkillType.WEAPON)
        combat = session.browse_combat(weapon="swords").value
        techniques = {i.name for i in combat[1].items}
        assert techniques == {"Riposte", "Second Wind"}

        path = session.export_to_file(tmp_path / "exports").value
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert path.name == "sir_aldric_character.json"
        assert payload["maxHealth"] == 120
        assert {s["name"] for s in payload["skills"]} >= {"Fire Bolt", "Elementalism", "Swords"}

    def test_delete_domain_cascades_and_undo_restores(
        self,
        bundled_session: CharacterSession,
    ) -> None:
        session = bundled_session
        session.add_skill("Fire Bolt", "spell", 0, True, "elementalism")
        session.add_skill("Frost Lance", "spell", 1, True, "elementalism")
        domain = session.document.find_skill("Elementalism", SkillType.DOMAIN)
        before = session.document.snapshot()

        removed = session.delete_skill(domain.id).value

        assert [s.name for s in removed] == ["Elementalism", "Fire Bolt", "Frost Lance"]
        assert session.document.find_skill("Fire Bolt", SkillType.SPELL) is None

        session.undo()
        assert session.document == before

    def test_export_then_import_into_fresh_session(
        self,
        bundled_session: CharacterSession,
        settings: Settings,
        tmp_path: Path,
    ) -> None:
        bundled_session.edit_field("name", "Mira")
        bundled_session.add_custom_skill("Juggling", "non-magical", description="Three balls.")
        path = bundled_session.export_to_file().value

        other = CharacterSession(
            load_bundled_catalog(),
            Database(tmp_path / "other.db"),
            settings=settings,
        )
        other.start()
        result = other.import_from_file(path)

        assert result.success
        assert other.document.name == "Mira"
        juggling = other.document.find_skill("Juggling", SkillType.SKILL)
        assert juggling.custom
        card = other.describe_skill("Juggling", "skill").value
        assert card.description == "Three balls."
