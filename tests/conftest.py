"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the MOL Campaign Tracker test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator

    from mol_tracker.core.config import Settings
    from mol_tracker.engine.session import CharacterSession
    from mol_tracker.models.catalog import SkillCatalog
    from mol_tracker.models.character import CharacterDocument
    from mol_tracker.storage.database import Database


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from mol_tracker.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def isolated_workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every test from an empty directory so relative data paths stay local."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "MOL_TRACKER_DEBUG": "true",
        "MOL_TRACKER_LOG_LEVEL": "DEBUG",
        "MOL_TRACKER_HISTORY_MAX_SIZE": "20",
        "MOL_TRACKER_AUTOSAVE_INTERVAL_SECONDS": "5",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with storage confined to the test's temporary directory."""
    from mol_tracker.core.config import Settings, StorageSettings

    return Settings(
        storage=StorageSettings(
            database_path=tmp_path / "tracker.db",
            export_path=tmp_path / "exports",
        ),
    )


# =============================================================================
# Catalog Fixtures
# =============================================================================


@pytest.fixture
def catalog_data() -> dict[str, Any]:
    """Provide a small catalog payload in wire format.

    Returns:
        Dictionary using the catalog's camelCase keys.
    """
    return {
        "domains": {
            "shaping": {"name": "Shaping", "defaultLevel": 0, "magical": True, "free": True},
            "elementalism": {
                "name": "Elementalism",
                "defaultLevel": 0,
                "magical": True,
                "description": "Command over fire and frost.",
            },
            "necromancy": {
                "name": "Necromancy",
                "defaultLevel": -1,
                "magical": True,
                "illegal": True,
            },
        },
        "spells": {
            "shaping": [
                {"name": "Mana Bolt", "defaultLevel": 0, "free": True, "damage": "1d6 force"},
            ],
            "elementalism": [
                {
                    "name": "Fire Bolt",
                    "defaultLevel": 0,
                    "description": "Hurl a mote of flame at a target.",
                    "time": "1 action",
                    "damage": "1d10 fire",
                    "range": "120 ft",
                },
                {"name": "Frost Lance", "defaultLevel": 1, "channeled": True, "enhancer": True},
            ],
        },
        "weaponSkills": {
            "swords": {"name": "Swords", "defaultLevel": 0, "description": "Blades."},
            "bows": {"name": "Bows", "defaultLevel": 0},
        },
        "combatTechniques": {
            "riposte": {
                "name": "Riposte",
                "reaction": True,
                "applicableWeapons": ["swords"],
            },
            "aimedshot": {"name": "Aimed Shot", "applicableWeapons": ["bows"]},
            "secondwind": {"name": "Second Wind", "applicableWeapons": ["all"]},
            "brace": {"name": "Brace"},
        },
        "generalSkills": [
            {"name": "Herbalism", "description": "Identify and gather useful plants."},
            {"name": "Lockpicking", "illegal": True},
        ],
    }


@pytest.fixture
def catalog(catalog_data: dict[str, Any]) -> SkillCatalog:
    """Provide a validated SkillCatalog."""
    from mol_tracker.models.catalog import SkillCatalog

    return SkillCatalog.model_validate(catalog_data)


# =============================================================================
# Document Fixtures
# =============================================================================


@pytest.fixture
def document() -> CharacterDocument:
    """Provide an empty named character."""
    from mol_tracker.models.character import CharacterDocument

    return CharacterDocument(name="Aldric", bloodline="Stormborn")


@pytest.fixture
def character_payload() -> dict[str, Any]:
    """Provide a character file payload.

    Returns:
        Dictionary as written by an export.
    """
    return {
        "name": "Mira",
        "currentHealth": 80,
        "maxHealth": 120,
        "bloodline": "Fae",
        "knowledge": "Knows the old roads.",
        "skills": [
            {
                "id": "shaping_000000000001",
                "name": "Shaping",
                "type": "domain",
                "level": 2,
                "xp": 40,
                "magical": True,
            },
            {
                "id": "mana_bolt_000000000002",
                "name": "Mana Bolt",
                "type": "spell",
                "level": 0,
                "xp": 0,
                "parent": "shaping_000000000001",
                "magical": True,
            },
        ],
        "version": "1.0",
        "exportedAt": "2024-05-01T12:00:00",
    }


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def database(tmp_path: Path) -> Database:
    """Provide a fresh SQLite database in the temporary directory."""
    from mol_tracker.storage.database import Database

    return Database(tmp_path / "tracker.db")


@pytest.fixture
def session(
    catalog: SkillCatalog,
    database: Database,
    settings: Settings,
) -> CharacterSession:
    """Provide a started session over the test catalog and database."""
    from mol_tracker.engine.session import CharacterSession

    session = CharacterSession(catalog, database, settings=settings)
    session.start()
    return session
