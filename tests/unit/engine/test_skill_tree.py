"""Tests for skill tree rules."""

from __future__ import annotations

from mol_tracker.engine.skill_tree import (
    add_custom_skill,
    add_skill,
    add_xp,
    delete_skill,
    exists,
    group_by_domain,
    initialize_defaults,
    resolve_parent,
)
from mol_tracker.models.catalog import SkillCatalog
from mol_tracker.models.character import CharacterDocument
from mol_tracker.models.enums import ErrorKind, SkillType
from mol_tracker.models.results import XPGain
from mol_tracker.models.skill import Skill


def _learn(document: CharacterDocument, name: str, skill_type: SkillType, **kwargs) -> Skill:
    skill = Skill.create(name, skill_type, **kwargs)
    document.skills.append(skill)
    return skill


class TestAddSkill:
    """Tests for add_skill."""

    def test_adds_parentless_skill(
        self,
        document: CharacterDocument,
        catalog: SkillCatalog,
    ) -> None:
        result = add_skill(document, catalog, "Swords", SkillType.WEAPON)

        assert result.success
        assert result.message == "Added skill: Swords"
        assert document.skills == [result.value]
        assert result.value.level == 0
        assert result.value.xp == 0

    def test_duplicate_rejected(self, document: CharacterDocument, catalog: SkillCatalog) -> None:
        add_skill(document, catalog, "Swords", "weapon")
        result = add_skill(document, catalog, "Swords", "weapon")

        assert not result.success
        assert result.error == ErrorKind.DUPLICATE_SKILL
        assert len(document.skills) == 1

    def test_same_name_different_type_allowed(
        self,
        document: CharacterDocument,
        catalog: SkillCatalog,
    ) -> None:
        assert add_skill(document, catalog, "Herbalism", "skill").success
        assert add_skill(document, catalog, "Herbalism", "weapon").success
        assert len(document.skills) == 2

    def test_non_magical_normalized_before_duplicate_check(
        self,
        document: CharacterDocument,
        catalog: SkillCatalog,
    ) -> None:
        add_skill(document, catalog, "Cooking", "skill")
        result = add_skill(document, catalog, "Cooking", "non-magical")

        assert result.error == ErrorKind.DUPLICATE_SKILL

    def test_unknown_type_rejected(self, document: CharacterDocument, catalog: SkillCatalog) -> None:
        result = add_skill(document, catalog, "Mind Read", "psionic")

        assert result.error == ErrorKind.VALIDATION_ERROR
        assert document.skills == []

    def test_materializes_catalog_domain(
        self,
        document: CharacterDocument,
        catalog: SkillCatalog,
    ) -> None:
        result = add_skill(
            document, catalog, "Fire Bolt", "spell", magical=True, parent_id="elementalism"
        )

        assert result.success
        domain = document.find_skill("Elementalism", SkillType.DOMAIN)
        assert domain is not None
        assert domain.parent_id is None
        assert result.value.parent_id == domain.id
        assert [s.name for s in document.skills] == ["Elementalism", "Fire Bolt"]

    def test_materialized_domain_uses_catalog_level(
        self,
        document: CharacterDocument,
        catalog: SkillCatalog,
    ) -> None:
        add_skill(document, catalog, "Drain", "spell", parent_id="necromancy")

        assert document.find_skill("Necromancy", SkillType.DOMAIN).level == -1

    def test_reuses_learned_domain(self, document: CharacterDocument, catalog: SkillCatalog) -> None:
        domain = _learn(document, "Elementalism", SkillType.DOMAIN, magical=True)

        add_skill(document, catalog, "Fire Bolt", "spell", parent_id="elementalism")
        add_skill(document, catalog, "Frost Lance", "spell", default_level=1, parent_id="elementalism")

        assert len(document.domains()) == 1
        assert all(s.parent_id == domain.id for s in document.skills[1:])
        assert document.skills[2].level == 1

    def test_unknown_parent_kept_verbatim(
        self,
        document: CharacterDocument,
        catalog: SkillCatalog,
    ) -> None:
        result = add_skill(document, catalog, "Odd", "spell", parent_id="nowhere")

        assert result.value.parent_id == "nowhere"
        assert len(document.skills) == 1


class TestAddCustomSkill:
    """Tests for add_custom_skill."""

    def test_adds_custom(self, document: CharacterDocument) -> None:
        result = add_custom_skill(
            document, "  Juggling ", "non-magical", description="Keep three balls up."
        )

        skill = result.value
        assert result.success
        assert skill.name == "Juggling"
        assert skill.type == SkillType.SKILL
        assert skill.custom is True
        assert skill.parent_id is None
        assert skill.description == "Keep three balls up."

    def test_blank_name(self, document: CharacterDocument) -> None:
        result = add_custom_skill(document, "   ", "skill")

        assert result.error == ErrorKind.VALIDATION_ERROR
        assert result.message == "Please enter a skill name."

    def test_duplicate(self, document: CharacterDocument) -> None:
        add_custom_skill(document, "Juggling", "skill")
        result = add_custom_skill(document, "Juggling", "skill")

        assert result.error == ErrorKind.DUPLICATE_SKILL
        assert result.message == "A skill with this name already exists."


class TestDeleteSkill:
    """Tests for cascading delete."""

    def test_cascades_to_direct_children_only(self, document: CharacterDocument) -> None:
        domain = _learn(document, "Elementalism", SkillType.DOMAIN)
        child = _learn(document, "Fire Bolt", SkillType.SPELL, parent_id=domain.id)
        grandchild = _learn(document, "Ember", SkillType.SPELL, parent_id=child.id)
        other = _learn(document, "Swords", SkillType.WEAPON)

        result = delete_skill(document, domain.id)

        assert result.success
        assert result.value == [domain, child]
        assert document.skills == [grandchild, other]

    def test_unknown_id(self, document: CharacterDocument) -> None:
        _learn(document, "Swords", SkillType.WEAPON)

        result = delete_skill(document, "missing")

        assert result.error == ErrorKind.NOT_FOUND
        assert len(document.skills) == 1


class TestAddXP:
    """Tests for XP awards and level-ups."""

    def test_accumulates(self, document: CharacterDocument) -> None:
        skill = _learn(document, "Swords", SkillType.WEAPON)

        result = add_xp(document, skill.id, 40)

        assert isinstance(result.value, XPGain)
        assert result.value.leveled_up is False
        assert skill.xp == 40
        assert result.message == "Added 40 XP to Swords"

    def test_level_up_resets_xp_without_carry(self, document: CharacterDocument) -> None:
        skill = _learn(document, "Swords", SkillType.WEAPON, level=1)
        skill.xp = 150

        result = add_xp(document, skill.id, 500)

        assert result.value.leveled_up is True
        assert skill.level == 2
        assert skill.xp == 0
        assert result.message == "Swords leveled up to 2!"

    def test_negative_level_climbs_toward_zero(self, document: CharacterDocument) -> None:
        skill = _learn(document, "Necromancy", SkillType.DOMAIN, level=-3)

        add_xp(document, skill.id, 399)
        assert skill.level == -3
        add_xp(document, skill.id, 1)

        assert skill.level == -2
        assert skill.xp == 0

    def test_exact_threshold_levels(self, document: CharacterDocument) -> None:
        skill = _learn(document, "Swords", SkillType.WEAPON)

        add_xp(document, skill.id, 100)

        assert (skill.level, skill.xp) == (1, 0)

    def test_unknown_id(self, document: CharacterDocument) -> None:
        assert add_xp(document, "missing", 10).error == ErrorKind.NOT_FOUND

    def test_negative_amount_rejected(self, document: CharacterDocument) -> None:
        skill = _learn(document, "Swords", SkillType.WEAPON)
        skill.xp = 20

        result = add_xp(document, skill.id, -5)

        assert result.error == ErrorKind.VALIDATION_ERROR
        assert skill.xp == 20


class TestGrouping:
    """Tests for group_by_domain."""

    def test_partitions(self, document: CharacterDocument) -> None:
        shaping = _learn(document, "Shaping", SkillType.DOMAIN)
        ward = _learn(document, "Ward", SkillType.SPELL, parent_id=shaping.id)
        sword = _learn(document, "Swords", SkillType.WEAPON)
        stray = _learn(document, "Mana Bolt", SkillType.SPELL, parent_id="shaping")

        grouping = group_by_domain(document)

        assert list(grouping.domains) == [shaping.id]
        assert grouping.domains[shaping.id].children == [ward]
        assert grouping.orphaned == [sword, stray]

    def test_child_before_domain(self, document: CharacterDocument) -> None:
        child = Skill.create("Ward", SkillType.SPELL, parent_id="d1")
        document.skills.append(child)
        document.skills.append(
            Skill.model_validate({"id": "d1", "name": "Shaping", "type": "domain"})
        )

        grouping = group_by_domain(document)

        assert grouping.domains["d1"].children == [child]
        assert grouping.orphaned == []


class TestQueries:
    """Tests for exists and resolve_parent."""

    def test_exists(self, document: CharacterDocument) -> None:
        _learn(document, "Ward", SkillType.SPELL, parent_id="x")

        assert exists(document, "Ward", "spell", "x")
        assert not exists(document, "Ward", "spell", None)

    def test_resolve_parent(self, document: CharacterDocument, catalog: SkillCatalog) -> None:
        assert resolve_parent(document, catalog, None) is None
        assert resolve_parent(document, catalog, "elementalism") == "elementalism"

        domain = _learn(document, "Elementalism", SkillType.DOMAIN)

        assert resolve_parent(document, catalog, "elementalism") == domain.id
        assert resolve_parent(document, catalog, domain.id) == domain.id
        assert len(document.skills) == 1


class TestInitializeDefaults:
    """Tests for granting free catalog skills."""

    def test_grants_free_domains_and_spells(
        self,
        document: CharacterDocument,
        catalog: SkillCatalog,
    ) -> None:
        added = initialize_defaults(document, catalog)

        assert [s.name for s in added] == ["Shaping", "Mana Bolt"]
        assert added[0].type == SkillType.DOMAIN
        assert added[1].parent_id == "shaping"

    def test_idempotent(self, document: CharacterDocument, catalog: SkillCatalog) -> None:
        initialize_defaults(document, catalog)
        assert initialize_defaults(document, catalog) == []
        assert len(document.skills) == 2

    def test_skips_free_spell_learned_under_domain(
        self,
        document: CharacterDocument,
        catalog: SkillCatalog,
    ) -> None:
        add_skill(document, catalog, "Mana Bolt", "spell", parent_id="shaping")

        assert initialize_defaults(document, catalog) == []
        mana_bolts = [s for s in document.skills if s.name == "Mana Bolt"]
        assert len(mana_bolts) == 1
        assert mana_bolts[0].parent_id == document.find_skill("Shaping", SkillType.DOMAIN).id

    def test_free_spell_grouped_as_orphaned(
        self,
        document: CharacterDocument,
        catalog: SkillCatalog,
    ) -> None:
        document.initialize_defaults(catalog)

        grouping = group_by_domain(document)

        assert [s.name for s in grouping.orphaned] == ["Mana Bolt"]

    def test_empty_catalog_adds_nothing(self, document: CharacterDocument) -> None:
        assert initialize_defaults(document, SkillCatalog.empty()) == []
