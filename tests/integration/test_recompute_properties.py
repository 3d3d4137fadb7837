"""Integration tests for properties that hold across recompute passes.

These tests chain passes the way a caller does: recompute, commit the
returned state, then build the next input with ``carry_forward``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest

from rpg_sheet.core.config import Settings
from rpg_sheet.engine.dice import DiceRoller
from rpg_sheet.engine.health import apply_damage
from rpg_sheet.engine.recompute import recompute
from rpg_sheet.models.effects import EffectInstance
from rpg_sheet.models.enums import DamageType, HealthEventKind, HPRollMode, ProficiencyTier, Skill
from rpg_sheet.models.inputs import RecomputeInput
from rpg_sheet.models.state import CharacterState
from rpg_sheet.storage.documents import InMemoryDocumentStore


@pytest.fixture
def fighter(now: datetime, class_effect_catalog: set[str]) -> RecomputeInput:
    """A level 5 fighter with one feat and two buffs."""
    return RecomputeInput(
        level=5,
        class_path="classes/fighter",
        subclass_path="subclasses/champion",
        obtained_feats=["feats/tough"],
        effect_instances=[
            EffectInstance(source_path="effects/shield-of-faith"),
            EffectInstance(source_path="effects/fire-ward"),
        ],
        class_effect_catalog=class_effect_catalog,
        now=now,
    )


def _run(
    data: RecomputeInput,
    store: InMemoryDocumentStore,
    settings: Settings,
) -> CharacterState:
    return recompute(data, store, settings=settings, roller=DiceRoller(seed=11))


class TestIdempotence:
    """Tests for repeated passes without changes."""

    def test_second_pass_is_identical(
        self,
        fighter: RecomputeInput,
        store: InMemoryDocumentStore,
        settings: Settings,
    ) -> None:
        """Test carrying a state forward unchanged reproduces it."""
        first = _run(fighter, store, settings)
        second = _run(fighter.carry_forward(first), store, settings)

        assert second.model_dump() == first.model_dump()

    def test_rolled_hp_is_kept(
        self,
        fighter: RecomputeInput,
        store: InMemoryDocumentStore,
        settings: Settings,
    ) -> None:
        """Test rolled HP-per-level entries survive later passes."""
        rolled = fighter.model_copy(update={"hp_per_level": [], "hp_roll_mode": HPRollMode.ROLL})
        first = _run(rolled, store, settings)

        later = recompute(
            rolled.carry_forward(first),
            store,
            settings=settings,
            roller=DiceRoller(seed=99),
        )

        assert later.health.hp_per_level == first.health.hp_per_level
        assert later.health.max_hp == first.health.max_hp


class TestOrderIndependence:
    """Tests for results that do not depend on source order."""

    @pytest.fixture
    def grant_store(self) -> InMemoryDocumentStore:
        """Feats whose grants overlap."""
        documents: dict[str, dict[str, Any]] = {
            "feats/skulker": {
                "grantsSkillExpertise": ["stealth"],
                "grantsResistances": ["cold"],
            },
            "feats/nimble": {
                "grantsSkillProficiency": ["stealth", "acrobatics"],
                "grantsResistances": ["fire", "cold"],
            },
            "feats/warded": {"grantsResistances": "fire"},
        }
        return InMemoryDocumentStore(documents)

    @pytest.mark.parametrize(
        "feats",
        [
            ["feats/skulker", "feats/nimble", "feats/warded"],
            ["feats/warded", "feats/nimble", "feats/skulker"],
            ["feats/nimble", "feats/warded", "feats/skulker"],
        ],
    )
    def test_proficiencies_and_resistances(
        self,
        grant_store: InMemoryDocumentStore,
        settings: Settings,
        now: datetime,
        feats: list[str],
    ) -> None:
        """Test tiers and damage types are the same in any order."""
        state = recompute(RecomputeInput(obtained_feats=feats, now=now), grant_store, settings=settings)

        assert state.skill_tier(Skill.STEALTH) == ProficiencyTier.EXPERT
        assert state.skill_tier(Skill.ACROBATICS) == ProficiencyTier.PROFICIENT
        assert state.resistances == {
            DamageType.COLD: {"feats/skulker", "feats/nimble"},
            DamageType.FIRE: {"feats/nimble", "feats/warded"},
        }


class TestHitPoints:
    """Tests for current HP across passes."""

    def test_high_water_mark(self, settings: Settings, now: datetime) -> None:
        """Test a +5 max HP bonus heals 5 exactly once."""
        store = InMemoryDocumentStore({"feats/hardy": {"hpBonus": 5}})
        data = RecomputeInput(level=1, hp_per_level=[20], now=now)

        first = recompute(data, store, settings=settings)
        assert (first.health.max_hp, first.health.current_hp) == (20, 20)

        second_input = data.carry_forward(first, current_hp=15, obtained_feats=["feats/hardy"])
        second = recompute(second_input, store, settings=settings)
        assert (second.health.max_hp, second.health.current_hp) == (25, 20)

        third = recompute(second_input.carry_forward(second), store, settings=settings)
        assert (third.health.max_hp, third.health.current_hp) == (25, 20)

    def test_losing_a_bonus_clamps(self, settings: Settings, now: datetime) -> None:
        """Test removing an HP bonus clamps current HP to the new max."""
        store = InMemoryDocumentStore({"feats/hardy": {"hpBonus": 5}})
        data = RecomputeInput(level=1, hp_per_level=[20], obtained_feats=["feats/hardy"], now=now)

        first = recompute(data, store, settings=settings)
        second = recompute(data.carry_forward(first, obtained_feats=[]), store, settings=settings)

        assert (second.health.max_hp, second.health.current_hp) == (20, 20)

    def test_one_shot_heal_applies_once(
        self,
        fighter: RecomputeInput,
        store: InMemoryDocumentStore,
        settings: Settings,
    ) -> None:
        """Test a healing potion heals on one pass only."""
        first = _run(fighter, store, settings)
        max_hp = first.health.max_hp

        potion = EffectInstance(source_path="effects/healing-potion")
        wounded = fighter.carry_forward(
            first,
            current_hp=max_hp - 20,
            effect_instances=[*first.effect_instances, potion],
        )
        second = _run(wounded, store, settings)
        third = _run(wounded.carry_forward(second), store, settings)

        assert second.health.current_hp == max_hp - 10
        assert third.health.current_hp == max_hp - 10
        assert [event.kind for event in third.damage_log] == [HealthEventKind.HEALING]
        assert third.effect_instances[-1].executed


class TestTemporaryHitPoints:
    """Tests for the temp-HP pool across passes."""

    def test_largest_grant_and_absorbed_damage(
        self,
        fighter: RecomputeInput,
        store: InMemoryDocumentStore,
        settings: Settings,
    ) -> None:
        """Test 8 and 12 temp HP give 12, and 5 damage leaves 7."""
        buffed = fighter.model_copy(
            update={"effect_instances": [*fighter.effect_instances, EffectInstance(source_path="effects/aid")]},
        )
        first = _run(buffed, store, settings)
        assert first.health.temp_hp == 12

        apply_damage(first, 5)
        assert first.health.effective_temp_hp == 7

        second = _run(buffed.carry_forward(first), store, settings)
        assert second.health.effective_temp_hp == 7
        assert second.health.current_hp == first.health.max_hp

    def test_pool_shrinks_with_its_source(
        self,
        fighter: RecomputeInput,
        store: InMemoryDocumentStore,
        settings: Settings,
    ) -> None:
        """Test absorbed damage is clamped when the pool gets smaller."""
        aid = EffectInstance(source_path="effects/aid")
        buffed = fighter.model_copy(update={"effect_instances": [*fighter.effect_instances, aid]})
        first = _run(buffed, store, settings)
        apply_damage(first, 10)

        without_aid = [instance for instance in first.effect_instances if instance.id != aid.id]
        second = _run(buffed.carry_forward(first, effect_instances=without_aid), store, settings)

        assert second.health.temp_hp == 8
        assert second.health.temp_hp_damage == 8
        assert second.health.effective_temp_hp == 0


class TestEffectCatalog:
    """Tests for the class-effect allow-list across a level up."""

    def test_unlock_on_level_up(
        self,
        fighter: RecomputeInput,
        store: InMemoryDocumentStore,
        settings: Settings,
    ) -> None:
        """Test effects unlock at their level and never outside the catalog."""
        low = _run(fighter.model_copy(update={"level": 4}), store, settings)
        high = _run(fighter, store, settings)

        assert low.unlocked_effects == []
        assert low.speed.base == 30
        assert high.unlocked_effects == ["effects/action-surge"]
        assert high.speed.base == 40
        assert high.abilities.strength == 11
