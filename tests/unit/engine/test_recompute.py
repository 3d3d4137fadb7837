"""Tests for the recompute pass."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest

from rpg_sheet.core.config import Settings
from rpg_sheet.core.exceptions import RecomputeError
from rpg_sheet.engine.dice import DiceRoller
from rpg_sheet.engine.projections import current_ac
from rpg_sheet.engine.recompute import recompute
from rpg_sheet.models.effects import EffectInstance
from rpg_sheet.models.enums import Ability, MovementType, NoticeKind, ProficiencyTier, Skill
from rpg_sheet.models.inputs import RecomputeInput
from rpg_sheet.storage.documents import FieldReader, InMemoryDocumentStore


class BrokenReader(FieldReader):
    """Reader whose backend fails in an unexpected way."""

    def load_raw(self, path: str) -> dict[str, Any] | None:
        raise RuntimeError("disk on fire")


@pytest.fixture
def fighter_input(now: datetime, class_effect_catalog: set[str]) -> RecomputeInput:
    """A level 5 champion fighter with feats and effects."""
    return RecomputeInput(
        level=5,
        class_path="classes/fighter",
        subclass_path="subclasses/champion",
        obtained_feats=["feats/tough", "feats/alert"],
        effect_instances=[
            EffectInstance(source_path="effects/shield-of-faith"),
            EffectInstance(source_path="effects/aid"),
            EffectInstance(source_path="effects/healing-potion"),
        ],
        class_effect_catalog=class_effect_catalog,
        now=now,
    )


class TestFullPass:
    """Tests for a complete pass over the sample catalog."""

    def test_sources(
        self,
        fighter_input: RecomputeInput,
        store: InMemoryDocumentStore,
        settings: Settings,
        dice_roller: DiceRoller,
    ) -> None:
        """Test the resolved sources and inferred sets."""
        state = recompute(fighter_input, store, settings=settings, roller=dice_roller)

        assert state.obtained_class_feats == ["classfeats/second-wind", "classfeats/improved-critical"]
        assert state.unlocked_effects == ["effects/action-surge"]
        assert "effects/forbidden" not in state.sources
        assert state.notices == []

    def test_derived_numbers(
        self,
        fighter_input: RecomputeInput,
        store: InMemoryDocumentStore,
        settings: Settings,
        dice_roller: DiceRoller,
    ) -> None:
        """Test abilities, HP, AC, speed and proficiencies."""
        state = recompute(fighter_input, store, settings=settings, roller=dice_roller)

        assert state.abilities.strength == 11
        assert state.abilities.dexterity == 13
        assert state.proficiency_bonus == 3
        assert state.health.hp_per_level == [5, 5, 5, 5, 5]
        assert state.health.max_hp == 25 + 5
        assert state.health.current_hp == 30
        assert state.health.temp_hp == 12
        assert state.armor_class.bonus == 2
        assert current_ac(state) == state.armor_class.base + 1 + 2
        assert state.speed.base == 40
        assert state.speed.additional_speeds.get(MovementType.FLY) is None
        assert state.skill_tier(Skill.ATHLETICS) == ProficiencyTier.EXPERT
        assert state.skill_tier(Skill.PERCEPTION) == ProficiencyTier.PROFICIENT
        assert state.save_tier(Ability.CON) == ProficiencyTier.PROFICIENT
        assert state.feat_points.bonus_from_sources == 1

    def test_input_not_mutated(
        self,
        fighter_input: RecomputeInput,
        store: InMemoryDocumentStore,
        settings: Settings,
        dice_roller: DiceRoller,
    ) -> None:
        """Test executed flags land on copies, never on the input."""
        before = fighter_input.model_dump()

        state = recompute(fighter_input, store, settings=settings, roller=dice_roller)

        assert state.effect_instances[2].executed
        assert not fighter_input.effect_instances[2].executed
        assert fighter_input.model_dump() == before

    def test_default_settings(self, store: InMemoryDocumentStore) -> None:
        """Test settings and roller are optional."""
        state = recompute(RecomputeInput(level=1, obtained_feats=["feats/tough"]), store)

        assert state.health.feat_hp_bonus == 5


class TestFailures:
    """Tests for absorbed and fatal failures."""

    def test_missing_source_is_a_notice(
        self,
        store: InMemoryDocumentStore,
        settings: Settings,
        now: datetime,
    ) -> None:
        """Test a missing feat does not fail the pass."""
        data = RecomputeInput(obtained_feats=["feats/ghost", "feats/tough"], now=now)

        state = recompute(data, store, settings=settings)

        assert state.health.feat_hp_bonus == 5
        assert [notice.kind for notice in state.notices] == [NoticeKind.DOCUMENT_UNAVAILABLE]

    def test_unexpected_error_wrapped(self, settings: Settings, now: datetime) -> None:
        """Test unexpected errors become RecomputeError."""
        data = RecomputeInput(obtained_feats=["feats/tough"], now=now)

        with pytest.raises(RecomputeError) as exc_info:
            recompute(data, BrokenReader(), settings=settings)

        assert exc_info.value.details["error_type"] == "RuntimeError"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
