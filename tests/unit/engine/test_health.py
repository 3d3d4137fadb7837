"""Tests for damage and healing."""

from __future__ import annotations

from datetime import date

import pytest

from rpg_sheet.core.exceptions import ValidationError
from rpg_sheet.engine.health import apply_damage, apply_healing, restore_temp_hp
from rpg_sheet.models.enums import HealthEventKind
from rpg_sheet.models.state import CharacterState, HealthBlock


DAY = date(2026, 3, 15)


def _state(max_hp: int = 20, current_hp: int = 20, temp_hp: int = 0, temp_hp_damage: int = 0) -> CharacterState:
    return CharacterState(
        health=HealthBlock(
            max_hp=max_hp,
            current_hp=current_hp,
            temp_hp=temp_hp,
            temp_hp_damage=temp_hp_damage,
        )
    )


class TestDamage:
    """Tests for apply_damage."""

    def test_temp_hp_absorbs_first(self) -> None:
        """Test temp HP takes damage before current HP."""
        state = _state(temp_hp=5)

        result = apply_damage(state, 8, on=DAY)

        assert (result.absorbed, result.dealt) == (5, 3)
        assert state.health.current_hp == 17
        assert state.health.effective_temp_hp == 0

    def test_partial_temp_absorb(self) -> None:
        """Test damage below the temp pool leaves current HP alone."""
        state = _state(temp_hp=12)

        apply_damage(state, 5, on=DAY)

        assert state.health.current_hp == 20
        assert state.health.temp_hp_damage == 5
        assert state.health.effective_temp_hp == 7

    def test_floor_at_zero(self) -> None:
        """Test current HP never drops below zero."""
        state = _state(current_hp=4)

        result = apply_damage(state, 30, on=DAY)

        assert result.dealt == 4
        assert state.health.current_hp == 0

    def test_event_logged(self) -> None:
        """Test damage is appended to the health log."""
        state = _state(temp_hp=2)

        apply_damage(state, 6, on=DAY)

        event = state.damage_log[-1]
        assert event.kind == HealthEventKind.DAMAGE
        assert event.occurred_on == DAY
        assert event.amount == 6
        assert event.absorbed == 2

    def test_negative_amount(self) -> None:
        """Test negative damage is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            apply_damage(_state(), -1)

        assert exc_info.value.details["field_name"] == "damage"


class TestHealing:
    """Tests for apply_healing and restore_temp_hp."""

    def test_capped_at_max(self) -> None:
        """Test healing never exceeds max HP."""
        state = _state(current_hp=15)

        result = apply_healing(state, 10, on=DAY)

        assert result.healed == 5
        assert state.health.current_hp == 20
        assert state.damage_log[-1].kind == HealthEventKind.HEALING
        assert state.damage_log[-1].healed == 5

    def test_full_health(self) -> None:
        """Test healing at full HP heals nothing but is logged."""
        state = _state()

        assert apply_healing(state, 3, on=DAY).healed == 0
        assert len(state.damage_log) == 1

    def test_restore_temp_hp(self) -> None:
        """Test temp healing undoes absorbed damage, never below zero."""
        state = _state(temp_hp=8, temp_hp_damage=6)

        assert restore_temp_hp(state, 4) == 4
        assert restore_temp_hp(state, 10) == 2
        assert state.health.temp_hp_damage == 0
        assert state.health.effective_temp_hp == 8

    def test_negative_healing(self) -> None:
        """Test negative healing is rejected."""
        with pytest.raises(ValidationError):
            apply_healing(_state(), -3)
