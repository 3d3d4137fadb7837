"""Tests for dice rolling."""

from __future__ import annotations

import pytest

from rpg_sheet.core.exceptions import DiceRollError
from rpg_sheet.engine.dice import (
    DiceExpression,
    DiceRoller,
    average_roll,
    hit_die_sides,
    parse_die,
)
from rpg_sheet.models.enums import HPRollMode
from rpg_sheet.models.fields import Flag, Number, Text


class TestDiceRoller:
    """Tests for the DiceRoller class."""

    def test_simple_roll(self, dice_roller: DiceRoller) -> None:
        """Test a simple d20 roll."""
        result = dice_roller.roll("1d20")

        assert isinstance(result, DiceExpression)
        assert 1 <= result.total <= 20
        assert len(result.dice) == 1
        assert result.modifier == 0

    def test_roll_with_modifier(self, dice_roller: DiceRoller) -> None:
        """Test the static modifier is separated from the dice."""
        result = dice_roller.roll("2d6+3")

        assert result.modifier == 3
        assert len(result.dice) == 2
        assert 5 <= result.total <= 15

    def test_seed_is_reproducible(self) -> None:
        """Test two rollers with the same seed roll the same values."""
        first = [DiceRoller(seed=7).roll("4d6").dice]
        second = [DiceRoller(seed=7).roll("4d6").dice]

        assert first == second

    @pytest.mark.parametrize("expression", ["", "   ", "1d", "abc", "2d6+"])
    def test_invalid_expression(self, dice_roller: DiceRoller, expression: str) -> None:
        """Test invalid expressions raise DiceRollError."""
        with pytest.raises(DiceRollError):
            dice_roller.roll(expression)

    def test_roll_attack(self, dice_roller: DiceRoller) -> None:
        """Test attack rolls are d20 plus the bonus."""
        result = dice_roller.roll_attack(5)

        assert result.expression == "1d20+5"
        assert 6 <= result.total <= 25

    def test_roll_attack_negative_bonus(self, dice_roller: DiceRoller) -> None:
        """Test negative attack bonuses."""
        assert dice_roller.roll_attack(-2).expression == "1d20-2"

    @pytest.mark.parametrize(("amount", "expected"), [(10, 10), ("7", 7), (" +3 ", 3)])
    def test_roll_amount_fixed(self, dice_roller: DiceRoller, amount: int | str, expected: int) -> None:
        """Test fixed amounts are not rolled."""
        assert dice_roller.roll_amount(amount) == expected

    def test_roll_amount_expression(self, dice_roller: DiceRoller) -> None:
        """Test dice amounts are rolled."""
        assert 2 <= dice_roller.roll_amount("2d4") <= 8


class TestHitDice:
    """Tests for hit dice and HP-per-level generation."""

    @pytest.mark.parametrize(("raw", "expected"), [("d10", 10), ("1d8", 8), (" D12 ", 12)])
    def test_parse_die(self, raw: str, expected: int) -> None:
        """Test die parsing."""
        assert parse_die(raw) == expected

    @pytest.mark.parametrize("raw", ["d1", "2d6", "ten", "d"])
    def test_parse_die_invalid(self, raw: str) -> None:
        """Test invalid dice are rejected."""
        with pytest.raises(DiceRollError):
            parse_die(raw)

    def test_hit_die_sides(self) -> None:
        """Test the hitDie field accepts dice and numbers."""
        assert hit_die_sides(Text("d10")) == 10
        assert hit_die_sides(Text("12")) == 12
        assert hit_die_sides(Number(6)) == 6
        assert hit_die_sides(Number(1)) is None
        assert hit_die_sides(Text("big")) is None
        assert hit_die_sides(Flag(True)) is None
        assert hit_die_sides(None) is None

    @pytest.mark.parametrize(("sides", "expected"), [(6, 3), (8, 4), (10, 5), (12, 6)])
    def test_average_roll(self, sides: int, expected: int) -> None:
        """Test averages round down."""
        assert average_roll(sides) == expected

    def test_roll_hit_points_modes(self, dice_roller: DiceRoller) -> None:
        """Test the three HP roll modes."""
        assert dice_roller.roll_hit_points(10, HPRollMode.MAX) == 10
        assert dice_roller.roll_hit_points(10, HPRollMode.AVERAGE) == 5
        for _ in range(20):
            assert 1 <= dice_roller.roll_hit_points(10, HPRollMode.ROLL) <= 10
