"""Dice rolling for the recompute engine.

This module wraps the d20 library for the few rolls the engine makes:
HP-per-level rolls, one-shot effect amounts written as dice expressions,
and attack rolls against the character's armor class.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from typing import Any

import d20

from rpg_sheet.core.exceptions import DiceRollError
from rpg_sheet.core.logging import get_logger
from rpg_sheet.models.enums import HPRollMode
from rpg_sheet.models.fields import FieldValue, Number, Text


logger = get_logger(__name__)

_DIE_PATTERN = re.compile(r"^\s*1?d(\d+)\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class DiceExpression:
    """A rolled dice expression.

    Attributes:
        expression: The original dice expression string.
        total: The total result of the roll.
        dice: Individual kept dice results.
        modifier: Static modifier applied.
    """

    expression: str
    total: int
    dice: list[int]
    modifier: int


# =============================================================================
# Hit Dice
# =============================================================================


def parse_die(raw: str) -> int:
    """Parse a single die such as 'd10' into its number of sides.

    Raises:
        DiceRollError: If the text is not a die or has fewer than 2 sides.

    Example:
        >>> parse_die("d12")
        12
    """
    match = _DIE_PATTERN.match(raw)
    if match is None:
        raise DiceRollError(f"Invalid dice type: {raw}", expression=raw)
    sides = int(match.group(1))
    if sides < 2:
        raise DiceRollError("Dice must have at least 2 sides", expression=raw)
    return sides


def hit_die_sides(value: FieldValue | None) -> int | None:
    """Read a ``hitDie`` field written as 'd10' or as the number 10.

    Returns:
        The number of sides, or None if the field is absent or invalid.
    """
    if isinstance(value, Number) and isinstance(value.value, int) and value.value >= 2:
        return value.value
    if isinstance(value, Text):
        try:
            return parse_die(value.value)
        except DiceRollError:
            if value.value.strip().isdigit() and int(value.value) >= 2:
                return int(value.value)
    return None


def average_roll(sides: int) -> int:
    """Average of a die, rounded down (a d8 averages 4)."""
    return (sides + 1) // 2


# =============================================================================
# Roller
# =============================================================================


class DiceRoller:
    """Dice roller backed by the d20 library.

    Example:
        >>> roller = DiceRoller(seed=42)
        >>> result = roller.roll("2d6+1")
        >>> 3 <= result.total <= 13
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    def roll(self, expression: str) -> DiceExpression:
        """Roll dice according to the given expression.

        Args:
            expression: Dice expression (e.g., '1d20+5', '2d6+3').

        Returns:
            DiceExpression containing roll results.

        Raises:
            DiceRollError: If the expression is invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(
                f"Invalid dice expression: {exc}",
                expression=expression,
            ) from exc

        dice_values = self._extract_dice_values(result.expr)
        rolled = DiceExpression(
            expression=expression,
            total=result.total,
            dice=dice_values,
            modifier=result.total - sum(dice_values),
        )
        logger.debug("Dice rolled", expression=expression, total=result.total)
        return rolled

    def _extract_dice_values(self, expr: Any) -> list[int]:
        """Extract the kept dice values from a d20 expression tree."""
        values: list[int] = []

        def traverse(node: Any) -> None:
            if isinstance(node, d20.Dice):
                for die in node.values:
                    if die.kept:
                        values.append(die.number)
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return values

    def roll_attack(self, attack_bonus: int) -> DiceExpression:
        """Roll d20 plus an attack bonus."""
        sign = "+" if attack_bonus >= 0 else ""
        return self.roll(f"1d20{sign}{attack_bonus}")

    def roll_amount(self, amount: int | str) -> int:
        """Resolve an action amount that is a number or a dice expression.

        Raises:
            DiceRollError: If a text amount is not a valid expression.
        """
        if isinstance(amount, int):
            return amount
        text = amount.strip()
        if text.lstrip("+-").isdigit():
            return int(text)
        return self.roll(text).total

    def roll_hit_points(self, sides: int, mode: HPRollMode) -> int:
        """Generate one level's worth of hit points.

        Args:
            sides: Hit die sides.
            mode: Roll the die, take its average, or take its maximum.
        """
        if mode == HPRollMode.MAX:
            return sides
        if mode == HPRollMode.AVERAGE:
            return average_roll(sides)
        return self.roll(f"1d{sides}").total


__all__ = [
    "DiceExpression",
    "DiceRoller",
    "average_roll",
    "hit_die_sides",
    "parse_die",
]
