"""Level progression rules.

This module holds the level-driven rules used by the totals calculator:
- Proficiency bonus by level
- Automatic ability increases
- Feat points awarded at milestone levels
- Trading post-cap XP for extra feat points
"""

from __future__ import annotations

from collections.abc import Iterable

from rpg_sheet.core import constants
from rpg_sheet.core.config import RulesSettings, get_settings
from rpg_sheet.core.exceptions import ProgressionError


# =============================================================================
# Proficiency Bonus by Level
# =============================================================================


def get_proficiency_bonus(level: int) -> int:
    """Get proficiency bonus for a given level."""
    if level <= 4:
        return 2
    if level <= 8:
        return 3
    if level <= 12:
        return 4
    if level <= 16:
        return 5
    return 6  # Levels 17+


# =============================================================================
# Ability Increases
# =============================================================================


def automatic_ability_increase(level: int) -> int:
    """Ability points every score gains from level alone."""
    return max(0, level) // constants.LEVELS_PER_ABILITY_INCREASE


# =============================================================================
# Feat Points
# =============================================================================


def milestone_feat_points(
    level: int,
    milestones: Iterable[int] = constants.FEAT_POINT_MILESTONES,
) -> int:
    """Count the milestone levels a character has reached.

    Example:
        >>> milestone_feat_points(8)
        3
    """
    return sum(1 for milestone in milestones if level >= milestone)


def convert_xp_to_feat_points(
    xp: int,
    level: int,
    count: int = 1,
    *,
    rules: RulesSettings | None = None,
) -> tuple[int, int]:
    """Trade XP earned past the level cap for extra feat points.

    Args:
        xp: Current XP.
        level: Current character level.
        count: Number of feat points to buy.
        rules: Rules supplying the XP cost and level cap; the configured
            rules if omitted.

    Returns:
        Tuple of (remaining_xp, points_bought).

    Raises:
        ProgressionError: Below the level cap, for a non-positive count, or
            when XP does not cover the purchase.
    """
    rules = rules or get_settings().rules
    level_cap = rules.level_cap
    if level < level_cap:
        raise ProgressionError(
            f"Feat points can only be bought with XP from level {level_cap}",
            details={"level": level},
        )
    if count < 1:
        raise ProgressionError("Must buy at least one feat point", details={"count": count})
    cost = count * rules.xp_per_feat_point
    if xp < cost:
        raise ProgressionError(
            "Not enough XP to buy feat points",
            details={"xp": xp, "cost": cost},
        )
    return xp - cost, count


def affordable_feat_points(xp: int, rules: RulesSettings | None = None) -> int:
    """How many feat points the given XP could buy."""
    rules = rules or get_settings().rules
    return max(0, xp) // rules.xp_per_feat_point


__all__ = [
    "get_proficiency_bonus",
    "automatic_ability_increase",
    "milestone_feat_points",
    "convert_xp_to_feat_points",
    "affordable_feat_points",
]
