"""Derived totals.

Turns accumulated bonuses, level, spent points and manual values into the
final numbers of a character state:

- Ability score = base + level // 4 + points spent + bonuses
- Proficiency bonus by level
- Max HP = HP-per-level entries up to the level + HP bonuses
  + CON modifier x level (at least 1)
- Feat points available = manual + extra + milestones + bonuses - spent
- Temp-HP damage clamped to the current pool
"""

from __future__ import annotations

from rpg_sheet.core import constants
from rpg_sheet.core.config import RulesSettings
from rpg_sheet.core.logging import get_logger
from rpg_sheet.engine.accumulator import Accumulation
from rpg_sheet.engine.dice import DiceRoller, hit_die_sides
from rpg_sheet.models.enums import Ability, HPRollMode
from rpg_sheet.models.fields import FieldMap
from rpg_sheet.models.inputs import RecomputeInput
from rpg_sheet.models.progression import (
    automatic_ability_increase,
    get_proficiency_bonus,
    milestone_feat_points,
)
from rpg_sheet.models.state import CharacterState
from rpg_sheet.storage.documents import normalize_path


logger = get_logger(__name__)


def resolve_hit_die(class_fields: FieldMap, default: int) -> int:
    """Hit die sides from the class document's ``hitDie`` field."""
    return hit_die_sides(class_fields.get(constants.FIELD_HIT_DIE)) or default


def extend_hp_per_level(
    history: list[int],
    level: int,
    sides: int,
    mode: HPRollMode,
    roller: DiceRoller,
) -> list[int]:
    """Fill the HP-per-level history up to ``level``; existing entries are kept."""
    extended = list(history)
    while len(extended) < level:
        extended.append(roller.roll_hit_points(sides, mode))
    return extended


def calculate_totals(
    state: CharacterState,
    accumulation: Accumulation,
    data: RecomputeInput,
    *,
    rules: RulesSettings,
    roller: DiceRoller,
) -> None:
    """Compute the derived totals into ``state``.

    Args:
        state: State holding the accumulated bonuses.
        accumulation: Ability bonuses and per-source fields.
        data: The recompute input.
        rules: Rules settings.
        roller: Roller for missing HP-per-level entries.
    """
    level = data.level
    state.level = level

    increase = automatic_ability_increase(level)
    for ability in Ability:
        state.abilities.set_score(
            ability,
            rules.base_ability_score
            + increase
            + data.spent_points.for_ability(ability)
            + accumulation.ability_bonuses.get(ability, 0),
        )
    state.proficiency_bonus = get_proficiency_bonus(level)

    health = state.health
    class_fields = (
        accumulation.fields_by_source.get(normalize_path(data.class_path), {})
        if data.class_path
        else {}
    )
    sides = resolve_hit_die(class_fields, rules.default_hit_die)
    mode = data.hp_roll_mode or HPRollMode(rules.hp_roll_mode)
    health.hp_per_level = extend_hp_per_level(data.hp_per_level, level, sides, mode, roller)
    constitution = state.abilities.modifier(Ability.CON)
    health.max_hp = max(
        1,
        sum(health.hp_per_level[:level])
        + health.feat_hp_bonus
        + health.effect_hp_bonus
        + constitution * level,
    )

    ledger = state.feat_points
    obtained_feats = {normalize_path(path) for path in data.obtained_feats if path.strip()}
    ledger.manual = data.manual_feat_points
    ledger.extra_granted = data.extra_feat_points_granted
    ledger.milestone = milestone_feat_points(level, rules.feat_point_milestones)
    ledger.spent = len(obtained_feats) * rules.feat_cost + data.spent_points.total
    ledger.available = (
        ledger.manual
        + ledger.extra_granted
        + ledger.milestone
        + ledger.bonus_from_sources
        - ledger.spent
    )

    health.manual_temp_hp = data.manual_temp_hp
    health.temp_hp_damage = min(data.temp_hp_damage, health.temp_hp_pool)

    logger.debug(
        "Totals calculated",
        max_hp=health.max_hp,
        hit_die=sides,
        feat_points=ledger.available,
    )


__all__ = [
    "calculate_totals",
    "extend_hp_per_level",
    "resolve_hit_die",
]
