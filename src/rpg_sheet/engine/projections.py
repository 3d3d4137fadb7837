"""Read-only projections over a character state.

Presentation layers read derived numbers through these helpers instead of
recomputing them.
"""

from __future__ import annotations

from datetime import date, datetime

from rpg_sheet.models.effects import EffectInstance
from rpg_sheet.models.enums import Ability, Skill
from rpg_sheet.models.state import CharacterState


def ability_modifier(state: CharacterState, ability: Ability) -> int:
    """Modifier of one ability score."""
    return state.abilities.modifier(ability)


def current_ac(state: CharacterState) -> int:
    """Armor class: base + modifier of the AC ability (if any) + bonus."""
    armor_class = state.armor_class
    modifier = (
        state.abilities.modifier(armor_class.modifier_ability)
        if armor_class.modifier_ability is not None
        else 0
    )
    return armor_class.base + modifier + armor_class.bonus


def effective_temp_hp(state: CharacterState) -> int:
    """Temporary hit points left after absorbed damage."""
    return state.health.effective_temp_hp


def days_remaining(instance: EffectInstance, now: date | datetime) -> int | None:
    """Days left on a timed effect; None when it never expires."""
    return instance.days_remaining(now)


def skill_bonus(state: CharacterState, skill: Skill) -> int:
    """Skill check bonus: governing ability modifier plus proficiency."""
    tier = state.skill_tier(skill)
    return state.abilities.modifier(skill.ability) + tier.multiplier * state.proficiency_bonus


def save_bonus(state: CharacterState, ability: Ability) -> int:
    """Saving throw bonus: ability modifier plus proficiency."""
    tier = state.save_tier(ability)
    return state.abilities.modifier(ability) + tier.multiplier * state.proficiency_bonus


__all__ = [
    "ability_modifier",
    "current_ac",
    "effective_temp_hp",
    "days_remaining",
    "skill_bonus",
    "save_bonus",
]
