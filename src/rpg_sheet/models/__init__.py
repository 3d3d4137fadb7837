"""Pydantic models for the rpg-sheet engine.

Submodules:
    enums: Abilities, skills, damage and movement types, tiers, modes.
    fields: Tagged field value variants read from source documents.
    effects: Effect instances and their one-shot actions.
    state: CharacterState and its blocks.
    inputs: RecomputeInput and spent points.
    progression: Level-driven rules.
"""

from __future__ import annotations

from rpg_sheet.models.effects import EffectAction, EffectInstance
from rpg_sheet.models.enums import (
    Ability,
    ActionType,
    DamageType,
    HealthEventKind,
    HPRollMode,
    MovementType,
    NoticeKind,
    OneShotStatus,
    ProficiencyTier,
    Skill,
)
from rpg_sheet.models.fields import (
    FieldMap,
    FieldValue,
    Flag,
    Number,
    Record,
    Text,
    TextList,
    to_field_map,
    to_field_value,
)
from rpg_sheet.models.inputs import RecomputeInput, SpentPoints
from rpg_sheet.models.progression import (
    automatic_ability_increase,
    convert_xp_to_feat_points,
    get_proficiency_bonus,
    milestone_feat_points,
)
from rpg_sheet.models.state import (
    AbilityScores,
    ArmorClassBlock,
    CharacterState,
    FeatPointLedger,
    HealthBlock,
    HealthEvent,
    Notice,
    ProficiencyEntry,
    SenseEntry,
    SpeedBlock,
    SpeedEntry,
    calculate_modifier,
)


__all__ = [
    # Enums
    "Ability",
    "ActionType",
    "DamageType",
    "HealthEventKind",
    "HPRollMode",
    "MovementType",
    "NoticeKind",
    "OneShotStatus",
    "ProficiencyTier",
    "Skill",
    # Field values
    "FieldMap",
    "FieldValue",
    "Flag",
    "Number",
    "Record",
    "Text",
    "TextList",
    "to_field_map",
    "to_field_value",
    # Effects
    "EffectAction",
    "EffectInstance",
    # State
    "AbilityScores",
    "ArmorClassBlock",
    "CharacterState",
    "FeatPointLedger",
    "HealthBlock",
    "HealthEvent",
    "Notice",
    "ProficiencyEntry",
    "SenseEntry",
    "SpeedBlock",
    "SpeedEntry",
    "calculate_modifier",
    # Inputs
    "RecomputeInput",
    "SpentPoints",
    # Progression
    "automatic_ability_increase",
    "convert_xp_to_feat_points",
    "get_proficiency_bonus",
    "milestone_feat_points",
]
