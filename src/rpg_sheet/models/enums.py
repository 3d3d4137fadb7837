"""Enumeration types for the rpg-sheet engine.

This module defines the enumeration types used by the aggregation engine:
abilities, skills, damage and movement types, proficiency tiers, HP roll
modes, one-shot action kinds, and notice kinds. Each grant target enum offers
a ``parse`` helper that normalizes loosely authored document values.
"""

from __future__ import annotations

import re
from enum import IntEnum, StrEnum


def normalize_name(raw: str) -> str:
    """Normalize an authored name for enum lookup.

    Case-folds and maps spaces and hyphens to underscores.

    Example:
        >>> normalize_name("Sleight of Hand")
        'sleight_of_hand'
    """
    return re.sub(r"[\s\-]+", "_", raw.strip()).lower()


class Ability(StrEnum):
    """The six core ability scores."""

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"

    @classmethod
    def parse(cls, raw: str) -> Ability | None:
        """Resolve an ability from its full name or abbreviation.

        Args:
            raw: Authored ability name such as 'Dexterity' or 'dex'.

        Returns:
            The matching Ability, or None if unrecognized.
        """
        name = normalize_name(raw)
        for ability in cls:
            if name in (ability.value, ability.name.lower()):
                return ability
        return None


class Skill(StrEnum):
    """Skills and their associated abilities."""

    # Strength skills
    ATHLETICS = "athletics"

    # Dexterity skills
    ACROBATICS = "acrobatics"
    SLEIGHT_OF_HAND = "sleight_of_hand"
    STEALTH = "stealth"

    # Intelligence skills
    ARCANA = "arcana"
    HISTORY = "history"
    INVESTIGATION = "investigation"
    NATURE = "nature"
    RELIGION = "religion"

    # Wisdom skills
    ANIMAL_HANDLING = "animal_handling"
    INSIGHT = "insight"
    MEDICINE = "medicine"
    PERCEPTION = "perception"
    SURVIVAL = "survival"

    # Charisma skills
    DECEPTION = "deception"
    INTIMIDATION = "intimidation"
    PERFORMANCE = "performance"
    PERSUASION = "persuasion"

    @property
    def ability(self) -> Ability:
        """Get the primary ability score for this skill."""
        return _SKILL_ABILITIES[self]

    @classmethod
    def parse(cls, raw: str) -> Skill | None:
        """Resolve a skill from an authored name, or None if unrecognized."""
        try:
            return cls(normalize_name(raw))
        except ValueError:
            return None


_SKILL_ABILITIES: dict[Skill, Ability] = {
    Skill.ATHLETICS: Ability.STR,
    Skill.ACROBATICS: Ability.DEX,
    Skill.SLEIGHT_OF_HAND: Ability.DEX,
    Skill.STEALTH: Ability.DEX,
    Skill.ARCANA: Ability.INT,
    Skill.HISTORY: Ability.INT,
    Skill.INVESTIGATION: Ability.INT,
    Skill.NATURE: Ability.INT,
    Skill.RELIGION: Ability.INT,
    Skill.ANIMAL_HANDLING: Ability.WIS,
    Skill.INSIGHT: Ability.WIS,
    Skill.MEDICINE: Ability.WIS,
    Skill.PERCEPTION: Ability.WIS,
    Skill.SURVIVAL: Ability.WIS,
    Skill.DECEPTION: Ability.CHA,
    Skill.INTIMIDATION: Ability.CHA,
    Skill.PERFORMANCE: Ability.CHA,
    Skill.PERSUASION: Ability.CHA,
}


class DamageType(StrEnum):
    """Damage types that can be resisted or ignored."""

    ACID = "acid"
    BLUDGEONING = "bludgeoning"
    COLD = "cold"
    FIRE = "fire"
    FORCE = "force"
    LIGHTNING = "lightning"
    NECROTIC = "necrotic"
    PIERCING = "piercing"
    POISON = "poison"
    PSYCHIC = "psychic"
    RADIANT = "radiant"
    SLASHING = "slashing"
    THUNDER = "thunder"

    @classmethod
    def parse(cls, raw: str) -> DamageType | None:
        """Resolve a damage type from an authored name, or None."""
        try:
            return cls(normalize_name(raw))
        except ValueError:
            return None


class MovementType(StrEnum):
    """Additional movement modes granted on top of walking speed."""

    FLY = "fly"
    SWIM = "swim"
    CLIMB = "climb"
    BURROW = "burrow"

    @classmethod
    def parse(cls, raw: str) -> MovementType | None:
        """Resolve a movement type from an authored name, or None.

        Accepts verb forms such as 'flying' or 'swimming'.
        """
        name = normalize_name(raw)
        aliases = {
            "flying": cls.FLY,
            "swimming": cls.SWIM,
            "climbing": cls.CLIMB,
            "burrowing": cls.BURROW,
        }
        if name in aliases:
            return aliases[name]
        try:
            return cls(name)
        except ValueError:
            return None


class ProficiencyTier(IntEnum):
    """Ordered proficiency tiers for skills and saving throws.

    Tiers only ever move upward within a recompute pass.
    """

    NONE = 0
    PROFICIENT = 1
    EXPERT = 2

    @property
    def multiplier(self) -> int:
        """Number of times the proficiency bonus applies."""
        return int(self)


class HPRollMode(StrEnum):
    """How a missing HP-per-level entry is generated."""

    ROLL = "roll"
    AVERAGE = "average"
    MAX = "max"


class ActionType(StrEnum):
    """One-shot actions carried by effects."""

    HEAL = "heal"
    TEMP_HEAL = "tempHeal"
    DAMAGE = "damage"

    @classmethod
    def parse(cls, raw: str) -> ActionType | None:
        """Resolve an action type, ignoring case ('TempHeal' -> TEMP_HEAL)."""
        lowered = raw.strip().lower()
        for action in cls:
            if action.value.lower() == lowered:
                return action
        return None


class OneShotStatus(StrEnum):
    """Lifecycle of an effect instance's one-shot action."""

    NO_ACTION = "no_action"
    PENDING = "pending"
    EXECUTED = "executed"


class NoticeKind(StrEnum):
    """Kinds of advisory notices produced during a recompute pass."""

    DOCUMENT_UNAVAILABLE = "document_unavailable"
    MALFORMED_FIELD = "malformed_field"
    INVALID_GRANT_TARGET = "invalid_grant_target"
    UNKNOWN_ACTION = "unknown_action"
    CYCLE_DETECTED = "cycle_detected"


class HealthEventKind(StrEnum):
    """Entries recorded in the health event log."""

    DAMAGE = "damage"
    HEALING = "healing"


__all__ = [
    "normalize_name",
    "Ability",
    "Skill",
    "DamageType",
    "MovementType",
    "ProficiencyTier",
    "HPRollMode",
    "ActionType",
    "OneShotStatus",
    "NoticeKind",
    "HealthEventKind",
]
