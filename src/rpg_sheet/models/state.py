"""Character state models.

CharacterState is the sole output of a recompute pass. It is rebuilt from
scratch on every pass; only the fields carried forward through the recompute
input (current HP, the max-HP high-water mark, temp-HP damage, the rolled
HP-per-level history, effect executed flags and the health event log)
survive between passes.

Every bonus-bearing block records the set of source paths that contributed
to it so presentation layers can explain where a value comes from.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

from rpg_sheet.models.effects import EffectInstance
from rpg_sheet.models.enums import (
    Ability,
    DamageType,
    HealthEventKind,
    MovementType,
    NoticeKind,
    ProficiencyTier,
    Skill,
)


# =============================================================================
# Base Block
# =============================================================================


class StateBlock(BaseModel):
    """Base class for the blocks making up a character state.

    Blocks are mutated by the engine while a pass is in progress.
    """

    model_config = ConfigDict(
        frozen=False,
        validate_assignment=True,
        extra="ignore",
    )


# =============================================================================
# Abilities
# =============================================================================


def calculate_modifier(score: int) -> int:
    """Calculate the ability modifier from an ability score.

    Example:
        >>> calculate_modifier(10)
        0
        >>> calculate_modifier(7)
        -2
    """
    return (score - 10) // 2


class AbilityScores(StateBlock):
    """Final ability scores."""

    strength: int = 10
    dexterity: int = 10
    constitution: int = 10
    intelligence: int = 10
    wisdom: int = 10
    charisma: int = 10

    def get(self, ability: Ability) -> int:
        """Get the score for a specific ability."""
        return getattr(self, ability.value)

    def set_score(self, ability: Ability, score: int) -> None:
        """Set the score for a specific ability."""
        setattr(self, ability.value, score)

    def modifier(self, ability: Ability) -> int:
        """Get the modifier for a specific ability."""
        return calculate_modifier(self.get(ability))


# =============================================================================
# Health
# =============================================================================


class HealthBlock(StateBlock):
    """Hit points, temporary hit points, and their reconciliation marks.

    Attributes:
        max_hp: Maximum hit points.
        current_hp: Current hit points, never above max_hp.
        temp_hp: Temp-HP ceiling granted by sources (max, not a sum).
        manual_temp_hp: Temp-HP ceiling granted directly by the player.
        temp_hp_damage: Damage absorbed from the temp-HP pool so far.
        feat_hp_bonus: HP bonus from feats and class feats.
        effect_hp_bonus: HP bonus from effects, class and subclass.
        last_max_hp: Max HP of the previous pass (high-water mark).
        hp_per_level: HP gained at each level, rolled once and kept.
    """

    max_hp: int = Field(default=1, ge=1)
    current_hp: int = Field(default=1, ge=0)
    temp_hp: int = Field(default=0, ge=0)
    manual_temp_hp: int = Field(default=0, ge=0)
    temp_hp_damage: int = Field(default=0, ge=0)
    feat_hp_bonus: int = 0
    effect_hp_bonus: int = 0
    last_max_hp: int | None = None
    hp_per_level: list[int] = Field(default_factory=list)

    @computed_field(description="Largest temp-HP pool currently granted")
    @property
    def temp_hp_pool(self) -> int:
        return max(self.temp_hp, self.manual_temp_hp)

    @computed_field(description="Temp HP left after absorbed damage")
    @property
    def effective_temp_hp(self) -> int:
        return max(0, self.temp_hp_pool - self.temp_hp_damage)

    @property
    def missing_hp(self) -> int:
        """Hit points below maximum."""
        return max(0, self.max_hp - self.current_hp)


class HealthEvent(StateBlock):
    """One entry of the health event log."""

    kind: HealthEventKind
    occurred_on: date
    amount: int
    absorbed: int | None = None
    healed: int | None = None


# =============================================================================
# Defense
# =============================================================================


class ArmorClassBlock(StateBlock):
    """Armor class components.

    Current AC is ``base + modifier(modifier_ability) + bonus``.
    """

    base: int = 10
    modifier_ability: Ability | None = None
    bonus: int = 0
    sources: set[str] = Field(default_factory=set)


class ProficiencyEntry(StateBlock):
    """Proficiency tier of one skill or saving throw."""

    tier: ProficiencyTier = ProficiencyTier.NONE
    sources: set[str] = Field(default_factory=set)

    def upgrade(self, tier: ProficiencyTier, source: str) -> bool:
        """Raise the tier if ``tier`` is higher; never lowers it.

        The source is recorded either way.

        Returns:
            True if the tier changed.
        """
        self.sources.add(source)
        if tier > self.tier:
            self.tier = tier
            return True
        return False


# =============================================================================
# Movement & Senses
# =============================================================================


class SpeedEntry(StateBlock):
    """A granted movement speed."""

    value: int = 0
    sources: set[str] = Field(default_factory=set)


class SpeedBlock(StateBlock):
    """Walking speed plus any additional movement modes."""

    base: int = 30
    additional_speeds: dict[MovementType, SpeedEntry] = Field(default_factory=dict)


class SenseEntry(StateBlock):
    """A special sense such as darkvision, with its range in feet."""

    range: int = 0
    sources: set[str] = Field(default_factory=set)
    details: str = ""


# =============================================================================
# Feat Points
# =============================================================================


class FeatPointLedger(StateBlock):
    """Feat point budget.

    ``available = manual + extra_granted + milestone + bonus_from_sources - spent``
    """

    available: int = 0
    spent: int = 0
    manual: int = 0
    extra_granted: int = 0
    bonus_from_sources: int = 0
    milestone: int = 0


# =============================================================================
# Notices
# =============================================================================


class Notice(StateBlock):
    """Advisory notice produced during a recompute pass.

    Notices report absorbed per-source failures; they never abort the pass.
    """

    kind: NoticeKind
    message: str
    source: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Character State
# =============================================================================


class CharacterState(StateBlock):
    """Complete derived state of a character.

    Attributes:
        level: Character level the state was computed for.
        abilities: Final ability scores.
        health: Hit point block.
        armor_class: Armor class block.
        proficiency_bonus: Proficiency bonus for the level.
        skills: Skill proficiency tiers with contributing sources.
        saves: Saving throw proficiency tiers with contributing sources.
        resistances: Damage type to contributing sources.
        immunities: Damage type to contributing sources.
        speed: Walking and additional speeds.
        senses: Sense name to range, sources, and details.
        feat_points: Feat point ledger.
        obtained_class_feats: Class feats inferred through grant chains.
        unlocked_effects: Catalog effects unlocked through grant chains.
        sources: Final resolved source paths in processing order.
        effect_instances: Effect records with updated executed flags.
        damage_log: Health event history.
        notices: Advisory notices from this pass.
    """

    level: int = Field(default=1, ge=1)
    abilities: AbilityScores = Field(default_factory=AbilityScores)
    health: HealthBlock = Field(default_factory=HealthBlock)
    armor_class: ArmorClassBlock = Field(default_factory=ArmorClassBlock)
    proficiency_bonus: int = 2
    skills: dict[Skill, ProficiencyEntry] = Field(default_factory=dict)
    saves: dict[Ability, ProficiencyEntry] = Field(default_factory=dict)
    resistances: dict[DamageType, set[str]] = Field(default_factory=dict)
    immunities: dict[DamageType, set[str]] = Field(default_factory=dict)
    speed: SpeedBlock = Field(default_factory=SpeedBlock)
    senses: dict[str, SenseEntry] = Field(default_factory=dict)
    feat_points: FeatPointLedger = Field(default_factory=FeatPointLedger)
    obtained_class_feats: list[str] = Field(default_factory=list)
    unlocked_effects: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    effect_instances: list[EffectInstance] = Field(default_factory=list)
    damage_log: list[HealthEvent] = Field(default_factory=list)
    notices: list[Notice] = Field(default_factory=list)

    def skill_tier(self, skill: Skill) -> ProficiencyTier:
        """Get the proficiency tier of a skill."""
        entry = self.skills.get(skill)
        return entry.tier if entry else ProficiencyTier.NONE

    def save_tier(self, ability: Ability) -> ProficiencyTier:
        """Get the proficiency tier of a saving throw."""
        entry = self.saves.get(ability)
        return entry.tier if entry else ProficiencyTier.NONE

    def add_notice(
        self,
        kind: NoticeKind,
        message: str,
        *,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> Notice:
        """Record an advisory notice."""
        notice = Notice(kind=kind, message=message, source=source, details=details or {})
        self.notices.append(notice)
        return notice


__all__ = [
    "calculate_modifier",
    "StateBlock",
    "AbilityScores",
    "HealthBlock",
    "HealthEvent",
    "ArmorClassBlock",
    "ProficiencyEntry",
    "SpeedEntry",
    "SpeedBlock",
    "SenseEntry",
    "FeatPointLedger",
    "Notice",
    "CharacterState",
]
