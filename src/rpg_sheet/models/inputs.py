"""Recompute input models.

RecomputeInput bundles everything a recompute pass reads: the character's
level and choices, its effect instances, the class-effect catalog, and the
values carried forward from the previously committed state for
reconciliation.
"""

from __future__ import annotations

from datetime import datetime
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rpg_sheet.models.effects import EffectInstance
from rpg_sheet.models.enums import Ability, HPRollMode
from rpg_sheet.models.state import CharacterState, HealthEvent


class SpentPoints(BaseModel):
    """Feat points the player has spent on ability increases.

    Attributes:
        abilities: Points spent per ability; each point is +1 to the score.
    """

    model_config = ConfigDict(extra="ignore")

    abilities: dict[Ability, int] = Field(default_factory=dict)

    @field_validator("abilities", mode="after")
    @classmethod
    def reject_negative_points(cls, value: dict[Ability, int]) -> dict[Ability, int]:
        """Spent points can never be negative."""
        for ability, points in value.items():
            if points < 0:
                msg = f"Spent points for {ability.value} must be >= 0, got {points}"
                raise ValueError(msg)
        return value

    def for_ability(self, ability: Ability) -> int:
        """Points spent on one ability."""
        return self.abilities.get(ability, 0)

    @property
    def total(self) -> int:
        """Total points spent on ability increases."""
        return sum(self.abilities.values())


class RecomputeInput(BaseModel):
    """Everything a recompute pass reads.

    Attributes:
        level: Character level.
        obtained_feats: Feat paths chosen by the player.
        obtained_class_feats: Previously inferred class feats; recomputed
            every pass, so only used for diagnostics.
        effect_instances: Applied effect instances, active or not.
        class_path: Path of the class document.
        subclass_path: Path of the subclass document.
        manual_feat_points: Feat points granted by hand.
        extra_feat_points_granted: Feat points bought with post-cap XP.
        spent_points: Points spent on ability increases.
        class_effect_catalog: Effect paths that grants are allowed to unlock.
        hp_roll_mode: HP-per-level generation mode; settings default if None.
        hp_per_level: HP-per-level history from the previous pass.
        last_max_hp: Previous max HP, or None on the first-ever load.
        current_hp: Previous current HP, or None on the first-ever load.
        temp_hp_damage: Damage already absorbed by temp HP.
        manual_temp_hp: Temp HP granted directly by the player.
        damage_log: Health event history from the previous pass.
        now: Moment used for effect expiry; current time if None.
    """

    model_config = ConfigDict(extra="ignore")

    level: int = Field(default=1, ge=1, description="Character level")
    obtained_feats: list[str] = Field(default_factory=list)
    obtained_class_feats: list[str] = Field(default_factory=list)
    effect_instances: list[EffectInstance] = Field(default_factory=list)
    class_path: str | None = None
    subclass_path: str | None = None
    manual_feat_points: int = 0
    extra_feat_points_granted: int = Field(default=0, ge=0)
    spent_points: SpentPoints = Field(default_factory=SpentPoints)
    class_effect_catalog: set[str] = Field(default_factory=set)
    hp_roll_mode: HPRollMode | None = None
    hp_per_level: list[int] = Field(default_factory=list)
    last_max_hp: int | None = None
    current_hp: int | None = Field(default=None, ge=0)
    temp_hp_damage: int = Field(default=0, ge=0)
    manual_temp_hp: int = Field(default=0, ge=0)
    damage_log: list[HealthEvent] = Field(default_factory=list)
    now: datetime | None = None

    @field_validator("class_path", "subclass_path", mode="before")
    @classmethod
    def blank_path_is_none(cls, value: str | None) -> str | None:
        """Treat an empty class or subclass path as unset."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def carry_forward(self, state: CharacterState, **changes: object) -> Self:
        """Build the next pass's input from a committed state.

        Copies the reconciliation values (current HP, the max-HP mark,
        temp-HP damage, HP-per-level history), the effect instances with
        their executed flags, and the health event log.

        Args:
            state: The state returned by the previous pass.
            **changes: Further field overrides for the next pass.

        Returns:
            A new input; this one is left untouched.
        """
        update: dict[str, object] = {
            "current_hp": state.health.current_hp,
            "last_max_hp": state.health.last_max_hp,
            "temp_hp_damage": state.health.temp_hp_damage,
            "hp_per_level": list(state.health.hp_per_level),
            "effect_instances": [instance.model_copy() for instance in state.effect_instances],
            "damage_log": [event.model_copy() for event in state.damage_log],
            "obtained_class_feats": list(state.obtained_class_feats),
        }
        update.update(changes)
        return self.model_copy(update=update, deep=True)


__all__ = [
    "SpentPoints",
    "RecomputeInput",
]
