"""Bonus accumulation.

Folds the flattened field map of every resolved source into the state being
built. Each recognized key has its own rule:

    sum        ability scores, hpBonus, featPointBonus, acBonus, speedBonus,
               granted speeds, sense ranges
    max        tempHP
    union      grantsResistances, grantsImmunities
    overwrite  acBase, acModifier (last source wins)
    upgrade    skill and save proficiencies (none -> proficient -> expert)

Unknown keys are ignored. A recognized key holding the wrong kind of value
and a grant naming an unknown target are reported as notices and skipped.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TypeVar

from rpg_sheet.core import constants
from rpg_sheet.core.config import RulesSettings
from rpg_sheet.core.exceptions import InvalidGrantTargetError, MalformedFieldError
from rpg_sheet.core.logging import get_logger
from rpg_sheet.engine.catalog import ResolvedSources
from rpg_sheet.engine.notices import absorb
from rpg_sheet.models.effects import EffectAction, EffectInstance
from rpg_sheet.models.enums import (
    Ability,
    DamageType,
    MovementType,
    NoticeKind,
    ProficiencyTier,
    Skill,
    normalize_name,
)
from rpg_sheet.models.fields import (
    FieldMap,
    FieldValue,
    as_flag,
    as_int,
    as_text,
    as_text_list,
    to_plain,
    variant_name,
)
from rpg_sheet.models.state import CharacterState, ProficiencyEntry, SenseEntry, SpeedEntry
from rpg_sheet.storage.documents import FieldReader, normalize_path


logger = get_logger(__name__)

E = TypeVar("E", bound=Enum)

# Named senses: range key -> (sense name, details key)
_NAMED_SENSES: dict[str, tuple[str, str]] = {
    "grantsDarkvision": ("darkvision", "grantsDarkvisionDetails"),
    "grantsBlindsightRange": ("blindsight", "grantsBlindsightDetails"),
    "grantsTruesight": ("truesight", "grantsTruesightDetails"),
    "grantsTremorsense": ("tremorsense", "grantsTremorsenseDetails"),
}
_GENERIC_SENSE = re.compile(r"^grantsSense_(.+)_Range$")

_SKILL_GRANTS = {
    "grantsSkillProficiency": ProficiencyTier.PROFICIENT,
    "grantsSkillExpertise": ProficiencyTier.EXPERT,
}
_SAVE_GRANTS = {
    "grantsSaveProficiency": ProficiencyTier.PROFICIENT,
    "grantsSaveExpertise": ProficiencyTier.EXPERT,
}


@dataclass
class PendingAction:
    """A one-shot action queued for the executor."""

    instance: EffectInstance
    action: EffectAction


@dataclass
class Accumulation:
    """Values the accumulator hands to later stages.

    Everything that records contributing sources is written straight to the
    state; only raw ability bonuses and the executor queue are returned.
    """

    ability_bonuses: dict[Ability, int] = field(default_factory=dict)
    pending_actions: list[PendingAction] = field(default_factory=list)
    fields_by_source: dict[str, FieldMap] = field(default_factory=dict)


class BonusAccumulator:
    """Fold source documents into a character state."""

    def __init__(self, reader: FieldReader, rules: RulesSettings) -> None:
        self._reader = reader
        self._rules = rules

    def accumulate(
        self,
        state: CharacterState,
        resolved: ResolvedSources,
        *,
        now: datetime,
    ) -> Accumulation:
        """Apply every resolved source to ``state`` in order.

        Args:
            state: State being built; its blocks are reset to the rule
                defaults first.
            resolved: Output of the source catalog resolver.
            now: Moment used to decide which effect instances are in effect.

        Returns:
            Ability bonuses and the one-shot actions to execute.
        """
        self._reset(state)
        result = Accumulation()

        for source in resolved.sources:
            fields = self._reader.resolve_fields(source, state.level)
            result.fields_by_source[source] = fields
            self._apply_source(state, result, source, fields, is_feat=source in resolved.feat_sources)

        result.pending_actions = self._queue_actions(state, result.fields_by_source, now)
        logger.debug(
            "Bonuses accumulated",
            sources=len(resolved.sources),
            pending_actions=len(result.pending_actions),
        )
        return result

    def _reset(self, state: CharacterState) -> None:
        rules = self._rules
        state.armor_class.base = rules.default_ac_base
        state.armor_class.modifier_ability = (
            Ability(rules.default_ac_modifier) if rules.default_ac_modifier else None
        )
        state.speed.base = rules.base_speed

    # =========================================================================
    # Per-source rules
    # =========================================================================

    def _apply_source(
        self,
        state: CharacterState,
        result: Accumulation,
        source: str,
        fields: FieldMap,
        *,
        is_feat: bool,
    ) -> None:
        for ability in Ability:
            bonus = self._read_int(state, fields, ability.value, source)
            if bonus is not None:
                result.ability_bonuses[ability] = result.ability_bonuses.get(ability, 0) + bonus

        health = state.health
        hp_bonus = self._read_int(state, fields, "hpBonus", source)
        if hp_bonus is not None:
            if is_feat:
                health.feat_hp_bonus += hp_bonus
            else:
                health.effect_hp_bonus += hp_bonus

        feat_point_bonus = self._read_int(state, fields, "featPointBonus", source)
        if feat_point_bonus is not None:
            state.feat_points.bonus_from_sources += feat_point_bonus

        temp_hp = self._read_int(state, fields, "tempHP", source)
        if temp_hp is not None:
            health.temp_hp = max(health.temp_hp, temp_hp)

        self._apply_damage_grants(state, fields, source)
        self._apply_armor_class(state, fields, source)
        self._apply_proficiencies(state, fields, source)
        self._apply_movement(state, fields, source)
        self._apply_senses(state, fields, source)

    def _apply_damage_grants(self, state: CharacterState, fields: FieldMap, source: str) -> None:
        for key, target in (
            ("grantsResistances", state.resistances),
            ("grantsImmunities", state.immunities),
        ):
            for damage_type in self._read_targets(state, fields, key, source, DamageType.parse):
                target.setdefault(damage_type, set()).add(source)

    def _apply_armor_class(self, state: CharacterState, fields: FieldMap, source: str) -> None:
        armor_class = state.armor_class

        base = self._read_int(state, fields, "acBase", source)
        if base is not None:
            armor_class.base = base
            armor_class.sources.add(source)

        bonus = self._read_int(state, fields, "acBonus", source)
        if bonus is not None:
            armor_class.bonus += bonus
            armor_class.sources.add(source)

        if "acModifier" in fields:
            name = self._read_text(state, fields, "acModifier", source)
            if name is not None:
                ability = Ability.parse(name)
                if ability is None:
                    self._invalid_target(state, "acModifier", name, source)
                else:
                    armor_class.modifier_ability = ability
                    armor_class.sources.add(source)

    def _apply_proficiencies(self, state: CharacterState, fields: FieldMap, source: str) -> None:
        for key, tier in _SKILL_GRANTS.items():
            for skill in self._read_targets(state, fields, key, source, Skill.parse):
                state.skills.setdefault(skill, ProficiencyEntry()).upgrade(tier, source)
        for key, tier in _SAVE_GRANTS.items():
            for ability in self._read_targets(state, fields, key, source, Ability.parse):
                state.saves.setdefault(ability, ProficiencyEntry()).upgrade(tier, source)

    def _apply_movement(self, state: CharacterState, fields: FieldMap, source: str) -> None:
        speed_bonus = self._read_int(state, fields, "speedBonus", source)
        if speed_bonus is not None:
            state.speed.base += speed_bonus

        if "grantsSpeedType" not in fields:
            return
        movement_types = self._read_targets(state, fields, "grantsSpeedType", source, MovementType.parse)
        value = self._read_int(state, fields, "grantsSpeedValue", source, required=True)
        if value is None:
            return
        for movement_type in movement_types:
            entry = state.speed.additional_speeds.setdefault(movement_type, SpeedEntry())
            entry.value += value
            entry.sources.add(source)

    def _apply_senses(self, state: CharacterState, fields: FieldMap, source: str) -> None:
        for key in fields:
            if key in _NAMED_SENSES:
                name, details_key = _NAMED_SENSES[key]
            else:
                match = _GENERIC_SENSE.match(key)
                if match is None:
                    continue
                name = normalize_name(match.group(1))
                details_key = f"grantsSense_{match.group(1)}_Details"

            sense_range = self._read_int(state, fields, key, source)
            if sense_range is None:
                continue
            entry = state.senses.setdefault(name, SenseEntry())
            entry.range += sense_range
            entry.sources.add(source)

            details = as_text(fields.get(details_key))
            if details:
                separator = self._rules.sense_details_separator
                entry.details = f"{entry.details}{separator}{details}" if entry.details else details

    # =========================================================================
    # One-shot actions
    # =========================================================================

    def _queue_actions(
        self,
        state: CharacterState,
        fields_by_source: dict[str, FieldMap],
        now: datetime,
    ) -> list[PendingAction]:
        """Find unexecuted one-shot actions on instances in effect."""
        pending: list[PendingAction] = []
        for instance in state.effect_instances:
            if instance.executed or not instance.is_in_effect(now):
                continue
            action = instance.action
            if action is None:
                path = normalize_path(instance.source_path)
                action = self._document_action(state, fields_by_source.get(path, {}), path)
            if action is not None:
                pending.append(PendingAction(instance=instance, action=action))
        return pending

    def _document_action(
        self,
        state: CharacterState,
        fields: FieldMap,
        source: str,
    ) -> EffectAction | None:
        if not as_flag(fields.get(constants.FIELD_USES_EFFECT)):
            return None
        raw = fields.get(constants.FIELD_ACTION)
        action = EffectAction.from_field(raw)
        if action is None:
            self._malformed(state, constants.FIELD_ACTION, "Record", raw, source)
        return action

    # =========================================================================
    # Typed reads
    # =========================================================================

    def _read_int(
        self,
        state: CharacterState,
        fields: FieldMap,
        key: str,
        source: str,
        *,
        required: bool = False,
    ) -> int | None:
        value = fields.get(key)
        if value is None:
            if required:
                self._malformed(state, key, "Number", value, source)
            return None
        number = as_int(value)
        if number is None:
            self._malformed(state, key, "Number", value, source)
        return number

    def _read_text(self, state: CharacterState, fields: FieldMap, key: str, source: str) -> str | None:
        value = fields.get(key)
        text = as_text(value)
        if text is None and value is not None:
            self._malformed(state, key, "Text", value, source)
        return text

    def _read_targets(
        self,
        state: CharacterState,
        fields: FieldMap,
        key: str,
        source: str,
        parse: Callable[[str], E | None],
    ) -> list[E]:
        """Read a list of grant targets, skipping unrecognized names."""
        value = fields.get(key)
        if value is None:
            return []
        names = as_text_list(value)
        if names is None:
            self._malformed(state, key, "TextList", value, source)
            return []

        targets: list[E] = []
        for name in names:
            target = parse(name)
            if target is None:
                self._invalid_target(state, key, name, source)
            elif target not in targets:
                targets.append(target)
        return targets

    def _malformed(
        self,
        state: CharacterState,
        key: str,
        expected: str,
        value: FieldValue | None,
        source: str,
    ) -> None:
        absorb(
            state,
            NoticeKind.MALFORMED_FIELD,
            MalformedFieldError(
                f"{key} should be {expected}, got {variant_name(value)}",
                field_name=key,
                expected=expected,
                source=source,
                details={"value": to_plain(value)} if value is not None else None,
            ),
        )

    def _invalid_target(self, state: CharacterState, key: str, name: str, source: str) -> None:
        absorb(
            state,
            NoticeKind.INVALID_GRANT_TARGET,
            InvalidGrantTargetError(
                f"Unrecognized grant target {name!r}",
                target=name,
                field_name=key,
                source=source,
            ),
        )


__all__ = [
    "Accumulation",
    "BonusAccumulator",
    "PendingAction",
]
