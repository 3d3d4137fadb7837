"""Damage and healing.

These primitives change current HP and the temp-HP pool and append an entry
to the health event log. The one-shot executor uses them for effect actions;
callers may also use them directly between recompute passes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from rpg_sheet.core.exceptions import ValidationError
from rpg_sheet.core.logging import get_logger
from rpg_sheet.models.enums import HealthEventKind
from rpg_sheet.models.state import CharacterState, HealthEvent


logger = get_logger(__name__)


@dataclass(frozen=True)
class DamageResult:
    """Outcome of applying damage.

    Attributes:
        amount: Damage requested.
        absorbed: Damage taken by temporary hit points.
        dealt: Damage taken by current hit points.
    """

    amount: int
    absorbed: int
    dealt: int


@dataclass(frozen=True)
class HealingResult:
    """Outcome of applying healing.

    Attributes:
        amount: Healing requested.
        healed: Hit points actually restored.
    """

    amount: int
    healed: int


def _check_amount(amount: int, field_name: str) -> None:
    if amount < 0:
        raise ValidationError(
            f"{field_name} must be >= 0",
            field_name=field_name,
            invalid_value=amount,
        )


def apply_damage(state: CharacterState, amount: int, *, on: date | None = None) -> DamageResult:
    """Apply damage, spending temporary hit points first.

    Current HP never drops below 0.

    Args:
        state: Character state to modify.
        amount: Damage to apply.
        on: Date recorded in the event log; today if omitted.

    Returns:
        How the damage was split between temp HP and current HP.

    Raises:
        ValidationError: If amount is negative.
    """
    _check_amount(amount, "damage")
    health = state.health

    absorbed = min(health.effective_temp_hp, amount)
    health.temp_hp_damage += absorbed
    dealt = min(health.current_hp, amount - absorbed)
    health.current_hp -= dealt

    state.damage_log.append(
        HealthEvent(
            kind=HealthEventKind.DAMAGE,
            occurred_on=on or date.today(),
            amount=amount,
            absorbed=absorbed,
        )
    )
    logger.info("Damage applied", amount=amount, absorbed=absorbed, dealt=dealt, current_hp=health.current_hp)
    return DamageResult(amount=amount, absorbed=absorbed, dealt=dealt)


def apply_healing(state: CharacterState, amount: int, *, on: date | None = None) -> HealingResult:
    """Restore hit points, never above max HP.

    Raises:
        ValidationError: If amount is negative.
    """
    _check_amount(amount, "healing")
    health = state.health

    healed = min(amount, health.missing_hp)
    health.current_hp += healed

    state.damage_log.append(
        HealthEvent(
            kind=HealthEventKind.HEALING,
            occurred_on=on or date.today(),
            amount=amount,
            healed=healed,
        )
    )
    logger.info("Healing applied", amount=amount, healed=healed, current_hp=health.current_hp)
    return HealingResult(amount=amount, healed=healed)


def restore_temp_hp(state: CharacterState, amount: int) -> int:
    """Undo absorbed temp-HP damage; the damage mark never goes below 0.

    Returns:
        Temporary hit points restored.
    """
    _check_amount(amount, "temp_heal")
    health = state.health
    restored = min(amount, health.temp_hp_damage)
    health.temp_hp_damage -= restored
    logger.info("Temp HP restored", amount=amount, restored=restored)
    return restored


__all__ = [
    "DamageResult",
    "HealingResult",
    "apply_damage",
    "apply_healing",
    "restore_temp_hp",
]
