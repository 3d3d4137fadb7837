"""One-shot effect execution.

Each queued action fires once and flips its instance from pending to
executed:

    heal      restore current HP, capped at max HP
    tempHeal  undo absorbed temp-HP damage
    damage    optional d20 + attackBonus against AC, then temp HP first,
              then current HP

An unknown action type or an amount that cannot be rolled is reported as a
notice and the instance stays pending.
"""

from __future__ import annotations

from datetime import date

from rpg_sheet.core.exceptions import DiceRollError, MalformedFieldError, UnknownActionError
from rpg_sheet.core.logging import get_logger
from rpg_sheet.engine.accumulator import PendingAction
from rpg_sheet.engine.dice import DiceRoller
from rpg_sheet.engine.health import apply_damage, apply_healing, restore_temp_hp
from rpg_sheet.engine.notices import absorb
from rpg_sheet.engine.projections import current_ac
from rpg_sheet.models.enums import ActionType, NoticeKind
from rpg_sheet.models.state import CharacterState


logger = get_logger(__name__)


class OneShotExecutor:
    """Execute pending one-shot effect actions."""

    def __init__(self, roller: DiceRoller) -> None:
        self._roller = roller

    def execute(
        self,
        state: CharacterState,
        pending: list[PendingAction],
        *,
        today: date,
    ) -> int:
        """Run every pending action against ``state``.

        Args:
            state: Reconciled state to modify.
            pending: Actions queued by the accumulator.
            today: Date recorded in the health event log.

        Returns:
            Number of actions executed.
        """
        executed = 0
        for item in pending:
            if self._run(state, item, today):
                item.instance.executed = True
                executed += 1
        return executed

    def _run(self, state: CharacterState, item: PendingAction, today: date) -> bool:
        instance, action = item.instance, item.action
        action_type = ActionType.parse(action.type)
        if action_type is None:
            absorb(
                state,
                NoticeKind.UNKNOWN_ACTION,
                UnknownActionError(
                    f"Unknown action type {action.type!r}",
                    action_type=action.type,
                    instance_id=instance.id,
                    source=instance.source_path,
                ),
            )
            return False

        try:
            amount = max(0, self._roller.roll_amount(action.amount))
        except DiceRollError as exc:
            absorb(
                state,
                NoticeKind.MALFORMED_FIELD,
                MalformedFieldError(
                    f"Action amount cannot be rolled: {exc.message}",
                    field_name="amount",
                    expected="Number or dice expression",
                    source=instance.source_path,
                    details={"instance_id": instance.id},
                ),
            )
            return False

        if action_type == ActionType.HEAL:
            apply_healing(state, amount, on=today)
        elif action_type == ActionType.TEMP_HEAL:
            restore_temp_hp(state, amount)
        elif self._attack_hits(state, item):
            apply_damage(state, amount, on=today)

        logger.info(
            "One-shot action executed",
            instance_id=instance.id,
            source=instance.source_path,
            action=action_type.value,
            amount=amount,
        )
        return True

    def _attack_hits(self, state: CharacterState, item: PendingAction) -> bool:
        """Roll the attack for a damage action; no attack bonus always hits."""
        attack_bonus = item.action.attack_bonus
        if attack_bonus is None:
            return True
        armor_class = current_ac(state)
        attack = self._roller.roll_attack(attack_bonus)
        hit = attack.total >= armor_class
        logger.info(
            "Effect attack rolled",
            instance_id=item.instance.id,
            total=attack.total,
            armor_class=armor_class,
            hit=hit,
        )
        return hit


__all__ = ["OneShotExecutor"]
