"""Recompute orchestration.

A pass runs the engine stages in order:

    resolve sources -> accumulate bonuses -> derive totals
    -> reconcile current HP -> execute one-shot actions

and returns a brand new CharacterState. The input is never modified; effect
instances and the health log are copied before anything changes, so a failed
pass leaves the caller's last committed state as it was.
"""

from __future__ import annotations

from datetime import datetime

from rpg_sheet.core.config import Settings, get_settings
from rpg_sheet.core.exceptions import RecomputeError
from rpg_sheet.core.logging import get_logger, pass_context
from rpg_sheet.engine.accumulator import BonusAccumulator
from rpg_sheet.engine.catalog import SourceCatalogResolver
from rpg_sheet.engine.dice import DiceRoller
from rpg_sheet.engine.executor import OneShotExecutor
from rpg_sheet.engine.reconciler import reconcile_health
from rpg_sheet.engine.totals import calculate_totals
from rpg_sheet.models.inputs import RecomputeInput
from rpg_sheet.models.state import CharacterState
from rpg_sheet.storage.documents import FieldReader


logger = get_logger(__name__)


def recompute(
    data: RecomputeInput,
    reader: FieldReader,
    *,
    settings: Settings | None = None,
    roller: DiceRoller | None = None,
) -> CharacterState:
    """Rebuild a character's derived state.

    Args:
        data: Everything the pass reads, including the values carried
            forward from the previous state.
        reader: Source document reader.
        settings: Settings to use; the cached settings if omitted.
        roller: Dice roller; a fresh unseeded roller if omitted.

    Returns:
        The new character state.

    Raises:
        RecomputeError: If the pass fails unexpectedly. Per-source problems
            never raise; they are reported in ``state.notices``.

    Example:
        >>> store = InMemoryDocumentStore({"feats/tough": {"hpBonus": 2}})
        >>> state = recompute(RecomputeInput(level=1, obtained_feats=["feats/tough"]), store)
        >>> state.health.feat_hp_bonus
        2
    """
    settings = settings or get_settings()
    roller = roller or DiceRoller()
    now = data.now or datetime.now()

    with pass_context(level=data.level, class_path=data.class_path):
        try:
            state = CharacterState(
                level=data.level,
                effect_instances=[instance.model_copy(deep=True) for instance in data.effect_instances],
                damage_log=[event.model_copy(deep=True) for event in data.damage_log],
            )

            resolved = SourceCatalogResolver(reader).resolve(data, state, now=now)
            accumulation = BonusAccumulator(reader, settings.rules).accumulate(state, resolved, now=now)
            calculate_totals(state, accumulation, data, rules=settings.rules, roller=roller)
            reconcile_health(state.health, last_max_hp=data.last_max_hp, current_hp=data.current_hp)
            executed = OneShotExecutor(roller).execute(
                state,
                accumulation.pending_actions,
                today=now.date(),
            )
        except Exception as exc:
            logger.exception("Recompute failed", error=str(exc))
            raise RecomputeError(
                f"Recompute failed: {exc}",
                details={"error_type": type(exc).__name__},
            ) from exc

        logger.info(
            "Recompute finished",
            sources=len(state.sources),
            max_hp=state.health.max_hp,
            current_hp=state.health.current_hp,
            executed_actions=executed,
            notices=len(state.notices),
        )
    return state


__all__ = ["recompute"]
