"""Recompute engine for the rpg-sheet character sheet.

Submodules:
    dice: Dice rolling (d20 library), hit dice and HP-per-level rolls
    catalog: Source catalog resolution and grant chains
    accumulator: Folding source fields into the character state
    totals: Ability scores, max HP, feat points, temp HP
    reconciler: Current-HP reconciliation against the high-water mark
    health: Damage, healing and the health event log
    executor: One-shot effect actions
    recompute: The recompute pass
    projections: Read-only helpers over a character state

Example:
    >>> from rpg_sheet.engine import recompute, current_ac
    >>> from rpg_sheet.models import RecomputeInput
    >>> from rpg_sheet.storage import InMemoryDocumentStore
    >>>
    >>> store = InMemoryDocumentStore({"classes/fighter": {"hitDie": "d10"}})
    >>> state = recompute(RecomputeInput(level=3, class_path="classes/fighter"), store)
    >>> current_ac(state)
    10
"""

from __future__ import annotations

# =============================================================================
# Dice Rolling
# =============================================================================
from rpg_sheet.engine.dice import (
    DiceExpression,
    DiceRoller,
    average_roll,
    hit_die_sides,
    parse_die,
)

# =============================================================================
# Pipeline Stages
# =============================================================================
from rpg_sheet.engine.accumulator import Accumulation, BonusAccumulator, PendingAction
from rpg_sheet.engine.catalog import ResolvedSources, SourceCatalogResolver
from rpg_sheet.engine.executor import OneShotExecutor
from rpg_sheet.engine.reconciler import reconcile_health
from rpg_sheet.engine.totals import calculate_totals

# =============================================================================
# Health
# =============================================================================
from rpg_sheet.engine.health import (
    DamageResult,
    HealingResult,
    apply_damage,
    apply_healing,
    restore_temp_hp,
)

# =============================================================================
# Orchestration & Projections
# =============================================================================
from rpg_sheet.engine.recompute import recompute
from rpg_sheet.engine.projections import (
    ability_modifier,
    current_ac,
    days_remaining,
    effective_temp_hp,
    save_bonus,
    skill_bonus,
)


__all__ = [
    # Dice
    "DiceExpression",
    "DiceRoller",
    "average_roll",
    "hit_die_sides",
    "parse_die",
    # Stages
    "Accumulation",
    "BonusAccumulator",
    "PendingAction",
    "ResolvedSources",
    "SourceCatalogResolver",
    "OneShotExecutor",
    "reconcile_health",
    "calculate_totals",
    # Health
    "DamageResult",
    "HealingResult",
    "apply_damage",
    "apply_healing",
    "restore_temp_hp",
    # Orchestration
    "recompute",
    # Projections
    "ability_modifier",
    "current_ac",
    "days_remaining",
    "effective_temp_hp",
    "save_bonus",
    "skill_bonus",
]
