"""rpg-sheet - Derived-state engine for a tabletop RPG character sheet.

Rebuilds a character's full derived state (ability scores, hit points,
armor class, proficiencies, resistances, speeds, senses, feat points) from
the feats, effects, class and subclass documents it has, in one
deterministic pass.

Example:
    >>> from rpg_sheet import InMemoryDocumentStore, RecomputeInput, recompute
    >>>
    >>> store = InMemoryDocumentStore({
    ...     "classes/fighter": {"hitDie": "d10", "1": {"grantsSaveProficiency": ["strength"]}},
    ...     "feats/tough": {"hpBonus": 2},
    ... })
    >>> data = RecomputeInput(level=1, class_path="classes/fighter", obtained_feats=["feats/tough"])
    >>> state = recompute(data, store)
    >>>
    >>> # Carry the committed state into the next pass
    >>> next_state = recompute(data.carry_forward(state, level=2), store)

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 models for inputs, effects and the character state.
    storage: Source document readers.
    engine: The recompute pass, dice, health events and projections.
"""

from __future__ import annotations

# Core
from rpg_sheet.core.config import Settings, get_settings
from rpg_sheet.core.exceptions import RecomputeError, RpgSheetError
from rpg_sheet.core.logging import configure_logging, get_logger

# Models
from rpg_sheet.models import (
    CharacterState,
    EffectAction,
    EffectInstance,
    RecomputeInput,
    SpentPoints,
)

# Storage
from rpg_sheet.storage import FieldReader, InMemoryDocumentStore, JsonDocumentStore

# Engine
from rpg_sheet.engine import (
    DiceRoller,
    ability_modifier,
    apply_damage,
    apply_healing,
    current_ac,
    days_remaining,
    effective_temp_hp,
    recompute,
    save_bonus,
    skill_bonus,
)


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "RpgSheetError",
    "RecomputeError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "CharacterState",
    "EffectAction",
    "EffectInstance",
    "RecomputeInput",
    "SpentPoints",
    # Storage
    "FieldReader",
    "InMemoryDocumentStore",
    "JsonDocumentStore",
    # Engine
    "DiceRoller",
    "recompute",
    "apply_damage",
    "apply_healing",
    "ability_modifier",
    "current_ac",
    "days_remaining",
    "effective_temp_hp",
    "save_bonus",
    "skill_bonus",
]
