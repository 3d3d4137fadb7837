"""Rules constants for the rpg-sheet engine.

These are the defaults behind the configurable rules settings, plus the
field names the engine recognizes in source documents.
"""

from __future__ import annotations

# =============================================================================
# Character Rules Constants
# =============================================================================

BASE_ABILITY_SCORE = 10
"""Score every ability starts from before any increases."""

LEVELS_PER_ABILITY_INCREASE = 4
"""Every ability gains +1 automatically per this many character levels."""

DEFAULT_SPEED = 30
"""Default walking speed in feet."""

DEFAULT_AC_BASE = 10
"""Armor class base when no source overrides it."""

DEFAULT_HIT_DIE = 8
"""Hit die used for HP-per-level rolls when the class does not name one."""

MIN_CHARACTER_LEVEL = 1
"""Minimum character level."""

LEVEL_CAP = 20
"""Level at which XP can be traded for extra feat points."""

# =============================================================================
# Feat Point Constants
# =============================================================================

FEAT_POINT_MILESTONES = (1, 4, 8, 12, 16, 19)
"""Levels at which one feat point is awarded."""

FEAT_COST = 1
"""Feat points spent per obtained feat."""

XP_PER_FEAT_POINT = 200_000
"""XP traded for one extra feat point once the level cap is reached."""

# =============================================================================
# Source Document Field Names
# =============================================================================

FIELD_GRANTS_CLASS_FEAT = "grantsClassFeat"
FIELD_GRANTS_EFFECT = "grantsEffect"
FIELD_HIT_DIE = "hitDie"
FIELD_USES_EFFECT = "usesEffect"
FIELD_ACTION = "action"

SENSE_DETAILS_SEPARATOR = "; "
"""Separator used when joining sense details from several sources."""


__all__ = [
    # Character rules
    "BASE_ABILITY_SCORE",
    "LEVELS_PER_ABILITY_INCREASE",
    "DEFAULT_SPEED",
    "DEFAULT_AC_BASE",
    "DEFAULT_HIT_DIE",
    "MIN_CHARACTER_LEVEL",
    "LEVEL_CAP",
    # Feat points
    "FEAT_POINT_MILESTONES",
    "FEAT_COST",
    "XP_PER_FEAT_POINT",
    # Field names
    "FIELD_GRANTS_CLASS_FEAT",
    "FIELD_GRANTS_EFFECT",
    "FIELD_HIT_DIE",
    "FIELD_USES_EFFECT",
    "FIELD_ACTION",
    "SENSE_DETAILS_SEPARATOR",
]
