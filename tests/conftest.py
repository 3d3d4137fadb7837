"""Pytest configuration and shared fixtures.

This module provides common fixtures for the rpg-sheet test suite: a settings
cache reset, an in-memory document store holding a small sample catalog of
classes, feats and effects, and a seeded dice roller.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator

    from rpg_sheet.core.config import Settings
    from rpg_sheet.engine.dice import DiceRoller
    from rpg_sheet.storage.documents import InMemoryDocumentStore


SAMPLE_DOCUMENTS: dict[str, dict[str, Any]] = {
    "classes/fighter": {
        "hitDie": "d10",
        "1": {
            "grantsSaveProficiency": ["strength", "constitution"],
            "grantsClassFeat": "classfeats/second-wind",
        },
        "level 3": ["grantsClassFeat: classfeats/improved-critical"],
        "5": [{"grantsEffect": ["effects/action-surge", "effects/forbidden"]}],
    },
    "subclasses/champion": {
        "3": {"grantsSkillProficiency": ["athletics"]},
    },
    "classfeats/second-wind": {"featPointBonus": 1},
    "classfeats/improved-critical": {"grantsSkillExpertise": ["athletics"]},
    "feats/tough": {"hpBonus": 5},
    "feats/alert": {"dexterity": 2, "grantsSkillProficiency": ["perception"]},
    "effects/healing-potion": {
        "usesEffect": True,
        "action": {"type": "heal", "amount": 10},
    },
    "effects/shield-of-faith": {"acBonus": 2, "tempHP": 8},
    "effects/aid": {"tempHP": 12},
    "effects/fire-ward": {"grantsResistances": ["fire"]},
    "effects/action-surge": {"speedBonus": 10},
    "effects/forbidden": {"strength": 4},
}


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from rpg_sheet.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings() -> Settings:
    """Provide default settings, independent of the environment.

    Returns:
        Settings with the default rules.
    """
    from rpg_sheet.core.config import RulesSettings, Settings, StorageSettings

    return Settings(rules=RulesSettings(), storage=StorageSettings())


# =============================================================================
# Document Fixtures
# =============================================================================


@pytest.fixture
def sample_documents() -> dict[str, dict[str, Any]]:
    """Provide a fresh copy of the sample source documents.

    Returns:
        Dictionary of path to raw field map.
    """
    return copy.deepcopy(SAMPLE_DOCUMENTS)


@pytest.fixture
def store(sample_documents: dict[str, dict[str, Any]]) -> InMemoryDocumentStore:
    """Create an in-memory document store with the sample catalog.

    Args:
        sample_documents: Raw sample documents.

    Returns:
        InMemoryDocumentStore instance.
    """
    from rpg_sheet.storage.documents import InMemoryDocumentStore

    return InMemoryDocumentStore(sample_documents)


@pytest.fixture
def class_effect_catalog() -> set[str]:
    """Effects the sample class is allowed to unlock."""
    return {"effects/action-surge"}


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> DiceRoller:
    """Create a seeded DiceRoller for reproducible tests.

    Returns:
        DiceRoller instance.
    """
    from rpg_sheet.engine.dice import DiceRoller

    return DiceRoller(seed=42)


@pytest.fixture
def now() -> datetime:
    """Fixed moment used for effect expiry."""
    return datetime(2026, 3, 15, 12, 0)
