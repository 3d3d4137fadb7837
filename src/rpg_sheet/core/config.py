"""Configuration management for the rpg-sheet engine.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files, and runtime
configuration overrides.

Example:
    >>> from rpg_sheet.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.rules.base_speed
    30

Environment Variables:
    RPG_SHEET_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    RPG_SHEET_LOG_JSON: Emit JSON logs instead of console output
    RPG_SHEET_DOCUMENTS_PATH: Directory holding JSON source documents
    RPG_SHEET_RULES_HP_ROLL_MODE: HP-per-level mode (roll, average, max)
    RPG_SHEET_RULES_FEAT_POINT_MILESTONES: JSON list of milestone levels
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rpg_sheet.core import constants
from rpg_sheet.core.exceptions import ConfigurationError


AbilityName = Literal[
    "strength",
    "dexterity",
    "constitution",
    "intelligence",
    "wisdom",
    "charisma",
]


class RulesSettings(BaseSettings):
    """Configuration for the character rules applied by the engine.

    Attributes:
        base_ability_score: Starting score of every ability.
        base_speed: Walking speed before bonuses, in feet.
        default_ac_base: Armor class base when no source sets one.
        default_ac_modifier: Ability added to AC when no source sets one.
        default_hit_die: Hit die sides when the class names none.
        hp_roll_mode: How missing HP-per-level entries are generated.
        feat_point_milestones: Levels that award one feat point each.
        feat_cost: Feat points spent per obtained feat.
        xp_per_feat_point: XP traded for one extra feat point at the cap.
        level_cap: Level from which XP can be traded for feat points.
        sense_details_separator: Separator for merged sense details.
    """

    model_config = SettingsConfigDict(
        env_prefix="RPG_SHEET_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_ability_score: int = Field(
        default=constants.BASE_ABILITY_SCORE,
        ge=1,
        le=30,
        description="Starting score of every ability",
    )
    base_speed: int = Field(
        default=constants.DEFAULT_SPEED,
        ge=0,
        le=1000,
        description="Walking speed before bonuses",
    )
    default_ac_base: int = Field(
        default=constants.DEFAULT_AC_BASE,
        ge=0,
        le=30,
        description="Armor class base when no source sets one",
    )
    default_ac_modifier: AbilityName | None = Field(
        default="dexterity",
        description="Ability added to AC when no source sets one",
    )
    default_hit_die: int = Field(
        default=constants.DEFAULT_HIT_DIE,
        description="Hit die sides when the class names none",
    )
    hp_roll_mode: Literal["roll", "average", "max"] = Field(
        default="average",
        description="How missing HP-per-level entries are generated",
    )
    feat_point_milestones: list[int] = Field(
        default_factory=lambda: list(constants.FEAT_POINT_MILESTONES),
        description="Levels that award one feat point each",
    )
    feat_cost: int = Field(
        default=constants.FEAT_COST,
        ge=0,
        description="Feat points spent per obtained feat",
    )
    xp_per_feat_point: int = Field(
        default=constants.XP_PER_FEAT_POINT,
        gt=0,
        description="XP traded for one extra feat point",
    )
    level_cap: int = Field(
        default=constants.LEVEL_CAP,
        ge=1,
        description="Level from which XP converts to feat points",
    )
    sense_details_separator: str = Field(
        default=constants.SENSE_DETAILS_SEPARATOR,
        description="Separator for merged sense details",
    )

    @field_validator("default_hit_die", mode="after")
    @classmethod
    def validate_hit_die(cls, value: int) -> int:
        """Ensure the default hit die is a real die.

        Raises:
            ConfigurationError: If the die has fewer than two sides.
        """
        if value < 2:
            raise ConfigurationError(
                f"default_hit_die must have at least 2 sides, got {value}",
                config_key="default_hit_die",
            )
        return value

    @model_validator(mode="after")
    def validate_milestones(self) -> "RulesSettings":
        """Ensure milestone levels are positive, unique, and ascending.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If the milestone list is malformed.
        """
        milestones = self.feat_point_milestones
        if any(level < 1 for level in milestones):
            raise ConfigurationError(
                "feat_point_milestones must only contain levels >= 1",
                config_key="feat_point_milestones",
            )
        if milestones != sorted(set(milestones)):
            raise ConfigurationError(
                "feat_point_milestones must be unique and ascending",
                config_key="feat_point_milestones",
                details={"value": milestones},
            )
        return self


class StorageSettings(BaseSettings):
    """Configuration for the reference document store.

    Attributes:
        documents_path: Directory holding JSON source documents.
    """

    model_config = SettingsConfigDict(
        env_prefix="RPG_SHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    documents_path: Path = Field(
        default=Path("data/vault"),
        description="Directory holding JSON source documents",
    )


class Settings(BaseSettings):
    """Main settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Logging level.
        log_json: Emit JSON logs.
        rules: Character rules settings.
        storage: Document store settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="RPG_SHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="rpg-sheet",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON logs instead of console output",
    )

    rules: RulesSettings = Field(default_factory=RulesSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Useful for testing or when environment variables have changed.
    """
    get_settings.cache_clear()


__all__ = [
    "AbilityName",
    "RulesSettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
