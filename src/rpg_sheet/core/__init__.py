"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        RpgSheetError: Base exception for all engine errors.
        DocumentUnavailableError: Missing or unreadable source document.
        MalformedFieldError, InvalidGrantTargetError, UnknownActionError,
        CycleDetectedError: Per-source failures reported as notices.
        RecomputeError: Unexpected failure aborting a recompute pass.

    Configuration:
        Settings: Main settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
        pass_context: Bind context for one block.
"""

from __future__ import annotations

from rpg_sheet.core.config import (
    RulesSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from rpg_sheet.core.exceptions import (
    ConfigurationError,
    CycleDetectedError,
    DiceRollError,
    DocumentError,
    DocumentUnavailableError,
    EngineError,
    InvalidGrantTargetError,
    MalformedFieldError,
    ProgressionError,
    RecomputeError,
    RpgSheetError,
    UnknownActionError,
    ValidationError,
)
from rpg_sheet.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    pass_context,
)


__all__ = [
    # Base exception
    "RpgSheetError",
    # Document exceptions
    "DocumentError",
    "DocumentUnavailableError",
    # Engine exceptions
    "EngineError",
    "MalformedFieldError",
    "InvalidGrantTargetError",
    "UnknownActionError",
    "CycleDetectedError",
    "RecomputeError",
    # Rules exceptions
    "DiceRollError",
    "ProgressionError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "RulesSettings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "pass_context",
]
