"""Custom exception hierarchy for the rpg-sheet engine.

This module defines the exception hierarchy used across the engine. All
exceptions inherit from RpgSheetError, enabling unified error handling at the
caller boundary while preserving domain-specific context.

Most engine failures are absorbed locally during a recompute pass and turned
into advisory notices; the exception classes still carry the context so that
the same objects can be logged, surfaced, or raised by stricter callers.

Example:
    >>> from rpg_sheet.core.exceptions import DocumentUnavailableError
    >>> raise DocumentUnavailableError("Feat not found", path="feats/alert")
"""

from __future__ import annotations

from typing import Any


class RpgSheetError(Exception):
    """Base exception for all rpg-sheet errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Document Store Exceptions
# =============================================================================


class DocumentError(RpgSheetError):
    """Base exception for source document access errors."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize document error with path context.

        Args:
            message: Human-readable error description.
            path: Path of the document that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if path:
            combined_details["path"] = path
        super().__init__(message, details=combined_details)


class DocumentUnavailableError(DocumentError):
    """Raised when a source document is missing or cannot be read."""


# =============================================================================
# Engine Exceptions
# =============================================================================


class EngineError(RpgSheetError):
    """Base exception for errors raised while recomputing a character."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize engine error with source context.

        Args:
            message: Human-readable error description.
            source: Path of the source document being processed.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if source:
            combined_details["source"] = source
        super().__init__(message, details=combined_details)


class MalformedFieldError(EngineError):
    """Raised when a recognized field holds a value of the wrong type."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str,
        expected: str,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize malformed field error.

        Args:
            message: Human-readable error description.
            field_name: The field key that was malformed.
            expected: Name of the expected value variant.
            source: Path of the source document.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        combined_details["field_name"] = field_name
        combined_details["expected"] = expected
        super().__init__(message, source=source, details=combined_details)


class InvalidGrantTargetError(EngineError):
    """Raised when a grant names an unknown ability, skill, or type."""

    def __init__(
        self,
        message: str,
        *,
        target: str,
        field_name: str | None = None,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid grant target error.

        Args:
            message: Human-readable error description.
            target: The unrecognized target name.
            field_name: The field key carrying the grant.
            source: Path of the source document.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        combined_details["target"] = target
        if field_name:
            combined_details["field_name"] = field_name
        super().__init__(message, source=source, details=combined_details)


class UnknownActionError(EngineError):
    """Raised when a one-shot effect declares an unsupported action type."""

    def __init__(
        self,
        message: str,
        *,
        action_type: str,
        instance_id: str | None = None,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize unknown action error.

        Args:
            message: Human-readable error description.
            action_type: The unsupported action type.
            instance_id: Identifier of the effect instance.
            source: Path of the effect document.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        combined_details["action_type"] = action_type
        if instance_id:
            combined_details["instance_id"] = instance_id
        super().__init__(message, source=source, details=combined_details)


class CycleDetectedError(EngineError):
    """Raised when a grant chain loops back to an already expanded source."""


class RecomputeError(EngineError):
    """Raised when a recompute pass fails unexpectedly.

    The partial result must be discarded; the previously committed
    character state stays authoritative.
    """


# =============================================================================
# Rules Exceptions
# =============================================================================


class DiceRollError(RpgSheetError):
    """Raised when dice rolling operations fail."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class ProgressionError(RpgSheetError):
    """Raised when a progression operation is not allowed.

    For example converting XP to feat points below the level cap.
    """


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(RpgSheetError):
    """Raised when engine configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(RpgSheetError):
    """Raised when caller-supplied data fails validation."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "RpgSheetError",
    # Document store exceptions
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
]
