"""Absorb per-source engine errors as advisory notices."""

from __future__ import annotations

from rpg_sheet.core.exceptions import RpgSheetError
from rpg_sheet.core.logging import get_logger
from rpg_sheet.models.enums import NoticeKind
from rpg_sheet.models.state import CharacterState, Notice


logger = get_logger(__name__)


def absorb(state: CharacterState, kind: NoticeKind, error: RpgSheetError) -> Notice:
    """Log a non-fatal error and record it on the state as a notice.

    Args:
        state: The state being built by the current pass.
        kind: Notice kind for the error.
        error: The absorbed error; its details become the notice details.

    Returns:
        The recorded notice.
    """
    details = dict(error.details)
    source = details.get("source") or details.get("path")
    logger.warning(error.message, notice=kind.value, **details)
    return state.add_notice(kind, error.message, source=source, details=details)


__all__ = ["absorb"]
