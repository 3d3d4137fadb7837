"""Structured logging for the rpg-sheet engine.

Engine modules log through structlog with keyword context:

    >>> from rpg_sheet.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Recompute finished", level=5, sources=7)

The engine is a library, so nothing is configured on import. Applications
call ``configure_logging()`` once; it reads the level and output format from
the settings unless they are passed explicitly. A recompute pass binds its
context (character level, source count) with ``pass_context`` so every
entry logged during the pass carries it.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from rpg_sheet.core.config import Settings


_LOGGER_NAMESPACE = "rpg_sheet"


def _app_context(app_name: str, app_version: str) -> Processor:
    """Build a processor stamping entries with the engine name and version."""

    def add_app_context(
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("version", app_version)
        return event_dict

    return add_app_context


def configure_logging(
    settings: Settings | None = None,
    *,
    level: str | None = None,
    json_format: bool | None = None,
) -> None:
    """Configure structlog and the ``rpg_sheet`` stdlib logger.

    Args:
        settings: Settings to read ``log_level``, ``log_json`` and the app
            name from; the cached settings if omitted.
        level: Overrides ``settings.log_level``. Without it, ``settings.debug``
            forces ``DEBUG``.
        json_format: Overrides ``settings.log_json``.

    Example:
        >>> configure_logging(level="DEBUG", json_format=True)
    """
    if settings is None:
        from rpg_sheet.core.config import get_settings

        settings = get_settings()

    default_level = "DEBUG" if settings.debug else settings.log_level
    level_name = (level or default_level).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    use_json = settings.log_json if json_format is None else json_format

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _app_context(settings.app_name, settings.app_version),
        structlog.processors.StackInfoRenderer(),
    ]
    if use_json:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    # Only the engine's own namespace; the host application owns the root logger.
    logging.getLogger(_LOGGER_NAMESPACE).setLevel(numeric_level)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structlog logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind values included in every following log entry.

    Example:
        >>> bind_context(character="Aria")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def pass_context(**kwargs: Any) -> Iterator[None]:
    """Bind values for the duration of a block, restoring the previous ones after.

    Example:
        >>> with pass_context(level=5):
        ...     get_logger(__name__).info("Sources resolved")
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "pass_context",
]
