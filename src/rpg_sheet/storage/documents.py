"""Source document access for the recompute engine.

The engine reads source documents (feats, effects, classes, subclasses)
through the FieldReader interface. A document is a flat map of fields; a
field whose key is a level number (``"3"``, ``"level 3"``, ``"lvl3"``) is a
*feature block* whose contents only apply once the character reaches that
level. Block contents may be:

- a plain object, contributing its keys directly;
- a list of objects, each contributing its keys;
- a list of ``"key: value"`` strings, each contributing one pair.

Two reference stores are provided: InMemoryDocumentStore for callers that
already hold documents, and JsonDocumentStore for a directory of JSON files.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from rpg_sheet.core.exceptions import DocumentUnavailableError
from rpg_sheet.core.logging import get_logger
from rpg_sheet.models.fields import FieldMap, parse_inline_value, to_field_map


logger = get_logger(__name__)

_LEVEL_GATE = re.compile(r"^(?:level|lvl)?[\s_\-]*(\d+)$", re.IGNORECASE)
_DOCUMENT_SUFFIXES = (".json", ".md")


# =============================================================================
# Paths and Level Gates
# =============================================================================


def normalize_path(path: str) -> str:
    """Normalize a document path or wiki link.

    Strips whitespace, ``[[...]]`` link brackets, link aliases, leading and
    trailing slashes, and a ``.json`` / ``.md`` suffix. Case is preserved.

    Example:
        >>> normalize_path("[[Feats/Alert.md|Alert]]")
        'Feats/Alert'
    """
    value = path.strip()
    if value.startswith("[[") and value.endswith("]]"):
        value = value[2:-2]
    value = value.split("|", 1)[0].strip().strip("/")
    for suffix in _DOCUMENT_SUFFIXES:
        if value.lower().endswith(suffix):
            value = value[: -len(suffix)]
            break
    return value


def level_gate(key: str) -> int | None:
    """Return the level threshold encoded in a field key, if any.

    Example:
        >>> level_gate("level 5")
        5
        >>> level_gate("hpBonus") is None
        True
    """
    match = _LEVEL_GATE.match(key.strip())
    return int(match.group(1)) if match else None


def _block_entries(content: Any) -> list[dict[str, Any]]:
    """Split a feature block's content into raw entry maps."""
    if isinstance(content, dict):
        return [content]
    if not isinstance(content, list):
        return []

    entries: list[dict[str, Any]] = []
    for item in content:
        if isinstance(item, dict):
            entries.append(item)
        elif isinstance(item, str) and ":" in item:
            key, _, value = item.partition(":")
            if key.strip():
                entries.append({key.strip(): parse_inline_value(value)})
    return entries


def active_feature_blocks(raw: dict[str, Any], level: int) -> list[FieldMap]:
    """Collect the field maps that apply at ``level``.

    The ungated top-level fields come first, followed by every entry of each
    feature block with threshold <= level, in ascending threshold order.

    Args:
        raw: The document's raw field map.
        level: The character's level.

    Returns:
        Ordered list of coerced field maps.
    """
    ungated: dict[str, Any] = {}
    gated: list[tuple[int, Any]] = []
    for key, value in raw.items():
        threshold = level_gate(str(key))
        if threshold is None:
            ungated[str(key)] = value
        elif threshold <= level:
            gated.append((threshold, value))

    blocks = [to_field_map(ungated)]
    for _, content in sorted(gated, key=lambda pair: pair[0]):
        blocks.extend(to_field_map(entry) for entry in _block_entries(content))
    return blocks


def flatten_blocks(blocks: Iterable[FieldMap]) -> FieldMap:
    """Merge field maps in order; later values win for the same key."""
    flattened: FieldMap = {}
    for block in blocks:
        flattened.update(block)
    return flattened


# =============================================================================
# Field Reader Interface
# =============================================================================


class FieldReader(ABC):
    """Read-only access to source documents.

    Subclasses implement ``load_raw``; level-gate handling, flattening and
    catalog checks are shared.
    """

    @abstractmethod
    def load_raw(self, path: str) -> dict[str, Any] | None:
        """Load a document's raw field map.

        Args:
            path: Normalized document path.

        Returns:
            The raw field map, or None if the document does not exist.

        Raises:
            DocumentUnavailableError: If the document exists but is unreadable.
        """

    def exists(self, path: str) -> bool:
        """Check whether a readable document exists at ``path``."""
        try:
            return self.load_raw(normalize_path(path)) is not None
        except DocumentUnavailableError:
            return False

    def resolve_feature_blocks(self, path: str, level: int) -> list[FieldMap]:
        """Get the individual field maps of a document active at ``level``.

        Raises:
            DocumentUnavailableError: If the document is missing or unreadable.
        """
        normalized = normalize_path(path)
        raw = self.load_raw(normalized)
        if raw is None:
            raise DocumentUnavailableError("Source document not found", path=normalized)
        return active_feature_blocks(raw, level)

    def resolve_fields(self, path: str, level: int) -> FieldMap:
        """Get a document's flattened field map at ``level``.

        Returns:
            The flattened map, or an empty map if the document is missing
            or unreadable.
        """
        try:
            blocks = self.resolve_feature_blocks(path, level)
        except DocumentUnavailableError as exc:
            logger.debug("Document unavailable, no fields", path=path, error=exc.message)
            return {}
        return flatten_blocks(blocks)

    def is_in_catalog(self, path: str, catalog: Iterable[str]) -> bool:
        """Check whether ``path`` is one of the catalog's document paths."""
        normalized = normalize_path(path)
        return any(normalize_path(entry) == normalized for entry in catalog)


# =============================================================================
# Reference Stores
# =============================================================================


class InMemoryDocumentStore(FieldReader):
    """Document store backed by a dictionary of raw field maps.

    Example:
        >>> store = InMemoryDocumentStore({"feats/tough": {"hpBonus": 2}})
        >>> store.resolve_fields("feats/tough", level=1)
        {'hpBonus': Number(value=2)}
    """

    def __init__(self, documents: dict[str, dict[str, Any]] | None = None) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        for path, fields in (documents or {}).items():
            self.add(path, fields)

    def add(self, path: str, fields: dict[str, Any]) -> None:
        """Add or replace a document."""
        self._documents[normalize_path(path)] = dict(fields)

    def remove(self, path: str) -> None:
        """Remove a document if present."""
        self._documents.pop(normalize_path(path), None)

    def load_raw(self, path: str) -> dict[str, Any] | None:
        return self._documents.get(path)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize_path(path) in self._documents

    def __len__(self) -> int:
        return len(self._documents)


class JsonDocumentStore(FieldReader):
    """Document store reading ``<root>/<path>.json`` files.

    Path separators map to subdirectories, so ``feats/alert`` is read from
    ``<root>/feats/alert.json``. Paths escaping the root are treated as
    missing.
    """

    def __init__(self, root: str | Path | None = None) -> None:
        """Initialize the store.

        Args:
            root: Directory holding the documents. Defaults to the
                configured storage path.
        """
        if root is None:
            from rpg_sheet.core.config import get_settings

            root = get_settings().storage.documents_path
        self.root = Path(root)
        logger.info("JSON document store initialized", root=str(self.root))

    def _file_for(self, path: str) -> Path | None:
        """Map a normalized path to its JSON file, or None if outside root."""
        root = self.root.resolve()
        candidate = (root / f"{path}.json").resolve()
        if not candidate.is_relative_to(root):
            return None
        return candidate

    def load_raw(self, path: str) -> dict[str, Any] | None:
        file_path = self._file_for(path)
        if file_path is None or not file_path.is_file():
            return None
        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DocumentUnavailableError(
                f"Unreadable source document: {exc}",
                path=path,
            ) from exc
        if not isinstance(data, dict):
            raise DocumentUnavailableError(
                "Source document is not a JSON object",
                path=path,
                details={"type": type(data).__name__},
            )
        return data

    def save(self, path: str, fields: dict[str, Any]) -> Path:
        """Write a document, creating directories as needed.

        Raises:
            DocumentUnavailableError: If the path escapes the store root.
        """
        normalized = normalize_path(path)
        file_path = self._file_for(normalized)
        if file_path is None:
            raise DocumentUnavailableError("Path escapes the document root", path=normalized)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(json.dumps(fields, indent=2, ensure_ascii=False), encoding="utf-8")
        return file_path


__all__ = [
    "normalize_path",
    "level_gate",
    "active_feature_blocks",
    "flatten_blocks",
    "FieldReader",
    "InMemoryDocumentStore",
    "JsonDocumentStore",
]
