"""Tagged field values read from source documents.

Source documents are loosely typed: the same key may be authored as a number,
a string, a list, or a nested object. Raw values are coerced once into one of
five variants and the engine then checks the variant it expects for each key.

Variants:
    Number: Integer or float.
    Text: A single string.
    Flag: A boolean.
    TextList: An ordered list of strings.
    Record: A nested mapping of field values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Number:
    """A numeric field value."""

    value: int | float


@dataclass(frozen=True)
class Text:
    """A string field value."""

    value: str


@dataclass(frozen=True)
class Flag:
    """A boolean field value."""

    value: bool


@dataclass(frozen=True)
class TextList:
    """A list-of-strings field value."""

    items: tuple[str, ...] = ()


@dataclass(frozen=True)
class Record:
    """A nested object field value."""

    fields: dict[str, FieldValue] = field(default_factory=dict)

    def get(self, key: str) -> FieldValue | None:
        """Get a nested field by exact key."""
        return self.fields.get(key)


FieldValue = Number | Text | Flag | TextList | Record
"""Union of all field value variants."""

FieldMap = dict[str, FieldValue]
"""A flat map of field names to values."""


_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)\s*(?:ft\.?|feet)?\s*$", re.IGNORECASE)
_FLOAT_PATTERN = re.compile(r"^\s*[+-]?\d+\.\d+\s*$")
_TRUE_WORDS = frozenset({"true", "yes", "on"})
_FALSE_WORDS = frozenset({"false", "no", "off"})


def to_field_value(raw: Any) -> FieldValue | None:
    """Coerce a raw document value into a field value variant.

    Args:
        raw: Value as loaded from the document store.

    Returns:
        The matching variant, or None for null or unsupported values.

    Example:
        >>> to_field_value(["fire", "cold"])
        TextList(items=('fire', 'cold'))
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        return Flag(raw)
    if isinstance(raw, (int, float)):
        return Number(raw)
    if isinstance(raw, str):
        return Text(raw)
    if isinstance(raw, (list, tuple)):
        items = tuple(
            str(item).strip()
            for item in raw
            if isinstance(item, (str, int, float)) and not isinstance(item, bool)
        )
        return TextList(tuple(item for item in items if item))
    if isinstance(raw, dict):
        converted: dict[str, FieldValue] = {}
        for key, value in raw.items():
            field_value = to_field_value(value)
            if field_value is not None:
                converted[str(key)] = field_value
        return Record(converted)
    return None


def to_field_map(raw: dict[str, Any]) -> FieldMap:
    """Coerce every entry of a raw mapping, dropping unsupported values."""
    result: FieldMap = {}
    for key, value in raw.items():
        field_value = to_field_value(value)
        if field_value is not None:
            result[str(key)] = field_value
    return result


def parse_inline_value(text: str) -> Any:
    """Parse the value half of a ``"key: value"`` string entry.

    Recognizes booleans, integers, floats, and ``[a, b]`` bracket lists;
    anything else is returned as a stripped string. Wiki links such as
    ``[[Feats/Alert]]`` are strings, not lists.

    Example:
        >>> parse_inline_value("[fire, cold]")
        ['fire', 'cold']
        >>> parse_inline_value("5")
        5
    """
    value = text.strip().strip("\"'")
    lowered = value.lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    if value.startswith("[") and value.endswith("]") and not value.startswith("[["):
        return [item.strip().strip("\"'") for item in value[1:-1].split(",") if item.strip()]
    if re.fullmatch(r"[+-]?\d+", value):
        return int(value)
    if _FLOAT_PATTERN.match(value):
        return float(value)
    return value


# =============================================================================
# Variant accessors
# =============================================================================


def as_int(value: FieldValue | None) -> int | None:
    """Read a field as an integer.

    Accepts integral numbers and integer-looking text such as '+2' or
    '60 ft'. Returns None for any other variant.
    """
    if isinstance(value, Number):
        if isinstance(value.value, float) and not value.value.is_integer():
            return None
        return int(value.value)
    if isinstance(value, Text):
        match = _INT_PATTERN.match(value.value)
        if match:
            return int(match.group(1))
    return None


def as_text(value: FieldValue | None) -> str | None:
    """Read a field as a single non-empty string."""
    if isinstance(value, Text) and value.value.strip():
        return value.value.strip()
    return None


def as_text_list(value: FieldValue | None) -> list[str] | None:
    """Read a field as a list of strings.

    A Text value is split on commas, with optional surrounding brackets.
    Wiki links such as '[[Feats/Alert]]' keep their brackets.
    """
    if isinstance(value, TextList):
        return list(value.items)
    if isinstance(value, Text):
        raw = value.value.strip()
        if raw.startswith("[") and raw.endswith("]") and not raw.startswith("[["):
            raw = raw[1:-1]
        items = [item.strip().strip("\"'") for item in raw.split(",")]
        return [item for item in items if item]
    return None


def as_flag(value: FieldValue | None) -> bool | None:
    """Read a field as a boolean."""
    if isinstance(value, Flag):
        return value.value
    if isinstance(value, Text):
        lowered = value.value.strip().lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
    if isinstance(value, Number) and value.value in (0, 1):
        return bool(value.value)
    return None


def to_plain(value: FieldValue) -> Any:
    """Convert a field value back into plain Python data."""
    if isinstance(value, TextList):
        return list(value.items)
    if isinstance(value, Record):
        return {key: to_plain(item) for key, item in value.fields.items()}
    return value.value


def variant_name(value: FieldValue | None) -> str:
    """Name of a value's variant, for diagnostics."""
    return "missing" if value is None else type(value).__name__


__all__ = [
    "Number",
    "Text",
    "Flag",
    "TextList",
    "Record",
    "FieldValue",
    "FieldMap",
    "to_field_value",
    "to_field_map",
    "parse_inline_value",
    "as_int",
    "as_text",
    "as_text_list",
    "as_flag",
    "to_plain",
    "variant_name",
]
