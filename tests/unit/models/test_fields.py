"""Tests for field value variants and coercion."""

from __future__ import annotations

import pytest

from rpg_sheet.models.fields import (
    Flag,
    Number,
    Record,
    Text,
    TextList,
    as_flag,
    as_int,
    as_text,
    as_text_list,
    parse_inline_value,
    to_field_map,
    to_field_value,
    to_plain,
    variant_name,
)


class TestToFieldValue:
    """Tests for raw value coercion."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (True, Flag(True)),
            (3, Number(3)),
            (2.5, Number(2.5)),
            ("fire", Text("fire")),
            (["fire", "cold"], TextList(("fire", "cold"))),
            ([1, " a ", ""], TextList(("1", "a"))),
        ],
    )
    def test_scalar_and_list_variants(self, raw: object, expected: object) -> None:
        """Test each raw type maps to its variant."""
        assert to_field_value(raw) == expected

    def test_bool_is_not_number(self) -> None:
        """Test booleans become flags, not numbers."""
        assert isinstance(to_field_value(False), Flag)

    def test_nested_record(self) -> None:
        """Test dicts become records of converted values."""
        value = to_field_value({"type": "heal", "amount": 10, "skip": None})

        assert isinstance(value, Record)
        assert value.get("type") == Text("heal")
        assert value.get("amount") == Number(10)
        assert value.get("skip") is None

    def test_none_and_unsupported(self) -> None:
        """Test null and unsupported values are dropped."""
        assert to_field_value(None) is None
        assert to_field_value(object()) is None

    def test_field_map_drops_unsupported(self) -> None:
        """Test to_field_map skips values with no variant."""
        assert to_field_map({"a": 1, "b": None}) == {"a": Number(1)}


class TestParseInlineValue:
    """Tests for "key: value" string entries."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            (" 5", 5),
            ("-2", -2),
            ("1.5", 1.5),
            ("true", True),
            ("No", False),
            ("[fire, cold]", ["fire", "cold"]),
            ('"feats/alert"', "feats/alert"),
            ("60 ft", "60 ft"),
        ],
    )
    def test_values(self, text: str, expected: object) -> None:
        """Test inline value parsing."""
        assert parse_inline_value(text) == expected

    @pytest.mark.parametrize("text", ["[[feats/second-wind]]", " [[Feats/Alert|Alert]] "])
    def test_wiki_link_is_text(self, text: str) -> None:
        """Test a wiki link is kept whole instead of read as a list."""
        assert parse_inline_value(text) == text.strip()


class TestAccessors:
    """Tests for the variant accessors."""

    def test_as_int(self) -> None:
        """Test integer reads from numbers and numeric text."""
        assert as_int(Number(4)) == 4
        assert as_int(Number(4.0)) == 4
        assert as_int(Number(4.5)) is None
        assert as_int(Text("+2")) == 2
        assert as_int(Text("60 ft")) == 60
        assert as_int(Text("sixty")) is None
        assert as_int(Flag(True)) is None
        assert as_int(None) is None

    def test_as_text(self) -> None:
        """Test text reads strip whitespace and reject blanks."""
        assert as_text(Text("  dex ")) == "dex"
        assert as_text(Text("   ")) is None
        assert as_text(Number(1)) is None

    def test_as_text_list(self) -> None:
        """Test list reads from lists and comma-separated text."""
        assert as_text_list(TextList(("a", "b"))) == ["a", "b"]
        assert as_text_list(Text("fire, cold")) == ["fire", "cold"]
        assert as_text_list(Text("[fire, cold]")) == ["fire", "cold"]
        assert as_text_list(Text("stealth")) == ["stealth"]
        assert as_text_list(Number(3)) is None

    def test_as_text_list_keeps_wiki_links(self) -> None:
        """Test wiki links are not mistaken for bracket lists."""
        assert as_text_list(Text("[[Feats/Alert]]")) == ["[[Feats/Alert]]"]

    def test_as_flag(self) -> None:
        """Test flag reads from booleans, words and 0/1."""
        assert as_flag(Flag(True)) is True
        assert as_flag(Text("yes")) is True
        assert as_flag(Text("off")) is False
        assert as_flag(Number(1)) is True
        assert as_flag(Text("maybe")) is None

    def test_to_plain_round_trip(self) -> None:
        """Test field values convert back to plain data."""
        raw = {"type": "heal", "amount": 10, "tags": ["a"]}
        assert to_plain(to_field_value(raw)) == raw

    def test_variant_name(self) -> None:
        """Test diagnostic variant names."""
        assert variant_name(Number(1)) == "Number"
        assert variant_name(None) == "missing"
