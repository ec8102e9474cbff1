"""Tests for the filter-expression tokenizer."""

from __future__ import annotations

import pytest

from qparams.containers import FilterEntry
from qparams.exceptions import FilterSyntaxError
from qparams.tokenizer import (
    OPERATOR_LENGTHS,
    iter_entries,
    match_operator,
    scan,
    serialize,
    split_item,
    tokenize,
    tokenize_strict,
    validate_operators,
)

OPS = (">", "==", "<=", "<", "!=", "-like-")


class TestTokenize:
    def test_mixed_operator_lengths(self) -> None:
        result = tokenize("age>=7,gender==0", ",", [">=", "==", ">", "<"])
        assert result == {"age >=": "7", "gender ==": "0"}

    def test_field_lowercased_value_verbatim(self) -> None:
        result = tokenize(
            "Age!=9,Gender>0,Lastname-like-Doe", ",", ["!=", ">", "-like-"]
        )
        assert result == {"age !=": "9", "gender >": "0", "lastname -like-": "Doe"}

    def test_empty_input(self) -> None:
        assert tokenize("", ",", [">", "<"]) == {}

    def test_no_operators_declared(self) -> None:
        assert tokenize("foo", ",", []) == {}

    def test_empty_operators_discard_items_with_symbols(self) -> None:
        assert tokenize("age>7", ",", []) == {}

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (
                "age>7,gender==0,balance<=1000",
                {"age >": "7", "gender ==": "0", "balance <=": "1000"},
            ),
            (
                "age>8,gender==1,balance<100",
                {"age >": "8", "gender ==": "1", "balance <": "100"},
            ),
            (
                "Age>8,Gender==1,Balance<100",
                {"age >": "8", "gender ==": "1", "balance <": "100"},
            ),
            (
                ",Age>8,Gender==1,Balance<100,",
                {"age >": "8", "gender ==": "1", "balance <": "100"},
            ),
            (
                "aGe!=9,Gender>0,Lastname-like-Doe",
                {"age !=": "9", "gender >": "0", "lastname -like-": "Doe"},
            ),
        ],
    )
    def test_default_separator(self, raw: str, expected: dict[str, str]) -> None:
        assert tokenize(raw, ",", OPS) == expected

    def test_custom_separator(self) -> None:
        result = tokenize("|Age>8|Gender==1|Balance<100|", "|", OPS)
        assert result == {"age >": "8", "gender ==": "1", "balance <": "100"}

    def test_multi_character_separator(self) -> None:
        result = tokenize("a>1&&b<2&&&&", "&&", [">", "<"])
        assert result == {"a >": "1", "b <": "2"}

    def test_doubled_separators_are_skipped(self) -> None:
        assert tokenize("a>1,,,b>2", ",", [">"]) == {"a >": "1", "b >": "2"}

    def test_empty_separator_raises(self) -> None:
        with pytest.raises(ValueError, match="item_separator"):
            tokenize("a>1", "", [">"])


class TestLongestMatch:
    def test_longer_operator_wins_regardless_of_declaration_order(self) -> None:
        assert tokenize("age>=7", ",", [">", ">="]) == {"age >=": "7"}

    def test_double_equals_does_not_leave_single_equals_key(self) -> None:
        assert tokenize("gender==0", ",", ["=", "=="]) == {"gender ==": "0"}

    def test_four_character_operator(self) -> None:
        assert tokenize("tag~in~a", ",", ["~", "~in~"]) == {"tag ~in~": "a"}

    def test_six_character_operator(self) -> None:
        result = tokenize("name-like-Jo", ",", ["-", "-like-"])
        assert result == {"name -like-": "Jo"}

    def test_first_position_wins(self) -> None:
        assert tokenize("a=b==c", ",", ["=", "=="]) == {"a =": "b==c"}

    def test_value_may_contain_operators(self) -> None:
        result = tokenize("name-like-a>b", ",", ["-like-", ">"])
        assert result == {"name -like-": "a>b"}

    @pytest.mark.parametrize("op", ["<=>", "~like", "-ilike-x"])
    def test_unsupported_lengths_never_match(self, op: str) -> None:
        assert tokenize(f"a{op}b", ",", [op]) == {}

    def test_operators_are_case_sensitive(self) -> None:
        assert tokenize("name-like-doe", ",", ["-LIKE-"]) == {}


class TestEdgeCases:
    def test_operator_only_item_has_empty_field(self) -> None:
        assert tokenize("==", ",", ["=="]) == {" ==": ""}

    def test_operator_at_start(self) -> None:
        assert tokenize(">5", ",", [">"]) == {" >": "5"}

    def test_last_write_wins(self) -> None:
        assert tokenize("age>1,AGE>2", ",", [">"]) == {"age >": "2"}

    def test_value_is_not_trimmed(self) -> None:
        assert tokenize("NAME== Doe ", ",", ["=="]) == {"name ==": " Doe "}

    def test_unmatched_items_are_dropped(self) -> None:
        assert tokenize("junk,age>1", ",", [">"]) == {"age >": "1"}


class TestScan:
    def test_reports_unmatched_items(self) -> None:
        result = scan("age>7,junk,b<1,", ",", [">", "<"])
        assert result.filters == {"age >": "7", "b <": "1"}
        assert result.unmatched == ["junk"]

    def test_clean_input_has_no_unmatched(self) -> None:
        assert scan("age>7", ",", [">"]).unmatched == []

    def test_strict_raises_with_every_item(self) -> None:
        with pytest.raises(FilterSyntaxError) as exc_info:
            tokenize_strict("junk,age>1,more", ",", [">"])
        assert exc_info.value.messages == [
            "Unrecognized filter item (junk)",
            "Unrecognized filter item (more)",
        ]

    def test_strict_returns_filters_when_clean(self) -> None:
        assert tokenize_strict("age>1", ",", [">"]) == {"age >": "1"}


class TestPrimitives:
    def test_match_operator_prefers_widest(self) -> None:
        assert match_operator(">=7", [">", ">="]) == ">="

    def test_match_operator_none(self) -> None:
        assert match_operator("x>1", [">"]) is None

    def test_split_item(self) -> None:
        assert split_item("Age>=7", [">=", ">"]) == FilterEntry("age", ">=", "7")

    def test_split_item_without_operator(self) -> None:
        assert split_item("age", [">"]) is None

    def test_iter_entries_keeps_duplicates_in_order(self) -> None:
        entries = list(iter_entries("a>1,b<2,a>3", ",", [">", "<"]))
        assert entries == [
            FilterEntry("a", ">", "1"),
            FilterEntry("b", "<", "2"),
            FilterEntry("a", ">", "3"),
        ]

    def test_entry_key(self) -> None:
        assert FilterEntry("age", ">=", "7").key == "age >="

    def test_validate_operators(self) -> None:
        assert validate_operators(["==", "<=>", "", "-like-"]) == ["<=>", ""]

    def test_supported_lengths(self) -> None:
        assert OPERATOR_LENGTHS == (6, 4, 2, 1)


class TestRoundTrip:
    OPS = (">=", "==", "!=", "-like-")

    def test_serialize_reconstructs_normalized_input(self) -> None:
        raw = "age>=7,gender==0,name-like-Doe"
        assert serialize(iter_entries(raw, ",", self.OPS), ",") == raw

    def test_serialize_with_custom_separator(self) -> None:
        raw = "age>=7|name!=x"
        assert serialize(iter_entries(raw, "|", self.OPS), "|") == raw

    def test_tokenizing_serialized_map_is_idempotent(self) -> None:
        first = tokenize("Age!=9,Gender==0,Lastname-like-Doe", ",", self.OPS)
        assert tokenize(first.to_query(), ",", self.OPS) == first
