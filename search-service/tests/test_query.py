"""Tests for query normalization, tab validation and tokenization."""

import pytest

from search_service.domain.models import SearchTab
from search_service.exceptions import InvalidTabError
from search_service.query import (
    build_search_query,
    clamp,
    normalize_query,
    normalize_tab,
    to_int,
    tokenize_query,
)


class TestNormalizeQuery:
    """Tests for normalize_query."""

    def test_trims_and_collapses_whitespace(self):
        assert normalize_query("  vintage \t  denim\n jacket  ") == "vintage denim jacket"

    def test_missing_query_is_empty(self):
        assert normalize_query(None) == ""
        assert normalize_query(42) == ""

    def test_truncates_to_80_characters(self):
        assert len(normalize_query("x" * 200)) == 80

    def test_is_idempotent(self):
        raw = "  many   spaces " + "word " * 30
        once = normalize_query(raw)
        assert normalize_query(once) == once


class TestNormalizeTab:
    """Tests for normalize_tab."""

    @pytest.mark.parametrize("raw", ["users", " Users ", "USERS"])
    def test_case_and_whitespace_insensitive(self, raw):
        assert normalize_tab(raw) == SearchTab.USERS

    def test_missing_tab_is_overall(self):
        assert normalize_tab(None) == SearchTab.OVERALL

    @pytest.mark.parametrize("raw", ["bogus", "", "user"])
    def test_unknown_tab_raises(self, raw):
        with pytest.raises(InvalidTabError) as exc_info:
            normalize_tab(raw)
        assert exc_info.value.status == 400
        assert exc_info.value.message == (
            "Invalid tab. Must be overall, users, social, marketplace, or quilts."
        )


class TestTokenizeQuery:
    """Tests for tokenize_query."""

    def test_lowercases_and_deduplicates_in_order(self):
        assert tokenize_query("Red red BLUE red green") == ["red", "blue", "green"]

    def test_caps_at_eight_tokens(self):
        tokens = tokenize_query("a b c d e f g h i j")
        assert tokens == ["a", "b", "c", "d", "e", "f", "g", "h"]

    def test_empty_query_has_no_tokens(self):
        assert tokenize_query("") == []


class TestParsing:
    """Tests for the loose integer parsing and clamping helpers."""

    def test_to_int(self):
        assert to_int("20", 5) == 20
        assert to_int("12abc", 5) == 12
        assert to_int("-3", 5) == -3
        assert to_int("abc", 5) == 5
        assert to_int(None, 5) == 5

    def test_clamp(self):
        assert clamp(0, 1, 50) == 1
        assert clamp(99, 1, 50) == 50
        assert clamp(7, 1, 50) == 7


class TestBuildSearchQuery:
    """Tests for build_search_query."""

    def test_defaults(self):
        query = build_search_query(q="Nike Fan")
        assert query.tab == SearchTab.OVERALL
        assert query.normalized_text == "Nike Fan"
        assert query.match_text == "nike fan"
        assert query.tokens == ["nike", "fan"]
        assert (query.limit, query.offset, query.section_limit) == (20, 0, 5)

    def test_out_of_range_values_are_clamped(self):
        query = build_search_query(
            q="abc", tab="social", limit="500", offset="-10", section_limit="99"
        )
        assert query.limit == 50
        assert query.offset == 0
        assert query.section_limit == 10

    def test_lower_bounds(self):
        query = build_search_query(q="abc", limit="0", section_limit="0", offset="20000")
        assert query.limit == 1
        assert query.section_limit == 1
        assert query.offset == 10000

    def test_garbage_numbers_fall_back_to_defaults(self):
        query = build_search_query(q="abc", limit="lots", section_limit="x")
        assert query.limit == 20
        assert query.section_limit == 5

    def test_invalid_tab_is_rejected_before_anything_else(self):
        with pytest.raises(InvalidTabError):
            build_search_query(q="abc", tab="bogus")
