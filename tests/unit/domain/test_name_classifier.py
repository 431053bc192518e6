"""
Tests for the name classifier.
Pure function: no fixtures, no I/O.
"""

import pytest

from rollcall.domain.name_classifier import (
    DEFAULT_DENYLIST,
    NameClassifier,
    looks_like_person_name,
    normalize_name,
)


class TestNormalizeName:
    def test_collapses_internal_whitespace(self):
        assert normalize_name("Jane \t  Smith") == "Jane Smith"

    def test_trims_ends(self):
        assert normalize_name("  Jane Smith\n") == "Jane Smith"

    def test_none_becomes_empty(self):
        assert normalize_name(None) == ""

    @pytest.mark.parametrize("raw", [
        "  Jane   Smith ",
        "John\nQ.\tSmith",
        "Mary-Kate O'Neil",
        "",
    ])
    def test_is_idempotent(self, raw):
        once = normalize_name(raw)
        assert normalize_name(once) == once


class TestLooksLikePersonName:
    @pytest.mark.parametrize("name", [
        "Jane Smith",
        "John Q. Smith",
        "Mary-Kate O'Neil",
        "  Ana   Lopez  ",
        "Li Wu Chen",
    ])
    def test_accepts_plausible_names(self, name):
        assert looks_like_person_name(name) is True

    def test_rejects_empty(self):
        assert looks_like_person_name("") is False
        assert looks_like_person_name(None) is False

    def test_rejects_too_short(self):
        assert looks_like_person_name("Al B") is False

    def test_rejects_too_long(self):
        assert looks_like_person_name("Bartholomew Maximiliano Featherstonehaughs") is False

    @pytest.mark.parametrize("name", [
        "Jane Smith2",
        "Jane Smith, PhD",
        "Jane (Smith)",
        "jane@smith",
        "Jane Smith!",
    ])
    def test_rejects_disallowed_characters(self, name):
        assert looks_like_person_name(name) is False

    def test_rejects_single_token(self):
        assert looks_like_person_name("Madonna") is False

    def test_rejects_four_tokens(self):
        assert looks_like_person_name("Ana Maria De Souza") is False

    @pytest.mark.parametrize("name", [
        "Staff Member",
        "Search Results",
        "Skyline Hawks",
        "Contact Email",
        "Go Home Now",
    ])
    def test_rejects_denylisted_words(self, name):
        assert looks_like_person_name(name) is False

    def test_denylist_match_is_case_insensitive_substring(self):
        # "highland" contains "high"
        assert looks_like_person_name("Hugh Highland") is False

    def test_rejects_all_caps_heading(self):
        assert looks_like_person_name("MATH DEPT") is False

    def test_rejects_four_caps_in_a_row_inside_token(self):
        assert looks_like_person_name("Jane SMITh") is False

    def test_allows_three_caps_in_a_row(self):
        assert looks_like_person_name("Jane McDOE") is True

    def test_custom_denylist_replaces_default(self):
        assert looks_like_person_name("Jane Smith", denylist=["smith"]) is False
        assert looks_like_person_name("Staff Member", denylist=[]) is True


class TestNameClassifier:
    def test_uses_default_denylist(self):
        classifier = NameClassifier()
        assert classifier("Staff Member") is False
        assert classifier("Jane Smith") is True

    def test_extra_words_extend_default(self):
        classifier = NameClassifier(["Counselor"])
        assert classifier("Counselor Jones") is False
        assert set(DEFAULT_DENYLIST).issubset(classifier.denylist)

    def test_blank_extra_words_ignored(self):
        classifier = NameClassifier(["", "Dean"])
        assert "" not in classifier.denylist
        assert classifier("Jane Smith") is True
