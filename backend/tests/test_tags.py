"""
Markpad Backend — Tag Normalizer Unit Tests
=============================================

What we test:
    ✅ List input: trimming, empty removal, dedup, non-string coercion
    ✅ String input: comma / whitespace / '#' separators
    ✅ Absent or malformed input degrades to []
    ✅ Idempotence on its own output
"""

import pytest

from app.services.tags import normalize_tags


class TestNormalizeTagsList:

    def test_trims_drops_empty_and_dedupes(self):
        assert normalize_tags(["a", " a ", "", "b"]) == ["a", "b"]

    def test_first_occurrence_wins(self):
        assert normalize_tags(["work", "home", "work", "urgent", "home"]) == [
            "work",
            "home",
            "urgent",
        ]

    def test_non_string_elements_are_coerced(self):
        assert normalize_tags([42, "42", 3.5, True]) == ["42", "3.5", "true"]

    def test_booleans_and_whole_floats_read_like_json(self):
        assert normalize_tags([1.0, 2.5, False, "1"]) == ["1", "2.5", "false"]

    def test_none_elements_are_dropped(self):
        assert normalize_tags([None, "x", None]) == ["x"]

    def test_whitespace_only_elements_are_dropped(self):
        assert normalize_tags(["   ", "\t", "\n"]) == []

    def test_tuple_input(self):
        assert normalize_tags(("a", "b", "a")) == ["a", "b"]

    def test_list_elements_are_not_split(self):
        """Only string input is split on separators; list items are kept whole."""
        assert normalize_tags(["to read"]) == ["to read"]


class TestNormalizeTagsString:

    def test_mixed_separators(self):
        assert normalize_tags("foo, bar #baz  qux") == ["foo", "bar", "baz", "qux"]

    def test_hashtag_style(self):
        assert normalize_tags("#python #fastapi #python") == ["python", "fastapi"]

    def test_leading_and_trailing_separators(self):
        assert normalize_tags(" ,, a ,, ") == ["a"]

    def test_newlines_and_tabs(self):
        assert normalize_tags("one\ntwo\tthree") == ["one", "two", "three"]

    def test_case_is_preserved(self):
        assert normalize_tags("Work work") == ["Work", "work"]

    def test_empty_string(self):
        assert normalize_tags("") == []


class TestNormalizeTagsDegenerate:

    @pytest.mark.parametrize("raw", [None, 0, 12, {"a": 1}, object()])
    def test_malformed_input_becomes_empty(self, raw):
        assert normalize_tags(raw) == []


class TestNormalizeTagsProperties:

    @pytest.mark.parametrize(
        "raw",
        [
            ["a", " a ", "", "b"],
            "foo, bar #baz  qux",
            ["x", "y", "x", " ", None, 7],
            "#a#b,,c  a",
        ],
    )
    def test_idempotent(self, raw):
        once = normalize_tags(raw)
        assert normalize_tags(once) == once

    @pytest.mark.parametrize(
        "raw",
        [["dup", "dup", " dup "], "a a a, b b", [" ", "", "c"]],
    )
    def test_no_duplicates_and_no_blanks(self, raw):
        result = normalize_tags(raw)
        assert len(result) == len(set(result))
        assert all(tag.strip() == tag and tag for tag in result)
