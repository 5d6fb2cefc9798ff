# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for filter and sort evaluation."""

import re

import pytest

from graphcompose.query.filtering import compile_regex, get_value_at_path, matches_filter, sort_records

# ###############
# Test data
# ###############

POST = {
    "title": "Hello World",
    "views": 7,
    "tags": ["python", "graphql"],
    "frontmatter": {"date": "2024-01-02", "draft": False},
    "authors": [{"name": "Ada", "age": 36}, {"name": "Linus", "age": 28}],
}


# ###############
# Paths
# ###############


class TestGetValueAtPath:
    def test_nested_path(self) -> None:
        assert get_value_at_path(POST, "frontmatter.date") == "2024-01-02"

    def test_lists_are_mapped(self) -> None:
        assert get_value_at_path(POST, "authors.name") == ["Ada", "Linus"]

    def test_missing_path(self) -> None:
        assert get_value_at_path(POST, "frontmatter.missing.deeper") is None


# ###############
# Operators
# ###############


class TestOperators:
    @pytest.mark.parametrize(
        ("filter_", "expected"),
        [
            ({"views": {"eq": 7}}, True),
            ({"views": {"ne": 7}}, False),
            ({"views": {"gt": 3, "lt": 10}}, True),
            ({"views": {"gte": 8}}, False),
            ({"views": {"lte": 7}}, True),
            ({"views": {"in": [1, 7]}}, True),
            ({"views": {"nin": [1, 7]}}, False),
            ({"title": {"regex": "/^hello/i"}}, True),
            ({"title": {"regex": "^hello"}}, False),
            ({"title": {"glob": "Hello*"}}, True),
            ({"frontmatter": {"draft": {"eq": False}}}, True),
        ],
    )
    def test_scalar_operators(self, filter_: dict, expected: bool) -> None:
        assert matches_filter(POST, filter_) is expected

    def test_list_values_match_any_element(self) -> None:
        assert matches_filter(POST, {"tags": {"eq": "graphql"}})
        assert matches_filter(POST, {"tags": {"in": ["rust", "python"]}})
        assert not matches_filter(POST, {"tags": {"eq": "rust"}})

    def test_nested_list_of_objects(self) -> None:
        assert matches_filter(POST, {"authors": {"name": {"eq": "Linus"}}})
        assert matches_filter(POST, {"authors": {"elemMatch": {"name": {"eq": "Ada"}, "age": {"gt": 30}}}})
        assert not matches_filter(POST, {"authors": {"elemMatch": {"name": {"eq": "Linus"}, "age": {"gt": 30}}}})

    def test_range_on_incomparable_values_never_matches(self) -> None:
        assert not matches_filter(POST, {"title": {"gt": 3}})
        assert not matches_filter({"flag": True}, {"flag": {"gt": 0}})

    def test_ne_matches_missing_values(self) -> None:
        assert matches_filter(POST, {"subtitle": {"ne": "x"}})
        assert not matches_filter(POST, {"subtitle": {"eq": "x"}})

    def test_empty_filter_matches(self) -> None:
        assert matches_filter(POST, None)
        assert matches_filter(POST, {})


class TestCompileRegex:
    def test_flags(self) -> None:
        pattern = compile_regex("/a.b/is")
        assert pattern.flags & re.IGNORECASE
        assert pattern.flags & re.DOTALL
        assert pattern.search("A\nB")

    def test_bare_pattern(self) -> None:
        assert compile_regex("^x$").pattern == "^x$"


# ###############
# Sorting
# ###############


class TestSortRecords:
    RECORDS = [
        {"id": "a", "views": 3, "title": "b"},
        {"id": "b", "views": None, "title": "a"},
        {"id": "c", "views": 7, "title": "a"},
        {"id": "d", "views": 3, "title": "a"},
    ]

    def _ids(self, records: list[dict]) -> list[str]:
        return [record["id"] for record in records]

    def test_ascending_puts_none_last(self) -> None:
        assert self._ids(sort_records(self.RECORDS, ["views"])) == ["a", "d", "c", "b"]

    def test_descending_puts_none_last(self) -> None:
        assert self._ids(sort_records(self.RECORDS, ["views"], ["DESC"])) == ["c", "a", "d", "b"]

    def test_secondary_key(self) -> None:
        assert self._ids(sort_records(self.RECORDS, ["views", "title"], ["ASC", "ASC"])) == ["d", "a", "c", "b"]

    def test_missing_order_defaults_to_ascending(self) -> None:
        assert self._ids(sort_records(self.RECORDS, ["title", "views"], ["DESC"])) == ["a", "d", "c", "b"]

    def test_no_fields_keeps_order(self) -> None:
        assert self._ids(sort_records(self.RECORDS, [])) == ["a", "b", "c", "d"]

    def test_empty_lists_sort_last(self) -> None:
        records = [{"id": "x", "tags": ["b"]}, {"id": "y", "tags": []}, {"id": "z", "tags": ["a", "c"]}]
        assert self._ids(sort_records(records, ["tags"])) == ["z", "x", "y"]
        assert self._ids(sort_records(records, ["tags"], ["DESC"])) == ["x", "z", "y"]
