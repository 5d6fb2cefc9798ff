# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Evaluation of filter and sort inputs against content records.

Filters follow the shape of the generated ``<Type>FilterInput`` types: keys
are field names, leaves are operator maps such as ``{"eq": 3}``. A list value
matches a scalar operator when any of its elements does.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from fnmatch import fnmatchcase
from functools import cmp_to_key
from typing import Any

# ###############
# Public Interface
# ###############

OPERATORS: frozenset[str] = frozenset({"eq", "ne", "in", "nin", "gt", "gte", "lt", "lte", "regex", "glob", "elemMatch"})


def matches_filter(record: Any, filter_: Mapping[str, Any] | None) -> bool:
    """Return True if *record* satisfies every condition in *filter_*."""
    if not filter_:
        return True
    return all(_match_condition(_get(record, key), condition) for key, condition in filter_.items())


def get_value_at_path(record: Any, path: str) -> Any:
    """Read a dotted path such as ``frontmatter.title``; lists are mapped element-wise."""
    value = record
    for part in path.split("."):
        if isinstance(value, list):
            value = [_get(item, part) for item in value]
        else:
            value = _get(value, part)
        if value is None:
            return None
    return value


def sort_records(records: Sequence[Any], fields: Sequence[str], orders: Sequence[str] = ()) -> list[Any]:
    """Stable multi-key sort; ``None`` sorts last regardless of direction.

    Args:
        records: Records to sort.
        fields: Dotted field paths in priority order.
        orders: ``"ASC"`` / ``"DESC"`` per field; missing entries default to ``"ASC"``.
    """
    keys = [(path, (orders[i] if i < len(orders) else "ASC").upper() == "DESC") for i, path in enumerate(fields)]
    if not keys:
        return list(records)

    def compare(left: Any, right: Any) -> int:
        for path, descending in keys:
            result = _compare_values(get_value_at_path(left, path), get_value_at_path(right, path), descending)
            if result:
                return result
        return 0

    return sorted(records, key=cmp_to_key(compare))


def compile_regex(pattern: str) -> re.Pattern[str]:
    """Compile ``/body/flags`` (or a bare pattern) into a regular expression."""
    match = _REGEX_LITERAL.match(pattern)
    if match is None:
        return re.compile(pattern)
    flags = 0
    for flag in match.group(2):
        flags |= _REGEX_FLAGS.get(flag, 0)
    return re.compile(match.group(1), flags)


# ################
# Implementation
# ################

_REGEX_LITERAL = re.compile(r"^/(.*)/([a-z]*)$", re.DOTALL)
_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}


def _get(record: Any, key: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def _match_condition(value: Any, condition: Any) -> bool:
    if not isinstance(condition, Mapping):
        return _equals(value, condition)
    for key, operand in condition.items():
        if key in OPERATORS:
            if not _OPERATOR_FUNCS[key](value, operand):
                return False
        elif isinstance(value, list):
            if not any(_match_condition(_get(item, key), operand) for item in value):
                return False
        elif not _match_condition(_get(value, key), operand):
            return False
    return True


def _equals(value: Any, operand: Any) -> bool:
    if isinstance(value, list) and not isinstance(operand, list):
        return operand in value
    return value == operand


def _any_element(predicate: Callable[[Any], bool]) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        if isinstance(value, list):
            return any(predicate(item) for item in value)
        return predicate(value)

    return check


def _comparable(left: Any, right: Any) -> bool:
    numbers = (int, float)
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool)
    if isinstance(left, numbers) and isinstance(right, numbers):
        return True
    return isinstance(left, str) and isinstance(right, str)


def _op_in(value: Any, operand: Any) -> bool:
    candidates = operand if isinstance(operand, list) else [operand]
    if isinstance(value, list):
        return any(item in candidates for item in value)
    return value in candidates


def _op_range(check: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def apply(value: Any, operand: Any) -> bool:
        return _any_element(lambda item: item is not None and _comparable(item, operand) and check(item, operand))(
            value
        )

    return apply


def _op_regex(value: Any, operand: Any) -> bool:
    pattern = compile_regex(operand) if isinstance(operand, str) else operand
    return _any_element(lambda item: isinstance(item, str) and pattern.search(item) is not None)(value)


def _op_glob(value: Any, operand: Any) -> bool:
    return _any_element(lambda item: isinstance(item, str) and fnmatchcase(item, operand))(value)


def _op_elem_match(value: Any, operand: Any) -> bool:
    if not isinstance(value, list):
        return value is not None and matches_filter(value, operand)
    return any(matches_filter(item, operand) for item in value)


_OPERATOR_FUNCS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": _equals,
    "ne": lambda value, operand: not _equals(value, operand),
    "in": _op_in,
    "nin": lambda value, operand: not _op_in(value, operand),
    "gt": _op_range(lambda a, b: a > b),
    "gte": _op_range(lambda a, b: a >= b),
    "lt": _op_range(lambda a, b: a < b),
    "lte": _op_range(lambda a, b: a <= b),
    "regex": _op_regex,
    "glob": _op_glob,
    "elemMatch": _op_elem_match,
}


def _compare_values(left: Any, right: Any, descending: bool) -> int:
    if isinstance(left, list):
        left = left[0] if left else None
    if isinstance(right, list):
        right = right[0] if right else None
    if left is None and right is None:
        return 0
    if left is None:
        return 1
    if right is None:
        return -1
    if left == right:
        return 0
    if not _comparable(left, right):
        left, right = str(left), str(right)
    result = -1 if left < right else 1
    return -result if descending else result
