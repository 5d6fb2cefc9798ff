# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Naming rules: reserved type names and generated field/type names."""

from __future__ import annotations

import re

from graphql import GraphQLError, assert_name

from graphcompose.errors import ReservedTypeNameError

# ###############
# Public Interface
# ###############

NODE_INTERFACE = "Node"

BUILT_IN_SCALAR_NAMES: frozenset[str] = frozenset({"Boolean", "Date", "Float", "ID", "Int", "JSON", "String"})

# Built-in types that any plugin may customize without a conflict warning.
OVERRIDABLE_BUILT_IN_TYPE_NAMES: frozenset[str] = frozenset({"SiteSiteMetadata"})

RESERVED_SUFFIXES: tuple[str, ...] = ("FilterInput", "SortInput")


def check_is_allowed_type_name(name: str) -> None:
    """Reject names reserved for internal use or invalid in GraphQL.

    Raises:
        ReservedTypeNameError: If *name* is ``Node``, a built-in scalar name,
            ends with ``FilterInput``/``SortInput``, or is not a valid name.
    """
    if name == NODE_INTERFACE:
        raise ReservedTypeNameError(f"The GraphQL type `{NODE_INTERFACE}` is reserved for internal use.")
    if name.endswith(RESERVED_SUFFIXES):
        raise ReservedTypeNameError(
            'GraphQL type names ending with "FilterInput" or "SortInput" are '
            f"reserved for internal use. Please rename `{name}`."
        )
    if name in BUILT_IN_SCALAR_NAMES:
        raise ReservedTypeNameError(f"The GraphQL type `{name}` is reserved for internal use by built-in scalar types.")
    try:
        assert_name(name)
    except GraphQLError as exc:
        raise ReservedTypeNameError(str(exc)) from exc


def camel_case(text: str) -> str:
    """Convert *text* to camelCase, splitting on case changes and separators.

    ``"all NPMPackage"`` becomes ``"allNpmPackage"``; ``"MarkdownRemark"``
    becomes ``"markdownRemark"``.
    """
    words = _WORD_RE.findall(text)
    if not words:
        return ""
    return words[0].lower() + "".join(w[:1].upper() + w[1:].lower() for w in words[1:])


def upper_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def create_type_name(*parts: str) -> str:
    """Join name parts into a PascalCase type name, e.g. ``("Post", "author")`` -> ``PostAuthor``."""
    return "".join(part if part[:1].isupper() else upper_first(camel_case(part)) for part in parts if part)


def query_field_name(type_name: str) -> str:
    return camel_case(type_name)


def query_all_field_name(type_name: str) -> str:
    return camel_case(f"all {type_name}")


def convenience_child_field_name(type_name: str) -> str:
    return camel_case(f"child {type_name}")


def convenience_children_field_name(type_name: str) -> str:
    return camel_case(f"children {type_name}")


# ################
# Implementation
# ################

# Acronym runs ("NPM" in "NPMPackage"), capitalised or lower-case words, digits.
_WORD_RE = re.compile(r"[A-Z]{2,}(?=[A-Z][a-z]|[0-9]|\b|_)|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")
