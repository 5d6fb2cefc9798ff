# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Built-in types registered at the start of every build."""

from __future__ import annotations

from graphcompose.model.definitions import CreatedFrom, TypeDefinition, TypeKind
from graphcompose.parser import parse
from graphcompose.schema.registry import TypeRegistry

# ###############
# Public Interface
# ###############

BUILT_IN_TYPE_DEFS = '''
"""
A date string, such as 2007-12-03, compliant with the ISO 8601 standard
for representation of dates and times using the Gregorian calendar.
"""
scalar Date

"""Arbitrary JSON value."""
scalar JSON

"""A root-queryable content record with a stable identity."""
interface Node {
  id: ID!
  parent: Node
  children: [Node!]!
  internal: Internal!
}

type Internal {
  content: String
  contentDigest: String!
  description: String
  fieldOwners: [String]
  ignoreType: Boolean
  mediaType: String
  owner: String!
  type: String!
}

type PageInfo {
  currentPage: Int!
  hasPreviousPage: Boolean!
  hasNextPage: Boolean!
  itemCount: Int!
  pageCount: Int!
  perPage: Int
  totalCount: Int!
}

enum SortOrderEnum {
  ASC
  DESC
}

type SiteSiteMetadata {
  title: String
  description: String
  siteUrl: String
}

type Query
'''

QUERY_TYPE = "Query"


def add_built_in_types(registry: TypeRegistry) -> None:
    """Register the built-in scalars, the ``Node`` interface and support types."""
    for type_def in parse(BUILT_IN_TYPE_DEFS):
        type_def.extensions.update({"createdFrom": CreatedFrom.SDL, "plugin": None, "builtIn": True})
        for field_def in type_def.fields.values():
            field_def.extensions.update({"createdFrom": CreatedFrom.SDL, "plugin": None})
        registry.set(type_def)


def built_in_type_names() -> frozenset[str]:
    return _BUILT_IN_NAMES


def is_built_in(type_def: TypeDefinition) -> bool:
    return bool(type_def.extensions.get("builtIn"))


def is_node_interface(type_def: TypeDefinition) -> bool:
    """Return True for interfaces that are root-queryable.

    An interface is queryable when it implements ``Node`` or carries the legacy
    ``nodeInterface`` marker.
    """
    return type_def.kind == TypeKind.INTERFACE and (
        "nodeInterface" in type_def.extensions or type_def.has_interface("Node")
    )


def is_node_type(type_def: TypeDefinition) -> bool:
    """Return True for object types implementing ``Node``."""
    return type_def.kind == TypeKind.OBJECT and type_def.has_interface("Node")


# ################
# Implementation
# ################

_BUILT_IN_NAMES: frozenset[str] = frozenset(t.name for t in parse(BUILT_IN_TYPE_DEFS))
