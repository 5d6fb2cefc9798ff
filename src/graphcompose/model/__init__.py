# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type model for GraphCompose (type definitions, fields, type references)."""

from graphcompose.model.definitions import (
    ArgumentDefinition,
    CreatedFrom,
    Directive,
    FieldDefinition,
    Searchable,
    Sortable,
    TypeDefinition,
    TypeKind,
)
from graphcompose.model.types import (
    ListTypeRef,
    NamedTypeRef,
    NonNullTypeRef,
    TypeRef,
    TypeStringError,
    list_of,
    named,
    named_type,
    non_null,
    parse_type_string,
    same_type_ignoring_non_null,
    type_to_string,
    unwrap_non_null,
)

__all__ = [
    # Type references
    "NamedTypeRef",
    "ListTypeRef",
    "NonNullTypeRef",
    "TypeRef",
    "TypeStringError",
    "named",
    "list_of",
    "non_null",
    "named_type",
    "unwrap_non_null",
    "type_to_string",
    "parse_type_string",
    "same_type_ignoring_non_null",
    # Definitions
    "TypeKind",
    "CreatedFrom",
    "Searchable",
    "Sortable",
    "Directive",
    "ArgumentDefinition",
    "FieldDefinition",
    "TypeDefinition",
]
