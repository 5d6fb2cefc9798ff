# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Conversion of the finished registry into an executable graphql-core schema."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from graphql import (
    GraphQLArgument,
    GraphQLEnumType,
    GraphQLEnumValue,
    GraphQLField,
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLSchema,
    GraphQLType,
    GraphQLUnionType,
    Undefined,
    specified_scalar_types,
    value_from_ast_untyped,
)

from graphcompose.model.definitions import FieldDefinition, TypeDefinition, TypeKind
from graphcompose.model.types import ListTypeRef, NonNullTypeRef, TypeRef
from graphcompose.schema.builtins import QUERY_TYPE
from graphcompose.schema.registry import TypeRegistry

# ###############
# Public Interface
# ###############


def serialize_date(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


DATE_SCALAR = GraphQLScalarType(
    "Date",
    description="A date string, such as 2007-12-03, compliant with the ISO 8601 standard.",
    serialize=serialize_date,
)

JSON_SCALAR = GraphQLScalarType(
    "JSON",
    description="The `JSON` scalar type represents JSON values.",
    serialize=lambda value: value,
    parse_value=lambda value: value,
    parse_literal=lambda node, variables=None: value_from_ast_untyped(node, variables),
)


def to_graphql_schema(registry: TypeRegistry) -> GraphQLSchema:
    """Build a :class:`graphql.GraphQLSchema` from every type in *registry*.

    Field, interface and member references are resolved lazily, so types may
    refer to each other in any order.
    """
    converter = _Converter(registry)
    types = [converter.named(type_def.name) for type_def in registry.values()]
    query = converter.named(QUERY_TYPE)
    return GraphQLSchema(query=query, types=types)  # type: ignore[arg-type]


def resolve_type_from_internal(value: Any, info: Any, abstract_type: Any) -> str | None:
    """Default type resolution for interfaces and unions: the record's ``internal.type``."""
    internal = value.get("internal") if isinstance(value, Mapping) else None
    if isinstance(internal, Mapping):
        return internal.get("type")
    return None


# ################
# Implementation
# ################

_STANDARD_SCALARS: dict[str, GraphQLScalarType] = dict(specified_scalar_types)
_STANDARD_SCALARS.update({"Date": DATE_SCALAR, "JSON": JSON_SCALAR})


class _Converter:
    def __init__(self, registry: TypeRegistry) -> None:
        self._registry = registry
        self._types: dict[str, GraphQLNamedType] = {}

    def named(self, name: str) -> GraphQLNamedType:
        if name not in self._types:
            if name in _STANDARD_SCALARS:
                self._types[name] = _STANDARD_SCALARS[name]
            else:
                self._types[name] = self._convert(self._registry.get(name))
        return self._types[name]

    def wrap(self, type_ref: TypeRef) -> GraphQLType:
        if isinstance(type_ref, NonNullTypeRef):
            return GraphQLNonNull(self.wrap(type_ref.of_type))  # type: ignore[arg-type]
        if isinstance(type_ref, ListTypeRef):
            return GraphQLList(self.wrap(type_ref.of_type))
        return self.named(type_ref.name)

    def _convert(self, type_def: TypeDefinition) -> GraphQLNamedType:
        extensions = dict(type_def.extensions)
        kind = type_def.kind
        if kind == TypeKind.OBJECT:
            return GraphQLObjectType(
                type_def.name,
                fields=lambda: self._fields(type_def),
                interfaces=lambda: [self.named(name) for name in type_def.interfaces],  # type: ignore[misc]
                is_type_of=type_def.get_extension("isTypeOf"),
                description=type_def.description,
                extensions=extensions,
            )
        if kind == TypeKind.INTERFACE:
            return GraphQLInterfaceType(
                type_def.name,
                fields=lambda: self._fields(type_def),
                interfaces=lambda: [self.named(name) for name in type_def.interfaces],  # type: ignore[misc]
                resolve_type=type_def.get_extension("resolveType", resolve_type_from_internal),
                description=type_def.description,
                extensions=extensions,
            )
        if kind == TypeKind.UNION:
            return GraphQLUnionType(
                type_def.name,
                types=lambda: [self.named(name) for name in type_def.members],  # type: ignore[misc]
                resolve_type=type_def.get_extension("resolveType", resolve_type_from_internal),
                description=type_def.description,
                extensions=extensions,
            )
        if kind == TypeKind.ENUM:
            internal = type_def.get_extension("internalValues", {})
            return GraphQLEnumType(
                type_def.name,
                {name: GraphQLEnumValue(internal.get(name, name)) for name in type_def.values},
                description=type_def.description,
                extensions=extensions,
            )
        if kind == TypeKind.SCALAR:
            return GraphQLScalarType(
                type_def.name,
                serialize=type_def.get_extension("serialize"),
                parse_value=type_def.get_extension("parseValue"),
                parse_literal=type_def.get_extension("parseLiteral"),
                description=type_def.description,
                extensions=extensions,
            )
        return GraphQLInputObjectType(
            type_def.name,
            fields=lambda: {
                name: GraphQLInputField(
                    self.wrap(field_def.type),  # type: ignore[arg-type]
                    default_value=field_def.extensions.get("defaultValue", Undefined),
                    description=field_def.description,
                )
                for name, field_def in type_def.fields.items()
            },
            description=type_def.description,
            extensions=extensions,
        )

    def _fields(self, type_def: TypeDefinition) -> dict[str, GraphQLField]:
        return {name: self._field(field_def) for name, field_def in type_def.fields.items()}

    def _field(self, field_def: FieldDefinition) -> GraphQLField:
        return GraphQLField(
            self.wrap(field_def.type),  # type: ignore[arg-type]
            args={
                name: GraphQLArgument(
                    self.wrap(arg.type),  # type: ignore[arg-type]
                    default_value=arg.default_value if arg.has_default else Undefined,
                    description=arg.description,
                )
                for name, arg in field_def.args.items()
            },
            resolve=field_def.resolve,
            description=field_def.description,
            deprecation_reason=field_def.deprecation_reason,
            extensions=dict(field_def.extensions),
        )
