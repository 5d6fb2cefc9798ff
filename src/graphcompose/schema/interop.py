# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Conversion of graphql-core types into registry definitions."""

from __future__ import annotations

from typing import Any

from graphql import (
    GraphQLArgument,
    GraphQLEnumType,
    GraphQLField,
    GraphQLInputObjectType,
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLType,
    GraphQLUnionType,
    Undefined,
)

from graphcompose.model.definitions import ArgumentDefinition, FieldDefinition, TypeDefinition, TypeKind
from graphcompose.model.types import TypeRef, list_of, named, non_null

# ###############
# Public Interface
# ###############


def type_ref_from_graphql(gql_type: GraphQLType, rename: dict[str, str] | None = None) -> TypeRef:
    """Convert a (possibly wrapped) graphql-core type into a type reference."""
    if isinstance(gql_type, GraphQLNonNull):
        return non_null(type_ref_from_graphql(gql_type.of_type, rename))
    if isinstance(gql_type, GraphQLList):
        return list_of(type_ref_from_graphql(gql_type.of_type, rename))
    name = gql_type.name  # type: ignore[attr-defined]
    return named((rename or {}).get(name, name))


def from_graphql_type(gql_type: GraphQLNamedType, rename: dict[str, str] | None = None) -> TypeDefinition:
    """Convert a graphql-core named type into a :class:`TypeDefinition`.

    Args:
        gql_type: The type to convert.
        rename: Type names to substitute in field and argument references.

    Raises:
        TypeError: For unsupported type classes.
    """
    if isinstance(gql_type, GraphQLObjectType):
        type_def = TypeDefinition(name=gql_type.name, kind=TypeKind.OBJECT)
        type_def.fields = _convert_fields(gql_type.fields, rename)
        type_def.interfaces = [iface.name for iface in gql_type.interfaces]
        if gql_type.is_type_of is not None:
            type_def.set_extension("isTypeOf", gql_type.is_type_of)
    elif isinstance(gql_type, GraphQLInterfaceType):
        type_def = TypeDefinition(name=gql_type.name, kind=TypeKind.INTERFACE)
        type_def.fields = _convert_fields(gql_type.fields, rename)
        type_def.interfaces = [iface.name for iface in gql_type.interfaces]
        if gql_type.resolve_type is not None:
            type_def.set_extension("resolveType", gql_type.resolve_type)
    elif isinstance(gql_type, GraphQLUnionType):
        type_def = TypeDefinition(name=gql_type.name, kind=TypeKind.UNION)
        type_def.members = [member.name for member in gql_type.types]
        if gql_type.resolve_type is not None:
            type_def.set_extension("resolveType", gql_type.resolve_type)
    elif isinstance(gql_type, GraphQLEnumType):
        type_def = TypeDefinition(name=gql_type.name, kind=TypeKind.ENUM)
        type_def.values = list(gql_type.values)
        internal = {
            name: value.value
            for name, value in gql_type.values.items()
            if value.value is not None and value.value != name
        }
        if internal:
            type_def.set_extension("internalValues", internal)
    elif isinstance(gql_type, GraphQLScalarType):
        type_def = TypeDefinition(name=gql_type.name, kind=TypeKind.SCALAR)
        type_def.set_extension("serialize", gql_type.serialize)
        type_def.set_extension("parseValue", gql_type.parse_value)
        type_def.set_extension("parseLiteral", gql_type.parse_literal)
    elif isinstance(gql_type, GraphQLInputObjectType):
        type_def = TypeDefinition(name=gql_type.name, kind=TypeKind.INPUT)
        for name, input_field in gql_type.fields.items():
            field_def = FieldDefinition(
                name=name,
                type=type_ref_from_graphql(input_field.type, rename),
                description=input_field.description,
            )
            if input_field.default_value is not Undefined:
                field_def.extensions["defaultValue"] = input_field.default_value
            type_def.fields[name] = field_def
    else:
        raise TypeError(f"Unsupported GraphQL type {gql_type!r}")
    type_def.description = gql_type.description
    return type_def


# ################
# Implementation
# ################


def _convert_fields(fields: dict[str, GraphQLField], rename: dict[str, str] | None) -> dict[str, FieldDefinition]:
    return {
        name: FieldDefinition(
            name=name,
            type=type_ref_from_graphql(gql_field.type, rename),
            args={arg_name: _convert_argument(arg_name, arg, rename) for arg_name, arg in gql_field.args.items()},
            resolve=gql_field.resolve,
            description=gql_field.description,
            deprecation_reason=gql_field.deprecation_reason,
        )
        for name, gql_field in fields.items()
    }


def _convert_argument(name: str, arg: GraphQLArgument, rename: dict[str, str] | None) -> ArgumentDefinition:
    has_default = arg.default_value is not Undefined
    default: Any = arg.default_value if has_default else None
    return ArgumentDefinition(
        name=name,
        type=type_ref_from_graphql(arg.type, rename),
        default_value=default,
        has_default=has_default,
        description=arg.description,
    )
