# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Stitching of third-party graphql-core schemas into the registry."""

from __future__ import annotations

from collections.abc import Iterable

from graphql import GraphQLSchema, is_introspection_type, is_specified_scalar_type

from graphcompose.diagnostics import Reporter
from graphcompose.model.definitions import CreatedFrom, FieldDefinition, TypeDefinition, TypeKind
from graphcompose.schema.builtins import QUERY_TYPE
from graphcompose.schema.interop import from_graphql_type
from graphcompose.schema.registry import TypeRegistry

# ###############
# Public Interface
# ###############

# Scalars every schema shares; foreign copies are never registered.
SHARED_SCALARS: frozenset[str] = frozenset({"Date", "JSON"})


def add_third_party_schemas(registry: TypeRegistry, schemas: Iterable[GraphQLSchema], reporter: Reporter) -> None:
    """Add the query fields and named types of each schema to the registry.

    Types already registered from a previous pass are reset to their state
    before any resolver overrides instead of being converted again.
    """
    query = registry.get(QUERY_TYPE)
    for schema in schemas:
        foreign_query = schema.query_type
        rename = {foreign_query.name: QUERY_TYPE} if foreign_query is not None else {}
        if foreign_query is not None:
            for name, field_def in from_graphql_type(foreign_query, rename).fields.items():
                field_def.extensions.update({"createdFrom": CreatedFrom.THIRD_PARTY, "plugin": None})
                query.fields[name] = field_def

        for name, gql_type in schema.type_map.items():
            if (
                gql_type is foreign_query
                or is_specified_scalar_type(gql_type)
                or is_introspection_type(gql_type)
                or name in SHARED_SCALARS
            ):
                continue
            existing = registry.get_or_none(name)
            if existing is not None:
                if existing.get_extension("createdFrom") == CreatedFrom.THIRD_PARTY:
                    reset_overridden_third_party_fields(existing)
                else:
                    reporter.warn(
                        f"Third-party schema type `{name}` clashes with an existing type of the same name "
                        "and was not added."
                    )
                continue
            type_def = from_graphql_type(gql_type, rename)
            type_def.set_extension("createdFrom", CreatedFrom.THIRD_PARTY)
            for field_def in type_def.fields.values():
                field_def.extensions.setdefault("createdFrom", CreatedFrom.THIRD_PARTY)
            registry.set(type_def)


def reset_overridden_third_party_fields(type_def: TypeDefinition) -> None:
    """Undo resolver overrides on a third-party type.

    Fields added by overrides are removed and extended fields are restored
    from their ``originalFieldConfig``.
    """
    if type_def.kind not in (TypeKind.OBJECT, TypeKind.INTERFACE):
        return
    for name, field_def in list(type_def.fields.items()):
        if field_def.extensions.get("createdFrom") == CreatedFrom.CREATE_RESOLVERS:
            del type_def.fields[name]
            continue
        original: FieldDefinition | None = field_def.extensions.get("originalFieldConfig")
        if original is not None:
            type_def.fields[name] = original
