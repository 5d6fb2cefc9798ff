# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolver overrides and the tracing pass over every field resolver."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from graphql import GraphQLSchema
from opentelemetry import trace

from graphcompose.diagnostics import Reporter
from graphcompose.model.definitions import CreatedFrom, TypeDefinition, TypeKind
from graphcompose.model.types import same_type_ignoring_non_null, type_to_string
from graphcompose.plugins import PluginRunner
from graphcompose.query.resolvers import (
    default_resolver,
    has_custom_resolver,
    is_wrapping_resolver,
    with_original_resolver,
    wrapping_resolver,
)
from graphcompose.schema.registry import TypeRegistry
from graphcompose.schema.type_builders import TypeBuilderError, build_argument, build_field, to_type_ref

# ###############
# Public Interface
# ###############

CREATE_RESOLVERS_API = "createResolvers"

ResolverMap = Mapping[str, Mapping[str, Mapping[str, Any]]]


def apply_resolver_overrides(
    registry: TypeRegistry,
    resolvers: ResolverMap,
    reporter: Reporter,
    ignore_nonexistent_types: bool = False,
) -> None:
    """Apply a ``type -> field -> {type?, args?, resolve?}`` override mapping.

    Missing fields are added. Existing fields are extended in place when the
    proposed type equals the current one ignoring non-null modifiers, or when
    the owning type comes from a third-party schema; the replaced resolver is
    then available to the new one as ``info.original_resolver``. Any other
    type change is rejected with a warning.
    """
    for type_name, fields in resolvers.items():
        type_def = registry.get_or_none(type_name)
        if type_def is None or type_def.kind not in (TypeKind.OBJECT, TypeKind.INTERFACE):
            if not ignore_nonexistent_types:
                reporter.warn(
                    f"`createResolvers` passed resolvers for type `{type_name}` that doesn't exist in the schema. "
                    "Use `createTypes` to add the type before adding resolvers."
                )
            continue
        is_third_party = type_def.get_extension("createdFrom") == CreatedFrom.THIRD_PARTY
        for field_name, config in fields.items():
            original = type_def.fields.get(field_name)
            if original is None:
                try:
                    field_def = build_field(field_name, config)
                except (TypeBuilderError, ValueError) as exc:
                    reporter.error(f"`createResolvers` passed an invalid field `{type_name}.{field_name}`: {exc}")
                    continue
                field_def.extensions["createdFrom"] = CreatedFrom.CREATE_RESOLVERS
                type_def.fields[field_name] = field_def
                continue

            new_type = to_type_ref(config["type"]) if config.get("type") is not None else None
            if new_type is not None and not (is_third_party or same_type_ignoring_non_null(new_type, original.type)):
                reporter.warn(
                    f"`createResolvers` passed resolvers for field `{type_name}.{field_name}` with type "
                    f"`{type_to_string(new_type)}`. Such a field with type `{type_to_string(original.type)}` "
                    "already exists on the type. Use `createTypes` to override type fields."
                )
                continue

            if is_third_party and "originalFieldConfig" not in original.extensions:
                original.extensions["originalFieldConfig"] = original.model_copy(deep=True)
            if new_type is not None:
                original.type = new_type
            if config.get("args"):
                original.args = {name: build_argument(name, arg) for name, arg in config["args"].items()}
            if config.get("resolve") is not None:
                original.resolve = with_original_resolver(config["resolve"], original.resolve)
                original.extensions["needsResolve"] = True


async def run_create_resolvers(
    registry: TypeRegistry,
    runner: PluginRunner,
    reporter: Reporter,
    intermediate_schema: GraphQLSchema | None = None,
) -> None:
    """Collect overrides from plugins and apply them.

    Hooks receive ``intermediate_schema`` and a ``create_resolvers`` callback;
    a mapping returned from the hook is applied as well.
    """

    def create_resolvers(resolvers: ResolverMap, ignore_nonexistent_types: bool = False) -> None:
        apply_resolver_overrides(registry, resolvers, reporter, ignore_nonexistent_types)

    results = await runner.run(
        CREATE_RESOLVERS_API,
        {"intermediate_schema": intermediate_schema, "create_resolvers": create_resolvers},
    )
    for result in results:
        if isinstance(result, Mapping):
            apply_resolver_overrides(registry, result, reporter)


def attach_tracing_resolvers(registry: TypeRegistry, tracer: trace.Tracer | None = None) -> None:
    """Wrap every custom resolver in a tracing span; install the default elsewhere."""
    for type_def in registry.of_kind(TypeKind.OBJECT, TypeKind.INTERFACE):
        attach_tracing_resolver(type_def, tracer)


def attach_tracing_resolver(type_def: TypeDefinition, tracer: trace.Tracer | None = None) -> None:
    for field_def in type_def.fields.values():
        if not has_custom_resolver(field_def.resolve):
            field_def.resolve = default_resolver
        elif not is_wrapping_resolver(field_def.resolve):
            field_def.resolve = wrapping_resolver(field_def.resolve, tracer)
