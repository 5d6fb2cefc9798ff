# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""The schema builder: sequences every build phase into a GraphQL schema.

A full build runs, strictly in order:

1. explicit types (SDL, type builders, graphql-core types) and merging,
2. inference and inferred parent/child relationships,
3. type processing: printing, ``setFieldsOnGraphQLNodeType``, convenience
   children fields, field extensions, Node fields, searchable
   classification and root query fields,
4. integrity checks, third-party schemas, resolver overrides and tracing,
5. finalization into a :class:`graphql.GraphQLSchema`.

Per-type work inside a phase fans out in an :class:`asyncio.TaskGroup`.
:meth:`SchemaBuilder.rebuild_type` re-derives a single content type in place.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from graphql import GraphQLNamedType, GraphQLSchema
from loguru import logger
from opentelemetry import trace

from graphcompose.diagnostics import Diagnostics, Reporter
from graphcompose.inference.infer import (
    InferenceOptions,
    TypeConflictReporter,
    add_inferred_type,
    add_inferred_types,
    should_infer,
)
from graphcompose.inference.metadata import InferenceMetadataStore
from graphcompose.model.definitions import CreatedFrom, TypeDefinition, TypeKind
from graphcompose.parser import ParseError, parse
from graphcompose.plugins import Plugin, PluginApiRunner, PluginRunner
from graphcompose.query.node_model import NodeModel
from graphcompose.schema.builtins import add_built_in_types, is_node_interface, is_node_type
from graphcompose.schema.checks import check_placeholders, check_queryable_interfaces, check_type_references
from graphcompose.schema.derived import clear_derived_types, delete_inferred_fields
from graphcompose.schema.executable import to_graphql_schema
from graphcompose.schema.extensions import apply_field_extensions
from graphcompose.schema.interop import from_graphql_type
from graphcompose.schema.merge import add_type
from graphcompose.schema.nested_fields import add_set_fields_on_node_type_fields
from graphcompose.schema.overrides import attach_tracing_resolvers, run_create_resolvers
from graphcompose.schema.printer import PrintConfig, print_type_definitions
from graphcompose.schema.query_surface import (
    add_node_interface_fields,
    add_type_to_root_query,
    determine_searchable_fields,
)
from graphcompose.schema.registry import TypeRegistry
from graphcompose.schema.relationships import add_convenience_children_fields, add_inferred_child_of_extensions
from graphcompose.schema.third_party import add_third_party_schemas
from graphcompose.store import ContentStore

# ###############
# Public Interface
# ###############

TRACER_NAME = "graphcompose.build"

TypeInput = str | TypeDefinition | GraphQLNamedType


@dataclass(frozen=True)
class TypeContribution:
    """A type definition contributed by a plugin.

    Attributes:
        definition: SDL text, a type-builder definition or a graphql-core type.
        plugin: The contributing plugin; ``None`` for core contributions.
        source: Label used in parse error messages (typically a file path).
    """

    definition: TypeInput
    plugin: Plugin | None = None
    source: str = "<inline>"


class SchemaBuilder:
    """Builds a schema once and then rebuilds individual content types in place."""

    def __init__(
        self,
        store: ContentStore,
        types: Iterable[TypeContribution | TypeInput] = (),
        third_party_schemas: Sequence[GraphQLSchema] = (),
        runner: PluginRunner | None = None,
        reporter: Reporter | None = None,
        inference: InferenceOptions | None = None,
        metadata: InferenceMetadataStore | None = None,
        print_config: PrintConfig | None = None,
        tracer: trace.Tracer | None = None,
    ) -> None:
        self.store = store
        self.types = [t if isinstance(t, TypeContribution) else TypeContribution(t) for t in types]
        self.third_party_schemas = list(third_party_schemas)
        self.runner = runner or PluginApiRunner()
        self.reporter = reporter or Diagnostics()
        self.inference = inference or InferenceOptions()
        self.metadata = metadata if metadata is not None else InferenceMetadataStore()
        self.print_config = print_config
        self.tracer = tracer
        self.registry = TypeRegistry()
        self.node_model = NodeModel(store, self.registry)
        self.schema: GraphQLSchema | None = None
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def build(self) -> GraphQLSchema:
        """Run a full build on a fresh registry and return the schema.

        Raises:
            BuildPanic: On a fatal integrity violation.
            ConfigurationError: On a reserved or invalid type name.
        """
        self.registry = TypeRegistry()
        self.node_model = NodeModel(self.store, self.registry)
        add_built_in_types(self.registry)
        tracer = trace.get_tracer(TRACER_NAME)

        with tracer.start_as_current_span("Add explicit types"):
            self._add_types()
        with tracer.start_as_current_span("Add inferred types"):
            await add_inferred_types(self.registry, self.store, self.metadata, self.reporter, self.inference)
            add_inferred_child_of_extensions(self.registry, self.store)
        with tracer.start_as_current_span("Processing types"):
            print_type_definitions(self.registry, self.print_config, self.reporter)
            await add_set_fields_on_node_type_fields(self.registry, self.runner, self.store, self.reporter)
            add_convenience_children_fields(self.registry, self.node_model, self.reporter)
            # Every type gets its node fields before any filter input is derived from it.
            async with asyncio.TaskGroup() as group:
                for type_def in self.registry.values():
                    group.create_task(self._prepare_type(type_def))
            async with asyncio.TaskGroup() as group:
                for type_def in self.registry.values():
                    group.create_task(self._add_root_fields(type_def))
            check_queryable_interfaces(self.registry, self.reporter)
            add_third_party_schemas(self.registry, self.third_party_schemas, self.reporter)
            await run_create_resolvers(self.registry, self.runner, self.reporter, self._finalize())
            attach_tracing_resolvers(self.registry, self.tracer)
        with tracer.start_as_current_span("Finalize schema"):
            self.schema = self._finalize()
        logger.info("built schema with {} types", len(self.registry))
        return self.schema

    async def rebuild_type(self, type_name: str) -> GraphQLSchema:
        """Re-derive *type_name* if its records changed and return the new schema.

        Only fields inferred for the type and its derived types are cleared;
        explicitly declared fields are untouched. Rebuilds of the same type
        never overlap.
        """
        if self.schema is None:
            return await self.build()
        async with self._locks[type_name]:
            type_def = self.registry.get_or_none(type_name)
            if type_def is not None and type_def.kind != TypeKind.OBJECT:
                return self.schema
            records = self.store.get_nodes_by_type(type_name)
            if type_def is None and not records:
                return self.schema
            entry = self.metadata.get(type_name)
            changed = entry.sync(records, self.inference.sample_size)
            if not changed and type_def is not None:
                return self.schema
            if type_def is not None:
                delete_inferred_fields(type_def)
                clear_derived_types(self.registry, type_def)
            if should_infer(type_def):
                conflicts = TypeConflictReporter(self.reporter, self.inference.conflict_threshold)
                type_def = add_inferred_type(self.registry, self.store, type_name, entry.fields, conflicts)
            if type_def is None:
                return self.schema
            await self._prepare_type(type_def)
            await self._add_root_fields(type_def)
            attach_tracing_resolvers(self.registry, self.tracer)
            self.schema = self._finalize()
            logger.debug("rebuilt type {}", type_name)
            return self.schema

    async def rebuild(self, type_names: Iterable[str] | None = None) -> GraphQLSchema:
        """Rebuild every content type (or only *type_names*) whose records changed."""
        names = sorted(type_names) if type_names is not None else sorted(self.store.get_types())
        schema = self.schema
        for name in names:
            schema = await self.rebuild_type(name)
        assert schema is not None
        return schema

    # ################
    # Implementation
    # ################

    def _add_types(self) -> None:
        for contribution in self.types:
            definition = contribution.definition
            if isinstance(definition, str):
                try:
                    parsed = parse(definition)
                except ParseError as exc:
                    self.reporter.error(
                        f"Encountered an error parsing the provided GraphQL type definitions in "
                        f"{contribution.source}:{exc.line}:{exc.column}: {exc}"
                    )
                    continue
                for type_def in parsed:
                    add_type(self.registry, type_def, contribution.plugin, CreatedFrom.SDL, self.reporter)
            elif isinstance(definition, TypeDefinition):
                add_type(self.registry, definition, contribution.plugin, CreatedFrom.TYPE_BUILDER, self.reporter)
            else:
                add_type(
                    self.registry,
                    from_graphql_type(definition),
                    contribution.plugin,
                    CreatedFrom.GRAPHQL_OBJECT,
                    self.reporter,
                )

    async def _prepare_type(self, type_def: TypeDefinition) -> None:
        if type_def.kind == TypeKind.OBJECT:
            apply_field_extensions(type_def, self.node_model)
            if is_node_type(type_def):
                add_node_interface_fields(self.registry, type_def, self.node_model)
            determine_searchable_fields(type_def)
        elif is_node_interface(type_def):
            add_node_interface_fields(self.registry, type_def, self.node_model)
            apply_field_extensions(type_def, self.node_model)
            determine_searchable_fields(type_def)

    async def _add_root_fields(self, type_def: TypeDefinition) -> None:
        if is_node_type(type_def) or is_node_interface(type_def):
            add_type_to_root_query(self.registry, type_def, self.node_model)

    def _finalize(self) -> GraphQLSchema:
        check_placeholders(self.registry, self.reporter)
        check_type_references(self.registry, self.reporter)
        return to_graphql_schema(self.registry)


async def build_schema(
    store: ContentStore, types: Iterable[TypeContribution | TypeInput] = (), **options: Any
) -> GraphQLSchema:
    """Build a schema in one call; *options* are passed to :class:`SchemaBuilder`."""
    return await SchemaBuilder(store, types, **options).build()
