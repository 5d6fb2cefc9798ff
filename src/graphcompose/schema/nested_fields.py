# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Fields contributed through ``setFieldsOnGraphQLNodeType``.

Plugins return mappings from dotted paths to field configs, for example
``{"frontmatter.published": "Boolean"}``. Intermediate object types are
created on demand and named ``<Type><Part>``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from graphcompose.diagnostics import Reporter
from graphcompose.model.definitions import FieldDefinition, TypeDefinition, TypeKind
from graphcompose.model.types import named, named_type
from graphcompose.plugins import PluginRunner
from graphcompose.schema.builtins import is_node_type
from graphcompose.schema.extensions import validate_field_extensions
from graphcompose.schema.names import create_type_name
from graphcompose.schema.registry import TypeRegistry
from graphcompose.schema.type_builders import TypeBuilderError, build_field
from graphcompose.store import ContentStore

# ###############
# Public Interface
# ###############

SET_FIELDS_API = "setFieldsOnGraphQLNodeType"


async def add_set_fields_on_node_type_fields(
    registry: TypeRegistry, runner: PluginRunner, store: ContentStore, reporter: Reporter
) -> None:
    """Ask plugins for extra fields on every Node type and add them."""

    async def process(type_def: TypeDefinition) -> None:
        results = await runner.run(
            SET_FIELDS_API,
            {"type": {"name": type_def.name, "nodes": store.get_nodes_by_type(type_def.name)}},
        )
        for fields in results:
            if isinstance(fields, Mapping):
                add_nested_fields(registry, type_def, fields, reporter)

    async with asyncio.TaskGroup() as group:
        for type_def in registry.values():
            if is_node_type(type_def):
                group.create_task(process(type_def))


def add_nested_fields(
    registry: TypeRegistry, type_def: TypeDefinition, fields: Mapping[str, Any], reporter: Reporter
) -> None:
    """Add fields addressed by dotted paths to *type_def*."""
    touched: dict[str, TypeDefinition] = {}
    for path, config in fields.items():
        *parents, leaf = path.split(".")
        current: TypeDefinition | None = type_def
        for part in parents:
            current = _descend(registry, current, part, reporter)
            if current is None:
                break
        if current is None:
            continue
        try:
            current.fields[leaf] = build_field(leaf, config)
        except (TypeBuilderError, ValueError) as exc:
            reporter.error(f"Invalid field `{path}` set on `{type_def.name}`: {exc}")
            continue
        touched[current.name] = current
    for touched_type in touched.values():
        validate_field_extensions(touched_type, reporter)


# ################
# Implementation
# ################


def _descend(
    registry: TypeRegistry, current: TypeDefinition, part: str, reporter: Reporter
) -> TypeDefinition | None:
    existing = current.fields.get(part)
    if existing is not None:
        target = registry.get_or_none(named_type(existing.type))
        if target is None or target.kind != TypeKind.OBJECT:
            reporter.error(f"Cannot add nested fields below `{current.name}.{part}`: it is not an object type.")
            return None
        return target
    name = create_type_name(current.name, part)
    target = registry.get_or_none(name)
    if target is None:
        target = TypeDefinition(name=name, kind=TypeKind.OBJECT)
        registry.set(target)
    current.fields[part] = FieldDefinition(name=part, type=named(name))
    return target
