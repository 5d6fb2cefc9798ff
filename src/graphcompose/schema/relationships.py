# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Parent/child relationships and the ``child<Type>``/``children<Type>`` fields.

Relationships come from two places: the explicit ``childOf`` extension
(parent type names and/or mime types matched against the parents'
``mimeTypes`` extension), and the ``children`` id arrays of stored records.
An inferred relationship is only recorded when no explicit one covers the
same parent/child pair.
"""

from __future__ import annotations

from collections import defaultdict

from loguru import logger

from graphcompose.diagnostics import Reporter
from graphcompose.model.definitions import CreatedFrom, FieldDefinition, TypeDefinition, TypeKind
from graphcompose.model.types import list_of, named
from graphcompose.query.node_model import NodeModel
from graphcompose.query.resolvers import children_of_type
from graphcompose.schema.builtins import is_node_interface, is_node_type
from graphcompose.schema.names import convenience_child_field_name, convenience_children_field_name
from graphcompose.schema.registry import TypeRegistry
from graphcompose.store import ContentStore

# ###############
# Public Interface
# ###############


def is_explicit_child(parent: TypeDefinition, child: TypeDefinition) -> bool:
    """Return True if *child* declares *parent* through ``childOf``."""
    child_of = child.get_extension("childOf")
    if not child_of:
        return False
    parent_mime_types = (parent.get_extension("mimeTypes") or {}).get("types", [])
    return parent.name in (child_of.get("types") or []) or any(
        mime_type in parent_mime_types for mime_type in child_of.get("mimeTypes") or []
    )


def add_inferred_child_of_extensions(registry: TypeRegistry, store: ContentStore) -> None:
    """Record parent/child pairs observed in stored records as ``childOf`` extensions."""
    for type_def in registry.values():
        if is_node_type(type_def):
            add_inferred_child_of_extension(registry, store, type_def)


def add_inferred_child_of_extension(registry: TypeRegistry, store: ContentStore, parent: TypeDefinition) -> None:
    # With @dontInfer only explicit childOf relations are used.
    if parent.get_extension("infer") is False:
        return
    for child_type_name in sorted(_child_types(store, parent.name)):
        child = registry.get_or_none(child_type_name)
        if child is None or is_explicit_child(parent, child):
            continue
        child_of = dict(child.get_extension("childOf") or {})
        types = list(child_of.get("types") or [])
        if parent.name not in types:
            types.append(parent.name)
        child_of["types"] = types
        child.set_extension("childOf", child_of)
        logger.debug("inferred {} as child of {}", child_type_name, parent.name)


def add_convenience_children_fields(registry: TypeRegistry, node_model: NodeModel, reporter: Reporter) -> None:
    """Add ``child<Type>``/``children<Type>`` to every parent named by a ``childOf`` extension."""
    parents_to_children: dict[str, set[str]] = defaultdict(set)
    mime_types_to_children: dict[str, set[str]] = defaultdict(set)
    types_handling_mime_types: dict[str, set[str]] = defaultdict(set)

    for type_def in registry.values():
        if type_def.kind not in (TypeKind.OBJECT, TypeKind.INTERFACE):
            continue
        for mime_type in (type_def.get_extension("mimeTypes") or {}).get("types", []):
            types_handling_mime_types[mime_type].add(type_def.name)
        child_of = type_def.get_extension("childOf")
        if not child_of:
            continue
        if type_def.kind == TypeKind.OBJECT and not is_node_type(type_def):
            reporter.error(
                "The `childOf` extension can only be used on types that implement the `Node` interface.\n"
                f"Check the type definition of `{type_def.name}`."
            )
            continue
        if type_def.kind == TypeKind.INTERFACE and not is_node_interface(type_def):
            reporter.error(
                "The `childOf` extension can only be used on interface types that implement the `Node` "
                f"interface.\nCheck the type definition of `{type_def.name}`."
            )
            continue
        for parent_name in child_of.get("types") or []:
            parents_to_children[parent_name].add(type_def.name)
        for mime_type in child_of.get("mimeTypes") or []:
            mime_types_to_children[mime_type].add(type_def.name)

    for parent_name, children in parents_to_children.items():
        parent = registry.get_or_none(parent_name)
        if parent is not None:
            _add_children_fields(parent, children, node_model, reporter)

    for mime_type, children in mime_types_to_children.items():
        for parent_name in sorted(types_handling_mime_types.get(mime_type, ())):
            _add_children_fields(registry.get(parent_name), children, node_model, reporter)


def create_children_field(type_name: str, node_model: NodeModel) -> FieldDefinition:
    return FieldDefinition(
        name=convenience_children_field_name(type_name),
        type=list_of(named(type_name)),
        description=f"Returns all children nodes filtered by type {type_name}",
        resolve=children_of_type(node_model, type_name),
        extensions={"createdFrom": CreatedFrom.GENERATED, "plugin": None},
    )


def create_child_field(type_name: str, node_model: NodeModel) -> FieldDefinition:
    return FieldDefinition(
        name=convenience_child_field_name(type_name),
        type=named(type_name),
        description=(
            f"Returns the first child node of type {type_name} or null if there are no children of given type on "
            "this node"
        ),
        resolve=children_of_type(node_model, type_name, first=True),
        extensions={"createdFrom": CreatedFrom.GENERATED, "plugin": None},
    )


# ################
# Implementation
# ################


def _child_types(store: ContentStore, parent_type: str) -> set[str]:
    found: set[str] = set()
    for record in store.get_nodes_by_type(parent_type):
        for child_id in record.get("children") or []:
            child = store.get_node_by_id(child_id)
            if child is not None and child.get("internal", {}).get("type"):
                found.add(child["internal"]["type"])
    return found


def _add_children_fields(
    parent: TypeDefinition, children: set[str], node_model: NodeModel, reporter: Reporter
) -> None:
    if parent.kind not in (TypeKind.OBJECT, TypeKind.INTERFACE):
        return
    if parent.kind == TypeKind.INTERFACE and not is_node_interface(parent):
        reporter.error(
            "With the `childOf` extension, children fields can only be added to interfaces which implement the "
            f"`Node` interface.\nCheck the type definition of `{parent.name}`."
        )
        return
    for child_name in sorted(children):
        for field_def in (create_children_field(child_name, node_model), create_child_field(child_name, node_model)):
            parent.fields[field_def.name] = field_def
