# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Derivation of GraphQL fields from sampled content shapes.

Scalar kinds map directly (Date-like strings to ``Date``, ints to ``Int``
and so on). When a field was seen with several kinds the most permissive
common type wins: ``Int`` with ``Float`` becomes ``Float``, ``Date`` with
``String`` becomes ``String``, any other mix of scalars becomes ``String``
and mixes involving objects, arrays or references become ``JSON``. Such
mixes are reported once per field path when the minority count reaches the
conflict threshold. Inference never fails the build.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field

from loguru import logger

from graphcompose.diagnostics import Reporter
from graphcompose.inference.metadata import NODE_REFERENCE_SUFFIX, InferenceMetadataStore, ValueDescriptor
from graphcompose.model.definitions import CreatedFrom, FieldDefinition, TypeDefinition, TypeKind
from graphcompose.model.types import TypeRef, list_of, named, named_type
from graphcompose.schema.derived import add_derived_type
from graphcompose.schema.names import NODE_INTERFACE, create_type_name
from graphcompose.schema.registry import TypeRegistry
from graphcompose.store import ContentStore

# ###############
# Public Interface
# ###############

DEFAULT_SAMPLE_SIZE = 1000
DEFAULT_CONFLICT_THRESHOLD = 1

SCALAR_KIND_TYPES: dict[str, str] = {
    "string": "String",
    "date": "Date",
    "int": "Int",
    "float": "Float",
    "boolean": "Boolean",
}


@dataclass(frozen=True)
class InferenceOptions:
    """Tuning knobs for inference.

    Attributes:
        sample_size: Maximum number of records sampled per content type.
        conflict_threshold: Minimum count of the minority kinds at a field
            path before a conflict is reported.
    """

    sample_size: int = DEFAULT_SAMPLE_SIZE
    conflict_threshold: int = DEFAULT_CONFLICT_THRESHOLD


@dataclass
class TypeConflictReporter:
    """Reports conflicting field shapes once per field path."""

    reporter: Reporter
    threshold: int = DEFAULT_CONFLICT_THRESHOLD
    reported: set[str] = field(default_factory=set)

    def report(self, path: str, kinds: dict[str, int]) -> None:
        if path in self.reported:
            return
        minority = sum(kinds.values()) - max(kinds.values())
        if minority < self.threshold:
            return
        self.reported.add(path)
        described = ", ".join(f"{kind} ({count})" for kind, count in sorted(kinds.items()))
        self.reporter.warn(
            f"There are conflicting field types in your data.\n\n{path}:\n  - {described}\n\n"
            "The field will be typed with the most permissive common type."
        )


def should_infer(type_def: TypeDefinition | None) -> bool:
    return type_def is None or type_def.get_extension("infer") is not False


async def add_inferred_types(
    registry: TypeRegistry,
    store: ContentStore,
    metadata: InferenceMetadataStore,
    reporter: Reporter,
    options: InferenceOptions | None = None,
    type_names: list[str] | None = None,
) -> list[str]:
    """Infer fields for every content type (or only *type_names*) concurrently.

    Returns:
        The names of the types that were (re)inferred.
    """
    options = options or InferenceOptions()
    conflicts = TypeConflictReporter(reporter, options.conflict_threshold)
    names = type_names if type_names is not None else sorted(store.get_types())
    inferred: list[str] = []

    async def infer_one(type_name: str) -> None:
        type_def = registry.get_or_none(type_name)
        if type_def is not None and type_def.kind != TypeKind.OBJECT:
            reporter.error(f"Cannot infer fields for `{type_name}`: it is a {type_def.kind.value}, not an object type.")
            return
        if not should_infer(type_def):
            return
        entry = metadata.get(type_name)
        entry.sync(store.get_nodes_by_type(type_name), options.sample_size)
        add_inferred_type(registry, store, type_name, entry.fields, conflicts)
        inferred.append(type_name)

    async with asyncio.TaskGroup() as group:
        for type_name in names:
            group.create_task(infer_one(type_name))
    return sorted(inferred)


def add_inferred_type(
    registry: TypeRegistry,
    store: ContentStore,
    type_name: str,
    fields: dict[str, ValueDescriptor],
    conflicts: TypeConflictReporter,
) -> TypeDefinition:
    """Create or extend the Node type *type_name* with fields derived from *fields*."""
    type_def = registry.get_or_none(type_name)
    if type_def is None:
        type_def = TypeDefinition(
            name=type_name,
            kind=TypeKind.OBJECT,
            interfaces=[NODE_INTERFACE],
            extensions={"createdFrom": CreatedFrom.INFERENCE, "plugin": None},
        )
        registry.add(type_def)
        logger.debug("inferred new type {}", type_name)
    type_def.add_interface(NODE_INTERFACE)
    _InferenceContext(registry, store, conflicts).add_fields(type_def, fields, owner=type_def)
    return type_def


def sanitize_field_name(key: str) -> str:
    """Turn a record key into a valid GraphQL field name."""
    name = _INVALID_NAME_CHARS.sub("_", key)
    if not name or name[0].isdigit():
        name = f"_{name}"
    return name


# ################
# Implementation
# ################

_INVALID_NAME_CHARS = re.compile(r"[^_a-zA-Z0-9]")


class _InferenceContext:
    def __init__(self, registry: TypeRegistry, store: ContentStore, conflicts: TypeConflictReporter) -> None:
        self.registry = registry
        self.store = store
        self.conflicts = conflicts

    def add_fields(self, type_def: TypeDefinition, fields: dict[str, ValueDescriptor], owner: TypeDefinition) -> None:
        for key in sorted(fields):
            descriptor = fields[key]
            is_reference = key.endswith(NODE_REFERENCE_SUFFIX)
            field_name = sanitize_field_name(key[: -len(NODE_REFERENCE_SUFFIX)] if is_reference else key)
            existing = type_def.fields.get(field_name)
            if existing is not None and existing.extensions.get("createdFrom") != CreatedFrom.INFERENCE:
                self._extend_explicit(existing, descriptor)
                continue
            field_def = self._field(type_def, field_name, key, descriptor, owner)
            if field_def is not None:
                type_def.fields[field_name] = field_def

    def _extend_explicit(self, existing: FieldDefinition, descriptor: ValueDescriptor) -> None:
        # Explicit fields win; only explicit object types without @dontInfer get inferred sub-fields.
        target = self.registry.get_or_none(named_type(existing.type))
        if target is None or target.kind != TypeKind.OBJECT or target.get_extension("infer") is False:
            return
        props = descriptor.props or (descriptor.item.props if descriptor.item is not None else {})
        if props:
            self.add_fields(target, props, owner=target)

    def _field(
        self, parent: TypeDefinition, field_name: str, key: str, descriptor: ValueDescriptor, owner: TypeDefinition
    ) -> FieldDefinition | None:
        extensions: dict[str, object] = {"createdFrom": CreatedFrom.INFERENCE, "plugin": None}
        if key.endswith(NODE_REFERENCE_SUFFIX):
            type_ref = self._reference_type(descriptor, f"{parent.name}.{field_name}")
            extensions["link"] = {"by": "id", "from": key}
        else:
            type_ref = self._type(parent, field_name, descriptor, owner)
            if type_ref is not None and field_name != key:
                extensions["proxy"] = {"from": key}
        if type_ref is None:
            return None
        return FieldDefinition(name=field_name, type=type_ref, extensions=extensions)

    def _type(
        self, parent: TypeDefinition, field_name: str, descriptor: ValueDescriptor, owner: TypeDefinition
    ) -> TypeRef | None:
        kinds = descriptor.present_kinds()
        if not kinds:
            return None
        path = f"{parent.name}.{field_name}"
        if len(kinds) > 1:
            return named(self._widen(path, kinds))
        kind = next(iter(kinds))
        if kind in SCALAR_KIND_TYPES:
            return named(SCALAR_KIND_TYPES[kind])
        if kind == "object":
            nested = self._nested_type(parent, field_name, descriptor.props, owner)
            return named(nested) if nested is not None else None
        if kind == "array" and descriptor.item is not None:
            item = self._type(parent, field_name, descriptor.item, owner)
            return list_of(item) if item is not None else None
        return None

    def _widen(self, path: str, kinds: dict[str, int]) -> str:
        present = set(kinds)
        if present == {"int", "float"}:
            return "Float"
        if present == {"date", "string"}:
            return "String"
        self.conflicts.report(path, kinds)
        if present <= set(SCALAR_KIND_TYPES):
            return "String"
        return "JSON"

    def _nested_type(
        self, parent: TypeDefinition, field_name: str, props: dict[str, ValueDescriptor], owner: TypeDefinition
    ) -> str | None:
        name = create_type_name(parent.name, field_name)
        nested = self.registry.get_or_none(name)
        if nested is None:
            nested = TypeDefinition(
                name=name,
                kind=TypeKind.OBJECT,
                extensions={"createdFrom": CreatedFrom.INFERENCE, "plugin": None},
            )
            self.add_fields(nested, props, owner=owner)
            if not nested.fields:
                return None
            self.registry.set(nested)
            add_derived_type(owner, name)
        elif nested.kind == TypeKind.OBJECT and nested.get_extension("infer") is not False:
            self.add_fields(nested, props, owner=owner)
        return name

    def _reference_type(self, descriptor: ValueDescriptor, path: str) -> TypeRef | None:
        kinds = descriptor.present_kinds()
        if len(kinds) != 1:
            if kinds:
                self.conflicts.report(path, kinds)
            return None
        type_names = set()
        for node_id in descriptor.node_ids:
            record = self.store.get_node_by_id(node_id)
            if record is not None and record.get("internal", {}).get("type"):
                type_names.add(record["internal"]["type"])
        if not type_names:
            return None
        target = self._union(sorted(type_names)) if len(type_names) > 1 else next(iter(type_names))
        return list_of(named(target)) if "related_node_list" in kinds else named(target)

    def _union(self, members: list[str]) -> str:
        name = "Union" + "".join(members)
        union = self.registry.get_or_none(name)
        if union is None:
            self.registry.set(
                TypeDefinition(
                    name=name,
                    kind=TypeKind.UNION,
                    members=members,
                    extensions={"createdFrom": CreatedFrom.INFERENCE, "plugin": None},
                )
            )
        elif union.kind == TypeKind.UNION:
            union.members.extend(m for m in members if m not in union.members)
        return name
