# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generation of the root query surface for queryable types.

For every object type implementing ``Node`` (and every queryable interface)
this adds a find-one field and a paginated ``all<Type>`` field to ``Query``,
together with the supporting filter input, sort input, fields enum,
connection and edge types.
"""

from __future__ import annotations

from loguru import logger

from graphcompose.model.definitions import (
    ArgumentDefinition,
    CreatedFrom,
    FieldDefinition,
    Searchable,
    Sortable,
    TypeDefinition,
    TypeKind,
)
from graphcompose.model.types import is_list, list_of, named, named_type, non_null
from graphcompose.query.node_model import NodeModel
from graphcompose.query.resolvers import (
    children_resolver,
    distinct,
    find_many_paginated,
    find_one,
    has_custom_resolver,
    parent_resolver,
)
from graphcompose.schema.builtins import QUERY_TYPE
from graphcompose.schema.derived import add_derived_type
from graphcompose.schema.names import NODE_INTERFACE, query_all_field_name, query_field_name
from graphcompose.schema.registry import TypeRegistry

# ###############
# Public Interface
# ###############

SORT_FIELDS_MAX_DEPTH = 3

# Operators available per scalar kind.
EQUALITY_OPERATORS: tuple[str, ...] = ("eq", "ne", "in", "nin")
RANGE_OPERATORS: tuple[str, ...] = ("eq", "ne", "gt", "gte", "lt", "lte", "in", "nin")
STRING_OPERATORS: tuple[str, ...] = ("eq", "ne", "in", "nin", "regex", "glob")

SCALAR_OPERATORS: dict[str, tuple[str, ...]] = {
    "String": STRING_OPERATORS,
    "JSON": STRING_OPERATORS,
    "Int": RANGE_OPERATORS,
    "Float": RANGE_OPERATORS,
    "Date": RANGE_OPERATORS,
    "Boolean": EQUALITY_OPERATORS,
    "ID": EQUALITY_OPERATORS,
}


def add_node_interface_fields(registry: TypeRegistry, type_def: TypeDefinition, node_model: NodeModel) -> None:
    """Give *type_def* the ``Node`` fields it lacks and resolvers for ``parent``/``children``."""
    node = registry.get(NODE_INTERFACE)
    for name, field_def in node.fields.items():
        if name not in type_def.fields:
            field_copy = field_def.model_copy(deep=True)
            field_copy.extensions["createdFrom"] = CreatedFrom.GENERATED
            type_def.fields[name] = field_copy
    if type_def.kind == TypeKind.OBJECT:
        if type_def.fields["parent"].resolve is None:
            type_def.fields["parent"].resolve = parent_resolver(node_model)
        if type_def.fields["children"].resolve is None:
            type_def.fields["children"].resolve = children_resolver(node_model)


def determine_searchable_fields(type_def: TypeDefinition) -> None:
    """Classify each field as searchable/sortable and flag resolver-backed ones."""
    for field_def in type_def.fields.values():
        extensions = field_def.extensions
        if not has_custom_resolver(field_def.resolve):
            extensions.update(searchable=Searchable.SEARCHABLE, sortable=Sortable.SORTABLE, needsResolve=False)
        elif "dateformat" in extensions:
            extensions.update(
                searchable=Searchable.SEARCHABLE,
                sortable=Sortable.SORTABLE,
                needsResolve="proxy" in extensions,
            )
        elif field_def.args:
            extensions.update(
                searchable=Searchable.DEPRECATED_SEARCHABLE,
                sortable=Sortable.DEPRECATED_SORTABLE,
                needsResolve=True,
            )
        else:
            extensions.update(searchable=Searchable.SEARCHABLE, sortable=Sortable.SORTABLE, needsResolve=True)


def add_type_to_root_query(registry: TypeRegistry, type_def: TypeDefinition, node_model: NodeModel) -> None:
    """Add ``<type>`` and ``all<Type>`` to the ``Query`` type."""
    filter_name = get_filter_input(registry, type_def)
    sort_name = get_sort_input(registry, type_def)
    connection_name = get_connection(registry, type_def)

    filter_args: dict[str, ArgumentDefinition] = {}
    if filter_name is not None:
        filter_args["filter"] = _arg("filter", filter_name)
        for name, field_def in registry.get(filter_name).fields.items():
            filter_args.setdefault(name, ArgumentDefinition(name=name, type=field_def.type))
    all_args = {"skip": _arg("skip", "Int"), "limit": _arg("limit", "Int")}
    if filter_name is not None:
        all_args["filter"] = _arg("filter", filter_name)
    if sort_name is not None:
        all_args["sort"] = _arg("sort", sort_name)

    query = registry.get(QUERY_TYPE)
    single = query_field_name(type_def.name)
    plural = query_all_field_name(type_def.name)
    query.fields[single] = FieldDefinition(
        name=single,
        type=named(type_def.name),
        args=filter_args,
        resolve=find_one(node_model, type_def.name),
        extensions=_generated(),
    )
    query.fields[plural] = FieldDefinition(
        name=plural,
        type=non_null(named(connection_name)),
        args={name: all_args[name] for name in ("filter", "sort", "skip", "limit") if name in all_args},
        resolve=find_many_paginated(node_model, type_def.name),
        extensions=_generated(),
    )
    logger.debug("added root query fields {} and {}", single, plural)


def get_filter_input(registry: TypeRegistry, type_def: TypeDefinition) -> str | None:
    """Return the name of ``<Type>FilterInput``, creating it when needed.

    Returns ``None`` when the type has no searchable fields.
    """
    return _FilterBuilder(registry).filter_input(type_def)


def get_sort_input(registry: TypeRegistry, type_def: TypeDefinition) -> str | None:
    """Return the name of ``<Type>SortInput`` (and create ``<Type>FieldsEnum``)."""
    name = f"{type_def.name}SortInput"
    if registry.has(name):
        return name
    fields_enum = get_fields_enum(registry, type_def)
    if fields_enum is None:
        return None
    sort_input = TypeDefinition(
        name=name,
        kind=TypeKind.INPUT,
        fields={
            "fields": FieldDefinition(name="fields", type=list_of(named(fields_enum))),
            "order": FieldDefinition(
                name="order",
                type=list_of(named("SortOrderEnum")),
                extensions={"defaultValue": ["ASC"]},
            ),
        },
        extensions=_generated(),
    )
    registry.set(sort_input)
    add_derived_type(type_def, name)
    return name


def get_fields_enum(registry: TypeRegistry, type_def: TypeDefinition) -> str | None:
    """Return the name of ``<Type>FieldsEnum`` listing sortable field paths.

    Enum value names join the path with ``___``; the internal value is the
    dotted path (``frontmatter___title`` -> ``frontmatter.title``).
    """
    name = f"{type_def.name}FieldsEnum"
    if registry.has(name):
        return name
    paths = _sortable_paths(registry, type_def, prefix=(), depth=0)
    if not paths:
        return None
    values = {"___".join(path): ".".join(path) for path in paths}
    registry.set(
        TypeDefinition(
            name=name,
            kind=TypeKind.ENUM,
            values=list(values),
            extensions={**_generated(), "internalValues": values},
        )
    )
    add_derived_type(type_def, name)
    return name


def get_connection(registry: TypeRegistry, type_def: TypeDefinition) -> str:
    """Return the name of ``<Type>Connection``, creating it and ``<Type>Edge`` when needed."""
    name = f"{type_def.name}Connection"
    if registry.has(name):
        return name
    edge_name = f"{type_def.name}Edge"
    registry.set(
        TypeDefinition(
            name=edge_name,
            kind=TypeKind.OBJECT,
            fields={
                "next": FieldDefinition(name="next", type=named(type_def.name)),
                "node": FieldDefinition(name="node", type=non_null(named(type_def.name))),
                "previous": FieldDefinition(name="previous", type=named(type_def.name)),
            },
            extensions=_generated(),
        )
    )
    fields = {
        "totalCount": FieldDefinition(name="totalCount", type=non_null(named("Int"))),
        "edges": FieldDefinition(name="edges", type=non_null(list_of(non_null(named(edge_name))))),
        "nodes": FieldDefinition(name="nodes", type=non_null(list_of(non_null(named(type_def.name))))),
        "pageInfo": FieldDefinition(name="pageInfo", type=non_null(named("PageInfo"))),
    }
    fields_enum = get_fields_enum(registry, type_def)
    if fields_enum is not None:
        fields["distinct"] = FieldDefinition(
            name="distinct",
            type=non_null(list_of(non_null(named("String")))),
            args={"field": ArgumentDefinition(name="field", type=non_null(named(fields_enum)))},
            resolve=distinct,
        )
    registry.set(TypeDefinition(name=name, kind=TypeKind.OBJECT, fields=fields, extensions=_generated()))
    add_derived_type(type_def, edge_name)
    add_derived_type(type_def, name)
    return name


def get_operator_input(registry: TypeRegistry, type_name: str) -> str:
    """Return the name of the shared ``<Type>QueryOperatorInput`` for a scalar or enum."""
    name = f"{type_name}QueryOperatorInput"
    if registry.has(name):
        return name
    operators = SCALAR_OPERATORS.get(type_name, EQUALITY_OPERATORS)
    fields = {}
    for operator in operators:
        if operator in ("in", "nin"):
            operand = list_of(named(type_name))
        elif operator in ("regex", "glob"):
            operand = named("String")
        else:
            operand = named(type_name)
        fields[operator] = FieldDefinition(name=operator, type=operand)
    registry.set(TypeDefinition(name=name, kind=TypeKind.INPUT, fields=fields, extensions=_generated()))
    return name


# ################
# Implementation
# ################


def _generated() -> dict[str, object]:
    return {"createdFrom": CreatedFrom.GENERATED, "plugin": None}


def _arg(name: str, type_name: str) -> ArgumentDefinition:
    return ArgumentDefinition(name=name, type=named(type_name))


class _FilterBuilder:
    """Builds nested filter inputs; types under construction are tracked to break cycles."""

    def __init__(self, registry: TypeRegistry) -> None:
        self._registry = registry
        self._in_progress: set[str] = set()

    def filter_input(self, type_def: TypeDefinition) -> str | None:
        name = f"{type_def.name}FilterInput"
        if name in self._in_progress:
            return name
        existing = self._registry.get_or_none(name)
        if existing is not None:
            return name
        self._in_progress.add(name)
        input_def = TypeDefinition(name=name, kind=TypeKind.INPUT, extensions=_generated())
        self._registry.set(input_def)
        for field_name, field_def in type_def.fields.items():
            if field_def.extensions.get("searchable") == Searchable.NOT_SEARCHABLE:
                continue
            operand = self._operand(field_def)
            if operand is not None:
                input_def.fields[field_name] = FieldDefinition(name=field_name, type=named(operand))
        self._in_progress.discard(name)
        if not input_def.fields:
            self._registry.remove(name)
            return None
        add_derived_type(type_def, name)
        return name

    def _operand(self, field_def: FieldDefinition) -> str | None:
        target = self._registry.get_or_none(named_type(field_def.type))
        target_name = named_type(field_def.type)
        if target is None or target.kind == TypeKind.SCALAR:
            return get_operator_input(self._registry, target_name)
        if target.kind == TypeKind.ENUM:
            return get_operator_input(self._registry, target_name)
        if target.kind in (TypeKind.OBJECT, TypeKind.INTERFACE):
            nested = self.filter_input(target)
            if nested is None or not is_list(field_def.type):
                return nested
            return self._list_input(target, nested)
        return None

    def _list_input(self, target: TypeDefinition, nested: str) -> str:
        name = f"{target.name}FilterListInput"
        if not self._registry.has(name):
            self._registry.set(
                TypeDefinition(
                    name=name,
                    kind=TypeKind.INPUT,
                    fields={"elemMatch": FieldDefinition(name="elemMatch", type=named(nested))},
                    extensions=_generated(),
                )
            )
        return name


def _sortable_paths(
    registry: TypeRegistry, type_def: TypeDefinition, prefix: tuple[str, ...], depth: int
) -> list[tuple[str, ...]]:
    paths: list[tuple[str, ...]] = []
    for field_name, field_def in type_def.fields.items():
        if field_def.extensions.get("sortable") == Sortable.NOT_SORTABLE:
            continue
        path = (*prefix, field_name)
        target = registry.get_or_none(named_type(field_def.type))
        if target is None or target.kind in (TypeKind.SCALAR, TypeKind.ENUM):
            paths.append(path)
        elif target.kind in (TypeKind.OBJECT, TypeKind.INTERFACE) and depth + 1 < SORT_FIELDS_MAX_DEPTH:
            paths.extend(_sortable_paths(registry, target, path, depth + 1))
    return paths
