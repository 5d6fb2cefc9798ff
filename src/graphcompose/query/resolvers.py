# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolver factories for generated query fields, links and tracing.

All resolvers use the graphql-core calling convention
``resolve(source, info, **args)``. Resolvers produced here also accept
``info=None`` so the node model can evaluate them outside a query when a
filter or sort touches a resolver-backed field.
"""

from __future__ import annotations

import functools
import inspect
import math
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from graphql import GraphQLResolveInfo, default_field_resolver
from opentelemetry import trace

from graphcompose.query.filtering import get_value_at_path
from graphcompose.query.node_model import NodeModel

Resolver = Callable[..., Any]

# ###############
# Public Interface
# ###############

default_resolver: Resolver = default_field_resolver
"""Structural resolver used for fields without a custom resolver."""

TRACER_NAME = "graphcompose.resolvers"


def find_one(node_model: NodeModel, type_name: str) -> Resolver:
    """Resolver for the singular root field: first record matching the arguments.

    Field arguments are shorthand for entries of the ``filter`` argument.
    """

    def resolve(
        source: Any, info: GraphQLResolveInfo | None, filter: Mapping[str, Any] | None = None, **args: Any
    ) -> Any:
        conditions = {**(filter or {}), **args}
        return node_model.run_query(type_name, filter=conditions or None, first_only=True)

    return resolve


def find_many_paginated(node_model: NodeModel, type_name: str) -> Resolver:
    """Resolver for the ``all<Type>`` root field returning a connection."""

    def resolve(
        source: Any,
        info: GraphQLResolveInfo | None,
        filter: Mapping[str, Any] | None = None,
        sort: Mapping[str, Any] | None = None,
        skip: int | None = None,
        limit: int | None = None,
    ) -> dict[str, Any]:
        results = node_model.run_query(type_name, filter=filter, sort=sort)
        return paginate(results, skip=skip or 0, limit=limit)

    return resolve


def paginate(results: Sequence[Any], skip: int = 0, limit: int | None = None) -> dict[str, Any]:
    """Build the connection payload for one page of *results*."""
    count = len(results)
    items = list(results[skip : skip + limit] if limit is not None else results[skip:])
    if limit:
        page_count = math.ceil(skip / limit) + math.ceil((count - skip) / limit)
        current_page = math.ceil(skip / limit) + 1
    else:
        page_count = 2 if skip else 1
        current_page = 2 if skip else 1
    edges = [
        {
            "node": item,
            "next": items[index + 1] if index + 1 < len(items) else None,
            "previous": items[index - 1] if index > 0 else None,
        }
        for index, item in enumerate(items)
    ]
    return {
        "totalCount": count,
        "edges": edges,
        "nodes": items,
        "pageInfo": {
            "currentPage": current_page,
            "hasPreviousPage": current_page > 1,
            "hasNextPage": limit is not None and skip + limit < count,
            "itemCount": len(items),
            "pageCount": page_count,
            "perPage": limit,
            "totalCount": count,
        },
        "results": list(results),
    }


def distinct(source: Mapping[str, Any], info: GraphQLResolveInfo | None, field: str) -> list[Any]:
    """Resolver for ``<Type>Connection.distinct``: sorted unique values at a field path."""
    seen: set[Any] = set()
    values: list[Any] = []
    for record in source.get("results", source.get("nodes", [])):
        value = get_value_at_path(record, field)
        for item in value if isinstance(value, list) else [value]:
            if item is None or isinstance(item, (dict, list)) or item in seen:
                continue
            seen.add(item)
            values.append(item)
    return sorted(values, key=str)


def link_resolver(
    node_model: NodeModel, type_name: str, field_name: str, by: str = "id", from_: str | None = None
) -> Resolver:
    """Resolver that turns a stored reference into the referenced record(s).

    Args:
        node_model: Query access to the content store.
        type_name: Named return type of the field; may be abstract.
        field_name: Property read from the source when *from_* is not given.
        by: Field path on the referenced records to match the value against.
        from_: Alternate property holding the reference.
    """

    def resolve(source: Any, info: GraphQLResolveInfo | None, **args: Any) -> Any:
        value = get_value_at_path(source, from_ or field_name)
        if value is None:
            return None
        if by == "id":
            if isinstance(value, list):
                return node_model.get_nodes_by_ids(value, type_name)
            return node_model.get_node_by_id(value, type_name)
        if isinstance(value, list):
            return node_model.run_query(type_name, filter=_filter_at_path(by, {"in": value}))
        return node_model.run_query(type_name, filter=_filter_at_path(by, {"eq": value}), first_only=True)

    return resolve


def children_of_type(node_model: NodeModel, type_name: str, first: bool = False) -> Resolver:
    """Resolver for ``child<Type>`` (``first=True``) and ``children<Type>``."""

    def resolve(source: Any, info: GraphQLResolveInfo | None, **args: Any) -> Any:
        children = node_model.get_nodes_by_ids(get_value_at_path(source, "children"), type_name)
        if first:
            return children[0] if children else None
        return children

    return resolve


def parent_resolver(node_model: NodeModel) -> Resolver:
    def resolve(source: Any, info: GraphQLResolveInfo | None, **args: Any) -> Any:
        return node_model.get_node_by_id(get_value_at_path(source, "parent"))

    return resolve


def children_resolver(node_model: NodeModel) -> Resolver:
    def resolve(source: Any, info: GraphQLResolveInfo | None, **args: Any) -> Any:
        return node_model.get_nodes_by_ids(get_value_at_path(source, "children"))

    return resolve


def wrapping_resolver(resolve: Resolver, tracer: trace.Tracer | None = None) -> Resolver:
    """Wrap *resolve* in a span per field resolution.

    The wrapped resolver returns exactly what *resolve* returns (awaitables
    included) and lets its exceptions propagate unchanged.
    """

    @functools.wraps(resolve)
    def wrapped(source: Any, info: GraphQLResolveInfo | None, **args: Any) -> Any:
        if info is None:
            return resolve(source, info, **args)
        active = tracer or trace.get_tracer(TRACER_NAME)
        span = active.start_span(
            f"{info.parent_type.name}.{info.field_name}",
            attributes={"graphql.field.path": ".".join(str(key) for key in info.path.as_list())},
        )
        try:
            result = resolve(source, info, **args)
        except BaseException:
            span.end()
            raise
        if inspect.isawaitable(result):
            return _end_after(result, span)
        span.end()
        return result

    wrapped.is_wrapping_resolver = True  # type: ignore[attr-defined]
    return wrapped


def is_wrapping_resolver(resolve: Resolver | None) -> bool:
    return bool(getattr(resolve, "is_wrapping_resolver", False))


def has_custom_resolver(resolve: Resolver | None) -> bool:
    """Return True unless *resolve* is missing or the structural default."""
    return resolve is not None and resolve is not default_resolver


class ResolveInfoWithOriginal:
    """Resolve info exposing the resolver an override replaced.

    Attribute access other than ``original_resolver`` is delegated to the
    graphql-core :class:`~graphql.GraphQLResolveInfo`.
    """

    def __init__(self, info: GraphQLResolveInfo | None, original_resolver: Resolver) -> None:
        self._info = info
        self.original_resolver = original_resolver

    def __getattr__(self, name: str) -> Any:
        if self._info is None:
            raise AttributeError(name)
        return getattr(self._info, name)


def with_original_resolver(resolve: Resolver, original: Resolver | None) -> Resolver:
    """Return a resolver calling *resolve* with ``info.original_resolver`` set."""
    fallback = original or default_resolver

    def resolve_with_original(source: Any, info: GraphQLResolveInfo | None, **args: Any) -> Any:
        return resolve(source, ResolveInfoWithOriginal(info, fallback), **args)

    return resolve_with_original


# ################
# Implementation
# ################


async def _end_after(result: Any, span: trace.Span) -> Any:
    try:
        return await result
    finally:
        span.end()


def _filter_at_path(path: str, condition: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = condition
    for part in reversed(path.split(".")):
        result = {part: result}
    return result
