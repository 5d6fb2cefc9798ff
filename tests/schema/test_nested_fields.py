# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for fields contributed through setFieldsOnGraphQLNodeType."""

import asyncio
from typing import Any

from graphcompose.diagnostics import Diagnostics
from graphcompose.model import CreatedFrom, type_to_string
from graphcompose.parser import parse
from graphcompose.plugins import Plugin, PluginApiRunner
from graphcompose.schema import TypeRegistry
from graphcompose.schema.builtins import add_built_in_types
from graphcompose.schema.merge import add_type
from graphcompose.schema.nested_fields import SET_FIELDS_API, add_nested_fields, add_set_fields_on_node_type_fields
from graphcompose.store import MemoryContentStore

# ###############
# Helpers
# ###############


def _registry(sdl: str) -> TypeRegistry:
    registry = TypeRegistry()
    add_built_in_types(registry)
    for type_def in parse(sdl):
        add_type(registry, type_def, None, CreatedFrom.SDL, Diagnostics())
    return registry


# ###############
# Nested Fields
# ###############


class TestAddNestedFields:
    def test_top_level_field(self) -> None:
        registry = _registry("type Post implements Node { title: String }")
        add_nested_fields(registry, registry.get("Post"), {"wordCount": "Int"}, Diagnostics())
        assert type_to_string(registry.get("Post").fields["wordCount"].type) == "Int"

    def test_intermediate_type_is_created(self) -> None:
        registry = _registry("type Post implements Node { title: String }")
        add_nested_fields(registry, registry.get("Post"), {"fields.readingTime.minutes": "Int"}, Diagnostics())
        assert type_to_string(registry.get("Post").fields["fields"].type) == "PostFields"
        assert type_to_string(registry.get("PostFields").fields["readingTime"].type) == "PostFieldsReadingTime"
        assert "minutes" in registry.get("PostFieldsReadingTime").fields

    def test_existing_object_field_is_extended(self) -> None:
        registry = _registry("type Meta { a: Int }\ntype Post implements Node { meta: Meta }")
        add_nested_fields(registry, registry.get("Post"), {"meta.b": "String"}, Diagnostics())
        assert set(registry.get("Meta").fields) == {"a", "b"}

    def test_scalar_parent_is_an_error(self) -> None:
        registry = _registry("type Post implements Node { title: String }")
        diagnostics = Diagnostics()
        add_nested_fields(registry, registry.get("Post"), {"title.length": "Int"}, diagnostics)
        assert "`Post.title`: it is not an object type" in diagnostics.errors[0]

    def test_field_extensions_are_validated(self) -> None:
        registry = _registry("type Post implements Node { title: String }")
        fields = {"headline": {"type": "String", "extensions": {"proxy": {"from": "title"}}}}
        add_nested_fields(registry, registry.get("Post"), fields, Diagnostics())
        assert registry.get("Post").fields["headline"].extensions["proxy"] == {"from": "title"}


class TestSetFieldsApi:
    def test_plugins_receive_each_node_type(self) -> None:
        registry = _registry("type Post implements Node { title: String }\ntype Meta { a: Int }")
        store = MemoryContentStore(
            [{"id": "p1", "parent": None, "children": [], "internal": {"type": "Post"}, "title": "A"}]
        )
        calls: list[str] = []

        def set_fields(type: dict[str, Any]) -> dict[str, Any] | None:
            calls.append(type["name"])
            if type["name"] == "Post":
                return {"nodeCount": {"type": "Int", "resolve": lambda source, info: len(type["nodes"])}}
            return None

        runner = PluginApiRunner([Plugin("counter", apis={SET_FIELDS_API: set_fields})])
        asyncio.run(add_set_fields_on_node_type_fields(registry, runner, store, Diagnostics()))
        assert calls == ["Post"]
        assert registry.get("Post").fields["nodeCount"].resolve({}, None) == 1
