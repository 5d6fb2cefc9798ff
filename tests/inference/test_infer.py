# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for type inference from content records."""

import asyncio
from typing import Any

import pytest

from graphcompose.diagnostics import Diagnostics
from graphcompose.inference.infer import InferenceOptions, add_inferred_types, sanitize_field_name
from graphcompose.inference.metadata import InferenceMetadataStore
from graphcompose.model import CreatedFrom, TypeKind, type_to_string
from graphcompose.parser import parse
from graphcompose.plugins import Plugin
from graphcompose.schema.builtins import add_built_in_types
from graphcompose.schema.derived import get_derived_types
from graphcompose.schema.merge import add_type
from graphcompose.schema.registry import TypeRegistry
from graphcompose.store import MemoryContentStore

# ###############
# Helpers
# ###############


def _record(node_id: str, type_name: str = "Post", **data: Any) -> dict[str, Any]:
    return {"id": node_id, "parent": None, "children": [], "internal": {"type": type_name}, **data}


def _infer(
    records: list[dict[str, Any]], sdl: str = "", options: InferenceOptions | None = None
) -> tuple[TypeRegistry, Diagnostics]:
    registry = TypeRegistry()
    add_built_in_types(registry)
    diagnostics = Diagnostics()
    for type_def in parse(sdl):
        add_type(registry, type_def, Plugin("site"), CreatedFrom.SDL, diagnostics)
    store = MemoryContentStore(records)
    asyncio.run(add_inferred_types(registry, store, InferenceMetadataStore(), diagnostics, options))
    return registry, diagnostics


def _field_types(registry: TypeRegistry, type_name: str) -> dict[str, str]:
    return {name: type_to_string(f.type) for name, f in registry.get(type_name).fields.items()}


# ###############
# Scalars
# ###############


class TestScalars:
    def test_new_node_type(self) -> None:
        registry, diagnostics = _infer([_record("p1", title="A", views=3), _record("p2", title="B", views=7)])
        post = registry.get("Post")
        assert post.kind == TypeKind.OBJECT
        assert post.interfaces == ["Node"]
        assert post.get_extension("createdFrom") == CreatedFrom.INFERENCE
        assert _field_types(registry, "Post") == {"title": "String", "views": "Int"}
        assert post.fields["views"].extensions["createdFrom"] == CreatedFrom.INFERENCE
        assert diagnostics.entries == []

    def test_scalar_kinds(self) -> None:
        registry, _ = _infer([_record("p1", ok=True, ratio=0.5, big=2**40, date="2024-01-31", tags=[1, 2])])
        assert _field_types(registry, "Post") == {
            "big": "Float",
            "date": "Date",
            "ok": "Boolean",
            "ratio": "Float",
            "tags": "[Int]",
        }

    def test_int_and_float_widen_to_float_silently(self) -> None:
        registry, diagnostics = _infer([_record("p1", n=1), _record("p2", n=1.5)])
        assert _field_types(registry, "Post") == {"n": "Float"}
        assert diagnostics.warnings == []

    def test_date_and_string_widen_to_string_silently(self) -> None:
        registry, diagnostics = _infer([_record("p1", when="2024-01-01"), _record("p2", when="soon")])
        assert _field_types(registry, "Post") == {"when": "String"}
        assert diagnostics.warnings == []

    def test_conflicting_scalars_degrade_to_string(self) -> None:
        registry, diagnostics = _infer([_record("p1", value=1), _record("p2", value="one")])
        assert _field_types(registry, "Post") == {"value": "String"}
        (warning,) = diagnostics.warnings
        assert "Post.value" in warning

    def test_conflicting_shapes_degrade_to_json(self) -> None:
        registry, diagnostics = _infer([_record("p1", value={"a": 1}), _record("p2", value=[1])])
        assert _field_types(registry, "Post") == {"value": "JSON"}
        assert len(diagnostics.warnings) == 1

    def test_conflict_threshold(self) -> None:
        records = [_record("p1", value=1), _record("p2", value=2), _record("p3", value="x")]
        _, diagnostics = _infer(records, options=InferenceOptions(conflict_threshold=2))
        assert diagnostics.warnings == []

    def test_null_only_fields_are_skipped(self) -> None:
        registry, _ = _infer([_record("p1", title="A", empty=None)])
        assert "empty" not in registry.get("Post").fields


# ###############
# Objects, lists and references
# ###############


class TestNested:
    def test_nested_object_becomes_derived_type(self) -> None:
        registry, _ = _infer([_record("p1", frontmatter={"title": "A", "meta": {"draft": False}})])
        assert _field_types(registry, "Post")["frontmatter"] == "PostFrontmatter"
        assert _field_types(registry, "PostFrontmatter") == {"meta": "PostFrontmatterMeta", "title": "String"}
        assert set(get_derived_types(registry.get("Post"))) == {"PostFrontmatter", "PostFrontmatterMeta"}

    def test_list_of_objects(self) -> None:
        registry, _ = _infer([_record("p1", authors=[{"name": "Ada"}, {"name": "Linus", "age": 28}])])
        assert _field_types(registry, "Post")["authors"] == "[PostAuthors]"
        assert _field_types(registry, "PostAuthors") == {"age": "Int", "name": "String"}

    def test_invalid_field_names_are_proxied(self) -> None:
        registry, _ = _infer([_record("p1", **{"my-field": "x"})])
        field_def = registry.get("Post").fields["my_field"]
        assert field_def.extensions["proxy"] == {"from": "my-field"}

    @pytest.mark.parametrize(("key", "name"), [("a-b", "a_b"), ("1st", "_1st"), ("ok", "ok")])
    def test_sanitize_field_name(self, key: str, name: str) -> None:
        assert sanitize_field_name(key) == name

    def test_node_references_become_links(self) -> None:
        records = [_record("a1", "Author", name="Ada"), _record("p1", author___NODE="a1")]
        registry, _ = _infer(records)
        author = registry.get("Post").fields["author"]
        assert type_to_string(author.type) == "Author"
        assert author.extensions["link"] == {"by": "id", "from": "author___NODE"}

    def test_references_to_several_types_become_a_union(self) -> None:
        records = [
            _record("a1", "Author", name="Ada"),
            _record("g1", "Page", title="Home"),
            _record("p1", related___NODE=["g1", "a1"]),
        ]
        registry, _ = _infer(records)
        assert _field_types(registry, "Post")["related"] == "[UnionAuthorPage]"
        assert registry.get("UnionAuthorPage").members == ["Author", "Page"]


# ###############
# Explicit types
# ###############


class TestExplicitTypes:
    def test_explicit_fields_win(self) -> None:
        registry, _ = _infer([_record("p1", views=3, title="A")], sdl="type Post implements Node { views: String }")
        assert _field_types(registry, "Post") == {"title": "String", "views": "String"}
        assert registry.get("Post").fields["views"].extensions["createdFrom"] == CreatedFrom.SDL

    def test_dont_infer(self) -> None:
        registry, _ = _infer([_record("p1", views=3)], sdl="type Post implements Node @dontInfer { id: ID! }")
        assert list(registry.get("Post").fields) == ["id"]

    def test_explicit_object_types_receive_subfields(self) -> None:
        sdl = "type Post implements Node { meta: Meta } type Meta { title: String }"
        registry, _ = _infer([_record("p1", meta={"title": "A", "words": 10})], sdl=sdl)
        assert _field_types(registry, "Meta") == {"title": "String", "words": "Int"}

    def test_non_object_types_are_reported(self) -> None:
        registry, diagnostics = _infer([_record("p1", views=3)], sdl="interface Post { id: ID! }")
        assert registry.get("Post").kind == TypeKind.INTERFACE
        assert len(diagnostics.errors) == 1
