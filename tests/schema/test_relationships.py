# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for parent/child relationships and convenience children fields."""

from typing import Any

from graphcompose.diagnostics import Diagnostics
from graphcompose.model import CreatedFrom, FieldDefinition, TypeDefinition, TypeKind, named, type_to_string
from graphcompose.parser import parse
from graphcompose.query.node_model import NodeModel
from graphcompose.schema import TypeRegistry
from graphcompose.schema.builtins import add_built_in_types
from graphcompose.schema.derived import delete_inferred_fields
from graphcompose.schema.merge import add_type
from graphcompose.schema.relationships import (
    add_convenience_children_fields,
    add_inferred_child_of_extensions,
    is_explicit_child,
)
from graphcompose.store import MemoryContentStore

# ###############
# Helpers
# ###############


def _record(node_id: str, type_name: str, children: list[str] | None = None, **data: Any) -> dict[str, Any]:
    return {"id": node_id, "parent": None, "children": children or [], "internal": {"type": type_name}, **data}


def _setup(sdl: str, records: list[dict[str, Any]]) -> tuple[TypeRegistry, MemoryContentStore, NodeModel]:
    registry = TypeRegistry()
    add_built_in_types(registry)
    for type_def in parse(sdl):
        add_type(registry, type_def, None, CreatedFrom.SDL, Diagnostics())
    store = MemoryContentStore(records)
    return registry, store, NodeModel(store, registry)


_SDL = """
type File implements Node { path: String }
type MarkdownRemark implements Node { html: String }
"""


# ###############
# Inferred Relationships
# ###############


class TestInferredChildOf:
    def test_child_of_is_inferred_from_records(self) -> None:
        records = [_record("f1", "File", children=["m1"]), _record("m1", "MarkdownRemark", html="<p/>")]
        registry, store, _ = _setup(_SDL, records)
        add_inferred_child_of_extensions(registry, store)
        assert registry.get("MarkdownRemark").get_extension("childOf") == {"types": ["File"]}
        assert is_explicit_child(registry.get("File"), registry.get("MarkdownRemark"))

    def test_dont_infer_parent_keeps_explicit_relations_only(self) -> None:
        sdl = "type File implements Node @dontInfer { path: String }\ntype MarkdownRemark implements Node { x: Int }"
        records = [_record("f1", "File", children=["m1"]), _record("m1", "MarkdownRemark")]
        registry, store, _ = _setup(sdl, records)
        add_inferred_child_of_extensions(registry, store)
        assert registry.get("MarkdownRemark").get_extension("childOf") is None

    def test_explicit_relation_by_mime_type(self) -> None:
        sdl = """
        type File implements Node @mimeTypes(types: ["text/markdown"]) { path: String }
        type MarkdownRemark implements Node @childOf(mimeTypes: ["text/markdown"]) { html: String }
        """
        registry, store, _ = _setup(sdl, [])
        assert is_explicit_child(registry.get("File"), registry.get("MarkdownRemark"))


# ###############
# Convenience Fields
# ###############


class TestConvenienceFields:
    def test_children_fields_are_added_to_parent(self) -> None:
        records = [
            _record("f1", "File", children=["m1", "m2"], path="a.md"),
            _record("m1", "MarkdownRemark", html="<p>1</p>"),
            _record("m2", "MarkdownRemark", html="<p>2</p>"),
        ]
        registry, store, node_model = _setup(_SDL, records)
        add_inferred_child_of_extensions(registry, store)
        add_convenience_children_fields(registry, node_model, Diagnostics())
        file = registry.get("File")
        assert type_to_string(file.fields["childrenMarkdownRemark"].type) == "[MarkdownRemark]"
        assert type_to_string(file.fields["childMarkdownRemark"].type) == "MarkdownRemark"
        parent = store.get_node_by_id("f1")
        children = file.fields["childrenMarkdownRemark"].resolve(parent, None)
        assert [child["id"] for child in children] == ["m1", "m2"]
        assert file.fields["childMarkdownRemark"].resolve(parent, None)["id"] == "m1"

    def test_mime_type_parents(self) -> None:
        sdl = """
        type File implements Node @mimeTypes(types: ["text/markdown"]) { path: String }
        type MarkdownRemark implements Node @childOf(mimeTypes: ["text/markdown"]) { html: String }
        """
        registry, _, node_model = _setup(sdl, [])
        add_convenience_children_fields(registry, node_model, Diagnostics())
        assert "childMarkdownRemark" in registry.get("File").fields

    def test_child_of_on_non_node_type_is_an_error(self) -> None:
        sdl = 'type Post implements Node { x: Int }\ntype Comment @childOf(types: ["Post"]) { text: String }'
        registry, _, node_model = _setup(sdl, [])
        diagnostics = Diagnostics()
        add_convenience_children_fields(registry, node_model, diagnostics)
        assert "only be used on types that implement the `Node` interface" in diagnostics.errors[0]
        assert "childComment" not in registry.get("Post").fields

    def test_interface_parent_must_be_queryable(self) -> None:
        sdl = 'interface Named { name: String }\ntype Tag implements Node @childOf(types: ["Named"]) { x: Int }'
        registry, _, node_model = _setup(sdl, [])
        diagnostics = Diagnostics()
        add_convenience_children_fields(registry, node_model, diagnostics)
        assert "interfaces which implement the `Node` interface" in diagnostics.errors[0]


# ###############
# Derived Fields
# ###############


class TestDeleteInferredFields:
    def test_only_inferred_and_derived_typed_fields_are_removed(self) -> None:
        type_def = TypeDefinition(
            name="Post",
            kind=TypeKind.OBJECT,
            fields={
                "title": FieldDefinition(name="title", type=named("String")),
                "views": FieldDefinition(
                    name="views", type=named("Int"), extensions={"createdFrom": CreatedFrom.INFERENCE}
                ),
                "frontmatter": FieldDefinition(name="frontmatter", type=named("PostFrontmatter")),
            },
            extensions={"derivedTypes": ["PostFrontmatter"]},
        )
        assert sorted(delete_inferred_fields(type_def)) == ["frontmatter", "views"]
        assert list(type_def.fields) == ["title"]
