# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the type builder helpers."""

import pytest

from graphcompose.model import TypeKind, type_to_string
from graphcompose.schema.type_builders import (
    TypeBuilderError,
    build_enum_type,
    build_input_object_type,
    build_interface_type,
    build_object_type,
    build_scalar_type,
    build_union_type,
)


class TestTypeBuilders:
    def test_object_type(self) -> None:
        type_def = build_object_type(
            {
                "name": "Post",
                "interfaces": ["Node"],
                "extensions": {"infer": False},
                "fields": {
                    "title": "String!",
                    "tags": {"type": ["String"], "description": "Labels"},
                    "excerpt": {"type": "String", "args": {"length": {"type": "Int", "defaultValue": 140}}},
                },
            }
        )
        assert type_def.kind == TypeKind.OBJECT
        assert type_def.interfaces == ["Node"]
        assert type_def.get_extension("infer") is False
        assert type_to_string(type_def.fields["title"].type) == "String!"
        assert type_to_string(type_def.fields["tags"].type) == "[String]"
        assert type_def.fields["tags"].description == "Labels"
        length = type_def.fields["excerpt"].args["length"]
        assert length.has_default
        assert length.default_value == 140

    def test_fields_thunk(self) -> None:
        type_def = build_interface_type({"name": "Named", "fields": lambda: {"name": "String"}})
        assert type_def.kind == TypeKind.INTERFACE
        assert "name" in type_def.fields

    def test_input_default_values(self) -> None:
        type_def = build_input_object_type({"name": "Range", "fields": {"min": {"type": "Int", "defaultValue": 0}}})
        assert type_def.fields["min"].extensions["defaultValue"] == 0

    def test_union_and_enum(self) -> None:
        union = build_union_type({"name": "Result", "types": ["Post", "Page"]})
        assert union.members == ["Post", "Page"]
        enum = build_enum_type({"name": "Level", "values": {"LOW": {"value": 1}, "HIGH": {"value": 2}}})
        assert enum.values == ["LOW", "HIGH"]
        assert enum.get_extension("internalValues") == {"LOW": 1, "HIGH": 2}

    def test_scalar_keeps_callables(self) -> None:
        scalar = build_scalar_type({"name": "Upper", "serialize": str.upper})
        assert scalar.get_extension("serialize") is str.upper

    def test_missing_name(self) -> None:
        with pytest.raises(TypeBuilderError):
            build_object_type({"fields": {}})

    def test_field_without_type(self) -> None:
        with pytest.raises(TypeBuilderError, match="has no type"):
            build_object_type({"name": "Post", "fields": {"title": {"description": "x"}}})
