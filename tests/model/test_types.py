# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for type references and type definitions."""

import pytest

from graphcompose.model import (
    ListTypeRef,
    NamedTypeRef,
    NonNullTypeRef,
    TypeDefinition,
    TypeKind,
    TypeStringError,
    list_of,
    named,
    named_type,
    non_null,
    parse_type_string,
    same_type_ignoring_non_null,
    type_to_string,
    unwrap_non_null,
)

# ###############
# Type references
# ###############


class TestTypeStrings:
    @pytest.mark.parametrize("text", ["Int", "Int!", "[Int]", "[Int!]!", "[[String]!]"])
    def test_parse_and_render(self, text: str) -> None:
        assert type_to_string(parse_type_string(text)) == text

    def test_parse_structure(self) -> None:
        type_ref = parse_type_string("[Post!]!")
        assert isinstance(type_ref, NonNullTypeRef)
        assert isinstance(type_ref.of_type, ListTypeRef)
        assert type_ref.of_type.of_type == NonNullTypeRef(of_type=NamedTypeRef(name="Post"))

    def test_whitespace_is_ignored(self) -> None:
        assert type_to_string(parse_type_string(" [ Int ! ] ")) == "[Int!]"

    @pytest.mark.parametrize("text", ["", "[Int", "Int]", "!", "[]"])
    def test_malformed_type_strings(self, text: str) -> None:
        with pytest.raises(TypeStringError):
            parse_type_string(text)


class TestHelpers:
    def test_non_null_is_idempotent(self) -> None:
        once = non_null(named("ID"))
        assert non_null(once) is once

    def test_named_type_unwraps_everything(self) -> None:
        assert named_type(non_null(list_of(non_null(named("File"))))) == "File"

    def test_unwrap_non_null_strips_one_level(self) -> None:
        assert unwrap_non_null(non_null(named("Int"))) == named("Int")
        assert unwrap_non_null(named("Int")) == named("Int")

    def test_same_type_ignoring_non_null(self) -> None:
        assert same_type_ignoring_non_null(parse_type_string("[Int!]!"), parse_type_string("[Int]"))
        assert not same_type_ignoring_non_null(parse_type_string("[Int]"), parse_type_string("Int"))


# ###############
# Type definitions
# ###############


class TestTypeDefinition:
    def test_interfaces_are_added_once(self) -> None:
        type_def = TypeDefinition(name="Post", kind=TypeKind.OBJECT)
        type_def.add_interface("Node")
        type_def.add_interface("Node")
        assert type_def.interfaces == ["Node"]
        assert type_def.has_interface("Node")

    def test_placeholder_flag(self) -> None:
        placeholder = TypeDefinition(name="Later", kind=TypeKind.OBJECT, extensions={"isPlaceholder": True})
        assert placeholder.is_placeholder
        assert not TypeDefinition(name="Now", kind=TypeKind.OBJECT).is_placeholder

    def test_has_fields_by_kind(self) -> None:
        assert TypeDefinition(name="A", kind=TypeKind.INPUT).has_fields
        assert not TypeDefinition(name="B", kind=TypeKind.ENUM).has_fields

    def test_extensions(self) -> None:
        type_def = TypeDefinition(name="Post", kind=TypeKind.OBJECT)
        type_def.set_extension("infer", False)
        assert type_def.get_extension("infer") is False
        assert type_def.get_extension("missing", "fallback") == "fallback"
