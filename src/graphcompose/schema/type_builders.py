# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Programmatic type builders.

Plugins that prefer code over SDL describe types with plain config
mappings. Field types are SDL type strings (``"[String!]!"``) or
:mod:`graphcompose.model.types` references::

    build_object_type({
        "name": "Post",
        "interfaces": ["Node"],
        "fields": {
            "title": "String!",
            "author": {"type": "Author", "extensions": {"link": {}}},
        },
    })
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from graphcompose.model.definitions import ArgumentDefinition, FieldDefinition, TypeDefinition, TypeKind
from graphcompose.model.types import ListTypeRef, NamedTypeRef, NonNullTypeRef, TypeRef, parse_type_string

# ###############
# Public Interface
# ###############


class TypeBuilderError(ValueError):
    """Raised when a type builder config is malformed."""


def build_object_type(config: Mapping[str, Any]) -> TypeDefinition:
    return _build(TypeKind.OBJECT, config)


def build_interface_type(config: Mapping[str, Any]) -> TypeDefinition:
    return _build(TypeKind.INTERFACE, config)


def build_input_object_type(config: Mapping[str, Any]) -> TypeDefinition:
    return _build(TypeKind.INPUT, config)


def build_union_type(config: Mapping[str, Any]) -> TypeDefinition:
    type_def = _build(TypeKind.UNION, config)
    type_def.members = [str(name) for name in config.get("types", [])]
    return type_def


def build_enum_type(config: Mapping[str, Any]) -> TypeDefinition:
    """Build an enum; ``values`` is a list of names or a mapping name -> config."""
    type_def = _build(TypeKind.ENUM, config)
    values = config.get("values", [])
    type_def.values = [str(name) for name in values]
    if isinstance(values, Mapping):
        internal = {
            name: value["value"] for name, value in values.items() if isinstance(value, Mapping) and "value" in value
        }
        if internal:
            type_def.set_extension("internalValues", internal)
    return type_def


def build_scalar_type(config: Mapping[str, Any]) -> TypeDefinition:
    """Build a scalar; optional ``serialize``/``parseValue``/``parseLiteral`` callables are kept."""
    type_def = _build(TypeKind.SCALAR, config)
    for key in ("serialize", "parseValue", "parseLiteral"):
        if key in config:
            type_def.set_extension(key, config[key])
    return type_def


def to_type_ref(value: Any) -> TypeRef:
    """Accept an SDL type string or an existing type reference."""
    if isinstance(value, (NamedTypeRef, ListTypeRef, NonNullTypeRef)):
        return value
    return parse_type_string(_type_string(value))


def build_field(name: str, config: Any) -> FieldDefinition:
    """Build a field from a type string or a ``{type, args, resolve, ...}`` mapping."""
    if not isinstance(config, Mapping):
        return FieldDefinition(name=name, type=to_type_ref(config))
    if "type" not in config:
        raise TypeBuilderError(f"Field `{name}` has no type")
    return FieldDefinition(
        name=name,
        type=to_type_ref(config["type"]),
        args={arg: build_argument(arg, arg_config) for arg, arg_config in config.get("args", {}).items()},
        resolve=config.get("resolve"),
        description=config.get("description"),
        deprecation_reason=config.get("deprecationReason"),
        extensions=dict(config.get("extensions", {})),
    )


def build_argument(name: str, config: Any) -> ArgumentDefinition:
    if not isinstance(config, Mapping):
        return ArgumentDefinition(name=name, type=to_type_ref(config))
    return ArgumentDefinition(
        name=name,
        type=to_type_ref(config["type"]),
        default_value=config.get("defaultValue"),
        has_default="defaultValue" in config,
        description=config.get("description"),
    )


# ################
# Implementation
# ################


def _type_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)) and len(value) == 1:
        return f"[{_type_string(value[0])}]"
    raise TypeBuilderError(f"Unsupported field type {value!r}")


def _build(kind: TypeKind, config: Mapping[str, Any]) -> TypeDefinition:
    name = config.get("name")
    if not isinstance(name, str) or not name:
        raise TypeBuilderError(f"A {kind.value} type config requires a non-empty 'name'")
    type_def = TypeDefinition(
        name=name,
        kind=kind,
        description=config.get("description"),
        extensions=dict(config.get("extensions", {})),
    )
    if kind in (TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.INPUT):
        fields = config.get("fields", {})
        if callable(fields):
            fields = fields()
        for field_name, field_config in fields.items():
            field_def = build_field(field_name, field_config)
            if kind == TypeKind.INPUT and isinstance(field_config, Mapping) and "defaultValue" in field_config:
                field_def.extensions["defaultValue"] = field_config["defaultValue"]
            type_def.fields[field_name] = field_def
    if kind in (TypeKind.OBJECT, TypeKind.INTERFACE):
        type_def.interfaces = [str(i) for i in config.get("interfaces", [])]
    if kind in (TypeKind.INTERFACE, TypeKind.UNION) and "resolveType" in config:
        type_def.set_extension("resolveType", config["resolveType"])
    if kind == TypeKind.OBJECT and "isTypeOf" in config:
        type_def.set_extension("isTypeOf", config["isTypeOf"])
    return type_def
