# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rendering of registry types back to SDL.

:func:`print_type_definitions` writes a snapshot of the user-facing types
(explicit and inferred) so a site can lock its schema, while
:func:`print_schema_sdl` renders every registered type.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from graphql.language import (
    BooleanValueNode,
    EnumValueNode,
    FloatValueNode,
    IntValueNode,
    ListValueNode,
    NameNode,
    NullValueNode,
    ObjectFieldNode,
    ObjectValueNode,
    StringValueNode,
    ValueNode,
    print_ast,
)
from graphql.language.block_string import print_block_string
from loguru import logger

from graphcompose.diagnostics import Reporter
from graphcompose.model.definitions import (
    ArgumentDefinition,
    CreatedFrom,
    Directive,
    FieldDefinition,
    TypeDefinition,
    TypeKind,
)
from graphcompose.model.types import TypeRef, named_type, type_to_string
from graphcompose.schema.builtins import is_built_in, is_node_type
from graphcompose.schema.extensions import FIELD_EXTENSIONS
from graphcompose.schema.registry import TypeRegistry

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class PrintFilter:
    """Type and plugin names selecting types to print."""

    types: tuple[str, ...] = ()
    plugins: tuple[str, ...] = ()


@dataclass(frozen=True)
class PrintConfig:
    """Where and what to print.

    Attributes:
        path: Output file.
        rewrite: Overwrite *path* if it already exists.
        include: When non-empty, only matching types are printed.
        exclude: Matching types are never printed.
    """

    path: Path
    rewrite: bool = False
    include: PrintFilter = field(default_factory=PrintFilter)
    exclude: PrintFilter = field(default_factory=PrintFilter)


def print_type_definitions(registry: TypeRegistry, config: PrintConfig | None, reporter: Reporter) -> bool:
    """Write the SDL of user-facing types to ``config.path``.

    Returns:
        True if the file was written.
    """
    if config is None:
        return False
    if config.path.exists() and not config.rewrite:
        reporter.warn(
            f"Printing type definitions aborted. The file `{config.path}` already exists. "
            "Set `rewrite` to overwrite it."
        )
        return False
    types = [t for t in registry.values() if _is_printable(t) and _is_selected(t, config)]
    config.path.parent.mkdir(parents=True, exist_ok=True)
    config.path.write_text(render_types(registry, types, snapshot=True), encoding="utf-8")
    logger.info("wrote {} type definitions to {}", len(types), config.path)
    return True


def print_schema_sdl(registry: TypeRegistry) -> str:
    """Render every registered type as SDL."""
    return render_types(registry, sorted(registry.values(), key=lambda t: t.name), snapshot=False)


def render_types(registry: TypeRegistry, types: Iterable[TypeDefinition], snapshot: bool) -> str:
    """Render *types* separated by blank lines.

    In *snapshot* mode generated fields are omitted and type extensions are
    rendered as directives (``@dontInfer``, ``@mimeTypes``, ``@childOf``).
    """
    printer = _Printer(registry, snapshot)
    return "\n\n".join(printer.type_definition(t) for t in types) + "\n"


def format_value(value: Any) -> str:
    """Render a constant as an SDL literal."""
    return print_ast(_value_node(value))


# ################
# Implementation
# ################

_DERIVED_SUFFIXES = (
    "FilterInput",
    "FilterListInput",
    "QueryOperatorInput",
    "SortInput",
    "FieldsEnum",
    "Connection",
    "Edge",
)


def _is_printable(type_def: TypeDefinition) -> bool:
    created_from = type_def.get_extension("createdFrom")
    if is_built_in(type_def) or created_from in (CreatedFrom.GENERATED, CreatedFrom.THIRD_PARTY):
        return False
    return type_def.name != "Query" and not type_def.name.endswith(_DERIVED_SUFFIXES)


def _is_selected(type_def: TypeDefinition, config: PrintConfig) -> bool:
    plugin = type_def.get_extension("plugin")
    include, exclude = config.include, config.exclude
    if include.types and type_def.name not in include.types:
        return False
    if include.plugins and plugin not in include.plugins:
        return False
    return type_def.name not in exclude.types and plugin not in exclude.plugins


class _Printer:
    def __init__(self, registry: TypeRegistry, snapshot: bool) -> None:
        self._registry = registry
        self._snapshot = snapshot

    def type_definition(self, type_def: TypeDefinition) -> str:
        head = self._description(type_def.description, "")
        keyword = type_def.kind.value
        line = f"{keyword} {type_def.name}"
        if type_def.kind in (TypeKind.OBJECT, TypeKind.INTERFACE) and type_def.interfaces:
            line += " implements " + " & ".join(type_def.interfaces)
        directives = self._type_directives(type_def)
        if directives:
            line += " " + directives
        if type_def.kind == TypeKind.UNION:
            return head + line + (" = " + " | ".join(type_def.members) if type_def.members else "")
        if type_def.kind == TypeKind.SCALAR:
            return head + line
        if type_def.kind == TypeKind.ENUM:
            body = [f"  {value}" for value in type_def.values]
        else:
            fields = [f for f in type_def.fields.values() if self._is_printed_field(f)]
            body = [self._field(type_def, f) for f in fields]
        if not body:
            return head + line
        return head + line + " {\n" + "\n".join(body) + "\n}"

    def _is_printed_field(self, field_def: FieldDefinition) -> bool:
        return not (self._snapshot and field_def.extensions.get("createdFrom") == CreatedFrom.GENERATED)

    def _type_directives(self, type_def: TypeDefinition) -> str:
        directives: list[Directive] = []
        infer = type_def.get_extension("infer")
        if infer is True:
            directives.append(Directive(name="infer"))
        elif infer is False or (self._snapshot and is_node_type(type_def)):
            directives.append(Directive(name="dontInfer"))
        mime_types = type_def.get_extension("mimeTypes")
        if mime_types and mime_types.get("types"):
            directives.append(Directive(name="mimeTypes", args={"types": list(mime_types["types"])}))
        child_of = type_def.get_extension("childOf")
        if child_of:
            args = {key: list(child_of[key]) for key in ("types", "mimeTypes") if child_of.get(key)}
            if args:
                directives.append(Directive(name="childOf", args=args))
        if type_def.get_extension("nodeInterface"):
            directives.append(Directive(name="nodeInterface"))
        return " ".join(self._directive(d) for d in directives)

    def _field(self, type_def: TypeDefinition, field_def: FieldDefinition) -> str:
        text = self._description(field_def.description, "  ") + "  " + field_def.name
        if type_def.kind != TypeKind.INPUT:
            args = [arg for name, arg in field_def.args.items() if name not in self._extension_args(field_def)]
            if args:
                text += "(" + ", ".join(self._argument(arg) for arg in args) + ")"
        text += ": " + type_to_string(field_def.type)
        if type_def.kind == TypeKind.INPUT and "defaultValue" in field_def.extensions:
            text += " = " + self._value(field_def.extensions["defaultValue"], field_def.type)
        for name, options in field_def.extensions.items():
            if name in FIELD_EXTENSIONS and isinstance(options, Mapping):
                text += " " + self._directive(Directive(name=name, args=dict(options)))
        if field_def.deprecation_reason is not None:
            text += " " + self._directive(Directive(name="deprecated", args={"reason": field_def.deprecation_reason}))
        return text

    def _extension_args(self, field_def: FieldDefinition) -> set[str]:
        # Arguments added by field extensions are re-created from the directive.
        if self._snapshot and "dateformat" in field_def.extensions:
            return {"formatString", "fromNow", "difference", "locale"}
        return set()

    def _argument(self, arg: ArgumentDefinition) -> str:
        text = f"{arg.name}: {type_to_string(arg.type)}"
        if arg.has_default:
            text += " = " + self._value(arg.default_value, arg.type)
        return text

    def _value(self, value: Any, type_ref: TypeRef) -> str:
        target = self._registry.get_or_none(named_type(type_ref))
        if target is not None and target.kind == TypeKind.ENUM:
            return print_ast(_value_node(value, enum=True))
        return format_value(value)

    def _directive(self, directive: Directive) -> str:
        args = {key: value for key, value in directive.args.items() if value is not None}
        if not args:
            return f"@{directive.name}"
        return f"@{directive.name}(" + ", ".join(f"{k}: {format_value(v)}" for k, v in args.items()) + ")"

    @staticmethod
    def _description(description: str | None, indent: str) -> str:
        if not description:
            return ""
        return "".join(f"{indent}{line}\n" for line in print_block_string(description).split("\n"))


def _value_node(value: Any, enum: bool = False) -> ValueNode:
    """Build the AST literal for a plain Python value; strings become enum values when *enum* is set."""
    if value is None:
        return NullValueNode()
    if isinstance(value, bool):
        return BooleanValueNode(value=value)
    if isinstance(value, int):
        return IntValueNode(value=str(value))
    if isinstance(value, float):
        return FloatValueNode(value=repr(value))
    if isinstance(value, str):
        return EnumValueNode(value=value) if enum else StringValueNode(value=value)
    if isinstance(value, Mapping):
        return ObjectValueNode(
            fields=tuple(
                ObjectFieldNode(name=NameNode(value=str(key)), value=_value_node(item, enum))
                for key, item in value.items()
            )
        )
    if isinstance(value, (list, tuple)):
        return ListValueNode(values=tuple(_value_node(item, enum) for item in value))
    return StringValueNode(value=str(value))
