# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""The type merger and the provenance/directive extension pass.

Every definition entering the registry goes through :func:`add_type`: new
names are registered, existing names are merged under the safe-merge policy,
and then the type's extensions are refreshed from its provenance and SDL
directives.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from graphcompose.diagnostics import Reporter
from graphcompose.model.definitions import CreatedFrom, Directive, FieldDefinition, TypeDefinition, TypeKind
from graphcompose.model.types import type_to_string
from graphcompose.plugins import DEFAULT_SITE_PLUGIN, Plugin
from graphcompose.schema.builtins import is_node_interface
from graphcompose.schema.extensions import validate_field_extensions
from graphcompose.schema.names import OVERRIDABLE_BUILT_IN_TYPE_NAMES, check_is_allowed_type_name
from graphcompose.schema.registry import TypeRegistry

# ###############
# Public Interface
# ###############


def add_type(
    registry: TypeRegistry,
    type_def: TypeDefinition,
    plugin: Plugin | None,
    created_from: CreatedFrom,
    reporter: Reporter,
) -> TypeDefinition:
    """Register *type_def* or merge it into the existing type of the same name.

    Returns the definition held by the registry afterwards.

    Raises:
        ReservedTypeNameError: If the name is reserved.
    """
    check_is_allowed_type_name(type_def.name)
    _add_placeholders(registry, type_def)
    existing = registry.get_or_none(type_def.name)
    if existing is not None:
        merge_types(registry, existing, type_def, plugin, created_from, reporter)
        return existing
    return process_added_type(registry, type_def, plugin, created_from, reporter)


def is_safe_merge(existing: TypeDefinition, plugin: Plugin | None) -> bool:
    """Return True if *plugin* may extend *existing* without a conflict warning."""
    owner = existing.get_extension("plugin")
    is_overridable_built_in = not owner and existing.name in OVERRIDABLE_BUILT_IN_TYPE_NAMES
    return (
        plugin is None
        or plugin.name == DEFAULT_SITE_PLUGIN
        or plugin.name == owner
        or existing.is_placeholder
        or is_overridable_built_in
    )


def merge_types(
    registry: TypeRegistry,
    existing: TypeDefinition,
    incoming: TypeDefinition,
    plugin: Plugin | None,
    created_from: CreatedFrom,
    reporter: Reporter,
) -> bool:
    """Merge *incoming* into *existing* in place.

    Fields are unioned with the incoming field extending an existing one of
    the same name, interfaces are unioned, extensions of *incoming* override.
    An unsafe merge is reported as a warning but still performed.
    """
    if plugin is not None and not is_safe_merge(existing, plugin):
        owner = existing.get_extension("plugin")
        if owner:
            reporter.warn(
                f"Plugin `{plugin.name}` has customized the GraphQL type `{existing.name}`, which has already "
                f"been defined by the plugin `{owner}`. This could potentially cause conflicts."
            )
        else:
            reporter.warn(
                f"Plugin `{plugin.name}` has customized the built-in GraphQL type `{existing.name}`. "
                "This is allowed, but could potentially cause conflicts."
            )

    if existing.is_placeholder:
        existing.kind = incoming.kind
        existing.extensions.pop("isPlaceholder", None)

    if existing.kind in (TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.INPUT):
        merge_fields(existing, incoming.fields)
    if existing.kind in (TypeKind.OBJECT, TypeKind.INTERFACE):
        for name in incoming.interfaces:
            existing.add_interface(name)
    elif existing.kind == TypeKind.UNION:
        existing.members.extend(m for m in incoming.members if m not in existing.members)
    elif existing.kind == TypeKind.ENUM:
        existing.values.extend(v for v in incoming.values if v not in existing.values)

    if incoming.description:
        existing.description = incoming.description
    incoming_names = {d.name for d in incoming.directives}
    existing.directives = [d for d in existing.directives if d.name not in incoming_names] + incoming.directives
    existing.extensions.update({k: v for k, v in incoming.extensions.items() if k != "isPlaceholder"})

    add_extensions(registry, existing, plugin, created_from, reporter, directives=incoming.directives)
    return True


def merge_fields(type_def: TypeDefinition, fields: dict[str, FieldDefinition]) -> None:
    """Add *fields* to *type_def*, extending fields that already exist."""
    for name, field_def in fields.items():
        current = type_def.fields.get(name)
        if current is None:
            type_def.fields[name] = field_def.model_copy(deep=False)
        else:
            extend_field(current, field_def)


def extend_field(current: FieldDefinition, update: FieldDefinition) -> None:
    """Overlay the configuration of *update* on *current*; the update wins."""
    current.type = update.type
    if update.args:
        current.args = dict(update.args)
    if update.resolve is not None:
        current.resolve = update.resolve
    if update.description is not None:
        current.description = update.description
    if update.deprecation_reason is not None:
        current.deprecation_reason = update.deprecation_reason
    if update.directives:
        current.directives = list(update.directives)
    current.extensions.update(update.extensions)


def process_added_type(
    registry: TypeRegistry,
    type_def: TypeDefinition,
    plugin: Plugin | None,
    created_from: CreatedFrom,
    reporter: Reporter,
) -> TypeDefinition:
    """Register a type whose name is not yet taken and apply its extensions."""
    registry.add(type_def, plugin)
    add_extensions(registry, type_def, plugin, created_from, reporter)
    return type_def


def add_extensions(
    registry: TypeRegistry,
    type_def: TypeDefinition,
    plugin: Plugin | None,
    created_from: CreatedFrom,
    reporter: Reporter,
    directives: list[Directive] | None = None,
) -> None:
    """Stamp provenance on *type_def* and translate its SDL directives.

    Args:
        registry: The registry holding *type_def*.
        type_def: The type to annotate.
        plugin: The plugin that contributed the definition, if any.
        created_from: Provenance of the contributed definition.
        reporter: Diagnostics sink.
        directives: Directives to translate; defaults to the type's own.
    """
    plugin_name = plugin.name if plugin is not None else None
    type_def.set_extension("createdFrom", created_from)
    type_def.set_extension("plugin", plugin_name)

    if created_from == CreatedFrom.SDL:
        for directive in type_def.directives if directives is None else directives:
            translate = TYPE_DIRECTIVES.get(directive.name)
            if translate is not None:
                translate(type_def, directive.args)

    if is_node_interface(type_def):
        if "nodeInterface" in type_def.extensions:
            reporter.warn(
                "Deprecation warning: `@nodeInterface` extension is deprecated. Use interface inheritance "
                f"instead: replace `interface {type_def.name} @nodeInterface` with "
                f"`interface {type_def.name} implements Node`."
            )
        id_field = type_def.fields.get("id")
        if id_field is None or type_to_string(id_field.type) != "ID!":
            reporter.panic(
                "Interfaces with the `nodeInterface` extension must have a field `id` of type `ID!`. "
                f"Check the type definition of `{type_def.name}`."
            )

    if type_def.has_fields:
        for field_def in type_def.fields.values():
            field_def.extensions.setdefault("createdFrom", created_from)
            field_def.extensions.setdefault("plugin", plugin_name)
            if created_from == CreatedFrom.SDL:
                for directive in field_def.directives:
                    field_def.extensions[directive.name] = dict(directive.args)
        validate_field_extensions(type_def, reporter)


# ################
# Implementation
# ################


def _set_infer(value: bool) -> Callable[[TypeDefinition, dict[str, Any]], None]:
    def apply(type_def: TypeDefinition, args: dict[str, Any]) -> None:
        type_def.set_extension("infer", value)

    return apply


def _set_mime_types(type_def: TypeDefinition, args: dict[str, Any]) -> None:
    type_def.set_extension("mimeTypes", {"types": _as_list(args.get("types"))})


def _set_child_of(type_def: TypeDefinition, args: dict[str, Any]) -> None:
    type_def.set_extension(
        "childOf",
        {"types": _as_list(args.get("types")), "mimeTypes": _as_list(args.get("mimeTypes"))},
    )


def _set_node_interface(type_def: TypeDefinition, args: dict[str, Any]) -> None:
    if type_def.kind == TypeKind.INTERFACE:
        type_def.set_extension("nodeInterface", True)


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    return list(value) if isinstance(value, (list, tuple)) else [value]


# Type-level directive name -> extension mutation.
TYPE_DIRECTIVES: dict[str, Callable[[TypeDefinition, dict[str, Any]], None]] = {
    "infer": _set_infer(True),
    "dontInfer": _set_infer(False),
    "mimeTypes": _set_mime_types,
    "childOf": _set_child_of,
    "nodeInterface": _set_node_interface,
}


def _add_placeholders(registry: TypeRegistry, type_def: TypeDefinition) -> None:
    for name in type_def.interfaces:
        if name != type_def.name:
            registry.add_placeholder(name, TypeKind.INTERFACE)
    for name in type_def.members:
        registry.add_placeholder(name, TypeKind.OBJECT)
