# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Integrity checks run before the schema is frozen. Failures are fatal."""

from __future__ import annotations

from graphcompose.diagnostics import Reporter
from graphcompose.model.definitions import TypeKind
from graphcompose.model.types import named_type
from graphcompose.schema.builtins import is_node_interface
from graphcompose.schema.names import BUILT_IN_SCALAR_NAMES, NODE_INTERFACE
from graphcompose.schema.registry import TypeRegistry

# ###############
# Public Interface
# ###############


def check_queryable_interfaces(registry: TypeRegistry, reporter: Reporter) -> None:
    """Panic if an object implements a queryable interface but not ``Node``."""
    queryable = {t.name for t in registry.of_kind(TypeKind.INTERFACE) if is_node_interface(t)}
    incorrect = [
        t.name
        for t in registry.of_kind(TypeKind.OBJECT)
        if any(name in queryable for name in t.interfaces) and not t.has_interface(NODE_INTERFACE)
    ]
    if incorrect:
        names = ", ".join(f"`{name}`" for name in incorrect)
        reporter.panic(
            "Types implementing queryable interfaces must also implement the `Node` interface. "
            f"Check the type definition of {names}."
        )


def check_placeholders(registry: TypeRegistry, reporter: Reporter) -> None:
    """Panic if any forward-declared type never received a definition."""
    unresolved = registry.unresolved()
    if unresolved:
        names = ", ".join(f"`{name}`" for name in sorted(unresolved))
        reporter.panic(f"The following types are referenced but never defined: {names}.")


def check_type_references(registry: TypeRegistry, reporter: Reporter) -> None:
    """Panic if a field or argument refers to a type name the registry does not hold."""
    missing: list[str] = []
    for type_def in registry.values():
        for field_def in type_def.fields.values():
            references = [field_def.type, *(arg.type for arg in field_def.args.values())]
            for type_ref in references:
                name = named_type(type_ref)
                if name not in BUILT_IN_SCALAR_NAMES and not registry.has(name):
                    missing.append(f"`{type_def.name}.{field_def.name}` -> `{name}`")
    if missing:
        reporter.panic("Unknown types referenced: " + ", ".join(missing) + ".")
