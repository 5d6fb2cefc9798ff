# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Bookkeeping for types derived from another type.

Inferred nested object types and the generated filter/sort/connection types
are recorded in the ``derivedTypes`` extension of the type they were derived
from, so an incremental rebuild can drop exactly those.
"""

from __future__ import annotations

from graphcompose.model.definitions import CreatedFrom, TypeDefinition
from graphcompose.model.types import named_type
from graphcompose.schema.registry import TypeRegistry

# ###############
# Public Interface
# ###############


def add_derived_type(owner: TypeDefinition, derived_name: str) -> None:
    derived = owner.extensions.setdefault("derivedTypes", [])
    if derived_name not in derived:
        derived.append(derived_name)


def get_derived_types(type_def: TypeDefinition) -> list[str]:
    return list(type_def.get_extension("derivedTypes") or [])


def clear_derived_types(registry: TypeRegistry, type_def: TypeDefinition) -> list[str]:
    """Remove every type derived (transitively) from *type_def*; return the removed names."""
    removed: list[str] = []
    for name in get_derived_types(type_def):
        derived = registry.get_or_none(name)
        if derived is None:
            continue
        removed.extend(clear_derived_types(registry, derived))
        registry.remove(name)
        removed.append(name)
    type_def.extensions.pop("derivedTypes", None)
    return removed


def delete_inferred_fields(type_def: TypeDefinition) -> list[str]:
    """Drop fields that were inferred or typed with one of the type's derived types."""
    derived = set(get_derived_types(type_def))
    doomed = [
        name
        for name, field_def in type_def.fields.items()
        if field_def.extensions.get("createdFrom") == CreatedFrom.INFERENCE or named_type(field_def.type) in derived
    ]
    for name in doomed:
        del type_def.fields[name]
    return doomed
