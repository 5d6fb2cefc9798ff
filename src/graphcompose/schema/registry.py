# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""The type registry: the single source of truth for a schema under construction.

One registry is created per full build and passed explicitly through every
build phase. Incremental rebuilds mutate the same registry in place, scoped to
one type and its derived types.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from graphcompose.model.definitions import TypeDefinition, TypeKind
from graphcompose.plugins import Plugin

# ###############
# Public Interface
# ###############


class TypeNotFoundError(KeyError):
    """Raised when a type name is looked up but not registered."""


class NameConflictError(Exception):
    """Raised when a type is added under a name that is already taken."""


class TypeRegistry:
    """Mutable mapping from type name to :class:`TypeDefinition`."""

    def __init__(self) -> None:
        self._types: dict[str, TypeDefinition] = {}

    def add(self, type_def: TypeDefinition, plugin: Plugin | None = None) -> str:
        """Register *type_def* and return its name.

        A placeholder registered under the same name is replaced by the real
        definition. Any other existing definition must be merged by the caller
        (see :func:`graphcompose.schema.merge.merge_types`).

        Raises:
            NameConflictError: If a non-placeholder type with the same name exists.
        """
        existing = self._types.get(type_def.name)
        if existing is not None and not existing.is_placeholder:
            raise NameConflictError(f"Type `{type_def.name}` is already registered")
        if plugin is not None and "plugin" not in type_def.extensions:
            type_def.extensions["plugin"] = plugin.name
        self._types[type_def.name] = type_def
        return type_def.name

    def add_placeholder(self, name: str, kind: TypeKind) -> TypeDefinition:
        """Register a forward reference to *name* unless a type already exists."""
        existing = self._types.get(name)
        if existing is not None:
            return existing
        placeholder = TypeDefinition(name=name, kind=kind, extensions={"isPlaceholder": True})
        self._types[name] = placeholder
        return placeholder

    def set(self, type_def: TypeDefinition) -> None:
        """Register or replace *type_def* unconditionally."""
        self._types[type_def.name] = type_def

    def get(self, name: str) -> TypeDefinition:
        try:
            return self._types[name]
        except KeyError:
            raise TypeNotFoundError(name) from None

    def get_or_none(self, name: str) -> TypeDefinition | None:
        return self._types.get(name)

    def has(self, name: str) -> bool:
        return name in self._types

    def remove(self, name: str) -> TypeDefinition | None:
        return self._types.pop(name, None)

    def for_each(self, visitor: Callable[[TypeDefinition], None]) -> None:
        """Call *visitor* on a snapshot of all registered types."""
        for type_def in list(self._types.values()):
            visitor(type_def)

    def values(self) -> list[TypeDefinition]:
        return list(self._types.values())

    def names(self) -> list[str]:
        return list(self._types)

    def of_kind(self, *kinds: TypeKind) -> list[TypeDefinition]:
        return [t for t in self._types.values() if t.kind in kinds]

    def unresolved(self) -> list[str]:
        """Return the names of placeholders that never received a real definition."""
        return [name for name, t in self._types.items() if t.is_placeholder]

    def possible_types(self, name: str) -> list[str]:
        """Return the object types a value of type *name* may have at runtime."""
        type_def = self._types.get(name)
        if type_def is None:
            return []
        if type_def.kind == TypeKind.OBJECT:
            return [name]
        if type_def.kind == TypeKind.UNION:
            return list(type_def.members)
        if type_def.kind == TypeKind.INTERFACE:
            return [t.name for t in self._types.values() if t.kind == TypeKind.OBJECT and t.has_interface(name)]
        return []

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[TypeDefinition]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)
