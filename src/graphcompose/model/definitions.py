# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type and field definitions held by the type registry."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel
from pydantic import Field as _Field

from graphcompose.model.types import TypeRef

# ###############
# Public Interface
# ###############


class TypeKind(Enum):
    """The closed set of GraphQL named-type kinds."""

    OBJECT = "type"
    INTERFACE = "interface"
    UNION = "union"
    ENUM = "enum"
    SCALAR = "scalar"
    INPUT = "input"


class CreatedFrom(str, Enum):
    """Provenance of a type or field (the ``createdFrom`` extension)."""

    SDL = "sdl"
    TYPE_BUILDER = "typeBuilder"
    GRAPHQL_OBJECT = "graphqlObject"
    THIRD_PARTY = "thirdPartySchema"
    INFERENCE = "inference"
    CREATE_RESOLVERS = "createResolvers"
    GENERATED = "generated"


class Searchable(str, Enum):
    """Whether a field is exposed on the filter input of its type."""

    SEARCHABLE = "SEARCHABLE"
    NOT_SEARCHABLE = "NOT_SEARCHABLE"
    DEPRECATED_SEARCHABLE = "DEPRECATED_SEARCHABLE"


class Sortable(str, Enum):
    """Whether a field is exposed on the sort enum of its type."""

    SORTABLE = "SORTABLE"
    NOT_SORTABLE = "NOT_SORTABLE"
    DEPRECATED_SORTABLE = "DEPRECATED_SORTABLE"


class Directive(BaseModel):
    """A directive usage such as ``@childOf(types: ["File"])``."""

    name: str
    args: dict[str, Any] = _Field(default_factory=dict)


class ArgumentDefinition(BaseModel):
    """A field argument or an input-object field."""

    name: str
    type: TypeRef
    default_value: Any = None
    has_default: bool = False
    description: str | None = None


class FieldDefinition(BaseModel):
    """A named, typed field of an object, interface or input type."""

    name: str
    type: TypeRef
    args: dict[str, ArgumentDefinition] = _Field(default_factory=dict)
    resolve: Callable[..., Any] | None = None
    description: str | None = None
    deprecation_reason: str | None = None
    directives: list[Directive] = _Field(default_factory=list)
    extensions: dict[str, Any] = _Field(default_factory=dict)


class TypeDefinition(BaseModel):
    """A named type under construction in the registry."""

    name: str
    kind: TypeKind
    fields: dict[str, FieldDefinition] = _Field(default_factory=dict)
    interfaces: list[str] = _Field(default_factory=list)
    members: list[str] = _Field(default_factory=list)
    values: list[str] = _Field(default_factory=list)
    description: str | None = None
    directives: list[Directive] = _Field(default_factory=list)
    extensions: dict[str, Any] = _Field(default_factory=dict)

    @property
    def is_placeholder(self) -> bool:
        """True for a forward-declared stand-in awaiting its real definition."""
        return bool(self.extensions.get("isPlaceholder"))

    @property
    def has_fields(self) -> bool:
        """True for kinds that carry a field map."""
        return self.kind in (TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.INPUT)

    def has_interface(self, name: str) -> bool:
        return name in self.interfaces

    def add_interface(self, name: str) -> None:
        if name not in self.interfaces:
            self.interfaces.append(name)

    def get_extension(self, name: str, default: Any = None) -> Any:
        return self.extensions.get(name, default)

    def set_extension(self, name: str, value: Any) -> None:
        self.extensions[name] = value

    def set_field_extension(self, field_name: str, name: str, value: Any) -> None:
        self.fields[field_name].extensions[name] = value


FieldDefinition.model_rebuild()
ArgumentDefinition.model_rebuild()
TypeDefinition.model_rebuild()
