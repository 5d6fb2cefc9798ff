# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type reference representations for the GraphCompose type model.

A type reference is the output or input type of a field or argument: a named
type, optionally wrapped in list and non-null modifiers.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class NamedTypeRef(BaseModel):
    """Reference to a named type (scalar, object, interface, union, enum or input)."""

    kind: Literal["named"] = "named"
    name: str


class ListTypeRef(BaseModel):
    """Reference to a list of another type."""

    kind: Literal["list"] = "list"
    of_type: TypeRef


class NonNullTypeRef(BaseModel):
    """Reference to a non-null wrapper around another type."""

    kind: Literal["non_null"] = "non_null"
    of_type: TypeRef


# A field type reference. The `kind` discriminator keeps (de)serialization unambiguous.
TypeRef = Annotated[
    NamedTypeRef | ListTypeRef | NonNullTypeRef,
    _Field(discriminator="kind"),
]


class TypeStringError(ValueError):
    """Raised when a textual type reference such as ``[Int!]!`` is malformed."""


def named(name: str) -> NamedTypeRef:
    """Return a reference to the named type *name*."""
    return NamedTypeRef(name=name)


def list_of(of_type: TypeRef) -> ListTypeRef:
    """Wrap *of_type* in a list."""
    return ListTypeRef(of_type=of_type)


def non_null(of_type: TypeRef) -> TypeRef:
    """Wrap *of_type* in a non-null modifier (idempotent)."""
    if isinstance(of_type, NonNullTypeRef):
        return of_type
    return NonNullTypeRef(of_type=of_type)


def unwrap_non_null(type_ref: TypeRef) -> TypeRef:
    """Strip a single outer non-null modifier, if present."""
    if isinstance(type_ref, NonNullTypeRef):
        return type_ref.of_type
    return type_ref


def named_type(type_ref: TypeRef) -> str:
    """Return the name of the innermost named type."""
    while not isinstance(type_ref, NamedTypeRef):
        type_ref = type_ref.of_type
    return type_ref.name


def is_list(type_ref: TypeRef) -> bool:
    """Return True if the type (ignoring an outer non-null) is a list."""
    return isinstance(unwrap_non_null(type_ref), ListTypeRef)


def type_to_string(type_ref: TypeRef) -> str:
    """Render a type reference in SDL notation, e.g. ``[String!]!``."""
    if isinstance(type_ref, NamedTypeRef):
        return type_ref.name
    if isinstance(type_ref, ListTypeRef):
        return f"[{type_to_string(type_ref.of_type)}]"
    return f"{type_to_string(type_ref.of_type)}!"


def parse_type_string(text: str) -> TypeRef:
    """Parse an SDL type string such as ``[Int!]!`` into a type reference.

    Raises:
        TypeStringError: If the string is not a well-formed type reference.
    """
    type_ref, rest = _parse_type(text.strip(), text)
    if rest:
        raise TypeStringError(f"Unexpected trailing input {rest!r} in type {text!r}")
    return type_ref


def same_type_ignoring_non_null(left: TypeRef, right: TypeRef) -> bool:
    """Return True if both references are equal once every non-null modifier is dropped."""
    return type_to_string(left).replace("!", "") == type_to_string(right).replace("!", "")


# ################
# Implementation
# ################


def _parse_type(text: str, original: str) -> tuple[TypeRef, str]:
    if not text:
        raise TypeStringError(f"Empty type reference in {original!r}")
    if text[0] == "[":
        inner, rest = _parse_type(text[1:].lstrip(), original)
        rest = rest.lstrip()
        if not rest.startswith("]"):
            raise TypeStringError(f"Unterminated list type in {original!r}")
        type_ref: TypeRef = ListTypeRef(of_type=inner)
        rest = rest[1:].lstrip()
    else:
        end = 0
        while end < len(text) and (text[end].isalnum() or text[end] == "_"):
            end += 1
        if end == 0:
            raise TypeStringError(f"Expected a type name in {original!r}")
        type_ref = NamedTypeRef(name=text[:end])
        rest = text[end:].lstrip()
    if rest.startswith("!"):
        type_ref = NonNullTypeRef(of_type=type_ref)
        rest = rest[1:].lstrip()
    return type_ref, rest


# Resolve forward references for the wrapper models.
ListTypeRef.model_rebuild()
NonNullTypeRef.model_rebuild()
