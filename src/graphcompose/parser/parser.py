# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Conversion of GraphQL type-definition text into registry type definitions.

The text is parsed by graphql-core; this module maps the resulting document
onto :class:`~graphcompose.model.definitions.TypeDefinition` objects.
Directive definitions and ``schema`` blocks are accepted and skipped;
``extend`` definitions are returned like plain ones because same-named
definitions are merged anyway.
"""

from typing import Any

from graphql import GraphQLError, GraphQLSyntaxError, value_from_ast_untyped
from graphql import parse as parse_document
from graphql.language import (
    DirectiveDefinitionNode,
    DirectiveNode,
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    FieldDefinitionNode,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InputValueDefinitionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ListTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    ScalarTypeExtensionNode,
    SchemaDefinitionNode,
    SchemaExtensionNode,
    TypeNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
)

from graphcompose.model.definitions import (
    ArgumentDefinition,
    Directive,
    FieldDefinition,
    TypeDefinition,
    TypeKind,
)
from graphcompose.model.types import ListTypeRef, NamedTypeRef, NonNullTypeRef, TypeRef

# ###############
# Public Interface
# ###############


class ParseError(Exception):
    """Raised when the type-definition text is not valid SDL.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def parse(source: str) -> list[TypeDefinition]:
    """Parse SDL text into type definitions.

    Args:
        source: The type-definition text.

    Returns:
        The parsed type definitions, in source order.

    Raises:
        ParseError: If the source is syntactically invalid or contains
            operations or fragments.
    """
    try:
        document = parse_document(source)
    except GraphQLSyntaxError as exc:
        raise _to_parse_error(exc) from exc

    result: list[TypeDefinition] = []
    for node in document.definitions:
        if isinstance(node, _SKIPPED_NODES):
            continue
        kind = _KINDS.get(type(node))
        if kind is None:
            raise _to_parse_error(GraphQLError("Only type definitions are allowed in type-definition text", node))
        result.append(_type_definition(node, kind))
    return result


# ################
# Implementation
# ################

_KINDS: dict[type, TypeKind] = {
    ObjectTypeDefinitionNode: TypeKind.OBJECT,
    ObjectTypeExtensionNode: TypeKind.OBJECT,
    InterfaceTypeDefinitionNode: TypeKind.INTERFACE,
    InterfaceTypeExtensionNode: TypeKind.INTERFACE,
    UnionTypeDefinitionNode: TypeKind.UNION,
    UnionTypeExtensionNode: TypeKind.UNION,
    EnumTypeDefinitionNode: TypeKind.ENUM,
    EnumTypeExtensionNode: TypeKind.ENUM,
    ScalarTypeDefinitionNode: TypeKind.SCALAR,
    ScalarTypeExtensionNode: TypeKind.SCALAR,
    InputObjectTypeDefinitionNode: TypeKind.INPUT,
    InputObjectTypeExtensionNode: TypeKind.INPUT,
}

_SKIPPED_NODES = (DirectiveDefinitionNode, SchemaDefinitionNode, SchemaExtensionNode)

_DEFAULT_DEPRECATION_REASON = "No longer supported"


def _to_parse_error(error: GraphQLError) -> ParseError:
    location = error.locations[0] if error.locations else None
    return ParseError(error.message, location.line if location else 1, location.column if location else 1)


def _type_definition(node: Any, kind: TypeKind) -> TypeDefinition:
    type_def = TypeDefinition(
        name=node.name.value,
        kind=kind,
        description=_description(node),
        directives=_directives(node.directives),
    )
    if kind in (TypeKind.OBJECT, TypeKind.INTERFACE):
        type_def.interfaces = [interface.name.value for interface in node.interfaces or ()]
        for field_node in node.fields or ():
            field_def = _field(field_node)
            type_def.fields[field_def.name] = field_def
    elif kind == TypeKind.INPUT:
        for value_node in node.fields or ():
            arg = _input_value(value_node)
            type_def.fields[arg.name] = FieldDefinition(
                name=arg.name,
                type=arg.type,
                description=arg.description,
                extensions={"defaultValue": arg.default_value} if arg.has_default else {},
            )
    elif kind == TypeKind.UNION:
        type_def.members = [member.name.value for member in node.types or ()]
    elif kind == TypeKind.ENUM:
        type_def.values = [value.name.value for value in node.values or ()]
    return type_def


def _field(node: FieldDefinitionNode) -> FieldDefinition:
    directives = _directives(node.directives)
    field_def = FieldDefinition(
        name=node.name.value,
        type=_type_ref(node.type),
        args={arg.name: arg for arg in map(_input_value, node.arguments or ())},
        description=_description(node),
        directives=[d for d in directives if d.name != "deprecated"],
    )
    for directive in directives:
        if directive.name == "deprecated":
            field_def.deprecation_reason = directive.args.get("reason", _DEFAULT_DEPRECATION_REASON)
    return field_def


def _input_value(node: InputValueDefinitionNode) -> ArgumentDefinition:
    arg = ArgumentDefinition(name=node.name.value, type=_type_ref(node.type), description=_description(node))
    if node.default_value is not None:
        arg.default_value = value_from_ast_untyped(node.default_value)
        arg.has_default = True
    return arg


def _type_ref(node: TypeNode) -> TypeRef:
    if isinstance(node, NonNullTypeNode):
        return NonNullTypeRef(of_type=_type_ref(node.type))
    if isinstance(node, ListTypeNode):
        return ListTypeRef(of_type=_type_ref(node.type))
    return NamedTypeRef(name=node.name.value)  # type: ignore[attr-defined]


def _directives(nodes: Any) -> list[Directive]:
    return [_directive(node) for node in nodes or ()]


def _directive(node: DirectiveNode) -> Directive:
    args = {arg.name.value: value_from_ast_untyped(arg.value) for arg in node.arguments or ()}
    return Directive(name=node.name.value, args=args)


def _description(node: Any) -> str | None:
    description = getattr(node, "description", None)
    return description.value if description is not None else None
