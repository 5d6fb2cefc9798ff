# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Parsing of GraphQL type-definition text into registry type definitions."""

from graphcompose.parser.parser import ParseError, parse

__all__ = [
    "parse",
    "ParseError",
]
