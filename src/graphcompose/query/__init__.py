# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Query-time runtime: record lookup, filtering and resolver factories."""

from graphcompose.query.filtering import OPERATORS, get_value_at_path, matches_filter, sort_records
from graphcompose.query.node_model import NodeModel

__all__ = [
    "OPERATORS",
    "NodeModel",
    "get_value_at_path",
    "matches_filter",
    "sort_records",
]
