# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schema composition: the type registry, build phases and the schema builder.

The orchestrator lives in :mod:`graphcompose.schema.builder`; import it from
there since it depends on the query runtime, which depends on this package.
"""

from graphcompose.schema.registry import NameConflictError, TypeNotFoundError, TypeRegistry

__all__ = [
    "NameConflictError",
    "TypeNotFoundError",
    "TypeRegistry",
]
