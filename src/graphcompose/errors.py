# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Exception hierarchy for schema composition."""

# ###############
# Public Interface
# ###############


class SchemaCompositionError(Exception):
    """Base class for every error raised while composing a schema."""


class ConfigurationError(SchemaCompositionError):
    """Raised for terminal configuration mistakes, such as an invalid type name."""


class ReservedTypeNameError(ConfigurationError):
    """Raised when a type definition claims a name reserved for internal use."""


class BuildPanic(SchemaCompositionError):
    """Raised by the diagnostics sink on a fatal integrity violation.

    A panic unwinds the whole build; no partial schema is produced.
    """
