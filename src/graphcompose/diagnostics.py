# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Diagnostics sink used by every build phase.

The build never prints or raises for recoverable problems directly; it reports
them here. ``warn`` and ``error`` are recorded and logged, ``panic`` is logged
and unwinds the build with :class:`~graphcompose.errors.BuildPanic`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, NoReturn, Protocol

from loguru import logger

from graphcompose.errors import BuildPanic

# ###############
# Public Interface
# ###############

Level = Literal["warn", "error", "panic"]


@dataclass(frozen=True)
class Diagnostic:
    """A single reported problem.

    Attributes:
        level: ``warn`` for conflicts, ``error`` for recoverable failures,
            ``panic`` for fatal integrity violations.
        message: Human-readable description.
    """

    level: Level
    message: str


class Reporter(Protocol):
    """The diagnostics interface consumed by the schema builder."""

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def panic(self, message: str) -> NoReturn: ...


@dataclass
class Diagnostics:
    """Default reporter: records diagnostics and logs them through loguru.

    Attributes:
        entries: Everything reported so far, in order.
    """

    entries: list[Diagnostic] = field(default_factory=list)

    def warn(self, message: str) -> None:
        self.entries.append(Diagnostic("warn", message))
        logger.warning(message)

    def error(self, message: str) -> None:
        self.entries.append(Diagnostic("error", message))
        logger.error(message)

    def panic(self, message: str) -> NoReturn:
        self.entries.append(Diagnostic("panic", message))
        logger.critical(message)
        raise BuildPanic(message)

    @property
    def warnings(self) -> list[str]:
        return [d.message for d in self.entries if d.level == "warn"]

    @property
    def errors(self) -> list[str]:
        return [d.message for d in self.entries if d.level == "error"]

    @property
    def has_errors(self) -> bool:
        """Return True if any error or panic was reported."""
        return any(d.level != "warn" for d in self.entries)
