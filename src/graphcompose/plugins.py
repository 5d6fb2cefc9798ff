# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Plugin descriptors and the plugin/event runner used by the schema builder."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger

# ###############
# Public Interface
# ###############

DEFAULT_SITE_PLUGIN = "default-site-plugin"


@dataclass(frozen=True)
class Plugin:
    """A named contributor of types and API hooks.

    Attributes:
        name: Unique plugin name; owns the types it declares.
        apis: Mapping from API name (e.g. ``"createResolvers"``) to a hook
            called with the API payload. Hooks may be coroutines.
    """

    name: str
    apis: dict[str, Callable[..., Any]] = field(default_factory=dict, compare=False, hash=False)


class PluginRunner(Protocol):
    """Runs an API across all plugins and collects the non-None results."""

    async def run(self, api_name: str, payload: dict[str, Any]) -> list[Any]: ...


class PluginApiRunner:
    """A :class:`PluginRunner` that calls each plugin's hook in registration order."""

    def __init__(self, plugins: list[Plugin] | None = None) -> None:
        self._plugins = list(plugins or [])

    @property
    def plugins(self) -> list[Plugin]:
        return list(self._plugins)

    async def run(self, api_name: str, payload: dict[str, Any]) -> list[Any]:
        results: list[Any] = []
        for plugin in self._plugins:
            hook = plugin.apis.get(api_name)
            if hook is None:
                continue
            logger.debug("running {} for plugin {}", api_name, plugin.name)
            result = hook(**payload)
            if inspect.isawaitable(result):
                result = await result
            if result is not None:
                results.append(result)
        return results
