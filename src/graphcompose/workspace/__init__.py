# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Site configuration for GraphCompose."""

from graphcompose.workspace.config import (
    CONFIG_FILE_NAME,
    InferenceConfig,
    SiteConfig,
    SiteConfigError,
    load_site_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "InferenceConfig",
    "SiteConfig",
    "SiteConfigError",
    "load_site_config",
]
