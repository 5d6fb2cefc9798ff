# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the ``.graphcompose.yaml`` site configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from graphcompose.inference.infer import DEFAULT_CONFLICT_THRESHOLD, DEFAULT_SAMPLE_SIZE, InferenceOptions
from graphcompose.schema.printer import PrintConfig, PrintFilter

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".graphcompose.yaml"


class SiteConfigError(Exception):
    """Raised when a site configuration file is invalid or cannot be loaded."""


@dataclass
class InferenceConfig:
    """Inference tuning from the ``inference`` section."""

    sample_size: int = DEFAULT_SAMPLE_SIZE
    conflict_threshold: int = DEFAULT_CONFLICT_THRESHOLD

    def to_options(self) -> InferenceOptions:
        return InferenceOptions(sample_size=self.sample_size, conflict_threshold=self.conflict_threshold)


@dataclass
class SiteConfig:
    """The parsed configuration of a GraphCompose site.

    Attributes:
        cache_directory: Relative path (from the site root) for build output.
        type_defs: Relative paths of ``.graphql`` type-definition files.
        content: Relative paths of JSON/YAML content-record files.
        inference: Inference tuning.
        print_config: Type-definition printing, or ``None`` when disabled.
    """

    cache_directory: str = ".graphcompose-cache"
    type_defs: list[str] = field(default_factory=list)
    content: list[str] = field(default_factory=list)
    inference: InferenceConfig = field(default_factory=InferenceConfig)
    print_config: PrintConfig | None = None


def load_site_config(path: Path) -> SiteConfig:
    """Load and parse a site configuration file.

    Args:
        path: Path to the ``.graphcompose.yaml`` file.

    Returns:
        A SiteConfig instance populated from the file. Relative print paths
        are resolved against the file's directory.

    Raises:
        SiteConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SiteConfigError(f"Site config file not found: {path}") from None
    except OSError as exc:
        raise SiteConfigError(f"Cannot read site config file: {exc}") from exc

    config = _parse_site_config(text, source_label=str(path))
    if config.print_config is not None and not config.print_config.path.is_absolute():
        config.print_config = replace(config.print_config, path=path.parent / config.print_config.path)
    return config


# ################
# Implementation
# ################


def _parse_site_config(text: str, source_label: str = "<string>") -> SiteConfig:
    """Parse site config YAML text into a SiteConfig.

    An empty document yields the defaults.

    Raises:
        SiteConfigError: If the YAML is invalid or a field has the wrong shape.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SiteConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SiteConfigError(f"{source_label}: site config must be a YAML mapping")

    config = SiteConfig(
        type_defs=_optional_string_list(data, "type-defs", source_label),
        content=_optional_string_list(data, "content", source_label),
    )
    if "cache-directory" in data:
        config.cache_directory = _require_string(data, "cache-directory", source_label)
    if "inference" in data:
        config.inference = _parse_inference(data["inference"], f"{source_label}: inference")
    if "print" in data:
        config.print_config = _parse_print(data["print"], f"{source_label}: print")
    return config


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a required string field from a mapping, raising SiteConfigError if missing."""
    if key not in mapping:
        raise SiteConfigError(f"{source_label}: missing required field '{key}'")
    value = mapping[key]
    if not isinstance(value, str):
        raise SiteConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _optional_string_list(mapping: dict[str, object], key: str, source_label: str) -> list[str]:
    value = mapping.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise SiteConfigError(f"{source_label}: '{key}' must be a list of strings")
    return list(value)


def _positive_int(mapping: dict[str, object], key: str, default: int, location: str) -> int:
    value = mapping.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise SiteConfigError(f"{location}: '{key}' must be a positive integer")
    return value


def _parse_inference(entry: object, location: str) -> InferenceConfig:
    if not isinstance(entry, dict):
        raise SiteConfigError(f"{location} must be a YAML mapping")
    return InferenceConfig(
        sample_size=_positive_int(entry, "sample-size", DEFAULT_SAMPLE_SIZE, location),
        conflict_threshold=_positive_int(entry, "conflict-threshold", DEFAULT_CONFLICT_THRESHOLD, location),
    )


def _parse_print(entry: object, location: str) -> PrintConfig:
    if not isinstance(entry, dict):
        raise SiteConfigError(f"{location} must be a YAML mapping")
    path = _require_string(entry, "path", location)
    rewrite = entry.get("rewrite", False)
    if not isinstance(rewrite, bool):
        raise SiteConfigError(f"{location}: 'rewrite' must be a boolean")
    return PrintConfig(
        path=Path(path),
        rewrite=rewrite,
        include=_parse_print_filter(entry.get("include", {}), f"{location}.include"),
        exclude=_parse_print_filter(entry.get("exclude", {}), f"{location}.exclude"),
    )


def _parse_print_filter(entry: object, location: str) -> PrintFilter:
    if not isinstance(entry, dict):
        raise SiteConfigError(f"{location} must be a YAML mapping")
    return PrintFilter(
        types=tuple(_optional_string_list(entry, "types", location)),
        plugins=tuple(_optional_string_list(entry, "plugins", location)),
    )
