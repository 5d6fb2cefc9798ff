# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the GraphCompose command-line interface."""

import argparse
import asyncio
import sys
from pathlib import Path

from graphql import print_schema
from loguru import logger

from graphcompose.diagnostics import Diagnostics
from graphcompose.errors import SchemaCompositionError
from graphcompose.inference.artifact import read_artifact, write_artifact
from graphcompose.inference.metadata import InferenceMetadataStore
from graphcompose.plugins import DEFAULT_SITE_PLUGIN, Plugin
from graphcompose.schema.builder import SchemaBuilder, TypeContribution
from graphcompose.schema.printer import print_schema_sdl
from graphcompose.store import ContentStoreError, MemoryContentStore, load_records
from graphcompose.workspace.config import CONFIG_FILE_NAME, SiteConfig, SiteConfigError, load_site_config

# ###############
# Public Interface
# ###############

SCHEMA_FILE_NAME = "schema.graphql"
METADATA_FILE_NAME = "inference-metadata.json"


def main() -> None:
    """Run the GraphCompose CLI."""
    parser = argparse.ArgumentParser(
        prog="graphcompose",
        description="GraphCompose: compose a GraphQL schema from type definitions and content",
    )
    parser.add_argument("--verbose", action="store_true", help="Log build progress to stderr")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Initialize a new GraphCompose site",
        description="Write a default site configuration file.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to initialize the site in (default: current directory)",
    )

    # build subcommand
    build_parser = subparsers.add_parser(
        "build",
        help="Build the schema",
        description="Build the schema and write it, with the inference metadata, to the cache directory.",
    )
    build_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the site (default: current directory)",
    )

    # print subcommand
    print_parser = subparsers.add_parser(
        "print",
        help="Print the composed type definitions",
        description="Build the schema and print every composed type as SDL to stdout.",
    )
    print_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the site (default: current directory)",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    _configure_logging(args.verbose)
    sys.exit(_dispatch(args))


# ################
# Implementation
# ################

_DEFAULT_CONFIG = (
    "# GraphCompose site configuration\n"
    "type-defs: []\n"
    "content: []\n"
    "cache-directory: .graphcompose-cache\n"
    "inference:\n"
    "  sample-size: 1000\n"
    "  conflict-threshold: 1\n"
)


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG")


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "build":
        return _cmd_build(args)
    if args.command == "print":
        return _cmd_print(args)
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_file = directory / CONFIG_FILE_NAME
    if config_file.exists():
        print(f"Error: site already exists at '{config_file}'.", file=sys.stderr)
        return 1

    config_file.write_text(_DEFAULT_CONFIG, encoding="utf-8")
    print(f"Initialized GraphCompose site at '{config_file}'.")
    return 0


def _cmd_build(args: argparse.Namespace) -> int:
    """Handle the build subcommand."""
    directory = Path(args.directory).resolve()
    config = _load_config(directory)
    if config is None:
        return 1
    builder = _build(directory, config)
    if builder is None:
        return 1

    cache_dir = directory / config.cache_directory
    cache_dir.mkdir(parents=True, exist_ok=True)
    assert builder.schema is not None
    schema_path = cache_dir / SCHEMA_FILE_NAME
    schema_path.write_text(print_schema(builder.schema) + "\n", encoding="utf-8")
    write_artifact(builder.metadata, cache_dir / METADATA_FILE_NAME)
    print(f"Schema written to '{schema_path}'.")
    return 0


def _cmd_print(args: argparse.Namespace) -> int:
    """Handle the print subcommand."""
    directory = Path(args.directory).resolve()
    config = _load_config(directory)
    if config is None:
        return 1
    builder = _build(directory, config)
    if builder is None:
        return 1
    print(print_schema_sdl(builder.registry), end="")
    return 0


def _load_config(directory: Path) -> SiteConfig | None:
    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return None

    config_file = directory / CONFIG_FILE_NAME
    if not config_file.exists():
        print(
            f"Error: no GraphCompose site found at '{directory}'. Run 'graphcompose init' to initialize a site.",
            file=sys.stderr,
        )
        return None

    try:
        return load_site_config(config_file)
    except SiteConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None


def _build(directory: Path, config: SiteConfig) -> SchemaBuilder | None:
    """Build the site's schema, printing diagnostics. Returns None on failure."""
    plugin = Plugin(DEFAULT_SITE_PLUGIN)
    types: list[TypeContribution] = []
    for relative in config.type_defs:
        path = directory / relative
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            print(f"Error: cannot read type definitions '{path}': {exc}", file=sys.stderr)
            return None
        types.append(TypeContribution(text, plugin=plugin, source=relative))

    try:
        store = MemoryContentStore(load_records(directory / relative for relative in config.content))
    except ContentStoreError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None

    metadata = InferenceMetadataStore()
    metadata_path = directory / config.cache_directory / METADATA_FILE_NAME
    if metadata_path.exists():
        try:
            metadata = read_artifact(metadata_path)
        except ValueError as exc:
            print(f"Warning: ignoring cached inference metadata: {exc}")

    diagnostics = Diagnostics()
    builder = SchemaBuilder(
        store,
        types,
        reporter=diagnostics,
        inference=config.inference.to_options(),
        metadata=metadata,
        print_config=config.print_config,
    )
    print(f"Building schema from {len(types)} type definition file(s) and {len(store)} record(s)...")
    try:
        asyncio.run(builder.build())
        failure = None
    except SchemaCompositionError as exc:
        failure = exc

    for warning in diagnostics.warnings:
        print(f"Warning: {warning}")
    for error in diagnostics.errors:
        print(f"Error: {error}", file=sys.stderr)
    if failure is not None:
        print(f"Error: {failure}", file=sys.stderr)
        return None
    if diagnostics.errors:
        return None
    return builder
