# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the TypeBridge command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from typebridge.codegen.generator import generate_typescript
from typebridge.codegen.type_mapper import UnsupportedTypeError
from typebridge.model.resources import GraphError, ResourceGraph
from typebridge.validation.checks import validate
from typebridge.workspace.config import (
    CONFIG_FILE_NAME,
    GeneratorConfig,
    GeneratorConfigError,
    load_generator_config,
)
from typebridge.workspace.graph_file import GraphFileError, load_graph

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the TypeBridge CLI."""
    parser = argparse.ArgumentParser(
        prog="typebridge",
        description="TypeBridge: TypeScript types from resource metadata graphs",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Create a generator configuration file",
        description=f"Write a default {CONFIG_FILE_NAME} into a directory.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to create the configuration in (default: current directory)",
    )

    # generate subcommand
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate TypeScript types from a graph file",
        description="Validate the graph and write the generated TypeScript file.",
    )
    generate_parser.add_argument("graph", help="Path to the YAML resource graph")
    _add_config_argument(generate_parser)
    generate_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Output file (default: 'output-file' from the configuration)",
    )
    _add_verbose_argument(generate_parser)

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check a graph file without generating",
        description="Run the verification checks on a resource graph.",
    )
    check_parser.add_argument("graph", help="Path to the YAML resource graph")
    _add_config_argument(check_parser)
    _add_verbose_argument(check_parser)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if getattr(args, "verbose", False):
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################

_DEFAULT_CONFIG = (
    "# TypeBridge generator configuration\n"
    "output-file: generated.ts\n"
    "# Resources exposed to the client; empty means every standalone resource.\n"
    "root-resources: []\n"
    "field-formatter: camel_case\n"
    "warn-on-unexposed-references: true\n"
)


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help=f"Generator configuration (default: ./{CONFIG_FILE_NAME} if present)",
    )


def _add_verbose_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "generate":
        return _cmd_generate(args)
    if args.command == "check":
        return _cmd_check(args)
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_file = directory / CONFIG_FILE_NAME
    if config_file.exists():
        print(f"Error: configuration already exists at '{config_file}'.", file=sys.stderr)
        return 1

    config_file.write_text(_DEFAULT_CONFIG, encoding="utf-8")
    print(f"Created TypeBridge configuration at '{config_file}'.")
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    loaded = _load_inputs(args)
    if loaded is None:
        return 1
    graph, config = loaded

    if not _report(graph, config):
        return 1

    try:
        source = generate_typescript(graph, config)
    except (UnsupportedTypeError, GraphError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    output = Path(args.output if args.output is not None else config.output_file)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(source, encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot write '{output}': {exc}", file=sys.stderr)
        return 1

    print(f"Wrote TypeScript types to '{output}'.")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    loaded = _load_inputs(args)
    if loaded is None:
        return 1
    graph, config = loaded

    if not _report(graph, config):
        return 1

    print("No issues found.")
    return 0


def _load_inputs(args: argparse.Namespace) -> tuple[ResourceGraph, GeneratorConfig] | None:
    """Load the configuration and the graph, printing an error and returning None on failure."""
    if args.config is not None:
        config_path: Path | None = Path(args.config)
    else:
        default_path = Path.cwd() / CONFIG_FILE_NAME
        config_path = default_path if default_path.exists() else None

    try:
        config = load_generator_config(config_path) if config_path is not None else GeneratorConfig()
        graph = load_graph(Path(args.graph))
    except (GeneratorConfigError, GraphFileError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None
    return graph, config


def _report(graph: ResourceGraph, config: GeneratorConfig) -> bool:
    """Run validation, print its findings, and return True if there were no errors."""
    result = validate(graph, config)
    for warning in result.warnings:
        print(f"Warning: {warning.message}")
    for error in result.errors:
        print(f"Error: {error.message}", file=sys.stderr)
    return not result.has_errors
