"""Main CLI entry point for the xmlx command-line tool.

Provides commands to reformat XML files, run qualified-name queries against
them and check them for well-formedness.
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from xmlx import __version__
from xmlx.api import Document
from xmlx.shared import SerializerConfig, XMLxError, configure_logging, get_logger
from xmlx.tree import iter_elements

OUTPUT_FORMATS = ("json", "text")
SELECT_FORMATS = ("xml", "json", "text")
EXIT_INTERRUPTED = 130


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self) -> None:
        self.indent_prefix = ""
        self.save_doctype = True
        self.extended_entities = False
        self.output_format = "text"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        Missing keys keep their defaults. An unreadable file is reported on
        stderr and the defaults are used.
        """
        config = cls()
        try:
            with config_path.open() as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            print(f"Warning: Could not load config file: {e}", file=sys.stderr)
            return config

        config.indent_prefix = data.get("indent_prefix", config.indent_prefix)
        config.save_doctype = data.get("save_doctype", config.save_doctype)
        config.extended_entities = data.get("extended_entities", config.extended_entities)
        config.output_format = data.get("output_format", config.output_format)
        return config

    @property
    def serializer_config(self) -> SerializerConfig:
        return SerializerConfig(indent_prefix=self.indent_prefix)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xmlx",
        description="Load, query and re-serialize XML documents"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Format command
    format_parser = subparsers.add_parser("format", help="Load and re-serialize an XML file")
    format_parser.add_argument("path", type=Path, help="XML file to format")
    format_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    format_parser.add_argument(
        "--indent",
        type=int,
        help="Spaces per nesting level; 0 writes minified output"
    )
    format_parser.add_argument(
        "--no-declaration",
        action="store_true",
        help="Do not write the XML declaration"
    )
    format_parser.add_argument(
        "--extended-entities",
        action="store_true",
        help="Recognise the HTML 4 named character entities"
    )

    # Select command
    select_parser = subparsers.add_parser("select", help="Print elements matching a name")
    select_parser.add_argument("path", type=Path, help="XML file to query")
    select_parser.add_argument("name", help="Local name of the elements to select")
    select_parser.add_argument(
        "--namespace", "-n",
        default="",
        help="Namespace alias or URI of the elements to select (default: none)"
    )
    select_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Search the whole document instead of top-level elements only"
    )
    select_parser.add_argument(
        "--first",
        action="store_true",
        help="Print only the first match"
    )
    select_parser.add_argument(
        "--format", "-f",
        choices=SELECT_FORMATS,
        default="xml",
        help="Output format (default: xml)"
    )

    # Check command
    check_parser = subparsers.add_parser("check", help="Check XML files for well-formedness")
    check_parser.add_argument("paths", nargs="+", type=Path, help="XML files to check")
    check_parser.add_argument(
        "--format", "-f",
        choices=OUTPUT_FORMATS,
        help="Output format (default: from config, else text)"
    )

    return parser


def load_document(path: Path, config: CLIConfig, extended_entities: bool = False) -> Document:
    """Load ``path`` into a Document configured from ``config``."""
    document = Document(
        save_doctype=config.save_doctype,
        serializer_config=config.serializer_config
    )
    if extended_entities or config.extended_entities:
        document.load_extended_entity_map()
    document.load_file(path)
    return document


def check_file(path: Path, config: CLIConfig) -> Dict[str, Any]:
    """Check a single file and return a result record."""
    start_time = time.time()
    try:
        document = load_document(path, config)
    except (XMLxError, OSError) as e:
        return {
            "file": str(path),
            "well_formed": False,
            "error": str(e),
            "processing_time_ms": (time.time() - start_time) * 1000,
        }

    return {
        "file": str(path),
        "well_formed": True,
        "element_count": sum(1 for _ in iter_elements(document.root)),
        "processing_time_ms": (time.time() - start_time) * 1000,
    }


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format check results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if not results:
        return "No results to display."

    lines = []
    well_formed = sum(1 for r in results if r.get("well_formed", False))
    lines.append(f"Checked {len(results)} files, {well_formed} well-formed")
    lines.append("-" * 60)

    for result in results:
        if result.get("well_formed", False):
            lines.append(f"✓ {result['file']}")
            lines.append(
                f"   Elements: {result.get('element_count', 0)}, "
                f"Time: {result.get('processing_time_ms', 0):.1f}ms"
            )
        else:
            lines.append(f"✗ {result['file']}")
            lines.append(f"   Error: {result.get('error', '')}")

    return "\n".join(lines)


def cmd_format(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle format command."""
    if args.indent is not None:
        if args.indent < 0:
            print("Error: --indent must not be negative", file=sys.stderr)
            return 2
        config.indent_prefix = " " * args.indent
    if args.no_declaration:
        config.save_doctype = False

    try:
        document = load_document(args.path, config, args.extended_entities)
        if args.output:
            document.save_file(args.output)
            print(f"Formatted XML written to {args.output}", file=sys.stderr)
        else:
            print(document.save_string())
    except (XMLxError, OSError) as e:
        print(f"Error: {args.path}: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_select(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle select command."""
    try:
        document = load_document(args.path, config)
    except (XMLxError, OSError) as e:
        print(f"Error: {args.path}: {e}", file=sys.stderr)
        return 1

    # A declared namespace URI is accepted in place of its alias
    namespace = document.namespaces.resolve(args.namespace)
    if args.recursive:
        matches = document.select_nodes_recursive(namespace, args.name)
    else:
        matches = document.select_nodes(namespace, args.name)
    if args.first:
        matches = matches[:1]

    if args.format == "json":
        print(json.dumps([node.to_dict() for node in matches], indent=2))
    elif args.format == "text":
        for node in matches:
            print(node.text)
    else:
        for node in matches:
            print(node.to_bytes(config.serializer_config).decode("utf-8"))

    return 0 if matches else 1


def cmd_check(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle check command."""
    results = [check_file(path, config) for path in args.paths]
    print(format_results(results, args.format or config.output_format))

    well_formed = sum(1 for r in results if r.get("well_formed", False))
    return 0 if well_formed == len(results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.ERROR)
    else:
        configure_logging(logging.WARNING)

    config = CLIConfig.from_file(args.config) if args.config else CLIConfig()
    logger = get_logger(__name__, None, "cli")
    logger.debug("Running command", extra={"command": args.command})

    # Route to appropriate command handler
    try:
        if args.command == "format":
            return cmd_format(args, config)
        elif args.command == "select":
            return cmd_select(args, config)
        elif args.command == "check":
            return cmd_check(args, config)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
