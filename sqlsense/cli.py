#!/usr/bin/env python3
"""sqlsense - Context-aware SQL completion from the command line."""

from __future__ import annotations

import argparse
import logging
import os
import sys

logger = logging.getLogger(__name__)


def _add_file_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "file",
        nargs="?",
        default="-",
        help="SQL file to read (default: stdin)",
    )


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    _add_file_argument(parser)
    parser.add_argument(
        "--cursor",
        "-c",
        type=int,
        metavar="OFFSET",
        help="Cursor offset in the text (default: end of text)",
    )


def _add_catalog_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--catalog",
        metavar="PATH",
        help="Catalog JSON file (overrides the catalog_path setting)",
    )
    parser.add_argument(
        "--db-type",
        metavar="TYPE",
        help="Database type for builtin functions (e.g. oracle, postgresql, mysql)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of a table",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqlsense",
        description="Context-aware SQL completion",
        epilog="Example: echo 'SELECT * FROM ' | sqlsense complete --catalog catalog.json",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--settings",
        metavar="PATH",
        help="Path to settings JSON file (overrides ~/.sqlsense/settings.json)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log engine decisions to stderr.",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    complete_parser = subparsers.add_parser("complete", help="List completions at a cursor position")
    _add_input_arguments(complete_parser)
    _add_catalog_arguments(complete_parser)
    complete_parser.add_argument(
        "--prefix",
        "-p",
        help="Typed word at the cursor (default: derived from the text)",
    )
    complete_parser.add_argument(
        "--limit",
        "-l",
        type=int,
        default=0,
        help="Maximum candidates to print (default: 0, unlimited)",
    )

    context_parser = subparsers.add_parser("context", help="Show the clause context at a cursor position")
    _add_input_arguments(context_parser)
    _add_catalog_arguments(context_parser)

    hover_parser = subparsers.add_parser("hover", help="Describe the builtin or schema at a cursor position")
    _add_input_arguments(hover_parser)
    _add_catalog_arguments(hover_parser)

    tokens_parser = subparsers.add_parser("tokens", help="List schema, table and column names in a SQL text")
    _add_file_argument(tokens_parser)
    _add_catalog_arguments(tokens_parser)

    lint_parser = subparsers.add_parser("lint", help="Warn about CREATE, ALTER and DROP statements")
    _add_file_argument(lint_parser)
    lint_parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of text",
    )

    catalog_parser = subparsers.add_parser("catalog", help="Inspect the completion catalog")
    catalog_parser.set_defaults(print_catalog_help=catalog_parser.print_help)
    catalog_subparsers = catalog_parser.add_subparsers(dest="catalog_command", help="Catalog commands")
    show_parser = catalog_subparsers.add_parser("show", help="Show schemas, tables and workflow variables")
    _add_catalog_arguments(show_parser)
    show_parser.add_argument(
        "--columns",
        action="store_true",
        help="Also list the columns of every table",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.settings:
        os.environ["SQLSENSE_SETTINGS_PATH"] = str(args.settings)

    from .shared.core.log import configure_logging

    configure_logging(verbose=args.verbose)

    from .domains.query.cli.commands import (
        cmd_catalog_show,
        cmd_complete,
        cmd_context,
        cmd_hover,
        cmd_lint,
        cmd_tokens,
    )

    try:
        if args.command == "complete":
            return cmd_complete(args)
        if args.command == "context":
            return cmd_context(args)
        if args.command == "hover":
            return cmd_hover(args)
        if args.command == "tokens":
            return cmd_tokens(args)
        if args.command == "lint":
            return cmd_lint(args)
        if args.command == "catalog":
            if args.catalog_command == "show":
                return cmd_catalog_show(args)
            args.print_catalog_help()
            return 1
    except (ValueError, OSError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
