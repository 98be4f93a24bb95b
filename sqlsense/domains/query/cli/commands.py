"""CLI completion command handlers."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape as escape_markup
from rich.syntax import Syntax
from rich.table import Table as RichTable
from rich.tree import Tree

from sqlsense.config import load_catalog
from sqlsense.domains.query.completion.builtins import language_for
from sqlsense.domains.query.completion.catalog import CatalogIndex
from sqlsense.domains.query.completion.completion import CompletionEngine, analyze_cursor
from sqlsense.domains.query.completion.core import (
    CompletionCandidate,
    CompletionRequest,
    IntellisenseConfig,
    iter_columns,
)
from sqlsense.domains.query.completion.statement import get_current_word


def load_config(args: Any) -> IntellisenseConfig:
    """Load the catalog named on the command line or in the settings.

    An explicit --catalog path is loaded strictly; the configured default
    catalog falls back to an empty one when missing or unreadable.
    """
    catalog_arg = getattr(args, "catalog", None)
    config = load_catalog(Path(catalog_arg) if catalog_arg else None, strict=bool(catalog_arg))
    db_type = getattr(args, "db_type", None)
    if db_type:
        config.database_type = db_type
    return config


def _read_sql(path: str | None) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def _resolve_cursor(sql: str, cursor: int | None) -> int:
    if cursor is None:
        return len(sql)
    if cursor < 0:
        cursor += len(sql)
    if cursor < 0 or cursor > len(sql):
        raise ValueError(f"cursor {cursor} is outside the text (0-{len(sql)})")
    return cursor


def _output_candidates(console: Console, candidates: list[CompletionCandidate]) -> None:
    table = RichTable(show_header=True, header_style="bold", box=None)
    table.add_column("Label")
    table.add_column("Kind", style="cyan")
    table.add_column("Insert")
    table.add_column("Detail", style="dim")
    for candidate in candidates:
        insert = candidate.to_snippet() if candidate.is_snippet else candidate.insert_text
        table.add_row(
            escape_markup(candidate.label),
            candidate.kind.name.lower(),
            escape_markup(insert),
            escape_markup(candidate.detail or ""),
        )
    console.print(table)
    console.print(f"\n({len(candidates)} candidate(s))", style="dim")


def cmd_complete(args: Any, console: Console | None = None) -> int:
    """Print completion candidates for a cursor position in a SQL text."""
    console = console or Console()
    sql = _read_sql(args.file)
    cursor = _resolve_cursor(sql, args.cursor)
    config = load_config(args)

    prefix = args.prefix if args.prefix is not None else get_current_word(sql, cursor)
    request = CompletionRequest(
        text_before_cursor=sql[:cursor],
        word_prefix=prefix,
        document_lines=tuple(sql.splitlines()),
        text_after_cursor=sql[cursor:],
    )
    candidates = CompletionEngine(config).complete(request)
    if args.limit and args.limit > 0:
        candidates = candidates[: args.limit]

    if args.json:
        print(json.dumps([c.to_dict() for c in candidates], indent=2))
    else:
        _output_candidates(console, candidates)
    return 0


def cmd_context(args: Any, console: Console | None = None) -> int:
    """Print the statement, scope, clause context and tables at the cursor."""
    console = console or Console()
    sql = _read_sql(args.file)
    cursor = _resolve_cursor(sql, args.cursor)
    config = load_config(args)

    analysis = analyze_cursor(sql[:cursor], sql[cursor:])
    if analysis is None:
        info: dict[str, Any] = {"context": None, "reason": "cursor is inside a string literal or comment"}
    else:
        resolution = analysis.resolution
        info = {
            "context": analysis.context.value,
            "depth": analysis.scope.depth,
            "scope": analysis.clause_scope.text.strip(),
            "tables": {key: ref.qualified_name for key, ref in resolution.table_map.items()},
            "updateTarget": resolution.update_target.qualified_name if resolution.update_target else None,
            "insertTarget": resolution.insert_target.qualified_name if resolution.insert_target else None,
        }

    if args.json:
        print(json.dumps(info, indent=2))
        return 0

    if analysis is None:
        console.print(f"[yellow]{info['reason']}[/]")
        return 0

    console.print(Syntax(analysis.statement.strip() or " ", "sql", word_wrap=True))
    table = RichTable(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Context", info["context"])
    table.add_row("Depth", str(info["depth"]))
    table.add_row("Language", language_for(config.database_type))
    for key, qualified in info["tables"].items():
        table.add_row(f"Table {escape_markup(key)}", escape_markup(qualified))
    if info["updateTarget"]:
        table.add_row("UPDATE target", escape_markup(info["updateTarget"]))
    if info["insertTarget"]:
        table.add_row("INSERT target", escape_markup(info["insertTarget"]))
    console.print(table)
    return 0


def cmd_catalog_show(args: Any, console: Console | None = None) -> int:
    """Print the loaded catalog as a tree of schemas, tables and columns."""
    console = console or Console()
    config = load_config(args)

    if args.json:
        print(json.dumps(config.to_dict(), indent=2))
        return 0

    index = CatalogIndex.build(config.schemas, config.workflow_variables)
    tree = Tree(f"[bold]Catalog[/] ({escape_markup(config.database_type)})")
    table_nodes: dict[tuple[str, str], Tree] = {}
    for schema in index.schemas:
        schema_node = tree.add(f"[bold]{escape_markup(schema.name)}[/] ({len(schema.tables)} tables)")
        for table in schema.tables:
            table_nodes[(schema.name, table.name)] = schema_node.add(
                f"{escape_markup(table.name)} [dim]({len(table.columns)} columns)[/]"
            )
    if args.columns:
        for schema, table, column in iter_columns(index.schemas):
            table_nodes[(schema.name, table.name)].add(escape_markup(column))

    scopes = index.scope_names()
    if scopes:
        variables = tree.add("[bold]Workflow variables[/]")
        for scope in scopes:
            keys = ", ".join(index.keys_for_scope(scope))
            variables.add(f"{escape_markup(scope)}: {escape_markup(keys)}")

    console.print(tree)
    return 0


def _document_request(sql: str, cursor: int) -> CompletionRequest:
    return CompletionRequest(
        text_before_cursor=sql[:cursor],
        document_lines=tuple(sql.splitlines()),
        text_after_cursor=sql[cursor:],
    )


def cmd_hover(args: Any, console: Console | None = None) -> int:
    """Print the description of the builtin or schema under the cursor."""
    console = console or Console()
    sql = _read_sql(args.file)
    cursor = _resolve_cursor(sql, args.cursor)
    info = CompletionEngine(load_config(args)).hover(_document_request(sql, cursor))

    if args.json:
        data = None if info is None else {"title": info.title, "contents": list(info.contents)}
        print(json.dumps(data, indent=2))
        return 0

    if info is None:
        console.print("[dim]Nothing to describe at the cursor[/]")
        return 0
    console.print(f"[bold]{escape_markup(info.title)}[/]")
    for line in info.contents:
        console.print(escape_markup(line))
    return 0


def cmd_tokens(args: Any, console: Console | None = None) -> int:
    """Print every schema, table and column name found in the SQL text."""
    console = console or Console()
    sql = _read_sql(args.file)
    tokens = CompletionEngine(load_config(args)).semantic_tokens(_document_request(sql, len(sql)))

    if args.json:
        data = [
            {"line": t.line, "start": t.start, "length": t.length, "type": t.token_type.name.lower()}
            for t in tokens
        ]
        print(json.dumps(data, indent=2))
        return 0

    lines = sql.splitlines()
    table = RichTable(show_header=True, header_style="bold", box=None)
    table.add_column("Line", justify="right")
    table.add_column("Col", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Name")
    for token in tokens:
        name = lines[token.line][token.start : token.start + token.length]
        table.add_row(
            str(token.line + 1),
            str(token.start + 1),
            token.token_type.name.lower(),
            escape_markup(name),
        )
    console.print(table)
    console.print(f"\n({len(tokens)} token(s))", style="dim")
    return 0


def cmd_lint(args: Any, console: Console | None = None) -> int:
    """Warn about DDL statements; exit 1 when any are found."""
    console = console or Console()
    sql = _read_sql(args.file)
    warnings = CompletionEngine().ddl_warnings(_document_request(sql, len(sql)))

    if args.json:
        data = [
            {
                "line": w.line,
                "column": w.column,
                "endColumn": w.end_column,
                "keyword": w.keyword,
                "message": w.message,
            }
            for w in warnings
        ]
        print(json.dumps(data, indent=2))
    else:
        name = "<stdin>" if args.file in (None, "-") else args.file
        for warning in warnings:
            console.print(
                f"{escape_markup(name)}:{warning.line}:{warning.column}: "
                f"[yellow]warning[/]: {escape_markup(warning.message)} ({warning.keyword})"
            )
        if not warnings:
            console.print("[green]No DDL found[/]")
    return 1 if warnings else 0
