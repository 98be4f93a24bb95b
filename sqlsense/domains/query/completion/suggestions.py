"""Candidate generators for catalog objects and lexical tables.

Each generator is a pure function of the catalog index (or a lexical
list) and returns candidates in catalog order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .catalog import CatalogIndex
from .core import BuiltinFunction, CompletionCandidate, CompletionKind, Schema, TableRef


def _schema_candidate(schema: Schema) -> CompletionCandidate:
    return CompletionCandidate(
        label=schema.name,
        insert_text=schema.name,
        kind=CompletionKind.MODULE,
        detail=f"{len(schema.tables)} tables",
    )


def suggest_schemas(index: CatalogIndex) -> list[CompletionCandidate]:
    return [_schema_candidate(schema) for schema in index.schemas]


def suggest_tables(index: CatalogIndex) -> list[CompletionCandidate]:
    """Every table as a schema-qualified `SCHEMA.TABLE` candidate."""
    candidates: list[CompletionCandidate] = []
    for schema in index.schemas:
        for table in schema.tables:
            qualified = f"{schema.name}.{table.name}"
            candidates.append(
                CompletionCandidate(
                    label=qualified,
                    insert_text=qualified,
                    kind=CompletionKind.CLASS,
                    detail=f"{len(table.columns)} columns",
                )
            )
    return candidates


def suggest_schema_tables(index: CatalogIndex, schema_name: str) -> list[CompletionCandidate]:
    """Bare table names of one schema, for `SCHEMA.` completion."""
    schema = index.find_schema(schema_name)
    if schema is None:
        return []
    return [
        CompletionCandidate(
            label=table.name,
            insert_text=table.name,
            kind=CompletionKind.CLASS,
            detail=f"{len(table.columns)} columns",
        )
        for table in schema.tables
    ]


def suggest_columns_for_table(index: CatalogIndex, ref: TableRef) -> list[CompletionCandidate]:
    """Bare column names of one table, detailed with their qualified name."""
    entry = index.find_table(ref.table, ref.schema)
    if entry is None or ref.derived:
        return []
    return [
        CompletionCandidate(
            label=column,
            insert_text=column,
            kind=CompletionKind.FIELD,
            detail=f"{entry.qualified_name}.{column}",
        )
        for column in entry.table.columns
    ]


def suggest_columns_from_active_tables(
    index: CatalogIndex, table_map: Mapping[str, TableRef]
) -> list[CompletionCandidate]:
    """Columns of every table referenced in the current scope.

    Each column is offered qualified by every key that reaches its table
    (`e.NAME`, `EMP.NAME`), plus once unqualified.
    """
    candidates: list[CompletionCandidate] = []
    seen: set[str] = set()
    for key, ref in table_map.items():
        for column in index.columns_for(ref):
            dotted = f"{key}.{column}"
            candidates.append(
                CompletionCandidate(
                    label=dotted,
                    insert_text=dotted,
                    kind=CompletionKind.FIELD,
                    detail=f"{ref.qualified_name}.{column}",
                )
            )
            if column not in seen:
                seen.add(column)
                candidates.append(
                    CompletionCandidate(
                        label=column,
                        insert_text=column,
                        kind=CompletionKind.FIELD,
                        detail=dotted,
                    )
                )
    return candidates


def suggest_keywords(keywords: Iterable[str]) -> list[CompletionCandidate]:
    return [
        CompletionCandidate(label=keyword, insert_text=keyword, kind=CompletionKind.KEYWORD)
        for keyword in keywords
    ]


def suggest_operators(operators: Iterable[str]) -> list[CompletionCandidate]:
    return [
        CompletionCandidate(label=operator, insert_text=operator, kind=CompletionKind.OPERATOR)
        for operator in operators
    ]


def suggest_builtins(functions: Iterable[BuiltinFunction]) -> list[CompletionCandidate]:
    """Builtin functions, inserted with an empty argument list."""
    return [
        CompletionCandidate(
            label=fn.name,
            insert_text=f"{fn.name}()",
            kind=CompletionKind.FUNCTION,
            detail=fn.description or fn.sample_usage or None,
        )
        for fn in functions
    ]
