"""Core SQL completion types and lexical tables.

Shared data model for the completion engine: catalog entities, resolved
table references, completion candidates, and the request/config values
passed in by the host editor.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from .exceptions import CatalogConfigError


class CompletionKind(Enum):
    """Kinds of completion candidates, mirrored by host editors."""

    KEYWORD = auto()
    OPERATOR = auto()
    FIELD = auto()
    CLASS = auto()
    MODULE = auto()
    FUNCTION = auto()
    VARIABLE = auto()
    SNIPPET = auto()


@dataclass(frozen=True)
class Table:
    """A relation with an ordered list of column names."""

    name: str
    columns: tuple[str, ...] = ()


@dataclass(frozen=True)
class Schema:
    """A named namespace containing tables."""

    name: str
    tables: tuple[Table, ...] = ()


@dataclass(frozen=True)
class WorkflowVariable:
    """A `${scope.key}` variable provided by the workflow catalog."""

    scope: str
    variable_key: str


@dataclass(frozen=True)
class BuiltinFunction:
    """A database-specific function offered for completion."""

    name: str
    description: str = ""
    sample_usage: str = ""


@dataclass(frozen=True)
class TableRef:
    """A table reference resolved from SQL text."""

    table: str
    schema: str | None = None
    derived: bool = False  # FROM ( subquery ) alias

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.table}" if self.schema else self.table

    @property
    def lookup_key(self) -> str:
        """Key into the catalog's table index."""
        return self.qualified_name.upper()


@dataclass(frozen=True)
class SnippetPlaceholder:
    """A tab stop inside a snippet candidate.

    `offset` is the position in the candidate's insert text where the
    placeholder's default text starts.
    """

    index: int
    default_text: str
    offset: int = 0


@dataclass(frozen=True)
class CompletionCandidate:
    """One completion suggestion returned to the host editor."""

    label: str
    insert_text: str
    kind: CompletionKind
    detail: str | None = None
    is_snippet: bool = False
    snippet_placeholders: tuple[SnippetPlaceholder, ...] = ()

    def to_snippet(self) -> str:
        """Render the insert text in `${n:default}` tab-stop syntax.

        Plain candidates are escaped so hosts can always insert as snippet.
        """
        if not self.is_snippet:
            return _escape_snippet_text(self.insert_text)

        parts: list[str] = []
        position = 0
        for placeholder in sorted(self.snippet_placeholders, key=lambda p: p.offset):
            parts.append(_escape_snippet_text(self.insert_text[position : placeholder.offset]))
            parts.append(f"${{{placeholder.index}:{_escape_snippet_text(placeholder.default_text)}}}")
            position = placeholder.offset + len(placeholder.default_text)
        parts.append(_escape_snippet_text(self.insert_text[position:]))
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: dict[str, Any] = {
            "label": self.label,
            "insertText": self.insert_text,
            "kind": self.kind.name.lower(),
            "isSnippet": self.is_snippet,
        }
        if self.detail is not None:
            data["detail"] = self.detail
        if self.is_snippet:
            data["snippet"] = self.to_snippet()
            data["placeholders"] = [
                {"index": p.index, "defaultText": p.default_text, "offset": p.offset}
                for p in self.snippet_placeholders
            ]
        return data


def _escape_snippet_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("$", "\\$").replace("}", "\\}")


@dataclass(frozen=True)
class CompletionRequest:
    """Input for a single completion request.

    Attributes:
        text_before_cursor: Document text from the start up to the cursor.
        word_prefix: Partial identifier being typed (host word detection).
        document_lines: Whole buffer, read by the document scans
            (semantic tokens, DDL warnings).
        text_after_cursor: Document text after the cursor, used only to
            resolve table references declared later in the statement.
    """

    text_before_cursor: str
    word_prefix: str = ""
    document_lines: Sequence[str] = ()
    text_after_cursor: str = ""


# SQL keywords offered when the host supplies no keyword table
DEFAULT_KEYWORDS = [
    "SELECT",
    "FROM",
    "WHERE",
    "GROUP BY",
    "ORDER BY",
    "HAVING",
    "JOIN",
    "LEFT JOIN",
    "RIGHT JOIN",
    "FULL JOIN",
    "INNER JOIN",
    "OUTER JOIN",
    "ON",
    "INSERT",
    "INTO",
    "VALUES",
    "UPDATE",
    "SET",
    "DELETE",
    "DISTINCT",
    "AS",
    "AND",
    "OR",
    "NOT",
    "IN",
    "EXISTS",
    "LIKE",
    "BETWEEN",
    "IS",
    "NULL",
    "UNION",
    "UNION ALL",
    "INTERSECT",
    "MINUS",
    "CASE",
    "WHEN",
    "THEN",
    "ELSE",
    "END",
    "WITH",
    "LIMIT",
    "OFFSET",
    "FETCH",
    "FIRST",
    "ROWS",
    "ONLY",
    "OVER",
    "PARTITION BY",
]

DEFAULT_OPERATORS = [
    "=",
    "!=",
    "<>",
    ">",
    ">=",
    "<",
    "<=",
    "+",
    "-",
    "*",
    "/",
    "%",
    "||",
    "(",
    ")",
    ",",
    ".",
    ";",
]

# Condition keywords offered in WHERE / HAVING / ON
LOGICAL_KEYWORDS = ["AND", "OR", "NOT", "IN", "EXISTS", "LIKE", "BETWEEN", "IS", "NULL"]

# Reserved words that cannot be aliases
RESERVED_WORDS = {
    "select",
    "from",
    "where",
    "join",
    "inner",
    "outer",
    "left",
    "right",
    "cross",
    "full",
    "on",
    "and",
    "or",
    "not",
    "in",
    "as",
    "order",
    "by",
    "group",
    "having",
    "union",
    "intersect",
    "except",
    "minus",
    "limit",
    "offset",
    "fetch",
    "insert",
    "into",
    "values",
    "update",
    "set",
    "delete",
    "case",
    "when",
    "then",
    "else",
    "end",
    "null",
    "is",
    "like",
    "between",
    "exists",
    "distinct",
    "all",
    "top",
    "with",
    "asc",
    "desc",
    "natural",
    "using",
    "window",
    "returning",
}


@dataclass
class IntellisenseConfig:
    """Catalog and lexical configuration consumed by the engine."""

    database_type: str = "oracle"
    schemas: list[Schema] = field(default_factory=list)
    builtins_by_database_type: dict[str, list[BuiltinFunction]] = field(default_factory=lambda: _default_builtins())
    keywords: list[str] = field(default_factory=lambda: list(DEFAULT_KEYWORDS))
    operators: list[str] = field(default_factory=lambda: list(DEFAULT_OPERATORS))
    workflow_variables: list[WorkflowVariable] = field(default_factory=list)

    @property
    def builtins(self) -> list[BuiltinFunction]:
        """Builtin functions for the active database type, matched case-insensitively."""
        wanted = normalize_database_type(self.database_type)
        for db_type, functions in self.builtins_by_database_type.items():
            if normalize_database_type(db_type) == wanted:
                return functions
        return []

    @classmethod
    def from_dict(
        cls, data: Any, *, strict: bool = False, default_database_type: str = "oracle"
    ) -> IntellisenseConfig:
        """Create from a JSON-style dictionary.

        Accepts both camelCase (`databaseType`, `workflowVariables`) and
        snake_case keys. Missing lexical tables fall back to the defaults.

        Args:
            data: Parsed JSON object.
            strict: Raise CatalogConfigError on structural problems instead
                of skipping the offending entries.
            default_database_type: Database type when the document names none.

        Returns:
            The parsed configuration.
        """
        if not isinstance(data, Mapping):
            if strict:
                raise CatalogConfigError("catalog must be a JSON object")
            return cls(database_type=default_database_type)

        database_type = _first(data, "databaseType", "database_type", "dbType")
        builtins_data = _first(data, "builtins", "dbBuiltins", "builtins_by_database_type")
        keywords = _first(data, "keywords", "sqlKeywords")
        operators = _first(data, "operators", "sqlOperators")

        return cls(
            database_type=str(database_type) if database_type else default_database_type,
            schemas=_parse_schemas(_first(data, "schemas", "metadata"), strict),
            builtins_by_database_type=(
                _parse_builtins(builtins_data, strict)
                if builtins_data is not None
                else _default_builtins()
            ),
            keywords=_string_list(keywords) if keywords is not None else list(DEFAULT_KEYWORDS),
            operators=_string_list(operators) if operators is not None else list(DEFAULT_OPERATORS),
            workflow_variables=_parse_workflow_variables(
                _first(data, "workflowVariables", "workflow_variables", "workflowVars")
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "databaseType": self.database_type,
            "schemas": [
                {
                    "name": schema.name,
                    "tables": [{"name": t.name, "columns": list(t.columns)} for t in schema.tables],
                }
                for schema in self.schemas
            ],
            "builtins": {
                db_type: [
                    {"name": fn.name, "description": fn.description, "sample": fn.sample_usage}
                    for fn in functions
                ]
                for db_type, functions in self.builtins_by_database_type.items()
            },
            "keywords": list(self.keywords),
            "operators": list(self.operators),
            "workflowVariables": [
                {"scope": v.scope, "variableKey": v.variable_key} for v in self.workflow_variables
            ],
        }


def normalize_database_type(database_type: str) -> str:
    """Canonical spelling of a database type name (`ORACLE ` -> `oracle`)."""
    return database_type.strip().lower()


def _default_builtins() -> dict[str, list[BuiltinFunction]]:
    from .builtins import DEFAULT_BUILTINS

    return {db_type: list(functions) for db_type, functions in DEFAULT_BUILTINS.items()}


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, str) and item]


def _parse_schemas(value: Any, strict: bool) -> list[Schema]:
    if value is None:
        return []
    if not isinstance(value, list):
        if strict:
            raise CatalogConfigError("'schemas' must be a list")
        return []

    schemas: list[Schema] = []
    for raw_schema in value:
        name = raw_schema.get("name") if isinstance(raw_schema, Mapping) else None
        if not isinstance(name, str) or not name.strip():
            if strict:
                raise CatalogConfigError(f"schema entry without a name: {raw_schema!r}")
            continue
        tables = _parse_tables(raw_schema.get("tables"), name, strict)
        schemas.append(Schema(name=name.strip(), tables=tuple(tables)))
    return schemas


def _parse_tables(value: Any, schema_name: str, strict: bool) -> list[Table]:
    if not isinstance(value, list):
        return []

    tables: list[Table] = []
    for raw_table in value:
        name = raw_table.get("name") if isinstance(raw_table, Mapping) else None
        if not isinstance(name, str) or not name.strip():
            if strict:
                raise CatalogConfigError(f"table without a name in schema {schema_name!r}")
            continue
        columns = tuple(_string_list(raw_table.get("columns")))
        tables.append(Table(name=name.strip(), columns=columns))
    return tables


def _parse_builtins(value: Any, strict: bool) -> dict[str, list[BuiltinFunction]]:
    if not isinstance(value, Mapping):
        if strict:
            raise CatalogConfigError("'builtins' must be an object keyed by database type")
        return {}

    result: dict[str, list[BuiltinFunction]] = {}
    for db_type, entries in value.items():
        functions: list[BuiltinFunction] = []
        for entry in entries if isinstance(entries, list) else []:
            if not isinstance(entry, Mapping) or not entry.get("name"):
                continue
            functions.append(
                BuiltinFunction(
                    name=str(entry["name"]),
                    description=str(entry.get("description", "")),
                    sample_usage=str(entry.get("sample", entry.get("sampleUsage", ""))),
                )
            )
        result[str(db_type)] = functions
    return result


def _parse_workflow_variables(value: Any) -> list[WorkflowVariable]:
    variables: list[WorkflowVariable] = []
    for entry in value if isinstance(value, list) else []:
        if not isinstance(entry, Mapping):
            continue
        scope = entry.get("scope")
        key = _first(entry, "variableKey", "variable_key", "key")
        if isinstance(scope, str) and isinstance(key, str):
            variables.append(WorkflowVariable(scope=scope, variable_key=key))
    return variables


def iter_columns(schemas: Iterable[Schema]) -> Iterable[tuple[Schema, Table, str]]:
    """Yield every (schema, table, column) triple in catalog order."""
    for schema in schemas:
        for table in schema.tables:
            for column in table.columns:
                yield schema, table, column
