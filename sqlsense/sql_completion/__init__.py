"""SQL completion engine.

Provides context-aware SQL autocompletion with:
- Statement and parenthesis-depth scope isolation
- Clause context detection (FROM, WHERE, SET, INSERT column lists, ...)
- Alias recognition (FROM hr.emp e -> e. suggests emp columns)
- Schema, table, column, keyword, operator and builtin function candidates
- UPDATE ... SET and INSERT INTO ... ( snippets
- ${scope.key} workflow variable references
- Whole-document scans: hover text, semantic tokens, DDL warnings
"""

from sqlsense.domains.query.completion.builtins import DB_LANGUAGES, DEFAULT_BUILTINS, language_for
from sqlsense.domains.query.completion.catalog import CatalogHandle, CatalogIndex, TableEntry
from sqlsense.domains.query.completion.completion import (
    CompletionEngine,
    EngineSnapshot,
    dedupe_candidates,
    dot_path_completions,
    filter_by_typed_prefix,
    get_completions,
)
from sqlsense.domains.query.completion.context import SqlContext, classify_context, detect_context
from sqlsense.domains.query.completion.core import (
    DEFAULT_KEYWORDS,
    DEFAULT_OPERATORS,
    LOGICAL_KEYWORDS,
    RESERVED_WORDS,
    BuiltinFunction,
    CompletionCandidate,
    CompletionKind,
    CompletionRequest,
    IntellisenseConfig,
    Schema,
    SnippetPlaceholder,
    Table,
    TableRef,
    WorkflowVariable,
)
from sqlsense.domains.query.completion.document import (
    DdlWarning,
    HoverInfo,
    SemanticToken,
    SemanticTokenType,
    encode_semantic_tokens,
    find_ddl_warnings,
    hover_info,
    scan_semantic_tokens,
)
from sqlsense.domains.query.completion.exceptions import CatalogConfigError
from sqlsense.domains.query.completion.scope import (
    analyze_scope,
    compute_depth,
    enclosing_opens,
    extract_scope,
    scope_start,
)
from sqlsense.domains.query.completion.statement import (
    current_statement,
    get_current_word,
    is_inside_string,
    mask_comments,
    strip_string_literals,
)
from sqlsense.domains.query.completion.tables import TableResolution, resolve_table_refs

__all__ = [
    # Main API
    "CompletionEngine",
    "get_completions",
    # Types
    "BuiltinFunction",
    "CatalogConfigError",
    "CatalogHandle",
    "CatalogIndex",
    "CompletionCandidate",
    "CompletionKind",
    "CompletionRequest",
    "DdlWarning",
    "EngineSnapshot",
    "HoverInfo",
    "IntellisenseConfig",
    "Schema",
    "SemanticToken",
    "SemanticTokenType",
    "SnippetPlaceholder",
    "SqlContext",
    "Table",
    "TableEntry",
    "TableRef",
    "TableResolution",
    "WorkflowVariable",
    # Constants
    "DB_LANGUAGES",
    "DEFAULT_BUILTINS",
    "DEFAULT_KEYWORDS",
    "DEFAULT_OPERATORS",
    "LOGICAL_KEYWORDS",
    "RESERVED_WORDS",
    # Helper functions (public)
    "analyze_scope",
    "classify_context",
    "compute_depth",
    "current_statement",
    "dedupe_candidates",
    "detect_context",
    "dot_path_completions",
    "enclosing_opens",
    "encode_semantic_tokens",
    "extract_scope",
    "filter_by_typed_prefix",
    "find_ddl_warnings",
    "get_current_word",
    "hover_info",
    "is_inside_string",
    "language_for",
    "mask_comments",
    "resolve_table_refs",
    "scan_semantic_tokens",
    "scope_start",
    "strip_string_literals",
]
