"""Main SQL completion engine.

Orchestrates variable, dot-path and clause-context detection and combines
the generators' output into one filtered, deduplicated candidate list.
"""

from __future__ import annotations

import copy
import logging
import re
import threading
from collections.abc import Iterable
from dataclasses import dataclass

from .catalog import CatalogHandle, CatalogIndex
from .context import SqlContext, detect_context
from .document import (
    DdlWarning,
    HoverInfo,
    SemanticToken,
    find_ddl_warnings,
    hover_info,
    scan_semantic_tokens,
    word_at_cursor,
)
from .core import (
    LOGICAL_KEYWORDS,
    CompletionCandidate,
    CompletionRequest,
    IntellisenseConfig,
    TableRef,
)
from .scope import Scope, analyze_scope, resolver_text
from .snippets import suggest_insert_columns, suggest_update_set_snippets
from .statement import (
    current_statement,
    get_current_word,
    is_inside_comment,
    is_inside_string,
    mask_comments,
    statement_continuation,
    strip_string_literals,
)
from .suggestions import (
    suggest_builtins,
    suggest_columns_for_table,
    suggest_columns_from_active_tables,
    suggest_keywords,
    suggest_operators,
    suggest_schema_tables,
    suggest_schemas,
    suggest_tables,
)
from .tables import TableResolution, resolve_table_refs
from .variables import detect_variable_context, suggest_workflow_variables

logger = logging.getLogger(__name__)

# Trailing identifier-and-dot run before the cursor
_DOT_PATH = re.compile(r"[\w$.]+$")

UPDATE_KEYWORDS = ["UPDATE", "SET", "WHERE"]


def filter_by_typed_prefix(
    candidates: Iterable[CompletionCandidate], prefix: str
) -> list[CompletionCandidate]:
    """Drop candidates whose label does not start with the typed word.

    Dotted labels (`alias.column`) are always kept.
    """
    typed = prefix.upper()
    if not typed:
        return list(candidates)
    return [
        candidate
        for candidate in candidates
        if "." in candidate.label or candidate.label.upper().startswith(typed)
    ]


def dedupe_candidates(candidates: Iterable[CompletionCandidate]) -> list[CompletionCandidate]:
    """Keep one candidate per label.

    A repeated label keeps the position of its first occurrence and the
    value of its last.
    """
    unique: dict[str, CompletionCandidate] = {}
    for candidate in candidates:
        if candidate.label:
            unique[candidate.label] = candidate
    return list(unique.values())


def dot_path_completions(
    text_before_cursor: str, index: CatalogIndex, resolution: TableResolution
) -> list[CompletionCandidate] | None:
    """Completions for `schema.`, `alias.`, `schema.table.` and longer paths.

    Args:
        text_before_cursor: Raw text up to the cursor.
        index: Catalog snapshot.
        resolution: Table references of the cursor's scope.

    Returns:
        The candidates for a matched path (possibly empty), or None when the
        text does not end in a path the catalog or the scope knows.
    """
    match = _DOT_PATH.search(text_before_cursor)
    if match is None or "." not in match.group(0):
        return None

    *qualifiers, partial = match.group(0).split(".")
    if not qualifiers or not all(qualifiers):
        return None

    if len(qualifiers) == 1:
        name = qualifiers[0]
        if index.find_schema(name) is not None:
            logger.debug("Dot path: tables of schema %s", name)
            return suggest_schema_tables(index, name)
        ref = resolution.lookup(name)
        if ref is not None:
            logger.debug("Dot path: alias %s -> %s", name, ref.qualified_name)
            return suggest_columns_for_table(index, ref)
        entry = index.find_table(name)
        if entry is not None:
            logger.debug("Dot path: columns of table %s", entry.qualified_name)
            return suggest_columns_for_table(index, TableRef(table=entry.table.name, schema=entry.schema))
        return None

    if len(qualifiers) == 2 and not partial:
        ref = resolution.lookup(qualifiers[0])
        if ref is not None:
            return suggest_columns_for_table(index, ref)
        if index.find_table(qualifiers[1], qualifiers[0]) is not None:
            return suggest_columns_for_table(index, TableRef(table=qualifiers[1], schema=qualifiers[0]))
        return None

    schema_name, table_name = qualifiers[0], qualifiers[1]
    logger.debug("Dot path: columns of %s.%s", schema_name, table_name)
    return suggest_columns_for_table(index, TableRef(table=table_name, schema=schema_name))


@dataclass(frozen=True)
class CursorAnalysis:
    """What the cursor is inside, derived from the current statement.

    Attributes:
        statement: Current statement up to the cursor, comments blanked.
        scope: The cursor's parenthesis level.
        context: Classified clause context.
        clause_scope: Level the context was read from.
        resolution: Table references visible from clause_scope.
    """

    statement: str
    scope: Scope
    context: SqlContext
    clause_scope: Scope
    resolution: TableResolution


def analyze_cursor(text_before_cursor: str, text_after_cursor: str = "") -> CursorAnalysis | None:
    """Segment, scope, classify and resolve the statement at the cursor.

    Args:
        text_before_cursor: Raw text up to the cursor.
        text_after_cursor: Raw text after the cursor; only the rest of the
            current statement is used, to find tables declared later.

    Returns:
        The analysis, or None when the cursor is inside a string literal
        or a comment.
    """
    statement = current_statement(mask_comments(text_before_cursor))
    if is_inside_string(statement) or is_inside_comment(text_before_cursor):
        return None

    scope = analyze_scope(strip_string_literals(statement))
    context, clause_scope = detect_context(scope)

    continuation = ""
    if text_after_cursor:
        continuation = strip_string_literals(statement_continuation(mask_comments(text_after_cursor)))
    resolution = resolve_table_refs(resolver_text(clause_scope, continuation).upper())
    logger.debug(
        "Context %s at depth %d, tables=%s",
        context.value,
        scope.depth,
        sorted(resolution.table_map),
    )
    return CursorAnalysis(
        statement=statement,
        scope=scope,
        context=context,
        clause_scope=clause_scope,
        resolution=resolution,
    )


def _active_columns_or_catalog(
    index: CatalogIndex, resolution: TableResolution
) -> list[CompletionCandidate]:
    if resolution.has_tables:
        return suggest_columns_from_active_tables(index, resolution.table_map)
    return suggest_schemas(index) + suggest_tables(index)


def dispatch_context(
    context: SqlContext,
    index: CatalogIndex,
    config: IntellisenseConfig,
    resolution: TableResolution,
) -> list[CompletionCandidate]:
    """Run the generators that belong to a clause context, in order."""
    candidates: list[CompletionCandidate] = []

    if context == SqlContext.INSERT_COLS:
        if resolution.insert_target is not None:
            candidates += suggest_insert_columns(index, resolution.insert_target)
        else:
            candidates += suggest_keywords(config.keywords)
    elif context == SqlContext.UPDATE:
        candidates += suggest_tables(index)
        candidates += suggest_keywords(UPDATE_KEYWORDS)
    elif context == SqlContext.SET:
        target = resolution.update_target
        if target is not None:
            candidates += suggest_update_set_snippets(index, target)
            candidates += suggest_columns_for_table(index, target)
        elif resolution.has_tables:
            candidates += suggest_columns_from_active_tables(index, resolution.table_map)
        candidates += suggest_operators(config.operators)
        candidates += suggest_keywords(["WHERE"])
    elif context == SqlContext.DELETE:
        candidates += suggest_keywords(["FROM"])
        candidates += suggest_keywords(config.keywords)
    elif context in (SqlContext.FROM, SqlContext.JOIN, SqlContext.INTO):
        candidates += suggest_schemas(index)
        candidates += suggest_tables(index)
    elif context in (SqlContext.WHERE, SqlContext.HAVING, SqlContext.ON):
        candidates += suggest_columns_from_active_tables(index, resolution.table_map)
        candidates += suggest_operators(config.operators)
        candidates += suggest_keywords(LOGICAL_KEYWORDS)
    else:
        # SELECT, ORDER, GROUP and everything else
        candidates += _active_columns_or_catalog(index, resolution)
        candidates += suggest_keywords(config.keywords)
        candidates += suggest_builtins(config.builtins)

    return candidates


@dataclass(frozen=True)
class EngineSnapshot:
    """A configuration together with the catalog index built from it."""

    config: IntellisenseConfig
    index: CatalogIndex


class CompletionEngine:
    """Context-aware SQL completion over a catalog snapshot.

    The engine holds no per-request state. update_config() builds a new
    EngineSnapshot and swaps it in as one reference; requests already
    running keep the configuration and index they started with.
    The engine keeps its own copy of every configuration it is given.
    """

    def __init__(self, config: IntellisenseConfig | None = None) -> None:
        config = copy.deepcopy(config) if config is not None else IntellisenseConfig()
        self._catalog = CatalogHandle()
        self._update_lock = threading.Lock()
        self._snapshot = EngineSnapshot(
            config=config,
            index=self._catalog.rebuild(config.schemas, config.workflow_variables),
        )

    @property
    def config(self) -> IntellisenseConfig:
        return self._snapshot.config

    @property
    def catalog(self) -> CatalogHandle:
        return self._catalog

    def snapshot(self) -> EngineSnapshot:
        return self._snapshot

    def update_config(self, config: IntellisenseConfig) -> None:
        """Replace the configuration and rebuild the catalog index from it."""
        config = copy.deepcopy(config)
        with self._update_lock:
            index = self._catalog.rebuild(config.schemas, config.workflow_variables)
            self._snapshot = EngineSnapshot(config=config, index=index)

    def complete(self, request: CompletionRequest) -> list[CompletionCandidate]:
        """Get completion candidates for the text before the cursor.

        Args:
            request: Text around the cursor and the typed word prefix.

        Returns:
            Candidates in generator order, filtered and deduplicated.
        """
        snapshot = self._snapshot
        index, config = snapshot.index, snapshot.config
        text = request.text_before_cursor

        variable_context = detect_variable_context(text)
        if variable_context is not None:
            logger.debug(
                "Variable completion: scope=%r prefix=%r", variable_context.scope, variable_context.prefix
            )
            return dedupe_candidates(suggest_workflow_variables(index, variable_context))

        analysis = analyze_cursor(text, request.text_after_cursor)
        if analysis is None:
            logger.debug("Cursor inside a string literal or comment, no completions")
            return []
        resolution = analysis.resolution

        dotted = dot_path_completions(text, index, resolution)
        if dotted is not None:
            return dedupe_candidates(dotted)

        candidates = dispatch_context(analysis.context, index, config, resolution)
        candidates = dedupe_candidates(filter_by_typed_prefix(candidates, request.word_prefix))
        logger.debug("%d candidates for %s", len(candidates), analysis.context.value)
        return candidates

    def hover(self, request: CompletionRequest) -> HoverInfo | None:
        """Describe the builtin or schema whose name the cursor touches."""
        snapshot = self._snapshot
        word = word_at_cursor(request.text_before_cursor, request.text_after_cursor)
        return hover_info(word, snapshot.index, snapshot.config)

    def semantic_tokens(self, request: CompletionRequest) -> list[SemanticToken]:
        """Catalog names found anywhere in request.document_lines."""
        return scan_semantic_tokens(request.document_lines, self._snapshot.index)

    def ddl_warnings(self, request: CompletionRequest) -> list[DdlWarning]:
        """DDL keywords found anywhere in request.document_lines."""
        return find_ddl_warnings(request.document_lines)


def get_completions(
    sql: str,
    cursor_pos: int,
    config: IntellisenseConfig | None = None,
    word_prefix: str | None = None,
) -> list[CompletionCandidate]:
    """Get completion candidates for the given SQL and cursor position.

    Args:
        sql: The full SQL text
        cursor_pos: Position of cursor in the text
        config: Catalog and lexical configuration
        word_prefix: Typed word at the cursor; derived from the text when None

    Returns:
        List of completion candidates
    """
    if word_prefix is None:
        word_prefix = get_current_word(sql, cursor_pos)
    request = CompletionRequest(
        text_before_cursor=sql[:cursor_pos],
        word_prefix=word_prefix,
        document_lines=tuple(sql.splitlines()),
        text_after_cursor=sql[cursor_pos:],
    )
    return CompletionEngine(config).complete(request)
