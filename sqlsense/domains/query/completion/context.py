"""Clause context classification for the cursor position."""

from __future__ import annotations

import re
from collections.abc import Callable
from enum import Enum

from .scope import Scope, effective_scope


class SqlContext(Enum):
    """SQL clause the cursor is in."""

    NONE = "NONE"
    SELECT = "SELECT"
    FROM = "FROM"
    JOIN = "JOIN"
    ON = "ON"
    WHERE = "WHERE"
    UPDATE = "UPDATE"
    SET = "SET"
    DELETE = "DELETE"
    INSERT = "INSERT"
    INTO = "INTO"
    VALUES = "VALUES"
    GROUP = "GROUP"
    ORDER = "ORDER"
    HAVING = "HAVING"
    INSERT_COLS = "INSERT_COLS"


_CLAUSE_TOKEN = re.compile(
    r"\b(SELECT|FROM|JOIN|ON|WHERE|GROUP BY|ORDER BY|HAVING|UPDATE|SET|DELETE|INSERT|INTO|VALUES)\b"
)

# INSERT INTO <target> directly before the `(` that opens the cursor's level
_INSERT_TARGET_BEFORE_PAREN = re.compile(r"\bINSERT\s+INTO\s+[\w$.]+\s*$", re.IGNORECASE)


def normalize_tail(text: str) -> str:
    """Collapse whitespace and upper-case a scope for classification."""
    return re.sub(r"\s+", " ", text).strip().upper()


def clause_tokens(tail: str) -> list[str]:
    """Clause-introducing keywords of a normalized tail, in order.

    `GROUP BY` and `ORDER BY` are reported as GROUP and ORDER. ON only
    counts after a JOIN and SET only after an UPDATE; elsewhere they do not
    introduce a clause (e.g. `CREATE INDEX ... ON`, `SET search_path`).
    """
    tokens: list[str] = []
    seen: set[str] = set()
    for match in _CLAUSE_TOKEN.finditer(tail):
        token = match.group(1).split(" ")[0]
        if token == "ON" and "JOIN" not in seen:
            continue
        if token == "SET" and "UPDATE" not in seen:
            continue
        tokens.append(token)
        seen.add(token)
    return tokens


def _last_clause(keyword: str) -> Callable[[list[str]], bool]:
    def predicate(tokens: list[str]) -> bool:
        return bool(tokens) and tokens[-1] == keyword

    return predicate


# Ordered (context, predicate) pairs, most specific first
CONTEXT_CASCADE: list[tuple[SqlContext, Callable[[list[str]], bool]]] = [
    (SqlContext.SET, _last_clause("SET")),
    (SqlContext.WHERE, _last_clause("WHERE")),
    (SqlContext.HAVING, _last_clause("HAVING")),
    (SqlContext.ORDER, _last_clause("ORDER")),
    (SqlContext.GROUP, _last_clause("GROUP")),
    (SqlContext.ON, _last_clause("ON")),
    (SqlContext.JOIN, _last_clause("JOIN")),
    (SqlContext.FROM, _last_clause("FROM")),
    (SqlContext.UPDATE, _last_clause("UPDATE")),
    (SqlContext.DELETE, _last_clause("DELETE")),
    (SqlContext.INSERT, _last_clause("INSERT")),
    (SqlContext.INTO, _last_clause("INTO")),
    (SqlContext.VALUES, _last_clause("VALUES")),
    (SqlContext.SELECT, _last_clause("SELECT")),
]


def classify_context(scope_text: str) -> SqlContext:
    """Classify a depth-isolated scope into a single clause context.

    Args:
        scope_text: String-stripped scope text, nested groups blanked.

    Returns:
        The first context in CONTEXT_CASCADE whose keyword is the last
        clause-introducing token, or SqlContext.NONE.
    """
    tokens = clause_tokens(normalize_tail(scope_text))
    for context, predicate in CONTEXT_CASCADE:
        if predicate(tokens):
            return context
    return SqlContext.NONE


def is_insert_column_list(scope: Scope) -> bool:
    """True when the cursor's level is the column list of INSERT INTO <target> (."""
    parent = scope.parent()
    if parent is None:
        return False
    return _INSERT_TARGET_BEFORE_PAREN.search(parent.masked) is not None


def detect_context(scope: Scope) -> tuple[SqlContext, Scope]:
    """Classify the cursor's scope.

    Returns:
        (context, clause_scope) where clause_scope is the level that the
        context was read from, and from which table references resolve:
        the enclosing level for an INSERT column list, otherwise the
        nearest level that introduces a clause.
    """
    if is_insert_column_list(scope):
        return SqlContext.INSERT_COLS, scope.parent()

    clause_scope = effective_scope(scope)
    return classify_context(clause_scope.masked), clause_scope
