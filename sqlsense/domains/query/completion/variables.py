"""Workflow variable (`${scope.key}`) completion."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .catalog import CatalogIndex
from .core import CompletionCandidate, CompletionKind
from .statement import current_statement, mask_comments

VARIABLE_OPEN = "${"

_WHITESPACE = re.compile(r"\s")


@dataclass(frozen=True)
class VariableContext:
    """An unterminated `${...}` marker before the cursor.

    Attributes:
        scope: Scope name typed before the dot, or None when no dot was typed.
        prefix: Partial scope name or key typed so far.
    """

    scope: str | None = None
    prefix: str = ""


def detect_variable_context(text_before_cursor: str) -> VariableContext | None:
    """Return the variable context if the cursor is inside an open `${` marker.

    Only the current statement is searched, with comments blanked. A marker
    whose interior holds whitespace was left open earlier and is ignored.
    """
    statement = current_statement(mask_comments(text_before_cursor))
    start = statement.rfind(VARIABLE_OPEN)
    if start < 0:
        return None

    inside = statement[start + len(VARIABLE_OPEN) :]
    if "}" in inside or _WHITESPACE.search(inside):
        return None

    if "." not in inside:
        return VariableContext(prefix=inside)

    scope, _, rest = inside.partition(".")
    prefix = rest.split(".", 1)[0]
    return VariableContext(scope=scope or None, prefix=prefix)


def suggest_workflow_variables(index: CatalogIndex, context: VariableContext) -> list[CompletionCandidate]:
    """Scope names, or the keys of one scope, filtered by the typed prefix."""
    prefix = context.prefix.upper()

    if not context.scope:
        return [
            CompletionCandidate(
                label=scope,
                insert_text=scope,
                kind=CompletionKind.VARIABLE,
                detail="workflow scope",
            )
            for scope in index.scope_names()
            if scope.upper().startswith(prefix)
        ]

    return [
        CompletionCandidate(
            label=key,
            insert_text=key,
            kind=CompletionKind.VARIABLE,
            detail=f"{context.scope}.{key}",
        )
        for key in index.keys_for_scope(context.scope)
        if key.upper().startswith(prefix)
    ]
