"""Multi-line snippet candidates for UPDATE ... SET and INSERT INTO ... (."""

from __future__ import annotations

from .catalog import CatalogIndex
from .core import CompletionCandidate, CompletionKind, SnippetPlaceholder, TableRef

# Column cap for the combined snippets
MAX_SNIPPET_COLUMNS = 25

VALUE_PLACEHOLDER = "value"


class SnippetBuilder:
    """Accumulates insert text and records placeholder offsets as it goes."""

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._length = 0
        self.placeholders: list[SnippetPlaceholder] = []

    def text(self, value: str) -> SnippetBuilder:
        self._parts.append(value)
        self._length += len(value)
        return self

    def placeholder(self, default_text: str = VALUE_PLACEHOLDER) -> SnippetBuilder:
        index = len(self.placeholders) + 1
        self.placeholders.append(
            SnippetPlaceholder(index=index, default_text=default_text, offset=self._length)
        )
        return self.text(default_text)

    def build(self, label: str, detail: str | None = None) -> CompletionCandidate:
        return CompletionCandidate(
            label=label,
            insert_text="".join(self._parts),
            kind=CompletionKind.SNIPPET,
            detail=detail,
            is_snippet=True,
            snippet_placeholders=tuple(self.placeholders),
        )


def suggest_update_set_snippets(index: CatalogIndex, target: TableRef) -> list[CompletionCandidate]:
    """Assignment snippets for the columns of an UPDATE target.

    Produces one snippet assigning every column (up to MAX_SNIPPET_COLUMNS,
    with a `-- ...` line past the cap) followed by one `col = value`
    snippet per column.
    """
    columns = index.columns_for(target)
    if not columns:
        return []

    used = columns[:MAX_SNIPPET_COLUMNS]
    builder = SnippetBuilder().text("  ")
    for n, column in enumerate(used):
        if n:
            builder.text(",\n  ")
        builder.text(f"{column} = ").placeholder()
    if len(columns) > MAX_SNIPPET_COLUMNS:
        builder.text(",\n  -- ...")

    candidates = [
        builder.build("SET all columns (snippet)", f"{target.qualified_name} - generates assignments")
    ]
    for column in columns:
        candidates.append(
            SnippetBuilder()
            .text(f"{column} = ")
            .placeholder()
            .build(f"{column} = (snippet)", f"Assign {column}")
        )
    return candidates


def suggest_insert_columns(
    index: CatalogIndex,
    target: TableRef,
    auto_close_paren: bool = True,
    include_values: bool = True,
) -> list[CompletionCandidate]:
    """Column candidates for the open column list of INSERT INTO <target> (.

    Args:
        index: Catalog snapshot.
        target: The resolved INSERT target.
        auto_close_paren: Close the column list in the "Columns list" snippet.
        include_values: Also offer the "Columns + VALUES" snippet with one
            placeholder per listed column.

    Returns:
        Plain column fields followed by the list snippets; empty when the
        target has no known columns.
    """
    columns = index.columns_for(target)
    if not columns:
        return []

    qualified = target.qualified_name
    candidates = [
        CompletionCandidate(
            label=column,
            insert_text=column,
            kind=CompletionKind.FIELD,
            detail=f"{qualified}.{column}",
        )
        for column in columns
    ]

    used = columns[:MAX_SNIPPET_COLUMNS]
    column_list = ", ".join(used)
    if len(columns) > MAX_SNIPPET_COLUMNS:
        column_list += ", /*...*/"

    candidates.append(
        SnippetBuilder()
        .text(column_list + (")" if auto_close_paren else ""))
        .build("Columns list (auto-close )", f"{qualified} - column list")
    )

    if include_values:
        builder = SnippetBuilder().text(f"{column_list}) VALUES (")
        for n in range(len(used)):
            if n:
                builder.text(", ")
            builder.placeholder()
        candidates.append(builder.text(")").build("Columns + VALUES (snippet)", "Generates VALUES placeholders"))
    return candidates
