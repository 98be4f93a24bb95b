"""Whole-document scans: hover text, semantic tokens and DDL warnings.

These work on every line of the buffer rather than on the statement at
the cursor. Comments and string literals are blanked before scanning, so
names and keywords inside them are never reported.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .catalog import CatalogIndex
from .core import IntellisenseConfig, iter_columns
from .statement import mask_comments, strip_string_literals

# Identifier-like words; `$` is allowed after the first character
_WORD = re.compile(r"[^\W\d][\w$]*")

_DDL_KEYWORD = re.compile(r"\b(CREATE|ALTER|DROP)\b", re.IGNORECASE)

DDL_WARNING_MESSAGE = "DDL not allowed"


@dataclass(frozen=True)
class HoverInfo:
    """Text to show for the word under the cursor.

    Attributes:
        title: The builtin or schema name.
        contents: Lines of description, in display order.
    """

    title: str
    contents: tuple[str, ...] = ()


class SemanticTokenType(Enum):
    """Catalog object kinds reported by scan_semantic_tokens()."""

    SCHEMA = 0
    TABLE = 1
    COLUMN = 2


@dataclass(frozen=True)
class SemanticToken:
    """A catalog name found in the document.

    `line` and `start` are zero-based.
    """

    line: int
    start: int
    length: int
    token_type: SemanticTokenType


@dataclass(frozen=True)
class DdlWarning:
    """A CREATE, ALTER or DROP keyword found in the document.

    `line`, `column` and `end_column` are one-based, as editors show them;
    `end_column` is exclusive.
    """

    line: int
    column: int
    end_column: int
    keyword: str
    message: str = DDL_WARNING_MESSAGE


def _masked_lines(lines: Sequence[str]) -> list[str]:
    """Lines with comments and string literal contents blanked."""
    text = "\n".join(lines)
    masked = strip_string_literals(mask_comments(text))
    # Literal blanking also blanks line breaks inside multi-line strings
    masked = "".join(char if char in "\r\n" else blank for char, blank in zip(text, masked))
    return masked.split("\n")


def word_at_cursor(text_before_cursor: str, text_after_cursor: str = "") -> str:
    """The whole word the cursor touches, including characters after it."""
    before = re.search(r"[\w$]*$", text_before_cursor)
    after = re.match(r"[\w$]*", text_after_cursor)
    return (before.group(0) if before else "") + (after.group(0) if after else "")


def hover_info(word: str, index: CatalogIndex, config: IntellisenseConfig) -> HoverInfo | None:
    """Describe a builtin function or a schema by name.

    Builtins of the active database type are checked first. Both lookups
    ignore case.
    """
    if not word:
        return None

    wanted = word.upper()
    for function in config.builtins:
        if function.name.upper() == wanted:
            contents = [function.description] if function.description else []
            if function.sample_usage:
                contents.append(f"Example: {function.sample_usage}")
            return HoverInfo(title=function.name, contents=tuple(contents))

    schema = index.find_schema(word)
    if schema is not None:
        return HoverInfo(title=schema.name, contents=(f"{len(schema.tables)} tables",))
    return None


def _token_types(index: CatalogIndex) -> dict[str, SemanticTokenType]:
    # A name used for several kinds keeps the first: schema, then table, then column
    types: dict[str, SemanticTokenType] = {}
    for schema in index.schemas:
        types.setdefault(schema.name.upper(), SemanticTokenType.SCHEMA)
    for schema in index.schemas:
        for table in schema.tables:
            types.setdefault(table.name.upper(), SemanticTokenType.TABLE)
    for _, _, column in iter_columns(index.schemas):
        types.setdefault(column.upper(), SemanticTokenType.COLUMN)
    return types


def scan_semantic_tokens(lines: Sequence[str], index: CatalogIndex) -> list[SemanticToken]:
    """Find every schema, table and column name in the document.

    Args:
        lines: Document lines, without line terminators.
        index: Catalog snapshot to match names against, ignoring case.

    Returns:
        Tokens ordered by line, then by start offset.
    """
    types = _token_types(index)
    if not types:
        return []

    tokens: list[SemanticToken] = []
    for line_number, line in enumerate(_masked_lines(lines)):
        for match in _WORD.finditer(line):
            token_type = types.get(match.group(0).upper())
            if token_type is not None:
                tokens.append(SemanticToken(line_number, match.start(), len(match.group(0)), token_type))
    return tokens


def encode_semantic_tokens(tokens: Sequence[SemanticToken]) -> list[int]:
    """Relative encoding of ordered tokens, five integers per token.

    Each token becomes (delta line, delta start, length, type, modifiers).
    The start is relative to the previous token only on the same line.
    """
    data: list[int] = []
    last_line = 0
    last_start = 0
    for token in tokens:
        delta_line = token.line - last_line
        delta_start = token.start - last_start if delta_line == 0 else token.start
        data.extend((delta_line, delta_start, token.length, token.token_type.value, 0))
        last_line, last_start = token.line, token.start
    return data


def find_ddl_warnings(lines: Sequence[str]) -> list[DdlWarning]:
    """Report every CREATE, ALTER and DROP keyword outside comments and literals."""
    warnings: list[DdlWarning] = []
    for line_number, line in enumerate(_masked_lines(lines), start=1):
        for match in _DDL_KEYWORD.finditer(line):
            warnings.append(
                DdlWarning(
                    line=line_number,
                    column=match.start() + 1,
                    end_column=match.end() + 1,
                    keyword=match.group(1).upper(),
                )
            )
    return warnings
