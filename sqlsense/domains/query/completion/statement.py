"""Statement segmentation and literal/comment masking.

Every transformation here preserves character offsets: masked content is
replaced by spaces of the same length, never deleted.
"""

from __future__ import annotations

import re

from sqlparse import lexer
from sqlparse import tokens as T


def _blank(text: str) -> str:
    """Replace every character except line breaks with a space."""
    return re.sub(r"[^\r\n]", " ", text)


def mask_comments(sql: str) -> str:
    """Blank out `--` and `/* */` comments, keeping offsets and line breaks.

    Uses the sqlparse lexer so comment markers inside string literals are
    left alone.
    """
    if "--" not in sql and "/*" not in sql and "#" not in sql:
        return sql

    parts: list[str] = []
    for ttype, value in lexer.tokenize(sql):
        if ttype in T.Comment:
            parts.append(_blank(value))
        else:
            parts.append(value)
    return "".join(parts)


def is_inside_comment(sql: str) -> bool:
    """Check if the end of the text is inside a comment.

    Args:
        sql: The SQL text up to cursor position

    Returns:
        True if the cursor is inside a line comment or an unclosed block comment
    """
    if "--" not in sql and "/*" not in sql and "#" not in sql:
        return False

    last_type = None
    last_value = ""
    for ttype, value in lexer.tokenize(sql):
        last_type, last_value = ttype, value
    if last_type is not None and last_type in T.Comment.Single:
        return not last_value.endswith(("\n", "\r"))

    # An unclosed /* is not lexed as a comment at all
    return "/*" in strip_string_literals(mask_comments(sql))


def _scan_literals(sql: str) -> tuple[list[tuple[int, int]], bool]:
    """Find string literal spans.

    Returns:
        (spans, unterminated) where each span is the (start, end) offset of
        a literal including its quotes; an unterminated literal runs to the
        end of the text.
    """
    spans: list[tuple[int, int]] = []
    quote: str | None = None
    start = 0
    i = 0
    length = len(sql)

    while i < length:
        char = sql[i]
        if quote is None:
            if char in ("'", '"'):
                quote = char
                start = i
        elif char == quote:
            # Doubled quote is an escaped quote
            if i + 1 < length and sql[i + 1] == quote:
                i += 2
                continue
            spans.append((start, i + 1))
            quote = None
        i += 1

    if quote is not None:
        spans.append((start, length))
        return spans, True
    return spans, False


def is_inside_string(sql: str) -> bool:
    """Check if the cursor position is inside an unclosed string literal.

    Args:
        sql: The SQL text up to cursor position

    Returns:
        True if inside a string literal, False otherwise
    """
    return _scan_literals(sql)[1]


def strip_string_literals(sql: str) -> str:
    """Blank the contents of single- and double-quoted literals.

    Quotes are kept and the interior is replaced with spaces, so offsets
    are unchanged and keyword or parenthesis characters inside literals
    are no longer visible to the scanners.
    """
    spans, unterminated = _scan_literals(sql)
    if not spans:
        return sql

    parts: list[str] = []
    position = 0
    for n, (start, end) in enumerate(spans):
        parts.append(sql[position : start + 1])
        closed = not (unterminated and n == len(spans) - 1)
        interior_end = end - 1 if closed else end
        parts.append(" " * (interior_end - start - 1))
        if closed:
            parts.append(sql[start])
        position = end
    parts.append(sql[position:])
    return "".join(parts)


def current_statement(text_before_cursor: str) -> str:
    """Return the statement the cursor is in.

    The buffer is split on `;` terminators outside string literals and the
    trailing segment is returned. Without a terminator the whole text is
    the statement.
    """
    terminator = strip_string_literals(text_before_cursor).rfind(";")
    return text_before_cursor[terminator + 1 :]


def statement_continuation(text_after_cursor: str) -> str:
    """Return the part of the current statement that follows the cursor."""
    terminator = strip_string_literals(text_after_cursor).find(";")
    return text_after_cursor if terminator < 0 else text_after_cursor[:terminator]


def get_current_word(sql: str, cursor_pos: int | None = None) -> str:
    """Get the word currently being typed at cursor position."""
    before_cursor = sql if cursor_pos is None else sql[:cursor_pos]

    match = re.search(r"(\w*)$", before_cursor)
    if match:
        return match.group(1)
    return ""
