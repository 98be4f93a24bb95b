"""Parenthesis-depth scope isolation.

All scanning here is explicit character iteration, linear in the length
of the statement, so deeply nested input cannot trigger regex
backtracking.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Keywords that make a parenthesis level a clause or subquery of its own
_CLAUSE_KEYWORD = re.compile(
    r"\b(SELECT|FROM|JOIN|WHERE|UPDATE|SET|DELETE|INSERT|INTO|VALUES|HAVING|GROUP\s+BY|ORDER\s+BY)\b",
    re.IGNORECASE,
)


def compute_depth(statement: str) -> int:
    """Net number of unmatched `(` in the statement.

    Unmatched `)` never drive the depth below zero.
    """
    depth = 0
    for char in statement:
        if char == "(":
            depth += 1
        elif char == ")" and depth > 0:
            depth -= 1
    return depth


def enclosing_opens(statement: str) -> tuple[int, ...]:
    """Offsets of the `(` that enclose the end of the statement, outermost first.

    Walks backward from the end: `)` opens a deeper level, `(` closes
    one. Each `(` that takes the running depth below the lowest depth seen
    so far opens one of the enclosing levels. The walk stops once the
    outermost level is reached.
    """
    depth = compute_depth(statement)
    lowest = depth
    opens: list[int] = []
    for i in range(len(statement) - 1, -1, -1):
        if lowest == 0:
            break
        char = statement[i]
        if char == ")":
            depth += 1
        elif char == "(":
            depth -= 1
            if depth < lowest:
                opens.append(i)
                lowest = depth
    opens.reverse()
    return tuple(opens)


def scope_start(statement: str) -> int:
    """Offset where the cursor's parenthesis level starts.

    The scope starts right after the innermost `(` found by
    enclosing_opens(), or at 0 when the cursor is at depth zero.
    """
    opens = enclosing_opens(statement)
    return opens[-1] + 1 if opens else 0

    depth = cursor_depth
    for i in range(len(statement) - 1, -1, -1):
        char = statement[i]
        if char == ")":
            depth += 1
        elif char == "(":
            depth -= 1
            if depth < cursor_depth:
                return i + 1
    return 0


def extract_scope(statement: str) -> str:
    """Return the part of the statement at the cursor's parenthesis depth."""
    return statement[scope_start(statement) :]


def mask_nested_groups(text: str) -> str:
    """Blank the interior of every balanced parenthesis group.

    Parentheses are kept and offsets are unchanged, so
    `FROM (SELECT x FROM t) d` becomes `FROM (                ) d`.
    Unbalanced parentheses are left as they are.
    """
    closing_for: dict[int, int] = {}
    open_positions: list[int] = []
    for i, char in enumerate(text):
        if char == "(":
            open_positions.append(i)
        elif char == ")" and open_positions:
            closing_for[open_positions.pop()] = i

    if not closing_for:
        return text

    parts: list[str] = []
    i = 0
    length = len(text)
    while i < length:
        close = closing_for.get(i)
        if close is None:
            parts.append(text[i])
            i += 1
            continue
        parts.append("(")
        parts.append(re.sub(r"[^\r\n]", " ", text[i + 1 : close]))
        parts.append(")")
        i = close + 1
    return "".join(parts)


@dataclass(frozen=True)
class Scope:
    """One parenthesis level of a statement, ending at the cursor or at a `(`.

    Attributes:
        statement: The string-stripped statement text up to the cursor.
        opens: Offsets of the unmatched `(` in `statement`, outermost first.
        depth: Parenthesis depth of this level; `len(opens)` at the cursor.
    """

    statement: str
    opens: tuple[int, ...]
    depth: int

    @property
    def start(self) -> int:
        return self.opens[self.depth - 1] + 1 if self.depth else 0

    @property
    def end(self) -> int:
        return self.opens[self.depth] if self.depth < len(self.opens) else len(self.statement)

    @property
    def text(self) -> str:
        return self.statement[self.start : self.end]

    @property
    def masked(self) -> str:
        """Scope text with closed nested groups blanked."""
        return mask_nested_groups(self.text)

    @property
    def has_clause_keyword(self) -> bool:
        return _CLAUSE_KEYWORD.search(self.masked) is not None

    def parent(self) -> Scope | None:
        """The enclosing level, ending just before the `(` that opens this one."""
        if self.depth == 0:
            return None
        return Scope(statement=self.statement, opens=self.opens, depth=self.depth - 1)


def analyze_scope(statement: str) -> Scope:
    """Locate the cursor's scope in a string-stripped statement."""
    opens = enclosing_opens(statement)
    return Scope(statement=statement, opens=opens, depth=len(opens))


def effective_scope(scope: Scope) -> Scope:
    """Nearest level, starting at the cursor's, that introduces a clause.

    A group such as `COUNT(`, `IN (` or `VALUES (` has no clause of its
    own; completion inside it follows the enclosing clause.
    """
    current = scope
    while not current.has_clause_keyword:
        parent = current.parent()
        if parent is None:
            break
        current = parent
    return current


def resolver_text(scope: Scope, continuation: str = "") -> str:
    """Text of a scope extended past the cursor to the end of its level.

    Args:
        scope: The (effective) scope to extend; may enclose the cursor's level.
        continuation: String-stripped statement text after the cursor.

    Returns:
        The scope text plus the continuation up to the `)` that closes the
        scope's level, with nested groups blanked.
    """
    end = len(continuation)
    depth = len(scope.opens)
    for i, char in enumerate(continuation):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < scope.depth:
                end = i
                break
    return mask_nested_groups(scope.statement[scope.start :] + continuation[:end])
