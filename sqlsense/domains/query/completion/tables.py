"""Table reference and alias resolution within a scope."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .core import RESERVED_WORDS, TableRef

_NAME = r"[\w$]+(?:\.[\w$]+)*"

_FROM_JOIN_PATTERN = re.compile(r"\b(FROM|JOIN)\s+", re.IGNORECASE)

# One FROM/JOIN target: a (qualified) name or a blanked subquery group,
# optionally followed by [AS] alias
_TARGET_PATTERN = re.compile(
    r"(?:(?P<name>" + _NAME + r")|\(\s*\))(?:\s+(?:AS\s+)?(?P<alias>[\w$]+))?",
    re.IGNORECASE,
)

_LIST_SEPARATOR = re.compile(r"\s*,\s*")

_UPDATE_PATTERN = re.compile(
    r"\bUPDATE\s+(?P<name>" + _NAME + r")(?:\s+(?:AS\s+)?(?P<alias>[\w$]+))?",
    re.IGNORECASE,
)
_INSERT_PATTERN = re.compile(r"\bINSERT\s+INTO\s+(?P<name>" + _NAME + r")", re.IGNORECASE)
_DELETE_PATTERN = re.compile(r"\bDELETE\s+FROM\s+(?P<name>" + _NAME + r")", re.IGNORECASE)


@dataclass
class TableResolution:
    """Table references active in a scope.

    Attributes:
        table_map: Alias or bare table name -> TableRef. Later matches
            overwrite earlier ones under the same key.
        update_target: First UPDATE target in the scope.
        insert_target: First INSERT INTO target in the scope.
    """

    table_map: dict[str, TableRef] = field(default_factory=dict)
    update_target: TableRef | None = None
    insert_target: TableRef | None = None

    @property
    def has_tables(self) -> bool:
        return bool(self.table_map)

    def lookup(self, name: str) -> TableRef | None:
        """Resolve an alias or bare table name, any casing."""
        return self.table_map.get(name) or self.table_map.get(name.upper())


def split_qualified_name(raw: str) -> TableRef:
    """Split `schema.table` (or `db.schema.table`) into a TableRef.

    A name with dots uses its last two parts as schema and table.
    """
    parts = [part for part in raw.split(".") if part]
    if len(parts) >= 2:
        return TableRef(table=parts[-1], schema=parts[-2])
    return TableRef(table=parts[0] if parts else raw)


def _alias(match: re.Match[str]) -> str | None:
    alias = match.group("alias")
    if alias and alias.lower() in RESERVED_WORDS:
        return None
    return alias


def _register(table_map: dict[str, TableRef], ref: TableRef, alias: str | None) -> None:
    if alias:
        table_map[alias] = ref
    if not ref.derived:
        table_map[ref.table] = ref


def resolve_table_refs(scope_text: str) -> TableResolution:
    """Find table targets in a scope and build the alias map.

    Handles patterns like:
    - FROM users / FROM users u / FROM users AS u
    - FROM hr.users u, hr.orders o
    - JOIN orders o ON ...
    - FROM ( subquery ) d, with the subquery already blanked
    - UPDATE users u SET ...
    - INSERT INTO users ...
    - DELETE FROM users ...

    Args:
        scope_text: Upper-cased, string-stripped scope text with nested
            groups blanked.

    Returns:
        TableResolution for the scope
    """
    resolution = TableResolution()
    table_map = resolution.table_map

    for keyword_match in _FROM_JOIN_PATTERN.finditer(scope_text):
        is_from = keyword_match.group(1).upper() == "FROM"
        position = keyword_match.end()
        while True:
            target = _TARGET_PATTERN.match(scope_text, position)
            if target is None:
                break
            alias = _alias(target)
            name = target.group("name")
            if name:
                _register(table_map, split_qualified_name(name), alias)
            elif alias:
                _register(table_map, TableRef(table=alias, derived=True), alias)

            end = target.end() if alias or not target.group("alias") else target.start("alias")
            separator = _LIST_SEPARATOR.match(scope_text, end) if is_from else None
            if separator is None:
                break
            position = separator.end()

    update = _UPDATE_PATTERN.search(scope_text)
    if update:
        resolution.update_target = split_qualified_name(update.group("name"))
        _register(table_map, resolution.update_target, _alias(update))

    insert = _INSERT_PATTERN.search(scope_text)
    if insert:
        resolution.insert_target = split_qualified_name(insert.group("name"))

    delete = _DELETE_PATTERN.search(scope_text)
    if delete:
        _register(table_map, split_qualified_name(delete.group("name")), None)

    return resolution
