"""Catalog index for case-insensitive schema, table and variable lookup.

The index is an immutable snapshot. Catalog changes build a new snapshot
and swap the reference held by a CatalogHandle, so in-flight completion
requests never observe a partially built index.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .core import Schema, Table, TableRef, WorkflowVariable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableEntry:
    """A catalog table together with its owning schema name."""

    schema: str
    table: Table

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.table.name}"


def _empty_mapping() -> Mapping:
    return MappingProxyType({})


@dataclass(frozen=True)
class CatalogIndex:
    """Read-only lookup tables derived from schema metadata and workflow variables.

    Attributes:
        schemas: Schemas in catalog order.
        schema_by_name: Upper-cased schema name -> Schema.
        table_by_key: Upper-cased "SCHEMA.TABLE" and bare "TABLE" -> TableEntry.
            A bare table name shared by several schemas maps to the one
            indexed last.
        variable_keys_by_scope: Scope name -> sorted unique variable keys.
    """

    schemas: tuple[Schema, ...] = ()
    schema_by_name: Mapping[str, Schema] = field(default_factory=_empty_mapping)
    table_by_key: Mapping[str, TableEntry] = field(default_factory=_empty_mapping)
    variable_keys_by_scope: Mapping[str, tuple[str, ...]] = field(default_factory=_empty_mapping)

    @classmethod
    def empty(cls) -> CatalogIndex:
        return cls()

    @classmethod
    def build(
        cls,
        schemas: Iterable[Schema] | None,
        workflow_variables: Iterable[WorkflowVariable] | None = None,
    ) -> CatalogIndex:
        """Build a complete index from catalog metadata.

        Args:
            schemas: Schema metadata; None is treated as empty.
            workflow_variables: Workflow variables; entries with an empty
                scope or key are discarded.

        Returns:
            A new CatalogIndex.
        """
        schema_list = tuple(schemas or ())
        schema_by_name: dict[str, Schema] = {}
        table_by_key: dict[str, TableEntry] = {}

        for schema in schema_list:
            schema_by_name[schema.name.upper()] = schema
            for table in schema.tables:
                entry = TableEntry(schema=schema.name, table=table)
                table_by_key[f"{schema.name}.{table.name}".upper()] = entry
                table_by_key[table.name.upper()] = entry

        keys_by_scope: dict[str, set[str]] = {}
        for variable in workflow_variables or ():
            scope = (variable.scope or "").strip()
            key = (variable.variable_key or "").strip()
            if not scope or not key:
                continue
            keys_by_scope.setdefault(scope, set()).add(key)

        index = cls(
            schemas=schema_list,
            schema_by_name=MappingProxyType(schema_by_name),
            table_by_key=MappingProxyType(table_by_key),
            variable_keys_by_scope=MappingProxyType(
                {scope: tuple(sorted(keys)) for scope, keys in keys_by_scope.items()}
            ),
        )
        logger.debug(
            "Built catalog index: %d schemas, %d table keys, %d variable scopes",
            len(schema_list),
            len(table_by_key),
            len(keys_by_scope),
        )
        return index

    def find_schema(self, name: str) -> Schema | None:
        return self.schema_by_name.get(name.upper())

    def find_table(self, table: str, schema: str | None = None) -> TableEntry | None:
        """Look up a table by bare or schema-qualified name, any casing."""
        key = f"{schema}.{table}" if schema else table
        return self.table_by_key.get(key.upper())

    def columns_for(self, ref: TableRef) -> tuple[str, ...]:
        """Columns of a resolved table reference; empty when unknown or derived."""
        if ref.derived:
            return ()
        entry = self.table_by_key.get(ref.lookup_key)
        return entry.table.columns if entry else ()

    def scope_names(self) -> list[str]:
        return sorted(self.variable_keys_by_scope)

    def keys_for_scope(self, scope: str) -> tuple[str, ...]:
        """Variable keys for a scope, matching the scope name case-insensitively."""
        keys = self.variable_keys_by_scope.get(scope)
        if keys is not None:
            return keys
        wanted = scope.upper()
        for name, scope_keys in self.variable_keys_by_scope.items():
            if name.upper() == wanted:
                return scope_keys
        return ()


class CatalogHandle:
    """Holds the current CatalogIndex and swaps it atomically on rebuild.

    Readers call snapshot() once per request and work against that value.
    """

    def __init__(self, index: CatalogIndex | None = None) -> None:
        self._index = index or CatalogIndex.empty()
        self._rebuild_lock = threading.Lock()

    def snapshot(self) -> CatalogIndex:
        return self._index

    def rebuild(
        self,
        schemas: Iterable[Schema] | None,
        workflow_variables: Iterable[WorkflowVariable] | None = None,
    ) -> CatalogIndex:
        """Replace the current index with one built from the given metadata."""
        with self._rebuild_lock:
            index = CatalogIndex.build(schemas, workflow_variables)
            self._index = index
        return index
