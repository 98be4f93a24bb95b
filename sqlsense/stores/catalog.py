"""Catalog store for schema metadata and workflow variables."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from sqlsense.domains.query.completion.core import IntellisenseConfig
from sqlsense.domains.query.completion.exceptions import CatalogConfigError
from sqlsense.shared.core.store import CONFIG_DIR, JSONFileStore

logger = logging.getLogger(__name__)


class CatalogStore(JSONFileStore):
    """Store for the completion catalog.

    The catalog is a JSON object in ~/.sqlsense/catalog.json holding the
    database type, schemas with their tables and columns, workflow
    variables, and optional keyword, operator and builtin tables.
    """

    def __init__(self, file_path: Path | None = None) -> None:
        super().__init__(file_path or CONFIG_DIR / "catalog.json")

    def load(self, strict: bool = False, default_database_type: str = "oracle") -> IntellisenseConfig:
        """Load the catalog.

        Args:
            strict: Raise CatalogConfigError for a missing, unreadable or
                malformed catalog instead of falling back to an empty one.
            default_database_type: Database type when the catalog names none.

        Returns:
            The parsed configuration; empty when the file is absent.
        """
        if not strict:
            data = self._read_json()
            if data is None:
                logger.debug("No catalog at %s, using an empty catalog", self.file_path)
                return IntellisenseConfig(database_type=default_database_type)
            return IntellisenseConfig.from_dict(data, default_database_type=default_database_type)

        try:
            data = self._read_json_strict()
        except FileNotFoundError as exc:
            raise CatalogConfigError("catalog file not found", path=self.file_path) from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise CatalogConfigError(f"invalid JSON: {exc}", path=self.file_path) from exc

        try:
            return IntellisenseConfig.from_dict(
                data, strict=True, default_database_type=default_database_type
            )
        except CatalogConfigError as exc:
            raise CatalogConfigError(str(exc), path=self.file_path) from exc

    def save(self, config: IntellisenseConfig) -> None:
        """Save the catalog, replacing the existing file."""
        self._write_json(config.to_dict())
