"""Custom exceptions for the completion layer."""

from __future__ import annotations

from pathlib import Path


class CatalogConfigError(ValueError):
    """Exception raised when a catalog document is structurally invalid."""

    def __init__(self, message: str, *, path: str | Path | None = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)
