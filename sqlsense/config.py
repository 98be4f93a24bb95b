"""Configuration paths and loaders for sqlsense.

Re-exports the store locations and the catalog/settings loaders so callers
do not have to know which store owns which file.
"""

from __future__ import annotations

from pathlib import Path

from .domains.query.completion.core import IntellisenseConfig
from .shared.core.store import CONFIG_DIR
from .stores.catalog import CatalogStore
from .stores.settings import SettingsStore, resolve_settings_path

SETTINGS_PATH = resolve_settings_path()
CATALOG_PATH = CONFIG_DIR / "catalog.json"


def load_settings() -> dict:
    """Load app settings from config file."""
    return SettingsStore().load_all()


def save_settings(settings: dict) -> None:
    """Save app settings to config file."""
    SettingsStore().save_all(settings)


def load_catalog(path: Path | None = None, strict: bool = False) -> IntellisenseConfig:
    """Load the completion catalog.

    Args:
        path: Catalog file; defaults to the `catalog_path` setting.
        strict: Raise CatalogConfigError instead of falling back to an
            empty catalog.
    """
    settings = SettingsStore()
    store = CatalogStore(path or settings.catalog_path)
    return store.load(strict=strict, default_database_type=settings.database_type)


def save_catalog(config: IntellisenseConfig, path: Path | None = None) -> None:
    """Save the completion catalog."""
    CatalogStore(path or SettingsStore().catalog_path).save(config)
