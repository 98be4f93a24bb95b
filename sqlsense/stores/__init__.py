"""Data persistence stores for sqlsense.

- CatalogStore: schema metadata, workflow variables and lexical tables
- SettingsStore: application settings
"""

from .catalog import CatalogStore
from .settings import SettingsStore

__all__ = [
    "CatalogStore",
    "SettingsStore",
]
