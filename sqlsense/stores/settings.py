"""Settings store for managing application settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from sqlsense.shared.core.store import CONFIG_DIR, JSONFileStore

DEFAULT_SETTINGS: dict[str, Any] = {
    "database_type": "oracle",
    "catalog_path": None,
}


def resolve_settings_path() -> Path:
    """Settings file location, honoring $SQLSENSE_SETTINGS_PATH."""
    override = os.environ.get("SQLSENSE_SETTINGS_PATH", "").strip()
    if override:
        return Path(override).expanduser()
    return CONFIG_DIR / "settings.json"


class SettingsStore(JSONFileStore):
    """Store for managing application settings.

    Settings are stored as a JSON object in ~/.sqlsense/settings.json
    """

    def __init__(self, file_path: Path | None = None) -> None:
        super().__init__(file_path or resolve_settings_path())

    def load_all(self) -> dict[str, Any]:
        """Load all settings merged over the defaults.

        Returns:
            Dictionary of settings.
        """
        data = self._read_json()
        settings = dict(DEFAULT_SETTINGS)
        if isinstance(data, dict):
            settings.update(data)
        return settings

    def save_all(self, settings: dict[str, Any]) -> None:
        """Save all settings, replacing existing.

        Args:
            settings: Dictionary of settings to save.
        """
        self._write_json(settings)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a specific setting.

        Args:
            key: Setting key.
            default: Default value if key not found.

        Returns:
            Setting value or default.
        """
        value = self.load_all().get(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        """Set a specific setting.

        Args:
            key: Setting key.
            value: Setting value.
        """
        data = self._read_json()
        settings = data if isinstance(data, dict) else {}
        settings[key] = value
        self.save_all(settings)

    @property
    def database_type(self) -> str:
        return str(self.get("database_type", DEFAULT_SETTINGS["database_type"]))

    @property
    def catalog_path(self) -> Path:
        """Catalog file to load, defaulting to catalog.json next to the settings."""
        configured = self.get("catalog_path")
        if configured:
            return Path(str(configured)).expanduser()
        return CONFIG_DIR / "catalog.json"
