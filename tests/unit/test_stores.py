"""Tests for the settings and catalog stores."""

from __future__ import annotations

import importlib
import json
import logging

import pytest

import sqlsense.config as sqlsense_config
from sqlsense.config import load_catalog, load_settings, save_catalog, save_settings
from sqlsense.domains.query.completion.core import IntellisenseConfig, Schema, Table, WorkflowVariable
from sqlsense.domains.query.completion.exceptions import CatalogConfigError
from sqlsense.shared.core.store import CONFIG_DIR
from sqlsense.stores import CatalogStore, SettingsStore


@pytest.fixture
def settings_store(tmp_path):
    return SettingsStore(tmp_path / "settings.json")


@pytest.fixture
def catalog_path(tmp_path):
    return tmp_path / "catalog.json"


def _write(path, data) -> None:
    path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")


class TestSettingsStore:
    """Tests for SettingsStore."""

    def test_defaults_without_file(self, settings_store):
        assert settings_store.load_all() == {"database_type": "oracle", "catalog_path": None}
        assert settings_store.database_type == "oracle"
        assert settings_store.catalog_path == CONFIG_DIR / "catalog.json"

    def test_set_and_get(self, settings_store):
        settings_store.set("database_type", "postgresql")
        assert settings_store.get("database_type") == "postgresql"
        assert settings_store.database_type == "postgresql"
        assert json.loads(settings_store.file_path.read_text()) == {"database_type": "postgresql"}

    def test_get_default_for_missing_or_null(self, settings_store):
        settings_store.save_all({"catalog_path": None})
        assert settings_store.get("catalog_path", "fallback") == "fallback"
        assert settings_store.get("missing", 3) == 3

    def test_catalog_path_setting(self, settings_store, tmp_path):
        settings_store.set("catalog_path", str(tmp_path / "mine.json"))
        assert settings_store.catalog_path == tmp_path / "mine.json"

    def test_corrupt_file_falls_back_with_warning(self, settings_store, caplog):
        _write(settings_store.file_path, "{not json")
        with caplog.at_level(logging.WARNING):
            assert settings_store.load_all()["database_type"] == "oracle"
        assert "Ignoring unreadable JSON file" in caplog.text

    def test_settings_path_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SQLSENSE_SETTINGS_PATH", str(tmp_path / "elsewhere.json"))
        assert SettingsStore().file_path == tmp_path / "elsewhere.json"

    def test_write_leaves_no_temp_files(self, settings_store, tmp_path):
        settings_store.save_all({"database_type": "mysql"})
        assert [p.name for p in tmp_path.iterdir()] == ["settings.json"]


class TestCatalogStore:
    """Tests for CatalogStore."""

    def test_missing_file_lenient(self, catalog_path):
        config = CatalogStore(catalog_path).load(default_database_type="mysql")
        assert config.schemas == []
        assert config.database_type == "mysql"

    def test_missing_file_strict(self, catalog_path):
        with pytest.raises(CatalogConfigError, match="catalog file not found"):
            CatalogStore(catalog_path).load(strict=True)

    def test_invalid_json(self, catalog_path):
        _write(catalog_path, "[1, 2")
        assert CatalogStore(catalog_path).load().schemas == []
        with pytest.raises(CatalogConfigError, match="invalid JSON") as excinfo:
            CatalogStore(catalog_path).load(strict=True)
        assert str(catalog_path) in str(excinfo.value)

    def test_structural_error_strict(self, catalog_path):
        _write(catalog_path, {"schemas": [{"tables": []}]})
        with pytest.raises(CatalogConfigError, match="schema entry without a name"):
            CatalogStore(catalog_path).load(strict=True)

    def test_structural_error_lenient_skips_entry(self, catalog_path):
        _write(catalog_path, {"schemas": [{"tables": []}, {"name": "HR"}]})
        assert [s.name for s in CatalogStore(catalog_path).load().schemas] == ["HR"]

    def test_non_object_strict(self, catalog_path):
        _write(catalog_path, [])
        with pytest.raises(CatalogConfigError, match="must be a JSON object"):
            CatalogStore(catalog_path).load(strict=True)

    def test_save_and_load(self, catalog_path):
        config = IntellisenseConfig(
            database_type="postgresql",
            schemas=[Schema("HR", (Table("EMP", ("ID", "NAME")),))],
            workflow_variables=[WorkflowVariable("env", "HOST")],
        )
        CatalogStore(catalog_path).save(config)
        loaded = CatalogStore(catalog_path).load(strict=True)
        assert loaded.database_type == "postgresql"
        assert loaded.schemas == config.schemas
        assert loaded.workflow_variables == config.workflow_variables
        assert loaded.builtins_by_database_type == config.builtins_by_database_type


class TestIntellisenseConfigFromDict:
    """Tests for catalog document parsing."""

    def test_camel_case_keys(self):
        config = IntellisenseConfig.from_dict(
            {
                "databaseType": "mysql",
                "schemas": [{"name": "HR", "tables": [{"name": "EMP", "columns": ["ID"]}]}],
                "workflowVariables": [{"scope": "env", "variableKey": "HOST"}],
            }
        )
        assert config.database_type == "mysql"
        assert config.schemas == [Schema("HR", (Table("EMP", ("ID",)),))]
        assert config.workflow_variables == [WorkflowVariable("env", "HOST")]

    def test_alternate_keys(self):
        config = IntellisenseConfig.from_dict(
            {
                "database_type": "oracle",
                "metadata": [{"name": "HR", "tables": []}],
                "workflowVars": [{"scope": "env", "key": "HOST"}],
            }
        )
        assert [s.name for s in config.schemas] == ["HR"]
        assert config.workflow_variables == [WorkflowVariable("env", "HOST")]

    def test_missing_lexical_tables_use_defaults(self):
        config = IntellisenseConfig.from_dict({})
        assert "SELECT" in config.keywords
        assert "=" in config.operators
        assert [fn.name for fn in config.builtins][:1] == ["NVL"]

    def test_custom_builtins(self):
        config = IntellisenseConfig.from_dict(
            {
                "databaseType": "sqlite",
                "builtins": {"sqlite": [{"name": "JSON_EXTRACT", "sample": "JSON_EXTRACT(doc, '$.a')"}]},
            }
        )
        assert [fn.name for fn in config.builtins] == ["JSON_EXTRACT"]
        assert config.builtins[0].sample_usage == "JSON_EXTRACT(doc, '$.a')"

    def test_builtins_ignore_database_type_case(self):
        assert [fn.name for fn in IntellisenseConfig(database_type="ORACLE").builtins][:1] == ["NVL"]
        config = IntellisenseConfig.from_dict(
            {"databaseType": "mysql", "builtins": {"MySQL": [{"name": "IFNULL"}]}}
        )
        assert [fn.name for fn in config.builtins] == ["IFNULL"]

    def test_non_string_columns_dropped(self):
        config = IntellisenseConfig.from_dict(
            {"schemas": [{"name": "HR", "tables": [{"name": "EMP", "columns": ["ID", 3, "", None]}]}]}
        )
        assert config.schemas[0].tables[0].columns == ("ID",)


class TestConfigFacade:
    """Tests for the module-level loaders in sqlsense.config."""

    def test_settings_path_honors_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SQLSENSE_SETTINGS_PATH", str(tmp_path / "env-settings.json"))
        try:
            assert importlib.reload(sqlsense_config).SETTINGS_PATH == tmp_path / "env-settings.json"
        finally:
            monkeypatch.delenv("SQLSENSE_SETTINGS_PATH")
            importlib.reload(sqlsense_config)
        assert sqlsense_config.SETTINGS_PATH == CONFIG_DIR / "settings.json"

    def test_settings_round_trip(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SQLSENSE_SETTINGS_PATH", str(tmp_path / "settings.json"))
        save_settings({"database_type": "mssql"})
        assert load_settings() == {"database_type": "mssql", "catalog_path": None}

    def test_catalog_round_trip(self, monkeypatch, tmp_path, catalog_path):
        monkeypatch.setenv("SQLSENSE_SETTINGS_PATH", str(tmp_path / "settings.json"))
        save_catalog(IntellisenseConfig(schemas=[Schema("HR")]), catalog_path)
        assert catalog_path.exists()
        assert [s.name for s in load_catalog(catalog_path, strict=True).schemas] == ["HR"]

    def test_catalog_uses_settings(self, monkeypatch, tmp_path, catalog_path):
        settings = SettingsStore(tmp_path / "settings.json")
        settings.save_all({"catalog_path": str(catalog_path), "database_type": "sqlite"})
        monkeypatch.setenv("SQLSENSE_SETTINGS_PATH", str(settings.file_path))
        _write(catalog_path, {"schemas": [{"name": "MAIN"}]})

        config = load_catalog()
        assert [s.name for s in config.schemas] == ["MAIN"]
        assert config.database_type == "sqlite"
