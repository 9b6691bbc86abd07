import logging

import pytest
from pydantic import ValidationError

from widgetsets.config_loader import (
    AppConfig,
    StoreSettings,
    configure_logging,
    create_widget_manager,
    load_config,
    resolve_db_path,
)


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "absent.yaml")
    assert config == AppConfig()
    assert config.store.key == "widgetProperties"
    assert config.store.path == "widgetsets"


def test_no_config_anywhere_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("WIDGETSETS_ROOT", str(tmp_path))
    assert load_config() == AppConfig()


def test_config_found_under_root(tmp_path, monkeypatch):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "widgetsets.yaml").write_text("store:\n  key: found\n", encoding="utf-8")
    monkeypatch.setenv("WIDGETSETS_ROOT", str(tmp_path))
    assert load_config().store.key == "found"


def test_yaml_values_override_defaults(tmp_path):
    path = tmp_path / "widgetsets.yaml"
    path.write_text(
        "store:\n"
        "  db_path: custom.json\n"
        "  key: sets\n"
        "logging:\n"
        "  level: debug\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.store.db_path == "custom.json"
    assert config.store.key == "sets"
    assert config.store.path == "widgetsets"
    assert config.logging.level == "debug"


def test_broken_yaml_gives_defaults(tmp_path):
    path = tmp_path / "widgetsets.yaml"
    path.write_text("store: [unclosed\n", encoding="utf-8")
    assert load_config(path) == AppConfig()


def test_invalid_values_raise(tmp_path):
    path = tmp_path / "widgetsets.yaml"
    path.write_text("store:\n  key: [1, 2]\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_config(path)


def test_create_widget_manager(tmp_path):
    config = AppConfig.model_validate({"store": {"db_path": str(tmp_path / "db.json"), "path": "prefs"}})
    manager = create_widget_manager(config)
    manager.create_widget_set("From config")
    assert manager.store.get("widgetProperties", "prefs")[0]["title"] == "From config"
    manager.store.close()


def test_configure_logging_applies_level(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    configure_logging(AppConfig.model_validate({"logging": {"level": "warning"}}))
    assert calls[0]["level"] == "WARNING"
    assert "%(name)s" in calls[0]["format"]


def test_relative_db_path_lives_under_root(tmp_path, monkeypatch):
    monkeypatch.setenv("WIDGETSETS_ROOT", str(tmp_path))
    manager = create_widget_manager(AppConfig())
    manager.create_widget_set("Rooted")
    manager.store.close()
    assert (tmp_path / "data" / "widgetsets.json").is_file()


def test_absolute_db_path_ignores_root(tmp_path, monkeypatch):
    monkeypatch.setenv("WIDGETSETS_ROOT", str(tmp_path / "elsewhere"))
    absolute = tmp_path / "db.json"
    assert resolve_db_path(StoreSettings(db_path=str(absolute))) == absolute
