"""
Config loader: parses the YAML settings file into Pydantic models.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# ── Store settings ────────────────────────────────────

class StoreSettings(BaseModel):
    db_path: str = "data/widgetsets.json"
    path: str = Field(default="widgetsets", description="Fixed store path the key lives under")
    key: str = Field(default="widgetProperties", description="Persisted key name")


# ── Logging settings ──────────────────────────────────

class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


# ── Top-level config ──────────────────────────────────

class AppConfig(BaseModel):
    store: StoreSettings = Field(default_factory=StoreSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# ── Loading ───────────────────────────────────────────

_CONFIG_SEARCH_PATHS = [
    "config/widgetsets.yaml",
    "widgetsets.yaml",
]


def _root() -> Path:
    return Path(os.getenv("WIDGETSETS_ROOT", "."))


def find_config_file() -> Optional[Path]:
    """Find the settings file under WIDGETSETS_ROOT."""
    base = _root()
    for p in _CONFIG_SEARCH_PATHS:
        path = base / p
        if path.is_file():
            return path
    return None


def load_config(path: Optional[str | Path] = None) -> AppConfig:
    """
    Load the settings file. A missing or unreadable file yields the defaults;
    values that do not validate raise pydantic.ValidationError.
    """
    if path is None:
        path = find_config_file()
    if path is None:
        return AppConfig()
    path = Path(path)
    if not path.is_file():
        logger.info(f"No config file at {path}, using defaults")
        return AppConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to read config {path}: {e}")
        return AppConfig()

    if not isinstance(raw, dict):
        logger.error(f"Config {path} is not a mapping, using defaults")
        return AppConfig()

    return AppConfig.model_validate(raw)


def configure_logging(config: AppConfig):
    logging.basicConfig(
        level=config.logging.level.upper(),
        format=config.logging.format,
    )


def resolve_db_path(settings: StoreSettings) -> Path:
    """Relative store paths live under WIDGETSETS_ROOT, next to the config file."""
    db_path = Path(settings.db_path)
    if db_path.is_absolute():
        return db_path
    return _root() / db_path


def create_widget_manager(config: Optional[AppConfig] = None):
    """Build a WidgetManager backed by the configured TinyDB file."""
    from widgetsets.blob_store import TinyDBBlobStore
    from widgetsets.widget_manager import WidgetManager

    if config is None:
        config = load_config()
    store = TinyDBBlobStore(resolve_db_path(config.store))
    return WidgetManager(store, settings=config.store)
