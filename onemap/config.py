"""
Configuration management for OneMap.

Settings are resolved in this order:
1. Environment variable (ONEMAP_*), which may come from a .env file
2. config.json next to the executable/project root
3. Built-in default

Recognised keys:
- storage_backend: 'file' (default) or 'memory'
- storage_dir: directory used by the file backend (default db/)
- log_level: logging level name (default INFO)
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from onemap.paths import get_config_path, get_db_dir

logger = logging.getLogger(__name__)

DEFAULT_BACKEND = "file"
DEFAULT_LOG_LEVEL = "INFO"


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from config.json. Missing or unreadable file gives {}."""
    config_path = config_path or get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                if isinstance(data, dict):
                    return data
                logger.warning(f"Ignoring {config_path}: expected a JSON object")
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
    return {}


def save_config(config: dict, config_path: Optional[Path] = None) -> None:
    """Save configuration to config.json."""
    config_path = config_path or get_config_path()
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)


def _get_setting(env_name: str, key: str, default: Any, config: Optional[dict] = None) -> Any:
    env_value = os.environ.get(env_name)
    if env_value:
        return env_value
    if config is None:
        config = load_config()
    return config.get(key, default)


def get_storage_backend(config: Optional[dict] = None) -> str:
    return str(_get_setting("ONEMAP_STORAGE_BACKEND", "storage_backend", DEFAULT_BACKEND, config)).lower()


def get_storage_dir(config: Optional[dict] = None) -> Path:
    value = _get_setting("ONEMAP_STORAGE_DIR", "storage_dir", None, config)
    return Path(value) if value else get_db_dir()


def get_log_level(config: Optional[dict] = None) -> int:
    """Return the numeric logging level; unknown names fall back to INFO."""
    name = str(_get_setting("ONEMAP_LOG_LEVEL", "log_level", DEFAULT_LOG_LEVEL, config)).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO
