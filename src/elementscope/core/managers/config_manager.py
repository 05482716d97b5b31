# src/elementscope/core/managers/config_manager.py
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from elementscope.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

# ELEMENTSCOPE_SERVER__PORT=4000 overrides 'server.port'
ENV_PREFIX = "ELEMENTSCOPE_"
ENV_SEPARATOR = "__"


def _read_settings(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("settings.json not found at %s. Using empty config.", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to load %s: %s", path, e, exc_info=True)
        return {}
    if not isinstance(data, dict):
        logger.error("Ignoring %s: top level must be an object.", path)
        return {}
    return data


def _cast_like(template: Any, value: Any, key_path: str) -> Any:
    """Casts a (string) value to the type already stored under the key."""
    if template is None or isinstance(value, type(template)):
        return value
    if isinstance(template, bool) and isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    try:
        return type(template)(value)
    except (ValueError, TypeError):
        logger.warning("Could not cast '%s' to %s; storing it as given.", key_path, type(template).__name__)
        return value


class ConfigManager:
    """
    Process-wide access to the elementscope settings.

    Values come from the packaged settings.json, overridden by
    ELEMENTSCOPE_<SECTION>__<KEY> environment variables; `set_nested` changes
    the in-memory copy only.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config = {}
            instance.reset()
            cls._instance = instance
        return cls._instance

    @property
    def settings_path(self) -> Path:
        return PathUtils.get_package_root() / "settings.json"

    def get_all(self) -> Dict[str, Any]:
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """Looks up a dotted key such as 'server.port'."""
        node: Any = self._config
        for key in key_path.split('.'):
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return default if node is None else node

    def get_int(self, key_path: str, default: int) -> int:
        try:
            return int(self.get_nested(key_path, default))
        except (TypeError, ValueError):
            logger.warning("Config value '%s' is not an integer; using %s.", key_path, default)
            return default

    def get_float(self, key_path: str, default: float) -> float:
        try:
            return float(self.get_nested(key_path, default))
        except (TypeError, ValueError):
            logger.warning("Config value '%s' is not a number; using %s.", key_path, default)
            return default

    def set_nested(self, key_path: str, value: Any) -> bool:
        """Stores a value under a dotted key, keeping the type of the value it replaces."""
        *parents, leaf = key_path.split('.')
        section = self._config
        for key in parents:
            section = section.setdefault(key, {})
            if not isinstance(section, dict):
                logger.error("Cannot set '%s': '%s' is not a section.", key_path, key)
                return False

        section[leaf] = _cast_like(section.get(leaf), value, key_path)
        logger.info("Configuration updated: %s = %s", key_path, section[leaf])
        return True

    def apply_env_overrides(self, environ: Optional[Mapping[str, str]] = None) -> int:
        """Applies ELEMENTSCOPE_* variables on top of the loaded settings; returns how many were applied."""
        applied = 0
        for name, raw in (os.environ if environ is None else environ).items():
            if not name.startswith(ENV_PREFIX):
                continue
            key_path = name[len(ENV_PREFIX):].lower().replace(ENV_SEPARATOR, ".")
            if "." in key_path and self.set_nested(key_path, raw):
                applied += 1
        return applied

    def reset(self) -> None:
        """Reloads settings.json and re-applies environment overrides, dropping in-memory changes."""
        self._config = _read_settings(self.settings_path)
        overrides = self.apply_env_overrides()
        logger.debug("Configuration loaded from %s (%d environment overrides).", self.settings_path, overrides)


config_manager = ConfigManager()
