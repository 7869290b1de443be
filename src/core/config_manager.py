"""Holds namespaced config dict; get_config/save_config with optional persist to JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from src.core.config_migration import migrate_config, needs_migration

logger = logging.getLogger(__name__)


class ConfigManager:
    """Holds root config dict. get_config(key) returns that slice; save_config(key, data) merges and optionally saves."""

    def __init__(self, config_path: Path, initial: dict[str, Any] | None = None) -> None:
        self._path = Path(config_path)
        if initial is not None:
            self._root = copy_nested(initial)
        else:
            # Do not overwrite existing config: load from file if present, else create defaults.
            if self._path.exists():
                data = self._read_file()
                if needs_migration(data):
                    data = migrate_config(data)
                    logger.info("Config filled with defaults")
                self._root = data
            else:
                self._root = migrate_config({})
                self._save_file()

    def get_config(self, module_key: str) -> dict[str, Any]:
        """Return a copy of the config section for the given key. Missing key returns {}."""
        data = self._root.get(module_key)
        if data is None:
            return {}
        return dict(copy_nested(data))

    def save_config(self, module_key: str, data: dict[str, Any]) -> None:
        """Merge data into root[module_key] and persist to file."""
        self._root[module_key] = copy_nested(data)
        self._save_file()

    def load_from_file(self) -> dict[str, Any]:
        """Load JSON from path; fill defaults and save if sections are missing. Set _root and return it."""
        data = self._read_file() if self._path.exists() else {}
        if needs_migration(data):
            data = migrate_config(data)
            logger.info("Config filled with defaults")
            self._root = data
            self._save_file()
        else:
            self._root = data
        return self._root

    def save(self) -> None:
        """Persist the current root (e.g. on shutdown)."""
        self._save_file()

    def _read_file(self) -> dict[str, Any]:
        try:
            with open(self._path) as f:
                data = json.load(f)
        except Exception as e:
            logger.exception("Failed to load config from %s: %s", self._path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Config at %s is not an object, ignoring", self._path)
            return {}
        return data

    def _save_file(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w") as f:
                json.dump(self._root, f, indent=2)
        except Exception as e:
            logger.exception("Failed to save config to %s: %s", self._path, e)


def copy_nested(obj: Any) -> Any:
    """Deep copy dict/list; other types returned as-is."""
    if isinstance(obj, dict):
        return {k: copy_nested(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [copy_nested(v) for v in obj]
    return obj
