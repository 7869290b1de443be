"""Bring a loaded config up to the namespaced { core, warmask_reminder } layout. Safe to run repeatedly."""

from __future__ import annotations

import copy
import logging
from typing import Any

from src.models.reminder import SETTINGS_VERSION, ReminderSettings

logger = logging.getLogger(__name__)

REMINDER_KEY = "warmask_reminder"

# Screen regions the probe watches, relative to the selected monitor. Uncalibrated until
# a present template is captured from the settings tab.
DEFAULT_REGIONS: list[dict[str, Any]] = [
    {"id": "helmet", "name": "Warmask equipped", "left": 0, "top": 0, "width": 0, "height": 0},
    {"id": "buff", "name": "Warmask buff", "left": 0, "top": 0, "width": 0, "height": 0},
    {"id": "combat", "name": "In combat", "left": 0, "top": 0, "width": 0, "height": 0},
    {"id": "ui_mode", "name": "Cursor / UI mode", "left": 0, "top": 0, "width": 0, "height": 0},
]


def default_core() -> dict[str, Any]:
    return {
        "monitor_index": 1,
        "modules_enabled": [REMINDER_KEY],
        "probe": {
            "enabled": True,
            "polling_fps": 10,
            "buff_duration_seconds": 60.0,
            "regions": copy.deepcopy(DEFAULT_REGIONS),
        },
        "display": {"always_on_top": False},
    }


def migrate_config(old: dict[str, Any]) -> dict[str, Any]:
    """Fill missing sections with defaults. Version 1 is current; there is nothing to convert yet."""
    data = copy.deepcopy(old) if isinstance(old, dict) else {}
    core = data.get("core")
    if not isinstance(core, dict):
        core = {}
    merged_core = default_core()
    for key, value in core.items():
        if key == "probe" and isinstance(value, dict):
            merged_core["probe"].update(value)
        else:
            merged_core[key] = value
    data["core"] = merged_core

    reminder = data.get(REMINDER_KEY)
    if not isinstance(reminder, dict):
        reminder = {}
    version = reminder.get("version", SETTINGS_VERSION)
    if version != SETTINGS_VERSION:
        logger.warning("Unknown %s settings version %s, loading with defaults for missing fields", REMINDER_KEY, version)
    data[REMINDER_KEY] = ReminderSettings.from_dict(reminder).to_dict()
    return data


def needs_migration(data: Any) -> bool:
    if not isinstance(data, dict):
        return True
    return "core" not in data or REMINDER_KEY not in data
