"""Toggle commands. Each flips one boolean setting and returns a confirmation line."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.engine.controller import ReminderController

logger = logging.getLogger(__name__)

ADDON_TITLE = "Huntsman Warmask Reminder"

# command name -> (settings field, label used in the confirmation)
COMMANDS: dict[str, tuple[str, str]] = {
    "toggle_enabled": ("enabled", ""),
    "toggle_show_outside_combat": ("show_outside_combat", "show outside combat"),
    "toggle_timer": ("toggle_timer", "timer on icon"),
    "toggle_warning": ("toggle_warning", "banner warning"),
}


class UnknownCommandError(KeyError):
    pass


def format_confirmation(label: str, value: bool) -> str:
    state = "enabled" if value else "disabled"
    if label:
        return f"{ADDON_TITLE}: {label} {state}"
    return f"{ADDON_TITLE}: {state}"


def run_command(controller: "ReminderController", name: str) -> str:
    """Flip the setting behind command name, persist it, and return the confirmation."""
    try:
        field_name, label = COMMANDS[name]
    except KeyError:
        raise UnknownCommandError(name) from None
    value = not bool(getattr(controller.settings, field_name))
    controller.update_settings(**{field_name: value})
    message = format_confirmation(label, value)
    logger.info(message)
    return message
