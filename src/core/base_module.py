"""Base class for all modules. Lifecycle: setup → ready → (on_frame / handle_command / get_*_widget) → teardown."""

from __future__ import annotations

from abc import ABC
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from PyQt6.QtWidgets import QWidget
    from src.core.core import Core


class BaseModule(ABC):
    """Base class all modules inherit from. Subclass must define class-level identity and capability attrs."""

    name: str = ""
    key: str = ""
    version: str = "1.0.0"
    description: str = ""
    requires: list[str] = []
    optional: list[str] = []
    provides_services: list[str] = []
    hooks: list[str] = []

    def __init__(self) -> None:
        self.core: Optional[Core] = None
        self.enabled: bool = True

    def setup(self, core: Core) -> None:
        """Called once after modules are loaded and dependency-checked. Store core; do not access other modules' services yet."""
        self.core = core

    def ready(self) -> None:
        """Called once after ALL modules have completed setup(). Safe to access other modules' services."""
        pass

    def get_settings_widget(self) -> Optional["QWidget"]:
        """Return a QWidget for the settings tab, or None."""
        return None

    def get_status_widget(self) -> Optional["QWidget"]:
        """Return a QWidget for the main window status area, or None."""
        return None

    def get_service_value(self, service_name: str) -> Any:
        """Return current value for the named service. Called by Core when another module requests it."""
        return None

    def get_hotkey_binds(self) -> list[dict]:
        """Return hotkey definitions this module wants registered: {"bind": "f9", "command": "..."}."""
        return []

    def handle_command(self, command: str) -> Optional[str]:
        """Run a named command. Returns a confirmation message, or None if not handled."""
        return None

    def on_config_changed(self, key: str, value: Any) -> None:
        """Called when any of this module's config values change."""
        pass

    def on_frame(self, frame: Any, origin: tuple[int, int] = (0, 0)) -> None:
        """Called each capture cycle with the raw frame and its monitor-relative origin. Runs in the capture thread."""
        pass

    def teardown(self) -> None:
        """Cleanup on app shutdown."""
        pass
