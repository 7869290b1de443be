"""Global hotkey listener for the reminder toggle commands (works when the game has focus)."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QThread, pyqtSignal

logger = logging.getLogger(__name__)


def format_bind_for_display(bind: str) -> str:
    """Convert stored bind string to display label (e.g. 'f5' -> 'F5', 'x1' -> 'Mouse 4')."""
    if not bind or not bind.strip():
        return "Set"
    b = bind.strip().lower()
    if b == "x1":
        return "Mouse 4"
    if b == "x2":
        return "Mouse 5"
    if b in ("left", "right", "middle"):
        return {"left": "LMB", "right": "RMB", "middle": "MMB"}[b]
    return b.upper() if len(b) <= 3 else b.capitalize()


def normalize_bind(bind: str) -> str:
    """Normalize bind string for comparison (lowercase, stripped)."""
    return bind.strip().lower() if bind else ""


def key_to_bind(key) -> str:
    """pynput key -> bind string ('f9', 'a', 'scroll_lock')."""
    name = getattr(key, "name", None)
    if isinstance(name, str) and name:
        return name.lower()
    char = getattr(key, "char", None)
    if isinstance(char, str) and char:
        return char.lower()
    return str(key).lower().replace("key.", "")


class _ListenerThread(QThread):
    """Runs pynput listeners and emits the bind string whenever a configured key/button is pressed."""

    triggered = pyqtSignal(str)

    def __init__(self, get_binds: Callable[[], list[str]], parent: Optional[QObject] = None):
        super().__init__(parent)
        self._get_binds = get_binds
        self._running = True

    def _matches(self, bind: str) -> bool:
        b = normalize_bind(bind)
        return bool(b) and b in {normalize_bind(x) for x in self._get_binds()}

    def on_key(self, key) -> bool:
        """pynput keyboard callback. Returns False to stop the listener."""
        if not self._running:
            return False
        try:
            bind = key_to_bind(key)
            if self._matches(bind):
                self.triggered.emit(normalize_bind(bind))
        except Exception:
            logger.debug("Hotkey key handler failed", exc_info=True)
        return self._running

    def on_click(self, x: int, y: int, button, pressed: bool) -> bool:
        """pynput mouse callback. Returns False to stop the listener."""
        if not self._running or not pressed:
            return self._running
        try:
            bind = getattr(button, "name", str(button)).lower()
            if self._matches(bind):
                self.triggered.emit(normalize_bind(bind))
        except Exception:
            logger.debug("Hotkey click handler failed", exc_info=True)
        return self._running

    def run(self) -> None:
        try:
            from pynput import keyboard, mouse
        except ImportError:
            logger.warning("pynput not installed; global reminder hotkeys disabled")
            return

        k_listener = keyboard.Listener(on_release=self.on_key)
        m_listener = mouse.Listener(on_click=self.on_click)
        k_listener.start()
        m_listener.start()
        while self._running:
            self.msleep(200)
        k_listener.stop()
        m_listener.stop()

    def stop(self) -> None:
        self._running = False


class CaptureOneKeyThread(QThread):
    """Captures the next key or mouse button press globally and emits it as a bind string."""

    captured = pyqtSignal(str)
    cancelled = pyqtSignal()

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._done = False

    def run(self) -> None:
        try:
            from pynput import keyboard, mouse
        except ImportError:
            self.cancelled.emit()
            return

        def on_key(key) -> bool:
            if self._done:
                return False
            bind = key_to_bind(key)
            if bind:
                self._done = True
                self.captured.emit(bind)
            return False

        def on_click(x: int, y: int, button, pressed: bool) -> bool:
            if self._done or not pressed:
                return not self._done
            bind = getattr(button, "name", str(button)).lower()
            if bind == "left":
                return True
            self._done = True
            self.captured.emit(bind)
            return False

        k_listener = keyboard.Listener(on_release=on_key)
        m_listener = mouse.Listener(on_click=on_click)
        k_listener.start()
        m_listener.start()
        while not self._done and (k_listener.running or m_listener.running):
            self.msleep(50)
        k_listener.stop()
        m_listener.stop()

    def cancel(self) -> None:
        self._done = True


class GlobalHotkeyListener(QObject):
    """Starts a background thread that emits the bind string of any registered hotkey. Connect queued."""

    triggered = pyqtSignal(str)

    def __init__(self, get_binds: Callable[[], list[str]], parent: Optional[QObject] = None):
        super().__init__(parent)
        self._get_binds = get_binds
        self._thread: Optional[_ListenerThread] = None

    def start(self) -> None:
        if self._thread is not None and self._thread.isRunning():
            return
        self._thread = _ListenerThread(self._get_binds, self)
        self._thread.triggered.connect(self.triggered.emit)
        self._thread.start()

    def stop(self) -> None:
        if self._thread is not None:
            self._thread.stop()
            self._thread.wait(2000)
            self._thread = None
