"""Warmask Reminder — Main entry point.

Wires together: screen capture → region probe → reminder controller → overlay.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from PyQt6.QtCore import QThread, Qt
from PyQt6.QtWidgets import QApplication

from src.automation.global_hotkey import GlobalHotkeyListener, normalize_bind
from src.capture import ScreenCapture, capture_plan
from src.core import REMINDER_KEY, ConfigManager, Core, ModuleManager
from src.ui import MainWindow

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

_SCRIPT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = _SCRIPT_DIR.parent
CONFIG_PATH = PROJECT_ROOT / "config" / "default_config.json"


class ProbeCaptureWorker(QThread):
    """Capture loop: grab the rectangle spanning all probe regions and hand it to the modules."""

    def __init__(self, core, module_manager):
        super().__init__()
        self._core = core
        self._module_manager = module_manager
        self._running = False
        self._capture = None
        self._active_monitor_index = None

    def _start_capture(self, monitor_index: int) -> None:
        self._capture = ScreenCapture(monitor_index=monitor_index)
        self._capture.start()
        self._active_monitor_index = monitor_index

    def run(self) -> None:
        self._running = True
        core_cfg = self._core.get_config("core")
        self._start_capture(int(core_cfg.get("monitor_index", 1)))
        logger.info("Probe capture worker started")
        try:
            while self._running:
                core_cfg = self._core.get_config("core")
                probe_cfg = core_cfg.get("probe") or {}
                fps = max(1, min(60, int(probe_cfg.get("polling_fps", 10))))
                try:
                    mid = int(core_cfg.get("monitor_index", 1))
                    if self._active_monitor_index != mid:
                        self._capture.stop()
                        self._start_capture(mid)
                    monitor = self._capture.monitor_info
                    bbox = capture_plan(
                        probe_cfg.get("regions") or [],
                        int(monitor["width"]),
                        int(monitor["height"]),
                    )
                    if bbox is not None:
                        frame = self._capture.grab_region(bbox)
                        self._module_manager.process_frame(frame, (bbox.left, bbox.top))
                except Exception as e:
                    logger.error("Probe capture error: %s", e, exc_info=True)
                self.msleep(int(1000 / fps))
        finally:
            if self._capture is not None:
                self._capture.stop()

    def stop(self) -> None:
        self._running = False
        self.wait()


def main() -> None:
    app = QApplication(sys.argv)
    app.setStyle("Fusion")
    app.setQuitOnLastWindowClosed(True)

    # --- Config: load (with defaults), Core, ModuleManager ---
    config_manager = ConfigManager(CONFIG_PATH)
    config_manager.load_from_file()
    core_cfg = config_manager.get_config("core")

    core = Core(config_manager)
    module_manager = ModuleManager(core)
    module_manager.discover(PROJECT_ROOT / "modules")
    module_manager.load(core_cfg.get("modules_enabled") or [REMINDER_KEY])

    window = MainWindow(core, module_manager)
    if (core_cfg.get("display") or {}).get("always_on_top", False):
        window.setWindowFlags(window.windowFlags() | Qt.WindowType.WindowStaysOnTopHint)
    window.show()

    # --- Probe worker ---
    worker = ProbeCaptureWorker(core, module_manager)
    probe_running = [False]

    def toggle_probe() -> None:
        if probe_running[0]:
            worker.stop()
            probe_running[0] = False
        else:
            worker.start()
            probe_running[0] = True
        window.set_probe_running(probe_running[0])
        window.show_status_message("Probe running" if probe_running[0] else "Probe stopped")

    window.probe_toggle_requested.connect(toggle_probe)
    if (core_cfg.get("probe") or {}).get("enabled", True):
        toggle_probe()

    # --- Hotkeys: every bind maps to one module command ---
    def all_binds() -> list[str]:
        return [b["bind"] for b in module_manager.get_hotkey_binds()]

    def on_hotkey_triggered(triggered_bind: str) -> None:
        bind = normalize_bind(triggered_bind or "")
        for b in module_manager.get_hotkey_binds():
            if normalize_bind(b.get("bind", "")) != bind:
                continue
            message = module_manager.dispatch_command(b["module_key"], b["command"])
            if message:
                window.show_status_message(message, 2000)

    hotkey_listener = GlobalHotkeyListener(get_binds=all_binds)
    hotkey_listener.triggered.connect(on_hotkey_triggered, Qt.ConnectionType.QueuedConnection)
    hotkey_listener.start()

    exit_code = app.exec()
    hotkey_listener.stop()
    if probe_running[0]:
        worker.stop()
    module_manager.shutdown()
    config_manager.save()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
