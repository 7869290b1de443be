"""Main window: module status widgets, module settings tabs, probe start/stop."""

from __future__ import annotations

import logging
from typing import Any, Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QMainWindow,
    QPushButton,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

logger = logging.getLogger(__name__)

WINDOW_BG = "#1e1e2e"
TEXT_COLOR = "#d4d4d4"


class MainWindow(QMainWindow):
    """Hosts what the loaded modules provide. The probe button is wired up by main."""

    probe_toggle_requested = pyqtSignal()

    def __init__(self, core: Any, module_manager: Any, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._core = core
        self._module_manager = module_manager
        self.setWindowTitle("Warmask Reminder")
        self.setMinimumSize(560, 480)
        self.setStyleSheet(f"QMainWindow, QWidget {{ background: {WINDOW_BG}; color: {TEXT_COLOR}; }}")
        self._build_ui()

    def _build_ui(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        top = QHBoxLayout()
        self._btn_probe = QPushButton("▶ Start Probe")
        self._btn_probe.clicked.connect(self.probe_toggle_requested.emit)
        top.addWidget(self._btn_probe)
        top.addStretch()
        layout.addLayout(top)

        for name, widget in self._module_manager.get_status_widgets():
            layout.addWidget(widget)

        tabs = QTabWidget()
        for name, widget in self._module_manager.get_settings_widgets():
            tabs.addTab(widget, name)
        layout.addWidget(tabs, 1)
        self.setCentralWidget(central)
        self.statusBar().showMessage("Probe stopped")

    def set_probe_running(self, running: bool) -> None:
        self._btn_probe.setText("⏹ Stop Probe" if running else "▶ Start Probe")

    def show_status_message(self, message: str, timeout_ms: int = 2000) -> None:
        self.statusBar().showMessage(message, timeout_ms)
