"""Warmask Reminder status: live facts, current directive and counters. Updated via module signals (QueuedConnection)."""

from __future__ import annotations

from typing import Any, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QFrame, QGridLayout, QLabel, QVBoxLayout, QWidget

from src.models import DisplayMode, Evaluation

SECTION_BG = "#252535"
SECTION_BORDER = "#3a3a4a"
OK_COLOR = "#66dd88"
WARN_COLOR = "#ff5555"
MUTED_COLOR = "#a6a6a6"

_MODE_LABELS = {
    DisplayMode.HIDDEN: "Hidden",
    DisplayMode.BUFF_COUNTDOWN: "Buff active",
    DisplayMode.POST_EXPIRY: "Buff expiring",
    DisplayMode.BASH: "Bash now",
    DisplayMode.BANNER: "Banner",
}


class WarmaskReminderStatusWidget(QWidget):
    """Combat / warmask / buff flags, the active visual mode and both countdowns."""

    def __init__(self, module: Any, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._module = module
        self._values: dict[str, QLabel] = {}
        self._build_ui()
        module.evaluation_signal.connect(self.update_evaluation, Qt.ConnectionType.QueuedConnection)
        module.region_states_updated_signal.connect(self.update_region_states, Qt.ConnectionType.QueuedConnection)

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        frame = QFrame(self)
        frame.setObjectName("sectionFrame")
        frame.setStyleSheet(
            f"background: {SECTION_BG}; border: 1px solid {SECTION_BORDER}; border-radius: 4px; padding: 6px;"
        )
        grid = QGridLayout(frame)
        grid.setContentsMargins(8, 8, 8, 8)
        title = QLabel("REMINDER STATUS")
        title.setObjectName("sectionTitle")
        grid.addWidget(title, 0, 0, 1, 2)
        rows = [
            ("combat", "In combat"),
            ("helmet", "Warmask equipped"),
            ("buff", "Buff active"),
            ("ui_mode", "Cursor mode"),
            ("mode", "Display"),
            ("remaining", "Buff remaining"),
            ("cooldown", "Post-expiry"),
        ]
        for i, (key, label) in enumerate(rows, start=1):
            name = QLabel(label)
            name.setStyleSheet(f"color: {MUTED_COLOR}; border: none;")
            value = QLabel("—")
            value.setStyleSheet("border: none;")
            grid.addWidget(name, i, 0)
            grid.addWidget(value, i, 1)
            self._values[key] = value
        layout.addWidget(frame)

    def _set_flag(self, key: str, value: Optional[bool], status: str = "ok") -> None:
        label = self._values[key]
        if status != "ok":
            label.setText(status)
            label.setStyleSheet(f"color: {MUTED_COLOR}; border: none;")
            return
        label.setText("yes" if value else "no")
        label.setStyleSheet(f"color: {OK_COLOR if value else WARN_COLOR}; border: none;")

    def update_region_states(self, states: dict) -> None:
        for key in ("combat", "helmet", "buff", "ui_mode"):
            state = (states or {}).get(key)
            if not isinstance(state, dict):
                continue
            self._set_flag(key, bool(state.get("present")), str(state.get("status", "ok")))

    def update_evaluation(self, result: Evaluation) -> None:
        directive = result.directive
        text = _MODE_LABELS.get(directive.mode, directive.mode.value)
        if directive.text and directive.mode is not DisplayMode.BANNER:
            text = f"{text} ({directive.text})"
        self._values["mode"].setText(text)
        self._values["remaining"].setText(f"{result.state.remaining_buff_seconds:.1f}s")
        self._values["cooldown"].setText(f"{result.state.cooldown_display_seconds:.1f}s")
