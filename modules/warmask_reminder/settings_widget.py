"""Warmask Reminder settings: Reminder + Probe tabs. Reads/writes core.get_config('warmask_reminder') and core.get_config('core')['probe']."""

from __future__ import annotations

import copy
import logging
from dataclasses import replace
from typing import Any, Optional

from PyQt6.QtWidgets import (
    QCheckBox,
    QDoubleSpinBox,
    QFormLayout,
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QSpinBox,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from src.automation.global_hotkey import CaptureOneKeyThread, format_bind_for_display
from src.engine import COMMANDS
from src.models import ReminderSettings

logger = logging.getLogger(__name__)

ACCENT = "#948159"
SECONDARY = "#a6a6a6"

_COMMAND_LABELS = {
    "toggle_enabled": "Enable / disable",
    "toggle_show_outside_combat": "Outside combat",
    "toggle_timer": "Timer on icon",
    "toggle_warning": "Banner / icon",
}


def _row_label(text: str) -> QLabel:
    label = QLabel(text)
    label.setStyleSheet(f"color: {SECONDARY};")
    return label


def _section_frame(title: str, body: QWidget) -> QFrame:
    frame = QFrame()
    frame.setObjectName("sectionFrame")
    layout = QVBoxLayout(frame)
    layout.setContentsMargins(8, 8, 8, 8)
    header = QLabel(title.upper())
    header.setStyleSheet(f"color: {ACCENT}; font-weight: bold;")
    layout.addWidget(header)
    layout.addWidget(body)
    return frame


def _scroll(content: QWidget) -> QScrollArea:
    scroll = QScrollArea()
    scroll.setWidgetResizable(True)
    scroll.setFrameShape(QFrame.Shape.NoFrame)
    scroll.setWidget(content)
    return scroll


class WarmaskReminderSettingsWidget(QWidget):
    """Reminder options as in the in-game addon menu, command hotkeys and probe regions."""

    def __init__(self, module: Any, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._module = module
        self._core = module.core
        self._capture_thread: Optional[CaptureOneKeyThread] = None
        self._populating = False
        self._bind_buttons: dict[str, QPushButton] = {}
        self._region_rows: dict[str, dict[str, Any]] = {}
        self._build_ui()
        self._populate()
        self._connect_signals()

    def _settings(self) -> ReminderSettings:
        controller = self._module.get_controller()
        if controller is not None:
            return controller.settings
        return ReminderSettings.from_dict(self._core.get_config(self._module.key))

    def _build_ui(self) -> None:
        tabs = QTabWidget()
        tabs.addTab(self._build_reminder_tab(), "Reminder")
        tabs.addTab(self._build_probe_tab(), "Probe")
        layout = QVBoxLayout(self)
        layout.addWidget(tabs)

    # --- Reminder tab ---

    def _build_reminder_tab(self) -> QWidget:
        content = QWidget()
        layout = QVBoxLayout(content)
        layout.setSpacing(10)
        info = QLabel(
            "Alerts you when you're wearing the Huntsman War Mask in combat but missing its bonus buff."
        )
        info.setWordWrap(True)
        info.setStyleSheet(f"color: {SECONDARY};")
        layout.addWidget(info)

        options = QWidget()
        ol = QVBoxLayout(options)
        self._check_enabled = QCheckBox("Enable reminder")
        self._check_timer = QCheckBox("Toggle timer on icon")
        self._check_timer.setToolTip(
            "When enabled, a timer is displayed. Otherwise the timer disappears and you only get a 'Bash' reminder."
        )
        self._check_outside = QCheckBox("Show icon outside of combat")
        self._check_warning = QCheckBox("Switch between symbol and red text in the middle")
        self._check_warning.setToolTip("Enable for large red text in the centre of the screen, disable for the icon.")
        self._check_lock = QCheckBox("Lock the position of the icon")
        self._check_debug = QCheckBox("Debug logging")
        for cb in (
            self._check_enabled,
            self._check_timer,
            self._check_outside,
            self._check_warning,
            self._check_lock,
            self._check_debug,
        ):
            ol.addWidget(cb)
        layout.addWidget(_section_frame("Settings", options))

        binds = QWidget()
        fl = QFormLayout(binds)
        for command in COMMANDS:
            btn = QPushButton("Set")
            btn.setMaximumWidth(100)
            btn.setToolTip("Click, then press a key or mouse button. Right-click to clear.")
            self._bind_buttons[command] = btn
            fl.addRow(_row_label(_COMMAND_LABELS.get(command, command) + ":"), btn)
        layout.addWidget(_section_frame("Hotkeys", binds))

        self._command_status = QLabel("")
        self._command_status.setStyleSheet(f"color: {SECONDARY};")
        layout.addWidget(self._command_status)
        layout.addStretch()
        return _scroll(content)

    # --- Probe tab ---

    def _build_probe_tab(self) -> QWidget:
        content = QWidget()
        layout = QVBoxLayout(content)
        layout.setSpacing(10)

        general = QWidget()
        fl = QFormLayout(general)
        self._spin_monitor = QSpinBox()
        self._spin_monitor.setRange(1, 8)
        self._spin_monitor.setMaximumWidth(64)
        fl.addRow(_row_label("Monitor:"), self._spin_monitor)
        self._spin_fps = QSpinBox()
        self._spin_fps.setRange(1, 60)
        self._spin_fps.setMaximumWidth(64)
        fl.addRow(_row_label("Polling FPS:"), self._spin_fps)
        self._spin_buff_duration = QDoubleSpinBox()
        self._spin_buff_duration.setRange(1.0, 600.0)
        self._spin_buff_duration.setSuffix(" s")
        self._spin_buff_duration.setMaximumWidth(92)
        fl.addRow(_row_label("Buff duration:"), self._spin_buff_duration)
        layout.addWidget(_section_frame("Capture", general))

        regions = QWidget()
        rl = QVBoxLayout(regions)
        probe_cfg = self._core.get_config("core").get("probe") or {}
        for region in probe_cfg.get("regions") or []:
            if not isinstance(region, dict):
                continue
            rid = str(region.get("id", "") or "").strip().lower()
            if not rid:
                continue
            rl.addLayout(self._build_region_row(rid, str(region.get("name", "") or rid)))
        layout.addWidget(_section_frame("Regions", regions))
        self._probe_status = QLabel("")
        self._probe_status.setStyleSheet(f"color: {SECONDARY};")
        layout.addWidget(self._probe_status)
        layout.addStretch()
        return _scroll(content)

    def _build_region_row(self, region_id: str, name: str) -> QHBoxLayout:
        row = QHBoxLayout()
        label = _row_label(name)
        label.setMinimumWidth(120)
        row.addWidget(label)
        spins: dict[str, QSpinBox] = {}
        for field in ("left", "top", "width", "height"):
            s = QSpinBox()
            s.setRange(0, 10000)
            s.setMaximumWidth(70)
            s.setToolTip(field)
            spins[field] = s
            row.addWidget(s)
        btn = QPushButton("Calibrate")
        btn.setToolTip("Capture this region now, while the thing it watches is visible")
        row.addWidget(btn)
        state = QLabel("uncalibrated")
        state.setStyleSheet(f"color: {SECONDARY};")
        row.addWidget(state)
        row.addStretch()
        self._region_rows[region_id] = {"spins": spins, "button": btn, "state": state}
        return row

    # --- populate / signals ---

    def _populate(self) -> None:
        self._populating = True
        try:
            s = self._settings()
            self._check_enabled.setChecked(s.enabled)
            self._check_timer.setChecked(s.toggle_timer)
            self._check_outside.setChecked(s.show_outside_combat)
            self._check_warning.setChecked(s.toggle_warning)
            self._check_lock.setChecked(s.lock_position)
            self._check_lock.setEnabled(not s.toggle_warning)
            self._check_debug.setChecked(s.debug_mode)
            for command, btn in self._bind_buttons.items():
                btn.setText(format_bind_for_display(s.hotkeys.get(command, "")))
            core_cfg = self._core.get_config("core")
            probe_cfg = core_cfg.get("probe") or {}
            self._spin_monitor.setValue(int(core_cfg.get("monitor_index", 1)))
            self._spin_fps.setValue(int(probe_cfg.get("polling_fps", 10)))
            self._spin_buff_duration.setValue(float(probe_cfg.get("buff_duration_seconds", 60.0)))
            for region in probe_cfg.get("regions") or []:
                rid = str(region.get("id", "") or "").strip().lower()
                row = self._region_rows.get(rid)
                if row is None:
                    continue
                for field, spin in row["spins"].items():
                    spin.setValue(int(region.get(field, 0)))
                calibrated = bool((region.get("calibration") or {}).get("present_template"))
                row["state"].setText("calibrated" if calibrated else "uncalibrated")
        finally:
            self._populating = False

    def _connect_signals(self) -> None:
        self._check_enabled.toggled.connect(lambda v: self._set_option("enabled", v))
        self._check_timer.toggled.connect(lambda v: self._set_option("toggle_timer", v))
        self._check_outside.toggled.connect(lambda v: self._set_option("show_outside_combat", v))
        self._check_warning.toggled.connect(self._on_warning_toggled)
        self._check_lock.toggled.connect(lambda v: self._set_option("lock_position", v))
        self._check_debug.toggled.connect(lambda v: self._set_option("debug_mode", v))
        for command, btn in self._bind_buttons.items():
            btn.clicked.connect(lambda _checked=False, c=command: self._capture_bind(c))
        self._spin_monitor.valueChanged.connect(lambda _v: self._save_probe_config())
        self._spin_fps.valueChanged.connect(lambda _v: self._save_probe_config())
        self._spin_buff_duration.valueChanged.connect(lambda _v: self._save_probe_config())
        for rid, row in self._region_rows.items():
            for spin in row["spins"].values():
                spin.valueChanged.connect(lambda _v: self._save_probe_config())
            row["button"].clicked.connect(lambda _checked=False, r=rid: self._calibrate(r))
        self._module.command_signal.connect(self._on_command_message)
        self._module.region_states_updated_signal.connect(self._on_region_states)

    def _set_option(self, field: str, value: bool) -> None:
        if self._populating:
            return
        settings = replace(self._settings(), **{field: bool(value)})
        self._module.apply_settings(settings)

    def _on_warning_toggled(self, value: bool) -> None:
        self._check_lock.setEnabled(not value)
        self._set_option("toggle_warning", value)

    def _on_command_message(self, message: str) -> None:
        self._command_status.setText(message)
        self._populate()

    def _capture_bind(self, command: str) -> None:
        if self._capture_thread is not None and self._capture_thread.isRunning():
            return
        btn = self._bind_buttons[command]
        btn.setText("Press key…")
        self._capture_thread = CaptureOneKeyThread(self)
        self._capture_thread.captured.connect(lambda bind, c=command: self._on_bind_captured(c, bind))
        self._capture_thread.cancelled.connect(self._populate)
        self._capture_thread.start()

    def _on_bind_captured(self, command: str, bind: str) -> None:
        settings = self._settings()
        hotkeys = dict(settings.hotkeys)
        # Right-click clears the bind.
        hotkeys[command] = "" if bind == "right" else bind
        self._module.apply_settings(replace(settings, hotkeys=hotkeys))
        self._populate()

    def _save_probe_config(self) -> None:
        if self._populating:
            return
        core_cfg = copy.deepcopy(self._core.get_config("core"))
        probe_cfg = dict(core_cfg.get("probe") or {})
        core_cfg["monitor_index"] = self._spin_monitor.value()
        probe_cfg["polling_fps"] = self._spin_fps.value()
        probe_cfg["buff_duration_seconds"] = self._spin_buff_duration.value()
        regions = [dict(r) for r in (probe_cfg.get("regions") or []) if isinstance(r, dict)]
        for region in regions:
            row = self._region_rows.get(str(region.get("id", "") or "").strip().lower())
            if row is None:
                continue
            for field, spin in row["spins"].items():
                region[field] = spin.value()
        probe_cfg["regions"] = regions
        core_cfg["probe"] = probe_cfg
        self._core.save_config("core", core_cfg)
        self._module.on_config_changed("core", core_cfg)

    def _calibrate(self, region_id: str) -> None:
        ok, message = self._module.calibrate_region_present(region_id)
        self._probe_status.setText(message)
        if ok:
            self._populate()

    def _on_region_states(self, states: dict) -> None:
        for rid, row in self._region_rows.items():
            state = (states or {}).get(rid)
            if not isinstance(state, dict):
                continue
            status = str(state.get("status", ""))
            if status == "ok":
                row["state"].setText(f"{'present' if state.get('present') else 'absent'} ({state.get('similarity', 0.0):.2f})")
            else:
                row["state"].setText(status)
