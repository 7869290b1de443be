"""Warmask Reminder module: probe regions, reminder controller, overlay, tick timer. Evaluation runs on the GUI thread."""

from __future__ import annotations

import logging
from abc import ABCMeta
from typing import Any, Callable, Optional

import numpy as np
from PyQt6.QtCore import QObject, Qt, QTimer, pyqtSignal

from src.analysis import ProbeEventSource, RegionProbe
from src.analysis.region_probe import encode_gray_template, to_gray
from src.automation.global_hotkey import normalize_bind
from src.capture import ScreenCapture
from src.core.base_module import BaseModule
from src.core.config_migration import REMINDER_KEY
from src.engine import ADDON_NAME, COMMANDS, ReminderController, run_command
from src.engine.controller import TICK_INTERVAL_MS
from src.models import AddonLoaded, BoundingBox, Evaluation, ReminderEvent, ReminderSettings, Tick
from src.overlay import create_overlay

logger = logging.getLogger(__name__)


class _ModuleMeta(type(QObject), ABCMeta):
    """Combined metaclass so WarmaskReminderModule can inherit QObject and BaseModule (ABC)."""
    pass


class QtScheduler:
    """Deferred callbacks on the Qt event loop."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        QTimer.singleShot(int(delay_ms), callback)


class WarmaskReminderModule(QObject, BaseModule, metaclass=_ModuleMeta):
    """Warns when the Huntsman Warmask is worn without its buff. Owns RegionProbe, ProbeEventSource and ReminderController."""

    name = "Warmask Reminder"
    key = REMINDER_KEY
    version = "1.1.0"
    description = "Warns when the Huntsman Warmask is equipped but its buff is missing"
    requires: list[str] = []
    optional: list[str] = []
    provides_services = ["engine_state", "last_evaluation", "settings", "region_states"]
    hooks = ["directive_applied", "command"]

    # Emitted from the capture thread; connected with QueuedConnection so the core only runs on the GUI thread
    region_states_signal = pyqtSignal(object)
    evaluation_signal = pyqtSignal(object)
    region_states_updated_signal = pyqtSignal(object)
    command_signal = pyqtSignal(str)

    def __init__(self) -> None:
        QObject.__init__(self)
        BaseModule.__init__(self)
        self._probe: Optional[RegionProbe] = None
        self._source: Optional[ProbeEventSource] = None
        self._controller: Optional[ReminderController] = None
        self._overlay: Optional[Any] = None
        self._tick_timer: Optional[QTimer] = None
        self._status_widget: Optional[Any] = None
        self._region_states: dict[str, dict] = {}

    def _probe_config(self) -> dict:
        if self.core is None:
            return {}
        return dict(self.core.get_config("core").get("probe") or {})

    def _load_settings(self) -> ReminderSettings:
        if self.core is None:
            return ReminderSettings()
        return ReminderSettings.from_dict(self.core.get_config(self.key))

    def setup(self, core: Any) -> None:
        super().setup(core)
        probe_cfg = self._probe_config()
        self._probe = RegionProbe(probe_cfg.get("regions") or [])
        self._source = ProbeEventSource(
            sink=self.dispatch,
            buff_duration_seconds=float(probe_cfg.get("buff_duration_seconds", 60.0)),
        )
        self._controller = ReminderController(
            settings=self._load_settings(),
            facts=self._source,
            scheduler=QtScheduler(),
            persist=self._persist_settings,
            on_evaluation=self._on_evaluation,
        )
        self._overlay = create_overlay()
        self._controller.attach_display(self._overlay)
        self.region_states_signal.connect(self._on_region_states, Qt.ConnectionType.QueuedConnection)
        self._tick_timer = QTimer(self)
        self._tick_timer.setInterval(TICK_INTERVAL_MS)
        self._tick_timer.timeout.connect(lambda: self.dispatch(Tick()))

    def ready(self) -> None:
        """Bootstrap the controller and start the 250ms tick."""
        if self._controller is None or self._tick_timer is None:
            return
        self.dispatch(AddonLoaded(addon_name=ADDON_NAME))
        self._tick_timer.start()

    def get_controller(self) -> Optional[ReminderController]:
        return self._controller

    def dispatch(self, event: ReminderEvent) -> None:
        """Forward an event to the controller. GUI thread only."""
        if self._controller is not None:
            self._controller.dispatch(event)

    def on_frame(self, frame: np.ndarray, origin: tuple[int, int] = (0, 0)) -> None:
        if self._probe is None:
            return
        states = self._probe.analyze_frame(frame, origin)
        self.region_states_signal.emit(states)

    def _on_region_states(self, states: dict) -> None:
        self._region_states = dict(states or {})
        if self._source is not None:
            self._source.on_region_states(self._region_states)
        self.region_states_updated_signal.emit(self._region_states)

    def _persist_settings(self, settings: ReminderSettings) -> None:
        if self.core is None:
            return
        self.core.save_config(self.key, settings.to_dict())

    def _on_evaluation(self, result: Evaluation) -> None:
        self.evaluation_signal.emit(result)
        if self.core is not None:
            d = result.directive
            self.core.emit(
                f"{self.key}.directive_applied",
                mode=d.mode.value,
                text=d.text,
                color=d.color,
                fired=result.fired,
            )

    def apply_settings(self, settings: ReminderSettings) -> None:
        """Persist settings edited in the UI and hand them to the controller."""
        self._persist_settings(settings)
        if self._controller is not None:
            self._controller.replace_settings(settings)

    def on_config_changed(self, key: str, value: Any) -> None:
        if self._controller is None:
            return
        if key == self.key:
            self._controller.replace_settings(self._load_settings())
        elif key == "core":
            self.reload_probe_config()

    def reload_probe_config(self) -> None:
        probe_cfg = self._probe_config()
        if self._probe is not None:
            self._probe.update_regions(probe_cfg.get("regions") or [])
        if self._source is not None:
            self._source.set_buff_duration(float(probe_cfg.get("buff_duration_seconds", 60.0)))

    def handle_command(self, command: str) -> Optional[str]:
        if self._controller is None or command not in COMMANDS:
            return None
        message = run_command(self._controller, command)
        self.command_signal.emit(message)
        if self.core is not None:
            self.core.emit(f"{self.key}.command", command=command, message=message)
        return message

    def get_hotkey_binds(self) -> list[dict]:
        """Hotkey definitions for the toggle commands: {"bind": "f9", "command": "toggle_enabled"}."""
        settings = self._controller.settings if self._controller is not None else self._load_settings()
        result: list[dict] = []
        for command, bind in settings.hotkeys.items():
            b = normalize_bind(bind)
            if b and command in COMMANDS:
                result.append({"bind": b, "command": command})
        return result

    def calibrate_region_present(self, region_id: str) -> tuple[bool, str]:
        """Capture the region as it looks right now and store it as its present template. Returns (success, message)."""
        rid = str(region_id or "").strip().lower()
        if not rid:
            return False, "No region id"
        if self.core is None:
            return False, "Module not ready"
        core_cfg = self.core.get_config("core")
        probe_cfg = dict(core_cfg.get("probe") or {})
        regions = [dict(r) for r in (probe_cfg.get("regions") or []) if isinstance(r, dict)]
        region = next((r for r in regions if str(r.get("id", "") or "").strip().lower() == rid), None)
        if region is None:
            return False, f"Region not found: {rid}"
        box = BoundingBox.from_dict(region)
        if box.width <= 1 or box.height <= 1:
            return False, "Region size must be > 1x1"
        try:
            cap = ScreenCapture(monitor_index=int(core_cfg.get("monitor_index", 1)))
            cap.start()
            try:
                frame = cap.grab_region(box)
            finally:
                cap.stop()
            calibration = dict(region.get("calibration") or {})
            calibration["present_template"] = encode_gray_template(to_gray(frame))
            region["calibration"] = calibration
            probe_cfg["regions"] = regions
            core_cfg = dict(core_cfg)
            core_cfg["probe"] = probe_cfg
            self.core.save_config("core", core_cfg)
            self.reload_probe_config()
            return True, f"Region '{region.get('name', rid)}' calibrated"
        except Exception as e:
            logger.error("Region calibration failed: %s", e, exc_info=True)
            return False, str(e)

    def get_service_value(self, service_name: str) -> Any:
        if self._controller is None:
            return None
        if service_name == "engine_state":
            return self._controller.state
        if service_name == "last_evaluation":
            return self._controller.last_evaluation
        if service_name == "settings":
            return self._controller.settings
        if service_name == "region_states":
            return dict(self._region_states)
        return None

    def get_settings_widget(self) -> Optional[Any]:
        """Return the reminder settings widget. Implemented in settings_widget.py."""
        from modules.warmask_reminder.settings_widget import WarmaskReminderSettingsWidget
        if self.core is None:
            return None
        return WarmaskReminderSettingsWidget(self)

    def get_status_widget(self) -> Optional[Any]:
        """Return the status widget. Same instance every time so the main window updates the visible widget."""
        from modules.warmask_reminder.status_widget import WarmaskReminderStatusWidget
        if self.core is None:
            return None
        if self._status_widget is None:
            self._status_widget = WarmaskReminderStatusWidget(self)
        return self._status_widget

    def teardown(self) -> None:
        if self._tick_timer is not None:
            self._tick_timer.stop()
        if self._controller is not None:
            self._controller.shutdown()
        if self._overlay is not None:
            self._overlay.close()
            self._overlay = None
