from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional

TARGET_ITEM_ID = 223189  # Huntsman Warmask
TARGET_BUFF_ID = 252050
PLAYER_UNIT_TAG = "player"
HEAD_SLOT = "head"
SETTINGS_VERSION = 1

COLOR_GREEN = "#00ff00"
COLOR_RED = "#ff3333"
COLOR_WHITE = "#ffffff"


class DisplayMode(Enum):
    HIDDEN = "hidden"
    BUFF_COUNTDOWN = "buff_countdown"
    POST_EXPIRY = "post_expiry"
    BASH = "bash"
    BANNER = "banner"


@dataclass(frozen=True)
class Position:
    """Widget anchor: (point, relative_to, relative_point) plus offset."""
    point: str = "CENTER"
    relative_to: str = "GuiRoot"
    relative_point: str = "CENTER"
    x: float = 0.0
    y: float = 0.0

    def same_offset(self, other: "Position") -> bool:
        """Offsets are compared in whole pixels."""
        return round(self.x) == round(other.x) and round(self.y) == round(other.y)

    @classmethod
    def from_dict(cls, data: Any) -> "Position":
        if not isinstance(data, dict):
            return cls()
        default = cls()
        try:
            x = float(round(float(data.get("x", default.x))))
            y = float(round(float(data.get("y", default.y))))
        except (TypeError, ValueError, OverflowError):
            x, y = default.x, default.y
        return cls(
            point=str(data.get("point") or default.point),
            relative_to=str(data.get("relative_to") or default.relative_to),
            relative_point=str(data.get("relative_point") or default.relative_point),
            x=x,
            y=y,
        )

    def to_dict(self) -> dict:
        return {
            "point": self.point,
            "relative_to": self.relative_to,
            "relative_point": self.relative_point,
            "x": self.x,
            "y": self.y,
        }


def _default_hotkeys() -> dict[str, str]:
    return {
        "toggle_enabled": "",
        "toggle_show_outside_combat": "",
        "toggle_timer": "",
        "toggle_warning": "",
    }


@dataclass
class ReminderSettings:
    """Persisted reminder options. Stored under the 'warmask_reminder' config namespace."""
    enabled: bool = True
    debug_mode: bool = False
    show_outside_combat: bool = False
    toggle_timer: bool = True
    toggle_warning: bool = False
    lock_position: bool = False
    position: Position = field(default_factory=Position)
    hotkeys: dict[str, str] = field(default_factory=_default_hotkeys)
    version: int = SETTINGS_VERSION
    extra: dict[str, Any] = field(default_factory=dict)

    _BOOL_KEYS: ClassVar[tuple[str, ...]] = (
        "enabled",
        "debug_mode",
        "show_outside_combat",
        "toggle_timer",
        "toggle_warning",
        "lock_position",
    )
    _KNOWN_KEYS: ClassVar[frozenset[str]] = frozenset(
        _BOOL_KEYS + ("position", "hotkeys", "version")
    )

    @classmethod
    def from_dict(cls, data: Any) -> "ReminderSettings":
        """Build settings from a config slice; missing or malformed fields use defaults."""
        if not isinstance(data, dict):
            data = {}
        s = cls()
        for key in cls._BOOL_KEYS:
            value = data.get(key)
            if isinstance(value, bool):
                setattr(s, key, value)
        s.position = Position.from_dict(data.get("position"))
        hotkeys = _default_hotkeys()
        raw_hotkeys = data.get("hotkeys")
        if isinstance(raw_hotkeys, dict):
            for name in hotkeys:
                hotkeys[name] = str(raw_hotkeys.get(name, "") or "")
        s.hotkeys = hotkeys
        try:
            s.version = int(data.get("version", SETTINGS_VERSION))
        except (TypeError, ValueError):
            s.version = SETTINGS_VERSION
        s.extra = {k: v for k, v in data.items() if k not in cls._KNOWN_KEYS}
        return s

    def to_dict(self) -> dict:
        out: dict[str, Any] = dict(self.extra)
        for key in self._BOOL_KEYS:
            out[key] = bool(getattr(self, key))
        out["position"] = self.position.to_dict()
        out["hotkeys"] = dict(self.hotkeys)
        out["version"] = self.version
        return out


@dataclass(frozen=True)
class EngineState:
    """Transient evaluation state. Lives for the process lifetime, never persisted."""
    is_in_combat: bool = False
    has_target_equipped: bool = False
    last_reminder_ms: float = 0.0
    remaining_buff_seconds: float = 0.0
    cooldown_display_seconds: float = 0.0


@dataclass(frozen=True)
class LiveFacts:
    """Snapshot of what the game currently reports, taken right before an evaluation."""
    is_in_combat: bool = False
    has_target_equipped: bool = False
    buff_active: bool = False
    buff_remaining_seconds: float = 0.0
    camera_in_ui_mode: bool = False
    now_ms: float = 0.0


@dataclass(frozen=True)
class VisualDirective:
    mode: DisplayMode = DisplayMode.HIDDEN
    text: str = ""
    color: Optional[str] = None

    @property
    def icon_visible(self) -> bool:
        return self.mode in (DisplayMode.BUFF_COUNTDOWN, DisplayMode.POST_EXPIRY, DisplayMode.BASH)

    @property
    def banner_visible(self) -> bool:
        return self.mode is DisplayMode.BANNER


HIDDEN = VisualDirective()


@dataclass(frozen=True)
class Evaluation:
    """Result of one engine pass. fired is True only when the 1s reminder gate opened."""
    directive: VisualDirective
    state: EngineState
    fired: bool = False
