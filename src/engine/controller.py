"""Reminder controller: owns EngineState, dispatches host events, applies directives to the display."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Any, Callable, Optional, Protocol

from src.engine.conditions import evaluate, should_hide_for_context
from src.engine.drag import track_position
from src.engine.scheduler import DeferredTask, Scheduler
from src.models.events import (
    AddonLoaded,
    CombatStateChanged,
    EffectChange,
    EffectChanged,
    EquipmentChanged,
    EventKind,
    ReminderEvent,
    Tick,
)
from src.models.reminder import (
    HEAD_SLOT,
    PLAYER_UNIT_TAG,
    TARGET_BUFF_ID,
    TARGET_ITEM_ID,
    DisplayMode,
    EngineState,
    Evaluation,
    LiveFacts,
    Position,
    ReminderSettings,
)

logger = logging.getLogger(__name__)

ADDON_NAME = "HuntsmanWarmaskReminder"
TICK_INTERVAL_MS = 250
BUFF_FADE_RECHECK_MS = 100


class DisplayAdapter(Protocol):
    def show_icon(self, text: str, color: Optional[str]) -> None: ...
    def hide_icon(self) -> None: ...
    def show_banner(self) -> None: ...
    def hide_banner(self) -> None: ...
    def get_widget_anchor(self) -> Optional[Position]: ...
    def set_widget_anchor(self, position: Position) -> None: ...
    def set_locked(self, locked: bool) -> None: ...


class FactProvider(Protocol):
    def buff_status(self) -> tuple[bool, float]: ...
    def camera_in_ui_mode(self) -> bool: ...
    def head_item_id(self) -> Optional[int]: ...


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class ReminderController:
    """Single-threaded reminder core. Every handler runs to completion before the next one starts."""

    def __init__(
        self,
        settings: ReminderSettings,
        facts: FactProvider,
        scheduler: Scheduler,
        display: Optional[DisplayAdapter] = None,
        persist: Optional[Callable[[ReminderSettings], None]] = None,
        clock: Callable[[], float] = _monotonic_ms,
        on_evaluation: Optional[Callable[[Evaluation], None]] = None,
    ) -> None:
        self._settings = settings
        self._facts = facts
        self._display = display
        self._persist = persist
        self._clock = clock
        self._on_evaluation = on_evaluation
        self._state = EngineState()
        self._loaded = False
        self._last_evaluation: Optional[Evaluation] = None
        self._recheck = DeferredTask(scheduler, lambda: self.evaluate_now("buff faded"))
        self._handlers: dict[EventKind, Callable[[Any], None]] = {
            EventKind.COMBAT_STATE_CHANGED: self._on_combat_state,
            EventKind.EQUIPMENT_CHANGED: self._on_equipment_changed,
            EventKind.EFFECT_CHANGED: self._on_effect_changed,
            EventKind.ADDON_LOADED: self._on_addon_loaded,
            EventKind.TICK: self._on_tick,
        }

    @property
    def settings(self) -> ReminderSettings:
        return self._settings

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def last_evaluation(self) -> Optional[Evaluation]:
        return self._last_evaluation

    @property
    def recheck(self) -> DeferredTask:
        return self._recheck

    def attach_display(self, display: Optional[DisplayAdapter]) -> None:
        """Set (or clear) the display adapter. None makes every display call a no-op."""
        self._display = display
        if display is not None:
            display.set_widget_anchor(self._settings.position)
            display.set_locked(self._settings.lock_position)

    def replace_settings(self, settings: ReminderSettings) -> None:
        """Adopt settings changed elsewhere (settings widget, config import) and re-evaluate."""
        was_enabled = self._settings.enabled
        self._settings = settings
        if self._display is not None:
            self._display.set_locked(settings.lock_position)
        if was_enabled and not settings.enabled:
            self.disable()
        else:
            self.evaluate_now("settings replaced")

    def update_settings(self, **changes: Any) -> ReminderSettings:
        """Apply field changes, persist, and run the follow-up evaluation."""
        new_settings = replace(self._settings, **changes)
        self._settings = new_settings
        self._save()
        if "lock_position" in changes and self._display is not None:
            self._display.set_locked(new_settings.lock_position)
        if "enabled" in changes and not new_settings.enabled:
            self.disable()
        else:
            self.evaluate_now("settings changed")
        return new_settings

    def disable(self) -> None:
        """Drop pending re-checks and hide everything."""
        self._recheck.cancel()
        self.force_hidden()

    def shutdown(self) -> None:
        self._recheck.cancel()
        self.track_drag()
        self.force_hidden()

    # --- event dispatch ---

    def dispatch(self, event: ReminderEvent) -> None:
        handler = self._handlers.get(event.kind)
        if handler is None:
            logger.warning("No handler for event kind %s", event.kind)
            return
        handler(event)

    def _on_combat_state(self, event: CombatStateChanged) -> None:
        self._state = replace(self._state, is_in_combat=bool(event.in_combat))
        self._debug("Combat status: %s", "In combat" if event.in_combat else "Not in combat")
        if should_hide_for_context(self._settings, self._state.is_in_combat, self._camera_in_ui_mode()):
            self.force_hidden()
        else:
            self.evaluate_now("combat state")

    def _on_equipment_changed(self, event: EquipmentChanged) -> None:
        if event.slot != HEAD_SLOT:
            return
        if not event.item_id:
            self._debug("No helmet equipped!")
            self._state = replace(self._state, has_target_equipped=False)
            self.force_hidden()
            return
        self._debug("Helmet changed: %s (ID: %s)", event.item_name or "Unknown", event.item_id)
        self._state = replace(self._state, has_target_equipped=event.item_id == TARGET_ITEM_ID)
        self.evaluate_now("equipment")

    def _on_effect_changed(self, event: EffectChanged) -> None:
        if event.unit_tag != PLAYER_UNIT_TAG or event.ability_id != TARGET_BUFF_ID:
            return
        if event.change is EffectChange.GAINED:
            self._debug("Warmask buff activated - hiding banner")
            self._hide_banner()
        elif event.change is EffectChange.FADED:
            self._debug("Warmask buff faded - re-checking in %sms", BUFF_FADE_RECHECK_MS)
            self._recheck.schedule(BUFF_FADE_RECHECK_MS)

    def _on_addon_loaded(self, event: AddonLoaded) -> None:
        if event.addon_name != ADDON_NAME or self._loaded:
            return
        self._loaded = True
        item_id = self._facts.head_item_id()
        self._state = replace(self._state, has_target_equipped=item_id == TARGET_ITEM_ID)
        self._debug("Addon initialized, warmask equipped: %s", self._state.has_target_equipped)
        self.evaluate_now("addon loaded")

    def _on_tick(self, event: Tick) -> None:
        s = self._state
        if self._settings.enabled and s.is_in_combat and s.has_target_equipped:
            self.evaluate_now("tick")
        else:
            self.track_drag()

    # --- evaluation ---

    def live_facts(self) -> Optional[LiveFacts]:
        """Current facts, or None when the display is not available."""
        if self._display is None:
            return None
        buff_active, remaining = self._facts.buff_status()
        return LiveFacts(
            is_in_combat=self._state.is_in_combat,
            has_target_equipped=self._state.has_target_equipped,
            buff_active=buff_active,
            buff_remaining_seconds=remaining,
            camera_in_ui_mode=self._camera_in_ui_mode(),
            now_ms=self._clock(),
        )

    def evaluate_now(self, reason: str = "") -> Optional[Evaluation]:
        facts = self.live_facts()
        if facts is None:
            return None
        self.track_drag()
        result = evaluate(self._settings, self._state, facts)
        self._state = result.state
        self._last_evaluation = result
        self._debug(
            "Evaluated (%s): mode=%s text=%r fired=%s remaining=%.1f cooldown=%.1f",
            reason,
            result.directive.mode.value,
            result.directive.text,
            result.fired,
            result.state.remaining_buff_seconds,
            result.state.cooldown_display_seconds,
        )
        self._apply(result)
        if self._on_evaluation is not None:
            self._on_evaluation(result)
        return result

    def _apply(self, result: Evaluation) -> None:
        display = self._display
        if display is None:
            return
        directive = result.directive
        if directive.mode is DisplayMode.BANNER:
            display.hide_icon()
            if result.fired:
                display.show_banner()
        elif directive.icon_visible:
            display.hide_banner()
            display.show_icon(directive.text, directive.color)
        else:
            display.hide_icon()
            display.hide_banner()

    def force_hidden(self) -> None:
        if self._display is None:
            return
        self._display.hide_icon()
        self._display.hide_banner()

    def _hide_banner(self) -> None:
        if self._display is not None:
            self._display.hide_banner()

    def track_drag(self) -> None:
        """Persist the icon position if the user dragged it since the last check."""
        if self._display is None:
            return
        moved = track_position(self._settings.position, self._display.get_widget_anchor())
        if moved is None:
            return
        self._debug("Icon moved to (%s, %s)", moved.x, moved.y)
        self._settings.position = moved
        self._save()

    def _camera_in_ui_mode(self) -> bool:
        return bool(self._facts.camera_in_ui_mode())

    def _save(self) -> None:
        if self._persist is not None:
            self._persist(self._settings)

    def _debug(self, msg: str, *args: Any) -> None:
        if self._settings.debug_mode:
            logger.debug("[%s] " + msg, ADDON_NAME, *args)
