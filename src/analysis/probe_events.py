"""Turns region presence transitions into reminder events and answers fact queries.

The probe cannot read the game's buff timer, so the remaining buff time is
derived from when the buff region first turned present and the configured
buff duration.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from src.models.events import (
    CombatStateChanged,
    EffectChange,
    EffectChanged,
    EquipmentChanged,
    ReminderEvent,
)
from src.models.reminder import HEAD_SLOT, PLAYER_UNIT_TAG, TARGET_BUFF_ID, TARGET_ITEM_ID

logger = logging.getLogger(__name__)

HELMET_REGION = "helmet"
BUFF_REGION = "buff"
COMBAT_REGION = "combat"
UI_MODE_REGION = "ui_mode"


def _monotonic() -> float:
    return time.monotonic()


class ProbeEventSource:
    """Consumes region states (GUI thread) and forwards transitions to an event sink."""

    def __init__(
        self,
        sink: Callable[[ReminderEvent], None],
        buff_duration_seconds: float = 60.0,
        clock: Callable[[], float] = _monotonic,
    ) -> None:
        self._sink = sink
        self._buff_duration = float(buff_duration_seconds)
        self._clock = clock
        self._present: dict[str, bool] = {}
        self._buff_seen_at: Optional[float] = None

    def set_buff_duration(self, seconds: float) -> None:
        self._buff_duration = max(0.0, float(seconds))

    def is_present(self, region_id: str) -> bool:
        return bool(self._present.get(region_id, False))

    def on_region_states(self, states: dict[str, dict]) -> None:
        """Feed one frame's region states. Only regions with status 'ok' change the tracked facts."""
        for region_id, state in (states or {}).items():
            if not isinstance(state, dict) or state.get("status") != "ok":
                continue
            present = bool(state.get("present", False))
            previous = self._present.get(region_id)
            if previous == present:
                continue
            self._present[region_id] = present
            logger.debug("Region %s: %s -> %s", region_id, previous, present)
            self._emit_transition(region_id, present, first=previous is None)

    def _emit_transition(self, region_id: str, present: bool, first: bool) -> None:
        if region_id == COMBAT_REGION:
            self._sink(CombatStateChanged(in_combat=present))
        elif region_id == HELMET_REGION:
            item_id = TARGET_ITEM_ID if present else 0
            self._sink(EquipmentChanged(slot=HEAD_SLOT, item_id=item_id, item_name="Huntsman Warmask" if present else ""))
        elif region_id == BUFF_REGION:
            if present:
                self._buff_seen_at = self._clock()
                change = EffectChange.GAINED
            else:
                self._buff_seen_at = None
                change = EffectChange.FADED
            if first and not present:
                # Absent from the very first frame: nothing faded.
                return
            self._sink(EffectChanged(change=change, unit_tag=PLAYER_UNIT_TAG, ability_id=TARGET_BUFF_ID))

    # --- fact provider ---

    def buff_status(self) -> tuple[bool, float]:
        if not self.is_present(BUFF_REGION) or self._buff_seen_at is None:
            return False, 0.0
        elapsed = self._clock() - self._buff_seen_at
        return True, max(0.0, self._buff_duration - elapsed)

    def camera_in_ui_mode(self) -> bool:
        return self.is_present(UI_MODE_REGION)

    def head_item_id(self) -> Optional[int]:
        if HELMET_REGION not in self._present:
            return None
        return TARGET_ITEM_ID if self._present[HELMET_REGION] else 0
