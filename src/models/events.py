"""Typed host events consumed by the reminder controller."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional


class EventKind(Enum):
    COMBAT_STATE_CHANGED = "combat_state_changed"
    EQUIPMENT_CHANGED = "equipment_changed"
    EFFECT_CHANGED = "effect_changed"
    ADDON_LOADED = "addon_loaded"
    TICK = "tick"


class EffectChange(Enum):
    GAINED = "gained"
    FADED = "faded"
    UPDATED = "updated"


@dataclass(frozen=True)
class CombatStateChanged:
    kind: ClassVar[EventKind] = EventKind.COMBAT_STATE_CHANGED
    in_combat: bool


@dataclass(frozen=True)
class EquipmentChanged:
    """Worn-bag slot update. item_id 0 or None means the slot is empty."""
    kind: ClassVar[EventKind] = EventKind.EQUIPMENT_CHANGED
    slot: str
    item_id: Optional[int] = None
    item_name: str = ""


@dataclass(frozen=True)
class EffectChanged:
    kind: ClassVar[EventKind] = EventKind.EFFECT_CHANGED
    change: EffectChange
    unit_tag: str
    ability_id: int
    effect_name: str = ""


@dataclass(frozen=True)
class AddonLoaded:
    kind: ClassVar[EventKind] = EventKind.ADDON_LOADED
    addon_name: str


@dataclass(frozen=True)
class Tick:
    kind: ClassVar[EventKind] = EventKind.TICK


ReminderEvent = CombatStateChanged | EquipmentChanged | EffectChanged | AddonLoaded | Tick
