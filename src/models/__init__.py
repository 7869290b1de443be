from .events import (
    AddonLoaded,
    CombatStateChanged,
    EffectChange,
    EffectChanged,
    EquipmentChanged,
    EventKind,
    ReminderEvent,
    Tick,
)
from .region import BoundingBox
from .reminder import (
    HIDDEN,
    DisplayMode,
    EngineState,
    Evaluation,
    LiveFacts,
    Position,
    ReminderSettings,
    VisualDirective,
)

__all__ = [
    "AddonLoaded",
    "BoundingBox",
    "CombatStateChanged",
    "DisplayMode",
    "EffectChange",
    "EffectChanged",
    "EngineState",
    "EquipmentChanged",
    "Evaluation",
    "EventKind",
    "HIDDEN",
    "LiveFacts",
    "Position",
    "ReminderEvent",
    "ReminderSettings",
    "Tick",
    "VisualDirective",
]
