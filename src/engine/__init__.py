from src.engine.commands import COMMANDS, run_command
from src.engine.conditions import evaluate
from src.engine.controller import ADDON_NAME, ReminderController
from src.engine.drag import track_position
from src.engine.scheduler import DeferredTask

__all__ = [
    "ADDON_NAME",
    "COMMANDS",
    "DeferredTask",
    "ReminderController",
    "evaluate",
    "run_command",
    "track_position",
]
