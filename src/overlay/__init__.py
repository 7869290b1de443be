from .reminder_overlay import ReminderOverlay, create_overlay

__all__ = ["ReminderOverlay", "create_overlay"]
