from modules.warmask_reminder.module import WarmaskReminderModule

__all__ = ["WarmaskReminderModule"]
