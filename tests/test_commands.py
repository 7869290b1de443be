import unittest

from src.engine import ReminderController, run_command
from src.engine.commands import COMMANDS, UnknownCommandError, format_confirmation
from src.models import CombatStateChanged, ReminderSettings
from src.models.reminder import TARGET_ITEM_ID


class _Facts:
    def buff_status(self):
        return False, 0.0

    def camera_in_ui_mode(self) -> bool:
        return False

    def head_item_id(self):
        return TARGET_ITEM_ID


class _Scheduler:
    def call_later(self, delay_ms, callback) -> None:
        pass


class CommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self.saved: list[dict] = []
        self.controller = ReminderController(
            settings=ReminderSettings(),
            facts=_Facts(),
            scheduler=_Scheduler(),
            persist=lambda s: self.saved.append(s.to_dict()),
        )

    def test_confirmation_wording(self) -> None:
        self.assertEqual(format_confirmation("", True), "Huntsman Warmask Reminder: enabled")
        self.assertEqual(
            format_confirmation("banner warning", False),
            "Huntsman Warmask Reminder: banner warning disabled",
        )

    def test_toggle_timer_flips_and_persists(self) -> None:
        message = run_command(self.controller, "toggle_timer")
        self.assertEqual(message, "Huntsman Warmask Reminder: timer on icon disabled")
        self.assertFalse(self.controller.settings.toggle_timer)
        self.assertFalse(self.saved[-1]["toggle_timer"])

        message = run_command(self.controller, "toggle_timer")
        self.assertEqual(message, "Huntsman Warmask Reminder: timer on icon enabled")
        self.assertTrue(self.controller.settings.toggle_timer)

    def test_toggle_enabled(self) -> None:
        message = run_command(self.controller, "toggle_enabled")
        self.assertEqual(message, "Huntsman Warmask Reminder: disabled")
        self.assertFalse(self.controller.settings.enabled)

    def test_every_command_targets_a_boolean_setting(self) -> None:
        settings = ReminderSettings()
        for name, (field_name, _label) in COMMANDS.items():
            self.assertIsInstance(getattr(settings, field_name), bool, name)

    def test_toggle_show_outside_combat_and_warning(self) -> None:
        self.assertEqual(
            run_command(self.controller, "toggle_show_outside_combat"),
            "Huntsman Warmask Reminder: show outside combat enabled",
        )
        self.assertEqual(
            run_command(self.controller, "toggle_warning"),
            "Huntsman Warmask Reminder: banner warning enabled",
        )

    def test_unknown_command_raises(self) -> None:
        with self.assertRaises(UnknownCommandError):
            run_command(self.controller, "toggle_everything")
        self.assertEqual(self.saved, [])

    def test_commands_work_without_display(self) -> None:
        self.controller.dispatch(CombatStateChanged(in_combat=True))
        run_command(self.controller, "toggle_warning")
        self.assertIsNone(self.controller.last_evaluation)


if __name__ == "__main__":
    unittest.main()
