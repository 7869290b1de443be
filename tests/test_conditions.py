import unittest

from src.engine.conditions import BANNER_TEXT, BASH_TEXT, evaluate
from src.models.reminder import (
    COLOR_GREEN,
    COLOR_RED,
    COLOR_WHITE,
    DisplayMode,
    EngineState,
    LiveFacts,
    ReminderSettings,
)


def _facts(**overrides) -> LiveFacts:
    values = dict(
        is_in_combat=True,
        has_target_equipped=True,
        buff_active=False,
        buff_remaining_seconds=0.0,
        camera_in_ui_mode=False,
        now_ms=10_000.0,
    )
    values.update(overrides)
    return LiveFacts(**values)


class HiddenRuleTests(unittest.TestCase):
    def test_missing_facts_hide_and_keep_state(self) -> None:
        state = EngineState(remaining_buff_seconds=30.0, cooldown_display_seconds=4.0)
        result = evaluate(ReminderSettings(), state, None)
        self.assertIs(result.directive.mode, DisplayMode.HIDDEN)
        self.assertEqual(result.state, state)
        self.assertFalse(result.fired)

    def test_disabled_hides_and_clears_counters(self) -> None:
        settings = ReminderSettings(enabled=False)
        state = EngineState(remaining_buff_seconds=30.0, cooldown_display_seconds=4.0)
        result = evaluate(settings, state, _facts())
        self.assertIs(result.directive.mode, DisplayMode.HIDDEN)
        self.assertEqual(result.state.remaining_buff_seconds, 0.0)
        self.assertEqual(result.state.cooldown_display_seconds, 0.0)
        self.assertFalse(result.fired)

    def test_without_warmask_everything_is_hidden(self) -> None:
        for warning in (False, True):
            settings = ReminderSettings(toggle_warning=warning)
            result = evaluate(settings, EngineState(), _facts(has_target_equipped=False))
            self.assertIs(result.directive.mode, DisplayMode.HIDDEN)
            self.assertFalse(result.directive.banner_visible)

    def test_out_of_combat_hidden_unless_shown_outside_combat(self) -> None:
        facts = _facts(is_in_combat=False)
        hidden = evaluate(ReminderSettings(), EngineState(), facts)
        self.assertIs(hidden.directive.mode, DisplayMode.HIDDEN)

        shown = evaluate(ReminderSettings(show_outside_combat=True), EngineState(), facts)
        self.assertIs(shown.directive.mode, DisplayMode.BASH)

    def test_locked_icon_hidden_in_ui_mode(self) -> None:
        facts = _facts(camera_in_ui_mode=True)
        locked = evaluate(ReminderSettings(lock_position=True), EngineState(), facts)
        self.assertIs(locked.directive.mode, DisplayMode.HIDDEN)

        unlocked = evaluate(ReminderSettings(lock_position=False), EngineState(), facts)
        self.assertIs(unlocked.directive.mode, DisplayMode.BASH)

    def test_hidden_rules_do_not_touch_reminder_gate(self) -> None:
        state = EngineState(last_reminder_ms=0.0)
        result = evaluate(ReminderSettings(enabled=False), state, _facts(now_ms=50_000.0))
        self.assertEqual(result.state.last_reminder_ms, 0.0)


class BannerModeTests(unittest.TestCase):
    def test_banner_fires_when_buff_missing(self) -> None:
        settings = ReminderSettings(toggle_warning=True)
        result = evaluate(settings, EngineState(last_reminder_ms=0.0), _facts(now_ms=5_000.0))
        self.assertIs(result.directive.mode, DisplayMode.BANNER)
        self.assertEqual(result.directive.text, BANNER_TEXT)
        self.assertFalse(result.directive.icon_visible)
        self.assertTrue(result.fired)
        self.assertEqual(result.state.last_reminder_ms, 5_000.0)

    def test_banner_within_cooldown_is_not_fired(self) -> None:
        settings = ReminderSettings(toggle_warning=True)
        state = EngineState(last_reminder_ms=5_000.0)
        result = evaluate(settings, state, _facts(now_ms=5_999.0))
        self.assertIs(result.directive.mode, DisplayMode.BANNER)
        self.assertFalse(result.fired)
        self.assertEqual(result.state.last_reminder_ms, 5_000.0)

    def test_banner_hidden_while_buff_active(self) -> None:
        settings = ReminderSettings(toggle_warning=True)
        state = EngineState(last_reminder_ms=0.0)
        result = evaluate(settings, state, _facts(buff_active=True, buff_remaining_seconds=40.0))
        self.assertIs(result.directive.mode, DisplayMode.HIDDEN)
        self.assertFalse(result.directive.banner_visible)
        self.assertFalse(result.fired)
        self.assertEqual(result.state.last_reminder_ms, 0.0)


class IconModeTests(unittest.TestCase):
    def test_green_countdown_while_buff_active(self) -> None:
        result = evaluate(
            ReminderSettings(),
            EngineState(),
            _facts(buff_active=True, buff_remaining_seconds=45.7),
        )
        self.assertIs(result.directive.mode, DisplayMode.BUFF_COUNTDOWN)
        self.assertEqual(result.directive.text, "45")
        self.assertEqual(result.directive.color, COLOR_GREEN)
        self.assertAlmostEqual(result.state.remaining_buff_seconds, 45.7)

    def test_buff_active_without_timer_shows_blank_icon(self) -> None:
        result = evaluate(
            ReminderSettings(toggle_timer=False),
            EngineState(remaining_buff_seconds=20.0),
            _facts(buff_active=True, buff_remaining_seconds=45.0),
        )
        self.assertIs(result.directive.mode, DisplayMode.BUFF_COUNTDOWN)
        self.assertEqual(result.directive.text, "")
        self.assertTrue(result.directive.icon_visible)
        self.assertEqual(result.state.remaining_buff_seconds, 0.0)

    def test_bash_prompt_after_buff_lapsed(self) -> None:
        result = evaluate(
            ReminderSettings(),
            EngineState(remaining_buff_seconds=45.0, cooldown_display_seconds=3.0),
            _facts(),
        )
        self.assertIs(result.directive.mode, DisplayMode.BASH)
        self.assertEqual(result.directive.text, BASH_TEXT)
        self.assertEqual(result.directive.color, COLOR_WHITE)
        self.assertEqual(result.state.remaining_buff_seconds, 0.0)
        self.assertEqual(result.state.cooldown_display_seconds, 0.0)

    def test_bash_prompt_when_buff_never_seen(self) -> None:
        result = evaluate(ReminderSettings(), EngineState(), _facts())
        self.assertIs(result.directive.mode, DisplayMode.BASH)

    def test_post_expiry_red_countdown_step(self) -> None:
        result = evaluate(
            ReminderSettings(),
            EngineState(remaining_buff_seconds=55.0, cooldown_display_seconds=10.0),
            _facts(),
        )
        self.assertIs(result.directive.mode, DisplayMode.POST_EXPIRY)
        self.assertEqual(result.directive.text, "4.8")
        self.assertEqual(result.directive.color, COLOR_RED)
        self.assertAlmostEqual(result.state.cooldown_display_seconds, 5.0)
        self.assertAlmostEqual(result.state.remaining_buff_seconds, 54.8)

    def test_post_expiry_counts_down_then_hands_off_to_bash(self) -> None:
        settings = ReminderSettings()
        state = EngineState(remaining_buff_seconds=55.0)
        modes = []
        now = 10_000.0
        for _ in range(40):
            result = evaluate(settings, state, _facts(now_ms=now))
            modes.append(result.directive.mode)
            state = result.state
            now += 250.0
            if result.directive.mode is DisplayMode.BASH:
                break
        self.assertIs(modes[-1], DisplayMode.BASH)
        self.assertTrue(all(m is DisplayMode.POST_EXPIRY for m in modes[:-1]))
        self.assertGreaterEqual(len(modes), 25)

    def test_post_expiry_window_closed_hides_icon(self) -> None:
        result = evaluate(
            ReminderSettings(),
            EngineState(remaining_buff_seconds=61.0, cooldown_display_seconds=11.0),
            _facts(),
        )
        self.assertIs(result.directive.mode, DisplayMode.HIDDEN)
        self.assertEqual(result.state.remaining_buff_seconds, 0.0)

    def test_icon_directive_applies_even_inside_cooldown(self) -> None:
        settings = ReminderSettings()
        state = EngineState()
        first = evaluate(settings, state, _facts(now_ms=10_000.0))
        second = evaluate(settings, first.state, _facts(now_ms=10_400.0))
        self.assertTrue(first.fired)
        self.assertFalse(second.fired)
        self.assertEqual(first.directive, second.directive)
        self.assertEqual(second.state.last_reminder_ms, 10_000.0)

    def test_evaluate_is_deterministic_for_same_inputs(self) -> None:
        settings = ReminderSettings()
        state = EngineState(remaining_buff_seconds=55.0)
        facts = _facts()
        self.assertEqual(evaluate(settings, state, facts), evaluate(settings, state, facts))
        self.assertEqual(state.remaining_buff_seconds, 55.0)


if __name__ == "__main__":
    unittest.main()
