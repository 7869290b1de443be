import unittest

from src.engine import timers
from src.engine.drag import track_position
from src.engine.scheduler import DeferredTask
from src.models import EngineState, Position


class FakeScheduler:
    def __init__(self) -> None:
        self.calls: list[tuple[int, object]] = []

    def call_later(self, delay_ms, callback) -> None:
        self.calls.append((delay_ms, callback))

    def run_all(self) -> None:
        calls, self.calls = self.calls, []
        for _, callback in calls:
            callback()


class TimerArithmeticTests(unittest.TestCase):
    def test_reminder_gate_boundary(self) -> None:
        state = EngineState(last_reminder_ms=1_000.0)
        gated, fired = timers.reminder_gate(state, 1_999.0)
        self.assertFalse(fired)
        self.assertIs(gated, state)

        opened, fired = timers.reminder_gate(state, 2_000.0)
        self.assertTrue(fired)
        self.assertEqual(opened.last_reminder_ms, 2_000.0)

    def test_buff_seconds_are_truncated(self) -> None:
        self.assertEqual(timers.format_buff_seconds(59.99), "59")
        self.assertEqual(timers.format_buff_seconds(0.4), "0")
        self.assertEqual(timers.format_buff_seconds(-3.0), "0")

    def test_post_expiry_has_one_decimal(self) -> None:
        self.assertEqual(timers.format_post_expiry(4.8), "4.8")
        self.assertEqual(timers.format_post_expiry(0.0), "0.0")

    def test_advance_post_expiry_never_goes_negative(self) -> None:
        state, shown = timers.advance_post_expiry(EngineState(remaining_buff_seconds=0.1))
        self.assertEqual(state.remaining_buff_seconds, 0.0)
        self.assertAlmostEqual(shown, 10.0 - 59.9 - 0.2)

    def test_cleared_returns_same_state_when_already_zero(self) -> None:
        state = EngineState(is_in_combat=True)
        self.assertIs(timers.cleared(state), state)


class DragTrackingTests(unittest.TestCase):
    def test_no_live_anchor_means_no_move(self) -> None:
        self.assertIsNone(track_position(Position(), None))

    def test_same_offset_is_not_a_move(self) -> None:
        stored = Position(x=10.0, y=-20.0)
        live = Position(point="TOPLEFT", x=10.0, y=-20.0)
        self.assertIsNone(track_position(stored, live))

    def test_sub_pixel_difference_is_not_a_move(self) -> None:
        stored = Position(x=10.5, y=-3.25)
        self.assertIsNone(track_position(stored, Position(x=10.0, y=-3.0)))

    def test_moved_anchor_is_returned(self) -> None:
        live = Position(x=15.0, y=-20.0)
        self.assertEqual(track_position(Position(x=10.0, y=-20.0), live), live)


class DeferredTaskTests(unittest.TestCase):
    def test_scheduled_callback_runs(self) -> None:
        fired = []
        scheduler = FakeScheduler()
        task = DeferredTask(scheduler, lambda: fired.append(1))
        task.schedule(100)
        self.assertEqual(scheduler.calls[0][0], 100)
        self.assertEqual(task.pending, 1)
        scheduler.run_all()
        self.assertEqual(fired, [1])
        self.assertEqual(task.pending, 0)

    def test_cancel_makes_pending_callbacks_stale(self) -> None:
        fired = []
        scheduler = FakeScheduler()
        task = DeferredTask(scheduler, lambda: fired.append(1))
        task.schedule(100)
        task.schedule(100)
        task.cancel()
        self.assertEqual(task.pending, 0)
        scheduler.run_all()
        self.assertEqual(fired, [])

    def test_schedule_after_cancel_runs(self) -> None:
        fired = []
        scheduler = FakeScheduler()
        task = DeferredTask(scheduler, lambda: fired.append(task.generation))
        task.schedule(100)
        task.cancel()
        task.schedule(100)
        scheduler.run_all()
        self.assertEqual(fired, [1])


if __name__ == "__main__":
    unittest.main()
