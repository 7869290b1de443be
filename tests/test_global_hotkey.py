import unittest
from types import SimpleNamespace

from src.automation.global_hotkey import _ListenerThread, format_bind_for_display, key_to_bind, normalize_bind


class BindFormattingTests(unittest.TestCase):
    def test_format_bind_for_display(self) -> None:
        self.assertEqual(format_bind_for_display(""), "Set")
        self.assertEqual(format_bind_for_display("f9"), "F9")
        self.assertEqual(format_bind_for_display("x1"), "Mouse 4")
        self.assertEqual(format_bind_for_display("scroll_lock"), "Scroll_lock")

    def test_key_to_bind(self) -> None:
        self.assertEqual(key_to_bind(SimpleNamespace(name="F9")), "f9")
        self.assertEqual(key_to_bind(SimpleNamespace(char="A")), "a")
        self.assertEqual(normalize_bind("  F9 "), "f9")


class ListenerCallbackTests(unittest.TestCase):
    def setUp(self) -> None:
        self.binds = ["F9"]
        self.fired: list[str] = []
        self.listener = _ListenerThread(get_binds=lambda: self.binds)
        self.listener.triggered.connect(self.fired.append)

    def test_matching_key_emits_bind(self) -> None:
        self.assertTrue(self.listener.on_key(SimpleNamespace(name="f9")))
        self.assertTrue(self.listener.on_key(SimpleNamespace(name="f10")))
        self.assertEqual(self.fired, ["f9"])

    def test_matching_mouse_button_emits_on_press_only(self) -> None:
        self.binds = ["x1"]
        button = SimpleNamespace(name="x1")
        self.assertTrue(self.listener.on_click(0, 0, button, False))
        self.assertTrue(self.listener.on_click(0, 0, button, True))
        self.assertEqual(self.fired, ["x1"])

    def test_failing_bind_lookup_keeps_listener_alive(self) -> None:
        def broken() -> list[str]:
            raise RuntimeError("config unavailable")

        listener = _ListenerThread(get_binds=broken)
        self.assertTrue(listener.on_key(SimpleNamespace(name="f9")))
        self.assertTrue(listener.on_click(0, 0, SimpleNamespace(name="x1"), True))

    def test_stopped_listener_returns_false(self) -> None:
        self.listener.stop()
        self.assertFalse(self.listener.on_key(SimpleNamespace(name="f9")))
        self.assertFalse(self.listener.on_click(0, 0, SimpleNamespace(name="x1"), True))
        self.assertEqual(self.fired, [])


if __name__ == "__main__":
    unittest.main()
