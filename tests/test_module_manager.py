import tempfile
import unittest
from pathlib import Path

from src.core import BaseModule, ConfigManager, Core, ModuleManager


class RecordingModule(BaseModule):
    name = "Recorder"
    key = "recorder"

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []
        self.frames: list = []

    def setup(self, core) -> None:
        super().setup(core)
        self.calls.append("setup")

    def ready(self) -> None:
        self.calls.append("ready")

    def on_frame(self, frame, origin=(0, 0)) -> None:
        self.frames.append((frame, origin))

    def get_hotkey_binds(self) -> list[dict]:
        return [{"bind": "f9", "command": "toggle_enabled"}]

    def handle_command(self, command: str):
        if command == "fail":
            raise RuntimeError("boom")
        return f"ran {command}"

    def get_service_value(self, service_name: str):
        return 42 if service_name == "answer" else None

    def teardown(self) -> None:
        self.calls.append("teardown")


class NeedsMissingModule(BaseModule):
    name = "Needs missing"
    key = "needy"
    requires = ["not_there"]


class ModuleManagerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        config = ConfigManager(Path(self._tmp.name) / "config.json", initial={})
        self.core = Core(config)
        self.manager = ModuleManager(self.core)
        self.manager.register_class(RecordingModule)
        self.manager.register_class(NeedsMissingModule)
        self.manager.load(["recorder", "needy"])
        self.module = self.manager.get("recorder")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_lifecycle_and_dependency_check(self) -> None:
        self.assertEqual(self.module.calls, ["setup", "ready"])
        self.assertIsNone(self.manager.get("needy"))
        self.assertTrue(self.core.is_module_loaded("recorder"))
        self.manager.shutdown()
        self.assertEqual(self.module.calls[-1], "teardown")

    def test_process_frame_passes_origin(self) -> None:
        self.manager.process_frame("frame", (10, 20))
        self.assertEqual(self.module.frames, [("frame", (10, 20))])

        self.module.enabled = False
        self.manager.process_frame("frame", (0, 0))
        self.assertEqual(len(self.module.frames), 1)

    def test_hotkey_binds_are_tagged_with_module(self) -> None:
        self.assertEqual(
            self.manager.get_hotkey_binds(),
            [{"bind": "f9", "command": "toggle_enabled", "module_key": "recorder"}],
        )

    def test_dispatch_command(self) -> None:
        self.assertEqual(self.manager.dispatch_command("recorder", "toggle_timer"), "ran toggle_timer")
        self.assertIsNone(self.manager.dispatch_command("recorder", "fail"))
        self.assertIsNone(self.manager.dispatch_command("nobody", "toggle_timer"))

    def test_services_and_hooks(self) -> None:
        self.assertEqual(self.core.get_service("recorder", "answer"), 42)
        self.assertIsNone(self.core.get_service("nobody", "answer"))
        received = []
        self.core.subscribe("recorder.command", lambda **kw: received.append(kw))
        self.core.emit("recorder.command", command="toggle_timer")
        self.assertEqual(received, [{"command": "toggle_timer"}])


if __name__ == "__main__":
    unittest.main()
