import unittest

from src.analysis import ProbeEventSource
from src.analysis.probe_events import BUFF_REGION, COMBAT_REGION, HELMET_REGION, UI_MODE_REGION
from src.models import CombatStateChanged, EffectChange, EffectChanged, EquipmentChanged
from src.models.reminder import HEAD_SLOT, PLAYER_UNIT_TAG, TARGET_BUFF_ID, TARGET_ITEM_ID


def _state(present: bool, status: str = "ok") -> dict:
    return {"status": status, "present": present}


class ProbeEventSourceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.events: list = []
        self.now = 100.0
        self.source = ProbeEventSource(
            sink=self.events.append,
            buff_duration_seconds=60.0,
            clock=lambda: self.now,
        )

    def test_only_transitions_are_emitted(self) -> None:
        self.source.on_region_states({COMBAT_REGION: _state(True)})
        self.source.on_region_states({COMBAT_REGION: _state(True)})
        self.source.on_region_states({COMBAT_REGION: _state(False)})
        self.assertEqual(
            self.events,
            [CombatStateChanged(in_combat=True), CombatStateChanged(in_combat=False)],
        )

    def test_regions_without_ok_status_are_ignored(self) -> None:
        self.source.on_region_states({COMBAT_REGION: _state(True, status="uncalibrated")})
        self.assertEqual(self.events, [])
        self.assertFalse(self.source.is_present(COMBAT_REGION))

    def test_helmet_region_reports_head_slot(self) -> None:
        self.assertIsNone(self.source.head_item_id())
        self.source.on_region_states({HELMET_REGION: _state(True)})
        self.assertEqual(self.events[-1].slot, HEAD_SLOT)
        self.assertEqual(self.events[-1].item_id, TARGET_ITEM_ID)
        self.assertEqual(self.source.head_item_id(), TARGET_ITEM_ID)

        self.source.on_region_states({HELMET_REGION: _state(False)})
        self.assertEqual(self.events[-1], EquipmentChanged(slot=HEAD_SLOT, item_id=0, item_name=""))
        self.assertEqual(self.source.head_item_id(), 0)

    def test_buff_absent_on_first_frame_emits_nothing(self) -> None:
        self.source.on_region_states({BUFF_REGION: _state(False)})
        self.assertEqual(self.events, [])

    def test_buff_gain_and_fade(self) -> None:
        self.source.on_region_states({BUFF_REGION: _state(True)})
        self.assertEqual(
            self.events[-1],
            EffectChanged(change=EffectChange.GAINED, unit_tag=PLAYER_UNIT_TAG, ability_id=TARGET_BUFF_ID),
        )
        self.now += 15.0
        active, remaining = self.source.buff_status()
        self.assertTrue(active)
        self.assertAlmostEqual(remaining, 45.0)

        self.source.on_region_states({BUFF_REGION: _state(False)})
        self.assertIs(self.events[-1].change, EffectChange.FADED)
        self.assertEqual(self.source.buff_status(), (False, 0.0))

    def test_buff_remaining_never_negative(self) -> None:
        self.source.set_buff_duration(20.0)
        self.source.on_region_states({BUFF_REGION: _state(True)})
        self.now += 90.0
        self.assertEqual(self.source.buff_status(), (True, 0.0))

    def test_ui_mode_region(self) -> None:
        self.assertFalse(self.source.camera_in_ui_mode())
        self.source.on_region_states({UI_MODE_REGION: _state(True)})
        self.assertTrue(self.source.camera_in_ui_mode())


if __name__ == "__main__":
    unittest.main()
