import json
import unittest

from intervals import IntervalConfiguration, ManualClock, SessionController
from shared_state import SharedSnapshot, SnapshotDecodeError

T0 = 1_700_000_000.0


class SharedSnapshotTests(unittest.TestCase):
    def test_to_dict_uses_wire_field_names(self) -> None:
        snapshot = SharedSnapshot(
            is_active=True,
            current_phase="WALK",
            time_remaining=42,
            interval_duration=60,
            last_update=T0,
            run_interval_setting=30,
            walk_interval_setting=60,
        )

        payload = json.loads(snapshot.to_json())

        self.assertEqual(
            {
                "isActive": True,
                "currentPhase": "WALK",
                "timeRemaining": 42,
                "intervalDuration": 60,
                "lastUpdate": "2023-11-14T22:13:20+00:00",
                "runIntervalSetting": 30,
                "walkIntervalSetting": 60,
            },
            payload,
        )
        self.assertEqual(snapshot, SharedSnapshot.from_json(snapshot.to_json()))

    def test_from_session_marks_only_running_sessions_active(self) -> None:
        clock = ManualClock(T0)
        controller = SessionController(
            clock=clock,
            default_config=IntervalConfiguration(run_seconds=45, walk_seconds=90),
        )

        idle = SharedSnapshot.from_session(controller.snapshot(), at=T0)
        controller.start()
        clock.advance(5)
        running = SharedSnapshot.from_session(controller.snapshot(), at=clock.now())
        controller.pause()
        paused = SharedSnapshot.from_session(controller.snapshot(), at=clock.now())

        self.assertFalse(idle.is_active)
        self.assertTrue(running.is_active)
        self.assertEqual("RUN", running.current_phase)
        self.assertEqual(40, running.time_remaining)
        self.assertEqual(45, running.interval_duration)
        self.assertEqual(90, running.walk_interval_setting)
        self.assertFalse(paused.is_active)

    def test_display_helpers(self) -> None:
        snapshot = SharedSnapshot(
            is_active=True,
            current_phase="RUN",
            time_remaining=75,
            interval_duration=100,
            last_update=T0,
            run_interval_setting=100,
            walk_interval_setting=60,
        )

        self.assertEqual("1:15", snapshot.formatted_time_remaining)
        self.assertAlmostEqual(0.25, snapshot.progress)
        self.assertTrue(snapshot.is_run_phase)
        self.assertEqual(0.0, SharedSnapshot.idle(T0).progress)

    def test_decode_rejects_malformed_records(self) -> None:
        valid = SharedSnapshot.idle(T0).to_dict()
        cases = {
            "not json": b"{",
            "not an object": b"[]",
            "missing field": json.dumps({k: v for k, v in valid.items() if k != "isActive"}),
            "bad phase": json.dumps({**valid, "currentPhase": "JOG"}),
            "string remaining": json.dumps({**valid, "timeRemaining": "12"}),
            "bad timestamp": json.dumps({**valid, "lastUpdate": "yesterday"}),
        }
        for name, raw in cases.items():
            with self.subTest(name):
                with self.assertRaises(SnapshotDecodeError):
                    SharedSnapshot.from_json(raw)


if __name__ == "__main__":
    unittest.main()
