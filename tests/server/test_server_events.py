import json
import unittest

from intervals import ManualClock, SessionController
from server.events import StickyEventStore, make_event, phase_change_payload, session_payload


class ServerEventsTests(unittest.TestCase):
    def test_make_event_serializes_timestamp_and_payload(self) -> None:
        raw = make_event("session", at=1_700_000_000.0, state="running", time_remaining=12)
        payload = json.loads(raw)

        self.assertEqual("session", payload["type"])
        self.assertEqual("2023-11-14T22:13:20+00:00", payload["timestamp"])
        self.assertEqual("running", payload["state"])
        self.assertEqual(12, payload["time_remaining"])

    def test_make_event_defaults_to_current_time(self) -> None:
        payload = json.loads(make_event("hello"))

        self.assertTrue(payload["timestamp"].endswith("+00:00"))

    def test_payload_builders_use_plain_json_types(self) -> None:
        clock = ManualClock(0.0)
        controller = SessionController(clock=clock)
        events = []
        controller.add_phase_listener(events.append)
        controller.start()
        clock.advance(31)
        controller.tick()

        session = session_payload(controller.snapshot())
        phase = phase_change_payload(events[0])

        self.assertEqual("WALK", session["phase"])
        self.assertEqual(59, session["time_remaining"])
        self.assertEqual({"sequence_number", "phase", "previous_phase", "reason"}, set(phase))
        json.dumps(session)
        json.dumps(phase)

    def test_sticky_store_ignores_non_sticky_events(self) -> None:
        store = StickyEventStore()
        store.remember("hello", '{"type":"hello"}')
        store.remember("countdown", '{"type":"countdown"}')
        self.assertEqual([], store.snapshot())

    def test_sticky_store_snapshot_follows_stable_order(self) -> None:
        store = StickyEventStore()
        store.remember("session", '{"type":"session","n":1}')
        store.remember("error", '{"type":"error","n":2}')
        store.remember("phase_change", '{"type":"phase_change","n":3}')
        store.remember("workout_summary", '{"type":"workout_summary","n":4}')

        decoded_types = [json.loads(item)["type"] for item in store.snapshot()]
        self.assertEqual(
            ["workout_summary", "phase_change", "error", "session"],
            decoded_types,
        )

    def test_sticky_store_overwrites_latest_event_by_type(self) -> None:
        store = StickyEventStore()
        store.remember("session", '{"type":"session","remaining":10}')
        store.remember("session", '{"type":"session","remaining":9}')
        snapshot = store.snapshot()

        self.assertEqual(1, len(snapshot))
        self.assertEqual(9, json.loads(snapshot[0])["remaining"])


if __name__ == "__main__":
    unittest.main()
