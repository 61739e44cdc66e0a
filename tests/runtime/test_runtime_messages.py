import unittest

from intervals import IntervalConfiguration, ManualClock, SessionController
from intervals.constants import REASON_ALREADY_ACTIVE
from runtime.messages import format_duration, rejection_message, session_status_message


class RuntimeMessagesTests(unittest.TestCase):
    def test_format_duration(self) -> None:
        self.assertEqual("0:00", format_duration(-3))
        self.assertEqual("0:09", format_duration(9))
        self.assertEqual("12:05", format_duration(725))

    def test_status_message_follows_session_state(self) -> None:
        clock = ManualClock(0.0)
        controller = SessionController(
            clock=clock,
            default_config=IntervalConfiguration(run_seconds=90, walk_seconds=60),
        )

        self.assertEqual("Ready (run 1:30 / walk 1:00)", session_status_message(controller.snapshot()))
        controller.start()
        clock.advance(20)
        self.assertEqual("Run (1:10 remaining)", session_status_message(controller.snapshot()))
        controller.pause()
        self.assertEqual("Run paused (1:10 remaining)", session_status_message(controller.snapshot()))
        controller.stop()
        self.assertEqual("Workout finished after 0:20", session_status_message(controller.snapshot()))

    def test_rejection_message(self) -> None:
        self.assertEqual("A workout is already in progress", rejection_message(REASON_ALREADY_ACTIVE))
        self.assertEqual("Request rejected: other", rejection_message("other"))


if __name__ == "__main__":
    unittest.main()
