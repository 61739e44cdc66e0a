import logging
import unittest

from cues import BellCue, CueError, HapticCue, LoggingCueOutput, VoiceAnnouncer
from intervals import IntervalConfiguration, ManualClock, SessionController


class _Recorder:
    def __init__(self, fail: bool = False):
        self.calls = []
        self._fail = fail

    def _record(self, value: str) -> None:
        if self._fail:
            raise CueError("device busy")
        self.calls.append(value)

    def say(self, text: str) -> None:
        self._record(text)

    def pulse(self, pattern: str) -> None:
        self._record(pattern)

    def play(self, sound: str) -> None:
        self._record(sound)


def _session():
    clock = ManualClock(0.0)
    controller = SessionController(
        clock=clock,
        default_config=IntervalConfiguration(run_seconds=10, walk_seconds=20),
    )
    return clock, controller


def _attach(controller, listener) -> None:
    controller.add_phase_listener(listener.handle_phase_change)
    controller.add_update_listener(listener.handle_update)


class CueListenerTests(unittest.TestCase):
    def test_voice_announces_start_and_each_phase(self) -> None:
        clock, controller = _session()
        speech = _Recorder()
        _attach(controller, VoiceAnnouncer(speech))

        controller.start()
        clock.advance(10 + 20 + 5)
        controller.tick()

        self.assertEqual(["Run", "Walk", "Run"], speech.calls)

    def test_haptics_pulse_for_countdown_phase_change_and_stop(self) -> None:
        clock, controller = _session()
        haptics = _Recorder()
        _attach(controller, HapticCue(haptics))

        controller.start()
        for _ in range(10):
            clock.advance(1)
            controller.tick()
        controller.stop()

        self.assertEqual(
            ["start", "countdown", "countdown", "countdown", "phase_change", "stop"],
            haptics.calls,
        )

    def test_bell_rings_phase_specific_sound(self) -> None:
        clock, controller = _session()
        sound = _Recorder()
        _attach(controller, BellCue(sound))

        controller.start()
        controller.skip_phase()

        self.assertEqual(["run_bell", "walk_bell"], sound.calls)

    def test_disabled_cue_stays_silent(self) -> None:
        clock, controller = _session()
        speech = _Recorder()
        _attach(controller, VoiceAnnouncer(speech, enabled=False))

        controller.start()
        controller.skip_phase()

        self.assertEqual([], speech.calls)

    def test_rejected_start_is_not_announced(self) -> None:
        _, controller = _session()
        speech = _Recorder()
        controller.start()
        _attach(controller, VoiceAnnouncer(speech))

        controller.start()

        self.assertEqual([], speech.calls)

    def test_output_errors_are_logged_and_swallowed(self) -> None:
        clock, controller = _session()
        _attach(
            controller,
            BellCue(_Recorder(fail=True), logger=logging.getLogger("test.cues")),
        )

        with self.assertLogs("test.cues", level="WARNING"):
            update = controller.start()

        self.assertTrue(update.accepted)

    def test_logging_output_renders_every_cue_kind(self) -> None:
        output = LoggingCueOutput(logger=logging.getLogger("test.cue_output"))

        with self.assertLogs("test.cue_output", level="INFO") as captured:
            output.say("Run")
            output.pulse("countdown")
            output.play("walk_bell")

        self.assertEqual(3, len(captured.records))


if __name__ == "__main__":
    unittest.main()
