"""Output seams used by cue listeners."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

HAPTIC_PHASE_CHANGE = "phase_change"
HAPTIC_COUNTDOWN = "countdown"
HAPTIC_START = "start"
HAPTIC_STOP = "stop"

SOUND_RUN_BELL = "run_bell"
SOUND_WALK_BELL = "walk_bell"


class CueError(Exception):
    """Raised by an output device that could not render a cue."""


class SpeechOutput(Protocol):
    def say(self, text: str) -> None:
        ...


class HapticOutput(Protocol):
    def pulse(self, pattern: str) -> None:
        ...


class SoundOutput(Protocol):
    def play(self, sound: str) -> None:
        ...


class LoggingCueOutput:
    """Renders every cue as a log line; used when no device is attached."""
    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("cues")

    def say(self, text: str) -> None:
        self._logger.info("Voice: %s", text)

    def pulse(self, pattern: str) -> None:
        self._logger.info("Haptic: %s", pattern)

    def play(self, sound: str) -> None:
        self._logger.info("Sound: %s", sound)
