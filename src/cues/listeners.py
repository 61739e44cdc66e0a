"""Session listeners that turn phase changes and countdowns into cues."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from intervals import Phase, PhaseChangeEvent, SessionUpdate
from intervals.constants import ACTION_START, ACTION_STOP

from .outputs import (
    HAPTIC_COUNTDOWN,
    HAPTIC_PHASE_CHANGE,
    HAPTIC_START,
    HAPTIC_STOP,
    SOUND_RUN_BELL,
    SOUND_WALK_BELL,
    CueError,
    HapticOutput,
    SoundOutput,
    SpeechOutput,
)

PHASE_ANNOUNCEMENTS = {Phase.RUN: "Run", Phase.WALK: "Walk"}
PHASE_SOUNDS = {Phase.RUN: SOUND_RUN_BELL, Phase.WALK: SOUND_WALK_BELL}


class _CueListener:
    def __init__(self, enabled: bool, logger: Optional[logging.Logger]):
        self.enabled = enabled
        self._logger = logger or logging.getLogger("cues")

    def _render(self, render: Callable[[], None], label: str) -> None:
        if not self.enabled:
            return
        try:
            render()
        except CueError as error:
            self._logger.warning("%s cue failed: %s", label, error)


class VoiceAnnouncer(_CueListener):
    """Speaks the new phase name on start and on every phase change."""

    def __init__(
        self,
        speech: SpeechOutput,
        *,
        enabled: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(enabled, logger)
        self._speech = speech

    def handle_phase_change(self, event: PhaseChangeEvent) -> None:
        self._announce(event.phase)

    def handle_update(self, update: SessionUpdate) -> None:
        if update.action == ACTION_START and update.accepted:
            self._announce(update.snapshot.phase)

    def _announce(self, phase: Phase) -> None:
        text = PHASE_ANNOUNCEMENTS[phase]
        self._render(lambda: self._speech.say(text), "Voice")


class HapticCue(_CueListener):
    """Pulses on phase changes and on the last three seconds of each phase."""

    def __init__(
        self,
        haptics: HapticOutput,
        *,
        enabled: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(enabled, logger)
        self._haptics = haptics

    def handle_phase_change(self, event: PhaseChangeEvent) -> None:
        self._render(lambda: self._haptics.pulse(HAPTIC_PHASE_CHANGE), "Haptic")

    def handle_update(self, update: SessionUpdate) -> None:
        if not update.accepted:
            return
        if update.action == ACTION_START:
            pattern = HAPTIC_START
        elif update.action == ACTION_STOP:
            pattern = HAPTIC_STOP
        elif update.countdown_second is not None:
            pattern = HAPTIC_COUNTDOWN
        else:
            return
        self._render(lambda: self._haptics.pulse(pattern), "Haptic")


class BellCue(_CueListener):
    """Plays the phase bell on start and on every phase change."""

    def __init__(
        self,
        sound: SoundOutput,
        *,
        enabled: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(enabled, logger)
        self._sound = sound

    def handle_phase_change(self, event: PhaseChangeEvent) -> None:
        self._ring(event.phase)

    def handle_update(self, update: SessionUpdate) -> None:
        if update.action == ACTION_START and update.accepted:
            self._ring(update.snapshot.phase)

    def _ring(self, phase: Phase) -> None:
        sound = PHASE_SOUNDS[phase]
        self._render(lambda: self._sound.play(sound), "Bell")
