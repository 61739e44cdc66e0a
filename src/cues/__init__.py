from .listeners import BellCue, HapticCue, VoiceAnnouncer
from .outputs import (
    CueError,
    HapticOutput,
    LoggingCueOutput,
    SoundOutput,
    SpeechOutput,
)

__all__ = [
    "BellCue",
    "CueError",
    "HapticCue",
    "HapticOutput",
    "LoggingCueOutput",
    "SoundOutput",
    "SpeechOutput",
    "VoiceAnnouncer",
]
