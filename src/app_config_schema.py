"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_CONFIG_FILE = "config.toml"
MAX_INTERVAL_SECONDS = 30 * 60


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class SessionSettings:
    """Default interval durations and tick cadence from `[session]`."""
    run_seconds: int = 30
    walk_seconds: int = 60
    tick_interval_seconds: float = 0.25


@dataclass(frozen=True)
class SharedStateSettings:
    """Companion snapshot store settings from `[shared_state]`."""
    enabled: bool = True
    store_dir: str = "state"
    slot: str = "currentWorkoutState"
    publish_interval_seconds: float = 1.0
    staleness_seconds: float = 5.0


@dataclass(frozen=True)
class CueSettings:
    """Voice, haptic, and bell toggles from `[cues]`."""
    voice_enabled: bool = False
    haptics_enabled: bool = True
    bells_enabled: bool = True


@dataclass(frozen=True)
class HistorySettings:
    """Finished-workout persistence settings from `[history]`."""
    enabled: bool = True
    path: str = "workouts.jsonl"


@dataclass(frozen=True)
class PresetSettings:
    """User preset storage from `[presets]`; an empty path keeps presets in memory."""
    path: str = "presets.json"


@dataclass(frozen=True)
class UIServerSettings:
    """Websocket session feed settings from `[ui_server]`."""
    enabled: bool = False
    host: str = "127.0.0.1"
    port: int = 8765


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    session: SessionSettings = field(default_factory=SessionSettings)
    shared_state: SharedStateSettings = field(default_factory=SharedStateSettings)
    cues: CueSettings = field(default_factory=CueSettings)
    history: HistorySettings = field(default_factory=HistorySettings)
    presets: PresetSettings = field(default_factory=PresetSettings)
    ui_server: UIServerSettings = field(default_factory=UIServerSettings)
    source_file: str = ""
