"""Interval configuration, preset durations, and built-in workout presets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constants import (
    DEFAULT_RUN_SECONDS,
    DEFAULT_WALK_SECONDS,
    MAX_INTERVAL_SECONDS,
    MIN_CUSTOM_INTERVAL_SECONDS,
)
from .phase import Phase


class IntervalConfigurationError(ValueError):
    """Raised when run/walk durations are non-positive or out of range."""


PRESET_DURATIONS: tuple[int, ...] = (30, 45, 60, 120, 180, 300, 420, 600, 900)


@dataclass(frozen=True)
class IntervalConfiguration:
    """Immutable run/walk durations for one workout session."""
    run_seconds: int = DEFAULT_RUN_SECONDS
    walk_seconds: int = DEFAULT_WALK_SECONDS

    def __post_init__(self) -> None:
        _validate_seconds(self.run_seconds, "run_seconds")
        _validate_seconds(self.walk_seconds, "walk_seconds")

    def duration_of(self, phase: Phase) -> int:
        if phase is Phase.RUN:
            return self.run_seconds
        return self.walk_seconds

    @property
    def cycle_seconds(self) -> int:
        return self.run_seconds + self.walk_seconds

    @property
    def summary(self) -> str:
        return f"{short_name(self.run_seconds)} / {short_name(self.walk_seconds)}"

    @classmethod
    def clamped(cls, run_seconds: int, walk_seconds: int) -> "IntervalConfiguration":
        """Build a configuration with each value clamped into the custom range."""
        return cls(
            run_seconds=clamp_custom_seconds(run_seconds),
            walk_seconds=clamp_custom_seconds(walk_seconds),
        )


def _validate_seconds(value: object, field: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise IntervalConfigurationError(f"{field} must be an integer, got: {value!r}")
    if value <= 0:
        raise IntervalConfigurationError(f"{field} must be greater than zero, got: {value}")
    if value > MAX_INTERVAL_SECONDS:
        raise IntervalConfigurationError(
            f"{field} must be at most {MAX_INTERVAL_SECONDS}s, got: {value}"
        )


def clamp_custom_seconds(seconds: int) -> int:
    return max(MIN_CUSTOM_INTERVAL_SECONDS, min(MAX_INTERVAL_SECONDS, int(seconds)))


def is_preset_duration(seconds: int) -> bool:
    return seconds in PRESET_DURATIONS


def display_name(seconds: int) -> str:
    """Human-readable duration, e.g. ``"30 sec"``, ``"1 min"``, ``"2m 30s"``."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    if minutes == 0:
        return f"{remainder} sec"
    if remainder == 0:
        return f"{minutes} min"
    return f"{minutes}m {remainder}s"


def short_name(seconds: int) -> str:
    """Compact duration for small displays, e.g. ``"30s"``, ``"1m"``, ``"2:30"``."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    if minutes == 0:
        return f"{remainder}s"
    if remainder == 0:
        return f"{minutes}m"
    return f"{minutes}:{remainder:02d}"


PRESET_CATEGORY_ORDER: dict[str, int] = {
    "Beginner": 0,
    "Intermediate": 1,
    "Advanced": 2,
    "My Presets": 3,
}
CUSTOM_PRESET_CATEGORY = "My Presets"


@dataclass(frozen=True)
class WorkoutPreset:
    """Named interval configuration, either built-in or user-created."""
    name: str
    run_seconds: int
    walk_seconds: int
    category: str = CUSTOM_PRESET_CATEGORY
    description: Optional[str] = None
    built_in: bool = False
    sort_order: int = 0

    @property
    def configuration(self) -> IntervalConfiguration:
        return IntervalConfiguration(
            run_seconds=self.run_seconds,
            walk_seconds=self.walk_seconds,
        )

    @property
    def interval_summary(self) -> str:
        return f"{_preset_seconds(self.run_seconds)} / {_preset_seconds(self.walk_seconds)}"

    @property
    def full_description(self) -> str:
        intervals = (
            f"Run {_preset_seconds(self.run_seconds)}, "
            f"Walk {_preset_seconds(self.walk_seconds)}"
        )
        if self.description:
            return f"{self.description} - {intervals}"
        return intervals

    def sort_key(self) -> tuple[int, int, str]:
        return (
            PRESET_CATEGORY_ORDER.get(self.category, len(PRESET_CATEGORY_ORDER)),
            self.sort_order,
            self.name,
        )


def _preset_seconds(seconds: int) -> str:
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    if minutes == 0:
        return f"{remainder}s"
    if remainder == 0:
        return f"{minutes}m"
    return f"{minutes}m {remainder}s"


BUILTIN_PRESETS: tuple[WorkoutPreset, ...] = (
    WorkoutPreset("Easy Start", 30, 60, "Beginner", "Perfect for beginners", True, 0),
    WorkoutPreset("Beginner", 60, 60, "Beginner", "Equal run and walk times", True, 1),
    WorkoutPreset(
        "Building Up", 90, 60, "Intermediate", "Longer runs, shorter walks", True, 0
    ),
    WorkoutPreset("Steady State", 120, 60, "Intermediate", "2 minute runs", True, 1),
    WorkoutPreset("Endurance", 180, 60, "Advanced", "Extended running intervals", True, 0),
    WorkoutPreset("Race Prep", 300, 60, "Advanced", "Long runs with recovery", True, 1),
)


def builtin_preset(name: str) -> Optional[WorkoutPreset]:
    wanted = " ".join(name.split()).casefold()
    for preset in BUILTIN_PRESETS:
        if preset.name.casefold() == wanted:
            return preset
    return None


def sorted_presets(presets=BUILTIN_PRESETS) -> list[WorkoutPreset]:
    return sorted(presets, key=WorkoutPreset.sort_key)
