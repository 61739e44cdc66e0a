"""Workout statistics, presets, heart rate zones and history persistence."""

from .heart_rate import HeartRateZone, max_heart_rate_for_age, summary_zone, zone_for
from .history import WorkoutHistoryError, WorkoutHistoryStore
from .presets import PresetError, PresetRegistry
from .statistics import (
    DailyWorkoutData,
    PeriodStatistics,
    StatisticsRecorder,
    WorkoutStreak,
    daily_data,
    period_statistics,
    workout_streak,
)

__all__ = [
    "DailyWorkoutData",
    "HeartRateZone",
    "PeriodStatistics",
    "PresetError",
    "PresetRegistry",
    "StatisticsRecorder",
    "WorkoutHistoryError",
    "WorkoutHistoryStore",
    "WorkoutStreak",
    "daily_data",
    "max_heart_rate_for_age",
    "period_statistics",
    "summary_zone",
    "workout_streak",
    "zone_for",
]
