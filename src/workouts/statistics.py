"""Workout statistics: live interval recording and history aggregation."""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from intervals import Phase, PhaseChangeEvent, SessionUpdate, WorkoutSummary
from intervals.constants import ACTION_START


class StatisticsRecorder:
    """Phase-change listener that keeps an ordered history for the active session."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("statistics")
        self._events: list[PhaseChangeEvent] = []
        self._missed_sequence_numbers: list[int] = []
        self._run_intervals = 0
        self._walk_intervals = 0

    @property
    def events(self) -> tuple[PhaseChangeEvent, ...]:
        return tuple(self._events)

    @property
    def run_intervals(self) -> int:
        return self._run_intervals

    @property
    def walk_intervals(self) -> int:
        return self._walk_intervals

    @property
    def missed_sequence_numbers(self) -> tuple[int, ...]:
        return tuple(self._missed_sequence_numbers)

    def handle_update(self, update: SessionUpdate) -> None:
        if update.action == ACTION_START and update.accepted:
            self._events.clear()
            self._missed_sequence_numbers.clear()
            self._run_intervals = 1
            self._walk_intervals = 0

    def handle_phase_change(self, event: PhaseChangeEvent) -> None:
        expected = self._events[-1].sequence_number + 1 if self._events else 1
        if event.sequence_number > expected:
            missed = list(range(expected, event.sequence_number))
            self._missed_sequence_numbers.extend(missed)
            self._logger.warning("Missed phase-change events: %s", missed)
        elif event.sequence_number < expected:
            self._logger.warning(
                "Out-of-order phase-change event #%d ignored (expected #%d)",
                event.sequence_number,
                expected,
            )
            return

        self._events.append(event)
        if event.phase is Phase.RUN:
            self._run_intervals += 1
        else:
            self._walk_intervals += 1


@dataclass(frozen=True)
class PeriodStatistics:
    workout_count: int = 0
    total_duration: float = 0.0
    total_distance: float = 0.0
    total_calories: float = 0.0
    total_intervals: int = 0

    @property
    def formatted_duration(self) -> str:
        hours, remainder = divmod(int(self.total_duration), 3600)
        minutes = remainder // 60
        if hours > 0:
            return f"{hours}h {minutes}m"
        return f"{minutes}m"


@dataclass(frozen=True)
class DailyWorkoutData:
    date: dt.date
    workout_count: int
    total_duration: float


@dataclass(frozen=True)
class WorkoutStreak:
    current_streak: int = 0
    longest_streak: int = 0
    last_workout_date: Optional[dt.date] = None


def workout_date(summary: WorkoutSummary, tz: Optional[dt.tzinfo] = None) -> dt.date:
    return dt.datetime.fromtimestamp(summary.start_time, tz=tz).date()


def period_statistics(
    summaries: Iterable[WorkoutSummary],
    *,
    start: Optional[float] = None,
    end: Optional[float] = None,
) -> PeriodStatistics:
    """Aggregate workouts whose start time falls inside ``[start, end]``."""
    selected = [
        summary
        for summary in summaries
        if (start is None or summary.start_time >= start)
        and (end is None or summary.start_time <= end)
    ]
    return PeriodStatistics(
        workout_count=len(selected),
        total_duration=sum(summary.total_seconds for summary in selected),
        total_distance=sum(summary.total_distance_meters for summary in selected),
        total_calories=sum(summary.estimated_calories for summary in selected),
        total_intervals=sum(summary.total_intervals for summary in selected),
    )


def daily_data(
    summaries: Iterable[WorkoutSummary],
    *,
    today: dt.date,
    days: int = 7,
    tz: Optional[dt.tzinfo] = None,
) -> list[DailyWorkoutData]:
    """Per-day workout counts and durations for the ``days`` ending ``today``."""
    buckets: dict[dt.date, list[WorkoutSummary]] = {}
    for summary in summaries:
        buckets.setdefault(workout_date(summary, tz), []).append(summary)

    result = []
    for offset in reversed(range(days)):
        day = today - dt.timedelta(days=offset)
        day_summaries = buckets.get(day, [])
        result.append(
            DailyWorkoutData(
                date=day,
                workout_count=len(day_summaries),
                total_duration=sum(summary.total_seconds for summary in day_summaries),
            )
        )
    return result


def workout_streak(
    summaries: Iterable[WorkoutSummary],
    *,
    today: dt.date,
    tz: Optional[dt.tzinfo] = None,
) -> WorkoutStreak:
    """Current and longest runs of consecutive workout days.

    The current streak only counts while the latest workout was today or
    yesterday.
    """
    days = sorted({workout_date(summary, tz) for summary in summaries})
    if not days:
        return WorkoutStreak()

    longest = 1
    run_length = 1
    for previous, day in zip(days, days[1:]):
        if (day - previous).days == 1:
            run_length += 1
        else:
            run_length = 1
        longest = max(longest, run_length)

    current = 0
    if (today - days[-1]).days in (0, 1):
        expected = days[-1]
        for day in reversed(days):
            if day != expected:
                break
            current += 1
            expected = day - dt.timedelta(days=1)

    return WorkoutStreak(
        current_streak=current,
        longest_streak=longest,
        last_workout_date=days[-1],
    )
