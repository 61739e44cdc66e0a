"""Companion-side reader that projects a countdown timeline from the last snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from intervals import Clock, SystemClock

from .snapshot import SharedSnapshot, SnapshotDecodeError
from .store import SnapshotStore, SnapshotStoreError

DEFAULT_STALENESS_SECONDS = 5.0
MAX_TIMELINE_ENTRIES = 60
MIN_ACTIVE_REFRESH_SECONDS = 30
IDLE_REFRESH_SECONDS = 3600


@dataclass(frozen=True)
class TimelineEntry:
    date: float
    state: SharedSnapshot


@dataclass(frozen=True)
class Timeline:
    """Entries to display until ``refresh_at``; ``entries`` can be consumed once."""
    state: SharedSnapshot
    generated_at: float
    entries: Iterator[TimelineEntry]
    entry_count: int
    refresh_at: float


class CompanionTimelineReader:
    """Read-only consumer of the shared snapshot slot.

    The reader owns the staleness bound: an active snapshot older than
    ``staleness_seconds`` is treated as idle, because the writing process may
    have been killed without publishing its final state.
    """

    def __init__(
        self,
        store: SnapshotStore,
        *,
        clock: Optional[Clock] = None,
        staleness_seconds: float = DEFAULT_STALENESS_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        if staleness_seconds <= 0:
            raise ValueError("staleness_seconds must be greater than zero")
        self._store = store
        self._clock = clock or SystemClock()
        self._staleness_seconds = float(staleness_seconds)
        self._logger = logger or logging.getLogger("companion")

    def placeholder(self) -> TimelineEntry:
        now = self._clock.now()
        return TimelineEntry(date=now, state=SharedSnapshot.idle(now))

    def read_state(self) -> SharedSnapshot:
        return self._read_state(self._clock.now())

    def current_entry(self) -> TimelineEntry:
        now = self._clock.now()
        return TimelineEntry(date=now, state=self._read_state(now))

    def timeline(self) -> Timeline:
        now = self._clock.now()
        state = self._read_state(now)

        if not state.is_active:
            idle_entry = TimelineEntry(date=now, state=state)
            return Timeline(
                state=state,
                generated_at=now,
                entries=iter((idle_entry,)),
                entry_count=1,
                refresh_at=now + IDLE_REFRESH_SECONDS,
            )

        elapsed = max(0, int(now - state.last_update))
        remaining_now = max(0, state.time_remaining - elapsed)
        # Entries stop at the phase boundary; the next phase is left to the next read.
        count = min(remaining_now, MAX_TIMELINE_ENTRIES)
        return Timeline(
            state=state,
            generated_at=now,
            entries=_project_entries(state, now, remaining_now, count),
            entry_count=count,
            refresh_at=now + max(count, MIN_ACTIVE_REFRESH_SECONDS),
        )

    def _read_state(self, now: float) -> SharedSnapshot:
        try:
            state = self._store.read()
        except (SnapshotStoreError, SnapshotDecodeError) as error:
            self._logger.warning("Unreadable shared snapshot, showing idle: %s", error)
            return SharedSnapshot.idle(now)

        if state is None:
            return SharedSnapshot.idle(now)

        if state.is_active and now - state.last_update > self._staleness_seconds:
            self._logger.debug(
                "Shared snapshot is stale (%.1fs old), showing idle",
                now - state.last_update,
            )
            return SharedSnapshot.idle(
                now,
                run_interval_setting=state.run_interval_setting,
                walk_interval_setting=state.walk_interval_setting,
            )
        return state


def _project_entries(
    state: SharedSnapshot,
    start: float,
    remaining: int,
    count: int,
) -> Iterator[TimelineEntry]:
    for offset in range(count):
        date = start + offset
        yield TimelineEntry(date=date, state=state.projected(date, remaining - offset))
