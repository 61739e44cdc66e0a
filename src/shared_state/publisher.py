"""Publishes session snapshots into the shared store at a bounded cadence."""

from __future__ import annotations

import logging
from typing import Optional

from intervals import Clock, SessionUpdate, SystemClock
from intervals.constants import STATE_AFFECTING_ACTIONS

from .snapshot import SharedSnapshot
from .store import SnapshotStore, SnapshotStoreError

DEFAULT_PUBLISH_INTERVAL_SECONDS = 1.0
DEFAULT_TICK_INTERVAL_SECONDS = 0.25


class SharedStatePublisher:
    """Single writer of the shared snapshot slot.

    Write failures are logged and swallowed; the next update retries, so the
    session itself is never affected by an unavailable store.

    Tick updates arrive on the ticker's cadence, so one may land up to
    ``tick_interval_seconds`` before the publish interval is complete. Such a
    tick still counts as due, which keeps the gap between writes within one
    publish interval plus one tick.
    """

    def __init__(
        self,
        store: SnapshotStore,
        *,
        clock: Optional[Clock] = None,
        min_interval_seconds: float = DEFAULT_PUBLISH_INTERVAL_SECONDS,
        tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        if min_interval_seconds < 0:
            raise ValueError("min_interval_seconds must not be negative")
        if tick_interval_seconds < 0:
            raise ValueError("tick_interval_seconds must not be negative")

        self._store = store
        self._clock = clock or SystemClock()
        self._min_interval_seconds = float(min_interval_seconds)
        self._write_threshold = max(0.0, self._min_interval_seconds - tick_interval_seconds)
        self._logger = logger or logging.getLogger("shared_state")
        self._last_write_at: Optional[float] = None
        self._write_failed = False
        self._last_published: Optional[SharedSnapshot] = None

    @property
    def last_published(self) -> Optional[SharedSnapshot]:
        return self._last_published

    @property
    def write_failed(self) -> bool:
        return self._write_failed

    def publish(self, snapshot: SharedSnapshot) -> None:
        try:
            self._store.write(snapshot)
        except SnapshotStoreError as error:
            if not self._write_failed:
                self._logger.warning("Shared state write failed, will retry: %s", error)
            else:
                self._logger.debug("Shared state write still failing: %s", error)
            self._write_failed = True
            return

        if self._write_failed:
            self._logger.info("Shared state write recovered")
        self._write_failed = False
        self._last_write_at = snapshot.last_update
        self._last_published = snapshot

    def handle_update(self, update: SessionUpdate) -> None:
        """Session update listener; ticks are throttled, everything else is written."""
        if not update.accepted:
            return

        now = self._clock.now()
        if self._should_write(update, now):
            self.publish(SharedSnapshot.from_session(update.snapshot, at=now))

    def _should_write(self, update: SessionUpdate, now: float) -> bool:
        if update.action in STATE_AFFECTING_ACTIONS or update.phase_changed:
            return True
        if self._write_failed or self._last_write_at is None:
            return True
        # A backwards clock jump also forces a write.
        elapsed = now - self._last_write_at
        return elapsed >= self._write_threshold or elapsed < 0
