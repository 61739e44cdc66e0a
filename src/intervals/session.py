"""Session controller that owns one workout and fans out phase and tick events."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol

from .clock import Clock, SystemClock
from .configuration import IntervalConfiguration
from .constants import (
    ACTION_PAUSE,
    ACTION_RESUME,
    ACTION_SKIP,
    ACTION_START,
    ACTION_STOP,
    ACTION_TICK,
    ACTIVE_STATES,
    COUNTDOWN_WARNING_SECONDS,
    REASON_ALREADY_ACTIVE,
    REASON_NOT_ACTIVE,
    REASON_NOT_PAUSED,
    REASON_NOT_RUNNING,
    REASON_PAUSED,
    REASON_PHASE_CHANGED,
    REASON_RESUMED,
    REASON_SKIPPED,
    REASON_STARTED,
    REASON_STOPPED,
    REASON_TICK,
    STATE_IDLE,
    STATE_PAUSED,
    STATE_RUNNING,
    STATE_STOPPED,
)
from .machine import PhaseStateMachine, PhaseTransition
from .phase import Phase
from .summary import RoutePoint, WorkoutSummary


@dataclass(frozen=True)
class PhaseChangeEvent:
    """Phase change delivered to listeners in strictly increasing sequence order."""
    sequence_number: int
    phase: Phase
    previous_phase: Phase
    at: float
    reason: str


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable session state exposed to listeners and publishers."""
    state: str
    phase: Phase
    time_remaining: int
    interval_duration: int
    elapsed_seconds: float
    run_seconds: int
    walk_seconds: int
    sequence_number: int
    progress: float

    @property
    def is_active(self) -> bool:
        return self.state in ACTIVE_STATES

    @property
    def is_running(self) -> bool:
        return self.state == STATE_RUNNING


@dataclass(frozen=True)
class SessionUpdate:
    """Result envelope emitted after every session operation."""
    action: str
    accepted: bool
    reason: str
    snapshot: SessionSnapshot
    at: float
    phase_changes: tuple[PhaseChangeEvent, ...] = ()
    countdown_second: Optional[int] = None
    summary: Optional[WorkoutSummary] = None

    @property
    def phase_changed(self) -> bool:
        return bool(self.phase_changes)


class WorkoutSink(Protocol):
    """Persistence collaborator that receives finished workouts."""
    def save(self, summary: WorkoutSummary) -> None:
        ...


PhaseListener = Callable[[PhaseChangeEvent], None]
UpdateListener = Callable[[SessionUpdate], None]


class SessionController:
    """Owns the lifecycle of one workout session at a time.

    All mutation and listener dispatch happens under one re-entrant lock, so
    the scheduling thread and callers never interleave and listeners may read
    :meth:`snapshot` from inside a callback.
    """

    def __init__(
        self,
        *,
        clock: Optional[Clock] = None,
        default_config: Optional[IntervalConfiguration] = None,
        sink: Optional[WorkoutSink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._clock = clock or SystemClock()
        self._config = default_config or IntervalConfiguration()
        self._sink = sink
        self._logger = logger or logging.getLogger("session")
        self._lock = threading.RLock()

        self._machine = PhaseStateMachine()
        self._state = STATE_IDLE
        self._sequence = 0
        self._last_emitted_remaining: Optional[int] = None
        self._phase_totals: dict[Phase, float] = {Phase.RUN: 0.0, Phase.WALK: 0.0}
        self._interval_counts: dict[Phase, int] = {Phase.RUN: 0, Phase.WALK: 0}
        self._final_elapsed = 0.0

        self._phase_listeners: list[PhaseListener] = []
        self._update_listeners: list[UpdateListener] = []

    @property
    def config(self) -> IntervalConfiguration:
        with self._lock:
            return self._config

    @property
    def state(self) -> str:
        with self._lock:
            return self._state

    def add_phase_listener(self, listener: PhaseListener) -> None:
        with self._lock:
            self._phase_listeners.append(listener)

    def add_update_listener(self, listener: UpdateListener) -> None:
        with self._lock:
            self._update_listeners.append(listener)

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._snapshot_locked(self._clock.now())

    def start(self, config: Optional[IntervalConfiguration] = None) -> SessionUpdate:
        with self._lock:
            now = self._clock.now()
            if self._state in ACTIVE_STATES:
                return self._emit_locked(ACTION_START, False, REASON_ALREADY_ACTIVE, now)

            if config is not None:
                self._config = config
            self._machine.start(self._config, at=now)
            self._state = STATE_RUNNING
            self._sequence = 0
            self._last_emitted_remaining = self._config.run_seconds
            self._phase_totals = {Phase.RUN: 0.0, Phase.WALK: 0.0}
            self._interval_counts = {Phase.RUN: 1, Phase.WALK: 0}
            self._final_elapsed = 0.0
            self._logger.info(
                "Session started: run=%ss walk=%ss",
                self._config.run_seconds,
                self._config.walk_seconds,
            )
            return self._emit_locked(ACTION_START, True, REASON_STARTED, now)

    def pause(self) -> SessionUpdate:
        with self._lock:
            now = self._clock.now()
            if self._state != STATE_RUNNING:
                return self._emit_locked(ACTION_PAUSE, False, REASON_NOT_RUNNING, now)

            changes = self._advance_locked(now)
            self._machine.pause(now)
            self._state = STATE_PAUSED
            self._logger.info(
                "Session paused: phase=%s remaining=%ss",
                self._machine.current_phase.value,
                self._machine.time_remaining(now),
            )
            return self._emit_locked(ACTION_PAUSE, True, REASON_PAUSED, now, changes)

    def resume(self) -> SessionUpdate:
        with self._lock:
            now = self._clock.now()
            if self._state != STATE_PAUSED:
                return self._emit_locked(ACTION_RESUME, False, REASON_NOT_PAUSED, now)

            self._machine.resume(now)
            self._state = STATE_RUNNING
            self._last_emitted_remaining = self._machine.time_remaining(now)
            self._logger.info(
                "Session resumed: phase=%s remaining=%ss",
                self._machine.current_phase.value,
                self._last_emitted_remaining,
            )
            return self._emit_locked(ACTION_RESUME, True, REASON_RESUMED, now)

    def skip_phase(self) -> SessionUpdate:
        with self._lock:
            now = self._clock.now()
            if self._state not in ACTIVE_STATES:
                return self._emit_locked(ACTION_SKIP, False, REASON_NOT_ACTIVE, now)

            changes = self._advance_locked(now)
            if not changes:
                # A due transition already ended the phase the user asked to skip.
                previous = self._machine.current_phase
                self._phase_totals[previous] += self._machine.phase_elapsed(now)
                changes = (self._record_transition_locked(self._machine.skip_phase(now)),)
            self._last_emitted_remaining = self._machine.time_remaining(now)
            return self._emit_locked(ACTION_SKIP, True, REASON_SKIPPED, now, changes)

    def tick(self) -> Optional[SessionUpdate]:
        """Re-evaluate the session; returns an update when something visible changed."""
        with self._lock:
            if self._state != STATE_RUNNING:
                return None

            now = self._clock.now()
            changes = self._advance_locked(now)
            remaining = self._machine.time_remaining(now)
            previous_remaining = self._last_emitted_remaining
            if not changes and remaining == previous_remaining:
                return None

            countdown_second = None
            if (
                not changes
                and remaining in COUNTDOWN_WARNING_SECONDS
                and previous_remaining is not None
                and remaining < previous_remaining
            ):
                countdown_second = remaining

            self._last_emitted_remaining = remaining
            reason = REASON_PHASE_CHANGED if changes else REASON_TICK
            return self._emit_locked(
                ACTION_TICK,
                True,
                reason,
                now,
                changes,
                countdown_second=countdown_second,
            )

    def stop(
        self,
        *,
        route_points: Optional[Iterable[RoutePoint]] = None,
        average_heart_rate: Optional[float] = None,
    ) -> Optional[WorkoutSummary]:
        """Finish the session and return its summary; a no-op when not active."""
        with self._lock:
            if self._state not in ACTIVE_STATES:
                return None

            now = self._clock.now()
            changes = self._advance_locked(now)
            current = self._machine.current_phase
            self._phase_totals[current] += self._machine.phase_elapsed(now)
            self._final_elapsed = self._machine.elapsed_total(now)
            self._state = STATE_STOPPED

            summary = WorkoutSummary(
                start_time=self._machine.started_at,
                end_time=now,
                total_run_seconds=self._phase_totals[Phase.RUN],
                total_walk_seconds=self._phase_totals[Phase.WALK],
                phase_transition_count=self._sequence,
                run_intervals=self._interval_counts[Phase.RUN],
                walk_intervals=self._interval_counts[Phase.WALK],
                run_interval_setting=self._config.run_seconds,
                walk_interval_setting=self._config.walk_seconds,
                route_points=tuple(route_points) if route_points is not None else None,
                average_heart_rate=average_heart_rate,
            )
            self._logger.info(
                "Session stopped: elapsed=%.1fs transitions=%d",
                self._final_elapsed,
                self._sequence,
            )

            if self._sink is not None:
                try:
                    self._sink.save(summary)
                except Exception as error:
                    self._logger.error("Failed to persist workout summary: %s", error)

            self._emit_locked(ACTION_STOP, True, REASON_STOPPED, now, changes, summary=summary)
            return summary

    def _advance_locked(self, now: float) -> tuple[PhaseChangeEvent, ...]:
        transitions = self._machine.advance(now)
        events = []
        for transition in transitions:
            self._phase_totals[transition.previous_phase] += self._machine.duration_of(
                transition.previous_phase
            )
            events.append(self._record_transition_locked(transition))
        return tuple(events)

    def _record_transition_locked(self, transition: PhaseTransition) -> PhaseChangeEvent:
        self._sequence += 1
        self._interval_counts[transition.phase] += 1
        event = PhaseChangeEvent(
            sequence_number=self._sequence,
            phase=transition.phase,
            previous_phase=transition.previous_phase,
            at=transition.at,
            reason=transition.reason,
        )
        self._logger.info(
            "Phase change #%d: %s -> %s (%s)",
            event.sequence_number,
            event.previous_phase.value,
            event.phase.value,
            event.reason,
        )
        self._last_emitted_remaining = None
        for listener in tuple(self._phase_listeners):
            try:
                listener(event)
            except Exception as error:
                self._logger.error("Phase listener failed: %s", error, exc_info=True)
        return event

    def _emit_locked(
        self,
        action: str,
        accepted: bool,
        reason: str,
        now: float,
        changes: tuple[PhaseChangeEvent, ...] = (),
        *,
        countdown_second: Optional[int] = None,
        summary: Optional[WorkoutSummary] = None,
    ) -> SessionUpdate:
        update = SessionUpdate(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=self._snapshot_locked(now),
            at=now,
            phase_changes=changes,
            countdown_second=countdown_second,
            summary=summary,
        )
        if not accepted:
            self._logger.debug("Session %s rejected: %s", action, reason)
        for listener in tuple(self._update_listeners):
            try:
                listener(update)
            except Exception as error:
                self._logger.error("Update listener failed: %s", error, exc_info=True)
        return update

    def _snapshot_locked(self, now: float) -> SessionSnapshot:
        config = self._config
        if self._state in ACTIVE_STATES:
            machine = self._machine
            phase = machine.current_phase
            return SessionSnapshot(
                state=self._state,
                phase=phase,
                time_remaining=machine.time_remaining(now),
                interval_duration=machine.duration_of(phase),
                elapsed_seconds=machine.elapsed_total(now),
                run_seconds=config.run_seconds,
                walk_seconds=config.walk_seconds,
                sequence_number=self._sequence,
                progress=machine.progress(now),
            )

        return SessionSnapshot(
            state=self._state,
            phase=Phase.RUN,
            time_remaining=config.run_seconds,
            interval_duration=config.run_seconds,
            elapsed_seconds=self._final_elapsed if self._state == STATE_STOPPED else 0.0,
            run_seconds=config.run_seconds,
            walk_seconds=config.walk_seconds,
            sequence_number=self._sequence,
            progress=0.0,
        )
