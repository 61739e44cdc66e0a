"""Deadline-driven run/walk phase state machine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .configuration import IntervalConfiguration
from .constants import TRANSITION_DEADLINE, TRANSITION_SKIP
from .phase import Phase


class PhaseStateError(RuntimeError):
    """Raised when the state machine is used before a session was started."""


@dataclass(frozen=True)
class PhaseTransition:
    """One phase flip; ``at`` is the instant the new phase logically began."""
    phase: Phase
    previous_phase: Phase
    at: float
    reason: str = TRANSITION_DEADLINE


class PhaseStateMachine:
    """Tracks the active phase from absolute deadlines instead of a countdown.

    Every query takes the current time explicitly, so the machine never drifts
    with scheduler jitter and recovers from arbitrarily long gaps between
    evaluations. It is not thread-safe; the owning session controller
    serializes access.
    """

    def __init__(self) -> None:
        self._config: Optional[IntervalConfiguration] = None
        self._phase: Phase = Phase.RUN
        self._phase_deadline: float = 0.0
        self._started_at: float = 0.0
        self._paused_at: Optional[float] = None
        self._paused_total: float = 0.0

    @property
    def is_started(self) -> bool:
        return self._config is not None

    @property
    def config(self) -> IntervalConfiguration:
        return self._require_config()

    @property
    def current_phase(self) -> Phase:
        return self._phase

    @property
    def phase_deadline(self) -> float:
        return self._phase_deadline

    @property
    def started_at(self) -> float:
        return self._started_at

    @property
    def is_paused(self) -> bool:
        return self._paused_at is not None

    @property
    def paused_at(self) -> Optional[float]:
        return self._paused_at

    def start(self, config: IntervalConfiguration, at: float) -> None:
        self._config = config
        self._phase = Phase.RUN
        self._started_at = at
        self._phase_deadline = at + config.run_seconds
        self._paused_at = None
        self._paused_total = 0.0

    def duration_of(self, phase: Phase) -> int:
        return self._require_config().duration_of(phase)

    def advance(self, now: float) -> list[PhaseTransition]:
        """Fire every transition that is due at ``now``, oldest first.

        A ``now`` before the current deadline, including one produced by a
        backwards clock jump, fires nothing.
        """
        config = self._require_config()
        if self._paused_at is not None:
            return []

        transitions: list[PhaseTransition] = []
        while now >= self._phase_deadline:
            previous = self._phase
            began_at = self._phase_deadline
            self._phase = previous.next
            self._phase_deadline = began_at + config.duration_of(self._phase)
            transitions.append(
                PhaseTransition(
                    phase=self._phase,
                    previous_phase=previous,
                    at=began_at,
                    reason=TRANSITION_DEADLINE,
                )
            )
        return transitions

    def pause(self, at: float) -> bool:
        self._require_config()
        if self._paused_at is not None:
            return False
        self._paused_at = at
        return True

    def resume(self, at: float) -> bool:
        self._require_config()
        paused_at = self._paused_at
        if paused_at is None:
            return False
        pause_duration = max(0.0, at - paused_at)
        self._phase_deadline += pause_duration
        self._paused_total += pause_duration
        self._paused_at = None
        return True

    def skip_phase(self, at: float) -> PhaseTransition:
        """End the current phase immediately and start the next one in full.

        While paused, the skip takes effect at the pause instant so the new
        phase keeps its whole duration once the session resumes.
        """
        config = self._require_config()
        effective = self._effective_now(at)
        previous = self._phase
        self._phase = previous.next
        self._phase_deadline = effective + config.duration_of(self._phase)
        return PhaseTransition(
            phase=self._phase,
            previous_phase=previous,
            at=effective,
            reason=TRANSITION_SKIP,
        )

    def remaining_exact(self, now: float) -> float:
        self._require_config()
        return max(0.0, self._phase_deadline - self._effective_now(now))

    def time_remaining(self, now: float) -> int:
        """Whole seconds left in the current phase, rounded up for display."""
        remaining = self.remaining_exact(now)
        return min(self.duration_of(self._phase), int(math.ceil(remaining)))

    def progress(self, now: float) -> float:
        duration = self.duration_of(self._phase)
        ratio = (duration - self.time_remaining(now)) / duration
        return max(0.0, min(1.0, ratio))

    def phase_elapsed(self, now: float) -> float:
        """Active seconds spent in the current phase so far."""
        duration = self.duration_of(self._phase)
        return max(0.0, min(float(duration), duration - self.remaining_exact(now)))

    def elapsed_total(self, now: float) -> float:
        """Active seconds since start, excluding time spent paused."""
        if not self.is_started:
            return 0.0
        elapsed = self._effective_now(now) - self._started_at - self._paused_total
        return max(0.0, elapsed)

    def _effective_now(self, now: float) -> float:
        if self._paused_at is not None:
            return self._paused_at
        return now

    def _require_config(self) -> IntervalConfiguration:
        if self._config is None:
            raise PhaseStateError("Phase state machine has not been started")
        return self._config
