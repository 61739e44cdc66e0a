"""Serialization of session feed events and the sticky replay cache."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, Optional

from contracts.ui_protocol import STICKY_EVENT_ORDER, STICKY_EVENT_TYPES
from intervals import PhaseChangeEvent, SessionSnapshot


def make_event(event_type: str, *, at: Optional[float] = None, **payload: Any) -> str:
    """Serialize an event with its type and an ISO-8601 UTC timestamp."""
    moment = (
        datetime.fromtimestamp(at, tz=timezone.utc)
        if at is not None
        else datetime.now(timezone.utc)
    )
    return json.dumps(
        {
            "type": event_type,
            "timestamp": moment.isoformat(),
            **payload,
        }
    )


def session_payload(snapshot: SessionSnapshot) -> dict[str, Any]:
    return {
        "state": snapshot.state,
        "phase": snapshot.phase.value,
        "time_remaining": snapshot.time_remaining,
        "interval_duration": snapshot.interval_duration,
        "elapsed_seconds": round(snapshot.elapsed_seconds, 3),
        "run_seconds": snapshot.run_seconds,
        "walk_seconds": snapshot.walk_seconds,
        "sequence_number": snapshot.sequence_number,
        "progress": round(snapshot.progress, 4),
    }


def phase_change_payload(event: PhaseChangeEvent) -> dict[str, Any]:
    return {
        "sequence_number": event.sequence_number,
        "phase": event.phase.value,
        "previous_phase": event.previous_phase.value,
        "reason": event.reason,
    }


class StickyEventStore:
    """Thread-safe cache of the latest event per sticky type."""
    def __init__(self):
        self._events: dict[str, str] = {}
        self._lock = threading.Lock()

    def remember(self, event_type: str, message: str) -> None:
        if event_type not in STICKY_EVENT_TYPES:
            return
        with self._lock:
            self._events[event_type] = message

    def snapshot(self) -> list[str]:
        """Cached events in replay order."""
        with self._lock:
            return [self._events[key] for key in STICKY_EVENT_ORDER if key in self._events]
