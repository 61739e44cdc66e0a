"""Websocket session feed event constants."""

from __future__ import annotations

EVENT_HELLO = "hello"
EVENT_SESSION = "session"
EVENT_PHASE_CHANGE = "phase_change"
EVENT_COUNTDOWN = "countdown"
EVENT_WORKOUT_SUMMARY = "workout_summary"
EVENT_ERROR = "error"

# Replayed to newly connected clients so they render the current session
# without waiting for the next tick.
STICKY_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EVENT_SESSION,
        EVENT_PHASE_CHANGE,
        EVENT_WORKOUT_SUMMARY,
        EVENT_ERROR,
    }
)

STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_WORKOUT_SUMMARY,
    EVENT_PHASE_CHANGE,
    EVENT_ERROR,
    EVENT_SESSION,
)
