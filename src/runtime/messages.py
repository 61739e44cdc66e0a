"""Status and rejection text builders for session updates."""

from __future__ import annotations

from intervals import SessionSnapshot
from intervals.constants import (
    REASON_ALREADY_ACTIVE,
    REASON_NOT_ACTIVE,
    REASON_NOT_PAUSED,
    REASON_NOT_RUNNING,
    STATE_PAUSED,
    STATE_RUNNING,
    STATE_STOPPED,
)

_REJECTION_MESSAGES = {
    REASON_ALREADY_ACTIVE: "A workout is already in progress",
    REASON_NOT_RUNNING: "No running workout to pause",
    REASON_NOT_PAUSED: "Workout is not paused",
    REASON_NOT_ACTIVE: "No active workout",
}


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as `M:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{remainder:02d}"


def session_status_message(snapshot: SessionSnapshot) -> str:
    """Build status text for the current session snapshot."""
    phase = snapshot.phase.value.capitalize()
    if snapshot.state == STATE_RUNNING:
        return f"{phase} ({format_duration(snapshot.time_remaining)} remaining)"
    if snapshot.state == STATE_PAUSED:
        return f"{phase} paused ({format_duration(snapshot.time_remaining)} remaining)"
    if snapshot.state == STATE_STOPPED:
        return f"Workout finished after {format_duration(int(snapshot.elapsed_seconds))}"
    return f"Ready (run {format_duration(snapshot.run_seconds)} / walk {format_duration(snapshot.walk_seconds)})"


def rejection_message(reason: str) -> str:
    return _REJECTION_MESSAGES.get(reason, f"Request rejected: {reason}")
