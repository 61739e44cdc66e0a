"""Phase, action, and reason constants used by interval session logic."""

from __future__ import annotations

PHASE_TAG_RUN = "RUN"
PHASE_TAG_WALK = "WALK"

DEFAULT_RUN_SECONDS = 30
DEFAULT_WALK_SECONDS = 60

MAX_INTERVAL_SECONDS = 30 * 60
MIN_CUSTOM_INTERVAL_SECONDS = 10

STATE_IDLE = "idle"
STATE_RUNNING = "running"
STATE_PAUSED = "paused"
STATE_STOPPED = "stopped"

ACTIVE_STATES: frozenset[str] = frozenset({STATE_RUNNING, STATE_PAUSED})

ACTION_START = "start"
ACTION_PAUSE = "pause"
ACTION_RESUME = "resume"
ACTION_STOP = "stop"
ACTION_SKIP = "skip"
ACTION_TICK = "tick"

STATE_AFFECTING_ACTIONS: frozenset[str] = frozenset(
    {ACTION_START, ACTION_PAUSE, ACTION_RESUME, ACTION_STOP, ACTION_SKIP}
)

TRANSITION_DEADLINE = "deadline"
TRANSITION_SKIP = "skip"

REASON_STARTED = "started"
REASON_PAUSED = "paused"
REASON_RESUMED = "resumed"
REASON_STOPPED = "stopped"
REASON_SKIPPED = "skipped"
REASON_TICK = "tick"
REASON_PHASE_CHANGED = "phase_changed"
REASON_ALREADY_ACTIVE = "already_active"
REASON_NOT_RUNNING = "not_running"
REASON_NOT_PAUSED = "not_paused"
REASON_NOT_ACTIVE = "not_active"

COUNTDOWN_WARNING_SECONDS: frozenset[int] = frozenset({1, 2, 3})
