from .clock import Clock, ManualClock, SystemClock
from .configuration import (
    BUILTIN_PRESETS,
    PRESET_DURATIONS,
    IntervalConfiguration,
    IntervalConfigurationError,
    WorkoutPreset,
    builtin_preset,
    sorted_presets,
)
from .machine import PhaseStateError, PhaseStateMachine, PhaseTransition
from .phase import Phase
from .session import (
    PhaseChangeEvent,
    SessionController,
    SessionSnapshot,
    SessionUpdate,
    WorkoutSink,
)
from .summary import RoutePoint, WorkoutSummary
from .ticker import SessionTicker

__all__ = [
    "BUILTIN_PRESETS",
    "PRESET_DURATIONS",
    "Clock",
    "IntervalConfiguration",
    "IntervalConfigurationError",
    "ManualClock",
    "Phase",
    "PhaseChangeEvent",
    "PhaseStateError",
    "PhaseStateMachine",
    "PhaseTransition",
    "RoutePoint",
    "SessionController",
    "SessionSnapshot",
    "SessionTicker",
    "SessionUpdate",
    "SystemClock",
    "WorkoutPreset",
    "WorkoutSink",
    "WorkoutSummary",
    "builtin_preset",
    "sorted_presets",
]
