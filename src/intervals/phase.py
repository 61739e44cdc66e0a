"""The two alternating phases of a run/walk workout."""

from __future__ import annotations

from enum import Enum

from .constants import PHASE_TAG_RUN, PHASE_TAG_WALK


class Phase(str, Enum):
    RUN = PHASE_TAG_RUN
    WALK = PHASE_TAG_WALK

    @property
    def next(self) -> "Phase":
        return Phase.WALK if self is Phase.RUN else Phase.RUN

