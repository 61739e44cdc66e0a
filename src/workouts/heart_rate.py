"""Five-zone heart rate classification by percentage of maximum heart rate."""

from __future__ import annotations

from enum import IntEnum
from typing import Optional

from intervals import WorkoutSummary


class HeartRateZone(IntEnum):
    ZONE_1 = 1
    ZONE_2 = 2
    ZONE_3 = 3
    ZONE_4 = 4
    ZONE_5 = 5

    @property
    def label(self) -> str:
        return f"Zone {self.value}"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def lower_bound(self) -> float:
        return _BOUNDS[self][0]

    @property
    def upper_bound(self) -> float:
        return _BOUNDS[self][1]

    @property
    def percentage_range(self) -> str:
        return f"{round(self.lower_bound * 100)}-{round(self.upper_bound * 100)}%"

    def heart_rate_range(self, max_heart_rate: float) -> tuple[int, int]:
        """Lower and upper BPM bounds of this zone, truncated to whole beats."""
        return int(max_heart_rate * self.lower_bound), int(max_heart_rate * self.upper_bound)


_DESCRIPTIONS = {
    HeartRateZone.ZONE_1: "Recovery",
    HeartRateZone.ZONE_2: "Fat Burn",
    HeartRateZone.ZONE_3: "Aerobic",
    HeartRateZone.ZONE_4: "Anaerobic",
    HeartRateZone.ZONE_5: "Max Effort",
}

_BOUNDS = {
    HeartRateZone.ZONE_1: (0.50, 0.60),
    HeartRateZone.ZONE_2: (0.60, 0.70),
    HeartRateZone.ZONE_3: (0.70, 0.80),
    HeartRateZone.ZONE_4: (0.80, 0.90),
    HeartRateZone.ZONE_5: (0.90, 1.00),
}


def max_heart_rate_for_age(age: int) -> float:
    """Estimated maximum heart rate (220 - age)."""
    return float(220 - age)


def zone_for(heart_rate: float, max_heart_rate: float) -> Optional[HeartRateZone]:
    """Zone for ``heart_rate``; ``None`` below 50% or for non-positive inputs.

    Each zone includes its lower bound. Anything at or above 90% is zone 5,
    including rates above the maximum.
    """
    if heart_rate <= 0 or max_heart_rate <= 0:
        return None

    percentage = heart_rate / max_heart_rate
    for zone in reversed(HeartRateZone):
        if percentage >= zone.lower_bound:
            return zone
    return None


def summary_zone(summary: WorkoutSummary, max_heart_rate: float) -> Optional[HeartRateZone]:
    """Zone of a finished workout's average heart rate, when one was recorded."""
    if summary.average_heart_rate is None:
        return None
    return zone_for(summary.average_heart_rate, max_heart_rate)
