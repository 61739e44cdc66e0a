"""Workout summary handed to the persistence collaborator when a session stops."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

EARTH_RADIUS_METERS = 6_371_000.0
RUN_CALORIES_PER_MINUTE = 10.0
WALK_CALORIES_PER_MINUTE = 4.0


@dataclass(frozen=True)
class RoutePoint:
    """A single GPS fix recorded by the location collaborator."""
    latitude: float
    longitude: float
    timestamp: float

    def distance_to(self, other: "RoutePoint") -> float:
        """Great-circle distance in meters (haversine)."""
        lat1 = math.radians(self.latitude)
        lat2 = math.radians(other.latitude)
        d_lat = lat2 - lat1
        d_lon = math.radians(other.longitude - self.longitude)
        a = (
            math.sin(d_lat / 2) ** 2
            + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
        )
        return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(min(1.0, a)))


@dataclass(frozen=True)
class WorkoutSummary:
    start_time: float
    end_time: float
    total_run_seconds: float
    total_walk_seconds: float
    phase_transition_count: int
    run_intervals: int
    walk_intervals: int
    run_interval_setting: int
    walk_interval_setting: int
    route_points: Optional[tuple[RoutePoint, ...]] = None
    average_heart_rate: Optional[float] = None

    @property
    def total_seconds(self) -> float:
        return self.total_run_seconds + self.total_walk_seconds

    @property
    def total_intervals(self) -> int:
        return self.run_intervals + self.walk_intervals

    @property
    def total_distance_meters(self) -> float:
        points = self.route_points or ()
        return sum(a.distance_to(b) for a, b in zip(points, points[1:]))

    @property
    def estimated_calories(self) -> float:
        return (
            self.total_run_seconds / 60.0 * RUN_CALORIES_PER_MINUTE
            + self.total_walk_seconds / 60.0 * WALK_CALORIES_PER_MINUTE
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "startTime": _isoformat(self.start_time),
            "endTime": _isoformat(self.end_time),
            "totalRunSeconds": round(self.total_run_seconds, 3),
            "totalWalkSeconds": round(self.total_walk_seconds, 3),
            "phaseTransitionCount": self.phase_transition_count,
            "runIntervals": self.run_intervals,
            "walkIntervals": self.walk_intervals,
            "runIntervalSetting": self.run_interval_setting,
            "walkIntervalSetting": self.walk_interval_setting,
        }
        if self.route_points is not None:
            payload["routePoints"] = [
                [point.latitude, point.longitude, point.timestamp]
                for point in self.route_points
            ]
        if self.average_heart_rate is not None:
            payload["averageHeartRate"] = self.average_heart_rate
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "WorkoutSummary":
        raw_points = payload.get("routePoints")
        route_points = None
        if raw_points is not None:
            route_points = tuple(
                RoutePoint(float(lat), float(lon), float(ts)) for lat, lon, ts in raw_points
            )
        heart_rate = payload.get("averageHeartRate")
        return cls(
            start_time=_parse_timestamp(payload["startTime"]),
            end_time=_parse_timestamp(payload["endTime"]),
            total_run_seconds=float(payload["totalRunSeconds"]),
            total_walk_seconds=float(payload["totalWalkSeconds"]),
            phase_transition_count=int(payload["phaseTransitionCount"]),
            run_intervals=int(payload.get("runIntervals", 0)),
            walk_intervals=int(payload.get("walkIntervals", 0)),
            run_interval_setting=int(payload["runIntervalSetting"]),
            walk_interval_setting=int(payload["walkIntervalSetting"]),
            route_points=route_points,
            average_heart_rate=float(heart_rate) if heart_rate is not None else None,
        )


def _isoformat(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


def _parse_timestamp(raw: Any) -> float:
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw)
    parsed = datetime.fromisoformat(str(raw))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()
