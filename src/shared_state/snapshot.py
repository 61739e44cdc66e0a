"""Compact workout snapshot shared with out-of-process companion surfaces."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Mapping

from intervals import SessionSnapshot
from intervals.constants import (
    DEFAULT_RUN_SECONDS,
    DEFAULT_WALK_SECONDS,
    PHASE_TAG_RUN,
    PHASE_TAG_WALK,
)


class SnapshotDecodeError(ValueError):
    """Raised when a stored snapshot record cannot be decoded."""


@dataclass(frozen=True)
class SharedSnapshot:
    is_active: bool
    current_phase: str
    time_remaining: int
    interval_duration: int
    last_update: float
    run_interval_setting: int
    walk_interval_setting: int

    @classmethod
    def idle(
        cls,
        at: float,
        *,
        run_interval_setting: int = DEFAULT_RUN_SECONDS,
        walk_interval_setting: int = DEFAULT_WALK_SECONDS,
    ) -> "SharedSnapshot":
        return cls(
            is_active=False,
            current_phase=PHASE_TAG_RUN,
            time_remaining=0,
            interval_duration=0,
            last_update=at,
            run_interval_setting=run_interval_setting,
            walk_interval_setting=walk_interval_setting,
        )

    @classmethod
    def from_session(cls, snapshot: SessionSnapshot, at: float) -> "SharedSnapshot":
        """Project a controller snapshot; only a running session counts as active."""
        return cls(
            is_active=snapshot.is_running,
            current_phase=snapshot.phase.value,
            time_remaining=max(0, int(snapshot.time_remaining)),
            interval_duration=int(snapshot.interval_duration),
            last_update=at,
            run_interval_setting=int(snapshot.run_seconds),
            walk_interval_setting=int(snapshot.walk_seconds),
        )

    @property
    def progress(self) -> float:
        if self.interval_duration <= 0:
            return 0.0
        ratio = (self.interval_duration - self.time_remaining) / self.interval_duration
        return max(0.0, min(1.0, ratio))

    @property
    def formatted_time_remaining(self) -> str:
        minutes, seconds = divmod(max(0, self.time_remaining), 60)
        return f"{minutes}:{seconds:02d}"

    @property
    def is_run_phase(self) -> bool:
        return self.current_phase == PHASE_TAG_RUN

    def projected(self, at: float, time_remaining: int) -> "SharedSnapshot":
        return replace(self, time_remaining=max(0, time_remaining), last_update=at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "isActive": self.is_active,
            "currentPhase": self.current_phase,
            "timeRemaining": self.time_remaining,
            "intervalDuration": self.interval_duration,
            "lastUpdate": datetime.fromtimestamp(self.last_update, tz=timezone.utc).isoformat(),
            "runIntervalSetting": self.run_interval_setting,
            "walkIntervalSetting": self.walk_interval_setting,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SharedSnapshot":
        if not isinstance(payload, Mapping):
            raise SnapshotDecodeError("Snapshot record must be a JSON object.")
        try:
            phase = payload["currentPhase"]
            if phase not in (PHASE_TAG_RUN, PHASE_TAG_WALK):
                raise SnapshotDecodeError(f"Unknown phase tag: {phase!r}")
            return cls(
                is_active=_as_bool(payload["isActive"]),
                current_phase=phase,
                time_remaining=_as_int(payload["timeRemaining"]),
                interval_duration=_as_int(payload["intervalDuration"]),
                last_update=_parse_timestamp(payload["lastUpdate"]),
                run_interval_setting=_as_int(payload["runIntervalSetting"]),
                walk_interval_setting=_as_int(payload["walkIntervalSetting"]),
            )
        except KeyError as error:
            raise SnapshotDecodeError(f"Snapshot record is missing field {error}") from error

    @classmethod
    def from_json(cls, raw: str | bytes) -> "SharedSnapshot":
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as error:
            raise SnapshotDecodeError(f"Snapshot record is not valid JSON: {error}") from error
        return cls.from_dict(payload)


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise SnapshotDecodeError(f"Expected a boolean, got: {value!r}")


def _as_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotDecodeError(f"Expected an integer, got: {value!r}")
    return value


def _parse_timestamp(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, str):
        raise SnapshotDecodeError(f"Expected an ISO-8601 timestamp, got: {value!r}")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as error:
        raise SnapshotDecodeError(f"Invalid timestamp: {value!r}") from error
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()
