"""JSON-lines store for finished workouts; the default persistence collaborator."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Optional

from intervals import WorkoutSummary


class WorkoutHistoryError(Exception):
    """Raised when workout history cannot be read or written."""


class WorkoutHistoryStore:
    """Appends one JSON record per finished workout."""

    def __init__(self, path: str | Path, logger: Optional[logging.Logger] = None):
        self._path = Path(path).expanduser()
        self._logger = logger or logging.getLogger("history")
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def save(self, summary: WorkoutSummary) -> None:
        line = json.dumps(summary.to_dict(), separators=(",", ":"))
        with self._lock:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with open(self._path, "a", encoding="utf-8") as fh:
                    fh.write(line + "\n")
            except OSError as error:
                raise WorkoutHistoryError(
                    f"Failed to append workout to {self._path}: {error}"
                ) from error
        self._logger.info(
            "Workout saved: %.0fs, %d transitions",
            summary.total_seconds,
            summary.phase_transition_count,
        )

    def load(self) -> list[WorkoutSummary]:
        """Return all stored workouts; malformed lines are skipped with a warning."""
        with self._lock:
            try:
                lines = self._path.read_text(encoding="utf-8").splitlines()
            except FileNotFoundError:
                return []
            except OSError as error:
                raise WorkoutHistoryError(
                    f"Failed to read workout history {self._path}: {error}"
                ) from error

        summaries = []
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                summaries.append(WorkoutSummary.from_dict(json.loads(line)))
            except (KeyError, TypeError, ValueError) as error:
                self._logger.warning(
                    "Skipping malformed workout record %s:%d: %s",
                    self._path,
                    number,
                    error,
                )
        return summaries
