"""Single-slot snapshot store shared between the session and companion processes."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from .snapshot import SharedSnapshot

DEFAULT_SLOT = "currentWorkoutState"


class SnapshotStoreError(Exception):
    """Raised when the shared store cannot be read or written."""


class SnapshotStore:
    """One JSON record per named slot, replaced whole on every write.

    Writes go to a temporary file in the same directory followed by
    ``os.replace``, so a concurrent reader sees either the old or the new
    record and never a partial one.
    """

    def __init__(
        self,
        directory: str | Path,
        *,
        slot: str = DEFAULT_SLOT,
        logger: Optional[logging.Logger] = None,
    ):
        if not slot or any(sep in slot for sep in ("/", "\\")) or slot in (".", ".."):
            raise ValueError(f"Invalid snapshot slot name: {slot!r}")
        self._directory = Path(directory).expanduser()
        self._slot = slot
        self._logger = logger or logging.getLogger("shared_state")

    @property
    def path(self) -> Path:
        return self._directory / f"{self._slot}.json"

    def write(self, snapshot: SharedSnapshot) -> None:
        data = snapshot.to_json().encode("utf-8")
        temp_name: Optional[str] = None
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{self._slot}.",
                suffix=".tmp",
                dir=self._directory,
            )
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(temp_name, self.path)
            temp_name = None
            self._logger.debug("Snapshot written to %s", self.path)
        except OSError as error:
            raise SnapshotStoreError(f"Failed to write snapshot to {self.path}: {error}") from error
        finally:
            if temp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(temp_name)

    def read_raw(self) -> Optional[bytes]:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as error:
            raise SnapshotStoreError(f"Failed to read snapshot from {self.path}: {error}") from error

    def read(self) -> Optional[SharedSnapshot]:
        """Return the stored snapshot, or ``None`` when the slot is empty.

        Raises ``SnapshotDecodeError`` for a malformed record.
        """
        raw = self.read_raw()
        if raw is None:
            return None
        return SharedSnapshot.from_json(raw)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as error:
            raise SnapshotStoreError(f"Failed to clear snapshot {self.path}: {error}") from error
