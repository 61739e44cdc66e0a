"""Cross-process snapshot publishing and companion timeline projection."""

from .companion import CompanionTimelineReader, Timeline, TimelineEntry
from .publisher import SharedStatePublisher
from .snapshot import SharedSnapshot, SnapshotDecodeError
from .store import DEFAULT_SLOT, SnapshotStore, SnapshotStoreError

__all__ = [
    "DEFAULT_SLOT",
    "CompanionTimelineReader",
    "SharedSnapshot",
    "SharedStatePublisher",
    "SnapshotDecodeError",
    "SnapshotStore",
    "SnapshotStoreError",
    "Timeline",
    "TimelineEntry",
]
