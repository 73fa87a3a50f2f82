"""Internal constants shared across the library."""

from enum import StrEnum

# Only full snapshots are decoded; incremental update types are rejected.
UPDATE_TYPE_SNAPSHOT = "snapshot"

# Protocol-version limitation: one state update per timeslice.
MAX_STATE_UPDATES = 1


class LogStreamMessage(StrEnum):
    """Kind of result produced for one decoded log-stream message."""

    TIMESLICE = "TIMESLICE"
    INCOMPLETE = "INCOMPLETE"
