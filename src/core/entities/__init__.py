"""
Business entities representing core domain concepts.

Exports:
- MediaMetadata: Metadata returned by one provider call
- MediaItem: Catalog entry (movie, show, episode)
- ProcessedFileRecord: Persistent trace of a processed file
- ProcessingOutcome: Result of one pipeline run
- ProcessingStatus: Terminal status of a run
- StatusEntry: Entry of the in-memory status log
- PendingFile, PendingStatus: Files waiting for a manual identity
"""

from src.core.entities.media import MediaItem, MediaMetadata
from src.core.entities.processing import (
    COMPLETED_STATUSES,
    PendingFile,
    PendingStatus,
    ProcessedFileRecord,
    ProcessingOutcome,
    ProcessingStatus,
    StatusEntry,
)

__all__ = [
    "COMPLETED_STATUSES",
    "MediaItem",
    "MediaMetadata",
    "PendingFile",
    "PendingStatus",
    "ProcessedFileRecord",
    "ProcessingOutcome",
    "ProcessingStatus",
    "StatusEntry",
]
