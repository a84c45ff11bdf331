"""
Processing entities.

Records and outcomes produced by the organizer pipeline for each
source file, plus the entries of the in-memory status log.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from src.core.value_objects import ContentFingerprint, MediaKind


class ProcessingStatus(Enum):
    """Terminal status of one pipeline run for one file."""

    SUCCESS = "success"
    ERROR = "error"
    SKIPPED_DUPLICATE = "skipped_duplicate"
    SKIPPED_ALREADY_PROCESSED = "skipped_already_processed"


# Statuts consideres comme "traite" pour l'idempotence
COMPLETED_STATUSES = frozenset(
    {ProcessingStatus.SUCCESS, ProcessingStatus.SKIPPED_DUPLICATE}
)


@dataclass
class ProcessedFileRecord:
    """
    Persistent trace of a processed source file.

    Error records carry an empty destination path and the error message.

    Attributes:
        source_path: Original file path
        destination_path: Organized file path ("" on error)
        status: Terminal status
        file_hash: Content hash (None if hashing failed)
        file_size: Size in bytes
        error_message: Failure description
        media_item_id: Reference to the MediaItem
        processed_at: Timestamp of the run
        id: Internal database ID
    """

    source_path: str
    destination_path: str
    status: ProcessingStatus
    file_hash: Optional[str] = None
    file_size: int = 0
    error_message: Optional[str] = None
    media_item_id: Optional[int] = None
    processed_at: datetime = field(default_factory=datetime.now)
    id: Optional[int] = None


@dataclass(frozen=True)
class ProcessingOutcome:
    """
    Result of one pipeline run for one file.

    Never mutated once produced; a reprocess creates a new outcome.
    """

    source_path: Path
    status: ProcessingStatus
    destination_path: Optional[Path] = None
    error_message: Optional[str] = None
    media_ref: Optional[int] = None
    fingerprint: Optional[ContentFingerprint] = None

    @property
    def succeeded(self) -> bool:
        return self.status == ProcessingStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status == ProcessingStatus.ERROR


@dataclass(frozen=True)
class StatusEntry:
    """Entry of the in-memory status log."""

    file_path: str
    status: ProcessingStatus
    kind: MediaKind
    title: str = ""
    year: Optional[int] = None
    destination_path: Optional[str] = None
    error_message: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)


class PendingStatus(Enum):
    """Review state of a file waiting for a manual identity."""

    PENDING = "pending"
    MATCHED = "matched"


@dataclass
class PendingFile:
    """
    Video file the automatic path could not place.

    Filled for unrecognized names and for names no provider knows; an
    approval (or a later automatic success) marks it MATCHED.

    Attributes:
        file_path: Source file path
        file_size: Size in bytes when detected (0 if unreadable)
        reason: Why the file needs review
        suggested_title: Title read from the file name, if any
        suggested_year: Year read from the file name, if any
        status: PENDING or MATCHED
        detected_at: Last time the file was queued
        id: Internal database ID
    """

    file_path: str
    file_size: int = 0
    reason: str = ""
    suggested_title: Optional[str] = None
    suggested_year: Optional[int] = None
    status: PendingStatus = PendingStatus.PENDING
    detected_at: datetime = field(default_factory=datetime.now)
    id: Optional[int] = None
