"""
Journal d'etat en memoire des traitements.

Journal borne (les entrees les plus anciennes sont evincees) partage par
les traitements concurrents et protege par un verrou. Alimente les resumes
journalises par le daemon apres chaque scan complet.
"""

import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Optional

from src.core.entities import ProcessingStatus, StatusEntry
from src.core.value_objects import MediaKind


@dataclass(frozen=True)
class StatusSummary:
    """Compteurs agreges sur les entrees conservees."""

    total: int = 0
    success: int = 0
    error: int = 0
    skipped: int = 0
    movies: int = 0
    tv: int = 0
    last_processed: Optional[StatusEntry] = None
    recent: tuple[StatusEntry, ...] = field(default_factory=tuple)


class ProcessingStatusTracker:
    """Journal d'etat borne et thread-safe."""

    def __init__(self, max_items: int = 1000) -> None:
        self._entries: deque[StatusEntry] = deque(maxlen=max_items)
        self._lock = threading.Lock()

    def add(self, entry: StatusEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def recent(self, count: int = 10) -> list[StatusEntry]:
        """Entrees les plus recentes, la plus recente en premier."""
        with self._lock:
            return list(reversed(self._entries))[:count]

    def errors(self, count: int = 10) -> list[StatusEntry]:
        with self._lock:
            return [e for e in reversed(self._entries) if e.status == ProcessingStatus.ERROR][:count]

    def summary(self) -> StatusSummary:
        with self._lock:
            entries = list(self._entries)

        return StatusSummary(
            total=len(entries),
            success=sum(1 for e in entries if e.status == ProcessingStatus.SUCCESS),
            error=sum(1 for e in entries if e.status == ProcessingStatus.ERROR),
            skipped=sum(
                1
                for e in entries
                if e.status
                in (ProcessingStatus.SKIPPED_DUPLICATE, ProcessingStatus.SKIPPED_ALREADY_PROCESSED)
            ),
            movies=sum(1 for e in entries if e.kind == MediaKind.MOVIE),
            tv=sum(1 for e in entries if e.kind == MediaKind.EPISODE),
            last_processed=entries[-1] if entries else None,
            recent=tuple(reversed(entries[-10:])),
        )
