"""
Limiteur de debit a fenetre glissante.

Un seul verrou protege la sequence "purger les horodatages expires,
comparer au seuil, executer l'envoi, enregistrer l'horodatage" : deux
taches concurrentes ne peuvent pas depasser le quota ensemble.
"""

import asyncio
import time
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Optional, TypeVar

T = TypeVar("T")


class SlidingWindowRateLimiter:
    """
    Autorise au plus `max_events` evenements par fenetre de `window_seconds`.

    Attributes:
        max_events: Quota par fenetre (0 = tout refuser)
        window_seconds: Duree de la fenetre glissante
    """

    def __init__(
        self,
        max_events: int,
        window_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_events = max_events
        self.window_seconds = window_seconds
        self._clock = clock
        self._timestamps: deque[float] = deque()
        self._lock = asyncio.Lock()

    def _prune(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self.window_seconds:
            self._timestamps.popleft()

    @property
    def used(self) -> int:
        """Nombre d'evenements comptes dans la fenetre courante."""
        self._prune(self._clock())
        return len(self._timestamps)

    async def run(self, action: Callable[[], Awaitable[T]]) -> Optional[T]:
        """
        Execute `action` si le quota le permet.

        L'horodatage n'est enregistre que si l'action reussit ; une
        exception de l'action est propagee sans consommer de quota.

        Returns:
            Le resultat de l'action, ou None si le quota est atteint
        """
        async with self._lock:
            self._prune(self._clock())
            if len(self._timestamps) >= self.max_events:
                return None
            result = await action()
            self._timestamps.append(self._clock())
            return result
