"""
Surveillance du repertoire source avec watchdog.

L'observer watchdog tourne dans son propre thread ; les evenements de
creation et de deplacement sont transmis a la boucle asyncio via
loop.call_soon_threadsafe dans une asyncio.Queue. Le daemon consomme
ensuite un flux de chemins de fichiers.
"""

import asyncio
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Optional

from loguru import logger
from watchdog.events import (
    FileCreatedEvent,
    FileMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer


class _QueueingHandler(FileSystemEventHandler):
    """Handler watchdog qui pousse les chemins de fichiers dans une queue asyncio."""

    def __init__(self, loop: asyncio.AbstractEventLoop, queue: "asyncio.Queue[Path]") -> None:
        super().__init__()
        self._loop = loop
        self._queue = queue

    def on_created(self, event: FileSystemEvent) -> None:
        if isinstance(event, FileCreatedEvent) and not event.is_directory:
            self._push(Path(str(event.src_path)))

    def on_moved(self, event: FileSystemEvent) -> None:
        if isinstance(event, FileMovedEvent) and not event.is_directory:
            self._push(Path(str(event.dest_path)))

    def _push(self, path: Path) -> None:
        self._loop.call_soon_threadsafe(self._queue.put_nowait, path)


class DownloadWatcher:
    """
    Source de chemins nouvellement crees sous un repertoire.

    Usage:
        watcher = DownloadWatcher(settings.source_dir)
        watcher.start()
        async for path in watcher.events():
            ...
        watcher.stop()
    """

    def __init__(self, root: Path) -> None:
        self._root = root
        self._queue: "asyncio.Queue[Path]" = asyncio.Queue()
        self._observer: Optional[Observer] = None

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        """Demarre l'observer (a appeler depuis la boucle asyncio)."""
        if self._observer is not None:
            return
        loop = asyncio.get_running_loop()
        observer = Observer()
        observer.schedule(_QueueingHandler(loop, self._queue), str(self._root), recursive=True)
        observer.start()
        self._observer = observer
        logger.info("Surveillance demarree", directory=str(self._root))

    def stop(self) -> None:
        """Arrete l'observer et attend la fin de son thread."""
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None
        logger.info("Surveillance arretee", directory=str(self._root))

    async def events(self) -> AsyncIterator[Path]:
        """Flux infini des chemins crees ou deplaces sous la racine."""
        while True:
            yield await self._queue.get()
