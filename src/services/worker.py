"""
Service de fond : surveillance, taches planifiees et traitement continu.

Au demarrage, le worker catalogue une premiere fois le repertoire source,
demarre la surveillance watchdog et planifie les scans recurrents. Les
chemins remontes par la surveillance sont places dans une file consommee
par un nombre borne de taches (max_concurrent_files).
"""

import asyncio
from pathlib import Path
from typing import Optional

from loguru import logger

from src.adapters.api.cache import APICache
from src.adapters.watcher import DownloadWatcher
from src.config import Settings
from src.services.metadata_resolver import MetadataResolver
from src.services.pipeline import OrganizerPipeline
from src.services.scheduler import JobScheduler
from src.services.status_tracker import ProcessingStatusTracker

FULL_SCAN_JOB = "full-scan"
DUPLICATE_SWEEP_JOB = "duplicate-sweep"


class OrganizerWorker:
    """
    Boucle principale du mode daemon.

    Utilisation:
        worker = container.worker()
        await worker.run()  # jusqu'a annulation
    """

    def __init__(
        self,
        settings: Settings,
        pipeline: OrganizerPipeline,
        scheduler: JobScheduler,
        watcher: DownloadWatcher,
        resolver: MetadataResolver,
        api_cache: Optional[APICache] = None,
        status_tracker: Optional[ProcessingStatusTracker] = None,
        settle_interval: float = 2.0,
        settle_attempts: int = 30,
    ) -> None:
        self._settings = settings
        self._pipeline = pipeline
        self._scheduler = scheduler
        self._watcher = watcher
        self._resolver = resolver
        self._api_cache = api_cache
        self._status = status_tracker
        self._settle_interval = settle_interval
        self._settle_attempts = settle_attempts
        self._queue: "asyncio.Queue[Path]" = asyncio.Queue()

    def ensure_directories(self) -> None:
        """Cree les repertoires de travail manquants."""
        for directory in (
            self._settings.source_dir,
            self._settings.incomplete_dir,
            self._settings.movies_dir,
            self._settings.tv_dir,
        ):
            if not directory.exists():
                logger.warning("Repertoire absent, creation", directory=str(directory))
                directory.mkdir(parents=True, exist_ok=True)

    def schedule_jobs(self) -> None:
        """Enregistre le scan complet et le balayage des doublons."""
        if self._settings.scheduler_enabled:
            self._scheduler.schedule(FULL_SCAN_JOB, self.full_scan, self._settings.scan_cron)
        self._scheduler.schedule(
            DUPLICATE_SWEEP_JOB, self.duplicate_sweep, self._settings.duplicate_sweep_cron
        )

    async def full_scan(self) -> None:
        await self._pipeline.process_directory(self._settings.source_dir)
        if self._status is not None:
            summary = self._status.summary()
            logger.info(
                "Etat du traitement",
                total=summary.total,
                success=summary.success,
                error=summary.error,
                skipped=summary.skipped,
            )

    async def duplicate_sweep(self) -> None:
        for root in (self._settings.movies_dir, self._settings.tv_dir):
            groups = await self._pipeline.scan_for_duplicates(root)
            logger.info("Balayage des doublons termine", root=str(root), groups=len(groups))

    async def run(self) -> None:
        """Execute le daemon jusqu'a annulation."""
        logger.info("Demarrage du worker", source=str(self._settings.source_dir))
        self.ensure_directories()
        await self.full_scan()

        self._watcher.start()
        self.schedule_jobs()
        workers = self._start_workers()
        try:
            async for path in self._watcher.events():
                await self._queue.put(path)
        except asyncio.CancelledError:
            logger.info("Arret du worker demande")
            raise
        finally:
            self._watcher.stop()
            await self._scheduler.shutdown()
            await self._stop_workers(workers)
            await self._pipeline.wait_for_notifications()
            await self._resolver.close()
            if self._api_cache is not None:
                self._api_cache.close()
            logger.info("Worker arrete")

    def _start_workers(self) -> list[asyncio.Task[None]]:
        concurrency = max(1, self._settings.max_concurrent_files)
        return [
            asyncio.create_task(self._consume(i), name=f"organizer-{i}")
            for i in range(concurrency)
        ]

    async def _stop_workers(self, workers: list[asyncio.Task[None]]) -> None:
        for worker in workers:
            worker.cancel()
        await asyncio.gather(*workers, return_exceptions=True)

    async def _consume(self, worker_id: int) -> None:
        while True:
            path = await self._queue.get()
            try:
                if await self.wait_until_stable(path):
                    await self._pipeline.process_file(path)
            except Exception:
                logger.exception("Echec du traitement", worker=worker_id, file=str(path))
            finally:
                self._queue.task_done()

    async def wait_until_stable(self, path: Path) -> bool:
        """
        Attend que la taille du fichier ne change plus entre deux mesures.

        Returns:
            False si le fichier a disparu ou grossit encore apres le dernier essai
        """
        previous = -1
        for _ in range(self._settle_attempts):
            try:
                size = path.stat().st_size
            except OSError:
                logger.debug("Fichier disparu avant traitement", file=str(path))
                return False
            if size == previous:
                return True
            previous = size
            await asyncio.sleep(self._settle_interval)
        logger.warning("Fichier encore en cours d'ecriture, ignore", file=str(path))
        return False
