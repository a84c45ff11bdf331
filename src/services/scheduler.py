"""
Planificateur de taches recurrentes (expressions cron).

Chaque tache nommee tourne dans sa propre tache asyncio :
    1. calcule la prochaine occurrence apres "maintenant" (croniter)
    2. dort jusqu'a cet instant (annulable)
    3. execute l'action ; une exception est journalisee et n'arrete pas la boucle
    4. enregistre last_run et recommence

Une expression sans occurrence future termine la boucle : la tache reste
listee mais dormante. Replanifier un nom existant annule l'ancienne boucle
avant d'en demarrer une nouvelle.

Les expressions a 5 champs (minute) et a 6 champs (secondes en dernier)
sont acceptees. Les heures sont locales, avec fuseau horaire.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from croniter import CroniterBadDateError, croniter
from loguru import logger

JobAction = Callable[[], Union[Awaitable[object], object]]


def local_now() -> datetime:
    """Heure locale avec fuseau horaire."""
    return datetime.now().astimezone()


@dataclass
class ScheduledJob:
    """
    Etat interne d'une tache planifiee (propriete exclusive du planificateur).
    """

    name: str
    cron_expression: str
    action: JobAction
    next_run: Optional[datetime] = None
    last_run: Optional[datetime] = None
    running: bool = False
    task: Optional["asyncio.Task[None]"] = None


@dataclass(frozen=True)
class JobInfo:
    """Instantane d'une tache planifiee."""

    name: str
    cron_expression: str
    next_run: Optional[datetime]
    last_run: Optional[datetime]
    running: bool
    active: bool


class JobScheduler:
    """
    Planificateur de taches nommees.

    Utilisation:
        scheduler = JobScheduler()
        scheduler.schedule("full-scan", pipeline_scan, "0 0 * * *")
        scheduler.list_jobs()
        await scheduler.shutdown()
    """

    def __init__(self, clock: Callable[[], datetime] = local_now) -> None:
        self._clock = clock
        self._jobs: dict[str, ScheduledJob] = {}

    def schedule(self, name: str, action: JobAction, cron_expression: str) -> None:
        """
        Planifie (ou remplace) une tache.

        Doit etre appele depuis une boucle asyncio en cours d'execution.

        Raises:
            ValueError: Si le nom est vide ou l'expression cron invalide
        """
        if not name or not name.strip():
            raise ValueError("Le nom de la tache est obligatoire")
        if not cron_expression or not croniter.is_valid(cron_expression):
            raise ValueError(f"Expression cron invalide: {cron_expression!r}")

        previous = self._jobs.pop(name, None)
        if previous is not None and previous.task is not None:
            previous.task.cancel()
            logger.info("Tache remplacee", job=name)

        job = ScheduledJob(name=name, cron_expression=cron_expression, action=action)
        job.task = asyncio.create_task(self._run(job), name=f"job:{name}")
        self._jobs[name] = job
        logger.info("Tache planifiee", job=name, cron=cron_expression)

    def cancel(self, name: str) -> bool:
        """Annule et retire une tache. Retourne False si elle n'existe pas."""
        job = self._jobs.pop(name, None)
        if job is None:
            return False
        if job.task is not None:
            job.task.cancel()
        logger.info("Tache annulee", job=name)
        return True

    def is_scheduled(self, name: str) -> bool:
        return name in self._jobs

    def list_jobs(self) -> list[JobInfo]:
        return [
            JobInfo(
                name=job.name,
                cron_expression=job.cron_expression,
                next_run=job.next_run,
                last_run=job.last_run,
                running=job.running,
                active=job.task is not None and not job.task.done(),
            )
            for job in self._jobs.values()
        ]

    async def shutdown(self) -> None:
        """Annule toutes les taches et attend la fin de leurs boucles."""
        jobs = list(self._jobs.values())
        self._jobs.clear()
        tasks = [job.task for job in jobs if job.task is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _next_occurrence(self, job: ScheduledJob) -> Optional[datetime]:
        now = self._clock()
        start = max(now, job.next_run) if job.next_run else now
        try:
            return croniter(job.cron_expression, start).get_next(datetime)
        except CroniterBadDateError:
            return None

    async def _run(self, job: ScheduledJob) -> None:
        try:
            while True:
                next_run = self._next_occurrence(job)
                if next_run is None:
                    job.next_run = None
                    logger.warning("Plus aucune occurrence, tache en sommeil", job=job.name)
                    return
                job.next_run = next_run

                delay = (next_run - self._clock()).total_seconds()
                if delay > 0:
                    await asyncio.sleep(delay)

                job.running = True
                try:
                    result = job.action()
                    if inspect.isawaitable(result):
                        await result
                except Exception:
                    logger.exception("Echec de la tache planifiee", job=job.name)
                finally:
                    job.running = False
                    job.last_run = self._clock()
        except asyncio.CancelledError:
            logger.info("Boucle de tache arretee", job=job.name)
            raise
