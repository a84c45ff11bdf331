"""
Tests unitaires pour JobScheduler.

La plupart des tests injectent une horloge qui avance de deux minutes a
chaque lecture : chaque occurrence est deja passee au moment du calcul du
delai, la boucle s'execute sans attendre.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from src.services.scheduler import JobScheduler

FAR_FUTURE = "0 0 1 1 *"


class FastClock:
    """Horloge qui avance d'un pas fixe a chaque appel."""

    def __init__(self, step: timedelta = timedelta(minutes=2)) -> None:
        self._now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self._step = step

    def __call__(self) -> datetime:
        self._now += self._step
        return self._now


class TestScheduleValidation:
    """Tests de validation des parametres."""

    @pytest.mark.parametrize("expression", ["", "not a cron", "61 * * * *", "* * *"])
    def test_invalid_expression(self, expression: str) -> None:
        with pytest.raises(ValueError):
            JobScheduler().schedule("job", lambda: None, expression)

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name(self, name: str) -> None:
        with pytest.raises(ValueError):
            JobScheduler().schedule(name, lambda: None, "* * * * *")


class TestJobExecution:
    """Tests de la boucle d'execution."""

    @pytest.mark.asyncio
    async def test_async_action_runs_repeatedly(self) -> None:
        scheduler = JobScheduler(clock=FastClock())
        calls: list[int] = []
        done = asyncio.Event()

        async def action() -> None:
            calls.append(1)
            await asyncio.sleep(0)
            if len(calls) >= 3:
                done.set()

        scheduler.schedule("scan", action, "* * * * *")
        await asyncio.wait_for(done.wait(), timeout=2)

        info = scheduler.list_jobs()[0]
        assert info.name == "scan"
        assert info.last_run is not None
        assert info.active is True
        await scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_failure_does_not_stop_loop(self) -> None:
        scheduler = JobScheduler(clock=FastClock())
        calls: list[int] = []
        done = asyncio.Event()

        async def action() -> None:
            calls.append(1)
            await asyncio.sleep(0)
            if len(calls) == 1:
                raise RuntimeError("boom")
            done.set()

        scheduler.schedule("flaky", action, "* * * * *")
        await asyncio.wait_for(done.wait(), timeout=2)

        assert len(calls) >= 2
        assert scheduler.list_jobs()[0].active is True
        await scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_sync_action_with_seconds_field(self) -> None:
        scheduler = JobScheduler()
        done = asyncio.Event()

        scheduler.schedule("tick", done.set, "* * * * * *")
        await asyncio.wait_for(done.wait(), timeout=3)

        await scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_next_run_is_timezone_aware(self) -> None:
        scheduler = JobScheduler()
        scheduler.schedule("yearly", lambda: None, FAR_FUTURE)
        await asyncio.sleep(0)

        next_run = scheduler.list_jobs()[0].next_run
        assert next_run is not None
        assert next_run.tzinfo is not None
        assert next_run > datetime.now().astimezone()
        await scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_no_next_occurrence_leaves_job_dormant(self) -> None:
        scheduler = JobScheduler()
        scheduler._next_occurrence = lambda job: None
        calls: list[int] = []

        scheduler.schedule("once", lambda: calls.append(1), FAR_FUTURE)
        for _ in range(3):
            await asyncio.sleep(0)

        info = scheduler.list_jobs()[0]
        assert info.active is False
        assert info.next_run is None
        assert calls == []


class TestJobLifecycle:
    """Tests du remplacement, de l'annulation et de l'arret."""

    @pytest.mark.asyncio
    async def test_rescheduling_replaces_previous_loop(self) -> None:
        scheduler = JobScheduler()
        scheduler.schedule("scan", lambda: None, FAR_FUTURE)
        first_task = scheduler._jobs["scan"].task

        scheduler.schedule("scan", lambda: None, "0 12 * * *")
        await asyncio.sleep(0)

        assert first_task.cancelled() or first_task.done()
        jobs = scheduler.list_jobs()
        assert len(jobs) == 1
        assert jobs[0].cron_expression == "0 12 * * *"
        await scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_cancel_mid_sleep_prevents_invocation(self) -> None:
        scheduler = JobScheduler()
        calls: list[int] = []
        scheduler.schedule("scan", lambda: calls.append(1), FAR_FUTURE)
        task = scheduler._jobs["scan"].task
        await asyncio.sleep(0)

        assert scheduler.cancel("scan") is True
        await asyncio.gather(task, return_exceptions=True)

        assert task.cancelled()
        assert calls == []
        assert scheduler.is_scheduled("scan") is False
        assert scheduler.cancel("scan") is False

    @pytest.mark.asyncio
    async def test_shutdown_stops_every_job(self) -> None:
        scheduler = JobScheduler()
        scheduler.schedule("a", lambda: None, FAR_FUTURE)
        scheduler.schedule("b", lambda: None, FAR_FUTURE)
        tasks = [job.task for job in scheduler._jobs.values()]

        await scheduler.shutdown()

        assert scheduler.list_jobs() == []
        assert all(task.done() for task in tasks)
