"""
Tests unitaires pour OrganizerWorker.

Pipeline, planificateur et surveillance sont simules ; seule l'attente de
stabilisation lit de vrais fichiers.
"""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.services.pipeline import BatchSummary
from src.services.status_tracker import ProcessingStatusTracker
from src.services.worker import DUPLICATE_SWEEP_JOB, FULL_SCAN_JOB, OrganizerWorker


class FakeWatcher:
    """Surveillance qui emet une liste de chemins puis attend indefiniment."""

    def __init__(self, paths: list[Path]) -> None:
        self._paths = paths
        self.started = False
        self.stopped = False

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    async def events(self):
        for path in self._paths:
            yield path
        await asyncio.Event().wait()


@pytest.fixture
def pipeline() -> MagicMock:
    pipeline = MagicMock()
    pipeline.process_directory = AsyncMock(return_value=BatchSummary())
    pipeline.process_file = AsyncMock(return_value=None)
    pipeline.scan_for_duplicates = AsyncMock(return_value=[])
    pipeline.wait_for_notifications = AsyncMock()
    return pipeline


@pytest.fixture
def scheduler() -> MagicMock:
    scheduler = MagicMock()
    scheduler.shutdown = AsyncMock()
    return scheduler


@pytest.fixture
def resolver() -> MagicMock:
    resolver = MagicMock()
    resolver.close = AsyncMock()
    return resolver


def _worker(settings, pipeline, scheduler, resolver, watcher=None, **kwargs) -> OrganizerWorker:
    return OrganizerWorker(
        settings=settings,
        pipeline=pipeline,
        scheduler=scheduler,
        watcher=watcher or FakeWatcher([]),
        resolver=resolver,
        settle_interval=0,
        **kwargs,
    )


class TestSetup:
    """Tests des repertoires et des taches planifiees."""

    def test_ensure_directories_creates_missing(
        self, test_settings, pipeline, scheduler, resolver, tmp_path: Path
    ) -> None:
        settings = test_settings.model_copy(update={"movies_dir": tmp_path / "new" / "Movies"})

        _worker(settings, pipeline, scheduler, resolver).ensure_directories()

        assert (tmp_path / "new" / "Movies").is_dir()

    def test_schedule_jobs_without_full_scan(
        self, test_settings, pipeline, scheduler, resolver
    ) -> None:
        worker = _worker(test_settings, pipeline, scheduler, resolver)

        worker.schedule_jobs()

        names = [c.args[0] for c in scheduler.schedule.call_args_list]
        assert names == [DUPLICATE_SWEEP_JOB]
        assert scheduler.schedule.call_args.args[2] == test_settings.duplicate_sweep_cron

    def test_schedule_jobs_with_full_scan(
        self, test_settings, pipeline, scheduler, resolver
    ) -> None:
        settings = test_settings.model_copy(
            update={"scheduler_enabled": True, "scan_cron": "30 3 * * *"}
        )
        worker = _worker(settings, pipeline, scheduler, resolver)

        worker.schedule_jobs()

        calls = {c.args[0]: c.args[2] for c in scheduler.schedule.call_args_list}
        assert calls == {
            FULL_SCAN_JOB: "30 3 * * *",
            DUPLICATE_SWEEP_JOB: settings.duplicate_sweep_cron,
        }


class TestJobs:
    """Tests des actions planifiees."""

    @pytest.mark.asyncio
    async def test_full_scan(self, test_settings, pipeline, scheduler, resolver) -> None:
        worker = _worker(
            test_settings, pipeline, scheduler, resolver,
            status_tracker=ProcessingStatusTracker(),
        )

        await worker.full_scan()

        pipeline.process_directory.assert_awaited_once_with(test_settings.source_dir)

    @pytest.mark.asyncio
    async def test_duplicate_sweep_covers_both_libraries(
        self, test_settings, pipeline, scheduler, resolver
    ) -> None:
        await _worker(test_settings, pipeline, scheduler, resolver).duplicate_sweep()

        roots = [c.args[0] for c in pipeline.scan_for_duplicates.await_args_list]
        assert roots == [test_settings.movies_dir, test_settings.tv_dir]


class TestWaitUntilStable:
    """Tests de l'attente de fin d'ecriture."""

    @pytest.mark.asyncio
    async def test_stable_file(self, test_settings, pipeline, scheduler, resolver, tmp_path) -> None:
        path = tmp_path / "done.mkv"
        path.write_bytes(b"complete")
        worker = _worker(test_settings, pipeline, scheduler, resolver)

        assert await worker.wait_until_stable(path) is True

    @pytest.mark.asyncio
    async def test_missing_file(self, test_settings, pipeline, scheduler, resolver, tmp_path) -> None:
        worker = _worker(test_settings, pipeline, scheduler, resolver)
        assert await worker.wait_until_stable(tmp_path / "gone.mkv") is False

    @pytest.mark.asyncio
    async def test_attempts_exhausted(
        self, test_settings, pipeline, scheduler, resolver, tmp_path
    ) -> None:
        path = tmp_path / "growing.mkv"
        path.write_bytes(b"partial")
        worker = _worker(test_settings, pipeline, scheduler, resolver, settle_attempts=1)

        assert await worker.wait_until_stable(path) is False


class TestRun:
    """Tests de la boucle principale."""

    @pytest.mark.asyncio
    async def test_processes_events_and_cleans_up_on_cancel(
        self, test_settings, pipeline, scheduler, resolver
    ) -> None:
        new_file = test_settings.source_dir / "Inception.2010.mkv"
        new_file.write_bytes(b"video")
        processed = asyncio.Event()
        pipeline.process_file.side_effect = lambda path: processed.set()
        watcher = FakeWatcher([new_file])
        api_cache = MagicMock()
        worker = _worker(
            test_settings, pipeline, scheduler, resolver, watcher=watcher, api_cache=api_cache
        )

        task = asyncio.create_task(worker.run())
        await asyncio.wait_for(processed.wait(), timeout=2)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        pipeline.process_directory.assert_awaited_once_with(test_settings.source_dir)
        pipeline.process_file.assert_awaited_once_with(new_file)
        assert watcher.started and watcher.stopped
        scheduler.shutdown.assert_awaited_once()
        pipeline.wait_for_notifications.assert_awaited_once()
        resolver.close.assert_awaited_once()
        api_cache.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_file_failure_is_contained(
        self, test_settings, pipeline, scheduler, resolver
    ) -> None:
        first = test_settings.source_dir / "a.mkv"
        second = test_settings.source_dir / "b.mkv"
        for path in (first, second):
            path.write_bytes(b"video")
        seen: list[Path] = []
        done = asyncio.Event()

        def process(path: Path) -> None:
            seen.append(path)
            if len(seen) == 1:
                raise RuntimeError("boom")
            done.set()

        pipeline.process_file.side_effect = process
        settings = test_settings.model_copy(update={"max_concurrent_files": 1})
        worker = _worker(settings, pipeline, scheduler, resolver, watcher=FakeWatcher([first, second]))

        task = asyncio.create_task(worker.run())
        await asyncio.wait_for(done.wait(), timeout=2)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert seen == [first, second]
