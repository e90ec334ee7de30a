"""Periodic job runner with a re-entrancy guard."""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from catrules.core.logging import get_logger
from catrules.observability.metrics import SCHEDULER_RUNS

logger = get_logger(__name__)


@dataclass
class JobRun:
    """Result of one attempt to run a job."""

    started: bool
    result: Any = None
    error: str | None = None


class PeriodicJob:
    """Runs a unit of work at a fixed cadence.

    A run is skipped while a previous run of the same job is still in
    progress, whether it was started by the timer or by ``run_once``.
    """

    def __init__(
        self,
        name: str,
        interval_seconds: float,
        work: Callable[[], Awaitable[Any]],
        run_on_start: bool = False,
    ):
        """Initialize job.

        Args:
            name: Job name used in logs and metrics
            interval_seconds: Seconds between runs
            work: Coroutine function performing one run
            run_on_start: Run once immediately when started
        """
        self.name = name
        self._interval = interval_seconds
        self._work = work
        self._run_on_start = run_on_start
        self._running = False
        self._stop_event = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self._running

    async def run_once(self) -> JobRun:
        """Run the unit of work now unless a run is already in progress.

        Errors raised by the work are logged and reported, never raised.
        """
        if self._running:
            logger.warning("Previous run still in progress, skipping", job=self.name)
            SCHEDULER_RUNS.labels(job=self.name, status="skipped").inc()
            return JobRun(started=False)

        self._running = True
        try:
            result = await self._work()
        except Exception as e:
            logger.error("Job run failed", job=self.name, error=str(e), exc_info=True)
            SCHEDULER_RUNS.labels(job=self.name, status="failed").inc()
            return JobRun(started=True, error=str(e))
        finally:
            self._running = False

        SCHEDULER_RUNS.labels(job=self.name, status="ok").inc()
        return JobRun(started=True, result=result)

    async def start(self) -> None:
        """Run the job every interval until ``stop`` is called."""
        logger.info("Periodic job started", job=self.name, interval_seconds=self._interval)

        if self._run_on_start:
            await self.run_once()

        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                await self.run_once()

        logger.info("Periodic job stopped", job=self.name)

    def stop(self) -> None:
        """Signal the job loop to stop after the current run."""
        self._stop_event.set()
