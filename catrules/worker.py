"""Worker process entry point for scheduled auto-categorization and ledger retention."""

import asyncio
import signal

from catrules.core.config import get_settings
from catrules.core.logging import get_logger, setup_logging
from catrules.engine.orchestrator import RuleOrchestrator
from catrules.engine.statistics import LedgerService
from catrules.scheduler.auto_categorizer import AutoCategorizer
from catrules.scheduler.jobs import PeriodicJob
from catrules.storage.content_store import CategoryStore, ContentStore
from catrules.storage.ledger_store import LedgerStore
from catrules.storage.redis_client import close_redis_pool, get_redis, init_redis_pool
from catrules.storage.rule_store import RuleStore

logger = get_logger(__name__)


class WorkerManager:
    """Manager for coordinating periodic jobs."""

    def __init__(self):
        """Initialize worker manager."""
        self._settings = get_settings()
        self._jobs: list[PeriodicJob] = []

    def _build_jobs(self) -> list[PeriodicJob]:
        redis = get_redis()
        rules = RuleStore(redis)
        contents = ContentStore(redis)
        ledger = LedgerStore(redis)

        jobs = []
        if self._settings.scheduler_enabled:
            categorizer = AutoCategorizer(
                orchestrator=RuleOrchestrator(rules, contents, ledger),
                contents=contents,
                rules=rules,
                categories=CategoryStore(redis),
            )
            jobs.append(
                PeriodicJob(
                    "auto_categorization",
                    self._settings.scheduler_interval_seconds,
                    categorizer.run_batch,
                )
            )

        ledger_service = LedgerService(ledger)
        retention_days = self._settings.ledger_retention_days
        jobs.append(
            PeriodicJob(
                "ledger_retention",
                self._settings.ledger_cleanup_interval_seconds,
                lambda: ledger_service.cleanup(retention_days),
                run_on_start=True,
            )
        )
        return jobs

    async def start(self) -> None:
        """Start all periodic jobs and wait for them to stop."""
        setup_logging()
        logger.info("Starting worker manager")

        await init_redis_pool()
        self._jobs = self._build_jobs()

        try:
            await asyncio.gather(*(self._run_job(job) for job in self._jobs))
        finally:
            await self._cleanup()

    async def _run_job(self, job: PeriodicJob) -> None:
        try:
            await job.start()
        except asyncio.CancelledError:
            logger.info("Job cancelled", job=job.name)
        except Exception as e:
            logger.error("Job loop error", job=job.name, error=str(e), exc_info=True)

    async def stop(self) -> None:
        """Signal jobs to stop."""
        logger.info("Stopping jobs")
        for job in self._jobs:
            job.stop()

    async def _cleanup(self) -> None:
        logger.info("Cleaning up resources")
        await close_redis_pool()
        logger.info("Cleanup complete")


async def main() -> None:
    """Main entry point for worker process."""
    manager = WorkerManager()

    loop = asyncio.get_running_loop()

    def signal_handler():
        logger.info("Received shutdown signal")
        asyncio.create_task(manager.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    await manager.start()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
