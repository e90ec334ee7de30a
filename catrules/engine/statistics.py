"""Execution ledger statistics and retention."""

from datetime import datetime, timedelta, timezone
from typing import Callable

from redis.exceptions import RedisError

from catrules.core.config import get_settings
from catrules.core.errors import PersistenceError
from catrules.core.logging import get_logger
from catrules.core.ports import LedgerRepository
from catrules.models.execution import LedgerEntry, RuleStatistics
from catrules.observability.metrics import LEDGER_PRUNED

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerService:
    """Statistics over the execution ledger and best-effort pruning."""

    def __init__(
        self,
        ledger: LedgerRepository,
        window: int | None = None,
        recent_count: int | None = None,
        success_threshold: float | None = None,
        now: Callable[[], datetime] = _utcnow,
    ):
        settings = get_settings()
        self._ledger = ledger
        self._window = window if window is not None else settings.statistics_window
        self._recent_count = recent_count if recent_count is not None else settings.statistics_recent_count
        self._success_threshold = (
            success_threshold if success_threshold is not None else settings.statistics_success_threshold
        )
        self._now = now

    async def get_statistics(self, rule_id: str) -> RuleStatistics:
        """Aggregate the most recent ledger entries of a rule.

        Args:
            rule_id: Rule ID

        Returns:
            Rule statistics; success rate is a percentage

        Raises:
            PersistenceError: If the ledger cannot be read
        """
        try:
            entries = await self._ledger.recent_for_rule(rule_id, self._window)
        except RedisError as e:
            logger.error("Failed to read ledger", rule_id=rule_id, error=str(e))
            raise PersistenceError(f"Failed to read execution ledger for rule {rule_id}") from e

        total = len(entries)
        successful = sum(1 for entry in entries if entry.confidence > self._success_threshold)

        return RuleStatistics(
            rule_id=rule_id,
            total_executions=total,
            successful_executions=successful,
            success_rate=(successful / total) * 100 if total else 0.0,
            average_confidence=sum(entry.confidence for entry in entries) / total if total else 0.0,
            recent_executions=entries[: self._recent_count],
        )

    async def list_entries(
        self,
        rule_id: str | None = None,
        content_id: str | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[LedgerEntry], int]:
        """List ledger entries newest first.

        Raises:
            PersistenceError: If the ledger cannot be read
        """
        try:
            return await self._ledger.list_entries(
                rule_id=rule_id,
                content_id=content_id,
                offset=offset,
                limit=limit,
            )
        except RedisError as e:
            raise PersistenceError("Failed to read execution ledger") from e

    async def cleanup(self, days_to_keep: int = 30) -> int:
        """Delete entries older than ``days_to_keep`` days.

        Failures are logged and swallowed.

        Returns:
            Number of deleted entries, 0 on failure
        """
        cutoff = self._now() - timedelta(days=days_to_keep)
        try:
            deleted = await self._ledger.delete_before(cutoff)
        except Exception as e:
            logger.error(
                "Ledger cleanup failed",
                days_to_keep=days_to_keep,
                error=str(e),
                exc_info=True,
            )
            return 0

        LEDGER_PRUNED.inc(deleted)
        logger.info("Ledger cleanup complete", cutoff=cutoff.isoformat(), deleted=deleted)
        return deleted
