"""Scheduled auto-categorization of recent uncategorized content."""

from datetime import datetime, timedelta, timezone

from catrules.core.config import get_settings
from catrules.core.logging import get_logger, log_context
from catrules.core.ports import CategoryRepository, ContentRepository, RuleRepository
from catrules.engine.orchestrator import RuleOrchestrator
from catrules.models.execution import BatchReport, CategoryAssignment
from catrules.observability.metrics import CATEGORIES_ASSIGNED, CONTENT_PROCESSED

logger = get_logger(__name__)


class AutoCategorizer:
    """Assigns categories to new content from high-confidence rule matches.

    Items are processed one at a time. Only the first (highest priority)
    match above the threshold is assigned; other qualifying rules are
    reported as candidates.
    """

    def __init__(
        self,
        orchestrator: RuleOrchestrator,
        contents: ContentRepository,
        rules: RuleRepository,
        categories: CategoryRepository | None = None,
        lookback_hours: int | None = None,
        threshold: float | None = None,
    ):
        settings = get_settings()
        self._orchestrator = orchestrator
        self._contents = contents
        self._rules = rules
        self._categories = categories
        self._lookback = timedelta(
            hours=lookback_hours if lookback_hours is not None else settings.scheduler_lookback_hours
        )
        self._threshold = threshold if threshold is not None else settings.auto_assign_threshold

    async def run_batch(self, now: datetime | None = None) -> BatchReport:
        """Categorize uncategorized content created within the lookback window.

        Never raises: a failing item is logged and the batch continues, and a
        failure selecting the batch yields an empty report.

        Args:
            now: Reference time (defaults to current UTC time)

        Returns:
            Batch report
        """
        now = now or datetime.now(timezone.utc)
        report = BatchReport(started_at=now)

        try:
            content_ids = await self._contents.list_uncategorized_since(now - self._lookback)
        except Exception as e:
            logger.error("Failed to select uncategorized content", error=str(e), exc_info=True)
            return report

        report.selected = len(content_ids)
        logger.info("Auto-categorization batch started", items=report.selected)

        for content_id in content_ids:
            try:
                with log_context(content_id=content_id):
                    assignment = await self._process(content_id)
            except Exception as e:
                logger.error(
                    "Failed to auto-categorize content",
                    content_id=content_id,
                    error=str(e),
                    exc_info=True,
                )
                report.failed.append(content_id)
                CONTENT_PROCESSED.labels(status="failed").inc()
                continue

            report.processed += 1
            if assignment:
                report.assignments.append(assignment)
                CONTENT_PROCESSED.labels(status="assigned").inc()
            else:
                report.skipped += 1
                CONTENT_PROCESSED.labels(status="skipped").inc()

        logger.info(
            "Auto-categorization batch complete",
            selected=report.selected,
            assigned=len(report.assignments),
            skipped=report.skipped,
            failed=len(report.failed),
        )
        return report

    async def _process(self, content_id: str) -> CategoryAssignment | None:
        results = await self._orchestrator.run_for_content(content_id)
        qualifying = [result for result in results if result.confidence > self._threshold]
        if not qualifying:
            return None

        best, *others = qualifying
        rule = await self._rules.get(best.rule_id)
        if not rule:
            logger.warning("Matched rule no longer exists", rule_id=best.rule_id)
            return None

        if self._categories is not None and not await self._categories.exists(rule.category_id):
            logger.warning(
                "Rule targets a missing category, skipping assignment",
                rule_id=rule.rule_id,
                category_id=rule.category_id,
            )
            return None

        current = await self._contents.get(content_id)
        if current and current.category_id:
            logger.info("Content categorized meanwhile, leaving as is")
            return None

        await self._contents.set_category(content_id, rule.category_id)
        CATEGORIES_ASSIGNED.labels(category_id=rule.category_id).inc()
        logger.info(
            "Category auto-assigned",
            rule_id=rule.rule_id,
            category_id=rule.category_id,
            confidence=best.confidence,
            candidates=[other.rule_id for other in others],
        )
        return CategoryAssignment(
            content_id=content_id,
            rule_id=rule.rule_id,
            category_id=rule.category_id,
            confidence=best.confidence,
            candidates=[other.rule_id for other in others],
        )
