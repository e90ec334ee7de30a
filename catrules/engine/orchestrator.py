"""Runs all active rules against one content item."""

import time
import uuid
from typing import Callable

from catrules.core.config import get_settings
from catrules.core.errors import DeadlineExceeded, NotFoundError
from catrules.core.logging import get_logger, log_context
from catrules.core.ports import ContentRepository, LedgerRepository, RuleRepository
from catrules.engine.evaluator import RuleEvaluator, get_rule_evaluator
from catrules.engine.features import FeatureExtractor, get_feature_extractor
from catrules.models.content import ContentRecord
from catrules.models.execution import ExecutionResult, LedgerEntry, RuleFailure, RuleRunReport
from catrules.models.features import FeatureSet
from catrules.observability.metrics import (
    ACTIVE_RULES,
    LEDGER_WRITES,
    RULE_EVALUATION_LATENCY,
    RULE_FAILURES,
    RULES_EVALUATED,
    RULES_MATCHED,
)

logger = get_logger(__name__)


class RuleOrchestrator:
    """Evaluates active rules against content and records matches.

    Rules are re-fetched on every run and evaluated one after another in
    priority order. A failing rule is logged and reported without stopping
    the remaining rules.
    """

    def __init__(
        self,
        rules: RuleRepository,
        contents: ContentRepository,
        ledger: LedgerRepository,
        extractor: FeatureExtractor | None = None,
        evaluator: RuleEvaluator | None = None,
        run_timeout: float | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        """Initialize orchestrator.

        Args:
            rules: Rule repository
            contents: Content repository
            ledger: Ledger repository matching results are written to
            extractor: Feature extractor (defaults to the shared instance)
            evaluator: Rule evaluator (defaults to the shared instance)
            run_timeout: Seconds allowed for one content item
            clock: Monotonic clock in seconds
        """
        settings = get_settings()
        self._rules = rules
        self._contents = contents
        self._ledger = ledger
        self._extractor = extractor or get_feature_extractor()
        self._evaluator = evaluator or get_rule_evaluator()
        self._run_timeout = run_timeout if run_timeout is not None else settings.run_timeout_seconds
        self._slow_rule_ms = settings.slow_rule_threshold_ms
        self._clock = clock

    async def analyze_content(self, content_id: str) -> FeatureSet:
        """Extract features of a content item.

        Raises:
            NotFoundError: If the content does not exist
        """
        content = await self._load_content(content_id)
        return self._extractor.extract(content.title, content.body)

    async def run_for_content(self, content_id: str) -> list[ExecutionResult]:
        """Run active rules and return the matching results in priority order.

        Raises:
            NotFoundError: If the content does not exist
        """
        report = await self.execute(content_id)
        return report.results

    async def execute(self, content_id: str) -> RuleRunReport:
        """Run active rules against a content item.

        Args:
            content_id: Content to categorize

        Returns:
            Report with matching results and per-rule failures

        Raises:
            NotFoundError: If the content does not exist
        """
        with log_context(content_id=content_id):
            return await self._execute(content_id)

    async def _execute(self, content_id: str) -> RuleRunReport:
        started = self._clock()
        content = await self._load_content(content_id)
        rules = await self._rules.list_active()
        ACTIVE_RULES.set(len(rules))

        features = self._extractor.extract(content.title, content.body)
        deadline = started + self._run_timeout
        report = RuleRunReport(content_id=content_id)

        for rule in rules:
            if self._clock() > deadline:
                report.failures.append(
                    RuleFailure(
                        rule_id=rule.rule_id,
                        error=f"Run deadline of {self._run_timeout}s exceeded",
                        error_type=DeadlineExceeded.__name__,
                    )
                )
                RULE_FAILURES.labels(error_type=DeadlineExceeded.__name__).inc()
                continue

            rule_started = self._clock()
            try:
                result = self._evaluator.evaluate(rule, features)
            except Exception as e:
                logger.error(
                    "Error evaluating rule",
                    rule_id=rule.rule_id,
                    error=str(e),
                    exc_info=True,
                )
                report.failures.append(
                    RuleFailure(rule_id=rule.rule_id, error=str(e), error_type=type(e).__name__)
                )
                RULE_FAILURES.labels(error_type=type(e).__name__).inc()
                continue

            elapsed = self._clock() - rule_started
            report.rules_evaluated += 1
            RULES_EVALUATED.labels(rule_id=rule.rule_id).inc()
            RULE_EVALUATION_LATENCY.observe(elapsed)
            if elapsed * 1000 > self._slow_rule_ms:
                logger.warning("Slow rule evaluation", rule_id=rule.rule_id, elapsed_ms=elapsed * 1000)

            if not result.matched:
                continue

            result = result.model_copy(
                update={"content_id": content_id, "execution_time_ms": elapsed * 1000}
            )
            RULES_MATCHED.labels(rule_id=rule.rule_id).inc()
            await self._record(result, report)
            report.results.append(result)

        report.elapsed_ms = (self._clock() - started) * 1000
        logger.info(
            "Rules executed for content",
            rules=len(rules),
            matched=len(report.results),
            failed=len(report.failures),
            elapsed_ms=report.elapsed_ms,
        )
        return report

    async def _record(self, result: ExecutionResult, report: RuleRunReport) -> None:
        entry = LedgerEntry(
            entry_id=uuid.uuid4().hex,
            rule_id=result.rule_id,
            content_id=result.content_id,
            result=result,
            confidence=result.confidence,
        )
        try:
            await self._ledger.append(entry)
            LEDGER_WRITES.labels(status="ok").inc()
        except Exception as e:
            logger.error(
                "Failed to write ledger entry",
                rule_id=result.rule_id,
                error=str(e),
                exc_info=True,
            )
            LEDGER_WRITES.labels(status="failed").inc()
            report.failures.append(
                RuleFailure(rule_id=result.rule_id, error=str(e), error_type=type(e).__name__)
            )

    async def _load_content(self, content_id: str) -> ContentRecord:
        content = await self._contents.get(content_id)
        if not content:
            raise NotFoundError("content", content_id)
        return content
