"""API dependency injection."""

from typing import Annotated

from fastapi import Depends, Query

from catrules.engine.orchestrator import RuleOrchestrator
from catrules.engine.statistics import LedgerService
from catrules.scheduler.auto_categorizer import AutoCategorizer
from catrules.scheduler.jobs import PeriodicJob
from catrules.schemas.common import PaginationParams
from catrules.storage.content_store import CategoryStore, ContentStore
from catrules.storage.ledger_store import LedgerStore
from catrules.storage.redis_client import get_redis
from catrules.storage.rule_store import RuleStore


def get_rule_store() -> RuleStore:
    """Get rule store instance."""
    return RuleStore(get_redis())


def get_content_store() -> ContentStore:
    """Get content store instance."""
    return ContentStore(get_redis())


def get_category_store() -> CategoryStore:
    """Get category store instance."""
    return CategoryStore(get_redis())


def get_ledger_store() -> LedgerStore:
    """Get ledger store instance."""
    return LedgerStore(get_redis())


RuleStoreDep = Annotated[RuleStore, Depends(get_rule_store)]
ContentStoreDep = Annotated[ContentStore, Depends(get_content_store)]
CategoryStoreDep = Annotated[CategoryStore, Depends(get_category_store)]
LedgerStoreDep = Annotated[LedgerStore, Depends(get_ledger_store)]


def get_orchestrator(
    rules: RuleStoreDep,
    contents: ContentStoreDep,
    ledger: LedgerStoreDep,
) -> RuleOrchestrator:
    """Get rule orchestrator wired to the Redis stores."""
    return RuleOrchestrator(rules, contents, ledger)


def get_ledger_service(ledger: LedgerStoreDep) -> LedgerService:
    """Get ledger statistics service."""
    return LedgerService(ledger)


OrchestratorDep = Annotated[RuleOrchestrator, Depends(get_orchestrator)]
LedgerServiceDep = Annotated[LedgerService, Depends(get_ledger_service)]

# Shared so on-demand runs respect the re-entrancy guard
_auto_categorization_job: PeriodicJob | None = None


def get_auto_categorization_job() -> PeriodicJob:
    """Get the on-demand auto-categorization job singleton."""
    global _auto_categorization_job
    if _auto_categorization_job is None:
        redis = get_redis()
        rules = RuleStore(redis)
        contents = ContentStore(redis)
        categorizer = AutoCategorizer(
            orchestrator=RuleOrchestrator(rules, contents, LedgerStore(redis)),
            contents=contents,
            rules=rules,
            categories=CategoryStore(redis),
        )
        _auto_categorization_job = PeriodicJob("auto_categorization", 0, categorizer.run_batch)
    return _auto_categorization_job


AutoCategorizationJobDep = Annotated[PeriodicJob, Depends(get_auto_categorization_job)]


def get_pagination(
    page: int = Query(default=1, ge=1, description="Page number"),
    page_size: int = Query(default=20, ge=1, le=100, description="Items per page"),
) -> PaginationParams:
    """Get pagination parameters from query."""
    return PaginationParams(page=page, page_size=page_size)


PaginationDep = Annotated[PaginationParams, Depends(get_pagination)]
