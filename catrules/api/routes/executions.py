"""Execution ledger and statistics API routes."""

from fastapi import APIRouter, HTTPException, Query

from catrules.api.deps import LedgerServiceDep, PaginationDep, RuleStoreDep
from catrules.core.config import get_settings
from catrules.models.execution import LedgerEntry, RuleStatistics
from catrules.schemas.common import APIResponse, PaginatedResponse
from catrules.schemas.ledger import PruneResponse

router = APIRouter(tags=["executions"])


@router.get("/rules/{rule_id}/statistics", response_model=APIResponse[RuleStatistics])
async def get_rule_statistics(
    rule_id: str,
    store: RuleStoreDep,
    ledger: LedgerServiceDep,
) -> APIResponse[RuleStatistics]:
    """Get success rate and average confidence over a rule's recent executions."""
    rule = await store.get(rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail=f"Rule {rule_id} not found")

    statistics = await ledger.get_statistics(rule_id)
    return APIResponse(data=statistics)


@router.get("/executions", response_model=PaginatedResponse[LedgerEntry])
async def list_executions(
    ledger: LedgerServiceDep,
    pagination: PaginationDep,
    rule_id: str | None = Query(default=None, description="Filter by rule"),
    content_id: str | None = Query(default=None, description="Filter by content"),
) -> PaginatedResponse[LedgerEntry]:
    """List ledger entries, newest first."""
    entries, total = await ledger.list_entries(
        rule_id=rule_id,
        content_id=content_id,
        offset=pagination.offset,
        limit=pagination.page_size,
    )
    return PaginatedResponse(
        data=entries,
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.delete("/executions", response_model=APIResponse[PruneResponse])
async def prune_executions(
    ledger: LedgerServiceDep,
    days_to_keep: int | None = Query(default=None, ge=1, description="Retention in days"),
) -> APIResponse[PruneResponse]:
    """Delete ledger entries older than the retention window."""
    days = days_to_keep or get_settings().ledger_retention_days
    deleted = await ledger.cleanup(days)
    return APIResponse(data=PruneResponse(days_to_keep=days, deleted=deleted))
