"""Rule management API routes."""

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from catrules.api.deps import CategoryStoreDep, LedgerStoreDep, PaginationDep, RuleStoreDep
from catrules.core.logging import get_logger
from catrules.models.rule import Rule, RuleMetadata, priority_order
from catrules.schemas.common import APIResponse, PaginatedResponse
from catrules.schemas.rule import (
    RuleCreate,
    RuleCreateResponse,
    RuleResponse,
    RuleStatusUpdate,
    RuleUpdate,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/rules", tags=["rules"])
category_router = APIRouter(prefix="/categories", tags=["rules"])


def _to_response(rule: Rule) -> RuleResponse:
    return RuleResponse.model_validate(rule.model_dump())


@router.post("", response_model=APIResponse[RuleCreateResponse], status_code=201)
async def create_rule(
    data: RuleCreate,
    store: RuleStoreDep,
    categories: CategoryStoreDep,
) -> APIResponse[RuleCreateResponse]:
    """Create a new rule.

    The target category must exist now; it is not re-checked later.
    """
    if not await categories.exists(data.category_id):
        raise HTTPException(status_code=404, detail=f"Category {data.category_id} not found")

    rule_id = f"rule_{datetime.now(timezone.utc).strftime('%Y%m%d')}_{uuid.uuid4().hex[:8]}"
    rule = Rule(
        rule_id=rule_id,
        name=data.name,
        description=data.description,
        category_id=data.category_id,
        conditions=data.conditions,
        priority=data.priority,
        enabled=data.enabled,
        metadata=RuleMetadata(created_by=data.created_by),
    )

    created = await store.create(rule)
    logger.info("Rule created", rule_id=created.rule_id, category_id=created.category_id)

    return APIResponse(
        message="Category rule created successfully",
        data=RuleCreateResponse(
            rule_id=created.rule_id,
            created_at=created.metadata.created_at,
        ),
    )


@router.get("", response_model=PaginatedResponse[RuleResponse])
async def list_rules(
    store: RuleStoreDep,
    pagination: PaginationDep,
    category_id: str | None = Query(default=None, description="Filter by target category"),
    enabled: bool | None = Query(default=None, description="Filter by enabled status"),
    name_contains: str | None = Query(default=None, description="Filter by name substring"),
) -> PaginatedResponse[RuleResponse]:
    """List all rules by priority with optional filtering."""
    if category_id:
        rules = await store.list_by_category(category_id, include_disabled=True)
    else:
        rules = sorted(await store.list_all(), key=priority_order)

    if enabled is not None:
        rules = [r for r in rules if r.enabled == enabled]
    if name_contains:
        needle = name_contains.lower()
        rules = [r for r in rules if needle in r.name.lower()]

    total = len(rules)
    start = pagination.offset
    paginated = rules[start:start + pagination.page_size]

    return PaginatedResponse(
        data=[_to_response(r) for r in paginated],
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@category_router.get("/{category_id}/rules", response_model=APIResponse[list[RuleResponse]])
async def list_category_rules(
    category_id: str,
    store: RuleStoreDep,
) -> APIResponse[list[RuleResponse]]:
    """List the active rules of a category by priority."""
    rules = await store.list_by_category(category_id)
    return APIResponse(data=[_to_response(r) for r in rules])


@router.get("/{rule_id}", response_model=APIResponse[RuleResponse])
async def get_rule(
    rule_id: str,
    store: RuleStoreDep,
) -> APIResponse[RuleResponse]:
    """Get a single rule by ID."""
    rule = await store.get(rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail=f"Rule {rule_id} not found")

    return APIResponse(data=_to_response(rule))


@router.patch("/{rule_id}", response_model=APIResponse[RuleResponse])
async def update_rule(
    rule_id: str,
    data: RuleUpdate,
    store: RuleStoreDep,
) -> APIResponse[RuleResponse]:
    """Partially update an existing rule."""
    existing = await store.get(rule_id)
    if not existing:
        raise HTTPException(status_code=404, detail=f"Rule {rule_id} not found")

    updated_dict = existing.model_dump()
    updated_dict.update(data.model_dump(exclude_unset=True))

    try:
        rule = Rule.model_validate(updated_dict)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from e

    result = await store.update(rule_id, rule)
    if not result:
        raise HTTPException(status_code=404, detail=f"Rule {rule_id} not found")

    logger.info("Rule updated", rule_id=rule_id, version=result.metadata.version)
    return APIResponse(data=_to_response(result))


@router.patch("/{rule_id}/status", response_model=APIResponse[RuleResponse])
async def update_rule_status(
    rule_id: str,
    data: RuleStatusUpdate,
    store: RuleStoreDep,
) -> APIResponse[RuleResponse]:
    """Enable or disable a rule."""
    rule = await store.set_enabled(rule_id, data.enabled)
    if not rule:
        raise HTTPException(status_code=404, detail=f"Rule {rule_id} not found")

    return APIResponse(data=_to_response(rule))


@router.delete("/{rule_id}", response_model=APIResponse)
async def delete_rule(
    rule_id: str,
    store: RuleStoreDep,
    ledger: LedgerStoreDep,
) -> APIResponse:
    """Delete a rule permanently together with its ledger entries."""
    deleted = await store.delete(rule_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Rule {rule_id} not found")

    entries = await ledger.delete_for_rule(rule_id)
    logger.info("Rule deleted", rule_id=rule_id, ledger_entries=entries)
    return APIResponse(message=f"Rule {rule_id} deleted")
