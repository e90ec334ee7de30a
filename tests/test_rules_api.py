"""Tests for rule management behaviors."""

import re

import pytest
import pytest_asyncio
from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from catrules.api.routes import rules as rules_api
from catrules.models.content import Category
from catrules.models.rule import ConditionSet
from catrules.schemas.common import PaginationParams
from catrules.schemas.rule import RuleCreate, RuleStatusUpdate, RuleUpdate
from catrules.storage.content_store import CategoryStore
from catrules.storage.ledger_store import LedgerStore
from catrules.storage.rule_store import RuleStore

from conftest import make_entry


def rule_create(name: str, priority: int = 0, category_id: str = "cat_baking", enabled: bool = True) -> RuleCreate:
    return RuleCreate(
        name=name,
        category_id=category_id,
        conditions=ConditionSet.model_validate({"keywords": ["bread"], "confidence": 0.9}),
        priority=priority,
        enabled=enabled,
    )


@pytest_asyncio.fixture
async def stores(redis) -> tuple[RuleStore, CategoryStore]:
    categories = CategoryStore(redis)
    await categories.save(Category(category_id="cat_baking", name="Baking", slug="baking"))
    await categories.save(Category(category_id="cat_recipes", name="Recipes", slug="recipes"))
    return RuleStore(redis), categories


async def create(stores, data: RuleCreate) -> str:
    store, categories = stores
    response = await rules_api.create_rule(data=data, store=store, categories=categories)
    return response.data.rule_id


def test_rule_create_accepts_any_integer_priority() -> None:
    assert rule_create("Fallback", priority=-5).priority == -5
    assert rule_create("Urgent", priority=5000).priority == 5000


def test_rule_create_requires_conditions() -> None:
    with pytest.raises(ValidationError):
        RuleCreate(name="No conditions", category_id="cat_baking")


@pytest.mark.asyncio
async def test_create_rule_assigns_id_and_persists(stores) -> None:
    store, categories = stores

    response = await rules_api.create_rule(data=rule_create("Bread"), store=store, categories=categories)

    assert re.fullmatch(r"rule_\d{8}_[0-9a-f]{8}", response.data.rule_id)
    stored = await store.get(response.data.rule_id)
    assert stored.name == "Bread"
    assert stored.sequence == 1
    assert stored.metadata.created_by == "system"


@pytest.mark.asyncio
async def test_create_rule_for_missing_category_is_rejected(stores) -> None:
    store, categories = stores

    with pytest.raises(HTTPException) as exc_info:
        await rules_api.create_rule(
            data=rule_create("Orphan", category_id="cat_missing"),
            store=store,
            categories=categories,
        )

    assert exc_info.value.status_code == 404
    assert await store.list_all() == []


@pytest.mark.asyncio
async def test_list_rules_filters_category_enabled_and_name(stores) -> None:
    store, _ = stores
    await create(stores, rule_create("Alpha Rule", priority=100))
    beta_id = await create(stores, rule_create("Beta Rule", priority=50, enabled=False))
    await create(stores, rule_create("Beta Other", priority=10, category_id="cat_recipes", enabled=False))

    response = await rules_api.list_rules(
        store=store,
        pagination=PaginationParams(page=1, page_size=20),
        category_id="cat_baking",
        enabled=False,
        name_contains="beta",
    )

    assert response.total == 1
    assert response.data[0].rule_id == beta_id


@pytest.mark.asyncio
async def test_list_rules_orders_by_priority_and_paginates(stores) -> None:
    store, _ = stores
    low = await create(stores, rule_create("Low", priority=1))
    high = await create(stores, rule_create("High", priority=90))
    mid = await create(stores, rule_create("Mid", priority=40))

    first_page = await rules_api.list_rules(
        store=store,
        pagination=PaginationParams(page=1, page_size=2),
        category_id=None,
        enabled=None,
        name_contains=None,
    )
    second_page = await rules_api.list_rules(
        store=store,
        pagination=PaginationParams(page=2, page_size=2),
        category_id=None,
        enabled=None,
        name_contains=None,
    )

    assert [rule.rule_id for rule in first_page.data] == [high, mid]
    assert [rule.rule_id for rule in second_page.data] == [low]
    assert first_page.total == 3
    assert first_page.pages == 2


@pytest.mark.asyncio
async def test_negative_priority_rules_are_listed_last(stores) -> None:
    store, _ = stores
    fallback = await create(stores, rule_create("Fallback", priority=-10))
    default = await create(stores, rule_create("Default"))

    response = await rules_api.list_category_rules(category_id="cat_baking", store=store)

    assert [rule.rule_id for rule in response.data] == [default, fallback]


@pytest.mark.asyncio
async def test_category_rules_only_lists_active_rules(stores) -> None:
    store, _ = stores
    active = await create(stores, rule_create("Active"))
    await create(stores, rule_create("Disabled", enabled=False))

    response = await rules_api.list_category_rules(category_id="cat_baking", store=store)

    assert [rule.rule_id for rule in response.data] == [active]


@pytest.mark.asyncio
async def test_patch_rule_updates_selected_fields_only(stores) -> None:
    store, _ = stores
    rule_id = await create(stores, rule_create("Patch Rule", priority=100))

    response = await rules_api.update_rule(
        rule_id=rule_id,
        data=RuleUpdate(description="Updated description", enabled=False),
        store=store,
    )

    assert response.data.description == "Updated description"
    assert response.data.enabled is False
    assert response.data.name == "Patch Rule"
    assert response.data.priority == 100
    assert response.data.metadata.version == 2


@pytest.mark.asyncio
async def test_patch_rule_replaces_conditions(stores) -> None:
    store, _ = stores
    rule_id = await create(stores, rule_create("Conditions"))

    await rules_api.update_rule(
        rule_id=rule_id,
        data=RuleUpdate.model_validate({"conditions": {"titlePatterns": ["bake"], "confidence": 0.7}}),
        store=store,
    )

    stored = await store.get(rule_id)
    assert [clause.type for clause in stored.conditions.clauses] == ["title_patterns"]
    assert stored.conditions.confidence == 0.7


@pytest.mark.parametrize("field", ["name", "description", "conditions", "priority", "enabled"])
def test_rule_update_rejects_explicit_null(field: str) -> None:
    with pytest.raises(ValidationError):
        RuleUpdate.model_validate({field: None})


@pytest.mark.asyncio
async def test_patch_that_breaks_stored_rule_is_a_validation_error(stores) -> None:
    store, _ = stores
    rule_id = await create(stores, rule_create("Unchanged"))

    with pytest.raises(RequestValidationError):
        await rules_api.update_rule(
            rule_id=rule_id,
            data=RuleUpdate.model_construct(name=None),
            store=store,
        )

    stored = await store.get(rule_id)
    assert stored.name == "Unchanged"
    assert stored.metadata.version == 1


@pytest.mark.asyncio
async def test_update_missing_rule_returns_404(stores) -> None:
    store, _ = stores

    with pytest.raises(HTTPException) as exc_info:
        await rules_api.update_rule(rule_id="rule_missing", data=RuleUpdate(name="x"), store=store)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_status_update_and_delete(stores, redis) -> None:
    store, _ = stores
    ledger = LedgerStore(redis)
    rule_id = await create(stores, rule_create("Toggle"))
    other_id = await create(stores, rule_create("Other"))
    await ledger.append(make_entry("e1", rule_id=rule_id))
    await ledger.append(make_entry("e2", rule_id=other_id))

    disabled = await rules_api.update_rule_status(
        rule_id=rule_id,
        data=RuleStatusUpdate(enabled=False),
        store=store,
    )
    await rules_api.delete_rule(rule_id=rule_id, store=store, ledger=ledger)

    assert disabled.data.enabled is False
    assert await store.get(rule_id) is None
    with pytest.raises(HTTPException) as exc_info:
        await rules_api.get_rule(rule_id=rule_id, store=store)
    assert exc_info.value.status_code == 404
    assert await ledger.get("e1") is None
    assert await ledger.count_for_rule(rule_id) == 0
    remaining, total = await ledger.list_entries()
    assert [entry.entry_id for entry in remaining] == ["e2"]
    assert total == 1
