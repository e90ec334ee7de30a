"""Tests for API error response formats."""

from typing import Any

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

import catrules.api.app as app_module
from catrules.api.app import create_app
from catrules.api.deps import (
    get_auto_categorization_job,
    get_category_store,
    get_ledger_service,
    get_orchestrator,
    get_rule_store,
)
from catrules.engine.orchestrator import RuleOrchestrator
from catrules.engine.statistics import LedgerService
from catrules.scheduler.jobs import JobRun

from conftest import FakeContentRepository, FakeLedger, FakeRuleRepository, make_content, make_rule


class FakeRuleStore:
    """Minimal rule store for error response tests."""

    def __init__(self, rules: dict[str, Any] | None = None):
        self._rules = rules or {}

    async def get(self, rule_id: str) -> Any | None:
        return self._rules.get(rule_id)


class FakeCategoryStore:
    async def exists(self, category_id: str) -> bool:
        return False


class UnreadableLedger(FakeLedger):
    async def recent_for_rule(self, rule_id: str, limit: int) -> list:
        raise RedisConnectionError("Connection refused")


class BusyJob:
    async def run_once(self) -> JobRun:
        return JobRun(started=False)


@pytest.fixture
def client(monkeypatch) -> TestClient:
    async def _noop() -> None:
        return None

    monkeypatch.setattr(app_module, "init_redis_pool", _noop)
    monkeypatch.setattr(app_module, "close_redis_pool", _noop)

    rule = make_rule("rule_bread", {"keywords": ["bread"], "confidence": 0.9})
    orchestrator = RuleOrchestrator(
        rules=FakeRuleRepository([make_rule("rule_pasta", {"keywords": ["pasta"], "confidence": 0.9})]),
        contents=FakeContentRepository([make_content("c1")]),
        ledger=FakeLedger(),
    )

    app = create_app()
    app.dependency_overrides[get_rule_store] = lambda: FakeRuleStore({"rule_bread": rule})
    app.dependency_overrides[get_category_store] = lambda: FakeCategoryStore()
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_ledger_service] = lambda: LedgerService(UnreadableLedger())
    app.dependency_overrides[get_auto_categorization_job] = lambda: BusyJob()
    return TestClient(app)


def test_http_exception_response_format(client: TestClient) -> None:
    response = client.get("/api/v1/rules/missing-rule")

    assert response.status_code == 404
    payload = response.json()
    assert payload["code"] == 404
    assert payload["message"] == "Rule missing-rule not found"
    assert "data" in payload


def test_validation_error_response_format(client: TestClient) -> None:
    response = client.post("/api/v1/rules", json={"name": ""})

    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == 422
    assert payload["message"] == "Validation error"
    assert isinstance(payload["data"], list)
    assert payload["data"]


def test_invalid_conditions_are_rejected(client: TestClient) -> None:
    response = client.post(
        "/api/v1/rules",
        json={
            "name": "Broken",
            "category_id": "cat_baking",
            "conditions": {"wordCount": {"min": 500, "max": 100}, "confidence": 0.9},
        },
    )

    assert response.status_code == 422
    assert response.json()["code"] == 422


@pytest.mark.parametrize("field", ["name", "conditions", "enabled"])
def test_patch_with_null_field_is_a_validation_error(client: TestClient, field: str) -> None:
    response = client.patch("/api/v1/rules/rule_bread", json={field: None})

    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == 422
    assert payload["message"] == "Validation error"
    assert payload["data"][0]["loc"][-1] == field


def test_create_rule_for_missing_category(client: TestClient) -> None:
    response = client.post(
        "/api/v1/rules",
        json={
            "name": "Orphan",
            "category_id": "cat_missing",
            "conditions": {"keywords": ["bread"], "confidence": 0.9},
        },
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Category cat_missing not found"


def test_run_for_missing_content(client: TestClient) -> None:
    response = client.post("/api/v1/content/missing/run")

    assert response.status_code == 404
    assert response.json()["message"] == "Content missing not found"


def test_run_without_matches_returns_empty_results(client: TestClient) -> None:
    response = client.post("/api/v1/content/c1/run")

    assert response.status_code == 200
    payload = response.json()
    assert payload["code"] == 0
    assert payload["data"]["results"] == []
    assert payload["data"]["rules_evaluated"] == 1


def test_content_analysis(client: TestClient) -> None:
    response = client.get("/api/v1/content/c1/analysis")

    assert response.status_code == 200
    assert response.json()["data"]["content_type"] == "tutorial"


def test_statistics_storage_failure_returns_503(client: TestClient) -> None:
    response = client.get("/api/v1/rules/rule_bread/statistics")

    assert response.status_code == 503
    assert response.json()["code"] == 503


def test_statistics_for_missing_rule(client: TestClient) -> None:
    response = client.get("/api/v1/rules/rule_missing/statistics")

    assert response.status_code == 404


def test_scheduler_run_in_progress_returns_409(client: TestClient) -> None:
    response = client.post("/api/v1/scheduler/run")

    assert response.status_code == 409
    assert response.json()["message"] == "Auto-categorization run already in progress"


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
