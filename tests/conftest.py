"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Any, AsyncIterator

import pytest_asyncio
from fakeredis import FakeAsyncRedis

from catrules.models.content import ContentRecord
from catrules.models.execution import ExecutionResult, LedgerEntry
from catrules.models.rule import ConditionSet, Rule, RuleMetadata, priority_order

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)

BREAD_BODY = " ".join(["flour water yeast salt dough knead rise shape bake crust"] * 25)


class FakeRuleRepository:
    """In-memory rule repository."""

    def __init__(self, rules: list[Rule] | None = None):
        self._rules = {rule.rule_id: rule for rule in rules or []}
        self.list_active_calls = 0

    async def get(self, rule_id: str) -> Rule | None:
        return self._rules.get(rule_id)

    async def list_active(self) -> list[Rule]:
        self.list_active_calls += 1
        return sorted((r for r in self._rules.values() if r.enabled), key=priority_order)

    def remove(self, rule_id: str) -> None:
        self._rules.pop(rule_id, None)


class FakeContentRepository:
    """In-memory content collaborator."""

    def __init__(self, records: list[ContentRecord] | None = None):
        self.records = {record.content_id: record for record in records or []}
        self.failing_ids: set[str] = set()
        self.fail_listing = False

    async def get(self, content_id: str) -> ContentRecord | None:
        if content_id in self.failing_ids:
            raise RuntimeError(f"Storage error reading {content_id}")
        return self.records.get(content_id)

    async def list_uncategorized_since(self, since: datetime) -> list[str]:
        if self.fail_listing:
            raise ConnectionError("Database unavailable")
        return [
            record.content_id
            for record in self.records.values()
            if record.category_id is None and record.created_at >= since
        ]

    async def set_category(self, content_id: str, category_id: str) -> None:
        self.records[content_id].category_id = category_id


class FakeCategoryRepository:
    """In-memory category collaborator."""

    def __init__(self, category_ids: set[str] | None = None):
        self.category_ids = set(category_ids or [])

    async def exists(self, category_id: str) -> bool:
        return category_id in self.category_ids


class FakeLedger:
    """In-memory append-only ledger."""

    def __init__(self):
        self.entries: list[LedgerEntry] = []
        self.append_error: Exception | None = None

    async def append(self, entry: LedgerEntry) -> None:
        if self.append_error:
            raise self.append_error
        self.entries.append(entry)

    async def recent_for_rule(self, rule_id: str, limit: int) -> list[LedgerEntry]:
        entries = [e for e in self.entries if e.rule_id == rule_id]
        entries.sort(key=lambda e: e.executed_at, reverse=True)
        return entries[:limit]

    async def list_entries(
        self,
        rule_id: str | None = None,
        content_id: str | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[LedgerEntry], int]:
        entries = [
            e for e in reversed(self.entries)
            if (rule_id is None or e.rule_id == rule_id)
            and (content_id is None or e.content_id == content_id)
        ]
        return entries[offset:offset + limit], len(entries)

    async def delete_before(self, cutoff: datetime) -> int:
        before = len(self.entries)
        self.entries = [e for e in self.entries if e.executed_at >= cutoff]
        return before - len(self.entries)


def make_rule(
    rule_id: str,
    conditions: dict[str, Any],
    priority: int = 0,
    sequence: int = 1,
    category_id: str = "cat_baking",
    enabled: bool = True,
    name: str | None = None,
) -> Rule:
    return Rule(
        rule_id=rule_id,
        name=name or f"Rule {rule_id}",
        category_id=category_id,
        conditions=ConditionSet.model_validate(conditions),
        priority=priority,
        enabled=enabled,
        sequence=sequence,
        metadata=RuleMetadata(created_at=NOW, updated_at=NOW),
    )


def make_content(
    content_id: str,
    title: str = "How to Bake Bread",
    body: str = BREAD_BODY,
    created_at: datetime | None = None,
    category_id: str | None = None,
) -> ContentRecord:
    return ContentRecord(
        content_id=content_id,
        title=title,
        body=body,
        created_at=created_at or NOW - timedelta(hours=1),
        category_id=category_id,
    )


def make_entry(
    entry_id: str,
    rule_id: str = "rule_a",
    content_id: str = "c1",
    confidence: float = 0.9,
    executed_at: datetime = NOW,
) -> LedgerEntry:
    return LedgerEntry(
        entry_id=entry_id,
        rule_id=rule_id,
        content_id=content_id,
        result=ExecutionResult(
            rule_id=rule_id,
            content_id=content_id,
            matched=True,
            confidence=confidence,
            matched_conditions=["keywords"],
        ),
        confidence=confidence,
        executed_at=executed_at,
    )


@pytest_asyncio.fixture
async def redis() -> AsyncIterator[FakeAsyncRedis]:
    """Fake Redis for store tests without a running server."""
    client = FakeAsyncRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()
