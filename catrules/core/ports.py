"""Ports (interfaces) the rule engine depends on.

The orchestrator, scheduler and ledger service only talk to these
protocols, so Redis-backed stores and in-memory fakes are interchangeable.
"""

from datetime import datetime
from typing import Protocol

from catrules.models.content import ContentRecord
from catrules.models.execution import LedgerEntry
from catrules.models.rule import Rule


class RuleRepository(Protocol):
    """Rule definition storage."""

    async def get(self, rule_id: str) -> Rule | None:
        ...

    async def list_active(self) -> list[Rule]:
        """Enabled rules, priority descending then creation order."""
        ...


class ContentRepository(Protocol):
    """Content collaborator owned by the CMS."""

    async def get(self, content_id: str) -> ContentRecord | None:
        ...

    async def list_uncategorized_since(self, since: datetime) -> list[str]:
        ...

    async def set_category(self, content_id: str, category_id: str) -> None:
        ...


class CategoryRepository(Protocol):
    """Category collaborator owned by the CMS."""

    async def exists(self, category_id: str) -> bool:
        ...


class LedgerRepository(Protocol):
    """Append-only execution ledger."""

    async def append(self, entry: LedgerEntry) -> None:
        ...

    async def recent_for_rule(self, rule_id: str, limit: int) -> list[LedgerEntry]:
        ...

    async def list_entries(
        self,
        rule_id: str | None = None,
        content_id: str | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[LedgerEntry], int]:
        ...

    async def delete_before(self, cutoff: datetime) -> int:
        ...
