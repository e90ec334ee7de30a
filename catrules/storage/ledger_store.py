"""Execution ledger storage operations."""

from datetime import datetime

from redis.asyncio import Redis

from catrules.models.execution import LedgerEntry
from catrules.storage.redis_client import RedisKeys, get_redis, to_millis


class LedgerStore:
    """Append-only execution ledger using Redis Sorted Sets.

    Each entry is a hash; global, per-rule and per-content sorted sets are
    scored by execution time in milliseconds.
    """

    def __init__(self, redis: Redis | None = None):
        self._redis = redis

    @property
    def redis(self) -> Redis:
        return self._redis or get_redis()

    async def append(self, entry: LedgerEntry) -> None:
        """Append an entry to the ledger.

        Args:
            entry: Ledger entry to store
        """
        score = to_millis(entry.executed_at)
        await self.redis.hset(
            RedisKeys.ledger_entry(entry.entry_id),
            mapping={
                "data": entry.model_dump_json(),
                "rule_id": entry.rule_id,
                "content_id": entry.content_id,
            },
        )
        await self.redis.zadd(RedisKeys.LEDGER_ALL, {entry.entry_id: score})
        await self.redis.zadd(RedisKeys.ledger_rule(entry.rule_id), {entry.entry_id: score})
        await self.redis.zadd(RedisKeys.ledger_content(entry.content_id), {entry.entry_id: score})

    async def get(self, entry_id: str) -> LedgerEntry | None:
        data = await self.redis.hget(RedisKeys.ledger_entry(entry_id), "data")
        if not data:
            return None
        return LedgerEntry.model_validate_json(data)

    async def recent_for_rule(self, rule_id: str, limit: int) -> list[LedgerEntry]:
        """Get the most recent entries of a rule, newest first.

        Args:
            rule_id: Rule ID
            limit: Maximum number of entries

        Returns:
            Ledger entries
        """
        if limit <= 0:
            return []
        entry_ids = await self.redis.zrevrange(RedisKeys.ledger_rule(rule_id), 0, limit - 1)
        return await self._get_many(entry_ids)

    async def count_for_rule(self, rule_id: str) -> int:
        return await self.redis.zcard(RedisKeys.ledger_rule(rule_id))

    async def list_entries(
        self,
        rule_id: str | None = None,
        content_id: str | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[LedgerEntry], int]:
        """List entries newest first with optional filters.

        Args:
            rule_id: Only entries of this rule
            content_id: Only entries of this content item
            offset: Number of entries to skip
            limit: Page size

        Returns:
            Tuple of (page of entries, total matching entries)
        """
        if rule_id:
            entry_ids = await self.redis.zrevrange(RedisKeys.ledger_rule(rule_id), 0, -1)
            if content_id:
                content_ids = set(await self.redis.zrange(RedisKeys.ledger_content(content_id), 0, -1))
                entry_ids = [entry_id for entry_id in entry_ids if entry_id in content_ids]
        elif content_id:
            entry_ids = await self.redis.zrevrange(RedisKeys.ledger_content(content_id), 0, -1)
        else:
            entry_ids = await self.redis.zrevrange(RedisKeys.LEDGER_ALL, 0, -1)

        page = entry_ids[offset:offset + limit]
        return await self._get_many(page), len(entry_ids)

    async def delete_before(self, cutoff: datetime) -> int:
        """Delete entries executed strictly before the cutoff.

        Args:
            cutoff: Retention cutoff

        Returns:
            Number of deleted entries
        """
        entry_ids = await self.redis.zrangebyscore(
            RedisKeys.LEDGER_ALL,
            "-inf",
            f"({to_millis(cutoff)}",
        )
        for entry_id in entry_ids:
            await self._remove(entry_id)
        return len(entry_ids)

    async def delete_for_rule(self, rule_id: str) -> int:
        """Delete every entry recorded for a rule.

        Args:
            rule_id: Rule ID

        Returns:
            Number of deleted entries
        """
        entry_ids = await self.redis.zrange(RedisKeys.ledger_rule(rule_id), 0, -1)
        for entry_id in entry_ids:
            await self._remove(entry_id)
        await self.redis.delete(RedisKeys.ledger_rule(rule_id))
        return len(entry_ids)

    async def _remove(self, entry_id: str) -> None:
        key = RedisKeys.ledger_entry(entry_id)
        rule_id, content_id = await self.redis.hmget(key, ["rule_id", "content_id"])
        if rule_id:
            await self.redis.zrem(RedisKeys.ledger_rule(rule_id), entry_id)
        if content_id:
            await self.redis.zrem(RedisKeys.ledger_content(content_id), entry_id)
        await self.redis.zrem(RedisKeys.LEDGER_ALL, entry_id)
        await self.redis.delete(key)

    async def _get_many(self, entry_ids: list[str]) -> list[LedgerEntry]:
        entries = []
        for entry_id in entry_ids:
            entry = await self.get(entry_id)
            if entry:
                entries.append(entry)
        return entries
