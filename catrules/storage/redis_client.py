"""Redis client management."""

import redis.asyncio as redis
from redis.asyncio import Redis

from catrules.core.config import get_settings

# Global connection pool
_pool: redis.ConnectionPool | None = None


async def init_redis_pool() -> None:
    """Initialize Redis connection pool."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = redis.ConnectionPool.from_url(
            settings.redis_url,
            decode_responses=True,
            max_connections=20,
        )


async def close_redis_pool() -> None:
    """Close Redis connection pool."""
    global _pool
    if _pool is not None:
        await _pool.disconnect()
        _pool = None


def get_redis() -> Redis:
    """Get Redis client from pool.

    Raises:
        RuntimeError: If pool not initialized
    """
    if _pool is None:
        raise RuntimeError("Redis pool not initialized. Call init_redis_pool() first.")
    return redis.Redis(connection_pool=_pool)


class RedisKeys:
    """Redis key patterns."""

    # Rules
    RULE_DETAIL = "catrules:rules:detail:{rule_id}"
    RULE_ALL = "catrules:rules:all"
    RULE_CATEGORY = "catrules:rules:category:{category_id}"
    RULE_SEQUENCE = "catrules:rules:sequence"

    # Ledger
    LEDGER_ENTRY = "catrules:ledger:entry:{entry_id}"
    LEDGER_ALL = "catrules:ledger:all"
    LEDGER_RULE = "catrules:ledger:rule:{rule_id}"
    LEDGER_CONTENT = "catrules:ledger:content:{content_id}"

    # Content collaborator
    CONTENT_DETAIL = "cms:content:detail:{content_id}"
    CONTENT_UNCATEGORIZED = "cms:content:uncategorized"
    CATEGORY_DETAIL = "cms:category:detail:{category_id}"

    @classmethod
    def rule_detail(cls, rule_id: str) -> str:
        return cls.RULE_DETAIL.format(rule_id=rule_id)

    @classmethod
    def rule_category(cls, category_id: str) -> str:
        return cls.RULE_CATEGORY.format(category_id=category_id)

    @classmethod
    def ledger_entry(cls, entry_id: str) -> str:
        return cls.LEDGER_ENTRY.format(entry_id=entry_id)

    @classmethod
    def ledger_rule(cls, rule_id: str) -> str:
        return cls.LEDGER_RULE.format(rule_id=rule_id)

    @classmethod
    def ledger_content(cls, content_id: str) -> str:
        return cls.LEDGER_CONTENT.format(content_id=content_id)

    @classmethod
    def content_detail(cls, content_id: str) -> str:
        return cls.CONTENT_DETAIL.format(content_id=content_id)

    @classmethod
    def category_detail(cls, category_id: str) -> str:
        return cls.CATEGORY_DETAIL.format(category_id=category_id)


def to_millis(value) -> int:
    """Convert a datetime to a sorted-set score in epoch milliseconds."""
    return int(value.timestamp() * 1000)
