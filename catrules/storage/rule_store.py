"""Rule storage operations."""

from datetime import datetime, timezone

from redis.asyncio import Redis

from catrules.models.rule import Rule, priority_order
from catrules.storage.redis_client import RedisKeys, get_redis, to_millis


class RuleStore:
    """Rule storage operations using Redis.

    Rules are kept as JSON in a hash per rule. Index sorted sets are scored by
    the rule's creation sequence so reads preserve insertion order.
    """

    def __init__(self, redis: Redis | None = None):
        self._redis = redis

    @property
    def redis(self) -> Redis:
        return self._redis or get_redis()

    async def create(self, rule: Rule) -> Rule:
        """Create a new rule and assign its creation sequence.

        Args:
            rule: Rule to create

        Returns:
            Created rule
        """
        rule.sequence = await self.redis.incr(RedisKeys.RULE_SEQUENCE)
        await self._write(rule)

        await self.redis.zadd(RedisKeys.RULE_ALL, {rule.rule_id: rule.sequence})
        await self.redis.zadd(RedisKeys.rule_category(rule.category_id), {rule.rule_id: rule.sequence})
        return rule

    async def get(self, rule_id: str) -> Rule | None:
        """Get a rule by ID.

        Args:
            rule_id: Rule ID

        Returns:
            Rule if found, None otherwise
        """
        data = await self.redis.hget(RedisKeys.rule_detail(rule_id), "config")
        if not data:
            return None
        return Rule.model_validate_json(data)

    async def update(self, rule_id: str, rule: Rule) -> Rule | None:
        """Update an existing rule.

        Creation sequence and timestamp are preserved; the version is bumped.

        Args:
            rule_id: Rule ID to update
            rule: Updated rule data

        Returns:
            Updated rule if found, None otherwise
        """
        existing = await self.get(rule_id)
        if not existing:
            return None

        rule.rule_id = rule_id
        rule.sequence = existing.sequence
        rule.metadata.created_at = existing.metadata.created_at
        rule.metadata.updated_at = datetime.now(timezone.utc)
        rule.metadata.version = existing.metadata.version + 1

        if existing.category_id != rule.category_id:
            await self.redis.zrem(RedisKeys.rule_category(existing.category_id), rule_id)
            await self.redis.zadd(RedisKeys.rule_category(rule.category_id), {rule_id: rule.sequence})

        await self._write(rule)
        return rule

    async def delete(self, rule_id: str) -> bool:
        """Delete a rule permanently.

        Args:
            rule_id: Rule ID to delete

        Returns:
            True if deleted, False if not found
        """
        existing = await self.get(rule_id)
        if not existing:
            return False

        await self.redis.zrem(RedisKeys.rule_category(existing.category_id), rule_id)
        await self.redis.zrem(RedisKeys.RULE_ALL, rule_id)
        await self.redis.delete(RedisKeys.rule_detail(rule_id))
        return True

    async def list_all(self) -> list[Rule]:
        """List all rules in creation order."""
        rule_ids = await self.redis.zrange(RedisKeys.RULE_ALL, 0, -1)
        return await self._get_many(rule_ids)

    async def list_by_category(self, category_id: str, include_disabled: bool = False) -> list[Rule]:
        """List rules targeting a category.

        Args:
            category_id: Target category
            include_disabled: Also return disabled rules

        Returns:
            Rules sorted by priority descending, then creation order
        """
        rule_ids = await self.redis.zrange(RedisKeys.rule_category(category_id), 0, -1)
        rules = await self._get_many(rule_ids)
        if not include_disabled:
            rules = [rule for rule in rules if rule.enabled]
        return sorted(rules, key=priority_order)

    async def list_active(self) -> list[Rule]:
        """List enabled rules, priority descending then creation order."""
        rules = [rule for rule in await self.list_all() if rule.enabled]
        return sorted(rules, key=priority_order)

    async def set_enabled(self, rule_id: str, enabled: bool) -> Rule | None:
        """Set rule enabled status.

        Args:
            rule_id: Rule ID
            enabled: New enabled status

        Returns:
            Updated rule, or None if not found
        """
        rule = await self.get(rule_id)
        if not rule:
            return None

        rule.enabled = enabled
        rule.metadata.updated_at = datetime.now(timezone.utc)
        await self._write(rule)
        return rule

    async def _get_many(self, rule_ids: list[str]) -> list[Rule]:
        rules = []
        for rule_id in rule_ids:
            rule = await self.get(rule_id)
            if rule:
                rules.append(rule)
        return rules

    async def _write(self, rule: Rule) -> None:
        await self.redis.hset(
            RedisKeys.rule_detail(rule.rule_id),
            mapping={
                "config": rule.model_dump_json(),
                "enabled": str(rule.enabled).lower(),
                "version": str(rule.metadata.version),
                "updated_at": str(to_millis(rule.metadata.updated_at)),
            },
        )
