"""Content and category storage shared with the CMS."""

from datetime import datetime

from redis.asyncio import Redis

from catrules.core.errors import NotFoundError
from catrules.models.content import Category, ContentRecord
from catrules.storage.redis_client import RedisKeys, get_redis, to_millis


class ContentStore:
    """Content records stored in Redis.

    Uncategorized content is tracked in a sorted set scored by creation time.
    """

    def __init__(self, redis: Redis | None = None):
        self._redis = redis

    @property
    def redis(self) -> Redis:
        return self._redis or get_redis()

    async def save(self, record: ContentRecord) -> ContentRecord:
        """Insert or replace a content record.

        Args:
            record: Content record

        Returns:
            Stored record
        """
        await self.redis.hset(
            RedisKeys.content_detail(record.content_id),
            mapping={"data": record.model_dump_json()},
        )
        if record.category_id:
            await self.redis.zrem(RedisKeys.CONTENT_UNCATEGORIZED, record.content_id)
        else:
            await self.redis.zadd(
                RedisKeys.CONTENT_UNCATEGORIZED,
                {record.content_id: to_millis(record.created_at)},
            )
        return record

    async def get(self, content_id: str) -> ContentRecord | None:
        data = await self.redis.hget(RedisKeys.content_detail(content_id), "data")
        if not data:
            return None
        return ContentRecord.model_validate_json(data)

    async def list_uncategorized_since(self, since: datetime) -> list[str]:
        """Get ids of uncategorized content created at or after ``since``, oldest first."""
        return await self.redis.zrangebyscore(
            RedisKeys.CONTENT_UNCATEGORIZED,
            to_millis(since),
            "+inf",
        )

    async def set_category(self, content_id: str, category_id: str) -> None:
        """Assign a category to a content record.

        Raises:
            NotFoundError: If the content does not exist
        """
        record = await self.get(content_id)
        if not record:
            raise NotFoundError("content", content_id)
        record.category_id = category_id
        await self.save(record)


class CategoryStore:
    """Category records stored in Redis."""

    def __init__(self, redis: Redis | None = None):
        self._redis = redis

    @property
    def redis(self) -> Redis:
        return self._redis or get_redis()

    async def save(self, category: Category) -> Category:
        await self.redis.hset(
            RedisKeys.category_detail(category.category_id),
            mapping={"data": category.model_dump_json()},
        )
        return category

    async def get(self, category_id: str) -> Category | None:
        data = await self.redis.hget(RedisKeys.category_detail(category_id), "data")
        if not data:
            return None
        return Category.model_validate_json(data)

    async def exists(self, category_id: str) -> bool:
        return await self.redis.exists(RedisKeys.category_detail(category_id)) > 0
