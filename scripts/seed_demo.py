#!/usr/bin/env python3
"""Seed demo categories, content and rules into Redis.

Used for end-to-end checks of the API and the auto-categorization worker.
"""

import asyncio
import sys
import uuid
from datetime import datetime, timedelta, timezone

from redis.asyncio import Redis

from catrules.models.content import Category, ContentRecord
from catrules.models.rule import ConditionSet, Rule, RuleMetadata
from catrules.storage.content_store import CategoryStore, ContentStore
from catrules.storage.rule_store import RuleStore

CATEGORIES = [
    Category(category_id="cat_baking", name="Baking", slug="baking"),
    Category(category_id="cat_tech", name="Technology", slug="technology"),
]

RULES = [
    {
        "name": "Baking tutorials",
        "category_id": "cat_baking",
        "priority": 50,
        "conditions": {
            "keywords": ["bread", "dough", "oven"],
            "minimumMatches": 1,
            "contentType": ["tutorial"],
            "confidence": 0.95,
        },
    },
    {
        "name": "Tech news",
        "category_id": "cat_tech",
        "priority": 10,
        "conditions": {
            "keywords": ["python", "software", "release"],
            "minimumMatches": 2,
            "confidence": 0.9,
        },
    },
]

CONTENT = [
    ("How to Bake Sourdough Bread", "Mix flour and water, knead the dough and bake it in a hot oven. " * 20),
    ("Python release announcement", "The new software release of Python ships faster startup. " * 30),
    ("Weekend plans", "We went hiking in the hills and had lunch by the lake."),
]


async def seed(redis_url: str) -> None:
    """Write the demo data set.

    Args:
        redis_url: Redis connection URL
    """
    redis = Redis.from_url(redis_url, decode_responses=True)
    rules = RuleStore(redis)
    contents = ContentStore(redis)
    categories = CategoryStore(redis)

    print(f"Connected to Redis: {redis_url}")
    print("=" * 60)

    try:
        for category in CATEGORIES:
            await categories.save(category)
            print(f"+ category {category.category_id} ({category.name})")

        for definition in RULES:
            rule = await rules.create(
                Rule(
                    rule_id=f"rule_{datetime.now(timezone.utc).strftime('%Y%m%d')}_{uuid.uuid4().hex[:8]}",
                    name=definition["name"],
                    category_id=definition["category_id"],
                    priority=definition["priority"],
                    conditions=ConditionSet.model_validate(definition["conditions"]),
                    metadata=RuleMetadata(created_by="seed"),
                )
            )
            print(f"+ rule {rule.rule_id} -> {rule.category_id} (priority {rule.priority})")

        now = datetime.now(timezone.utc)
        for i, (title, body) in enumerate(CONTENT):
            record = await contents.save(
                ContentRecord(
                    content_id=f"post_{uuid.uuid4().hex[:8]}",
                    title=title,
                    body=body,
                    created_at=now - timedelta(minutes=10 * (i + 1)),
                )
            )
            print(f"+ content {record.content_id}: {title}")

        print("=" * 60)
        print("Done. Trigger a batch with: curl -X POST localhost:8000/api/v1/scheduler/run")
    finally:
        await redis.aclose()


def main():
    redis_url = "redis://localhost:6379/0"

    if len(sys.argv) > 1:
        if sys.argv[1] in ["-h", "--help"]:
            print("Usage:")
            print(f"  {sys.argv[0]} [REDIS_URL]")
            return
        redis_url = sys.argv[1]

    asyncio.run(seed(redis_url))


if __name__ == "__main__":
    main()
