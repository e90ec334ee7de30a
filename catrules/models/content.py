"""Content and category records consumed from the CMS."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class ContentRecord(BaseModel):
    """A post or article as seen by the rule engine."""

    content_id: str = Field(..., description="Content unique identifier")
    title: str = Field(default="", description="Content title")
    body: str = Field(default="", description="Content body text")
    excerpt: str = Field(default="", description="Short excerpt")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    category_id: str | None = Field(default=None, description="Assigned category, if any")


class Category(BaseModel):
    """A category content can be assigned to."""

    category_id: str = Field(..., description="Category unique identifier")
    name: str = Field(..., description="Category display name")
    slug: str = Field(default="", description="URL slug")
