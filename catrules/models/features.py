"""Feature set derived from content text."""

from enum import Enum

from pydantic import BaseModel, Field


class ContentType(str, Enum):
    """Content type detected from title and body."""

    TUTORIAL = "tutorial"
    NEWS = "news"
    REVIEW = "review"
    ANALYSIS = "analysis"
    INTERVIEW = "interview"
    ARTICLE = "article"


class Sentiment(str, Enum):
    """Coarse sentiment label."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Language(str, Enum):
    """Detected content language."""

    ENGLISH = "en"
    INDONESIAN = "id"


class FeatureSet(BaseModel):
    """Lexical and statistical signals extracted from one content item.

    Derived on demand and never persisted.
    """

    title_keywords: list[str] = Field(default_factory=list, description="Keywords from the title")
    content_keywords: list[str] = Field(default_factory=list, description="Keywords from the body")
    content_type: ContentType = Field(default=ContentType.ARTICLE, description="Detected content type")
    reading_time: int = Field(default=0, ge=0, description="Estimated reading time in minutes")
    word_count: int = Field(default=0, ge=0, description="Number of words in the body")
    sentiment: Sentiment = Field(default=Sentiment.NEUTRAL, description="Detected sentiment")
    language: Language = Field(default=Language.ENGLISH, description="Detected language")
    topics: list[str] = Field(default_factory=list, description="Most frequent content words")

    @property
    def all_keywords(self) -> list[str]:
        """Title keywords followed by content keywords."""
        return [*self.title_keywords, *self.content_keywords]
