"""Rule domain models."""

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, model_validator

from catrules.models.features import ContentType

# Canonical evaluation order; matched_conditions are reported in this order.
CLAUSE_ORDER = ("keywords", "title_patterns", "content_type", "reading_time", "word_count")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KeywordsClause(BaseModel):
    """Match rule keywords inside extracted title/content keywords."""

    type: Literal["keywords"] = "keywords"
    keywords: list[str] = Field(..., min_length=1, description="Keywords to look for")
    minimum_matches: int = Field(
        default=1,
        ge=1,
        description="Number of distinct rule keywords that must be found",
    )


class TitlePatternsClause(BaseModel):
    """Match substrings against extracted title keywords."""

    type: Literal["title_patterns"] = "title_patterns"
    patterns: list[str] = Field(..., min_length=1, description="Title substrings")


class ContentTypeClause(BaseModel):
    """Match the detected content type against an allowed set."""

    type: Literal["content_type"] = "content_type"
    content_types: list[ContentType] = Field(..., min_length=1, description="Allowed content types")


class _RangeClause(BaseModel):
    min: int | None = Field(default=None, ge=0, description="Inclusive lower bound")
    max: int | None = Field(default=None, ge=0, description="Inclusive upper bound")

    @model_validator(mode="after")
    def validate_bounds(self) -> "_RangeClause":
        """Reject inverted ranges."""
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"{self.type} range min ({self.min}) exceeds max ({self.max})")
        return self

    def contains(self, value: int) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True


class ReadingTimeClause(_RangeClause):
    """Reading time in minutes within an inclusive range."""

    type: Literal["reading_time"] = "reading_time"


class WordCountClause(_RangeClause):
    """Word count within an inclusive range."""

    type: Literal["word_count"] = "word_count"


ConditionClause = Annotated[
    Union[
        KeywordsClause,
        TitlePatternsClause,
        ContentTypeClause,
        ReadingTimeClause,
        WordCountClause,
    ],
    Field(discriminator="type"),
]

# Flat condition keys accepted for rules authored as a single object
_FLAT_KEYS = {
    "keywords": "keywords",
    "titlePatterns": "title_patterns",
    "title_patterns": "title_patterns",
    "contentType": "content_type",
    "content_type": "content_type",
    "readingTime": "reading_time",
    "reading_time": "reading_time",
    "wordCount": "word_count",
    "word_count": "word_count",
}


class ConditionSet(BaseModel):
    """Weighted condition clauses attached to a rule."""

    confidence: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Base confidence each matching clause is weighted against",
    )
    clauses: list[ConditionClause] = Field(
        default_factory=list,
        description="Condition clauses, at most one per type",
    )

    @model_validator(mode="before")
    @classmethod
    def convert_flat_conditions(cls, data: Any) -> Any:
        """Accept ``{"keywords": [...], "minimumMatches": 2, "confidence": 0.9, ...}``."""
        if not isinstance(data, dict) or "clauses" in data:
            return data

        clauses: list[dict[str, Any]] = []
        seen: set[str] = set()
        for key, clause_type in _FLAT_KEYS.items():
            value = data.get(key)
            if value is None or clause_type in seen:
                continue
            seen.add(clause_type)

            if clause_type == "keywords":
                if not value:
                    continue
                minimum = data.get("minimumMatches", data.get("minimum_matches"))
                clause: dict[str, Any] = {"type": clause_type, "keywords": value}
                if minimum is not None:
                    clause["minimum_matches"] = minimum
            elif clause_type == "title_patterns":
                if not value:
                    continue
                clause = {"type": clause_type, "patterns": value}
            elif clause_type == "content_type":
                if not value:
                    continue
                clause = {"type": clause_type, "content_types": value}
            else:
                if not isinstance(value, dict):
                    raise ValueError(f"{key} must be an object with optional min and max")
                clause = {"type": clause_type, **value}
            clauses.append(clause)

        converted: dict[str, Any] = {"clauses": clauses}
        if "confidence" in data:
            converted["confidence"] = data["confidence"]
        return converted

    @model_validator(mode="after")
    def normalize_clauses(self) -> "ConditionSet":
        """Reject duplicate clause types and sort into evaluation order."""
        types = [clause.type for clause in self.clauses]
        duplicates = sorted({t for t in types if types.count(t) > 1})
        if duplicates:
            raise ValueError(f"Duplicate condition clauses: {', '.join(duplicates)}")
        self.clauses.sort(key=lambda clause: CLAUSE_ORDER.index(clause.type))
        return self

    def get(self, clause_type: str) -> Any | None:
        """Return the clause of the given type, if present."""
        for clause in self.clauses:
            if clause.type == clause_type:
                return clause
        return None


class RuleMetadata(BaseModel):
    """Rule metadata."""

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    created_by: str = Field(default="system")
    version: int = Field(default=1)


class Rule(BaseModel):
    """Categorization rule."""

    rule_id: str = Field(..., description="Rule unique identifier")
    name: str = Field(..., description="Rule name")
    description: str = Field(default="", description="Rule description")
    category_id: str = Field(..., description="Category assigned when the rule matches")
    conditions: ConditionSet = Field(..., description="Condition set")
    priority: int = Field(default=0, description="Rule priority (higher runs first)")
    enabled: bool = Field(default=True, description="Whether rule is active")
    sequence: int = Field(default=0, ge=0, description="Creation order, assigned by the store")
    metadata: RuleMetadata = Field(
        default_factory=RuleMetadata,
        description="Rule metadata",
    )


def priority_order(rule: Rule) -> tuple[int, int]:
    """Sort key: priority descending, then creation order."""
    return (-rule.priority, rule.sequence)
