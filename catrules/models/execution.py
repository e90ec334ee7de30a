"""Execution record domain models."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class MatchDetails(BaseModel):
    """Per-clause match details of one rule evaluation."""

    keyword_matches: list[str] | None = Field(default=None, description="Rule keywords that were found")
    pattern_matches: list[str] | None = Field(default=None, description="Title patterns that were found")
    content_type_match: bool | None = None
    reading_time_match: bool | None = None
    word_count_match: bool | None = None


class ExecutionResult(BaseModel):
    """Outcome of evaluating one rule against one content item."""

    rule_id: str = Field(..., description="Rule that was evaluated")
    content_id: str = Field(default="", description="Content that was evaluated")
    matched: bool = Field(..., description="Whether any clause matched")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0, description="Weighted average confidence")
    matched_conditions: list[str] = Field(
        default_factory=list,
        description="Clause types that contributed, in evaluation order",
    )
    details: MatchDetails = Field(default_factory=MatchDetails)
    execution_time_ms: float = Field(default=0.0, ge=0.0, description="Evaluation wall time")


class RuleFailure(BaseModel):
    """A rule that could not be evaluated during a run."""

    rule_id: str
    error: str = Field(..., description="Error message")
    error_type: str = Field(default="", description="Exception class name")


class RuleRunReport(BaseModel):
    """All rules evaluated against one content item."""

    content_id: str
    results: list[ExecutionResult] = Field(
        default_factory=list,
        description="Matching results in rule priority order",
    )
    failures: list[RuleFailure] = Field(default_factory=list)
    rules_evaluated: int = Field(default=0, ge=0)
    elapsed_ms: float = Field(default=0.0, ge=0.0)


class LedgerEntry(BaseModel):
    """Persisted record of a matching execution result."""

    entry_id: str = Field(..., description="Ledger entry identifier")
    rule_id: str
    content_id: str
    result: ExecutionResult
    confidence: float = Field(..., ge=0.0, le=1.0)
    executed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RuleStatistics(BaseModel):
    """Aggregates over the most recent ledger entries of a rule."""

    rule_id: str
    total_executions: int = Field(default=0, ge=0)
    successful_executions: int = Field(default=0, ge=0)
    success_rate: float = Field(default=0.0, ge=0.0, le=100.0, description="Percentage of successful executions")
    average_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    recent_executions: list[LedgerEntry] = Field(default_factory=list)


class CategoryAssignment(BaseModel):
    """A category committed onto content by the auto-categorizer."""

    content_id: str
    rule_id: str
    category_id: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    candidates: list[str] = Field(
        default_factory=list,
        description="Lower-priority rules that also cleared the threshold",
    )


class BatchReport(BaseModel):
    """Outcome of one auto-categorization batch."""

    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    selected: int = Field(default=0, ge=0, description="Uncategorized items picked up")
    processed: int = Field(default=0, ge=0, description="Items evaluated without error")
    skipped: int = Field(default=0, ge=0, description="Items left uncategorized")
    failed: list[str] = Field(default_factory=list, description="Items whose processing raised")
    assignments: list[CategoryAssignment] = Field(default_factory=list)
