"""Execution ledger API schemas."""

from pydantic import BaseModel, Field


class PruneResponse(BaseModel):
    """Schema for ledger pruning response."""

    days_to_keep: int = Field(..., description="Retention window that was applied")
    deleted: int = Field(..., ge=0, description="Number of deleted entries")
