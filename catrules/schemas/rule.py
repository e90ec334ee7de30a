"""Rule API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from catrules.models.rule import ConditionSet, RuleMetadata


class RuleCreate(BaseModel):
    """Schema for creating a new rule."""

    name: str = Field(..., min_length=1, max_length=100, description="Rule name")
    description: str = Field(default="", max_length=500, description="Rule description")
    category_id: str = Field(..., min_length=1, description="Target category")
    conditions: ConditionSet = Field(..., description="Condition set")
    priority: int = Field(default=0, description="Rule priority (higher runs first)")
    enabled: bool = Field(default=True, description="Whether rule is active")
    created_by: str = Field(default="system", min_length=1, description="Owner of the rule")


class RuleUpdate(BaseModel):
    """Schema for updating an existing rule.

    Omitted fields keep their stored value. An explicit null is rejected
    because none of the stored fields are nullable.
    """

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    conditions: ConditionSet | None = None
    priority: int | None = None
    enabled: bool | None = None

    @field_validator("name", "description", "conditions", "priority", "enabled", mode="before")
    @classmethod
    def reject_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("Field may be omitted but not set to null")
        return value


class RuleStatusUpdate(BaseModel):
    """Schema for updating rule enabled status."""

    enabled: bool = Field(..., description="Whether rule is active")


class RuleResponse(BaseModel):
    """Schema for rule response."""

    rule_id: str
    name: str
    description: str
    category_id: str
    conditions: ConditionSet
    priority: int
    enabled: bool
    metadata: RuleMetadata


class RuleCreateResponse(BaseModel):
    """Schema for rule creation response."""

    rule_id: str = Field(..., description="Created rule ID")
    created_at: datetime = Field(..., description="Creation timestamp")
