"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "CategoryRules"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Redis
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )

    # Auto-categorization scheduler
    scheduler_enabled: bool = Field(
        default=True,
        description="Run the auto-categorization job in the worker process",
    )
    scheduler_interval_seconds: int = Field(
        default=3600,
        ge=1,
        description="Seconds between auto-categorization runs",
    )
    scheduler_lookback_hours: int = Field(
        default=24,
        ge=1,
        description="Only content created within this many hours is picked up",
    )
    auto_assign_threshold: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Confidence a match must exceed to be auto-assigned",
    )

    # Rule execution
    run_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Deadline for evaluating all rules against one content item",
    )
    slow_rule_threshold_ms: int = Field(
        default=250,
        ge=0,
        description="Rule evaluations slower than this are logged",
    )

    # Execution ledger
    ledger_retention_days: int = Field(
        default=30,
        ge=1,
        description="Ledger entries older than this are pruned",
    )
    ledger_cleanup_interval_seconds: int = Field(
        default=86400,
        ge=60,
        description="Seconds between ledger retention runs",
    )
    statistics_window: int = Field(
        default=100,
        ge=1,
        description="Number of most recent ledger entries used for statistics",
    )
    statistics_recent_count: int = Field(
        default=10,
        ge=0,
        description="Number of ledger entries echoed back in statistics",
    )
    statistics_success_threshold: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Confidence an execution must exceed to count as successful",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
