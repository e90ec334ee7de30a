"""Prometheus metrics definitions."""

from prometheus_client import Counter, Gauge, Histogram

# Rule metrics
RULES_EVALUATED = Counter(
    "catrules_rules_evaluated_total",
    "Total number of rule evaluations",
    ["rule_id"],
)

RULES_MATCHED = Counter(
    "catrules_rules_matched_total",
    "Total number of rule evaluations with at least one matching clause",
    ["rule_id"],
)

RULE_FAILURES = Counter(
    "catrules_rule_failures_total",
    "Total number of rule evaluations that failed",
    ["error_type"],
)

RULE_EVALUATION_LATENCY = Histogram(
    "catrules_rule_evaluation_seconds",
    "Rule evaluation latency in seconds",
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5),
)

# Auto-categorization metrics
SCHEDULER_RUNS = Counter(
    "catrules_scheduler_runs_total",
    "Total number of periodic job runs",
    ["job", "status"],
)

CONTENT_PROCESSED = Counter(
    "catrules_content_processed_total",
    "Content items processed by the auto-categorizer",
    ["status"],
)

CATEGORIES_ASSIGNED = Counter(
    "catrules_categories_assigned_total",
    "Categories auto-assigned to content",
    ["category_id"],
)

# Ledger metrics
LEDGER_WRITES = Counter(
    "catrules_ledger_writes_total",
    "Ledger write attempts",
    ["status"],
)

LEDGER_PRUNED = Counter(
    "catrules_ledger_pruned_total",
    "Ledger entries removed by retention",
)

ACTIVE_RULES = Gauge(
    "catrules_active_rules",
    "Number of active rules loaded by the last run",
)
