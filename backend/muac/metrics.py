from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

REQUESTS_TOTAL = Counter(
    "requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
SEED_RUNS_TOTAL = Counter(
    "seed_runs_total",
    "Seed orchestrator runs",
    ["mode", "outcome"],
)
RECONCILE_FAILURES_TOTAL = Counter(
    "seed_reconcile_failures_total",
    "Reference categories that failed to reconcile",
    ["category"],
)
CLEANUP_FAILURES_TOTAL = Counter(
    "seed_cleanup_failures_total",
    "Tables that failed to clear during seed cleanup",
    ["table"],
)


__all__ = [
    "CONTENT_TYPE_LATEST",
    "REQUESTS_TOTAL",
    "SEED_RUNS_TOTAL",
    "RECONCILE_FAILURES_TOTAL",
    "CLEANUP_FAILURES_TOTAL",
    "generate_latest",
]
