"""Prometheus metrics for sync activity, store health and command outcomes"""

from prometheus_client import Counter, Histogram

# Sync metrics
snapshot_counter = Counter(
    "business_manager_snapshots_total",
    "Snapshots applied to the session lists",
    ["kind"],  # collections | emis
)

subscription_failure_counter = Counter(
    "business_manager_subscription_failures_total",
    "Subscriptions that ended with an error",
    ["kind"],
)

recompute_histogram = Histogram(
    "business_manager_recompute_seconds",
    "Dashboard aggregation latency",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
)

# Store metrics
store_failure_counter = Counter(
    "business_manager_store_failures_total",
    "Failed record store operations",
    ["operation"],  # create | update | delete | subscribe | profile
)

# Identity provider metrics
identity_failure_counter = Counter(
    "business_manager_identity_failures_total",
    "Identity provider calls that failed",
    ["operation", "code"],
)

# Command metrics
command_counter = Counter(
    "business_manager_commands_total",
    "Commands handled",
    ["command", "outcome"],  # ok | failed
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_command(command: str, ok: bool) -> None:
    """Record command outcome for monitoring failure rates"""
    command_counter.labels(command=command, outcome="ok" if ok else "failed").inc()
