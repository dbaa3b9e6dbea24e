"""Prometheus metrics declarations.

All metrics are declared statically at module level.
Labels use ONLY static enumerations, never todo ids or subscriber ids.
"""

from prometheus_client import Counter, Gauge

# ── Mutation metrics ──────────────────────────────────────────────

TODO_MUTATIONS_TOTAL = Counter(
    "todo_mutations_total",
    "Total store mutations by operation and outcome",
    ["operation", "outcome"],
)

# ── Push channel metrics ──────────────────────────────────────────

TODO_SUBSCRIBERS = Gauge(
    "todo_subscribers",
    "Currently registered push subscribers",
)

TODO_BROADCASTS_TOTAL = Counter(
    "todo_broadcasts_total",
    "Total snapshot fan-outs",
)

TODO_DELIVERY_FAILURES_TOTAL = Counter(
    "todo_delivery_failures_total",
    "Snapshot deliveries that failed or timed out",
)
