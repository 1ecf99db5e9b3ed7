"""Prometheus metrics for formchat.

Tracks turn throughput and latency, per-phase timing, field capture
and session store health.
"""

from prometheus_client import Counter, Gauge, Histogram

# Turn metrics
TURN_COUNT = Counter(
    "formchat_turn_count_total",
    "Total number of dialogue turns processed",
    labelnames=["form", "outcome"],
)

TURN_LATENCY = Histogram(
    "formchat_turn_latency_seconds",
    "End-to-end turn latency in seconds",
    labelnames=["form"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

PHASE_LATENCY = Histogram(
    "formchat_phase_latency_seconds",
    "Latency of individual turn phases",
    labelnames=["phase"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

# Reasoning call metrics
REASONING_FALLBACKS = Counter(
    "formchat_reasoning_fallbacks_total",
    "Reason phase calls that fell back to the placeholder analysis",
    labelnames=["reason"],
)

# Field capture metrics
FIELDS_EXTRACTED = Counter(
    "formchat_fields_extracted_total",
    "Form fields filled, by field name and capture source",
    labelnames=["field", "source"],
)

# Session metrics
ACTIVE_SESSIONS = Gauge(
    "formchat_active_sessions",
    "Number of sessions held by the in-memory store",
)

SESSIONS_EVICTED = Counter(
    "formchat_sessions_evicted_total",
    "Sessions evicted from the in-memory store",
    labelnames=["cause"],
)

# Error metrics
ERRORS = Counter(
    "formchat_errors_total",
    "Total number of errors surfaced to callers",
    labelnames=["error_type"],
)
