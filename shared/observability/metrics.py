"""
Prometheus metrics configuration and utilities.

Counters for model calls, response cache hits and pipeline outcomes.
"""

from prometheus_client import REGISTRY as DEFAULT_REGISTRY
from prometheus_client import Counter, Gauge, generate_latest

# Model Access Metrics
llm_calls_total = Counter(
    "llm_calls_total",
    "Provider generation calls",
    ["provider", "status"],
)

llm_cache_hits_total = Counter(
    "llm_cache_hits_total",
    "Response cache hits",
    ["kind"],
)


# Pipeline Metrics
pipeline_days_total = Counter(
    "pipeline_days_total",
    "Days processed by outcome",
    ["outcome"],
)

pipeline_items_persisted_total = Counter(
    "pipeline_items_persisted_total",
    "Events and tasks inserted by the pipeline",
    ["item_type"],
)

pipeline_running = Gauge(
    "pipeline_running",
    "Whether the background pipeline loop is running (0/1)",
)


def get_metrics() -> bytes:
    """
    Get current metrics in Prometheus format.

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(DEFAULT_REGISTRY)
