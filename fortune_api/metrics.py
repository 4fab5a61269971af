# fortune_api/metrics.py
"""
Prometheus metrics for the fortune service.

Metrics are organized by component:
- Store: in-memory operations and collection size
- Secondary store: Redis calls and failures
"""

from prometheus_client import Counter, Gauge

# ============================================================================
# STORE METRICS
# ============================================================================

fortune_store_operations_total = Counter(
    "fortune_store_operations_total",
    "Store operations by outcome",
    ["operation", "outcome"],  # list/get/create/random, hit/miss
)

fortune_store_size = Gauge(
    "fortune_store_size", "Number of fortunes currently held in memory"
)

# ============================================================================
# SECONDARY STORE METRICS
# ============================================================================

fortune_secondary_operations_total = Counter(
    "fortune_secondary_operations_total",
    "Redis operations issued by the store",
    ["operation", "status"],  # get/set/keys, success/miss/error
)

fortune_secondary_available = Gauge(
    "fortune_secondary_available",
    "1 when the store mirrors to Redis, 0 when running memory-only",
)
