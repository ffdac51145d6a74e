# ============================================================================
# METRICS MODULE
# ============================================================================
# STATUS: Metrics - Sink and exposition
# PURPOSE: The only output boundary of the probing core
# ============================================================================
"""
Metrics Module

- MetricsSink: protocol every record is emitted through
- PrometheusSink: prometheus_client-backed sink
- start_metrics_server: aiohttp /metrics and /livez
"""

from metrics.sink import LATENCY_BUCKETS_MS, MetricsSink, PrometheusSink

__all__ = [
    "LATENCY_BUCKETS_MS",
    "MetricsSink",
    "PrometheusSink",
]
