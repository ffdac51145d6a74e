# ============================================================================
# METRICS SINK
# ============================================================================
# STATUS: Metrics - Record emission
# PURPOSE: Accept MetricsRecords and fold them into Prometheus collectors
# ============================================================================
"""
Metrics Sink

The sink is the only resource mutated concurrently by sibling probe tasks.
PrometheusSink relies on prometheus_client's metric children, which are
keyed by label tuples and guarded by their own locks, so emit() needs no
extra synchronization.

Metric names and label sets follow the upstream pinger so existing
dashboards keep working:

    pinger_ovs_up / pinger_ovs_down                     {nodeName}
    pinger_ovn_controller_up / pinger_ovn_controller_down {nodeName}
    pinger_dns_healthy / pinger_dns_unhealthy           {nodeName}
    pinger_dns_latency_ms                               {nodeName}
    pinger_node_ping_latency_ms / _lost_total           {src_*, target_node_*}
    pinger_pod_ping_latency_ms / _lost_total            {src_*, target_node_*, target_pod_ip}
"""

import logging
from typing import Optional, Protocol, runtime_checkable

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest

from core.contracts import ProbeKind
from core.models import MetricsRecord

logger = logging.getLogger(__name__)

LATENCY_BUCKETS_MS = (0.25, 0.5, 1, 2, 5, 10, 30, 50, 100, 250, 500, 1000)

_NODE_PING_LABELS = (
    "src_node_name",
    "src_node_ip",
    "src_pod_ip",
    "target_node_name",
    "target_node_ip",
)
_POD_PING_LABELS = _NODE_PING_LABELS + ("target_pod_ip",)


@runtime_checkable
class MetricsSink(Protocol):
    """Receives every record the core produces. Must be thread safe."""

    def emit(self, record: MetricsRecord) -> None:
        ...


class PrometheusSink:
    """
    Sink backed by prometheus_client collectors.

    Each sink owns its CollectorRegistry so several sinks (tests, embedded
    use) never collide on metric names.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()

        # Local fabric
        self.ovs_up = Gauge("pinger_ovs_up", "If the ovs on the node is up", ["nodeName"], registry=self.registry)
        self.ovs_down = Gauge("pinger_ovs_down", "If the ovs on the node is down", ["nodeName"], registry=self.registry)
        self.controller_up = Gauge(
            "pinger_ovn_controller_up", "If the ovn_controller on the node is up", ["nodeName"], registry=self.registry
        )
        self.controller_down = Gauge(
            "pinger_ovn_controller_down", "If the ovn_controller on the node is down", ["nodeName"], registry=self.registry
        )

        # DNS
        self.dns_healthy = Gauge(
            "pinger_dns_healthy", "If the dns request is healthy on this node", ["nodeName"], registry=self.registry
        )
        self.dns_unhealthy = Gauge(
            "pinger_dns_unhealthy", "If the dns request is unhealthy on this node", ["nodeName"], registry=self.registry
        )
        self.dns_latency = Histogram(
            "pinger_dns_latency_ms",
            "The latency ms histogram the node request dns",
            ["nodeName"],
            buckets=LATENCY_BUCKETS_MS,
            registry=self.registry,
        )

        # Node / pod reachability
        self.node_ping_latency = Histogram(
            "pinger_node_ping_latency_ms",
            "The latency ms histogram for pod ping node",
            list(_NODE_PING_LABELS),
            buckets=LATENCY_BUCKETS_MS,
            registry=self.registry,
        )
        self.node_ping_lost = Counter(
            "pinger_node_ping_lost",
            "The lost count for pod ping node",
            list(_NODE_PING_LABELS),
            registry=self.registry,
        )
        self.pod_ping_latency = Histogram(
            "pinger_pod_ping_latency_ms",
            "The latency ms histogram for pod peer ping",
            list(_POD_PING_LABELS),
            buckets=LATENCY_BUCKETS_MS,
            registry=self.registry,
        )
        self.pod_ping_lost = Counter(
            "pinger_pod_ping_lost",
            "The lost count for pod peer ping",
            list(_POD_PING_LABELS),
            registry=self.registry,
        )

    def emit(self, record: MetricsRecord) -> None:
        """Fold one record into the collectors."""
        reporter = record.reporter

        if record.kind == ProbeKind.SWITCH:
            self._set_up_down(self.ovs_up, self.ovs_down, reporter.node_name, record.subsystem.up)

        elif record.kind == ProbeKind.CONTROLLER:
            self._set_up_down(self.controller_up, self.controller_down, reporter.node_name, record.subsystem.up)

        elif record.kind == ProbeKind.DNS:
            self._set_up_down(self.dns_healthy, self.dns_unhealthy, reporter.node_name, record.dns.success)
            if record.dns.success:
                self.dns_latency.labels(reporter.node_name).observe(record.dns.latency_ms)

        elif record.kind == ProbeKind.NODE_PING:
            result = record.probe
            labels = (
                reporter.node_name,
                reporter.host_ip,
                reporter.pod_ip,
                result.target.node_name,
                result.target.host_ip or result.target.address,
            )
            self.node_ping_latency.labels(*labels).observe(result.avg_rtt_ms)
            self.node_ping_lost.labels(*labels).inc(result.loss)

        elif record.kind == ProbeKind.POD_PING:
            result = record.probe
            labels = (
                reporter.node_name,
                reporter.host_ip,
                reporter.pod_ip,
                result.target.node_name,
                result.target.host_ip or "",
                result.target.address,
            )
            self.pod_ping_latency.labels(*labels).observe(result.avg_rtt_ms)
            self.pod_ping_lost.labels(*labels).inc(result.loss)

        else:
            logger.warning(f"Ignoring record of unknown kind: {record.kind}")

    @staticmethod
    def _set_up_down(up: Gauge, down: Gauge, node_name: str, is_up: bool) -> None:
        up.labels(node_name).set(1 if is_up else 0)
        down.labels(node_name).set(0 if is_up else 1)

    def render(self) -> bytes:
        """Prometheus text exposition of this sink's registry."""
        return generate_latest(self.registry)


__all__ = [
    "LATENCY_BUCKETS_MS",
    "MetricsSink",
    "PrometheusSink",
]
