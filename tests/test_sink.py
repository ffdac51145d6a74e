# ============================================================================
# METRICS SINK TESTS
# ============================================================================
# STATUS: Tests - Prometheus exposition
# PURPOSE: Verify records fold into the right collectors and labels
# ============================================================================
"""
Metrics Sink Tests

Covers:
1. Switch / controller / DNS up-down gauges
2. Node ping latency histogram and lost counter with full label set
3. Pod ping labels include the target pod address
4. Sinks are isolated from each other (own registry)
5. /metrics and /livez served by the aiohttp app

Run with:
    pytest tests/test_sink.py -v
"""

import asyncio

import pytest
from aiohttp import test_utils

from core.contracts import Subsystem
from core.models import DnsProbeResult, MetricsRecord, ProbeResult, Reporter, SubsystemStatus, Target
from metrics.server import create_app
from metrics.sink import MetricsSink, PrometheusSink


@pytest.fixture
def prom_reporter():
    return Reporter(node_name="node-a", pod_name="pinger-a", host_ip="192.168.0.1", pod_ip="10.16.0.2")


class TestPrometheusSink:

    def test_is_metrics_sink(self):
        assert isinstance(PrometheusSink(), MetricsSink)

    def test_switch_down(self, prom_reporter):
        sink = PrometheusSink()
        status = SubsystemStatus(subsystem=Subsystem.VIRTUAL_SWITCH, up=False, detail="ovsdb-server is not running")
        sink.emit(MetricsRecord.for_subsystem(status, prom_reporter))

        assert sink.registry.get_sample_value("pinger_ovs_up", {"nodeName": "node-a"}) == 0
        assert sink.registry.get_sample_value("pinger_ovs_down", {"nodeName": "node-a"}) == 1

    def test_controller_up(self, prom_reporter):
        sink = PrometheusSink()
        status = SubsystemStatus(subsystem=Subsystem.NETWORK_CONTROLLER, up=True)
        sink.emit(MetricsRecord.for_subsystem(status, prom_reporter))

        assert sink.registry.get_sample_value("pinger_ovn_controller_up", {"nodeName": "node-a"}) == 1
        assert sink.registry.get_sample_value("pinger_ovn_controller_down", {"nodeName": "node-a"}) == 0

    def test_dns_healthy_observes_latency(self, prom_reporter):
        sink = PrometheusSink()
        result = DnsProbeResult(name="kubernetes.default", success=True, addresses=["10.96.0.1"], latency_ms=3.0)
        sink.emit(MetricsRecord.for_dns(result, prom_reporter))

        labels = {"nodeName": "node-a"}
        assert sink.registry.get_sample_value("pinger_dns_healthy", labels) == 1
        assert sink.registry.get_sample_value("pinger_dns_unhealthy", labels) == 0
        assert sink.registry.get_sample_value("pinger_dns_latency_ms_count", labels) == 1
        assert sink.registry.get_sample_value("pinger_dns_latency_ms_sum", labels) == 3.0

    def test_dns_unhealthy_no_latency(self, prom_reporter):
        sink = PrometheusSink()
        result = DnsProbeResult(name="kubernetes.default", success=False, error="timeout")
        sink.emit(MetricsRecord.for_dns(result, prom_reporter))

        labels = {"nodeName": "node-a"}
        assert sink.registry.get_sample_value("pinger_dns_unhealthy", labels) == 1
        assert sink.registry.get_sample_value("pinger_dns_latency_ms_count", labels) is None

    def test_node_ping(self, prom_reporter):
        sink = PrometheusSink()
        result = ProbeResult(target=Target.node("n3", "192.168.0.13"), sent=5, received=3, avg_rtt_ms=0.9)
        sink.emit(MetricsRecord.for_probe(result, prom_reporter))
        sink.emit(MetricsRecord.for_probe(result, prom_reporter))

        labels = {
            "src_node_name": "node-a",
            "src_node_ip": "192.168.0.1",
            "src_pod_ip": "10.16.0.2",
            "target_node_name": "n3",
            "target_node_ip": "192.168.0.13",
        }
        assert sink.registry.get_sample_value("pinger_node_ping_lost_total", labels) == 4
        assert sink.registry.get_sample_value("pinger_node_ping_latency_ms_count", labels) == 2

    def test_pod_ping(self, prom_reporter):
        sink = PrometheusSink()
        target = Target.pod("pinger-b", "10.16.0.3", node_name="n2", host_ip="192.168.0.12")
        sink.emit(MetricsRecord.for_probe(ProbeResult(target=target, sent=5, received=5, avg_rtt_ms=0.2), prom_reporter))

        labels = {
            "src_node_name": "node-a",
            "src_node_ip": "192.168.0.1",
            "src_pod_ip": "10.16.0.2",
            "target_node_name": "n2",
            "target_node_ip": "192.168.0.12",
            "target_pod_ip": "10.16.0.3",
        }
        assert sink.registry.get_sample_value("pinger_pod_ping_lost_total", labels) == 0
        assert sink.registry.get_sample_value("pinger_pod_ping_latency_ms_count", labels) == 1

    def test_sinks_isolated(self, prom_reporter):
        first, second = PrometheusSink(), PrometheusSink()
        status = SubsystemStatus(subsystem=Subsystem.VIRTUAL_SWITCH, up=True)
        first.emit(MetricsRecord.for_subsystem(status, prom_reporter))

        assert second.registry.get_sample_value("pinger_ovs_up", {"nodeName": "node-a"}) is None

    def test_render(self, prom_reporter):
        sink = PrometheusSink()
        status = SubsystemStatus(subsystem=Subsystem.VIRTUAL_SWITCH, up=True)
        sink.emit(MetricsRecord.for_subsystem(status, prom_reporter))
        assert b'pinger_ovs_up{nodeName="node-a"} 1.0' in sink.render()


# ============================================================================
# HTTP EXPOSITION
# ============================================================================

class TestMetricsServer:

    def test_metrics_and_livez(self, prom_reporter):
        sink = PrometheusSink()
        status = SubsystemStatus(subsystem=Subsystem.VIRTUAL_SWITCH, up=True)
        sink.emit(MetricsRecord.for_subsystem(status, prom_reporter))

        async def exercise():
            app = create_app(sink, status_fn=lambda: {"cycles": 3})
            async with test_utils.TestClient(test_utils.TestServer(app)) as client:
                metrics = await client.get("/metrics")
                metrics_body = await metrics.text()
                livez = await client.get("/livez")
                livez_body = await livez.json()
            return metrics.status, metrics_body, livez.status, livez_body

        metrics_status, metrics_body, livez_status, livez_body = asyncio.run(exercise())

        assert metrics_status == 200
        assert "pinger_ovs_up" in metrics_body
        assert livez_status == 200
        assert livez_body["status"] == "alive"
        assert livez_body["loop"] == {"cycles": 3}
