# ============================================================================
# MODEL TESTS
# ============================================================================
# STATUS: Tests - Targets, results and metrics records
# PURPOSE: Verify validation rules and derived fields of the data model
# ============================================================================
"""
Model Tests

Covers:
1. Target construction and validation
2. ProbeResult invariants (received <= sent, loss derived)
3. DnsProbeResult carries no addresses on failure
4. MetricsRecord payload must match its kind
5. Enum parsing (RunMode aliases, Subsystem -> ProbeKind)

Run with:
    pytest tests/test_models.py -v
"""

import pytest
from pydantic import ValidationError

from core.contracts import ProbeKind, RunMode, Subsystem, TargetKind
from core.models import (
    DnsProbeResult,
    MetricsRecord,
    ProbeResult,
    Reporter,
    SubsystemStatus,
    Target,
)


# ============================================================================
# TARGET
# ============================================================================

class TestTarget:

    def test_node_target(self):
        target = Target.node("n1", "192.168.0.11")
        assert target.kind == TargetKind.NODE
        assert target.node_name == "n1"
        assert target.host_ip == "192.168.0.11"
        assert target.pod_name is None

    def test_pod_target(self):
        target = Target.pod("pinger-x", "10.16.0.5", node_name="n2", host_ip="192.168.0.12")
        assert target.kind == TargetKind.POD
        assert target.pod_name == "pinger-x"
        assert target.node_name == "n2"
        assert "pinger-x" in target.label

    def test_address_stripped(self):
        assert Target.node("n1", " 10.0.0.1 ").address == "10.0.0.1"

    def test_blank_address_rejected(self):
        with pytest.raises(ValidationError):
            Target.node("n1", "   ")

    def test_frozen(self):
        target = Target.node("n1", "10.0.0.1")
        with pytest.raises(ValidationError):
            target.address = "10.0.0.2"


# ============================================================================
# PROBE RESULT
# ============================================================================

class TestProbeResult:

    def test_loss_derived(self):
        result = ProbeResult(target=Target.node("n3", "10.0.0.3"), sent=5, received=3, avg_rtt_ms=0.4)
        assert result.loss == 2
        assert result.loss_ratio == pytest.approx(0.4)
        assert not result.all_lost

    def test_all_lost(self):
        result = ProbeResult(target=Target.node("n3", "10.0.0.3"), sent=5, received=0)
        assert result.loss == 5
        assert result.all_lost
        assert result.avg_rtt_ms == 0.0

    def test_received_above_sent_rejected(self):
        with pytest.raises(ValidationError):
            ProbeResult(target=Target.node("n1", "10.0.0.1"), sent=5, received=6)

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            ProbeResult(target=Target.node("n1", "10.0.0.1"), sent=-1, received=0)

    def test_loss_in_dump(self):
        result = ProbeResult(target=Target.node("n1", "10.0.0.1"), sent=5, received=4, avg_rtt_ms=1.0)
        assert result.model_dump()["loss"] == 1


# ============================================================================
# DNS RESULT
# ============================================================================

class TestDnsProbeResult:

    def test_success(self):
        result = DnsProbeResult(name="kubernetes.default", success=True, addresses=["10.96.0.1"], latency_ms=2.5)
        assert result.error is None

    def test_failure_with_addresses_rejected(self):
        with pytest.raises(ValidationError):
            DnsProbeResult(name="kubernetes.default", success=False, addresses=["10.96.0.1"])


# ============================================================================
# METRICS RECORD
# ============================================================================

class TestMetricsRecord:

    @pytest.fixture
    def reporter(self):
        return Reporter(node_name="node-a")

    def test_for_probe_node(self, reporter):
        result = ProbeResult(target=Target.node("n1", "10.0.0.1"), sent=5, received=5)
        record = MetricsRecord.for_probe(result, reporter, cycle=3)
        assert record.kind == ProbeKind.NODE_PING
        assert record.cycle == 3

    def test_for_probe_pod(self, reporter):
        result = ProbeResult(target=Target.pod("p", "10.16.0.1"), sent=5, received=5)
        assert MetricsRecord.for_probe(result, reporter).kind == ProbeKind.POD_PING

    def test_for_subsystem(self, reporter):
        status = SubsystemStatus(subsystem=Subsystem.NETWORK_CONTROLLER, up=False, detail="not running")
        record = MetricsRecord.for_subsystem(status, reporter)
        assert record.kind == ProbeKind.CONTROLLER

    def test_for_dns(self, reporter):
        result = DnsProbeResult(name="kubernetes.default", success=False, error="timeout")
        assert MetricsRecord.for_dns(result, reporter).kind == ProbeKind.DNS

    def test_kind_target_mismatch_rejected(self, reporter):
        result = ProbeResult(target=Target.pod("p", "10.16.0.1"), sent=5, received=5)
        with pytest.raises(ValidationError):
            MetricsRecord(kind=ProbeKind.NODE_PING, reporter=reporter, probe=result)

    def test_two_payloads_rejected(self, reporter):
        result = ProbeResult(target=Target.node("n1", "10.0.0.1"), sent=5, received=5)
        dns = DnsProbeResult(name="x", success=True)
        with pytest.raises(ValidationError):
            MetricsRecord(kind=ProbeKind.NODE_PING, reporter=reporter, probe=result, dns=dns)

    def test_no_payload_rejected(self, reporter):
        with pytest.raises(ValidationError):
            MetricsRecord(kind=ProbeKind.DNS, reporter=reporter)


# ============================================================================
# ENUMS
# ============================================================================

class TestContracts:

    @pytest.mark.parametrize("value,expected", [
        ("one-shot", RunMode.ONE_SHOT),
        ("job", RunMode.ONE_SHOT),
        ("continuous", RunMode.CONTINUOUS),
        ("Server", RunMode.CONTINUOUS),
    ])
    def test_run_mode_parse(self, value, expected):
        assert RunMode.parse(value) == expected

    def test_run_mode_parse_unknown(self):
        with pytest.raises(ValueError):
            RunMode.parse("sometimes")

    def test_subsystem_probe_kind(self):
        assert Subsystem.VIRTUAL_SWITCH.probe_kind == ProbeKind.SWITCH
        assert Subsystem.NETWORK_CONTROLLER.probe_kind == ProbeKind.CONTROLLER
