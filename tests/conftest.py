# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# STATUS: Tests - Fakes for the probing core's collaborators
# PURPOSE: Scripted echo client, recording sink, inventory, resolver, runner
# ============================================================================
"""
Shared fakes.

Every collaborator of the core is an interface, so tests substitute
in-memory versions:
- FakeEchoClient: per-address scripted stats, init failures, hangs, errors
- RecordingSink: keeps every emitted record
- FakeInventory: static nodes and pods
- FakeResolver: scripted addresses or failure
- FakeStatusRunner: scripted status command results
"""

import asyncio
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from core.errors import DnsResolutionError, EchoInitError, InventoryLookupError
from core.models import MetricsRecord, Reporter, Target
from health.checks.subsystem import StatusCommandOutput
from inventory.base import NodeInfo, PodInfo
from probe.echo import EchoStats


class FakeEchoClient:
    """
    Echo client driven by a script keyed by address.

    Script values:
        EchoStats       -> returned
        "init_error"    -> EchoInitError raised
        "hang"          -> sleeps until cancelled
        Exception       -> raised as-is

    Unscripted addresses get default stats. delays adds a per-address
    sleep before answering.
    """

    def __init__(
        self,
        script: Optional[Dict[str, object]] = None,
        default: Optional[EchoStats] = None,
        delays: Optional[Dict[str, float]] = None,
    ):
        self.script = script or {}
        self.default = default or EchoStats(sent=5, received=5, avg_rtt_ms=1.0)
        self.delays = delays or {}
        self.calls: List[Tuple[str, int]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def probe(self, address: str, count: int) -> EchoStats:
        self.calls.append((address, count))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if address in self.delays:
                await asyncio.sleep(self.delays[address])

            outcome = self.script.get(address, self.default)
            if outcome == "init_error":
                raise EchoInitError(address, "socket: operation not permitted")
            if outcome == "hang":
                await asyncio.sleep(3600)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        finally:
            self.in_flight -= 1


class RecordingSink:
    """MetricsSink that remembers everything it was given."""

    def __init__(self):
        self.records: List[MetricsRecord] = []

    def emit(self, record: MetricsRecord) -> None:
        self.records.append(record)

    def of_kind(self, kind) -> List[MetricsRecord]:
        return [r for r in self.records if r.kind == kind]


class FakeInventory:
    """Static cluster membership; set fail to make every lookup raise."""

    def __init__(
        self,
        nodes: Sequence[NodeInfo] = (),
        pods: Sequence[PodInfo] = (),
        workload_selector: str = "app=kube-ovn-pinger",
        fail: bool = False,
    ):
        self.nodes = list(nodes)
        self.pods = list(pods)
        self.workload_selector = workload_selector
        self.fail = fail
        self.selector_lookups: List[Tuple[str, str]] = []
        self.pod_queries: List[Tuple[str, str]] = []

    async def list_nodes(self) -> List[NodeInfo]:
        if self.fail:
            raise InventoryLookupError("api server unavailable")
        return list(self.nodes)

    async def get_workload_selector(self, namespace: str, name: str) -> str:
        self.selector_lookups.append((namespace, name))
        if self.fail:
            raise InventoryLookupError("api server unavailable")
        return self.workload_selector

    async def list_peer_pods(self, namespace: str, selector: str) -> List[PodInfo]:
        self.pod_queries.append((namespace, selector))
        if self.fail:
            raise InventoryLookupError("api server unavailable")
        return list(self.pods)


class FakeResolver:
    """Resolver returning fixed addresses, failing, or hanging."""

    def __init__(self, addresses: Sequence[str] = ("10.96.0.1",), fail: bool = False, hang: bool = False):
        self.addresses = list(addresses)
        self.fail = fail
        self.hang = hang
        self.queries: List[str] = []

    async def resolve(self, name: str) -> List[str]:
        self.queries.append(name)
        if self.hang:
            await asyncio.sleep(3600)
        if self.fail:
            raise DnsResolutionError(name, "Name or service not known")
        return list(self.addresses)


class FakeStatusRunner:
    """Status runner answering per command path."""

    def __init__(self, results: Optional[Dict[str, StatusCommandOutput]] = None):
        self.results = results or {}
        self.calls: List[Tuple[str, Tuple[str, ...]]] = []

    async def run(self, path: str, args: Sequence[str]) -> StatusCommandOutput:
        self.calls.append((path, tuple(args)))
        return self.results.get(path, StatusCommandOutput(output="running"))


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def reporter():
    return Reporter(node_name="node-a", pod_name="pinger-a", host_ip="192.168.0.1", pod_ip="10.16.0.2")


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def make_echo_client():
    return FakeEchoClient


@pytest.fixture
def make_inventory():
    return FakeInventory


@pytest.fixture
def make_resolver():
    return FakeResolver


@pytest.fixture
def make_status_runner():
    return FakeStatusRunner


@pytest.fixture
def node_targets():
    """Three node targets: n1, n2, n3."""
    return [
        Target.node("n1", "192.168.0.11"),
        Target.node("n2", "192.168.0.12"),
        Target.node("n3", "192.168.0.13"),
    ]
