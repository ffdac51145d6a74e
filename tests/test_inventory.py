# ============================================================================
# INVENTORY TESTS
# ============================================================================
# STATUS: Tests - Kubernetes inventory adapter
# PURPOSE: Verify API parsing and error mapping against a mock transport
# ============================================================================
"""
Inventory Tests

Covers:
1. list_nodes keeps only InternalIP addresses (dual stack)
2. get_workload_selector renders matchLabels deterministically
3. list_peer_pods passes labelSelector and tolerates unscheduled pods
4. HTTP errors, non-200 and bad JSON -> InventoryLookupError
5. Bearer token from a file
6. Selector rendering

Run with:
    pytest tests/test_inventory.py -v
"""

import asyncio

import httpx
import pytest

from core.errors import InventoryLookupError
from inventory.base import NodeInfo, PodInfo, format_selector
from inventory.kubernetes import KubernetesInventory


NODES = {
    "items": [
        {
            "metadata": {"name": "n1"},
            "status": {"addresses": [
                {"type": "InternalIP", "address": "192.168.0.11"},
                {"type": "InternalIP", "address": "fd00::11"},
                {"type": "Hostname", "address": "n1"},
            ]},
        },
        {
            "metadata": {"name": "n2"},
            "status": {"addresses": [{"type": "ExternalIP", "address": "203.0.113.2"}]},
        },
    ]
}

DAEMONSET = {
    "spec": {"selector": {"matchLabels": {"component": "network", "app": "kube-ovn-pinger"}}}
}

PODS = {
    "items": [
        {
            "metadata": {"name": "pinger-a"},
            "spec": {"nodeName": "n1"},
            "status": {"podIP": "10.16.0.2", "hostIP": "192.168.0.11"},
        },
        {
            "metadata": {"name": "pinger-pending"},
            "spec": {},
            "status": {},
        },
    ]
}


def _inventory(handler, **kwargs) -> KubernetesInventory:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://k8s.test")
    return KubernetesInventory("https://k8s.test", client=client, **kwargs)


# ============================================================================
# API PARSING
# ============================================================================

class TestKubernetesInventory:

    def test_list_nodes(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/v1/nodes"
            return httpx.Response(200, json=NODES)

        nodes = asyncio.run(_inventory(handler).list_nodes())

        assert nodes == [
            NodeInfo(name="n1", internal_ips=["192.168.0.11", "fd00::11"]),
            NodeInfo(name="n2", internal_ips=[]),
        ]
        assert [t.address for t in nodes[0].targets()] == ["192.168.0.11", "fd00::11"]
        assert nodes[1].targets() == []

    def test_workload_selector(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/apis/apps/v1/namespaces/kube-system/daemonsets/kube-ovn-pinger"
            return httpx.Response(200, json=DAEMONSET)

        selector = asyncio.run(_inventory(handler).get_workload_selector("kube-system", "kube-ovn-pinger"))
        assert selector == "app=kube-ovn-pinger,component=network"

    def test_workload_without_selector(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"spec": {}})

        with pytest.raises(InventoryLookupError):
            asyncio.run(_inventory(handler).get_workload_selector("kube-system", "kube-ovn-pinger"))

    def test_list_peer_pods(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["selector"] = request.url.params.get("labelSelector")
            return httpx.Response(200, json=PODS)

        pods = asyncio.run(_inventory(handler).list_peer_pods("kube-system", "app=kube-ovn-pinger"))

        assert seen == {"path": "/api/v1/namespaces/kube-system/pods", "selector": "app=kube-ovn-pinger"}
        assert pods[0] == PodInfo(name="pinger-a", ip="10.16.0.2", host_ip="192.168.0.11", node_name="n1")
        assert pods[1].target() is None
        target = pods[0].target()
        assert target.pod_name == "pinger-a"
        assert target.host_ip == "192.168.0.11"


# ============================================================================
# ERROR MAPPING
# ============================================================================

class TestKubernetesErrors:

    def test_forbidden(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, text="nodes is forbidden")

        with pytest.raises(InventoryLookupError) as exc_info:
            asyncio.run(_inventory(handler).list_nodes())
        assert "403" in str(exc_info.value)

    def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(InventoryLookupError):
            asyncio.run(_inventory(handler).list_nodes())

    def test_invalid_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>")

        with pytest.raises(InventoryLookupError):
            asyncio.run(_inventory(handler).list_nodes())

    def test_is_lookup_error(self):
        assert issubclass(InventoryLookupError, LookupError)


# ============================================================================
# AUTH
# ============================================================================

class TestKubernetesAuth:

    def test_token_file(self, tmp_path):
        token_file = tmp_path / "token"
        token_file.write_text("s3cret\n")
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"items": []})

        asyncio.run(_inventory(handler, token_path=str(token_file)).list_nodes())
        assert seen["auth"] == "Bearer s3cret"

    def test_missing_token_file(self, tmp_path):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"items": []})

        inventory = _inventory(handler, token_path=str(tmp_path / "missing"))
        with pytest.raises(InventoryLookupError):
            asyncio.run(inventory.list_nodes())

    def test_not_in_cluster(self, monkeypatch):
        monkeypatch.delenv("KUBERNETES_SERVICE_HOST", raising=False)
        with pytest.raises(InventoryLookupError):
            KubernetesInventory.from_in_cluster()

    def test_in_cluster_ipv6_host(self, monkeypatch):
        monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "fd00:10:96::1")
        monkeypatch.setenv("KUBERNETES_SERVICE_PORT", "443")
        inventory = KubernetesInventory.from_in_cluster()
        assert inventory.base_url == "https://[fd00:10:96::1]:443"
        asyncio.run(inventory.close())


# ============================================================================
# SELECTORS
# ============================================================================

class TestSelectors:

    def test_format_sorted(self):
        assert format_selector({"b": "2", "a": "1"}) == "a=1,b=2"

    def test_format_empty(self):
        with pytest.raises(InventoryLookupError):
            format_selector({})
