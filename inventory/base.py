# ============================================================================
# INVENTORY SERVICE INTERFACE
# ============================================================================
# STATUS: Inventory - Cluster membership boundary
# PURPOSE: Who exists and at which addresses, snapshotted per cycle
# ============================================================================
"""
Inventory Service

Cluster membership is supplied from outside the probing core. Adapters
raise InventoryLookupError (a LookupError) when the API is unavailable or
a lookup matches nothing usable.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Protocol, runtime_checkable

from core.errors import InventoryLookupError
from core.models import Target


@dataclass(frozen=True)
class NodeInfo:
    """A cluster node and its internal addresses (one per IP family)."""
    name: str
    internal_ips: List[str] = field(default_factory=list)

    def targets(self) -> List[Target]:
        return [Target.node(self.name, ip) for ip in self.internal_ips if ip]


@dataclass(frozen=True)
class PodInfo:
    """A peer daemon pod. ip is empty until the pod is scheduled and running."""
    name: str
    ip: str = ""
    host_ip: str = ""
    node_name: str = ""

    def target(self) -> Optional[Target]:
        if not self.ip:
            return None
        return Target.pod(self.name, self.ip, node_name=self.node_name, host_ip=self.host_ip or None)


@runtime_checkable
class InventoryService(Protocol):
    """Cluster membership lookups used by the ping checks."""

    async def list_nodes(self) -> List[NodeInfo]:
        ...

    async def get_workload_selector(self, namespace: str, name: str) -> str:
        """Label selector string of the peer daemon workload."""
        ...

    async def list_peer_pods(self, namespace: str, selector: str) -> List[PodInfo]:
        ...


def format_selector(match_labels: Mapping[str, str]) -> str:
    """
    Render matchLabels as a label selector string ("a=b,c=d").

    Keys are sorted so the same labels always yield the same selector.

    Raises:
        InventoryLookupError: empty labels would select every pod
    """
    if not match_labels:
        raise InventoryLookupError("workload has no matchLabels selector")
    return ",".join(f"{key}={match_labels[key]}" for key in sorted(match_labels))


__all__ = [
    "NodeInfo",
    "PodInfo",
    "InventoryService",
    "format_selector",
]
