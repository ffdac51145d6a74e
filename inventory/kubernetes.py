# ============================================================================
# KUBERNETES INVENTORY
# ============================================================================
# STATUS: Inventory - In-cluster API adapter
# PURPOSE: List nodes, resolve the peer daemon selector, list peer pods
# ============================================================================
"""
Kubernetes Inventory

Reads cluster membership straight from the API server with httpx.

Endpoints used:
    GET /api/v1/nodes
    GET /apis/apps/v1/namespaces/{ns}/daemonsets/{name}
    GET /api/v1/namespaces/{ns}/pods?labelSelector=...

In-cluster credentials come from the service account mount. The token is
re-read on every request because projected tokens rotate.
"""

import os
import ssl
from typing import Any, Dict, List, Optional, Union

import httpx

from core.errors import InventoryLookupError
from core.logging import ComponentType, get_logger
from inventory.base import NodeInfo, PodInfo, format_selector

logger = get_logger(__name__, ComponentType.INVENTORY)

SERVICE_ACCOUNT_DIR = "/var/run/secrets/kubernetes.io/serviceaccount"
NODE_INTERNAL_IP = "InternalIP"


class KubernetesInventory:
    """
    Inventory adapter over the Kubernetes REST API.

    Args:
        base_url: API server URL
        token: Static bearer token (takes precedence over token_path)
        token_path: File holding a bearer token, re-read per request
        verify: SSL context, CA bundle path or bool for TLS verification
        timeout_seconds: Per-request timeout
        client: Pre-built client (tests inject one with a MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        token_path: Optional[str] = None,
        verify: Union[ssl.SSLContext, str, bool] = True,
        timeout_seconds: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._token_path = token_path
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            verify=verify,
            timeout=timeout_seconds,
        )
        self._owns_client = client is None

    @classmethod
    def from_in_cluster(cls, timeout_seconds: float = 10.0) -> "KubernetesInventory":
        """Build from the pod's service account mount and service env vars."""
        host = os.environ.get("KUBERNETES_SERVICE_HOST")
        port = os.environ.get("KUBERNETES_SERVICE_PORT", "443")
        if not host:
            raise InventoryLookupError("KUBERNETES_SERVICE_HOST not set; not running in a cluster")
        if ":" in host:
            host = f"[{host}]"

        ca_path = os.path.join(SERVICE_ACCOUNT_DIR, "ca.crt")
        return cls(
            base_url=f"https://{host}:{port}",
            token_path=os.path.join(SERVICE_ACCOUNT_DIR, "token"),
            verify=ssl.create_default_context(cafile=ca_path) if os.path.exists(ca_path) else True,
            timeout_seconds=timeout_seconds,
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # -------------------------------------------------------------------------
    # InventoryService
    # -------------------------------------------------------------------------

    async def list_nodes(self) -> List[NodeInfo]:
        data = await self._get("/api/v1/nodes")
        nodes = []
        for item in data.get("items", []):
            name = item.get("metadata", {}).get("name", "")
            addresses = item.get("status", {}).get("addresses", []) or []
            internal_ips = [
                addr.get("address", "")
                for addr in addresses
                if addr.get("type") == NODE_INTERNAL_IP and addr.get("address")
            ]
            nodes.append(NodeInfo(name=name, internal_ips=internal_ips))
        logger.debug(f"Listed {len(nodes)} nodes")
        return nodes

    async def get_workload_selector(self, namespace: str, name: str) -> str:
        data = await self._get(f"/apis/apps/v1/namespaces/{namespace}/daemonsets/{name}")
        match_labels = (data.get("spec", {}).get("selector", {}) or {}).get("matchLabels") or {}
        return format_selector(match_labels)

    async def list_peer_pods(self, namespace: str, selector: str) -> List[PodInfo]:
        data = await self._get(
            f"/api/v1/namespaces/{namespace}/pods",
            params={"labelSelector": selector},
        )
        pods = []
        for item in data.get("items", []):
            metadata = item.get("metadata", {})
            status = item.get("status", {})
            pods.append(
                PodInfo(
                    name=metadata.get("name", ""),
                    ip=status.get("podIP", "") or "",
                    host_ip=status.get("hostIP", "") or "",
                    node_name=item.get("spec", {}).get("nodeName", "") or "",
                )
            )
        logger.debug(f"Listed {len(pods)} pods in {namespace} matching {selector}")
        return pods

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self._token
        if token is None and self._token_path:
            try:
                with open(self._token_path) as f:
                    token = f.read().strip()
            except OSError as e:
                raise InventoryLookupError(f"cannot read service account token: {e}") from e
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        try:
            response = await self._client.get(path, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            raise InventoryLookupError(f"GET {path} failed: {e}") from e

        if response.status_code != 200:
            raise InventoryLookupError(
                f"GET {path} returned {response.status_code}: {response.text[:200]}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise InventoryLookupError(f"GET {path} returned invalid JSON: {e}") from e


__all__ = [
    "KubernetesInventory",
    "NODE_INTERNAL_IP",
    "SERVICE_ACCOUNT_DIR",
]
