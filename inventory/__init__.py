# ============================================================================
# INVENTORY MODULE
# ============================================================================
# STATUS: Inventory - Cluster membership
# PURPOSE: Interface plus the Kubernetes API adapter
# ============================================================================

from inventory.base import InventoryService, NodeInfo, PodInfo, format_selector
from inventory.kubernetes import KubernetesInventory

__all__ = [
    "InventoryService",
    "NodeInfo",
    "PodInfo",
    "format_selector",
    "KubernetesInventory",
]
