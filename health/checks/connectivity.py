# ============================================================================
# REACHABILITY CHECKS
# ============================================================================
# STATUS: Checks - Node and peer-pod ping fan-outs
# PURPOSE: Snapshot inventory, ping every target concurrently
# ============================================================================
"""
Reachability Checks

- NodePingCheck (priority 30): every internal address of every node
- PodPingCheck (priority 40): every running peer daemon pod

Both take an inventory snapshot once per cycle, turn it into targets, and
hand the list to the FanOutScheduler. Each target yields at most one
record; targets whose echo client could not be initialized yield none.
The check returns only after every probe task has finished.
"""

import logging
from abc import abstractmethod
from typing import List, Optional

from core.errors import InventoryLookupError
from core.models import MetricsRecord, Target
from health.core import CheckContext, HealthCheckCategory, HealthCheckPlugin
from inventory.base import InventoryService
from probe.echo import EchoClient
from probe.fanout import FanOutScheduler
from probe.task import ECHO_COUNT, ProbeTask

logger = logging.getLogger(__name__)


class PingCheck(HealthCheckPlugin):
    """Shared fan-out plumbing for the ping checks."""

    category = HealthCheckCategory.REACHABILITY

    def __init__(
        self,
        inventory: InventoryService,
        echo_client: EchoClient,
        scheduler: Optional[FanOutScheduler] = None,
        echo_count: int = ECHO_COUNT,
    ):
        self.inventory = inventory
        self.echo_client = echo_client
        self.scheduler = scheduler or FanOutScheduler()
        self.echo_count = echo_count

    @abstractmethod
    async def collect_targets(self) -> List[Target]:
        """Snapshot the inventory into this cycle's targets."""
        pass

    async def run(self, context: CheckContext) -> List[MetricsRecord]:
        targets = await self.collect_targets()
        context.details["targets"] = len(targets)

        if not targets:
            logger.warning(f"{self.name}: no targets to probe")
            return context.records

        task = ProbeTask(
            self.echo_client,
            sink=context,
            reporter=context.reporter,
            echo_count=self.echo_count,
            cycle=context.cycle,
        )
        report = await self.scheduler.run_all(targets, task)
        context.details["fanout"] = report.to_dict()
        return context.records


class NodePingCheck(PingCheck):
    """Ping the internal addresses of every cluster node."""

    name = "node_ping"
    priority = 30

    async def collect_targets(self) -> List[Target]:
        nodes = await self.inventory.list_nodes()
        targets = [target for node in nodes for target in node.targets()]
        logger.info(f"start to check node connectivity: {len(nodes)} nodes, {len(targets)} addresses")
        return targets


class PodPingCheck(PingCheck):
    """
    Ping every peer daemon pod.

    The peer set is found by label selector: either the configured one,
    passed to the API server as written, or the selector of the named
    workload. Pods without an address yet are left out.
    """

    name = "pod_ping"
    priority = 40

    def __init__(
        self,
        inventory: InventoryService,
        echo_client: EchoClient,
        namespace: str,
        workload: str,
        selector: Optional[str] = None,
        scheduler: Optional[FanOutScheduler] = None,
        echo_count: int = ECHO_COUNT,
    ):
        super().__init__(inventory, echo_client, scheduler=scheduler, echo_count=echo_count)
        self.namespace = namespace
        self.workload = workload
        self.selector = selector.strip() if selector and selector.strip() else None

    async def resolve_selector(self) -> str:
        if self.selector:
            return self.selector
        return await self.inventory.get_workload_selector(self.namespace, self.workload)

    async def collect_targets(self) -> List[Target]:
        selector = await self.resolve_selector()
        pods = await self.inventory.list_peer_pods(self.namespace, selector)

        targets = []
        for pod in pods:
            target = pod.target()
            if target is None:
                logger.debug(f"pod {pod.name} has no address yet, skipping")
                continue
            targets.append(target)

        if pods and not targets:
            raise InventoryLookupError(
                f"none of {len(pods)} pods matching {selector!r} in {self.namespace} has an address"
            )

        logger.info(f"start to check pod connectivity: {len(targets)} pods matching {selector}")
        return targets


__all__ = [
    "PingCheck",
    "NodePingCheck",
    "PodPingCheck",
]
