# ============================================================================
# HEALTH CHECK PLUGINS
# ============================================================================
# STATUS: Checks - Concrete cycle steps
# PURPOSE: The checks one cycle runs, and the default wiring for them
# ============================================================================
"""
Health Check Plugins

Fabric Checks (priority 10-20):
- switch: virtual switch daemon and database status
- controller: network controller status

Reachability Checks (priority 30-40):
- node_ping: fan-out ping of every node internal address
- pod_ping: fan-out ping of every peer daemon pod

Resolution Checks (priority 50):
- dns: resolve the configured name

Build the standard registry from configuration:
    registry = build_default_registry(config, inventory, echo_client)
"""

from typing import Optional

from core.config import PingerConfig
from health.checks.connectivity import NodePingCheck, PingCheck, PodPingCheck
from health.checks.dns import DnsCheck, Resolver, SystemResolver
from health.checks.subsystem import (
    ControllerCheck,
    StatusCommandOutput,
    StatusCommandRunner,
    SubprocessStatusRunner,
    SubsystemCheck,
    SwitchCheck,
)
from health.registry import HealthCheckRegistry
from inventory.base import InventoryService
from probe.echo import EchoClient
from probe.fanout import FanOutScheduler


def build_default_registry(
    config: PingerConfig,
    inventory: InventoryService,
    echo_client: EchoClient,
    resolver: Optional[Resolver] = None,
    status_runner: Optional[StatusCommandRunner] = None,
    scheduler: Optional[FanOutScheduler] = None,
) -> HealthCheckRegistry:
    """Register every enabled check in the standard cycle order."""
    registry = HealthCheckRegistry()
    subsystems = config.subsystems
    status_runner = status_runner or SubprocessStatusRunner(subsystems.status_timeout_seconds)
    scheduler = scheduler or FanOutScheduler(
        task_timeout_seconds=config.probe.task_timeout_seconds,
        max_parallel=config.probe.max_parallel,
    )

    if config.enable_switch_check:
        registry.register(
            SwitchCheck(status_runner, subsystems.switch_command, subsystems.switch_args)
        )
    if config.enable_controller_check:
        registry.register(
            ControllerCheck(status_runner, subsystems.controller_command, subsystems.controller_args)
        )
    if config.enable_node_ping:
        registry.register(
            NodePingCheck(
                inventory,
                echo_client,
                scheduler=scheduler,
                echo_count=config.probe.echo_count,
            )
        )
    if config.enable_pod_ping:
        registry.register(
            PodPingCheck(
                inventory,
                echo_client,
                namespace=config.peer_namespace,
                workload=config.peer_workload,
                selector=config.peer_selector,
                scheduler=scheduler,
                echo_count=config.probe.echo_count,
            )
        )
    if config.enable_dns_check:
        registry.register(
            DnsCheck(
                resolver or SystemResolver(),
                config.dns_target,
                timeout_seconds=config.dns_timeout_seconds,
            )
        )

    return registry


__all__ = [
    "build_default_registry",
    # Fabric
    "StatusCommandOutput",
    "StatusCommandRunner",
    "SubprocessStatusRunner",
    "SubsystemCheck",
    "SwitchCheck",
    "ControllerCheck",
    # Reachability
    "PingCheck",
    "NodePingCheck",
    "PodPingCheck",
    # Resolution
    "Resolver",
    "SystemResolver",
    "DnsCheck",
]
