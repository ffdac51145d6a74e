# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# STATUS: Infrastructure - Cycle check plugin system
# PURPOSE: Ordered, failure-isolated execution of one probing cycle
# ============================================================================
"""
Health Check Module

Plugin-based cycle execution:
- HealthCheckPlugin: one step of a cycle, emits MetricsRecords
- HealthCheckRegistry: explicit ordered list of check instances
- HealthCheckRunner: runs the checks sequentially, isolating failures

Usage:
    from health import HealthCheckRunner
    from health.checks import build_default_registry

    registry = build_default_registry(config, inventory, echo_client)
    runner = HealthCheckRunner(registry, sink, config.reporter)
    report = await runner.run_cycle(cycle=1)
"""

from health.core import (
    CheckContext,
    CheckOutcome,
    CycleReport,
    HealthCheckCategory,
    HealthCheckPlugin,
)
from health.registry import HealthCheckRegistry
from health.executor import HealthCheckRunner

__all__ = [
    # Core types
    "CheckContext",
    "CheckOutcome",
    "CycleReport",
    "HealthCheckCategory",
    "HealthCheckPlugin",
    # Registry
    "HealthCheckRegistry",
    # Runner
    "HealthCheckRunner",
]
