# ============================================================================
# HEALTH CHECK REGISTRY
# ============================================================================
# STATUS: Infrastructure - Ordered check list
# PURPOSE: Register check instances and hand them out in priority order
# ============================================================================
"""
Health Check Registry

Holds the explicit, ordered list of checks run each cycle. Checks carry
injected collaborators (inventory, echo client, resolver), so instances
are registered rather than classes.

Usage:
    registry = HealthCheckRegistry()
    registry.register(DnsCheck(resolver, "kubernetes.default"))

    for check in registry.get_checks_by_priority():
        ...
"""

import logging
from typing import Dict, List

from health.core import HealthCheckPlugin

logger = logging.getLogger(__name__)


class HealthCheckRegistry:
    """Registry of check plugin instances keyed by name."""

    def __init__(self):
        self._checks: Dict[str, HealthCheckPlugin] = {}

    def register(self, check: HealthCheckPlugin) -> None:
        """Register a check; a check with the same name is replaced."""
        if check.name in self._checks:
            logger.warning(f"Overwriting health check: {check.name}")

        self._checks[check.name] = check
        logger.debug(
            f"Registered health check: {check.name} "
            f"(category={check.category.value}, priority={check.priority})"
        )

    def get_checks_by_priority(self) -> List[HealthCheckPlugin]:
        """All checks, lower priority first; ties keep registration order."""
        return sorted(self._checks.values(), key=lambda c: c.priority)

    def names(self) -> List[str]:
        return [c.name for c in self.get_checks_by_priority()]


__all__ = [
    "HealthCheckRegistry",
]
