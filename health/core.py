# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# STATUS: Infrastructure - Base classes for cycle checks
# PURPOSE: Check plugin interface, per-check context and cycle results
# ============================================================================
"""
Health Check Core Types

Every step of a cycle is a HealthCheckPlugin with a single capability:

    async def run(context) -> List[MetricsRecord]

Categories (execution order by priority):
1. Fabric (10-20): Local virtual switch and network controller
2. Reachability (30-40): Node and pod ping fan-outs
3. Resolution (50): DNS

The runner executes plugins strictly one after another. Health signals
are carried by the records a check emits; CheckOutcome only says whether
the step itself ran to completion.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from core.models import MetricsRecord, Reporter
from metrics.sink import MetricsSink


class HealthCheckCategory(str, Enum):
    """Check categories with default priorities."""
    FABRIC = "fabric"              # Priority 10: local switch / controller
    REACHABILITY = "reachability"  # Priority 30: node and pod ping
    RESOLUTION = "resolution"      # Priority 50: DNS

    @property
    def default_priority(self) -> int:
        """Get default priority for category."""
        priorities = {
            HealthCheckCategory.FABRIC: 10,
            HealthCheckCategory.REACHABILITY: 30,
            HealthCheckCategory.RESOLUTION: 50,
        }
        return priorities[self]


class CheckContext:
    """
    Per-check, per-cycle context.

    Doubles as a MetricsSink: records go to the real sink immediately
    and are remembered so the runner can report what the check emitted.
    """

    def __init__(self, reporter: Reporter, sink: MetricsSink, cycle: int = 0):
        self.reporter = reporter
        self.sink = sink
        self.cycle = cycle
        self.records: List[MetricsRecord] = []
        self.details: Dict[str, Any] = {}

    def emit(self, record: MetricsRecord) -> None:
        self.sink.emit(record)
        self.records.append(record)


@dataclass
class CheckOutcome:
    """Result from a single check within a cycle."""
    name: str
    records: List[MetricsRecord] = field(default_factory=list)
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        result: Dict[str, Any] = {
            "ok": self.ok,
            "records": len(self.records),
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.error:
            result["error"] = self.error
        if self.details:
            result["details"] = self.details
        return result


@dataclass
class CycleReport:
    """Aggregated outcome of one full pass through all checks."""
    cycle: int
    outcomes: Dict[str, CheckOutcome] = field(default_factory=dict)
    total_duration_ms: float = 0.0
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def records(self) -> List[MetricsRecord]:
        return [r for outcome in self.outcomes.values() for r in outcome.records]

    @property
    def failed_checks(self) -> List[str]:
        return [name for name, outcome in self.outcomes.items() if not outcome.ok]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cycle": self.cycle,
            "checks": {name: outcome.to_dict() for name, outcome in self.outcomes.items()},
            "total_duration_ms": round(self.total_duration_ms, 2),
            "started_at": self.started_at.isoformat(),
        }


class HealthCheckPlugin(ABC):
    """
    Base class for cycle checks.

    Attributes:
        name: Unique identifier for the check
        category: Check category (determines default priority)
        priority: Execution order (lower runs first)

    Expected step-level failures (inventory unavailable, selector
    mismatch) are raised as PingerError subclasses; the runner logs them
    and moves on to the next check.
    """

    name: str = "unnamed"
    category: HealthCheckCategory = HealthCheckCategory.REACHABILITY
    priority: int = 50

    @abstractmethod
    async def run(self, context: CheckContext) -> List[MetricsRecord]:
        """
        Execute the check, emitting records through the context.

        Returns:
            The records emitted
        """
        pass

    def __init_subclass__(cls, **kwargs):
        """Set default priority from category if not specified."""
        super().__init_subclass__(**kwargs)
        if "priority" not in cls.__dict__ and "category" in cls.__dict__:
            cls.priority = cls.category.default_priority


__all__ = [
    "HealthCheckCategory",
    "CheckContext",
    "CheckOutcome",
    "CycleReport",
    "HealthCheckPlugin",
]
