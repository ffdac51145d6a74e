# ============================================================================
# HEALTH CHECK RUNNER
# ============================================================================
# STATUS: Infrastructure - Sequential cycle execution
# PURPOSE: Run every registered check once, in order, isolating failures
# ============================================================================
"""
Health Check Runner

Executes one cycle:
1. Take the checks in priority order
2. Run each one to completion before starting the next
3. Catch anything a check raises; log it, record it, keep going
4. Return a CycleReport

Checks probe unrelated subsystems, so they are sequenced rather than run
concurrently; the concurrency lives inside the ping checks' fan-outs.
No check failure is fatal to the runner.
"""

import time
from typing import Optional

from core.errors import PingerError
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from core.models import Reporter
from health.core import CheckContext, CheckOutcome, CycleReport, HealthCheckPlugin
from health.registry import HealthCheckRegistry
from metrics.sink import MetricsSink

logger = get_logger(__name__, ComponentType.RUNNER)


class HealthCheckRunner:
    """
    Runs the registered checks once per cycle.

    Args:
        registry: Ordered check list
        sink: Where every record goes
        reporter: Identity of this daemon, stamped on every record
    """

    def __init__(
        self,
        registry: HealthCheckRegistry,
        sink: MetricsSink,
        reporter: Reporter,
    ):
        self.registry = registry
        self.sink = sink
        self.reporter = reporter
        self._last_report: Optional[CycleReport] = None

    @property
    def last_report(self) -> Optional[CycleReport]:
        return self._last_report

    async def run_cycle(self, cycle: int = 0) -> CycleReport:
        """Run every check once and return the cycle report."""
        start_time = time.monotonic()
        report = CycleReport(cycle=cycle)

        with log_context(cycle=cycle, node_name=self.reporter.node_name):
            log_checkpoint("cycle_started", {"checks": self.registry.names()})

            for check in self.registry.get_checks_by_priority():
                report.outcomes[check.name] = await self._run_check(check, cycle)

            report.total_duration_ms = (time.monotonic() - start_time) * 1000
            log_checkpoint(
                "cycle_finished",
                {
                    "records": len(report.records),
                    "failed_checks": report.failed_checks,
                    "duration_ms": round(report.total_duration_ms, 2),
                },
            )

        self._last_report = report
        return report

    async def _run_check(self, check: HealthCheckPlugin, cycle: int) -> CheckOutcome:
        """Run a single check; never raises Exception."""
        start_time = time.monotonic()
        context = CheckContext(self.reporter, self.sink, cycle=cycle)
        error: Optional[str] = None

        with log_context(check=check.name):
            try:
                await check.run(context)
            except PingerError as e:
                error = str(e)
                logger.error(f"Check {check.name} aborted: {e}")
            except Exception as e:
                error = f"{type(e).__name__}: {e}"
                logger.exception(f"Check {check.name} failed unexpectedly: {e}")

            outcome = CheckOutcome(
                name=check.name,
                records=list(context.records),
                error=error,
                details=dict(context.details),
                duration_ms=(time.monotonic() - start_time) * 1000,
            )
            logger.debug(
                f"Check {check.name}: {'ok' if outcome.ok else 'error'} "
                f"({len(outcome.records)} records, {outcome.duration_ms:.1f}ms)"
            )
        return outcome


__all__ = [
    "HealthCheckRunner",
]
