# ============================================================================
# CYCLE LOOP
# ============================================================================
# STATUS: Core - Top-level probing loop
# PURPOSE: Run cycles once (one-shot) or forever with a fixed gap (continuous)
# ============================================================================
"""
Cycle Loop

Drives the HealthCheckRunner:

One-shot mode:
    run one cycle, then finish (state DONE)

Continuous mode:
    loop forever:
        run one cycle
        sleep interval_seconds (interruptible by stop())

The sleep starts after a cycle has finished, so a cycle is never started
while the previous one is still running and the start of cycle k+1 is at
least interval_seconds after the end of cycle k.

A cycle that blows up unexpectedly is logged and counted; the loop keeps
going.
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.contracts import LoopState, RunMode
from core.logging import ComponentType, get_logger
from health.executor import HealthCheckRunner

logger = get_logger(__name__, ComponentType.LOOP)


class CycleLoop:
    """
    Top-level cycle driver.

    Args:
        runner: Executes one cycle of checks
        mode: ONE_SHOT or CONTINUOUS
        interval_seconds: Gap between cycles in continuous mode
    """

    def __init__(
        self,
        runner: HealthCheckRunner,
        mode: RunMode = RunMode.CONTINUOUS,
        interval_seconds: float = 5,
    ):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        self.runner = runner
        self.mode = mode
        self.interval_seconds = interval_seconds

        self._state = LoopState.IDLE
        self._stop_event = asyncio.Event()

        # Metrics
        self._started_at: Optional[datetime] = None
        self._cycles = 0
        self._errors = 0
        self._last_cycle_at: Optional[datetime] = None
        self._last_cycle_duration_ms: Optional[float] = None

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def cycles(self) -> int:
        return self._cycles

    @property
    def errors(self) -> int:
        return self._errors

    async def run(self) -> None:
        """Run until one-shot completion or until stop() is called."""
        if self._state in (LoopState.RUNNING, LoopState.SLEEPING):
            logger.warning("Cycle loop already running")
            return

        self._started_at = datetime.now(timezone.utc)
        logger.info(
            f"Starting cycle loop (mode={self.mode.value}, interval={self.interval_seconds}s)"
        )

        try:
            while not self._stop_event.is_set():
                await self._run_one_cycle()

                if self.mode == RunMode.ONE_SHOT:
                    break

                self._state = LoopState.SLEEPING
                try:
                    await asyncio.wait_for(
                        self._stop_event.wait(),
                        timeout=self.interval_seconds,
                    )
                    break  # Stop event was set
                except asyncio.TimeoutError:
                    pass  # Continue loop
        finally:
            self._state = LoopState.DONE

        logger.info(f"Cycle loop stopped after {self._cycles} cycles ({self._errors} errors)")

    def stop(self) -> None:
        """Ask the loop to finish; an in-flight cycle completes first."""
        if not self._stop_event.is_set():
            logger.info("Cycle loop stop requested")
        self._stop_event.set()

    async def _run_one_cycle(self) -> None:
        self._state = LoopState.RUNNING
        cycle = self._cycles + 1
        start_time = time.monotonic()

        try:
            report = await self.runner.run_cycle(cycle=cycle)
            if report.failed_checks:
                logger.warning(f"Cycle {cycle} finished with failed checks: {report.failed_checks}")
        except Exception as e:
            self._errors += 1
            logger.exception(f"Error in cycle {cycle}: {e}")
        finally:
            self._cycles = cycle
            self._last_cycle_at = datetime.now(timezone.utc)
            self._last_cycle_duration_ms = (time.monotonic() - start_time) * 1000

    def status(self) -> Dict[str, Any]:
        """Loop statistics for the liveness endpoint."""
        uptime_seconds = None
        if self._started_at:
            uptime_seconds = (datetime.now(timezone.utc) - self._started_at).total_seconds()

        return {
            "state": self._state.value,
            "mode": self.mode.value,
            "interval_seconds": self.interval_seconds,
            "started_at": self._started_at.isoformat() if self._started_at else None,
            "uptime_seconds": uptime_seconds,
            "cycles": self._cycles,
            "errors": self._errors,
            "last_cycle_at": self._last_cycle_at.isoformat() if self._last_cycle_at else None,
            "last_cycle_duration_ms": (
                round(self._last_cycle_duration_ms, 2)
                if self._last_cycle_duration_ms is not None
                else None
            ),
        }


__all__ = ["CycleLoop"]
