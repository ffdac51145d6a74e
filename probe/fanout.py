# ============================================================================
# FAN-OUT SCHEDULER
# ============================================================================
# STATUS: Probe - Concurrent fan-out / fan-in over targets
# PURPOSE: One task per target, joined before returning
# ============================================================================
"""
Fan-Out Scheduler

Launches one asyncio task per target and waits for every one of them.

Execution Strategy:
1. Create one task per target (optionally bounded by a semaphore)
2. Run each task under a per-task deadline
3. Collect results in completion order, not target-list order
4. Return only after every task has succeeded, been skipped, timed out
   or failed

Isolation:
- A task that raises is logged and counted as failed
- A task that overruns its deadline is cancelled and counted as timed out
- Neither affects siblings or the scheduler itself
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Iterable, List, Optional, Tuple

from core.logging import ComponentType, get_logger, log_context
from core.models import ProbeResult, Target

logger = get_logger(__name__, ComponentType.PROBE)

TaskFn = Callable[[Target], Awaitable[Optional[ProbeResult]]]


class TaskOutcome(str, Enum):
    """How one fan-out task resolved."""
    COMPLETED = "completed"
    SKIPPED = "skipped"          # task returned None (e.g. echo init failure)
    TIMED_OUT = "timed_out"
    FAILED = "failed"            # task raised


@dataclass
class FanOutReport:
    """Result of one scheduler run."""
    total: int
    results: List[ProbeResult] = field(default_factory=list)
    skipped: int = 0
    timed_out: int = 0
    failed: int = 0
    duration_ms: float = 0.0

    @property
    def dropped(self) -> int:
        return self.skipped + self.timed_out + self.failed

    @property
    def completed(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "completed": self.completed,
            "skipped": self.skipped,
            "timed_out": self.timed_out,
            "failed": self.failed,
            "duration_ms": round(self.duration_ms, 2),
        }


class FanOutScheduler:
    """
    Runs a task function over a set of targets concurrently.

    Args:
        task_timeout_seconds: Per-task deadline; None disables it
        max_parallel: Max concurrently running tasks; None = one per target
    """

    def __init__(
        self,
        task_timeout_seconds: Optional[float] = 30.0,
        max_parallel: Optional[int] = None,
    ):
        if max_parallel is not None and max_parallel <= 0:
            raise ValueError(f"max_parallel must be positive, got {max_parallel}")
        self.task_timeout_seconds = task_timeout_seconds
        self.max_parallel = max_parallel

    async def run_all(self, targets: Iterable[Target], task_fn: TaskFn) -> FanOutReport:
        """Run task_fn once per target and join on all of them."""
        start_time = time.monotonic()
        targets = list(targets)
        report = FanOutReport(total=len(targets))

        if not targets:
            return report

        semaphore = asyncio.Semaphore(self.max_parallel) if self.max_parallel else None

        async def run_one(target: Target) -> Tuple[TaskOutcome, Optional[ProbeResult]]:
            with log_context(target=target.address):
                if semaphore is None:
                    return await self._run_guarded(target, task_fn)
                async with semaphore:
                    return await self._run_guarded(target, task_fn)

        tasks = [
            asyncio.create_task(run_one(target), name=f"probe-{target.address}")
            for target in targets
        ]

        try:
            for next_done in asyncio.as_completed(tasks):
                outcome, result = await next_done
                if outcome == TaskOutcome.COMPLETED and result is not None:
                    report.results.append(result)
                elif outcome == TaskOutcome.SKIPPED:
                    report.skipped += 1
                elif outcome == TaskOutcome.TIMED_OUT:
                    report.timed_out += 1
                else:
                    report.failed += 1
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        report.duration_ms = (time.monotonic() - start_time) * 1000
        logger.info(
            f"fan-out finished: {report.completed}/{report.total} completed, "
            f"{report.skipped} skipped, {report.timed_out} timed out, "
            f"{report.failed} failed ({report.duration_ms:.1f}ms)"
        )
        return report

    async def _run_guarded(
        self,
        target: Target,
        task_fn: TaskFn,
    ) -> Tuple[TaskOutcome, Optional[ProbeResult]]:
        """Run one task with the deadline applied; never raises Exception."""
        try:
            if self.task_timeout_seconds is None:
                result = await task_fn(target)
            else:
                result = await asyncio.wait_for(task_fn(target), timeout=self.task_timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(
                f"probe of {target.label} timed out after {self.task_timeout_seconds}s"
            )
            return TaskOutcome.TIMED_OUT, None
        except Exception as e:
            logger.exception(f"probe of {target.label} failed: {e}")
            return TaskOutcome.FAILED, None

        if result is None:
            return TaskOutcome.SKIPPED, None
        return TaskOutcome.COMPLETED, result


__all__ = [
    "TaskFn",
    "TaskOutcome",
    "FanOutReport",
    "FanOutScheduler",
]
