# ============================================================================
# LOCAL FABRIC CHECKS
# ============================================================================
# STATUS: Checks - Virtual switch and network controller status
# PURPOSE: Run a status command, emit an up/down record
# ============================================================================
"""
Local Fabric Checks

Simple external-process status queries (priority 10 and 20):
- SwitchCheck: virtual switch daemon and its database (ovs-ctl status)
- ControllerCheck: network controller process (ovn-ctl status_controller)

A zero exit status means up. Anything else, including a missing binary or
a hung command, means down. Either way exactly one record is emitted.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from core.contracts import Subsystem
from core.models import MetricsRecord, SubsystemStatus
from health.core import CheckContext, HealthCheckCategory, HealthCheckPlugin

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusCommandOutput:
    """Combined stdout/stderr plus the failure reason, if any."""
    output: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class StatusCommandRunner(Protocol):
    async def run(self, path: str, args: Sequence[str]) -> StatusCommandOutput:
        ...


class SubprocessStatusRunner:
    """Runs status commands as asyncio subprocesses with a timeout."""

    def __init__(self, timeout_seconds: float = 10.0):
        self.timeout_seconds = timeout_seconds

    async def run(self, path: str, args: Sequence[str]) -> StatusCommandOutput:
        try:
            process = await asyncio.create_subprocess_exec(
                path,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except FileNotFoundError:
            return StatusCommandOutput(output="", error=f"command not found: {path}")
        except PermissionError as e:
            return StatusCommandOutput(output="", error=f"permission denied: {e}")

        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            return StatusCommandOutput(output="", error=f"timeout after {self.timeout_seconds}s")

        output = stdout.decode("utf-8", errors="replace")
        if process.returncode != 0:
            return StatusCommandOutput(output=output, error=f"exit status {process.returncode}")
        return StatusCommandOutput(output=output)


class SubsystemCheck(HealthCheckPlugin):
    """Status-command check for one local subsystem."""

    category = HealthCheckCategory.FABRIC
    subsystem: Subsystem = Subsystem.VIRTUAL_SWITCH

    def __init__(self, runner: StatusCommandRunner, command: str, args: Sequence[str] = ()):
        self.runner = runner
        self.command = command
        self.args = tuple(args)

    async def run(self, context: CheckContext) -> List[MetricsRecord]:
        result = await self.runner.run(self.command, self.args)

        if result.ok:
            logger.info(f"{self.subsystem.value} is up")
            status = SubsystemStatus(subsystem=self.subsystem, up=True)
        else:
            logger.error(
                f"check {self.subsystem.value} status failed {result.error}, {result.output.strip()}"
            )
            status = SubsystemStatus(
                subsystem=self.subsystem,
                up=False,
                detail=(result.output.strip() or result.error)[:1000],
            )

        context.emit(MetricsRecord.for_subsystem(status, context.reporter, cycle=context.cycle))
        return context.records


class SwitchCheck(SubsystemCheck):
    name = "switch"
    priority = 10
    subsystem = Subsystem.VIRTUAL_SWITCH


class ControllerCheck(SubsystemCheck):
    name = "controller"
    priority = 20
    subsystem = Subsystem.NETWORK_CONTROLLER


__all__ = [
    "StatusCommandOutput",
    "StatusCommandRunner",
    "SubprocessStatusRunner",
    "SubsystemCheck",
    "SwitchCheck",
    "ControllerCheck",
]
