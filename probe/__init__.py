# ============================================================================
# PROBE MODULE
# ============================================================================
# STATUS: Probe - Concurrent probing engine
# PURPOSE: Echo client, probe task and fan-out scheduler
# ============================================================================
"""
Probe Module

The concurrent probing engine:
- EchoClient: bounded echo requests against one address
- ProbeTask: one target -> one ProbeResult + one MetricsRecord (or a skip)
- FanOutScheduler: one task per target, joined, with per-task deadlines
"""

from probe.echo import EchoClient, EchoStats, PingCommandEchoClient, parse_ping_output
from probe.task import ECHO_COUNT, ProbeTask
from probe.fanout import FanOutReport, FanOutScheduler, TaskOutcome

__all__ = [
    "EchoClient",
    "EchoStats",
    "PingCommandEchoClient",
    "parse_ping_output",
    "ECHO_COUNT",
    "ProbeTask",
    "FanOutReport",
    "FanOutScheduler",
    "TaskOutcome",
]
