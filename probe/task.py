# ============================================================================
# PROBE TASK
# ============================================================================
# STATUS: Probe - One unit of fan-out work
# PURPOSE: Ping one target, normalize stats, emit exactly one record
# ============================================================================
"""
Probe Task

"Ping this address N times." Wraps one EchoClient call with result
normalization and metrics emission.

Outcomes per target:
- EchoInitError   -> logged, None returned, nothing emitted
- stats returned  -> one ProbeResult, one MetricsRecord emitted before return

Overcounted receipts (received > sent) can only come from a faulty echo
client. They are clamped to sent and logged as a warning, so loss is 0.
"""

import logging
from typing import Optional

from core.errors import EchoInitError
from core.models import MetricsRecord, ProbeResult, Reporter, Target
from metrics.sink import MetricsSink
from probe.echo import EchoClient, EchoStats

logger = logging.getLogger(__name__)

ECHO_COUNT = 5


class ProbeTask:
    """Callable probe bound to an echo client, a sink and a reporter."""

    def __init__(
        self,
        echo_client: EchoClient,
        sink: MetricsSink,
        reporter: Reporter,
        echo_count: int = ECHO_COUNT,
        cycle: int = 0,
    ):
        if echo_count <= 0:
            raise ValueError(f"echo_count must be positive, got {echo_count}")
        self.echo_client = echo_client
        self.sink = sink
        self.reporter = reporter
        self.echo_count = echo_count
        self.cycle = cycle

    async def __call__(self, target: Target) -> Optional[ProbeResult]:
        return await self.run(target)

    async def run(self, target: Target) -> Optional[ProbeResult]:
        """Probe one target. Returns None if the target was skipped."""
        try:
            stats = await self.echo_client.probe(target.address, self.echo_count)
        except EchoInitError as e:
            logger.error(f"failed to init pinger for {target.label}: {e.reason}")
            return None

        result = self.normalize(target, stats)

        logger.info(
            f"ping {target.label}, count: {result.sent}, "
            f"loss: {result.loss} ({result.loss_ratio * 100:.2f}%), "
            f"average rtt {result.avg_rtt_ms:.2f}ms"
        )

        self.sink.emit(MetricsRecord.for_probe(result, self.reporter, cycle=self.cycle))
        return result

    @staticmethod
    def normalize(target: Target, stats: EchoStats) -> ProbeResult:
        """Turn raw echo stats into a ProbeResult that satisfies 0 <= received <= sent."""
        sent = max(stats.sent, 0)
        received = max(stats.received, 0)

        if received > sent:
            logger.warning(
                f"echo client reported {received} replies for {sent} requests "
                f"to {target.address}; clamping to {sent}"
            )
            received = sent

        avg_rtt_ms = stats.avg_rtt_ms if received > 0 else 0.0

        return ProbeResult(
            target=target,
            sent=sent,
            received=received,
            avg_rtt_ms=max(avg_rtt_ms, 0.0),
        )


__all__ = [
    "ECHO_COUNT",
    "ProbeTask",
]
