# ============================================================================
# ECHO CLIENT
# ============================================================================
# STATUS: Probe - ICMP echo capability
# PURPOSE: Send a bounded number of echo requests and report statistics
# ============================================================================
"""
Echo Client

The EchoClient protocol is the boundary between the probing engine and the
mechanics of ICMP: sockets, packet construction and privileges all live
behind it.

PingCommandEchoClient is the production implementation. It runs the system
``ping`` binary as an asyncio subprocess and parses its summary lines:

    5 packets transmitted, 3 received, 40% packet loss, time 4005ms
    rtt min/avg/max/mdev = 0.041/0.052/0.066/0.009 ms

busybox prints ``3 packets received`` and ``round-trip min/avg/max``;
both spellings are handled. The command line sticks to flags both
implementations accept (-4/-6, -q, -c, -i, -W).
"""

import asyncio
import ipaddress
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Protocol, runtime_checkable

from core.errors import EchoInitError

logger = logging.getLogger(__name__)

_TRANSMITTED_RE = re.compile(
    r"(?P<sent>\d+)\s+packets?\s+transmitted,\s+(?P<received>\d+)\s+(?:packets\s+)?received"
)
_RTT_RE = re.compile(
    r"(?:rtt|round-trip)\s+min/avg/max(?:/\w+)?\s*=\s*"
    r"(?P<min>[\d.]+)/(?P<avg>[\d.]+)/(?P<max>[\d.]+)"
)


@dataclass(frozen=True)
class EchoStats:
    """Raw statistics returned by an echo client."""
    sent: int
    received: int
    avg_rtt_ms: float = 0.0


@runtime_checkable
class EchoClient(Protocol):
    """Performs ``count`` echo requests against one address."""

    async def probe(self, address: str, count: int) -> EchoStats:
        """
        Probe an address.

        Raises:
            EchoInitError: address invalid or probing not permitted
        """
        ...


def parse_ping_output(output: str) -> Optional[EchoStats]:
    """
    Extract statistics from ping output.

    Returns None when no summary line is present (ping failed to start).
    """
    counts = _TRANSMITTED_RE.search(output)
    if counts is None:
        return None

    sent = int(counts.group("sent"))
    received = int(counts.group("received"))

    avg_rtt_ms = 0.0
    rtt = _RTT_RE.search(output)
    if rtt is not None and received > 0:
        avg_rtt_ms = float(rtt.group("avg"))

    return EchoStats(sent=sent, received=received, avg_rtt_ms=avg_rtt_ms)


class PingCommandEchoClient:
    """
    Echo client backed by the system ``ping`` binary.

    The daemon runs with CAP_NET_RAW (or root), which ping needs for
    raw ICMP sockets. A missing binary or permission failure surfaces as
    EchoInitError so the probe task can skip the target.
    """

    def __init__(
        self,
        binary: str = "ping",
        interval_seconds: float = 1.0,
        reply_timeout_seconds: int = 1,
    ):
        self.binary = binary
        self.interval_seconds = interval_seconds
        self.reply_timeout_seconds = reply_timeout_seconds

    def build_command(self, address: str, count: int) -> List[str]:
        """Build the argv for one probe; validates the address."""
        if count <= 0:
            raise EchoInitError(address, f"echo count must be positive, got {count}")
        try:
            ip = ipaddress.ip_address(address)
        except ValueError:
            raise EchoInitError(address, "not a valid IP address")

        return [
            self.binary,
            "-6" if ip.version == 6 else "-4",
            "-q",
            "-c", str(count),
            "-i", f"{self.interval_seconds:g}",
            "-W", str(self.reply_timeout_seconds),
            str(ip),
        ]

    async def probe(self, address: str, count: int) -> EchoStats:
        cmd = self.build_command(address, count)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except FileNotFoundError:
            raise EchoInitError(address, f"ping binary not found: {self.binary}")
        except PermissionError as e:
            raise EchoInitError(address, f"permission denied: {e}")

        try:
            stdout, _ = await process.communicate()
        except asyncio.CancelledError:
            # Deadline hit in the scheduler; don't leak the child
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

        output = stdout.decode("utf-8", errors="replace")
        stats = parse_ping_output(output)
        if stats is None:
            raise EchoInitError(
                address,
                f"ping exited with code {process.returncode}: {output.strip()[:200]}",
            )

        logger.debug(
            f"ping {address}: exit={process.returncode} "
            f"sent={stats.sent} received={stats.received}"
        )
        return stats


__all__ = [
    "EchoStats",
    "EchoClient",
    "PingCommandEchoClient",
    "parse_ping_output",
]
