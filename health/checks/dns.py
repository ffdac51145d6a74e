# ============================================================================
# DNS CHECK
# ============================================================================
# STATUS: Checks - Name resolution
# PURPOSE: Resolve one configured name, record success and latency
# ============================================================================
"""
DNS Check

Resolves the configured name once per cycle (priority 50). A lookup that
fails, raises, or overruns its timeout is recorded as unhealthy with no
addresses; every run emits exactly one record.
"""

import asyncio
import logging
import socket
import time
from typing import List, Protocol

from core.errors import DnsResolutionError
from core.models import DnsProbeResult, MetricsRecord
from health.core import CheckContext, HealthCheckCategory, HealthCheckPlugin

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    async def resolve(self, name: str) -> List[str]:
        ...


class SystemResolver:
    """Resolves through the host resolver (getaddrinfo) on the running loop."""

    async def resolve(self, name: str) -> List[str]:
        loop = asyncio.get_running_loop()
        try:
            infos = await loop.getaddrinfo(name, None, proto=socket.IPPROTO_TCP)
        except (socket.gaierror, UnicodeError) as e:
            raise DnsResolutionError(name, str(e)) from e

        addresses: List[str] = []
        for _family, _type, _proto, _canonname, sockaddr in infos:
            address = sockaddr[0]
            if address not in addresses:
                addresses.append(address)

        if not addresses:
            raise DnsResolutionError(name, "no addresses returned")
        return addresses


class DnsCheck(HealthCheckPlugin):
    name = "dns"
    category = HealthCheckCategory.RESOLUTION

    def __init__(self, resolver: Resolver, target_name: str, timeout_seconds: float = 5.0):
        self.resolver = resolver
        self.target_name = target_name
        self.timeout_seconds = timeout_seconds

    async def run(self, context: CheckContext) -> List[MetricsRecord]:
        start_time = time.monotonic()
        try:
            addresses = await asyncio.wait_for(
                self.resolver.resolve(self.target_name), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            result = self._failed(start_time, f"timeout after {self.timeout_seconds}s")
        except DnsResolutionError as e:
            result = self._failed(start_time, e.reason)
        except Exception as e:
            result = self._failed(start_time, f"{type(e).__name__}: {e}")
        else:
            result = DnsProbeResult(
                name=self.target_name,
                success=True,
                addresses=addresses,
                latency_ms=(time.monotonic() - start_time) * 1000,
            )
            logger.info(
                f"resolve dns {self.target_name} to {addresses} in {result.latency_ms:.2f}ms"
            )

        context.emit(MetricsRecord.for_dns(result, context.reporter, cycle=context.cycle))
        return context.records

    def _failed(self, start_time: float, reason: str) -> DnsProbeResult:
        result = DnsProbeResult(
            name=self.target_name,
            success=False,
            latency_ms=(time.monotonic() - start_time) * 1000,
            error=reason,
        )
        logger.error(f"failed to resolve dns {self.target_name}: {reason}")
        return result


__all__ = [
    "Resolver",
    "SystemResolver",
    "DnsCheck",
]
