# ============================================================================
# RESULT & METRICS RECORD MODELS
# ============================================================================
# STATUS: Core model - Probe outcomes and the metrics record union
# PURPOSE: Everything that crosses the core's output boundary
# EXPORTS: ProbeResult, SubsystemStatus, DnsProbeResult, MetricsRecord
# DEPENDENCIES: pydantic
# ============================================================================
"""
Result Models

ProbeResult, SubsystemStatus and DnsProbeResult are the raw observations.
MetricsRecord wraps exactly one of them, tagged with a ProbeKind and the
reporting daemon's identity. The record is the only thing handed to the
metrics sink.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field, model_validator

from core.contracts import ProbeKind, Subsystem
from core.models.target import Reporter, Target


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProbeResult(BaseModel):
    """
    Echo statistics for one target.

    Invariant: 0 <= received <= sent. The probe task clamps overcounted
    receipts before building a result, so construction never sees them.
    """

    target: Target
    sent: int = Field(..., ge=0)
    received: int = Field(..., ge=0)
    avg_rtt_ms: float = Field(default=0.0, ge=0.0, description="Zero if every packet was lost")

    @model_validator(mode="after")
    def _check_counts(self) -> "ProbeResult":
        if self.received > self.sent:
            raise ValueError(
                f"received ({self.received}) exceeds sent ({self.sent})"
            )
        return self

    @computed_field
    @property
    def loss(self) -> int:
        return self.sent - self.received

    @property
    def loss_ratio(self) -> float:
        if self.sent == 0:
            return 0.0
        return self.loss / self.sent

    @property
    def all_lost(self) -> bool:
        return self.sent > 0 and self.received == 0


class SubsystemStatus(BaseModel):
    """Up/down status of a local fabric subsystem. No latency dimension."""

    subsystem: Subsystem
    up: bool
    detail: Optional[str] = Field(default=None, description="Command output on failure")


class DnsProbeResult(BaseModel):
    """Outcome of one DNS resolution probe."""

    name: str
    success: bool
    addresses: List[str] = Field(default_factory=list)
    latency_ms: float = Field(default=0.0, ge=0.0)
    error: Optional[str] = None

    @model_validator(mode="after")
    def _no_addresses_on_failure(self) -> "DnsProbeResult":
        if not self.success and self.addresses:
            raise ValueError("failed resolution cannot carry addresses")
        return self


class MetricsRecord(BaseModel):
    """
    Tagged union of one observation plus the reporter identity.

    Exactly one payload is set, and it must match the kind:
        NODE_PING / POD_PING -> probe
        DNS                  -> dns
        SWITCH / CONTROLLER  -> subsystem
    """

    kind: ProbeKind
    reporter: Reporter
    probe: Optional[ProbeResult] = None
    dns: Optional[DnsProbeResult] = None
    subsystem: Optional[SubsystemStatus] = None
    cycle: int = 0
    observed_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _payload_matches_kind(self) -> "MetricsRecord":
        payloads = [p for p in (self.probe, self.dns, self.subsystem) if p is not None]
        if len(payloads) != 1:
            raise ValueError("a metrics record carries exactly one payload")

        if self.kind.is_ping:
            if self.probe is None:
                raise ValueError(f"{self.kind.value} record requires a probe result")
            if ProbeKind.for_target(self.probe.target.kind) != self.kind:
                raise ValueError(
                    f"{self.kind.value} record cannot carry a {self.probe.target.kind.value} target"
                )
        elif self.kind == ProbeKind.DNS:
            if self.dns is None:
                raise ValueError("dns record requires a dns result")
        else:
            if self.subsystem is None or self.subsystem.subsystem.probe_kind != self.kind:
                raise ValueError(f"{self.kind.value} record requires a matching subsystem status")
        return self

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def for_probe(cls, result: ProbeResult, reporter: Reporter, cycle: int = 0) -> "MetricsRecord":
        return cls(
            kind=ProbeKind.for_target(result.target.kind),
            reporter=reporter,
            probe=result,
            cycle=cycle,
        )

    @classmethod
    def for_dns(cls, result: DnsProbeResult, reporter: Reporter, cycle: int = 0) -> "MetricsRecord":
        return cls(kind=ProbeKind.DNS, reporter=reporter, dns=result, cycle=cycle)

    @classmethod
    def for_subsystem(cls, status: SubsystemStatus, reporter: Reporter, cycle: int = 0) -> "MetricsRecord":
        return cls(
            kind=status.subsystem.probe_kind,
            reporter=reporter,
            subsystem=status,
            cycle=cycle,
        )


__all__ = [
    "ProbeResult",
    "SubsystemStatus",
    "DnsProbeResult",
    "MetricsRecord",
]
