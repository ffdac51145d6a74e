# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# ============================================================================
"""
Models Module - Central Export Point

Targets go in, records come out:
    Target / Reporter          -> who is probed, who is probing
    ProbeResult / DnsProbeResult / SubsystemStatus -> raw observations
    MetricsRecord              -> tagged union handed to the sink
"""

from core.models.target import Target, Reporter
from core.models.results import (
    ProbeResult,
    SubsystemStatus,
    DnsProbeResult,
    MetricsRecord,
)

__all__ = [
    # Identity
    "Target",
    "Reporter",
    # Observations
    "ProbeResult",
    "SubsystemStatus",
    "DnsProbeResult",
    # Output
    "MetricsRecord",
]
