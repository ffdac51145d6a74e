# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export core contracts, errors and models
# ============================================================================

from core.contracts import LoopState, ProbeKind, RunMode, Subsystem, TargetKind
from core.errors import (
    ConfigError,
    DnsResolutionError,
    EchoInitError,
    InventoryLookupError,
    PingerError,
)
from core.models import (
    DnsProbeResult,
    MetricsRecord,
    ProbeResult,
    Reporter,
    SubsystemStatus,
    Target,
)

__all__ = [
    # Enums
    "LoopState",
    "ProbeKind",
    "RunMode",
    "Subsystem",
    "TargetKind",
    # Errors
    "PingerError",
    "EchoInitError",
    "InventoryLookupError",
    "DnsResolutionError",
    "ConfigError",
    # Models
    "Target",
    "Reporter",
    "ProbeResult",
    "SubsystemStatus",
    "DnsProbeResult",
    "MetricsRecord",
]
