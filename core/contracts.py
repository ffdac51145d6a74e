# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Core enums shared by every component
# PURPOSE: Probe kinds, target kinds, subsystems and loop states
# EXPORTS: RunMode, LoopState, ProbeKind, TargetKind, Subsystem
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the connectivity pinger.

These enums cross every boundary inside the daemon:
- Config (run mode parsed from env / CLI)
- Models (target and record tagging)
- Metrics sink (dispatch on record kind)
"""

from enum import Enum


# ============================================================================
# RUN MODE / LOOP STATE
# ============================================================================

class RunMode(str, Enum):
    """
    How the cycle loop drives the health check runner.

    The upstream pinger called these "job" and "server"; both spellings
    are accepted by parse().
    """
    ONE_SHOT = "one-shot"        # Run a single cycle, then exit
    CONTINUOUS = "continuous"    # Run forever on a fixed interval

    @classmethod
    def parse(cls, value: str) -> "RunMode":
        """Parse a mode string, accepting legacy aliases."""
        aliases = {
            "job": cls.ONE_SHOT,
            "once": cls.ONE_SHOT,
            "oneshot": cls.ONE_SHOT,
            "server": cls.CONTINUOUS,
            "daemon": cls.CONTINUOUS,
        }
        normalized = value.strip().lower()
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


class LoopState(str, Enum):
    """
    Cycle loop states.

    State transitions:
        IDLE -> RUNNING -> DONE                      (one-shot)
        IDLE -> RUNNING -> SLEEPING -> RUNNING ...   (continuous)
    """
    IDLE = "idle"
    RUNNING = "running"
    SLEEPING = "sleeping"
    DONE = "done"


# ============================================================================
# PROBE / TARGET KINDS
# ============================================================================

class TargetKind(str, Enum):
    """What a probe target represents."""
    NODE = "node"
    POD = "pod"


class ProbeKind(str, Enum):
    """Tag carried by every MetricsRecord."""
    NODE_PING = "node_ping"
    POD_PING = "pod_ping"
    DNS = "dns"
    SWITCH = "switch"
    CONTROLLER = "controller"

    @classmethod
    def for_target(cls, kind: TargetKind) -> "ProbeKind":
        """Record kind emitted for a ping against the given target kind."""
        return cls.NODE_PING if kind == TargetKind.NODE else cls.POD_PING

    @property
    def is_ping(self) -> bool:
        return self in (ProbeKind.NODE_PING, ProbeKind.POD_PING)


class Subsystem(str, Enum):
    """Local network-fabric subsystems with an up/down status."""
    VIRTUAL_SWITCH = "virtual-switch"
    NETWORK_CONTROLLER = "network-controller"

    @property
    def probe_kind(self) -> ProbeKind:
        if self == Subsystem.VIRTUAL_SWITCH:
            return ProbeKind.SWITCH
        return ProbeKind.CONTROLLER


__all__ = [
    "RunMode",
    "LoopState",
    "TargetKind",
    "ProbeKind",
    "Subsystem",
]
