# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for probing, subsystem checks and the loop
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for the pinger daemon. Every value can be
overridden via environment variables; main.py overlays CLI flags on top.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides (from_env)
- validate() raises ConfigError, the only error that stops the daemon
"""

import os
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from core.contracts import RunMode
from core.errors import ConfigError
from core.models import Reporter


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_optional_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    value = float(raw)
    return value if value > 0 else None


def _env_optional_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    value = int(raw)
    return value if value > 0 else None


@dataclass(frozen=True)
class ProbeDefaults:
    """
    Defaults for echo probing and the fan-out scheduler.

    echo_count balances noise against the latency of the whole cycle.
    """
    echo_count: int = 5
    echo_interval_seconds: float = 1.0
    echo_timeout_seconds: int = 1            # per-reply wait passed to ping -W
    ping_binary: str = "ping"

    # Fan-out scheduler
    task_timeout_seconds: Optional[float] = 30.0   # None disables the per-task deadline
    max_parallel: Optional[int] = None             # None = one task per target, uncapped

    @classmethod
    def from_env(cls) -> "ProbeDefaults":
        """Create from environment variables."""
        return cls(
            echo_count=int(os.getenv("PINGER_ECHO_COUNT", 5)),
            echo_interval_seconds=float(os.getenv("PINGER_ECHO_INTERVAL", 1.0)),
            echo_timeout_seconds=int(os.getenv("PINGER_ECHO_TIMEOUT", 1)),
            ping_binary=os.getenv("PINGER_PING_BINARY", "ping"),
            task_timeout_seconds=_env_optional_float("PINGER_TASK_TIMEOUT", 30.0),
            max_parallel=_env_optional_int("PINGER_MAX_PARALLEL", None),
        )


@dataclass(frozen=True)
class SubsystemDefaults:
    """
    Status commands for the local network fabric.

    A zero exit status means the subsystem is up.
    """
    switch_command: str = "/usr/share/openvswitch/scripts/ovs-ctl"
    switch_args: Tuple[str, ...] = ("status",)
    controller_command: str = "/usr/share/openvswitch/scripts/ovn-ctl"
    controller_args: Tuple[str, ...] = ("status_controller",)
    status_timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls) -> "SubsystemDefaults":
        """Create from environment variables."""
        return cls(
            switch_command=os.getenv("PINGER_SWITCH_STATUS_CMD", cls.switch_command),
            switch_args=tuple(os.getenv("PINGER_SWITCH_STATUS_ARGS", "status").split()),
            controller_command=os.getenv("PINGER_CONTROLLER_STATUS_CMD", cls.controller_command),
            controller_args=tuple(
                os.getenv("PINGER_CONTROLLER_STATUS_ARGS", "status_controller").split()
            ),
            status_timeout_seconds=float(os.getenv("PINGER_STATUS_TIMEOUT", 10.0)),
        )


# ============================================================================
# DAEMON CONFIGURATION
# ============================================================================

@dataclass(frozen=True)
class PingerConfig:
    """
    Complete daemon configuration.

    Reporter identity comes from the downward API (NODE_NAME, POD_NAME,
    HOST_IP, POD_IP).
    """
    mode: RunMode = RunMode.CONTINUOUS
    interval_seconds: int = 5

    # DNS probe
    dns_target: str = "kubernetes.default"
    dns_timeout_seconds: float = 5.0

    # Peer daemon (pod-to-pod probing)
    peer_namespace: str = "kube-system"
    peer_workload: str = "kube-ovn-pinger"
    peer_selector: Optional[str] = None      # overrides the workload's selector

    # Reporter identity
    node_name: str = ""
    pod_name: str = ""
    host_ip: str = ""
    pod_ip: str = ""

    # Check toggles
    enable_switch_check: bool = True
    enable_controller_check: bool = True
    enable_node_ping: bool = True
    enable_pod_ping: bool = True
    enable_dns_check: bool = True

    # Exposition
    metrics_port: int = 8080
    serve_metrics: bool = True

    probe: ProbeDefaults = field(default_factory=ProbeDefaults)
    subsystems: SubsystemDefaults = field(default_factory=SubsystemDefaults)

    @property
    def reporter(self) -> Reporter:
        return Reporter(
            node_name=self.node_name,
            pod_name=self.pod_name,
            host_ip=self.host_ip,
            pod_ip=self.pod_ip,
        )

    def with_overrides(self, **changes) -> "PingerConfig":
        """Copy with non-None overrides applied (used for CLI flags)."""
        applied = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **applied)

    def validate(self) -> "PingerConfig":
        """Raise ConfigError on an unusable configuration."""
        if not isinstance(self.mode, RunMode):
            raise ConfigError(f"Unknown mode: {self.mode!r}")
        if self.interval_seconds <= 0:
            raise ConfigError(f"interval_seconds must be > 0, got {self.interval_seconds}")
        if self.enable_dns_check and not self.dns_target.strip():
            raise ConfigError("dns_target must be set when the DNS check is enabled")
        if self.peer_selector is not None and not self.peer_selector.strip():
            raise ConfigError("peer_selector must not be blank")
        if self.enable_pod_ping and not (self.peer_selector or self.peer_workload):
            raise ConfigError("pod ping needs peer_workload or peer_selector")
        if self.probe.echo_count <= 0:
            raise ConfigError(f"echo_count must be > 0, got {self.probe.echo_count}")
        if not 0 < self.metrics_port < 65536:
            raise ConfigError(f"metrics_port out of range: {self.metrics_port}")
        return self

    @classmethod
    def from_env(cls) -> "PingerConfig":
        """Create from environment variables."""
        try:
            mode = RunMode.parse(os.getenv("PINGER_MODE", RunMode.CONTINUOUS.value))
        except ValueError as e:
            raise ConfigError(f"Invalid PINGER_MODE: {e}") from e

        try:
            return cls(
                mode=mode,
                interval_seconds=int(os.getenv("PINGER_INTERVAL", 5)),
                dns_target=os.getenv("PINGER_DNS_TARGET", "kubernetes.default"),
                dns_timeout_seconds=float(os.getenv("PINGER_DNS_TIMEOUT", 5.0)),
                peer_namespace=os.getenv("PINGER_PEER_NAMESPACE", "kube-system"),
                peer_workload=os.getenv("PINGER_PEER_WORKLOAD", "kube-ovn-pinger"),
                peer_selector=os.getenv("PINGER_PEER_SELECTOR") or None,
                node_name=os.getenv("NODE_NAME", ""),
                pod_name=os.getenv("POD_NAME", ""),
                host_ip=os.getenv("HOST_IP", ""),
                pod_ip=os.getenv("POD_IP", ""),
                enable_switch_check=_env_bool("PINGER_CHECK_SWITCH", True),
                enable_controller_check=_env_bool("PINGER_CHECK_CONTROLLER", True),
                enable_node_ping=_env_bool("PINGER_CHECK_NODES", True),
                enable_pod_ping=_env_bool("PINGER_CHECK_PODS", True),
                enable_dns_check=_env_bool("PINGER_CHECK_DNS", True),
                metrics_port=int(os.getenv("PINGER_METRICS_PORT", 8080)),
                serve_metrics=_env_bool("PINGER_SERVE_METRICS", True),
                probe=ProbeDefaults.from_env(),
                subsystems=SubsystemDefaults.from_env(),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid environment configuration: {e}") from e


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ProbeDefaults",
    "SubsystemDefaults",
    "PingerConfig",
]
