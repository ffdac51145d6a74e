# ============================================================================
# TARGET MODEL
# ============================================================================
# STATUS: Core model - Probe target identity
# PURPOSE: Address plus node/pod metadata for one reachability probe
# EXPORTS: Target, Reporter
# DEPENDENCIES: pydantic
# ============================================================================
"""
Target Model

A Target is an address plus the metadata identifying the node or pod
behind it. Targets are built fresh from the inventory every cycle and are
immutable for the rest of that cycle.

The Reporter is the other half of every metric label set: the identity of
the daemon doing the probing.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.contracts import TargetKind


class Target(BaseModel):
    """One node or pod address to probe."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(..., min_length=1, description="IP address to probe")
    kind: TargetKind = Field(..., description="Node or pod")
    node_name: str = Field(default="", description="Owning node name")
    pod_name: Optional[str] = Field(default=None, description="Pod name (pod targets)")
    host_ip: Optional[str] = Field(default=None, description="Host IP of the owning node")

    @field_validator("address")
    @classmethod
    def _strip_address(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("address must not be blank")
        return value

    @classmethod
    def node(cls, name: str, address: str) -> "Target":
        return cls(address=address, kind=TargetKind.NODE, node_name=name, host_ip=address)

    @classmethod
    def pod(
        cls,
        name: str,
        address: str,
        node_name: str = "",
        host_ip: Optional[str] = None,
    ) -> "Target":
        return cls(
            address=address,
            kind=TargetKind.POD,
            node_name=node_name,
            pod_name=name,
            host_ip=host_ip,
        )

    @property
    def label(self) -> str:
        """Short human identity for log lines."""
        name = self.pod_name if self.kind == TargetKind.POD else self.node_name
        return f"{self.kind.value} {name or '?'} {self.address}"


class Reporter(BaseModel):
    """Identity of the reporting daemon (from the downward API)."""

    model_config = ConfigDict(frozen=True)

    node_name: str = ""
    pod_name: str = ""
    host_ip: str = ""
    pod_ip: str = ""


__all__ = [
    "Target",
    "Reporter",
]
