# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# STATUS: Foundation - Exception hierarchy
# PURPOSE: Typed errors raised by collaborators and caught at step level
# ============================================================================
"""
Pinger exceptions.

Every error is terminal at the step that detects it:

    EchoInitError        -> per target: logged, target skipped
    InventoryLookupError -> per step:   logged, node/pod records omitted
    DnsResolutionError   -> per step:   logged, DNS marked unhealthy
    ConfigError          -> startup:    the only error that stops the daemon
"""


class PingerError(Exception):
    """Base class for all pinger errors."""


class EchoInitError(PingerError):
    """The echo client could not start probing an address."""

    def __init__(self, address: str, reason: str):
        super().__init__(f"cannot probe {address!r}: {reason}")
        self.address = address
        self.reason = reason


class InventoryLookupError(PingerError, LookupError):
    """Cluster inventory is unavailable or a lookup matched nothing usable."""


class DnsResolutionError(PingerError):
    """A name could not be resolved."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"failed to resolve {name!r}: {reason}")
        self.name = name
        self.reason = reason


class ConfigError(PingerError, ValueError):
    """Invalid daemon configuration."""


__all__ = [
    "PingerError",
    "EchoInitError",
    "InventoryLookupError",
    "DnsResolutionError",
    "ConfigError",
]
