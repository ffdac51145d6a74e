# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the pinger daemon.
"""

from core.config.defaults import (
    ProbeDefaults,
    SubsystemDefaults,
    PingerConfig,
)

__all__ = [
    "ProbeDefaults",
    "SubsystemDefaults",
    "PingerConfig",
]
