# ============================================================================
# ORCHESTRATOR MODULE
# ============================================================================
# STATUS: Core - Top-level loop
# PURPOSE: Repeat probing cycles on a fixed interval
# ============================================================================
"""
Orchestrator Module

Usage:
    from orchestrator import CycleLoop

    loop = CycleLoop(runner, mode=RunMode.CONTINUOUS, interval_seconds=5)
    await loop.run()  # returns after stop() or a one-shot cycle
"""

from .loop import CycleLoop

__all__ = ["CycleLoop"]
