# ============================================================================
# VERSION - CLUSTER CONNECTIVITY PINGER
# ============================================================================
"""
Version information for the connectivity pinger.

This is the single source of truth for the application version.
Updated manually for each release.
"""
# Version format: major.minor.patch
__version__ = "0.3.0"

# Build metadata
BUILD_DATE = "2026-10-19"
