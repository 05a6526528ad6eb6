"""
AdScope Analyzers
==================

Modules:
    signal  -- RSSI quality and distance bucket estimation
"""

from adscope.analyzers.signal import estimate

__all__ = ["estimate"]
