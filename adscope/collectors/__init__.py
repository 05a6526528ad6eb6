"""
AdScope Collectors
===================

Sources of discovery events for the decoder.

Modules:
    ble_collector  -- Live BLE advertisement scanning via Bleak
    replay         -- JSON-lines reader for recorded discovery events
"""

from adscope.collectors.ble_collector import BLECollector, event_from_bleak
from adscope.collectors.replay import read_events

__all__ = [
    "BLECollector",
    "event_from_bleak",
    "read_events",
]
