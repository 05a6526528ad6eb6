"""
AdScope -- BLE Advertisement Decoder
=====================================

AdScope listens to Bluetooth Low Energy advertisements and renders
each one as a structured, human-readable report: signal estimate,
manufacturer data with a hex dump and vendor-aware decode, service
UUIDs and service data, and any advertisement keys it does not
recognize.

Modules:
    core.models     -- Pydantic domain models
    core.registry   -- Bluetooth SIG company identifiers
    core.report     -- Record assembly and text rendering
    core.engine     -- Collector / report / console orchestration
    decoders        -- Manufacturer-data parser and vendor decoders
    analyzers       -- RSSI signal estimation
    collectors      -- Bleak live scanner and JSON-lines replay
    output          -- Hex dump and Rich console display
    cli             -- Click-based command-line interface

References:
    - Bluetooth SIG. (2023). Bluetooth Core Specification v5.4.
    - Bluetooth SIG. (2023). Assigned Numbers Document.
"""

__version__ = "1.0.0"
__tool__ = "AdScope"
__description__ = "BLE Advertisement Decoder"
