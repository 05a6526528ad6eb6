"""
AdScope Decoders
=================

Manufacturer-data parsing and per-vendor payload decoders.

Modules:
    manufacturer  -- company-id split, vendor lookup and dispatch
    vendors       -- Apple, Microsoft, Samsung, Nordic, Govee, generic
"""

from adscope.decoders.manufacturer import decode_payload, parse, select_decoder

__all__ = [
    "decode_payload",
    "parse",
    "select_decoder",
]
