"""
AdScope Core
=============

Domain models, company registry, and the advertisement report.
"""

from adscope.core.errors import AdScopeError, CollectorError, ReplayError
from adscope.core.models import (
    AdvertisementKey,
    AdvertisementRecord,
    DiscoveryEvent,
    DistanceBucket,
    Fact,
    ManufacturerSection,
    ParsedManufacturerData,
    SignalEstimate,
    SignalQuality,
    VendorDecodeResult,
    VendorDecoder,
)

__all__ = [
    "AdScopeError",
    "CollectorError",
    "ReplayError",
    "AdvertisementKey",
    "AdvertisementRecord",
    "DiscoveryEvent",
    "DistanceBucket",
    "Fact",
    "ManufacturerSection",
    "ParsedManufacturerData",
    "SignalEstimate",
    "SignalQuality",
    "VendorDecodeResult",
    "VendorDecoder",
]
