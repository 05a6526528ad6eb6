"""
AdScope Core Data Models
=========================

Pydantic-based domain models for the advertisement decoder. Every model
is frozen: a record is built once from one discovery event, rendered,
and discarded. Sequences are tuples for the same reason.

References:
    - Bluetooth SIG. (2023). Core Specification v5.4. Vol 3, Part C,
      Section 11: Advertising and Scan Response Data Format.
    - Bluetooth SIG. (2023). Supplement to the Core Specification,
      Part A, Section 1.4: Manufacturer Specific Data.
    - Pydantic v2 Documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class VendorDecoder(str, enum.Enum):
    """Closed set of manufacturer-data decoders.

    One variant per vendor layout the decoder understands plus the
    GENERIC fallback that accepts any company identifier.
    """

    APPLE = "apple"
    MICROSOFT = "microsoft"
    SAMSUNG = "samsung"
    NORDIC = "nordic"
    GOVEE = "govee"
    GENERIC = "generic"


class SignalQuality(str, enum.Enum):
    """Coarse RSSI quality label."""

    EXCELLENT = "Excellent"
    VERY_GOOD = "Very Good"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    VERY_POOR = "Very Poor"
    BARELY_DETECTABLE = "Barely Detectable"


class DistanceBucket(str, enum.Enum):
    """Coarse distance estimate paired with a :class:`SignalQuality`."""

    M_0_2 = "0-2m"
    M_2_5 = "2-5m"
    M_5_10 = "5-10m"
    M_10_15 = "10-15m"
    M_15_25 = "15-25m"
    M_25_35 = "25-35m"
    M_35_PLUS = "35m+"


class AdvertisementKey(str, enum.Enum):
    """Advertisement keys the report understands.

    Any other key found in a discovery event is surfaced verbatim in the
    "other" section of the record.
    """

    LOCAL_NAME = "local_name"
    MANUFACTURER_DATA = "manufacturer_data"
    SERVICE_UUIDS = "service_uuids"
    SERVICE_DATA = "service_data"
    TX_POWER = "tx_power"
    CONNECTABLE = "connectable"
    SOLICITED_SERVICE_UUIDS = "solicited_service_uuids"
    OVERFLOW_SERVICE_UUIDS = "overflow_service_uuids"


RECOGNIZED_KEYS: frozenset[str] = frozenset(key.value for key in AdvertisementKey)


# ---------------------------------------------------------------------------
# Decode results
# ---------------------------------------------------------------------------


class Fact(BaseModel):
    """One human-readable line produced by a vendor decoder.

    A fact is either a label/value pair or free text (``value`` is
    ``None``). ``inferred`` marks heuristic interpretations of
    proprietary fields that are not backed by a published format.
    """

    model_config = ConfigDict(frozen=True)

    label: str
    value: Optional[str] = None
    inferred: bool = False

    def render(self) -> str:
        text = self.label if self.value is None else f"{self.label}: {self.value}"
        return f"{text} (inferred)" if self.inferred else text


class VendorDecodeResult(BaseModel):
    """Ordered facts produced by one decoder for one payload.

    Attributes:
        decoder: Decoder variant that produced the facts, or ``None`` when
            the manufacturer blob was too short to carry a company id.
        facts: Fact lines in emission order.
        incomplete: ``True`` when a structural length check failed.
    """

    model_config = ConfigDict(frozen=True)

    decoder: Optional[VendorDecoder] = None
    facts: tuple[Fact, ...] = ()
    incomplete: bool = False

    def lines(self) -> list[str]:
        return [fact.render() for fact in self.facts]


class ParsedManufacturerData(BaseModel):
    """Result of splitting and decoding one manufacturer-data blob.

    Attributes:
        raw: The complete blob as received, company id included.
        company_id: Little-endian 16-bit identifier, ``None`` if fewer
            than two bytes were present.
        vendor_name: Registry name for ``company_id``, ``None`` if unknown.
        payload: Bytes following the company identifier.
        result: Decoder output.
        incomplete: ``True`` when the blob or the payload was too short.
    """

    model_config = ConfigDict(frozen=True)

    raw: bytes = b""
    company_id: Optional[int] = None
    vendor_name: Optional[str] = None
    payload: bytes = b""
    result: VendorDecodeResult = Field(default_factory=VendorDecodeResult)
    incomplete: bool = False

    @property
    def vendor_display(self) -> str:
        return self.vendor_name if self.vendor_name is not None else "<Unknown>"

    @field_serializer("raw", "payload")
    def _hex_bytes(self, value: bytes) -> str:
        return value.hex()


class SignalEstimate(BaseModel):
    """Quality label and distance bucket derived from one RSSI reading."""

    model_config = ConfigDict(frozen=True)

    quality: SignalQuality
    distance: DistanceBucket


# ---------------------------------------------------------------------------
# Discovery events and advertisement records
# ---------------------------------------------------------------------------


class DiscoveryEvent(BaseModel):
    """One advertisement as delivered by a collector.

    ``advertisement`` maps advertisement keys (see
    :class:`AdvertisementKey`) to raw values; unrecognized keys are
    allowed and carried through untouched.
    """

    model_config = ConfigDict(frozen=True)

    peer_id: str
    name: Optional[str] = None
    rssi: int
    advertisement: dict[str, Any] = Field(default_factory=dict)


class ManufacturerSection(BaseModel):
    """Manufacturer-data part of a record: the parse and its hex dump."""

    model_config = ConfigDict(frozen=True)

    parsed: ParsedManufacturerData
    hexdump: str

    @property
    def byte_count(self) -> int:
        return len(self.parsed.raw)


class AdvertisementRecord(BaseModel):
    """Structured, immutable view of one discovery event.

    Only ``peer_id`` and ``rssi`` are always present; every other field
    reflects whatever the advertisement happened to carry.
    """

    model_config = ConfigDict(frozen=True)

    peer_id: str
    display_name: str = "Unknown"
    rssi: int
    signal: SignalEstimate
    local_name: Optional[str] = None
    manufacturer: Optional[ManufacturerSection] = None
    service_uuids: Optional[tuple[str, ...]] = None
    service_data: tuple[tuple[str, bytes], ...] = ()
    tx_power: Optional[int] = None
    connectable: Optional[bool] = None
    solicited_service_uuids: Optional[tuple[str, ...]] = None
    overflow_service_uuids: Optional[tuple[str, ...]] = None
    other: tuple[tuple[str, str], ...] = ()

    @property
    def vendor_display(self) -> Optional[str]:
        if self.manufacturer is None:
            return None
        return self.manufacturer.parsed.vendor_display

    @field_serializer("service_data")
    def _hex_service_data(
        self, value: tuple[tuple[str, bytes], ...]
    ) -> dict[str, str]:
        return {uuid: data.hex() for uuid, data in value}

    @field_serializer("other")
    def _other_mapping(self, value: tuple[tuple[str, str], ...]) -> dict[str, str]:
        return dict(value)
