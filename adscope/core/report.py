"""
AdScope Advertisement Report
=============================

Assembles one :class:`~adscope.core.models.AdvertisementRecord` from a
discovery event and renders it as a fixed-layout text block.

Recognized advertisement keys are normalised into typed record fields.
Every other key, and any recognized key whose value has an unexpected
type, is carried into the record's "other" section so that no
advertised information is dropped.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Optional

from shared.logger import ScopeLogger

from adscope.analyzers import signal
from adscope.core.models import (
    RECOGNIZED_KEYS,
    AdvertisementKey,
    AdvertisementRecord,
    DiscoveryEvent,
    ManufacturerSection,
)
from adscope.decoders import manufacturer
from adscope.output import hexdump

logger = ScopeLogger("core.report")

HEADER = "--- Discovered Device ---"
FOOTER = "------------------------"
UNKNOWN_NAME = "Unknown"

_BYTES_TYPES = (bytes, bytearray, memoryview)


# ---------------------------------------------------------------------------
# Value normalisation
# ---------------------------------------------------------------------------


def _spaced_hex(data: bytes) -> str:
    return " ".join(f"{b:02x}" for b in data)


def opaque_value(value: Any) -> str:
    """Render a value of unknown meaning for the "other" section."""
    if isinstance(value, _BYTES_TYPES):
        return _spaced_hex(bytes(value))
    return str(value)


def _as_bytes(value: Any) -> Optional[bytes]:
    return bytes(value) if isinstance(value, _BYTES_TYPES) else None


def _as_uuid_list(value: Any) -> Optional[tuple[str, ...]]:
    if isinstance(value, (str, Mapping, *_BYTES_TYPES)) or not isinstance(value, Iterable):
        return None
    return tuple(str(item) for item in value)


def _as_service_data(value: Any) -> Optional[tuple[tuple[str, bytes], ...]]:
    if not isinstance(value, Mapping):
        return None
    if not all(isinstance(data, _BYTES_TYPES) for data in value.values()):
        return None
    return tuple((str(uuid), bytes(data)) for uuid, data in value.items())


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    return None


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


_CONVERTERS = {
    AdvertisementKey.LOCAL_NAME: _as_str,
    AdvertisementKey.MANUFACTURER_DATA: _as_bytes,
    AdvertisementKey.SERVICE_UUIDS: _as_uuid_list,
    AdvertisementKey.SERVICE_DATA: _as_service_data,
    AdvertisementKey.TX_POWER: _as_int,
    AdvertisementKey.CONNECTABLE: _as_bool,
    AdvertisementKey.SOLICITED_SERVICE_UUIDS: _as_uuid_list,
    AdvertisementKey.OVERFLOW_SERVICE_UUIDS: _as_uuid_list,
}


# ---------------------------------------------------------------------------
# Record assembly
# ---------------------------------------------------------------------------


def other_keys(advertisement: Mapping[str, Any]) -> list[str]:
    """Return the advertisement keys that are not recognized, sorted."""
    return sorted(set(advertisement) - RECOGNIZED_KEYS)


def build_record(event: DiscoveryEvent) -> AdvertisementRecord:
    """Build the structured record for one discovery event."""
    advertisement = event.advertisement
    fields: dict[str, Any] = {}
    other: dict[str, str] = {
        key: opaque_value(advertisement[key]) for key in other_keys(advertisement)
    }

    for key, convert in _CONVERTERS.items():
        if key.value not in advertisement:
            continue
        raw_value = advertisement[key.value]
        if raw_value is None:
            continue
        converted = convert(raw_value)
        if converted is None:
            logger.debug(
                "Unexpected %s value for %s from %s",
                type(raw_value).__name__,
                key.value,
                event.peer_id,
            )
            other[key.value] = opaque_value(raw_value)
            continue
        fields[key.value] = converted

    raw_manufacturer = fields.pop(AdvertisementKey.MANUFACTURER_DATA.value, None)
    section = None
    if raw_manufacturer is not None:
        section = ManufacturerSection(
            parsed=manufacturer.parse(raw_manufacturer),
            hexdump=hexdump.dump(raw_manufacturer),
        )

    return AdvertisementRecord(
        peer_id=event.peer_id,
        display_name=event.name or UNKNOWN_NAME,
        rssi=event.rssi,
        signal=signal.estimate(event.rssi),
        manufacturer=section,
        other=tuple(sorted(other.items())),
        **fields,
    )


# ---------------------------------------------------------------------------
# Text rendering
# ---------------------------------------------------------------------------


def render_record(record: AdvertisementRecord) -> str:
    """Render *record* as the fixed-layout text block.

    The block starts with :data:`HEADER`, ends with :data:`FOOTER`, and
    has no trailing newline.
    """
    lines = [
        HEADER,
        f"Name: {record.display_name}",
        f"Identifier: {record.peer_id}",
        f"RSSI: {record.rssi} dBm",
        (
            f"Signal Quality: {record.signal.quality.value}, "
            f"Estimated Distance: {record.signal.distance.value}"
        ),
    ]

    if record.local_name is not None:
        lines.append(f"Local Name: {record.local_name}")

    if record.manufacturer is not None:
        section = record.manufacturer
        lines.append(f"Manufacturer Data ({section.byte_count} bytes):")
        lines.extend(section.hexdump.splitlines())
        lines.extend(f"  {line}" for line in section.parsed.result.lines())
        lines.append(f"Manufacturer: {section.parsed.vendor_display}")

    if record.service_uuids is not None:
        lines.append(f"Service UUIDs: {', '.join(record.service_uuids)}")

    for uuid, data in record.service_data:
        lines.append(f"Service Data ({uuid}): {_spaced_hex(data)}")

    if record.tx_power is not None:
        lines.append(f"TX Power Level: {record.tx_power} dBm")

    if record.connectable is not None:
        lines.append(f"Is Connectable: {'Yes' if record.connectable else 'No'}")

    if record.solicited_service_uuids is not None:
        lines.append(
            f"Solicited Service UUIDs: {', '.join(record.solicited_service_uuids)}"
        )

    if record.overflow_service_uuids is not None:
        lines.append(
            f"Overflow Service UUIDs: {', '.join(record.overflow_service_uuids)}"
        )

    if record.other:
        lines.append("Other Advertisement Data:")
        lines.extend(f"  {key}: {value}" for key, value in record.other)

    lines.append(FOOTER)
    return "\n".join(lines)


class AdvertisementReport:
    """One discovery event as both a structured record and rendered text.

    Usage::

        report = AdvertisementReport.from_event(event)
        print(report.text)
        json_line = report.record.model_dump_json()
    """

    __slots__ = ("record", "text")

    def __init__(self, record: AdvertisementRecord) -> None:
        self.record = record
        self.text = render_record(record)

    @classmethod
    def from_event(cls, event: DiscoveryEvent) -> AdvertisementReport:
        return cls(build_record(event))
