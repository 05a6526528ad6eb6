"""
AdScope Replay Reader
======================

Reads recorded discovery events from a JSON-lines file so captures can
be decoded offline. One object per line::

    {"peer_id": "AA:BB:CC:DD:EE:FF", "name": "H6125", "rssi": -58,
     "advertisement": {"manufacturer_data": "0388ec000a0200",
                       "service_uuids": ["0000180f-0000-1000-8000-00805f9b34fb"],
                       "service_data": {"0000fe9f-...": "0011"},
                       "tx_power": 4}}

Byte-valued advertisement entries (``manufacturer_data``, any
``manufacturer_data_*`` key, and the values of ``service_data``) are
written as hex strings. Blank lines and lines starting with ``#`` are
skipped. Only an unparseable line or a malformed hex string stops the
replay.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

from pydantic import ValidationError

from shared.logger import ScopeLogger

from adscope.core.errors import ReplayError
from adscope.core.models import AdvertisementKey, DiscoveryEvent

logger = ScopeLogger("collectors.replay")

_MANUFACTURER_PREFIX = AdvertisementKey.MANUFACTURER_DATA.value


def _from_hex(value: Any, what: str) -> Any:
    # Non-string values are left for the report to classify
    if not isinstance(value, str):
        return value
    try:
        return bytes.fromhex(value)
    except ValueError as exc:
        raise ValueError(f"{what} is not valid hex: {value!r}") from exc


def decode_advertisement(advertisement: dict[str, Any]) -> dict[str, Any]:
    """Turn the hex-string byte fields of a recorded advertisement into bytes.

    Only strings are decoded. ``null`` and other JSON types pass through
    unchanged, so the report treats them as absent or lists them under
    "Other Advertisement Data".

    Raises:
        ValueError: A byte field is a string that is not valid hex.
    """
    decoded: dict[str, Any] = {}
    for key, value in advertisement.items():
        if key.startswith(_MANUFACTURER_PREFIX):
            decoded[key] = _from_hex(value, key)
        elif key == AdvertisementKey.SERVICE_DATA.value and isinstance(value, dict):
            decoded[key] = {
                uuid: _from_hex(data, f"service_data[{uuid}]")
                for uuid, data in value.items()
            }
        else:
            decoded[key] = value
    return decoded


def parse_event(line: str) -> DiscoveryEvent:
    """Parse one JSON line into a :class:`DiscoveryEvent`.

    Raises:
        ValueError: The line is not a valid recorded event.
    """
    data = json.loads(line)
    if not isinstance(data, dict):
        raise ValueError("record must be a JSON object")
    advertisement = data.get("advertisement") or {}
    if not isinstance(advertisement, dict):
        raise ValueError("advertisement must be an object")
    data["advertisement"] = decode_advertisement(advertisement)
    return DiscoveryEvent.model_validate(data)


def read_events(path: str | Path) -> Iterator[DiscoveryEvent]:
    """Yield discovery events from the JSON-lines file at *path*.

    Raises:
        ReplayError: The file cannot be opened or a line is malformed.
    """
    file_path = Path(path)
    try:
        fh = open(file_path, "r", encoding="utf-8")
    except OSError as exc:
        raise ReplayError(f"Cannot open {file_path}: {exc}") from exc

    with fh:
        for line_number, line in enumerate(fh, start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            try:
                yield parse_event(stripped)
            except (ValueError, ValidationError) as exc:
                logger.error("Bad record in %s at line %d", file_path, line_number)
                raise ReplayError(str(exc), line_number=line_number) from exc
