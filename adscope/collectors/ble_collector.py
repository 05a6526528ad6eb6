"""
AdScope BLE Collector
======================

Live Bluetooth Low Energy advertisement scanner built on Bleak. Each
advertisement callback is turned into a
:class:`~adscope.core.models.DiscoveryEvent` and handed to the caller
immediately; the collector keeps no device table and does no
deduplication.

Bleak reports manufacturer data as ``{company_id: payload}``. The
adapter re-joins each entry with its little-endian company identifier
so the decoder sees the blob exactly as it was on air.

References:
    - Bleak Documentation. https://bleak.readthedocs.io/
    - Bluetooth SIG. (2023). Core Specification v5.4. Vol 3, Part C,
      Section 9: Operational Modes and Procedures.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

from shared.logger import ScopeLogger

from adscope.core.errors import CollectorError
from adscope.core.models import AdvertisementKey, DiscoveryEvent

logger = ScopeLogger("collectors.ble")

EventHandler = Callable[[DiscoveryEvent], None]


def join_manufacturer_data(company_id: int, payload: bytes) -> bytes:
    """Prefix *payload* with *company_id* in little-endian byte order."""
    return company_id.to_bytes(2, byteorder="little") + bytes(payload)


def event_from_bleak(device: Any, advertisement_data: Any) -> DiscoveryEvent:
    """Convert one Bleak ``(BLEDevice, AdvertisementData)`` pair.

    Only fields the advertisement actually carried are placed in the
    event. When a device advertises several manufacturer entries the
    first becomes ``manufacturer_data`` and the rest are kept under
    ``manufacturer_data_0xNNNN`` keys.
    """
    advertisement: dict[str, Any] = {}

    local_name = getattr(advertisement_data, "local_name", None)
    if local_name:
        advertisement[AdvertisementKey.LOCAL_NAME.value] = local_name

    manufacturer_data = getattr(advertisement_data, "manufacturer_data", None) or {}
    for index, (company_id, payload) in enumerate(manufacturer_data.items()):
        blob = join_manufacturer_data(company_id, payload)
        if index == 0:
            advertisement[AdvertisementKey.MANUFACTURER_DATA.value] = blob
        else:
            advertisement[f"manufacturer_data_0x{company_id:04x}"] = blob

    service_uuids = getattr(advertisement_data, "service_uuids", None)
    if service_uuids:
        advertisement[AdvertisementKey.SERVICE_UUIDS.value] = list(service_uuids)

    service_data = getattr(advertisement_data, "service_data", None)
    if service_data:
        advertisement[AdvertisementKey.SERVICE_DATA.value] = dict(service_data)

    tx_power = getattr(advertisement_data, "tx_power", None)
    if tx_power is not None:
        advertisement[AdvertisementKey.TX_POWER.value] = tx_power

    rssi = getattr(advertisement_data, "rssi", None)
    if rssi is None:
        rssi = getattr(device, "rssi", -127)

    return DiscoveryEvent(
        peer_id=str(device.address),
        name=getattr(device, "name", None) or None,
        rssi=int(rssi),
        advertisement=advertisement,
    )


class BLECollector:
    """Bleak-backed advertisement scanner.

    Usage::

        collector = BLECollector(scanning_mode="active")
        count = await collector.scan(handle_event, duration=10)

    Args:
        scanning_mode: ``"active"`` (request scan responses) or ``"passive"``.
    """

    def __init__(self, scanning_mode: str = "active") -> None:
        self._scanning_mode = scanning_mode
        self._seen = 0

    async def scan(
        self,
        on_event: EventHandler,
        duration: float = 0,
        stop_event: Optional[asyncio.Event] = None,
    ) -> int:
        """Scan until *duration* elapses or *stop_event* is set.

        Args:
            on_event: Called once per received advertisement.
            duration: Seconds to scan; ``0`` scans until *stop_event*.
            stop_event: Set by the caller to end the scan early.

        Returns:
            Number of advertisements delivered to *on_event*.

        Raises:
            CollectorError: Bleak is not installed or the backend failed.
        """
        try:
            from bleak import BleakScanner
        except ImportError as exc:
            raise CollectorError(
                "Bleak not found. Install with: pip install bleak"
            ) from exc

        self._seen = 0
        stop_event = stop_event or asyncio.Event()

        def _callback(device: Any, advertisement_data: Any) -> None:
            self._seen += 1
            on_event(event_from_bleak(device, advertisement_data))

        logger.info(
            "Starting BLE scan (%s, %s)",
            self._scanning_mode,
            f"{duration}s" if duration else "until interrupted",
        )

        try:
            scanner = BleakScanner(
                detection_callback=_callback,
                scanning_mode=self._scanning_mode,
            )
            await scanner.start()
        except Exception as exc:
            logger.error("BLE backend error: %s", exc)
            raise CollectorError(f"Could not start BLE scan: {exc}") from exc

        try:
            await asyncio.wait_for(stop_event.wait(), timeout=duration or None)
        except asyncio.TimeoutError:
            pass
        finally:
            await scanner.stop()

        logger.info("BLE scan stopped after %d advertisements", self._seen)
        return self._seen
