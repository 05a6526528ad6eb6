"""
AdScope Vendor Decoders
========================

Per-vendor interpretation of manufacturer-specific advertisement
payloads. Each decoder receives the payload with the 2-byte company
identifier already stripped and returns a fresh
:class:`~adscope.core.models.VendorDecodeResult`.

Every index into the payload is preceded by a length check; a payload
too short for its layout yields an "Incomplete ..." fact, never an
exception.

Only the Apple iBeacon layout is publicly documented. The Samsung,
Nordic and Govee readings are observations from captured traffic and
are marked ``inferred``.

References:
    - Apple Inc. (2014). Proximity Beacon Specification, Release R1.
    - Celosia, G., & Cunche, M. (2020). Discontinued Privacy: Personal
      Data Leaks in Apple Bluetooth-Low-Energy Continuity Protocols.
      PoPETs 2020(1).
    - Microsoft. [MS-CDP]: Connected Devices Platform Protocol,
      Section 2.2.2.1: Bluetooth Advertising Beacon.
"""

from __future__ import annotations

from shared.logger import ScopeLogger

from adscope.core.models import Fact, VendorDecodeResult, VendorDecoder

logger = ScopeLogger("decoders.vendors")

IBEACON_LENGTH = 23
GOVEE_MIN_LENGTH = 5
NORDIC_MIN_LENGTH = 2

PRINTABLE_MIN = 32
PRINTABLE_MAX = 126

# Payload lengths at which an unknown vendor layout may be beacon-shaped
_BEACON_LIKE_RANGE = range(16, 26)

_APPLE_IBEACON = 0x02
_APPLE_AIRPODS = 0x07
_APPLE_NEARBY = 0x10
_APPLE_HANDOFF = 0x12

_GOVEE_CATEGORIES: dict[int, str] = {
    0xEC: "LED Strip Light (H6125 series)",
}

_GOVEE_MODES: dict[int, str] = {
    0x01: "Possibly OFF",
    0x02: "Possibly ON/Active",
    0x03: "Possibly in Scene/Effect mode",
}


def _hex8(value: int) -> str:
    return f"0x{value:02x}"


def _incomplete(
    decoder: VendorDecoder, facts: list[Fact], label: str
) -> VendorDecodeResult:
    logger.debug("%s: %s", decoder.value, label)
    facts.append(Fact(label=label))
    return VendorDecodeResult(decoder=decoder, facts=tuple(facts), incomplete=True)


# ---------------------------------------------------------------------------
# Apple
# ---------------------------------------------------------------------------


def decode_apple(payload: bytes) -> VendorDecodeResult:
    """Decode Apple Continuity / iBeacon manufacturer data.

    The first payload byte is a message-type tag. Only the iBeacon
    layout (tag ``0x02``) is decoded field by field::

        0      tag (0x02)
        1      length (0x15)
        2..17  proximity UUID
        18..19 major, big-endian
        20..21 minor, big-endian
        22     measured TX power at 1 m, signed
    """
    facts: list[Fact] = []
    if not payload:
        return _incomplete(VendorDecoder.APPLE, facts, "Incomplete Apple data (0 bytes)")

    tag = payload[0]
    facts.append(Fact(label="Apple Data Type", value=_hex8(tag)))

    if tag == _APPLE_IBEACON:
        if len(payload) < IBEACON_LENGTH:
            return _incomplete(
                VendorDecoder.APPLE,
                facts,
                f"Incomplete iBeacon data ({len(payload)} bytes, need {IBEACON_LENGTH})",
            )
        major = int.from_bytes(payload[18:20], byteorder="big")
        minor = int.from_bytes(payload[20:22], byteorder="big")
        tx_power = int.from_bytes(payload[22:23], byteorder="big", signed=True)
        facts.extend([
            Fact(label="iBeacon UUID", value=payload[2:18].hex()),
            Fact(label="iBeacon Major", value=str(major)),
            Fact(label="iBeacon Minor", value=str(minor)),
            Fact(label="iBeacon TX Power", value=f"{tx_power} dBm"),
        ])
    elif tag == _APPLE_NEARBY:
        facts.append(Fact(label="Apple Nearby/AirDrop data"))
    elif tag == _APPLE_HANDOFF:
        facts.append(Fact(label="Apple Handoff/Continuity data"))
    elif tag == _APPLE_AIRPODS:
        facts.append(Fact(label="Apple AirPods data"))
        if len(payload) > 1:
            facts.append(Fact(label="AirPods Subtype", value=_hex8(payload[1])))
    else:
        facts.append(Fact(label="Unknown Apple data type", value=_hex8(tag)))

    return VendorDecodeResult(decoder=VendorDecoder.APPLE, facts=tuple(facts))


# ---------------------------------------------------------------------------
# Microsoft
# ---------------------------------------------------------------------------


def decode_microsoft(payload: bytes) -> VendorDecodeResult:
    """Decode the Microsoft scenario byte (CDP beacon, Surface devices)."""
    facts: list[Fact] = []
    if not payload:
        return _incomplete(
            VendorDecoder.MICROSOFT, facts, "Incomplete Microsoft data (0 bytes)"
        )

    scenario = payload[0]
    facts.append(Fact(label="Microsoft Scenario", value=_hex8(scenario)))
    if scenario == 0x01:
        facts.append(Fact(label="Microsoft CDP (Cross Device Protocol)"))
    elif scenario == 0x03:
        facts.append(Fact(label="Microsoft Surface device"))
    else:
        facts.append(Fact(label="Unknown Microsoft scenario", value=_hex8(scenario)))

    return VendorDecodeResult(decoder=VendorDecoder.MICROSOFT, facts=tuple(facts))


# ---------------------------------------------------------------------------
# Samsung / Nordic
# ---------------------------------------------------------------------------


def decode_samsung(payload: bytes) -> VendorDecodeResult:
    facts = [Fact(label="Samsung-specific data")]
    if payload:
        facts.append(
            Fact(label="Samsung Data Type", value=_hex8(payload[0]), inferred=True)
        )
    return VendorDecodeResult(decoder=VendorDecoder.SAMSUNG, facts=tuple(facts))


def decode_nordic(payload: bytes) -> VendorDecodeResult:
    """Nordic's id is the SDK default, so these are usually dev boards."""
    facts = [Fact(label="Nordic Semiconductor data (likely development/test device)")]
    if len(payload) < NORDIC_MIN_LENGTH:
        return _incomplete(
            VendorDecoder.NORDIC,
            facts,
            f"Incomplete Nordic data ({len(payload)} bytes, need {NORDIC_MIN_LENGTH})",
        )
    facts.extend([
        Fact(label="Device Type", value=_hex8(payload[0]), inferred=True),
        Fact(label="Version", value=_hex8(payload[1]), inferred=True),
    ])
    return VendorDecodeResult(decoder=VendorDecoder.NORDIC, facts=tuple(facts))


# ---------------------------------------------------------------------------
# Govee
# ---------------------------------------------------------------------------


def decode_govee(payload: bytes) -> VendorDecodeResult:
    """Best-effort reading of Govee LED controller advertisements.

    Layout as observed on an H6125 strip (``ec 00 0a 02 00``)::

        0     device type / model
        1..2  status or configuration word, little-endian
        2     brightness or power level (0-255)
        3     mode or state
        4     additional flags, usually zero

    None of this is published by the vendor. Bytes 1..2 and byte 2 are
    read both ways because the field boundary is not known.
    """
    facts = [Fact(label="Govee smart device data")]
    if len(payload) < GOVEE_MIN_LENGTH:
        return _incomplete(
            VendorDecoder.GOVEE, facts, f"Incomplete Govee data ({len(payload)} bytes)"
        )

    device_type, _, level, mode, flags = payload[:5]

    facts.append(Fact(label="Device Type/Model", value=_hex8(device_type)))
    facts.append(Fact(
        label="Device Category",
        value=_GOVEE_CATEGORIES.get(device_type, "Unknown Govee device type"),
        inferred=True,
    ))

    status_word = int.from_bytes(payload[1:3], byteorder="little")
    facts.append(Fact(label="Status/Config", value=f"0x{status_word:04x}", inferred=True))

    if level > 0:
        facts.append(Fact(
            label="Possible Brightness/Power",
            value=f"{level} ({level * 100 // 255}%)",
            inferred=True,
        ))

    facts.append(Fact(label="Mode/State", value=_hex8(mode)))
    facts.append(Fact(
        label="Status", value=_GOVEE_MODES.get(mode, "Unknown state"), inferred=True
    ))

    if flags != 0:
        facts.append(Fact(label="Additional Flags", value=_hex8(flags), inferred=True))

    facts.append(Fact(
        label="Device appears to be",
        value="Govee H6125 Smart LED Strip",
        inferred=True,
    ))
    facts.append(Fact(
        label="Capabilities",
        value="RGB color changing, app control, possibly music sync",
        inferred=True,
    ))
    return VendorDecodeResult(decoder=VendorDecoder.GOVEE, facts=tuple(facts))


# ---------------------------------------------------------------------------
# Generic fallback
# ---------------------------------------------------------------------------


def printable_candidate(payload: bytes) -> str:
    """Return the printable-ASCII bytes of *payload* if they are a majority.

    Non-printable bytes are dropped, not replaced, so the candidate is a
    lossy hint rather than a decode. Returns ``""`` when at most half of
    the payload is printable.
    """
    printable = bytes(b for b in payload if PRINTABLE_MIN <= b <= PRINTABLE_MAX)
    if len(printable) > len(payload) // 2:
        return printable.decode("ascii")
    return ""


def decode_generic(payload: bytes, company_id: int) -> VendorDecodeResult:
    """Describe a payload from a vendor without a dedicated decoder."""
    facts = [Fact(label="Company ID", value=f"0x{company_id:04x}")]
    if payload:
        facts.append(Fact(
            label=f"Payload ({len(payload)} bytes)",
            value=" ".join(f"{b:02x}" for b in payload),
        ))
        if len(payload) in _BEACON_LIKE_RANGE:
            facts.append(Fact(label="Possible iBeacon-like format detected", inferred=True))
        text = printable_candidate(payload)
        if text:
            facts.append(Fact(label="Possible text content", value=f'"{text}"', inferred=True))
    return VendorDecodeResult(decoder=VendorDecoder.GENERIC, facts=tuple(facts))
