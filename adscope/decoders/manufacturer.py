"""
AdScope Manufacturer Data Parser
=================================

Splits a manufacturer-specific data blob into its Bluetooth SIG company
identifier and payload, resolves the vendor name, and hands the payload
to the matching vendor decoder.

The blob layout is fixed by the Core Specification Supplement::

    0..1   company identifier, little-endian
    2..    vendor-defined payload

Reference:
    Bluetooth SIG. (2023). Supplement to the Core Specification,
    Part A, Section 1.4: Manufacturer Specific Data.
"""

from __future__ import annotations

from shared.logger import ScopeLogger

from adscope.core import registry
from adscope.core.models import (
    Fact,
    ParsedManufacturerData,
    VendorDecodeResult,
    VendorDecoder,
)
from adscope.decoders import vendors

logger = ScopeLogger("decoders.manufacturer")

COMPANY_ID_LENGTH = 2

_COMPANY_DECODERS: dict[int, VendorDecoder] = {
    registry.APPLE_COMPANY_ID: VendorDecoder.APPLE,
    registry.MICROSOFT_COMPANY_ID: VendorDecoder.MICROSOFT,
    registry.SAMSUNG_COMPANY_ID: VendorDecoder.SAMSUNG,
    registry.NORDIC_COMPANY_ID: VendorDecoder.NORDIC,
    registry.GOVEE_COMPANY_ID: VendorDecoder.GOVEE,
}


def select_decoder(company_id: int) -> VendorDecoder:
    """Map *company_id* to its decoder; unknown ids get ``GENERIC``."""
    return _COMPANY_DECODERS.get(company_id, VendorDecoder.GENERIC)


def decode_payload(
    decoder: VendorDecoder, company_id: int, payload: bytes
) -> VendorDecodeResult:
    """Run *decoder* over *payload*."""
    if decoder is VendorDecoder.APPLE:
        return vendors.decode_apple(payload)
    if decoder is VendorDecoder.MICROSOFT:
        return vendors.decode_microsoft(payload)
    if decoder is VendorDecoder.SAMSUNG:
        return vendors.decode_samsung(payload)
    if decoder is VendorDecoder.NORDIC:
        return vendors.decode_nordic(payload)
    if decoder is VendorDecoder.GOVEE:
        return vendors.decode_govee(payload)
    return vendors.decode_generic(payload, company_id)


def parse(raw: bytes) -> ParsedManufacturerData:
    """Parse one manufacturer-data blob.

    Never raises for any input: a blob too short to hold a company
    identifier yields a result flagged ``incomplete`` with no company id.

    Args:
        raw: Manufacturer-specific data, company identifier included.

    Returns:
        The split blob, resolved vendor name, and decoder facts.
    """
    raw = bytes(raw)
    if len(raw) < COMPANY_ID_LENGTH:
        logger.debug("Manufacturer data too short: %d bytes", len(raw))
        shortfall = Fact(
            label=(
                f"Incomplete manufacturer data "
                f"({len(raw)} bytes, need {COMPANY_ID_LENGTH})"
            )
        )
        return ParsedManufacturerData(
            raw=raw,
            result=VendorDecodeResult(facts=(shortfall,), incomplete=True),
            incomplete=True,
        )

    company_id = raw[0] | (raw[1] << 8)
    payload = raw[COMPANY_ID_LENGTH:]
    decoder = select_decoder(company_id)
    result = decode_payload(decoder, company_id, payload)

    logger.debug(
        "Company 0x%04x -> %s decoder, %d payload bytes",
        company_id,
        decoder.value,
        len(payload),
    )

    return ParsedManufacturerData(
        raw=raw,
        company_id=company_id,
        vendor_name=registry.lookup(company_id),
        payload=payload,
        result=result,
        incomplete=result.incomplete,
    )
