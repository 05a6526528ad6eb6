"""
AdScope Hex Dumper
===================

Canonical hex + ASCII dump, 16 bytes per line, in the layout of
``hexdump -C``::

    00000000  03 88 ec 00 0a 02 00                              |.......|
"""

from __future__ import annotations

BYTES_PER_LINE = 16
_GROUP_SIZE = 8
# 16 bytes * 3 chars + 1 group separator, plus one column of padding
_HEX_WIDTH = 50


def _ascii(byte: int) -> str:
    return chr(byte) if 32 <= byte <= 126 else "."


def dump(data: bytes) -> str:
    """Render *data* as a hex dump; empty input yields ``""``.

    Every line, including the last, ends with a newline.
    """
    lines: list[str] = []
    for offset in range(0, len(data), BYTES_PER_LINE):
        chunk = data[offset:offset + BYTES_PER_LINE]
        hex_part = ""
        for index, byte in enumerate(chunk):
            hex_part += f"{byte:02x} "
            if index == _GROUP_SIZE - 1:
                hex_part += " "
        text = "".join(_ascii(b) for b in chunk)
        lines.append(f"{offset:08x}  {hex_part.ljust(_HEX_WIDTH)}|{text}|\n")
    return "".join(lines)
