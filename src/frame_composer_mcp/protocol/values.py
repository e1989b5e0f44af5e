"""Value parser: field text <-> raw bytes under a representation.

Rules per representation::

    text     one byte per character (ISO-8859-1); fixed fields are
             zero-padded on the right, never truncated
    hex      digit pairs, whitespace ignored; decoded as uppercase
             pairs with no separators
    decimal  non-negative integer, big-endian; exactly ``length`` bytes
             when a length is declared, minimal width otherwise (and only the
             minimal width is accepted back)

``length`` is always the field's declared *fixed* length. Variable
fields pass ``None`` and get the width their value implies.
"""

from __future__ import annotations

import re
import string

from ..models.field import Representation
from ..errors import (
    LengthMismatch,
    MalformedDecimal,
    MalformedHex,
    Overflow,
    UnencodableText,
)

TEXT_ENCODING = "latin-1"
PAD_BYTE = b"\x00"

_WHITESPACE = re.compile(r"\s+")
_DECIMAL = re.compile(r"[0-9]+")
_HEX_DIGITS = frozenset(string.hexdigits)


def normalize_hex(value: str) -> str:
    """Strip whitespace separators from a hex value."""
    return _WHITESPACE.sub("", value)


def to_bytes(
    value: str, representation: Representation | str, length: int | None = None
) -> bytes:
    """Convert a field's textual value to raw bytes.

    Raises:
        MalformedHex, MalformedDecimal, UnencodableText, Overflow,
        LengthMismatch: see the module docstring.
    """
    representation = Representation(representation)
    if length is not None and length < 0:
        raise LengthMismatch(f"Declared length must not be negative, got {length}")

    if representation is Representation.TEXT:
        return _text_to_bytes(value, length)
    if representation is Representation.HEX:
        return _hex_to_bytes(value, length)
    return _decimal_to_bytes(value, length)


def from_bytes(
    data: bytes, representation: Representation | str, length: int | None = None
) -> str:
    """Convert raw bytes back to a field's canonical textual value."""
    representation = Representation(representation)
    if length is not None and len(data) != length:
        raise LengthMismatch(
            f"Expected {length} bytes, got {len(data)}"
        )

    if representation is Representation.TEXT:
        if length is not None:
            data = data.rstrip(PAD_BYTE)
        return data.decode(TEXT_ENCODING)
    if representation is Representation.HEX:
        return data.hex().upper()
    if length is None and (not data or (len(data) > 1 and data[0] == 0)):
        # only the minimal width re-encodes to the same bytes
        raise MalformedDecimal(
            f"{format_hex(data) or 'empty input'} is not a minimal decimal encoding"
        )
    return str(int.from_bytes(data, "big"))


def _text_to_bytes(value: str, length: int | None) -> bytes:
    try:
        raw = value.encode(TEXT_ENCODING)
    except UnicodeEncodeError as e:
        raise UnencodableText(
            f"Character {value[e.start]!r} cannot be sent as a single byte"
        ) from e

    if length is None:
        return raw
    if len(raw) > length:
        raise LengthMismatch(
            f"Text is {len(raw)} bytes, longer than declared length {length}"
        )
    return raw.ljust(length, PAD_BYTE)


def _hex_to_bytes(value: str, length: int | None) -> bytes:
    digits = normalize_hex(value)
    bad = [c for c in digits if c not in _HEX_DIGITS]
    if bad:
        raise MalformedHex(f"Invalid hex character {bad[0]!r}")
    if len(digits) % 2:
        raise MalformedHex(f"Odd number of hex digits ({len(digits)})")

    raw = bytes.fromhex(digits)
    if length is not None and len(raw) != length:
        raise LengthMismatch(
            f"Hex value is {len(raw)} bytes, declared length is {length}"
        )
    return raw


def _decimal_to_bytes(value: str, length: int | None) -> bytes:
    text = value.strip()
    if not _DECIMAL.fullmatch(text):
        raise MalformedDecimal(f"Not a non-negative integer: {value!r}")

    number = int(text)
    if length is None:
        return number.to_bytes(max(1, (number.bit_length() + 7) // 8), "big")
    if number.bit_length() > 8 * length:
        raise Overflow(f"{number} does not fit in {length} byte(s)")
    return number.to_bytes(length, "big")


# ─── DISPLAY ─────────────────────────────────────────────────────────


def format_hex(data: bytes, sep: str = " ") -> str:
    """Uppercase hex dump, e.g. ``00 01 03``."""
    return sep.join(f"{b:02X}" for b in data)


def ascii_preview(data: bytes) -> str:
    """Printable ASCII rendering with ``.`` for everything else."""
    return "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in data)
