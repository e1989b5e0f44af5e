"""Frame codec: ordered field list <-> wire bytes.

Encoding concatenates the enabled fields strictly left to right.
Decoding slices a buffer with the same template::

    +---------+---------+-----+----------------------+
    | fixed   | fixed   | ... | last variable field  |
    | length  | length  |     | (all remaining bytes)|
    +---------+---------+-----+----------------------+

A variable field in any other position needs an explicit ``length`` to
be decodable; without one its boundary cannot be recovered. With one,
encoding and decoding both hold it to exactly that many bytes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from ..errors import (
    AmbiguousVariableField,
    FrameError,
    LengthMismatch,
    TrailingInput,
    TruncatedInput,
)
from ..models.field import Field, Representation
from ..models.frame import Frame
from .values import format_hex, from_bytes, to_bytes

logger = logging.getLogger(__name__)


@dataclass
class DecodedField:
    """One field sliced out of a received buffer."""

    identifier: str
    name: str
    representation: Representation
    raw: bytes
    value: str

    def to_dict(self) -> dict:
        return {
            "id": self.identifier,
            "name": self.name,
            "representation": self.representation.value,
            "raw_hex": format_hex(self.raw),
            "value": self.value,
        }

    def __repr__(self) -> str:
        return f"DecodedField(name={self.name!r}, value={self.value!r})"


def _fields_of(frame) -> list[Field]:
    return list(getattr(frame, "fields", frame))


def _is_bounded_variable(field: Field, index: int, last: int) -> bool:
    """A variable field that must occupy exactly its declared length."""
    return field.is_variable and field.length is not None and index != last


def encode_field(field: Field) -> bytes:
    """Encode a single field, tagging any error with the field's identity."""
    try:
        return to_bytes(field.value, field.representation, field.fixed_length)
    except FrameError as e:
        raise e.for_field(field)


def encode(frame: Frame | Iterable[Field]) -> bytes:
    """Encode the enabled fields of ``frame`` into one byte buffer.

    A variable field that is followed by other enabled fields and
    declares a length must encode to exactly that many bytes, since the
    decoder slices it by that length.

    Args:
        frame: A ``Frame`` or any iterable of fields, in wire order.

    Returns:
        The concatenated bytes of every enabled field.

    Raises:
        ValueParseError: For the first field that fails; ``field_id``
            identifies it. Nothing is returned on failure.
    """
    fields = [f for f in _fields_of(frame) if f.enabled]
    last = len(fields) - 1
    parts = []
    for index, f in enumerate(fields):
        raw = encode_field(f)
        if _is_bounded_variable(f, index, last) and len(raw) != f.length:
            raise LengthMismatch(
                f"Value occupies {len(raw)} bytes but the field declares {f.length}"
            ).for_field(f)
        parts.append(raw)
    data = b"".join(parts)
    logger.debug("Encoded %d field(s) into %d bytes", len(parts), len(data))
    return data


def _boundaries(fields: list[Field]) -> list[int | None]:
    """Bytes each field consumes; ``None`` marks the open-ended tail."""
    sizes: list[int | None] = []
    last = len(fields) - 1
    for index, f in enumerate(fields):
        if f.length is not None and f.length < 0:
            raise LengthMismatch(f"Negative length {f.length}").for_field(f)
        if not f.is_variable and f.length is not None:
            sizes.append(f.length)
        elif _is_bounded_variable(f, index, last):
            sizes.append(f.length)
        elif index == last:
            sizes.append(None)
        else:
            raise AmbiguousVariableField(
                f"Field {f.name!r} has no length and is not the last field"
            ).for_field(f)
    return sizes


def _first_short_field(
    fields: list[Field], sizes: list[int | None], available: int
) -> Field:
    end = 0
    for f, size in zip(fields, sizes):
        end += size or 0
        if end > available:
            return f
    return fields[-1]


def decode_fields(data: bytes, frame: Frame | Iterable[Field]) -> list[DecodedField]:
    """Slice ``data`` according to the enabled fields of ``frame``.

    Raises:
        AmbiguousVariableField: An interior variable field has no length.
        TruncatedInput: ``data`` is shorter than the bounded fields need;
            ``field_id`` names the first field that runs past the end.
        TrailingInput: Bytes remain and no field is open-ended.
    """
    fields = [f for f in _fields_of(frame) if f.enabled]
    sizes = _boundaries(fields)

    required = sum(size for size in sizes if size is not None)
    if len(data) < required:
        short = _first_short_field(fields, sizes, len(data))
        raise TruncatedInput(
            missing=required - len(data), expected=required
        ).for_field(short)
    if None not in sizes and len(data) > required:
        raise TrailingInput(extra=len(data) - required)

    decoded: list[DecodedField] = []
    offset = 0
    for f, size in zip(fields, sizes):
        end = len(data) if size is None else offset + size
        chunk = data[offset:end]
        offset = end
        try:
            value = from_bytes(chunk, f.representation, f.fixed_length)
        except FrameError as e:
            raise e.for_field(f)
        decoded.append(
            DecodedField(
                identifier=f.identifier,
                name=f.name,
                representation=f.representation,
                raw=chunk,
                value=value,
            )
        )

    logger.debug("Decoded %d bytes into %d field(s)", len(data), len(decoded))
    return decoded


def decode(data: bytes, frame: Frame | Iterable[Field]) -> dict[str, str]:
    """Decode ``data`` into a mapping of field identifier to text."""
    return {d.identifier: d.value for d in decode_fields(data, frame)}
