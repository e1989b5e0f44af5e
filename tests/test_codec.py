"""Tests for frame encoding and decoding."""

import pytest

from frame_composer_mcp.errors import (
    AmbiguousVariableField,
    LengthMismatch,
    MalformedHex,
    Overflow,
    TrailingInput,
    TruncatedInput,
    ValueParseError,
)
from frame_composer_mcp.models.catalog import load_catalog
from frame_composer_mcp.models.field import Field
from frame_composer_mcp.models.frame import Frame
from frame_composer_mcp.models.preset import new_frame
from frame_composer_mcp.protocol.codec import decode, decode_fields, encode
from frame_composer_mcp.protocol.values import to_bytes


def _modbus_header() -> Frame:
    frame = Frame(identifier="f1", name="Modbus header")
    frame.add_field(Field("tid", "Transaction ID", length=2, value="1"))
    frame.add_field(Field("fc", "Function Code", length=1, value="3"))
    return frame


def test_encode_example():
    """Two fixed decimals concatenate big-endian."""
    assert encode(_modbus_header()) == b"\x00\x01\x03"


def test_decode_example():
    """Decoding maps identifiers and names back to values."""
    frame = _modbus_header()
    decoded = decode(b"\x00\x01\x03", frame)
    assert decoded == {"tid": "1", "fc": "3"}
    by_name = {d.name: d.value for d in decode_fields(b"\x00\x01\x03", frame)}
    assert by_name == {"Transaction ID": "1", "Function Code": "3"}


def test_encode_accepts_plain_field_list():
    """Any iterable of fields can be encoded."""
    fields = [Field("a", "A", length=1, value="7"), Field("b", "B", length=1, value="8")]
    assert encode(fields) == b"\x07\x08"


def test_field_order_is_wire_order():
    """Moving a field moves its bytes."""
    frame = _modbus_header()
    frame.move_field("fc", 0)
    assert encode(frame) == b"\x03\x00\x01"


def test_encode_length_is_sum_of_enabled_fields():
    """Output length is the sum of the enabled fields' widths."""
    frame = _modbus_header()
    frame.add_field(Field("p", "Payload", is_variable=True, representation="text",
                          value="hello"))
    frame.add_field(Field("off", "Unused", length=4, value="9", enabled=False))
    expected = sum(
        len(to_bytes(f.value, f.representation, f.fixed_length))
        for f in frame.fields if f.enabled
    )
    assert len(encode(frame)) == expected == 8


def test_encode_does_not_recompute_length_fields():
    """A stale 'Length' value is sent as written."""
    frame = Frame(identifier="f", name="f")
    frame.add_field(Field("len", "Length", length=1, value="99"))
    frame.add_field(Field("data", "Data", is_variable=True, value="AA"))
    assert encode(frame) == b"\x63\xaa"


def test_encode_reports_failing_field():
    """Encode errors name the field that failed."""
    frame = _modbus_header()
    frame.add_field(Field("bad", "Bad Hex", length=2, representation="hex", value="0D0"))
    with pytest.raises(MalformedHex) as excinfo:
        encode(frame)
    assert excinfo.value.field_id == "bad"
    assert excinfo.value.field_name == "Bad Hex"
    assert "Bad Hex" in str(excinfo.value)


def test_encode_overflow():
    """Overflow is a value parse error tagged with the field."""
    frame = Frame(identifier="f", name="f")
    frame.add_field(Field("x", "Register", length=2, value="65536"))
    with pytest.raises(Overflow) as excinfo:
        encode(frame)
    assert excinfo.value.field_id == "x"
    assert isinstance(excinfo.value, ValueParseError)


def test_encode_stops_at_first_error():
    """The first failing field in wire order is reported."""
    frame = Frame(identifier="f", name="f")
    frame.add_field(Field("a", "A", length=1, value="300"))
    frame.add_field(Field("b", "B", length=1, representation="hex", value="0"))
    with pytest.raises(Overflow) as excinfo:
        encode(frame)
    assert excinfo.value.field_id == "a"


def test_disabled_invalid_field_is_ignored():
    """Disabled fields are never parsed."""
    frame = _modbus_header()
    frame.add_field(Field("bad", "Bad", length=1, representation="hex", value="ZZ",
                          enabled=False))
    assert encode(frame) == b"\x00\x01\x03"


def test_encode_does_not_mutate_frame():
    """Encoding leaves the frame untouched."""
    frame = _modbus_header()
    before = frame.to_dict()
    encode(frame)
    encode(frame)
    assert frame.to_dict() == before


def test_fixed_text_padding_roundtrip():
    """Padded fixed text decodes without its padding."""
    frame = Frame(identifier="f", name="f")
    frame.add_field(Field("m", "Method", length=4, representation="text", value="GET"))
    data = encode(frame)
    assert data == b"GET\x00"
    assert decode(data, frame) == {"m": "GET"}


def test_fixed_text_too_long():
    """Fixed text longer than its field fails to encode."""
    frame = Frame(identifier="f", name="f")
    frame.add_field(Field("p", "Path", length=10, representation="text",
                          value="/index.html"))
    with pytest.raises(LengthMismatch):
        encode(frame)


# ─── decode ──────────────────────────────────────────────────────────

def test_decode_last_variable_field_takes_remainder():
    """A trailing variable field takes every remaining byte."""
    frame = _modbus_header()
    frame.add_field(Field("body", "Body", is_variable=True, representation="text"))
    decoded = decode(b"\x00\x01\x03hello world", frame)
    assert decoded["body"] == "hello world"


def test_decode_last_variable_field_may_be_empty():
    """A trailing variable field may receive zero bytes."""
    frame = _modbus_header()
    frame.add_field(Field("body", "Body", is_variable=True))
    assert decode(b"\x00\x01\x03", frame)["body"] == ""


def test_decode_interior_variable_without_length():
    """An unbounded variable field before others cannot be sliced."""
    frame = Frame(identifier="f", name="f")
    frame.add_field(Field("v", "Path", is_variable=True, representation="text"))
    frame.add_field(Field("crlf", "CRLF", length=2, representation="hex", value="0D0A"))
    with pytest.raises(AmbiguousVariableField) as excinfo:
        decode(b"/a\r\n", frame)
    assert excinfo.value.field_id == "v"


def test_decode_interior_variable_with_explicit_length():
    """A variable field with a length is sliced by that length."""
    frame = Frame(identifier="f", name="f")
    frame.add_field(Field("v", "Path", length=2, is_variable=True,
                          representation="text"))
    frame.add_field(Field("crlf", "CRLF", length=2, representation="hex"))
    assert decode(b"/a\r\n", frame) == {"v": "/a", "crlf": "0D0A"}


def test_decode_interior_variable_ignored_when_disabled():
    """Disabled fields do not take part in slicing."""
    frame = _modbus_header()
    frame.add_field(Field("v", "Optional", is_variable=True, enabled=False), position=0)
    assert decode(b"\x00\x01\x03", frame) == {"tid": "1", "fc": "3"}


def test_decode_truncated_reports_missing_bytes():
    """Short input reports how many bytes are missing."""
    frame = _modbus_header()
    with pytest.raises(TruncatedInput) as excinfo:
        decode(b"\x00", frame)
    assert excinfo.value.missing == 2
    assert excinfo.value.expected == 3
    assert excinfo.value.field_id == "tid"


def test_decode_truncated_with_variable_tail():
    """The open-ended tail does not count toward the required size."""
    frame = _modbus_header()
    frame.add_field(Field("body", "Body", is_variable=True))
    with pytest.raises(TruncatedInput) as excinfo:
        decode(b"\x00\x01", frame)
    assert excinfo.value.missing == 1
    assert excinfo.value.field_id == "fc"
    assert excinfo.value.field_name == "Function Code"


def test_decode_trailing_bytes_rejected():
    """Leftover bytes are an error without an open-ended tail."""
    with pytest.raises(TrailingInput) as excinfo:
        decode(b"\x00\x01\x03\x04", _modbus_header())
    assert excinfo.value.extra == 1


def test_decoded_field_raw_and_dict():
    """Decoded fields keep their raw slice."""
    decoded = decode_fields(b"\x00\x01\x03", _modbus_header())
    assert decoded[0].raw == b"\x00\x01"
    d = decoded[0].to_dict()
    assert d["raw_hex"] == "00 01"
    assert d["representation"] == "decimal"


def test_decode_hex_normalizes_spelling():
    """Hex values come back in canonical spelling."""
    frame = Frame(identifier="f", name="f")
    frame.add_field(Field("m", "Magic", length=2, representation="hex", value="aa bb"))
    assert decode(encode(frame), frame) == {"m": "AABB"}


# ─── enable / disable ────────────────────────────────────────────────

def test_disabling_removes_exactly_its_bytes():
    """Disabling a field removes exactly its bytes from the wire."""
    frame = _modbus_header()
    full = encode(frame)
    frame.get_field("tid").enabled = False
    partial = encode(frame)
    assert len(full) - len(partial) == 2
    assert partial == b"\x03"
    assert decode(partial, frame) == {"fc": "3"}
    with pytest.raises(TrailingInput):
        decode(full, frame)


# ─── round-trip ──────────────────────────────────────────────────────

def test_roundtrip_reencodes_identically():
    """Decoded values re-encode to the same bytes."""
    frame = Frame(identifier="f", name="mixed")
    frame.add_field(Field("a", "Magic", length=2, representation="hex", value="ca fe"))
    frame.add_field(Field("b", "Count", length=4, value="00042"))
    frame.add_field(Field("c", "Tag", length=6, representation="text", value="abc"))
    frame.add_field(Field("d", "Body", is_variable=True, representation="text",
                          value="payload\r\n"))
    data = encode(frame)

    decoded = decode(data, frame)
    assert decoded == {"a": "CAFE", "b": "42", "c": "abc", "d": "payload\r\n"}

    for f in frame.fields:
        f.value = decoded[f.identifier]
    assert encode(frame) == data


@pytest.mark.parametrize("preset_id", [p.id for p in load_catalog()])
def test_catalog_presets_roundtrip(preset_id):
    """Every built-in preset decodes its own encoding."""
    preset = next(p for p in load_catalog() if p.id == preset_id)
    frame = new_frame(preset)
    data = encode(frame)
    decoded = decode(data, frame)
    for f in frame.fields:
        f.value = decoded[f.identifier]
    assert encode(frame) == data


# ─── bounded variable fields ─────────────────────────────────────────

def _bounded_pair(first_value: str) -> Frame:
    frame = Frame(identifier="f", name="f")
    frame.add_field(Field("a", "A", length=2, is_variable=True, representation="hex",
                          value=first_value))
    frame.add_field(Field("b", "B", is_variable=True, representation="hex", value="DD"))
    return frame


def test_interior_variable_must_fill_declared_length():
    """A bounded variable field that would shift its neighbours is refused."""
    with pytest.raises(LengthMismatch) as excinfo:
        encode(_bounded_pair("AABBCC"))
    assert excinfo.value.field_id == "a"


def test_interior_variable_shorter_than_declared_length():
    """A short bounded variable field is refused instead of being padded."""
    frame = _bounded_pair("AA")
    frame.add_field(Field("c", "C", length=1, representation="hex", value="EE"),
                    position=1)
    with pytest.raises(LengthMismatch) as excinfo:
        encode(frame)
    assert excinfo.value.field_id == "a"


def test_interior_variable_exact_length_roundtrip():
    """A bounded variable field that fills its length decodes unchanged."""
    frame = _bounded_pair("AABB")
    data = encode(frame)
    assert data == b"\xaa\xbb\xdd"
    assert decode(data, frame) == {"a": "AABB", "b": "DD"}


def test_last_variable_field_ignores_declared_length():
    """The trailing variable field is open-ended even with a length."""
    frame = Frame(identifier="f", name="f")
    frame.add_field(Field("t", "Tail", length=2, is_variable=True,
                          representation="text", value="hello"))
    assert decode(encode(frame), frame) == {"t": "hello"}
