"""Protocol layer: value parsing, frame encoding/decoding, and validation."""

from .codec import DecodedField, decode, decode_fields, encode
from .validation import IssueKind, ValidationIssue, ensure_valid, validate
from .values import from_bytes, to_bytes
