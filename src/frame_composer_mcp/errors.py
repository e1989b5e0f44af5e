"""Error taxonomy for value parsing, frame encoding and decoding.

Every error is field- or frame-scoped and subclasses ``ValueError``.
Errors raised while encoding or decoding a specific field carry that
field's identifier and name so the caller can point at the offending
segment.
"""

from __future__ import annotations


class FrameError(ValueError):
    """Base class for all codec and frame errors."""

    def __init__(self, message: str, field_id: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field_id = field_id
        self.field_name: str | None = None

    def for_field(self, field) -> FrameError:
        """Attach the failing field's identity and return ``self``."""
        self.field_id = field.identifier
        self.field_name = field.name
        return self

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        if self.field_id is None:
            return self.message
        return f"{self.message} (field {self.field_name!r}, id={self.field_id})"


# ─── VALUE PARSING ───────────────────────────────────────────────────


class ValueParseError(FrameError):
    """A field value could not be converted under its representation."""


class MalformedHex(ValueParseError):
    """Odd digit count or a non-hex character in a hex value."""


class MalformedDecimal(ValueParseError):
    """A decimal value that is not a non-negative base-10 integer."""


class UnencodableText(ValueParseError):
    """A text value with characters outside the single-byte charset."""


class Overflow(ValueParseError):
    """A decimal value whose minimal encoding exceeds the declared width."""


class LengthMismatch(ValueParseError):
    """Encoded bytes do not match the declared fixed length."""


# ─── DECODING ────────────────────────────────────────────────────────


class DecodeError(FrameError):
    """Received bytes cannot be sliced according to the template."""


class AmbiguousVariableField(DecodeError):
    """An interior variable field without a length has no recoverable boundary."""


class TruncatedInput(DecodeError):
    """The buffer is shorter than the template's bounded fields require."""

    def __init__(self, missing: int, expected: int) -> None:
        super().__init__(
            f"Input truncated: need {expected} bytes, {missing} missing"
        )
        self.missing = missing
        self.expected = expected


class TrailingInput(DecodeError):
    """Bytes remain after every field of a bounded template was consumed."""

    def __init__(self, extra: int) -> None:
        super().__init__(f"{extra} unconsumed trailing bytes")
        self.extra = extra


# ─── FRAME STRUCTURE ─────────────────────────────────────────────────


class DuplicateIdentifier(FrameError):
    """A field identifier is already used within the frame."""


class EmptyName(FrameError):
    """A field or frame has a blank name."""


class InvalidFrame(FrameError):
    """Validation found issues that block encoding."""

    def __init__(self, issues: list) -> None:
        summary = "; ".join(issue.message for issue in issues)
        super().__init__(f"Frame has {len(issues)} issue(s): {summary}")
        self.issues = list(issues)
