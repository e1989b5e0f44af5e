"""Pre-flight checks run before a frame is encoded.

Issues are advisory: they never stop a field from being edited, only
the decision to encode and send.
"""

from __future__ import annotations

import string
from collections import Counter
from dataclasses import dataclass
from enum import Enum

from ..errors import EmptyName, FrameError, InvalidFrame
from ..models.field import Representation
from .values import normalize_hex, to_bytes


class IssueKind(str, Enum):
    EMPTY_NAME = "empty_name"
    DUPLICATE_IDENTIFIER = "duplicate_identifier"
    INVALID_LENGTH = "invalid_length"
    MISSING_LENGTH = "missing_length"
    NON_NUMERIC_DECIMAL = "non_numeric_decimal"
    ODD_HEX_LENGTH = "odd_hex_length"
    MALFORMED_HEX = "malformed_hex"
    LENGTH_MISMATCH = "length_mismatch"


@dataclass(frozen=True)
class ValidationIssue:
    kind: IssueKind
    message: str
    field_id: str | None = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "field_id": self.field_id,
        }


def _check_value(f) -> ValidationIssue | None:
    if f.representation is Representation.DECIMAL:
        text = f.value.strip()
        if not (text.isascii() and text.isdigit()):
            return ValidationIssue(
                IssueKind.NON_NUMERIC_DECIMAL,
                f"Field {f.name!r}: {f.value!r} is not a decimal number",
                f.identifier,
            )
    elif f.representation is Representation.HEX:
        digits = normalize_hex(f.value)
        if any(c not in string.hexdigits for c in digits):
            return ValidationIssue(
                IssueKind.MALFORMED_HEX,
                f"Field {f.name!r}: {f.value!r} contains non-hex characters",
                f.identifier,
            )
        if len(digits) % 2:
            return ValidationIssue(
                IssueKind.ODD_HEX_LENGTH,
                f"Field {f.name!r}: odd number of hex digits",
                f.identifier,
            )
    return None


def _check_bounded_variables(frame) -> list[ValidationIssue]:
    """Variable fields followed by others must fill their declared length."""
    enabled = [f for f in frame.fields if f.enabled]
    issues = []
    for f in enabled[:-1]:
        if not f.is_variable or f.length is None:
            continue
        try:
            width = len(to_bytes(f.value, f.representation))
        except FrameError:
            continue
        if width != f.length:
            issues.append(ValidationIssue(
                IssueKind.LENGTH_MISMATCH,
                f"Variable field {f.name!r} holds {width} bytes but declares {f.length}",
                f.identifier,
            ))
    return issues


def validate(frame) -> list[ValidationIssue]:
    """Collect every issue that would block sending ``frame``.

    Name, identifier and length checks cover all fields; value checks
    only cover enabled fields, since disabled ones never reach the wire.
    """
    issues: list[ValidationIssue] = []

    if not frame.name.strip():
        issues.append(ValidationIssue(IssueKind.EMPTY_NAME, "Frame name is empty"))

    counts = Counter(f.identifier for f in frame.fields)
    reported: set[str] = set()

    for index, f in enumerate(frame.fields):
        label = f.name or f"#{index}"
        if not f.name.strip():
            issues.append(ValidationIssue(
                IssueKind.EMPTY_NAME, f"Field #{index} has an empty name", f.identifier
            ))
        if counts[f.identifier] > 1 and f.identifier not in reported:
            reported.add(f.identifier)
            issues.append(ValidationIssue(
                IssueKind.DUPLICATE_IDENTIFIER,
                f"Identifier '{f.identifier}' is used by {counts[f.identifier]} fields",
                f.identifier,
            ))
        if not f.is_variable:
            if f.length is None:
                issues.append(ValidationIssue(
                    IssueKind.MISSING_LENGTH,
                    f"Fixed field {label!r} has no length",
                    f.identifier,
                ))
            elif f.length <= 0:
                issues.append(ValidationIssue(
                    IssueKind.INVALID_LENGTH,
                    f"Fixed field {label!r} has length {f.length}",
                    f.identifier,
                ))
        if f.enabled:
            issue = _check_value(f)
            if issue is not None:
                issues.append(issue)

    issues.extend(_check_bounded_variables(frame))
    return issues


def ensure_valid(frame) -> None:
    """Raise if ``frame`` has any validation issue.

    Raises:
        EmptyName: If blank names are the only problem.
        InvalidFrame: Otherwise, carrying every issue.
    """
    issues = validate(frame)
    if not issues:
        return
    if all(issue.kind is IssueKind.EMPTY_NAME for issue in issues):
        raise EmptyName(issues[0].message, field_id=issues[0].field_id)
    raise InvalidFrame(issues)
