"""Field model: one named, typed segment of a frame."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from enum import Enum

FIELD_ID_PREFIX = "field"

# Shared by every frame and preset instantiation so identifiers are never reused.
_sequence = itertools.count(1)


class Representation(str, Enum):
    """How a field's textual value is turned into bytes."""

    TEXT = "text"
    HEX = "hex"
    DECIMAL = "decimal"


def resolve_representation(
    is_variable: bool, representation: Representation | str | None = None
) -> Representation:
    """Return the effective representation for a field.

    An explicit representation always wins. Otherwise variable fields are
    ``hex`` and fixed-length fields are ``decimal``.
    """
    if representation is not None:
        return Representation(representation)
    return Representation.HEX if is_variable else Representation.DECIMAL


def next_sequence() -> int:
    return next(_sequence)


def new_field_id(index: int, seq: int | None = None) -> str:
    """Build a fresh ``field_<seq>_<index>`` identifier."""
    if seq is None:
        seq = next_sequence()
    return f"{FIELD_ID_PREFIX}_{seq}_{index}"


@dataclass
class Field:
    """A single segment of a message.

    ``value`` is the source of truth and is re-parsed on every encode.
    ``length`` is the byte count of a fixed field; for variable fields it
    is advisory and the actual width follows from the value.
    """

    identifier: str
    name: str
    length: int | None = None
    is_variable: bool = False
    representation: Representation | None = None
    value: str = ""
    enabled: bool = True
    description: str = ""

    def __post_init__(self) -> None:
        self.representation = resolve_representation(
            self.is_variable, self.representation
        )

    def __setattr__(self, name, value) -> None:
        if name == "identifier" and "identifier" in self.__dict__:
            raise AttributeError("Field identifier is immutable")
        super().__setattr__(name, value)

    @property
    def fixed_length(self) -> int | None:
        """Declared width when the field is fixed, else ``None``."""
        if self.is_variable:
            return None
        return self.length

    def to_dict(self) -> dict:
        return {
            "id": self.identifier,
            "name": self.name,
            "length": self.length,
            "is_variable": self.is_variable,
            "representation": self.representation.value,
            "value": self.value,
            "enabled": self.enabled,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Field:
        """Build a field from :meth:`to_dict` output.

        Raises:
            ValueError: If ``data`` is not a mapping, lacks ``id``, or
                holds a value of the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Field entry must be an object, got {type(data).__name__}")
        if "id" not in data:
            raise ValueError("Field entry has no 'id'")
        for key in ("id", "name", "value", "description"):
            if key in data and not isinstance(data[key], str):
                raise ValueError(f"Field '{key}' must be a string, got {data[key]!r}")
        for key in ("is_variable", "enabled"):
            if key in data and not isinstance(data[key], bool):
                raise ValueError(f"Field '{key}' must be true or false, got {data[key]!r}")
        length = data.get("length")
        if length is not None and (isinstance(length, bool) or not isinstance(length, int)):
            raise ValueError(f"Field 'length' must be an integer or null, got {length!r}")

        return cls(
            identifier=data["id"],
            name=data.get("name", ""),
            length=length,
            is_variable=data.get("is_variable", False),
            representation=data.get("representation"),
            value=data.get("value", ""),
            enabled=data.get("enabled", True),
            description=data.get("description", ""),
        )

    def __repr__(self) -> str:
        width = "var" if self.is_variable else self.length
        return (
            f"Field(id={self.identifier!r}, name={self.name!r}, "
            f"length={width}, {self.representation.value}={self.value!r})"
        )
