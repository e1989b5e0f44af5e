"""Frame model: an ordered, editable list of fields.

Field order is wire order. All edits are made by the caller; the frame
never recomputes values on its own.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import DuplicateIdentifier
from .field import Field, new_field_id, next_sequence

FRAME_ID_PREFIX = "frame"


def new_frame_id() -> str:
    return f"{FRAME_ID_PREFIX}_{next_sequence()}"


@dataclass
class Frame:
    """A complete message template (a.k.a. protocol)."""

    identifier: str
    name: str
    description: str = ""
    fields: list[Field] = field(default_factory=list)

    def get_field(self, identifier: str) -> Field:
        for f in self.fields:
            if f.identifier == identifier:
                return f
        raise KeyError(f"Unknown field '{identifier}' in frame '{self.identifier}'")

    def has_field(self, identifier: str) -> bool:
        return any(f.identifier == identifier for f in self.fields)

    def add_field(self, new: Field, position: int | None = None) -> Field:
        """Insert a field, appending when ``position`` is None.

        Raises:
            DuplicateIdentifier: If the identifier is already in use.
        """
        if self.has_field(new.identifier):
            raise DuplicateIdentifier(
                f"Field identifier '{new.identifier}' already used in frame "
                f"'{self.identifier}'"
            ).for_field(new)
        if position is None:
            self.fields.append(new)
        else:
            self.fields.insert(position, new)
        return new

    def new_field(self, name: str, position: int | None = None, **attrs) -> Field:
        """Create a field with a fresh identifier and add it."""
        index = len(self.fields)
        identifier = new_field_id(index)
        while self.has_field(identifier):
            identifier = new_field_id(index)
        return self.add_field(Field(identifier=identifier, name=name, **attrs), position)

    def remove_field(self, identifier: str) -> Field:
        target = self.get_field(identifier)
        self.fields.remove(target)
        return target

    def move_field(self, identifier: str, position: int) -> None:
        """Move a field to ``position`` (clamped to the list bounds)."""
        target = self.remove_field(identifier)
        position = max(0, min(position, len(self.fields)))
        self.fields.insert(position, target)

    def enabled_fields(self) -> list[Field]:
        return [f for f in self.fields if f.enabled]

    def to_dict(self) -> dict:
        return {
            "id": self.identifier,
            "name": self.name,
            "description": self.description,
            "fields": [f.to_dict() for f in self.fields],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Frame:
        """Build a frame from :meth:`to_dict` output.

        Raises:
            ValueError: If ``data`` is malformed.
            DuplicateIdentifier: If two fields share an identifier.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Frame must be an object, got {type(data).__name__}")
        for key in ("id", "name", "description"):
            if data.get(key) is not None and not isinstance(data[key], str):
                raise ValueError(f"Frame '{key}' must be a string, got {data[key]!r}")
        items = data.get("fields", [])
        if not isinstance(items, list):
            raise ValueError(f"Frame 'fields' must be a list, got {items!r}")

        frame = cls(
            identifier=data.get("id") or new_frame_id(),
            name=data.get("name") or "",
            description=data.get("description") or "",
        )
        for item in items:
            frame.add_field(Field.from_dict(item))
        return frame

    def __repr__(self) -> str:
        return f"Frame(id={self.identifier!r}, name={self.name!r}, fields={len(self.fields)})"
