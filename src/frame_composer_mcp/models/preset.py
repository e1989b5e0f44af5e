"""Preset templates and the instantiator that seeds new frames from them.

A preset is shared, read-only data. Instantiating one always produces
brand new ``Field`` objects with fresh identifiers; the preset itself is
never touched.
"""

from __future__ import annotations

from dataclasses import dataclass

from .field import Field, Representation, new_field_id, next_sequence
from .frame import Frame, new_frame_id


@dataclass(frozen=True)
class FieldTemplate:
    """A field description without an identifier."""

    name: str
    length: int | None = None
    is_variable: bool = False
    representation: Representation | None = None
    value: str = ""
    enabled: bool = True
    description: str = ""

    def __post_init__(self) -> None:
        if self.representation is not None:
            object.__setattr__(
                self, "representation", Representation(self.representation)
            )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "length": self.length,
            "is_variable": self.is_variable,
            "representation": (
                self.representation.value if self.representation else None
            ),
            "value": self.value,
            "enabled": self.enabled,
            "description": self.description,
        }


@dataclass(frozen=True)
class Preset:
    """A named, immutable frame template."""

    id: str
    name: str
    description: str = ""
    fields: tuple[FieldTemplate, ...] = ()

    def instantiate(self) -> list[Field]:
        return instantiate(self)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "fields": [t.to_dict() for t in self.fields],
        }

    def __repr__(self) -> str:
        return f"Preset(id={self.id!r}, fields={len(self.fields)})"


def instantiate(preset: Preset) -> list[Field]:
    """Materialize a preset into independent, editable fields.

    Each instantiation draws a new sequence number, so identifiers
    (``field_<seq>_<index>``) never collide across instantiations.
    """
    seq = next_sequence()
    return [
        Field(
            identifier=new_field_id(index, seq),
            name=template.name,
            length=template.length,
            is_variable=template.is_variable,
            representation=template.representation,
            value=template.value,
            enabled=template.enabled,
            description=template.description,
        )
        for index, template in enumerate(preset.fields)
    ]


def new_frame(preset: Preset, name: str | None = None) -> Frame:
    """Create a frame seeded from ``preset``."""
    return Frame(
        identifier=new_frame_id(),
        name=name or preset.name,
        description=preset.description,
        fields=instantiate(preset),
    )
