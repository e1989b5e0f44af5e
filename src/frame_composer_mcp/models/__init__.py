"""Data models for fields, frames, and presets."""

from .field import Field, Representation, resolve_representation
from .frame import Frame
from .preset import FieldTemplate, Preset, instantiate, new_frame
from .catalog import get_preset, load_catalog
