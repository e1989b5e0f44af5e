"""MCP server entry point for the frame composer.

Exposes tools, resources, and prompts via the Model Context Protocol
using the official Python MCP SDK with stdio transport. Frames live in
memory for the lifetime of the server process.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from .errors import FrameError, InvalidFrame
from .models.catalog import get_preset as find_preset, load_catalog
from .models.field import Field, resolve_representation
from .models.file_formats import export_frame as write_frame_file
from .models.file_formats import import_frame as read_frame_file
from .models.frame import Frame, new_frame_id
from .models.preset import new_frame
from .protocol.codec import decode_fields, encode
from .protocol.validation import ensure_valid, validate
from .protocol.values import ascii_preview, format_hex, to_bytes

logger = logging.getLogger(__name__)

SERVER_NAME = "frame-composer"

mcp = FastMCP(
    SERVER_NAME,
    instructions="Compose, validate, encode and decode TCP message frames",
)

# In-memory frame table
_frames: dict[str, Frame] = {}


def _get_frame(frame_id: str) -> Frame:
    """Look up a frame, raising KeyError if it does not exist."""
    if frame_id not in _frames:
        raise KeyError(f"Unknown frame '{frame_id}'. Use create_frame first.")
    return _frames[frame_id]


def _error(exc: Exception) -> dict[str, Any]:
    """Render an exception as a tool error result."""
    result: dict[str, Any] = {"error": str(exc)}
    if isinstance(exc, KeyError):
        result["error"] = exc.args[0] if exc.args else "Not found"
    if isinstance(exc, FrameError):
        result["kind"] = exc.kind
        result["field_id"] = exc.field_id
    if isinstance(exc, InvalidFrame):
        result["issues"] = [issue.to_dict() for issue in exc.issues]
    return result


def _summary(frame: Frame) -> dict[str, Any]:
    return {
        "id": frame.identifier,
        "name": frame.name,
        "field_count": len(frame.fields),
        "enabled_count": len(frame.enabled_fields()),
    }


# ─── PRESET TOOLS ────────────────────────────────────────────────────

@mcp.tool()
def list_presets() -> dict[str, Any]:
    """List the built-in protocol presets."""
    return {
        "presets": [
            {"id": p.id, "name": p.name, "description": p.description,
             "field_count": len(p.fields)}
            for p in load_catalog()
        ]
    }


@mcp.tool()
def get_preset(preset_id: str) -> dict[str, Any]:
    """Show the field templates of a preset.

    Args:
        preset_id: Preset id, e.g. 'modbus_tcp'.
    """
    preset = find_preset(preset_id)
    if preset is None:
        return {"error": f"Unknown preset '{preset_id}'"}
    return preset.to_dict()


# ─── FRAME TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def create_frame(
    name: str | None = None,
    description: str = "",
    preset_id: str | None = None,
) -> dict[str, Any]:
    """Create a new frame, empty or seeded from a preset.

    Args:
        name: Frame name (defaults to the preset name).
        description: Free-form description.
        preset_id: Optional preset to copy fields from.
    """
    if preset_id is not None:
        preset = find_preset(preset_id)
        if preset is None:
            return {"error": f"Unknown preset '{preset_id}'"}
        frame = new_frame(preset, name=name)
        if description:
            frame.description = description
    else:
        if not name:
            return {"error": "A name is required for an empty frame"}
        frame = Frame(identifier=new_frame_id(), name=name, description=description)

    _frames[frame.identifier] = frame
    logger.info("Created frame %s (%s)", frame.identifier, frame.name)
    return frame.to_dict()


@mcp.tool()
def list_frames() -> dict[str, Any]:
    """List frames held by this server."""
    return {"frames": [_summary(f) for f in _frames.values()]}


@mcp.tool()
def get_frame(frame_id: str) -> dict[str, Any]:
    """Return a frame with all of its fields.

    Args:
        frame_id: Frame identifier.
    """
    try:
        return _get_frame(frame_id).to_dict()
    except KeyError as e:
        return _error(e)


@mcp.tool()
def delete_frame(frame_id: str) -> dict[str, Any]:
    """Discard a frame.

    Args:
        frame_id: Frame identifier.
    """
    if _frames.pop(frame_id, None) is None:
        return {"error": f"Unknown frame '{frame_id}'"}
    logger.info("Deleted frame %s", frame_id)
    return {"deleted": True, "id": frame_id}


# ─── FIELD EDITING TOOLS ─────────────────────────────────────────────

@mcp.tool()
def add_field(
    frame_id: str,
    name: str,
    value: str = "",
    length: int | None = None,
    is_variable: bool = False,
    representation: str | None = None,
    enabled: bool = True,
    description: str = "",
    position: int | None = None,
) -> dict[str, Any]:
    """Add a field to a frame.

    Args:
        frame_id: Frame identifier.
        name: Field label.
        value: Field value as text, hex digits or a decimal number.
        length: Byte count for fixed fields.
        is_variable: True if the width follows from the value.
        representation: 'text', 'hex' or 'decimal' (defaults to decimal
                        for fixed fields, hex for variable ones).
        enabled: False to keep the field out of the encoded bytes.
        description: Free-form note.
        position: Insert position (appends when omitted).
    """
    try:
        frame = _get_frame(frame_id)
        field = frame.new_field(
            name,
            position=position,
            value=value,
            length=length,
            is_variable=is_variable,
            representation=representation,
            enabled=enabled,
            description=description,
        )
    except (KeyError, ValueError) as e:
        return _error(e)
    return field.to_dict()


@mcp.tool()
def update_field(
    frame_id: str,
    field_id: str,
    name: str | None = None,
    value: str | None = None,
    length: int | None = None,
    clear_length: bool = False,
    is_variable: bool | None = None,
    representation: str | None = None,
    enabled: bool | None = None,
    description: str | None = None,
) -> dict[str, Any]:
    """Edit attributes of an existing field. Omitted attributes are kept.

    Args:
        frame_id: Frame identifier.
        field_id: Field identifier.
        name: New label.
        value: New value.
        length: New byte count.
        clear_length: True to remove the declared length.
        is_variable: New variable-length flag.
        representation: 'text', 'hex' or 'decimal'.
        enabled: Enable or disable the field.
        description: New description.
    """
    try:
        field: Field = _get_frame(frame_id).get_field(field_id)
        if representation is not None:
            field.representation = resolve_representation(field.is_variable, representation)
    except (KeyError, ValueError) as e:
        return _error(e)

    if name is not None:
        field.name = name
    if value is not None:
        field.value = value
    if clear_length:
        field.length = None
    elif length is not None:
        field.length = length
    if is_variable is not None:
        field.is_variable = is_variable
    if enabled is not None:
        field.enabled = enabled
    if description is not None:
        field.description = description
    return field.to_dict()


@mcp.tool()
def remove_field(frame_id: str, field_id: str) -> dict[str, Any]:
    """Remove a field from a frame.

    Args:
        frame_id: Frame identifier.
        field_id: Field identifier.
    """
    try:
        removed = _get_frame(frame_id).remove_field(field_id)
    except KeyError as e:
        return _error(e)
    return {"removed": True, "id": removed.identifier}


@mcp.tool()
def move_field(frame_id: str, field_id: str, position: int) -> dict[str, Any]:
    """Move a field to a new position, changing its place on the wire.

    Args:
        frame_id: Frame identifier.
        field_id: Field identifier.
        position: Target index (0 = first).
    """
    try:
        frame = _get_frame(frame_id)
        frame.move_field(field_id, position)
    except KeyError as e:
        return _error(e)
    return {"order": [f.identifier for f in frame.fields]}


# ─── CODEC TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def validate_frame(frame_id: str) -> dict[str, Any]:
    """Run pre-flight checks on a frame without encoding it.

    Args:
        frame_id: Frame identifier.
    """
    try:
        issues = validate(_get_frame(frame_id))
    except KeyError as e:
        return _error(e)
    return {"valid": not issues, "issues": [i.to_dict() for i in issues]}


@mcp.tool()
def encode_frame(frame_id: str) -> dict[str, Any]:
    """Encode a frame into the bytes that would be sent.

    The frame is validated first; any issue blocks encoding.

    Args:
        frame_id: Frame identifier.
    """
    try:
        frame = _get_frame(frame_id)
        ensure_valid(frame)
        data = encode(frame)
    except (KeyError, FrameError) as e:
        return _error(e)

    return {
        "hex": format_hex(data),
        "ascii": ascii_preview(data),
        "length": len(data),
    }


@mcp.tool()
def decode_bytes(frame_id: str, hex_data: str) -> dict[str, Any]:
    """Decode received bytes into field values using a frame as template.

    Args:
        frame_id: Frame identifier.
        hex_data: Received bytes as hex digits, e.g. '00 01 03'.
    """
    try:
        frame = _get_frame(frame_id)
        data = to_bytes(hex_data, "hex")
        decoded = decode_fields(data, frame)
    except (KeyError, FrameError) as e:
        return _error(e)

    return {
        "length": len(data),
        "ascii": ascii_preview(data),
        "fields": [d.to_dict() for d in decoded],
    }


# ─── FILE TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def export_frame(frame_id: str, output_path: str) -> dict[str, Any]:
    """Save a frame definition to a JSON file.

    Args:
        frame_id: Frame identifier.
        output_path: Output file path.
    """
    try:
        frame = _get_frame(frame_id)
    except KeyError as e:
        return _error(e)
    path = write_frame_file(frame, output_path)
    return {"path": str(path), "name": frame.name}


@mcp.tool()
def import_frame(input_path: str) -> dict[str, Any]:
    """Load a frame definition from a JSON file.

    The frame keeps its stored identifier unless a frame with that
    identifier is already loaded, in which case it gets a fresh one.

    Args:
        input_path: Path to a file written by export_frame.
    """
    if not Path(input_path).exists():
        return {"error": f"File not found: {input_path}"}

    try:
        frame = read_frame_file(input_path)
    except ValueError as e:
        return _error(e)

    if frame.identifier in _frames:
        frame.identifier = new_frame_id()
    _frames[frame.identifier] = frame
    logger.info("Imported frame %s from %s", frame.identifier, input_path)
    return _summary(frame)


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("frames://catalog/presets")
def resource_presets() -> str:
    """All built-in presets with their field templates."""
    return json.dumps({"presets": [p.to_dict() for p in load_catalog()]})


@mcp.resource("frames://frames/list")
def resource_frames_list() -> str:
    """Summary of frames currently held in memory."""
    return json.dumps({"frames": [_summary(f) for f in _frames.values()]})


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def compose_frame(protocol: str) -> str:
    """Guide the AI to build a frame for a given protocol message.

    Args:
        protocol: Protocol or message to build, e.g. "Modbus read coils".
    """
    presets = ", ".join(p.id for p in load_catalog())
    return f"""Build a frame for: {protocol}

Steps:
- Start from the closest preset with create_frame (available: {presets}),
  or create an empty frame and add fields one by one.
- Use 'decimal' for numeric header fields with a fixed byte width,
  'hex' for raw bytes and magic numbers, 'text' for ASCII content.
- Keep length fields in sync with the payload yourself; the codec does
  not recompute them.
- Run validate_frame, then encode_frame to get the bytes to send."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
