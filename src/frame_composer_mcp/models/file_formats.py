"""File format handler for frame definitions (``.frame.json``).

Layout::

    {
      "format": "frame-composer",
      "version": 1,
      "frame": {"id": ..., "name": ..., "description": ..., "fields": [...]}
    }
"""

from __future__ import annotations

import json
from pathlib import Path

from .frame import Frame

FILE_FORMAT = "frame-composer"
FILE_VERSION = 1


def export_frame(frame: Frame, path: str | Path) -> Path:
    """Write a frame definition to a JSON file.

    Returns:
        The path written to.
    """
    path = Path(path)
    document = {
        "format": FILE_FORMAT,
        "version": FILE_VERSION,
        "frame": frame.to_dict(),
    }
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path


def import_frame(path: str | Path) -> Frame:
    """Read a frame definition written by :func:`export_frame`.

    Raises:
        ValueError: If the file is not a frame definition, uses an
            unsupported version, or holds a malformed field.
        DuplicateIdentifier: If two fields share an identifier.
    """
    path = Path(path)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(document, dict) or document.get("format") != FILE_FORMAT:
        raise ValueError(f"{path} is not a {FILE_FORMAT} file")
    version = document.get("version")
    if version != FILE_VERSION:
        raise ValueError(
            f"Unsupported {FILE_FORMAT} version {version!r} (expected {FILE_VERSION})"
        )

    if "frame" not in document:
        raise ValueError(f"{path} has no frame definition")
    return Frame.from_dict(document["frame"])
