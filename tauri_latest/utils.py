"""Shared file helpers."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from .errors import FileAccessError, MalformedConfigError


def read_text(path: Path) -> str:
    """Read a UTF-8 text file, wrapping OS errors."""

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedConfigError(f"{path} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise FileAccessError(f"Failed to read {path}: {exc}") from exc


def read_json(path: Path) -> Any:
    """Parse a JSON file, raising ``MalformedConfigError`` on invalid content."""

    text = read_text(path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedConfigError(f"Invalid JSON in {path}: {exc}") from exc


def write_text(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` in one step.

    The text goes to a temporary file beside the target which is then renamed
    over it, so readers see either the old file or the complete new one.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(content)
        os.replace(tmp_path, path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise FileAccessError(f"Failed to write {path}: {exc}") from exc
