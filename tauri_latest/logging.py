"""Logging setup for the tauri-latest command."""

from __future__ import annotations

import logging
import sys

_LOGGER_NAME = "tauri_latest"
_FORMAT = "[tauri-latest] %(levelname)s %(message)s"


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Send ``tauri_latest`` log records to stderr; stdout is reserved for JSON output."""

    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # one stderr handler per process, whatever the number of main() calls
    handler = next((h for h in logger.handlers if getattr(h, "_tauri_latest", False)), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler._tauri_latest = True  # type: ignore[attr-defined]
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    else:
        handler.setStream(sys.stderr)
    handler.setLevel(level)
    return logger


__all__ = ["configure_logging"]
