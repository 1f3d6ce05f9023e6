"""Project layout detection and updater public key lookup."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from .errors import BundleDirNotFoundError, MalformedConfigError, PublicKeyNotFoundError
from .utils import read_json

logger = logging.getLogger(__name__)

BUNDLE_DIR_CANDIDATES = (
    "target/release/bundle",
    "src-tauri/target/release/bundle",
)

CONFIG_FILE_CANDIDATES = (
    "tauri.conf.json",
    "src-tauri/tauri.conf.json",
)

# Tried in order; the first non-empty string wins.
PUBLIC_KEY_PATHS = (
    "/plugins/updater/pubkey",
    "/tauri/bundle/updater/pubkey",
    "/tauri/updater/pubkey",
)

_MISSING = object()


def detect_bundle_dir(project_root: Path) -> Path:
    """Return the Tauri bundle output directory below ``project_root``."""

    for candidate in BUNDLE_DIR_CANDIDATES:
        bundle_dir = project_root / candidate
        if bundle_dir.is_dir():
            logger.info("Using bundle directory %s", bundle_dir)
            return bundle_dir
    searched = ", ".join(str(project_root / candidate) for candidate in BUNDLE_DIR_CANDIDATES)
    raise BundleDirNotFoundError(
        f"Could not detect bundle dir (searched {searched}). Run `tauri build` first."
    )


def find_tauri_config(project_root: Path) -> Path:
    """Return the first ``tauri.conf.json`` found below ``project_root``."""

    for candidate in CONFIG_FILE_CANDIDATES:
        path = project_root / candidate
        if path.is_file():
            return path
    searched = ", ".join(str(project_root / candidate) for candidate in CONFIG_FILE_CANDIDATES)
    raise PublicKeyNotFoundError(f"No tauri.conf.json found (searched {searched})")


def read_public_key(conf_path: Path, paths: Sequence[str] = PUBLIC_KEY_PATHS) -> str:
    """Read the updater public key from ``conf_path``."""

    if not conf_path.is_file():
        raise PublicKeyNotFoundError(f"Config file not found: {conf_path}")
    document = read_json(conf_path)
    for pointer in paths:
        value = resolve_pointer(document, pointer)
        if isinstance(value, str) and value.strip():
            logger.debug("Public key found at %s in %s", pointer, conf_path)
            return value.strip()
    raise PublicKeyNotFoundError(
        f"No public key found in {conf_path} (checked {', '.join(paths)})"
    )


def resolve_public_key(project_root: Path, conf_path: Optional[Path] = None) -> str:
    """Locate the app config (unless given) and return its updater public key."""

    return read_public_key(conf_path or find_tauri_config(project_root))


def resolve_pointer(document: Any, pointer: str) -> Any:
    """Walk ``document`` along a JSON pointer; return ``None`` when absent."""

    if pointer == "":
        return document
    if not pointer.startswith("/"):
        raise MalformedConfigError(f"Invalid JSON pointer '{pointer}'")
    current: Any = document
    for token in pointer[1:].split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict):
            current = current.get(token, _MISSING)
        elif isinstance(current, list) and token.isdigit() and int(token) < len(current):
            current = current[int(token)]
        else:
            return None
        if current is _MISSING:
            return None
    return current
