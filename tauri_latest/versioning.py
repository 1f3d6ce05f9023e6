"""Release version lookup from package.json or Cargo.toml."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

try:
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for Py<3.11
    import tomli as tomllib  # type: ignore[no-redef]

from .errors import VersionNotFoundError
from .utils import read_json, read_text

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"
CARGO_TOML = "Cargo.toml"

_QUOTES = "\"'"


def resolve_version(project_root: Path) -> str:
    """Return the release version of the project at ``project_root``.

    ``package.json`` wins over ``Cargo.toml`` when both declare a version.
    """

    package_json = project_root / PACKAGE_JSON
    cargo_toml = project_root / CARGO_TOML

    if package_json.is_file():
        version = read_package_json_version(package_json)
        if version:
            logger.info("Using version %s from %s", version, package_json)
            return version

    if cargo_toml.is_file():
        version = read_cargo_version(cargo_toml)
        if version:
            logger.info("Using version %s from %s", version, cargo_toml)
            return version

    raise VersionNotFoundError(f"Could not find version in {package_json} or {cargo_toml}")


def read_package_json_version(path: Path) -> Optional[str]:
    payload = read_json(path)
    if not isinstance(payload, dict):
        logger.debug("%s is not a JSON object; ignoring it", path)
        return None
    version = payload.get("version")
    if isinstance(version, str) and version.strip():
        return version.strip()
    return None


def read_cargo_version(path: Path) -> Optional[str]:
    """Read the package version from a Cargo manifest.

    ``[package].version`` is used when it is a string. ``version.workspace =
    true`` inherits ``[workspace.package].version`` from the same file, and a
    virtual manifest falls back to that table too. Only a file that is not valid
    TOML is scanned line by line for the first ``version = ...``.
    """

    text = read_text(path)
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError:
        logger.debug("%s is not valid TOML; scanning lines for a version", path)
        return scan_version_line(text)

    workspace = data.get("workspace")
    workspace_package = workspace.get("package") if isinstance(workspace, dict) else None
    workspace_version = _table_version(workspace_package)

    package = data.get("package")
    if isinstance(package, dict):
        version = package.get("version")
        if isinstance(version, dict) and version.get("workspace") is True:
            if workspace_version is None:
                logger.debug("%s inherits its version from a workspace root", path)
            return workspace_version
        if version is not None:
            return _table_version(package)
    return workspace_version


def _table_version(table: object) -> Optional[str]:
    if not isinstance(table, dict):
        return None
    version = table.get("version")
    if isinstance(version, str) and version.strip():
        return version.strip()
    return None


def scan_version_line(text: str) -> Optional[str]:
    """Return the value of the first ``version = "..."`` line in ``text``."""

    for line in text.splitlines():
        if not line.startswith("version"):
            continue
        _key, sep, value = line[len("version"):].partition("=")
        if not sep:
            continue
        version = value.strip().strip(_QUOTES)
        if version:
            return version
    return None
