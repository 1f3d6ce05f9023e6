"""Assembly and persistence of ``latest.json``."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Optional

from pydantic import ValidationError

from .bundle.scanner import InstallerArtifact
from .errors import MalformedConfigError
from .schemas.manifest import PlatformEntry, UpdateManifest
from .utils import read_text, write_text

MANIFEST_FILENAME = "latest.json"


def build_platform_entry(artifact: InstallerArtifact, signature: str, download_url_base: str) -> PlatformEntry:
    """Return the manifest entry pointing at ``artifact`` under ``download_url_base``."""

    return PlatformEntry(signature=signature, url=f"{download_url_base.rstrip('/')}/{artifact.name}")


def build_manifest(
    version: str,
    notes: str,
    platforms: Mapping[str, PlatformEntry],
    now: Optional[datetime] = None,
) -> UpdateManifest:
    """Assemble a manifest; ``pub_date`` defaults to the current UTC time."""

    return UpdateManifest(
        version=version,
        notes=notes,
        pub_date=now or datetime.now(timezone.utc),
        platforms=dict(platforms),
    )


def dump_manifest(manifest: UpdateManifest, path: Path) -> None:
    """Write a manifest to disk, replacing any existing file."""

    write_text(path, manifest.model_dump_json(indent=2) + "\n")


def load_manifest(path: Path) -> UpdateManifest:
    """Load a manifest from JSON."""

    try:
        return UpdateManifest.model_validate(json.loads(read_text(path)))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise MalformedConfigError(f"Invalid manifest at {path}: {exc}") from exc
