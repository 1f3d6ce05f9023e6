from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from tauri_latest.bundle.platforms import PlatformKey
from tauri_latest.bundle.scanner import InstallerArtifact
from tauri_latest.errors import MalformedConfigError
from tauri_latest.manifest import build_manifest, build_platform_entry, dump_manifest, load_manifest
from tauri_latest.schemas.manifest import PlatformEntry, UpdateManifest


def test_written_manifest_matches_input(tmp_path: Path) -> None:
    platforms = {"linux-x86_64": PlatformEntry(signature="sig1", url="http://h/app.AppImage")}
    before = datetime.now(timezone.utc).replace(microsecond=0)
    manifest = build_manifest("1.0.0", "x", platforms)
    path = tmp_path / "latest.json"
    dump_manifest(manifest, path)

    payload = json.loads(path.read_text(encoding="utf-8"))
    pub_date = datetime.strptime(payload.pop("pub_date"), "%Y-%m-%dT%H:%M:%SZ").replace(tzinfo=timezone.utc)

    assert payload == {
        "version": "1.0.0",
        "notes": "x",
        "platforms": {"linux-x86_64": {"signature": "sig1", "url": "http://h/app.AppImage"}},
    }
    assert before <= pub_date <= datetime.now(timezone.utc) + timedelta(seconds=1)


def test_pub_date_is_utc_whole_seconds() -> None:
    local = timezone(timedelta(hours=2))
    manifest = build_manifest("1.0.0", "", {}, now=datetime(2025, 5, 1, 12, 30, 45, 987654, tzinfo=local))
    assert manifest.model_dump(mode="json")["pub_date"] == "2025-05-01T10:30:45Z"


def test_dump_is_pretty_and_overwrites(tmp_path: Path) -> None:
    path = tmp_path / "latest.json"
    path.write_text("stale", encoding="utf-8")
    manifest = build_manifest("1.0.0", "notes\nwith lines", {}, now=datetime(2025, 1, 1, tzinfo=timezone.utc))

    dump_manifest(manifest, path)

    text = path.read_text(encoding="utf-8")
    assert text.startswith('{\n  "version": "1.0.0"')
    assert text.endswith("}\n")
    assert load_manifest(path).notes == "notes\nwith lines"
    assert [entry.name for entry in tmp_path.iterdir()] == ["latest.json"]


def test_platform_entry_url_joins_base(tmp_path: Path) -> None:
    artifact = InstallerArtifact(path=tmp_path / "app.AppImage", platform=PlatformKey.LINUX_X86_64)
    assert build_platform_entry(artifact, "S", "https://cdn.example/").url == "https://cdn.example/app.AppImage"
    assert build_platform_entry(artifact, "S", "https://cdn.example").url == "https://cdn.example/app.AppImage"


def test_unknown_platform_key_rejected() -> None:
    with pytest.raises(ValidationError):
        UpdateManifest(
            version="1.0.0",
            pub_date=datetime(2025, 1, 1, tzinfo=timezone.utc),
            platforms={"solaris-sparc": PlatformEntry(signature="s", url="u")},
        )


def test_load_manifest_invalid(tmp_path: Path) -> None:
    path = tmp_path / "latest.json"
    path.write_text(json.dumps({"version": "1.0.0"}), encoding="utf-8")
    with pytest.raises(MalformedConfigError):
        load_manifest(path)
