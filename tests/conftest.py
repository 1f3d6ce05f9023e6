from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Optional

import pytest

PUBLIC_KEY = "dW50cnVzdGVkIGNvbW1lbnQ6IG1pbmlzaWduIHB1YmxpYyBrZXk="

InstallerFactory = Callable[..., Path]


@pytest.fixture()
def tauri_project(tmp_path: Path) -> Path:
    """A project root with package.json, tauri.conf.json and an empty bundle dir."""

    project = tmp_path / "app"
    (project / "target" / "release" / "bundle").mkdir(parents=True)
    (project / "package.json").write_text(json.dumps({"name": "app", "version": "1.2.3"}), encoding="utf-8")
    (project / "tauri.conf.json").write_text(
        json.dumps({"plugins": {"updater": {"pubkey": PUBLIC_KEY}}}),
        encoding="utf-8",
    )
    return project


@pytest.fixture()
def bundle_dir(tauri_project: Path) -> Path:
    return tauri_project / "target" / "release" / "bundle"


@pytest.fixture()
def make_installer(bundle_dir: Path) -> InstallerFactory:
    def _make(relative: str, signature: Optional[str] = None) -> Path:
        path = bundle_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"installer")
        if signature is not None:
            path.with_name(path.name + ".sig").write_text(signature, encoding="utf-8")
        return path

    return _make
