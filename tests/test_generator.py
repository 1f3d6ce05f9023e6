from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from unittest import mock

import pytest

from tauri_latest.errors import (
    BundleDirNotFoundError,
    NoInstallersFoundError,
    PlatformCollisionError,
    VerificationFailedError,
)
from tauri_latest.generator import generate_latest_json, generate_latest_json_auto
from tauri_latest.signer import SignatureMode

from conftest import PUBLIC_KEY


class _RecordingSigner:
    def __init__(self, reject: bool = False) -> None:
        self.reject = reject
        self.signed: list[Path] = []
        self.verified: list[tuple[Path, str, str]] = []

    def sign(self, installer: Path, private_key: Path) -> str:
        self.signed.append(installer)
        return f"SIGNED:{installer.name}"

    def verify(self, installer: Path, signature: str, public_key: str) -> None:
        self.verified.append((installer, signature, public_key))
        if self.reject:
            raise VerificationFailedError(f"Signature verification failed for {installer}")


def test_appimage_with_existing_signature(tauri_project: Path, make_installer) -> None:
    make_installer("appimage/app.AppImage", signature="SIGX")

    result = generate_latest_json_auto("https://cdn.example/", "Initial release", project_root=tauri_project)

    payload = json.loads((tauri_project / "latest.json").read_text(encoding="utf-8"))
    assert result.manifest_path == tauri_project / "latest.json"
    assert payload["version"] == "1.2.3"
    assert payload["notes"] == "Initial release"
    assert payload["platforms"] == {
        "linux-x86_64": {"signature": "SIGX", "url": "https://cdn.example/app.AppImage"}
    }


def test_empty_bundle_dir_writes_nothing(tauri_project: Path) -> None:
    with pytest.raises(NoInstallersFoundError):
        generate_latest_json_auto("https://cdn.example", "", project_root=tauri_project)
    assert not (tauri_project / "latest.json").exists()


def test_missing_bundle_dir(tmp_path: Path) -> None:
    with pytest.raises(BundleDirNotFoundError):
        generate_latest_json(tmp_path / "bundle", PUBLIC_KEY, "https://cdn.example", "", project_root=tmp_path)


def test_all_platforms(tauri_project: Path, bundle_dir: Path, make_installer) -> None:
    make_installer("nsis/app_1.2.3_x64-setup.exe", signature="WIN")
    make_installer("dmg/app_1.2.3_aarch64.dmg", signature="MAC_ARM")
    make_installer("dmg/app_1.2.3_x64.dmg", signature="MAC_X64")
    make_installer("appimage/app_1.2.3_amd64.AppImage", signature="LINUX")
    now = datetime(2025, 3, 4, 5, 6, 7, tzinfo=timezone.utc)

    result = generate_latest_json(bundle_dir, PUBLIC_KEY, "https://dl.example/v1.2.3", "n", project_root=tauri_project, now=now)

    platforms = result.manifest.platforms
    assert {key: entry.signature for key, entry in platforms.items()} == {
        "windows-x86_64": "WIN",
        "darwin-aarch64": "MAC_ARM",
        "darwin-x86_64": "MAC_X64",
        "linux-x86_64": "LINUX",
    }
    assert platforms["darwin-aarch64"].url == "https://dl.example/v1.2.3/app_1.2.3_aarch64.dmg"
    assert result.manifest.model_dump(mode="json")["pub_date"] == "2025-03-04T05:06:07Z"
    assert len(result.installers) == 4


def test_collision_last_one_wins(tauri_project: Path, bundle_dir: Path, make_installer) -> None:
    make_installer("msi/app.msi", signature="MSI")
    make_installer("nsis/app-setup.exe", signature="EXE")

    result = generate_latest_json(bundle_dir, PUBLIC_KEY, "https://cdn.example", "", project_root=tauri_project)

    entry = result.manifest.platforms["windows-x86_64"]
    assert entry.signature == "EXE"
    assert entry.url.endswith("/app-setup.exe")
    assert "Platform 'windows-x86_64' overwritten by app-setup.exe" in result.logs


def test_collision_strict(tauri_project: Path, bundle_dir: Path, make_installer) -> None:
    make_installer("msi/app.msi", signature="MSI")
    make_installer("nsis/app-setup.exe", signature="EXE")

    with pytest.raises(PlatformCollisionError):
        generate_latest_json(bundle_dir, PUBLIC_KEY, "https://cdn.example", "", project_root=tauri_project, strict=True)
    assert not (tauri_project / "latest.json").exists()


def test_sign_mode_and_verify(tauri_project: Path, bundle_dir: Path, make_installer) -> None:
    installer = make_installer("msi/app.msi")
    signer = _RecordingSigner()

    result = generate_latest_json(
        bundle_dir,
        PUBLIC_KEY,
        "https://cdn.example",
        "",
        project_root=tauri_project,
        signer=signer,
        signature_mode=SignatureMode.SIGN,
        private_key=tauri_project / "private.key",
        verify=True,
    )

    assert signer.signed == [installer]
    assert signer.verified == [(installer, "SIGNED:app.msi", PUBLIC_KEY)]
    assert result.verified is True
    assert result.manifest.platforms["windows-x86_64"].signature == "SIGNED:app.msi"


def test_verification_failure_aborts(tauri_project: Path, bundle_dir: Path, make_installer) -> None:
    make_installer("appimage/app.AppImage", signature="SIGX")

    with pytest.raises(VerificationFailedError):
        generate_latest_json(
            bundle_dir,
            PUBLIC_KEY,
            "https://cdn.example",
            "",
            project_root=tauri_project,
            signer=_RecordingSigner(reject=True),
            verify=True,
        )
    assert not (tauri_project / "latest.json").exists()


def test_existing_mode_does_not_call_signer(tauri_project: Path, bundle_dir: Path, make_installer) -> None:
    make_installer("appimage/app.AppImage", signature="SIGX")
    with mock.patch("subprocess.run") as run_mock:
        generate_latest_json(bundle_dir, PUBLIC_KEY, "https://cdn.example", "", project_root=tauri_project)
    run_mock.assert_not_called()


def test_custom_output_path(tauri_project: Path, bundle_dir: Path, make_installer) -> None:
    make_installer("appimage/app.AppImage", signature="SIGX")
    output = tauri_project / "dist" / "updates" / "latest.json"

    result = generate_latest_json(
        bundle_dir, PUBLIC_KEY, "https://cdn.example", "", project_root=tauri_project, output_path=output
    )

    assert result.manifest_path == output
    assert output.exists()
    assert not (tauri_project / "latest.json").exists()
