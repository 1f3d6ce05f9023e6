"""End-to-end generation of ``latest.json`` from a Tauri bundle directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .bundle.scanner import InstallerArtifact, find_signatures, scan_installers
from .config import detect_bundle_dir, resolve_public_key
from .errors import BundleDirNotFoundError, NoInstallersFoundError, PlatformCollisionError
from .manifest import MANIFEST_FILENAME, build_manifest, build_platform_entry, dump_manifest
from .schemas.manifest import PlatformEntry, UpdateManifest
from .secrets import SignerSecrets
from .signer import DEFAULT_SIGNER_COMMAND, DEFAULT_TIMEOUT, SignatureMode, SignatureProvider, Signer, TauriSigner
from .versioning import resolve_version

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GenerateConfig:
    """Inputs for one manifest generation run."""

    project_root: Path
    bundle_dir: Path
    public_key: str
    download_url_base: str
    notes: str = ""
    signature_mode: SignatureMode = SignatureMode.EXISTING
    private_key: Optional[Path] = None
    verify: bool = False
    strict: bool = False
    signer_command: Sequence[str] = DEFAULT_SIGNER_COMMAND
    signer_timeout: Optional[float] = DEFAULT_TIMEOUT
    output_path: Optional[Path] = None
    env_files: Sequence[Path] = ()
    now: Optional[datetime] = None


@dataclass(slots=True)
class GenerationResult:
    manifest_path: Path
    manifest: UpdateManifest
    installers: List[InstallerArtifact]
    verified: bool
    logs: List[str] = field(default_factory=list)


class ManifestGenerator:
    """Coordinates installer discovery, signing and manifest output."""

    def __init__(self, *, signer: Optional[Signer] = None) -> None:
        self.signer = signer

    def generate(self, config: GenerateConfig) -> GenerationResult:
        """Generate the manifest described by ``config`` and write it to disk."""

        logs: List[str] = []
        project_root = Path(config.project_root)
        bundle_dir = Path(config.bundle_dir)
        if not bundle_dir.is_dir():
            raise BundleDirNotFoundError(
                f"Bundle directory not found: {bundle_dir}. Run `tauri build` first."
            )

        version = resolve_version(project_root)
        installers = scan_installers(bundle_dir)
        if not installers:
            raise NoInstallersFoundError(f"No installers found in {bundle_dir}")
        logs.append(f"Found {len(installers)} installer(s) in {bundle_dir}")

        signer = self.signer or TauriSigner(
            config.signer_command,
            timeout=config.signer_timeout,
            secrets=SignerSecrets(config.env_files),
        )
        signatures = find_signatures(bundle_dir) if config.signature_mode == SignatureMode.EXISTING else {}
        provider = SignatureProvider(
            config.signature_mode,
            signer=signer,
            private_key=config.private_key,
            signatures=signatures,
        )

        platforms: Dict[str, PlatformEntry] = {}
        sources: Dict[str, Path] = {}
        for artifact in installers:
            key = artifact.platform.value
            logger.info("Platform key for %s: %s", artifact.name, key)
            signature = provider.signature_for(artifact)
            if config.verify:
                signer.verify(artifact.path, signature, config.public_key)
                logger.info("Verified signature for %s", artifact.name)

            if key in sources:
                message = f"Installers {sources[key]} and {artifact.path} both map to platform '{key}'"
                if config.strict:
                    raise PlatformCollisionError(message)
                logger.warning("%s; keeping %s", message, artifact.path)
                logs.append(f"Platform '{key}' overwritten by {artifact.name}")
            sources[key] = artifact.path
            platforms[key] = build_platform_entry(artifact, signature, config.download_url_base)

        manifest = build_manifest(version, config.notes, platforms, now=config.now)
        manifest_path = Path(config.output_path) if config.output_path else project_root / MANIFEST_FILENAME
        dump_manifest(manifest, manifest_path)
        logger.info("latest.json generated at %s", manifest_path)
        logs.append(f"Manifest written to {manifest_path}")

        return GenerationResult(
            manifest_path=manifest_path,
            manifest=manifest,
            installers=installers,
            verified=config.verify,
            logs=logs,
        )


def generate_latest_json(
    bundle_dir: Path,
    public_key: str,
    download_url_base: str,
    notes: str,
    *,
    project_root: Optional[Path] = None,
    signer: Optional[Signer] = None,
    **options: Any,
) -> GenerationResult:
    """Generate ``latest.json`` from an explicit bundle directory and public key.

    ``options`` are forwarded to :class:`GenerateConfig` (``signature_mode``,
    ``private_key``, ``verify``, ``strict``, ``output_path`` ...).
    """

    root = Path(project_root) if project_root else Path.cwd()
    config = GenerateConfig(
        project_root=root,
        bundle_dir=Path(bundle_dir),
        public_key=public_key,
        download_url_base=download_url_base,
        notes=notes,
        **options,
    )
    return ManifestGenerator(signer=signer).generate(config)


def generate_latest_json_auto(
    download_url_base: str,
    notes: str,
    *,
    project_root: Optional[Path] = None,
    config_path: Optional[Path] = None,
    signer: Optional[Signer] = None,
    **options: Any,
) -> GenerationResult:
    """Generate ``latest.json`` detecting the bundle dir and public key from the project."""

    root = Path(project_root) if project_root else Path.cwd()
    bundle_dir = detect_bundle_dir(root)
    public_key = resolve_public_key(root, config_path)
    return generate_latest_json(
        bundle_dir,
        public_key,
        download_url_base,
        notes,
        project_root=root,
        signer=signer,
        **options,
    )
