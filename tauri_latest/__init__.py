"""Generate Tauri updater manifests (``latest.json``) from bundle outputs."""

__version__ = "0.1.0"
from .bundle import InstallerArtifact, PlatformKey, classify, find_installers, find_signatures, scan_installers
from .config import PUBLIC_KEY_PATHS, detect_bundle_dir, read_public_key
from .errors import (
    BundleDirNotFoundError,
    EmptySignatureError,
    FileAccessError,
    LatestJsonError,
    MalformedConfigError,
    NoInstallersFoundError,
    PlatformCollisionError,
    PublicKeyNotFoundError,
    SignatureNotFoundError,
    SignerTimeoutError,
    SigningFailedError,
    VerificationFailedError,
    VersionNotFoundError,
)
from .generator import (
    GenerateConfig,
    GenerationResult,
    ManifestGenerator,
    generate_latest_json,
    generate_latest_json_auto,
)
from .manifest import build_manifest, dump_manifest, load_manifest
from .schemas.manifest import PlatformEntry, UpdateManifest
from .signer import SignatureMode, SignatureProvider, Signer, TauriSigner
from .versioning import resolve_version

__all__ = [
    "__version__",
    "InstallerArtifact",
    "PlatformKey",
    "classify",
    "find_installers",
    "find_signatures",
    "scan_installers",
    "PUBLIC_KEY_PATHS",
    "detect_bundle_dir",
    "read_public_key",
    "LatestJsonError",
    "VersionNotFoundError",
    "BundleDirNotFoundError",
    "PublicKeyNotFoundError",
    "NoInstallersFoundError",
    "SigningFailedError",
    "EmptySignatureError",
    "VerificationFailedError",
    "SignerTimeoutError",
    "SignatureNotFoundError",
    "PlatformCollisionError",
    "FileAccessError",
    "MalformedConfigError",
    "GenerateConfig",
    "GenerationResult",
    "ManifestGenerator",
    "generate_latest_json",
    "generate_latest_json_auto",
    "build_manifest",
    "dump_manifest",
    "load_manifest",
    "PlatformEntry",
    "UpdateManifest",
    "SignatureMode",
    "SignatureProvider",
    "Signer",
    "TauriSigner",
    "resolve_version",
]
