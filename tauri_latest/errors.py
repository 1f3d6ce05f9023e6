"""Error types raised while generating update manifests."""

from __future__ import annotations


class LatestJsonError(RuntimeError):
    """Base class for every failure that aborts a manifest generation run."""


class VersionNotFoundError(LatestJsonError):
    """Raised when neither package.json nor Cargo.toml yields a version."""


class BundleDirNotFoundError(LatestJsonError):
    """Raised when the build output directory does not exist."""


class PublicKeyNotFoundError(LatestJsonError):
    """Raised when the updater public key cannot be located in the app config."""


class NoInstallersFoundError(LatestJsonError):
    """Raised when the bundle directory contains no installers."""


class SigningFailedError(LatestJsonError):
    """Raised when the signer exits with a non-zero status."""


class EmptySignatureError(LatestJsonError):
    """Raised when a signature (from the signer or a .sig file) is empty."""


class VerificationFailedError(LatestJsonError):
    """Raised when the signer rejects a signature."""


class SignerTimeoutError(LatestJsonError):
    """Raised when the signer does not exit within the configured timeout."""


class SignatureNotFoundError(LatestJsonError):
    """Raised when no .sig file exists for an installer in existing-signature mode."""


class PlatformCollisionError(LatestJsonError):
    """Raised in strict mode when two installers map to the same platform key."""


class FileAccessError(LatestJsonError):
    """Raised on filesystem read, write or traversal failures."""


class MalformedConfigError(LatestJsonError):
    """Raised when an input file is not valid JSON/TOML or has the wrong shape."""


__all__ = [
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
]
