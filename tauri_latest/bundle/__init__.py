"""Bundle directory scanning utilities."""

from .platforms import PLATFORM_KEYS, PlatformKey, classify
from .scanner import InstallerArtifact, find_installers, find_signatures, scan_installers

__all__ = [
    "PLATFORM_KEYS",
    "PlatformKey",
    "classify",
    "InstallerArtifact",
    "find_installers",
    "find_signatures",
    "scan_installers",
]
