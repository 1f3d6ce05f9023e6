"""Platform classification for bundle installers."""

from __future__ import annotations

from enum import Enum


class PlatformKey(str, Enum):
    """Platform identifiers understood by the Tauri updater."""

    WINDOWS_X86_64 = "windows-x86_64"
    DARWIN_AARCH64 = "darwin-aarch64"
    DARWIN_X86_64 = "darwin-x86_64"
    LINUX_X86_64 = "linux-x86_64"
    UNKNOWN = "unknown"


PLATFORM_KEYS = frozenset(key.value for key in PlatformKey)

_ARM_MARKERS = ("aarch64", "arm64")


def classify(filename: str) -> PlatformKey:
    """Return the platform key for an installer file name."""

    if filename.endswith(".msi") or filename.endswith(".exe"):
        return PlatformKey.WINDOWS_X86_64
    if filename.endswith(".dmg"):
        if any(marker in filename for marker in _ARM_MARKERS):
            return PlatformKey.DARWIN_AARCH64
        return PlatformKey.DARWIN_X86_64
    if filename.endswith(".AppImage"):
        return PlatformKey.LINUX_X86_64
    return PlatformKey.UNKNOWN
