"""Schema definitions for update manifests."""

from .manifest import PUB_DATE_FORMAT, PlatformEntry, UpdateManifest

__all__ = [
    "PUB_DATE_FORMAT",
    "PlatformEntry",
    "UpdateManifest",
]
