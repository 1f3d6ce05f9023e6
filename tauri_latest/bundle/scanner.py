"""Discovery of installers and detached signatures inside a bundle directory."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterator, List

from ..errors import FileAccessError
from .platforms import PlatformKey, classify

logger = logging.getLogger(__name__)

INSTALLER_SUFFIXES = (".msi", ".exe", ".dmg", ".AppImage")
SIGNATURE_SUFFIX = ".sig"


@dataclass(frozen=True, slots=True)
class InstallerArtifact:
    """An installer found in the bundle directory."""

    path: Path
    platform: PlatformKey

    @property
    def name(self) -> str:
        return self.path.name


def find_installers(root: Path) -> List[Path]:
    """Return every installer below ``root`` in sorted order."""

    return sorted(_walk_files(root, lambda name: name.endswith(INSTALLER_SUFFIXES)))


def find_signatures(root: Path) -> Dict[str, Path]:
    """Map platform keys to ``.sig`` files below ``root``.

    The key comes from the signature file name with the ``.sig`` suffix removed.
    When two signatures share a platform key the later one in sorted order wins.
    """

    signatures: Dict[str, Path] = {}
    for path in sorted(_walk_files(root, lambda name: name.endswith(SIGNATURE_SUFFIX))):
        platform = classify(path.name[: -len(SIGNATURE_SUFFIX)])
        previous = signatures.get(platform.value)
        if previous is not None:
            logger.debug("Signature %s replaces %s for %s", path, previous, platform.value)
        signatures[platform.value] = path
    return signatures


def scan_installers(root: Path) -> List[InstallerArtifact]:
    """Return installers below ``root`` paired with their platform key."""

    artifacts = [InstallerArtifact(path=path, platform=classify(path.name)) for path in find_installers(root)]
    for artifact in artifacts:
        logger.debug("Found installer %s (%s)", artifact.path, artifact.platform.value)
    return artifacts


def _walk_files(root: Path, predicate: Callable[[str], bool]) -> Iterator[Path]:
    root = Path(root)
    if not root.is_dir():
        raise FileAccessError(f"Cannot scan {root}: not a directory")

    def _raise(exc: OSError) -> None:
        raise FileAccessError(f"Failed to scan {exc.filename or root}: {exc.strerror or exc}") from exc

    for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise):
        for filename in filenames:
            if not predicate(filename):
                continue
            path = Path(dirpath) / filename
            if path.is_file():
                yield path
