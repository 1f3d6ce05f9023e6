"""Signature production and verification via the Tauri CLI signer."""

from __future__ import annotations

import logging
import os
import subprocess
from enum import Enum
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, Sequence, Type

from .bundle.scanner import SIGNATURE_SUFFIX, InstallerArtifact
from .errors import (
    EmptySignatureError,
    LatestJsonError,
    SignatureNotFoundError,
    SignerTimeoutError,
    SigningFailedError,
    VerificationFailedError,
)
from .secrets import SIGNING_PASSWORD_ENV, SignerSecrets
from .utils import read_text

logger = logging.getLogger(__name__)

DEFAULT_SIGNER_COMMAND = ("tauri",)
DEFAULT_TIMEOUT = 120.0


class SignatureMode(str, Enum):
    """How a signature is obtained for each installer."""

    SIGN = "sign"
    EXISTING = "existing"


class Signer(Protocol):
    def sign(self, installer: Path, private_key: Path) -> str:  # pragma: no cover - interface
        ...

    def verify(self, installer: Path, signature: str, public_key: str) -> None:  # pragma: no cover - interface
        ...


class TauriSigner:
    """Run ``tauri signer sign|verify`` as a subprocess."""

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_SIGNER_COMMAND,
        *,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        env: Optional[Mapping[str, str]] = None,
        secrets: Optional[SignerSecrets] = None,
    ) -> None:
        if not command:
            raise ValueError("Signer command must not be empty")
        self.command = list(command)
        self.timeout = timeout
        self.env = dict(env or {})
        self.secrets = secrets or SignerSecrets()

    def sign(self, installer: Path, private_key: Path) -> str:
        args = ["signer", "sign", "--private-key", str(private_key), str(installer)]
        proc = self._run(args, installer=installer, error=SigningFailedError)
        if proc.returncode != 0:
            raise SigningFailedError(
                f"Signing failed for {installer} (exit {proc.returncode}): {proc.stderr.strip()}"
            )
        lines = [line.strip() for line in proc.stdout.splitlines() if line.strip()]
        if not lines:
            raise EmptySignatureError(f"Signer produced no signature for {installer}")
        return lines[-1]

    def verify(self, installer: Path, signature: str, public_key: str) -> None:
        args = ["signer", "verify", "--public-key", public_key, str(installer), signature]
        proc = self._run(args, installer=installer, error=VerificationFailedError)
        if proc.returncode != 0:
            raise VerificationFailedError(
                f"Signature verification failed for {installer}: {proc.stderr.strip()}"
            )

    def _run(
        self,
        args: Sequence[str],
        *,
        installer: Path,
        error: Type[LatestJsonError],
    ) -> subprocess.CompletedProcess[str]:
        cmd = [*self.command, *args]
        logger.debug("Running signer: %s %s %s", " ".join(self.command), args[0], args[1])
        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout,
                env=self._child_env(),
            )
        except subprocess.TimeoutExpired as exc:
            raise SignerTimeoutError(
                f"Signer '{args[1]}' for {installer} did not finish within {self.timeout}s"
            ) from exc
        except FileNotFoundError as exc:
            raise error(f"Signer executable not found: {self.command[0]}") from exc

    def _child_env(self) -> Dict[str, str]:
        env = {**os.environ, **self.env}
        if SIGNING_PASSWORD_ENV not in env:
            password = self.secrets.signing_password()
            if password:
                env[SIGNING_PASSWORD_ENV] = password
        return env


def read_signature_file(path: Path) -> str:
    """Return the stripped contents of a detached signature file."""

    signature = read_text(path).strip()
    if not signature:
        raise EmptySignatureError(f"Signature file is empty: {path}")
    return signature


class SignatureProvider:
    """Obtain the signature for each installer according to a :class:`SignatureMode`."""

    def __init__(
        self,
        mode: SignatureMode,
        *,
        signer: Optional[Signer] = None,
        private_key: Optional[Path] = None,
        signatures: Optional[Mapping[str, Path]] = None,
    ) -> None:
        self.mode = SignatureMode(mode)
        self.signer = signer or TauriSigner()
        self.private_key = private_key
        self.signatures = dict(signatures or {})
        if self.mode is SignatureMode.SIGN and private_key is None:
            raise SigningFailedError("Signing mode requires a private key path")

    def signature_for(self, artifact: InstallerArtifact) -> str:
        if self.mode is SignatureMode.SIGN:
            logger.info("Signing %s", artifact.path)
            return self.signer.sign(artifact.path, self.private_key)  # type: ignore[arg-type]

        path = self._signature_path(artifact)
        logger.info("Using signature %s for %s", path, artifact.name)
        return read_signature_file(path)

    def _signature_path(self, artifact: InstallerArtifact) -> Path:
        sibling = artifact.path.with_name(artifact.name + SIGNATURE_SUFFIX)
        if sibling.is_file():
            return sibling
        scanned = self.signatures.get(artifact.platform.value)
        if scanned is not None:
            return scanned
        raise SignatureNotFoundError(
            f"No signature found for {artifact.path} (expected {sibling})"
        )
