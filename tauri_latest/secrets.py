"""Lookup of the signing-key password from the environment and ``.env`` files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from dotenv import dotenv_values

SIGNING_PASSWORD_ENV = "TAURI_SIGNING_PRIVATE_KEY_PASSWORD"


@dataclass(frozen=True)
class SecretLookup:
    name: str
    value: Optional[str]
    source: Optional[str]
    checked: List[str]

    @property
    def present(self) -> bool:
        return self.value is not None


class SignerSecrets:
    """Secrets handed to the ``tauri signer`` child process for one run.

    The process environment is checked first, then each ``.env`` file in the
    order it was added. Files are parsed once, on first lookup.
    """

    def __init__(
        self,
        env_files: Sequence[Path] = (),
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.environ = environ
        self.env_files: List[Path] = []
        self._parsed: Dict[Path, Dict[str, Optional[str]]] = {}
        for path in env_files:
            self.add_env_file(path)

    def add_env_file(self, path: Path) -> None:
        path = Path(path)
        if path not in self.env_files:
            self.env_files.append(path)

    def lookup(self, name: str = SIGNING_PASSWORD_ENV) -> SecretLookup:
        environ = os.environ if self.environ is None else self.environ
        checked = ["env"]
        value = environ.get(name)
        if value:
            return SecretLookup(name=name, value=value, source="env", checked=checked)

        for path in self.env_files:
            checked.append(f"dotenv:{path}")
            value = self._values(path).get(name)
            if value:
                return SecretLookup(name=name, value=value, source=f"dotenv:{path}", checked=checked)
        return SecretLookup(name=name, value=None, source=None, checked=checked)

    def signing_password(self) -> Optional[str]:
        return self.lookup(SIGNING_PASSWORD_ENV).value

    def describe(self) -> dict[str, object]:
        """JSON-friendly view of where the signing password was (or wasn't) found."""

        found = self.lookup(SIGNING_PASSWORD_ENV)
        return {
            "name": found.name,
            "present": found.present,
            "source": found.source,
            "checked": found.checked,
            "env_files": [
                {"path": str(path), "exists": path.is_file()} for path in self.env_files
            ],
        }

    def _values(self, path: Path) -> Dict[str, Optional[str]]:
        if path not in self._parsed:
            self._parsed[path] = dict(dotenv_values(path)) if path.is_file() else {}
        return self._parsed[path]


__all__ = ["SIGNING_PASSWORD_ENV", "SecretLookup", "SignerSecrets"]
