"""Command-line entry point for ``latest.json`` generation."""

from __future__ import annotations

import argparse
import json
import shlex
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from tauri_latest.config import detect_bundle_dir, resolve_public_key
from tauri_latest.errors import LatestJsonError
from tauri_latest.generator import GenerateConfig, ManifestGenerator
from tauri_latest.logging import configure_logging
from tauri_latest.manifest import load_manifest
from tauri_latest.secrets import SignerSecrets
from tauri_latest.signer import DEFAULT_TIMEOUT, SignatureMode
from tauri_latest.utils import read_text


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=getattr(args, "verbose", False))

    try:
        if args.command == "generate":
            return _handle_generate(args)
        if args.command == "validate":
            return _handle_validate(args)
        if args.command == "secrets":
            return _handle_secrets(args)
    except LatestJsonError as exc:
        _print_json({"ok": False, "error": type(exc).__name__, "message": str(exc)})
        return 1

    parser.error(f"Unknown command '{args.command}'")
    return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tauri-latest", description="Generate Tauri updater manifests.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Sign installers and write latest.json.")
    generate.add_argument("--url", required=True, help="Download URL base for installers.")
    notes = generate.add_mutually_exclusive_group()
    notes.add_argument("--notes", default="")
    notes.add_argument("--notes-file")
    generate.add_argument("--project-root")
    generate.add_argument("--bundle-dir")
    generate.add_argument("--config", help="Path to tauri.conf.json.")
    generate.add_argument("--public-key", help="Updater public key (skips config lookup).")
    generate.add_argument(
        "--mode",
        choices=[mode.value for mode in SignatureMode],
        default=SignatureMode.EXISTING.value,
        help="Sign installers now or load existing .sig files.",
    )
    generate.add_argument("--private-key", help="Private key path (required with --mode sign).")
    generate.add_argument("--verify", action=argparse.BooleanOptionalAction, default=False)
    generate.add_argument("--strict", action="store_true", help="Fail when installers share a platform key.")
    generate.add_argument("--signer-command", default="tauri")
    generate.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Signer timeout in seconds.")
    generate.add_argument("--output")
    generate.add_argument("--env-file", action="append")
    generate.add_argument("--verbose", action="store_true")

    validate = subparsers.add_parser("validate", help="Validate an existing latest.json.")
    validate.add_argument("--manifest", required=True)
    validate.add_argument("--project-root")

    secrets = subparsers.add_parser("secrets", help="Show signer secret resolution.")
    secrets.add_argument("--env-file", action="append")
    secrets.add_argument("--project-root")

    return parser


def _handle_generate(args: argparse.Namespace) -> int:
    workspace = _resolve_workspace(args.project_root)
    bundle_dir = _resolve_path(args.bundle_dir, workspace) if args.bundle_dir else detect_bundle_dir(workspace)
    public_key = args.public_key or resolve_public_key(
        workspace, _resolve_optional_path(args.config, workspace)
    )
    notes = args.notes
    if args.notes_file:
        notes = read_text(_resolve_path(args.notes_file, workspace))

    config = GenerateConfig(
        project_root=workspace,
        bundle_dir=bundle_dir,
        public_key=public_key,
        download_url_base=args.url,
        notes=notes,
        signature_mode=SignatureMode(args.mode),
        private_key=_resolve_optional_path(args.private_key, workspace),
        verify=args.verify,
        strict=args.strict,
        signer_command=shlex.split(args.signer_command),
        signer_timeout=args.timeout,
        output_path=_resolve_optional_path(args.output, workspace),
        env_files=_resolve_env_files(args.env_file, workspace),
    )
    result = ManifestGenerator().generate(config)
    payload = {
        "ok": True,
        "manifest_path": str(result.manifest_path),
        "installers": [
            {"path": str(artifact.path), "platform": artifact.platform.value}
            for artifact in result.installers
        ],
        "verified": result.verified,
        "manifest": result.manifest.model_dump(mode="json"),
        "logs": result.logs,
    }
    _print_json(payload)
    return 0


def _handle_validate(args: argparse.Namespace) -> int:
    workspace = _resolve_workspace(args.project_root)
    manifest_path = _resolve_path(args.manifest, workspace)

    errors: List[str] = []
    manifest = None
    try:
        manifest = load_manifest(manifest_path)
    except LatestJsonError as exc:
        errors.append(str(exc))

    _print_json(
        {
            "manifest_path": str(manifest_path),
            "valid": manifest is not None,
            "errors": errors,
            "manifest": manifest.model_dump(mode="json") if manifest else None,
        }
    )
    return 0 if manifest is not None else 1


def _handle_secrets(args: argparse.Namespace) -> int:
    workspace = _resolve_workspace(args.project_root)
    secrets = SignerSecrets(_resolve_env_files(args.env_file, workspace))
    _print_json({"secrets": [secrets.describe()]})
    return 0


def _resolve_workspace(value: Optional[str]) -> Path:
    return Path(value).resolve() if value else Path.cwd()


def _resolve_path(value: str, workspace: Path) -> Path:
    path = Path(value)
    if not path.is_absolute():
        path = workspace / path
    return path.resolve()


def _resolve_optional_path(value: Optional[str], workspace: Path) -> Optional[Path]:
    if value is None:
        return None
    return _resolve_path(value, workspace)


def _resolve_env_files(values: Optional[Sequence[str]], workspace: Path) -> List[Path]:
    return [_resolve_path(value, workspace) for value in values or []]


def _print_json(payload: Mapping[str, object]) -> None:
    print(json.dumps(payload, indent=2, default=str))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
