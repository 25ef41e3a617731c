"""Shared CLI options (--project-root, --config, --target ...) and target/layout resolution."""

from __future__ import annotations

import argparse
import dataclasses
import os
from pathlib import Path

from boring_build.config import load_layout
from boring_build.target import TargetDescriptor


def path_resolver(s: str) -> Path:
    """Resolve a path argument to absolute Path (e.g. --project-root, --config)."""
    return Path(s).resolve()


def add_common_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument(
        "--project-root",
        type=path_resolver,
        default=None,
        help="boring-sys crate directory (default: CARGO_MANIFEST_DIR or cwd)",
    )
    ap.add_argument(
        "--config",
        type=path_resolver,
        default=None,
        help="Layout YAML (default: <project-root>/boring-build.yaml if present)",
    )
    ap.add_argument(
        "--target",
        default=None,
        help="Target triple; derive the build context from it instead of Cargo's env",
    )
    ap.add_argument("--host", default=None, help="Host triple with --target (default: HOST or the target)")
    ap.add_argument(
        "--out-dir",
        type=path_resolver,
        default=None,
        help="Output directory with --target (default: OUT_DIR or ./target/boring-build)",
    )
    ap.add_argument(
        "--feature",
        action="append",
        dest="features",
        default=[],
        help="Enable a feature with --target (ssl, fips, fuzzing, android-api-19, ndk-old-gcc); repeatable",
    )
    ap.add_argument("--debug", action="store_true", help="Debug info with --target")
    ap.add_argument("--opt-level", default="0", help="Optimization level with --target (default: 0)")


def _env_path(name: str) -> Path | None:
    value = os.environ.get(name)
    return Path(value) if value else None


def resolve_target(args: argparse.Namespace) -> TargetDescriptor:
    """TargetDescriptor from --target options, or from the Cargo build-script environment."""
    if args.target:
        out_dir = args.out_dir or _env_path("OUT_DIR") or Path.cwd() / "target" / "boring-build"
        return TargetDescriptor.from_triple(
            args.target,
            host=args.host or os.environ.get("HOST"),
            out_dir=out_dir,
            features=args.features,
            debug=args.debug,
            opt_level=args.opt_level,
            manifest_dir=args.project_root,
            android_ndk_home=_env_path("ANDROID_NDK_HOME"),
            bssl_path=_env_path("BORING_BSSL_PATH"),
            bssl_include_path=_env_path("BORING_BSSL_INCLUDE_PATH"),
        )
    target = TargetDescriptor.from_env()
    if args.project_root is not None:
        target = dataclasses.replace(target, manifest_dir=args.project_root)
    return target


def resolve_layout_args(args: argparse.Namespace, target: TargetDescriptor) -> dict[str, str]:
    return load_layout(target.manifest_dir, args.config)
