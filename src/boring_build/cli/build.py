"""`boring-build build|link|bindings|params`."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from pathlib import Path

from boring_build import pipeline
from boring_build.bindgen.generate import default_include_path, generate_bindings
from boring_build.build.native import boringssl_cmake_config
from boring_build.cli.parse_common import add_common_args, resolve_layout_args, resolve_target
from boring_build.config import source_dir_name
from boring_build.link.directives import CargoDirectives, emit_link_directives


def _parse(
    argv: list[str],
    description: str,
    extra: Callable[[argparse.ArgumentParser], None] | None = None,
) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description=description)
    add_common_args(ap)
    if extra is not None:
        extra(ap)
    return ap.parse_args(argv)


def run_build(argv: list[str]) -> int:
    """Full build: fetch/build BoringSSL, emit link directives, generate bindings."""
    args = _parse(argv, "Build BoringSSL and generate boring-sys bindings")
    target = resolve_target(args)
    layout = resolve_layout_args(args, target)
    out = pipeline.run(target, layout, CargoDirectives())
    print(f"✅ Bindings written to {out}", file=sys.stderr)
    return 0


def run_link(argv: list[str]) -> int:
    """Emit link directives for an already-built artifact root."""

    def extra(ap: argparse.ArgumentParser) -> None:
        ap.add_argument(
            "--artifact-root",
            type=Path,
            default=None,
            help="BoringSSL artifact root (default: BORING_BSSL_PATH or OUT_DIR)",
        )

    args = _parse(argv, "Emit cargo link directives for BoringSSL", extra)
    target = resolve_target(args)
    root = args.artifact_root or target.bssl_path or target.out_dir
    emit_link_directives(root, target, CargoDirectives())
    return 0


def run_bindings(argv: list[str]) -> int:
    """Generate bindings only (BoringSSL headers must already be present)."""
    args = _parse(argv, "Generate boring-sys bindings with bindgen")
    target = resolve_target(args)
    layout = resolve_layout_args(args, target)
    source_dir = target.manifest_dir / source_dir_name(layout, target.fips)
    out = generate_bindings(target, layout, default_include_path(target, source_dir))
    print(f"✅ Bindings written to {out}", file=sys.stderr)
    return 0


def run_params(argv: list[str]) -> int:
    """Print the CMake definitions and flags resolved for the target, one per line."""
    args = _parse(argv, "Show the CMake configuration for the target")
    target = resolve_target(args)
    layout = resolve_layout_args(args, target)
    cfg = boringssl_cmake_config(target, layout)
    print(f"source_dir={cfg.source_dir}")
    for name, value in cfg.defines:
        print(f"-D{name}={value}")
    for flag in cfg.cflags:
        print(f"cflag {flag}")
    return 0
