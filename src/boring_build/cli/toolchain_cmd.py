"""`boring-build verify-toolchain` and `boring-build ndk-toolchain <root>`."""

from __future__ import annotations

import argparse
from pathlib import Path

from boring_build.toolchain.ndk import locate, prebuilt_dir
from boring_build.toolchain.verify import REQUIRED_CLANG_VERSION, verify_fips_clang_version


def run_verify_toolchain(argv: list[str]) -> int:
    """Print the FIPS-compliant `cc c++` pair."""
    ap = argparse.ArgumentParser(
        description=f"Find a clang {REQUIRED_CLANG_VERSION} toolchain for FIPS builds"
    )
    ap.parse_args(argv)
    toolchain = verify_fips_clang_version()
    print(f"{toolchain.c_compiler} {toolchain.cxx_compiler}")
    return 0


def run_ndk_toolchain(argv: list[str]) -> int:
    """Print the prebuilt toolchain name under an NDK (or a prebuilt dir with --prebuilt)."""
    ap = argparse.ArgumentParser(description="Pick the prebuilt host toolchain in an Android NDK")
    ap.add_argument("root", type=Path, help="NDK root (ANDROID_NDK_HOME)")
    ap.add_argument(
        "--prebuilt",
        action="store_true",
        help="root already is toolchains/llvm/prebuilt",
    )
    args = ap.parse_args(argv)
    root = args.root if args.prebuilt else prebuilt_dir(args.root)
    print(locate(root))
    return 0
