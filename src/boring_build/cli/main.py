"""Main CLI entry point for boring-build."""

import logging
import os
import sys

from boring_build.cli import build as build_cli
from boring_build.cli import toolchain_cmd
from boring_build.errors import BoringBuildError

COMMANDS = {
    "build": build_cli.run_build,
    "link": build_cli.run_link,
    "bindings": build_cli.run_bindings,
    "params": build_cli.run_params,
    "verify-toolchain": toolchain_cmd.run_verify_toolchain,
    "ndk-toolchain": toolchain_cmd.run_ndk_toolchain,
}


def configure_logging() -> None:
    """Diagnostics to stderr so stdout carries only cargo directives."""
    level = os.environ.get("BORING_BUILD_LOG", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.captureWarnings(True)


def _usage() -> None:
    print("Usage: boring-build <command> [args...]", file=sys.stderr)
    print("Commands:", file=sys.stderr)
    print("  build             - Fetch/build BoringSSL, emit link directives, generate bindings", file=sys.stderr)
    print("  link              - Emit link directives for an existing artifact root", file=sys.stderr)
    print("  bindings          - Generate bindings only", file=sys.stderr)
    print("  params            - Show resolved CMake definitions for the target", file=sys.stderr)
    print("  verify-toolchain  - Find a FIPS-compliant clang pair", file=sys.stderr)
    print("  ndk-toolchain     - Pick the prebuilt toolchain in an Android NDK", file=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        _usage()
        sys.exit(1)

    command, rest = argv[0], argv[1:]
    handler = COMMANDS.get(command)
    if handler is None:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        _usage()
        sys.exit(1)

    configure_logging()
    try:
        rc = handler(rest)
    except BoringBuildError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(rc)


if __name__ == "__main__":
    main()
