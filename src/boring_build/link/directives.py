"""Cargo build-script directives (stdout) and BoringSSL link paths.

Only `cargo:` lines go to stdout; every diagnostic goes through logging to stderr.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from boring_build.errors import ConfigurationError
from boring_build.target import TargetDescriptor

LIBRARIES = ("crypto", "ssl")


class CargoDirectives:
    """Writes `cargo:key=value` lines to a stream and keeps a copy of each."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self.lines: list[str] = []

    def emit(self, key: str, value: str) -> None:
        line = f"cargo:{key}={value}"
        self.lines.append(line)
        print(line, file=self._stream if self._stream is not None else sys.stdout, flush=True)

    def rerun_if_env_changed(self, name: str) -> None:
        self.emit("rerun-if-env-changed", name)

    def warning(self, message: str) -> None:
        self.emit("warning", message)

    def link_search(self, path: Path | str) -> None:
        self.emit("rustc-link-search", f"native={path}")

    def link_static(self, name: str) -> None:
        self.emit("rustc-link-lib", f"static={name}")

    def cdylib_link_arg(self, arg: str) -> None:
        self.emit("rustc-cdylib-link-arg", arg)


def cmake_build_profile(debug: bool, opt_level: str) -> str:
    """CMake configuration name for a Cargo profile (same mapping as cmake-rs).

    The MSVC generator puts libraries in a folder named after it, so this must
    match what the build actually used or linking fails with "library not found".
    """
    if opt_level == "0":
        return "Debug"
    if opt_level in ("1", "2", "3"):
        return "RelWithDebInfo" if debug else "Release"
    if opt_level in ("s", "z"):
        return "MinSizeRel"
    msg = f"Unknown OPT_LEVEL={opt_level} env var."
    raise ConfigurationError(msg, variable="OPT_LEVEL")


def platform_output_subdir(target: TargetDescriptor) -> str:
    """Per-configuration subfolder for MSVC builds, empty elsewhere."""
    if target.target_env == "msvc":
        return cmake_build_profile(target.debug, target.opt_level)
    return ""


@dataclass(frozen=True)
class BuildArtifactPaths:
    library_search_roots: tuple[Path, ...]
    platform_output_subdir: str


def artifact_paths(artifact_root: Path, target: TargetDescriptor) -> BuildArtifactPaths:
    """Library search dirs <root>/build/<lib>/<subdir> for crypto and ssl, in that order."""
    subdir = platform_output_subdir(target)
    roots = tuple(Path(artifact_root, "build", lib, subdir) for lib in LIBRARIES)
    return BuildArtifactPaths(library_search_roots=roots, platform_output_subdir=subdir)


def emit_link_directives(
    artifact_root: Path,
    target: TargetDescriptor,
    directives: CargoDirectives,
) -> BuildArtifactPaths:
    """Emit link-search, static link, and (macOS) cdylib link-arg directives."""
    paths = artifact_paths(artifact_root, target)
    for root in paths.library_search_roots:
        directives.link_search(root)

    directives.link_static("crypto")
    if target.ssl:
        directives.link_static("ssl")

    # Allow cdylibs to link with undefined symbols on macOS.
    if target.operating_system == "macos":
        directives.cdylib_link_arg("-Wl,-undefined,dynamic_lookup")
    return paths
