"""Cargo link directives for the BoringSSL static libraries."""

from .directives import (
    BuildArtifactPaths,
    CargoDirectives,
    artifact_paths,
    cmake_build_profile,
    emit_link_directives,
    platform_output_subdir,
)

__all__ = [
    "BuildArtifactPaths",
    "CargoDirectives",
    "artifact_paths",
    "cmake_build_profile",
    "emit_link_directives",
    "platform_output_subdir",
]
