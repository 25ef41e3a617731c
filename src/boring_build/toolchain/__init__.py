"""Toolchain discovery: FIPS clang verification and Android NDK prebuilt lookup."""

from .ndk import KNOWN_HOST_TOOLCHAINS, locate, prebuilt_dir
from .verify import (
    REQUIRED_CLANG_VERSION,
    ToolchainDescriptor,
    compiler_version,
    verify_fips_clang_version,
)

__all__ = [
    "KNOWN_HOST_TOOLCHAINS",
    "REQUIRED_CLANG_VERSION",
    "ToolchainDescriptor",
    "compiler_version",
    "locate",
    "prebuilt_dir",
    "verify_fips_clang_version",
]
