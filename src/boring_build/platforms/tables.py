"""Static CMake parameter tables for Android and Apple targets.

Values are ordered (key, value) sequences; order is kept exactly because later
CMake definitions override earlier ones.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from boring_build.errors import ConfigurationError

ToolchainParameter = tuple[tuple[str, str], ...]

# Android NDK < 18 with GCC.
CMAKE_PARAMS_ANDROID_NDK_OLD_GCC: Mapping[str, ToolchainParameter] = MappingProxyType(
    {
        "aarch64": (("ANDROID_TOOLCHAIN_NAME", "aarch64-linux-android-4.9"),),
        "arm": (("ANDROID_TOOLCHAIN_NAME", "arm-linux-androideabi-4.9"),),
        "x86": (("ANDROID_TOOLCHAIN_NAME", "x86-linux-android-4.9"),),
        "x86_64": (("ANDROID_TOOLCHAIN_NAME", "x86_64-linux-android-4.9"),),
    }
)

# Android NDK >= 19.
CMAKE_PARAMS_ANDROID_NDK: Mapping[str, ToolchainParameter] = MappingProxyType(
    {
        "aarch64": (("ANDROID_ABI", "arm64-v8a"),),
        "arm": (("ANDROID_ABI", "armeabi-v7a"),),
        "x86": (("ANDROID_ABI", "x86"),),
        "x86_64": (("ANDROID_ABI", "x86_64"),),
    }
)

CMAKE_PARAMS_APPLE: Mapping[str, ToolchainParameter] = MappingProxyType(
    {
        # iOS
        "aarch64-apple-ios": (
            ("CMAKE_OSX_ARCHITECTURES", "arm64"),
            ("CMAKE_OSX_SYSROOT", "iphoneos"),
        ),
        "aarch64-apple-ios-sim": (
            ("CMAKE_OSX_ARCHITECTURES", "arm64"),
            ("CMAKE_OSX_SYSROOT", "iphonesimulator"),
        ),
        "x86_64-apple-ios": (
            ("CMAKE_OSX_ARCHITECTURES", "x86_64"),
            ("CMAKE_OSX_SYSROOT", "iphonesimulator"),
        ),
        # Mac Catalyst
        "aarch64-apple-ios-macabi": (
            ("CMAKE_OSX_ARCHITECTURES", "arm64"),
            ("CMAKE_OSX_SYSROOT", "macosx"),
        ),
        "x86_64-apple-ios-macabi": (
            ("CMAKE_OSX_ARCHITECTURES", "x86_64"),
            ("CMAKE_OSX_SYSROOT", "macosx"),
        ),
        # macOS
        "aarch64-apple-darwin": (
            ("CMAKE_OSX_ARCHITECTURES", "arm64"),
            ("CMAKE_OSX_SYSROOT", "macosx"),
        ),
        "x86_64-apple-darwin": (
            ("CMAKE_OSX_ARCHITECTURES", "x86_64"),
            ("CMAKE_OSX_SYSROOT", "macosx"),
        ),
    }
)


def lookup_android(architecture: str, *, ndk_old_gcc: bool = False) -> ToolchainParameter:
    """Android CMake params for a Cargo target_arch; empty when the arch is not listed."""
    table = CMAKE_PARAMS_ANDROID_NDK_OLD_GCC if ndk_old_gcc else CMAKE_PARAMS_ANDROID_NDK
    return table.get(architecture, ())


def lookup_apple(target_triple: str) -> ToolchainParameter:
    """Apple CMake params for an exact target triple; empty when the triple is not listed."""
    return CMAKE_PARAMS_APPLE.get(target_triple, ())


def apple_sdk_name(target_triple: str) -> str:
    """SDK name (CMAKE_OSX_SYSROOT) for an Apple triple, e.g. iphoneos or macosx."""
    for name, value in lookup_apple(target_triple):
        if name == "CMAKE_OSX_SYSROOT":
            return value
    msg = f"cannot find SDK for {target_triple} in CMAKE_PARAMS_APPLE"
    raise ConfigurationError(msg, variable="TARGET")
