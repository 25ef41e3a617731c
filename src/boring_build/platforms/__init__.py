"""Per-platform CMake parameter tables (Android NDK variants, Apple SDK/arch pairs)."""

from .tables import (
    CMAKE_PARAMS_ANDROID_NDK,
    CMAKE_PARAMS_ANDROID_NDK_OLD_GCC,
    CMAKE_PARAMS_APPLE,
    ToolchainParameter,
    apple_sdk_name,
    lookup_android,
    lookup_apple,
)

__all__ = [
    "CMAKE_PARAMS_ANDROID_NDK",
    "CMAKE_PARAMS_ANDROID_NDK_OLD_GCC",
    "CMAKE_PARAMS_APPLE",
    "ToolchainParameter",
    "apple_sdk_name",
    "lookup_android",
    "lookup_apple",
]
