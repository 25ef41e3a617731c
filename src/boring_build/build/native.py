"""Compose the BoringSSL CMake configuration for a target and build it.

Cross-compilation parameters are only added when host != target. Each target OS
gets exactly one branch; unknown combinations fall back to CMake defaults with
an UnsupportedTargetWarning.
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path

from boring_build.build import cmake
from boring_build.build.cmake import CMakeConfig
from boring_build.build.fetch import ensure_source_tree
from boring_build.config import source_dir_name
from boring_build.errors import UnsupportedTargetWarning
from boring_build.link.directives import CargoDirectives, cmake_build_profile
from boring_build.platforms.tables import ToolchainParameter, lookup_android, lookup_apple
from boring_build.target import TargetDescriptor
from boring_build.toolchain.verify import verify_fips_clang_version

log = logging.getLogger(__name__)

BITCODE_CFLAG = "-fembed-bitcode"
FUZZING_CXXFLAGS = (
    "-DBORINGSSL_UNSAFE_DETERMINISTIC_MODE",
    "-DBORINGSSL_UNSAFE_FUZZER_MODE",
)


def _unsupported(message: str) -> None:
    warnings.warn(message, UnsupportedTargetWarning, stacklevel=3)


def _apply_table(
    cfg: CMakeConfig, params: ToolchainParameter, target: TargetDescriptor, label: str
) -> None:
    if not params:
        _unsupported(f"no {label} CMake parameters for {target.target_triple}; using defaults")
    for name, value in params:
        log.info("%s arch=%s add %s=%s", target.operating_system, target.architecture, name, value)
        cfg.define(name, value)


def _configure_android(cfg: CMakeConfig, target: TargetDescriptor) -> None:
    ndk_home = target.require_android_ndk_home()
    _apply_table(
        cfg,
        lookup_android(target.architecture, ndk_old_gcc=target.ndk_old_gcc),
        target,
        "Android",
    )
    toolchain_file = ndk_home / "build" / "cmake" / "android.toolchain.cmake"
    log.info("android toolchain=%s", toolchain_file)
    cfg.define("CMAKE_TOOLCHAIN_FILE", toolchain_file)
    cfg.define("ANDROID_NATIVE_API_LEVEL", "19" if target.android_api_19 else "21")
    cfg.define("ANDROID_STL", "c++_shared")


def _configure_ios(cfg: CMakeConfig, target: TargetDescriptor) -> None:
    _apply_table(cfg, lookup_apple(target.target_triple), target, "Apple")
    if target.target_triple.endswith("-macabi"):
        # Mac Catalyst. CMAKE_C_FLAGS is defined directly so no deployment target gets injected.
        flags = f"{BITCODE_CFLAG} -target {target.target_triple}"
        cfg.define("CMAKE_ASM_FLAGS", flags)
        cfg.define("CMAKE_C_FLAGS", flags)
        cfg.define("CMAKE_CXX_FLAGS", flags)
        return
    parts = [BITCODE_CFLAG]
    if target.architecture == "x86_64":
        parts.append("-target x86_64-apple-ios-simulator")
    flags = " ".join(parts)
    cfg.define("CMAKE_ASM_FLAGS", flags)
    cfg.cflag(flags)


def _configure_linux(cfg: CMakeConfig, target: TargetDescriptor, layout: dict[str, str]) -> None:
    toolchain_dir = target.manifest_dir / layout["cmake_toolchain_dir"]
    if target.architecture == "x86":
        cfg.define("CMAKE_TOOLCHAIN_FILE", cfg.source_dir / "src" / "util" / "32-bit-toolchain.cmake")
    elif target.architecture == "aarch64":
        cfg.define("CMAKE_TOOLCHAIN_FILE", toolchain_dir / "aarch64-linux.cmake")
    elif target.architecture == "arm":
        cfg.define("CMAKE_TOOLCHAIN_FILE", toolchain_dir / "armv7-linux.cmake")
    else:
        _unsupported(f"no toolchain file configured by boring-sys for {target.target_triple}")


def _configure_wasi(cfg: CMakeConfig, layout: dict[str, str]) -> None:
    prefix = layout["wasi_sdk_prefix"].rstrip("/")
    cfg.define("CMAKE_TOOLCHAIN_FILE", f"{prefix}/share/cmake/wasi-sdk-pthread.cmake")
    cfg.define("WASI_SDK_PREFIX", f"{prefix}/")
    cfg.define("CMAKE_C_COMPILER_FORCED", "true")


def boringssl_cmake_config(target: TargetDescriptor, layout: dict[str, str]) -> CMakeConfig:
    """CMakeConfig for the BoringSSL tree with platform parameters for cross builds."""
    source_dir = target.manifest_dir / source_dir_name(layout, target.fips)
    cfg = CMakeConfig(source_dir=source_dir)
    if not target.is_cross:
        return cfg

    os_name = target.operating_system
    if os_name == "android":
        _configure_android(cfg, target)
    elif os_name == "macos":
        _apply_table(cfg, lookup_apple(target.target_triple), target, "Apple")
    elif os_name == "ios":
        _configure_ios(cfg, target)
    elif os_name == "windows":
        if "windows" in target.host_triple:
            # BoringSSL's CMakeLists.txt can't cross-compile assembly with Visual Studio.
            cfg.define("OPENSSL_NO_ASM", "YES")
    elif os_name == "linux":
        _configure_linux(cfg, target, layout)
    elif os_name == "wasi":
        _configure_wasi(cfg, layout)
    else:
        _unsupported(f"no cross-compilation parameters for {target.target_triple}; using defaults")
    return cfg


def build_boringssl(
    target: TargetDescriptor,
    layout: dict[str, str],
    directives: CargoDirectives,
) -> Path:
    """Fetch (if needed), configure and build BoringSSL. Returns the artifact root."""
    source_rel = source_dir_name(layout, target.fips)
    ensure_source_tree(target.manifest_dir, source_rel, directives, git=layout["git"])

    cfg = boringssl_cmake_config(target, layout)
    if target.fuzzing:
        for flag in FUZZING_CXXFLAGS:
            cfg.cxxflag(flag)
    if target.fips:
        toolchain = verify_fips_clang_version()
        cfg.define("CMAKE_C_COMPILER", toolchain.c_compiler)
        cfg.define("CMAKE_CXX_COMPILER", toolchain.cxx_compiler)
        cfg.define("CMAKE_ASM_COMPILER", toolchain.c_compiler)
        cfg.define("FIPS", "1")

    profile = cmake_build_profile(target.debug, target.opt_level)
    if target.ssl:
        cmake.build(cfg, "ssl", target.out_dir, profile, cmake=layout["cmake"])
    return cmake.build(cfg, "crypto", target.out_dir, profile, cmake=layout["cmake"])
