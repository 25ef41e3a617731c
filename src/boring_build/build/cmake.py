"""Configure and build a CMake project the way the Rust `cmake` crate does.

Configure runs in <out_dir>/build with CMAKE_INSTALL_PREFIX=<out_dir>; the
build step uses `cmake --build . --target <t> --config <profile>`. The artifact
root returned to callers is <out_dir>.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from boring_build.errors import ExternalToolError

log = logging.getLogger(__name__)


@dataclass
class CMakeConfig:
    """Ordered CMake definitions plus extra C/C++ flags for one source tree."""

    source_dir: Path
    defines: list[tuple[str, str]] = field(default_factory=list)
    cflags: list[str] = field(default_factory=list)
    cxxflags: list[str] = field(default_factory=list)

    def define(self, name: str, value: str | Path) -> CMakeConfig:
        self.defines.append((name, str(value)))
        return self

    def cflag(self, flag: str) -> CMakeConfig:
        self.cflags.append(flag)
        return self

    def cxxflag(self, flag: str) -> CMakeConfig:
        self.cxxflags.append(flag)
        return self

    def is_defined(self, name: str) -> bool:
        return any(k == name for k, _ in self.defines)


def configure_command(config: CMakeConfig, out_dir: Path, profile: str, cmake: str = "cmake") -> list[str]:
    """cmake configure argv. Explicit CMAKE_C_FLAGS/CMAKE_CXX_FLAGS defines win over collected flags."""
    cmd = [
        cmake,
        str(config.source_dir),
        f"-DCMAKE_INSTALL_PREFIX={out_dir}",
    ]
    cmd.extend(f"-D{name}={value}" for name, value in config.defines)
    if config.cflags and not config.is_defined("CMAKE_C_FLAGS"):
        cmd.append("-DCMAKE_C_FLAGS=" + " ".join(config.cflags))
    if config.cxxflags and not config.is_defined("CMAKE_CXX_FLAGS"):
        cmd.append("-DCMAKE_CXX_FLAGS=" + " ".join(config.cxxflags))
    if not config.is_defined("CMAKE_BUILD_TYPE"):
        cmd.append(f"-DCMAKE_BUILD_TYPE={profile}")
    return cmd


def build_command(target_name: str, profile: str, cmake: str = "cmake") -> list[str]:
    return [cmake, "--build", ".", "--target", target_name, "--config", profile]


def _run(cmd: list[str], cwd: Path, step: str) -> None:
    log.debug("Running %s (cwd=%s)", " ".join(cmd), cwd)
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        msg = f"failed to run {cmd[0]} ({step}): {e}"
        raise ExternalToolError(msg, tool=cmd[0]) from e
    if result.returncode != 0:
        msg = f"cmake {step} failed with exit code {result.returncode}"
        raise ExternalToolError(
            msg,
            tool=cmd[0],
            diagnostic=(result.stdout or "") + (result.stderr or ""),
            returncode=result.returncode,
        )
    if result.stdout:
        log.debug("%s", result.stdout.rstrip())


def build(
    config: CMakeConfig,
    target_name: str,
    out_dir: Path,
    profile: str,
    cmake: str = "cmake",
) -> Path:
    """Configure then build one CMake target. Returns the artifact root (out_dir)."""
    build_dir = out_dir / "build"
    build_dir.mkdir(parents=True, exist_ok=True)
    log.info("Building %s (%s) from %s", target_name, profile, config.source_dir)
    _run(configure_command(config, out_dir, profile, cmake), build_dir, "configure")
    _run(build_command(target_name, profile, cmake), build_dir, f"build --target {target_name}")
    return out_dir
