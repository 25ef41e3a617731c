"""Target descriptor: the ambient Cargo build context, read once and passed explicitly.

Cargo exports the target's cfg values, the host/target triples, the profile
(DEBUG, OPT_LEVEL), OUT_DIR, and one CARGO_FEATURE_<NAME> variable per enabled
feature. Everything downstream takes a TargetDescriptor instead of reading
os.environ again.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from boring_build.errors import ConfigurationError

FEATURE_PREFIX = "CARGO_FEATURE_"

# Feature names understood by the orchestrator.
FEATURE_SSL = "ssl"
FEATURE_FIPS = "fips"
FEATURE_FUZZING = "fuzzing"
FEATURE_ANDROID_API_19 = "android-api-19"
FEATURE_NDK_OLD_GCC = "ndk-old-gcc"

_X86_ARCHES = {"i386", "i586", "i686"}

_KNOWN_OS = {
    "cuda",
    "dragonfly",
    "emscripten",
    "freebsd",
    "fuchsia",
    "haiku",
    "hermit",
    "illumos",
    "ios",
    "linux",
    "netbsd",
    "none",
    "openbsd",
    "redox",
    "solaris",
    "tvos",
    "uefi",
    "visionos",
    "watchos",
    "windows",
}


def _arch_from_triple(first: str) -> str:
    if first in _X86_ARCHES:
        return "x86"
    # arm64, arm64e, arm64_32 are all aarch64 to Cargo; check before the arm prefix.
    if first.startswith(("aarch64", "arm64")):
        return "aarch64"
    if first.startswith(("arm", "thumb")):
        return "arm"
    if first.startswith("riscv64"):
        return "riscv64"
    if first.startswith("riscv32"):
        return "riscv32"
    if first.startswith("x86_64"):
        return "x86_64"
    if first.startswith("powerpc64"):
        return "powerpc64"
    if first.startswith("mips64"):
        return "mips64"
    if first.startswith("mips"):
        return "mips"
    return first


def _os_from_triple(rest: list[str]) -> str:
    if any(part.startswith("android") for part in rest):
        return "android"
    for part in rest:
        if part == "darwin":
            return "macos"
        if part.startswith("wasi"):
            return "wasi"
        if part in _KNOWN_OS:
            return part
    # <arch>-<vendor>-<os>[-<env>]; two-part triples have no vendor.
    return rest[1] if len(rest) > 1 else rest[0]


def _env_from_triple(parts: list[str]) -> str:
    if len(parts) < 4:
        return ""
    last = parts[-1]
    for prefix in ("msvc", "gnu", "musl", "uclibc", "sgx"):
        if last.startswith(prefix):
            return prefix
    if last in ("sim", "macabi"):
        return last
    return ""


def parse_triple(triple: str) -> tuple[str, str, str]:
    """Split a target triple into Cargo's (target_arch, target_os, target_env)."""
    parts = [p for p in triple.split("-") if p]
    if len(parts) < 2:
        msg = f"malformed target triple {triple!r}"
        raise ConfigurationError(msg, variable="TARGET")
    return _arch_from_triple(parts[0]), _os_from_triple(parts[1:]), _env_from_triple(parts)


def features_from_env(environ: Mapping[str, str]) -> frozenset[str]:
    """CARGO_FEATURE_ANDROID_API_19 -> android-api-19."""
    return frozenset(
        key[len(FEATURE_PREFIX) :].lower().replace("_", "-")
        for key in environ
        if key.startswith(FEATURE_PREFIX) and len(key) > len(FEATURE_PREFIX)
    )


def parse_debug(value: str) -> bool:
    if value == "true":
        return True
    if value == "false":
        return False
    msg = f"Unknown DEBUG={value} env var."
    raise ConfigurationError(msg, variable="DEBUG")


def _require(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name)
    if value is None or value == "":
        msg = f"{name} variable not defined in env"
        raise ConfigurationError(
            msg,
            variable=name,
            hint="Run through cargo (build.rs) or export the variable explicitly.",
        )
    return value


def _optional_path(environ: Mapping[str, str], name: str) -> Path | None:
    value = environ.get(name)
    return Path(value) if value else None


@dataclass(frozen=True)
class TargetDescriptor:
    """Resolved (host, target) build context. Immutable for the whole run."""

    architecture: str
    operating_system: str
    host_triple: str
    target_triple: str
    feature_flags: frozenset[str] = field(default_factory=frozenset)
    target_env: str = ""
    debug: bool = False
    opt_level: str = "0"
    out_dir: Path = field(default_factory=Path.cwd)
    manifest_dir: Path = field(default_factory=Path.cwd)
    android_ndk_home: Path | None = None
    bssl_path: Path | None = None
    bssl_include_path: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TargetDescriptor:
        """Read the Cargo build-script environment. Missing required variables raise ConfigurationError."""
        env = os.environ if environ is None else environ
        architecture = _require(env, "CARGO_CFG_TARGET_ARCH")
        operating_system = _require(env, "CARGO_CFG_TARGET_OS")
        host = _require(env, "HOST")
        target = _require(env, "TARGET")
        debug = parse_debug(_require(env, "DEBUG"))
        opt_level = _require(env, "OPT_LEVEL")
        out_dir = Path(_require(env, "OUT_DIR"))
        target_env = env.get("CARGO_CFG_TARGET_ENV")
        if target_env is None:
            target_env = _env_from_triple(target.split("-"))
        manifest_dir = env.get("CARGO_MANIFEST_DIR")
        return cls(
            architecture=architecture,
            operating_system=operating_system,
            host_triple=host,
            target_triple=target,
            feature_flags=features_from_env(env),
            target_env=target_env,
            debug=debug,
            opt_level=opt_level,
            out_dir=out_dir,
            manifest_dir=Path(manifest_dir) if manifest_dir else Path.cwd(),
            android_ndk_home=_optional_path(env, "ANDROID_NDK_HOME"),
            bssl_path=_optional_path(env, "BORING_BSSL_PATH"),
            bssl_include_path=_optional_path(env, "BORING_BSSL_INCLUDE_PATH"),
        )

    @classmethod
    def from_triple(
        cls,
        target: str,
        *,
        out_dir: Path,
        host: str | None = None,
        features: Iterable[str] = (),
        debug: bool = False,
        opt_level: str = "0",
        manifest_dir: Path | None = None,
        android_ndk_home: Path | None = None,
        bssl_path: Path | None = None,
        bssl_include_path: Path | None = None,
    ) -> TargetDescriptor:
        """Build a descriptor from a triple alone (host defaults to the target, i.e. a native build)."""
        arch, os_name, env = parse_triple(target)
        return cls(
            architecture=arch,
            operating_system=os_name,
            host_triple=host or target,
            target_triple=target,
            feature_flags=frozenset(features),
            target_env=env,
            debug=debug,
            opt_level=opt_level,
            out_dir=out_dir,
            manifest_dir=manifest_dir or Path.cwd(),
            android_ndk_home=android_ndk_home,
            bssl_path=bssl_path,
            bssl_include_path=bssl_include_path,
        )

    @property
    def is_cross(self) -> bool:
        return self.host_triple != self.target_triple

    @property
    def ssl(self) -> bool:
        return FEATURE_SSL in self.feature_flags

    @property
    def fips(self) -> bool:
        return FEATURE_FIPS in self.feature_flags

    @property
    def fuzzing(self) -> bool:
        return FEATURE_FUZZING in self.feature_flags

    @property
    def android_api_19(self) -> bool:
        return FEATURE_ANDROID_API_19 in self.feature_flags

    @property
    def ndk_old_gcc(self) -> bool:
        return FEATURE_NDK_OLD_GCC in self.feature_flags

    def require_android_ndk_home(self) -> Path:
        """ANDROID_NDK_HOME, or ConfigurationError for Android builds without it."""
        if self.android_ndk_home is None:
            msg = "Please set ANDROID_NDK_HOME for Android build"
            raise ConfigurationError(msg, variable="ANDROID_NDK_HOME")
        return self.android_ndk_home
