"""Pick the prebuilt host toolchain inside an Android NDK (toolchains/llvm/prebuilt/<host>)."""

from __future__ import annotations

from pathlib import Path

from boring_build.errors import FilesystemError, ToolchainNotFoundError

# Host tags documented at https://developer.android.com/ndk/guides/other_build_systems
KNOWN_HOST_TOOLCHAINS = ("linux-x86_64", "darwin-x86_64", "windows-x86_64")


def prebuilt_dir(ndk_home: Path) -> Path:
    return ndk_home / "toolchains" / "llvm" / "prebuilt"


def locate(toolchains_root: Path) -> str:
    """Name of the best prebuilt toolchain under toolchains_root.

    Known host tags win in KNOWN_HOST_TOOLCHAINS order; otherwise the first
    subdirectory (a new host, e.g. linux-aarch64) is taken.
    """
    try:
        entries = list(toolchains_root.iterdir())
    except OSError as e:
        msg = f"cannot list NDK toolchains at {toolchains_root}: {e}"
        raise FilesystemError(msg, context={"path": str(toolchains_root)}) from e

    names = {entry.name for entry in entries}
    for known in KNOWN_HOST_TOOLCHAINS:
        if known in names:
            return known

    for entry in entries:
        if entry.is_dir():
            return entry.name

    msg = f"no subdirectories at {toolchains_root}"
    raise ToolchainNotFoundError(
        msg,
        hint="Check that ANDROID_NDK_HOME points at an NDK r19 or newer.",
        context={"path": str(toolchains_root)},
    )
