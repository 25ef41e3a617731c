"""FIPS compiler verification.

The BoringCrypto security policy (section 12.1, "Installation Instructions")
pins the clang version used to build the validated module. A FIPS build must
never proceed with any other compiler, so a present-but-wrong compiler is only
skipped while there are candidates left to try.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass

from boring_build.errors import (
    ExternalToolError,
    ToolchainMismatchError,
    UnsupportedToolchainError,
)

log = logging.getLogger(__name__)

REQUIRED_CLANG_VERSION = "7.0.1"

# (cc, c++) pairs in priority order; the last pair is the generic fallback.
CANDIDATES: tuple[tuple[str, str], ...] = (
    ("clang-7", "clang++-7"),
    ("clang", "clang++"),
    ("cc", "c++"),
)


@dataclass(frozen=True)
class ToolchainDescriptor:
    c_compiler: str
    cxx_compiler: str


def compiler_version(tool: str) -> str:
    """First line of `<tool> --version`, or "" if the binary cannot be spawned."""
    try:
        result = subprocess.run(
            [tool, "--version"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        log.warning("missing %s, trying other compilers: %s", tool, e)
        return ""
    if result.returncode != 0:
        msg = f"{tool} --version exited with status {result.returncode}"
        raise ExternalToolError(
            msg,
            tool=tool,
            diagnostic=result.stderr or "",
            returncode=result.returncode,
        )
    lines = (result.stdout or "").splitlines()
    return lines[0] if lines else ""


def verify_fips_clang_version(
    candidates: tuple[tuple[str, str], ...] = CANDIDATES,
    required: str = REQUIRED_CLANG_VERSION,
) -> ToolchainDescriptor:
    """Return the first (cc, c++) pair reporting `required`. Raises on mismatch or no match."""
    last = len(candidates) - 1
    for i, (cc, cxx) in enumerate(candidates):
        cc_version = compiler_version(cc)
        if required in cc_version:
            cxx_version = compiler_version(cxx)
            if required not in cxx_version:
                raise ToolchainMismatchError(cc, cxx, required, cxx_version)
            log.info("FIPS toolchain: %s / %s (%s)", cc, cxx, cc_version)
            return ToolchainDescriptor(c_compiler=cc, cxx_compiler=cxx)
        if i == last:
            raise UnsupportedToolchainError(required, cc_version)
        if cc_version:
            log.warning(
                'FIPS requires clang version %s, skipping incompatible version "%s"',
                required,
                cc_version,
            )
    # Only reachable with an empty candidate list.
    raise UnsupportedToolchainError(required, "")
