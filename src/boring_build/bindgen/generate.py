"""Run bindgen over the BoringSSL headers with the same sysroot/target as the native build."""

from __future__ import annotations

import logging
import subprocess
import warnings
from pathlib import Path

from boring_build.errors import ExternalToolError, SdkLookupWarning
from boring_build.platforms.tables import apple_sdk_name
from boring_build.target import TargetDescriptor
from boring_build.toolchain.ndk import locate, prebuilt_dir

log = logging.getLogger(__name__)

HEADERS: tuple[str, ...] = (
    "aes.h",
    "asn1_mac.h",
    "asn1t.h",
    "blake2.h",
    "blowfish.h",
    "cast.h",
    "chacha.h",
    "cmac.h",
    "cpu.h",
    "curve25519.h",
    "des.h",
    "dtls1.h",
    "hkdf.h",
    "hrss.h",
    "md4.h",
    "md5.h",
    "obj_mac.h",
    "objects.h",
    "opensslv.h",
    "ossl_typ.h",
    "pkcs12.h",
    "poly1305.h",
    "rand.h",
    "rc4.h",
    "ripemd.h",
    "siphash.h",
    "srtp.h",
    "trust_token.h",
    "x509v3.h",
)

# Not part of the FIPS-validated module.
FIPS_EXCLUDED_HEADERS = frozenset({"blake2.h", "trust_token.h"})

# Copy and Debug derives, doc comments, enum-name prefixing and rustfmt are bindgen defaults.
BASE_FLAGS: tuple[str, ...] = (
    "--with-derive-default",
    "--with-derive-eq",
    "--default-enum-style",
    "newtype",
    "--default-macro-constant-type",
    "signed",
    "--size_t-is-usize",
)

# Alignment tests are UB for explicitly unaligned types such as OSUnalignedU64
# (rust-lang/rust-bindgen#1651) and can't be disabled per type.
NO_LAYOUT_TESTS_TARGETS = frozenset(
    {"aarch64-apple-ios", "aarch64-apple-ios-sim", "aarch64-apple-ios-macabi"}
)


def header_manifest(fips: bool) -> tuple[str, ...]:
    if not fips:
        return HEADERS
    return tuple(h for h in HEADERS if h not in FIPS_EXCLUDED_HEADERS)


def bindgen_flags(target: TargetDescriptor) -> list[str]:
    flags = list(BASE_FLAGS)
    if target.target_triple in NO_LAYOUT_TESTS_TARGETS:
        flags.append("--no-layout-tests")
    return flags


def apple_sysroot(sdk: str, xcrun: str = "xcrun") -> str | None:
    """`xcrun --show-sdk-path --sdk <sdk>`; None (with a warning) if the lookup fails."""
    try:
        result = subprocess.run(
            [xcrun, "--show-sdk-path", "--sdk", sdk],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        warnings.warn(f"xcrun failed: {e}", SdkLookupWarning, stacklevel=2)
        return None
    if result.returncode != 0:
        if result.returncode < 0:
            detail = "killed"
        else:
            detail = f"exit code {result.returncode}"
        warnings.warn(f"xcrun failed: {detail}", SdkLookupWarning, stacklevel=2)
        if result.stderr:
            log.warning("%s", result.stderr.rstrip())
        return None
    # Trailing newline confuses clang.
    return result.stdout.rstrip()


def extra_clang_args(target: TargetDescriptor, layout: dict[str, str]) -> list[str]:
    """Sysroot/target clang args so bindgen sees the target's headers, not the host's."""
    os_name = target.operating_system
    if os_name in ("ios", "macos"):
        sysroot = apple_sysroot(apple_sdk_name(target.target_triple), xcrun=layout["xcrun"])
        if sysroot is None:
            return []
        return ["-isysroot", sysroot]
    if os_name == "android":
        root = prebuilt_dir(target.require_android_ndk_home())
        toolchain = locate(root)
        return ["--sysroot", str(root / toolchain / "sysroot")]
    if os_name == "wasi":
        prefix = layout["wasi_sdk_prefix"].rstrip("/")
        return [
            "--sysroot",
            f"{prefix}/share/wasi-sysroot",
            "-target",
            "wasm32-wasi",
            "-fvisibility=default",
        ]
    return []


def header_paths(include_path: Path, fips: bool) -> list[Path]:
    return [include_path / "openssl" / header for header in header_manifest(fips)]


def bindgen_command(
    target: TargetDescriptor,
    layout: dict[str, str],
    include_path: Path,
    output: Path,
) -> list[str]:
    """Full bindgen argv.

    bindgen takes one input header; like bindgen's Builder with several headers,
    the last one is the input and the earlier ones are clang `-include`s in order.
    """
    headers = header_paths(include_path, target.fips)
    clang_args = extra_clang_args(target, layout)
    clang_args += ["-I", str(include_path)]
    for header in headers[:-1]:
        clang_args += ["-include", str(header)]
    return [
        layout["bindgen"],
        *bindgen_flags(target),
        "--output",
        str(output),
        str(headers[-1]),
        "--",
        *clang_args,
    ]


def default_include_path(target: TargetDescriptor, source_dir: Path) -> Path:
    """BORING_BSSL_INCLUDE_PATH if set, else <source_dir>/include."""
    if target.bssl_include_path is not None:
        return target.bssl_include_path
    return source_dir / "include"


def generate_bindings(
    target: TargetDescriptor,
    layout: dict[str, str],
    include_path: Path,
) -> Path:
    """Write <OUT_DIR>/<bindings_file>. Nothing is left behind if bindgen fails."""
    output = target.out_dir / layout["bindings_file"]
    tmp = output.with_name(output.name + ".tmp")
    cmd = bindgen_command(target, layout, include_path, tmp)
    log.info("Generating %s", output)
    log.debug("Running %s", " ".join(cmd))
    output.parent.mkdir(parents=True, exist_ok=True)
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        msg = f"Unable to generate bindings: failed to run {cmd[0]}: {e}"
        raise ExternalToolError(msg, tool=cmd[0]) from e
    if result.returncode != 0:
        tmp.unlink(missing_ok=True)
        msg = "Unable to generate bindings"
        raise ExternalToolError(
            msg,
            tool=cmd[0],
            diagnostic=result.stderr or result.stdout or "",
            returncode=result.returncode,
        )
    if not tmp.exists():
        msg = f"Couldn't write bindings: {cmd[0]} produced no output"
        raise ExternalToolError(msg, tool=cmd[0], diagnostic=result.stderr or "")
    tmp.replace(output)
    return output
