"""End-to-end boring-sys build: native library, link directives, bindings.

Equivalent of the crate's build.rs; directives go to stdout for Cargo.
"""

from __future__ import annotations

import logging
from pathlib import Path

from boring_build.bindgen.generate import default_include_path, generate_bindings
from boring_build.build.native import build_boringssl
from boring_build.config import source_dir_name
from boring_build.link.directives import CargoDirectives, emit_link_directives
from boring_build.target import TargetDescriptor

log = logging.getLogger(__name__)


def run(
    target: TargetDescriptor,
    layout: dict[str, str],
    directives: CargoDirectives | None = None,
) -> Path:
    """Build (or reuse BORING_BSSL_PATH), emit link directives, generate bindings. Returns the bindings path."""
    if directives is None:
        directives = CargoDirectives()

    # A failed run must not leave a previous run's bindings behind.
    (target.out_dir / layout["bindings_file"]).unlink(missing_ok=True)

    directives.rerun_if_env_changed("BORING_BSSL_PATH")
    if target.operating_system == "android" and target.is_cross:
        directives.rerun_if_env_changed("ANDROID_NDK_HOME")

    if target.bssl_path is not None:
        log.info("Using prebuilt BoringSSL at %s", target.bssl_path)
        artifact_root = target.bssl_path
    else:
        artifact_root = build_boringssl(target, layout, directives)

    emit_link_directives(artifact_root, target, directives)

    directives.rerun_if_env_changed("BORING_BSSL_INCLUDE_PATH")
    source_dir = target.manifest_dir / source_dir_name(layout, target.fips)
    include_path = default_include_path(target, source_dir)
    return generate_bindings(target, layout, include_path)
