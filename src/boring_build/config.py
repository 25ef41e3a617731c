"""Layout configuration (source paths, toolchain files, tool names).

Optional boring-build.yaml in the crate root overrides the defaults, e.g.:

    source_dir: third_party/boringssl
    wasi_sdk_prefix: /usr/local/wasi-sdk
    bindgen: /opt/bin/bindgen

Paths are relative to the crate manifest directory unless absolute.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from boring_build.errors import ConfigurationError

log = logging.getLogger(__name__)

CONFIG_FILE_NAME = "boring-build.yaml"

DEFAULT_LAYOUT: dict[str, str] = {
    "source_dir": "deps/boringssl",
    "fips_source_dir": "deps/boringssl-fips",
    "cmake_toolchain_dir": "cmake",
    "wasi_sdk_prefix": "/opt/wasi-sdk",
    "bindings_file": "bindings.rs",
    "cmake": "cmake",
    "git": "git",
    "xcrun": "xcrun",
    "bindgen": "bindgen",
}


def resolve_layout(layout: dict[str, Any] | None) -> dict[str, str]:
    """Return layout dict with defaults filled. Unknown keys are ignored."""
    if layout is None:
        return dict(DEFAULT_LAYOUT)
    out = dict(DEFAULT_LAYOUT)
    out.update({k: str(v) for k, v in layout.items() if k in out and v is not None})
    return out


def load_layout(manifest_dir: Path, config_path: Path | None = None) -> dict[str, str]:
    """Load layout from config_path (or <manifest_dir>/boring-build.yaml if present) over the defaults."""
    path = config_path if config_path is not None else manifest_dir / CONFIG_FILE_NAME
    if not path.is_file():
        if config_path is not None:
            msg = f"config file not found: {config_path}"
            raise ConfigurationError(msg, variable="--config")
        return resolve_layout(None)

    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"invalid YAML in {path}: {e}"
        raise ConfigurationError(msg, variable=str(path)) from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping, got {type(data).__name__}"
        raise ConfigurationError(msg, variable=str(path))

    unknown = sorted(set(data) - set(DEFAULT_LAYOUT))
    if unknown:
        log.warning("Ignoring unknown keys in %s: %s", path, ", ".join(unknown))
    log.debug("Loaded layout overrides from %s", path)
    return resolve_layout(data)


def source_dir_name(layout: dict[str, str], fips: bool) -> str:
    """Relative BoringSSL source directory for the build mode."""
    return layout["fips_source_dir"] if fips else layout["source_dir"]
