"""bindgen configuration for the boring-sys FFI surface."""

from .generate import (
    FIPS_EXCLUDED_HEADERS,
    HEADERS,
    bindgen_command,
    bindgen_flags,
    default_include_path,
    extra_clang_args,
    generate_bindings,
    header_manifest,
)

__all__ = [
    "FIPS_EXCLUDED_HEADERS",
    "HEADERS",
    "bindgen_command",
    "bindgen_flags",
    "default_include_path",
    "extra_clang_args",
    "generate_bindings",
    "header_manifest",
]
