"""Native BoringSSL build: CMake configuration per target, submodule fetch, cmake invocation."""

from .cmake import CMakeConfig, build_command, configure_command
from .fetch import ensure_source_tree, source_tree_present
from .native import boringssl_cmake_config, build_boringssl

__all__ = [
    "CMakeConfig",
    "boringssl_cmake_config",
    "build_boringssl",
    "build_command",
    "configure_command",
    "ensure_source_tree",
    "source_tree_present",
]
