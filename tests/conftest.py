"""Pytest fixtures for boring-build tests."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from boring_build.target import TargetDescriptor


@pytest.fixture
def crate_dir(tmp_path: Path) -> Path:
    """A boring-sys-like crate with an already-fetched deps/boringssl tree."""
    crate = tmp_path / "crate"
    src = crate / "deps" / "boringssl"
    (src / "include" / "openssl").mkdir(parents=True)
    (src / "CMakeLists.txt").write_text("cmake_minimum_required(VERSION 3.10)\n")
    return crate


@pytest.fixture
def make_target(tmp_path: Path, crate_dir: Path) -> Callable[..., TargetDescriptor]:
    """Factory for TargetDescriptor; defaults to a native x86_64 Linux build."""

    def _make(**overrides: Any) -> TargetDescriptor:
        values: dict[str, Any] = {
            "architecture": "x86_64",
            "operating_system": "linux",
            "host_triple": "x86_64-unknown-linux-gnu",
            "target_triple": "x86_64-unknown-linux-gnu",
            "feature_flags": frozenset(),
            "target_env": "gnu",
            "debug": False,
            "opt_level": "3",
            "out_dir": tmp_path / "out",
            "manifest_dir": crate_dir,
        }
        values.update(overrides)
        return TargetDescriptor(**values)

    return _make


@pytest.fixture
def cargo_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> dict[str, str]:
    """Cargo build-script environment for a native Linux build (no features)."""
    for key in list(os.environ):
        if key.startswith("CARGO_FEATURE_") or key.startswith("BORING_BSSL_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("ANDROID_NDK_HOME", raising=False)
    env = {
        "CARGO_CFG_TARGET_ARCH": "x86_64",
        "CARGO_CFG_TARGET_OS": "linux",
        "CARGO_CFG_TARGET_ENV": "gnu",
        "HOST": "x86_64-unknown-linux-gnu",
        "TARGET": "x86_64-unknown-linux-gnu",
        "DEBUG": "false",
        "OPT_LEVEL": "3",
        "OUT_DIR": str(tmp_path / "out"),
        "CARGO_MANIFEST_DIR": str(tmp_path / "crate"),
    }
    for k, v in env.items():
        monkeypatch.setenv(k, v)
    return env
