"""Tests for boring_build.link.directives."""

from __future__ import annotations

from io import StringIO
from pathlib import Path

import pytest

from boring_build.errors import ConfigurationError
from boring_build.link import (
    CargoDirectives,
    artifact_paths,
    cmake_build_profile,
    emit_link_directives,
    platform_output_subdir,
)


class TestCmakeBuildProfile:
    @pytest.mark.parametrize(
        ("debug", "opt", "expected"),
        [
            (False, "3", "Release"),
            (False, "2", "Release"),
            (True, "1", "RelWithDebInfo"),
            (True, "3", "RelWithDebInfo"),
            (False, "0", "Debug"),
            (True, "0", "Debug"),
            (False, "s", "MinSizeRel"),
            (True, "z", "MinSizeRel"),
        ],
    )
    def test_mapping(self, debug: bool, opt: str, expected: str) -> None:
        assert cmake_build_profile(debug, opt) == expected

    def test_unknown_opt_level_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown OPT_LEVEL=4") as exc:
            cmake_build_profile(False, "4")
        assert exc.value.variable == "OPT_LEVEL"


class TestPlatformOutputSubdir:
    def test_msvc_uses_profile(self, make_target) -> None:
        t = make_target(target_env="msvc", debug=True, opt_level="2")
        assert platform_output_subdir(t) == "RelWithDebInfo"

    def test_other_toolchains_are_empty(self, make_target) -> None:
        assert platform_output_subdir(make_target(target_env="gnu", opt_level="bogus")) == ""

    def test_msvc_with_unknown_opt_level_raises(self, make_target) -> None:
        with pytest.raises(ConfigurationError):
            platform_output_subdir(make_target(target_env="msvc", opt_level="fast"))


class TestEmitLinkDirectives:
    def test_linux_crypto_only(self, make_target, tmp_path: Path) -> None:
        out = StringIO()
        d = CargoDirectives(out)
        emit_link_directives(tmp_path / "art", make_target(), d)
        assert out.getvalue().splitlines() == [
            f"cargo:rustc-link-search=native={tmp_path / 'art' / 'build' / 'crypto'}",
            f"cargo:rustc-link-search=native={tmp_path / 'art' / 'build' / 'ssl'}",
            "cargo:rustc-link-lib=static=crypto",
        ]
        assert d.lines == out.getvalue().splitlines()

    def test_ssl_feature_links_ssl(self, make_target, tmp_path: Path) -> None:
        d = CargoDirectives(StringIO())
        emit_link_directives(tmp_path, make_target(feature_flags=frozenset({"ssl"})), d)
        assert d.lines[-2:] == ["cargo:rustc-link-lib=static=crypto", "cargo:rustc-link-lib=static=ssl"]

    def test_msvc_subdir_in_search_paths(self, make_target, tmp_path: Path) -> None:
        t = make_target(target_env="msvc", operating_system="windows", opt_level="0")
        paths = artifact_paths(tmp_path, t)
        assert paths.platform_output_subdir == "Debug"
        assert paths.library_search_roots == (
            tmp_path / "build" / "crypto" / "Debug",
            tmp_path / "build" / "ssl" / "Debug",
        )

    def test_macos_allows_undefined_symbols(self, make_target, tmp_path: Path) -> None:
        d = CargoDirectives(StringIO())
        emit_link_directives(tmp_path, make_target(operating_system="macos", target_env=""), d)
        assert d.lines[-1] == "cargo:rustc-cdylib-link-arg=-Wl,-undefined,dynamic_lookup"

    def test_ios_has_no_cdylib_arg(self, make_target, tmp_path: Path) -> None:
        d = CargoDirectives(StringIO())
        emit_link_directives(tmp_path, make_target(operating_system="ios"), d)
        assert not any(line.startswith("cargo:rustc-cdylib-link-arg") for line in d.lines)


def test_directives_default_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    CargoDirectives().rerun_if_env_changed("BORING_BSSL_PATH")
    captured = capsys.readouterr()
    assert captured.out == "cargo:rerun-if-env-changed=BORING_BSSL_PATH\n"
    assert captured.err == ""
