"""Tests for boring_build.bindgen.generate."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from boring_build.bindgen import (
    HEADERS,
    bindgen_command,
    bindgen_flags,
    default_include_path,
    extra_clang_args,
    generate_bindings,
    header_manifest,
)
from boring_build.config import resolve_layout
from boring_build.errors import (
    ConfigurationError,
    ExternalToolError,
    SdkLookupWarning,
    ToolchainNotFoundError,
)

MAC_HOST = "aarch64-apple-darwin"


class TestHeaderManifest:
    def test_default_manifest_is_stable(self) -> None:
        assert header_manifest(False) == HEADERS
        assert len(HEADERS) == 29
        assert HEADERS[0] == "aes.h" and HEADERS[-1] == "x509v3.h"

    def test_fips_drops_non_validated_headers(self) -> None:
        fips = header_manifest(True)
        assert "blake2.h" not in fips
        assert "trust_token.h" not in fips
        assert len(fips) == 27
        assert list(fips) == [h for h in HEADERS if h in fips]


class TestBindgenFlags:
    def test_base_flags(self, make_target) -> None:
        flags = bindgen_flags(make_target())
        assert "--size_t-is-usize" in flags
        assert flags[flags.index("--default-enum-style") + 1] == "newtype"
        assert "--no-layout-tests" not in flags

    @pytest.mark.parametrize(
        "triple", ["aarch64-apple-ios", "aarch64-apple-ios-sim", "aarch64-apple-ios-macabi"]
    )
    def test_layout_tests_disabled_for_aarch64_ios(self, make_target, triple: str) -> None:
        t = make_target(target_triple=triple, operating_system="ios", architecture="aarch64")
        assert bindgen_flags(t)[-1] == "--no-layout-tests"

    def test_x86_64_ios_keeps_layout_tests(self, make_target) -> None:
        t = make_target(target_triple="x86_64-apple-ios", operating_system="ios")
        assert "--no-layout-tests" not in bindgen_flags(t)


class TestExtraClangArgs:
    def test_linux_has_none(self, make_target) -> None:
        assert extra_clang_args(make_target(), resolve_layout(None)) == []

    def test_apple_sysroot_from_xcrun(self, make_target) -> None:
        t = make_target(
            target_triple="aarch64-apple-ios-sim", operating_system="ios", host_triple=MAC_HOST
        )
        with patch("boring_build.bindgen.generate.subprocess.run") as run:
            run.return_value = MagicMock(returncode=0, stdout="/SDKs/iPhoneSimulator.sdk\n", stderr="")
            args = extra_clang_args(t, resolve_layout(None))
        assert args == ["-isysroot", "/SDKs/iPhoneSimulator.sdk"]
        assert run.call_args[0][0] == ["xcrun", "--show-sdk-path", "--sdk", "iphonesimulator"]

    def test_xcrun_failure_warns_and_continues(self, make_target) -> None:
        t = make_target(target_triple="aarch64-apple-darwin", operating_system="macos")
        with patch(
            "boring_build.bindgen.generate.subprocess.run",
            return_value=MagicMock(returncode=1, stdout="", stderr="xcrun: error: SDK not found"),
        ):
            with pytest.warns(SdkLookupWarning, match="exit code 1"):
                assert extra_clang_args(t, resolve_layout(None)) == []

    def test_xcrun_missing_warns(self, make_target) -> None:
        t = make_target(target_triple="x86_64-apple-darwin", operating_system="macos")
        with patch("boring_build.bindgen.generate.subprocess.run", side_effect=FileNotFoundError("xcrun")):
            with pytest.warns(SdkLookupWarning):
                assert extra_clang_args(t, resolve_layout(None)) == []

    def test_apple_triple_without_sdk_is_fatal(self, make_target) -> None:
        t = make_target(target_triple="aarch64-apple-tvos", operating_system="ios")
        with pytest.raises(ConfigurationError, match="cannot find SDK"):
            extra_clang_args(t, resolve_layout(None))

    def test_android_sysroot(self, make_target, tmp_path: Path) -> None:
        ndk = tmp_path / "ndk"
        (ndk / "toolchains" / "llvm" / "prebuilt" / "linux-x86_64").mkdir(parents=True)
        t = make_target(
            target_triple="aarch64-linux-android", operating_system="android", android_ndk_home=ndk
        )
        assert extra_clang_args(t, resolve_layout(None)) == [
            "--sysroot",
            str(ndk / "toolchains" / "llvm" / "prebuilt" / "linux-x86_64" / "sysroot"),
        ]

    def test_android_without_prebuilt_toolchain_is_fatal(self, make_target, tmp_path: Path) -> None:
        prebuilt = tmp_path / "ndk" / "toolchains" / "llvm" / "prebuilt"
        prebuilt.mkdir(parents=True)
        t = make_target(
            target_triple="aarch64-linux-android",
            operating_system="android",
            android_ndk_home=tmp_path / "ndk",
        )
        with pytest.raises(ToolchainNotFoundError):
            extra_clang_args(t, resolve_layout(None))

    def test_wasi(self, make_target) -> None:
        t = make_target(target_triple="wasm32-wasi", operating_system="wasi", architecture="wasm32")
        assert extra_clang_args(t, resolve_layout(None)) == [
            "--sysroot",
            "/opt/wasi-sdk/share/wasi-sysroot",
            "-target",
            "wasm32-wasi",
            "-fvisibility=default",
        ]


class TestBindgenCommand:
    def test_last_header_is_input_and_rest_are_includes(self, make_target, tmp_path: Path) -> None:
        inc = tmp_path / "include"
        cmd = bindgen_command(make_target(), resolve_layout(None), inc, tmp_path / "b.rs")
        assert cmd[0] == "bindgen"
        sep = cmd.index("--")
        assert cmd[sep - 1] == str(inc / "openssl" / "x509v3.h")
        assert cmd[cmd.index("--output") + 1] == str(tmp_path / "b.rs")
        clang = cmd[sep + 1 :]
        assert clang[:2] == ["-I", str(inc)]
        includes = [clang[i + 1] for i, a in enumerate(clang) if a == "-include"]
        assert includes == [str(inc / "openssl" / h) for h in HEADERS[:-1]]

    def test_fips_command_omits_excluded_headers(self, make_target, tmp_path: Path) -> None:
        t = make_target(feature_flags=frozenset({"fips"}))
        cmd = bindgen_command(t, resolve_layout(None), tmp_path, tmp_path / "b.rs")
        assert not any(a.endswith("blake2.h") or a.endswith("trust_token.h") for a in cmd)

    def test_custom_bindgen_binary(self, make_target, tmp_path: Path) -> None:
        layout = resolve_layout({"bindgen": "/opt/bin/bindgen"})
        assert bindgen_command(make_target(), layout, tmp_path, tmp_path / "b.rs")[0] == "/opt/bin/bindgen"


class TestDefaultIncludePath:
    def test_source_include(self, make_target, tmp_path: Path) -> None:
        assert default_include_path(make_target(), tmp_path / "src") == tmp_path / "src" / "include"

    def test_env_override(self, make_target, tmp_path: Path) -> None:
        t = make_target(bssl_include_path=tmp_path / "custom")
        assert default_include_path(t, tmp_path / "src") == tmp_path / "custom"


def _fake_bindgen(returncode: int = 0, write: bool = True, stderr: str = ""):
    def run(cmd, **kwargs):
        out = Path(cmd[cmd.index("--output") + 1])
        if write:
            out.write_text("/* automatically generated by rust-bindgen */\n")
        return MagicMock(returncode=returncode, stdout="", stderr=stderr)

    return run


class TestGenerateBindings:
    def test_writes_bindings_into_out_dir(self, make_target, crate_dir: Path) -> None:
        t = make_target()
        with patch("boring_build.bindgen.generate.subprocess.run", side_effect=_fake_bindgen()):
            out = generate_bindings(t, resolve_layout(None), crate_dir / "deps" / "boringssl" / "include")
        assert out == t.out_dir / "bindings.rs"
        assert out.read_text().startswith("/* automatically generated")
        assert not (t.out_dir / "bindings.rs.tmp").exists()

    def test_failure_leaves_nothing_behind(self, make_target, tmp_path: Path) -> None:
        t = make_target()
        run = _fake_bindgen(returncode=1, stderr="fatal error: 'openssl/aes.h' file not found")
        with patch("boring_build.bindgen.generate.subprocess.run", side_effect=run):
            with pytest.raises(ExternalToolError, match="Unable to generate bindings") as exc:
                generate_bindings(t, resolve_layout(None), tmp_path / "missing")
        assert "file not found" in exc.value.diagnostic
        assert list(t.out_dir.iterdir()) == []

    def test_missing_bindgen_binary(self, make_target, tmp_path: Path) -> None:
        t = make_target()
        with patch("boring_build.bindgen.generate.subprocess.run", side_effect=FileNotFoundError("bindgen")):
            with pytest.raises(ExternalToolError, match="failed to run bindgen"):
                generate_bindings(t, resolve_layout(None), tmp_path)
        assert not (t.out_dir / "bindings.rs").exists()

    def test_no_output_file_is_an_error(self, make_target, tmp_path: Path) -> None:
        t = make_target()
        with patch("boring_build.bindgen.generate.subprocess.run", side_effect=_fake_bindgen(write=False)):
            with pytest.raises(ExternalToolError, match="produced no output"):
                generate_bindings(t, resolve_layout(None), tmp_path)
