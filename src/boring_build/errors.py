"""Error taxonomy for boring-build. Every fatal condition is a BoringBuildError subclass."""

from __future__ import annotations

from collections.abc import Mapping


class BoringBuildError(Exception):
    """Base error carrying an optional remediation hint and key/value context."""

    hint: str | None
    context: dict[str, str]

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        for k, v in self.context.items():
            if v:
                parts.append(f"  {k}: {v}")
        return "\n".join(parts)


class ConfigurationError(BoringBuildError):
    """Missing or invalid ambient input. `variable` names the offending setting."""

    def __init__(
        self,
        message: str,
        *,
        variable: str | None = None,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, hint=hint, context=context)
        self.variable = variable


class ToolchainMismatchError(BoringBuildError):
    """The C compiler reports the required version but its C++ partner does not."""

    def __init__(self, c_compiler: str, cxx_compiler: str, required: str, found: str) -> None:
        super().__init__(
            f"mismatched versions of {c_compiler} and {cxx_compiler}: "
            f"FIPS requires clang {required}, {cxx_compiler} reports {found!r}",
            context={"required": required, "found": found},
        )
        self.c_compiler = c_compiler
        self.cxx_compiler = cxx_compiler
        self.required = required
        self.found = found


class UnsupportedToolchainError(BoringBuildError):
    """No FIPS candidate compiler reports the required version."""

    def __init__(self, required: str, found: str) -> None:
        super().__init__(
            f'unsupported clang version "{found}": FIPS requires clang {required}',
            context={"required": required, "found": found},
        )
        self.required = required
        self.found = found


class ToolchainNotFoundError(BoringBuildError):
    """No prebuilt NDK toolchain directory could be selected."""


class FilesystemError(BoringBuildError):
    """A directory needed for toolchain discovery could not be listed."""


class SourceFetchError(BoringBuildError):
    """Fetching the BoringSSL source tree failed."""


class ExternalToolError(BoringBuildError):
    """An external tool (cmake, bindgen, a compiler) failed. `diagnostic` is its output verbatim."""

    def __init__(
        self,
        message: str,
        *,
        tool: str,
        diagnostic: str = "",
        returncode: int | None = None,
    ) -> None:
        super().__init__(message)
        self.tool = tool
        self.diagnostic = diagnostic
        self.returncode = returncode

    def __str__(self) -> str:
        text = super().__str__()
        if self.diagnostic:
            text = f"{text}\n{self.diagnostic.rstrip()}"
        return text


class UnsupportedTargetWarning(UserWarning):
    """Target has no dedicated parameters; CMake defaults are used."""


class SdkLookupWarning(UserWarning):
    """The Apple SDK path query failed; bindgen runs without -isysroot."""


__all__ = [
    "BoringBuildError",
    "ConfigurationError",
    "ExternalToolError",
    "FilesystemError",
    "SdkLookupWarning",
    "SourceFetchError",
    "ToolchainMismatchError",
    "ToolchainNotFoundError",
    "UnsupportedTargetWarning",
    "UnsupportedToolchainError",
]
