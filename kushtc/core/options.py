# SPDX-License-Identifier: MIT
"""Compiler-driver flag parsing.

Turns a clang-style argument vector into a BuildConfiguration. Options are
described by a table of OptionSpec entries; each spec knows how its value
is spelled (standalone flag, joined to the option, separate token, or
either) and which configuration field it updates. Later options override
earlier ones, list-valued options accumulate in command-line order.

Example:
    config = parse_driver_args(["-static", "-o", "hello", "hello.o"])
    assert config.is_static
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from kushtc.core.config import BuildConfiguration, LinkMode, LTOMode
from kushtc.core.diagnostics import DiagnosticEngine
from kushtc.core.errors import MissingOptionValueError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)


class OptionKind(Enum):
    """How an option carries its value."""

    FLAG = "flag"  # -static
    JOINED = "joined"  # -rtlib=compiler-rt, -O2
    SEPARATE = "separate"  # -Xlinker --gc-sections
    JOINED_OR_SEPARATE = "joined_or_separate"  # -L/lib or -L /lib


@dataclass
class _ParseState:
    values: dict[str, Any] = field(default_factory=dict)
    inputs: list[str] = field(default_factory=list)
    library_paths: list[str] = field(default_factory=list)
    undefined: list[str] = field(default_factory=list)
    diagnostics: DiagnosticEngine = field(default_factory=DiagnosticEngine)


@dataclass(frozen=True)
class OptionSpec:
    """One recognized driver option.

    Attributes:
        spelling: Option text, including the value separator for joined
            options (e.g. '-rtlib=').
        kind: How the value is attached.
        handler: Called with the parse state and the value ('' for flags).
    """

    spelling: str
    kind: OptionKind
    handler: Callable[[_ParseState, str], None]


def _set(name: str, value: Any = True) -> Callable[[_ParseState, str], None]:
    def handler(state: _ParseState, _arg: str) -> None:
        state.values[name] = value

    return handler


def _set_value(name: str) -> Callable[[_ParseState, str], None]:
    def handler(state: _ParseState, arg: str) -> None:
        state.values[name] = arg

    return handler


def _add_input(state: _ParseState, arg: str) -> None:
    state.inputs.append(arg)


def _add_library(state: _ParseState, arg: str) -> None:
    state.inputs.append(f"-l{arg}")


def _add_wl(state: _ParseState, arg: str) -> None:
    state.inputs.extend(tok for tok in arg.split(",") if tok)


def _add_library_path(state: _ParseState, arg: str) -> None:
    state.library_paths.append(arg)


def _add_undefined(state: _ParseState, arg: str) -> None:
    state.undefined.append(arg)


def _set_opt_level(state: _ParseState, arg: str) -> None:
    # Bare -O means -O1
    state.values["opt_level"] = arg or "1"


def _set_lto(state: _ParseState, arg: str) -> None:
    try:
        state.values["lto"] = LTOMode.from_name(arg)
    except ValueError:
        state.diagnostics.error(f"unsupported argument '{arg}' to option '-flto='")


OPTION_TABLE: tuple[OptionSpec, ...] = (
    # Link mode and output kind
    OptionSpec("-static", OptionKind.FLAG, _set("link_mode", LinkMode.STATIC)),
    OptionSpec("-shared", OptionKind.FLAG, _set("shared")),
    OptionSpec("-pie", OptionKind.FLAG, _set("pie")),
    OptionSpec("-no-pie", OptionKind.FLAG, _set("pie", False)),
    OptionSpec("-nopie", OptionKind.FLAG, _set("pie", False)),
    OptionSpec("-rdynamic", OptionKind.FLAG, _set("rdynamic")),
    OptionSpec("-s", OptionKind.FLAG, _set("strip")),
    OptionSpec("-static-libstdc++", OptionKind.FLAG, _set("static_libstdcxx")),
    # Target and SDK
    OptionSpec("--sysroot=", OptionKind.JOINED, _set_value("sysroot")),
    OptionSpec("--sysroot", OptionKind.SEPARATE, _set_value("sysroot")),
    OptionSpec("-target", OptionKind.SEPARATE, _set_value("triple")),
    OptionSpec("--target=", OptionKind.JOINED, _set_value("triple")),
    # Link-time optimization
    OptionSpec("-flto", OptionKind.FLAG, _set("lto", LTOMode.FULL)),
    OptionSpec("-flto=", OptionKind.JOINED, _set_lto),
    OptionSpec("-fno-lto", OptionKind.FLAG, _set("lto", LTOMode.NONE)),
    OptionSpec("-flto-jobs=", OptionKind.JOINED, _set_value("lto_jobs")),
    OptionSpec("-O", OptionKind.JOINED, _set_opt_level),
    # Runtime and standard library selection
    OptionSpec("-rtlib=", OptionKind.JOINED, _set_value("rtlib")),
    OptionSpec("--rtlib=", OptionKind.JOINED, _set_value("rtlib")),
    OptionSpec("--rtlib", OptionKind.SEPARATE, _set_value("rtlib")),
    OptionSpec("-stdlib=", OptionKind.JOINED, _set_value("cxx_stdlib")),
    OptionSpec("--stdlib=", OptionKind.JOINED, _set_value("cxx_stdlib")),
    OptionSpec("--stdlib", OptionKind.SEPARATE, _set_value("cxx_stdlib")),
    OptionSpec("-fuse-ld=", OptionKind.JOINED, _set_value("fuse_ld")),
    # Suppression flags
    OptionSpec("-nostdlib", OptionKind.FLAG, _set("nostdlib")),
    OptionSpec("-nostartfiles", OptionKind.FLAG, _set("nostartfiles")),
    OptionSpec("-nodefaultlibs", OptionKind.FLAG, _set("nodefaultlibs")),
    OptionSpec("-nolibc", OptionKind.FLAG, _set("nolibc")),
    OptionSpec("-nostdinc", OptionKind.FLAG, _set("nostdinc")),
    OptionSpec("-nobuiltininc", OptionKind.FLAG, _set("nobuiltininc")),
    OptionSpec("-nostdlibinc", OptionKind.FLAG, _set("nostdlibinc")),
    OptionSpec("-nostdinc++", OptionKind.FLAG, _set("nostdincxx")),
    OptionSpec("-nostdlib++", OptionKind.FLAG, _set("nostdlibxx")),
    # Compile options
    OptionSpec("-fuse-init-array", OptionKind.FLAG, _set("use_init_array", True)),
    OptionSpec("-fno-use-init-array", OptionKind.FLAG, _set("use_init_array", False)),
    # Output, search paths and linker inputs
    OptionSpec("-o", OptionKind.JOINED_OR_SEPARATE, _set_value("output")),
    OptionSpec("-L", OptionKind.JOINED_OR_SEPARATE, _add_library_path),
    OptionSpec("-u", OptionKind.JOINED_OR_SEPARATE, _add_undefined),
    OptionSpec("-l", OptionKind.JOINED_OR_SEPARATE, _add_library),
    OptionSpec("-Wl,", OptionKind.JOINED, _add_wl),
    OptionSpec("-Xlinker", OptionKind.SEPARATE, _add_input),
    # Accepted and ignored when linking
    OptionSpec("-emit-llvm", OptionKind.FLAG, _set("emit_llvm")),
    OptionSpec("-w", OptionKind.FLAG, _set("suppress_warnings")),
    OptionSpec("-g", OptionKind.JOINED, _set("debug")),
)

# Exact-match options, and prefix options tried longest spelling first
# so '-flto-jobs=' wins over '-flto=' and '-static-libstdc++' stays exact.
_EXACT: dict[str, OptionSpec] = {
    spec.spelling: spec
    for spec in OPTION_TABLE
    if spec.kind in (OptionKind.FLAG, OptionKind.SEPARATE)
}
_PREFIXED: tuple[OptionSpec, ...] = tuple(
    sorted(
        (
            spec
            for spec in OPTION_TABLE
            if spec.kind in (OptionKind.JOINED, OptionKind.JOINED_OR_SEPARATE)
        ),
        key=lambda spec: len(spec.spelling),
        reverse=True,
    )
)


def parse_driver_args(
    argv: Sequence[str],
    *,
    cxx: bool = False,
    pie_default: bool = False,
    diagnostics: DiagnosticEngine | None = None,
) -> BuildConfiguration:
    """Parse driver arguments into a BuildConfiguration.

    Args:
        argv: Driver arguments, without the program name.
        cxx: Whether the driver runs in C++ mode (clang++).
        pie_default: Platform default for position-independent executables.
        diagnostics: Receives warnings for unknown options and errors for
            invalid option values. A private engine is used when omitted.

    Returns:
        The parsed configuration.

    Raises:
        MissingOptionValueError: If an option that needs a value is last.
    """
    if diagnostics is None:
        diagnostics = DiagnosticEngine()
    state = _ParseState(diagnostics=diagnostics)
    state.values["cxx"] = cxx
    state.values["pie_default"] = pie_default

    args = list(argv)
    i = 0
    while i < len(args):
        arg = args[i]
        i += 1

        if arg == "--":
            state.inputs.extend(args[i:])
            break

        spec = _EXACT.get(arg)
        if spec is not None:
            if spec.kind is OptionKind.SEPARATE:
                if i >= len(args):
                    raise MissingOptionValueError(arg)
                spec.handler(state, args[i])
                i += 1
            else:
                spec.handler(state, "")
            continue

        spec = _match_prefix(arg)
        if spec is not None:
            value = arg[len(spec.spelling) :]
            if not value and spec.kind is OptionKind.JOINED_OR_SEPARATE:
                if i >= len(args):
                    raise MissingOptionValueError(arg)
                value = args[i]
                i += 1
            spec.handler(state, value)
            continue

        if arg.startswith("-") and arg != "-":
            state.diagnostics.warning(
                f"argument unused during compilation: '{arg}'"
            )
            continue

        state.inputs.append(arg)

    logger.debug("Parsed %d driver arguments: %s", len(args), state.values)
    return BuildConfiguration(
        inputs=tuple(state.inputs),
        library_paths=tuple(state.library_paths),
        undefined=tuple(state.undefined),
        **state.values,
    )


def _match_prefix(arg: str) -> OptionSpec | None:
    for spec in _PREFIXED:
        if arg.startswith(spec.spelling):
            return spec
    return None
