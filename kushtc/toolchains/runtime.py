# SPDX-License-Identifier: MIT
"""Runtime and C++ standard library selection for Kush.

Kush ships exactly one runtime-support library (compiler-rt) and one C++
standard library (libc++ with libc++abi and libunwind). Asking for
anything else is either a user mistake, which is diagnosed and replaced by
the supported choice, or an adapter bug, which is fatal.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from kushtc.core.errors import InternalError, UnsupportedStdlibError

if TYPE_CHECKING:
    from kushtc.core.config import BuildConfiguration
    from kushtc.core.diagnostics import DiagnosticEngine
    from kushtc.core.triple import Triple


class RuntimeLibType(Enum):
    """Runtime-support library families."""

    COMPILER_RT = "compiler-rt"
    LIBGCC = "libgcc"


class CXXStdlibType(Enum):
    """C++ standard library implementations known to the driver."""

    LIBCXX = "libc++"
    LIBSTDCXX = "libstdc++"


DEFAULT_RUNTIME_LIB = RuntimeLibType.COMPILER_RT
DEFAULT_CXX_STDLIB = CXXStdlibType.LIBCXX


def get_runtime_lib_type(
    config: BuildConfiguration, diagnostics: DiagnosticEngine
) -> RuntimeLibType:
    """Decide the runtime-support library.

    Only compiler-rt exists on Kush. Any other ``-rtlib=`` value is
    reported as an error diagnostic, and compiler-rt is still returned so
    the link command can be completed.
    """
    if config.rtlib is not None and config.rtlib != DEFAULT_RUNTIME_LIB.value:
        diagnostics.error(
            f"invalid runtime library name in argument '-rtlib={config.rtlib}'"
        )
    return DEFAULT_RUNTIME_LIB


def get_cxx_stdlib_type(
    config: BuildConfiguration, diagnostics: DiagnosticEngine
) -> CXXStdlibType:
    """Map the ``-stdlib=`` request to a known library kind.

    Unknown names are diagnosed and replaced by the platform default.
    Known but unsupported kinds (libstdc++) are passed through; composing
    their arguments fails later.
    """
    if config.cxx_stdlib is None:
        return DEFAULT_CXX_STDLIB
    try:
        return CXXStdlibType(config.cxx_stdlib)
    except ValueError:
        diagnostics.error(
            f"invalid library name in argument '-stdlib={config.cxx_stdlib}'"
        )
        return DEFAULT_CXX_STDLIB


def compose_cxx_stdlib_args(
    kind: CXXStdlibType, config: BuildConfiguration
) -> tuple[str, ...]:
    """Linker arguments for the C++ standard library.

    Raises:
        UnsupportedStdlibError: For any kind other than libc++.
    """
    if kind is not CXXStdlibType.LIBCXX:
        raise UnsupportedStdlibError(kind.value)

    args = ["-lc++abi", "-lc++"]
    # Exception handling in dynamically linked images needs libunwind
    if not config.is_static:
        args.append("-lunwind")
    return tuple(args)


def compose_runtime_lib_args(
    kind: RuntimeLibType, resource_dir: str, triple: Triple
) -> tuple[str, ...]:
    """Linker arguments for the runtime-support library.

    Raises:
        InternalError: For any kind other than compiler-rt.
    """
    if kind is not RuntimeLibType.COMPILER_RT:
        raise InternalError(f"unsupported runtime library: {kind.value}")

    name = f"libclang_rt.builtins-{triple.compiler_rt_arch}.a"
    builtins = Path(resource_dir, "lib", triple.os, name)
    return (str(builtins),)
