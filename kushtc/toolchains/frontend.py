# SPDX-License-Identifier: MIT
"""Compile-stage options and header search paths for Kush."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from kushtc.core.errors import UnsupportedStdlibError
from kushtc.core.paths import (
    LIBCXX_INCLUDES,
    LOCAL_INCLUDES,
    SYSTEM_INCLUDES,
    sysroot_path,
)
from kushtc.toolchains.runtime import CXXStdlibType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kushtc.core.config import BuildConfiguration

SYSTEM_INCLUDE_FLAG = "-internal-isystem"


def compose_target_compile_options(config: BuildConfiguration) -> tuple[str, ...]:
    """Extra compiler flags the Kush target always wants.

    Functions and data get their own sections so the linker (and LTO) can
    drop unreferenced code. Init arrays stay on unless explicitly disabled.
    """
    args: list[str] = []
    if config.use_init_array is False:
        args.append("-fno-use-init-array")
    args.extend(["-ffunction-sections", "-fdata-sections"])
    return tuple(args)


def compose_system_include_paths(
    config: BuildConfiguration, resource_dir: str
) -> tuple[str, ...]:
    """System header directories, in search order.

    Args:
        config: Build configuration (suppression flags and sysroot).
        resource_dir: Compiler resource directory holding builtin headers.
    """
    if config.nostdinc:
        return ()

    paths: list[str] = []
    if not config.nobuiltininc:
        paths.append(str(Path(resource_dir, "include")))

    if config.nostdlibinc:
        return tuple(paths)

    if config.sysroot:
        paths.append(sysroot_path(config.sysroot, *SYSTEM_INCLUDES))
        paths.append(sysroot_path(config.sysroot, *LOCAL_INCLUDES))
    return tuple(paths)


def compose_cxx_stdlib_include_paths(
    config: BuildConfiguration, kind: CXXStdlibType
) -> tuple[str, ...]:
    """C++ standard library header directories.

    The -nostdinc family is handled by the caller, which skips the stdlib
    lookup entirely when C++ headers are suppressed.

    Raises:
        UnsupportedStdlibError: For any kind other than libc++.
    """
    if kind is not CXXStdlibType.LIBCXX:
        raise UnsupportedStdlibError(kind.value)

    if not config.sysroot:
        return ()
    return (sysroot_path(config.sysroot, *LIBCXX_INCLUDES),)


def include_args(paths: Iterable[str]) -> tuple[str, ...]:
    """Render include directories as compiler arguments."""
    args: list[str] = []
    for path in paths:
        args.extend([SYSTEM_INCLUDE_FLAG, path])
    return tuple(args)
