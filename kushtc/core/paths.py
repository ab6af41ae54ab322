# SPDX-License-Identifier: MIT
"""Search path tables for the Kush toolchain.

The tables are computed once per toolchain instance and never change.
Sysroot-relative directories only exist when a sysroot was given; nothing
here touches the filesystem.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

SYSTEM_LIBRARIES = ("System", "Libraries")
LOCAL_LIBRARIES = ("Local", "Libraries")
SYSTEM_INCLUDES = ("System", "Includes")
LOCAL_INCLUDES = ("Local", "Includes")
LIBCXX_INCLUDES = ("System", "Includes", "c++", "v1")


def sysroot_path(sysroot: str, *parts: str) -> str:
    """Join path components below a sysroot.

    Returns an empty string when sysroot is unset, so callers can test the
    result instead of the sysroot.
    """
    if not sysroot:
        return ""
    return str(Path(sysroot, *parts))


@dataclass(frozen=True)
class ToolchainPaths:
    """Ordered search paths owned by one toolchain instance.

    Attributes:
        program_paths: Directories searched for the linker and other tools.
        library_paths: Library and startup object directories, system first.
    """

    program_paths: tuple[str, ...] = ()
    library_paths: tuple[str, ...] = ()

    def get_file_path(self, name: str) -> str:
        """Location of a startup object or other library-directory file.

        The first library directory is the system library directory, where
        the C runtime ships its startup objects. Without a sysroot the bare
        name is returned and left for the linker to find.
        """
        if self.library_paths:
            return str(Path(self.library_paths[0], name))
        return name

    def get_program_path(
        self, name: str, exists: Callable[[str], bool] = os.path.isfile
    ) -> str:
        """Find a program in the program search directories.

        Args:
            name: Program name, e.g. 'ld.lld'.
            exists: Predicate deciding whether a candidate path is usable.

        Returns:
            The first matching candidate, or name unchanged if none matched.
        """
        for directory in self.program_paths:
            candidate = str(Path(directory, name))
            if exists(candidate):
                return candidate
        return name


def resolve_toolchain_paths(
    install_dir: str,
    driver_dir: str | None = None,
    sysroot: str = "",
) -> ToolchainPaths:
    """Build the search path tables for a toolchain instance.

    Args:
        install_dir: Directory the compiler is installed in.
        driver_dir: Directory the driver was run from; added after
            install_dir when it differs.
        sysroot: Target SDK root; empty for none.

    Returns:
        The immutable path tables.
    """
    program_paths = [install_dir]
    if driver_dir and driver_dir != install_dir:
        program_paths.append(driver_dir)

    library_paths: list[str] = []
    if sysroot:
        library_paths.append(sysroot_path(sysroot, *SYSTEM_LIBRARIES))
        library_paths.append(sysroot_path(sysroot, *LOCAL_LIBRARIES))

    return ToolchainPaths(
        program_paths=tuple(program_paths),
        library_paths=tuple(library_paths),
    )
