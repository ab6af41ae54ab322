# SPDX-License-Identifier: MIT
"""Build configuration model.

A BuildConfiguration is the normalized result of parsing compiler-driver
flags. It is immutable: the toolchain and linker only ever read it, and
variations are produced with ``config.replace(...)``.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any

from kushtc.core.triple import DEFAULT_TRIPLE, Triple


class LinkMode(Enum):
    """How the final image binds its libraries."""

    STATIC = "static"
    DYNAMIC = "dynamic"


class LTOMode(Enum):
    """Link-time optimization mode."""

    NONE = "none"
    THIN = "thin"
    FULL = "full"

    @classmethod
    def from_name(cls, name: str) -> LTOMode:
        """Map a ``-flto=`` value to a mode.

        Raises:
            ValueError: If the name is not 'thin' or 'full'.
        """
        if name == "thin":
            return cls.THIN
        if name == "full":
            return cls.FULL
        raise ValueError(f"invalid LTO mode: {name}")


@dataclass(frozen=True)
class BuildConfiguration:
    """Normalized driver flags for one link (or compile) action.

    Attributes:
        link_mode: Static or dynamic binding (``-static``).
        shared: Build a shared library (``-shared``).
        pie: Position-independent executable explicitly requested (``-pie``).
        pie_default: Whether the platform builds PIEs by default.
        strip: Strip all symbols (``-s``).
        sysroot: Root of the target SDK; empty when unset.
        triple: Target triple.
        lto: Link-time optimization mode.
        lto_jobs: ThinLTO backend job count (``-flto-jobs=``).
        opt_level: Optimization level suffix of ``-O`` ('0'..'3', 's', 'z', 'fast').
        rtlib: Requested runtime library name (``-rtlib=``), None if unset.
        cxx_stdlib: Requested C++ standard library (``-stdlib=``), None if unset.
        cxx: Driver runs in C++ mode (clang++).
        rdynamic: Export all dynamic symbols (``-rdynamic``).
        static_libstdcxx: Link only the C++ standard library statically.
        fuse_ld: Linker override (``-fuse-ld=``).
        use_init_array: ``-fuse-init-array``/``-fno-use-init-array``; None if unset.
        inputs: Object files, libraries and linker pass-through tokens, in order.
        output: Output path (``-o``).
        library_paths: Extra library search paths (``-L``), in order.
        undefined: Symbols forced undefined (``-u``), in order.
        debug, emit_llvm, suppress_warnings: Accepted at link time, no effect.
    """

    link_mode: LinkMode = LinkMode.DYNAMIC
    shared: bool = False
    pie: bool = False
    pie_default: bool = False
    strip: bool = False
    sysroot: str = ""
    triple: str = DEFAULT_TRIPLE
    lto: LTOMode = LTOMode.NONE
    lto_jobs: str | None = None
    opt_level: str | None = None
    rtlib: str | None = None
    cxx_stdlib: str | None = None
    cxx: bool = False
    rdynamic: bool = False
    static_libstdcxx: bool = False
    fuse_ld: str | None = None
    use_init_array: bool | None = None

    # Suppression flags
    nostdlib: bool = False
    nostartfiles: bool = False
    nodefaultlibs: bool = False
    nolibc: bool = False
    nostdinc: bool = False
    nobuiltininc: bool = False
    nostdlibinc: bool = False
    nostdincxx: bool = False
    nostdlibxx: bool = False

    inputs: tuple[str, ...] = ()
    output: str = "a.out"
    library_paths: tuple[str, ...] = ()
    undefined: tuple[str, ...] = ()

    # Claimed at link time only
    debug: bool = False
    emit_llvm: bool = False
    suppress_warnings: bool = False

    def __post_init__(self) -> None:
        # Accept lists from callers but store tuples so the value stays hashable.
        for name in ("inputs", "library_paths", "undefined"):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))

    @property
    def is_static(self) -> bool:
        return self.link_mode is LinkMode.STATIC

    @property
    def is_pie(self) -> bool:
        """Whether the output is a position-independent executable."""
        return not self.shared and (self.pie or self.pie_default)

    @property
    def uses_lto(self) -> bool:
        return self.lto is not LTOMode.NONE

    @property
    def target(self) -> Triple:
        return Triple.parse(self.triple)

    def replace(self, **changes: Any) -> BuildConfiguration:
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)
