# SPDX-License-Identifier: MIT
"""Toolchain protocol and base implementation.

A Toolchain knows how to drive the tools for one target: which search
paths to use, which libraries to link and how to spell the linker command.
One toolchain instance is created per (target triple, sysroot) and its
path tables are fixed at construction.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from kushtc.configure.config import ToolchainSettings
from kushtc.core.diagnostics import DiagnosticEngine
from kushtc.core.errors import UnsupportedTargetError
from kushtc.core.paths import ToolchainPaths, resolve_toolchain_paths
from kushtc.core.triple import Triple

if TYPE_CHECKING:
    from collections.abc import Callable

    from kushtc.core.command import LinkCommand
    from kushtc.core.config import BuildConfiguration

logger = logging.getLogger(__name__)


class Linker(Protocol):
    """Protocol for linker tools."""

    def construct_job(self, config: BuildConfiguration) -> LinkCommand:
        """Build the linker invocation for a configuration."""
        ...


@runtime_checkable
class Toolchain(Protocol):
    """Protocol for toolchains."""

    @property
    def name(self) -> str:
        """Toolchain name (e.g., 'kush')."""
        ...

    @property
    def triple(self) -> Triple:
        """Target triple this instance builds for."""
        ...

    @property
    def paths(self) -> ToolchainPaths:
        """Immutable search path tables."""
        ...

    def link(self, config: BuildConfiguration) -> LinkCommand:
        """Build the linker invocation for a configuration."""
        ...


class BaseToolchain(ABC):
    """Abstract base class for toolchains.

    Owns the settings, the diagnostics sink and the path tables. Subclasses
    provide the linker and the target-specific library decisions.
    """

    def __init__(
        self,
        name: str,
        *,
        triple: str | Triple,
        sysroot: str = "",
        settings: ToolchainSettings | None = None,
        diagnostics: DiagnosticEngine | None = None,
        program_exists: Callable[[str], bool] = os.path.isfile,
    ) -> None:
        """Initialize a toolchain.

        Args:
            name: Toolchain name.
            triple: Target triple.
            sysroot: Target SDK root; empty for none.
            settings: Installation settings (defaults when omitted).
            diagnostics: Sink for user-facing diagnostics.
            program_exists: Predicate used when resolving the linker program.
        """
        self._name = name
        self._triple = triple if isinstance(triple, Triple) else Triple.parse(triple)
        self._sysroot = sysroot
        self._settings = settings if settings is not None else ToolchainSettings()
        self._diagnostics = (
            diagnostics if diagnostics is not None else DiagnosticEngine()
        )
        self._program_exists = program_exists
        self._paths = resolve_toolchain_paths(
            self._settings.install_dir,
            self._settings.effective_driver_dir,
            sysroot,
        )
        logger.debug(
            "Created %s toolchain for %s (sysroot=%r)", name, self._triple, sysroot
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def triple(self) -> Triple:
        return self._triple

    @property
    def sysroot(self) -> str:
        return self._sysroot

    @property
    def settings(self) -> ToolchainSettings:
        return self._settings

    @property
    def diagnostics(self) -> DiagnosticEngine:
        return self._diagnostics

    @property
    def paths(self) -> ToolchainPaths:
        return self._paths

    @property
    def resource_dir(self) -> str:
        return self._settings.effective_resource_dir

    def compute_effective_triple(self) -> str:
        """Normalized triple string passed to the compiler."""
        return str(self._triple)

    def get_file_path(self, name: str) -> str:
        return self._paths.get_file_path(name)

    def get_linker_path(self, config: BuildConfiguration) -> str:
        """Linker program for a configuration.

        ``-fuse-ld=lld`` selects ld.lld, any other value is used as the
        program name; otherwise the installation's default linker is used.
        The name is then looked up in the program search directories.
        """
        linker = self._settings.linker
        if config.fuse_ld:
            linker = "ld.lld" if config.fuse_ld == "lld" else config.fuse_ld
        if os.path.isabs(linker):
            return linker
        return self._paths.get_program_path(linker, self._program_exists)

    def link(self, config: BuildConfiguration) -> LinkCommand:
        """Build the linker invocation for a configuration."""
        return self.build_linker().construct_job(config)

    @abstractmethod
    def build_linker(self) -> Linker:
        """Create the linker tool for this toolchain."""
        ...

    @abstractmethod
    def compile_args(self, config: BuildConfiguration) -> tuple[str, ...]:
        """Target-specific compiler arguments for a configuration."""
        ...

    @abstractmethod
    def get_system_include_paths(self, config: BuildConfiguration) -> tuple[str, ...]:
        """System header directories, in search order."""
        ...

    @abstractmethod
    def get_cxx_stdlib_include_paths(
        self, config: BuildConfiguration
    ) -> tuple[str, ...]:
        """C++ standard library header directories, in search order."""
        ...

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.name!r}, triple={str(self._triple)!r}, "
            f"sysroot={self._sysroot!r})"
        )


class ToolchainRegistry:
    """Maps target operating systems to toolchain classes."""

    def __init__(self) -> None:
        self._by_os: dict[str, Callable[..., BaseToolchain]] = {}

    def register(
        self, toolchain_class: Callable[..., BaseToolchain], *, os_names: list[str]
    ) -> None:
        for os_name in os_names:
            self._by_os[os_name] = toolchain_class

    def get(self, triple: Triple) -> Callable[..., BaseToolchain]:
        """Toolchain class for a triple.

        Raises:
            UnsupportedTargetError: If no toolchain handles the triple's OS.
        """
        try:
            return self._by_os[triple.os]
        except KeyError:
            raise UnsupportedTargetError(str(triple)) from None

    def os_names(self) -> list[str]:
        return sorted(self._by_os)


toolchain_registry = ToolchainRegistry()
