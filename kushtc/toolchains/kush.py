# SPDX-License-Identifier: MIT
"""Kush toolchain implementation.

Provides the clang-based toolchain for the Kush operating system:
- Search paths below the sysroot (System/, Local/)
- compiler-rt as the only runtime library
- libc++ (with libc++abi and libunwind) as the only C++ standard library
- The linker command builder (see kushtc.toolchains.linker)
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from kushtc.core.triple import DEFAULT_TRIPLE
from kushtc.tools.toolchain import BaseToolchain, toolchain_registry
from kushtc.toolchains import frontend, runtime
from kushtc.toolchains.linker import KushLinker

if TYPE_CHECKING:
    from collections.abc import Callable

    from kushtc.configure.config import ToolchainSettings
    from kushtc.core.config import BuildConfiguration
    from kushtc.core.diagnostics import DiagnosticEngine
    from kushtc.core.triple import Triple


class KushToolchain(BaseToolchain):
    """Kush toolchain for C and C++ development.

    Expects a sysroot laid out like a Kush SDK; without one, no
    sysroot-relative paths are used anywhere.

    Example:
        toolchain = KushToolchain(sysroot="/opt/kush-sdk")
        config = parse_driver_args(["--sysroot=/opt/kush-sdk", "main.o"])
        command = toolchain.link(config)
    """

    def __init__(
        self,
        *,
        triple: str | Triple = DEFAULT_TRIPLE,
        sysroot: str = "",
        settings: ToolchainSettings | None = None,
        diagnostics: DiagnosticEngine | None = None,
        program_exists: Callable[[str], bool] = os.path.isfile,
    ) -> None:
        super().__init__(
            "kush",
            triple=triple,
            sysroot=sysroot,
            settings=settings,
            diagnostics=diagnostics,
            program_exists=program_exists,
        )

    @classmethod
    def from_config(
        cls,
        config: BuildConfiguration,
        settings: ToolchainSettings | None = None,
        diagnostics: DiagnosticEngine | None = None,
        program_exists: Callable[[str], bool] = os.path.isfile,
    ) -> KushToolchain:
        """Create the toolchain instance matching a configuration's target."""
        return cls(
            triple=config.triple,
            sysroot=config.sysroot,
            settings=settings,
            diagnostics=diagnostics,
            program_exists=program_exists,
        )

    def with_sysroot(self, sysroot: str) -> KushToolchain:
        """A toolchain for the same target and installation, rooted at sysroot."""
        return type(self)(
            triple=self.triple,
            sysroot=sysroot,
            settings=self.settings,
            diagnostics=self.diagnostics,
            program_exists=self._program_exists,
        )

    # =========================================================================
    # Library selection
    # =========================================================================

    def get_runtime_lib_type(
        self, config: BuildConfiguration
    ) -> runtime.RuntimeLibType:
        return runtime.get_runtime_lib_type(config, self.diagnostics)

    def get_cxx_stdlib_type(
        self, config: BuildConfiguration
    ) -> runtime.CXXStdlibType:
        return runtime.get_cxx_stdlib_type(config, self.diagnostics)

    def should_link_cxx_stdlib(self, config: BuildConfiguration) -> bool:
        """Whether the C++ standard library belongs on the link line."""
        return not (config.nostdlib or config.nodefaultlibs or config.nostdlibxx)

    def add_cxx_stdlib_lib_args(self, config: BuildConfiguration) -> tuple[str, ...]:
        """Linker arguments for the C++ standard library.

        Raises:
            UnsupportedStdlibError: If the configuration asks for libstdc++.
        """
        kind = self.get_cxx_stdlib_type(config)
        return runtime.compose_cxx_stdlib_args(kind, config)

    def add_runtime_lib_args(self, config: BuildConfiguration) -> tuple[str, ...]:
        return runtime.compose_runtime_lib_args(
            self.get_runtime_lib_type(config), self.resource_dir, self.triple
        )

    # =========================================================================
    # Compile-stage options
    # =========================================================================

    def add_clang_target_options(self, config: BuildConfiguration) -> tuple[str, ...]:
        return frontend.compose_target_compile_options(config)

    def get_system_include_paths(self, config: BuildConfiguration) -> tuple[str, ...]:
        return frontend.compose_system_include_paths(config, self.resource_dir)

    def get_cxx_stdlib_include_paths(
        self, config: BuildConfiguration
    ) -> tuple[str, ...]:
        # Checked before the stdlib lookup so suppressed headers never
        # produce a -stdlib= diagnostic
        if config.nostdinc or config.nostdlibinc or config.nostdincxx:
            return ()
        return frontend.compose_cxx_stdlib_include_paths(
            config, self.get_cxx_stdlib_type(config)
        )

    def add_clang_system_include_args(
        self, config: BuildConfiguration
    ) -> tuple[str, ...]:
        return frontend.include_args(self.get_system_include_paths(config))

    def add_clang_cxx_stdlib_include_args(
        self, config: BuildConfiguration
    ) -> tuple[str, ...]:
        return frontend.include_args(self.get_cxx_stdlib_include_paths(config))

    def compile_args(self, config: BuildConfiguration) -> tuple[str, ...]:
        """All target-specific compiler arguments for a configuration.

        Target options, then (in C++ mode) the C++ standard library
        includes, then the system includes.
        """
        args = [
            "-triple",
            self.compute_effective_triple(),
            *self.add_clang_target_options(config),
        ]
        if config.cxx:
            args.extend(self.add_clang_cxx_stdlib_include_args(config))
        args.extend(self.add_clang_system_include_args(config))
        return tuple(args)

    # =========================================================================
    # Tools
    # =========================================================================

    def build_linker(self) -> KushLinker:
        return KushLinker(self)


# =============================================================================
# Registration
# =============================================================================

toolchain_registry.register(KushToolchain, os_names=["kush"])
