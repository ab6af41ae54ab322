# SPDX-License-Identifier: MIT
"""Toolchain definitions (Kush)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kushtc.core.triple import Triple
from kushtc.tools.toolchain import BaseToolchain, toolchain_registry
from kushtc.toolchains.kush import KushToolchain
from kushtc.toolchains.linker import KushLinker

if TYPE_CHECKING:
    from kushtc.configure.config import ToolchainSettings
    from kushtc.core.config import BuildConfiguration
    from kushtc.core.diagnostics import DiagnosticEngine


def find_toolchain(
    config: BuildConfiguration,
    settings: ToolchainSettings | None = None,
    diagnostics: DiagnosticEngine | None = None,
) -> BaseToolchain:
    """Create the toolchain for a configuration's target triple.

    Raises:
        UnsupportedTargetError: If no toolchain handles the target OS.
    """
    toolchain_class = toolchain_registry.get(Triple.parse(config.triple))
    return toolchain_class(
        triple=config.triple,
        sysroot=config.sysroot,
        settings=settings,
        diagnostics=diagnostics,
    )


__all__ = [
    "KushLinker",
    "KushToolchain",
    "find_toolchain",
]
