# SPDX-License-Identifier: MIT
"""
kushtc: Kush toolchain driver logic.

Turns compiler-driver flags for the Kush operating system into the exact
linker command, compiler options and header/library search paths.

Example:
    from kushtc import KushToolchain, parse_driver_args

    config = parse_driver_args(["--sysroot=/sdk", "-o", "hello", "hello.o"])
    toolchain = KushToolchain.from_config(config)
    print(toolchain.link(config).to_shell())
"""

from __future__ import annotations

from kushtc.configure.config import ToolchainSettings, load_settings
from kushtc.core.command import LinkCommand
from kushtc.core.config import BuildConfiguration, LinkMode, LTOMode
from kushtc.core.diagnostics import DiagnosticEngine
from kushtc.core.errors import (
    ConfigurationError,
    InternalError,
    KushtcError,
    UnsupportedStdlibError,
)
from kushtc.core.options import parse_driver_args
from kushtc.toolchains import KushLinker, KushToolchain, find_toolchain

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Configuration
    "BuildConfiguration",
    "LinkMode",
    "LTOMode",
    "ToolchainSettings",
    "load_settings",
    "parse_driver_args",
    # Toolchain
    "KushToolchain",
    "KushLinker",
    "LinkCommand",
    "find_toolchain",
    # Diagnostics and errors
    "DiagnosticEngine",
    "KushtcError",
    "ConfigurationError",
    "InternalError",
    "UnsupportedStdlibError",
]
