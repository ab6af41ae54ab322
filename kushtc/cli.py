# SPDX-License-Identifier: MIT
"""Command-line interface for kushtc.

Examples:
    kushtc link -- --sysroot=/sdk -o hello hello.o
    kushtc link --cxx --json -- -static main.o
    kushtc cc1 --cxx -- --sysroot=/sdk
    kushtc paths --sysroot /sdk
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import TYPE_CHECKING

from kushtc.configure.config import load_settings
from kushtc.core.command import to_shell_command
from kushtc.core.config import BuildConfiguration
from kushtc.core.diagnostics import DiagnosticEngine
from kushtc.core.errors import ConfigurationError
from kushtc.core.options import parse_driver_args
from kushtc.core.triple import DEFAULT_TRIPLE
from kushtc.toolchains import find_toolchain

if TYPE_CHECKING:
    from kushtc.tools.toolchain import BaseToolchain

# Set up logging
logger = logging.getLogger("kushtc")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def _prepare(
    args: argparse.Namespace, diagnostics: DiagnosticEngine
) -> tuple[BuildConfiguration, BaseToolchain]:
    """Parse driver arguments and create the matching toolchain."""
    settings = load_settings(args.config)
    config = parse_driver_args(
        args.driver_args, cxx=args.cxx, diagnostics=diagnostics
    )
    if config.triple == DEFAULT_TRIPLE and settings.triple != DEFAULT_TRIPLE:
        config = config.replace(triple=settings.triple)
    return config, find_toolchain(config, settings, diagnostics)


def cmd_link(args: argparse.Namespace) -> int:
    """Print the linker command for the given driver arguments."""
    setup_logging(args.verbose, args.debug)
    diagnostics = DiagnosticEngine()

    try:
        config, toolchain = _prepare(args, diagnostics)
        linker = toolchain.build_linker()
        command = linker.construct_job(config)
    except (ConfigurationError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1

    if args.explain:
        print("rules: " + ", ".join(linker.fired_rules(config)), file=sys.stderr)

    if args.json:
        print(json.dumps(command.to_dict(), indent=2))
    else:
        print(command.to_shell())

    # Diagnosed mistakes still produce a command, but the run fails
    return 1 if diagnostics.has_errors else 0


def cmd_cc1(args: argparse.Namespace) -> int:
    """Print target compile options and header search arguments."""
    setup_logging(args.verbose, args.debug)
    diagnostics = DiagnosticEngine()

    try:
        config, toolchain = _prepare(args, diagnostics)
        compile_args = toolchain.compile_args(config)
    except (ConfigurationError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1

    print(to_shell_command(compile_args))
    return 1 if diagnostics.has_errors else 0


def cmd_paths(args: argparse.Namespace) -> int:
    """Print program, library and include search paths."""
    setup_logging(args.verbose, args.debug)
    diagnostics = DiagnosticEngine()

    try:
        settings = load_settings(args.config)
        config = BuildConfiguration(
            sysroot=args.sysroot or "",
            triple=args.target or settings.triple,
            cxx=True,
        )
        toolchain = find_toolchain(config, settings, diagnostics)
        includes = toolchain.get_cxx_stdlib_include_paths(config)
        includes += toolchain.get_system_include_paths(config)
    except (ConfigurationError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1

    sections = (
        ("programs", toolchain.paths.program_paths),
        ("libraries", toolchain.paths.library_paths),
        ("includes", includes),
    )
    for title, paths in sections:
        print(f"{title}:")
        for path in paths:
            print(f"  {path}")
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "-c", "--config", metavar="FILE", help="Toolchain settings file (JSON)"
    )


def add_driver_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments for commands that take driver flags."""
    parser.add_argument(
        "--cxx", action="store_true", help="Run the driver in C++ mode (clang++)"
    )
    parser.add_argument(
        "driver_args",
        nargs="*",
        metavar="ARG",
        help="Compiler driver arguments (put them after '--')",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the kushtc CLI."""
    parser = argparse.ArgumentParser(
        prog="kushtc",
        description="Compose linker commands and search paths for the Kush target.",
        epilog="Run 'kushtc <command> --help' for command-specific help.",
    )
    from kushtc import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # kushtc link
    link_parser = subparsers.add_parser("link", help="Print the linker command")
    add_common_args(link_parser)
    link_parser.add_argument(
        "--json", action="store_true", help="Print the command as JSON"
    )
    link_parser.add_argument(
        "--explain", action="store_true", help="Print the rules that fired to stderr"
    )
    add_driver_args(link_parser)
    link_parser.set_defaults(func=cmd_link)

    # kushtc cc1
    cc1_parser = subparsers.add_parser(
        "cc1", help="Print target compile options and include arguments"
    )
    add_common_args(cc1_parser)
    add_driver_args(cc1_parser)
    cc1_parser.set_defaults(func=cmd_cc1)

    # kushtc paths
    paths_parser = subparsers.add_parser("paths", help="Print search paths")
    add_common_args(paths_parser)
    paths_parser.add_argument("--sysroot", metavar="DIR", help="Target SDK root")
    paths_parser.add_argument("--target", metavar="TRIPLE", help="Target triple")
    paths_parser.set_defaults(func=cmd_paths)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
