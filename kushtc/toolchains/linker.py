# SPDX-License-Identifier: MIT
"""Kush linker command construction.

The linker command is assembled by walking LINK_RULES in order. Each rule
pairs a predicate with an effect; the effect returns the tokens the rule
contributes. Order matters to the Kush linker (startup objects before
inputs, libraries after inputs), so the table order is the command order.

The static and dynamic binding rules have complementary predicates, so
exactly one of them fires for any configuration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from kushtc.core.command import LinkCommand
from kushtc.core.config import LTOMode
from kushtc.core.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from kushtc.core.config import BuildConfiguration
    from kushtc.toolchains.kush import KushToolchain

logger = logging.getLogger(__name__)

DYNAMIC_LINKER = "/sbin/ldyldo"

CRT_STATIC = "crt0T.o"
CRT_SHARED = "crt0S.o"
CRT_DEFAULT = "crt0.o"
CRT_INIT = "crti.o"

MATH_LIBRARY = "-lopenlibm"
C_LIBRARY = "-lc"


@dataclass(frozen=True)
class LinkContext:
    """Inputs available to every rule.

    Attributes:
        config: The build configuration being linked.
        toolchain: Toolchain owning the path tables and library decisions.
        linker: Resolved linker program.
    """

    config: BuildConfiguration
    toolchain: KushToolchain
    linker: str

    @property
    def is_pie(self) -> bool:
        return self.config.is_pie


@dataclass(frozen=True)
class LinkRule:
    """One step of the link command.

    Attributes:
        name: Rule name, reported by KushLinker.fired_rules().
        applies: Predicate deciding whether the rule fires.
        emit: Produces the tokens the rule contributes.
    """

    name: str
    applies: Callable[[LinkContext], bool]
    emit: Callable[[LinkContext], Iterable[str]]


# =============================================================================
# Predicates
# =============================================================================


def _always(ctx: LinkContext) -> bool:
    return True


def _is_static(ctx: LinkContext) -> bool:
    return ctx.config.is_static


def _is_dynamic(ctx: LinkContext) -> bool:
    return not ctx.config.is_static


def _wants_startfiles(ctx: LinkContext) -> bool:
    return not (ctx.config.nostdlib or ctx.config.nostartfiles)


def _wants_default_libs(ctx: LinkContext) -> bool:
    return not (ctx.config.nostdlib or ctx.config.nodefaultlibs)


# =============================================================================
# Effects
# =============================================================================


def _claim_link_only_flags(ctx: LinkContext) -> Iterable[str]:
    # -g, -emit-llvm and -w mean nothing to the linker; reading them here
    # marks them as consumed without adding output.
    config = ctx.config
    claimed = [
        name
        for name, present in (
            ("-g", config.debug),
            ("-emit-llvm", config.emit_llvm),
            ("-w", config.suppress_warnings),
        )
        if present
    ]
    if claimed:
        logger.debug("Ignoring %s at link time", ", ".join(claimed))
    return ()


def _relro(ctx: LinkContext) -> Iterable[str]:
    # Kush has no RELRO support yet
    return ("-znorelro",)


def _sysroot(ctx: LinkContext) -> Iterable[str]:
    return (f"--sysroot={ctx.config.sysroot}",)


def _pie(ctx: LinkContext) -> Iterable[str]:
    return ("-pie",)


def _strip(ctx: LinkContext) -> Iterable[str]:
    return ("-s",)


def _static_binding(ctx: LinkContext) -> Iterable[str]:
    return ("-Bstatic",)


def _dynamic_binding(ctx: LinkContext) -> Iterable[str]:
    config = ctx.config
    args: list[str] = []
    if config.rdynamic:
        args.append("-export-dynamic")
    if config.shared:
        args.append("-Bshareable")
    else:
        args.extend(["-dynamic-linker", DYNAMIC_LINKER])
    args.append("--enable-new-dtags")
    return args


def _output(ctx: LinkContext) -> Iterable[str]:
    return ("-o", ctx.config.output)


def select_crt_object(config: BuildConfiguration) -> str:
    """The single startup object for a configuration."""
    if config.is_static:
        return CRT_STATIC
    if config.shared or config.is_pie:
        return CRT_SHARED
    return CRT_DEFAULT


def _startfiles(ctx: LinkContext) -> Iterable[str]:
    toolchain = ctx.toolchain
    args = [toolchain.get_file_path(select_crt_object(ctx.config))]
    # Static executables also need the _init/_fini prologue
    if ctx.config.is_static:
        args.append(toolchain.get_file_path(CRT_INIT))
    return args


def _search_args(ctx: LinkContext) -> Iterable[str]:
    args = [f"-L{path}" for path in ctx.config.library_paths]
    for symbol in ctx.config.undefined:
        args.extend(["-u", symbol])
    return args


def _library_paths(ctx: LinkContext) -> Iterable[str]:
    return [f"-L{path}" for path in ctx.toolchain.paths.library_paths]


def _lto_opt_level(opt_level: str | None) -> str:
    if opt_level is None:
        return "2"
    if opt_level in ("0", "1", "2", "3"):
        return opt_level
    if opt_level in ("s", "z", "g"):
        return "2"
    # -Ofast and -O4 and above
    return "3"


def _uses_lld(linker: str) -> bool:
    stem = Path(linker).name
    return stem in ("ld.lld", "lld") or stem.startswith("ld.lld")


def _lto(ctx: LinkContext) -> Iterable[str]:
    config = ctx.config
    args: list[str] = []
    if not _uses_lld(ctx.linker):
        # bfd and gold load LTO through the LLVM plugin
        install_dir = Path(ctx.toolchain.settings.install_dir)
        plugin = install_dir.parent / "lib" / "LLVMgold.so"
        args.extend(["-plugin", str(plugin)])
    args.append(f"-plugin-opt=O{_lto_opt_level(config.opt_level)}")
    if config.lto is LTOMode.THIN:
        args.append("-plugin-opt=thinlto")
        if config.lto_jobs:
            args.append(f"-plugin-opt=jobs={config.lto_jobs}")
    return args


def _inputs(ctx: LinkContext) -> Iterable[str]:
    return ctx.config.inputs


def _default_libs(ctx: LinkContext) -> Iterable[str]:
    config = ctx.config
    toolchain = ctx.toolchain
    args: list[str] = []

    # Reassert static binding for the libraries that follow
    if config.is_static:
        args.append("-Bstatic")

    if config.cxx and toolchain.should_link_cxx_stdlib(config):
        only_libcxx_static = config.static_libstdcxx and not config.is_static
        args.extend(["--push-state", "--as-needed"])
        if only_libcxx_static:
            args.append("-Bstatic")
        args.extend(toolchain.add_cxx_stdlib_lib_args(config))
        if only_libcxx_static:
            args.append("-Bdynamic")
        # The math library is always OpenLibm
        args.append(MATH_LIBRARY)
        args.append("--pop-state")

    args.extend(toolchain.add_runtime_lib_args(config))

    if not config.nolibc:
        args.append(C_LIBRARY)
    return args


LINK_RULES: tuple[LinkRule, ...] = (
    LinkRule("claim", _always, _claim_link_only_flags),
    LinkRule("relro", _always, _relro),
    LinkRule("sysroot", lambda ctx: bool(ctx.config.sysroot), _sysroot),
    LinkRule("pie", lambda ctx: ctx.is_pie, _pie),
    LinkRule("strip", lambda ctx: ctx.config.strip, _strip),
    LinkRule("static-binding", _is_static, _static_binding),
    LinkRule("dynamic-binding", _is_dynamic, _dynamic_binding),
    LinkRule("output", _always, _output),
    LinkRule("startfiles", _wants_startfiles, _startfiles),
    LinkRule("search-args", _always, _search_args),
    LinkRule("library-paths", _always, _library_paths),
    LinkRule("lto", lambda ctx: ctx.config.uses_lto, _lto),
    LinkRule("inputs", _always, _inputs),
    LinkRule("default-libs", _wants_default_libs, _default_libs),
)


class KushLinker:
    """Linker tool for the Kush toolchain.

    Example:
        toolchain = KushToolchain(sysroot="/sdk")
        command = toolchain.build_linker().construct_job(config)
        subprocess.run(command.argv)
    """

    def __init__(
        self, toolchain: KushToolchain, rules: tuple[LinkRule, ...] = LINK_RULES
    ) -> None:
        self._toolchain = toolchain
        self._rules = rules

    @property
    def toolchain(self) -> KushToolchain:
        return self._toolchain

    @property
    def rules(self) -> tuple[LinkRule, ...]:
        return self._rules

    def construct_job(self, config: BuildConfiguration) -> LinkCommand:
        """Build the linker invocation for one link action.

        A configuration naming a different sysroot than the toolchain is
        linked against that sysroot's path tables.

        Args:
            config: The configuration to link.

        Returns:
            The complete, immutable link command.

        Raises:
            ConfigurationError: If LTO is requested without inputs.
        """
        ctx = self._context(config)
        args: list[str] = []
        for rule in self._rules:
            if rule.applies(ctx):
                args.extend(rule.emit(ctx))

        command = LinkCommand(executable=ctx.linker, args=tuple(args))
        logger.debug("Link command: %s", command.to_shell("bash"))
        return command

    def fired_rules(self, config: BuildConfiguration) -> list[str]:
        """Names of the rules that fire for a configuration, in order."""
        ctx = self._context(config)
        return [rule.name for rule in self._rules if rule.applies(ctx)]

    def _context(self, config: BuildConfiguration) -> LinkContext:
        self._validate(config)
        toolchain = self._toolchain
        if config.sysroot != toolchain.sysroot:
            toolchain = toolchain.with_sysroot(config.sysroot)
        return LinkContext(
            config=config,
            toolchain=toolchain,
            linker=toolchain.get_linker_path(config),
        )

    def _validate(self, config: BuildConfiguration) -> None:
        if config.uses_lto and not config.inputs:
            raise ConfigurationError(
                f"{config.lto.value} LTO requires at least one input file"
            )

    def __repr__(self) -> str:
        return f"KushLinker({self._toolchain!r})"
