# SPDX-License-Identifier: MIT
"""Tests for kushtc.core.options."""

import pytest

from kushtc.core.config import LinkMode, LTOMode
from kushtc.core.diagnostics import DiagnosticEngine
from kushtc.core.errors import MissingOptionValueError
from kushtc.core.options import OPTION_TABLE, OptionKind, parse_driver_args


class TestOptionTable:
    def test_spellings_unique(self):
        spellings = [spec.spelling for spec in OPTION_TABLE]
        assert len(spellings) == len(set(spellings))

    def test_joined_spellings(self):
        kinds = {spec.spelling: spec.kind for spec in OPTION_TABLE}
        assert kinds["-rtlib="] is OptionKind.JOINED
        assert kinds["-L"] is OptionKind.JOINED_OR_SEPARATE
        assert kinds["-static"] is OptionKind.FLAG


class TestLinkModeFlags:
    def test_defaults(self):
        config = parse_driver_args([])
        assert config.link_mode is LinkMode.DYNAMIC
        assert not config.cxx

    def test_static(self):
        assert parse_driver_args(["-static"]).is_static

    def test_static_libstdcxx_is_not_static(self):
        config = parse_driver_args(["-static-libstdc++"])
        assert config.static_libstdcxx
        assert not config.is_static

    def test_shared_and_strip(self):
        config = parse_driver_args(["-shared", "-s", "-rdynamic"])
        assert config.shared
        assert config.strip
        assert config.rdynamic

    def test_last_pie_flag_wins(self):
        assert parse_driver_args(["-pie"]).pie
        assert not parse_driver_args(["-pie", "-no-pie"]).pie
        assert parse_driver_args(["-nopie", "-pie"]).pie

    def test_cxx_and_pie_default(self):
        config = parse_driver_args([], cxx=True, pie_default=True)
        assert config.cxx
        assert config.is_pie


class TestValuedOptions:
    def test_sysroot_joined_and_separate(self):
        assert parse_driver_args(["--sysroot=/sdk"]).sysroot == "/sdk"
        assert parse_driver_args(["--sysroot", "/sdk"]).sysroot == "/sdk"

    def test_target(self):
        assert parse_driver_args(["-target", "i686-kush"]).triple == "i686-kush"
        assert parse_driver_args(["--target=aarch64-kush"]).triple == "aarch64-kush"

    def test_output(self):
        assert parse_driver_args(["-o", "prog"]).output == "prog"
        assert parse_driver_args(["-oprog"]).output == "prog"

    def test_library_paths_and_undefined_accumulate(self):
        config = parse_driver_args(["-L/a", "-L", "/b", "-u", "main", "-ustart"])
        assert config.library_paths == ("/a", "/b")
        assert config.undefined == ("main", "start")

    def test_runtime_and_stdlib(self):
        config = parse_driver_args(
            ["-rtlib=compiler-rt", "-stdlib=libc++", "-fuse-ld=lld"]
        )
        assert config.rtlib == "compiler-rt"
        assert config.cxx_stdlib == "libc++"
        assert config.fuse_ld == "lld"

    def test_double_dash_spellings(self):
        config = parse_driver_args(["--rtlib", "libgcc", "--stdlib=libstdc++"])
        assert config.rtlib == "libgcc"
        assert config.cxx_stdlib == "libstdc++"

    @pytest.mark.parametrize("option", ["-o", "-L", "-target", "-Xlinker"])
    def test_missing_value(self, option):
        with pytest.raises(MissingOptionValueError) as exc_info:
            parse_driver_args(["a.o", option])
        assert exc_info.value.option == option


class TestLTOOptions:
    def test_flto(self):
        assert parse_driver_args(["-flto"]).lto is LTOMode.FULL
        assert parse_driver_args(["-flto=thin"]).lto is LTOMode.THIN
        assert parse_driver_args(["-flto=full"]).lto is LTOMode.FULL
        assert parse_driver_args(["-flto", "-fno-lto"]).lto is LTOMode.NONE

    def test_lto_jobs(self):
        config = parse_driver_args(["-flto=thin", "-flto-jobs=8"])
        assert config.lto is LTOMode.THIN
        assert config.lto_jobs == "8"

    def test_invalid_lto_mode(self):
        diags = DiagnosticEngine()
        config = parse_driver_args(["-flto=fat"], diagnostics=diags)
        assert config.lto is LTOMode.NONE
        assert [d.message for d in diags.errors] == [
            "unsupported argument 'fat' to option '-flto='"
        ]

    @pytest.mark.parametrize(
        ("arg", "level"), [("-O", "1"), ("-O0", "0"), ("-O3", "3"), ("-Os", "s")]
    )
    def test_opt_level(self, arg, level):
        assert parse_driver_args([arg]).opt_level == level


class TestSuppressionFlags:
    @pytest.mark.parametrize(
        ("flag", "field"),
        [
            ("-nostdlib", "nostdlib"),
            ("-nostartfiles", "nostartfiles"),
            ("-nodefaultlibs", "nodefaultlibs"),
            ("-nolibc", "nolibc"),
            ("-nostdinc", "nostdinc"),
            ("-nobuiltininc", "nobuiltininc"),
            ("-nostdlibinc", "nostdlibinc"),
            ("-nostdinc++", "nostdincxx"),
            ("-nostdlib++", "nostdlibxx"),
        ],
    )
    def test_flag_sets_field(self, flag, field):
        assert getattr(parse_driver_args([flag]), field) is True

    def test_init_array(self):
        assert parse_driver_args([]).use_init_array is None
        assert parse_driver_args(["-fno-use-init-array"]).use_init_array is False
        assert parse_driver_args(["-fuse-init-array"]).use_init_array is True


class TestInputs:
    def test_inputs_keep_order(self):
        config = parse_driver_args(
            ["a.o", "-lfoo", "-Wl,--gc-sections,-z,now", "-Xlinker", "-M", "b.o"]
        )
        assert config.inputs == (
            "a.o",
            "-lfoo",
            "--gc-sections",
            "-z",
            "now",
            "-M",
            "b.o",
        )

    def test_separate_library(self):
        assert parse_driver_args(["-l", "m"]).inputs == ("-lm",)

    def test_double_dash_ends_options(self):
        config = parse_driver_args(["-static", "--", "-weird.o", "x.o"])
        assert config.is_static
        assert config.inputs == ("-weird.o", "x.o")

    def test_stdin_dash_is_input(self):
        assert parse_driver_args(["-"]).inputs == ("-",)

    def test_claimed_flags(self):
        config = parse_driver_args(["-g", "-emit-llvm", "-w", "a.o"])
        assert config.debug
        assert config.emit_llvm
        assert config.suppress_warnings
        assert config.inputs == ("a.o",)

    def test_empty_engine_receives_diagnostics(self):
        diags = DiagnosticEngine()
        parse_driver_args(["-flto=fat", "-fbogus"], diagnostics=diags)
        assert len(diags) == 2
        assert diags.has_errors

    def test_unknown_option_warns(self):
        diags = DiagnosticEngine()
        config = parse_driver_args(["-fbogus", "a.o"], diagnostics=diags)
        assert config.inputs == ("a.o",)
        assert not diags.has_errors
        assert [d.message for d in diags.warnings] == [
            "argument unused during compilation: '-fbogus'"
        ]
