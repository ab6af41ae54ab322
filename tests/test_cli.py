# SPDX-License-Identifier: MIT
"""Tests for kushtc CLI."""

from __future__ import annotations

import json
import logging

import pytest

from kushtc.cli import main, setup_logging
from kushtc.core.errors import UnsupportedStdlibError


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    """A settings file whose install dir holds no linker binary."""
    for key in ("INSTALL_DIR", "DRIVER_DIR", "RESOURCE_DIR", "LINKER", "TRIPLE"):
        monkeypatch.delenv(f"KUSHTC_{key}", raising=False)
    install_dir = tmp_path / "bin"
    install_dir.mkdir()
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"install_dir": str(install_dir), "resource_dir": "/rd"})
    )
    return str(path)


class TestSetupLogging:
    def test_levels(self, monkeypatch):
        calls = []
        monkeypatch.setattr(
            logging, "basicConfig", lambda **kw: calls.append(kw["level"])
        )
        setup_logging()
        setup_logging(verbose=True)
        setup_logging(debug=True)
        assert calls == [logging.WARNING, logging.INFO, logging.DEBUG]


class TestMain:
    def test_no_command(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "0.1.0" in capsys.readouterr().out


class TestLinkCommand:
    def test_static(self, settings_file, capsys):
        rc = main(["link", "-c", settings_file, "--", "-static", "-o", "hi", "hi.o"])
        assert rc == 0
        out = capsys.readouterr().out.strip()
        assert out == (
            "ld.lld -znorelro -Bstatic -o hi crt0T.o crti.o hi.o -Bstatic "
            "/rd/lib/kush/libclang_rt.builtins-x86_64.a -lc"
        )

    def test_json(self, settings_file, capsys):
        argv = ["link", "-c", settings_file, "--cxx", "--json"]
        rc = main([*argv, "--", "--sysroot=/sdk", "a.o"])
        assert rc == 0
        data = json.loads(capsys.readouterr().out)
        assert data["executable"] == "ld.lld"
        assert data["args"][:2] == ["-znorelro", "--sysroot=/sdk"]
        assert "-lc++" in data["args"]

    def test_explain(self, settings_file, capsys):
        rc = main(["link", "-c", settings_file, "--explain", "--", "a.o"])
        assert rc == 0
        err = capsys.readouterr().err
        assert "rules: claim, relro, dynamic-binding" in err

    def test_lto_without_inputs_fails(self, settings_file, capsys):
        assert main(["link", "-c", settings_file, "--", "-flto"]) == 1
        assert capsys.readouterr().out == ""

    def test_invalid_rtlib_still_prints_command(self, settings_file, capsys, caplog):
        """The runtime library error is reported, compiler-rt is linked anyway."""
        with caplog.at_level(logging.ERROR, logger="kushtc"):
            rc = main(["link", "-c", settings_file, "--", "-rtlib=libgcc", "a.o"])
        assert rc == 1
        out = capsys.readouterr().out
        assert "/rd/lib/kush/libclang_rt.builtins-x86_64.a -lc" in out
        assert "invalid runtime library name in argument '-rtlib=libgcc'" in (
            caplog.text
        )

    def test_unknown_option_is_only_a_warning(self, settings_file, capsys):
        rc = main(["link", "-c", settings_file, "--", "-fbogus", "a.o"])
        assert rc == 0
        assert "a.o" in capsys.readouterr().out

    def test_missing_option_value_fails(self, settings_file):
        assert main(["link", "-c", settings_file, "--", "a.o", "-o"]) == 1

    def test_unsupported_target_fails(self, settings_file):
        argv = ["link", "-c", settings_file, "--", "-target", "x86_64-linux"]
        assert main([*argv, "a.o"]) == 1

    def test_missing_settings_file(self, tmp_path):
        assert main(["link", "-c", str(tmp_path / "missing.json"), "--", "a.o"]) == 1

    def test_settings_triple_used_by_default(self, settings_file, monkeypatch, capsys):
        monkeypatch.setenv("KUSHTC_TRIPLE", "i686-unknown-kush")
        assert main(["link", "-c", settings_file, "--", "a.o"]) == 0
        assert "libclang_rt.builtins-i386.a" in capsys.readouterr().out


class TestCc1Command:
    def test_cxx(self, settings_file, capsys):
        rc = main(["cc1", "-c", settings_file, "--cxx", "--", "--sysroot=/sdk"])
        assert rc == 0
        out = capsys.readouterr().out.strip()
        assert out == (
            "-triple x86_64-unknown-kush -ffunction-sections -fdata-sections "
            "-internal-isystem /sdk/System/Includes/c++/v1 "
            "-internal-isystem /rd/include "
            "-internal-isystem /sdk/System/Includes "
            "-internal-isystem /sdk/Local/Includes"
        )

    def test_unknown_stdlib_still_prints_args(self, settings_file, capsys):
        argv = ["cc1", "-c", settings_file, "--cxx", "--", "--sysroot=/sdk"]
        assert main([*argv, "-stdlib=stlport"]) == 1
        assert "/sdk/System/Includes/c++/v1" in capsys.readouterr().out

    def test_libstdcxx_is_fatal(self, settings_file):
        with pytest.raises(UnsupportedStdlibError):
            main(["cc1", "-c", settings_file, "--cxx", "--", "-stdlib=libstdc++"])


class TestPathsCommand:
    def test_with_sysroot(self, settings_file, tmp_path, capsys):
        rc = main(["paths", "-c", settings_file, "--sysroot", "/sdk"])
        assert rc == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "programs:",
            f"  {tmp_path / 'bin'}",
            "libraries:",
            "  /sdk/System/Libraries",
            "  /sdk/Local/Libraries",
            "includes:",
            "  /sdk/System/Includes/c++/v1",
            "  /rd/include",
            "  /sdk/System/Includes",
            "  /sdk/Local/Includes",
        ]

    def test_without_sysroot(self, settings_file, capsys):
        assert main(["paths", "-c", settings_file]) == 0
        out = capsys.readouterr().out
        assert "libraries:\nincludes:\n  /rd/include\n" in out
