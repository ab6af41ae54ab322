# SPDX-License-Identifier: MIT
"""Tests for kushtc.toolchains.frontend."""

import pytest

from kushtc.core.config import BuildConfiguration
from kushtc.core.errors import UnsupportedStdlibError
from kushtc.toolchains.frontend import (
    compose_cxx_stdlib_include_paths,
    compose_system_include_paths,
    compose_target_compile_options,
    include_args,
)
from kushtc.toolchains.runtime import CXXStdlibType

RESOURCE_DIR = "/usr/lib/clang/17"


class TestTargetCompileOptions:
    def test_default(self):
        assert compose_target_compile_options(BuildConfiguration()) == (
            "-ffunction-sections",
            "-fdata-sections",
        )

    def test_init_array_explicitly_disabled(self):
        config = BuildConfiguration(use_init_array=False)
        assert compose_target_compile_options(config) == (
            "-fno-use-init-array",
            "-ffunction-sections",
            "-fdata-sections",
        )

    def test_init_array_enabled_adds_nothing(self):
        config = BuildConfiguration(use_init_array=True)
        assert "-fno-use-init-array" not in compose_target_compile_options(config)


class TestSystemIncludePaths:
    def test_with_sysroot(self):
        config = BuildConfiguration(sysroot="/sdk")
        assert compose_system_include_paths(config, RESOURCE_DIR) == (
            "/usr/lib/clang/17/include",
            "/sdk/System/Includes",
            "/sdk/Local/Includes",
        )

    def test_without_sysroot(self):
        paths = compose_system_include_paths(BuildConfiguration(), RESOURCE_DIR)
        assert paths == ("/usr/lib/clang/17/include",)

    def test_nostdinc(self):
        config = BuildConfiguration(sysroot="/sdk", nostdinc=True)
        assert compose_system_include_paths(config, RESOURCE_DIR) == ()

    def test_nobuiltininc(self):
        config = BuildConfiguration(sysroot="/sdk", nobuiltininc=True)
        assert compose_system_include_paths(config, RESOURCE_DIR) == (
            "/sdk/System/Includes",
            "/sdk/Local/Includes",
        )

    def test_nostdlibinc_keeps_builtin_headers(self):
        config = BuildConfiguration(sysroot="/sdk", nostdlibinc=True)
        assert compose_system_include_paths(config, RESOURCE_DIR) == (
            "/usr/lib/clang/17/include",
        )


class TestCxxStdlibIncludePaths:
    def test_libcxx(self):
        config = BuildConfiguration(sysroot="/sdk", cxx=True)
        paths = compose_cxx_stdlib_include_paths(config, CXXStdlibType.LIBCXX)
        assert paths == ("/sdk/System/Includes/c++/v1",)

    def test_without_sysroot(self):
        config = BuildConfiguration(cxx=True)
        assert compose_cxx_stdlib_include_paths(config, CXXStdlibType.LIBCXX) == ()

    def test_libstdcxx_is_fatal(self):
        config = BuildConfiguration(sysroot="/sdk", cxx=True)
        with pytest.raises(UnsupportedStdlibError):
            compose_cxx_stdlib_include_paths(config, CXXStdlibType.LIBSTDCXX)


class TestIncludeArgs:
    def test_flag_per_path(self):
        assert include_args(["/a", "/b"]) == (
            "-internal-isystem",
            "/a",
            "-internal-isystem",
            "/b",
        )

    def test_empty(self):
        assert include_args([]) == ()
