# SPDX-License-Identifier: MIT
"""Tests for kushtc.core.config."""

import pytest

from kushtc.core.config import BuildConfiguration, LinkMode, LTOMode


class TestLTOMode:
    def test_from_name(self):
        assert LTOMode.from_name("thin") is LTOMode.THIN
        assert LTOMode.from_name("full") is LTOMode.FULL

    def test_from_name_invalid(self):
        with pytest.raises(ValueError):
            LTOMode.from_name("fat")


class TestBuildConfiguration:
    def test_defaults(self):
        config = BuildConfiguration()
        assert config.link_mode is LinkMode.DYNAMIC
        assert not config.is_static
        assert not config.is_pie
        assert not config.uses_lto
        assert config.output == "a.out"
        assert config.sysroot == ""
        assert config.use_init_array is None

    def test_lists_become_tuples(self):
        config = BuildConfiguration(
            inputs=["a.o"],  # type: ignore[arg-type]
            library_paths=["/l"],  # type: ignore[arg-type]
        )
        assert config.inputs == ("a.o",)
        assert config.library_paths == ("/l",)
        hash(config)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            BuildConfiguration().shared = True  # type: ignore[misc]

    @pytest.mark.parametrize(
        ("shared", "pie", "pie_default", "expected"),
        [
            (False, False, False, False),
            (False, True, False, True),
            (False, False, True, True),
            (True, True, False, False),
            (True, False, True, False),
        ],
    )
    def test_is_pie(self, shared, pie, pie_default, expected):
        config = BuildConfiguration(shared=shared, pie=pie, pie_default=pie_default)
        assert config.is_pie is expected

    def test_replace(self):
        base = BuildConfiguration()
        changed = base.replace(link_mode=LinkMode.STATIC)
        assert changed.is_static
        assert not base.is_static

    def test_target(self):
        config = BuildConfiguration(triple="i686-unknown-kush")
        assert config.target.compiler_rt_arch == "i386"

    def test_uses_lto(self):
        assert BuildConfiguration(lto=LTOMode.THIN).uses_lto
