# SPDX-License-Identifier: MIT
"""Toolchain settings for kushtc.

Settings describe where the compiler is installed and which linker it
drives. They come from, lowest to highest precedence:
    1. Built-in defaults
    2. A JSON settings file
    3. Environment variables (KUSHTC_INSTALL_DIR, KUSHTC_DRIVER_DIR,
       KUSHTC_RESOURCE_DIR, KUSHTC_LINKER, KUSHTC_TRIPLE)

Example settings file:
    {
        "install_dir": "/opt/kush/bin",
        "clang_version": "17",
        "linker": "ld.lld"
    }
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

from kushtc.core.errors import ConfigurationError
from kushtc.core.triple import DEFAULT_TRIPLE

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

ENV_PREFIX = "KUSHTC_"

# Settings keys that may be overridden from the environment
_ENV_KEYS = ("install_dir", "driver_dir", "resource_dir", "linker", "triple")


@dataclass(frozen=True)
class ToolchainSettings:
    """Installation-level settings shared by every build configuration.

    Attributes:
        install_dir: Directory holding the compiler driver and tools.
        driver_dir: Directory the driver was invoked from; defaults to
            install_dir.
        resource_dir: Compiler resource directory (builtin headers,
            compiler-rt); defaults to {install_dir}/../lib/clang/{version}.
        clang_version: Version component of the default resource directory.
        linker: Default linker program name.
        triple: Default target triple.
    """

    install_dir: str = "/usr/bin"
    driver_dir: str | None = None
    resource_dir: str | None = None
    clang_version: str = "17"
    linker: str = "ld.lld"
    triple: str = DEFAULT_TRIPLE

    @property
    def effective_driver_dir(self) -> str:
        return self.driver_dir or self.install_dir

    @property
    def effective_resource_dir(self) -> str:
        if self.resource_dir:
            return self.resource_dir
        return str(Path(self.install_dir).parent / "lib" / "clang" / self.clang_version)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ToolchainSettings:
        """Build settings from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                logger.debug("Ignoring unknown settings key: %s", key)
                continue
            kwargs[key] = None if value is None else str(value)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_config(path: Path | str) -> dict[str, Any]:
    """Load a saved settings file.

    Args:
        path: Path to the JSON file.

    Returns:
        Settings dict.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ConfigurationError: If the file cannot be read or is not a JSON object.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigurationError(f"cannot read settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"settings file {path} must contain a JSON object")
    return data


def load_settings(
    path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> ToolchainSettings:
    """Load toolchain settings from defaults, a file and the environment.

    Args:
        path: Optional JSON settings file.
        environ: Environment to read overrides from (default: os.environ).

    Returns:
        The merged settings.
    """
    if environ is None:
        environ = os.environ

    data: dict[str, Any] = {}
    if path is not None:
        data.update(load_config(path))
        logger.info("Loaded settings from %s", path)

    for key in _ENV_KEYS:
        env_name = f"{ENV_PREFIX}{key.upper()}"
        value = environ.get(env_name)
        if value:
            logger.debug("  %s=%s", env_name, value)
            data[key] = value

    return ToolchainSettings.from_dict(data)


def save_settings(settings: ToolchainSettings, path: Path | str) -> None:
    """Write settings to a JSON file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(settings.to_dict(), f, indent=2)
        f.write("\n")
