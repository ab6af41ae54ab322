# SPDX-License-Identifier: MIT
"""User-facing diagnostics.

Some configuration mistakes are not fatal: an unsupported runtime library
name is reported, the supported default is substituted and the build goes
on. Those reports are collected by a DiagnosticEngine so callers (the CLI,
tests) can inspect them after a command was built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class Severity(Enum):
    """Diagnostic severity."""

    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """A single reported problem.

    Attributes:
        severity: Warning or error.
        message: Human-readable description.
    """

    severity: Severity
    message: str

    def __str__(self) -> str:
        return f"{self.severity.value}: {self.message}"


class DiagnosticEngine:
    """Collects diagnostics and forwards them to the logger.

    Example:
        diags = DiagnosticEngine()
        diags.error("invalid runtime library name in argument '-rtlib=libgcc'")
        if diags.has_errors:
            ...
    """

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    def report(self, severity: Severity, message: str) -> Diagnostic:
        """Record a diagnostic and log it."""
        diag = Diagnostic(severity, message)
        self._diagnostics.append(diag)
        if severity is Severity.ERROR:
            logger.error("%s", message)
        else:
            logger.warning("%s", message)
        return diag

    def error(self, message: str) -> Diagnostic:
        return self.report(Severity.ERROR, message)

    def warning(self, message: str) -> Diagnostic:
        return self.report(Severity.WARNING, message)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._diagnostics if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._diagnostics if d.severity is Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self._diagnostics)

    def clear(self) -> None:
        self._diagnostics.clear()

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __repr__(self) -> str:
        return (
            f"DiagnosticEngine(errors={len(self.errors)}, "
            f"warnings={len(self.warnings)})"
        )
