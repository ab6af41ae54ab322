# SPDX-License-Identifier: MIT
"""Custom exceptions for kushtc.

All kushtc exceptions inherit from KushtcError. Errors that a user can
fix by changing the build configuration derive from ConfigurationError;
errors that indicate a misconfigured toolchain adapter derive from
InternalError and should never be caught by callers.
"""

from __future__ import annotations


class KushtcError(Exception):
    """Base class for all kushtc exceptions.

    Attributes:
        message: The error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(KushtcError):
    """Invalid build configuration.

    Raised when a configuration cannot produce a command at all, e.g.
    link-time optimization requested without any inputs.
    """


class MissingOptionValueError(ConfigurationError):
    """A driver option that takes a value was given none.

    Attributes:
        option: The option spelling, e.g. '-o'.
    """

    def __init__(self, option: str) -> None:
        self.option = option
        super().__init__(f"argument to '{option}' is missing (expected 1 value)")


class UnsupportedTargetError(ConfigurationError):
    """No toolchain handles the requested target triple.

    Attributes:
        triple: The target triple as given.
    """

    def __init__(self, triple: str) -> None:
        self.triple = triple
        super().__init__(f"unsupported target triple: {triple}")


class InternalError(KushtcError):
    """An internal invariant was violated."""


class UnsupportedStdlibError(InternalError):
    """The C++ standard library kind cannot be used on this platform.

    Attributes:
        kind: The standard library kind that was requested.
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"unsupported C++ standard library: {kind}")
