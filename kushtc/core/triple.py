# SPDX-License-Identifier: MIT
"""Target triple parsing.

Triples follow the usual ``arch-vendor-os[-environment]`` shape, e.g.
``x86_64-unknown-kush``. Only the pieces the Kush toolchain needs are
interpreted: the OS (to pick the toolchain) and the architecture (to name
compiler-rt archives).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_TRIPLE = "x86_64-unknown-kush"

_X86_32 = re.compile(r"^i[3-6]86$")


@dataclass(frozen=True)
class Triple:
    """A parsed target triple.

    Attributes:
        arch: CPU architecture (e.g. 'x86_64', 'aarch64').
        vendor: Vendor field, 'unknown' when absent.
        os: Operating system, 'unknown' when absent.
        environment: Optional ABI/environment suffix.
    """

    arch: str
    vendor: str = "unknown"
    os: str = "unknown"
    environment: str = ""

    @classmethod
    def parse(cls, text: str) -> Triple:
        """Parse a triple string.

        Missing components default to 'unknown'. Components are
        lower-cased; anything past the fourth dash stays in environment.

        >>> Triple.parse("x86_64-unknown-kush").os
        'kush'
        >>> Triple.parse("aarch64-kush").vendor
        'unknown'
        """
        parts = text.strip().lower().split("-", 3)
        arch = parts[0] or "unknown"
        if len(parts) == 2:
            # arch-os shorthand
            return cls(arch=arch, os=parts[1] or "unknown")
        vendor = parts[1] if len(parts) > 1 and parts[1] else "unknown"
        os_name = parts[2] if len(parts) > 2 and parts[2] else "unknown"
        env = parts[3] if len(parts) > 3 else ""
        return cls(arch=arch, vendor=vendor, os=os_name, environment=env)

    @property
    def compiler_rt_arch(self) -> str:
        """Architecture name used in compiler-rt library file names."""
        if _X86_32.match(self.arch):
            return "i386"
        if self.arch.startswith("armv") or self.arch == "arm":
            return "arm"
        return self.arch

    def __str__(self) -> str:
        base = f"{self.arch}-{self.vendor}-{self.os}"
        if self.environment:
            return f"{base}-{self.environment}"
        return base
