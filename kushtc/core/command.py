# SPDX-License-Identifier: MIT
"""Link command value type and shell formatting."""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


@dataclass(frozen=True)
class LinkCommand:
    """An immutable linker invocation.

    Attributes:
        executable: Linker program (path or bare name to look up on PATH).
        args: Ordered argument tokens, passed verbatim to the linker.
    """

    executable: str
    args: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))

    @property
    def argv(self) -> list[str]:
        """Full argument vector, executable first."""
        return [self.executable, *self.args]

    def to_shell(self, shell: str = "auto") -> str:
        """Render the command as a single quoted shell string."""
        return to_shell_command(self.argv, shell=shell)

    def to_dict(self) -> dict[str, Any]:
        return {"executable": self.executable, "args": list(self.args)}

    def __contains__(self, token: object) -> bool:
        return token in self.args

    def __iter__(self) -> Iterator[str]:
        return iter(self.args)

    def __len__(self) -> int:
        return len(self.args)


# Characters that force quoting in each shell
_POSIX_SPECIAL = frozenset(" \t\n\"'\\$`!*?[](){}|&;<>")
_CMD_SPECIAL = frozenset(' \t"^&|<>()%!')


def to_shell_command(tokens: Sequence[str], shell: str = "auto") -> str:
    """Join tokens into one command line for a shell.

    Args:
        tokens: Command tokens.
        shell: "auto" (cmd on Windows, bash elsewhere), "bash" or "cmd".

    Raises:
        ValueError: For any other shell name.
    """
    if shell == "auto":
        shell = "cmd" if platform.system() == "Windows" else "bash"
    if shell == "bash":
        quote = _quote_posix
    elif shell == "cmd":
        quote = _quote_cmd
    else:
        raise ValueError(f"unsupported shell: {shell}")
    return " ".join(quote(str(token)) for token in tokens)


def _quote_posix(token: str) -> str:
    if not token:
        return "''"
    if _POSIX_SPECIAL.isdisjoint(token):
        return token
    if "'" not in token:
        return f"'{token}'"
    # Double quotes still expand these four
    for char in ("\\", '"', "$", "`"):
        token = token.replace(char, "\\" + char)
    return f'"{token}"'


def _quote_cmd(token: str) -> str:
    if token and _CMD_SPECIAL.isdisjoint(token):
        return token
    return '"' + token.replace('"', '""') + '"'
