"""Error reporting for the shell and its builtins."""

from __future__ import annotations

import errno
import os
import sys
from typing import IO, TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from minishell.types import Context

SYNTAX_ERROR_STATUS = 258
COMMAND_NOT_FOUND_STATUS = 127


class ShellExit(Exception):
    """Raised when the shell, or a command run inside it, must exit."""

    def __init__(self, status: int, message: Optional[str] = None) -> None:
        super().__init__(message if message is not None else f"exit {status}")
        self.status = status
        self.message = message


class CommandNotFound(ShellExit):
    """Raised when a command cannot be found."""

    def __init__(self, cmd: str) -> None:
        super().__init__(
            COMMAND_NOT_FOUND_STATUS, f"minishell: {cmd}: command not found"
        )
        self.cmd = cmd


def syntax_error(ctx: Context, err: Optional[IO[str]] = None) -> None:
    """Report a syntax error and mark the context as failed."""
    ctx.status = SYNTAX_ERROR_STATUS
    ctx.sys_error = True
    (err or sys.stderr).write("minishell: syntax error\n")


def _describe(error: Union[OSError, int, str, None]) -> str:
    if error is None:
        return os.strerror(errno.ENOENT)
    if isinstance(error, int):
        return os.strerror(error)
    if isinstance(error, OSError):
        if error.strerror:
            return error.strerror
        if error.errno is not None:
            return os.strerror(error.errno)
    return str(error)


def cd_no_such_file(
    command: str,
    file: str,
    error: Union[OSError, int, str, None] = None,
    out: Optional[IO[str]] = None,
) -> None:
    """Report that *command* failed on *file* with the given error."""
    (out or sys.stdout).write(f"minishell: {command}: {file}: {_describe(error)}\n")


def export_not_a_valid(text: str, out: Optional[IO[str]] = None) -> None:
    """Report an invalid identifier given to export."""
    (out or sys.stdout).write(f"minishell: export: {text}: not a valid identifier\n")