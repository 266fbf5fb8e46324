"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence
from typing import IO, Optional

from minishell.environment import Environment
from minishell.errors import ShellExit, cd_no_such_file

_LONG_MAX = 2**63 - 1
_SIZE_MOD = 2**64
_LONG_MIN_STRLEN = 20
_DIGITS = "0123456789"


def _is_echo_option(word: str) -> bool:
    """Return True for a word that echo takes as its ``-n`` option."""
    if word == "":
        return False
    rest = word
    if word.startswith("-n"):
        if len(word) <= 2:
            return True
        rest = word[2:]
    return rest.lstrip("n") == ""


def mini_echo(args: Sequence[str], out: Optional[IO[str]] = None) -> int:
    """Print the arguments separated by spaces.

    Leading ``-n`` options suppress the final newline.  Without them an
    empty argument is not followed by a separating space.
    """
    out = out or sys.stdout
    if not args:
        out.write("\n")
        return 0
    if _is_echo_option(args[0]):
        words = list(args)
        while words and _is_echo_option(words[0]):
            words.pop(0)
        out.write(" ".join(words))
        return 0
    *head, last = args
    out.write("".join(word + " " if word != "" else word for word in head))
    out.write(f"{last}\n")
    return 0


def _current_directory() -> str:
    try:
        return os.getcwd()
    except OSError:
        return ""


def mini_cd(
    args: Sequence[str], env: Environment, out: Optional[IO[str]] = None
) -> int:
    """Change the working directory and update ``OLDPWD`` and ``PWD``.

    With no argument the directory is ``$HOME``; ``-`` means ``$OLDPWD``,
    which is printed.
    """
    out = out or sys.stdout
    old_pwd = _current_directory()
    if not args:
        path = env.get("HOME")
        if path is None:
            out.write("minishell: cd: HOME not set\n")
            return 1
    elif args[0] == "-":
        path = env.get("OLDPWD")
        if path is None:
            out.write("minishell: cd: OLDPWD not set\n")
            return 1
        out.write(f"{path}\n")
    else:
        path = args[0]
    try:
        os.chdir(path)
    except OSError as exc:
        cd_no_such_file("cd", path, exc, out)
        return 1
    env.set("OLDPWD", old_pwd)
    env.set("PWD", _current_directory())
    return 0


def mini_env(
    args: Sequence[str], env: Optional[Environment], out: Optional[IO[str]] = None
) -> int:
    """Print every variable as ``NAME=VALUE``.

    Repeated ``env`` words are skipped.  An option other than ``--`` makes
    the command do nothing; any other argument is reported as missing.
    """
    out = out or sys.stdout
    if env is None:
        return 1
    remaining = list(args)
    while remaining and remaining[0] == "env":
        remaining.pop(0)
    if remaining:
        first = remaining[0]
        if first.startswith("--"):
            if first != "--":
                return 0
        elif first == "-":
            return 0
        else:
            out.write(f"env: {first}: {os.strerror(2)}\n")
            return 127
    for name, value in env.items():
        out.write(f"{name}={value}\n")
    return 0


def _is_numeric(text: str) -> bool:
    body = text[1:] if text[:1] in ("+", "-") else text
    return all(c in _DIGITS for c in body)


def _fits_long(text: str) -> bool:
    """Return True if *text* is within the range a long can hold."""
    if len(text) > _LONG_MIN_STRLEN:
        return False
    negative = text.startswith("-")
    body = text[1:] if text[:1] in ("+", "-") else text
    num = 0
    for c in body:
        if c not in _DIGITS:
            break
        num = (num * 10 + int(c)) % _SIZE_MOD
    if negative:
        return (num - 1) % _SIZE_MOD <= _LONG_MAX
    return num <= _LONG_MAX


def mini_exit(
    args: Sequence[str], err: Optional[IO[str]] = None, is_parent: bool = True
) -> int:
    """Leave the shell by raising :class:`ShellExit`.

    A non-numeric or out-of-range argument exits with 255.  More than one
    argument is an error: nothing exits and 1 is returned.
    """
    err = err or sys.stderr
    if is_parent:
        err.write("exit\n")
    if not args:
        raise ShellExit(0)
    word = args[0]
    if not _is_numeric(word) or not _fits_long(word):
        err.write(f"minishell: exit: {word}: numeric argument required\n")
        raise ShellExit(255)
    if len(args) > 1:
        err.write("minishell: exit: too many arguments\n")
        return 1
    body = word.lstrip("+")
    value = int(body) if body not in ("", "-") else 0
    raise ShellExit(value % 256)


def mini_pwd(out: Optional[IO[str]] = None) -> int:
    """Print the current working directory."""
    out = out or sys.stdout
    try:
        cwd = os.getcwd()
    except OSError as exc:
        sys.stderr.write(f"pwd: {exc.strerror}\n")
        return 1
    out.write(f"{cwd}\n")
    return 0


def mini_unset(args: Sequence[str], env: Optional[Environment]) -> int:
    """Remove each named variable; unknown names are ignored."""
    if not args or env is None:
        return 0
    for name in args:
        env.unset(name)
    return 0


def run_builtin(
    argv: Sequence[str],
    env: Environment,
    out: Optional[IO[str]] = None,
    err: Optional[IO[str]] = None,
    is_parent: bool = True,
) -> Optional[int]:
    """Run *argv* if it names a builtin and return its status.

    Returns 0 for an empty command and None when the command is not a
    builtin.
    """
    if not argv:
        return 0
    name, args = argv[0], list(argv[1:])
    handlers: dict[str, Callable[[], int]] = {
        "exit": lambda: mini_exit(args, err, is_parent),
        "pwd": lambda: mini_pwd(out),
        "cd": lambda: mini_cd(args, env, out),
        "env": lambda: mini_env(args, env, out),
        "unset": lambda: mini_unset(args, env),
        "echo": lambda: mini_echo(args, out),
    }
    handler = handlers.get(name)
    if handler is None:
        return None
    return handler()