"""Running command trees: redirections, builtins, programs and pipelines."""

from __future__ import annotations

import contextlib
import errno
import os
import subprocess
import sys
from collections.abc import Iterator, Sequence
from typing import IO, Optional, Union

from minishell.builtins import run_builtin
from minishell.environment import Environment
from minishell.errors import CommandNotFound, ShellExit
from minishell.types import Ast, Context, NodeType, TokenType

_FILE_MODE = 0o644
_BUILTIN_NAMES = frozenset({"exit", "pwd", "cd", "env", "unset", "echo"})

_Launched = Union["subprocess.Popen[bytes]", int]


def is_executable(path: str) -> bool:
    """Return True if *path* exists and may be executed."""
    return os.access(path, os.F_OK) and os.access(path, os.X_OK)


def is_readable(path: str) -> bool:
    """Return True if *path* exists and may be read."""
    return os.access(path, os.F_OK) and os.access(path, os.R_OK)


def is_directory(path: str) -> bool:
    """Return True if *path* names an existing directory."""
    try:
        return os.path.isdir(path) and os.stat(path) is not None
    except OSError:
        return False


def resolve_path(cmd: str, path_env: Optional[str]) -> Optional[str]:
    """Return the first executable ``<dir>/<cmd>`` along *path_env*.

    Empty entries of the search path are ignored.  Returns None when
    there is no search path or nothing along it is executable.
    """
    if path_env is None:
        return None
    for directory in filter(None, path_env.split(":")):
        candidate = f"{directory}/{cmd}"
        if is_executable(candidate):
            return candidate
    return None


def get_path_type(cmd: Optional[str]) -> bool:
    """Return True if *cmd* contains a slash and so names a path.

    An empty command cannot be found at all.
    """
    if not cmd:
        raise CommandNotFound("")
    return "/" in cmd


def open_or_create_file(path: str) -> int:
    """Open *path* for writing, creating or truncating it; return the fd."""
    return os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _FILE_MODE)


def open_append_file(path: str) -> int:
    """Open *path* for appending, creating it if needed; return the fd."""
    return os.open(path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, _FILE_MODE)


def apply_redirects(ast: Ast) -> tuple[Optional[int], Optional[int]]:
    """Open the node's redirections in order.

    Returns the file descriptors that replace standard input and standard
    output, or None where a stream is not redirected.  A later redirection
    of the same stream replaces an earlier one.  A here-document file is
    removed once it is open.  On failure every descriptor opened so far is
    closed and the OSError is raised.
    """
    stdin_fd: Optional[int] = None
    stdout_fd: Optional[int] = None
    try:
        for redirect in ast.redirects:
            path = redirect.file if redirect.file is not None else ""
            if redirect.type in (TokenType.REDIR_IN, TokenType.REDIR_HEREDOC):
                fd = os.open(path, os.O_RDONLY)
                if stdin_fd is not None:
                    os.close(stdin_fd)
                stdin_fd = fd
                if redirect.type == TokenType.REDIR_HEREDOC:
                    with contextlib.suppress(OSError):
                        os.unlink(path)
            elif redirect.type in (TokenType.REDIR_OUT, TokenType.REDIR_APPEND):
                opener = (
                    open_or_create_file
                    if redirect.type == TokenType.REDIR_OUT
                    else open_append_file
                )
                fd = opener(path)
                if stdout_fd is not None:
                    os.close(stdout_fd)
                stdout_fd = fd
    except OSError:
        for fd in (stdin_fd, stdout_fd):
            if fd is not None:
                os.close(fd)
        raise
    return stdin_fd, stdout_fd


def _report(message: str) -> None:
    sys.stderr.write(message + "\n")
    sys.stderr.flush()


def _report_redirect_error(exc: OSError) -> None:
    name = exc.filename if exc.filename is not None else ""
    reason = exc.strerror or os.strerror(exc.errno or errno.ENOENT)
    _report(f"minishell: {name}: {reason}")


def _stat_errno(path: str) -> int:
    try:
        os.stat(path)
    except OSError as exc:
        return exc.errno or errno.ENOENT
    return errno.ENOENT


def _locate(cmd: str, env: Environment) -> str:
    """Find the program to run for *cmd*, raising ShellExit if there is none."""
    if get_path_type(cmd):
        if not os.access(cmd, os.F_OK):
            code, status = _stat_errno(cmd), 127
        elif not os.access(cmd, os.X_OK):
            code, status = errno.EACCES, 1
        elif is_directory(cmd):
            code, status = errno.EISDIR, 126
        else:
            return cmd
        raise ShellExit(status, f"minishell: {cmd}: {os.strerror(code)}")
    full_path = resolve_path(cmd, env.get("PATH"))
    if full_path is None:
        raise CommandNotFound(cmd)
    return full_path


def _launch(
    argv: Sequence[str],
    env: Environment,
    stdin_fd: Optional[int],
    stdout_fd: Optional[int],
) -> _Launched:
    """Start an external program, or return the status of failing to."""
    try:
        executable = _locate(argv[0], env)
    except ShellExit as exc:
        if exc.message:
            _report(exc.message)
        return exc.status
    sys.stdout.flush()
    try:
        return subprocess.Popen(
            list(argv),
            executable=executable,
            env=dict(env.items()),
            stdin=stdin_fd,
            stdout=stdout_fd,
        )
    except OSError:
        error = CommandNotFound(argv[0])
        _report(error.message or "")
        return error.status


def _wait(launched: _Launched) -> int:
    """Wait for a started program; a signal death reads as status 0."""
    if isinstance(launched, int):
        return launched
    returncode = launched.wait()
    return returncode & 0xFF if returncode >= 0 else 0


@contextlib.contextmanager
def _output(stdout_fd: Optional[int]) -> Iterator[IO[str]]:
    """Yield a text stream writing to *stdout_fd*, or to standard output."""
    if stdout_fd is None:
        try:
            yield sys.stdout
        finally:
            sys.stdout.flush()
        return
    stream = os.fdopen(os.dup(stdout_fd), "w")
    try:
        yield stream
    finally:
        stream.close()


def _words(ast: Ast) -> list[str]:
    return [token.word for token in ast.argv if token.word is not None]


def _run(
    argv: Sequence[str],
    env: Environment,
    stdin_fd: Optional[int],
    stdout_fd: Optional[int],
    is_parent: bool,
) -> int:
    if not argv:
        return 0
    if argv[0] in _BUILTIN_NAMES:
        with _output(stdout_fd) as out:
            status = run_builtin(argv, env, out, sys.stderr, is_parent)
        return status if status is not None else 0
    return _wait(_launch(argv, env, stdin_fd, stdout_fd))


def run_simple_cmd(argv: Sequence[str], env: Environment) -> int:
    """Run one command with the shell's own standard streams.

    Builtins run in the shell itself; ``exit`` raises ShellExit.  Other
    commands are looked up and started, and their exit status returned.
    """
    return _run(list(argv), env, None, None, is_parent=True)


def _execute_simple(ast: Ast, env: Environment) -> int:
    try:
        stdin_fd, stdout_fd = apply_redirects(ast)
    except OSError as exc:
        _report_redirect_error(exc)
        return 1
    try:
        return _run(_words(ast), env, stdin_fd, stdout_fd, is_parent=True)
    finally:
        for fd in (stdin_fd, stdout_fd):
            if fd is not None:
                os.close(fd)


def _pipeline_stages(ast: Optional[Ast]) -> list[Ast]:
    """Return the simple commands of a pipe tree from left to right."""
    if ast is None:
        return []
    if ast.type is NodeType.PIPE:
        return _pipeline_stages(ast.left) + _pipeline_stages(ast.right)
    return [ast]


def _copy_env(env: Environment) -> Environment:
    copy = Environment()
    for name, value in env.items():
        copy.set(name, value)
    return copy


def _run_builtin_stage(
    argv: Sequence[str], env: Environment, stdout_fd: Optional[int]
) -> int:
    """Run a builtin as one stage of a pipeline.

    It works on a copy of the environment and cannot change the shell's
    working directory, as if it ran in a process of its own.
    """
    stage_env = _copy_env(env)
    cwd = os.getcwd()
    try:
        with _output(stdout_fd) as out:
            status = run_builtin(argv, stage_env, out, sys.stderr, False)
        return status if status is not None else 0
    except ShellExit as exc:
        return exc.status
    except BrokenPipeError:
        return 0
    finally:
        with contextlib.suppress(OSError):
            os.chdir(cwd)


def _run_stage(
    node: Ast,
    env: Environment,
    stdin_fd: Optional[int],
    stdout_fd: Optional[int],
) -> _Launched:
    try:
        redir_in, redir_out = apply_redirects(node)
    except OSError as exc:
        _report_redirect_error(exc)
        return 1
    try:
        stdin = redir_in if redir_in is not None else stdin_fd
        stdout = redir_out if redir_out is not None else stdout_fd
        argv = _words(node)
        if not argv:
            return 0
        if argv[0] in _BUILTIN_NAMES:
            return _run_builtin_stage(argv, env, stdout)
        return _launch(argv, env, stdin, stdout)
    finally:
        for fd in (redir_in, redir_out):
            if fd is not None:
                os.close(fd)


def _execute_pipeline(ast: Ast, env: Environment) -> int:
    """Run every stage of a pipeline and return the last stage's status.

    Stages start from the last to the first, so each stage's reader is
    already running when it begins to write.
    """
    stages = _pipeline_stages(ast)
    if not stages:
        return 0
    pipes = [os.pipe() for _ in range(len(stages) - 1)]
    open_fds = {fd for pair in pipes for fd in pair}

    def close(fd: Optional[int]) -> None:
        if fd is not None and fd in open_fds:
            open_fds.discard(fd)
            os.close(fd)

    results: list[_Launched] = [0] * len(stages)
    try:
        for index in reversed(range(len(stages))):
            stdin_fd = pipes[index - 1][0] if index > 0 else None
            stdout_fd = pipes[index][1] if index < len(pipes) else None
            try:
                results[index] = _run_stage(stages[index], env, stdin_fd, stdout_fd)
            finally:
                close(stdin_fd)
                close(stdout_fd)
    finally:
        for fd in list(open_fds):
            close(fd)
    statuses = [_wait(launched) for launched in results]
    return statuses[-1]


def execute(ctx: Context) -> None:
    """Run the context's command tree and store its exit status.

    Nothing runs after an earlier failure, for an empty tree, or for a
    simple command without words.
    """
    ast = ctx.ast
    if ctx.sys_error or ast is None:
        return
    if ast.type is NodeType.CMD and (not ast.argv or ast.argv[0].word is None):
        return
    if ast.type is NodeType.PIPE:
        ctx.status = _execute_pipeline(ast, ctx.env)
    else:
        ctx.status = _execute_simple(ast, ctx.env)