import errno
import io
import os

from minishell.errors import (
    CommandNotFound,
    ShellExit,
    cd_no_such_file,
    export_not_a_valid,
    syntax_error,
)
from minishell.types import Context


def test_syntax_error_updates_context():
    ctx = Context()
    err = io.StringIO()
    syntax_error(ctx, err)
    assert ctx.status == 258
    assert ctx.sys_error is True
    assert err.getvalue() == "minishell: syntax error\n"


def test_syntax_error_defaults_to_stderr(capsys):
    ctx = Context()
    syntax_error(ctx)
    assert capsys.readouterr().err == "minishell: syntax error\n"


def test_cd_no_such_file_with_oserror():
    out = io.StringIO()
    error = OSError(errno.ENOENT, os.strerror(errno.ENOENT))
    cd_no_such_file("cd", "nowhere", error, out)
    assert out.getvalue() == f"minishell: cd: nowhere: {os.strerror(errno.ENOENT)}\n"


def test_cd_no_such_file_with_errno_number():
    out = io.StringIO()
    cd_no_such_file("cd", "f", errno.ENOTDIR, out)
    assert out.getvalue().endswith(os.strerror(errno.ENOTDIR) + "\n")
    assert out.getvalue().startswith("minishell: cd: f: ")


def test_cd_no_such_file_default_error():
    out = io.StringIO()
    cd_no_such_file("cd", "gone", out=out)
    assert os.strerror(errno.ENOENT) in out.getvalue()


def test_export_not_a_valid():
    out = io.StringIO()
    export_not_a_valid("1A", out)
    assert out.getvalue() == "minishell: export: 1A: not a valid identifier\n"


def test_shell_exit_carries_status():
    error = ShellExit(3)
    assert error.status == 3


def test_command_not_found():
    error = CommandNotFound("nosuchcmd")
    assert isinstance(error, ShellExit)
    assert error.status == 127
    assert str(error) == "minishell: nosuchcmd: command not found"
    assert error.cmd == "nosuchcmd"