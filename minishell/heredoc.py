"""Here-document collection into temporary files."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from typing import Optional

from minishell.expander import expand_variables, expand_word
from minishell.types import Context, Redirect, TokenType
from minishell.wordsplit import remove_quotes

HEREDOC_PREFIX = "/tmp/.HEREDOC"
HEREDOC_PROMPT = "> "
_INT_MAX = 2**31 - 1
_FILE_MODE = 0o644


def _prompt_lines(prompt: str = HEREDOC_PROMPT) -> Iterator[str]:
    """Yield lines typed at the terminal until end of input."""
    while True:
        try:
            yield input(prompt)
        except EOFError:
            return


def create_heredoc_file(prefix: str = HEREDOC_PREFIX) -> str:
    """Return the first name ``<prefix><n>`` that is not a readable file."""
    for number in range(_INT_MAX):
        name = f"{prefix}{number}"
        if not os.access(name, os.F_OK | os.R_OK):
            return name
    raise FileExistsError(f"no free here-document file for prefix {prefix!r}")


def write_heredoc(
    path: str,
    delimiter: str,
    lines: Iterable[str],
    ctx: Context,
    expand: bool = True,
) -> int:
    """Write *lines* to *path* until a line equal to *delimiter*.

    Each line is written with a trailing newline, with variables expanded
    when *expand* is true.  Returns the number of lines written.
    """
    written = 0
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _FILE_MODE)
    with os.fdopen(fd, "w") as out:
        for raw in lines:
            line = raw[:-1] if raw.endswith("\n") else raw
            if line == delimiter:
                break
            if expand:
                line = expand_variables(line, ctx)
            out.write(line + "\n")
            written += 1
    return written


def read_heredoc(
    ctx: Context,
    delimiter: str,
    reader: Optional[Iterable[str]] = None,
    prefix: str = HEREDOC_PREFIX,
) -> Redirect:
    """Collect a here-document into a fresh file and return its redirection.

    A delimiter containing quotes is unquoted and disables expansion of the
    body.  Lines come from *reader*, or from the terminal when it is None.
    An interrupt while reading marks the context as failed.
    """
    lines = _prompt_lines() if reader is None else reader
    path = create_heredoc_file(prefix)
    quoted = "'" in delimiter or '"' in delimiter
    if quoted:
        delimiter = remove_quotes(delimiter)
    try:
        write_heredoc(path, delimiter, lines, ctx, expand=not quoted)
    except KeyboardInterrupt:
        ctx.sys_error = True
    return Redirect(expand_word(path, ctx), TokenType.REDIR_HEREDOC)