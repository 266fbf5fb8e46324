"""Parameter expansion and quote removal for command words."""

from __future__ import annotations

from typing import Optional

from minishell.types import Ast, Context

_SINGLE_QUOTE = "'"
_DOUBLE_QUOTE = '"'
_QUOTES = _SINGLE_QUOTE + _DOUBLE_QUOTE


def find_env_value(name: str, ctx: Context) -> str:
    """Return the value of variable *name*.

    ``?`` that is not set in the environment yields the last exit status;
    a negative status means the command was killed by that signal.
    Unknown names expand to the empty string.
    """
    value = ctx.env.get(name)
    if value is not None:
        return value
    if name == "?":
        status = ctx.status
        return str(128 - status if status < 0 else status)
    return ""


def is_identifier_char(c: str) -> bool:
    """Return True for a character that may appear in a variable name."""
    return c in ("_", "?") or (len(c) == 1 and c.isascii() and c.isalnum())


def _scan_name_end(text: str, start: int) -> int:
    """Return the index just past the variable name starting at *start*.

    A ``?`` ends the name right after itself.
    """
    end = start
    while end < len(text) and is_identifier_char(text[end]):
        end += 1
        if text[end - 1] == "?":
            break
    return end


def _expand_dollar(text: str, start: int, ctx: Context) -> tuple[str, int]:
    """Expand the run of ``$`` beginning at *start*.

    Returns the expanded text and the index of the first unconsumed
    character.  Only an odd run of ``$`` followed by a name character
    expands; the last ``$`` of the run is the one that is replaced.
    """
    end = start
    while end < len(text) and text[end] == "$":
        end += 1
    if end == len(text):
        return "$", start + 1
    if (end - start) % 2 == 1 and is_identifier_char(text[end]):
        name_end = _scan_name_end(text, end)
        value = find_env_value(text[end:name_end], ctx)
        return text[start:end - 1] + value, name_end
    return text[start:end], end


def _expand_until(
    text: str, start: int, stop: str, ctx: Context
) -> tuple[str, int]:
    """Expand variables from *start* up to the first character in *stop*."""
    parts: list[str] = []
    i = start
    while i < len(text) and text[i] not in stop:
        if text[i] == "$":
            piece, i = _expand_dollar(text, i, ctx)
        else:
            piece = text[i]
            i += 1
        parts.append(piece)
    return "".join(parts), i


def expand_variables(text: str, ctx: Context) -> str:
    """Expand every variable in *text*, treating quotes as ordinary text."""
    return _expand_until(text, 0, "", ctx)[0]


def _expand_quoted(text: str, ctx: Context) -> str:
    parts: list[str] = []
    i = 0
    while i < len(text):
        c = text[i]
        if c == _SINGLE_QUOTE:
            ctx.include_quote = True
            close = text.find(_SINGLE_QUOTE, i + 1)
            if close == -1:
                raise ValueError(f"unclosed quote in {text!r}")
            parts.append(text[i + 1:close])
            i = close + 1
        elif c == _DOUBLE_QUOTE:
            ctx.include_quote = True
            piece, close = _expand_until(text, i + 1, _DOUBLE_QUOTE, ctx)
            if close >= len(text):
                raise ValueError(f"unclosed quote in {text!r}")
            parts.append(piece)
            i = close + 1
        else:
            piece, i = _expand_until(text, i, _QUOTES, ctx)
            parts.append(piece)
    return "".join(parts)


def expand_word(word: str, ctx: Context) -> Optional[str]:
    """Expand variables in *word* and remove its quotes.

    Returns None when the result is empty and no quote has been seen on
    the current command line, so that the word can be dropped.
    """
    result = _expand_quoted(word, ctx)
    if not ctx.include_quote and result == "":
        return None
    return result


def expand_ast(ast: Optional[Ast], ctx: Context) -> None:
    """Expand the argument words of every command in the tree."""
    if ast is None:
        return
    expand_ast(ast.right, ctx)
    expand_ast(ast.left, ctx)
    for token in ast.argv:
        token.word = expand_word(token.word, ctx)


def expand_environ(ctx: Context) -> None:
    """Expand the context's tree unless an earlier stage failed."""
    if ctx.sys_error:
        return
    expand_ast(ctx.ast, ctx)