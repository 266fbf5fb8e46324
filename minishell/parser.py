"""Building the command tree from a token list."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from itertools import takewhile
from typing import Optional

from minishell.errors import syntax_error
from minishell.expander import expand_word
from minishell.heredoc import read_heredoc
from minishell.types import (
    Ast,
    Context,
    NodeType,
    Redirect,
    Token,
    TokenType,
    expect,
)

_REDIRECT_TYPES = frozenset(
    {
        TokenType.REDIR_IN,
        TokenType.REDIR_OUT,
        TokenType.REDIR_APPEND,
        TokenType.REDIR_HEREDOC,
    }
)


def is_redirect(token: Optional[Token]) -> bool:
    """Return True if *token* is a redirection operator."""
    return token is not None and token.type in _REDIRECT_TYPES


def _add_redirect(
    ctx: Context,
    redirects: list[Redirect],
    kind: TokenType,
    word: str,
    reader: Optional[Iterator[str]],
) -> None:
    if kind == TokenType.REDIR_HEREDOC:
        redirects.append(read_heredoc(ctx, word, reader))
    else:
        redirects.append(Redirect(expand_word(word, ctx), kind))


def arrange_node(
    ctx: Context, node: Ast, reader: Optional[Iterator[str]] = None
) -> Ast:
    """Separate a command node's tokens into arguments and redirections."""
    tokens = node.tokens
    if not tokens:
        return node
    argv: list[Token] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        following = tokens[i + 1] if i + 1 < len(tokens) else None
        if is_redirect(token) and expect(following, TokenType.WORD):
            _add_redirect(ctx, node.redirects, token.type, following.word, reader)
            i += 2
            continue
        argv.append(token.copy())
        i += 1
    node.argv = argv
    return node


def _parse_cmd(
    ctx: Context,
    tokens: list[Token],
    pos: int,
    reader: Optional[Iterator[str]],
) -> tuple[Optional[Ast], int]:
    """Parse one simple command starting at *pos*."""
    if pos >= len(tokens):
        return None, pos
    if expect(tokens[pos], TokenType.PIPE):
        syntax_error(ctx)
        return Ast(NodeType.CMD), pos
    collected: list[Token] = []
    while pos < len(tokens) and not expect(tokens[pos], TokenType.PIPE):
        token = tokens[pos]
        following = tokens[pos + 1] if pos + 1 < len(tokens) else None
        if is_redirect(token) and not expect(following, TokenType.WORD):
            node = arrange_node(ctx, Ast(NodeType.CMD, tokens=collected), reader)
            syntax_error(ctx)
            return node, pos
        collected.append(token.copy())
        pos += 1
    node = arrange_node(ctx, Ast(NodeType.CMD, tokens=collected), reader)
    if not collected:
        syntax_error(ctx)
    return node, pos


def parse_tokens(
    ctx: Context, reader: Optional[Iterable[str]] = None
) -> Optional[Ast]:
    """Parse ``ctx.tokens`` into ``ctx.ast`` and return the tree.

    Pipelines associate to the left.  Syntax errors are reported and set
    the context's status; an empty token list marks the context as failed.
    Here-document bodies are read from *reader*, or from the terminal.
    """
    tokens = list(takewhile(lambda t: t.type != TokenType.EOF, ctx.tokens))
    lines = iter(reader) if reader is not None else None
    ast, pos = _parse_cmd(ctx, tokens, 0, lines)
    ctx.ast = ast
    if ast is None:
        ctx.sys_error = True
    if ctx.sys_error:
        return ctx.ast
    while pos < len(tokens) and expect(tokens[pos], TokenType.PIPE):
        pos += 1
        right, pos = _parse_cmd(ctx, tokens, pos, lines)
        if right is None and not ctx.sys_error:
            syntax_error(ctx)
        else:
            ctx.ast = Ast(NodeType.PIPE, left=ctx.ast, right=right)
        if ctx.sys_error:
            break
    return ctx.ast