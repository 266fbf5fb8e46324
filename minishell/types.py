"""Core data types shared by the lexer, parser, expander and executor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional

from minishell.environment import Environment


class TokenType(IntEnum):
    """Kinds of lexical tokens; the redirection kinds come first."""

    REDIR_IN = 0
    REDIR_OUT = 1
    REDIR_APPEND = 2
    REDIR_HEREDOC = 3
    WORD = 4
    PIPE = 5
    EOF = 6


@dataclass
class Token:
    """A single token: its text and its kind."""

    word: Optional[str]
    type: TokenType = TokenType.WORD

    def copy(self) -> Token:
        """Return an independent token with the same word and type."""
        return Token(self.word, self.type)


class NodeType(Enum):
    """Kinds of syntax-tree nodes."""

    CMD = "cmd"
    PIPE = "pipe"


@dataclass
class Redirect:
    """A redirection target and the kind of redirection."""

    file: Optional[str]
    type: TokenType


@dataclass
class Ast:
    """A node of the command tree: a simple command or a pipe."""

    type: NodeType
    argv: list[Token] = field(default_factory=list)
    redirects: list[Redirect] = field(default_factory=list)
    left: Optional[Ast] = None
    right: Optional[Ast] = None
    tokens: list[Token] = field(default_factory=list)


@dataclass
class Context:
    """State carried across the processing of one command line."""

    tokens: list[Token] = field(default_factory=list)
    ast: Optional[Ast] = None
    env: Environment = field(default_factory=Environment)
    status: int = 0
    sys_error: bool = False
    include_quote: bool = False


def expect(token: Optional[Token], token_type: TokenType) -> bool:
    """Return True if *token* exists and has the given type."""
    if token is None:
        return False
    return token.type == token_type