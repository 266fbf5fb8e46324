"""Quote removal for file names, empty-word removal and word splitting."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from minishell.types import Ast, Token, TokenType

_QUOTES = "'\""
_SPACES = re.compile(r"[\t\n\v\f\r ]+")


def remove_quotes(text: str) -> str:
    """Strip quote characters from *text* without expanding anything."""
    parts: list[str] = []
    i = 0
    while i < len(text):
        c = text[i]
        if c in _QUOTES:
            close = text.find(c, i + 1)
            if close == -1:
                raise ValueError(f"unclosed quote in {text!r}")
            parts.append(text[i + 1:close])
            i = close + 1
        else:
            j = i
            while j < len(text) and text[j] not in _QUOTES:
                j += 1
            parts.append(text[i:j])
            i = j
    return "".join(parts)


def rm_empty_words(ast: Optional[Ast]) -> None:
    """Drop arguments whose expansion left no word, throughout the tree."""
    if ast is None:
        return
    rm_empty_words(ast.right)
    rm_empty_words(ast.left)
    ast.argv = [token for token in ast.argv if token.word is not None]


def word_split(tokens: Iterable[Token]) -> list[Token]:
    """Split every token's word on whitespace into separate word tokens."""
    return [
        Token(piece, TokenType.WORD)
        for token in tokens
        for piece in _SPACES.split(token.word or "")
        if piece
    ]