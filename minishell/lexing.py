"""Character classification helpers used by the tokenizer."""

from __future__ import annotations

_BLANKS = " \t\n"
_METACHARACTERS = "|<> \t\n"


def is_blank(c: str) -> bool:
    """Return True for a space, tab or newline."""
    return bool(c) and c in _BLANKS


def is_metacharacter(c: str) -> bool:
    """Return True for a character that separates words."""
    return bool(c) and c in _METACHARACTERS


def start_with(s: str, prefix: str) -> bool:
    """Return True if *s* begins with *prefix*."""
    return s.startswith(prefix)


def is_word(c: str) -> bool:
    """Return True for a character that may be part of a word."""
    return bool(c) and not is_metacharacter(c)


def consume_blank(line: str) -> tuple[bool, str]:
    """Drop one leading blank from *line*.

    Returns whether a blank was consumed, and the remaining text.
    """
    if line and is_blank(line[0]):
        return True, line[1:]
    return False, line