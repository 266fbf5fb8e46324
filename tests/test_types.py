import pytest

from minishell.environment import Environment
from minishell.types import Ast, Context, NodeType, Redirect, Token, TokenType, expect


def test_copy_is_equal_but_independent():
    original = Token("echo", TokenType.WORD)
    duplicate = original.copy()
    assert duplicate == original
    assert duplicate is not original
    duplicate.word = "changed"
    assert original.word == "echo"


def test_copy_keeps_type():
    original = Token(">>", TokenType.REDIR_APPEND)
    assert original.copy().type is TokenType.REDIR_APPEND


def test_token_defaults_to_word():
    assert Token("ls").type is TokenType.WORD


@pytest.mark.parametrize(
    "token, token_type, expected",
    [
        (None, TokenType.WORD, False),
        (Token("ls", TokenType.WORD), TokenType.WORD, True),
        (Token("|", TokenType.PIPE), TokenType.WORD, False),
        (Token("|", TokenType.PIPE), TokenType.PIPE, True),
    ],
)
def test_expect(token, token_type, expected):
    assert expect(token, token_type) is expected


@pytest.mark.parametrize(
    "token_type, symbol",
    [
        (TokenType.REDIR_IN, "<"),
        (TokenType.REDIR_OUT, ">"),
        (TokenType.REDIR_APPEND, ">>"),
        (TokenType.REDIR_HEREDOC, "<<"),
    ],
)
def test_redirect_types_are_the_low_values(token_type, symbol):
    token = Token(symbol, token_type)
    assert token_type < TokenType.WORD
    assert expect(token, token_type) is True
    assert expect(token, TokenType.WORD) is False
    assert expect(token.copy(), token_type) is True


def test_ast_lists_are_independent():
    first = Ast(NodeType.CMD)
    second = Ast(NodeType.CMD)
    first.argv.append(Token("ls"))
    first.redirects.append(Redirect("out", TokenType.REDIR_OUT))
    assert second.argv == []
    assert second.redirects == []
    assert first.left is None and first.right is None


def test_context_defaults():
    ctx = Context()
    assert ctx.status == 0
    assert ctx.sys_error is False
    assert ctx.include_quote is False
    assert ctx.ast is None
    assert isinstance(ctx.env, Environment)
    assert len(ctx.env) == 0


def test_context_environments_are_independent():
    first = Context()
    second = Context()
    first.env.set("A", "1")
    assert second.env.get("A") is None