import io
import signal

import pytest

from minishell.signals import (
    SignalState,
    reset_command_state,
    set_exec_child_sig_handler,
    set_exec_parent_sig_handler,
    set_heredoc_child_sig_handler,
    set_heredoc_parent_sig_handler,
    set_idle_sig_handler,
)
from minishell.types import Ast, Context, NodeType, Token


@pytest.fixture(autouse=True)
def restore_handlers():
    saved_int = signal.getsignal(signal.SIGINT)
    saved_quit = signal.getsignal(signal.SIGQUIT)
    yield
    signal.signal(signal.SIGINT, saved_int)
    signal.signal(signal.SIGQUIT, saved_quit)


def _fire(sig):
    signal.getsignal(sig)(sig, None)


def test_consume_interrupt_at_prompt_sets_status_one():
    ctx = Context(status=0)
    state = SignalState(value=1)
    state.consume(ctx)
    assert ctx.status == 1
    assert state.value == 0


def test_consume_sigint_during_exec_negates():
    ctx = Context(status=0)
    state = SignalState(value=signal.SIGINT)
    state.consume(ctx)
    assert ctx.status == -signal.SIGINT
    assert state.value == 0


def test_consume_sigquit_during_exec_negates():
    ctx = Context(status=0)
    state = SignalState(value=signal.SIGQUIT)
    state.consume(ctx)
    assert ctx.status == -signal.SIGQUIT


def test_consume_nothing_keeps_status():
    ctx = Context(status=42)
    state = SignalState()
    state.consume(ctx)
    assert ctx.status == 42
    assert state.value == 0


def test_idle_handlers():
    out = io.StringIO()
    state = SignalState(out=out)
    set_idle_sig_handler(state)
    assert signal.getsignal(signal.SIGQUIT) == signal.SIG_IGN
    _fire(signal.SIGINT)
    assert state.value == 1
    assert out.getvalue() == "\n"


def test_exec_parent_interrupt():
    out = io.StringIO()
    state = SignalState(out=out)
    set_exec_parent_sig_handler(state)
    _fire(signal.SIGINT)
    assert state.value == signal.SIGINT
    assert out.getvalue() == "\n"


def test_exec_parent_quit():
    out = io.StringIO()
    state = SignalState(out=out)
    set_exec_parent_sig_handler(state)
    _fire(signal.SIGQUIT)
    assert state.value == signal.SIGQUIT
    assert out.getvalue() == "Quit: 3\n"


def test_exec_parent_then_consume_roundtrip():
    state = SignalState(out=io.StringIO())
    set_exec_parent_sig_handler(state)
    _fire(signal.SIGQUIT)
    ctx = Context()
    state.consume(ctx)
    assert ctx.status == -signal.SIGQUIT
    assert state.value == 0


def test_heredoc_parent_interrupt_aborts_reading():
    out = io.StringIO()
    state = SignalState(out=out)
    set_heredoc_parent_sig_handler(state)
    assert signal.getsignal(signal.SIGQUIT) == signal.SIG_IGN
    with pytest.raises(KeyboardInterrupt):
        _fire(signal.SIGINT)
    assert state.value == 1
    assert out.getvalue() == "\n"


def test_exec_child_restores_defaults():
    idle_out = io.StringIO()
    idle_state = SignalState(out=idle_out)
    set_idle_sig_handler(idle_state)
    set_exec_child_sig_handler()
    assert signal.getsignal(signal.SIGINT) == signal.SIG_DFL
    assert signal.getsignal(signal.SIGQUIT) == signal.SIG_DFL

    out = io.StringIO()
    state = SignalState(out=out)
    set_exec_parent_sig_handler(state)
    _fire(signal.SIGINT)
    assert state.value == signal.SIGINT
    assert out.getvalue() == "\n"
    assert idle_state.value == 0
    assert idle_out.getvalue() == ""


def test_heredoc_child_dispositions():
    set_heredoc_child_sig_handler()
    assert signal.getsignal(signal.SIGINT) == signal.SIG_DFL
    assert signal.getsignal(signal.SIGQUIT) == signal.SIG_IGN

    out = io.StringIO()
    state = SignalState(out=out)
    set_heredoc_parent_sig_handler(state)
    with pytest.raises(KeyboardInterrupt):
        _fire(signal.SIGINT)
    assert state.value == 1
    assert out.getvalue() == "\n"


def test_reset_command_state_drops_tokens_and_tree():
    ctx = Context(
        tokens=[Token("echo"), Token("hi")],
        ast=Ast(NodeType.CMD, argv=[Token("echo")]),
        status=7,
    )
    reset_command_state(ctx)
    assert ctx.ast is None
    assert ctx.tokens == []
    assert ctx.status == 7