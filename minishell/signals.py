"""Signal dispositions for the shell's idle, execution and here-document phases."""

from __future__ import annotations

import signal
import sys
from dataclasses import dataclass
from types import FrameType
from typing import IO, Optional

from minishell.types import Context

_INTERRUPTED = 1


@dataclass
class SignalState:
    """Records the last signal the shell received while waiting or running.

    ``value`` is 1 after an interrupt at the prompt or while reading a
    here-document, the signal number after a signal during execution, and
    0 when nothing has arrived since the last :meth:`consume`.
    """

    value: int = 0
    out: Optional[IO[str]] = None

    def _write(self, text: str) -> None:
        stream = self.out or sys.stdout
        stream.write(text)
        stream.flush()

    def _idle_handler(self, sig: int, frame: Optional[FrameType]) -> None:
        if sig == signal.SIGINT:
            self.value = _INTERRUPTED
            self._write("\n")

    def _heredoc_parent_handler(
        self, sig: int, frame: Optional[FrameType]
    ) -> None:
        if sig == signal.SIGINT:
            self.value = _INTERRUPTED
            self._write("\n")
            raise KeyboardInterrupt

    def _exec_parent_handler(self, sig: int, frame: Optional[FrameType]) -> None:
        if sig == signal.SIGINT:
            self.value = sig
            self._write("\n")
        elif sig == signal.SIGQUIT:
            self.value = sig
            self._write("Quit: 3\n")

    def consume(self, ctx: Context) -> None:
        """Fold the recorded signal into ``ctx.status`` and clear it.

        An interrupt at the prompt gives status 1; a signal during
        execution gives the negated signal number.
        """
        if self.value == _INTERRUPTED:
            ctx.status = self.value
        if self.value in (signal.SIGINT, signal.SIGQUIT):
            ctx.status = -self.value
        self.value = 0


def set_idle_sig_handler(state: SignalState) -> None:
    """At the prompt: ignore quit, record and report interrupts."""
    signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    signal.signal(signal.SIGINT, state._idle_handler)


def set_exec_parent_sig_handler(state: SignalState) -> None:
    """While commands run: record both interrupt and quit."""
    signal.signal(signal.SIGQUIT, state._exec_parent_handler)
    signal.signal(signal.SIGINT, state._exec_parent_handler)


def set_exec_child_sig_handler() -> None:
    """Restore the default dispositions for a started command."""
    signal.signal(signal.SIGQUIT, signal.SIG_DFL)
    signal.signal(signal.SIGINT, signal.SIG_DFL)


def set_heredoc_parent_sig_handler(state: SignalState) -> None:
    """While a here-document is read: ignore quit, abort on interrupt."""
    signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    signal.signal(signal.SIGINT, state._heredoc_parent_handler)


def set_heredoc_child_sig_handler() -> None:
    """For a here-document reader of its own: ignore quit, die on interrupt."""
    signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    signal.signal(signal.SIGINT, signal.SIG_DFL)


def reset_command_state(ctx: Context) -> None:
    """Drop the tokens and tree of the command line just processed."""
    ctx.ast = None
    ctx.tokens = []