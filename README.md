# minishell

Building blocks for a small POSIX-style command shell. Given a list of
tokens, the package parses them into a tree of commands joined by pipes,
collects here-documents, expands variables and quotes, and runs the result
with builtins, `PATH` lookup, redirections and pipes.

## Stages

- `minishell.types`: `Token`, `TokenType`, `Ast`, `NodeType`, `Redirect`
  and `Context`, the state carried through one command line.
- `minishell.parser`: `parse_tokens(ctx, reader=None)` builds `ctx.ast` from
  `ctx.tokens`. Pipelines associate to the left; `<`, `>`, `>>` and `<<`
  operators followed by a word become `Redirect` entries. Syntax errors are
  reported on standard error and set the status to 258.
- `minishell.heredoc`: `read_heredoc` writes lines up to the delimiter into a
  fresh `/tmp/.HEREDOC<n>` file. Variables in the body are expanded unless
  the delimiter contains quotes. Lines come from the `reader` iterable, or
  from the terminal with the prompt `> `.
- `minishell.expander`: `expand_environ(ctx)` expands `$NAME` and `$?` in
  every argument and removes single and double quotes. A word that expands
  to nothing, on a line where no quote has been seen, becomes `None`.
- `minishell.wordsplit`: `rm_empty_words` drops those words; `remove_quotes`
  and `word_split` are also available.
- `minishell.executor`: `execute(ctx)` runs the tree and stores the exit
  status in `ctx.status`. Builtins run in the shell itself; pipeline stages
  that are builtins work on a copy of the environment. Other commands are
  found along `PATH` and started as subprocesses.
- `minishell.signals`: `SignalState` and the `set_*_sig_handler` functions
  install the dispositions for the prompt, for running commands and for
  reading here-documents; `SignalState.consume(ctx)` folds a recorded signal
  into the status.

## Example

```python
from minishell.environment import Environment
from minishell.executor import execute
from minishell.expander import expand_environ
from minishell.parser import parse_tokens
from minishell.types import Context, Token, TokenType
from minishell.wordsplit import rm_empty_words

ctx = Context(env=Environment.from_environ())
ctx.tokens = [
    Token("echo"),
    Token('"$HOME"'),
    Token("|", TokenType.PIPE),
    Token("cat"),
]
parse_tokens(ctx)
expand_environ(ctx)
rm_empty_words(ctx.ast)
execute(ctx)
print(ctx.status)
```

## Builtins

`minishell.builtins` provides `echo` (with `-n`), `cd` (with `-`, and
`HOME` when no argument is given), `pwd`, `env`, `unset` and `exit`.
`run_builtin(argv, env)` returns the builtin's status, or `None` when the
command is not a builtin. `exit` raises `minishell.errors.ShellExit`
carrying the status.

## Environment

```python
import os
from minishell.environment import Environment

env = Environment.from_environ(os.environ)
env.set("GREETING", "hello")
print(env.get("GREETING"))   # hello
env.unset("GREETING")
print(env.to_list()[:3])     # entries in NAME=value form
```

## Exit status

`$?` expands to `ctx.status`. When the status is negative, as
`SignalState.consume` leaves it after a signal during execution, `$?` is
`128` plus the signal number. A syntax error gives `258` and a command that
cannot be found gives `127`.

## What is not included

- There is no tokenizer that turns a typed line into `Token` objects;
  `minishell.lexing` only has character-classification helpers. Tokens
  must be built by the caller.
- There is no interactive prompt loop and no command to start; the package
  is used as a library.
- There is no `export` builtin.

## Running the tests

The tests use pytest; install the `test` extra to get it.