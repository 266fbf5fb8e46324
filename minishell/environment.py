"""The shell's ordered table of environment variables."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping
from typing import Optional, Union


def parse_env_entry(entry: str) -> tuple[str, str]:
    """Split a ``NAME=VALUE`` string into its name and value.

    The text is split on every ``=`` and empty pieces are dropped; the first
    piece is the name and the second, if any, the value.
    """
    parts = [part for part in entry.split("=") if part]
    if not parts:
        raise ValueError(f"invalid environment entry: {entry!r}")
    name = parts[0]
    value = parts[1] if len(parts) > 1 else ""
    return name, value


def env_strjoin(name: Optional[str], value: Optional[str]) -> Optional[str]:
    """Join a name and value as ``NAME=VALUE``; None if either is missing."""
    if name is None or value is None:
        return None
    return f"{name}={value}"


class Environment:
    """Environment variables kept in the order they were first defined."""

    def __init__(self) -> None:
        self._vars: dict[str, str] = {}

    @classmethod
    def from_environ(
        cls, environ: Union[Mapping[str, str], Iterable[str], None] = None
    ) -> Environment:
        """Build an environment from a mapping or ``NAME=VALUE`` strings.

        With no argument the process environment is used.
        """
        if environ is None:
            environ = os.environ
        if isinstance(environ, Mapping):
            entries = [f"{name}={value}" for name, value in environ.items()]
        else:
            entries = list(environ)
        env = cls()
        for entry in entries:
            name, value = parse_env_entry(entry)
            env._vars[name] = value
        return env

    def get(self, name: str) -> Optional[str]:
        """Return the value of *name*, or None when it is not set."""
        return self._vars.get(name)

    def set(self, name: str, value: str) -> None:
        """Set *name*, keeping its position if it already exists."""
        self._vars[name] = value

    def unset(self, name: str) -> None:
        """Remove *name*; removing a missing name does nothing."""
        self._vars.pop(name, None)

    def to_list(self) -> list[str]:
        """Return the variables as ``NAME=VALUE`` strings, in order."""
        return [f"{name}={value}" for name, value in self._vars.items()]

    def items(self) -> Iterator[tuple[str, str]]:
        """Iterate over (name, value) pairs in order."""
        return iter(list(self._vars.items()))

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._vars))

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        return f"Environment({self._vars!r})"