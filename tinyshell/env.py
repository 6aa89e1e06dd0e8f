"""Shell variables and the execution context."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

DEFAULT_PATH = "/usr/local/bin:/usr/local/sbin:/usr/bin:/usr/sbin:/bin:/sbin:."

_LONG_MIN = -(2**63)
_LONG_MAX = 2**63 - 1
_INT_MAX = 2**31 - 1
_SPACES = " \t\n\v\f\r"


@dataclass
class EnvVar:
    """A shell variable; ``value`` is None when declared without a value."""

    key: str
    value: str | None = None

    @property
    def has_value(self) -> bool:
        return self.value is not None


class Environment:
    """Ordered collection of shell variables."""

    def __init__(self, variables: Iterable[EnvVar] = ()) -> None:
        self._vars: dict[str, EnvVar] = {}
        for var in variables:
            self._vars.setdefault(var.key, var)

    @classmethod
    def from_envp(cls, envp: Iterable[str]) -> Environment:
        """Build an environment from ``KEY=VALUE`` strings."""
        variables = []
        for entry in envp:
            key, sep, value = entry.partition("=")
            if not sep:
                raise ValueError(f"environment entry without '=': {entry!r}")
            variables.append(EnvVar(key, value))
        return cls(variables)

    def __iter__(self) -> Iterator[EnvVar]:
        return iter(list(self._vars.values()))

    def __len__(self) -> int:
        return len(self._vars)

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __repr__(self) -> str:
        return f"Environment({list(self._vars.values())!r})"

    def lookup(self, key: str) -> EnvVar | None:
        """Return the variable named ``key``, or None."""
        return self._vars.get(key)

    def value(self, key: str) -> str | None:
        """Return the value of ``key``, or None if unset or valueless."""
        var = self._vars.get(key)
        return None if var is None else var.value

    def set(self, key: str, value: str) -> None:
        """Assign ``value`` to ``key``, keeping its position if it exists."""
        var = self._vars.get(key)
        if var is None:
            self._vars[key] = EnvVar(key, value)
        else:
            var.value = value

    def append(self, key: str, value: str) -> None:
        """Append ``value`` to the current value of ``key``."""
        var = self._vars.get(key)
        if var is None:
            self._vars[key] = EnvVar(key, value)
        else:
            var.value = (var.value or "") + value

    def declare(self, key: str) -> None:
        """Declare ``key`` without a value unless it already exists."""
        self._vars.setdefault(key, EnvVar(key, None))

    def unset(self, key: str) -> None:
        """Remove ``key``; a missing key is ignored."""
        self._vars.pop(key, None)

    def to_envp(self) -> list[str]:
        """Return ``KEY=VALUE`` strings for every variable holding a value."""
        return [f"{var.key}={var.value}" for var in self._vars.values() if var.has_value]

    def sorted(self) -> list[EnvVar]:
        """Return the variables ordered by name, byte-wise."""
        return sorted(self._vars.values(), key=lambda var: var.key.encode())


@dataclass
class Context:
    """State shared by the running shell."""

    env: Environment = field(default_factory=Environment)
    cwd: str = field(default_factory=os.getcwd)
    exit_status: int = 0


def _parse_long(text: str) -> tuple[int | None, str]:
    """Parse a decimal long the way strtol does; None on overflow."""
    stripped = text.lstrip(_SPACES)
    pos = 0
    sign = 1
    if stripped[:1] in ("+", "-"):
        sign = -1 if stripped[0] == "-" else 1
        pos = 1
    start = pos
    while pos < len(stripped) and stripped[pos] in "0123456789":
        pos += 1
    if pos == start:
        return 0, text
    number = sign * int(stripped[start:pos])
    if number < _LONG_MIN or number > _LONG_MAX:
        return None, stripped[pos:]
    return number, stripped[pos:]


def _to_int32(number: int) -> int:
    number &= 0xFFFFFFFF
    return number - 2**32 if number > _INT_MAX else number


def next_shell_level(value: str) -> int:
    """Compute the SHLVL of a child shell from the inherited value."""
    number, rest = _parse_long(value)
    if number is None:
        return 1
    level = _to_int32(number)
    if level < 0:
        return 0
    if level >= 999:
        if rest == "" and level < _INT_MAX:
            sys.stderr.write(
                f"tinyshell: warning: shell level ({level + 1}) too high, "
                "resetting to 1\n"
            )
        return 1
    return level + 1


def init_env(envp: Iterable[str]) -> Environment:
    """Build the start-up environment: a default PATH and a raised SHLVL."""
    env = Environment.from_envp(envp)
    if env.value("PATH") is None:
        env.set("PATH", DEFAULT_PATH)
    level = env.value("SHLVL")
    if level is None:
        env.set("SHLVL", "1")
    else:
        env.set("SHLVL", str(next_shell_level(level)))
    return env