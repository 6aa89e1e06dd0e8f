"""Commands run inside the shell itself."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence

from tinyshell.env import Context, Environment
from tinyshell.variables import is_identifier

_PROGRAM = "tinyshell"
_LONG_MIN = -(2**63)
_LONG_MAX = 2**63 - 1
_SPACES = " \t\n\v\f\r"

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_NUMERIC_REQUIRED = 2


class ShellExit(Exception):
    """Raised by ``exit`` outside a pipeline: the shell must stop."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status


def report_error(*args: str) -> None:
    """Write ``tinyshell: part: part...`` to standard error."""
    sys.stderr.write(": ".join((_PROGRAM, *args)) + "\n")


def normalize_path(path: str) -> str:
    """Collapse repeated slashes and resolve ``./`` and ``../`` segments."""
    result = ""
    pos = 0
    length = len(path)
    while pos < length:
        if path.startswith("./", pos):
            pos += 2
        elif path.startswith("../", pos):
            if len(result) > 1:
                slash = result.rfind("/", 1, len(result) - 1)
                result = result[: slash + 1] if slash != -1 else result[:1]
            pos += 3
        elif path[pos] == "/":
            while path.startswith("//", pos):
                pos += 1
            result += "/"
            pos += 1
        else:
            end = path.find("/", pos)
            if end == -1:
                end = length
            result += path[pos:end]
            pos = end
    return result


def _move_to_home(ctx: Context) -> int:
    home = ctx.env.value("HOME")
    if home is None:
        report_error("cd", "HOME not set")
        return EXIT_FAILURE
    try:
        os.chdir(home)
    except OSError as exc:
        report_error("chdir", exc.strerror or str(exc))
        return EXIT_FAILURE
    ctx.cwd = home
    return EXIT_SUCCESS


def _join_path(cwd: str, dirname: str) -> str:
    base = cwd if cwd.endswith("/") else cwd + "/"
    return base + (dirname if dirname.endswith("/") else dirname + "/")


def builtin_cd(args: Sequence[str], ctx: Context) -> int:
    """Change the working directory, tracking the logical path in ``ctx``."""
    if len(args) < 2:
        return _move_to_home(ctx)
    if len(args) > 2:
        report_error("cd", "too many arguments")
        return EXIT_FAILURE
    dirname = args[1]
    if dirname.startswith("/"):
        full_path = dirname
    else:
        full_path = _join_path(ctx.cwd, dirname)
    target = normalize_path(full_path)
    try:
        os.chdir(target)
    except OSError as exc:
        report_error("cd", f"{dirname}: {exc.strerror or exc}")
        return EXIT_FAILURE
    if len(target) > 1 and target.endswith("/"):
        target = target[:-1]
    ctx.cwd = target
    return EXIT_SUCCESS


def _is_n_option(arg: str) -> bool:
    return len(arg) > 1 and arg[0] == "-" and all(char == "n" for char in arg[1:])


def builtin_echo(args: Sequence[str], ctx: Context) -> int:
    """Print the arguments; leading ``-n`` options drop the newline."""
    words = list(args[1:])
    skipped = 0
    while skipped < len(words) and _is_n_option(words[skipped]):
        skipped += 1
    sys.stdout.write(" ".join(words[skipped:]))
    if skipped == 0:
        sys.stdout.write("\n")
    return EXIT_SUCCESS


def builtin_env(args: Sequence[str], ctx: Context) -> int:
    """Print every variable that holds a value."""
    if len(args) > 1:
        report_error("env", "too many arguments")
        return EXIT_FAILURE
    for var in ctx.env:
        if var.has_value:
            sys.stdout.write(f"{var.key}={var.value}\n")
    return EXIT_SUCCESS


def _parse_exit_argument(text: str) -> int | None:
    """Read a whole decimal long; None when it is not one."""
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
        return 0 if text == "" else None
    if pos != len(stripped):
        return None
    number = sign * int(stripped[start:pos])
    if number < _LONG_MIN or number > _LONG_MAX:
        return None
    return number


def _exit_status_from(arg: str) -> int:
    number = _parse_exit_argument(arg)
    if number is None:
        report_error("exit", f"{arg}: numeric argument required")
        return EXIT_NUMERIC_REQUIRED
    return number & 0xFF


def _exit_in_pipeline(args: Sequence[str], ctx: Context) -> int:
    if len(args) < 2:
        return ctx.exit_status & 0xFF
    position = 2 if args[1] == "--" else 1
    if len(args) != position + 1:
        report_error("exit", "too many arguments")
        return EXIT_FAILURE
    ctx.exit_status = _exit_status_from(args[position])
    return ctx.exit_status


def builtin_exit(args: Sequence[str], ctx: Context, in_pipeline: bool = False) -> int:
    """Leave the shell by raising :class:`ShellExit`.

    Inside a pipeline nothing is left: the status is returned instead.
    """
    if in_pipeline:
        return _exit_in_pipeline(args, ctx)
    sys.stderr.write("exit\n")
    if len(args) < 2:
        raise ShellExit(ctx.exit_status & 0xFF)
    position = 2 if args[1] == "--" else 1
    if len(args) == position + 1:
        raise ShellExit(_exit_status_from(args[position]))
    report_error("exit", "too many arguments")
    return EXIT_FAILURE


def _report_invalid_identifier(arg: str) -> None:
    report_error("export", f"`{arg}': not a valid identifier")


def _export_one(arg: str, env: Environment) -> int:
    equal = arg.find("=")
    if equal == 0:
        _report_invalid_identifier(arg)
        return EXIT_FAILURE
    if equal == -1:
        if not is_identifier(arg):
            _report_invalid_identifier(arg)
            return EXIT_FAILURE
        env.declare(arg)
        return EXIT_SUCCESS
    plus = arg.find("+")
    is_append = plus != -1 and plus + 1 == equal
    key = arg[:plus] if is_append else arg[:equal]
    if not is_identifier(key):
        _report_invalid_identifier(arg)
        return EXIT_FAILURE
    value = arg[equal + 1 :]
    if is_append:
        env.append(key, value)
    else:
        env.set(key, value)
    return EXIT_SUCCESS


def builtin_export(args: Sequence[str], ctx: Context) -> int:
    """Set or declare variables; with no argument list them sorted.

    Listing also leaves the environment sorted by name.  The status is
    that of the last argument.
    """
    if len(args) < 2:
        ctx.env = Environment(ctx.env.sorted())
        for var in ctx.env:
            if var.has_value:
                sys.stdout.write(f'declare -x {var.key}="{var.value}"\n')
            else:
                sys.stdout.write(f"declare -x {var.key}\n")
        return EXIT_SUCCESS
    status = EXIT_SUCCESS
    for arg in args[1:]:
        status = _export_one(arg, ctx.env)
    return status


def builtin_pwd(args: Sequence[str], ctx: Context) -> int:
    """Print the logical working directory."""
    sys.stdout.write(ctx.cwd + "\n")
    return EXIT_SUCCESS


def builtin_unset(args: Sequence[str], ctx: Context) -> int:
    """Remove every named variable."""
    for key in args[1:]:
        ctx.env.unset(key)
    return EXIT_SUCCESS


_SIMPLE_BUILTINS: dict[str, Callable[[Sequence[str], Context], int]] = {
    "cd": builtin_cd,
    "pwd": builtin_pwd,
    "echo": builtin_echo,
    "env": builtin_env,
    "export": builtin_export,
    "unset": builtin_unset,
}

_BUILTIN_NAMES = frozenset((*_SIMPLE_BUILTINS, "exit"))


def is_builtin(name: str | None) -> bool:
    """Tell whether ``name`` is run by the shell itself."""
    return name in _BUILTIN_NAMES


def run_builtin(args: Sequence[str], ctx: Context, in_pipeline: bool = False) -> int:
    """Run the builtin named by ``args[0]``; an empty command succeeds."""
    if not args:
        return EXIT_SUCCESS
    name = args[0]
    if name == "exit":
        return builtin_exit(args, ctx, in_pipeline)
    handler = _SIMPLE_BUILTINS.get(name)
    if handler is None:
        raise ValueError(f"not a builtin: {name!r}")
    return handler(args, ctx)