"""Word expansion: variables, then wildcards, then quote removal."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable

from tinyshell.env import Context
from tinyshell.variables import expand_variables
from tinyshell.wildcard import expand_wildcards

_QUOTE_PIECES = re.compile(r"'([^']*)'?|\"([^\"]*)\"?|([^'\"]+)")


def expand_quotes(word: str) -> str:
    """Remove single and double quotes, keeping what they enclose."""
    return "".join(
        next(group for group in match.groups() if group is not None)
        for match in _QUOTE_PIECES.finditer(word)
    )


def expand_quotes_on_list(words: Iterable[str]) -> list[str]:
    """Apply :func:`expand_quotes` to every word."""
    return [expand_quotes(word) for word in words]


def expand(
    words: Iterable[str],
    ctx: Context,
    directory: str | os.PathLike[str] = ".",
) -> list[str]:
    """Fully expand command words: variables, wildcards, then quotes."""
    variable_expanded = expand_variables(words, ctx)
    wildcard_expanded = expand_wildcards(variable_expanded, directory)
    return expand_quotes_on_list(wildcard_expanded)