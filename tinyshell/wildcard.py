"""Pathname expansion of words holding ``*``."""

from __future__ import annotations

import os
from collections.abc import Iterable


def wildcard_lazy_match(string: str, pattern: str) -> bool:
    """Tell whether ``string`` matches ``pattern`` as a whole.

    ``*`` matches any run of characters, ``?`` any single character; every
    other character matches only itself.
    """
    width = len(string)
    previous = [True] + [False] * width
    only_stars = True
    for pattern_char in pattern:
        only_stars = only_stars and pattern_char == "*"
        row = [only_stars] + [False] * width
        for j, string_char in enumerate(string, start=1):
            if pattern_char == "*":
                row[j] = previous[j] or row[j - 1]
            elif pattern_char == "?" or pattern_char == string_char:
                row[j] = previous[j - 1]
        previous = row
    return previous[width]


def list_directory(directory: str | os.PathLike[str] = ".") -> list[str]:
    """Return the entry names of ``directory``; empty if it cannot be read."""
    try:
        return os.listdir(directory)
    except OSError:
        return []


def _sort_key(name: str) -> bytes:
    return name.encode("utf-8", "surrogateescape")


def _expand_word(word: str, directory: str | os.PathLike[str]) -> list[str]:
    if "*" not in word:
        return [word]
    names = list_directory(directory)
    if not word.startswith("."):
        names = [name for name in names if not name.startswith(".")]
    matches = sorted(
        (name for name in names if wildcard_lazy_match(name, word)),
        key=_sort_key,
    )
    return matches or [word]


def expand_wildcards(
    words: Iterable[str], directory: str | os.PathLike[str] = "."
) -> list[str]:
    """Replace each word holding ``*`` with the matching names, sorted.

    Hidden entries are matched only by a pattern that starts with a dot.
    A pattern that matches nothing is kept as it is.
    """
    result: list[str] = []
    for word in words:
        result.extend(_expand_word(word, directory))
    return result