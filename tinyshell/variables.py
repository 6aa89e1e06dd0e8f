"""Parameter expansion and field splitting."""

from __future__ import annotations

from collections.abc import Iterable

from tinyshell.env import Context

IFS = " \t\n"


def _is_identifier_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


def is_identifier(name: str) -> bool:
    """Tell whether ``name`` is a valid shell variable name."""
    if not name:
        return False
    first = name[0]
    if not (first.isascii() and (first.isalpha() or first == "_")):
        return False
    return all(_is_identifier_char(char) for char in name)


def is_ifs(char: str) -> bool:
    """Tell whether ``char`` separates fields."""
    return char != "" and char in IFS


def expand_variable(text: str, pos: int, ctx: Context) -> tuple[str, int]:
    """Expand the ``$`` reference at ``text[pos]``.

    Return the expanded value and the position just after the reference.
    A ``$`` not followed by a name or ``?`` stands for itself.
    """
    if text[pos : pos + 1] != "$":
        raise ValueError(f"no '$' at position {pos} of {text!r}")
    pos += 1
    if pos >= len(text) or not _is_identifier_char(text[pos]):
        if text[pos : pos + 1] == "?":
            return str(ctx.exit_status), pos + 1
        return "$", pos
    end = pos
    while end < len(text) and _is_identifier_char(text[end]):
        end += 1
    key = text[pos:end]
    if not is_identifier(key):
        return "", end
    return ctx.env.value(key) or "", end


def expand_variable_heredoc(text: str, ctx: Context) -> str:
    """Expand every ``$`` reference in a here-document line; quotes are kept."""
    parts: list[str] = []
    pos = 0
    while pos < len(text):
        if text[pos] == "$":
            value, pos = expand_variable(text, pos, ctx)
            parts.append(value)
        else:
            end = text.find("$", pos)
            if end == -1:
                end = len(text)
            parts.append(text[pos:end])
            pos = end
    return "".join(parts)


def normalize_segments(segments: Iterable[str | None]) -> list[str]:
    """Join split segments into words.

    A None marker glues the segment after it to the word before it.
    Empty words are dropped from the result.
    """
    words: list[str] = []
    combine = False
    for segment in segments:
        if segment is None:
            combine = True
        elif combine:
            if words:
                words[-1] += segment
            else:
                words.append(segment)
            combine = False
        else:
            words.append(segment)
    return [word for word in words if word != ""]


def _split_value(value: str) -> list[str]:
    fields: list[str] = []
    pos = 0
    length = len(value)
    while pos < length:
        start = pos
        while pos < length and not is_ifs(value[pos]):
            pos += 1
        fields.append(value[start:pos])
        if pos == length:
            break
        while pos < length and is_ifs(value[pos]):
            pos += 1
        if pos == length:
            fields.append("")
    return fields


def split_by_ifs(word: str, ctx: Context) -> list[str]:
    """Expand variables in ``word`` and split unquoted values into fields.

    Quotes are left in place; text inside single quotes is not expanded
    and values inside double quotes are not split.
    """
    segments: list[str | None] = []
    in_double = False
    pos = 0
    while pos < len(word):
        if word[pos] == "$":
            value, pos = expand_variable(word, pos, ctx)
            segments.append(None)
            if in_double:
                segments.append(value)
            else:
                segments.extend(_split_value(value))
            segments.append(None)
            continue
        start = pos
        while pos < len(word) and word[pos] != "$":
            char = word[pos]
            if char == "'" and not in_double:
                closing = word.find("'", pos + 1)
                pos = len(word) if closing == -1 else closing + 1
                continue
            if char == '"':
                in_double = not in_double
            pos += 1
        segments.append(word[start:pos])
    return normalize_segments(segments)


def expand_variables(words: Iterable[str], ctx: Context) -> list[str]:
    """Apply :func:`split_by_ifs` to every word and flatten the result."""
    result: list[str] = []
    for word in words:
        result.extend(split_by_ifs(word, ctx))
    return result