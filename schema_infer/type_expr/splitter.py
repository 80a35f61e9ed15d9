"""
Balanced-delimiter splitting for type expressions.

A delimiter only splits where bracket nesting depth is zero, so
`Map<string, A | B> | null` splits into two members, not three.
"""

from __future__ import annotations

OPENING = "<([{"
CLOSING = ">)]}"
QUOTES = "'\"`"


def split_top_level(text: str, delimiter: str) -> list[str]:
    """
    Split text on a delimiter that is not nested in brackets or quotes.

    Empty parts are dropped and the remaining parts are stripped.

    Examples:
        split_top_level("A | B<C | D>", "|")  -> ["A", "B<C | D>"]
        split_top_level("{ a: x; b: y }", ";") -> ["{ a: x; b: y }"]
        split_top_level("'a|b' | 'c'", "|")   -> ["'a|b'", "'c'"]
    """
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    quote: str | None = None
    i = 0

    while i < len(text):
        char = text[i]

        if quote is not None:
            current.append(char)
            if char == quote:
                quote = None
        elif char in QUOTES:
            quote = char
            current.append(char)
        elif char in OPENING:
            depth += 1
            current.append(char)
        elif char in CLOSING:
            depth = max(depth - 1, 0)
            current.append(char)
        elif depth == 0 and text.startswith(delimiter, i):
            _flush(parts, current)
            current = []
            i += len(delimiter)
            continue
        else:
            current.append(char)
        i += 1

    _flush(parts, current)
    return parts


def _flush(parts: list[str], current: list[str]) -> None:
    part = "".join(current).strip()
    if part:
        parts.append(part)


def has_top_level(text: str, delimiter: str) -> bool:
    """Check whether the delimiter occurs outside of any nesting."""
    parts = split_top_level(text, delimiter)
    return len(parts) != 1 or parts[0] != text.strip()


def is_wrapped(text: str, opening: str, closing: str) -> bool:
    """
    Check whether the first character opens a bracket closed by the last one.

    `{ a: A } & { b: B }` starts with `{` and ends with `}` but is not wrapped,
    because the first brace closes before the end.
    """
    if len(text) < 2 or text[0] != opening or text[-1] != closing:
        return False

    depth = 0
    quote: str | None = None
    for i, char in enumerate(text):
        if quote is not None:
            if char == quote:
                quote = None
        elif char in QUOTES:
            quote = char
        elif char in OPENING:
            depth += 1
        elif char in CLOSING:
            depth -= 1
            if depth == 0:
                return i == len(text) - 1
    return False
