"""Text helpers for equation input: symbol tidying, wrapping and highlighting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .values import MINUS_SYMBOL

MULTIPLY_SYMBOL = "\u2219"
ABS_SYMBOL = "\u2223"

_REPLACEMENTS = str.maketrans({"*": MULTIPLY_SYMBOL, "-": MINUS_SYMBOL, "|": ABS_SYMBOL})


class TokenKind(Enum):
    """How a stretch of equation text is highlighted."""

    Variable = "variable"
    Function = "function"
    Number = "number"
    Other = "other"


@dataclass(frozen=True)
class Span:
    """A highlighted stretch of text: ``length`` characters from ``start``."""

    start: int
    length: int
    kind: TokenKind

    @property
    def end(self) -> int:
        return self.start + self.length


def tidy_symbols(text: str) -> str:
    """Replace typed ``*``, ``-`` and ``|`` with their mathematical symbols."""
    return text.translate(_REPLACEMENTS)


def wrap_selection(text: str, start: int, end: int, before: str, after: str) -> tuple[str, int]:
    """Surround ``text[start:end]`` with ``before`` and ``after``.

    Returns the new text and the cursor position, which sits just before
    ``after``; e.g. wrapping "2+x" in "sin(" and ")" gives "sin(2+x)".
    """
    if start > end:
        start, end = end, start
    start = max(0, min(start, len(text)))
    end = max(0, min(end, len(text)))
    selected = text[start:end]
    new_text = text[:start] + before + selected + after + text[end:]
    cursor = start + len(before) + len(selected)
    return new_text, cursor


def _is_fraction(code: int) -> bool:
    return 0xBC <= code <= 0xBE or 0x2153 <= code <= 0x215E


def _is_power(code: int) -> bool:
    return 0xB2 <= code <= 0xB3 or code == 0x2070 or 0x2074 <= code <= 0x2079


def highlight(
    text: str,
    variables: Iterable[str],
    functions: Iterable[str],
    decimal_point: str = ".",
) -> list[Span]:
    """Split ``text`` into highlighted spans covering it from start to end.

    Variables are matched before functions, each in the order given; any other
    character is a number (digits, fractions, superscript powers, the decimal
    point) or other.
    """
    variable_names = [name for name in variables if name]
    function_names = [name for name in functions if name]
    spans: list[Span] = []
    i = 0
    while i < len(text):
        matched = next((name for name in variable_names if text.startswith(name, i)), None)
        kind = TokenKind.Variable
        if matched is None:
            matched = next((name for name in function_names if text.startswith(name, i)), None)
            kind = TokenKind.Function
        if matched is not None:
            spans.append(Span(i, len(matched), kind))
            i += len(matched)
            continue

        ch = text[i]
        code = ord(ch)
        if _is_fraction(code) or _is_power(code) or ch.isdecimal() or ch == decimal_point:
            spans.append(Span(i, 1, TokenKind.Number))
        else:
            spans.append(Span(i, 1, TokenKind.Other))
        i += 1
    return spans


def matching_bracket(text: str, cursor: int) -> tuple[int, int] | None:
    """Find the bracket at (or just before) ``cursor`` and the one matching it.

    Returns the positions of both brackets, or None when there is no bracket
    at the cursor or it is unmatched.
    """
    if not text:
        return None
    pos = max(cursor, 0)
    if pos >= len(text):
        pos = len(text) - 1
    elif pos > 0 and text[pos - 1] in "()":
        pos -= 1

    if text[pos] not in "()":
        return None

    step = 1 if text[pos] == "(" else -1
    level = 0
    i = pos
    while 0 <= i < len(text):
        if text[i] == ")":
            level -= 1
        elif text[i] == "(":
            level += 1
        if level == 0:
            return pos, i
        i += step
    return None