"""A small calculator keeping an HTML history of evaluated expressions."""

from __future__ import annotations

from .values import ParseError, format_number, get_evaluator


class Calculator:
    """Evaluates expressions and records each result as a line of HTML."""

    def __init__(self) -> None:
        self._lines: list[str] = []

    def calculate(self, text: str) -> float | None:
        """Evaluate ``text``, record it, and return its value or None on error."""
        shown = text.replace("<", "&lt;")
        try:
            value = get_evaluator().evaluate(text)
        except ParseError as error:
            self._lines.append(f'{shown} = ? <font color="blue">({error.message})</font><br>')
            return None
        self._lines.append(f"{shown} = <b>{format_number(value)}</b><br>")
        return value

    def history(self) -> str:
        """The HTML of every calculation so far."""
        return "".join(self._lines)