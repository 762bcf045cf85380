"""Validation helpers for coordinate ranges and constant names."""

from __future__ import annotations

from .constants import Constants
from .values import get_evaluator


class RangeError(ValueError):
    """A range whose minimum is not below its maximum."""


def validate_range(min_text: str, max_text: str) -> tuple[float, float]:
    """Evaluate both bounds of a range.

    Raises ParseError if a bound cannot be evaluated and RangeError if the
    minimum is not lower than the maximum.
    """
    evaluator = get_evaluator()
    low = evaluator.evaluate(min_text)
    high = evaluator.evaluate(max_text)
    if low >= high:
        raise RangeError("The minimum range value must be lower than the maximum range value")
    return low, high


class ConstantValidator:
    """Checks names for constants, allowing the name of the one being edited."""

    def __init__(self, constants: Constants) -> None:
        self._constants = constants
        self._working_name = ""

    def is_valid(self, name: str) -> bool:
        correct = self._constants.is_valid_name(name)
        in_use = self._constants.have(name) and self._working_name != name
        return correct and not in_use

    def set_working_name(self, name: str) -> None:
        """The name of the constant being edited, which may keep its own name."""
        self._working_name = name