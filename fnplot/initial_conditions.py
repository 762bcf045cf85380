"""A table of the initial conditions of a differential equation."""

from __future__ import annotations

from typing import Iterable

from .equation import DifferentialStates, Equation
from .values import Value

SUBSCRIPT_ZERO = "\u2080"


class InitialConditionsModel:
    """Rows are initial states; column 0 is x0, the others are y0, y0', ..."""

    def __init__(self) -> None:
        self.equation: Equation | None = None
        self.states = DifferentialStates()

    def init(self, equation: Equation | None) -> None:
        """Edit a copy of the states of ``equation``."""
        self.equation = equation
        if equation is not None:
            self.states = equation.differential_states.copy()

    def set_order(self, order: int) -> None:
        self.states.set_order(order)

    def row_count(self) -> int:
        return len(self.states)

    def column_count(self) -> int:
        return self.states.order + 1

    def _value(self, row: int, column: int) -> Value | None:
        if not 0 <= row < len(self.states) or column < 0:
            return None
        state = self.states[row]
        if column == 0:
            return state.x0
        if column - 1 < len(state.y0):
            return state.y0[column - 1]
        return None

    def data(self, row: int, column: int) -> str | None:
        """The expression in a cell, or None outside the table."""
        value = self._value(row, column)
        return None if value is None else value.expression

    def set_data(self, row: int, column: int, text: str) -> bool:
        """Set a cell's expression; return False if the cell does not exist."""
        value = self._value(row, column)
        if value is None:
            return False
        value.update_expression(text)
        return True

    def header(self, section: int) -> str:
        """The column heading, such as ``x₀`` or ``f'(x₀)``."""
        equation = self.equation
        if equation is None:
            return str(section + 1)
        variables = equation.variables
        param = (variables[0] if variables else "x") + SUBSCRIPT_ZERO
        if section == 0:
            return param
        return f"{equation.name(True)}{chr(39) * (section - 1)}({param})"

    def insert_rows(self, count: int = 1) -> None:
        for _ in range(count):
            self.states.add()

    def remove_rows(self, rows: Iterable[int]) -> None:
        """Remove the given rows, highest first so indexes stay valid."""
        for row in sorted(set(rows), reverse=True):
            self.states.remove(row)