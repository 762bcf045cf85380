"""Equations of plotted functions and the initial states of differential equations."""

from __future__ import annotations

import copy
import logging
from enum import Enum, auto
from typing import Iterator

from .values import PM_SYMBOL, ParseError, Value, get_evaluator

logger = logging.getLogger(__name__)

THETA_SYMBOL = "\u03b8"


class DifferentialState:
    """Initial conditions of a differential equation and the cached current state."""

    def __init__(self, order: int = 0) -> None:
        self.x0 = Value()
        self.y0: list[Value] = []
        self.x = 0.0
        self.y: list[float] = []
        self.set_order(order)

    def set_order(self, order: int) -> None:
        """Resize the initial values to ``order`` entries and reset the state."""
        order_was_zero = not self.y0
        if order < len(self.y0):
            del self.y0[order:]
        else:
            self.y0.extend(Value() for _ in range(order - len(self.y0)))
        if order_was_zero and order >= 1:
            self.y0[0].update_expression("1")
        self.reset_to_initial()

    def reset_to_initial(self) -> None:
        """Set the current state back to the initial conditions."""
        self.x = self.x0.value
        self.y = [value.value for value in self.y0]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DifferentialState):
            return NotImplemented
        return self.x0 == other.x0 and self.x == other.x and self.y0 == other.y0 and self.y == other.y

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"DifferentialState(x0={self.x0!r}, y0={self.y0!r})"


class DifferentialStates:
    """All initial states of one equation, with the maximum integration step."""

    def __init__(self) -> None:
        self._data: list[DifferentialState] = []
        self._order = 0
        self._unique_state = False
        self._step = Value.from_number(0.05)

    @property
    def order(self) -> int:
        return self._order

    @property
    def step(self) -> Value:
        return self._step

    def set_unique_state(self, unique: bool) -> None:
        """Allow only one state (as for Cartesian integrals); drops any extra states."""
        self._unique_state = unique
        if unique and len(self._data) > 1:
            del self._data[1:]

    def set_order(self, order: int) -> None:
        self._order = order
        for state in self._data:
            state.set_order(order)

    def add(self) -> DifferentialState:
        """Create a state, or return the existing one if only one is allowed."""
        if not self._unique_state or not self._data:
            self._data.append(DifferentialState(self._order))
        else:
            logger.debug("Unable to add another state")
        return self._data[-1]

    def reset_to_initial(self) -> None:
        for state in self._data:
            state.reset_to_initial()

    def set_step(self, step: Value | str) -> None:
        """Set the maximum step; raise ValueError unless it is strictly positive."""
        if isinstance(step, str):
            step = Value(step)
        if step.value <= 0:
            raise ValueError(f"step {step.expression!r} must be strictly positive")
        self._step = copy.deepcopy(step)

    def remove(self, index: int, count: int = 1) -> None:
        del self._data[index : index + count]

    def clear(self) -> None:
        self._data.clear()

    def copy(self) -> DifferentialStates:
        return copy.deepcopy(self)

    def __len__(self) -> int:
        return len(self._data)

    def __getitem__(self, index: int) -> DifferentialState:
        return self._data[index]

    def __iter__(self) -> Iterator[DifferentialState]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DifferentialStates):
            return NotImplemented
        return self._data == other._data and self._step == other._step

    __hash__ = None  # type: ignore[assignment]


class EquationType(Enum):
    Constant = auto()
    Cartesian = auto()
    ParametricX = auto()
    ParametricY = auto()
    Polar = auto()
    Implicit = auto()
    Differential = auto()


class Equation:
    """One mathematical equation, such as ``f(x)=x^2``."""

    def __init__(self, type: EquationType, parent: object | None = None) -> None:
        self._type = type
        self._parent = parent
        self._fstr = ""
        self._variables: list[str] = []
        self._uses_parameter = False
        self._pm_signature: list[bool] = []
        self.used_names: frozenset[str] = frozenset()
        self.differential_states = DifferentialStates()

        if type in (EquationType.Differential, EquationType.Cartesian):
            self.differential_states.set_unique_state(type is EquationType.Cartesian)
            self.differential_states.set_order(self.order())
            self.differential_states.add()

    @property
    def type(self) -> EquationType:
        return self._type

    @property
    def parent(self) -> object | None:
        return self._parent

    @property
    def fstr(self) -> str:
        return self._fstr

    @property
    def variables(self) -> list[str]:
        return list(self._variables)

    @property
    def uses_parameter(self) -> bool:
        return self._uses_parameter

    @property
    def pm_signature(self) -> list[bool]:
        return list(self._pm_signature)

    def name(self, remove_primes: bool = True) -> str:
        """The function name, e.g. ``f`` for ``f(x)=x^2``."""
        fstr = self._fstr
        if not fstr:
            return ""
        open_pos = fstr.find("(")
        equals = fstr.find("=")
        if equals == -1 and open_pos == -1:
            return ""
        if (equals > open_pos and open_pos != -1) or equals == -1:
            pos = open_pos
        else:
            pos = equals
        result = fstr[:pos].strip()
        if remove_primes:
            result = result.replace("'", "")
        return result

    def order(self) -> int:
        """The order of a differential equation; 1 for Cartesian equations."""
        if self._type is EquationType.Cartesian:
            return 1
        return self.name(False).count("'")

    def pm_count(self) -> int:
        """The number of plus-minus symbols in the equation."""
        return self._fstr.count(PM_SYMBOL)

    def looks_like_function(self) -> bool:
        """Whether the text reads like ``f(x) = ...`` rather than ``y = ...``."""
        open_pos = self._fstr.find("(")
        equals = self._fstr.find("=")
        if open_pos != -1 and open_pos < equals:
            return True
        if self._type in (EquationType.Cartesian, EquationType.Differential, EquationType.ParametricY):
            return self.name() != "y"
        if self._type is EquationType.Polar:
            return self.name() != "r"
        if self._type is EquationType.ParametricX:
            return self.name() != "x"
        return False

    def _update_variables(self) -> None:
        if self._type is EquationType.Constant:
            return

        variables: list[str] = []
        if self.looks_like_function():
            p1 = self._fstr.find("(")
            p2 = self._fstr.find(")")
            if p1 != -1 and p2 != -1:
                inner = self._fstr[p1 + 1 : p2] if p2 > p1 else self._fstr[p1 + 1 :]
                for part in inner.split(","):
                    part = part.replace(" ", "")
                    if part:
                        variables.append(part)
        elif self._type in (EquationType.Cartesian, EquationType.Differential):
            variables += ["x", "k"]
        elif self._type is EquationType.Polar:
            variables += [THETA_SYMBOL, "k"]
        elif self._type in (EquationType.ParametricX, EquationType.ParametricY):
            variables += ["t", "k"]
        elif self._type is EquationType.Implicit:
            variables += ["x", "y", "k"]

        if self._type is EquationType.Differential and self.name():
            name = self.name()
            for _ in range(self.order()):
                variables.append(name)
                name += "'"

        self._variables = variables

        if self._type is EquationType.Implicit:
            expected = 2
        elif self._type is EquationType.Differential:
            expected = self.order() + 1
        elif self._type is EquationType.Constant:
            expected = 0
        else:
            expected = 1
        self._uses_parameter = len(variables) > expected

    def parameter_name(self) -> str:
        """The name of the parameter variable, or an empty string if there is none."""
        if not self._uses_parameter:
            return ""
        return self._variables[2 if self._type is EquationType.Implicit else 1]

    def _check(self) -> None:
        fstr = self._fstr
        equals = fstr.find("=")
        if equals == -1 or not fstr[equals + 1 :].strip():
            raise ParseError("syntax error")
        if self._type is EquationType.Differential and self.order() < 1:
            raise ParseError("zero order")
        max_args = self.order() + (3 if self._type is EquationType.Implicit else 2)
        if len(self._variables) > max_args:
            raise ParseError("too many arguments")
        self.used_names = get_evaluator().check_equation(self)

    def set_fstr(self, fstr: str, force: bool = False) -> bool:
        """Set the equation text.

        Raises ParseError and keeps the previous text if ``fstr`` is invalid.
        With ``force`` the text is kept anyway and False is returned instead.
        """
        previous, previous_used = self._fstr, self.used_names
        self._fstr = fstr
        self._update_variables()
        try:
            self._check()
        except ParseError as error:
            if not force:
                self._fstr = previous
                self._update_variables()
                self.used_names = previous_used
                raise
            logger.debug("fstr %r invalid, but forcing anyway: %s at position %d", fstr, error, error.position)
            self.used_names = frozenset()
            return False
        self.differential_states.set_order(self.order())
        return True

    def set_pm_signature(self, signature: list[bool]) -> None:
        """Choose plus (True) or minus (False) for each plus-minus symbol."""
        self.differential_states.reset_to_initial()
        self._pm_signature = list(signature)

    def differs_from(self, other: Equation) -> bool:
        """Whether the user-entered values differ from those of ``other``."""
        return self._fstr != other.fstr or self.differential_states != other.differential_states

    def copy_from(self, other: Equation) -> None:
        """Take over the text and differential states of ``other``."""
        try:
            self.set_fstr(other.fstr)
        except ParseError as error:
            logger.debug("could not copy equation %r: %s", other.fstr, error)
        self.differential_states = other.differential_states.copy()

    def __repr__(self) -> str:
        return f"Equation({self._type.name}, {self._fstr!r})"