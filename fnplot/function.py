"""Plotted functions, their plots, and a registry that identifies them by id."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum, IntFlag
from typing import Iterator

from .equation import DifferentialState, Equation, EquationType
from .values import PI_SYMBOL, Color, PlotAppearance, Value, format_number

logger = logging.getLogger(__name__)

INTEGRAL_SYMBOL = "\u222b"


class PMode(IntEnum):
    Derivative0 = 0
    Derivative1 = 1
    Derivative2 = 2
    Derivative3 = 3
    Integral = 4


class FunctionType(Enum):
    Cartesian = "cartesian"
    Parametric = "parametric"
    Polar = "polar"
    Implicit = "implicit"
    Differential = "differential"


class PlotCombination(IntFlag):
    DifferentParameters = 0x1
    DifferentDerivatives = 0x2
    DifferentPMSignatures = 0x4
    DifferentInitialStates = 0x8
    AllCombinations = 0x1F


class ImplicitMode(Enum):
    FixedX = 0
    FixedY = 1
    UnfixedXY = 2


@dataclass
class ParameterSettings:
    """Which parameter values a function is plotted with."""

    animating: bool = field(default=False, compare=False)
    use_slider: bool = False
    slider_id: int = 0
    use_list: bool = False
    values: list[Value] = field(default_factory=list)


class ParameterType(Enum):
    Unknown = 0
    Animated = 1
    Slider = 2
    List = 3


@dataclass(frozen=True)
class Parameter:
    """Identifies one parameter value: from a slider or from the function's list."""

    type: ParameterType = ParameterType.Unknown
    slider_id: int = -1
    list_pos: int = -1


def type_to_string(type: FunctionType) -> str:
    """The name used for ``type`` in saved files."""
    if isinstance(type, FunctionType):
        return type.value
    logger.warning("Unknown type %r", type)
    return "unknown"


def string_to_type(text: str) -> FunctionType:
    """The function type saved as ``text``; Cartesian if unknown."""
    try:
        return FunctionType(text)
    except ValueError:
        logger.warning("Unknown type %r", text)
        return FunctionType.Cartesian


class FunctionRegistry:
    """Functions keyed by their id."""

    def __init__(self) -> None:
        self._functions: dict[int, Function] = {}
        self._next_id = 0

    def add(self, function: Function) -> int:
        """Store ``function`` under a fresh id, which is returned."""
        while self._next_id in self._functions:
            self._next_id += 1
        function.id = self._next_id
        self._functions[self._next_id] = function
        self._next_id += 1
        return function.id

    def get(self, function_id: int) -> Function | None:
        return self._functions.get(function_id)

    def remove(self, function_id: int) -> Function:
        """Remove and return a function; refuses if another function depends on it."""
        function = self._functions[function_id]
        for other in self._functions.values():
            if other is not function and function_id in other.dependencies:
                raise ValueError(f"function {function_id} is used by function {other.id}")
        del self._functions[function_id]
        return function

    def __contains__(self, function_id: object) -> bool:
        return function_id in self._functions

    def __iter__(self) -> Iterator[Function]:
        return iter(list(self._functions.values()))

    def __len__(self) -> int:
        return len(self._functions)


class Function:
    """A plotted function: its equations, plot range, parameters and appearance."""

    def __init__(self, type: FunctionType, radians: bool = True) -> None:
        self._type = type
        self._id = 0
        self.x = 0.0
        self.y = 0.0
        self.k = 0.0
        self.implicit_mode = ImplicitMode.UnfixedXY
        self.use_custom_min = False
        self.use_custom_max = False
        self.dmin = Value("0")
        self.dmax = Value("2" + PI_SYMBOL) if radians else Value("360")
        self.parameters = ParameterSettings()
        self.dependencies: list[int] = []
        self._appearances: dict[PMode, PlotAppearance] = {mode: PlotAppearance() for mode in PMode}
        self._appearances[PMode.Derivative0].visible = True

        if type is FunctionType.Cartesian:
            self.eq = [Equation(EquationType.Cartesian, self)]
        elif type is FunctionType.Polar:
            self.eq = [Equation(EquationType.Polar, self)]
            self.use_custom_min = self.use_custom_max = True
        elif type is FunctionType.Parametric:
            self.eq = [Equation(EquationType.ParametricX, self), Equation(EquationType.ParametricY, self)]
            self.use_custom_min = self.use_custom_max = True
        elif type is FunctionType.Implicit:
            self.eq = [Equation(EquationType.Implicit, self)]
        else:
            self.eq = [Equation(EquationType.Differential, self)]

    @property
    def type(self) -> FunctionType:
        return self._type

    @property
    def id(self) -> int:
        return self._id

    @id.setter
    def id(self, value: int) -> None:
        self._id = value

    def copy_from(self, other: Function) -> bool:
        """Copy the user-editable settings of ``other``; return whether anything changed."""
        changed = False
        modes = list(PMode) if self._type is FunctionType.Cartesian else [PMode.Derivative0]
        if self._type is FunctionType.Cartesian:
            modes = [PMode.Derivative0, PMode.Derivative1, PMode.Derivative2, PMode.Derivative3, PMode.Integral]
        for mode in modes:
            theirs = other._appearances[mode]
            if self._appearances[mode] != theirs:
                self._appearances[mode] = copy.deepcopy(theirs)
                changed = True
        for attribute in ("dmin", "dmax", "use_custom_min", "use_custom_max", "parameters"):
            theirs = getattr(other, attribute)
            if getattr(self, attribute) != theirs:
                setattr(self, attribute, copy.deepcopy(theirs))
                changed = True
        for mine, theirs in zip(self.eq, other.eq):
            if mine.differs_from(theirs):
                changed = True
                mine.copy_from(theirs)
        return changed

    def name(self) -> str:
        """The text of every equation, one per line."""
        return "\n".join(equation.fstr for equation in self.eq)

    def plot_appearance(self, mode: PMode) -> PlotAppearance:
        """The (mutable) appearance of the given plot."""
        return self._appearances[PMode(mode)]

    def set_plot_appearance(self, mode: PMode, appearance: PlotAppearance) -> None:
        self._appearances[PMode(mode)] = appearance

    def all_plots_hidden(self) -> bool:
        return not (
            self._appearances[PMode.Derivative0].visible
            or self._appearances[PMode.Derivative1].visible
            or self._appearances[PMode.Derivative2].visible
            or self._appearances[PMode.Integral].visible
        )

    def clear_function_dependencies(self) -> None:
        self.dependencies.clear()

    def add_function_dependency(self, function: Function | None, registry: FunctionRegistry) -> None:
        """Record that this function uses ``function``; refuses circular dependencies."""
        if function is None or function.id in self.dependencies:
            return
        if function is self or function.depends_on(self, registry):
            raise ValueError("circular dependency")
        self.dependencies.append(function.id)

    def depends_on(self, function: Function | None, registry: FunctionRegistry) -> bool:
        """Whether this function depends, directly or not, on ``function``."""
        if function is None:
            return False
        if function.id in self.dependencies:
            return True
        for function_id in self.dependencies:
            used = registry.get(function_id)
            if used is not None and used.depends_on(function, registry):
                return True
        return False

    def plots(self, combinations: PlotCombination = PlotCombination.AllCombinations) -> list[Plot]:
        """Every plot drawn for this function under the given combinations."""
        if self.all_plots_hidden():
            return []

        settings = self.parameters
        base = Plot()
        base._bind(self)
        if settings.use_list:
            base.plot_number_count = len(settings.values) + (1 if settings.use_slider else 0)
        else:
            base.plot_number_count = 1

        single = (
            (not settings.use_list and not settings.use_slider)
            or settings.animating
            or not combinations & PlotCombination.DifferentParameters
            or (not settings.use_slider and settings.use_list and not settings.values)
        )

        result: list[Plot] = []
        if single:
            if settings.animating:
                base.parameter = Parameter(ParameterType.Animated)
            result.append(base)
        else:
            number = 0
            if settings.use_slider:
                result.append(
                    base._clone(
                        parameter=Parameter(ParameterType.Slider, slider_id=settings.slider_id),
                        plot_number=number,
                    )
                )
                number += 1
            if settings.use_list:
                for pos in range(len(settings.values)):
                    result.append(
                        base._clone(parameter=Parameter(ParameterType.List, list_pos=pos), plot_number=number)
                    )
                    number += 1

        if self._type is FunctionType.Cartesian and combinations & PlotCombination.DifferentDerivatives:
            result = [
                plot._clone(plot_mode=mode)
                for mode in PMode
                if self._appearances[mode].visible
                for plot in result
            ]

        if self._type is FunctionType.Differential and combinations & PlotCombination.DifferentInitialStates:
            result = [
                plot._clone(state_number=i)
                for i in range(len(self.eq[0].differential_states))
                for plot in result
            ]

        if combinations & PlotCombination.DifferentPMSignatures:
            counts = [equation.pm_count() for equation in self.eq]
            size = sum(counts)
            duplicated: list[Plot] = []
            for i in range(2**size):
                bits = [bool(i & (1 << j)) for j in range(size)]
                signature: list[list[bool]] = []
                at = 0
                for count in counts:
                    signature.append(bits[at : at + count])
                    at += count
                duplicated.extend(
                    plot._clone(pm_signature=[list(sig) for sig in signature]) for plot in result
                )
            result = duplicated

        return result

    def __repr__(self) -> str:
        return f"Function({self._type.name}, id={self._id}, {self.name()!r})"


class Plot:
    """One drawn curve of a function."""

    def __init__(self) -> None:
        self.parameter = Parameter()
        self.plot_mode = PMode.Derivative0
        self.plot_number = 0
        self.plot_number_count = 1
        self.state_number = -1
        self.pm_signature: list[list[bool]] = []
        self._function_id = -1
        self._function: Function | None = None

    def _bind(self, function: Function) -> None:
        self._function_id = function.id
        self._function = function

    def _clone(self, **changes: object) -> Plot:
        result = copy.copy(self)
        result.pm_signature = [list(sig) for sig in self.pm_signature]
        for name, value in changes.items():
            setattr(result, name, value)
        return result

    @property
    def function_id(self) -> int:
        return self._function_id

    @property
    def function(self) -> Function | None:
        return self._function

    def set_function_id(self, function_id: int, registry: FunctionRegistry) -> None:
        self._function_id = function_id
        self._function = registry.get(function_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Plot):
            return NotImplemented
        return (
            self._function_id == other._function_id
            and self.plot_mode == other.plot_mode
            and self.parameter == other.parameter
            and self.state_number == other.state_number
        )

    __hash__ = None  # type: ignore[assignment]

    def name(self) -> str:
        """A name distinguishing this plot from the others.

        Slider plots show the function's current parameter value.
        """
        function = self._function
        if function is None:
            return ""
        text = function.name()
        if function.eq[0].uses_parameter:
            value = self.parameter_value(function.k)
            text += f"\n{function.eq[0].parameter_name()} = {format_number(value)}"
        if self.plot_mode is PMode.Derivative1:
            text = text.split("=", 1)[0].replace("(", "'(")
        if self.plot_mode is PMode.Derivative2:
            text = text.split("=", 1)[0].replace("(", "''(")
        if self.plot_mode is PMode.Integral:
            function_name = text.split("=", 1)[0]
            pieces = function_name.split("(")
            argument = pieces[1] if len(pieces) > 1 else ""
            variable = argument.replace(")", "").split(",")[0]
            text = f"{INTEGRAL_SYMBOL} {function_name}d{variable}"
        return text

    def parameter_value(self, slider_value: float | None = None) -> float:
        """The parameter value of this plot; slider plots need ``slider_value``."""
        kind = self.parameter.type
        if kind is ParameterType.Slider:
            if slider_value is None:
                raise ValueError(f"slider {self.parameter.slider_id} has no value")
            return float(slider_value)
        if kind is ParameterType.List:
            if self._function is None:
                return 0.0
            values = self._function.parameters.values
            if 0 <= self.parameter.list_pos < len(values):
                return values[self.parameter.list_pos].value
            return 0.0
        if kind is ParameterType.Animated:
            logger.warning("Shouldn't use this function for animated parameter")
        return 0.0

    def update_function(self, slider_value: float | None = None) -> None:
        """Set the function's plus-minus signatures and parameter for this plot."""
        function = self._function
        if function is None:
            return
        if len(self.pm_signature) > len(function.eq):
            raise ValueError("more plus-minus signatures than equations")
        for equation, signature in zip(function.eq, self.pm_signature):
            equation.set_pm_signature(signature)
        if self.parameter.type is not ParameterType.Animated:
            function.k = self.parameter_value(slider_value)

    def differentiate(self) -> None:
        if self.plot_mode is PMode.Derivative3:
            logger.warning("Can't handle this yet")
        elif self.plot_mode is PMode.Integral:
            self.plot_mode = PMode.Derivative0
        else:
            self.plot_mode = PMode(self.plot_mode + 1)

    def integrate(self) -> None:
        if self.plot_mode is PMode.Integral:
            logger.warning("Can't handle this yet")
        elif self.plot_mode is PMode.Derivative0:
            self.plot_mode = PMode.Integral
        else:
            self.plot_mode = PMode(self.plot_mode - 1)

    def color(self) -> Color:
        """The colour to draw with, taken from the gradient when one is used."""
        if self._function is None:
            raise ValueError("plot has no function")
        appearance = self._function.plot_appearance(self.plot_mode)
        if self.plot_number_count <= 1 or not appearance.use_gradient:
            return appearance.color
        return appearance.gradient.color_at(self.plot_number / (self.plot_number_count - 1))

    def derivative_number(self) -> int:
        """-1 for the integral, otherwise the order of the derivative."""
        if self.plot_mode is PMode.Integral:
            return -1
        return int(self.plot_mode)

    def state(self) -> DifferentialState | None:
        """The differential state drawn by this plot, if any."""
        if self._function is None or self.state_number < 0:
            return None
        states = self._function.eq[0].differential_states
        if len(states) <= self.state_number:
            return None
        return states[self.state_number]

    def __repr__(self) -> str:
        return f"Plot(function={self._function_id}, mode={self.plot_mode.name}, parameter={self.parameter})"