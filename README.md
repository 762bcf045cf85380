# fnplot

The core model of a mathematical function plotter, with no user interface
attached. It covers expressions that evaluate to numbers, equations in several
forms, functions and the plots they expand into, user constants, and text
helpers for equation editors. It has no dependencies outside the standard
library.

## Modules

- `fnplot.values`: `Value` (an expression that evaluates to a number, built
  from text or with `Value.from_number`), `format_number`, `PlotAppearance`,
  `Gradient` (colour stops with `color_at`), `PenStyle` with
  `pen_style_to_string` / `string_to_pen_style`, and the `Evaluator` shared by
  the whole package (`get_evaluator` / `set_evaluator`). `ParseError` is
  raised when an expression cannot be parsed or evaluated.
- `fnplot.equation`: `Equation` in the forms listed by `EquationType`
  (Cartesian, parametric x and y, polar, implicit, differential, constant),
  with `DifferentialState` and `DifferentialStates` for the initial
  conditions of differential equations. `Equation.set_fstr` raises
  `ParseError` and keeps the previous text when the new text is invalid,
  unless `force=True` is given.
- `fnplot.function`: `Function`, `Plot`, `Parameter`, `ParameterSettings`,
  the enums `PMode`, `FunctionType`, `PlotCombination`, `ParameterType` and
  `ImplicitMode`, `type_to_string` / `string_to_type`, and a
  `FunctionRegistry` that gives functions ids and refuses to remove a function
  that another depends on. `Function.plots()` expands a function into one plot
  for each parameter value, visible derivative, plus-minus sign combination
  and initial state.
- `fnplot.initial_conditions`: `InitialConditionsModel`, a table of the
  initial conditions of a differential equation (rows are states, column 0
  is x₀, the others y₀, y₀′, …).
- `fnplot.constants`: `Constants`, `Constant` and `ConstantScope`. Constants
  are kept in name order, notify subscribers on change, and the global ones
  can be loaded from and saved to an INI-style settings file.
- `fnplot.tools`: `validate_range` (raises `RangeError` when the minimum is
  not below the maximum) and `ConstantValidator`.
- `fnplot.gradient`: `GradientEditor`, the geometry and mouse behaviour of a
  strip of gradient stops (press, move, release, double click to add a stop,
  right button to remove one).
- `fnplot.editing`: `tidy_symbols`, `wrap_selection`, `highlight` (returns
  `Span`s tagged with a `TokenKind`) and `matching_bracket`.
- `fnplot.calculator`: `Calculator`, which evaluates expressions and keeps an
  HTML history of the results.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from fnplot.calculator import Calculator

calc = Calculator()
calc.calculate("1+2")        # 3.0
print(calc.history())        # 1+2 = <b>3</b><br>
```

```python
from fnplot.function import Function, FunctionType

f = Function(FunctionType.Cartesian)
f.eq[0].set_fstr("f(x)=x^2")
print(f.eq[0].name())        # f
print(len(f.plots()))        # 1
```

```python
from fnplot.constants import Constant, Constants
from fnplot.values import Value

constants = Constants()
constants.add("A", Constant(Value("3")))
constants.save("constants.ini")
```

## The evaluator

`Value`, `Equation`, `Constants`, `validate_range` and the calculator all use
the evaluator returned by `get_evaluator`. It understands numbers, `+ - * / ^`,
the superscripts ² and ³, implicit multiplication, parentheses, the constants
`pi`, `π`, `e` and `∞`, and functions such as `sin`, `cos`, `sqrt`, `ln`,
`log`, `abs`, `min` and `max`. Extra constants and functions can be passed to
`Evaluator(...)`. A replacement installed with `set_evaluator` must provide
`evaluate(expression)`, `check_equation(equation)` and `function_names()`,
and raise `ParseError` on failure.

## What this package does not do

It draws nothing and has no windows, dialogs or command-line program: it holds
the data and rules that a plotting program would display and edit. It does not
compute curves, integrals, extrema or differential-equation solutions, and it
does not read or write plot documents; the only storage is the constants
settings file.