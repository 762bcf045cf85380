"""Numeric expressions, the evaluator behind them, and plot appearance data."""

from __future__ import annotations

import bisect
import logging
import math
import operator
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Mapping, NamedTuple

logger = logging.getLogger(__name__)

MINUS_SYMBOL = "\u2212"
PM_SYMBOL = "\u00b1"
PI_SYMBOL = "\u03c0"
INFINITY_SYMBOL = "\u221e"

Color = tuple[int, int, int]
BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)

_Node = Callable[[Mapping[str, float]], float]


class ParseError(ValueError):
    """An expression could not be parsed or evaluated."""

    def __init__(self, message: str, position: int = -1) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        return self.message


class _Token(NamedTuple):
    kind: str
    text: str
    position: int


_MINUS = frozenset({"-", MINUS_SYMBOL})
_SIGNS = ("+", "-", MINUS_SYMBOL, PM_SYMBOL)
_MULTIPLY = ("*", "\u2219", "\u00b7", "\u00d7")
_SUPERSCRIPTS = {"\u00b2": 2.0, "\u00b3": 3.0}
_OPERATORS = frozenset(_SIGNS) | frozenset(_MULTIPLY) | frozenset(_SUPERSCRIPTS) | {"/", "^", "(", ")", ","}
_DIGITS = "0123456789"


def _tokenize(text: str, offset: int) -> list[_Token]:
    tokens: list[_Token] = []
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if ch.isspace():
            i += 1
            continue
        if ch in _DIGITS or (ch == "." and i + 1 < n and text[i + 1] in _DIGITS):
            j = i
            while j < n and text[j] in _DIGITS:
                j += 1
            if j < n and text[j] == ".":
                j += 1
                while j < n and text[j] in _DIGITS:
                    j += 1
            tokens.append(_Token("num", text[i:j], i + offset))
            i = j
            continue
        if ch.isalpha() or ch == "_":
            j = i + 1
            while j < n and (text[j].isalpha() or text[j] in _DIGITS or text[j] == "_"):
                j += 1
            while j < n and text[j] == "'":
                j += 1
            tokens.append(_Token("name", text[i:j], i + offset))
            i = j
            continue
        if ch == INFINITY_SYMBOL:
            tokens.append(_Token("name", ch, i + offset))
            i += 1
            continue
        if ch in _OPERATORS:
            tokens.append(_Token("op", ch, i + offset))
            i += 1
            continue
        raise ParseError(f"unexpected character {ch!r}", i + offset)
    tokens.append(_Token("end", "", n + offset))
    return tokens


def _const(value: float) -> _Node:
    return lambda env: value


def _binary(op: Callable[[float, float], float], lhs: _Node, rhs: _Node) -> _Node:
    return lambda env: op(lhs(env), rhs(env))


def _negate(operand: _Node) -> _Node:
    return lambda env: -operand(env)


def _variable(name: str) -> _Node:
    return lambda env: env[name]


def _call(fn: Callable[..., float], args: list[_Node]) -> _Node:
    return lambda env: fn(*(arg(env) for arg in args))


class _Parser:
    def __init__(
        self,
        text: str,
        offset: int,
        variables: Iterable[str],
        constants: Mapping[str, float],
        functions: Mapping[str, tuple[int, Callable[..., float]]],
    ) -> None:
        self._tokens = _tokenize(text, offset)
        self._index = 0
        self._variables = frozenset(variables)
        self._constants = constants
        self._functions = functions
        self.used: set[str] = set()

    def _peek(self) -> _Token:
        return self._tokens[self._index]

    def _advance(self) -> _Token:
        token = self._tokens[self._index]
        if token.kind != "end":
            self._index += 1
        return token

    def _accept(self, *ops: str) -> _Token | None:
        token = self._peek()
        if token.kind == "op" and token.text in ops:
            self._index += 1
            return token
        return None

    def _expect(self, op: str, message: str) -> None:
        if self._accept(op) is None:
            raise ParseError(message, self._peek().position)

    def parse(self) -> _Node:
        first = self._peek()
        if first.kind == "end":
            raise ParseError("empty expression", first.position)
        node = self._expression()
        token = self._peek()
        if token.kind != "end":
            raise ParseError(f"unexpected {token.text!r}", token.position)
        return node

    def _expression(self) -> _Node:
        node = self._term()
        while (token := self._accept(*_SIGNS)) is not None:
            rhs = self._term()
            op = operator.sub if token.text in _MINUS else operator.add
            node = _binary(op, node, rhs)
        return node

    def _term(self) -> _Node:
        node = self._unary()
        while True:
            token = self._peek()
            if token.kind == "op" and token.text in _MULTIPLY:
                self._index += 1
                node = _binary(operator.mul, node, self._unary())
            elif token.kind == "op" and token.text == "/":
                self._index += 1
                node = _binary(operator.truediv, node, self._unary())
            elif token.kind in ("num", "name") or (token.kind == "op" and token.text == "("):
                node = _binary(operator.mul, node, self._power())
            else:
                return node

    def _unary(self) -> _Node:
        token = self._accept(*_SIGNS)
        if token is not None:
            operand = self._unary()
            return _negate(operand) if token.text in _MINUS else operand
        return self._power()

    def _power(self) -> _Node:
        base = self._postfix()
        if self._accept("^") is not None:
            return _binary(math.pow, base, self._unary())
        return base

    def _postfix(self) -> _Node:
        node = self._primary()
        while (token := self._accept(*_SUPERSCRIPTS)) is not None:
            node = _binary(math.pow, node, _const(_SUPERSCRIPTS[token.text]))
        return node

    def _primary(self) -> _Node:
        token = self._advance()
        if token.kind == "num":
            return _const(float(token.text))
        if token.kind == "name":
            return self._name(token)
        if token.kind == "op" and token.text == "(":
            node = self._expression()
            self._expect(")", "missing closing parenthesis")
            return node
        if token.kind == "end":
            raise ParseError("unexpected end of expression", token.position)
        raise ParseError(f"unexpected {token.text!r}", token.position)

    def _name(self, token: _Token) -> _Node:
        name = token.text
        if name in self._variables:
            self.used.add(name)
            return _variable(name)
        if name in self._functions:
            arity, fn = self._functions[name]
            self._expect("(", f"function {name} needs an argument list")
            args = [self._expression()]
            while self._accept(",") is not None:
                args.append(self._expression())
            self._expect(")", "missing closing parenthesis")
            if len(args) != arity:
                raise ParseError(f"{name} takes {arity} argument(s)", token.position)
            self.used.add(name)
            return _call(fn, args)
        if name in self._constants:
            self.used.add(name)
            return _const(self._constants[name])
        raise ParseError(f"unknown name {name!r}", token.position)


def _floor(x: float) -> float:
    return float(math.floor(x))


def _ceil(x: float) -> float:
    return float(math.ceil(x))


_BUILTIN_CONSTANTS: dict[str, float] = {
    "pi": math.pi,
    PI_SYMBOL: math.pi,
    "e": math.e,
    INFINITY_SYMBOL: math.inf,
}

_BUILTIN_FUNCTIONS: dict[str, tuple[int, Callable[..., float]]] = {
    "sin": (1, math.sin),
    "cos": (1, math.cos),
    "tan": (1, math.tan),
    "arcsin": (1, math.asin),
    "arccos": (1, math.acos),
    "arctan": (1, math.atan),
    "sinh": (1, math.sinh),
    "cosh": (1, math.cosh),
    "tanh": (1, math.tanh),
    "sqrt": (1, math.sqrt),
    "exp": (1, math.exp),
    "ln": (1, math.log),
    "log": (1, math.log10),
    "abs": (1, math.fabs),
    "floor": (1, _floor),
    "ceil": (1, _ceil),
    "min": (2, min),
    "max": (2, max),
}


def _run(node: _Node, env: Mapping[str, float]) -> float:
    try:
        return float(node(env))
    except ZeroDivisionError:
        raise ParseError("division by zero") from None
    except (ValueError, OverflowError):
        raise ParseError("math error") from None


class Evaluator:
    """Parses and evaluates numeric expressions and checks equations."""

    def __init__(
        self,
        constants: Mapping[str, float] | None = None,
        functions: Mapping[str, tuple[int, Callable[..., float]]] | None = None,
    ) -> None:
        self.constants: dict[str, float] = dict(constants or {})
        self.functions: dict[str, tuple[int, Callable[..., float]]] = dict(functions or {})

    def _constant_table(self) -> dict[str, float]:
        return {**_BUILTIN_CONSTANTS, **self.constants}

    def _function_table(self) -> dict[str, tuple[int, Callable[..., float]]]:
        return {**_BUILTIN_FUNCTIONS, **self.functions}

    def function_names(self) -> list[str]:
        """Names of every function the evaluator knows, sorted."""
        return sorted(self._function_table())

    def evaluate(self, expression: str) -> float:
        """Evaluate an expression without free variables."""
        parser = _Parser(expression, 0, (), self._constant_table(), self._function_table())
        return _run(parser.parse(), {})

    def check_equation(self, equation: object) -> frozenset[str]:
        """Check the right-hand side of ``equation.fstr``; return the names it uses."""
        fstr: str = getattr(equation, "fstr")
        variables = getattr(equation, "variables", ())
        if callable(variables):
            variables = variables()
        equals = fstr.find("=")
        if equals < 0 or not fstr[equals + 1 :].strip():
            raise ParseError("syntax error", len(fstr))
        parser = _Parser(
            fstr[equals + 1 :], equals + 1, variables, self._constant_table(), self._function_table()
        )
        parser.parse()
        return frozenset(parser.used)


_evaluator = Evaluator()


def set_evaluator(evaluator: Evaluator) -> None:
    """Replace the evaluator shared by values and equations."""
    global _evaluator
    _evaluator = evaluator


def get_evaluator() -> Evaluator:
    """The evaluator shared by values and equations."""
    return _evaluator


def format_number(value: float) -> str:
    """Format a number so that it reads back as an expression."""
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return INFINITY_SYMBOL if value > 0 else "-" + INFINITY_SYMBOL
    if value == 0:
        return "0"
    text = format(value, ".16g")
    if "e" in text:
        mantissa, exponent = text.split("e")
        return f"{mantissa}*10^{int(exponent)}"
    return text


class Value:
    """An expression that evaluates directly to a number."""

    __slots__ = ("_expression", "_value")

    def __init__(self, expression: str = "") -> None:
        self._value = 0.0
        if not expression:
            self._expression = "0"
        else:
            self._expression = ""
            self.update_expression(expression)

    @classmethod
    def from_number(cls, value: float) -> Value:
        result = cls()
        result.set_number(value)
        return result

    @property
    def value(self) -> float:
        return self._value

    @property
    def expression(self) -> str:
        return self._expression

    def update_expression(self, expression: str) -> bool:
        """Take ``expression`` if it evaluates; return whether it did."""
        try:
            new_value = get_evaluator().evaluate(expression)
        except ParseError:
            return False
        self._value = new_value
        self._expression = expression
        return True

    def set_number(self, value: float) -> None:
        self._value = float(value)
        self._expression = format_number(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self._expression == other._expression

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Value({self._expression!r})"


class PenStyle(Enum):
    NoPen = 0
    SolidLine = 1
    DashLine = 2
    DotLine = 3
    DashDotLine = 4
    DashDotDotLine = 5


def pen_style_to_string(style: PenStyle) -> str:
    """The name used for ``style`` in saved files."""
    if isinstance(style, PenStyle):
        return style.name
    logger.warning("Unknown style %r", style)
    return PenStyle.SolidLine.name


def string_to_pen_style(text: str) -> PenStyle:
    """The pen style saved as ``text``; SolidLine if unknown."""
    try:
        return PenStyle[text]
    except KeyError:
        logger.warning("Unknown style %r", text)
        return PenStyle.SolidLine


def _check_color(color: Iterable[int]) -> Color:
    channels = tuple(int(c) for c in color)
    if len(channels) != 3 or not all(0 <= c <= 255 for c in channels):
        raise ValueError(f"invalid color {color!r}")
    return channels  # type: ignore[return-value]


class Gradient:
    """An ordered list of colour stops at positions between 0 and 1."""

    __slots__ = ("_stops",)

    def __init__(self, stops: Iterable[tuple[float, Color]] = ()) -> None:
        normalized: list[tuple[float, Color]] = []
        for position, color in stops:
            position = float(position)
            if not 0.0 <= position <= 1.0:
                raise ValueError(f"stop position {position} outside [0, 1]")
            normalized.append((position, _check_color(color)))
        normalized.sort(key=lambda stop: stop[0])
        if not normalized:
            normalized = [(0.0, BLACK), (1.0, WHITE)]
        self._stops = tuple(normalized)

    @property
    def stops(self) -> tuple[tuple[float, Color], ...]:
        return self._stops

    def color_at(self, position: float) -> Color:
        """The interpolated colour at ``position``, clamped to the outer stops."""
        stops = self._stops
        if position <= stops[0][0]:
            return stops[0][1]
        if position >= stops[-1][0]:
            return stops[-1][1]
        index = bisect.bisect_right([p for p, _ in stops], position)
        (p0, c0), (p1, c1) = stops[index - 1], stops[index]
        if p1 == p0:
            return c1
        t = (position - p0) / (p1 - p0)
        return tuple(round(a + (b - a) * t) for a, b in zip(c0, c1))  # type: ignore[return-value]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Gradient):
            return NotImplemented
        return self._stops == other._stops

    def __hash__(self) -> int:
        return hash(self._stops)

    def __repr__(self) -> str:
        return f"Gradient({list(self._stops)!r})"


@dataclass
class PlotAppearance:
    """How one plot of a function is drawn."""

    line_width: float = 0.3
    color: Color = BLACK
    style: PenStyle = PenStyle.SolidLine
    gradient: Gradient = field(default_factory=Gradient)
    use_gradient: bool = False
    show_extrema: bool = False
    show_tangent_field: bool = False
    visible: bool = False
    show_plot_name: bool = False