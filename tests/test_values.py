import math
from types import SimpleNamespace

import pytest

from fnplot.values import (
    BLACK,
    WHITE,
    Evaluator,
    Gradient,
    ParseError,
    PenStyle,
    PlotAppearance,
    Value,
    format_number,
    get_evaluator,
    pen_style_to_string,
    set_evaluator,
    string_to_pen_style,
)


@pytest.fixture
def custom_evaluator():
    previous = get_evaluator()
    evaluator = Evaluator(constants={"k": 4.0})
    set_evaluator(evaluator)
    yield evaluator
    set_evaluator(previous)


def test_builtin_constants():
    ev = Evaluator()
    assert ev.evaluate("pi") == math.pi
    assert ev.evaluate("\u03c0") == ev.evaluate("pi")
    assert ev.evaluate("e") == math.e
    assert ev.evaluate("\u221e") == math.inf


def test_precedence_and_associativity():
    ev = Evaluator()
    assert ev.evaluate("1+2*3") == ev.evaluate("1+(2*3)")
    assert ev.evaluate("2^3^2") == ev.evaluate("2^(3^2)")
    assert ev.evaluate("-2^2") == -ev.evaluate("2^2")
    assert ev.evaluate("8/4/2") == ev.evaluate("(8/4)/2")


def test_alternative_symbols():
    ev = Evaluator()
    assert ev.evaluate("5\u22122") == ev.evaluate("5-2")
    assert ev.evaluate("3\u22194") == ev.evaluate("3*4")
    assert ev.evaluate("3\u00b2") == ev.evaluate("3^2")
    assert ev.evaluate("2\u00b3") == ev.evaluate("2^3")


def test_implicit_multiplication_and_user_constants():
    ev = Evaluator(constants={"x": 3.0})
    assert ev.evaluate("2x") == ev.evaluate("2*x")
    assert ev.evaluate("2(1+x)") == ev.evaluate("2*(1+x)")
    assert ev.evaluate("2pi") == ev.evaluate("2*pi")


def test_functions():
    ev = Evaluator()
    assert ev.evaluate("sin(0)") == math.sin(0)
    assert ev.evaluate("sqrt(16)") == math.sqrt(16)
    assert ev.evaluate("max(2, 7)") == ev.evaluate("7")
    assert "sin" in ev.function_names()


@pytest.mark.parametrize(
    "expression", ["1+", "foo", "1/0", "sqrt(-1)", "(1", "sin(1,2)", "1 $", "", "sin"]
)
def test_errors(expression):
    with pytest.raises(ParseError):
        Evaluator().evaluate(expression)


def test_error_position():
    with pytest.raises(ParseError) as info:
        Evaluator().evaluate("1+$")
    assert info.value.position == 2


def test_check_equation_returns_used_names():
    ev = Evaluator()
    eq = SimpleNamespace(fstr="f(x)=x^2+sin(x)", variables=["x"])
    assert ev.check_equation(eq) == frozenset({"x", "sin"})


def test_check_equation_unknown_variable_position():
    ev = Evaluator()
    eq = SimpleNamespace(fstr="f(x)=x+y", variables=["x"])
    with pytest.raises(ParseError) as info:
        ev.check_equation(eq)
    assert info.value.position == 7


@pytest.mark.parametrize("fstr", ["f(x)", "f(x)=   "])
def test_check_equation_missing_rhs(fstr):
    with pytest.raises(ParseError):
        Evaluator().check_equation(SimpleNamespace(fstr=fstr, variables=["x"]))


def test_check_equation_primed_variables():
    eq = SimpleNamespace(fstr="f''(x)=-f", variables=lambda: ["x", "f", "f'"])
    assert Evaluator().check_equation(eq) == frozenset({"f"})


def test_format_number_fixed_values():
    assert format_number(0.05) == "0.05"
    assert format_number(360) == "360"
    assert format_number(-0.0) == "0"
    assert format_number(math.inf) == "\u221e"


@pytest.mark.parametrize("number", [0.05, 1e20, -1.5e-7, 123456.789, 0.0, -42.0, 2.5e-300])
def test_format_number_round_trip(number):
    assert Evaluator().evaluate(format_number(number)) == pytest.approx(number, rel=1e-15)


def test_value_defaults():
    v = Value()
    assert v.expression == "0"
    assert v.value == 0.0


def test_value_from_expression():
    v = Value("360")
    assert v.value == 360.0
    assert v.expression == "360"


def test_value_unparsable():
    v = Value("bad(")
    assert v.expression == ""
    assert v.value == 0.0


def test_update_expression_failure_keeps_old():
    v = Value("2")
    assert v.update_expression("1/0") is False
    assert v.expression == "2"
    assert v.value == 2.0
    assert v.update_expression("3") is True
    assert v.value == 3.0


def test_from_number():
    v = Value.from_number(0.05)
    assert v.expression == "0.05"
    assert v.value == 0.05


def test_value_equality_is_by_expression():
    assert Value("1") == Value("1")
    a, b = Value("1"), Value("1.0")
    assert a.value == b.value and not (a == b)


def test_set_evaluator(custom_evaluator):
    assert get_evaluator() is custom_evaluator
    assert Value("k").value == 4.0


def test_pen_style_round_trip():
    for style in PenStyle:
        assert string_to_pen_style(pen_style_to_string(style)) is style
    assert pen_style_to_string(PenStyle.DashLine) == "DashLine"


def test_unknown_pen_style():
    assert string_to_pen_style("bogus") is PenStyle.SolidLine


def test_default_gradient():
    g = Gradient()
    assert g.stops == ((0.0, BLACK), (1.0, WHITE))
    assert g.color_at(0) == BLACK
    assert g.color_at(1) == WHITE
    assert g.color_at(-1) == g.color_at(0)
    assert g.color_at(2) == g.color_at(1)


def test_gradient_sorts_and_interpolates_monotonically():
    g = Gradient([(1.0, (255, 0, 0)), (0.0, (0, 0, 0))])
    assert [p for p, _ in g.stops] == [0.0, 1.0]
    reds = [g.color_at(i / 10)[0] for i in range(11)]
    assert reds == sorted(reds)
    assert reds[0] == 0 and reds[-1] == 255


def test_gradient_validation():
    with pytest.raises(ValueError):
        Gradient([(1.5, BLACK)])
    with pytest.raises(ValueError):
        Gradient([(0.5, (300, 0, 0))])


def test_gradient_equality():
    assert Gradient([(0, BLACK), (1, WHITE)]) == Gradient()
    assert hash(Gradient()) == hash(Gradient([(0.0, BLACK), (1.0, WHITE)]))


def test_plot_appearance_defaults_and_equality():
    a = PlotAppearance()
    assert a.line_width == 0.3
    assert a.visible is False
    assert a.style is PenStyle.SolidLine
    b = PlotAppearance()
    assert a == b
    b.gradient = Gradient([(0.0, WHITE), (1.0, BLACK)])
    assert not (a == b)