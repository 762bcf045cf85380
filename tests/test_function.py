import math

import pytest

from fnplot.function import (
    Function,
    FunctionRegistry,
    FunctionType,
    Parameter,
    ParameterType,
    PlotCombination,
    PMode,
    Plot,
    string_to_type,
    type_to_string,
)
from fnplot.values import Gradient, Value


def cartesian(fstr="f(x)=x^2"):
    function = Function(FunctionType.Cartesian)
    function.eq[0].set_fstr(fstr)
    return function


@pytest.mark.parametrize("kind", list(FunctionType))
def test_type_string_round_trip(kind):
    assert string_to_type(type_to_string(kind)) is kind


def test_type_strings_fixed():
    assert type_to_string(FunctionType.Polar) == "polar"
    assert string_to_type("nonsense") is FunctionType.Cartesian


def test_defaults():
    function = Function(FunctionType.Cartesian)
    assert function.plot_appearance(PMode.Derivative0).visible
    assert not function.plot_appearance(PMode.Derivative1).visible
    assert function.dmin.expression == "0"
    assert function.dmax.value == pytest.approx(2 * math.pi)
    assert Function(FunctionType.Cartesian, radians=False).dmax.expression == "360"
    assert not function.use_custom_min


def test_parametric_has_two_equations():
    function = Function(FunctionType.Parametric)
    assert len(function.eq) == 2
    assert function.use_custom_min and function.use_custom_max
    function.eq[0].set_fstr("f_x(t)=t")
    function.eq[1].set_fstr("f_y(t)=t^2")
    assert function.name() == "f_x(t)=t\nf_y(t)=t^2"


def test_all_plots_hidden():
    function = cartesian()
    assert not function.all_plots_hidden()
    function.plot_appearance(PMode.Derivative0).visible = False
    assert function.all_plots_hidden()
    assert function.plots() == []


def test_single_plot():
    function = cartesian()
    plots = function.plots()
    assert len(plots) == 1
    assert plots[0].plot_mode is PMode.Derivative0
    assert plots[0].pm_signature == [[]]
    assert plots[0].function is function


def test_derivative_plots():
    function = cartesian()
    function.plot_appearance(PMode.Derivative1).visible = True
    assert [p.plot_mode for p in function.plots()] == [PMode.Derivative0, PMode.Derivative1]


def test_list_and_slider_parameters():
    function = cartesian("f(x,k)=x+k")
    function.parameters.use_list = True
    function.parameters.values = [Value("1"), Value("2"), Value("3")]
    plots = function.plots()
    assert [p.plot_number for p in plots] == [0, 1, 2]
    assert all(p.plot_number_count == 3 for p in plots)
    assert [p.parameter_value() for p in plots] == [1.0, 2.0, 3.0]

    function.parameters.use_slider = True
    plots = function.plots()
    assert len(plots) == 4
    assert plots[0].parameter.type is ParameterType.Slider
    assert plots[1].parameter == Parameter(ParameterType.List, list_pos=0)


def test_without_parameter_combination():
    function = cartesian("f(x,k)=x+k")
    function.parameters.use_list = True
    function.parameters.values = [Value("1"), Value("2")]
    assert len(function.plots(PlotCombination.DifferentDerivatives)) == 1


def test_animating_gives_single_plot():
    function = cartesian("f(x,k)=x+k")
    function.parameters.use_list = True
    function.parameters.values = [Value("1"), Value("2")]
    function.parameters.animating = True
    plots = function.plots()
    assert len(plots) == 1
    assert plots[0].parameter.type is ParameterType.Animated


def test_plus_minus_signatures():
    function = cartesian("f(x)=\u00b1x")
    signatures = [p.pm_signature for p in function.plots()]
    assert signatures == [[[False]], [[True]]]


def test_differential_states():
    function = Function(FunctionType.Differential)
    function.eq[0].set_fstr("f''(x)=-f")
    function.eq[0].differential_states.add()
    plots = function.plots()
    assert [p.state_number for p in plots] == [0, 1]
    assert plots[1].state() is function.eq[0].differential_states[1]


def test_copy_from():
    target = cartesian()
    source = cartesian("f(x)=x+1")
    source.use_custom_min = True
    assert target.copy_from(source)
    assert target.eq[0].fstr == "f(x)=x+1"
    assert target.use_custom_min
    assert not target.copy_from(source)


def test_registry():
    registry = FunctionRegistry()
    a, b = cartesian(), cartesian()
    id_a, id_b = registry.add(a), registry.add(b)
    assert id_a != id_b
    assert registry.get(id_a) is a
    assert len(registry) == 2
    assert registry.remove(id_b) is b
    assert registry.get(id_b) is None
    with pytest.raises(KeyError):
        registry.remove(id_b)


def test_dependencies():
    registry = FunctionRegistry()
    a, b, c = cartesian(), cartesian(), cartesian()
    for function in (a, b, c):
        registry.add(function)
    a.add_function_dependency(b, registry)
    b.add_function_dependency(c, registry)
    assert a.depends_on(c, registry)
    assert not c.depends_on(a, registry)
    with pytest.raises(ValueError):
        c.add_function_dependency(a, registry)
    with pytest.raises(ValueError):
        registry.remove(b.id)


def test_plot_names():
    plot = cartesian().plots()[0]
    assert plot.name() == "f(x)=x^2"
    plot.plot_mode = PMode.Derivative1
    assert plot.name() == "f'(x)"
    plot.plot_mode = PMode.Derivative2
    assert plot.name() == "f''(x)"
    plot.plot_mode = PMode.Integral
    assert plot.name() == "\u222b f(x)dx"


def test_plot_name_with_parameter():
    function = cartesian("f(x,k)=x+k")
    function.parameters.use_list = True
    function.parameters.values = [Value("2")]
    assert function.plots()[0].name() == "f(x,k)=x+k\nk = 2"


def test_slider_parameter_needs_value():
    plot = cartesian().plots()[0]
    plot.parameter = Parameter(ParameterType.Slider, slider_id=0)
    with pytest.raises(ValueError):
        plot.parameter_value()
    assert plot.parameter_value(1.5) == 1.5


def test_update_function_sets_parameter():
    function = cartesian("f(x,k)=x+k")
    function.parameters.use_list = True
    function.parameters.values = [Value("4")]
    plot = function.plots()[0]
    plot.update_function()
    assert function.k == 4.0


def test_differentiate_and_integrate():
    plot = Plot()
    plot.integrate()
    assert plot.plot_mode is PMode.Integral
    assert plot.derivative_number() == -1
    plot.integrate()
    assert plot.plot_mode is PMode.Integral
    for expected in (0, 1, 2, 3, 3):
        plot.differentiate()
        assert plot.derivative_number() == expected


def test_color():
    function = cartesian()
    plot = function.plots()[0]
    assert plot.color() == function.plot_appearance(PMode.Derivative0).color
    appearance = function.plot_appearance(PMode.Derivative0)
    appearance.use_gradient = True
    appearance.gradient = Gradient([(0.0, (255, 0, 0)), (1.0, (0, 0, 255))])
    plot.plot_number_count = 3
    plot.plot_number = 0
    assert plot.color() == (255, 0, 0)
    plot.plot_number = 2
    assert plot.color() == (0, 0, 255)
    with pytest.raises(ValueError):
        Plot().color()


def test_state_bounds():
    plot = cartesian().plots()[0]
    assert plot.state() is None
    plot.state_number = 0
    assert plot.state() is plot.function.eq[0].differential_states[0]
    plot.state_number = 5
    assert plot.state() is None


def test_plot_equality():
    function = cartesian()
    first, second = function.plots()[0], function.plots()[0]
    assert first == second
    second.plot_mode = PMode.Integral
    assert not first == second