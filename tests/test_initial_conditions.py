import pytest

from fnplot.equation import Equation, EquationType
from fnplot.initial_conditions import InitialConditionsModel


@pytest.fixture
def model():
    equation = Equation(EquationType.Differential)
    equation.set_fstr("f''(x)=-f")
    result = InitialConditionsModel()
    result.init(equation)
    return result


def test_shape_and_defaults(model):
    assert model.row_count() == 1
    assert model.column_count() == 3
    assert model.data(0, 0) == "0"
    assert model.data(0, 1) == "1"
    assert model.data(0, 2) == "0"


def test_out_of_range(model):
    assert model.data(3, 0) is None
    assert model.data(0, 9) is None
    assert model.set_data(3, 0, "2") is False


def test_headers(model):
    assert model.header(0) == "x\u2080"
    assert model.header(1) == "f(x\u2080)"
    assert model.header(2) == "f'(x\u2080)"


def test_header_without_equation():
    assert InitialConditionsModel().header(0) == "1"


def test_set_data(model):
    assert model.set_data(0, 1, "2")
    assert model.data(0, 1) == "2"
    assert model.set_data(0, 1, "2+")
    assert model.data(0, 1) == "2"


def test_rows_are_a_copy(model):
    model.insert_rows(2)
    assert model.row_count() == 3
    assert len(model.equation.differential_states) == 1
    model.set_data(2, 0, "5")
    model.remove_rows([0, 1])
    assert model.row_count() == 1
    assert model.data(0, 0) == "5"


def test_set_order(model):
    model.set_order(1)
    assert model.column_count() == 2
    assert model.data(0, 2) is None