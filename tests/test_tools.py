import math

import pytest

from fnplot.constants import Constant, Constants
from fnplot.tools import ConstantValidator, RangeError, validate_range
from fnplot.values import ParseError


def test_validate_range_returns_bounds():
    low, high = validate_range("0", "2*pi")
    assert low == 0.0
    assert high == pytest.approx(2 * math.pi)


def test_validate_range_negative_minimum():
    assert validate_range("-3", "3") == (-3.0, 3.0)


@pytest.mark.parametrize("low, high", [("1", "1"), ("2", "1")])
def test_validate_range_rejects_bad_order(low, high):
    with pytest.raises(RangeError):
        validate_range(low, high)


def test_range_error_is_value_error():
    with pytest.raises(ValueError):
        validate_range("5", "0")


@pytest.mark.parametrize("low, high", [("1+", "2"), ("1", "x"), ("", "1")])
def test_validate_range_rejects_unparsable(low, high):
    with pytest.raises(ParseError):
        validate_range(low, high)


def test_validator_accepts_unused_valid_name():
    validator = ConstantValidator(Constants())
    assert validator.is_valid("a")


def test_validator_rejects_name_in_use():
    constants = Constants()
    constants.add("a", Constant())
    validator = ConstantValidator(constants)
    assert not validator.is_valid("a")
    validator.set_working_name("a")
    assert validator.is_valid("a")
    validator.set_working_name("b")
    assert not validator.is_valid("a")


@pytest.mark.parametrize("name", ["", "pi", "x1", "cos"])
def test_validator_rejects_invalid_names(name):
    validator = ConstantValidator(Constants())
    validator.set_working_name(name)
    assert not validator.is_valid(name)