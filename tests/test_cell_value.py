import pytest

from partstock.core.exceptions import ValidationError
from partstock.services.cell_value import (
    MAX_QUANTITY, MIN_QUANTITY, check_quantity, parse_cell_value, parse_quantity, split_delta
)


@pytest.mark.parametrize("raw,current,expected", [
    ("+10", 50, 60),
    ("-5", 50, 45),
    ("120", 50, 120),
    ("  +3 ", 7, 10),
    ("+abc", 50, 50),
    ("-", 50, 50),
    ("abc", 50, 0),
    ("", 50, 0),
    ("12.9", 0, 12),
    ("30개", 0, 30),
])
def test_parse_cell_value(raw, current, expected):
    assert parse_cell_value(raw, current) == expected


def test_split_delta_modes():
    assert split_delta("+4") == ("+", 4)
    assert split_delta("-4") == ("-", 4)
    assert split_delta("4") == ("=", 4)


@pytest.mark.parametrize("value,expected", [
    (None, 0),
    (15, 15),
    (15.7, 15),
    (float("nan"), 0),
    (float("-inf"), 0),
    ("15", 15),
    ("-3", -3),
    ("", 0),
    ("n/a", 0),
    ("100 pcs", 100),
])
def test_parse_quantity(value, expected):
    assert parse_quantity(value) == expected


def test_check_quantity_bounds():
    assert check_quantity(MAX_QUANTITY, "stock_qty") == MAX_QUANTITY
    assert check_quantity(MIN_QUANTITY, "stock_qty") == MIN_QUANTITY

    with pytest.raises(ValidationError, match="stock_qty is out of range"):
        check_quantity(MAX_QUANTITY + 1, "stock_qty")
    with pytest.raises(ValidationError):
        check_quantity(MIN_QUANTITY - 1, "stock_qty")
