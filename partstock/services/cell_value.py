"""
Cell value parsing

A spreadsheet-style cell accepts either an absolute number ("120") or a
relative adjustment of the value currently shown ("+5", "-3").
"""

import math
import re
from typing import Any, Tuple

from partstock.core.exceptions import ValidationError

_LEADING_INT = re.compile(r"^\s*(\d+)")

# Quantities are stored as signed 64-bit integers
MAX_QUANTITY = 2 ** 63 - 1
MIN_QUANTITY = -(2 ** 63)


def parse_quantity(value: Any) -> int:
    """Lenient integer parse: the leading digits of the text, 0 when there are none"""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    text = str(value).strip()
    sign = 1
    if text.startswith("-"):
        sign, text = -1, text[1:]
    elif text.startswith("+"):
        text = text[1:]
    match = _LEADING_INT.match(text)
    return sign * int(match.group(1)) if match else 0


def split_delta(raw: str) -> Tuple[str, int]:
    """
    Split a cell input into (mode, amount)

    mode is "+" or "-" for relative input and "=" for an absolute value.
    An unparseable amount counts as 0.
    """
    text = (raw or "").strip()
    if text[:1] in ("+", "-"):
        match = _LEADING_INT.match(text[1:])
        return text[0], int(match.group(1)) if match else 0
    match = _LEADING_INT.match(text)
    return "=", int(match.group(1)) if match else 0


def parse_cell_value(raw: str, current: int) -> int:
    """New value of a cell given its current reconciled value"""
    mode, amount = split_delta(raw)
    if mode == "+":
        return current + amount
    if mode == "-":
        return current - amount
    return amount


def check_quantity(value: int, field: str) -> int:
    """Raise ValidationError when a quantity does not fit the stored integer column"""
    if not MIN_QUANTITY <= value <= MAX_QUANTITY:
        raise ValidationError(f"{field} is out of range: {value}")
    return value
