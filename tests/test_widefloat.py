# tests/test_widefloat.py
from __future__ import annotations

from fractions import Fraction

import pytest

from widenum.errors import DivisionByZero, Overflow
from widenum.widefloat import FLOAT_WIDTHS, WideFloat, precision
from widenum.wideint import WideInt


def _f(num: int, den: int = 1, w: int = 128) -> WideFloat:
    return WideFloat.from_ratio(num, den, w)


@pytest.mark.parametrize("w", FLOAT_WIDTHS)
def test_mantissa_is_normalized(w):
    x = WideFloat.from_ratio(3, 5, w)
    assert x.mantissa.bit_length() == precision(w)
    assert x.mantissa.width == w and x.mantissa.signed
    assert abs(float(x) - 0.6) < 1e-6


def test_zero_representation():
    z = WideFloat.zero(512)
    assert z.is_zero()
    assert z.mantissa.is_zero() and z.exponent.is_zero()
    assert z == 0


def test_one_third_rounds_to_nearest_f32():
    x = WideFloat.from_ratio(1, 3, 32)
    # 24-bit mantissa: round(2**25 / 3) * 2**-25
    assert int(x.mantissa) == 11184811
    assert int(x.exponent) == -25


@pytest.mark.parametrize(
    "value, expected",
    [
        (2**24 + 1, 2**24),        # tie, even neighbour below
        (2**24 + 3, 2**24 + 4),    # tie, even neighbour above
        (2**24 + 2, 2**24 + 2),    # exact
    ],
)
def test_round_half_to_even(value, expected):
    assert WideFloat.from_int(value, 32) == expected


def test_exact_arithmetic_on_dyadic_values():
    a, b = _f(1, 2), _f(1, 4)
    assert a + b == Fraction(3, 4)
    assert a - b == Fraction(1, 4)
    assert b - a == Fraction(-1, 4)
    assert a * b == Fraction(1, 8)
    assert a / b == 2
    assert 1 - a == a


def test_from_float_is_exact():
    x = WideFloat.from_float(0.1, 128)
    assert x.as_integer_ratio() == (0.1).as_integer_ratio()
    assert float(x) == 0.1


def test_division_by_zero():
    with pytest.raises(DivisionByZero):
        _f(1) / WideFloat.zero(128)
    with pytest.raises(DivisionByZero):
        WideFloat.from_ratio(1, 0, 64)


def test_exponent_overflow_and_underflow():
    with pytest.raises(Overflow):
        WideFloat.from_int(2**200, 32)
    assert WideFloat.from_ratio(1, 2**300, 32).is_zero()


def test_pow_int():
    assert _f(1, 2).pow_int(10) == Fraction(1, 1024)
    assert WideFloat.zero(64).pow_int(0) == 1
    assert WideFloat.zero(64) ** 3 == 0
    assert _f(2) ** -2 == Fraction(1, 4)


def test_sum_and_ordering():
    parts = [_f(1, 4)] * 4
    assert sum(parts) == 1
    assert _f(1, 3) < _f(1, 2) < 1
    assert -_f(1, 2) < 0
    assert _f(3, 2).clamp(WideFloat.zero(128), WideFloat.one(128)) == 1


def test_addition_of_negligible_term():
    big = WideFloat.one(64)
    tiny = WideFloat.from_ratio(1, 2**200, 64)
    assert big + tiny == 1
    assert big - tiny == 1


def test_negligible_term_against_narrower_operand():
    tiny = WideFloat.from_ratio(1, 2**600, 512)
    one = WideFloat.from_int(1, 64)
    assert (one - tiny).width == 512
    assert one - tiny == 1
    assert one + tiny == 1
    assert tiny - one == -1
    # within reach of f512 precision the tiny term must survive
    near = WideFloat.from_ratio(1, 2**300, 512)
    assert Fraction(*(one - near).as_integer_ratio()) == 1 - Fraction(1, 2**300)


def test_mixed_width_result_is_wider():
    x = WideFloat.from_ratio(1, 3, 64) + WideFloat.from_ratio(1, 3, 512)
    assert x.width == 512


def test_decimal_rendering():
    assert _f(1, 4).to_decimal_string(4) == "0.2500"
    assert (-_f(1, 2)).to_decimal_string(2) == "-0.50"
    assert _f(5).to_decimal_string(0) == "5"
    assert WideFloat.from_ratio(2, 3, 512).to_decimal_string(6) == "0.666667"


def test_ordering_against_wide_int():
    x = _f(1, 2)
    assert x < WideInt.of(1, 64)
    assert x > WideInt.of(0, 64)
    assert WideFloat.from_int(-3, 64) < WideInt.of(-2, 64, True)
    assert _f(7) <= WideInt.of(7, 8)
