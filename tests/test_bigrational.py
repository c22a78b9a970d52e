import math
import pickle
from decimal import Decimal
from fractions import Fraction
from itertools import product

import pytest
from gmpy2 import mpz

from bigrational import BigRational as R


SAMPLES = [
    R(0),
    R(1),
    R(-7),
    R(1, 3),
    R(-5, 12),
    R(22, 7),
    R(10 ** 30 + 1, 3 ** 40),
]


def test_construction_reduces():
    r = R(4, 6)
    assert (r.numerator, r.denominator) == (2, 3)


def test_negative_denominator_moves_sign():
    r = R(3, -6)
    assert (r.numerator, r.denominator) == (-1, 2)
    r = R(-3, -6)
    assert (r.numerator, r.denominator) == (1, 2)


def test_zero_is_canonical():
    for r in (R(0, -5), R(0, 17), R(3, 4) - R(3, 4), R(1, 2) * 0):
        assert r.numerator == 0
        assert r.denominator == 1


def test_zero_denominator_raises():
    with pytest.raises(ZeroDivisionError):
        R(1, 0)
    with pytest.raises(ZeroDivisionError):
        R.from_mixed(1, 2, 0)


def test_non_integer_parts_rejected():
    with pytest.raises(TypeError):
        R(1.5)
    with pytest.raises(TypeError):
        R(1, Decimal(2))


def test_accepts_mpz():
    r = R(mpz(10), mpz(4))
    assert r == R(5, 2)


def test_from_int():
    r = R.from_int(12345678901234567890)
    assert r.numerator == 12345678901234567890
    assert r.denominator == 1


def test_from_mixed():
    assert R.from_mixed(1, 1, 2) == R(3, 2)
    assert R.from_mixed(-1, -1, 2) == R(-3, 2)
    assert R.from_mixed(2, 1, -2) == R(-5, 2)
    assert R.from_mixed(1, 3, -4) == R(-7, 4)
    assert R.from_mixed(0, 0, -3) is R.ZERO
    zero = R.from_mixed(0, 0, 9)
    assert (zero.numerator, zero.denominator) == (0, 1)


@pytest.mark.parametrize(
    "value",
    [0.5, 0.1, -2.5, 1e300, -1e-300, 5e-324, 2.0 ** 60, 123456.789],
)
def test_from_float_is_exact(value):
    r = R.from_float(value)
    expected = Fraction(value)
    assert r.numerator == expected.numerator
    assert r.denominator == expected.denominator


def test_from_float_smallest_subnormal():
    assert R.from_float(5e-324) == R(1, 2 ** 1074)


def test_from_float_negative_zero():
    assert R.from_float(-0.0) == R.ZERO


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_from_float_rejects_non_finite(value):
    with pytest.raises(ValueError):
        R.from_float(value)


def test_from_decimal():
    assert R.from_decimal(Decimal("0.1")) == R(1, 10)
    assert R.from_decimal(Decimal("-12.50")) == R(-25, 2)
    assert R.from_decimal(Decimal("1E+3")) == R(1000)
    assert R.from_decimal(Decimal("400")) == R(400)
    assert R.from_decimal(Decimal(2 ** 96 - 1)) == R(2 ** 96 - 1)


@pytest.mark.parametrize(
    "value",
    [Decimal("NaN"), Decimal("Infinity"), Decimal(2 ** 96), Decimal("1E-29")],
)
def test_from_decimal_rejects_invalid(value):
    with pytest.raises(ValueError):
        R.from_decimal(value)


def test_from_decimal_parts():
    assert R.from_decimal_parts(5, 1, negative=True) == R(-1, 2)
    with pytest.raises(ValueError):
        R.from_decimal_parts(1, 29)
    with pytest.raises(ValueError):
        R.from_decimal_parts(-1, 0)


def test_arithmetic():
    a, b = R(1, 2), R(1, 3)
    assert a + b == R(5, 6)
    assert a - b == R(1, 6)
    assert R(2, 3) * R(3, 4) == R(1, 2)
    assert a / R(1, 4) == R(2)
    assert -a == R(-1, 2)
    assert abs(R(-1, 2)) == a


def test_named_methods_match_operators():
    a, b = R(7, 2), R(-3, 4)
    assert a.add(b) == a + b
    assert a.subtract(b) == a - b
    assert a.multiply(b) == a * b
    assert a.divide(b) == a / b
    assert a.remainder(b) == a % b
    assert a.negate() == -a
    assert a.power(3) == a ** 3


def test_integer_operands():
    assert 1 + R(1, 2) == R(3, 2)
    assert R(1, 2) + 1 == R(3, 2)
    assert 2 - R(1, 2) == R(3, 2)
    assert 3 * R(1, 6) == R(1, 2)
    assert 1 / R(1, 4) == R(4)
    assert R(5, 2) + mpz(1) == R(7, 2)


def test_float_operands_rejected():
    with pytest.raises(TypeError):
        R(1) + 0.5
    with pytest.raises(TypeError):
        0.5 * R(1)


@pytest.mark.parametrize("x,y", list(product(SAMPLES, repeat=2)))
def test_results_stay_reduced(x, y):
    results = [x + y, x - y, x * y]
    if y:
        results.append(x / y)
    for r in results:
        assert r.denominator > 0
        assert math.gcd(abs(int(r.numerator)), int(r.denominator)) == 1


@pytest.mark.parametrize("x", SAMPLES)
def test_identity_laws(x):
    assert x + 0 == x
    assert x * 1 == x
    if x:
        assert x / x == R.ONE
        assert x.invert().invert() == x


def test_divide_by_zero():
    with pytest.raises(ZeroDivisionError):
        R(1, 2) / R(0)
    with pytest.raises(ZeroDivisionError):
        R(1, 2) % 0
    with pytest.raises(ZeroDivisionError):
        R(1, 2).divrem(R.ZERO)
    with pytest.raises(ZeroDivisionError):
        R.ZERO.invert()


def test_remainder_truncates():
    assert R(7, 2) % 1 == R(1, 2)
    assert R(-7, 2) % 1 == R(-1, 2)
    assert R(7, 2) % -1 == R(1, 2)


def test_divrem():
    quotient, remainder = R(7, 2).divrem(R(3, 4))
    assert quotient == R(14, 3)
    assert remainder == R(1, 2)


def test_power():
    assert R(2, 3) ** 3 == R(8, 27)
    assert R(-1, 2) ** 3 == R(-1, 8)
    assert R(2, 3) ** -2 == R(9, 4)
    assert R(5, 7) ** 0 == R.ONE
    assert R.ZERO ** 0 == R.ONE
    assert R(2) ** mpz(10) == R(1024)


def test_power_of_zero_negative_exponent():
    with pytest.raises(ValueError):
        R.ZERO ** -1


@pytest.mark.parametrize(
    "value,whole,fraction",
    [
        (R(0, 2), 0, R(0)),
        (R(1, 2), 0, R(1, 2)),
        (R(-1, 2), 0, R(-1, 2)),
        (R(1, 1), 1, R(0)),
        (R(-1, 1), -1, R(0)),
        (R(-3, 2), -1, R(-1, 2)),
        (R(3, 2), 1, R(1, 2)),
    ],
)
def test_whole_and_fraction_parts(value, whole, fraction):
    assert value.whole_part() == whole
    assert value.fraction_part() == fraction
    assert value.fraction_part() + value.whole_part() == value


@pytest.mark.parametrize("n", [0, 1, -1, 42, -(10 ** 40)])
def test_integer_round_trip(n):
    r = R(n)
    assert r.whole_part() == n
    fraction = r.fraction_part()
    assert (fraction.numerator, fraction.denominator) == (0, 1)


def test_comparisons():
    assert R(1, 3) < R(1, 2)
    assert R(1, 2) <= R(2, 4)
    assert R(-1, 2) > R(-2, 3)
    assert R(5) >= 5
    assert R(2, 4) == R(1, 2)
    assert R(2, 2) == 1
    assert R(1, 3) != R(1, 2)
    assert R(1, 3) == Fraction(1, 3)
    assert R(1, 3).compare(R(1, 2)) == -1
    assert R(1, 2).compare(R(1, 2)) == 0
    assert R(1).compare(R(1, 2)) == 1


def test_equality_does_not_assume_reduced_operands():
    unreduced = object.__new__(R)
    unreduced._numerator = mpz(2)
    unreduced._denominator = mpz(4)
    assert unreduced == R(1, 2)
    assert R(1, 2) == unreduced
    assert unreduced < R(3, 4)


def test_hash_matches_numeric_tower():
    assert hash(R(5)) == hash(5)
    assert hash(R(1, 3)) == hash(Fraction(1, 3))
    assert hash(R(-7, 12)) == hash(Fraction(-7, 12))
    assert len({R(1, 2), R(2, 4), R(3, 6)}) == 1


def test_sign():
    assert R(-3, 4).sign == -1
    assert R.ZERO.sign == 0
    assert R(3, 4).sign == 1


def test_least_common_denominator():
    assert R.least_common_denominator(R(1, 2), R(1, 3)) == 6
    assert R.least_common_denominator(R(1, 2), R(1, 4)) == 4


def test_to_int():
    assert R(7, 2).to_int() == 3
    assert R(-7, 2).to_int() == -3
    assert int(R(-7, 2)) == -3
    assert R(255).to_int(bits=8, signed=False) == 255
    assert R(-128).to_int(bits=8) == -128
    assert R(10 ** 30).to_int() == 10 ** 30


@pytest.mark.parametrize(
    "value,bits,signed",
    [(R(256), 8, False), (R(-1), 8, False), (R(128), 8, True), (R(2 ** 63), 64, True)],
)
def test_to_int_overflow(value, bits, signed):
    with pytest.raises(OverflowError):
        value.to_int(bits=bits, signed=signed)


def test_to_float():
    assert R(1, 3).to_float() == 1 / 3
    assert float(R(-5, 2)) == -2.5
    assert math.isclose(R(1, 3 ** 40).to_float(), 1 / 3 ** 40, rel_tol=1e-15)
    assert math.isclose(R(10 ** 400, 10 ** 100 + 1).to_float(), 1e300, rel_tol=1e-12)


def test_to_float_out_of_range():
    assert R(10 ** 400).to_float() == math.inf
    assert R(-(10 ** 400)).to_float() == -math.inf
    assert R(1, 10 ** 400).to_float() == 0.0
    tiny = R(-1, 10 ** 400).to_float()
    assert tiny == 0.0
    assert math.copysign(1.0, tiny) == -1.0


def test_to_decimal():
    assert R(1, 4).to_decimal() == Decimal("0.25")
    assert R(-1, 8).to_decimal() == Decimal("-0.125")
    assert R(1, 3).to_decimal() == Decimal("0." + "3" * 28)
    assert R(2, 3).to_decimal() == Decimal("0." + "6" * 27 + "7")
    assert R(2 ** 96 - 1).to_decimal() == Decimal(2 ** 96 - 1)
    assert R(1, 10 ** 30).to_decimal() == Decimal(0)


def test_to_decimal_overflow():
    with pytest.raises(OverflowError):
        R(2 ** 100).to_decimal()


def test_str_and_repr():
    assert str(R(3, 4)) == "3/4"
    assert str(R(-6, 3)) == "-2/1"
    assert repr(R(3, 4)) == "BigRational(3, 4)"


def test_pickle_goes_through_constructor():
    r = R(-22, 7)
    restored = pickle.loads(pickle.dumps(r))
    assert isinstance(restored, R)
    assert (restored.numerator, restored.denominator) == (-22, 7)


def test_immutable():
    r = R(1, 2)
    with pytest.raises(AttributeError):
        r.numerator = 3
    with pytest.raises(AttributeError):
        r.other = 1


def test_to_decimal_truncates_beyond_96_bits():
    r = R(2 * 10 ** 40 + 1, 3 * 10 ** 40)
    assert r.to_decimal() == Decimal("0." + "6" * 28)
