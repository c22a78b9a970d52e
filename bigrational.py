"""
Arbitrary-precision rational numbers on top of gmpy2 big integers.

- Numerator and denominator are gmpy2.mpz values.
- Every instance is kept in lowest terms with a positive denominator,
  and zero is always 0/1.
- Instances are immutable; every operation returns a new BigRational.

Arithmetic
  a/b = c/d,  iff ad = bc
  a/b + c/d  == (ad + bc)/bd
  a/b - c/d  == (ad - bc)/bd
  a/b % c/d  == (ad % bc)/bd      (truncating remainder)
  a/b * c/d  == (ac)/(bd)
  a/b / c/d  == (ad)/(bc)
  -(a/b)     == (-a)/b
  (a/b)^(-1) == b/a, if a != 0
"""

from __future__ import annotations

import math
import numbers
import struct
import sys
from decimal import Decimal, localcontext
from typing import Tuple

from gmpy2 import gcd, mpq, mpz, t_div, t_mod

# =========================
# Limits of the native types
# =========================

# Largest integer a float holds exactly (2^53).
DOUBLE_SAFE_INTEGER = 1 << 53
DOUBLE_MAX_SCALE = 308
_DOUBLE_PRECISION = mpz(10) ** DOUBLE_MAX_SCALE
_DOUBLE_MAX_VALUE = mpz(int(sys.float_info.max))

# Fixed-point decimal layout: 96-bit magnitude, scale 0..28, sign bit.
DECIMAL_MAX_SCALE = 28
DECIMAL_MAX_VALUE = (1 << 96) - 1
_DECIMAL_PRECISION = mpz(10) ** DECIMAL_MAX_SCALE

_HASH_MODULUS = sys.hash_info.modulus
_HASH_INF = sys.hash_info.inf

_INTEGER_TYPES = (numbers.Integral, type(mpz(0)))
_RATIONAL_TYPES = _INTEGER_TYPES + (numbers.Rational, type(mpq(0)))


class BigRational:
    """Exact rational number, always reduced, denominator > 0."""

    __slots__ = ("_numerator", "_denominator")

    ZERO: BigRational
    ONE: BigRational
    MINUS_ONE: BigRational

    def __init__(self, numerator=0, denominator=1):
        if not isinstance(numerator, _INTEGER_TYPES) or not isinstance(
            denominator, _INTEGER_TYPES
        ):
            raise TypeError(
                "BigRational numerator and denominator must be integers, "
                f"got {type(numerator).__name__} and {type(denominator).__name__}"
            )
        numerator = mpz(numerator)
        denominator = mpz(denominator)

        if denominator == 0:
            raise ZeroDivisionError(f"BigRational({numerator}, 0)")
        if numerator == 0:
            # 0/m -> 0/1
            denominator = mpz(1)
        elif denominator < 0:
            numerator = -numerator
            denominator = -denominator

        self._numerator, self._denominator = self._simplify(numerator, denominator)

    @staticmethod
    def _simplify(numerator: mpz, denominator: mpz) -> Tuple[mpz, mpz]:
        # 0/1 and n/1 are already reduced
        if denominator == 1:
            return numerator, denominator
        divisor = gcd(numerator, denominator)
        if divisor > 1:
            numerator = t_div(numerator, divisor)
            denominator = t_div(denominator, divisor)
        return numerator, denominator

    # =========================
    # Alternate constructors
    # =========================

    @classmethod
    def from_int(cls, value) -> BigRational:
        return cls(value, 1)

    @classmethod
    def from_mixed(cls, whole, numerator, denominator) -> BigRational:
        """
        Build a fraction from a whole part and a numerator/denominator pair.

        With a positive denominator the value is
        ``(whole * denominator + numerator) / denominator``. A negative
        denominator negates both whole and numerator against the positive
        denominator: ``(-whole * |d| - numerator) / |d|``, so (2, 1, -2)
        is -5/2.
        """
        if not isinstance(whole, _INTEGER_TYPES):
            raise TypeError(f"whole part must be an integer, got {type(whole).__name__}")
        if denominator == 0:
            raise ZeroDivisionError(f"BigRational({whole}, {numerator}, 0)")
        if numerator == 0 and whole == 0:
            return cls.ZERO
        whole = mpz(whole)
        if denominator < 0:
            denominator = -denominator
            return cls(-(whole * denominator) - numerator, denominator)
        return cls(whole * denominator + numerator, denominator)

    @classmethod
    def from_float(cls, value: float) -> BigRational:
        """
        Exact value of a binary64 float.

        The bit pattern is split into sign, unbiased exponent and 53-bit
        significand; the result is significand / 2^52 scaled by 2^exponent.
        Raises ValueError for NaN and infinities.
        """
        value = float(value)
        if math.isnan(value):
            raise ValueError("Argument is not a number")
        if math.isinf(value):
            raise ValueError("Argument is infinity")

        bits = struct.unpack("<Q", struct.pack("<d", value))[0]
        negative = bits >> 63
        exponent = (bits >> 52) & 0x7FF
        significand = bits & 0x000FFFFFFFFFFFFF

        if exponent == 0:
            # Denormalized: no implied bit, minimum exponent
            exponent = -1022
        else:
            significand |= 1 << 52
            exponent -= 1023

        if significand == 0:
            return cls.ZERO

        numerator = mpz(significand)
        denominator = mpz(1) << 52
        if exponent > 0:
            numerator <<= exponent
        elif exponent < 0:
            denominator <<= -exponent
        if negative:
            numerator = -numerator
        return cls(numerator, denominator)

    @classmethod
    def from_decimal_parts(cls, magnitude, scale, negative: bool = False) -> BigRational:
        """
        Build ``(-1)^negative * magnitude / 10^scale`` from a fixed-point
        decimal layout: a 96-bit magnitude and a scale between 0 and 28.
        """
        if not isinstance(magnitude, _INTEGER_TYPES) or not isinstance(scale, _INTEGER_TYPES):
            raise TypeError("decimal magnitude and scale must be integers")
        if not 0 <= magnitude <= DECIMAL_MAX_VALUE:
            raise ValueError(f"invalid decimal: magnitude {magnitude} does not fit 96 bits")
        if not 0 <= scale <= DECIMAL_MAX_SCALE:
            raise ValueError(f"invalid decimal: scale {scale} outside 0..{DECIMAL_MAX_SCALE}")

        numerator = mpz(magnitude)
        if negative:
            numerator = -numerator
        return cls(numerator, mpz(10) ** scale)

    @classmethod
    def from_decimal(cls, value: Decimal) -> BigRational:
        """
        Exact value of a decimal.Decimal that fits the fixed-point layout.

        Values such as Decimal("0.1") convert cleanly to 1/10.
        """
        if not isinstance(value, Decimal):
            raise TypeError(f"expected Decimal, got {type(value).__name__}")
        if not value.is_finite():
            raise ValueError(f"invalid decimal: {value}")

        sign, digits, exponent = value.as_tuple()
        magnitude = int("".join(str(d) for d in digits))
        if exponent > 0:
            magnitude *= 10 ** exponent
            scale = 0
        else:
            scale = -exponent
        return cls.from_decimal_parts(magnitude, scale, bool(sign))

    # =========================
    # Properties
    # =========================

    @property
    def numerator(self) -> mpz:
        return self._numerator

    @property
    def denominator(self) -> mpz:
        return self._denominator

    @property
    def sign(self) -> int:
        if self._numerator > 0:
            return 1
        if self._numerator < 0:
            return -1
        return 0

    # GetWholePart / GetFractionPart
    #
    #  value  whole  fraction
    #   0/2      0      0/1
    #   1/2      0      1/2
    #  -1/2      0     -1/2
    #   1/1      1      0/1
    #  -1/1     -1      0/1
    #  -3/2     -1     -1/2
    #   3/2      1      1/2
    def whole_part(self) -> mpz:
        return t_div(self._numerator, self._denominator)

    def fraction_part(self) -> BigRational:
        return BigRational(t_mod(self._numerator, self._denominator), self._denominator)

    # =========================
    # Arithmetic
    # =========================

    def add(self, other) -> BigRational:
        other = _as_rational(other)
        return BigRational(
            self._numerator * other._denominator + self._denominator * other._numerator,
            self._denominator * other._denominator,
        )

    def subtract(self, other) -> BigRational:
        other = _as_rational(other)
        return BigRational(
            self._numerator * other._denominator - self._denominator * other._numerator,
            self._denominator * other._denominator,
        )

    def multiply(self, other) -> BigRational:
        other = _as_rational(other)
        return BigRational(
            self._numerator * other._numerator,
            self._denominator * other._denominator,
        )

    def divide(self, other) -> BigRational:
        other = _as_rational(other)
        if not other._numerator:
            raise ZeroDivisionError("BigRational division by zero")
        return BigRational(
            self._numerator * other._denominator,
            self._denominator * other._numerator,
        )

    def remainder(self, other) -> BigRational:
        """Truncating remainder: the sign follows the dividend."""
        other = _as_rational(other)
        if not other._numerator:
            raise ZeroDivisionError("BigRational modulo by zero")
        return BigRational(
            t_mod(
                self._numerator * other._denominator,
                self._denominator * other._numerator,
            ),
            self._denominator * other._denominator,
        )

    def divrem(self, other) -> Tuple[BigRational, BigRational]:
        """Return ``(self / other, self % other)`` in one pass."""
        other = _as_rational(other)
        # ad and bc are shared by the quotient and the remainder
        ad = self._numerator * other._denominator
        bc = self._denominator * other._numerator
        bd = self._denominator * other._denominator
        if not bc:
            raise ZeroDivisionError("BigRational division by zero")
        return BigRational(ad, bc), BigRational(t_mod(ad, bc), bd)

    def negate(self) -> BigRational:
        return BigRational(-self._numerator, self._denominator)

    def invert(self) -> BigRational:
        if not self._numerator:
            raise ZeroDivisionError("cannot invert zero")
        return BigRational(self._denominator, self._numerator)

    def abs(self) -> BigRational:
        if self._numerator < 0:
            return BigRational(-self._numerator, self._denominator)
        return self

    def power(self, exponent) -> BigRational:
        if not isinstance(exponent, _INTEGER_TYPES):
            raise TypeError(f"exponent must be an integer, got {type(exponent).__name__}")
        exponent = int(exponent)
        if exponent == 0:
            # 0^0 -> 1
            # n^0 -> 1
            return BigRational.ONE

        base = self
        if exponent < 0:
            if not self._numerator:
                raise ValueError("cannot raise zero to a negative power")
            # n^(-e) -> (1/n)^e
            base = self.invert()
            exponent = -exponent
        return BigRational(base._numerator ** exponent, base._denominator ** exponent)

    def compare(self, other) -> int:
        other = _as_rational(other)
        left = self._numerator * other._denominator
        right = other._numerator * self._denominator
        return (left > right) - (left < right)

    @staticmethod
    def least_common_denominator(x, y) -> mpz:
        # LCD(a/b, c/d) == bd / gcd(b, d)
        x = _as_rational(x)
        y = _as_rational(y)
        return t_div(
            x._denominator * y._denominator,
            gcd(x._denominator, y._denominator),
        )

    # =========================
    # Conversions
    # =========================

    def to_int(self, bits: int | None = None, signed: bool = True) -> int:
        """
        Truncate toward zero.

        With ``bits`` the result must fit a fixed-width machine integer,
        otherwise OverflowError is raised.
        """
        value = int(self.whole_part())
        if bits is None:
            return value
        if signed:
            low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        else:
            low, high = 0, (1 << bits) - 1
        if not low <= value <= high:
            kind = "signed" if signed else "unsigned"
            raise OverflowError(f"{value} does not fit a {bits}-bit {kind} integer")
        return value

    def to_float(self) -> float:
        """
        Nearest float; values beyond the float range become +/-inf and
        values too small for it become +/-0.0.
        """
        numerator = self._numerator
        if _fits(numerator, DOUBLE_SAFE_INTEGER) and _fits(self._denominator, DOUBLE_SAFE_INTEGER):
            return int(numerator) / int(self._denominator)

        # scale the numerator to keep the fraction through the integer division
        denormalized = t_div(numerator * _DOUBLE_PRECISION, self._denominator)
        if denormalized == 0:
            return -0.0 if numerator < 0 else 0.0

        for scale in range(DOUBLE_MAX_SCALE, -1, -1):
            if _fits(denormalized, _DOUBLE_MAX_VALUE):
                return int(denormalized) / 10 ** scale
            denormalized = t_div(denormalized, 10)

        return -math.inf if numerator < 0 else math.inf

    def to_decimal(self) -> Decimal:
        """
        Fixed-point decimal with at most 28 fractional digits and a 96-bit
        magnitude.

        When numerator and denominator both fit 96 bits the quotient is
        rounded in a 28-digit decimal context. Larger fractions are scaled
        and truncated instead; OverflowError when the whole part alone
        does not fit.
        """
        numerator = self._numerator
        denominator = self._denominator
        if _fits(numerator, DECIMAL_MAX_VALUE) and _fits(denominator, DECIMAL_MAX_VALUE):
            if denominator == 1:
                return _make_decimal(numerator, 0)
            with localcontext() as ctx:
                ctx.prec = DECIMAL_MAX_SCALE
                return Decimal(int(numerator)) / Decimal(int(denominator))

        # scale the numerator to keep the fraction through the integer division
        denormalized = t_div(self._numerator * _DECIMAL_PRECISION, self._denominator)
        if denormalized == 0:
            # underflow: fraction is too small to fit in a decimal
            return Decimal(0)

        for scale in range(DECIMAL_MAX_SCALE, -1, -1):
            if _fits(denormalized, DECIMAL_MAX_VALUE):
                return _make_decimal(denormalized, scale)
            denormalized = t_div(denormalized, 10)

        raise OverflowError("Value was either too large or too small for a Decimal.")

    # =========================
    # Python protocol
    # =========================

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._numerator}, {self._denominator})"

    def __str__(self) -> str:
        return f"{self._numerator}/{self._denominator}"

    def __reduce__(self):
        # unpickling goes back through the validating constructor
        return (self.__class__, (int(self._numerator), int(self._denominator)))

    def __copy__(self) -> BigRational:
        return self

    def __deepcopy__(self, memo) -> BigRational:
        return self

    def __hash__(self) -> int:
        # Same scheme as fractions.Fraction, so equal numbers hash equal
        try:
            dinv = pow(int(self._denominator), -1, _HASH_MODULUS)
        except ValueError:
            # denominator is a multiple of the modulus
            hash_ = _HASH_INF
        else:
            hash_ = hash(hash(abs(int(self._numerator))) * dinv)
        result = hash_ if self._numerator >= 0 else -hash_
        return -2 if result == -1 else result

    def __bool__(self) -> bool:
        return self._numerator != 0

    def __int__(self) -> int:
        return self.to_int()

    __trunc__ = __int__

    def __float__(self) -> float:
        return self.to_float()

    def __eq__(self, other):
        if not isinstance(other, (BigRational,) + _RATIONAL_TYPES):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other):
        if not isinstance(other, (BigRational,) + _RATIONAL_TYPES):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other):
        if not isinstance(other, (BigRational,) + _RATIONAL_TYPES):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other):
        if not isinstance(other, (BigRational,) + _RATIONAL_TYPES):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other):
        if not isinstance(other, (BigRational,) + _RATIONAL_TYPES):
            return NotImplemented
        return self.compare(other) >= 0

    def __pos__(self) -> BigRational:
        return self

    def __neg__(self) -> BigRational:
        return self.negate()

    def __abs__(self) -> BigRational:
        return self.abs()

    def __add__(self, other):
        if not isinstance(other, (BigRational,) + _RATIONAL_TYPES):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other):
        if not isinstance(other, _RATIONAL_TYPES):
            return NotImplemented
        return _as_rational(other).add(self)

    def __sub__(self, other):
        if not isinstance(other, (BigRational,) + _RATIONAL_TYPES):
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other):
        if not isinstance(other, _RATIONAL_TYPES):
            return NotImplemented
        return _as_rational(other).subtract(self)

    def __mul__(self, other):
        if not isinstance(other, (BigRational,) + _RATIONAL_TYPES):
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other):
        if not isinstance(other, _RATIONAL_TYPES):
            return NotImplemented
        return _as_rational(other).multiply(self)

    def __truediv__(self, other):
        if not isinstance(other, (BigRational,) + _RATIONAL_TYPES):
            return NotImplemented
        return self.divide(other)

    def __rtruediv__(self, other):
        if not isinstance(other, _RATIONAL_TYPES):
            return NotImplemented
        return _as_rational(other).divide(self)

    def __mod__(self, other):
        if not isinstance(other, (BigRational,) + _RATIONAL_TYPES):
            return NotImplemented
        return self.remainder(other)

    def __rmod__(self, other):
        if not isinstance(other, _RATIONAL_TYPES):
            return NotImplemented
        return _as_rational(other).remainder(self)

    def __pow__(self, exponent):
        if not isinstance(exponent, _INTEGER_TYPES):
            return NotImplemented
        return self.power(exponent)


BigRational.ZERO = BigRational(0)
BigRational.ONE = BigRational(1)
BigRational.MINUS_ONE = BigRational(-1)


# =========================
# Helpers
# =========================


def _as_rational(value) -> BigRational:
    """Wrap integers and other exact rationals; anything else is a TypeError."""
    if isinstance(value, BigRational):
        return value
    if isinstance(value, _INTEGER_TYPES):
        return BigRational(value)
    if isinstance(value, _RATIONAL_TYPES):
        return BigRational(value.numerator, value.denominator)
    raise TypeError(
        f"unsupported operand type for BigRational: {type(value).__name__}"
    )


def _fits(value: mpz, limit) -> bool:
    return -limit <= value <= limit


def _make_decimal(value: mpz, scale: int) -> Decimal:
    # tuple form is exact, unlike scaleb() which rounds to the context
    sign = 1 if value < 0 else 0
    digits = tuple(int(ch) for ch in str(abs(value)))
    return Decimal((sign, digits, -scale))
