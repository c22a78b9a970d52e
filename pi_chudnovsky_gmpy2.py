#!/usr/bin/env python3
"""
Reference π calculator: the same Chudnovsky loop on gmpy2.mpq.

- Identical series, Newton square root and digit extraction as
  pi_chudnovsky.py, but every value is a gmpy2.mpq (GMP rationals).
- Useful as an independent check of BigRational: both must arrive at
  exactly the same fraction.
"""

from __future__ import annotations

import sys

from gmpy2 import mpq, t_div

from pi_chudnovsky import (
    DEFAULT_BLOCK_WIDTH,
    DEFAULT_SQRT_ITERATIONS,
    DEFAULT_TERMS,
    calculate_pi,
    format_digits,
    run,
)


def split_mpq(value: mpq):
    """Whole part (truncated toward zero) and the signed remainder."""
    whole = t_div(value.numerator, value.denominator)
    return whole, value - whole


def calculate_pi_mpq(
    max_k: int = DEFAULT_TERMS,
    sqrt_iterations: int = DEFAULT_SQRT_ITERATIONS,
) -> mpq:
    return calculate_pi(max_k, sqrt_iterations, rational=mpq)


def compute_pi_digits(
    digits: int,
    terms: int = DEFAULT_TERMS,
    block_width: int = DEFAULT_BLOCK_WIDTH,
    sqrt_iterations: int = DEFAULT_SQRT_ITERATIONS,
) -> str:
    """
    Compute π to `digits` decimal places as a string "3.<digits>",
    using gmpy2.mpq throughout.
    """
    if digits <= 0:
        raise ValueError("digits must be positive")

    pi = calculate_pi_mpq(terms, sqrt_iterations)
    return format_digits(pi, digits, block_width, split=split_mpq)


def main(argv: list[str]) -> int:
    return run(argv, compute_pi_digits, "gmpy2.mpq", "pi_chudnovsky_gmpy2.py")


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
