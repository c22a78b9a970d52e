#!/usr/bin/env python3
"""
Exact-rational π calculator using the Chudnovsky series.

- Every intermediate value is a BigRational (gmpy2 integers underneath),
  reduced to lowest terms after each operation.
- sqrt(10005) comes from a fixed number of Newton iterations.
- Digits are read off the final fraction block by block, with no rounding.
"""

from __future__ import annotations

import sys
from typing import Callable, Iterator, Tuple

from bigrational import BigRational

DEFAULT_DIGITS = 100
DEFAULT_TERMS = 400
DEFAULT_SQRT_ITERATIONS = 18
DEFAULT_BLOCK_WIDTH = 136

# Chudnovsky constants
_L_START = 13591409
_L_STEP = 545140134
_X_STEP = -262537412640768000  # -(640320^3)
_K_START = 6
_K_STEP = 12
_PI_SCALE = 426880
_SQRT_ARG = 10005


# =========================
# Count specification parser
# =========================


def parse_count_spec(spec: str, name: str = "digits", minimum: int = 1) -> int:
    """
    Parse a count specification like:
      "123", "1K", "10M", "2g", "132876K", "1e6", "3E7"

    Used for both the digit count and the term count; ``name`` labels
    the quantity in error messages and ``minimum`` is the smallest
    accepted value (terms may be 0).

    Suffixes (case-insensitive):
      K = 1_000 (10^3)
      M = 1_000_000 (10^6)
      G = 1_000_000_000 (10^9)
      T = 1_000_000_000_000 (10^12)

    Scientific notation:
      "<int>e<int>", e.g. "1e6".

    Returns: the count as Python int (unbounded).
    Raises ValueError on invalid input.
    """
    s = spec.strip()
    if not s:
        raise ValueError(f"Empty {name} count specification")

    # 1) Scientific notation: "<int>e<int>" or "<int>E<int>"
    mantissa_str, sep, exp_str = s.replace("E", "e").partition("e")
    if sep:
        if not mantissa_str or not exp_str:
            raise ValueError(f"Invalid scientific notation for {name}: {spec!r}")
        exp = int(exp_str)
        if exp < 0:
            raise ValueError(f"Negative exponent not supported for {name}: {spec!r}")
        value = int(mantissa_str) * (10 ** exp)
    else:
        # 2) Suffix-based notation: K, M, G, T
        multipliers = {
            "k": 1_000,
            "m": 1_000_000,
            "g": 1_000_000_000,
            "t": 1_000_000_000_000,
        }
        multiplier = multipliers.get(s[-1].lower(), 1)
        if multiplier != 1:
            s = s[:-1].strip()
            if not s:
                raise ValueError(f"Missing number before suffix for {name}: {spec!r}")
        value = int(s) * multiplier

    if value < minimum:
        raise ValueError(f"{name.capitalize()} count must be at least {minimum}: {spec!r}")
    return value


def get_options_from_args(argv: list[str]) -> Tuple[int, int, int]:
    """
    Read (digits, terms, block_width) from CLI arguments.

    Supported forms:
      python pi_chudnovsky.py            -> defaults (100 digits, 400 terms)
      python pi_chudnovsky.py 250
      python pi_chudnovsky.py --digits 1K --terms 100
      python pi_chudnovsky.py -d 500 -t 50 -w 10
      python pi_chudnovsky.py 1e3
    """
    digit_spec: str | None = None
    term_spec: str | None = None
    width_spec: str | None = None
    args = argv[1:]  # skip program name

    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("--calculate", "-c", "--digits", "-d", "--terms", "-t", "--block-width", "-w"):
            if i + 1 >= len(args):
                raise ValueError(f"Flag {arg!r} requires a value")
            value = args[i + 1]
            if arg in ("--terms", "-t"):
                term_spec = value
            elif arg in ("--block-width", "-w"):
                width_spec = value
            else:
                digit_spec = value
            i += 2
        elif not arg.startswith("-") and digit_spec is None:
            # First bare argument treated as digits spec
            digit_spec = arg
            i += 1
        else:
            raise ValueError(f"Unknown argument {arg!r}")

    digits = DEFAULT_DIGITS if digit_spec is None else parse_count_spec(digit_spec, "digits")
    terms = DEFAULT_TERMS if term_spec is None else parse_count_spec(term_spec, "terms", minimum=0)

    if width_spec is None:
        block_width = DEFAULT_BLOCK_WIDTH
    else:
        block_width = int(width_spec)
        if block_width <= 0:
            raise ValueError(f"Block width must be positive: {width_spec!r}")

    return digits, terms, block_width


# =========================
# Newton square root
# =========================


def get_square_root(value, iterations: int = DEFAULT_SQRT_ITERATIONS):
    """
    Newton's method for sqrt(value), starting from the value itself.

    Runs exactly ``iterations`` steps with no convergence test. Each step
    roughly doubles the correct digits and the size of the fraction;
    18 steps give several hundred digits of sqrt(10005).
    """
    s = value
    b = value
    for _ in range(iterations):
        b = (b + s / b) / 2
    return b


# =========================
# Chudnovsky series
# =========================


def chudnovsky_sum(max_k: int = DEFAULT_TERMS, rational: Callable = BigRational):
    """
    Partial sum S of the Chudnovsky series over terms 0..max_k.

      M <- M * (K^3 - 16K) / k^3
      L <- L + 545140134
      X <- X * -262537412640768000
      S <- S + M * L / X
      K <- K + 12

    ``rational`` builds the accumulators from integers.
    """
    if max_k < 0:
        raise ValueError(f"max_k must be >= 0, got {max_k}")

    K = rational(_K_START)
    M = rational(1)
    L = rational(_L_START)
    X = rational(1)
    S = rational(_L_START)

    for k in range(1, max_k + 1):
        k_cubed = rational(k) ** 3
        M = M * (K ** 3 - K * 16) / k_cubed
        L = L + _L_STEP
        X = X * _X_STEP
        S = S + M * L / X
        K = K + _K_STEP

    return S


def calculate_pi(
    max_k: int = DEFAULT_TERMS,
    sqrt_iterations: int = DEFAULT_SQRT_ITERATIONS,
    rational: Callable = BigRational,
):
    """π ≈ 426880 * sqrt(10005) / S, as an exact fraction."""
    S = chudnovsky_sum(max_k, rational)
    root = get_square_root(rational(_SQRT_ARG), sqrt_iterations)
    return rational(_PI_SCALE) * root / S


# =========================
# Digit extraction
# =========================


def _split_big_rational(value: BigRational):
    return value.whole_part(), value.fraction_part()


def iter_digit_blocks(
    value,
    block_width: int = DEFAULT_BLOCK_WIDTH,
    split: Callable = _split_big_rational,
) -> Iterator[str]:
    """
    Yield the whole part of ``value``, then an endless run of
    ``block_width``-digit fractional blocks, zero-padded on the left.

    Each block is the whole part of (fractional part * 10^block_width).
    """
    if block_width <= 0:
        raise ValueError(f"block_width must be positive, got {block_width}")

    shifter = 10 ** block_width
    whole, fraction = split(value)
    head = str(whole)
    if whole == 0 and fraction < 0:
        head = "-" + head
    yield head

    fraction = abs(fraction)
    while True:
        block, fraction = split(fraction * shifter)
        yield str(block).rjust(block_width, "0")


def format_digits(
    value,
    digits: int,
    block_width: int = DEFAULT_BLOCK_WIDTH,
    split: Callable = _split_big_rational,
) -> str:
    """Render ``value`` as "<whole>.<digits>" with exactly ``digits`` decimals."""
    if digits <= 0:
        raise ValueError("digits must be positive")

    blocks = iter_digit_blocks(value, block_width, split)
    head = next(blocks)
    tail = []
    produced = 0
    while produced < digits:
        tail.append(next(blocks))
        produced += block_width
    return f"{head}.{''.join(tail)[:digits]}"


def compute_pi_digits(
    digits: int,
    terms: int = DEFAULT_TERMS,
    block_width: int = DEFAULT_BLOCK_WIDTH,
    sqrt_iterations: int = DEFAULT_SQRT_ITERATIONS,
) -> str:
    """
    Compute π to `digits` decimal places as a string "3.<digits>".

    Precision is bounded by `terms` (~14 digits per term) and by the
    square root; asking for more digits than those support yields
    digits that are not guaranteed correct.
    """
    if digits <= 0:
        raise ValueError("digits must be positive")

    pi = calculate_pi(terms, sqrt_iterations)
    return format_digits(pi, digits, block_width)


# =========================
# Command line
# =========================


def run(argv: list[str], compute: Callable, label: str, default_prog: str) -> int:
    try:
        digits, terms, block_width = get_options_from_args(argv)
    except ValueError as e:
        prog = argv[0] if argv else default_prog
        sys.stderr.write(f"Error: {e}\n")
        sys.stderr.write("Usage examples:\n")
        sys.stderr.write(f"  {prog}\n")
        sys.stderr.write(f"  {prog} 250\n")
        sys.stderr.write(f"  {prog} --digits 1K --terms 100\n")
        sys.stderr.write(f"  {prog} -d 500 -t 50 -w 10\n")
        sys.stderr.write(f"  {prog} 1e3\n")
        return 1

    print(f"Calculating π to {digits} digits with {terms} terms ({label}, Chudnovsky)...")

    import time

    start = time.perf_counter()
    pi_str = compute(digits, terms, block_width)
    elapsed = time.perf_counter() - start

    print(f"Time: {elapsed:.4f} s")
    print(pi_str)
    return 0


def main(argv: list[str]) -> int:
    return run(argv, compute_pi_digits, "BigRational", "pi_chudnovsky.py")


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
