"""General utilities, such as exception classes."""

import numpy as np

# f256ref-specific exceptions

class F256Error(Exception):
    """Base f256ref error."""

class DomainError(F256Error, ArithmeticError):
    """A value outside the domain of an operation, such as decoding NaN or infinity."""

class ParseError(F256Error, ValueError):
    """A decimal literal that cannot be turned into a finite value."""


# Useful things

_u64_max = (1 << 64) - 1
_u128_base = 1 << 128

def bitmask(n: int) -> int:
    """Produces a bitmask of n 1s if n is positive, or n 0s if n is negative."""
    if n >= 0:
        return (1 << n) - 1
    else:
        return -1 << -n

def maskbits(x: int, n:int) -> int:
    """Mask x & bitmask(n)"""
    if n >= 0:
        return x & ((1 << n) - 1)
    else:
        return x & (-1 << -n)

def split_u128(c: int) -> (int, int):
    """Split a nonnegative integer into its high and low 128-bit halves."""
    return c >> 128, c & (_u128_base - 1)

def join_u128(hi: int, lo: int) -> int:
    return (hi << 128) | lo


# randomness

def random_bits(rng: np.random.Generator, n: int) -> int:
    """Uniform random integer with n bits (possibly leading zeros), built from 64-bit words."""
    if n <= 0:
        return 0
    words = rng.integers(0, _u64_max, size=(n + 63) // 64, dtype=np.uint64, endpoint=True)
    x = 0
    for w in words:
        x = (x << 64) | int(w)
    return maskbits(x, n)

def random_int(rng: np.random.Generator, lo: int, hi: int) -> int:
    """Uniform random integer in the inclusive range [lo, hi]."""
    if lo > hi:
        raise ValueError('empty range [{}, {}]'.format(lo, hi))
    return int(rng.integers(lo, hi, endpoint=True))

def inclusive_bounds(r) -> (int, int):
    """Normalize an inclusive (lo, hi) pair or a unit-step range to (lo, hi)."""
    if isinstance(r, range):
        if r.step != 1:
            raise ValueError('exponent range must have step 1, got {}'.format(repr(r)))
        return r.start, r.stop - 1
    lo, hi = r
    return int(lo), int(hi)
