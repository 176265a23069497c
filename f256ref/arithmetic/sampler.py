"""Random values that are exactly representable in a target format."""

import numpy as np

from ..oracle.utils import bitmask, random_bits, random_int, inclusive_bounds
from .evalctx import BINARY256
from .refloat import Float


def check_exp_range(exp_range, ctx=BINARY256):
    """Validate an inclusive range of leading-bit exponents for ctx and return (lo, hi)."""
    lo, hi = inclusive_bounds(exp_range)
    if lo > hi:
        raise ValueError('empty exponent range [{}, {}]'.format(lo, hi))
    if lo < ctx.min_exp_subnormal or hi > ctx.emax:
        raise ValueError('exponent range [{}, {}] exceeds [{}, {}]'
                         .format(lo, hi, ctx.min_exp_subnormal, ctx.emax))
    return lo, hi


def random_triple(exp_range, rng, ctx=BINARY256):
    """Draw (negative, c, exp) for a value whose leading bit has an exponent in exp_range.

    For a normal exponent t, c has exactly p bits and exp = t - (p - 1).
    Below emin the format only has the bits from t down to the subnormal quantum,
    so c has t - min_exp_subnormal + 1 bits and exp = min_exp_subnormal.
    """
    lo, hi = check_exp_range(exp_range, ctx)

    negative = random_int(rng, 0, 1) == 1
    t = random_int(rng, lo, hi)
    fraction = random_bits(rng, ctx.pm1)

    if ctx.is_normal_exp(t):
        c = (1 << ctx.pm1) | fraction
        exp = t - ctx.pm1
    else:
        nbits = t - ctx.min_exp_subnormal + 1
        c = (1 << (nbits - 1)) | (fraction & bitmask(nbits - 1))
        exp = ctx.min_exp_subnormal

    return negative, c, exp


def sample(exp_range, rng=None, ctx=BINARY256):
    """A random Float of ctx, exact by construction, with its leading bit's exponent in exp_range.

    rng is a numpy.random.Generator; a fresh unseeded one is used when it is omitted.
    """
    if rng is None:
        rng = np.random.default_rng()

    negative, c, exp = random_triple(exp_range, rng, ctx)
    if negative:
        c = -c

    return Float.from_integer_exp(c, exp, ctx=ctx)
