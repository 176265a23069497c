"""Decoding oracle values into the (sign, exponent, significand) triple of a target format.

The oracle value arrives already rounded once, to the target precision, with an
unbounded exponent range. Decoding applies the format's exponent limits: values
whose leading bit is above emax overflow, and values with bits below the subnormal
quantum are rounded a second time onto the subnormal grid. That second rounding
consults the witness of the first so that ties are not broken twice in the same
direction.
"""

from enum import IntEnum, unique
from typing import NamedTuple, Tuple

import gmpy2 as gmp

from ..oracle import gmpmath
from ..oracle.ops import RC
from ..oracle.utils import DomainError, bitmask, split_u128, join_u128
from .evalctx import BINARY256


@unique
class Kind(IntEnum):
    ZERO = 0
    SUBNORMAL = 1
    NORMAL = 2
    OVERFLOW = 3


class Encoding(NamedTuple):
    """A decoded value: (sign, exp, (hi, lo)), where the significand is
    hi * 2**128 + lo and the value is (-1)**sign * significand * 2**exp.

    Zero is (sign, 0, (0, 0)) and overflow is (sign, emax + 1, (0, 0)).
    The kind of an encoding needs the format it was decoded for, see classify().
    """
    sign: int
    exp: int
    signif: Tuple[int, int]

    @property
    def hi(self):
        return self.signif[0]

    @property
    def lo(self):
        return self.signif[1]

    @property
    def c(self):
        """The significand as one integer."""
        return join_u128(*self.signif)

    def classify(self, ctx=BINARY256):
        c = self.c
        if c == 0:
            if self.exp == ctx.emax + 1:
                return Kind.OVERFLOW
            else:
                return Kind.ZERO
        elif self.exp + c.bit_length() - 1 < ctx.emin:
            return Kind.SUBNORMAL
        else:
            return Kind.NORMAL


def _round_tie_up(c, rc, negative):
    """Decide an exact tie of the second rounding.
    c is the significand after the shift, rc the witness of the first rounding.
    """
    # the witness orders signed values; flip it to talk about magnitudes
    if negative:
        rc = rc.flip()

    if rc == RC.GREATER:
        # first rounding went up: the true magnitude is below the tie
        return False
    elif rc == RC.LESS:
        return True
    else:
        return c & 1 == 1


def decode_mpfr(f, rc, reduce=False, ctx=BINARY256):
    """Decode the mpfr f, carrying witness rc, for the format ctx."""
    if not gmp.is_finite(f):
        raise DomainError('cannot decode non-finite value {}'.format(repr(f)))

    negative, c, exp = gmpmath.mpfr_to_integer_exp(f)
    sign = int(negative)

    if c == 0:
        return Encoding(sign, 0, (0, 0))

    if reduce:
        while c & 1 == 0:
            c >>= 1
            exp += 1

    if exp + c.bit_length() - 1 > ctx.emax:
        return Encoding(sign, ctx.emax + 1, (0, 0))

    if exp < ctx.min_exp_subnormal:
        shift = ctx.min_exp_subnormal - exp
        rem = c & bitmask(shift)
        tie = 1 << (shift - 1)
        c >>= shift
        if rem > tie or (rem == tie and _round_tie_up(c, rc, negative)):
            c += 1
        exp = ctx.min_exp_subnormal

        if c == 0:
            return Encoding(sign, 0, (0, 0))

    return Encoding(sign, exp, split_u128(c))


def decode(x, reduce=False, ctx=None):
    """Decode a Float into the triple its format stores.

    With reduce, the significand is first shortened to its odd form, giving
    the shortest representation; without it the full-width significand and
    matching exponent are returned, as a hardware result would hold them.
    """
    if ctx is None:
        ctx = x.ctx
    return decode_mpfr(x.f, x.rc, reduce=reduce, ctx=ctx)
