"""Oracle values that remember which way they were rounded."""

import gmpy2 as gmp

from ..oracle import gmpmath
from ..oracle.ops import OP, RC
from .evalctx import BINARY256, FormatCtx
from . import decoder


# integers longer than this are printed rounded
DISPLAY_DIGITS = 72


class Float(object):
    """An mpfr at the working precision of a format, paired with the rounding
    witness of the operation that produced it.

    Arithmetic treats operands as exact, rounds the result once to nearest-even
    at ctx.p bits with an unbounded exponent range, and records a new witness.
    Exponent limits of the format are only applied by decode().
    """

    _ctx : FormatCtx = BINARY256

    @property
    def f(self):
        """The oracle value."""
        return self._f

    @property
    def rc(self):
        """The rounding witness: is f LESS than, EQUAL to or GREATER than the exact result?"""
        return self._rc

    @property
    def ctx(self):
        """The format whose precision f was rounded to."""
        return self._ctx

    def __init__(self, x=None, ctx=None, rc=None):
        if ctx is None:
            if isinstance(x, Float):
                ctx = x.ctx
            else:
                ctx = type(self)._ctx

        if x is None:
            f, witness = gmpmath.mpfr(0, ctx.p)
        elif isinstance(x, Float):
            f, witness = gmpmath.mpfr(x.f, ctx.p)
            if witness == RC.EQUAL:
                witness = x.rc
        elif isinstance(x, str):
            f, witness = gmpmath.parse(x, ctx.p, ctx.min_exp_subnormal)
        else:
            f, witness = gmpmath.mpfr(x, ctx.p)

        if rc is not None:
            if witness != RC.EQUAL:
                raise ValueError('cannot attach a witness to {}, which is not exact at {} bits'
                                 .format(repr(x), ctx.p))
            witness = RC(rc)

        self._f = f
        self._rc = witness
        self._ctx = ctx

    @classmethod
    def from_integer_exp(cls, m, exp, ctx=None):
        """The exact value m * 2**exp; m must fit in the precision of ctx."""
        if ctx is None:
            ctx = cls._ctx
        f, rc = gmpmath.scale_integer(m, exp, ctx.p)
        return cls._from_result(f, rc, ctx)

    @classmethod
    def _from_result(cls, f, rc, ctx):
        x = cls.__new__(cls)
        x._f = f
        x._rc = rc
        x._ctx = ctx
        return x

    def __repr__(self):
        return '{}({}, rc={}, ctx={})'.format(
            type(self).__name__, repr(self._f), str(self._rc), repr(self._ctx))

    def __str__(self):
        if gmp.is_integer(self._f):
            return gmpmath.integer_str(int(self._f), DISPLAY_DIGITS)
        else:
            return str(self._f)

    def __format__(self, spec):
        return format(self._f, spec)

    def __float__(self):
        return float(self._f)

    # contexts

    @classmethod
    def _select_context(cls, *args, ctx=None):
        if ctx is not None:
            return ctx
        else:
            return max((x.ctx for x in args if isinstance(x, Float)), key=lambda c: c.p)

    def _operand(self, x, ctx):
        if isinstance(x, Float):
            return x.f
        elif isinstance(x, int):
            # ints enter exactly
            f, _ = gmpmath.mpfr(x, max(ctx.p, x.bit_length()))
            return f
        else:
            raise TypeError('unsupported operand {}'.format(repr(x)))

    def _compute(self, opcode, *args, ctx=None):
        ctx = self._select_context(self, *args, ctx=ctx)
        inputs = [self._operand(x, ctx) for x in (self, *args)]
        f, rc = gmpmath.compute(opcode, *inputs, prec=ctx.p)
        return self._from_result(f, rc, ctx)

    # arithmetic

    def add(self, other, ctx=None):
        return self._compute(OP.add, other, ctx=ctx)

    def sub(self, other, ctx=None):
        return self._compute(OP.sub, other, ctx=ctx)

    def mul(self, other, ctx=None):
        return self._compute(OP.mul, other, ctx=ctx)

    def div(self, other, ctx=None):
        return self._compute(OP.div, other, ctx=ctx)

    def fmod(self, other, ctx=None):
        """Remainder of the division truncated towards zero; sign of self."""
        return self._compute(OP.fmod, other, ctx=ctx)

    def remainder(self, other, ctx=None):
        """IEEE 754 remainder, quotient rounded to nearest even."""
        return self._compute(OP.remainder, other, ctx=ctx)

    def sqrt(self, ctx=None):
        return self._compute(OP.sqrt, ctx=ctx)

    def fma(self, other1, other2, ctx=None):
        """self * other1 + other2 with a single rounding."""
        return self._compute(OP.fma, other1, other2, ctx=ctx)

    def sos(self, other, ctx=None):
        """self**2 + other**2 with a single rounding."""
        return self._compute(OP.sos, other, ctx=ctx)

    def powi(self, n, ctx=None):
        if not isinstance(n, int):
            raise TypeError('integer exponent expected, got {}'.format(repr(n)))
        ctx = self._select_context(self, ctx=ctx)
        f, rc = gmpmath.compute(OP.pown, self._f, n, prec=ctx.p)
        return self._from_result(f, rc, ctx)

    def trunc(self, ctx=None):
        return self._compute(OP.trunc, ctx=ctx)

    def sin(self, ctx=None):
        return self._compute(OP.sin, ctx=ctx)

    def cos(self, ctx=None):
        return self._compute(OP.cos, ctx=ctx)

    def tan(self, ctx=None):
        return self._compute(OP.tan, ctx=ctx)

    def asin(self, ctx=None):
        return self._compute(OP.asin, ctx=ctx)

    def acos(self, ctx=None):
        return self._compute(OP.acos, ctx=ctx)

    def atan(self, ctx=None):
        return self._compute(OP.atan, ctx=ctx)

    # sign operations are exact, and keep the witness of the operand

    def neg(self):
        f, _ = gmpmath.compute(OP.neg, self._f, prec=max(self._ctx.p, self._f.precision))
        return self._from_result(f, self._rc.flip(), self._ctx)

    def fabs(self):
        if self.is_signed():
            return self.neg()
        else:
            return self

    # constants

    @classmethod
    def _constant(cls, name, ctx=None):
        if ctx is None:
            ctx = cls._ctx
        f, rc = gmpmath.compute_constant(name, prec=ctx.p)
        return cls._from_result(f, rc, ctx)

    @classmethod
    def const_log2(cls, ctx=None):
        return cls._constant('LN2', ctx=ctx)

    @classmethod
    def const_pi(cls, ctx=None):
        return cls._constant('PI', ctx=ctx)

    @classmethod
    def const_euler(cls, ctx=None):
        return cls._constant('EULER', ctx=ctx)

    @classmethod
    def const_catalan(cls, ctx=None):
        return cls._constant('CATALAN', ctx=ctx)

    # decoding and sampling

    def decode(self, reduce=False):
        return decoder.decode(self, reduce=reduce)

    @classmethod
    def sample(cls, exp_range, rng=None, ctx=None):
        from .sampler import sample
        if ctx is None:
            ctx = cls._ctx
        return sample(exp_range, rng=rng, ctx=ctx)

    # predicates

    def is_finite(self):
        return gmp.is_finite(self._f)

    def is_zero(self):
        return gmp.is_zero(self._f)

    def is_signed(self):
        return gmp.is_signed(self._f)

    # operators

    def __neg__(self):
        return self.neg()

    def __pos__(self):
        return self

    def __abs__(self):
        return self.fabs()

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return self._compute_reflected(OP.add, other)

    def __sub__(self, other):
        return self.sub(other)

    def __rsub__(self, other):
        return self._compute_reflected(OP.sub, other)

    def __mul__(self, other):
        return self.mul(other)

    def __rmul__(self, other):
        return self._compute_reflected(OP.mul, other)

    def __truediv__(self, other):
        return self.div(other)

    def __rtruediv__(self, other):
        return self._compute_reflected(OP.div, other)

    def __mod__(self, other):
        return self.fmod(other)

    def __pow__(self, n):
        return self.powi(n)

    def _compute_reflected(self, opcode, other):
        ctx = self._ctx
        f, rc = gmpmath.compute(opcode, self._operand(other, ctx), self._f, prec=ctx.p)
        return self._from_result(f, rc, ctx)

    # comparisons are on values only; the witness does not take part

    def _cmp_value(self, other):
        if isinstance(other, Float):
            return other.f
        elif isinstance(other, int):
            return other
        else:
            return NotImplemented

    def __eq__(self, other):
        y = self._cmp_value(other)
        if y is NotImplemented:
            return y
        return self._f == y

    def __ne__(self, other):
        y = self._cmp_value(other)
        if y is NotImplemented:
            return y
        return self._f != y

    def __lt__(self, other):
        y = self._cmp_value(other)
        if y is NotImplemented:
            return y
        return self._f < y

    def __le__(self, other):
        y = self._cmp_value(other)
        if y is NotImplemented:
            return y
        return self._f <= y

    def __gt__(self, other):
        y = self._cmp_value(other)
        if y is NotImplemented:
            return y
        return self._f > y

    def __ge__(self, other):
        y = self._cmp_value(other)
        if y is NotImplemented:
            return y
        return self._f >= y

    def __hash__(self):
        return hash(self._f)
