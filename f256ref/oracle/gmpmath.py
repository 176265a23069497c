"""Arbitrary-precision oracle: every operation is carried out by MPFR through gmpy2,
rounded once to a requested precision, and returned together with its rounding witness.
"""


import gmpy2 as gmp

from .ops import OP, RC
from .utils import ParseError


def _rne_context(prec, trap_inexact=False):
    return gmp.context(
        precision=prec,
        emin=gmp.get_emin_min(),
        emax=gmp.get_emax_max(),
        subnormalize=False,
        # the exponent range is as wide as MPFR allows, so these should never fire
        trap_underflow=True,
        trap_overflow=True,
        trap_inexact=trap_inexact,
        # invalid operations give NaN, which the decoder rejects
        trap_invalid=False,
        trap_erange=False,
        trap_divzero=False,
        round=gmp.RoundToNearest,
    )


def mpfr(x, prec):
    """Round x (int, float, mpz, mpq or mpfr) once to prec bits.
    Returns (value, witness); converting an mpfr that already fits is exact.
    """
    with _rne_context(prec):
        result = gmp.mpfr(x)

    if isinstance(x, gmp.mpfr) and x.precision <= prec:
        return result, RC.EQUAL
    return result, RC.from_ternary(result.rc)


def parse(s, prec, min_exp_subnormal):
    """Parse a decimal (or MPFR-syntax) literal, rounding it to nearest at prec bits
    and onto the subnormal grid 2**min_exp_subnormal, as an IEEE 754 format would.
    """
    with gmp.context(
            precision=prec,
            # MPFR exponents count a significand in [1/2, 1)
            emin=min_exp_subnormal + 1,
            emax=gmp.get_emax_max(),
            subnormalize=True,
            trap_underflow=False,
            trap_overflow=True,
            trap_inexact=False,
            trap_invalid=False,
            trap_erange=False,
            trap_divzero=False,
            round=gmp.RoundToNearest,
    ):
        try:
            result = gmp.mpfr(s)
        except (ValueError, TypeError) as e:
            raise ParseError('cannot parse {} as a number: {}'.format(repr(s), e)) from e

    if not gmp.is_finite(result):
        raise ParseError('literal {} is not finite'.format(repr(s)))

    return result, RC.from_ternary(result.rc)


def scale_integer(m, exp, prec):
    """Compute m * 2**exp exactly, as an mpfr with prec bits of precision.
    m must fit in prec bits; gmpy2 raises InexactResultError otherwise.
    """
    with _rne_context(prec, trap_inexact=True):
        # powers of two are exact at any precision
        scale = gmp.exp2(exp)
        significand = gmp.mpfr(m)
        result = gmp.mul(significand, scale)

    return result, RC.from_ternary(result.rc)


def mpfr_to_integer_exp(x):
    """Decompose a finite mpfr into (negative, c, exp) with x == (-1)**negative * c * 2**exp.
    c has exactly as many bits as the precision of x, unless x is zero.
    """
    negative = gmp.is_signed(x)
    if gmp.is_zero(x):
        return negative, 0, 0

    m, exp = x.as_mantissa_exp()
    return negative, int(abs(m)), int(exp)


def _sos(x, y):
    return gmp.fmma(x, x, y, y)

gmp_ops = {
    OP.add: gmp.add,
    OP.sub: gmp.sub,
    OP.mul: gmp.mul,
    OP.div: gmp.div,
    OP.neg: lambda x: -x,
    OP.sqrt: gmp.sqrt,
    OP.fma: gmp.fma,
    OP.fmod: gmp.fmod,
    OP.remainder: gmp.remainder,
    OP.trunc: gmp.rint_trunc,
    OP.acos: gmp.acos,
    OP.asin: gmp.asin,
    OP.atan: gmp.atan,
    OP.cos: gmp.cos,
    OP.sin: gmp.sin,
    OP.tan: gmp.tan,
    OP.sos: _sos,
    OP.pown: lambda x, n: x ** n,
}


def compute(opcode, *args, prec=237):
    """Compute op(*args), correctly rounded to nearest-even at prec bits.
    Arguments are treated as exact: the witness of the result only reflects
    what happened during this single operation.
    Returns (value, witness).
    Invalid operations are not trapped: sqrt(-1) or asin(3) come back as NaN,
    and it is up to the decoder to refuse them.
    """
    op = gmp_ops[opcode]
    with _rne_context(prec):
        result = op(*args)

    return result, RC.from_ternary(result.rc)


constant_exprs = {
    'LN2' : gmp.const_log2,
    'PI' : gmp.const_pi,
    'EULER' : gmp.const_euler,
    'CATALAN' : gmp.const_catalan,
}

def compute_constant(name, prec=237):
    with _rne_context(prec):
        try:
            result = constant_exprs[name]()
        except KeyError as e:
            raise ValueError('unknown constant {}'.format(repr(e.args[0])))

    return result, RC.from_ternary(result.rc)


_mpz_10 = gmp.mpz(10)
def integer_str(i, p=72):
    """Decimal text of the integer i, correctly rounded (half to even)
    to p significant digits and padded with zeros.
    """
    s = str(abs(i))
    ndig = len(s)
    if ndig <= p:
        return str(i)

    offset = ndig - p
    scale = _mpz_10 ** offset
    half = gmp.f_div(scale, 2)
    q, r = gmp.f_divmod(abs(i), scale)
    if r > half or (r == half and gmp.is_odd(q)):
        q += 1

    digits = str(q * scale)
    if i < 0:
        return '-' + digits
    else:
        return digits
