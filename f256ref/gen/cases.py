"""Test case generators, one per operation of the target type.

Every generator takes the number of cases wanted, a numpy random Generator and a
format context, and returns a list of rows. A row is a list of fields; each field
is a decoded Encoding, an int, or a str.
"""

import math

import numpy as np

from ..oracle import gmpmath
from ..oracle.utils import random_int
from ..arithmetic.evalctx import BINARY256, fmt_ctx
from ..arithmetic.refloat import Float
from ..arithmetic.sampler import sample


def leading_exp(x):
    """Exponent of the leading significand bit of a nonzero finite Float."""
    _, c, exp = gmpmath.mpfr_to_integer_exp(x.f)
    return exp + c.bit_length() - 1

def clamp_range(lo, hi, ctx):
    return max(lo, ctx.min_exp_subnormal), min(hi, ctx.emax)

def split_count(n, divisor, at_least_one=False):
    """Split n cases into (regular, rare), with n // divisor rare ones."""
    if n <= 0:
        return 0, 0
    rare = n // divisor
    if at_least_one:
        rare = min(n, rare + 1)
    return n - rare, rare


# decimal literals

E10MAX = 78913
MAX_N_DIGITS = 77
FAST_EXACT_MAX_N_DIGITS = 71
SLOW_MAX_N_DIGITS = 80
EXTREME_MAX_N_DIGITS = 183470

literal_classes = {
    # fast exact
    'E': ((-102, 102), FAST_EXACT_MAX_N_DIGITS),
    # fast approximate
    'A': ((-512, 512), MAX_N_DIGITS),
    'N': ((-1024, 1024), SLOW_MAX_N_DIGITS),
    # extreme
    'X': ((1 - E10MAX, E10MAX), EXTREME_MAX_N_DIGITS),
    'S': ((1 - E10MAX - MAX_N_DIGITS, 1 - E10MAX), SLOW_MAX_N_DIGITS),
}

_ord_0 = ord('0')

def random_digits(rng, n):
    return (rng.integers(0, 10, size=n) + _ord_0).astype(np.uint8).tobytes().decode('ascii')

def random_literal(rng, exp_range, max_n_digits):
    sign = ('+', '-', '')[random_int(rng, 0, 2)]
    n_digits = random_int(rng, 1, max_n_digits)
    n_fract_digits = random_int(rng, 0, n_digits - 1)
    n_int_digits = n_digits - n_fract_digits

    digits = random_digits(rng, n_digits)
    int_digits = digits[:n_int_digits]
    fract_digits = digits[n_int_digits:]
    if digits.strip('0') == '':
        fract_digits += '7'
        n_fract_digits += 1

    exp = random_int(rng, *exp_range) + n_fract_digits
    if exp == 0:
        return '{}{}.{}'.format(sign, int_digits, fract_digits)
    else:
        if n_fract_digits == 0:
            fract_digits = '0'
        return '{}{}.{}e{}'.format(sign, int_digits, fract_digits, exp)

def gen_literal(n, rng, ctx=BINARY256, type_of_num='E'):
    try:
        exp_range, max_n_digits = literal_classes[type_of_num]
    except KeyError:
        raise ValueError('unknown type of number {}'.format(repr(type_of_num)))

    rows = []
    for _ in range(n):
        lit = random_literal(rng, exp_range, max_n_digits)
        x = Float(lit, ctx=ctx)
        rows.append([lit, x.decode(reduce=True)])
    return rows


# binary operations

def gen_add(n, rng, ctx=BINARY256):
    subnormal_range = (ctx.min_exp_subnormal, ctx.emin - 1)
    mixed_range = (ctx.min_exp_subnormal, ctx.emin + 2)
    normal_range = (ctx.emin, ctx.emax)

    n_normal, n_subnormal = split_count(n, 20)
    rows = []
    for _ in range(n_normal):
        x = sample(normal_range, rng, ctx)
        e = x.decode().exp
        y = sample(clamp_range(e - ctx.p, e + ctx.p, ctx), rng, ctx)
        z = x + y
        rows.append([x.decode(reduce=True), y.decode(reduce=True), z.decode(reduce=True)])

    for _ in range(n_subnormal):
        x = sample(mixed_range, rng, ctx)
        y = sample(subnormal_range, rng, ctx)
        z = x + y
        rows.append([x.decode(reduce=True), y.decode(reduce=True), z.decode(reduce=True)])

    return rows

def gen_fma(n, rng, ctx=BINARY256):
    """Only cases where the fused result differs from multiply-then-add are kept."""
    exp_range = (ctx.min_exp_subnormal, ctx.emax)

    rows = []
    for _ in range(n):
        x = sample(exp_range, rng, ctx)
        e = x.decode().exp
        lo = max(ctx.emin - ctx.pm1, ctx.emin - ctx.pm1 - e)
        hi = min(ctx.emax - ctx.pm1, ctx.emax - ctx.pm1 - e)
        y = sample(clamp_range(lo, hi, ctx), rng, ctx)
        a = sample(exp_range, rng, ctx)
        z = x.fma(y, a)
        t = x * y + a
        if z != t:
            rows.append([x.decode(reduce=True), y.decode(reduce=True),
                         a.decode(reduce=True), z.decode(reduce=True)])
    return rows

def gen_sos(n, rng, ctx=BINARY256):
    # truncating division, so the range is symmetric around zero
    exp_range = (int(ctx.emin / 4) - 1, int(ctx.emax / 4) + 1)

    rows = []
    for _ in range(n):
        x = sample(exp_range, rng, ctx)
        y = sample(exp_range, rng, ctx)
        z = x.sos(y)
        rows.append([x.decode(reduce=True), y.decode(reduce=True), z.decode(reduce=True)])
    return rows

def gen_rem(n, rng, ctx=BINARY256):
    subnormal_range = (ctx.min_exp_subnormal + 1, ctx.emin - 1)
    normal_range = (ctx.emin, ctx.emax)

    n_normal, n_subnormal = split_count(n, 100, at_least_one=True)
    pairs = []
    for _ in range(n_normal):
        x = sample(normal_range, rng, ctx)
        e = x.decode().exp
        # keep the quotient within the exponent range
        lo = max(ctx.emin - ctx.pm1, e - ctx.pm1 - ctx.emax + 2)
        hi = min(ctx.emax - ctx.pm1, e - ctx.pm1 - ctx.emin - 2)
        y = sample(clamp_range(lo, hi, ctx), rng, ctx)
        pairs.append((x, y))

    for _ in range(n_subnormal):
        pairs.append((sample(normal_range, rng, ctx), sample(subnormal_range, rng, ctx)))

    for _ in range(n_subnormal):
        pairs.append((sample(subnormal_range, rng, ctx), sample(subnormal_range, rng, ctx)))

    rows = []
    for x, y in pairs:
        z = x % y
        rows.append([x.decode(reduce=True), y.decode(reduce=True), z.decode(reduce=True)])
    return rows


# unary operations

def gen_sqrt(n, rng, ctx=BINARY256):
    subnormal_range = (ctx.min_exp_subnormal, ctx.emin - 1)
    normal_range = (ctx.emin, ctx.emax - ctx.pm1)

    n_normal, n_subnormal = split_count(n, 100, at_least_one=True)
    xs = [abs(sample(normal_range, rng, ctx)) for _ in range(n_normal)]
    xs.extend(abs(sample(subnormal_range, rng, ctx)) for _ in range(n_subnormal))

    rows = []
    for x in xs:
        z = x.sqrt()
        rows.append([x.decode(reduce=True), z.decode(reduce=True)])
    return rows

def gen_powi(n, rng, ctx=BINARY256):
    bound = max(0, round(math.sqrt(ctx.emax)) - ctx.p)
    exp_range = (-bound, bound)

    rows = []
    for _ in range(n):
        x = sample(exp_range, rng, ctx)
        e = x.decode().exp
        if e == 0:
            upper = ctx.emax
        else:
            upper = int(math.sqrt(ctx.emax // abs(e)))
        k = random_int(rng, 2, max(2, upper))
        z = x ** k
        rows.append([x.decode(reduce=True), k, z.decode(reduce=True)])
    return rows


circular_funcs = {
    'sin': Float.sin,
    'cos': Float.cos,
    'tan': Float.tan,
    'asin': Float.asin,
    'acos': Float.acos,
    'atan': Float.atan,
}

def circular_range(name, ctx=BINARY256):
    """Bounds [lower, upper) of the circular function input classes:
    1 = small up to one, C = one full circle, S = beyond a circle, L = large.
    """
    # 2*pi from one extra bit of pi
    pi = Float.const_pi(ctx=fmt_ctx(ctx.es, ctx.nbits + 1))
    tau = Float(pi * 2, ctx=ctx)
    one = Float(1, ctx=ctx)
    lower_limit = Float.from_integer_exp(1, -120, ctx=ctx)
    fast_limit = Float.from_integer_exp(1, 240, ctx=ctx)
    upper_limit = Float.from_integer_exp(1, ctx.emax + 1, ctx=ctx)

    ranges = {
        '1': (lower_limit, one),
        'C': (lower_limit, tau),
        'S': (tau, fast_limit),
        'L': (fast_limit, upper_limit),
    }
    try:
        return ranges[name]
    except KeyError:
        raise ValueError('unknown range {}'.format(repr(name)))

def gen_circular(n, rng, ctx=BINARY256, func='sin', range_name='C'):
    try:
        fn = circular_funcs[func]
    except KeyError:
        raise ValueError('unknown circular function {}'.format(repr(func)))

    lower, upper = circular_range(range_name, ctx)
    exp_range = clamp_range(leading_exp(lower), leading_exp(upper), ctx)

    rows = []
    for _ in range(n):
        while True:
            a = sample(exp_range, rng, ctx)
            if lower <= a < upper:
                break
        z = fn(a)
        rows.append([a.decode(), z.decode()])
    return rows


# formatting

def format_classes(ctx=BINARY256):
    """Leading-bit exponent ranges for the formatting classes:
    N = small non-integers, I = small integers, F = fractions, X = large integers, S = subnormals.
    """
    fast_upper = min(2 * ctx.nbits - 1, ctx.emax)
    return {
        'N': (0, ctx.pm1 - 1),
        'I': (ctx.pm1, fast_upper),
        'F': (ctx.emin, -1),
        'X': (min(fast_upper + 1, ctx.emax), ctx.emax),
        'S': (ctx.min_exp_subnormal, ctx.emin - 1),
    }

MAX_FORMAT_PRECISION = 75

def gen_format(n, rng, ctx=BINARY256, type_of_num='N'):
    try:
        exp_range = format_classes(ctx)[type_of_num]
    except KeyError:
        raise ValueError('unknown type of number {}'.format(repr(type_of_num)))

    rows = []
    for _ in range(n):
        x = sample(exp_range, rng, ctx)
        prec = random_int(rng, 0, MAX_FORMAT_PRECISION)
        lit = format(x, '.{:d}e'.format(prec))
        rows.append([x.decode(), prec, lit])
    return rows


generators = {
    'literal': gen_literal,
    'add': gen_add,
    'fma': gen_fma,
    'sos': gen_sos,
    'rem': gen_rem,
    'sqrt': gen_sqrt,
    'powi': gen_powi,
    'circular': gen_circular,
    'format': gen_format,
}
